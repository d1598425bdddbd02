"""Data models for Midea Bridge integration."""

from __future__ import annotations

from dataclasses import dataclass, replace

from .const import (
    DEFAULT_MAX_TEMPERATURE,
    DEFAULT_MIN_TEMPERATURE,
    DEFAULT_TARGET_HUMIDITY,
    DEFAULT_TARGET_TEMPERATURE,
    DEFAULT_TEMPERATURE_STEPS,
    FAN_SPEED_AUTO,
    FAN_SPEED_LOW,
    INTEGRATION_VERSION,
    Active,
    MideaDeviceType,
    MideaOperationalMode,
    MideaSwingMode,
)


class MideaBridgeError(Exception):
    """Base exception for Midea Bridge errors."""


@dataclass(frozen=True)
class DeviceOverrides:
    """Per-device configuration overrides, resolved once at construction."""

    supported_swing_mode: MideaSwingMode = MideaSwingMode.NONE
    temperature_steps: float = DEFAULT_TEMPERATURE_STEPS
    fan_only_mode: bool = False
    outdoor_temperature: bool = False


@dataclass(slots=True)
class MideaDeviceState:
    """Last known and desired attributes of one Midea device.

    Temperatures are always Celsius. ``use_fahrenheit`` only tells the
    control surface how to display them.
    """

    device_id: str
    device_type: MideaDeviceType | int
    name: str
    user_id: str = ""
    model: str = ""
    firmware_version: str = INTEGRATION_VERSION

    power_state: int = Active.INACTIVE
    operational_mode: int = MideaOperationalMode.OFF
    target_temperature: float = DEFAULT_TARGET_TEMPERATURE
    indoor_temperature: float = 0.0
    outdoor_temperature: float = 0.0
    use_fahrenheit: bool = True
    temperature_steps: float = DEFAULT_TEMPERATURE_STEPS
    min_temperature: float = DEFAULT_MIN_TEMPERATURE
    max_temperature: float = DEFAULT_MAX_TEMPERATURE

    fan_speed: int = FAN_SPEED_AUTO
    swing_mode: int = MideaSwingMode.NONE
    supported_swing_mode: MideaSwingMode = MideaSwingMode.NONE
    eco_mode: bool = False
    turbo_mode: bool = False

    current_humidity: int = 0
    target_humidity: int = DEFAULT_TARGET_HUMIDITY
    water_level: int = 0

    @classmethod
    def create(
        cls,
        device_id: str,
        device_type: MideaDeviceType | int,
        name: str,
        user_id: str = "",
    ) -> MideaDeviceState:
        """Create the initial state of a freshly registered device."""
        fan_speed = (
            FAN_SPEED_LOW
            if device_type == MideaDeviceType.DEHUMIDIFIER
            else FAN_SPEED_AUTO
        )
        return cls(
            device_id=device_id,
            device_type=device_type,
            name=name,
            user_id=user_id,
            fan_speed=fan_speed,
        )

    def snapshot(self) -> MideaDeviceState:
        """Return an independent copy to hand over to the transport."""
        return replace(self)
