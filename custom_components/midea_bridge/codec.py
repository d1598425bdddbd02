"""Value codec between control-surface characteristics and Midea native values.

Every function here is pure and total: out-of-range inputs fall into the
nearest bucket instead of raising. Enumerated inputs without a native
counterpart decode to ``None``, meaning "leave the state alone".
"""

from __future__ import annotations

import math

from .const import (
    DEHUMIDIFIER_MODE,
    FAN_SPEED_AUTO,
    FAN_SPEED_HIGH,
    HUMIDITY_THRESHOLD_MAX,
    HUMIDITY_THRESHOLD_MIN,
    ROTATION_SPEED_BUCKETS,
    ROTATION_SPEED_MAP,
    TARGET_HEATER_COOLER_STATE_MAP,
    TARGET_HEATER_COOLER_STATE_REVERSE_MAP,
    TEMPERATURE_RESOLUTION,
    WIND_SPEED_BUCKETS,
    WIND_SPEED_MAP,
    Active,
    CurrentHeaterCoolerState,
    CurrentHumidifierDehumidifierState,
    MideaOperationalMode,
    MideaSwingMode,
    SwingMode,
    TargetHeaterCoolerState,
    TargetHumidifierDehumidifierState,
    TemperatureDisplayUnits,
)


def is_active(power_state: object) -> bool:
    """Return True only for the active sentinel."""
    return power_state == Active.ACTIVE


def power_state_from_active(value: object) -> Active:
    return Active.ACTIVE if is_active(value) else Active.INACTIVE


def rotation_speed(fan_speed: int) -> int:
    """Convert a native air conditioner fan speed to a RotationSpeed percentage.

    Args:
        fan_speed: Native code, 40 low, 60 medium, 80 high, 102 auto.

    Returns:
        25, 50 or 75 for the fixed speeds, 100 for auto and anything else.

    """
    return ROTATION_SPEED_MAP.get(fan_speed, 100)


def fan_speed_from_rotation_speed(value: float) -> int:
    """Convert a RotationSpeed percentage to a native air conditioner fan speed.

    Each bucket includes its upper bound, so 25 maps to low and 76 to auto.
    """
    for upper_bound, fan_speed in ROTATION_SPEED_BUCKETS:
        if value <= upper_bound:
            return fan_speed
    return FAN_SPEED_AUTO


def wind_speed(fan_speed: int) -> int:
    """Convert a native dehumidifier fan speed to a percentage.

    Dehumidifiers have no auto tier; unknown codes read as 0.
    """
    return WIND_SPEED_MAP.get(fan_speed, 0)


def fan_speed_from_wind_speed(value: float) -> int:
    for upper_bound, fan_speed in WIND_SPEED_BUCKETS:
        if value <= upper_bound:
            return fan_speed
    return FAN_SPEED_HIGH


def swing_mode(swing_code: int) -> SwingMode:
    if swing_code != MideaSwingMode.NONE:
        return SwingMode.SWING_ENABLED
    return SwingMode.SWING_DISABLED


def swing_code_from_swing_mode(value: object, supported: MideaSwingMode) -> int:
    """Convert a SwingMode value to a native swing code.

    Enabling swing always selects the single axis the device supports, so a
    device without swing support stays at 0.

    Args:
        value: SwingMode characteristic value.
        supported: The swing axis the device supports.

    Returns:
        0 when disabled, otherwise the supported swing code.

    """
    if value == SwingMode.SWING_DISABLED:
        return MideaSwingMode.NONE
    return supported


def target_heater_cooler_state(mode: int) -> TargetHeaterCoolerState:
    return TARGET_HEATER_COOLER_STATE_REVERSE_MAP.get(
        mode, TargetHeaterCoolerState.AUTO
    )


def operational_mode_from_target_heater_cooler_state(
    value: object,
) -> MideaOperationalMode | None:
    """Return the native mode for AUTO, HEAT or COOL, ``None`` otherwise."""
    for state, mode in TARGET_HEATER_COOLER_STATE_MAP.items():
        if value == state:
            return mode
    return None


def current_heater_cooler_state(
    power_state: object,
    mode: int,
    indoor_temperature: float,
    target_temperature: float,
) -> CurrentHeaterCoolerState:
    """Derive the CurrentHeaterCoolerState of an air conditioner.

    Without an explicit cooling or heating mode the state is guessed from
    the indoor temperature: above the target reads as cooling, otherwise as
    heating.
    """
    if not is_active(power_state):
        return CurrentHeaterCoolerState.INACTIVE
    if mode == MideaOperationalMode.COOLING:
        return CurrentHeaterCoolerState.COOLING
    if mode == MideaOperationalMode.HEATING:
        return CurrentHeaterCoolerState.HEATING
    if indoor_temperature > target_temperature:
        return CurrentHeaterCoolerState.COOLING
    return CurrentHeaterCoolerState.HEATING


def fan_active(power_state: object, mode: int) -> Active:
    if mode == MideaOperationalMode.FAN_ONLY and is_active(power_state):
        return Active.ACTIVE
    return Active.INACTIVE


def temperature_display_units(use_fahrenheit: bool) -> TemperatureDisplayUnits:
    if use_fahrenheit:
        return TemperatureDisplayUnits.FAHRENHEIT
    return TemperatureDisplayUnits.CELSIUS


def use_fahrenheit_from_display_units(value: object) -> bool:
    return value == TemperatureDisplayUnits.FAHRENHEIT


def current_humidifier_dehumidifier_state(
    power_state: object, mode: int
) -> CurrentHumidifierDehumidifierState:
    """Derive the CurrentHumidifierDehumidifierState of a dehumidifier.

    Only the dehumidify mode is mapped; any other mode reads as idle.
    """
    if not is_active(power_state):
        return CurrentHumidifierDehumidifierState.INACTIVE
    if mode == DEHUMIDIFIER_MODE:
        return CurrentHumidifierDehumidifierState.DEHUMIDIFYING
    return CurrentHumidifierDehumidifierState.IDLE


def target_humidifier_dehumidifier_state(
    mode: int,  # noqa: ARG001
) -> TargetHumidifierDehumidifierState:
    # DEHUMIDIFIER is the only valid value the characteristic declares
    return TargetHumidifierDehumidifierState.DEHUMIDIFIER


def operational_mode_from_target_humidifier_dehumidifier_state(
    value: object,
) -> int | None:
    if value == TargetHumidifierDehumidifierState.DEHUMIDIFIER:
        return DEHUMIDIFIER_MODE
    return None


def _finite(value: object) -> float | None:
    """Return the value as a finite float, or None if it has no such reading."""
    try:
        number = float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None


def target_temperature_from_threshold(
    value: float, minimum: float, maximum: float
) -> float:
    """Clamp a threshold temperature into bounds and snap it to 0.5 degrees.

    Halves round up, so 22.25 becomes 22.5. Requests that are not a finite
    number fall back to the minimum.

    Args:
        value: Requested temperature in Celsius.
        minimum: Lowest temperature the device accepts.
        maximum: Highest temperature the device accepts.

    Returns:
        The temperature the device will be asked for.

    """
    requested = _finite(value)
    if requested is None:
        return float(minimum)
    clamped = min(max(requested, minimum), maximum)
    return math.floor(clamped / TEMPERATURE_RESOLUTION + 0.5) * TEMPERATURE_RESOLUTION


def target_humidity_from_threshold(value: float) -> int:
    requested = _finite(value)
    if requested is None:
        return HUMIDITY_THRESHOLD_MIN
    clamped = min(max(requested, HUMIDITY_THRESHOLD_MIN), HUMIDITY_THRESHOLD_MAX)
    return math.floor(clamped + 0.5)


def celsius_to_fahrenheit(value: float) -> float:
    return round(value * 9 / 5 + 32, 1)
