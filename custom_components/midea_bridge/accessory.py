"""Synchronization engine between a Midea device and its control surface.

``MideaAccessory`` owns the state of one device. Get handlers encode that
state for the control surface, set handlers decode external values into it
and transmit a full snapshot to the device whenever something changed, and
the push tick republishes every characteristic on a fixed interval.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from homeassistant.core import callback

from . import codec
from .const import (
    AIR_CONDITIONER_FAN_SPEEDS,
    CHAR_ACTIVE,
    CHAR_COOLING_THRESHOLD_TEMPERATURE,
    CHAR_CURRENT_HEATER_COOLER_STATE,
    CHAR_CURRENT_HUMIDIFIER_DEHUMIDIFIER_STATE,
    CHAR_CURRENT_RELATIVE_HUMIDITY,
    CHAR_CURRENT_TEMPERATURE,
    CHAR_DEHUMIDIFIER_THRESHOLD,
    CHAR_FIRMWARE_REVISION,
    CHAR_HEATING_THRESHOLD_TEMPERATURE,
    CHAR_MANUFACTURER,
    CHAR_MODEL,
    CHAR_NAME,
    CHAR_ROTATION_SPEED,
    CHAR_SERIAL_NUMBER,
    CHAR_SWING_MODE,
    CHAR_TARGET_HEATER_COOLER_STATE,
    CHAR_TARGET_HUMIDIFIER_DEHUMIDIFIER_STATE,
    CHAR_TEMPERATURE_DISPLAY_UNITS,
    CHAR_WATER_LEVEL,
    CURRENT_TEMPERATURE_MAX,
    CURRENT_TEMPERATURE_MIN,
    CURRENT_TEMPERATURE_STEP,
    DEHUMIDIFIER_FAN_SPEEDS,
    DEVICE_STATUS_FIELDS,
    FAN_SERVICE_NAME,
    HUMIDITY_THRESHOLD_MAX,
    HUMIDITY_THRESHOLD_MIN,
    HUMIDITY_THRESHOLD_STEP,
    MANUFACTURER,
    MODEL_NAMES,
    MODEL_UNDEFINED,
    OUTDOOR_TEMPERATURE_SERVICE_NAME,
    SERVICE_ACCESSORY_INFORMATION,
    SERVICE_FAN,
    SERVICE_HEATER_COOLER,
    SERVICE_HUMIDIFIER_DEHUMIDIFIER,
    SERVICE_TEMPERATURE_SENSOR,
    Active,
    MideaDeviceType,
    MideaOperationalMode,
    MideaSwingMode,
    TargetHeaterCoolerState,
    TargetHumidifierDehumidifierState,
    TemperatureDisplayUnits,
)
from .services import AccessoryService, CharacteristicProps

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping
    from datetime import datetime

    from .models import DeviceOverrides, MideaDeviceState

_LOGGER = logging.getLogger(__name__)


class MideaAccessory:
    """Bridge between one Midea device and its control-surface services.

    Handlers run on the event loop and never interleave with each other or
    with the push tick. Transport failures never reach the caller: the state
    keeps the optimistically applied value until the device reports back.
    """

    def __init__(
        self,
        state: MideaDeviceState,
        overrides: DeviceOverrides,
        send_update: Callable[[MideaDeviceState], None],
    ) -> None:
        """Initialize the accessory and declare its services.

        Args:
            state: Freshly created state of the device, owned from now on.
            overrides: Resolved per-device overrides.
            send_update: Transport callable receiving a full state snapshot.

        """
        self.state = state
        self._send_update = send_update
        self.services: dict[str, AccessoryService] = {}
        self._fan_speeds = (
            DEHUMIDIFIER_FAN_SPEEDS
            if state.device_type == MideaDeviceType.DEHUMIDIFIER
            else AIR_CONDITIONER_FAN_SPEEDS
        )

        state.supported_swing_mode = overrides.supported_swing_mode
        state.temperature_steps = overrides.temperature_steps
        state.model = MODEL_NAMES.get(state.device_type, MODEL_UNDEFINED)

        _LOGGER.info(
            "Created device: %s, with ID: %s, and type: %s",
            state.name,
            state.device_id,
            state.device_type,
        )

        self._configure_information_service()

        if state.device_type == MideaDeviceType.AIR_CONDITIONER:
            self._configure_air_conditioner(overrides)
        elif state.device_type == MideaDeviceType.DEHUMIDIFIER:
            self._configure_dehumidifier()
        else:
            _LOGGER.error(
                "Unsupported device type %s for %s", state.device_type, state.name
            )

    @property
    def device_id(self) -> str:
        return self.state.device_id

    @property
    def name(self) -> str:
        return self.state.name

    @property
    def supported(self) -> bool:
        """Return True if the device exposes more than accessory information."""
        return len(self.services) > 1

    def _add_service(self, service_type: str, display_name: str) -> AccessoryService:
        service = AccessoryService(service_type, display_name)
        service.add_characteristic(CHAR_NAME, value=display_name)
        self.services[service_type] = service
        return service

    def _configure_information_service(self) -> None:
        service = self._add_service(SERVICE_ACCESSORY_INFORMATION, self.name)
        service.add_characteristic(CHAR_MANUFACTURER, value=MANUFACTURER)
        service.add_characteristic(
            CHAR_FIRMWARE_REVISION, value=self.state.firmware_version
        )
        service.add_characteristic(CHAR_MODEL, value=self.state.model)
        service.add_characteristic(CHAR_SERIAL_NUMBER, value=self.device_id)

    def _configure_air_conditioner(self, overrides: DeviceOverrides) -> None:
        threshold_props = CharacteristicProps(
            min_value=self.state.min_temperature,
            max_value=self.state.max_temperature,
            min_step=self.state.temperature_steps,
        )

        service = self._add_service(SERVICE_HEATER_COOLER, self.name)
        service.add_characteristic(
            CHAR_ACTIVE,
            get_handler=self.handle_active_get,
            set_handler=self.handle_active_set,
        )
        service.add_characteristic(
            CHAR_CURRENT_HEATER_COOLER_STATE,
            get_handler=self.handle_current_heater_cooler_state_get,
        )
        service.add_characteristic(
            CHAR_TARGET_HEATER_COOLER_STATE,
            get_handler=self.handle_target_heater_cooler_state_get,
            set_handler=self.handle_target_heater_cooler_state_set,
            props=CharacteristicProps(
                valid_values=(
                    TargetHeaterCoolerState.AUTO,
                    TargetHeaterCoolerState.HEAT,
                    TargetHeaterCoolerState.COOL,
                )
            ),
        )
        service.add_characteristic(
            CHAR_CURRENT_TEMPERATURE,
            get_handler=self.handle_current_temperature_get,
            props=CharacteristicProps(
                min_value=CURRENT_TEMPERATURE_MIN,
                max_value=CURRENT_TEMPERATURE_MAX,
                min_step=CURRENT_TEMPERATURE_STEP,
            ),
        )
        for name in (
            CHAR_COOLING_THRESHOLD_TEMPERATURE,
            CHAR_HEATING_THRESHOLD_TEMPERATURE,
        ):
            service.add_characteristic(
                name,
                get_handler=self.handle_threshold_temperature_get,
                set_handler=self.handle_threshold_temperature_set,
                props=threshold_props,
            )
        service.add_characteristic(
            CHAR_ROTATION_SPEED,
            get_handler=self.handle_rotation_speed_get,
            set_handler=self.handle_rotation_speed_set,
        )
        service.add_characteristic(
            CHAR_SWING_MODE,
            get_handler=self.handle_swing_mode_get,
            set_handler=self.handle_swing_mode_set,
        )
        service.add_characteristic(
            CHAR_TEMPERATURE_DISPLAY_UNITS,
            get_handler=self.handle_temperature_display_units_get,
            set_handler=self.handle_temperature_display_units_set,
            props=CharacteristicProps(
                valid_values=(
                    TemperatureDisplayUnits.FAHRENHEIT,
                    TemperatureDisplayUnits.CELSIUS,
                )
            ),
        )

        if overrides.fan_only_mode:
            _LOGGER.debug("%s: Adding fan mode service", self.name)
            fan_service = self._add_service(SERVICE_FAN, FAN_SERVICE_NAME)
            fan_service.add_characteristic(
                CHAR_ACTIVE,
                get_handler=self.handle_fan_active_get,
                set_handler=self.handle_fan_active_set,
            )
            fan_service.add_characteristic(
                CHAR_ROTATION_SPEED,
                get_handler=self.handle_rotation_speed_get,
                set_handler=self.handle_rotation_speed_set,
            )
            fan_service.add_characteristic(
                CHAR_SWING_MODE,
                get_handler=self.handle_swing_mode_get,
                set_handler=self.handle_swing_mode_set,
            )

        if overrides.outdoor_temperature:
            _LOGGER.debug("%s: Adding outdoor temperature sensor", self.name)
            sensor_service = self._add_service(
                SERVICE_TEMPERATURE_SENSOR, OUTDOOR_TEMPERATURE_SERVICE_NAME
            )
            sensor_service.add_characteristic(
                CHAR_CURRENT_TEMPERATURE,
                get_handler=self.handle_outdoor_temperature_get,
                props=CharacteristicProps(
                    min_value=CURRENT_TEMPERATURE_MIN,
                    max_value=CURRENT_TEMPERATURE_MAX,
                    min_step=CURRENT_TEMPERATURE_STEP,
                ),
            )

    def _configure_dehumidifier(self) -> None:
        service = self._add_service(SERVICE_HUMIDIFIER_DEHUMIDIFIER, self.name)
        service.add_characteristic(
            CHAR_ACTIVE,
            get_handler=self.handle_active_get,
            set_handler=self.handle_active_set,
        )
        service.add_characteristic(
            CHAR_CURRENT_HUMIDIFIER_DEHUMIDIFIER_STATE,
            get_handler=self.handle_current_humidifier_dehumidifier_state_get,
        )
        service.add_characteristic(
            CHAR_TARGET_HUMIDIFIER_DEHUMIDIFIER_STATE,
            get_handler=self.handle_target_humidifier_dehumidifier_state_get,
            set_handler=self.handle_target_humidifier_dehumidifier_state_set,
            props=CharacteristicProps(
                valid_values=(TargetHumidifierDehumidifierState.DEHUMIDIFIER,)
            ),
        )
        service.add_characteristic(
            CHAR_CURRENT_RELATIVE_HUMIDITY,
            get_handler=self.handle_current_relative_humidity_get,
            props=CharacteristicProps(min_value=0, max_value=100, min_step=1),
        )
        service.add_characteristic(
            CHAR_DEHUMIDIFIER_THRESHOLD,
            get_handler=self.handle_dehumidifier_threshold_get,
            set_handler=self.handle_dehumidifier_threshold_set,
            props=CharacteristicProps(
                min_value=HUMIDITY_THRESHOLD_MIN,
                max_value=HUMIDITY_THRESHOLD_MAX,
                min_step=HUMIDITY_THRESHOLD_STEP,
            ),
        )
        service.add_characteristic(
            CHAR_ROTATION_SPEED,
            get_handler=self.handle_wind_speed_get,
            set_handler=self.handle_wind_speed_set,
        )
        service.add_characteristic(
            CHAR_SWING_MODE,
            get_handler=self.handle_swing_mode_get,
            set_handler=self.handle_swing_mode_set,
        )
        service.add_characteristic(
            CHAR_WATER_LEVEL, get_handler=self.handle_water_level_get
        )

    def _apply_changes(self, **changes: Any) -> bool:  # noqa: ANN401
        """Apply decoded values and transmit once if anything changed.

        Returns:
            True if the state changed and a snapshot was sent to the device.

        """
        changed = {
            key: value
            for key, value in changes.items()
            if getattr(self.state, key) != value
        }
        if not changed:
            return False

        for key, value in changed.items():
            setattr(self.state, key, value)
        _LOGGER.debug("%s: State changed %s", self.name, changed)

        self._transmit()
        return True

    def _transmit(self) -> None:
        try:
            self._send_update(self.state.snapshot())
        except Exception:
            _LOGGER.exception("Error sending update to %s", self.name)

    # Shared characteristics

    def handle_active_get(self) -> Active:
        return codec.power_state_from_active(self.state.power_state)

    def handle_active_set(self, value: Any) -> None:  # noqa: ANN401
        self._apply_changes(power_state=codec.power_state_from_active(value))

    def handle_swing_mode_get(self) -> int:
        return codec.swing_mode(self.state.swing_mode)

    def handle_swing_mode_set(self, value: Any) -> None:  # noqa: ANN401
        self._apply_changes(
            swing_mode=codec.swing_code_from_swing_mode(
                value, self.state.supported_swing_mode
            )
        )

    # Air conditioner

    def handle_current_heater_cooler_state_get(self) -> int:
        return codec.current_heater_cooler_state(
            self.state.power_state,
            self.state.operational_mode,
            self.state.indoor_temperature,
            self.state.target_temperature,
        )

    def handle_target_heater_cooler_state_get(self) -> int:
        return codec.target_heater_cooler_state(self.state.operational_mode)

    def handle_target_heater_cooler_state_set(self, value: Any) -> None:  # noqa: ANN401
        mode = codec.operational_mode_from_target_heater_cooler_state(value)
        if mode is None:
            _LOGGER.debug(
                "%s: Ignoring unsupported target heater cooler state %s",
                self.name,
                value,
            )
            return
        self._apply_changes(operational_mode=mode)

    def handle_current_temperature_get(self) -> float:
        return self.state.indoor_temperature

    def handle_threshold_temperature_get(self) -> float:
        return self.state.target_temperature

    def handle_threshold_temperature_set(self, value: Any) -> None:  # noqa: ANN401
        temperature = codec.target_temperature_from_threshold(
            value, self.state.min_temperature, self.state.max_temperature
        )
        if self.state.use_fahrenheit:
            _LOGGER.debug(
                "%s: Threshold temperature %s˚C (displayed as %s˚F)",
                self.name,
                temperature,
                codec.celsius_to_fahrenheit(temperature),
            )
        else:
            _LOGGER.debug(
                "%s: Threshold temperature %s˚C", self.name, temperature
            )
        self._apply_changes(target_temperature=temperature)

    def handle_rotation_speed_get(self) -> int:
        return codec.rotation_speed(self.state.fan_speed)

    def handle_rotation_speed_set(self, value: Any) -> None:  # noqa: ANN401
        self._apply_changes(fan_speed=codec.fan_speed_from_rotation_speed(value))

    def handle_temperature_display_units_get(self) -> int:
        return codec.temperature_display_units(self.state.use_fahrenheit)

    def handle_temperature_display_units_set(self, value: Any) -> None:  # noqa: ANN401
        self._apply_changes(
            use_fahrenheit=codec.use_fahrenheit_from_display_units(value)
        )

    def handle_fan_active_get(self) -> Active:
        return codec.fan_active(self.state.power_state, self.state.operational_mode)

    def handle_fan_active_set(self, value: Any) -> None:  # noqa: ANN401
        """Enter or leave fan-only mode.

        Fan mode is exclusive with off: turning it on powers the device on,
        turning it off powers the device off.
        """
        if codec.is_active(value):
            self._apply_changes(
                power_state=Active.ACTIVE,
                operational_mode=MideaOperationalMode.FAN_ONLY,
            )
        elif codec.is_active(self.state.power_state):
            self._apply_changes(power_state=Active.INACTIVE)

    def handle_outdoor_temperature_get(self) -> float:
        return self.state.outdoor_temperature

    # Dehumidifier

    def handle_current_humidifier_dehumidifier_state_get(self) -> int:
        return codec.current_humidifier_dehumidifier_state(
            self.state.power_state, self.state.operational_mode
        )

    def handle_target_humidifier_dehumidifier_state_get(self) -> int:
        return codec.target_humidifier_dehumidifier_state(
            self.state.operational_mode
        )

    def handle_target_humidifier_dehumidifier_state_set(self, value: Any) -> None:  # noqa: ANN401
        mode = codec.operational_mode_from_target_humidifier_dehumidifier_state(value)
        if mode is None:
            _LOGGER.debug(
                "%s: Ignoring unsupported target dehumidifier state %s",
                self.name,
                value,
            )
            return
        self._apply_changes(operational_mode=mode)

    def handle_current_relative_humidity_get(self) -> int:
        return self.state.current_humidity

    def handle_dehumidifier_threshold_get(self) -> int:
        return self.state.target_humidity

    def handle_dehumidifier_threshold_set(self, value: Any) -> None:  # noqa: ANN401
        self._apply_changes(
            target_humidity=codec.target_humidity_from_threshold(value)
        )

    def handle_wind_speed_get(self) -> int:
        return codec.wind_speed(self.state.fan_speed)

    def handle_wind_speed_set(self, value: Any) -> None:  # noqa: ANN401
        self._apply_changes(fan_speed=codec.fan_speed_from_wind_speed(value))

    def handle_water_level_get(self) -> int:
        return self.state.water_level

    # Push loop and inbound reports

    def push(self) -> dict[str, dict[str, Any]]:
        """Advertise every readable characteristic from the current state.

        Values are re-sent whether or not they changed.

        Returns:
            The pushed values, keyed by service type and characteristic name.

        """
        pushed: dict[str, dict[str, Any]] = {}
        for service_type, service in self.services.items():
            for name, characteristic in service.characteristics.items():
                if not characteristic.readable:
                    continue
                value = service.handle_get(name)
                service.update_characteristic(name, value)
                pushed.setdefault(service_type, {})[name] = value
        return pushed

    @callback
    def async_push_tick(self, now: datetime | None = None) -> None:
        """Timer callback republishing the state to the control surface."""
        _LOGGER.debug("%s: Push tick at %s", self.name, now)
        self.push()

    def _accepts_status_value(self, key: str, value: Any) -> bool:  # noqa: ANN401
        if key == "swing_mode":
            return value in (MideaSwingMode.NONE, self.state.supported_swing_mode)
        if key == "fan_speed":
            return value in self._fan_speeds
        return True

    @callback
    def async_apply_device_status(self, status: Mapping[str, Any]) -> None:
        """Apply a status report received from the device.

        Reported values are native already and are stored as is. Identity and
        capability fields are never overwritten, and swing or fan codes the device
        does not support are dropped. Nothing is transmitted back; the next
        push tick makes the report visible.
        """
        for key, value in status.items():
            if key not in DEVICE_STATUS_FIELDS:
                _LOGGER.debug("%s: Ignoring status field %s", self.name, key)
                continue
            if not self._accepts_status_value(key, value):
                _LOGGER.debug(
                    "%s: Ignoring out-of-range %s %s", self.name, key, value
                )
                continue
            if key == "power_state":
                value = codec.power_state_from_active(value)  # noqa: PLW2901
            setattr(self.state, key, value)

        _LOGGER.debug("%s: Applied device status %s", self.name, dict(status))
