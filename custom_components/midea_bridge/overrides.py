"""Per-device override resolution for Midea Bridge.

Overrides are read once, when a device is registered. A missing or invalid
value never fails the registration: it is logged and replaced by its default.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

import voluptuous as vol

from .const import (
    CONF_FAN_ONLY_MODE,
    CONF_OUTDOOR_TEMPERATURE,
    CONF_SUPPORTED_SWING_MODE,
    CONF_TEMPERATURE_STEPS,
    SWING_MODE_OVERRIDE_MAP,
    MideaSwingMode,
)
from .models import DeviceOverrides

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping

    OverrideLookup = Callable[[str, str], Any]

_LOGGER = logging.getLogger(__name__)

TEMPERATURE_STEPS_VALIDATOR = vol.All(
    vol.Coerce(float), vol.Range(min=0, min_included=False)
)
FLAG_VALIDATOR = vol.Boolean()


def mapping_override_lookup(
    overrides: Mapping[str, Mapping[str, Any]],
) -> OverrideLookup:
    """Build an override lookup from a ``{device_id: {key: value}}`` mapping.

    Args:
        overrides: Overrides as stored in the config entry options.

    Returns:
        A callable returning the value for a device and key, or None.

    """

    def lookup(device_id: str, key: str) -> Any:  # noqa: ANN401
        return overrides.get(device_id, {}).get(key)

    return lookup


def resolve_device_overrides(
    lookup: OverrideLookup, device_id: str
) -> DeviceOverrides:
    """Resolve all overrides of a device, falling back to defaults.

    Args:
        lookup: Callable returning the configured value for a device and key.
        device_id: Device to resolve the overrides for.

    Returns:
        The resolved overrides.

    """
    defaults = DeviceOverrides()
    return DeviceOverrides(
        supported_swing_mode=_resolve_swing_mode(
            lookup(device_id, CONF_SUPPORTED_SWING_MODE), device_id
        ),
        temperature_steps=_resolve(
            lookup(device_id, CONF_TEMPERATURE_STEPS),
            TEMPERATURE_STEPS_VALIDATOR,
            defaults.temperature_steps,
            device_id,
            CONF_TEMPERATURE_STEPS,
        ),
        fan_only_mode=_resolve(
            lookup(device_id, CONF_FAN_ONLY_MODE),
            FLAG_VALIDATOR,
            defaults.fan_only_mode,
            device_id,
            CONF_FAN_ONLY_MODE,
        ),
        outdoor_temperature=_resolve(
            lookup(device_id, CONF_OUTDOOR_TEMPERATURE),
            FLAG_VALIDATOR,
            defaults.outdoor_temperature,
            device_id,
            CONF_OUTDOOR_TEMPERATURE,
        ),
    )


def _resolve_swing_mode(value: Any, device_id: str) -> MideaSwingMode:  # noqa: ANN401
    if not value:
        return MideaSwingMode.NONE

    swing_mode = (
        SWING_MODE_OVERRIDE_MAP.get(value) if isinstance(value, str) else None
    )
    if swing_mode is None:
        if value != "None":
            _LOGGER.warning(
                "Unknown %s %r for device %s, swing disabled",
                CONF_SUPPORTED_SWING_MODE,
                value,
                device_id,
            )
        return MideaSwingMode.NONE
    return swing_mode


def _resolve(
    value: Any,  # noqa: ANN401
    validator: Callable[[Any], Any],
    default: Any,  # noqa: ANN401
    device_id: str,
    key: str,
) -> Any:  # noqa: ANN401
    if value is None or value == "":
        return default

    try:
        return validator(value)
    except vol.Invalid as err:
        _LOGGER.warning(
            "Invalid %s %r for device %s, using %s: %s",
            key,
            value,
            device_id,
            default,
            err,
        )
        return default
