"""Registry of bridged Midea devices.

The registry is the single owner of every ``MideaAccessory``. Each entry
keeps the handle that cancels the device's push loop, so deregistering a
device stops its timer before the accessory is dropped.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import timedelta
from typing import TYPE_CHECKING, Any

from homeassistant.core import CALLBACK_TYPE, HomeAssistant, callback
from homeassistant.helpers.event import async_track_time_interval

from .accessory import MideaAccessory
from .const import DEFAULT_PUSH_INTERVAL, MideaDeviceType
from .models import MideaBridgeError, MideaDeviceState
from .overrides import mapping_override_lookup, resolve_device_overrides

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping

_LOGGER = logging.getLogger(__name__)


class DeviceAlreadyRegisteredError(MideaBridgeError):
    """Exception raised when a device id is registered twice."""


@dataclass
class DeviceRegistration:
    """A registered device and the handle cancelling its push loop."""

    accessory: MideaAccessory
    cancel_push: CALLBACK_TYPE


def coerce_device_type(value: Any) -> MideaDeviceType | int:  # noqa: ANN401
    """Return the known device type for a raw value, or the raw value."""
    try:
        return MideaDeviceType(int(value))
    except (TypeError, ValueError):
        return value


class MideaDeviceRegistry:
    """Owns the accessories of one bridge, keyed by device id."""

    def __init__(
        self,
        hass: HomeAssistant,
        send_update: Callable[[MideaDeviceState], None],
        push_interval: timedelta = timedelta(seconds=DEFAULT_PUSH_INTERVAL),
    ) -> None:
        """Initialize the registry.

        Args:
            hass: Home Assistant instance running the push loops.
            send_update: Transport callable receiving full state snapshots.
            push_interval: Interval between two pushes of a device.

        """
        self._hass = hass
        self._send_update = send_update
        self._push_interval = push_interval
        self._devices: dict[str, DeviceRegistration] = {}

    def __contains__(self, device_id: object) -> bool:
        return device_id in self._devices

    def __len__(self) -> int:
        return len(self._devices)

    @property
    def device_ids(self) -> list[str]:
        return list(self._devices)

    @property
    def push_interval(self) -> timedelta:
        return self._push_interval

    def get(self, device_id: str) -> MideaAccessory | None:
        registration = self._devices.get(device_id)
        return registration.accessory if registration else None

    @callback
    def async_register(
        self,
        device_id: str,
        device_type: MideaDeviceType | int,
        name: str,
        user_id: str = "",
        overrides: Mapping[str, Any] | None = None,
    ) -> MideaAccessory:
        """Register a device and start its push loop.

        Args:
            device_id: Unique device identifier.
            device_type: Device archetype code.
            name: Display name.
            user_id: Owner of the device in the vendor account.
            overrides: Per-device override values keyed by override name.

        Returns:
            The accessory bridging the device.

        Raises:
            DeviceAlreadyRegisteredError: If the device id is already known.

        """
        if device_id in self._devices:
            msg = f"Device {device_id} is already registered"
            raise DeviceAlreadyRegisteredError(msg)

        state = MideaDeviceState.create(
            device_id, coerce_device_type(device_type), name, user_id
        )
        lookup = mapping_override_lookup({device_id: overrides or {}})
        accessory = MideaAccessory(
            state,
            resolve_device_overrides(lookup, device_id),
            self._send_update,
        )

        cancel_push = async_track_time_interval(
            self._hass,
            accessory.async_push_tick,
            self._push_interval,
            name=f"midea_bridge push {device_id}",
        )
        self._devices[device_id] = DeviceRegistration(accessory, cancel_push)
        _LOGGER.info(
            "Registered %s (%s), pushing every %s",
            name,
            device_id,
            self._push_interval,
        )
        return accessory

    @callback
    def async_deregister(self, device_id: str) -> bool:
        """Stop the push loop of a device and forget it.

        Returns:
            True if the device was registered.

        """
        registration = self._devices.pop(device_id, None)
        if registration is None:
            _LOGGER.warning("Cannot deregister unknown device %s", device_id)
            return False

        registration.cancel_push()
        _LOGGER.info(
            "Deregistered %s (%s)", registration.accessory.name, device_id
        )
        return True

    @callback
    def async_handle_device_status(
        self, device_id: str, status: Mapping[str, Any]
    ) -> bool:
        """Route a status report from the device to its accessory.

        Returns:
            True if the report was applied.

        """
        accessory = self.get(device_id)
        if accessory is None:
            _LOGGER.debug("Ignoring status for unknown device %s", device_id)
            return False

        accessory.async_apply_device_status(status)
        return True

    @callback
    def async_shutdown(self) -> None:
        """Deregister every device."""
        for device_id in list(self._devices):
            self.async_deregister(device_id)
