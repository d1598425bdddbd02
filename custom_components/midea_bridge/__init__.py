from __future__ import annotations

import logging
from datetime import timedelta
from functools import partial

from homeassistant.config_entries import ConfigEntry
from homeassistant.const import CONF_NAME
from homeassistant.core import HomeAssistant
from homeassistant.helpers.dispatcher import (
    async_dispatcher_connect,
    async_dispatcher_send,
)

from .const import (
    CONF_DEVICE_ID,
    CONF_DEVICE_TYPE,
    CONF_DEVICES,
    CONF_OVERRIDES,
    CONF_PUSH_INTERVAL,
    CONF_USER_ID,
    DEFAULT_PUSH_INTERVAL,
    DOMAIN,
    SIGNAL_DEVICE_STATUS,
    SIGNAL_SEND_UPDATE,
)
from .registry import MideaDeviceRegistry

_LOGGER = logging.getLogger(__name__)


async def async_setup_entry(hass: HomeAssistant, entry: ConfigEntry) -> bool:
    _LOGGER.info("Setting up Midea Bridge integration for entry %s", entry.entry_id)

    devices = entry.data.get(CONF_DEVICES)
    if not devices:
        _LOGGER.error("No devices configured for entry %s", entry.entry_id)
        return False

    push_interval = timedelta(
        seconds=entry.options.get(CONF_PUSH_INTERVAL, DEFAULT_PUSH_INTERVAL)
    )
    overrides = entry.options.get(CONF_OVERRIDES, {})

    registry = MideaDeviceRegistry(
        hass,
        partial(async_dispatcher_send, hass, SIGNAL_SEND_UPDATE),
        push_interval,
    )

    owned_elsewhere = {
        device_id
        for entry_id, entry_data in hass.data.get(DOMAIN, {}).items()
        if entry_id != entry.entry_id
        for device_id in entry_data["registry"].device_ids
    }

    for device in devices:
        try:
            device_id = device[CONF_DEVICE_ID]
            if device_id in owned_elsewhere:
                _LOGGER.error(
                    "Skipping device %s already bridged by another entry", device_id
                )
                continue
            registry.async_register(
                device_id,
                device[CONF_DEVICE_TYPE],
                device.get(CONF_NAME) or device_id,
                device.get(CONF_USER_ID, ""),
                overrides.get(device_id),
            )
        except KeyError as err:
            _LOGGER.error(
                "Skipping device without %s in entry %s: %s",
                err,
                entry.entry_id,
                device,
            )
        except Exception:
            _LOGGER.exception(
                "Failed to register device %s for entry %s", device, entry.entry_id
            )

    unsub_status = async_dispatcher_connect(
        hass, SIGNAL_DEVICE_STATUS, registry.async_handle_device_status
    )

    hass.data.setdefault(DOMAIN, {})[entry.entry_id] = {
        "registry": registry,
        "unsub_status": unsub_status,
    }
    entry.async_on_unload(entry.add_update_listener(async_reload_entry))

    _LOGGER.info(
        "Successfully setup Midea Bridge integration for entry %s with %d devices",
        entry.entry_id,
        len(registry),
    )
    return True


async def async_unload_entry(hass: HomeAssistant, entry: ConfigEntry) -> bool:
    _LOGGER.info("Unloading Midea Bridge integration for entry %s", entry.entry_id)

    entry_data = hass.data.get(DOMAIN, {}).pop(entry.entry_id, None)
    if entry_data is None:
        _LOGGER.warning("No data to unload for entry %s", entry.entry_id)
        return True

    entry_data["unsub_status"]()
    entry_data["registry"].async_shutdown()
    _LOGGER.debug("Cleaned up data for entry %s", entry.entry_id)
    return True


async def async_reload_entry(hass: HomeAssistant, entry: ConfigEntry) -> None:
    """Reload the entry after its options changed."""
    await hass.config_entries.async_reload(entry.entry_id)
