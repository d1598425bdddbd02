"""
Configuration flow for Midea Bridge integration.

This module handles the setup of the bridged devices and the per-device
overrides through Home Assistant's config and options flows.
"""

from __future__ import annotations

import logging
from typing import Any

import voluptuous as vol
from homeassistant.config_entries import (
    ConfigEntry,
    ConfigFlow,
    ConfigFlowResult,
    OptionsFlow,
)
from homeassistant.const import CONF_NAME
from homeassistant.core import callback

from .const import (
    CONF_ADD_ANOTHER,
    CONF_DEVICE_ID,
    CONF_DEVICE_TYPE,
    CONF_DEVICES,
    CONF_FAN_ONLY_MODE,
    CONF_OUTDOOR_TEMPERATURE,
    CONF_OVERRIDES,
    CONF_PUSH_INTERVAL,
    CONF_SUPPORTED_SWING_MODE,
    CONF_TEMPERATURE_STEPS,
    CONF_USER_ID,
    DEFAULT_PUSH_INTERVAL,
    DEFAULT_TEMPERATURE_STEPS,
    DOMAIN,
    ERROR_DEVICE_CONFIGURED,
    ERROR_DUPLICATE_DEVICE,
    MODEL_NAMES,
    SWING_MODE_OVERRIDE_OPTIONS,
    MideaDeviceType,
)

_LOGGER = logging.getLogger(__name__)

DEFAULT_TITLE = "Midea Bridge"

DEVICE_SCHEMA = vol.Schema(
    {
        vol.Required(CONF_DEVICE_ID): str,
        vol.Required(
            CONF_DEVICE_TYPE, default=int(MideaDeviceType.AIR_CONDITIONER)
        ): vol.In(MODEL_NAMES),
        vol.Optional(CONF_NAME, default=""): str,
        vol.Optional(CONF_USER_ID, default=""): str,
        vol.Optional(CONF_ADD_ANOTHER, default=False): bool,
    }
)


class MideaBridgeConfigFlow(ConfigFlow, domain=DOMAIN):
    """Handle configuration flow for Midea Bridge integration."""

    VERSION = 1

    def __init__(self) -> None:
        """Initialize the config flow."""
        super().__init__()
        self._title = DEFAULT_TITLE
        self._devices: list[dict[str, Any]] = []

    def _configured_device_ids(self) -> set[str]:
        """Return the device ids bridged by the existing entries."""
        return {
            device[CONF_DEVICE_ID]
            for entry in self._async_current_entries()
            for device in entry.data.get(CONF_DEVICES, [])
        }

    @staticmethod
    @callback
    def async_get_options_flow(config_entry: ConfigEntry) -> OptionsFlow:  # noqa: ARG004
        """Return the options flow editing push interval and overrides."""
        return MideaBridgeOptionsFlow()

    async def async_step_user(
        self, user_input: dict[str, Any] | None = None
    ) -> ConfigFlowResult:
        """
        Handle the initial step of the config flow.

        Args:
            user_input: User input data containing the bridge name.

        Returns:
            ConfigFlowResult showing the form or moving to the device step.

        """
        if user_input is not None:
            self._title = user_input.get(CONF_NAME) or DEFAULT_TITLE
            return await self.async_step_device()

        return self.async_show_form(
            step_id="user",
            data_schema=vol.Schema(
                {vol.Optional(CONF_NAME, default=DEFAULT_TITLE): str}
            ),
        )

    async def async_step_device(
        self, user_input: dict[str, Any] | None = None
    ) -> ConfigFlowResult:
        """
        Add one device to the bridge, looping while more are requested.

        Args:
            user_input: User input data describing one device.

        Returns:
            ConfigFlowResult showing the form again or creating the entry.

        """
        errors: dict[str, str] = {}

        if user_input is not None:
            device_id = user_input[CONF_DEVICE_ID].strip()

            if any(d[CONF_DEVICE_ID] == device_id for d in self._devices):
                _LOGGER.warning("Device %s was already added", device_id)
                errors[CONF_DEVICE_ID] = ERROR_DUPLICATE_DEVICE
            elif device_id in self._configured_device_ids():
                _LOGGER.warning(
                    "Device %s is already bridged by another entry", device_id
                )
                errors[CONF_DEVICE_ID] = ERROR_DEVICE_CONFIGURED
            else:
                self._devices.append(
                    {
                        CONF_DEVICE_ID: device_id,
                        CONF_DEVICE_TYPE: user_input[CONF_DEVICE_TYPE],
                        CONF_NAME: user_input.get(CONF_NAME) or device_id,
                        CONF_USER_ID: user_input.get(CONF_USER_ID, ""),
                    }
                )
                _LOGGER.debug("Added device %s to the bridge", device_id)

                if not user_input.get(CONF_ADD_ANOTHER):
                    return self.async_create_entry(
                        title=self._title,
                        data={CONF_DEVICES: self._devices},
                    )

        return self.async_show_form(
            step_id="device",
            data_schema=DEVICE_SCHEMA,
            errors=errors,
        )


class MideaBridgeOptionsFlow(OptionsFlow):
    """Edit the push interval and the overrides of one device."""

    def __init__(self) -> None:
        self._options: dict[str, Any] = {}
        self._device_id: str | None = None

    async def async_step_init(
        self, user_input: dict[str, Any] | None = None
    ) -> ConfigFlowResult:
        """Pick the push interval and the device to configure."""
        device_ids = [
            device[CONF_DEVICE_ID]
            for device in self.config_entry.data.get(CONF_DEVICES, [])
        ]

        if user_input is not None:
            self._options = {
                **self.config_entry.options,
                CONF_PUSH_INTERVAL: user_input[CONF_PUSH_INTERVAL],
            }
            self._device_id = user_input[CONF_DEVICE_ID]
            return await self.async_step_device()

        return self.async_show_form(
            step_id="init",
            data_schema=vol.Schema(
                {
                    vol.Required(
                        CONF_PUSH_INTERVAL,
                        default=self.config_entry.options.get(
                            CONF_PUSH_INTERVAL, DEFAULT_PUSH_INTERVAL
                        ),
                    ): vol.All(vol.Coerce(int), vol.Range(min=1, max=300)),
                    vol.Required(CONF_DEVICE_ID): vol.In(device_ids),
                }
            ),
        )

    async def async_step_device(
        self, user_input: dict[str, Any] | None = None
    ) -> ConfigFlowResult:
        """Edit the overrides of the selected device."""
        overrides = dict(self._options.get(CONF_OVERRIDES, {}))
        current = overrides.get(self._device_id, {})

        if user_input is not None:
            overrides[self._device_id] = dict(user_input)
            _LOGGER.debug(
                "Updated overrides of %s: %s", self._device_id, user_input
            )
            return self.async_create_entry(
                title="",
                data={**self._options, CONF_OVERRIDES: overrides},
            )

        return self.async_show_form(
            step_id="device",
            data_schema=vol.Schema(
                {
                    vol.Optional(
                        CONF_SUPPORTED_SWING_MODE,
                        default=current.get(CONF_SUPPORTED_SWING_MODE, "None"),
                    ): vol.In(SWING_MODE_OVERRIDE_OPTIONS),
                    vol.Optional(
                        CONF_TEMPERATURE_STEPS,
                        default=current.get(
                            CONF_TEMPERATURE_STEPS, DEFAULT_TEMPERATURE_STEPS
                        ),
                    ): vol.All(vol.Coerce(float), vol.Range(min=0.5, max=5)),
                    vol.Optional(
                        CONF_FAN_ONLY_MODE,
                        default=current.get(CONF_FAN_ONLY_MODE, False),
                    ): bool,
                    vol.Optional(
                        CONF_OUTDOOR_TEMPERATURE,
                        default=current.get(CONF_OUTDOOR_TEMPERATURE, False),
                    ): bool,
                }
            ),
            description_placeholders={"device_id": self._device_id},
        )
