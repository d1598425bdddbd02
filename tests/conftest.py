"""Pytest configuration and fixtures for Midea Bridge tests."""

from collections.abc import Callable
from typing import Any
from unittest.mock import Mock

import pytest

from custom_components.midea_bridge.accessory import MideaAccessory
from custom_components.midea_bridge.const import MideaDeviceType, MideaSwingMode
from custom_components.midea_bridge.models import DeviceOverrides, MideaDeviceState


@pytest.fixture
def mock_hass() -> Mock:
    """Create a mock Home Assistant instance."""
    hass = Mock()
    hass.data = {}
    return hass


@pytest.fixture
def send_update() -> Mock:
    """Fixture capturing every snapshot sent to the device."""
    return Mock()


@pytest.fixture
def make_accessory(send_update: Mock) -> Callable[..., MideaAccessory]:
    """Fixture building accessories with optional overrides.

    Args:
        send_update: Transport mock shared by the built accessories.

    Returns:
        A factory taking the device type and override fields.

    """

    def factory(
        device_type: MideaDeviceType | int = MideaDeviceType.AIR_CONDITIONER,
        **overrides: Any,
    ) -> MideaAccessory:
        state = MideaDeviceState.create("device1", device_type, "Living Room")
        return MideaAccessory(state, DeviceOverrides(**overrides), send_update)

    return factory


@pytest.fixture
def air_conditioner(
    make_accessory: Callable[..., MideaAccessory],
) -> MideaAccessory:
    """Fixture providing an air conditioner with no overrides."""
    return make_accessory()


@pytest.fixture
def full_air_conditioner(
    make_accessory: Callable[..., MideaAccessory],
) -> MideaAccessory:
    """Fixture providing an air conditioner with every optional service."""
    return make_accessory(
        supported_swing_mode=MideaSwingMode.VERTICAL,
        fan_only_mode=True,
        outdoor_temperature=True,
    )


@pytest.fixture
def dehumidifier(make_accessory: Callable[..., MideaAccessory]) -> MideaAccessory:
    """Fixture providing a dehumidifier with vertical swing."""
    return make_accessory(
        MideaDeviceType.DEHUMIDIFIER,
        supported_swing_mode=MideaSwingMode.VERTICAL,
    )
