"""Tests for the Midea Bridge integration setup."""

from collections.abc import Iterator
from datetime import timedelta
from unittest.mock import AsyncMock, Mock, patch

import pytest
from homeassistant.const import CONF_NAME

from custom_components.midea_bridge import (
    async_reload_entry,
    async_setup_entry,
    async_unload_entry,
)
from custom_components.midea_bridge.const import (
    CONF_DEVICE_ID,
    CONF_DEVICE_TYPE,
    CONF_DEVICES,
    CONF_OVERRIDES,
    CONF_PUSH_INTERVAL,
    CONF_TEMPERATURE_STEPS,
    CONF_USER_ID,
    DOMAIN,
    SIGNAL_DEVICE_STATUS,
    SIGNAL_SEND_UPDATE,
)


@pytest.fixture
def config_entry() -> Mock:
    """Create a config entry bridging an air conditioner and a dehumidifier."""
    entry = Mock()
    entry.entry_id = "test_entry"
    entry.data = {
        CONF_DEVICES: [
            {
                CONF_DEVICE_ID: "device1",
                CONF_DEVICE_TYPE: 0xAC,
                CONF_NAME: "Living Room",
                CONF_USER_ID: "user1",
            },
            {CONF_DEVICE_ID: "device2", CONF_DEVICE_TYPE: 0xA1},
        ]
    }
    entry.options = {
        CONF_PUSH_INTERVAL: 10,
        CONF_OVERRIDES: {"device1": {CONF_TEMPERATURE_STEPS: 0.5}},
    }
    return entry


@pytest.fixture
def mock_track() -> Iterator[Mock]:
    """Patch the interval tracker used by the registry."""
    with patch(
        "custom_components.midea_bridge.registry.async_track_time_interval",
        side_effect=lambda *args, **kwargs: Mock(),
    ) as track:
        yield track


@pytest.fixture
def mock_dispatcher() -> Iterator[tuple[Mock, Mock]]:
    """Patch the dispatcher helpers used by the integration."""
    with (
        patch(
            "custom_components.midea_bridge.async_dispatcher_connect",
            return_value=Mock(),
        ) as connect,
        patch("custom_components.midea_bridge.async_dispatcher_send") as send,
    ):
        yield connect, send


class TestAsyncSetupEntry:
    """Tests for async_setup_entry."""

    @pytest.mark.asyncio
    async def test_setup_registers_devices(
        self,
        mock_hass: Mock,
        config_entry: Mock,
        mock_track: Mock,
        mock_dispatcher: tuple[Mock, Mock],
    ) -> None:
        """Test that every configured device is registered."""
        connect, _ = mock_dispatcher

        assert await async_setup_entry(mock_hass, config_entry) is True

        registry = mock_hass.data[DOMAIN]["test_entry"]["registry"]
        assert registry.device_ids == ["device1", "device2"]
        assert registry.push_interval == timedelta(seconds=10)
        assert mock_track.call_count == 2

        living_room = registry.get("device1")
        assert living_room.name == "Living Room"
        assert living_room.state.user_id == "user1"
        assert living_room.state.temperature_steps == 0.5
        assert registry.get("device2").name == "device2"

        connect.assert_called_once_with(
            mock_hass, SIGNAL_DEVICE_STATUS, registry.async_handle_device_status
        )
        config_entry.async_on_unload.assert_called_once()

    @pytest.mark.asyncio
    async def test_setup_sends_snapshots_over_dispatcher(
        self,
        mock_hass: Mock,
        config_entry: Mock,
        mock_track: Mock,
        mock_dispatcher: tuple[Mock, Mock],
    ) -> None:
        """Test that state changes are dispatched to the transport."""
        _, send = mock_dispatcher
        await async_setup_entry(mock_hass, config_entry)
        accessory = mock_hass.data[DOMAIN]["test_entry"]["registry"].get("device1")

        accessory.handle_active_set(1)

        send.assert_called_once()
        hass, signal, snapshot = send.call_args[0]
        assert hass is mock_hass
        assert signal == SIGNAL_SEND_UPDATE
        assert snapshot.device_id == "device1"
        assert snapshot.power_state == 1

    @pytest.mark.asyncio
    async def test_setup_without_devices(
        self,
        mock_hass: Mock,
        config_entry: Mock,
    ) -> None:
        """Test that an entry without devices fails to set up."""
        config_entry.data = {CONF_DEVICES: []}
        assert await async_setup_entry(mock_hass, config_entry) is False
        assert DOMAIN not in mock_hass.data

    @pytest.mark.asyncio
    async def test_setup_skips_invalid_devices(
        self,
        mock_hass: Mock,
        config_entry: Mock,
        mock_track: Mock,
        mock_dispatcher: tuple[Mock, Mock],
        caplog: pytest.LogCaptureFixture,
    ) -> None:
        """Test that broken or duplicate devices do not stop the others."""
        config_entry.data = {
            CONF_DEVICES: [
                {CONF_DEVICE_TYPE: 0xAC},
                {CONF_DEVICE_ID: "device1", CONF_DEVICE_TYPE: 0xAC},
                {CONF_DEVICE_ID: "device1", CONF_DEVICE_TYPE: 0xA1},
            ]
        }
        config_entry.options = {}

        assert await async_setup_entry(mock_hass, config_entry) is True

        registry = mock_hass.data[DOMAIN]["test_entry"]["registry"]
        assert registry.device_ids == ["device1"]
        assert registry.push_interval == timedelta(seconds=5)
        assert "Skipping device without" in caplog.text
        assert "Failed to register device" in caplog.text

    @pytest.mark.asyncio
    async def test_setup_skips_devices_of_other_entries(
        self,
        mock_hass: Mock,
        config_entry: Mock,
        mock_track: Mock,
        mock_dispatcher: tuple[Mock, Mock],
        caplog: pytest.LogCaptureFixture,
    ) -> None:
        """Test that a device keeps a single owner across entries."""
        await async_setup_entry(mock_hass, config_entry)
        second_entry = Mock()
        second_entry.entry_id = "second_entry"
        second_entry.data = {
            CONF_DEVICES: [
                {CONF_DEVICE_ID: "device1", CONF_DEVICE_TYPE: 0xAC},
                {CONF_DEVICE_ID: "device3", CONF_DEVICE_TYPE: 0xA1},
            ]
        }
        second_entry.options = {}

        assert await async_setup_entry(mock_hass, second_entry) is True

        first = mock_hass.data[DOMAIN]["test_entry"]["registry"]
        second = mock_hass.data[DOMAIN]["second_entry"]["registry"]
        assert first.device_ids == ["device1", "device2"]
        assert second.device_ids == ["device3"]
        assert mock_track.call_count == 3
        assert "device1 already bridged by another entry" in caplog.text


class TestAsyncUnloadEntry:
    """Tests for async_unload_entry."""

    @pytest.mark.asyncio
    async def test_unload_stops_everything(
        self,
        mock_hass: Mock,
        config_entry: Mock,
        mock_track: Mock,
        mock_dispatcher: tuple[Mock, Mock],
    ) -> None:
        """Test that unloading cancels push loops and status listening."""
        connect, _ = mock_dispatcher
        await async_setup_entry(mock_hass, config_entry)
        registry = mock_hass.data[DOMAIN]["test_entry"]["registry"]
        cancels = [
            registration.cancel_push for registration in registry._devices.values()
        ]

        assert await async_unload_entry(mock_hass, config_entry) is True

        connect.return_value.assert_called_once()
        for cancel in cancels:
            cancel.assert_called_once()
        assert len(registry) == 0
        assert "test_entry" not in mock_hass.data[DOMAIN]

    @pytest.mark.asyncio
    async def test_unload_unknown_entry(
        self,
        mock_hass: Mock,
        config_entry: Mock,
    ) -> None:
        """Test that unloading an entry without data succeeds."""
        assert await async_unload_entry(mock_hass, config_entry) is True


class TestAsyncReloadEntry:
    """Tests for async_reload_entry."""

    @pytest.mark.asyncio
    async def test_reload(self, mock_hass: Mock, config_entry: Mock) -> None:
        """Test that option changes reload the entry."""
        mock_hass.config_entries.async_reload = AsyncMock()
        await async_reload_entry(mock_hass, config_entry)
        mock_hass.config_entries.async_reload.assert_awaited_once_with("test_entry")
