"""Tests for the Midea Bridge override resolution."""

from typing import Any
from unittest.mock import Mock

import pytest

from custom_components.midea_bridge.const import (
    CONF_FAN_ONLY_MODE,
    CONF_OUTDOOR_TEMPERATURE,
    CONF_SUPPORTED_SWING_MODE,
    CONF_TEMPERATURE_STEPS,
    MideaSwingMode,
)
from custom_components.midea_bridge.models import DeviceOverrides
from custom_components.midea_bridge.overrides import (
    mapping_override_lookup,
    resolve_device_overrides,
)


def resolve(values: dict[str, Any]) -> DeviceOverrides:
    """Resolve overrides for device1 from a flat mapping."""
    return resolve_device_overrides(
        mapping_override_lookup({"device1": values}), "device1"
    )


class TestMappingOverrideLookup:
    """Tests for mapping_override_lookup."""

    def test_returns_value_of_device(self) -> None:
        """Test that values are looked up per device."""
        lookup = mapping_override_lookup(
            {"device1": {CONF_TEMPERATURE_STEPS: 0.5}, "device2": {}}
        )
        assert lookup("device1", CONF_TEMPERATURE_STEPS) == 0.5
        assert lookup("device2", CONF_TEMPERATURE_STEPS) is None
        assert lookup("unknown", CONF_TEMPERATURE_STEPS) is None


class TestResolveDeviceOverrides:
    """Tests for resolve_device_overrides."""

    def test_defaults_without_overrides(self) -> None:
        """Test that a device without overrides gets the defaults."""
        overrides = resolve({})
        assert overrides.supported_swing_mode == MideaSwingMode.NONE
        assert overrides.temperature_steps == 1
        assert overrides.fan_only_mode is False
        assert overrides.outdoor_temperature is False

    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            ("Vertical", MideaSwingMode.VERTICAL),
            ("Horizontal", MideaSwingMode.HORIZONTAL),
            ("Both", MideaSwingMode.BOTH),
            ("None", MideaSwingMode.NONE),
            ("Diagonal", MideaSwingMode.NONE),
            (42, MideaSwingMode.NONE),
        ],
    )
    def test_supported_swing_mode(self, value: Any, expected: MideaSwingMode) -> None:  # noqa: ANN401
        """Test swing override names and the fallback for unknown ones."""
        assert resolve({CONF_SUPPORTED_SWING_MODE: value}).supported_swing_mode == (
            expected
        )

    def test_temperature_steps(self) -> None:
        """Test that temperature steps are coerced to float."""
        assert resolve({CONF_TEMPERATURE_STEPS: "0.5"}).temperature_steps == 0.5
        assert resolve({CONF_TEMPERATURE_STEPS: 2}).temperature_steps == 2.0

    @pytest.mark.parametrize("value", [0, -1, "abc"])
    def test_invalid_temperature_steps_fall_back(self, value: Any) -> None:  # noqa: ANN401
        """Test that invalid steps keep the default."""
        assert resolve({CONF_TEMPERATURE_STEPS: value}).temperature_steps == 1

    def test_feature_flags(self) -> None:
        """Test that feature flags accept booleans and their spellings."""
        overrides = resolve({CONF_FAN_ONLY_MODE: True, CONF_OUTDOOR_TEMPERATURE: "on"})
        assert overrides.fan_only_mode is True
        assert overrides.outdoor_temperature is True

    def test_invalid_feature_flag_falls_back(self) -> None:
        """Test that an unreadable flag stays disabled."""
        assert resolve({CONF_FAN_ONLY_MODE: "maybe"}).fan_only_mode is False

    def test_lookup_called_once_per_key(self) -> None:
        """Test that every override key is looked up exactly once."""
        lookup = Mock(return_value=None)
        resolve_device_overrides(lookup, "device1")
        assert lookup.call_count == 4
        looked_up = {call.args for call in lookup.call_args_list}
        assert looked_up == {
            ("device1", CONF_SUPPORTED_SWING_MODE),
            ("device1", CONF_TEMPERATURE_STEPS),
            ("device1", CONF_FAN_ONLY_MODE),
            ("device1", CONF_OUTDOOR_TEMPERATURE),
        }
