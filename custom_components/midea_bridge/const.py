"""Constants for the Midea Bridge integration.

This module contains the native Midea enumerations, the characteristic
value enumerations exposed to the control surface, configuration keys and
the mapping dictionaries shared by the codec and the accessory.
"""

from enum import IntEnum

DOMAIN = "midea_bridge"

INTEGRATION_VERSION = "1.0.0"
MANUFACTURER = "Midea"

DEFAULT_PUSH_INTERVAL = 5  # Seconds between two full pushes to the control surface

SIGNAL_SEND_UPDATE = f"{DOMAIN}_send_update"
SIGNAL_DEVICE_STATUS = f"{DOMAIN}_device_status"

CONF_DEVICES = "devices"
CONF_DEVICE_ID = "device_id"
CONF_DEVICE_TYPE = "device_type"
CONF_USER_ID = "user_id"
CONF_ADD_ANOTHER = "add_another"
CONF_OVERRIDES = "overrides"
CONF_PUSH_INTERVAL = "push_interval"

# Per-device override keys, named as users write them in their configuration
CONF_SUPPORTED_SWING_MODE = "supportedSwingMode"
CONF_TEMPERATURE_STEPS = "temperatureSteps"
CONF_FAN_ONLY_MODE = "fanOnlyMode"
CONF_OUTDOOR_TEMPERATURE = "OutdoorTemperature"

ERROR_DUPLICATE_DEVICE = "duplicate_device"
ERROR_DEVICE_CONFIGURED = "device_configured"


class MideaDeviceType(IntEnum):
    """Device archetypes understood by the bridge."""

    DEHUMIDIFIER = 0xA1
    AIR_CONDITIONER = 0xAC


class MideaOperationalMode(IntEnum):
    """Operational modes as reported by an air conditioner."""

    OFF = 0
    AUTO = 1
    COOLING = 2
    DRY = 3
    HEATING = 4
    FAN_ONLY = 5


class MideaSwingMode(IntEnum):
    """Swing axes a device can support."""

    NONE = 0x0
    HORIZONTAL = 0x3
    VERTICAL = 0xC
    BOTH = 0xF


DEHUMIDIFIER_MODE = 0

FAN_SPEED_LOW = 40
FAN_SPEED_MEDIUM = 60
FAN_SPEED_HIGH = 80
FAN_SPEED_AUTO = 102

AIR_CONDITIONER_FAN_SPEEDS = frozenset(
    {FAN_SPEED_LOW, FAN_SPEED_MEDIUM, FAN_SPEED_HIGH, FAN_SPEED_AUTO}
)
DEHUMIDIFIER_FAN_SPEEDS = frozenset({FAN_SPEED_LOW, FAN_SPEED_MEDIUM, FAN_SPEED_HIGH})

DEFAULT_TARGET_TEMPERATURE = 24.0
DEFAULT_MIN_TEMPERATURE = 17.0
DEFAULT_MAX_TEMPERATURE = 30.0
DEFAULT_TEMPERATURE_STEPS = 1.0
DEFAULT_TARGET_HUMIDITY = 35
TEMPERATURE_RESOLUTION = 0.5  # Device contract, degrees Celsius

CURRENT_TEMPERATURE_MIN = -100
CURRENT_TEMPERATURE_MAX = 100
CURRENT_TEMPERATURE_STEP = 0.1
HUMIDITY_THRESHOLD_MIN = 35
HUMIDITY_THRESHOLD_MAX = 85
HUMIDITY_THRESHOLD_STEP = 5


class Active(IntEnum):
    """Values of the Active characteristic."""

    INACTIVE = 0
    ACTIVE = 1


class CurrentHeaterCoolerState(IntEnum):
    """Values of the CurrentHeaterCoolerState characteristic."""

    INACTIVE = 0
    IDLE = 1
    HEATING = 2
    COOLING = 3


class TargetHeaterCoolerState(IntEnum):
    """Values of the TargetHeaterCoolerState characteristic."""

    AUTO = 0
    HEAT = 1
    COOL = 2


class SwingMode(IntEnum):
    """Values of the SwingMode characteristic."""

    SWING_DISABLED = 0
    SWING_ENABLED = 1


class TemperatureDisplayUnits(IntEnum):
    """Values of the TemperatureDisplayUnits characteristic."""

    CELSIUS = 0
    FAHRENHEIT = 1


class CurrentHumidifierDehumidifierState(IntEnum):
    """Values of the CurrentHumidifierDehumidifierState characteristic."""

    INACTIVE = 0
    IDLE = 1
    HUMIDIFYING = 2
    DEHUMIDIFYING = 3


class TargetHumidifierDehumidifierState(IntEnum):
    """Values of the TargetHumidifierDehumidifierState characteristic."""

    HUMIDIFIER_OR_DEHUMIDIFIER = 0
    HUMIDIFIER = 1
    DEHUMIDIFIER = 2


SERVICE_ACCESSORY_INFORMATION = "AccessoryInformation"
SERVICE_HEATER_COOLER = "HeaterCooler"
SERVICE_FAN = "Fanv2"
SERVICE_TEMPERATURE_SENSOR = "TemperatureSensor"
SERVICE_HUMIDIFIER_DEHUMIDIFIER = "HumidifierDehumidifier"

CHAR_NAME = "Name"
CHAR_MANUFACTURER = "Manufacturer"
CHAR_MODEL = "Model"
CHAR_SERIAL_NUMBER = "SerialNumber"
CHAR_FIRMWARE_REVISION = "FirmwareRevision"
CHAR_ACTIVE = "Active"
CHAR_CURRENT_HEATER_COOLER_STATE = "CurrentHeaterCoolerState"
CHAR_TARGET_HEATER_COOLER_STATE = "TargetHeaterCoolerState"
CHAR_CURRENT_TEMPERATURE = "CurrentTemperature"
CHAR_COOLING_THRESHOLD_TEMPERATURE = "CoolingThresholdTemperature"
CHAR_HEATING_THRESHOLD_TEMPERATURE = "HeatingThresholdTemperature"
CHAR_ROTATION_SPEED = "RotationSpeed"
CHAR_SWING_MODE = "SwingMode"
CHAR_TEMPERATURE_DISPLAY_UNITS = "TemperatureDisplayUnits"
CHAR_CURRENT_HUMIDIFIER_DEHUMIDIFIER_STATE = "CurrentHumidifierDehumidifierState"
CHAR_TARGET_HUMIDIFIER_DEHUMIDIFIER_STATE = "TargetHumidifierDehumidifierState"
CHAR_CURRENT_RELATIVE_HUMIDITY = "CurrentRelativeHumidity"
CHAR_DEHUMIDIFIER_THRESHOLD = "RelativeHumidityDehumidifierThreshold"
CHAR_WATER_LEVEL = "WaterLevel"

FAN_SERVICE_NAME = "Fan Mode"
OUTDOOR_TEMPERATURE_SERVICE_NAME = "Outdoor Temperature"

MODEL_NAMES = {
    MideaDeviceType.AIR_CONDITIONER: "Air Conditioner",
    MideaDeviceType.DEHUMIDIFIER: "Dehumidifier",
}
MODEL_UNDEFINED = "Undefined"

SWING_MODE_OVERRIDE_MAP = {
    "Vertical": MideaSwingMode.VERTICAL,
    "Horizontal": MideaSwingMode.HORIZONTAL,
    "Both": MideaSwingMode.BOTH,
}
SWING_MODE_OVERRIDE_OPTIONS = ["None", *SWING_MODE_OVERRIDE_MAP]

# Native fan speed -> RotationSpeed percentage, anything else reads as 100
ROTATION_SPEED_MAP = {
    FAN_SPEED_LOW: 25,
    FAN_SPEED_MEDIUM: 50,
    FAN_SPEED_HIGH: 75,
}
# Upper bound of each percentage bucket -> native fan speed
ROTATION_SPEED_BUCKETS = (
    (25, FAN_SPEED_LOW),
    (50, FAN_SPEED_MEDIUM),
    (75, FAN_SPEED_HIGH),
)

WIND_SPEED_MAP = {
    FAN_SPEED_LOW: 30,
    FAN_SPEED_MEDIUM: 60,
    FAN_SPEED_HIGH: 100,
}
WIND_SPEED_BUCKETS = (
    (30, FAN_SPEED_LOW),
    (60, FAN_SPEED_MEDIUM),
)

TARGET_HEATER_COOLER_STATE_MAP = {
    TargetHeaterCoolerState.AUTO: MideaOperationalMode.AUTO,
    TargetHeaterCoolerState.HEAT: MideaOperationalMode.HEATING,
    TargetHeaterCoolerState.COOL: MideaOperationalMode.COOLING,
}
TARGET_HEATER_COOLER_STATE_REVERSE_MAP = {
    value: key for key, value in TARGET_HEATER_COOLER_STATE_MAP.items()
}

# Device-reported attributes that an inbound status report may overwrite
DEVICE_STATUS_FIELDS = frozenset(
    {
        "power_state",
        "operational_mode",
        "target_temperature",
        "indoor_temperature",
        "outdoor_temperature",
        "use_fahrenheit",
        "fan_speed",
        "swing_mode",
        "eco_mode",
        "turbo_mode",
        "current_humidity",
        "target_humidity",
        "water_level",
    }
)
