from homeassistant.const import Platform

DOMAIN = "systemair_ventilator"
PLATFORMS = [Platform.FAN, Platform.SENSOR, Platform.SWITCH]

MANUFACTURER = "Systemair"
DEFAULT_NAME = "Ventilator"

REQUEST_TIMEOUT_SEC = 20
RETRY_MAX_ATTEMPTS = 3
RETRY_DELAY_SEC = 1.0  # fixed pause, no backoff
REFRESH_RESET_DELAY_SEC = 1.0

# Device registers
REG_FAN_LEVEL = 1130  # 0 = off, 2..4 = speed level
REG_REFRESH_MODE = 1161
REG_TIMER = 1110

REFRESH_MODE_COMMAND = 4
TIMER_READ_COUNT = 2

LEVEL_OFF = 0
LEVEL_LOW = 2
LEVEL_NORMAL = 3
LEVEL_HIGH = 4

# Device level -> percentage shown in Home Assistant
LEVEL_TO_PERCENT = {
    LEVEL_LOW: 25,
    LEVEL_NORMAL: 45,
    LEVEL_HIGH: 70,
}
# Inclusive upper bound of each percentage bucket
PERCENT_BUCKETS = [
    (34, LEVEL_LOW),
    (57, LEVEL_NORMAL),
    (100, LEVEL_HIGH),
]

UPDATE_INTERVAL_SEC = 30
