"""Constants for the Hass2Matter bridge."""

# Hub entity states
STATE_ON = "on"
STATE_OPEN = "open"
STATE_CLOSED = "closed"
STATE_OPENING = "opening"
STATE_CLOSING = "closing"

# Hub color mode sentinel for color temperature
COLOR_MODE_COLOR_TEMP = "color_temp"
COLOR_MODE_ONOFF = "onoff"
COLOR_MODES_HS = ("hs", "xy", "rgb", "rgbw", "rgbww")

# Hub cover supported_features bits
COVER_SUPPORT_OPEN_TILT = 16
COVER_SUPPORT_CLOSE_TILT = 32
COVER_SUPPORT_STOP_TILT = 64
COVER_SUPPORT_SET_TILT_POSITION = 128
COVER_SUPPORT_TILT_MASK = (
    COVER_SUPPORT_OPEN_TILT
    | COVER_SUPPORT_CLOSE_TILT
    | COVER_SUPPORT_STOP_TILT
    | COVER_SUPPORT_SET_TILT_POSITION
)

# Hub actions
ACTION_LIGHT_TURN_ON = "light.turn_on"
ACTION_LIGHT_TURN_OFF = "light.turn_off"
ACTION_COVER_OPEN = "cover.open_cover"
ACTION_COVER_CLOSE = "cover.close_cover"
ACTION_COVER_STOP = "cover.stop_cover"
ACTION_COVER_SET_POSITION = "cover.set_cover_position"
ACTION_COVER_OPEN_TILT = "cover.open_cover_tilt"
ACTION_COVER_CLOSE_TILT = "cover.close_cover_tilt"
ACTION_COVER_SET_TILT_POSITION = "cover.set_cover_tilt_position"

# Color temperature defaults (Kelvin), used only when the hub omits them
DEFAULT_MIN_KELVIN = 2700
DEFAULT_MAX_KELVIN = 6500
DEFAULT_CURRENT_KELVIN = 4000

# Brightness / level ranges
HUB_BRIGHTNESS_MAX = 255
MATTER_LEVEL_MIN = 1
MATTER_LEVEL_MAX = 254
MATTER_HS_MAX = 254
MATTER_XY_MAX = 65279

# Default configuration paths
DEFAULT_CONFIG_FILE = "hass2matter.yaml"
DEFAULT_CONFIG_EXAMPLE_FILE = "hass2matter.yaml.example"

# Timeouts (seconds)
HUB_CONNECT_TIMEOUT = 5.0
HUB_REQUEST_TIMEOUT = 15.0

# Refresh interval (seconds)
SNAPSHOT_REFRESH_INTERVAL = 30

# Delay before re-reading an entity after an action (seconds)
ACTION_CONFIRM_DELAY = 1.0
