"""Constants for the Fade Volume integration."""

DOMAIN = "fade_volume"

# Services
SERVICE_FADE_VOLUME = "fade_volume"

# Service attributes
ATTR_VOLUME = "volume"
ATTR_DURATION = "duration"
ATTR_CURVE = "curve"

# Valid parameters for main service call (targets handled separately by HA)
MAIN_PARAMS = frozenset(
    {
        ATTR_VOLUME,
        ATTR_DURATION,
        ATTR_CURVE,
    }
)

# Curve names
CURVE_LINEAR = "linear"
CURVE_BEZIER = "bezier"
CURVE_LOGARITHMIC = "logarithmic"

# Option keys
OPTION_DEFAULT_VOLUME = "default_volume"
OPTION_DEFAULT_DURATION = "default_duration"
OPTION_DEFAULT_CURVE = "default_curve"
OPTION_LOG_LEVEL = "log_level"

# Log levels (matching Python logging module)
LOG_LEVEL_WARNING = "warning"
LOG_LEVEL_INFO = "info"
LOG_LEVEL_DEBUG = "debug"
DEFAULT_LOG_LEVEL = LOG_LEVEL_WARNING

# Defaults (used when options are not set)
DEFAULT_VOLUME = 0.5
DEFAULT_DURATION = 5  # seconds
DEFAULT_CURVE = CURVE_LOGARITHMIC

# Accepted input ranges
MIN_VOLUME = 0.0
MAX_VOLUME = 1.0
MIN_DURATION = 0.1  # seconds
MAX_DURATION = 60.0  # seconds

# Fixed tick rate of the fade loop (not configurable)
TICK_RATE_HZ = 10
TICK_INTERVAL_S = 1 / TICK_RATE_HZ

# Current and target volume closer than this are treated as equal
VOLUME_TOLERANCE = 0.001

# Timeout for waiting on fade cancellation (seconds)
FADE_CANCEL_TIMEOUT_S = 2.0
