"""Internal constants shared across the library."""

BASE_URL = "https://u7oqof8x16.execute-api.us-east-1.amazonaws.com/prod"
DATA_PATH = "/get-data"
TRIGGER_PATH = "/trigger"
AUTH_HEADER = "auth-token"
DEFAULT_RESOLUTION = "1h"

# ------------------------------------------------------------------
# Refresh cadence
# ------------------------------------------------------------------

POLL_INTERVAL_S: float = 15.0
POLLS_PER_CYCLE: int = 5

# ------------------------------------------------------------------
# Unit conversion (millimetres -> display unit)
# ------------------------------------------------------------------

MM_TO_INCH: float = 0.0393701

# ------------------------------------------------------------------
# Soil moisture gauge defaults
# ------------------------------------------------------------------

DEFAULT_MAWD: float = 5.0
DEFAULT_FC: float = 11.0
#: Gauge scale used when a thresholds source exists but a depth has no record.
DEFAULT_MAX_VALUE: float = 15.0
#: Gauge scale used when the snapshot carries no thresholds source at all.
UNCONFIGURED_MAX_VALUE: float = 40.0

# Telemetry sources that must all be non-empty for a snapshot to be usable.
TIME_SERIES_SOURCES: tuple[str, ...] = ("irrimeter", "davis", "campbell")
THRESHOLDS_SOURCE = "soil"
