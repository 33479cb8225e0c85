"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

EARTH_RADIUS_METERS = 6_371_000.0
POLYGON_EDGE_TOLERANCE_METERS = 0.05

DEFAULT_TIMEZONE = "UTC"
DEFAULT_HISTORY_LIMIT = 50
MAX_HISTORY_LIMIT = 500

DEFAULT_TRACKING_INTERVAL_SECONDS = 60
DEFAULT_SYNC_INTERVAL_SECONDS = 60
DEFAULT_SUBMIT_TIMEOUT_SECONDS = 10.0

STALE_SAMPLE_REASON = "Stale sample"
