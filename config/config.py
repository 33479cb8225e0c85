"""Settings shared by every environment; environment modules override them."""

import os


def _flag(name: str, default: str) -> bool:
    return bool(int(os.getenv(name, default)))


DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "geo_attendance"),
    "connect_timeout": int(os.getenv("DB_CONNECT_TIMEOUT", "10")),
}

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# Local time used for working-hours checks when a boundary has no timezone.
DEFAULT_TIMEZONE = os.getenv("DEFAULT_TIMEZONE", "UTC")

# Device side: sampling cadence is decided here, not by the core.
TRACKING_INTERVAL_SECONDS = int(os.getenv("TRACKING_INTERVAL_SECONDS", "60"))
SYNC_INTERVAL_SECONDS = int(os.getenv("SYNC_INTERVAL_SECONDS", "60"))
SUBMIT_TIMEOUT_SECONDS = float(os.getenv("SUBMIT_TIMEOUT_SECONDS", "10"))
OFFLINE_QUEUE_PATH = os.getenv("OFFLINE_QUEUE_PATH", "var/offline_queue.sqlite3")
API_BASE_URL = os.getenv("API_BASE_URL", "http://localhost:5000/api")
