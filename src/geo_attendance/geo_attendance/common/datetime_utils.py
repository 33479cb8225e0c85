from __future__ import annotations

from datetime import datetime, timezone
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from ..core.exceptions import ConfigurationError, ValidationError


def now_utc() -> datetime:
    """Current UTC time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now(timezone.utc)


def ensure_aware(value: datetime) -> datetime:
    """Naive instants are interpreted as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def parse_iso_instant(value: str) -> datetime:
    """Parse an ISO-8601 instant (``Z`` suffix accepted) into an aware datetime."""
    if not value or not str(value).strip():
        raise ValidationError("capturedAt is required")
    text = str(value).strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        return ensure_aware(datetime.fromisoformat(text))
    except ValueError as e:
        raise ValidationError(f"capturedAt is not an ISO-8601 instant: {value!r}") from e


def format_iso_instant(value: datetime) -> str:
    return ensure_aware(value).astimezone(timezone.utc).isoformat().replace("+00:00", "Z")


def get_zone(tz_name: str) -> ZoneInfo:
    try:
        return ZoneInfo(tz_name)
    except (ZoneInfoNotFoundError, ValueError) as e:
        raise ConfigurationError(f"Unknown timezone: {tz_name!r}") from e


def to_local(instant: datetime, tz_name: str) -> datetime:
    return ensure_aware(instant).astimezone(get_zone(tz_name))


def parse_hhmm(value: str) -> int:
    """``"09:30"`` -> minutes since midnight."""
    parts = str(value).strip().split(":")
    if len(parts) < 2:
        raise ConfigurationError(f"Invalid time of day: {value!r}")
    try:
        hours = int(parts[0])
        minutes = int(parts[1])
    except ValueError as e:
        raise ConfigurationError(f"Invalid time of day: {value!r}") from e
    if not (0 <= hours <= 23 and 0 <= minutes <= 59):
        raise ConfigurationError(f"Invalid time of day: {value!r}")
    return hours * 60 + minutes


def format_hhmm(minutes: int) -> str:
    return f"{minutes // 60:02d}:{minutes % 60:02d}"
