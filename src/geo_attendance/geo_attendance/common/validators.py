from __future__ import annotations

import math

from ..core.exceptions import ValidationError


def require_non_empty(value: str, field_name: str) -> str:
    if value is None or not str(value).strip():
        raise ValidationError(f"{field_name} is required")
    return str(value).strip()


def require_latitude(value: object) -> float:
    lat = _require_number(value, "latitude")
    if lat < -90 or lat > 90:
        raise ValidationError("Latitude must be between -90 and 90 degrees")
    return lat


def require_longitude(value: object) -> float:
    lon = _require_number(value, "longitude")
    if lon < -180 or lon > 180:
        raise ValidationError("Longitude must be between -180 and 180 degrees")
    return lon


def require_accuracy(value: object) -> float:
    if value is None:
        return 0.0
    accuracy = _require_number(value, "accuracy")
    if accuracy < 0:
        raise ValidationError("Accuracy must not be negative")
    return accuracy


def _require_number(value: object, field_name: str) -> float:
    if isinstance(value, bool):
        raise ValidationError(f"{field_name} must be a number")
    try:
        number = float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError) as e:
        raise ValidationError(f"{field_name} must be a number") from e
    if not math.isfinite(number):
        raise ValidationError(f"{field_name} must be finite")
    return number
