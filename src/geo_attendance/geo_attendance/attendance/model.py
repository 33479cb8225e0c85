from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Mapping, Optional

from ..common.datetime_utils import ensure_aware, format_iso_instant, parse_iso_instant
from ..common.validators import require_accuracy, require_latitude, require_longitude
from ..core.enums import EventType
from ..core.exceptions import ValidationError
from ..geometry.model import Coordinate


@dataclass(frozen=True)
class LocationSample:
    """One timestamped fix from the device's location provider."""

    user_id: int
    latitude: float
    longitude: float
    accuracy_meters: float
    captured_at: datetime

    @property
    def point(self) -> Coordinate:
        return Coordinate(latitude=self.latitude, longitude=self.longitude)

    @classmethod
    def create(
        cls,
        *,
        user_id: Any,
        latitude: Any,
        longitude: Any,
        accuracy_meters: Any = None,
        captured_at: datetime | str,
    ) -> "LocationSample":
        """Validated constructor; malformed samples never enter the pipeline."""
        try:
            uid = int(user_id)
        except (TypeError, ValueError) as e:
            raise ValidationError("userId must be an integer") from e
        if isinstance(captured_at, datetime):
            instant = ensure_aware(captured_at)
        else:
            instant = parse_iso_instant(captured_at)
        return cls(
            user_id=uid,
            latitude=require_latitude(latitude),
            longitude=require_longitude(longitude),
            accuracy_meters=require_accuracy(accuracy_meters),
            captured_at=instant,
        )

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "LocationSample":
        if not isinstance(data, Mapping):
            raise ValidationError("Request body must be a JSON object")
        if data.get("latitude") is None or data.get("longitude") is None:
            raise ValidationError("Latitude and longitude required")
        return cls.create(
            user_id=data.get("userId"),
            latitude=data.get("latitude"),
            longitude=data.get("longitude"),
            accuracy_meters=data.get("accuracyMeters"),
            captured_at=data.get("capturedAt"),
        )

    def to_dict(self) -> dict:
        return {
            "userId": self.user_id,
            "latitude": self.latitude,
            "longitude": self.longitude,
            "accuracyMeters": self.accuracy_meters,
            "capturedAt": format_iso_instant(self.captured_at),
        }


@dataclass(frozen=True)
class AttendanceEvent:
    """Domain entity: an append-only ENTER/EXIT record."""

    event_id: int
    user_id: int
    boundary_id: int
    event_type: EventType
    occurred_at: datetime
    location: Coordinate
    is_working_hours: bool
    is_working_day: bool
    accuracy_meters: Optional[float] = None

    def to_dict(self) -> dict:
        return {
            "id": self.event_id,
            "userId": self.user_id,
            "boundaryId": self.boundary_id,
            "type": self.event_type.value,
            "occurredAt": format_iso_instant(self.occurred_at),
            "location": self.location.to_dict(),
            "isWorkingHours": self.is_working_hours,
            "isWorkingDay": self.is_working_day,
            "accuracyMeters": self.accuracy_meters,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "AttendanceEvent":
        loc = data.get("location") or {}
        return cls(
            event_id=int(data["id"]),
            user_id=int(data["userId"]),
            boundary_id=int(data["boundaryId"]),
            event_type=EventType(data["type"]),
            occurred_at=parse_iso_instant(data["occurredAt"]),
            location=Coordinate(latitude=float(loc["latitude"]), longitude=float(loc["longitude"])),
            is_working_hours=bool(data.get("isWorkingHours")),
            is_working_day=bool(data.get("isWorkingDay")),
            accuracy_meters=data.get("accuracyMeters"),
        )


@dataclass(frozen=True)
class SubmissionResult:
    """Outcome of one sample going through the pipeline."""

    event: Optional[AttendanceEvent]
    within_any_boundary: tuple[int, ...]
    is_working_hours: bool
    is_working_day: bool
    suppressed_reason: Optional[str] = None

    @property
    def event_emitted(self) -> bool:
        return self.event is not None

    def to_dict(self) -> dict:
        return {
            "eventEmitted": self.event.to_dict() if self.event else None,
            "withinAnyBoundary": list(self.within_any_boundary),
            "isWorkingHours": self.is_working_hours,
            "isWorkingDay": self.is_working_day,
            "suppressedReason": self.suppressed_reason,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "SubmissionResult":
        event = data.get("eventEmitted")
        return cls(
            event=AttendanceEvent.from_dict(event) if event else None,
            within_any_boundary=tuple(int(b) for b in data.get("withinAnyBoundary") or ()),
            is_working_hours=bool(data.get("isWorkingHours")),
            is_working_day=bool(data.get("isWorkingDay")),
            suppressed_reason=data.get("suppressedReason"),
        )
