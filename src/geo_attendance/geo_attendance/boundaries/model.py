from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Iterable, Optional, Union

from ..common.datetime_utils import format_hhmm, parse_hhmm
from ..core.constants import DEFAULT_TIMEZONE
from ..core.enums import ShapeKind, Weekday
from ..core.exceptions import ConfigurationError
from ..geometry.model import Coordinate


@dataclass(frozen=True)
class WorkingHours:
    """Daily window as minutes since local midnight, both ends inclusive."""

    start_minute: int
    end_minute: int

    @classmethod
    def parse(cls, value: Any) -> Optional["WorkingHours"]:
        """Accept ``{"start": "09:00", "end": "18:00"}`` (or its JSON text)."""
        if value is None or value == "":
            return None
        if isinstance(value, WorkingHours):
            return value
        if isinstance(value, (str, bytes)):
            value = json.loads(value)
        if not isinstance(value, dict) or "start" not in value or "end" not in value:
            raise ConfigurationError(f"Invalid working hours: {value!r}")
        return cls(start_minute=parse_hhmm(value["start"]), end_minute=parse_hhmm(value["end"]))

    @property
    def label(self) -> str:
        return f"{format_hhmm(self.start_minute)} - {format_hhmm(self.end_minute)}"

    def to_dict(self) -> dict:
        return {"start": format_hhmm(self.start_minute), "end": format_hhmm(self.end_minute)}


def parse_working_days(value: Any) -> frozenset[Weekday]:
    """Accept a list of weekday names/numbers (or its JSON text)."""
    if value is None or value == "":
        return frozenset()
    if isinstance(value, (str, bytes)):
        value = json.loads(value)
    try:
        return frozenset(Weekday.parse(v) for v in value)
    except ValueError as e:
        raise ConfigurationError(str(e)) from e


@dataclass(frozen=True)
class CircleShape:
    center: Coordinate
    radius_meters: float

    kind = ShapeKind.CIRCLE

    def to_dict(self) -> dict:
        return {"type": self.kind.value, "center": self.center.to_dict(), "radiusMeters": self.radius_meters}


@dataclass(frozen=True)
class PolygonShape:
    """Ring of vertices, implicitly closed."""

    ring: tuple[Coordinate, ...]

    kind = ShapeKind.POLYGON

    def to_dict(self) -> dict:
        return {"type": self.kind.value, "ring": [c.to_dict() for c in self.ring]}


Shape = Union[CircleShape, PolygonShape]


def parse_ring(points: Iterable[Any]) -> tuple[Coordinate, ...]:
    """Accept ``[[lat, lon], ...]`` or ``[{"latitude": .., "longitude": ..}, ...]``."""
    ring = []
    for p in points or []:
        if isinstance(p, dict):
            ring.append(Coordinate(latitude=float(p["latitude"]), longitude=float(p["longitude"])))
        else:
            lat, lon = p[0], p[1]
            ring.append(Coordinate(latitude=float(lat), longitude=float(lon)))
    return tuple(ring)


@dataclass(frozen=True)
class Boundary:
    """Domain entity: a geofenced workplace.

    Configured by administrators elsewhere; read-only here.
    """

    boundary_id: int
    organization_id: int
    shape: Shape
    working_hours: Optional[WorkingHours] = None
    working_days: frozenset[Weekday] = field(default_factory=frozenset)
    active: bool = True
    name: str = ""
    timezone: str = DEFAULT_TIMEZONE

    def to_dict(self) -> dict:
        return {
            "id": self.boundary_id,
            "organizationId": self.organization_id,
            "name": self.name,
            "shape": self.shape.to_dict(),
            "workingHours": self.working_hours.to_dict() if self.working_hours else None,
            "workingDays": [d.label for d in sorted(self.working_days)],
            "active": self.active,
            "timezone": self.timezone,
        }
