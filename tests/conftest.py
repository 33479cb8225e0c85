from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

import pytest

from src.geo_attendance.geo_attendance.attendance.model import AttendanceEvent
from src.geo_attendance.geo_attendance.attendance.service import AttendanceService
from src.geo_attendance.geo_attendance.boundaries.model import Boundary, CircleShape, WorkingHours
from src.geo_attendance.geo_attendance.core.enums import EventType, Weekday
from src.geo_attendance.geo_attendance.core.exceptions import PersistenceError
from src.geo_attendance.geo_attendance.geometry.model import Coordinate
from src.geo_attendance.geo_attendance.users.model import User

OFFICE = Coordinate(latitude=12.9716, longitude=77.5946)
FAR_AWAY = Coordinate(latitude=12.9800, longitude=77.6100)
WEEKDAYS = frozenset({Weekday.MONDAY, Weekday.TUESDAY, Weekday.WEDNESDAY, Weekday.THURSDAY, Weekday.FRIDAY})


def office_boundary(**overrides) -> Boundary:
    values = dict(
        boundary_id=1,
        organization_id=10,
        name="Head Office",
        shape=CircleShape(center=OFFICE, radius_meters=100),
        working_hours=WorkingHours(start_minute=9 * 60, end_minute=18 * 60),
        working_days=WEEKDAYS,
        active=True,
        timezone="UTC",
    )
    values.update(overrides)
    return Boundary(**values)


@dataclass
class InMemoryUsers:
    users_by_id: dict[int, User]

    def get_by_id(self, user_id: int) -> Optional[User]:
        return self.users_by_id.get(user_id)


@dataclass
class InMemoryBoundaries:
    boundaries: list[Boundary]

    def list_active_boundaries(self, organization_id: int):
        return [b for b in self.boundaries if b.organization_id == organization_id and b.active]


@dataclass
class InMemoryEvents:
    events: list[AttendanceEvent] = field(default_factory=list)
    fail_writes: bool = False

    def get_last_event(self, user_id: int) -> Optional[AttendanceEvent]:
        mine = [e for e in self.events if e.user_id == user_id]
        return mine[-1] if mine else None

    def append_event(
        self,
        *,
        user_id: int,
        boundary_id: int,
        event_type: EventType,
        occurred_at: datetime,
        location: Coordinate,
        is_working_hours: bool,
        is_working_day: bool,
        accuracy_meters=None,
    ) -> AttendanceEvent:
        if self.fail_writes:
            raise PersistenceError("disk full")
        event = AttendanceEvent(
            event_id=len(self.events) + 1,
            user_id=user_id,
            boundary_id=boundary_id,
            event_type=event_type,
            occurred_at=occurred_at,
            location=location,
            is_working_hours=is_working_hours,
            is_working_day=is_working_day,
            accuracy_meters=accuracy_meters,
        )
        self.events.append(event)
        return event

    def list_for_user(self, user_id: int, *, limit: int, offset: int = 0):
        mine = [e for e in reversed(self.events) if e.user_id == user_id]
        return mine[offset : offset + limit]


@pytest.fixture
def users_repo() -> InMemoryUsers:
    return InMemoryUsers({7: User(user_id=7, organization_id=10, full_name="A")})


@pytest.fixture
def boundaries_repo() -> InMemoryBoundaries:
    return InMemoryBoundaries([office_boundary()])


@pytest.fixture
def events_repo() -> InMemoryEvents:
    return InMemoryEvents()


@pytest.fixture
def service(events_repo, boundaries_repo, users_repo) -> AttendanceService:
    return AttendanceService(events_repo, boundaries_repo, users_repo)


@pytest.fixture
def make_boundary():
    """Factory for a 100 m circle at the office, 09:00-18:00 Mon-Fri UTC."""
    return office_boundary
