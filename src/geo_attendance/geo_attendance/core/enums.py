from __future__ import annotations

from enum import Enum, IntEnum


class EventType(str, Enum):
    """Attendance event kinds stored in the database."""

    ENTER = "ENTER"
    EXIT = "EXIT"


class ShapeKind(str, Enum):
    CIRCLE = "circle"
    POLYGON = "polygon"


class Weekday(IntEnum):
    """Weekdays numbered like ``datetime.weekday()``."""

    MONDAY = 0
    TUESDAY = 1
    WEDNESDAY = 2
    THURSDAY = 3
    FRIDAY = 4
    SATURDAY = 5
    SUNDAY = 6

    @property
    def label(self) -> str:
        return self.name.capitalize()

    @classmethod
    def parse(cls, value: object) -> "Weekday":
        """Accept ``"Monday"``, ``"mon"``, ``0`` or a ``Weekday``."""

        if isinstance(value, Weekday):
            return value
        if isinstance(value, int):
            return cls(value)
        text = str(value).strip().upper()
        for day in cls:
            if day.name == text or day.name[:3] == text:
                return day
        raise ValueError(f"Unknown weekday: {value!r}")


class SubmissionStatus(str, Enum):
    """What happened to a sample handed to the device-side tracker."""

    SUBMITTED = "submitted"
    QUEUED = "queued"
    REJECTED = "rejected"
