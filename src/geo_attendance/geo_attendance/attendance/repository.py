from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import EventType
from ..geometry.model import Coordinate
from .model import AttendanceEvent


class AttendanceEventRepository(Protocol):
    """Append-only store of attendance events.

    ``get_last_event`` is the only notion of per-user state the pipeline
    has; implementations must return the most recently appended event.
    """

    def get_last_event(self, user_id: int) -> Optional[AttendanceEvent]:
        raise NotImplementedError

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
        accuracy_meters: Optional[float] = None,
    ) -> AttendanceEvent:
        """Persist and return the stored event; raise ``PersistenceError`` on failure."""

        raise NotImplementedError

    def list_for_user(self, user_id: int, *, limit: int, offset: int = 0) -> Sequence[AttendanceEvent]:
        """Newest first."""

        raise NotImplementedError
