from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict, Optional, Sequence

import mysql.connector

from ..common.datetime_utils import ensure_aware
from ..core.enums import EventType
from ..core.exceptions import PersistenceError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from ..geometry.model import Coordinate
from .model import AttendanceEvent
from .repository import AttendanceEventRepository

_COLUMNS = """
    event_id, user_id, boundary_id, event_type, occurred_at, latitude, longitude,
    accuracy_m, is_working_hours, is_working_day
"""


def _to_db_time(value: datetime) -> datetime:
    # Stored as naive UTC in DATETIME(6).
    return ensure_aware(value).astimezone(timezone.utc).replace(tzinfo=None)


def _event_from_row(r: Dict[str, Any]) -> AttendanceEvent:
    return AttendanceEvent(
        event_id=int(r["event_id"]),
        user_id=int(r["user_id"]),
        boundary_id=int(r["boundary_id"]),
        event_type=EventType(r["event_type"]),
        occurred_at=ensure_aware(r["occurred_at"]),
        location=Coordinate(latitude=float(r["latitude"]), longitude=float(r["longitude"])),
        is_working_hours=bool(r["is_working_hours"]),
        is_working_day=bool(r["is_working_day"]),
        accuracy_meters=float(r["accuracy_m"]) if r.get("accuracy_m") is not None else None,
    )


class MySQLAttendanceEventRepository(AttendanceEventRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_last_event(self, user_id: int) -> Optional[AttendanceEvent]:
        try:
            with db_cursor(self._conn_factory, read_only=True) as (_, cur):
                cur.execute(
                    f"""
                    SELECT {_COLUMNS}
                    FROM attendance_events
                    WHERE user_id=%s
                    ORDER BY event_id DESC
                    LIMIT 1
                    """,
                    (int(user_id),),
                )
                r = fetchone(cur)
        except mysql.connector.Error as e:
            raise PersistenceError(f"Could not read last event for user {user_id}") from e
        return _event_from_row(r) if r else None

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
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO attendance_events
                        (user_id, boundary_id, event_type, occurred_at, latitude, longitude,
                         accuracy_m, is_working_hours, is_working_day)
                    VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s)
                    """,
                    (
                        int(user_id),
                        int(boundary_id),
                        event_type.value,
                        _to_db_time(occurred_at),
                        location.latitude,
                        location.longitude,
                        accuracy_meters,
                        int(bool(is_working_hours)),
                        int(bool(is_working_day)),
                    ),
                )
                event_id = int(cur.lastrowid)
        except mysql.connector.Error as e:
            raise PersistenceError(f"Could not store {event_type.value} event for user {user_id}") from e

        return AttendanceEvent(
            event_id=event_id,
            user_id=int(user_id),
            boundary_id=int(boundary_id),
            event_type=event_type,
            occurred_at=ensure_aware(occurred_at),
            location=location,
            is_working_hours=bool(is_working_hours),
            is_working_day=bool(is_working_day),
            accuracy_meters=accuracy_meters,
        )

    def list_for_user(self, user_id: int, *, limit: int, offset: int = 0) -> Sequence[AttendanceEvent]:
        with db_cursor(self._conn_factory, read_only=True) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_events
                WHERE user_id=%s
                ORDER BY event_id DESC
                LIMIT %s OFFSET %s
                """,
                (int(user_id), int(limit), int(offset)),
            )
            return [_event_from_row(r) for r in fetchall(cur)]
