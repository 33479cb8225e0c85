from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

from .attendance.mysql_attendance_repository import MySQLAttendanceEventRepository
from .attendance.sequencer import UserSequencer
from .attendance.service import AttendanceService
from .attendance.state_machine import AttendanceStateMachine
from .boundaries.mysql_boundary_repository import MySQLBoundaryRepository
from .boundaries.resolver import GeofenceMembershipResolver
from .core.constants import DEFAULT_TIMEZONE
from .database.connection import DBConfig, DatabaseConnection
from .policy.working_window import WorkingWindowPolicy
from .users.mysql_user_repository import MySQLUserRepository


@dataclass(frozen=True)
class Container:
    conn: DatabaseConnection

    users_repo: MySQLUserRepository
    boundaries_repo: MySQLBoundaryRepository
    events_repo: MySQLAttendanceEventRepository

    attendance_service: AttendanceService


def build_container(*, db_config: Mapping[str, Any], default_timezone: str = DEFAULT_TIMEZONE) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_mapping(db_config))

    users_repo = MySQLUserRepository(conn)
    boundaries_repo = MySQLBoundaryRepository(conn, default_timezone=default_timezone)
    events_repo = MySQLAttendanceEventRepository(conn)

    attendance_service = AttendanceService(
        events_repo,
        boundaries_repo,
        users_repo,
        resolver=GeofenceMembershipResolver(),
        state_machine=AttendanceStateMachine(WorkingWindowPolicy()),
        sequencer=UserSequencer(),
    )

    return Container(
        conn=conn,
        users_repo=users_repo,
        boundaries_repo=boundaries_repo,
        events_repo=events_repo,
        attendance_service=attendance_service,
    )
