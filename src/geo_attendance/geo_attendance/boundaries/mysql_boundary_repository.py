from __future__ import annotations
import json
import logging
from typing import Any, Dict, Sequence
from ..common.datetime_utils import get_zone
from ..core.constants import DEFAULT_TIMEZONE
from ..core.enums import ShapeKind
from ..core.exceptions import ConfigurationError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall
from ..geometry.model import Coordinate
from .model import Boundary, CircleShape, PolygonShape, WorkingHours, parse_ring, parse_working_days
from .repository import BoundaryRepository
logger = logging.getLogger(__name__)
_SELECT = """
    SELECT boundary_id, organization_id, name, shape_type, center_lat, center_lon, radius_m,
           polygon, working_hours, working_days, is_active, timezone
    FROM boundaries
"""
def boundary_from_row(row: Dict[str, Any], *, default_timezone: str = DEFAULT_TIMEZONE) -> Boundary:
    shape_type = ShapeKind(str(row.get("shape_type") or ShapeKind.CIRCLE.value).lower())
    if shape_type is ShapeKind.POLYGON:
        points = row.get("polygon")
        if isinstance(points, (str, bytes)):
            points = json.loads(points)
        shape = PolygonShape(ring=parse_ring(points or []))
    else:
        if row.get("center_lat") is None or row.get("center_lon") is None:
            raise ConfigurationError(f"Boundary {row.get('boundary_id')} has no center")
        shape = CircleShape(
            center=Coordinate(latitude=float(row["center_lat"]), longitude=float(row["center_lon"])),
            radius_meters=float(row.get("radius_m") or 0),
        )
    tz_name = row.get("timezone") or default_timezone
    get_zone(tz_name)
    return Boundary(
        boundary_id=int(row["boundary_id"]),
        organization_id=int(row["organization_id"]),
        name=row.get("name") or "",
        shape=shape,
        working_hours=WorkingHours.parse(row.get("working_hours")),
        working_days=parse_working_days(row.get("working_days")),
        active=bool(row.get("is_active", True)),
        timezone=tz_name,
    )
class MySQLBoundaryRepository(BoundaryRepository):
    def __init__(self, conn_factory: DatabaseConnection, *, default_timezone: str = DEFAULT_TIMEZONE):
        self._conn_factory = conn_factory
        self._default_timezone = default_timezone
    def list_active_boundaries(self, organization_id: int) -> Sequence[Boundary]:
        with db_cursor(self._conn_factory, read_only=True) as (_, cur):
            cur.execute(
                _SELECT
                + """
                WHERE organization_id=%s AND is_active=1
                ORDER BY sort_order ASC, boundary_id ASC
                """,
                (int(organization_id),),
            )
            rows = fetchall(cur)
        boundaries = []
        for r in rows:
            try:
                boundaries.append(boundary_from_row(r, default_timezone=self._default_timezone))
            except (ConfigurationError, ValueError, KeyError, TypeError) as e:
                logger.warning("Skipping unreadable boundary %s: %s", r.get("boundary_id"), e)
        return boundaries
