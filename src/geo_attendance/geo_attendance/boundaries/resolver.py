from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Optional, Sequence

from ..core.exceptions import ConfigurationError
from ..geometry import engine
from ..geometry.model import Coordinate
from .model import Boundary, CircleShape, PolygonShape

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Membership:
    """Result of resolving one point against an organization's boundaries.

    ``boundary`` is the winning boundary (first containing one in input
    order) or ``None``; ``matches`` holds every containing boundary id.
    """

    boundary: Optional[Boundary] = None
    matches: tuple[int, ...] = ()
    skipped: tuple[int, ...] = field(default=())

    @property
    def boundary_id(self) -> Optional[int]:
        return self.boundary.boundary_id if self.boundary else None


def contains(boundary: Boundary, point: Coordinate) -> bool:
    shape = boundary.shape
    if isinstance(shape, CircleShape):
        return engine.point_in_circle(point, shape.center, shape.radius_meters)
    if isinstance(shape, PolygonShape):
        return engine.point_in_polygon(point, shape.ring)
    raise ConfigurationError(f"Boundary {boundary.boundary_id} has an unsupported shape")


class GeofenceMembershipResolver:
    """Picks the boundary a point belongs to.

    Overlapping boundaries (a main office and a sub-zone) are legal; the one
    listed first wins, so callers must pass boundaries in a stable order.
    """

    def resolve(
        self,
        point: Coordinate,
        boundaries: Sequence[Boundary],
        *,
        organization_id: Optional[int] = None,
    ) -> Membership:
        winner: Optional[Boundary] = None
        matches: list[int] = []
        skipped: list[int] = []

        for b in boundaries:
            if not b.active:
                continue
            if organization_id is not None and b.organization_id != organization_id:
                continue
            try:
                inside = contains(b, point)
            except ConfigurationError as e:
                logger.warning("Boundary %s excluded from membership: %s", b.boundary_id, e)
                skipped.append(b.boundary_id)
                continue
            if inside:
                matches.append(b.boundary_id)
                if winner is None:
                    winner = b

        return Membership(boundary=winner, matches=tuple(matches), skipped=tuple(skipped))
