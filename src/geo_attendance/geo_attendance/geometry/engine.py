"""Geometric containment tests used for geofencing.

Distances use the haversine formula on a spherical Earth, which is accurate
to well under a meter at office-geofence scales. Polygon containment projects
the ring onto a local equirectangular plane centred on the tested point and
ray-casts from the origin, so the result follows the geodesic shape closely
for rings up to a few kilometres across.
"""

from __future__ import annotations

import math
from typing import Sequence

from ..core.constants import EARTH_RADIUS_METERS, POLYGON_EDGE_TOLERANCE_METERS
from ..core.exceptions import ConfigurationError
from .model import Coordinate


def distance_meters(a: Coordinate, b: Coordinate) -> float:
    """Great-circle distance between two coordinates in meters."""
    lat1 = math.radians(a.latitude)
    lat2 = math.radians(b.latitude)
    dlat = lat2 - lat1
    dlon = math.radians(b.longitude - a.longitude)

    h = math.sin(dlat / 2) ** 2 + math.cos(lat1) * math.cos(lat2) * math.sin(dlon / 2) ** 2
    return 2 * EARTH_RADIUS_METERS * math.asin(min(1.0, math.sqrt(h)))


def point_in_circle(point: Coordinate, center: Coordinate, radius_meters: float) -> bool:
    """True when ``point`` is within ``radius_meters`` of ``center`` (inclusive)."""
    if radius_meters is None or radius_meters <= 0:
        raise ConfigurationError(f"Circle radius must be positive, got {radius_meters!r}")
    return distance_meters(point, center) <= radius_meters


def normalize_ring(ring: Sequence[Coordinate]) -> list[Coordinate]:
    """Drop an explicit closing vertex and validate the vertex count."""
    vertices = list(ring or [])
    if len(vertices) >= 2 and vertices[0] == vertices[-1]:
        vertices = vertices[:-1]
    if len(set(vertices)) < 3:
        raise ConfigurationError(f"Polygon requires at least 3 points, got {len(vertices)}")
    return vertices


def point_in_polygon(point: Coordinate, ring: Sequence[Coordinate]) -> bool:
    """True when ``point`` lies inside ``ring`` or on one of its edges."""
    vertices = normalize_ring(ring)
    projected = [_project(point, v) for v in vertices]

    inside = False
    count = len(projected)
    for i in range(count):
        x1, y1 = projected[i]
        x2, y2 = projected[(i + 1) % count]

        if _distance_to_segment(x1, y1, x2, y2) <= POLYGON_EDGE_TOLERANCE_METERS:
            return True

        # Ray along +x from the origin.
        if (y1 > 0) != (y2 > 0):
            x_cross = x1 + (0 - y1) * (x2 - x1) / (y2 - y1)
            if x_cross > 0:
                inside = not inside
    return inside


def centroid(ring: Sequence[Coordinate]) -> Coordinate:
    """Vertex average; good enough for convex office footprints."""
    vertices = normalize_ring(ring)
    return Coordinate(
        latitude=sum(v.latitude for v in vertices) / len(vertices),
        longitude=sum(v.longitude for v in vertices) / len(vertices),
    )


def _project(origin: Coordinate, vertex: Coordinate) -> tuple[float, float]:
    dlon = vertex.longitude - origin.longitude
    if dlon > 180:
        dlon -= 360
    elif dlon < -180:
        dlon += 360
    ref_lat = math.radians(origin.latitude)
    x = math.radians(dlon) * math.cos(ref_lat) * EARTH_RADIUS_METERS
    y = math.radians(vertex.latitude - origin.latitude) * EARTH_RADIUS_METERS
    return x, y


def _distance_to_segment(x1: float, y1: float, x2: float, y2: float) -> float:
    dx = x2 - x1
    dy = y2 - y1
    length_sq = dx * dx + dy * dy
    if length_sq == 0:
        return math.hypot(x1, y1)
    t = max(0.0, min(1.0, -(x1 * dx + y1 * dy) / length_sq))
    return math.hypot(x1 + t * dx, y1 + t * dy)
