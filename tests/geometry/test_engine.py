import math

import pytest

from src.geo_attendance.geo_attendance.core.exceptions import ConfigurationError
from src.geo_attendance.geo_attendance.geometry.engine import (
    centroid,
    distance_meters,
    point_in_circle,
    point_in_polygon,
)
from src.geo_attendance.geo_attendance.geometry.model import Coordinate

OFFICE = Coordinate(12.9716, 77.5946)

SQUARE = [
    Coordinate(12.9706, 77.5936),
    Coordinate(12.9706, 77.5956),
    Coordinate(12.9726, 77.5956),
    Coordinate(12.9726, 77.5936),
]


def test_one_degree_of_latitude():
    d = distance_meters(Coordinate(0, 0), Coordinate(1, 0))
    assert d == pytest.approx(math.pi / 180 * 6_371_000, abs=0.01)


def test_distance_is_symmetric_and_zero_on_same_point():
    other = Coordinate(12.9800, 77.6100)
    assert distance_meters(OFFICE, other) == pytest.approx(distance_meters(other, OFFICE))
    assert distance_meters(OFFICE, OFFICE) == 0
    assert 1500 < distance_meters(OFFICE, other) < 2100


def test_short_distances_keep_meter_precision():
    # ~0.0009 deg of latitude is ~100 m
    p = Coordinate(OFFICE.latitude + 0.0009, OFFICE.longitude)
    assert distance_meters(OFFICE, p) == pytest.approx(100.07, abs=0.05)


@pytest.mark.parametrize(
    "point",
    [
        Coordinate(12.9716, 77.5946),
        Coordinate(12.9720, 77.5950),
        Coordinate(12.9750, 77.5946),
        Coordinate(12.9800, 77.6100),
    ],
)
def test_point_in_circle_matches_distance(point):
    radius = 120.0
    assert point_in_circle(point, OFFICE, radius) == (distance_meters(point, OFFICE) <= radius)


def test_circle_boundary_is_inclusive():
    p = Coordinate(12.9725, 77.5946)
    exact = distance_meters(p, OFFICE)
    assert point_in_circle(p, OFFICE, exact) is True
    assert point_in_circle(p, OFFICE, exact - 0.001) is False


def test_circle_rejects_non_positive_radius():
    with pytest.raises(ConfigurationError):
        point_in_circle(OFFICE, OFFICE, 0)


def test_polygon_centroid_inside_and_far_point_outside():
    assert point_in_polygon(centroid(SQUARE), SQUARE) is True
    assert point_in_polygon(Coordinate(13.5, 78.0), SQUARE) is False
    assert point_in_polygon(Coordinate(12.9716, 77.5990), SQUARE) is False


def test_polygon_edges_and_vertices_count_as_inside():
    on_edge = Coordinate(12.9706, 77.5946)
    assert point_in_polygon(on_edge, SQUARE) is True
    assert point_in_polygon(SQUARE[2], SQUARE) is True


def test_polygon_accepts_explicitly_closed_ring():
    closed = SQUARE + [SQUARE[0]]
    assert point_in_polygon(OFFICE, closed) is True


def test_concave_polygon_notch_is_outside():
    # L-shape: the north-east quarter of the square is cut out
    ring = [
        Coordinate(12.9706, 77.5936),
        Coordinate(12.9706, 77.5956),
        Coordinate(12.9716, 77.5956),
        Coordinate(12.9716, 77.5946),
        Coordinate(12.9726, 77.5946),
        Coordinate(12.9726, 77.5936),
    ]
    assert point_in_polygon(Coordinate(12.9721, 77.5951), ring) is False
    assert point_in_polygon(Coordinate(12.9711, 77.5951), ring) is True
    assert point_in_polygon(Coordinate(12.9721, 77.5941), ring) is True


@pytest.mark.parametrize(
    "ring",
    [
        [],
        [Coordinate(0, 0), Coordinate(0, 1)],
        [Coordinate(0, 0), Coordinate(0, 1), Coordinate(0, 0)],
        [Coordinate(0, 0), Coordinate(0, 1), Coordinate(0, 1)],
    ],
)
def test_polygon_with_fewer_than_three_points_is_a_configuration_error(ring):
    with pytest.raises(ConfigurationError):
        point_in_polygon(OFFICE, ring)
