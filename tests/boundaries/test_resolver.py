from src.geo_attendance.geo_attendance.boundaries.model import CircleShape, PolygonShape
from src.geo_attendance.geo_attendance.boundaries.resolver import GeofenceMembershipResolver
from src.geo_attendance.geo_attendance.geometry.model import Coordinate

OFFICE = Coordinate(latitude=12.9716, longitude=77.5946)
FAR_AWAY = Coordinate(latitude=12.9800, longitude=77.6100)


def test_point_inside_single_boundary(make_boundary):
    membership = GeofenceMembershipResolver().resolve(OFFICE, [make_boundary()])

    assert membership.boundary_id == 1
    assert membership.matches == (1,)


def test_no_membership_far_away(make_boundary):
    membership = GeofenceMembershipResolver().resolve(FAR_AWAY, [make_boundary()])

    assert membership.boundary is None
    assert membership.boundary_id is None
    assert membership.matches == ()


def test_first_listed_boundary_wins_when_overlapping(make_boundary):
    sub_zone = make_boundary(boundary_id=2, shape=CircleShape(center=OFFICE, radius_meters=20))
    campus = make_boundary(boundary_id=1, shape=CircleShape(center=OFFICE, radius_meters=500))

    first = GeofenceMembershipResolver().resolve(OFFICE, [sub_zone, campus])
    second = GeofenceMembershipResolver().resolve(OFFICE, [campus, sub_zone])

    assert first.boundary_id == 2
    assert second.boundary_id == 1
    assert set(first.matches) == {1, 2}


def test_inactive_and_foreign_boundaries_are_ignored(make_boundary):
    boundaries = [
        make_boundary(boundary_id=1, active=False),
        make_boundary(boundary_id=2, organization_id=99),
        make_boundary(boundary_id=3),
    ]

    membership = GeofenceMembershipResolver().resolve(OFFICE, boundaries, organization_id=10)

    assert membership.boundary_id == 3
    assert membership.matches == (3,)


def test_malformed_boundary_is_skipped_not_fatal(make_boundary):
    degenerate = make_boundary(
        boundary_id=5,
        shape=PolygonShape(ring=(OFFICE, Coordinate(latitude=12.9717, longitude=77.5946))),
    )
    zero_radius = make_boundary(boundary_id=6, shape=CircleShape(center=OFFICE, radius_meters=0))

    membership = GeofenceMembershipResolver().resolve(OFFICE, [degenerate, zero_radius, make_boundary()])

    assert membership.boundary_id == 1
    assert membership.skipped == (5, 6)


def test_polygon_boundary_membership(make_boundary):
    ring = (
        Coordinate(latitude=12.9706, longitude=77.5936),
        Coordinate(latitude=12.9706, longitude=77.5956),
        Coordinate(latitude=12.9726, longitude=77.5956),
        Coordinate(latitude=12.9726, longitude=77.5936),
    )
    boundary = make_boundary(shape=PolygonShape(ring=ring))

    assert GeofenceMembershipResolver().resolve(OFFICE, [boundary]).boundary_id == 1
    assert GeofenceMembershipResolver().resolve(FAR_AWAY, [boundary]).boundary is None
