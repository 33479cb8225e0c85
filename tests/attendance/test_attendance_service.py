from datetime import datetime, timedelta, timezone
from zoneinfo import ZoneInfo

import pytest

from src.geo_attendance.geo_attendance.attendance.model import LocationSample
from src.geo_attendance.geo_attendance.attendance.service import AttendanceService
from src.geo_attendance.geo_attendance.core.enums import EventType
from src.geo_attendance.geo_attendance.core.exceptions import PersistenceError, ValidationError

IST = ZoneInfo("Asia/Kolkata")
OFFICE = (12.9716, 77.5946)
FAR_AWAY = (12.9800, 77.6100)


def _sample(point, at, user_id=7):
    return LocationSample.create(
        user_id=user_id,
        latitude=point[0],
        longitude=point[1],
        accuracy_meters=8,
        captured_at=at,
    )


def test_bengaluru_office_day(service, boundaries_repo, events_repo, make_boundary):
    boundaries_repo.boundaries[:] = [make_boundary(name="Bengaluru Office", timezone="Asia/Kolkata")]

    arrive = service.submit(_sample(OFFICE, datetime(2024, 1, 1, 9, 5, tzinfo=IST)))
    leave = service.submit(_sample(FAR_AWAY, datetime(2024, 1, 1, 18, 30, tzinfo=IST)))

    assert arrive.event.event_type is EventType.ENTER
    assert arrive.event.boundary_id == 1
    assert arrive.is_working_hours is True
    assert arrive.is_working_day is True
    assert arrive.within_any_boundary == (1,)

    assert leave.event.event_type is EventType.EXIT
    assert leave.event.boundary_id == 1
    assert leave.is_working_hours is False
    assert leave.is_working_day is True
    assert leave.within_any_boundary == ()

    assert [e.event_type for e in events_repo.events] == [EventType.ENTER, EventType.EXIT]


def test_events_follow_capture_order(service, events_repo):
    t1 = datetime(2024, 1, 1, 10, 0, tzinfo=timezone.utc)

    results = [
        service.submit(_sample(OFFICE, t1)),
        service.submit(_sample(OFFICE, t1 + timedelta(minutes=1))),
        service.submit(_sample(FAR_AWAY, t1 + timedelta(minutes=2))),
    ]

    assert [r.event.event_type if r.event else None for r in results] == [EventType.ENTER, None, EventType.EXIT]
    assert [e.occurred_at for e in events_repo.events] == [t1, t1 + timedelta(minutes=2)]


def test_late_sample_is_reported_stale(service, events_repo):
    t1 = datetime(2024, 1, 1, 10, 0, tzinfo=timezone.utc)
    service.submit(_sample(OFFICE, t1))

    late = service.submit(_sample(FAR_AWAY, t1 - timedelta(minutes=10)))

    assert late.event is None
    assert late.suppressed_reason == "Stale sample"
    assert len(events_repo.events) == 1


def test_stale_sample_is_detected_from_stored_events(events_repo, boundaries_repo, users_repo):
    t1 = datetime(2024, 1, 1, 10, 0, tzinfo=timezone.utc)
    AttendanceService(events_repo, boundaries_repo, users_repo).submit(_sample(OFFICE, t1))

    # A fresh process has no in-memory high-water mark.
    restarted = AttendanceService(events_repo, boundaries_repo, users_repo)
    late = restarted.submit(_sample(FAR_AWAY, t1 - timedelta(minutes=10)))

    assert late.event is None
    assert late.suppressed_reason == "Stale sample"


def test_failed_write_does_not_advance_state(service, events_repo):
    t1 = datetime(2024, 1, 1, 10, 0, tzinfo=timezone.utc)
    events_repo.fail_writes = True

    with pytest.raises(PersistenceError):
        service.submit(_sample(OFFICE, t1))
    assert events_repo.events == []

    events_repo.fail_writes = False
    retried = service.submit(_sample(OFFICE, t1))

    assert retried.event.event_type is EventType.ENTER
    assert retried.event.occurred_at == t1


def test_window_block_is_reported(service, events_repo):
    saturday = datetime(2024, 1, 6, 11, 0, tzinfo=timezone.utc)

    result = service.submit(_sample(OFFICE, saturday))

    assert result.event is None
    assert result.within_any_boundary == (1,)
    assert result.is_working_day is False
    assert result.suppressed_reason == "Not a working day (Saturday)"
    assert events_repo.events == []


def test_unknown_user_is_rejected(service):
    with pytest.raises(ValidationError):
        service.submit(_sample(OFFICE, datetime(2024, 1, 1, 10, 0, tzinfo=timezone.utc), user_id=404))


def test_naive_capture_time_is_treated_as_utc(service):
    result = service.submit(_sample(OFFICE, datetime(2024, 1, 1, 10, 0)))

    assert result.event.occurred_at == datetime(2024, 1, 1, 10, 0, tzinfo=timezone.utc)


def test_history_newest_first(service):
    t1 = datetime(2024, 1, 1, 10, 0, tzinfo=timezone.utc)
    service.submit(_sample(OFFICE, t1))
    service.submit(_sample(FAR_AWAY, t1 + timedelta(hours=1)))

    latest = service.history(7, limit=1)
    everything = service.history(7)

    assert [e.event_type for e in latest] == [EventType.EXIT]
    assert [e.event_type for e in everything] == [EventType.EXIT, EventType.ENTER]
    assert [e.event_type for e in service.history(7, limit=5, offset=1)] == [EventType.ENTER]


@pytest.mark.parametrize("limit,offset", [(0, 0), (10, -1)])
def test_history_rejects_bad_paging(service, limit, offset):
    with pytest.raises(ValidationError):
        service.history(7, limit=limit, offset=offset)
