import threading
import time
from datetime import datetime, timedelta, timezone

from src.geo_attendance.geo_attendance.attendance.sequencer import UserSequencer

T0 = datetime(2024, 1, 1, 9, 0, tzinfo=timezone.utc)


def test_high_water_mark_detects_late_samples():
    seq = UserSequencer()

    assert seq.is_stale(7, T0) is False
    seq.mark_processed(7, T0)
    assert seq.is_stale(7, T0 - timedelta(seconds=1)) is True
    assert seq.is_stale(7, T0) is False
    assert seq.is_stale(8, T0 - timedelta(days=1)) is False


def test_mark_processed_never_moves_backwards():
    seq = UserSequencer()
    seq.mark_processed(7, T0)
    seq.mark_processed(7, T0 - timedelta(hours=1))

    assert seq.is_stale(7, T0 - timedelta(minutes=1)) is True


def test_same_user_work_is_serialized():
    seq = UserSequencer()
    active = []
    overlaps = []

    def work():
        with seq.serialize(7):
            active.append(1)
            if len(active) > 1:
                overlaps.append(True)
            time.sleep(0.01)
            active.pop()

    threads = [threading.Thread(target=work) for _ in range(5)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert overlaps == []


def test_other_users_are_not_blocked():
    seq = UserSequencer()
    entered = threading.Event()

    def other_user():
        with seq.serialize(8):
            entered.set()

    with seq.serialize(7):
        t = threading.Thread(target=other_user)
        t.start()
        assert entered.wait(timeout=2)
    t.join()


def test_state_grows_with_users_not_samples():
    seq = UserSequencer()

    for minute in range(100):
        for user_id in (7, 8):
            with seq.serialize(user_id):
                seq.mark_processed(user_id, T0 + timedelta(minutes=minute))

    assert len(seq._locks) == 2
    assert len(seq._high_water) == 2
    assert seq.is_stale(7, T0 + timedelta(minutes=98)) is True
