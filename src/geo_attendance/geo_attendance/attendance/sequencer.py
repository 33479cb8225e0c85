from __future__ import annotations

import threading
from contextlib import contextmanager
from datetime import datetime
from typing import Dict, Hashable, Iterator


class UserSequencer:
    """Serializes work per user without blocking unrelated users.

    Also remembers, per user, the capture time of the newest sample already
    processed so that a sample arriving late (older than that) can be told
    apart instead of being applied out of order.

    Both maps hold one entry per user id and nothing per sample, so memory
    grows with the number of users, not with traffic. Entries are never
    evicted: dropping a lock another thread is waiting on would break the
    per-user ordering.
    """

    def __init__(self):
        self._guard = threading.Lock()
        self._locks: Dict[Hashable, threading.Lock] = {}
        self._high_water: Dict[Hashable, datetime] = {}

    def _lock_for(self, user_id: Hashable) -> threading.Lock:
        with self._guard:
            lock = self._locks.get(user_id)
            if lock is None:
                lock = threading.Lock()
                self._locks[user_id] = lock
            return lock

    @contextmanager
    def serialize(self, user_id: Hashable) -> Iterator[None]:
        lock = self._lock_for(user_id)
        with lock:
            yield

    def is_stale(self, user_id: Hashable, captured_at: datetime) -> bool:
        mark = self._high_water.get(user_id)
        return mark is not None and captured_at < mark

    def mark_processed(self, user_id: Hashable, captured_at: datetime) -> None:
        mark = self._high_water.get(user_id)
        if mark is None or captured_at > mark:
            self._high_water[user_id] = captured_at
