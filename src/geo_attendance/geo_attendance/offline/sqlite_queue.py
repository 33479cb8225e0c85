from __future__ import annotations

import logging
import sqlite3
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional, Sequence

from ..attendance.model import LocationSample
from ..common.datetime_utils import format_iso_instant, now_utc, parse_iso_instant
from .model import QueueItem
from .queue import OfflineQueue

logger = logging.getLogger(__name__)

_SCHEMA = """
CREATE TABLE IF NOT EXISTS offline_queue (
    item_id INTEGER PRIMARY KEY AUTOINCREMENT,
    user_id INTEGER NOT NULL,
    latitude REAL NOT NULL,
    longitude REAL NOT NULL,
    accuracy_m REAL NOT NULL,
    captured_at TEXT NOT NULL,
    enqueued_at TEXT NOT NULL,
    retry_count INTEGER NOT NULL DEFAULT 0,
    last_error TEXT
)
"""

_COLUMNS = "item_id, user_id, latitude, longitude, accuracy_m, captured_at, enqueued_at, retry_count, last_error"


def _item_from_row(r: sqlite3.Row) -> QueueItem:
    return QueueItem(
        item_id=int(r["item_id"]),
        sample=LocationSample(
            user_id=int(r["user_id"]),
            latitude=float(r["latitude"]),
            longitude=float(r["longitude"]),
            accuracy_meters=float(r["accuracy_m"]),
            captured_at=parse_iso_instant(r["captured_at"]),
        ),
        enqueued_at=parse_iso_instant(r["enqueued_at"]),
        retry_count=int(r["retry_count"]),
        last_error=r["last_error"],
    )


class SQLiteOfflineQueue(OfflineQueue):
    """Device-side queue kept in a single SQLite file.

    AUTOINCREMENT ids never go backwards, so ``ORDER BY item_id`` is enqueue
    order even after restarts. Every mutation is one transaction taken under
    ``self._lock``.
    """

    def __init__(self, path: str | Path):
        self._path = str(path)
        if self._path != ":memory:":
            Path(self._path).parent.mkdir(parents=True, exist_ok=True)
        self._lock = threading.RLock()
        self._memory_conn: Optional[sqlite3.Connection] = None
        with self._cursor() as cur:
            cur.execute(_SCHEMA)

    def _connect(self) -> sqlite3.Connection:
        if self._path == ":memory:":
            if self._memory_conn is None:
                self._memory_conn = sqlite3.connect(":memory:", check_same_thread=False)
                self._memory_conn.row_factory = sqlite3.Row
            return self._memory_conn
        conn = sqlite3.connect(self._path, timeout=30)
        conn.row_factory = sqlite3.Row
        return conn

    @contextmanager
    def _cursor(self) -> Iterator[sqlite3.Cursor]:
        with self._lock:
            conn = self._connect()
            try:
                cur = conn.cursor()
                try:
                    yield cur
                    conn.commit()
                finally:
                    cur.close()
            except Exception:
                conn.rollback()
                raise
            finally:
                if conn is not self._memory_conn:
                    conn.close()

    def enqueue(self, sample: LocationSample) -> QueueItem:
        enqueued_at = now_utc()
        with self._cursor() as cur:
            cur.execute(
                """
                INSERT INTO offline_queue(user_id, latitude, longitude, accuracy_m, captured_at, enqueued_at)
                VALUES(?,?,?,?,?,?)
                """,
                (
                    sample.user_id,
                    sample.latitude,
                    sample.longitude,
                    sample.accuracy_meters,
                    format_iso_instant(sample.captured_at),
                    format_iso_instant(enqueued_at),
                ),
            )
            item_id = int(cur.lastrowid)
        logger.info("Location queued (item %s, captured %s)", item_id, sample.captured_at)
        return QueueItem(item_id=item_id, sample=sample, enqueued_at=enqueued_at)

    def peek_oldest(self) -> Optional[QueueItem]:
        with self._cursor() as cur:
            cur.execute(f"SELECT {_COLUMNS} FROM offline_queue ORDER BY item_id ASC LIMIT 1")
            r = cur.fetchone()
            return _item_from_row(r) if r else None

    def drain(self) -> Sequence[QueueItem]:
        with self._cursor() as cur:
            cur.execute(f"SELECT {_COLUMNS} FROM offline_queue ORDER BY item_id ASC")
            return [_item_from_row(r) for r in cur.fetchall()]

    def remove(self, item: QueueItem) -> bool:
        with self._cursor() as cur:
            cur.execute("DELETE FROM offline_queue WHERE item_id=?", (item.item_id,))
            return cur.rowcount > 0

    def mark_failed(self, item: QueueItem, error: str) -> QueueItem:
        with self._cursor() as cur:
            cur.execute(
                "UPDATE offline_queue SET retry_count=retry_count+1, last_error=? WHERE item_id=?",
                (error, item.item_id),
            )
            cur.execute(f"SELECT {_COLUMNS} FROM offline_queue WHERE item_id=?", (item.item_id,))
            r = cur.fetchone()
            return _item_from_row(r) if r else item

    def size(self) -> int:
        with self._cursor() as cur:
            cur.execute("SELECT COUNT(*) FROM offline_queue")
            return int(cur.fetchone()[0])

    def clear(self) -> int:
        with self._cursor() as cur:
            cur.execute("DELETE FROM offline_queue")
            removed = cur.rowcount
        logger.warning("Offline queue cleared (%s items)", removed)
        return removed
