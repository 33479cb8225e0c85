from __future__ import annotations

import logging
import threading
from dataclasses import dataclass

from ..attendance.sequencer import UserSequencer
from ..core.exceptions import SampleRejectedError, SubmissionError
from ..offline.queue import OfflineQueue
from .submitter import Submitter

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SyncReport:
    synced: int
    failed: int
    remaining: int
    rejected: int = 0


class SyncCoordinator:
    """Replays queued samples, oldest first, through the live submission path.

    An item leaves the queue only after the backend has answered for it. The
    first failure ends the pass so nothing behind it is sent ahead of it.
    """

    def __init__(self, queue: OfflineQueue, submitter: Submitter, *, sequencer: UserSequencer | None = None):
        self._queue = queue
        self._submitter = submitter
        self._sequencer = sequencer or UserSequencer()
        self._drain_lock = threading.Lock()
        self._cancelled = threading.Event()

    def cancel(self) -> None:
        self._cancelled.set()

    def resume(self) -> None:
        self._cancelled.clear()

    @property
    def cancelled(self) -> bool:
        return self._cancelled.is_set()

    def drain(self) -> SyncReport:
        # One pass at a time; a second caller just reports the current size.
        if not self._drain_lock.acquire(blocking=False):
            return SyncReport(synced=0, failed=0, remaining=self._queue.size())
        try:
            return self._drain()
        finally:
            self._drain_lock.release()

    def _drain(self) -> SyncReport:
        items = self._queue.drain()
        if not items:
            return SyncReport(synced=0, failed=0, remaining=0)

        logger.info("Syncing %s queued locations", len(items))
        synced = failed = rejected = 0

        for item in items:
            if self._cancelled.is_set():
                logger.info("Sync cancelled with %s items left", len(items) - synced - rejected)
                break

            with self._sequencer.serialize(item.sample.user_id):
                try:
                    result = self._submitter.submit(item.sample)
                except SampleRejectedError as e:
                    logger.error("Queued sample %s rejected by backend, dropping it: %s", item.item_id, e)
                    self._queue.remove(item)
                    rejected += 1
                    continue
                except SubmissionError as e:
                    self._queue.mark_failed(item, str(e))
                    failed += 1
                    logger.warning("Failed to sync queued sample %s (%s), will retry", item.item_id, e)
                    break

                self._queue.remove(item)
                synced += 1
                if result.event:
                    logger.info("Queued sample %s produced %s", item.item_id, result.event.event_type.value)

        remaining = self._queue.size()
        logger.info("Sync complete: %s synced, %s failed, %s remaining", synced, failed, remaining)
        return SyncReport(synced=synced, failed=failed, remaining=remaining, rejected=rejected)
