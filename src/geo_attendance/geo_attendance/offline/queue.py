from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..attendance.model import LocationSample
from .model import QueueItem


class OfflineQueue(Protocol):
    """Durable FIFO of samples not yet acknowledged by the backend.

    Items come back strictly in enqueue order and leave only through
    ``remove`` (or an explicit ``clear``).
    """

    def enqueue(self, sample: LocationSample) -> QueueItem:
        raise NotImplementedError

    def peek_oldest(self) -> Optional[QueueItem]:
        raise NotImplementedError

    def drain(self) -> Sequence[QueueItem]:
        """Snapshot of every item, oldest first. Nothing is removed."""

        raise NotImplementedError

    def remove(self, item: QueueItem) -> bool:
        raise NotImplementedError

    def mark_failed(self, item: QueueItem, error: str) -> QueueItem:
        raise NotImplementedError

    def size(self) -> int:
        raise NotImplementedError

    def clear(self) -> int:
        raise NotImplementedError
