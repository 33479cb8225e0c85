from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..attendance.model import LocationSample


@dataclass(frozen=True)
class QueueItem:
    """A sample waiting for the backend to acknowledge it."""

    item_id: int
    sample: LocationSample
    enqueued_at: datetime
    retry_count: int = 0
    last_error: Optional[str] = None
