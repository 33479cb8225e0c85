from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..boundaries.model import Boundary
from ..common.datetime_utils import to_local
from ..core.enums import Weekday


@dataclass(frozen=True)
class WindowCheck:
    is_working_hours: bool
    is_working_day: bool
    reason: Optional[str] = None

    @property
    def on_duty(self) -> bool:
        return self.is_working_hours and self.is_working_day


class WorkingWindowPolicy:
    """Decides whether an instant counts as on duty for a boundary.

    Missing configuration means "never": a boundary without working hours or
    with no working days never opens an ENTER.
    """

    def is_within_working_hours(self, instant: datetime, boundary: Boundary) -> bool:
        hours = boundary.working_hours
        if hours is None:
            return False
        local = to_local(instant, boundary.timezone)
        t = local.hour * 60 + local.minute
        if hours.start_minute <= hours.end_minute:
            return hours.start_minute <= t <= hours.end_minute
        # Overnight window, e.g. 22:00 - 06:00.
        return t >= hours.start_minute or t <= hours.end_minute

    def is_working_day(self, instant: datetime, boundary: Boundary) -> bool:
        if not boundary.working_days:
            return False
        local = to_local(instant, boundary.timezone)
        return Weekday(local.weekday()) in boundary.working_days

    def evaluate(self, instant: datetime, boundary: Boundary) -> WindowCheck:
        in_hours = self.is_within_working_hours(instant, boundary)
        in_days = self.is_working_day(instant, boundary)

        reason = None
        if not in_hours:
            if boundary.working_hours is None:
                reason = "No working hours configured"
            else:
                reason = f"Outside working hours ({boundary.working_hours.label})"
        if not in_days:
            if not boundary.working_days:
                reason = "No working days configured"
            else:
                day = Weekday(to_local(instant, boundary.timezone).weekday())
                reason = f"Not a working day ({day.label})"

        return WindowCheck(is_working_hours=in_hours, is_working_day=in_days, reason=reason)
