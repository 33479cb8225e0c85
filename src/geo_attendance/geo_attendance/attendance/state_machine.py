"""Per-user ENTER/EXIT transition rules.

A user is either OUTSIDE (no open ENTER) or INSIDE(boundary), derived from
the most recent stored event. The machine only decides; storing the event
and thereby advancing the user's state is the pipeline's job.

Rules, for membership M of the current sample and last event L:

1. M is a boundary B and L is absent, an EXIT, or an ENTER for another
   boundary: ENTER for B, but only when the sample instant is inside B's
   working hours and on one of its working days.
2. M is the boundary of the open ENTER: nothing.
3. M is empty and L is an open ENTER for B: EXIT for B, always. An EXIT is
   never gated by the working window, otherwise a user could stay checked
   in forever.
4. M is empty and nothing is open: nothing.

There is one last event per user, so an ENTER for a second boundary
replaces the open one rather than nesting inside it.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence

from ..boundaries.model import Boundary
from ..boundaries.resolver import Membership
from ..core.constants import STALE_SAMPLE_REASON
from ..core.enums import EventType
from ..policy.working_window import WindowCheck, WorkingWindowPolicy
from .model import AttendanceEvent, LocationSample


@dataclass(frozen=True)
class UserState:
    inside_boundary_id: Optional[int] = None

    @property
    def is_inside(self) -> bool:
        return self.inside_boundary_id is not None

    @classmethod
    def from_last_event(cls, last_event: Optional[AttendanceEvent]) -> "UserState":
        if last_event is not None and last_event.event_type is EventType.ENTER:
            return cls(inside_boundary_id=last_event.boundary_id)
        return cls()


@dataclass(frozen=True)
class Transition:
    event_type: Optional[EventType]
    boundary_id: Optional[int]
    window: WindowCheck
    reason: Optional[str] = None

    @property
    def emits(self) -> bool:
        return self.event_type is not None


_NO_WINDOW = WindowCheck(is_working_hours=False, is_working_day=False)


class AttendanceStateMachine:
    def __init__(self, policy: WorkingWindowPolicy | None = None):
        self._policy = policy or WorkingWindowPolicy()

    def decide(
        self,
        *,
        sample: LocationSample,
        membership: Membership,
        last_event: Optional[AttendanceEvent],
        boundaries: Sequence[Boundary] = (),
    ) -> Transition:
        state = UserState.from_last_event(last_event)
        target = membership.boundary

        window = self._policy.evaluate(sample.captured_at, target) if target else _NO_WINDOW

        if last_event is not None and sample.captured_at < last_event.occurred_at:
            return Transition(event_type=None, boundary_id=None, window=window, reason=STALE_SAMPLE_REASON)

        if target is not None:
            if state.inside_boundary_id == target.boundary_id:
                return Transition(event_type=None, boundary_id=target.boundary_id, window=window)
            if not window.on_duty:
                return Transition(event_type=None, boundary_id=target.boundary_id, window=window, reason=window.reason)
            return Transition(event_type=EventType.ENTER, boundary_id=target.boundary_id, window=window)

        if state.is_inside:
            exited = next((b for b in boundaries if b.boundary_id == state.inside_boundary_id), None)
            exit_window = self._policy.evaluate(sample.captured_at, exited) if exited else _NO_WINDOW
            return Transition(event_type=EventType.EXIT, boundary_id=state.inside_boundary_id, window=exit_window)

        return Transition(event_type=None, boundary_id=None, window=window)
