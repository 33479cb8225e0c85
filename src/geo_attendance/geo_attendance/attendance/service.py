from __future__ import annotations

import logging
from typing import Sequence

from ..boundaries.model import Boundary
from ..boundaries.repository import BoundaryRepository
from ..boundaries.resolver import GeofenceMembershipResolver
from ..core.constants import DEFAULT_HISTORY_LIMIT, MAX_HISTORY_LIMIT, STALE_SAMPLE_REASON
from ..core.exceptions import ValidationError
from ..users.repository import UserRepository
from .model import AttendanceEvent, LocationSample, SubmissionResult
from .repository import AttendanceEventRepository
from .sequencer import UserSequencer
from .state_machine import AttendanceStateMachine

logger = logging.getLogger(__name__)


class AttendanceService:
    """The submission pipeline: membership -> working window -> transition -> stored event.

    Live samples and samples replayed from an offline queue both come through
    ``submit``. Work for one user is serialized; different users run in
    parallel.
    """

    def __init__(
        self,
        events: AttendanceEventRepository,
        boundaries: BoundaryRepository,
        users: UserRepository,
        *,
        resolver: GeofenceMembershipResolver | None = None,
        state_machine: AttendanceStateMachine | None = None,
        sequencer: UserSequencer | None = None,
    ):
        self._events = events
        self._boundaries = boundaries
        self._users = users
        self._resolver = resolver or GeofenceMembershipResolver()
        self._machine = state_machine or AttendanceStateMachine()
        self._sequencer = sequencer or UserSequencer()

    def submit(self, sample: LocationSample) -> SubmissionResult:
        user = self._users.get_by_id(sample.user_id)
        if not user or not user.is_active:
            raise ValidationError(f"Unknown user: {sample.user_id}")

        with self._sequencer.serialize(sample.user_id):
            boundaries = list(self._boundaries.list_active_boundaries(user.organization_id))
            membership = self._resolver.resolve(sample.point, boundaries, organization_id=user.organization_id)

            if self._sequencer.is_stale(sample.user_id, sample.captured_at):
                logger.info("Ignoring stale sample for user %s captured at %s", sample.user_id, sample.captured_at)
                return SubmissionResult(
                    event=None,
                    within_any_boundary=membership.matches,
                    is_working_hours=False,
                    is_working_day=False,
                    suppressed_reason=STALE_SAMPLE_REASON,
                )

            last_event = self._events.get_last_event(sample.user_id)
            transition = self._machine.decide(
                sample=sample,
                membership=membership,
                last_event=last_event,
                boundaries=boundaries,
            )

            event = None
            if transition.emits:
                # PersistenceError propagates: no event, no state change, caller retries.
                event = self._events.append_event(
                    user_id=sample.user_id,
                    boundary_id=transition.boundary_id,
                    event_type=transition.event_type,
                    occurred_at=sample.captured_at,
                    location=sample.point,
                    is_working_hours=transition.window.is_working_hours,
                    is_working_day=transition.window.is_working_day,
                    accuracy_meters=sample.accuracy_meters,
                )
                logger.info(
                    "%s boundary %s for user %s at %s",
                    event.event_type.value,
                    event.boundary_id,
                    event.user_id,
                    event.occurred_at,
                )
            elif transition.reason:
                logger.info("No event for user %s: %s", sample.user_id, transition.reason)

            if transition.reason != STALE_SAMPLE_REASON:
                self._sequencer.mark_processed(sample.user_id, sample.captured_at)

            return SubmissionResult(
                event=event,
                within_any_boundary=membership.matches,
                is_working_hours=transition.window.is_working_hours,
                is_working_day=transition.window.is_working_day,
                suppressed_reason=None if event else transition.reason,
            )

    def history(self, user_id: int, *, limit: int = DEFAULT_HISTORY_LIMIT, offset: int = 0) -> Sequence[AttendanceEvent]:
        if limit < 1 or offset < 0:
            raise ValidationError("limit must be positive and offset non-negative")
        return self._events.list_for_user(user_id, limit=min(limit, MAX_HISTORY_LIMIT), offset=offset)

    def list_boundaries(self, organization_id: int) -> Sequence[Boundary]:
        return self._boundaries.list_active_boundaries(organization_id)
