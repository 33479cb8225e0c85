from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Optional

from apscheduler.schedulers.background import BackgroundScheduler

from ..attendance.model import LocationSample, SubmissionResult
from ..attendance.sequencer import UserSequencer
from ..core.constants import DEFAULT_SYNC_INTERVAL_SECONDS, DEFAULT_TRACKING_INTERVAL_SECONDS
from ..core.enums import SubmissionStatus
from ..core.exceptions import LocationUnavailableError, SampleRejectedError, SubmissionError, ValidationError
from ..offline.queue import OfflineQueue
from ..sync.coordinator import SyncCoordinator, SyncReport
from ..sync.submitter import Submitter
from .provider import AlwaysOnline, ConnectivityMonitor, LocationProvider

logger = logging.getLogger(__name__)

SAMPLE_JOB_ID = "location_sampling_job"
SYNC_JOB_ID = "offline_sync_job"


@dataclass(frozen=True)
class TrackOutcome:
    status: SubmissionStatus
    sample: Optional[LocationSample] = None
    result: Optional[SubmissionResult] = None
    error: Optional[str] = None


class LocationTracker:
    """Device-side loop: sample, then submit live or queue for later.

    Samples for the tracked user go out in capture order: while anything is
    still queued a new sample is queued behind it instead of overtaking it,
    and the live path and the drain share one per-user sequencer.
    """

    def __init__(
        self,
        user_id: int,
        provider: LocationProvider,
        submitter: Submitter,
        queue: OfflineQueue,
        *,
        connectivity: ConnectivityMonitor | None = None,
        coordinator: SyncCoordinator | None = None,
        sequencer: UserSequencer | None = None,
        interval_seconds: int = DEFAULT_TRACKING_INTERVAL_SECONDS,
        sync_interval_seconds: int = DEFAULT_SYNC_INTERVAL_SECONDS,
        on_error: Callable[[LocationUnavailableError], None] | None = None,
        scheduler: BackgroundScheduler | None = None,
    ):
        self._user_id = int(user_id)
        self._provider = provider
        self._submitter = submitter
        self._queue = queue
        self._connectivity = connectivity or AlwaysOnline()
        self._sequencer = sequencer or UserSequencer()
        self._coordinator = coordinator or SyncCoordinator(queue, submitter, sequencer=self._sequencer)
        self._interval = int(interval_seconds)
        self._sync_interval = int(sync_interval_seconds)
        self._on_error = on_error
        self._scheduler = scheduler
        self._was_online = True

    @property
    def is_tracking(self) -> bool:
        return self._scheduler is not None and self._scheduler.running

    def start(self) -> None:
        if self.is_tracking:
            logger.info("Tracking already active for user %s", self._user_id)
            return
        self._coordinator.resume()
        self._scheduler = self._scheduler or BackgroundScheduler()
        self._scheduler.add_job(
            self._sample_job,
            "interval",
            seconds=self._interval,
            id=SAMPLE_JOB_ID,
            max_instances=1,
            coalesce=True,
            replace_existing=True,
        )
        self._scheduler.add_job(
            self.sync,
            "interval",
            seconds=self._sync_interval,
            id=SYNC_JOB_ID,
            max_instances=1,
            coalesce=True,
            replace_existing=True,
        )
        self._scheduler.start()
        logger.info("Tracking started for user %s every %ss", self._user_id, self._interval)

    def stop(self) -> None:
        """Cancel future sampling and any running drain; queued samples stay on disk."""
        self._coordinator.cancel()
        if self._scheduler is not None and self._scheduler.running:
            self._scheduler.shutdown(wait=True)
        self._scheduler = None
        logger.info("Tracking stopped for user %s (%s samples queued)", self._user_id, self._queue.size())

    def sample_once(self) -> TrackOutcome:
        """One sampling cycle. Provider failures are raised to the caller."""
        fix = self._provider.current_fix()
        try:
            sample = LocationSample.create(
                user_id=self._user_id,
                latitude=fix.latitude,
                longitude=fix.longitude,
                accuracy_meters=fix.accuracy_meters,
                captured_at=fix.timestamp,
            )
        except ValidationError as e:
            logger.warning("Discarding malformed fix: %s", e)
            return TrackOutcome(status=SubmissionStatus.REJECTED, error=str(e))
        return self.handle_sample(sample)

    def handle_sample(self, sample: LocationSample) -> TrackOutcome:
        online = self._connectivity.is_online()
        if online and not self._was_online:
            logger.info("Connectivity restored, draining offline queue")
            self.sync()
        self._was_online = online

        with self._sequencer.serialize(sample.user_id):
            if not online or self._queue.size() > 0:
                self._queue.enqueue(sample)
                return TrackOutcome(status=SubmissionStatus.QUEUED, sample=sample)

            try:
                result = self._submitter.submit(sample)
            except SampleRejectedError as e:
                logger.error("Sample rejected by backend: %s", e)
                return TrackOutcome(status=SubmissionStatus.REJECTED, sample=sample, error=str(e))
            except SubmissionError as e:
                logger.warning("Failed to track, queueing: %s", e)
                self._queue.enqueue(sample)
                return TrackOutcome(status=SubmissionStatus.QUEUED, sample=sample, error=str(e))

        if result.event:
            logger.info("Attendance event: %s", result.event.event_type.value)
        elif result.suppressed_reason:
            logger.info("Not tracked: %s", result.suppressed_reason)
        return TrackOutcome(status=SubmissionStatus.SUBMITTED, sample=sample, result=result)

    def sync(self) -> SyncReport:
        if not self._connectivity.is_online():
            return SyncReport(synced=0, failed=0, remaining=self._queue.size())
        self._was_online = True
        return self._coordinator.drain()

    def _sample_job(self) -> None:
        try:
            self.sample_once()
        except LocationUnavailableError as e:
            # Fatal for this cycle only; the user has to act (e.g. grant permission).
            logger.error("Location unavailable: %s", e)
            if self._on_error:
                self._on_error(e)
