from __future__ import annotations

import logging
from typing import Optional, Protocol

import requests

from ..attendance.model import LocationSample, SubmissionResult
from ..attendance.service import AttendanceService
from ..core.constants import DEFAULT_SUBMIT_TIMEOUT_SECONDS
from ..core.exceptions import PersistenceError, SampleRejectedError, SubmissionError, ValidationError

logger = logging.getLogger(__name__)

# Validation answers from the backend. Any other 4xx (auth, routing, throttling)
# says nothing about the sample itself, so it stays queued.
_REJECTED_STATUSES = {400, 422}


class Submitter(Protocol):
    """Hands a sample to the attendance pipeline.

    Raises ``SubmissionError`` when the outcome is unknown (retry later) and
    ``SampleRejectedError`` when the backend refused the sample for good.
    """

    def submit(self, sample: LocationSample) -> SubmissionResult:
        raise NotImplementedError


class LocalSubmitter(Submitter):
    """In-process submitter around ``AttendanceService``."""

    def __init__(self, service: AttendanceService):
        self._service = service

    def submit(self, sample: LocationSample) -> SubmissionResult:
        try:
            return self._service.submit(sample)
        except ValidationError as e:
            raise SampleRejectedError(str(e)) from e
        except PersistenceError as e:
            raise SubmissionError(str(e)) from e


class HttpSubmitter(Submitter):
    """Posts samples to ``POST {base_url}/locations/track``."""

    def __init__(
        self,
        base_url: str,
        *,
        token: Optional[str] = None,
        timeout: float = DEFAULT_SUBMIT_TIMEOUT_SECONDS,
        session: Optional[requests.Session] = None,
    ):
        self._url = base_url.rstrip("/") + "/locations/track"
        self._timeout = timeout
        self._session = session or requests.Session()
        self._headers = {"Content-Type": "application/json"}
        if token:
            self._headers["Authorization"] = f"Bearer {token}"

    def submit(self, sample: LocationSample) -> SubmissionResult:
        try:
            response = self._session.post(
                self._url,
                json=sample.to_dict(),
                headers=self._headers,
                timeout=self._timeout,
            )
        except requests.exceptions.Timeout as e:
            raise SubmissionError(f"Timed out after {self._timeout}s") from e
        except requests.exceptions.RequestException as e:
            raise SubmissionError(f"Network error: {e}") from e

        status = response.status_code
        if status in _REJECTED_STATUSES:
            raise SampleRejectedError(f"Rejected with HTTP {status}: {_message(response)}")
        if status >= 300:
            raise SubmissionError(f"HTTP {status}: {_message(response)}")

        try:
            return SubmissionResult.from_dict(response.json())
        except (ValueError, KeyError, TypeError) as e:
            raise SubmissionError("Malformed response from backend") from e


def _message(response: requests.Response) -> str:
    try:
        return str(response.json().get("message", ""))
    except (ValueError, AttributeError):
        return response.text[:200]
