"""Drain a device's offline queue against the backend.

Optionally loads samples first from a JSON-lines file whose lines look like
``{"userId": 1, "latitude": .., "longitude": .., "accuracyMeters": .., "capturedAt": ".."}``.
"""

from __future__ import annotations

import argparse
import importlib
import json
import logging
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from config import get_settings_module

from src.geo_attendance.geo_attendance.attendance.model import LocationSample
from src.geo_attendance.geo_attendance.core.exceptions import ValidationError
from src.geo_attendance.geo_attendance.offline.sqlite_queue import SQLiteOfflineQueue
from src.geo_attendance.geo_attendance.sync.coordinator import SyncCoordinator
from src.geo_attendance.geo_attendance.sync.submitter import HttpSubmitter


def main() -> int:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("--load", type=Path, help="JSON-lines file of samples to enqueue first")
    parser.add_argument("--token", help="bearer token for the backend")
    args = parser.parse_args()

    settings = importlib.import_module(get_settings_module())
    logging.basicConfig(level=settings.LOG_LEVEL, format="%(asctime)s %(levelname)s [%(name)s] %(message)s")

    queue = SQLiteOfflineQueue(settings.OFFLINE_QUEUE_PATH)

    if args.load:
        with args.load.open(encoding="utf-8") as fh:
            for lineno, line in enumerate(fh, start=1):
                if not line.strip():
                    continue
                try:
                    queue.enqueue(LocationSample.from_dict(json.loads(line)))
                except (ValueError, ValidationError) as e:
                    print(f"line {lineno}: skipped ({e})", file=sys.stderr)

    submitter = HttpSubmitter(settings.API_BASE_URL, token=args.token, timeout=settings.SUBMIT_TIMEOUT_SECONDS)
    report = SyncCoordinator(queue, submitter).drain()

    print(f"synced={report.synced} failed={report.failed} rejected={report.rejected} remaining={report.remaining}")
    return 0 if report.remaining == 0 else 1


if __name__ == "__main__":
    sys.exit(main())
