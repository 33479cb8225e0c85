"""Example: use the service layer directly (no Flask).

Submits two samples for the seeded demo user: one at the office during
working hours, one far away in the evening.
"""

import importlib
from datetime import datetime
from zoneinfo import ZoneInfo

from config import get_settings_module

from src.geo_attendance.geo_attendance.attendance.model import LocationSample
from src.geo_attendance.geo_attendance.container import build_container


def main():
    settings = importlib.import_module(get_settings_module())
    container = build_container(db_config=settings.DB_CONFIG, default_timezone=settings.DEFAULT_TIMEZONE)
    ist = ZoneInfo("Asia/Kolkata")

    for lat, lon, when in [
        (12.9716, 77.5946, datetime(2024, 1, 1, 9, 5, tzinfo=ist)),
        (12.9800, 77.6100, datetime(2024, 1, 1, 18, 30, tzinfo=ist)),
    ]:
        sample = LocationSample.create(user_id=1, latitude=lat, longitude=lon, accuracy_meters=8, captured_at=when)
        print(container.attendance_service.submit(sample).to_dict())


if __name__ == "__main__":
    main()
