from __future__ import annotations

import logging

from flask import Flask, jsonify, request

from ..core.constants import DEFAULT_HISTORY_LIMIT
from ..core.exceptions import PersistenceError, ValidationError
from ..container import Container
from .model import LocationSample

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    @app.route("/api/locations/track", methods=["POST"], endpoint="api_track_location")
    def api_track_location():
        """Submit one location sample; answers with the attendance outcome."""
        try:
            sample = LocationSample.from_dict(request.get_json(silent=True) or {})
            result = container.attendance_service.submit(sample)
        except ValidationError as e:
            return jsonify({"message": str(e)}), 400
        except PersistenceError as e:
            logger.error("Tracking sample not recorded: %s", e)
            return jsonify({"message": "Attendance event could not be recorded, retry later"}), 503
        return jsonify(result.to_dict()), 200

    @app.route("/api/attendance/events", methods=["GET"], endpoint="api_attendance_events")
    def api_attendance_events():
        try:
            user_id = int(request.args.get("userId", ""))
            limit = int(request.args.get("limit", DEFAULT_HISTORY_LIMIT))
            offset = int(request.args.get("offset", 0))
            events = container.attendance_service.history(user_id, limit=limit, offset=offset)
        except ValueError:
            return jsonify({"message": "userId, limit and offset must be integers"}), 400
        except ValidationError as e:
            return jsonify({"message": str(e)}), 400

        return jsonify(
            {
                "events": [e.to_dict() for e in events],
                "limit": limit,
                "offset": offset,
            }
        )
