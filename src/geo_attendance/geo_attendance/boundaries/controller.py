from __future__ import annotations

from flask import Flask, jsonify, request

from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/boundaries", methods=["GET"], endpoint="api_boundaries")
    def api_boundaries():
        try:
            organization_id = int(request.args.get("organizationId", ""))
        except ValueError:
            return jsonify({"message": "organizationId must be an integer"}), 400

        boundaries = container.attendance_service.list_boundaries(organization_id)
        return jsonify({"boundaries": [b.to_dict() for b in boundaries]})
