from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.web import current_user_id, json_body, login_required
from ..container import Container
from ..core.constants import DEFAULT_HISTORY_LIMIT
from ..core.exceptions import ValidationError


def register(app: Flask, container: Container) -> None:
    @app.route("/api/attendance/today", methods=["GET"], endpoint="attendance_today")
    @login_required
    def attendance_today():
        record = container.attendance_service.get_todays_attendance(current_user_id())
        return jsonify(
            {
                "date": container.time_engine.today().isoformat(),
                "timezone": container.time_engine.timezone_name,
                "attendance": record.to_dict() if record else None,
            }
        )

    @app.route("/api/attendance/check-in", methods=["POST"], endpoint="attendance_check_in")
    @login_required
    def attendance_check_in():
        data = json_body()
        record = container.attendance_service.check_in(
            current_user_id(),
            latitude=data.get("latitude"),
            longitude=data.get("longitude"),
            accuracy=data.get("accuracy"),
        )
        return jsonify({"success": True, "attendance": record.to_dict()}), 201

    @app.route("/api/attendance/check-out", methods=["POST"], endpoint="attendance_check_out")
    @login_required
    def attendance_check_out():
        record = container.attendance_service.check_out(current_user_id())
        return jsonify({"success": True, "attendance": record.to_dict()})

    @app.route("/api/attendance/history", methods=["GET"], endpoint="attendance_history")
    @login_required
    def attendance_history():
        try:
            limit = int(request.args.get("limit", DEFAULT_HISTORY_LIMIT))
        except ValueError:
            raise ValidationError("limit must be an integer")
        if limit < 1 or limit > 366:
            raise ValidationError("limit must be between 1 and 366")

        records = container.attendance_service.get_history(current_user_id(), limit=limit)
        return jsonify({"items": [r.to_dict() for r in records]})
