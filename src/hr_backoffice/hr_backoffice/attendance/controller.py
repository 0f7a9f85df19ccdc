from __future__ import annotations

from flask import Flask, request

from ..common.datetime_utils import parse_iso_date, parse_optional_date
from ..common.http import json_endpoint, ok, read_json, require_int
from ..container import Container
from ..core.constants import DEFAULT_HISTORY_LIMIT
from ..core.exceptions import ValidationError


def register(app: Flask, container: Container) -> None:
    service = container.attendance_service

    @app.route("/api/attendance/punch", methods=["POST"], endpoint="attendance_punch")
    @json_endpoint
    def punch():
        data = read_json()
        result = service.punch(require_int(data, "user_id"))
        return ok(result.to_dict())

    @app.route("/api/attendance/<int:user_id>/days", methods=["GET"], endpoint="attendance_days")
    @json_endpoint
    def days(user_id: int):
        start = parse_optional_date(request.args.get("start"))
        end = parse_optional_date(request.args.get("end"))
        if start is None and end is None:
            limit = require_int(request.args, "limit") if request.args.get("limit") else DEFAULT_HISTORY_LIMIT
            if limit <= 0:
                raise ValidationError("limit must be positive")
            rows = service.history(user_id, limit=limit)
        else:
            today = container.clock.now().date()
            rows = service.live_records(user_id, start or today, end or today)
        return ok([r.to_dict() for r in rows])

    @app.route("/api/admin/attendance/auto-mark-absent", methods=["POST"], endpoint="attendance_auto_mark_absent")
    @json_endpoint
    def auto_mark_absent():
        data = read_json()
        day = parse_iso_date(data["date"]) if data.get("date") else None
        return ok(service.auto_mark_absent(day).to_dict())

    @app.route("/api/admin/attendance", methods=["DELETE"], endpoint="attendance_admin_clear")
    @json_endpoint
    def admin_clear():
        data = read_json()
        start = parse_iso_date(data.get("start"))
        end = parse_iso_date(data.get("end"))
        user_id = require_int(data, "user_id") if data.get("user_id") is not None else None
        removed = service.admin_clear(start=start, end=end, user_id=user_id)
        return ok({"deleted": removed})
