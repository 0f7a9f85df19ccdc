from __future__ import annotations

from flask import Flask

from ..common.datetime_utils import parse_optional_date
from ..common.http import json_endpoint, ok, read_json
from ..container import Container
from ..core.exceptions import ValidationError
from .model import AttendanceSettings

_TIME_FIELDS = ("time_in_start", "time_in_end", "time_out_start", "time_out_end")
_FLAG_FIELDS = ("auto_mark_absent", "auto_mark_late")


def to_dict(settings: AttendanceSettings) -> dict:
    return {
        **{f: getattr(settings, f) for f in _TIME_FIELDS + _FLAG_FIELDS},
        "period_start": settings.period_start.isoformat() if settings.period_start else None,
        "period_end": settings.period_end.isoformat() if settings.period_end else None,
    }


def register(app: Flask, container: Container) -> None:
    service = container.settings_service

    @app.route("/api/admin/attendance-settings", methods=["GET"], endpoint="settings_get")
    @json_endpoint
    def get_settings():
        return ok(to_dict(service.get()))

    @app.route("/api/admin/attendance-settings", methods=["POST"], endpoint="settings_update")
    @json_endpoint
    def update_settings():
        data = read_json()
        changes = {}
        for key, value in data.items():
            if key in ("period_start", "period_end"):
                changes[key] = parse_optional_date(value)
            elif key in _FLAG_FIELDS:
                if not isinstance(value, bool):
                    raise ValidationError(f"{key} must be true or false")
                changes[key] = value
            else:
                changes[key] = value or None
        return ok(to_dict(service.update(**changes)))
