from __future__ import annotations

from flask import Flask, request

from ..common.datetime_utils import parse_iso_date, parse_optional_date
from ..common.http import json_endpoint, ok, read_json
from ..container import Container


def register(app: Flask, container: Container) -> None:
    service = container.holiday_service

    @app.route("/api/admin/holidays", methods=["GET"], endpoint="holidays_list")
    @json_endpoint
    def list_holidays():
        start = parse_optional_date(request.args.get("start"))
        end = parse_optional_date(request.args.get("end"))
        return ok([h.to_dict() for h in service.list_holidays(start, end)])

    @app.route("/api/admin/holidays", methods=["POST"], endpoint="holidays_create")
    @json_endpoint
    def create_holiday():
        data = read_json()
        holiday = service.create_holiday(
            name=data.get("name") or "",
            holiday_date=parse_iso_date(data.get("date")),
            kind=data.get("type") or "",
            description=data.get("description"),
        )
        return ok(holiday.to_dict(), 201)

    @app.route("/api/admin/holidays/<int:holiday_id>", methods=["DELETE"], endpoint="holidays_delete")
    @json_endpoint
    def delete_holiday(holiday_id: int):
        service.delete_holiday(holiday_id)
        return ok({"holiday_id": holiday_id})
