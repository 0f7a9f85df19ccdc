from __future__ import annotations

from flask import Flask

from ..common.datetime_utils import parse_iso_date
from ..common.http import json_endpoint, ok, read_json, require_int
from ..container import Container


def register(app: Flask, container: Container) -> None:
    service = container.leave_service

    @app.route("/api/leaves", methods=["POST"], endpoint="leaves_create")
    @json_endpoint
    def create_leave():
        data = read_json()
        leave = service.create_leave(
            user_id=require_int(data, "user_id"),
            start_date=parse_iso_date(data.get("start_date")),
            end_date=parse_iso_date(data.get("end_date")),
            reason=data.get("reason") or "",
            is_paid=bool(data.get("is_paid", False)),
        )
        return ok(leave.to_dict(), 201)

    @app.route("/api/admin/leaves/<int:leave_id>/approve", methods=["POST"], endpoint="leaves_approve")
    @json_endpoint
    def approve(leave_id: int):
        return ok(service.approve(leave_id).to_dict())

    @app.route("/api/admin/leaves/<int:leave_id>/reject", methods=["POST"], endpoint="leaves_reject")
    @json_endpoint
    def reject(leave_id: int):
        return ok(service.reject(leave_id).to_dict())
