from __future__ import annotations

from flask import Flask, request

from ..common.datetime_utils import parse_optional_date
from ..common.http import json_endpoint, ok, read_json, require_int
from ..container import Container
from ..core.exceptions import ValidationError


def register(app: Flask, container: Container) -> None:
    service = container.payroll_service

    @app.route("/api/admin/payroll/generate", methods=["POST"], endpoint="payroll_generate")
    @json_endpoint
    def generate():
        data = read_json()
        entries = service.generate(
            parse_optional_date(data.get("period_start")),
            parse_optional_date(data.get("period_end")),
        )
        return ok([e.to_dict() for e in entries], 201)

    @app.route("/api/admin/payroll/release", methods=["POST"], endpoint="payroll_release")
    @json_endpoint
    def release():
        data = read_json()
        next_start = parse_optional_date(data.get("next_period_start"))
        next_end = parse_optional_date(data.get("next_period_end"))
        ids = data.get("entry_ids")
        if ids is None:
            entries = service.release(next_start, next_end)
        else:
            if not isinstance(ids, list):
                raise ValidationError("entry_ids must be a list")
            entries = service.release_entries(ids, next_start, next_end)
        return ok([e.to_dict() for e in entries])

    @app.route("/api/admin/payroll/summary", methods=["GET"], endpoint="payroll_summary")
    @json_endpoint
    def summary():
        return ok(
            service.summary(
                parse_optional_date(request.args.get("period_start")),
                parse_optional_date(request.args.get("period_end")),
            )
        )

    @app.route("/api/admin/payroll/entries/<int:entry_id>", methods=["GET"], endpoint="payroll_entry")
    @json_endpoint
    def view_entry(entry_id: int):
        return ok(service.view_entry(entry_id))

    @app.route("/api/admin/payroll/entries/<int:entry_id>/archive", methods=["POST"], endpoint="payroll_entry_archive")
    @json_endpoint
    def archive_entry(entry_id: int):
        return ok(service.archive_entry(entry_id).to_dict())

    @app.route("/api/admin/payroll/additional-pay", methods=["POST"], endpoint="payroll_additional_pay")
    @json_endpoint
    def additional_pay():
        data = read_json()
        pay = service.add_additional_pay(
            user_id=require_int(data, "user_id"),
            kind=data.get("kind"),
            amount=data.get("amount"),
            notes=data.get("notes"),
        )
        return ok({"additional_pay_id": pay.additional_pay_id, "amount": pay.amount, "kind": pay.kind.value}, 201)
