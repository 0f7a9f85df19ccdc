from __future__ import annotations

from flask import Flask

from ..common.http import json_endpoint, ok, read_json, require_int
from ..container import Container


def register(app: Flask, container: Container) -> None:
    service = container.deduction_service

    @app.route("/api/admin/deduction-types", methods=["POST"], endpoint="deduction_types_create")
    @json_endpoint
    def create_type():
        data = read_json()
        dtype = service.create_type(
            name=data.get("name"),
            calculation_type=data.get("calculation_type", "FIXED"),
            amount=data.get("amount", 0),
            percentage_value=data.get("percentage_value"),
            is_mandatory=bool(data.get("is_mandatory", False)),
            description=data.get("description"),
        )
        return ok(dtype.to_dict(), 201)

    @app.route("/api/admin/deductions", methods=["POST"], endpoint="deductions_apply")
    @json_endpoint
    def apply_deduction():
        data = read_json()
        deduction = service.apply_deduction(
            user_id=require_int(data, "user_id"),
            deduction_type_id=require_int(data, "deduction_type_id"),
            amount=data.get("amount"),
            notes=data.get("notes"),
        )
        return ok(deduction.to_dict(), 201)

    @app.route("/api/admin/deductions/<int:user_id>", methods=["GET"], endpoint="deductions_for_user")
    @json_endpoint
    def list_for_user(user_id: int):
        return ok([d.to_dict() for d in service.list_for_user(user_id)])

    @app.route("/api/admin/deductions/sync-mandatory", methods=["POST"], endpoint="deductions_sync_mandatory")
    @json_endpoint
    def sync_mandatory():
        return ok({"created": service.sync_mandatory()})
