from __future__ import annotations

from flask import Flask, request

from ..common.http import json_endpoint, ok, read_json, require_int
from ..container import Container


def register(app: Flask, container: Container) -> None:
    service = container.loan_service

    @app.route("/api/admin/loans", methods=["POST"], endpoint="loans_create")
    @json_endpoint
    def create_loan():
        data = read_json()
        loan = service.create_loan(
            user_id=require_int(data, "user_id"),
            amount=data.get("amount"),
            monthly_payment_percent=data.get("monthly_payment_percent"),
            term_months=data.get("term_months"),
            purpose=data.get("purpose"),
        )
        return ok(loan.to_dict(), 201)

    @app.route("/api/admin/loans", methods=["GET"], endpoint="loans_list")
    @json_endpoint
    def list_loans():
        user_id = request.args.get("user_id", type=int)
        return ok([loan.to_dict() for loan in service.list_active(user_id)])
