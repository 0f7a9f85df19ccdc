from __future__ import annotations

import pytest

from src.hr_backoffice.hr_backoffice.container import Container, build_services
from src.hr_backoffice.hr_backoffice.core.exceptions import StoreError
from src.hr_backoffice.hr_backoffice.main import create_app

from tests.fakes import civil


@pytest.fixture
def client(monkeypatch, store, clock, calendar):
    monkeypatch.setenv("APP_ENV", "testing")
    container = Container(
        conn=store,
        clock=clock,
        calendar=calendar,
        **build_services(
            uow=store,
            settings_repo=store,
            attendance_repo=store,
            personnel_repo=store,
            leaves_repo=store,
            holidays_repo=store,
            deductions_repo=store,
            loans_repo=store,
            payroll_repo=store,
            clock=clock,
            calendar=calendar,
        ),
    )
    store.add_personnel(1)
    app = create_app(container)
    return app.test_client()


def test_punch_and_days(client, clock):
    clock.set(civil(2025, 3, 12, 9, 31))
    resp = client.post("/api/attendance/punch", json={"user_id": 1})
    assert resp.status_code == 200
    body = resp.get_json()
    assert body["success"] is True
    assert body["data"]["action"] == "TIME_IN"
    assert body["data"]["status"] == "LATE"

    resp = client.get("/api/attendance/1/days?start=2025-03-11&end=2025-03-12")
    statuses = [d["status"] for d in resp.get_json()["data"]]
    assert statuses == ["ABSENT", "LATE"]

    history = client.get("/api/attendance/1/days").get_json()["data"]
    assert [d["work_date"] for d in history] == ["2025-03-12"]


def test_error_mapping(client, clock):
    assert client.post("/api/attendance/punch", json={"user_id": "abc"}).status_code == 400
    assert client.post("/api/attendance/punch", json=[1, 2]).status_code == 400

    clock.set(civil(2025, 3, 12, 8, 0))
    client.post("/api/attendance/punch", json={"user_id": 1})
    clock.set(civil(2025, 3, 12, 17, 0))
    client.post("/api/attendance/punch", json={"user_id": 1})
    resp = client.post("/api/attendance/punch", json={"user_id": 1})
    assert resp.status_code == 409
    assert resp.get_json()["success"] is False


def test_store_failure_is_generic_500(client, store):
    store.fail_on["save_settings"] = StoreError("Access denied for user 'root'")
    resp = client.post("/api/admin/attendance-settings", json={"time_in_end": "09:30"})

    assert resp.status_code == 500
    assert "root" not in resp.get_json()["message"]


def test_settings_roundtrip(client):
    resp = client.post(
        "/api/admin/attendance-settings",
        json={"time_in_end": "09:30", "auto_mark_late": False, "period_start": "2025-03-16", "period_end": "2025-03-31"},
    )
    assert resp.status_code == 200
    data = client.get("/api/admin/attendance-settings").get_json()["data"]
    assert data["time_in_end"] == "09:30"
    assert data["auto_mark_late"] is False
    assert data["period_start"] == "2025-03-16"

    assert client.post("/api/admin/attendance-settings", json={"auto_mark_late": "no"}).status_code == 400


def test_payroll_flow(client):
    resp = client.post("/api/admin/payroll/generate", json={})
    assert resp.status_code == 201
    entry_id = resp.get_json()["data"][0]["payroll_entry_id"]

    view = client.get(f"/api/admin/payroll/entries/{entry_id}").get_json()["data"]
    assert view["source"] == "live"

    summary = client.get("/api/admin/payroll/summary").get_json()["data"]
    assert [row["user_id"] for row in summary["rows"]] == [1]

    resp = client.post("/api/admin/payroll/release", json={"next_period_start": "2025-03-16", "next_period_end": "2025-03-31"})
    assert resp.status_code == 200
    assert resp.get_json()["data"][0]["status"] == "RELEASED"

    assert client.post("/api/admin/payroll/release", json={}).status_code == 409
    assert client.get(f"/api/admin/payroll/entries/{entry_id}").get_json()["data"]["source"] == "snapshot"


def test_payroll_without_period_is_400(client, store):
    store.settings = None
    assert client.post("/api/admin/payroll/generate", json={}).status_code == 400


def test_loans_deductions_and_leaves(client):
    resp = client.post(
        "/api/admin/loans", json={"user_id": 1, "amount": 12000, "monthly_payment_percent": 20, "term_months": 5}
    )
    assert resp.status_code == 201
    assert client.get("/api/admin/loans?user_id=1").get_json()["data"][0]["balance"] == 12000

    resp = client.post("/api/admin/deduction-types", json={"name": "SSS", "amount": 500, "is_mandatory": True})
    assert resp.status_code == 201
    assert client.post("/api/admin/deductions/sync-mandatory").get_json()["data"] == {"created": 1}
    assert len(client.get("/api/admin/deductions/1").get_json()["data"]) == 1

    resp = client.post(
        "/api/leaves", json={"user_id": 1, "start_date": "2025-03-13", "end_date": "2025-03-14", "reason": "Trip"}
    )
    leave_id = resp.get_json()["data"]["leave_id"]
    assert client.post(f"/api/admin/leaves/{leave_id}/approve").get_json()["data"]["status"] == "APPROVED"
    assert client.post(f"/api/admin/leaves/{leave_id}/reject").status_code == 409


def test_auto_mark_absent_endpoint(client):
    resp = client.post("/api/admin/attendance/auto-mark-absent", json={"date": "2025-03-11"})
    assert resp.get_json()["data"]["created"] == 1

    resp = client.delete("/api/admin/attendance", json={"start": "2025-03-01", "end": "2025-03-15"})
    assert resp.get_json()["data"] == {"deleted": 1}


def test_holiday_routes(client):
    resp = client.post("/api/admin/holidays", json={"name": "Labor Day", "date": "2025-05-01", "type": "NATIONAL"})
    assert resp.status_code == 201
    holiday_id = resp.get_json()["data"]["holiday_id"]

    again = client.post("/api/admin/holidays", json={"name": "May Day", "date": "2025-05-01", "type": "COMPANY"})
    assert again.status_code == 409
    assert client.post("/api/admin/holidays", json={"name": "X", "date": "2025-05-02", "type": "LOCAL"}).status_code == 400

    listed = client.get("/api/admin/holidays?start=2025-05-01&end=2025-05-31").get_json()["data"]
    assert [h["holiday_date"] for h in listed] == ["2025-05-01"]

    assert client.delete(f"/api/admin/holidays/{holiday_id}").status_code == 200
    assert client.delete(f"/api/admin/holidays/{holiday_id}").status_code == 400


def test_history_limit_must_be_a_positive_integer(client):
    assert client.get("/api/attendance/1/days?limit=abc").status_code == 400
    assert client.get("/api/attendance/1/days?limit=0").status_code == 400
    assert client.get("/api/attendance/1/days?limit=5").status_code == 200
