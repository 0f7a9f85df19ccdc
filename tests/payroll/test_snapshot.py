from __future__ import annotations

from datetime import date

import pytest

from src.hr_backoffice.hr_backoffice.core.exceptions import ValidationError
from src.hr_backoffice.hr_backoffice.payroll.snapshot import BreakdownSnapshot


def test_legacy_layout_is_upgraded():
    legacy = {
        "user_id": 5,
        "period_start": "2025-01-01",
        "period_end": "2025-01-15",
        "released_at": "2025-01-16T09:00:00+08:00",
        "basis_salary": 10000,
        "net_salary": 9100.5,
        "total_deductions": 899.5,
    }
    snapshot = BreakdownSnapshot.from_dict(legacy)

    assert snapshot.schema_version == 1
    assert snapshot.period_end == date(2025, 1, 15)
    assert snapshot.net_salary == pytest.approx(9100.5)
    assert snapshot.figures["basis_salary"] == 10000
    assert snapshot.attendance == ()


def test_newer_version_is_rejected():
    with pytest.raises(ValidationError):
        BreakdownSnapshot.from_dict({"schema_version": 99, "user_id": 1})


def test_stored_layout_keeps_lines():
    stored = {
        "schema_version": 1,
        "user_id": 2,
        "period_start": "2025-03-01",
        "period_end": "2025-03-15",
        "computed_at": "2025-03-16T08:00:00+08:00",
        "figures": {"net_salary": 12000},
        "loans": [{"loan_id": 3, "installment": 1200, "balance_before": 12000}],
    }
    snapshot = BreakdownSnapshot.from_dict(stored)

    assert snapshot.loans[0]["installment"] == 1200
    assert snapshot.deductions == ()
    assert BreakdownSnapshot.from_dict(snapshot.to_dict()) == snapshot


@pytest.mark.parametrize(
    "data",
    [[1, 2], {"schema_version": 1, "user_id": 2}, {"schema_version": -1}, {"schema_version": "1", "user_id": 2}],
)
def test_malformed_snapshots(data):
    with pytest.raises(ValidationError):
        BreakdownSnapshot.from_dict(data)
