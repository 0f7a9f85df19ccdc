from __future__ import annotations

from dataclasses import asdict, dataclass
from datetime import date, datetime
from typing import Optional

from ..core.enums import AdditionalPayKind, AttendanceStatus, PayrollStatus


@dataclass(frozen=True)
class PayrollEntry:
    """One personnel's payroll for one period.

    `basic_salary` holds the period gross. Once RELEASED, `breakdown_snapshot`
    is the only source of truth for its figures.
    """

    payroll_entry_id: int
    user_id: int
    period_start: date
    period_end: date
    basic_salary: float
    deductions: float
    net_pay: float
    status: PayrollStatus = PayrollStatus.PENDING
    created_at: Optional[datetime] = None
    released_at: Optional[datetime] = None
    archived_at: Optional[datetime] = None
    breakdown_snapshot: Optional[dict] = None

    @property
    def is_live(self) -> bool:
        return self.status in (PayrollStatus.PENDING, PayrollStatus.RELEASED)

    def to_dict(self) -> dict:
        return {
            "payroll_entry_id": self.payroll_entry_id,
            "user_id": self.user_id,
            "period_start": self.period_start.isoformat(),
            "period_end": self.period_end.isoformat(),
            "basic_salary": self.basic_salary,
            "deductions": self.deductions,
            "net_pay": self.net_pay,
            "status": self.status.value,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "released_at": self.released_at.isoformat() if self.released_at else None,
            "archived_at": self.archived_at.isoformat() if self.archived_at else None,
        }


@dataclass(frozen=True)
class AdditionalPay:
    """Overload, bonus or overtime pay added on top of the period basis."""

    additional_pay_id: int
    user_id: int
    kind: AdditionalPayKind
    amount: float
    applied_at: datetime
    archived_at: Optional[datetime] = None
    notes: Optional[str] = None


@dataclass(frozen=True)
class DayLine:
    work_date: date
    status: AttendanceStatus
    deduction: float
    earnings: float
    work_hours: float
    seconds_late: float = 0.0
    seconds_early: float = 0.0

    def to_dict(self) -> dict:
        return {
            "work_date": self.work_date.isoformat(),
            "status": self.status.value,
            "deduction": self.deduction,
            "earnings": self.earnings,
            "work_hours": self.work_hours,
            "seconds_late": self.seconds_late,
            "seconds_early": self.seconds_early,
        }


@dataclass(frozen=True)
class DeductionLine:
    deduction_type_id: int
    name: str
    amount: float
    is_mandatory: bool
    deduction_id: Optional[int] = None
    # Mandatory type with no stored instance yet; Generate persists it.
    materialized: bool = False

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class LoanLine:
    loan_id: int
    installment: float
    balance_before: float

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class AdditionLine:
    additional_pay_id: int
    kind: AdditionalPayKind
    amount: float

    def to_dict(self) -> dict:
        return {"additional_pay_id": self.additional_pay_id, "kind": self.kind.value, "amount": self.amount}
