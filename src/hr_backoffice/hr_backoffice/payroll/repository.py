from __future__ import annotations

from datetime import date, datetime
from typing import Iterable, Optional, Protocol, Sequence

from ..core.enums import AdditionalPayKind, PayrollStatus
from .model import AdditionalPay, PayrollEntry


class PayrollRepository(Protocol):
    def list_payroll_entries(
        self,
        *,
        period_start: Optional[date] = None,
        period_end: Optional[date] = None,
        status: Optional[PayrollStatus] = None,
        user_id: Optional[int] = None,
        for_update: bool = False,
    ) -> Sequence[PayrollEntry]:
        """`for_update` locks the matching rows until the open transaction ends."""

        raise NotImplementedError

    def get_payroll_entry(self, payroll_entry_id: int) -> Optional[PayrollEntry]:
        raise NotImplementedError

    def create_payroll_entry(
        self,
        *,
        user_id: int,
        period_start: date,
        period_end: date,
        basic_salary: float,
        deductions: float,
        net_pay: float,
        created_at: datetime,
    ) -> PayrollEntry:
        """New entry, always PENDING."""

        raise NotImplementedError

    def update_payroll_entry(
        self, entry: PayrollEntry, *, expected_status: Optional[PayrollStatus] = None
    ) -> PayrollEntry:
        """Raises ConflictError when the stored status is no longer `expected_status`."""

        raise NotImplementedError

    def archive_payroll_entries(self, ids: Iterable[int], archived_at: datetime) -> int:
        raise NotImplementedError

    # Additional pay
    def list_additional_pay(
        self,
        user_id: int,
        *,
        start: Optional[date] = None,
        end: Optional[date] = None,
        include_archived: bool = False,
    ) -> Sequence[AdditionalPay]:
        raise NotImplementedError

    def create_additional_pay(
        self,
        *,
        user_id: int,
        kind: AdditionalPayKind,
        amount: float,
        applied_at: datetime,
        notes: Optional[str] = None,
    ) -> AdditionalPay:
        raise NotImplementedError

    def archive_additional_pay(self, ids: Iterable[int], archived_at: datetime) -> int:
        raise NotImplementedError
