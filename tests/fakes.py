"""In-memory store implementing every repository Protocol, for service tests."""

from __future__ import annotations

import copy
from contextlib import contextmanager
from dataclasses import replace
from datetime import date, datetime
from typing import Iterable, Optional
from zoneinfo import ZoneInfo

from src.hr_backoffice.hr_backoffice.attendance.model import AttendanceRecord
from src.hr_backoffice.hr_backoffice.core.enums import (
    AdditionalPayKind,
    AttendanceStatus,
    CalculationType,
    HolidayType,
    LoanStatus,
    PayrollStatus,
    RequestStatus,
)
from src.hr_backoffice.hr_backoffice.core.exceptions import ConflictError, StoreError
from src.hr_backoffice.hr_backoffice.deductions.model import Deduction, DeductionType
from src.hr_backoffice.hr_backoffice.holidays.model import Holiday
from src.hr_backoffice.hr_backoffice.leaves.model import LeaveRequest
from src.hr_backoffice.hr_backoffice.loans.model import Loan
from src.hr_backoffice.hr_backoffice.payroll.model import AdditionalPay, PayrollEntry
from src.hr_backoffice.hr_backoffice.personnel.model import Personnel
from src.hr_backoffice.hr_backoffice.settings.model import AttendanceSettings

TZ = ZoneInfo("Asia/Manila")

# 2025-03-01 (Sat) .. 2025-03-15 (Sat): 13 working days once both Sundays are excluded.
PERIOD_START = date(2025, 3, 1)
PERIOD_END = date(2025, 3, 15)
PERIOD_WORKING_DAYS = 13


def civil(y, m, d, hh=0, mm=0, ss=0) -> datetime:
    return datetime(y, m, d, hh, mm, ss, tzinfo=TZ)


def _day(value: datetime) -> date:
    return value.date()


class InMemoryStore:
    def __init__(self):
        self.settings: Optional[AttendanceSettings] = None
        self.personnel: dict[int, Personnel] = {}
        self.attendance: dict[tuple[int, date], AttendanceRecord] = {}
        self.deduction_types: dict[int, DeductionType] = {}
        self.deductions: dict[int, Deduction] = {}
        self.loans: dict[int, Loan] = {}
        self.entries: dict[int, PayrollEntry] = {}
        self.additional_pay: dict[int, AdditionalPay] = {}
        self.leaves: dict[int, LeaveRequest] = {}
        self.holidays: dict[int, Holiday] = {}
        self._next_id = 1
        self._tx_depth = 0
        self.commits = 0
        self.rollbacks = 0
        self.fail_on: dict[str, Exception] = {}

    def _id(self) -> int:
        value = self._next_id
        self._next_id += 1
        return value

    def _maybe_fail(self, operation: str) -> None:
        error = self.fail_on.pop(operation, None)
        if error is not None:
            raise error

    # UnitOfWork
    _STATE = (
        "settings",
        "personnel",
        "attendance",
        "deduction_types",
        "deductions",
        "loans",
        "entries",
        "additional_pay",
        "leaves",
        "holidays",
        "_next_id",
    )

    @contextmanager
    def transaction(self):
        if self._tx_depth:
            yield
            return

        saved = {name: copy.deepcopy(getattr(self, name)) for name in self._STATE}
        self._tx_depth += 1
        try:
            yield
            self.commits += 1
        except Exception:
            for name, value in saved.items():
                setattr(self, name, value)
            self.rollbacks += 1
            raise
        finally:
            self._tx_depth -= 1

    # Seeding helpers
    def add_personnel(self, user_id: int, *, full_name: str = "", basic_salary: Optional[float] = 26000.0, **kw) -> Personnel:
        person = Personnel(
            user_id=user_id,
            full_name=full_name or f"Personnel {user_id}",
            email=f"user{user_id}@example.com",
            basic_salary=basic_salary,
            personnel_type_name="Staff",
            **kw,
        )
        self.personnel[user_id] = person
        return person

    def add_record(
        self,
        user_id: int,
        work_date: date,
        *,
        time_in: Optional[datetime] = None,
        time_out: Optional[datetime] = None,
        status: AttendanceStatus = AttendanceStatus.PENDING,
    ) -> AttendanceRecord:
        record = AttendanceRecord(self._id(), user_id, work_date, time_in, time_out, status)
        self.attendance[(user_id, work_date)] = record
        return record

    # SettingsRepository
    def get_settings(self):
        return self.settings

    def save_settings(self, settings):
        self._maybe_fail("save_settings")
        if settings.settings_id is None:
            settings = replace(settings, settings_id=1)
        self.settings = settings
        return settings

    # PersonnelRepository
    def list_active_personnel(self):
        return [p for p in sorted(self.personnel.values(), key=lambda p: p.user_id) if p.is_active]

    def get_personnel(self, user_id):
        return self.personnel.get(int(user_id))

    # AttendanceRepository
    def find_attendance(self, user_id, work_date):
        return self.attendance.get((int(user_id), work_date))

    def create_attendance(self, *, user_id, work_date, status, time_in=None, note=None):
        key = (int(user_id), work_date)
        if key in self.attendance:
            raise ConflictError("Record already exists")
        record = AttendanceRecord(self._id(), int(user_id), work_date, time_in, None, status, note)
        self.attendance[key] = record
        return record

    def update_attendance(self, *, attendance_id, time_in, time_out, status, note=None):
        for key, record in self.attendance.items():
            if record.attendance_id == attendance_id:
                updated = replace(record, time_in=time_in, time_out=time_out, status=status, note=note)
                self.attendance[key] = updated
                return updated
        raise StoreError(f"Attendance record {attendance_id} vanished")

    def list_attendance(self, *, start, end, user_id=None):
        rows = [
            r
            for r in self.attendance.values()
            if start <= r.work_date <= end and (user_id is None or r.user_id == user_id)
        ]
        return sorted(rows, key=lambda r: (r.work_date, r.user_id))

    def get_recent_for_user(self, user_id, limit):
        rows = [r for r in self.attendance.values() if r.user_id == user_id]
        return sorted(rows, key=lambda r: r.work_date, reverse=True)[:limit]

    def delete_attendance(self, *, start, end, user_id=None):
        doomed = [k for k, r in self.attendance.items() if start <= r.work_date <= end and (user_id is None or r.user_id == user_id)]
        for key in doomed:
            del self.attendance[key]
        return len(doomed)

    # LeaveRepository
    def list_leaves(self, *, user_id=None, status=None, start=None, end=None):
        rows = []
        for leave in self.leaves.values():
            if user_id is not None and leave.user_id != user_id:
                continue
            if status is not None and leave.status != status:
                continue
            if start is not None and leave.end_date < start:
                continue
            if end is not None and leave.start_date > end:
                continue
            rows.append(leave)
        return sorted(rows, key=lambda x: (x.start_date, x.leave_id))

    def get_leave(self, leave_id):
        return self.leaves.get(int(leave_id))

    def create_leave(self, *, user_id, start_date, end_date, is_paid, reason, created_at):
        leave = LeaveRequest(self._id(), user_id, start_date, end_date, is_paid, reason, RequestStatus.PENDING, created_at)
        self.leaves[leave.leave_id] = leave
        return leave

    def decide_leave(self, *, leave_id, status, decided_at):
        leave = replace(self.leaves[int(leave_id)], status=status, decided_at=decided_at)
        self.leaves[leave.leave_id] = leave
        return leave

    # HolidayRepository
    def list_holidays(self, *, start=None, end=None):
        return [
            h
            for h in sorted(self.holidays.values(), key=lambda h: h.holiday_date)
            if (start is None or h.holiday_date >= start) and (end is None or h.holiday_date <= end)
        ]

    def get_holiday(self, holiday_id):
        return self.holidays.get(int(holiday_id))

    def create_holiday(self, *, name, holiday_date, kind, description=None):
        if any(h.holiday_date == holiday_date for h in self.holidays.values()):
            raise ConflictError("Record already exists")
        holiday = Holiday(self._id(), name, holiday_date, HolidayType(kind), description)
        self.holidays[holiday.holiday_id] = holiday
        return holiday

    def delete_holiday(self, holiday_id):
        return self.holidays.pop(int(holiday_id), None) is not None

    # DeductionRepository
    def list_deduction_types(self, mandatory=None, *, active_only=True):
        return [
            t
            for t in sorted(self.deduction_types.values(), key=lambda t: t.deduction_type_id)
            if (mandatory is None or t.is_mandatory == mandatory) and (t.is_active or not active_only)
        ]

    def get_deduction_type(self, deduction_type_id):
        return self.deduction_types.get(int(deduction_type_id))

    def create_deduction_type(self, *, name, calculation_type, amount, percentage_value, is_mandatory, description=None):
        dtype = DeductionType(
            self._id(),
            name,
            CalculationType(calculation_type),
            amount,
            percentage_value,
            is_mandatory,
            True,
            description,
        )
        self.deduction_types[dtype.deduction_type_id] = dtype
        return dtype

    def list_deductions(self, user_id, *, start=None, end=None, include_archived=False):
        rows = []
        for d in self.deductions.values():
            if d.user_id != user_id:
                continue
            if start is not None and _day(d.applied_at) < start:
                continue
            if end is not None and _day(d.applied_at) > end:
                continue
            if d.archived_at is not None and not include_archived:
                continue
            rows.append(d)
        return sorted(rows, key=lambda d: (d.applied_at, d.deduction_id))

    def create_deduction(self, *, user_id, deduction_type_id, amount, applied_at, notes=None, mandatory=False):
        if mandatory and any(
            d.user_id == user_id and d.deduction_type_id == deduction_type_id and d.is_mandatory
            for d in self.deductions.values()
        ):
            raise ConflictError("Record already exists")
        dtype = self.deduction_types[int(deduction_type_id)]
        deduction = Deduction(
            self._id(),
            int(user_id),
            dtype.deduction_type_id,
            float(amount),
            applied_at,
            None,
            notes,
            dtype.name,
            dtype.is_mandatory,
        )
        self.deductions[deduction.deduction_id] = deduction
        return deduction

    def archive_deductions(self, ids: Iterable[int], archived_at):
        count = 0
        for i in ids:
            d = self.deductions.get(int(i))
            if d and d.archived_at is None:
                self.deductions[d.deduction_id] = replace(d, archived_at=archived_at)
                count += 1
        return count

    # LoanRepository
    def list_active_loans(self, user_id=None):
        return [
            loan
            for loan in sorted(self.loans.values(), key=lambda x: x.loan_id)
            if loan.is_active and (user_id is None or loan.user_id == user_id)
        ]

    def get_loan(self, loan_id):
        return self.loans.get(int(loan_id))

    def create_loan(self, *, user_id, amount, monthly_payment_percent, term_months, purpose, created_at):
        loan = Loan(
            self._id(), user_id, amount, amount, monthly_payment_percent, term_months, LoanStatus.ACTIVE, purpose, created_at
        )
        self.loans[loan.loan_id] = loan
        return loan

    def update_loan(self, loan):
        self._maybe_fail("update_loan")
        self.loans[loan.loan_id] = loan
        return loan

    # PayrollRepository
    def list_payroll_entries(self, *, period_start=None, period_end=None, status=None, user_id=None, for_update=False):
        return [
            e
            for e in sorted(self.entries.values(), key=lambda e: e.payroll_entry_id)
            if (period_start is None or e.period_start == period_start)
            and (period_end is None or e.period_end == period_end)
            and (status is None or e.status == status)
            and (user_id is None or e.user_id == user_id)
        ]

    def get_payroll_entry(self, payroll_entry_id):
        return self.entries.get(int(payroll_entry_id))

    def create_payroll_entry(self, *, user_id, period_start, period_end, basic_salary, deductions, net_pay, created_at):
        entry = PayrollEntry(
            self._id(), user_id, period_start, period_end, basic_salary, deductions, net_pay, PayrollStatus.PENDING, created_at
        )
        self.entries[entry.payroll_entry_id] = entry
        return entry

    def update_payroll_entry(self, entry, *, expected_status=None):
        self._maybe_fail("update_payroll_entry")
        current = self.entries.get(entry.payroll_entry_id)
        if current is None:
            raise StoreError(f"Payroll entry {entry.payroll_entry_id} not found")
        if expected_status is not None and current.status != expected_status:
            raise ConflictError(f"Payroll entry {entry.payroll_entry_id} is {current.status.value.lower()}")
        # Stored JSON is a copy; later edits to the caller's dict must not leak in.
        self.entries[entry.payroll_entry_id] = replace(entry, breakdown_snapshot=copy.deepcopy(entry.breakdown_snapshot))
        return self.entries[entry.payroll_entry_id]

    def archive_payroll_entries(self, ids, archived_at):
        count = 0
        for i in ids:
            e = self.entries.get(int(i))
            if e and e.status != PayrollStatus.ARCHIVED:
                self.entries[e.payroll_entry_id] = replace(e, status=PayrollStatus.ARCHIVED, archived_at=archived_at)
                count += 1
        return count

    def list_additional_pay(self, user_id, *, start=None, end=None, include_archived=False):
        return [
            p
            for p in sorted(self.additional_pay.values(), key=lambda p: p.additional_pay_id)
            if p.user_id == user_id
            and (start is None or _day(p.applied_at) >= start)
            and (end is None or _day(p.applied_at) <= end)
            and (include_archived or p.archived_at is None)
        ]

    def create_additional_pay(self, *, user_id, kind, amount, applied_at, notes=None):
        pay = AdditionalPay(self._id(), user_id, AdditionalPayKind(kind), amount, applied_at, None, notes)
        self.additional_pay[pay.additional_pay_id] = pay
        return pay

    def archive_additional_pay(self, ids, archived_at):
        count = 0
        for i in ids:
            p = self.additional_pay.get(int(i))
            if p and p.archived_at is None:
                self.additional_pay[p.additional_pay_id] = replace(p, archived_at=archived_at)
                count += 1
        return count
