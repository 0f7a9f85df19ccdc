from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import List, Optional

from ..attendance.repository import AttendanceRepository
from ..attendance.resolver import AttendanceStatusResolver
from ..core.constants import SEMI_MONTHLY_FACTOR
from ..core.enums import AttendanceStatus
from ..deductions.repository import DeductionRepository
from ..leaves.service import LeaveService
from ..loans.amortization import installment
from ..loans.repository import LoanRepository
from ..personnel.model import Personnel
from ..settings.model import AttendanceSettings
from .calculator.base import DeductionCalculator
from .calculator.standard_calculator import StandardDeductionCalculator
from .model import AdditionLine, DayLine, DeductionLine, LoanLine
from .repository import PayrollRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PayrollComputation:
    user_id: int
    full_name: str
    period_start: date
    period_end: date
    monthly_basic: float
    basis_salary: float
    working_days: int
    attendance_deductions: float
    standing_deductions: float
    loan_deductions: float
    unpaid_leave_days: int
    unpaid_leave_deductions: float
    total_additions: float
    total_work_hours: float
    present_days: int = 0
    late_days: int = 0
    absent_days: int = 0
    partial_days: int = 0
    day_lines: List[DayLine] = field(default_factory=list)
    deduction_lines: List[DeductionLine] = field(default_factory=list)
    loan_lines: List[LoanLine] = field(default_factory=list)
    addition_lines: List[AdditionLine] = field(default_factory=list)

    @property
    def gross_salary(self) -> float:
        return self.basis_salary + self.total_additions

    @property
    def total_deductions(self) -> float:
        return (
            self.attendance_deductions
            + self.standing_deductions
            + self.loan_deductions
            + self.unpaid_leave_deductions
        )

    @property
    def net_salary(self) -> float:
        return self.gross_salary - self.total_deductions

    def figures(self) -> dict:
        return {
            "monthly_basic": self.monthly_basic,
            "basis_salary": self.basis_salary,
            "working_days": self.working_days,
            "attendance_deductions": self.attendance_deductions,
            "standing_deductions": self.standing_deductions,
            "loan_deductions": self.loan_deductions,
            "unpaid_leave_days": self.unpaid_leave_days,
            "unpaid_leave_deductions": self.unpaid_leave_deductions,
            "total_additions": self.total_additions,
            "total_work_hours": self.total_work_hours,
            "present_days": self.present_days,
            "late_days": self.late_days,
            "absent_days": self.absent_days,
            "partial_days": self.partial_days,
            "gross_salary": self.gross_salary,
            "total_deductions": self.total_deductions,
            "net_salary": self.net_salary,
        }


class PayrollAggregator:
    """Computes one personnel's payroll for a period from live data.

    Reads only; persisting materialized deductions and settling loans is the
    lifecycle service's job.
    """

    def __init__(
        self,
        *,
        attendance: AttendanceRepository,
        deductions: DeductionRepository,
        loans: LoanRepository,
        payroll: PayrollRepository,
        leaves: LeaveService,
        resolver: AttendanceStatusResolver,
        calculator: Optional[DeductionCalculator] = None,
    ):
        self._attendance = attendance
        self._deductions = deductions
        self._loans = loans
        self._payroll = payroll
        self._leaves = leaves
        self._resolver = resolver
        self._calculator = calculator or StandardDeductionCalculator()

    @property
    def calendar(self):
        return self._resolver.calendar

    @property
    def calculator(self) -> DeductionCalculator:
        return self._calculator

    def rate_days(self, settings: AttendanceSettings, period_start: date, period_end: date) -> int:
        """Working days every rate divides by: the configured period's, when there is one."""
        if settings.has_period:
            return self.calendar.count_working_days(settings.period_start, settings.period_end)
        return self.calendar.count_working_days(period_start, period_end)

    def compute(
        self,
        personnel: Personnel,
        period_start: date,
        period_end: date,
        settings: AttendanceSettings,
        now: datetime,
    ) -> PayrollComputation:
        calc = self._calculator
        user_id = personnel.user_id
        monthly = personnel.monthly_salary
        days = self.rate_days(settings, period_start, period_end)
        if days <= 0:
            logger.warning("No working days for user %s in %s..%s", user_id, period_start, period_end)

        # Attendance, up to today only.
        last = min(period_end, now.date())
        day_lines: List[DayLine] = []
        counts = {s: 0 for s in AttendanceStatus}
        if last >= period_start:
            records = {
                r.work_date: r for r in self._attendance.list_attendance(start=period_start, end=last, user_id=user_id)
            }
            leave_days = self._leaves.leave_days(user_id, period_start, last, self.calendar)

            for day in self.calendar.working_days(period_start, last):
                record = records.get(day)
                decision = self._resolver.resolve(
                    work_date=day, record=record, now=now, settings=settings, on_leave=day in leave_days
                )
                charge = calc.day_charge(decision, record, monthly, days, settings, now)
                counts[decision.status] += 1
                day_lines.append(
                    DayLine(
                        work_date=day,
                        status=decision.status,
                        deduction=charge.deduction,
                        earnings=charge.earnings,
                        work_hours=charge.work_hours,
                        seconds_late=decision.seconds_late,
                        seconds_early=decision.seconds_early,
                    )
                )

        # Standing deductions: mandatory ones are evergreen, the rest must fall in the period.
        deduction_lines: List[DeductionLine] = []
        live = self._deductions.list_deductions(user_id)
        by_type = {d.deduction_type_id: d for d in live if d.is_mandatory}
        for dtype in self._deductions.list_deduction_types(mandatory=True):
            existing = by_type.get(dtype.deduction_type_id)
            if existing:
                deduction_lines.append(
                    DeductionLine(dtype.deduction_type_id, dtype.name, existing.amount, True, existing.deduction_id)
                )
            else:
                amount = calc.standing_deduction_amount(dtype, monthly)
                deduction_lines.append(DeductionLine(dtype.deduction_type_id, dtype.name, amount, True, materialized=True))

        for d in self._deductions.list_deductions(user_id, start=period_start, end=period_end):
            if d.is_mandatory:
                continue
            deduction_lines.append(
                DeductionLine(d.deduction_type_id, d.type_name or "", d.amount, False, d.deduction_id)
            )

        loan_lines = [
            LoanLine(loan.loan_id, min(installment(loan, SEMI_MONTHLY_FACTOR), loan.balance), loan.balance)
            for loan in self._loans.list_active_loans(user_id)
        ]

        addition_lines = [
            AdditionLine(p.additional_pay_id, p.kind, p.amount)
            for p in self._payroll.list_additional_pay(user_id, start=period_start, end=period_end)
        ]

        unpaid_days = self._leaves.unpaid_leave_days(user_id, period_start, period_end, self.calendar)

        return PayrollComputation(
            user_id=user_id,
            full_name=personnel.full_name,
            period_start=period_start,
            period_end=period_end,
            monthly_basic=monthly,
            basis_salary=monthly * SEMI_MONTHLY_FACTOR,
            working_days=days,
            attendance_deductions=sum(line.deduction for line in day_lines),
            standing_deductions=sum(line.amount for line in deduction_lines),
            loan_deductions=sum(line.installment for line in loan_lines),
            unpaid_leave_days=unpaid_days,
            unpaid_leave_deductions=unpaid_days * calc.daily_rate(monthly, days),
            total_additions=sum(line.amount for line in addition_lines),
            total_work_hours=sum(line.work_hours for line in day_lines),
            present_days=counts[AttendanceStatus.PRESENT],
            late_days=counts[AttendanceStatus.LATE],
            absent_days=counts[AttendanceStatus.ABSENT],
            partial_days=counts[AttendanceStatus.PARTIAL],
            day_lines=day_lines,
            deduction_lines=deduction_lines,
            loan_lines=loan_lines,
            addition_lines=addition_lines,
        )
