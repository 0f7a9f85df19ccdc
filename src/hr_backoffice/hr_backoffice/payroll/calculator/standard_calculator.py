from __future__ import annotations

import functools
import logging
from datetime import datetime
from typing import Optional

from ...attendance.model import AttendanceRecord
from ...attendance.strategies.base import StatusDecision
from ...common.datetime_utils import hours_between, to_civil
from ...common.time_window import at
from ...core.constants import EXPECTED_DAILY_HOURS, LATE_DEDUCTION_CAP_RATIO
from ...core.enums import AttendanceStatus, CalculationType
from ...core.exceptions import ComputationGuardError
from ...deductions.model import DeductionType
from ...settings.model import AttendanceSettings
from .base import DayCharge, DeductionCalculator

logger = logging.getLogger(__name__)


def _require_basis(monthly_basic: float, working_days: int) -> None:
    if working_days is None or working_days <= 0:
        raise ComputationGuardError(f"working_days must be positive, got {working_days!r}")
    if monthly_basic is None or monthly_basic <= 0:
        raise ComputationGuardError(f"monthly_basic must be positive, got {monthly_basic!r}")


def guarded(fn):
    """Turn a guard failure into 0 and clamp every result at 0."""

    @functools.wraps(fn)
    def wrapper(*args, **kwargs):
        try:
            value = fn(*args, **kwargs)
        except ComputationGuardError as e:
            logger.warning("%s short-circuited to 0: %s", fn.__name__, e)
            return 0.0
        return max(0.0, value)

    return wrapper


class StandardDeductionCalculator(DeductionCalculator):
    """Standard rules: 8-hour days, lateness charged per second, capped at half a day."""

    def __init__(self, *, expected_hours: float = EXPECTED_DAILY_HOURS, cap_ratio: float = LATE_DEDUCTION_CAP_RATIO):
        self._expected_hours = float(expected_hours)
        self._cap_ratio = float(cap_ratio)

    @guarded
    def per_second_rate(self, monthly_basic: float, working_days: int) -> float:
        _require_basis(monthly_basic, working_days)
        return monthly_basic / working_days / self._expected_hours / 3600

    @guarded
    def daily_rate(self, monthly_basic: float, working_days: int) -> float:
        _require_basis(monthly_basic, working_days)
        return monthly_basic / working_days

    @guarded
    def hourly_rate(self, monthly_basic: float, working_days: int) -> float:
        _require_basis(monthly_basic, working_days)
        return monthly_basic / working_days / self._expected_hours

    def capped_seconds_deduction(self, seconds: float, monthly_basic: float, working_days: int) -> float:
        if seconds <= 0:
            return 0.0
        raw = seconds * self.per_second_rate(monthly_basic, working_days)
        return min(raw, self.daily_rate(monthly_basic, working_days) * self._cap_ratio)

    def late_deduction(
        self, time_in: datetime, expected_time_in: datetime, monthly_basic: float, working_days: int
    ) -> float:
        seconds_late = max(0.0, (time_in - expected_time_in).total_seconds())
        return self.capped_seconds_deduction(seconds_late, monthly_basic, working_days)

    def early_timeout_deduction(
        self, time_out: datetime, expected_time_out: datetime, monthly_basic: float, working_days: int
    ) -> float:
        seconds_early = max(0.0, (expected_time_out - time_out).total_seconds())
        return self.capped_seconds_deduction(seconds_early, monthly_basic, working_days)

    def absence_deduction(self, monthly_basic: float, working_days: int) -> float:
        return self.daily_rate(monthly_basic, working_days)

    def partial_deduction(
        self, monthly_basic: float, actual_hours: float, working_days: int, expected_hours: float = EXPECTED_DAILY_HOURS
    ) -> float:
        missing = max(0.0, float(expected_hours) - max(0.0, float(actual_hours)))
        return missing * self.hourly_rate(monthly_basic, working_days)

    def earnings(
        self,
        monthly_basic: float,
        time_in: datetime,
        time_out: Optional[datetime],
        now: datetime,
        working_days: int,
    ) -> float:
        end = time_out or now
        if time_in.tzinfo is None or end.tzinfo is None:
            time_in, end = time_in.replace(tzinfo=None), end.replace(tzinfo=None)
        return hours_between(time_in, end) * self.hourly_rate(monthly_basic, working_days)

    @guarded
    def standing_deduction_amount(self, deduction_type: DeductionType, salary_basis: float) -> float:
        if deduction_type.calculation_type == CalculationType.PERCENTAGE:
            return float(salary_basis or 0.0) * float(deduction_type.percentage_value or 0.0) / 100
        return float(deduction_type.amount or 0.0)

    def day_charge(
        self,
        decision: StatusDecision,
        record: Optional[AttendanceRecord],
        monthly_basic: float,
        working_days: int,
        settings: AttendanceSettings,
        now: datetime,
    ) -> DayCharge:
        status = decision.status
        if status == AttendanceStatus.ABSENT:
            return DayCharge(deduction=self.absence_deduction(monthly_basic, working_days))

        if status == AttendanceStatus.PARTIAL:
            # A punch that was never closed credits no hours.
            return DayCharge(deduction=self.partial_deduction(monthly_basic, 0.0, working_days, self._expected_hours))

        if status not in (AttendanceStatus.PRESENT, AttendanceStatus.LATE) or record is None or record.time_in is None:
            return DayCharge()

        tz = now.tzinfo
        time_in = to_civil(record.time_in, tz)
        time_out = to_civil(record.time_out, tz) if record.time_out else None

        deduction = 0.0
        if status == AttendanceStatus.LATE and settings.time_in_end:
            expected_in = at(record.work_date, settings.time_in_end, time_in.tzinfo)
            deduction += self.late_deduction(time_in, expected_in, monthly_basic, working_days)
        if time_out is not None and settings.time_out_start:
            expected_out = at(record.work_date, settings.time_out_start, time_out.tzinfo)
            deduction += self.early_timeout_deduction(time_out, expected_out, monthly_basic, working_days)
        hours = hours_between(time_in, time_out or now)
        return DayCharge(
            deduction=deduction,
            earnings=self.earnings(monthly_basic, time_in, time_out, now, working_days),
            work_hours=hours,
        )
