from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ...attendance.model import AttendanceRecord
from ...attendance.strategies.base import StatusDecision
from ...deductions.model import DeductionType
from ...settings.model import AttendanceSettings


@dataclass(frozen=True)
class DayCharge:
    deduction: float = 0.0
    earnings: float = 0.0
    work_hours: float = 0.0


class DeductionCalculator(ABC):
    """Calculator interface (Strategy Pattern for payroll money rules).

    `monthly_basic` is the monthly salary; `working_days` the working days of
    the configured payroll period.
    """

    @abstractmethod
    def per_second_rate(self, monthly_basic: float, working_days: int) -> float:
        raise NotImplementedError

    @abstractmethod
    def daily_rate(self, monthly_basic: float, working_days: int) -> float:
        raise NotImplementedError

    @abstractmethod
    def hourly_rate(self, monthly_basic: float, working_days: int) -> float:
        raise NotImplementedError

    @abstractmethod
    def late_deduction(
        self, time_in: datetime, expected_time_in: datetime, monthly_basic: float, working_days: int
    ) -> float:
        raise NotImplementedError

    @abstractmethod
    def early_timeout_deduction(
        self, time_out: datetime, expected_time_out: datetime, monthly_basic: float, working_days: int
    ) -> float:
        raise NotImplementedError

    @abstractmethod
    def absence_deduction(self, monthly_basic: float, working_days: int) -> float:
        raise NotImplementedError

    @abstractmethod
    def partial_deduction(
        self, monthly_basic: float, actual_hours: float, working_days: int, expected_hours: float = 8
    ) -> float:
        raise NotImplementedError

    @abstractmethod
    def earnings(
        self,
        monthly_basic: float,
        time_in: datetime,
        time_out: Optional[datetime],
        now: datetime,
        working_days: int,
    ) -> float:
        raise NotImplementedError

    @abstractmethod
    def standing_deduction_amount(self, deduction_type: DeductionType, salary_basis: float) -> float:
        raise NotImplementedError

    @abstractmethod
    def day_charge(
        self,
        decision: StatusDecision,
        record: Optional[AttendanceRecord],
        monthly_basic: float,
        working_days: int,
        settings: AttendanceSettings,
        now: datetime,
    ) -> DayCharge:
        raise NotImplementedError
