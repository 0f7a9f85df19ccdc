from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ...common.datetime_utils import to_civil
from ...common.time_window import is_late, seconds_between
from ...core.enums import AttendanceStatus
from ...settings.model import AttendanceSettings
from ..model import AttendanceRecord


@dataclass(frozen=True)
class DayContext:
    """Everything a strategy may look at for one (user, civil day)."""

    work_date: date
    record: Optional[AttendanceRecord]
    now: datetime
    settings: AttendanceSettings
    is_working_day: bool = True
    on_leave: bool = False

    @property
    def today(self) -> date:
        return self.now.date()

    @property
    def is_past(self) -> bool:
        return self.work_date < self.today

    @property
    def is_future(self) -> bool:
        return self.work_date > self.today

    def civil(self, value: datetime) -> datetime:
        return to_civil(value, self.now.tzinfo)


@dataclass(frozen=True)
class StatusDecision:
    status: AttendanceStatus
    note: Optional[str] = None
    seconds_late: float = 0.0
    seconds_early: float = 0.0


class AttendanceStrategy(ABC):
    """Strategy Pattern: encapsulate how one kind of day is classified."""

    @abstractmethod
    def decide(self, ctx: DayContext) -> StatusDecision:
        raise NotImplementedError


def time_in_decision(ctx: DayContext) -> StatusDecision:
    """PRESENT or LATE from the time-in punch alone."""
    settings = ctx.settings
    time_in = ctx.civil(ctx.record.time_in)
    if settings.auto_mark_late and is_late(time_in, settings.time_in_end):
        late = max(0.0, seconds_between(ctx.work_date, settings.time_in_end, time_in))
        return StatusDecision(status=AttendanceStatus.LATE, seconds_late=late)
    return StatusDecision(status=AttendanceStatus.PRESENT)
