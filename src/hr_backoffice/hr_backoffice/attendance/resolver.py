from __future__ import annotations

from datetime import date, datetime
from typing import Optional

from ..common.calendar import WorkCalendar
from ..settings.model import AttendanceSettings
from .factory import AttendanceStrategyFactory
from .model import AttendanceRecord
from .strategies.base import DayContext, StatusDecision


class AttendanceStatusResolver:
    """Derives a day's status from its punches; the stored status is never trusted.

    Same inputs, same decision: nothing here reads the clock or the store.
    """

    def __init__(
        self,
        calendar: WorkCalendar,
        *,
        strategy_factory: Optional[AttendanceStrategyFactory] = None,
    ):
        self._calendar = calendar
        self._factory = strategy_factory or AttendanceStrategyFactory()

    @property
    def calendar(self) -> WorkCalendar:
        return self._calendar

    def resolve(
        self,
        *,
        work_date: date,
        record: Optional[AttendanceRecord],
        now: datetime,
        settings: AttendanceSettings,
        on_leave: bool = False,
    ) -> StatusDecision:
        ctx = DayContext(
            work_date=work_date,
            record=record,
            now=now,
            settings=settings,
            is_working_day=self._calendar.is_working_day(work_date),
            on_leave=on_leave,
        )
        return self._factory.for_day(ctx).decide(ctx)
