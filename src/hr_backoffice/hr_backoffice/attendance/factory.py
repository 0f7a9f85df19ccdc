from __future__ import annotations

from dataclasses import dataclass

from .strategies.base import AttendanceStrategy, DayContext
from .strategies.closed_punch_strategy import ClosedPunchStrategy
from .strategies.no_punch_strategy import NoPunchStrategy
from .strategies.non_working_strategy import NonWorkingStrategy
from .strategies.open_punch_strategy import OpenPunchStrategy


@dataclass
class AttendanceStrategyFactory:
    """Factory Pattern: choose the strategy for a day from what was punched.

    Rest days and leave win over everything; a future day never has punches
    worth judging.
    """

    def for_day(self, ctx: DayContext) -> AttendanceStrategy:
        if not ctx.is_working_day or ctx.on_leave:
            return NonWorkingStrategy()

        record = ctx.record
        if record is None or record.time_in is None or ctx.is_future:
            return NoPunchStrategy()

        if record.time_out is None:
            return OpenPunchStrategy()
        return ClosedPunchStrategy()
