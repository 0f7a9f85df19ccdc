from __future__ import annotations

from ...common.time_window import is_after
from ...core.enums import AttendanceStatus
from .base import AttendanceStrategy, DayContext, StatusDecision


class NoPunchStrategy(AttendanceStrategy):
    """No time-in yet: PENDING until the time-in window closes, then ABSENT."""

    def decide(self, ctx: DayContext) -> StatusDecision:
        if ctx.is_future:
            return StatusDecision(status=AttendanceStatus.PENDING)
        if ctx.is_past:
            return StatusDecision(status=AttendanceStatus.ABSENT, note="no time-in")

        if is_after(ctx.now, ctx.settings.time_in_end):
            return StatusDecision(status=AttendanceStatus.ABSENT, note="no time-in")
        return StatusDecision(status=AttendanceStatus.PENDING)
