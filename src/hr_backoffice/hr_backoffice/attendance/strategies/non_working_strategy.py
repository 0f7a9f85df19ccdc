from __future__ import annotations

from ...core.enums import AttendanceStatus
from .base import AttendanceStrategy, DayContext, StatusDecision


class NonWorkingStrategy(AttendanceStrategy):
    """Rest days and approved leave: nothing is expected, nothing is charged."""

    def decide(self, ctx: DayContext) -> StatusDecision:
        if not ctx.is_working_day:
            return StatusDecision(status=AttendanceStatus.NON_WORKING)
        return StatusDecision(status=AttendanceStatus.ON_LEAVE, note="approved leave")
