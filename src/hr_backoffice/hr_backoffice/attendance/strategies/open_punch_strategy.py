from __future__ import annotations

from dataclasses import replace

from ...common.time_window import is_after
from ...core.enums import AttendanceStatus
from .base import AttendanceStrategy, DayContext, StatusDecision, time_in_decision


class OpenPunchStrategy(AttendanceStrategy):
    """Timed in, not out. Becomes PARTIAL once the day can no longer be closed."""

    def decide(self, ctx: DayContext) -> StatusDecision:
        live = time_in_decision(ctx)
        if ctx.is_past or is_after(ctx.now, ctx.settings.time_out_end):
            return replace(live, status=AttendanceStatus.PARTIAL, note="no time-out")
        return live
