from __future__ import annotations

from dataclasses import replace

from ...common.time_window import seconds_between, within_window
from .base import AttendanceStrategy, DayContext, StatusDecision, time_in_decision


class ClosedPunchStrategy(AttendanceStrategy):
    """Both punches recorded: final PRESENT/LATE, plus how early the time-out was."""

    def decide(self, ctx: DayContext) -> StatusDecision:
        decision = time_in_decision(ctx)
        start = ctx.settings.time_out_start
        if not start:
            return decision

        time_out = ctx.civil(ctx.record.time_out)
        early = max(0.0, -seconds_between(ctx.work_date, start, time_out))
        if early > 0:
            return replace(decision, seconds_early=early, note="early time-out")
        if not within_window(time_out, start, ctx.settings.time_out_end):
            return replace(decision, note="time-out after window")
        return decision
