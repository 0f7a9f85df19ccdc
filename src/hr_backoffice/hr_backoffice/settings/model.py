from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import date
from typing import Optional

from ..common.validators import require_hhmm, require_ordered
from ..core.constants import (
    DEFAULT_TIME_IN_END,
    DEFAULT_TIME_IN_START,
    DEFAULT_TIME_OUT_END,
    DEFAULT_TIME_OUT_START,
)
from ..core.exceptions import ValidationError


@dataclass(frozen=True)
class AttendanceSettings:
    """Time windows and the active payroll period.

    Passed by value into every computation; nothing reads it from shared state.
    """

    time_in_start: Optional[str] = DEFAULT_TIME_IN_START
    time_in_end: Optional[str] = DEFAULT_TIME_IN_END
    time_out_start: Optional[str] = DEFAULT_TIME_OUT_START
    time_out_end: Optional[str] = DEFAULT_TIME_OUT_END
    period_start: Optional[date] = None
    period_end: Optional[date] = None
    auto_mark_absent: bool = True
    auto_mark_late: bool = True
    settings_id: Optional[int] = None

    def validated(self) -> "AttendanceSettings":
        clean = replace(
            self,
            time_in_start=require_hhmm(self.time_in_start, "time_in_start"),
            time_in_end=require_hhmm(self.time_in_end, "time_in_end"),
            time_out_start=require_hhmm(self.time_out_start, "time_out_start"),
            time_out_end=require_hhmm(self.time_out_end, "time_out_end"),
        )
        require_ordered(clean.time_in_start, clean.time_in_end, "time-in window")
        require_ordered(clean.time_out_start, clean.time_out_end, "time-out window")
        if (clean.period_start is None) != (clean.period_end is None):
            raise ValidationError("period_start and period_end must be set together")
        if clean.period_start and clean.period_end and clean.period_start > clean.period_end:
            raise ValidationError("period_start must not be after period_end")
        return clean

    @property
    def has_period(self) -> bool:
        return self.period_start is not None and self.period_end is not None

    @property
    def absence_cutoff(self) -> Optional[str]:
        """Time of day after which a day without punches is closed."""
        return self.time_out_end or self.time_in_end
