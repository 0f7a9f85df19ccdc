"""Time-of-day window checks.

Everything here works on civil `HH:mm` strings or second-of-day integers so a
comparison never mixes dates or UTC offsets.
"""

from __future__ import annotations

import re
from datetime import date, datetime, time, timedelta
from typing import Optional, Union

from ..core.constants import LATE_GRACE_MINUTES
from ..core.exceptions import ValidationError

_HHMM = re.compile(r"^([01]\d|2[0-3]):([0-5]\d)$")

TimeOfDay = Union[str, time, datetime]


def parse_hhmm(value: str) -> time:
    m = _HHMM.match((value or "").strip())
    if not m:
        raise ValidationError(f"Invalid time (HH:mm): {value!r}")
    return time(int(m.group(1)), int(m.group(2)))


def is_hhmm(value: Optional[str]) -> bool:
    return bool(value) and bool(_HHMM.match(value.strip()))


def second_of_day(value: TimeOfDay) -> int:
    if isinstance(value, str):
        value = parse_hhmm(value)
    elif isinstance(value, datetime):
        value = value.time()
    return value.hour * 3600 + value.minute * 60 + value.second


def minute_of_day(value: TimeOfDay) -> int:
    return second_of_day(value) // 60


def within_window(time_of_day: TimeOfDay, start: Optional[str] = None, end: Optional[str] = None) -> bool:
    """True when the window is unconstrained or start <= t <= end (minute resolution)."""
    if not start or not end:
        return True
    t = minute_of_day(time_of_day)
    return minute_of_day(start) <= t <= minute_of_day(end)


def is_after(time_of_day: TimeOfDay, bound: Optional[str]) -> bool:
    """Strictly past `bound` at minute resolution; never true for an unset bound."""
    if not bound:
        return False
    return minute_of_day(time_of_day) > minute_of_day(bound)


def is_late(time_of_day: TimeOfDay, window_end: Optional[str], grace_minutes: int = LATE_GRACE_MINUTES) -> bool:
    """Late once the grace after `window_end` has fully elapsed.

    Any punch inside the configured end minute (09:30:00-09:30:59 for "09:30")
    is on time; 09:31:00 is late.
    """
    if not window_end:
        return False
    return second_of_day(time_of_day) >= second_of_day(window_end) + grace_minutes * 60


def at(day: date, hhmm: str, tz=None) -> datetime:
    """Civil instant `day@hhmm`."""
    t = parse_hhmm(hhmm)
    return datetime.combine(day, t, tzinfo=tz)


def seconds_between(day: date, hhmm: str, instant: datetime) -> float:
    """Signed seconds from `day@hhmm` (same civil zone as `instant`) to `instant`."""
    anchor = at(day, hhmm, instant.tzinfo)
    return (instant - anchor) / timedelta(seconds=1)
