"""Working-day calendar.

One rule for every call site: a day is a working day unless it falls on the
excluded weekday (Sunday by default) or, for `WorkCalendar`, on a holiday.
"""

from __future__ import annotations

from datetime import date, timedelta
from typing import Iterator, List, Optional, Protocol, Sequence, Set

from ..core.constants import DEFAULT_EXCLUDED_WEEKDAY


class HolidaySource(Protocol):
    def list_holidays(self, *, start: Optional[date] = None, end: Optional[date] = None) -> Sequence:
        raise NotImplementedError


def _days(start: date, end: date) -> Iterator[date]:
    current = start
    while current <= end:
        yield current
        current += timedelta(days=1)


def is_working_day(day: date, excluded_weekday: int = DEFAULT_EXCLUDED_WEEKDAY) -> bool:
    return day.weekday() != excluded_weekday


def working_days(
    period_start: date,
    period_end: date,
    excluded_weekday: int = DEFAULT_EXCLUDED_WEEKDAY,
) -> List[date]:
    """Inclusive, ordered working days between two civil dates."""
    return [d for d in _days(period_start, period_end) if is_working_day(d, excluded_weekday)]


def count_working_days(
    period_start: date,
    period_end: date,
    excluded_weekday: int = DEFAULT_EXCLUDED_WEEKDAY,
) -> int:
    return len(working_days(period_start, period_end, excluded_weekday))


def period_duration_days(start: date, end: date) -> int:
    if end < start:
        return 0
    return (end - start).days + 1


def overlap(start: date, end: date, other_start: date, other_end: date) -> tuple[date, date] | None:
    lo = max(start, other_start)
    hi = min(end, other_end)
    if hi < lo:
        return None
    return lo, hi


class WorkCalendar:
    """Calendar bound to the configured rest day and, when given, the holiday list."""

    def __init__(self, excluded_weekday: int = DEFAULT_EXCLUDED_WEEKDAY, *, holidays: Optional[HolidaySource] = None):
        if not 0 <= int(excluded_weekday) <= 6:
            raise ValueError(f"excluded_weekday must be 0..6, got {excluded_weekday!r}")
        self.excluded_weekday = int(excluded_weekday)
        self._holidays = holidays

    def holiday_dates(self, start: date, end: date) -> Set[date]:
        if self._holidays is None:
            return set()
        return {h.holiday_date for h in self._holidays.list_holidays(start=start, end=end)}

    def is_holiday(self, day: date) -> bool:
        return day in self.holiday_dates(day, day)

    def is_working_day(self, day: date) -> bool:
        return is_working_day(day, self.excluded_weekday) and not self.is_holiday(day)

    def working_days(self, start: date, end: date) -> List[date]:
        days = working_days(start, end, self.excluded_weekday)
        if not days:
            return days
        closed = self.holiday_dates(start, end)
        return [d for d in days if d not in closed]

    def count_working_days(self, start: date, end: date) -> int:
        return len(self.working_days(start, end))
