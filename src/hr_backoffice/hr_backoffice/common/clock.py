from __future__ import annotations

from datetime import datetime, tzinfo
from typing import Protocol
from zoneinfo import ZoneInfo

from ..core.constants import DEFAULT_TIMEZONE
from .datetime_utils import to_civil


class Clock(Protocol):
    """Single source of "now" for every cutoff comparison."""

    @property
    def tz(self) -> tzinfo:
        raise NotImplementedError

    def now(self) -> datetime:
        raise NotImplementedError


class SystemClock:
    def __init__(self, timezone: str = DEFAULT_TIMEZONE):
        self._tz = ZoneInfo(timezone)

    @property
    def tz(self) -> tzinfo:
        return self._tz

    def now(self) -> datetime:
        return datetime.now(self._tz)


class FixedClock:
    """Clock pinned to one instant; tests move it with `set()`."""

    def __init__(self, at: datetime, timezone: str = DEFAULT_TIMEZONE):
        self._tz = ZoneInfo(timezone)
        self._at = to_civil(at, self._tz)

    @property
    def tz(self) -> tzinfo:
        return self._tz

    def now(self) -> datetime:
        return self._at

    def set(self, at: datetime) -> None:
        self._at = to_civil(at, self._tz)
