from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from ..core.enums import HolidayType
from .model import Holiday


class HolidayRepository(Protocol):
    def list_holidays(self, *, start: Optional[date] = None, end: Optional[date] = None) -> Sequence[Holiday]:
        raise NotImplementedError

    def get_holiday(self, holiday_id: int) -> Optional[Holiday]:
        raise NotImplementedError

    def create_holiday(
        self,
        *,
        name: str,
        holiday_date: date,
        kind: HolidayType,
        description: Optional[str] = None,
    ) -> Holiday:
        """One holiday per date; a second one raises ConflictError."""

        raise NotImplementedError

    def delete_holiday(self, holiday_id: int) -> bool:
        raise NotImplementedError
