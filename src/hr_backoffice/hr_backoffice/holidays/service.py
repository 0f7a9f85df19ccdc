from __future__ import annotations

import logging
from datetime import date
from typing import Optional, Sequence

from ..common.validators import require_non_empty
from ..core.enums import HolidayType
from ..core.exceptions import ValidationError
from .model import Holiday
from .repository import HolidayRepository

logger = logging.getLogger(__name__)


class HolidayService:
    def __init__(self, holidays: HolidayRepository):
        self._holidays = holidays

    def list_holidays(self, start: Optional[date] = None, end: Optional[date] = None) -> Sequence[Holiday]:
        if start and end and start > end:
            raise ValidationError("start must not be after end")
        return self._holidays.list_holidays(start=start, end=end)

    def create_holiday(
        self,
        *,
        name: str,
        holiday_date: date,
        kind: HolidayType | str,
        description: Optional[str] = None,
    ) -> Holiday:
        name = require_non_empty(name, "name")
        try:
            kind = HolidayType(kind)
        except ValueError:
            raise ValidationError(f"Unknown holiday type: {kind!r}")

        holiday = self._holidays.create_holiday(
            name=name,
            holiday_date=holiday_date,
            kind=kind,
            description=(description or "").strip() or None,
        )
        logger.info("Holiday %s on %s (%s)", holiday.name, holiday.holiday_date, kind.value)
        return holiday

    def delete_holiday(self, holiday_id: int) -> None:
        if not self._holidays.delete_holiday(int(holiday_id)):
            raise ValidationError(f"Holiday {holiday_id} does not exist")
        logger.info("Holiday %s deleted", holiday_id)
