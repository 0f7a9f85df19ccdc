from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional

from ..core.enums import HolidayType


@dataclass(frozen=True)
class Holiday:
    """A civil date on which nobody is expected to work."""

    holiday_id: int
    name: str
    holiday_date: date
    kind: HolidayType
    description: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "holiday_id": self.holiday_id,
            "name": self.name,
            "holiday_date": self.holiday_date.isoformat(),
            "kind": self.kind.value,
            "description": self.description,
        }
