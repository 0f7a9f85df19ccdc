from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..core.enums import RequestStatus


@dataclass(frozen=True)
class LeaveRequest:
    leave_id: int
    user_id: int
    start_date: date
    end_date: date
    is_paid: bool
    reason: str
    status: RequestStatus
    created_at: Optional[datetime] = None
    decided_at: Optional[datetime] = None

    def covers(self, day: date) -> bool:
        return self.start_date <= day <= self.end_date

    def to_dict(self) -> dict:
        return {
            "leave_id": self.leave_id,
            "user_id": self.user_id,
            "start_date": self.start_date.isoformat(),
            "end_date": self.end_date.isoformat(),
            "is_paid": self.is_paid,
            "reason": self.reason,
            "status": self.status.value,
        }
