from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import RequestStatus
from .model import LeaveRequest


class LeaveRepository(Protocol):
    def list_leaves(
        self,
        *,
        user_id: Optional[int] = None,
        status: Optional[RequestStatus] = None,
        start: Optional[date] = None,
        end: Optional[date] = None,
    ) -> Sequence[LeaveRequest]:
        """Leaves overlapping [start, end] when both bounds are given."""

        raise NotImplementedError

    def get_leave(self, leave_id: int) -> Optional[LeaveRequest]:
        raise NotImplementedError

    def create_leave(
        self,
        *,
        user_id: int,
        start_date: date,
        end_date: date,
        is_paid: bool,
        reason: str,
        created_at: datetime,
    ) -> LeaveRequest:
        raise NotImplementedError

    def decide_leave(self, *, leave_id: int, status: RequestStatus, decided_at: datetime) -> LeaveRequest:
        raise NotImplementedError
