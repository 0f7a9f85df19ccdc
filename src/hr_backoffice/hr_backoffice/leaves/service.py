from __future__ import annotations

import logging
from datetime import date
from typing import Optional, Sequence

from ..common.calendar import WorkCalendar, overlap
from ..common.clock import Clock
from ..common.validators import require_non_empty
from ..core.enums import RequestStatus
from ..core.exceptions import ConflictError, ValidationError
from .model import LeaveRequest
from .repository import LeaveRepository

logger = logging.getLogger(__name__)


class LeaveService:
    def __init__(self, leaves: LeaveRepository, clock: Clock):
        self._leaves = leaves
        self._clock = clock

    def create_leave(
        self,
        *,
        user_id: int,
        start_date: date,
        end_date: date,
        reason: str,
        is_paid: bool = False,
    ) -> LeaveRequest:
        if end_date < start_date:
            raise ValidationError("end_date must not be before start_date")

        reason = require_non_empty(reason, "reason")
        leave = self._leaves.create_leave(
            user_id=int(user_id),
            start_date=start_date,
            end_date=end_date,
            is_paid=bool(is_paid),
            reason=reason,
            created_at=self._clock.now(),
        )
        logger.info("Leave %s requested by user %s: %s..%s", leave.leave_id, user_id, start_date, end_date)
        return leave

    def _decide(self, leave_id: int, status: RequestStatus) -> LeaveRequest:
        leave = self._leaves.get_leave(int(leave_id))
        if not leave:
            raise ValidationError(f"Leave request {leave_id} does not exist")
        if leave.status != RequestStatus.PENDING:
            raise ConflictError(f"Leave request {leave_id} was already {leave.status.value.lower()}")

        decided = self._leaves.decide_leave(leave_id=leave.leave_id, status=status, decided_at=self._clock.now())
        logger.info("Leave %s %s", leave_id, status.value.lower())
        return decided

    def approve(self, leave_id: int) -> LeaveRequest:
        return self._decide(leave_id, RequestStatus.APPROVED)

    def reject(self, leave_id: int) -> LeaveRequest:
        return self._decide(leave_id, RequestStatus.REJECTED)

    def approved_leaves(self, user_id: int, start: date, end: date) -> Sequence[LeaveRequest]:
        return self._leaves.list_leaves(user_id=int(user_id), status=RequestStatus.APPROVED, start=start, end=end)

    def is_on_leave(self, user_id: int, day: date) -> bool:
        return any(leave.covers(day) for leave in self.approved_leaves(user_id, day, day))

    def leave_days(
        self,
        user_id: int,
        start: date,
        end: date,
        calendar: Optional[WorkCalendar] = None,
        *,
        unpaid_only: bool = False,
    ) -> set[date]:
        """Working days in [start, end] covered by approved leave.

        Overlapping requests never count the same day twice.
        """
        calendar = calendar or WorkCalendar()
        days: set[date] = set()
        for leave in self.approved_leaves(user_id, start, end):
            if unpaid_only and leave.is_paid:
                continue
            span = overlap(start, end, leave.start_date, leave.end_date)
            if span:
                days.update(calendar.working_days(*span))
        return days

    def unpaid_leave_days(self, user_id: int, start: date, end: date, calendar: Optional[WorkCalendar] = None) -> int:
        return len(self.leave_days(user_id, start, end, calendar, unpaid_only=True))
