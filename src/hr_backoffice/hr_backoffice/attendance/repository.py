from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import AttendanceStatus
from .model import AttendanceRecord


class AttendanceRepository(Protocol):
    def find_attendance(self, user_id: int, work_date: date) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def create_attendance(
        self,
        *,
        user_id: int,
        work_date: date,
        status: AttendanceStatus,
        time_in: Optional[datetime] = None,
        note: Optional[str] = None,
    ) -> AttendanceRecord:
        """Insert the (user, day) record; a second insert raises ConflictError."""

        raise NotImplementedError

    def update_attendance(
        self,
        *,
        attendance_id: int,
        time_in: Optional[datetime],
        time_out: Optional[datetime],
        status: AttendanceStatus,
        note: Optional[str] = None,
    ) -> AttendanceRecord:
        raise NotImplementedError

    def list_attendance(
        self,
        *,
        start: date,
        end: date,
        user_id: Optional[int] = None,
    ) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def get_recent_for_user(self, user_id: int, limit: int) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def delete_attendance(self, *, start: date, end: date, user_id: Optional[int] = None) -> int:
        """Admin bulk delete; returns the number of removed records."""

        raise NotImplementedError
