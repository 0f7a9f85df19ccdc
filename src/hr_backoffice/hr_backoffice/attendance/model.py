from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..core.enums import AttendanceStatus, PunchAction


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one personnel's punches on one civil day.

    `status` is only the last resolved value kept for indexing; reads always
    resolve again.
    """

    attendance_id: int
    user_id: int
    work_date: date
    time_in: Optional[datetime]
    time_out: Optional[datetime]
    status: AttendanceStatus
    note: Optional[str] = None


@dataclass(frozen=True)
class AttendanceDay:
    """Read-model: a working day with its live status, with or without a record."""

    user_id: int
    work_date: date
    status: AttendanceStatus
    time_in: Optional[datetime]
    time_out: Optional[datetime]
    seconds_late: float = 0.0
    seconds_early: float = 0.0
    note: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "user_id": self.user_id,
            "work_date": self.work_date.isoformat(),
            "status": self.status.value,
            "time_in": self.time_in.isoformat() if self.time_in else None,
            "time_out": self.time_out.isoformat() if self.time_out else None,
            "seconds_late": self.seconds_late,
            "seconds_early": self.seconds_early,
            "note": self.note,
        }


@dataclass(frozen=True)
class PunchResult:
    action: PunchAction
    record: AttendanceRecord
    status: AttendanceStatus
    seconds_late: float = 0.0
    seconds_early: float = 0.0

    def to_dict(self) -> dict:
        return {
            "action": self.action.value,
            "attendance_id": self.record.attendance_id,
            "work_date": self.record.work_date.isoformat(),
            "time_in": self.record.time_in.isoformat() if self.record.time_in else None,
            "time_out": self.record.time_out.isoformat() if self.record.time_out else None,
            "status": self.status.value,
            "seconds_late": self.seconds_late,
            "seconds_early": self.seconds_early,
        }


@dataclass(frozen=True)
class SweepResult:
    work_date: date
    created: int = 0
    updated: int = 0
    already_marked: int = 0
    skipped: bool = False
    reason: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "work_date": self.work_date.isoformat(),
            "created": self.created,
            "updated": self.updated,
            "already_marked": self.already_marked,
            "skipped": self.skipped,
            "reason": self.reason,
        }
