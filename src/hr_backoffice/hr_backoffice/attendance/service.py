from __future__ import annotations

import logging
from datetime import date
from typing import List, Optional

from ..common.clock import Clock
from ..common.time_window import is_after
from ..core.constants import DEFAULT_HISTORY_LIMIT
from ..core.enums import AttendanceStatus, PunchAction
from ..core.exceptions import ConfigurationError, ConflictError, ValidationError
from ..leaves.service import LeaveService
from ..personnel.repository import PersonnelRepository
from ..settings.service import SettingsService
from .model import AttendanceDay, AttendanceRecord, PunchResult, SweepResult
from .repository import AttendanceRepository
from .resolver import AttendanceStatusResolver

logger = logging.getLogger(__name__)


class AttendanceService:
    def __init__(
        self,
        attendance: AttendanceRepository,
        personnel: PersonnelRepository,
        settings: SettingsService,
        leaves: LeaveService,
        clock: Clock,
        resolver: AttendanceStatusResolver,
    ):
        self._attendance = attendance
        self._personnel = personnel
        self._settings = settings
        self._leaves = leaves
        self._clock = clock
        self._resolver = resolver

    @property
    def calendar(self):
        return self._resolver.calendar

    def punch(self, user_id: int) -> PunchResult:
        """Record the next punch of today: time-in first, then time-out."""
        now = self._clock.now()
        today = now.date()

        person = self._personnel.get_personnel(int(user_id))
        if not person or not person.is_active:
            raise ValidationError("Personnel does not exist or is inactive")

        settings = self._settings.get()
        if not self.calendar.is_working_day(today):
            raise ValidationError("Attendance is not recorded on non-working days")
        if self._leaves.is_on_leave(person.user_id, today):
            raise ValidationError("Attendance cannot be recorded during approved leave")
        if is_after(now, settings.time_out_end):
            raise ValidationError(f"Attendance is closed after {settings.time_out_end}")

        record = self._attendance.find_attendance(person.user_id, today)
        if record is None:
            action = PunchAction.TIME_IN
            draft = AttendanceRecord(0, person.user_id, today, now, None, AttendanceStatus.PENDING)
        elif record.time_in is None:
            action = PunchAction.TIME_IN
            draft = AttendanceRecord(record.attendance_id, person.user_id, today, now, None, record.status, record.note)
        elif record.time_out is None:
            action = PunchAction.TIME_OUT
            draft = AttendanceRecord(
                record.attendance_id, person.user_id, today, record.time_in, now, record.status, record.note
            )
        else:
            raise ConflictError("Already timed out today")

        decision = self._resolver.resolve(work_date=today, record=draft, now=now, settings=settings)

        if record is None:
            saved = self._attendance.create_attendance(
                user_id=person.user_id,
                work_date=today,
                status=decision.status,
                time_in=now,
                note=decision.note,
            )
        else:
            saved = self._attendance.update_attendance(
                attendance_id=record.attendance_id,
                time_in=draft.time_in,
                time_out=draft.time_out,
                status=decision.status,
                note=decision.note,
            )

        logger.info("User %s %s at %s (%s)", person.user_id, action.value, now.isoformat(), decision.status.value)
        return PunchResult(
            action=action,
            record=saved,
            status=decision.status,
            seconds_late=decision.seconds_late,
            seconds_early=decision.seconds_early,
        )

    def auto_mark_absent(self, work_date: Optional[date] = None) -> SweepResult:
        """Close a working day: everyone without a time-in becomes ABSENT.

        Safe to run repeatedly; the (user, day) unique key absorbs races.
        """
        now = self._clock.now()
        today = now.date()
        day = work_date or today
        settings = self._settings.get()

        if not settings.auto_mark_absent:
            return SweepResult(work_date=day, skipped=True, reason="auto_mark_absent is disabled")
        if not self.calendar.is_working_day(day):
            return SweepResult(work_date=day, skipped=True, reason="non-working day")

        cutoff = settings.absence_cutoff
        if not cutoff:
            raise ConfigurationError("time_out_end or time_in_end must be configured to mark absences")
        if day > today:
            raise ValidationError("Cannot mark absences for a future date")
        if day == today and not is_after(now, cutoff):
            return SweepResult(work_date=day, skipped=True, reason=f"before cutoff {cutoff}")

        created = updated = already = 0
        for person in self._personnel.list_active_personnel():
            if self._leaves.is_on_leave(person.user_id, day):
                continue

            record = self._attendance.find_attendance(person.user_id, day)
            if record is None:
                try:
                    self._attendance.create_attendance(
                        user_id=person.user_id,
                        work_date=day,
                        status=AttendanceStatus.ABSENT,
                        note="no time-in",
                    )
                    created += 1
                except ConflictError:
                    already += 1
            elif record.time_in is None:
                if record.status == AttendanceStatus.ABSENT:
                    already += 1
                    continue
                self._attendance.update_attendance(
                    attendance_id=record.attendance_id,
                    time_in=None,
                    time_out=None,
                    status=AttendanceStatus.ABSENT,
                    note="no time-in",
                )
                updated += 1

        logger.info("Absent sweep %s: created=%d updated=%d already=%d", day, created, updated, already)
        return SweepResult(work_date=day, created=created, updated=updated, already_marked=already)

    def _to_day(self, user_id: int, day: date, record: Optional[AttendanceRecord], settings, now, on_leave: bool):
        decision = self._resolver.resolve(work_date=day, record=record, now=now, settings=settings, on_leave=on_leave)
        return AttendanceDay(
            user_id=int(user_id),
            work_date=day,
            status=decision.status,
            time_in=record.time_in if record else None,
            time_out=record.time_out if record else None,
            seconds_late=decision.seconds_late,
            seconds_early=decision.seconds_early,
            note=decision.note,
        )

    def day_view(self, user_id: int, day: date) -> AttendanceDay:
        now = self._clock.now()
        settings = self._settings.get()
        record = self._attendance.find_attendance(int(user_id), day)
        return self._to_day(user_id, day, record, settings, now, self._leaves.is_on_leave(int(user_id), day))

    def live_records(self, user_id: int, start: date, end: date) -> List[AttendanceDay]:
        """Every working day in range with its live status, recorded or not."""
        if start > end:
            raise ValidationError("start must not be after end")

        now = self._clock.now()
        settings = self._settings.get()
        by_day = {r.work_date: r for r in self._attendance.list_attendance(start=start, end=end, user_id=int(user_id))}
        leave_days = self._leaves.leave_days(int(user_id), start, end, self.calendar)

        return [
            self._to_day(user_id, day, by_day.get(day), settings, now, day in leave_days)
            for day in self.calendar.working_days(start, end)
        ]

    def history(self, user_id: int, *, limit: int = DEFAULT_HISTORY_LIMIT) -> List[AttendanceDay]:
        now = self._clock.now()
        settings = self._settings.get()
        records = self._attendance.get_recent_for_user(int(user_id), int(limit))
        return [
            self._to_day(user_id, r.work_date, r, settings, now, self._leaves.is_on_leave(int(user_id), r.work_date))
            for r in records
        ]

    def admin_clear(self, *, start: date, end: date, user_id: Optional[int] = None) -> int:
        if start > end:
            raise ValidationError("start must not be after end")

        removed = self._attendance.delete_attendance(start=start, end=end, user_id=user_id)
        logger.warning(
            "Deleted %d attendance records %s..%s (user=%s)", removed, start, end, user_id if user_id else "all"
        )
        return removed
