from __future__ import annotations

from datetime import date

import pytest

from src.hr_backoffice.hr_backoffice.attendance.model import AttendanceRecord
from src.hr_backoffice.hr_backoffice.attendance.resolver import AttendanceStatusResolver
from src.hr_backoffice.hr_backoffice.common.calendar import WorkCalendar
from src.hr_backoffice.hr_backoffice.core.enums import AttendanceStatus
from src.hr_backoffice.hr_backoffice.settings.model import AttendanceSettings

from tests.fakes import civil

TODAY = date(2025, 3, 12)
SETTINGS = AttendanceSettings(time_in_start="07:00", time_in_end="09:30", time_out_start="16:00", time_out_end="17:00")


@pytest.fixture
def resolver():
    return AttendanceStatusResolver(WorkCalendar())


def _record(day=TODAY, time_in=None, time_out=None, status=AttendanceStatus.PENDING):
    return AttendanceRecord(1, 7, day, time_in, time_out, status)


def test_punch_after_grace_is_late_by_sixty_seconds(resolver):
    record = _record(time_in=civil(2025, 3, 12, 9, 31))
    decision = resolver.resolve(work_date=TODAY, record=record, now=civil(2025, 3, 12, 9, 45), settings=SETTINGS)

    assert decision.status == AttendanceStatus.LATE
    assert decision.seconds_late == 60


def test_punch_inside_end_minute_is_present(resolver):
    record = _record(time_in=civil(2025, 3, 12, 9, 30, 59))
    decision = resolver.resolve(work_date=TODAY, record=record, now=civil(2025, 3, 12, 9, 45), settings=SETTINGS)

    assert decision.status == AttendanceStatus.PRESENT
    assert decision.seconds_late == 0


def test_no_punch_after_time_in_end_is_absent(resolver):
    decision = resolver.resolve(work_date=TODAY, record=None, now=civil(2025, 3, 12, 10, 0), settings=SETTINGS)
    assert decision.status == AttendanceStatus.ABSENT


def test_no_punch_before_time_in_end_is_pending(resolver):
    decision = resolver.resolve(work_date=TODAY, record=None, now=civil(2025, 3, 12, 9, 30), settings=SETTINGS)
    assert decision.status == AttendanceStatus.PENDING


def test_open_punch_past_time_out_end_is_partial(resolver):
    record = _record(time_in=civil(2025, 3, 12, 8, 0))
    decision = resolver.resolve(work_date=TODAY, record=record, now=civil(2025, 3, 12, 18, 0), settings=SETTINGS)
    assert decision.status == AttendanceStatus.PARTIAL


def test_open_punch_keeps_live_status_until_cutoff(resolver):
    record = _record(time_in=civil(2025, 3, 12, 9, 40))
    decision = resolver.resolve(work_date=TODAY, record=record, now=civil(2025, 3, 12, 16, 59), settings=SETTINGS)
    assert decision.status == AttendanceStatus.LATE


def test_open_punch_on_past_day_is_partial(resolver):
    day = date(2025, 3, 11)
    record = _record(day=day, time_in=civil(2025, 3, 11, 8, 0))
    decision = resolver.resolve(work_date=day, record=record, now=civil(2025, 3, 12, 8, 0), settings=SETTINGS)
    assert decision.status == AttendanceStatus.PARTIAL


def test_closed_punch_reports_early_time_out(resolver):
    record = _record(time_in=civil(2025, 3, 12, 8, 0), time_out=civil(2025, 3, 12, 15, 0))
    decision = resolver.resolve(work_date=TODAY, record=record, now=civil(2025, 3, 12, 18, 0), settings=SETTINGS)

    assert decision.status == AttendanceStatus.PRESENT
    assert decision.seconds_early == 3600


def test_stored_status_is_never_trusted(resolver):
    record = _record(time_in=civil(2025, 3, 12, 8, 0), status=AttendanceStatus.ABSENT)
    decision = resolver.resolve(work_date=TODAY, record=record, now=civil(2025, 3, 12, 10, 0), settings=SETTINGS)
    assert decision.status == AttendanceStatus.PRESENT


def test_auto_mark_late_off_keeps_present(resolver):
    settings = AttendanceSettings(time_in_end="09:30", time_out_end="17:00", auto_mark_late=False)
    record = _record(time_in=civil(2025, 3, 12, 11, 0))
    decision = resolver.resolve(work_date=TODAY, record=record, now=civil(2025, 3, 12, 12, 0), settings=settings)
    assert decision.status == AttendanceStatus.PRESENT


def test_rest_day_wins_over_everything(resolver):
    sunday = date(2025, 3, 9)
    assert resolver.resolve(
        work_date=sunday, record=None, now=civil(2025, 3, 12, 10, 0), settings=SETTINGS
    ).status == AttendanceStatus.NON_WORKING
    assert resolver.resolve(
        work_date=sunday, record=None, now=civil(2025, 3, 12, 10, 0), settings=SETTINGS, on_leave=True
    ).status == AttendanceStatus.NON_WORKING


def test_leave_day_is_on_leave(resolver):
    decision = resolver.resolve(
        work_date=date(2025, 3, 10), record=None, now=civil(2025, 3, 12, 10, 0), settings=SETTINGS, on_leave=True
    )
    assert decision.status == AttendanceStatus.ON_LEAVE


def test_future_day_is_pending(resolver):
    decision = resolver.resolve(work_date=date(2025, 3, 13), record=None, now=civil(2025, 3, 12, 23, 0), settings=SETTINGS)
    assert decision.status == AttendanceStatus.PENDING


def test_resolution_is_idempotent(resolver):
    record = _record(time_in=civil(2025, 3, 12, 9, 45), time_out=civil(2025, 3, 12, 16, 30))
    now = civil(2025, 3, 12, 18, 0)
    first = resolver.resolve(work_date=TODAY, record=record, now=now, settings=SETTINGS)
    second = resolver.resolve(work_date=TODAY, record=record, now=now, settings=SETTINGS)
    assert first == second


def test_holiday_without_punch_is_non_working(store):
    store.create_holiday(name="Araw ng Kagitingan", holiday_date=date(2025, 3, 11), kind="NATIONAL")
    resolver = AttendanceStatusResolver(WorkCalendar(holidays=store))

    decision = resolver.resolve(
        work_date=date(2025, 3, 11), record=None, now=civil(2025, 3, 12, 10, 0), settings=SETTINGS
    )
    assert decision.status == AttendanceStatus.NON_WORKING


def test_closed_punch_after_window_is_noted(resolver):
    record = _record(time_in=civil(2025, 3, 12, 8, 0), time_out=civil(2025, 3, 12, 18, 30))
    decision = resolver.resolve(work_date=TODAY, record=record, now=civil(2025, 3, 12, 19, 0), settings=SETTINGS)

    assert decision.status == AttendanceStatus.PRESENT
    assert decision.seconds_early == 0
    assert decision.note == "time-out after window"

    inside = _record(time_in=civil(2025, 3, 12, 8, 0), time_out=civil(2025, 3, 12, 16, 30))
    assert resolver.resolve(work_date=TODAY, record=inside, now=civil(2025, 3, 12, 19, 0), settings=SETTINGS).note is None
