from __future__ import annotations

from types import SimpleNamespace

import pytest

from src.hr_backoffice.hr_backoffice.common.calendar import WorkCalendar
from src.hr_backoffice.hr_backoffice.common.clock import FixedClock
from src.hr_backoffice.hr_backoffice.container import build_services
from src.hr_backoffice.hr_backoffice.settings.model import AttendanceSettings

from tests.fakes import PERIOD_END, PERIOD_START, InMemoryStore, civil


@pytest.fixture
def clock():
    # Wednesday 2025-03-12, 10:00 Manila time.
    return FixedClock(civil(2025, 3, 12, 10, 0))


@pytest.fixture
def store():
    s = InMemoryStore()
    s.settings = AttendanceSettings(period_start=PERIOD_START, period_end=PERIOD_END, settings_id=1)
    return s


@pytest.fixture
def calendar(store):
    return WorkCalendar(holidays=store)


@pytest.fixture
def services(store, clock, calendar):
    built = build_services(
        uow=store,
        settings_repo=store,
        attendance_repo=store,
        personnel_repo=store,
        leaves_repo=store,
        holidays_repo=store,
        deductions_repo=store,
        loans_repo=store,
        payroll_repo=store,
        clock=clock,
        calendar=calendar,
    )
    return SimpleNamespace(**built)
