from __future__ import annotations

from datetime import date

import pytest

from src.hr_backoffice.hr_backoffice.attendance.model import AttendanceRecord
from src.hr_backoffice.hr_backoffice.attendance.strategies.base import StatusDecision
from src.hr_backoffice.hr_backoffice.core.enums import AttendanceStatus, CalculationType
from src.hr_backoffice.hr_backoffice.deductions.model import DeductionType
from src.hr_backoffice.hr_backoffice.payroll.calculator.standard_calculator import StandardDeductionCalculator
from src.hr_backoffice.hr_backoffice.settings.model import AttendanceSettings

from tests.fakes import civil

MONTHLY = 26000.0
DAYS = 13  # daily rate 2000, hourly 250


@pytest.fixture
def calc():
    return StandardDeductionCalculator()


def test_rates_agree(calc):
    assert calc.daily_rate(MONTHLY, DAYS) == pytest.approx(2000)
    assert calc.hourly_rate(MONTHLY, DAYS) == pytest.approx(250)
    assert calc.per_second_rate(MONTHLY, DAYS) * 8 * 3600 == pytest.approx(calc.daily_rate(MONTHLY, DAYS))


def test_late_deduction_is_per_second_and_capped(calc):
    expected = civil(2025, 3, 12, 9, 30)
    one_minute = calc.late_deduction(civil(2025, 3, 12, 9, 31), expected, MONTHLY, DAYS)
    assert one_minute == pytest.approx(60 * calc.per_second_rate(MONTHLY, DAYS))

    on_time = calc.late_deduction(civil(2025, 3, 12, 9, 0), expected, MONTHLY, DAYS)
    assert on_time == 0

    very_late = calc.late_deduction(civil(2025, 3, 12, 16, 0), expected, MONTHLY, DAYS)
    assert very_late == pytest.approx(1000)


def test_early_timeout_mirrors_lateness(calc):
    expected = civil(2025, 3, 12, 17, 0)
    assert calc.early_timeout_deduction(civil(2025, 3, 12, 16, 0), expected, MONTHLY, DAYS) == pytest.approx(250)
    assert calc.early_timeout_deduction(civil(2025, 3, 12, 17, 30), expected, MONTHLY, DAYS) == 0


def test_absence_and_partial(calc):
    assert calc.absence_deduction(MONTHLY, DAYS) == pytest.approx(2000)
    assert calc.partial_deduction(MONTHLY, 5, DAYS) == pytest.approx(750)
    assert calc.partial_deduction(MONTHLY, 10, DAYS) == 0


@pytest.mark.parametrize("monthly, days", [(MONTHLY, 0), (MONTHLY, -3), (0, DAYS), (None, DAYS)])
def test_guard_short_circuits_to_zero(calc, monthly, days):
    assert calc.daily_rate(monthly, days) == 0
    assert calc.per_second_rate(monthly, days) == 0
    assert calc.absence_deduction(monthly, days) == 0
    assert calc.late_deduction(civil(2025, 3, 12, 12, 0), civil(2025, 3, 12, 9, 0), monthly, days) == 0


def test_earnings_span_to_now_while_open(calc):
    time_in = civil(2025, 3, 12, 8, 0)
    assert calc.earnings(MONTHLY, time_in, None, civil(2025, 3, 12, 10, 0), DAYS) == pytest.approx(500)
    assert calc.earnings(MONTHLY, time_in, civil(2025, 3, 12, 9, 0), civil(2025, 3, 12, 18, 0), DAYS) == pytest.approx(250)


def test_standing_deduction_amount(calc):
    fixed = DeductionType(1, "SSS", CalculationType.FIXED, amount=500)
    percent = DeductionType(2, "Tax", CalculationType.PERCENTAGE, percentage_value=10)
    assert calc.standing_deduction_amount(fixed, MONTHLY) == 500
    assert calc.standing_deduction_amount(percent, MONTHLY) == pytest.approx(2600)


def test_day_charge_by_status(calc):
    settings = AttendanceSettings(time_in_end="09:30")
    now = civil(2025, 3, 12, 18, 0)
    day = date(2025, 3, 12)
    record = AttendanceRecord(1, 1, day, civil(2025, 3, 12, 9, 31), None, AttendanceStatus.LATE)

    late = calc.day_charge(
        StatusDecision(AttendanceStatus.LATE, seconds_late=60), record, MONTHLY, DAYS, settings, now
    )
    assert late.deduction == pytest.approx(60 * calc.per_second_rate(MONTHLY, DAYS))
    assert late.work_hours == pytest.approx(8.4833, rel=1e-3)

    absent = calc.day_charge(StatusDecision(AttendanceStatus.ABSENT), None, MONTHLY, DAYS, settings, now)
    assert absent.deduction == pytest.approx(2000)

    # An unclosed punch credits no hours.
    partial = calc.day_charge(StatusDecision(AttendanceStatus.PARTIAL), record, MONTHLY, DAYS, settings, now)
    assert partial.deduction == pytest.approx(8 * 250)

    for status in (AttendanceStatus.PENDING, AttendanceStatus.ON_LEAVE, AttendanceStatus.NON_WORKING):
        assert calc.day_charge(StatusDecision(status), None, MONTHLY, DAYS, settings, now).deduction == 0


def test_day_charge_measures_against_configured_windows(calc):
    settings = AttendanceSettings(time_in_end="09:30", time_out_start="17:00")
    now = civil(2025, 3, 12, 18, 0)
    record = AttendanceRecord(
        1, 1, date(2025, 3, 12), civil(2025, 3, 12, 9, 36), civil(2025, 3, 12, 16, 0), AttendanceStatus.LATE
    )

    late_and_early = calc.day_charge(StatusDecision(AttendanceStatus.LATE), record, MONTHLY, DAYS, settings, now)
    assert late_and_early.deduction == pytest.approx(25 + 250)

    # PRESENT means the time-in beat the grace; only the early time-out is charged.
    present = calc.day_charge(StatusDecision(AttendanceStatus.PRESENT), record, MONTHLY, DAYS, settings, now)
    assert present.deduction == pytest.approx(250)
