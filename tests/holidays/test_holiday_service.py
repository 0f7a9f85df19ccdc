from __future__ import annotations

from datetime import date

import pytest

from src.hr_backoffice.hr_backoffice.core.enums import HolidayType
from src.hr_backoffice.hr_backoffice.core.exceptions import ConflictError, ValidationError


@pytest.fixture
def holidays(services):
    return services.holiday_service


def test_create_and_list_in_range(holidays):
    labor = holidays.create_holiday(name=" Labor Day ", holiday_date=date(2025, 5, 1), kind="NATIONAL")
    holidays.create_holiday(name="Good Friday", holiday_date=date(2025, 4, 18), kind=HolidayType.RELIGIOUS)

    assert labor.name == "Labor Day"
    assert labor.kind == HolidayType.NATIONAL
    assert labor.description is None
    assert [h.name for h in holidays.list_holidays()] == ["Good Friday", "Labor Day"]
    assert [h.name for h in holidays.list_holidays(date(2025, 4, 19), date(2025, 5, 31))] == ["Labor Day"]


def test_one_holiday_per_date(holidays):
    holidays.create_holiday(name="Christmas Day", holiday_date=date(2025, 12, 25), kind="RELIGIOUS")
    with pytest.raises(ConflictError):
        holidays.create_holiday(name="Company Party", holiday_date=date(2025, 12, 25), kind="COMPANY")


def test_validation(holidays):
    with pytest.raises(ValidationError):
        holidays.create_holiday(name="  ", holiday_date=date(2025, 6, 12), kind="NATIONAL")
    with pytest.raises(ValidationError):
        holidays.create_holiday(name="Founders", holiday_date=date(2025, 6, 12), kind="REGIONAL")
    with pytest.raises(ValidationError):
        holidays.list_holidays(date(2025, 6, 30), date(2025, 6, 1))
    with pytest.raises(ValidationError):
        holidays.delete_holiday(404)


def test_deleted_holiday_is_a_working_day_again(holidays, calendar):
    holiday = holidays.create_holiday(name="Rizal Day", holiday_date=date(2025, 12, 30), kind="NATIONAL")
    assert not calendar.is_working_day(date(2025, 12, 30))

    holidays.delete_holiday(holiday.holiday_id)
    assert calendar.is_working_day(date(2025, 12, 30))
