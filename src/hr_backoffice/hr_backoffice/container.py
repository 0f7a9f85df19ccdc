from __future__ import annotations

from dataclasses import dataclass

from .attendance.factory import AttendanceStrategyFactory
from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.resolver import AttendanceStatusResolver
from .attendance.service import AttendanceService
from .common.calendar import WorkCalendar
from .common.clock import Clock, SystemClock
from .core.constants import DEFAULT_EXCLUDED_WEEKDAY, DEFAULT_TIMEZONE
from .database.connection import DBConfig, DatabaseConnection
from .deductions.mysql_deduction_repository import MySQLDeductionRepository
from .deductions.service import DeductionService
from .holidays.mysql_holiday_repository import MySQLHolidayRepository
from .holidays.service import HolidayService
from .leaves.mysql_leave_repository import MySQLLeaveRepository
from .leaves.service import LeaveService
from .loans.mysql_loan_repository import MySQLLoanRepository
from .loans.service import LoanService
from .payroll.aggregator import PayrollAggregator
from .payroll.calculator.standard_calculator import StandardDeductionCalculator
from .payroll.mysql_payroll_repository import MySQLPayrollRepository
from .payroll.service import PayrollService
from .personnel.mysql_personnel_repository import MySQLPersonnelRepository
from .settings.mysql_settings_repository import MySQLSettingsRepository
from .settings.service import SettingsService


@dataclass(frozen=True)
class Container:
    conn: DatabaseConnection
    clock: Clock
    calendar: WorkCalendar

    settings_service: SettingsService
    attendance_service: AttendanceService
    leave_service: LeaveService
    holiday_service: HolidayService
    deduction_service: DeductionService
    loan_service: LoanService
    payroll_service: PayrollService


def build_services(
    *,
    uow,
    settings_repo,
    attendance_repo,
    personnel_repo,
    leaves_repo,
    holidays_repo,
    deductions_repo,
    loans_repo,
    payroll_repo,
    clock: Clock,
    calendar: WorkCalendar,
) -> dict:
    """Wire services over any set of repositories (MySQL in production, fakes in tests)."""
    calculator = StandardDeductionCalculator()
    resolver = AttendanceStatusResolver(calendar, strategy_factory=AttendanceStrategyFactory())

    settings_service = SettingsService(settings_repo)
    leave_service = LeaveService(leaves_repo, clock)
    aggregator = PayrollAggregator(
        attendance=attendance_repo,
        deductions=deductions_repo,
        loans=loans_repo,
        payroll=payroll_repo,
        leaves=leave_service,
        resolver=resolver,
        calculator=calculator,
    )

    return dict(
        settings_service=settings_service,
        attendance_service=AttendanceService(
            attendance_repo, personnel_repo, settings_service, leave_service, clock, resolver
        ),
        leave_service=leave_service,
        holiday_service=HolidayService(holidays_repo),
        deduction_service=DeductionService(deductions_repo, personnel_repo, calculator, clock),
        loan_service=LoanService(loans_repo, personnel_repo, clock),
        payroll_service=PayrollService(
            payroll=payroll_repo,
            personnel=personnel_repo,
            deductions=deductions_repo,
            loans=loans_repo,
            settings=settings_service,
            aggregator=aggregator,
            clock=clock,
            uow=uow,
        ),
    )


def build_container(
    *,
    db_config: dict,
    timezone: str = DEFAULT_TIMEZONE,
    excluded_weekday: int = DEFAULT_EXCLUDED_WEEKDAY,
    clock: Clock | None = None,
) -> Container:
    config = DBConfig(
        host=str(db_config["host"]),
        port=int(db_config.get("port", 3306)),
        user=str(db_config["user"]),
        password=str(db_config["password"]),
        database=str(db_config["database"]),
    )
    conn = DatabaseConnection.get_instance(config)
    clock = clock or SystemClock(timezone)
    holidays_repo = MySQLHolidayRepository(conn)
    calendar = WorkCalendar(excluded_weekday, holidays=holidays_repo)

    services = build_services(
        uow=conn,
        settings_repo=MySQLSettingsRepository(conn),
        attendance_repo=MySQLAttendanceRepository(conn),
        personnel_repo=MySQLPersonnelRepository(conn),
        leaves_repo=MySQLLeaveRepository(conn),
        holidays_repo=holidays_repo,
        deductions_repo=MySQLDeductionRepository(conn),
        loans_repo=MySQLLoanRepository(conn),
        payroll_repo=MySQLPayrollRepository(conn),
        clock=clock,
        calendar=calendar,
    )
    return Container(conn=conn, clock=clock, calendar=calendar, **services)
