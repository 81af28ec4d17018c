from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional

from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .core.constants import AUTO_PAYROLL_DAY, AUTO_PAYROLL_HOUR, AUTO_PAYROLL_TICK_SECONDS, DEFAULT_WEEKEND_DAYS
from .database.connection import DBConfig, DatabaseConnection
from .employees.mysql_employee_repository import MySQLEmployeeRepository
from .payroll.calculator.aggregator import AttendanceAggregator
from .payroll.calculator.assembler import PayrollAssembler
from .payroll.mysql_payroll_repository import MySQLPayrollRepository
from .payroll.mysql_settings_repository import MySQLPayrollSettingsRepository
from .payroll.scheduler import AutoGenerationConfig, MonthlyPayrollScheduler
from .payroll.service import PayrollService
from .payroll.settings_service import PayrollSettingsService


@dataclass(frozen=True)
class Container:
    conn: DatabaseConnection

    employees_repo: MySQLEmployeeRepository
    attendance_repo: MySQLAttendanceRepository
    payrolls_repo: MySQLPayrollRepository
    settings_repo: MySQLPayrollSettingsRepository

    settings_service: PayrollSettingsService
    payroll_service: PayrollService
    scheduler: MonthlyPayrollScheduler


def build_container(
    *,
    db_config: dict,
    weekend_days: Iterable[int] = DEFAULT_WEEKEND_DAYS,
    auto_payroll_day: int = AUTO_PAYROLL_DAY,
    auto_payroll_hour: int = AUTO_PAYROLL_HOUR,
    auto_payroll_tick_seconds: float = AUTO_PAYROLL_TICK_SECONDS,
    max_workers: Optional[int] = None,
) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))

    employees_repo = MySQLEmployeeRepository(conn)
    attendance_repo = MySQLAttendanceRepository(conn)
    payrolls_repo = MySQLPayrollRepository(conn)
    settings_repo = MySQLPayrollSettingsRepository(conn)

    settings_service = PayrollSettingsService(settings_repo)
    payroll_service = PayrollService(
        payrolls_repo,
        employees_repo,
        attendance_repo,
        settings_service,
        aggregator=AttendanceAggregator(attendance_repo, weekend_days=weekend_days),
        assembler=PayrollAssembler(),
    )
    scheduler = MonthlyPayrollScheduler(
        payroll_service,
        config=AutoGenerationConfig(day_of_month=auto_payroll_day, hour=auto_payroll_hour),
        tick_interval_seconds=auto_payroll_tick_seconds,
        max_workers=max_workers,
    )

    return Container(
        conn=conn,
        employees_repo=employees_repo,
        attendance_repo=attendance_repo,
        payrolls_repo=payrolls_repo,
        settings_repo=settings_repo,
        settings_service=settings_service,
        payroll_service=payroll_service,
        scheduler=scheduler,
    )
