from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

from .advances.mysql_advance_repository import MySQLAdvanceRepository
from .advances.repository import AdvanceRepository
from .advances.service import AdvanceService
from .advances.sqlite_advance_repository import SQLiteAdvanceRepository
from .database.connection import DBConfig, DatabaseConnection, SQLiteConnection
from .employees.mysql_employee_repository import MySQLEmployeeRepository
from .employees.repository import EmployeeRepository
from .employees.service import EmployeeService
from .employees.sqlite_employee_repository import SQLiteEmployeeRepository
from .payroll.calculator.base import SalaryCalculator
from .payroll.calculator.standard_calculator import StandardSalaryCalculator
from .payroll.model import PayrollPolicy
from .payroll.mysql_salary_report_repository import MySQLSalaryReportRepository
from .payroll.repository import SalaryReportRepository
from .payroll.service import SalaryReportService
from .payroll.sqlite_salary_report_repository import SQLiteSalaryReportRepository
from .time_entries.mysql_time_entry_repository import MySQLTimeEntryRepository
from .time_entries.repository import TimeEntryRepository
from .time_entries.service import TimeEntryService
from .time_entries.sqlite_time_entry_repository import SQLiteTimeEntryRepository

BACKENDS = ("mysql", "sqlite")


@dataclass(frozen=True)
class Container:
    conn: Union[DatabaseConnection, SQLiteConnection]
    policy: PayrollPolicy
    calculator: SalaryCalculator

    employees_repo: EmployeeRepository
    advances_repo: AdvanceRepository
    time_entries_repo: TimeEntryRepository
    salary_reports_repo: SalaryReportRepository

    employee_service: EmployeeService
    advance_service: AdvanceService
    time_entry_service: TimeEntryService
    salary_report_service: SalaryReportService


def build_container(
    *,
    db_backend: str = "mysql",
    db_config: Optional[dict] = None,
    sqlite_path: Union[str, Path, None] = None,
    policy: Optional[PayrollPolicy] = None,
) -> Container:
    backend = (db_backend or "mysql").strip().lower()
    if backend not in BACKENDS:
        raise ValueError(f"Unknown DB_BACKEND {db_backend!r} (expected one of: {', '.join(BACKENDS)})")

    if backend == "sqlite":
        if not sqlite_path:
            raise ValueError("SQLITE_PATH is required for the sqlite backend")
        conn = SQLiteConnection(sqlite_path)
        employees_repo = SQLiteEmployeeRepository(conn)
        advances_repo = SQLiteAdvanceRepository(conn)
        time_entries_repo = SQLiteTimeEntryRepository(conn)
        salary_reports_repo = SQLiteSalaryReportRepository(conn)
    else:
        db_config = db_config or {}
        config = DBConfig(
            host=str(db_config["host"]),
            port=int(db_config.get("port", 3306)),
            user=str(db_config["user"]),
            password=str(db_config["password"]),
            database=str(db_config["database"]),
        )
        conn = DatabaseConnection.get_instance(config)
        employees_repo = MySQLEmployeeRepository(conn)
        advances_repo = MySQLAdvanceRepository(conn)
        time_entries_repo = MySQLTimeEntryRepository(conn)
        salary_reports_repo = MySQLSalaryReportRepository(conn)

    policy = policy or PayrollPolicy()
    calculator = StandardSalaryCalculator(policy)

    employee_service = EmployeeService(employees_repo)
    advance_service = AdvanceService(advances_repo, employees_repo, limit_ratio=policy.advance_limit_ratio)
    time_entry_service = TimeEntryService(time_entries_repo, employees_repo)
    salary_report_service = SalaryReportService(
        salary_reports_repo,
        employee_service,
        time_entries_repo,
        advance_service,
        calculator=calculator,
    )

    return Container(
        conn=conn,
        policy=policy,
        calculator=calculator,
        employees_repo=employees_repo,
        advances_repo=advances_repo,
        time_entries_repo=time_entries_repo,
        salary_reports_repo=salary_reports_repo,
        employee_service=employee_service,
        advance_service=advance_service,
        time_entry_service=time_entry_service,
        salary_report_service=salary_report_service,
    )
