from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from pathlib import Path

import pytest

from src.payroll_system.payroll_system.advances.amortization import amortize
from src.payroll_system.payroll_system.advances.sqlite_advance_repository import SQLiteAdvanceRepository
from src.payroll_system.payroll_system.core.enums import TimeEntryStatus
from src.payroll_system.payroll_system.core.exceptions import (
    AmortizationAlreadyApplied,
    ConflictError,
    DuplicateEmployeeCode,
    DuplicateReport,
)
from src.payroll_system.payroll_system.database.bootstrap import (
    apply_sqlite_schema,
    ensure_demo_employees,
    list_sqlite_tables,
)
from src.payroll_system.payroll_system.database.connection import SQLiteConnection
from src.payroll_system.payroll_system.employees.sqlite_employee_repository import SQLiteEmployeeRepository
from src.payroll_system.payroll_system.payroll.calculator.standard_calculator import StandardSalaryCalculator
from src.payroll_system.payroll_system.payroll.model import SalaryInputs
from src.payroll_system.payroll_system.payroll.sqlite_salary_report_repository import SQLiteSalaryReportRepository
from src.payroll_system.payroll_system.time_entries.sqlite_time_entry_repository import SQLiteTimeEntryRepository

SCHEMA = Path(__file__).resolve().parents[2] / "database" / "schema_sqlite.sql"


@pytest.fixture()
def conn(tmp_path):
    db_path = tmp_path / "payroll.db"
    apply_sqlite_schema(db_path, schema_path=SCHEMA)
    return SQLiteConnection(db_path)


@pytest.fixture()
def employee_id(conn):
    return SQLiteEmployeeRepository(conn).create(
        code="EMP001",
        name="Ahmed Hassan",
        job_title="Accountant",
        basic_salary=Decimal("6000"),
        monthly_incentives=Decimal("0"),
        work_days=None,
        daily_work_hours=Decimal("8"),
    )


def _report(conn, employee_id, month="2025-03", advances=Decimal("500")):
    breakdown = StandardSalaryCalculator().calculate(
        SalaryInputs(basic_salary=6000, work_days=30, overtime_hours=10, absence_days=2, purchases_deduction=100, advances_deduction=advances)
    )
    return SQLiteSalaryReportRepository(conn).create(
        employee_id=employee_id,
        employee_code="EMP001",
        employee_name="Ahmed Hassan",
        month=month,
        date_generated=datetime(2025, 3, 31, 17, 0, 0),
        breakdown=breakdown,
    )


def test_schema_creates_all_tables(conn):
    assert set(list_sqlite_tables(conn.path)) >= {
        "employees",
        "advances",
        "time_entries",
        "salary_reports",
        "advance_repayments",
        "advance_amortizations",
    }


def test_employee_round_trip_and_duplicate_code(conn, employee_id):
    repo = SQLiteEmployeeRepository(conn)

    emp = repo.get_by_id(employee_id)
    assert emp.code == "EMP001"
    assert emp.basic_salary == Decimal("6000")
    assert emp.work_days is None

    assert repo.update(
        employee_id=employee_id,
        code="EMP001",
        name="Ahmed H.",
        job_title=None,
        basic_salary=Decimal("6100.50"),
        monthly_incentives=Decimal("0"),
        work_days=26,
        daily_work_hours=Decimal("7.5"),
    )
    emp = repo.get_by_code("EMP001")
    assert (emp.name, emp.basic_salary, emp.work_days, emp.daily_work_hours) == (
        "Ahmed H.",
        Decimal("6100.50"),
        26,
        Decimal("7.5"),
    )

    with pytest.raises(DuplicateEmployeeCode):
        repo.create(
            code="EMP001",
            name="Copy",
            job_title=None,
            basic_salary=Decimal("1"),
            monthly_incentives=Decimal("0"),
            work_days=None,
            daily_work_hours=Decimal("8"),
        )


def test_demo_seed_is_idempotent(conn):
    repo = SQLiteEmployeeRepository(conn)

    assert ensure_demo_employees(repo) == 3
    assert ensure_demo_employees(repo) == 0
    assert len(repo.list_all()) == 3


def test_time_entries_range_and_overtime_total(conn, employee_id):
    repo = SQLiteTimeEntryRepository(conn)
    for day, overtime in ((date(2025, 3, 3), "1.5"), (date(2025, 3, 31), "2"), (date(2025, 4, 1), "5")):
        repo.create(
            employee_id=employee_id,
            work_date=day,
            hours_worked=Decimal("8"),
            overtime_hours=Decimal(overtime),
            status=TimeEntryStatus.COMPLETED,
        )

    march = repo.list_for_employee(employee_id, start=date(2025, 3, 1), end=date(2025, 3, 31))

    assert [e.work_date for e in march] == [date(2025, 3, 31), date(2025, 3, 3)]
    assert repo.total_overtime_for_month(employee_id, start=date(2025, 3, 1), end=date(2025, 3, 31)) == Decimal("3.5")
    assert repo.update(entry_id=march[0].entry_id, hours_worked=Decimal("6"), overtime_hours=Decimal("0"), status=TimeEntryStatus.IN_PROGRESS)
    assert repo.get_by_id(march[0].entry_id).status is TimeEntryStatus.IN_PROGRESS
    assert repo.delete(march[0].entry_id)
    assert not repo.delete(march[0].entry_id)


def test_advances_amortization_persists_once(conn, employee_id):
    repo = SQLiteAdvanceRepository(conn)
    first = repo.create(employee_id=employee_id, amount=Decimal("300"), issue_date=date(2025, 1, 1), notes=None)
    second = repo.create(employee_id=employee_id, amount=Decimal("400"), issue_date=date(2025, 2, 1), notes="car")
    report_id = _report(conn, employee_id)

    assert repo.total_for_month(employee_id, start=date(2025, 2, 1), end=date(2025, 2, 28)) == Decimal("400")

    result = amortize(repo.list_unpaid(employee_id), Decimal("500"), as_of=date(2025, 3, 31))
    repo.save_amortization(report_id, result.advances, result.repayments, unapplied=result.unapplied)

    assert repo.get_by_id(first).is_paid is True
    assert repo.get_by_id(first).paid_date == date(2025, 3, 31)
    assert repo.get_by_id(second).remaining_amount == Decimal("200")
    assert repo.has_repayments(report_id)
    assert [a.advance_id for a in repo.list_unpaid(employee_id)] == [second]

    with pytest.raises(AmortizationAlreadyApplied):
        repo.save_amortization(report_id, result.advances, result.repayments)
    assert repo.get_by_id(second).remaining_amount == Decimal("200")


def test_stale_balance_is_a_conflict_and_rolls_back(conn, employee_id):
    repo = SQLiteAdvanceRepository(conn)
    advance_id = repo.create(employee_id=employee_id, amount=Decimal("300"), issue_date=date(2025, 1, 1), notes=None)
    report_id = _report(conn, employee_id)

    result = amortize(repo.list_unpaid(employee_id), Decimal("100"), as_of=date(2025, 3, 31))
    assert repo.mark_paid(advance_id, paid_date=date(2025, 3, 15))

    with pytest.raises(ConflictError):
        repo.save_amortization(report_id, result.advances, result.repayments)
    assert not repo.has_repayments(report_id)
    assert repo.get_by_id(advance_id).paid_date == date(2025, 3, 15)


def test_salary_report_round_trip_duplicate_and_summary(conn, employee_id):
    repo = SQLiteSalaryReportRepository(conn)
    report_id = _report(conn, employee_id)

    report = repo.get_by_id(report_id)
    assert report.breakdown.net_salary == Decimal("5375")
    assert report.breakdown.gross_salary == Decimal("6375")
    assert report.breakdown.deductions["absence_deductions"] == Decimal("400")
    assert report.date_generated == datetime(2025, 3, 31, 17, 0, 0)
    assert repo.get_for_month(employee_id, "2025-03").report_id == report_id

    with pytest.raises(DuplicateReport):
        _report(conn, employee_id)

    _report(conn, employee_id, month="2025-04", advances=Decimal("0"))
    assert [r.month for r in repo.list_for_employee(employee_id)] == ["2025-04", "2025-03"]

    summary = repo.monthly_summary("2025-03")
    assert summary.report_count == 1
    assert summary.total_net == Decimal("5375")
    assert repo.monthly_summary("2030-01").report_count == 0


def test_mark_paid_only_once(conn, employee_id):
    repo = SQLiteAdvanceRepository(conn)
    advance_id = repo.create(employee_id=employee_id, amount=Decimal("50"), issue_date=date(2025, 1, 1), notes=None)

    assert repo.mark_paid(advance_id, paid_date=date(2025, 1, 2))
    assert not repo.mark_paid(advance_id, paid_date=date(2025, 1, 3))
    assert repo.list_pending() == []
    assert repo.get_by_id(advance_id).remaining_amount == Decimal("0")


def test_sub_cent_amortization_settles_the_stored_advance(conn, employee_id):
    repo = SQLiteAdvanceRepository(conn)
    advance_id = repo.create(employee_id=employee_id, amount=Decimal("300"), issue_date=date(2025, 1, 1), notes=None)
    report_id = _report(conn, employee_id, advances=Decimal("299.999"))

    result = amortize(repo.list_unpaid(employee_id), Decimal("299.999"), as_of=date(2025, 3, 31))
    repo.save_amortization(report_id, result.advances, result.repayments, unapplied=result.unapplied)

    stored = repo.get_by_id(advance_id)
    assert (stored.remaining_amount, stored.is_paid) == (Decimal("0"), True)
    assert repo.list_pending() == []
    assert SQLiteSalaryReportRepository(conn).get_by_id(report_id).breakdown.advances_deduction == Decimal("300")


def test_salary_report_delete(conn, employee_id):
    repo = SQLiteSalaryReportRepository(conn)
    report_id = _report(conn, employee_id)

    assert repo.delete(report_id)
    assert not repo.delete(report_id)
    assert repo.get_for_month(employee_id, "2025-03") is None
