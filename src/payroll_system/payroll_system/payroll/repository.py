from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from ..database.rows import as_datetime, as_decimal
from .model import MonthlySummary, SalaryBreakdown, SalaryReport

# Column order shared by both backends' INSERT statements.
BREAKDOWN_COLUMNS = (
    "work_days",
    "daily_work_hours",
    "basic_salary",
    "monthly_incentives",
    "daily_rate",
    "daily_rate_with_incentives",
    "overtime_unit_value",
    "overtime_hours",
    "overtime_amount",
    "bonus",
    "total_salary_with_incentives",
    "gross_salary",
    "deductions_purchases",
    "deductions_advances",
    "absence_days",
    "deductions_absence",
    "deductions_hourly",
    "penalty_days",
    "penalties_amount",
    "deductions_penalties",
    "total_deductions",
    "net_salary",
)

REPORT_COLUMNS = (
    "report_id, employee_id, employee_code, employee_name, month, date_generated, created_at, "
    + ", ".join(BREAKDOWN_COLUMNS)
)


def breakdown_values(b: SalaryBreakdown) -> tuple:
    """Values in ``BREAKDOWN_COLUMNS`` order."""

    return (
        b.work_days,
        b.daily_work_hours,
        b.basic_salary,
        b.monthly_incentives,
        b.daily_rate,
        b.daily_rate_with_incentives,
        b.overtime_unit_value,
        b.overtime_hours,
        b.overtime_amount,
        b.bonus,
        b.total_salary_with_incentives,
        b.gross_salary,
        b.purchases_deduction,
        b.advances_deduction,
        b.absence_days,
        b.absence_deduction,
        b.hourly_deduction,
        b.penalty_days,
        b.penalties_amount,
        b.penalty_amount,
        b.total_deductions,
        b.net_salary,
    )


def row_to_salary_report(row: dict) -> SalaryReport:
    breakdown = SalaryBreakdown(
        work_days=int(row["work_days"]),
        daily_work_hours=as_decimal(row["daily_work_hours"]),
        basic_salary=as_decimal(row["basic_salary"]),
        monthly_incentives=as_decimal(row["monthly_incentives"]),
        daily_rate=as_decimal(row["daily_rate"]),
        daily_rate_with_incentives=as_decimal(row["daily_rate_with_incentives"]),
        overtime_unit_value=as_decimal(row["overtime_unit_value"]),
        overtime_hours=as_decimal(row["overtime_hours"]),
        overtime_amount=as_decimal(row["overtime_amount"]),
        bonus=as_decimal(row["bonus"]),
        absence_days=as_decimal(row["absence_days"]),
        absence_deduction=as_decimal(row["deductions_absence"]),
        penalty_days=as_decimal(row["penalty_days"]),
        penalties_amount=as_decimal(row["penalties_amount"]),
        penalty_amount=as_decimal(row["deductions_penalties"]),
        purchases_deduction=as_decimal(row["deductions_purchases"]),
        advances_deduction=as_decimal(row["deductions_advances"]),
        hourly_deduction=as_decimal(row["deductions_hourly"]),
        total_deductions=as_decimal(row["total_deductions"]),
        total_salary_with_incentives=as_decimal(row["total_salary_with_incentives"]),
        gross_salary=as_decimal(row["gross_salary"]),
        net_salary=as_decimal(row["net_salary"]),
    )
    return SalaryReport(
        report_id=int(row["report_id"]),
        employee_id=int(row["employee_id"]),
        employee_code=row["employee_code"],
        employee_name=row["employee_name"],
        month=row["month"],
        date_generated=as_datetime(row["date_generated"]),
        breakdown=breakdown,
        created_at=as_datetime(row.get("created_at")),
    )


class SalaryReportRepository(Protocol):
    def get_by_id(self, report_id: int) -> Optional[SalaryReport]:
        raise NotImplementedError

    def get_for_month(self, employee_id: int, month: str) -> Optional[SalaryReport]:
        raise NotImplementedError

    def list_for_employee(self, employee_id: int) -> Sequence[SalaryReport]:
        """Newest month first."""

        raise NotImplementedError

    def list_for_month(self, month: str) -> Sequence[SalaryReport]:
        raise NotImplementedError

    def create(
        self,
        *,
        employee_id: int,
        employee_code: str,
        employee_name: str,
        month: str,
        date_generated: datetime,
        breakdown: SalaryBreakdown,
    ) -> int:
        """Insert a report. Raises DuplicateReport if the employee already has one for the month."""

        raise NotImplementedError

    def delete(self, report_id: int) -> bool:
        raise NotImplementedError

    def monthly_summary(self, month: str) -> MonthlySummary:
        raise NotImplementedError
