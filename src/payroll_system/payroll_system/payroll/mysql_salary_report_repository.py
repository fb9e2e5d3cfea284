from __future__ import annotations

from datetime import datetime
from typing import Optional, Sequence

import mysql.connector

from ..core.exceptions import DuplicateReport
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor
from ..database.rows import as_decimal, fetchall, fetchone
from .model import MonthlySummary, SalaryBreakdown, SalaryReport
from .repository import (
    BREAKDOWN_COLUMNS,
    REPORT_COLUMNS,
    SalaryReportRepository,
    breakdown_values,
    row_to_salary_report,
)


class MySQLSalaryReportRepository(SalaryReportRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, report_id: int) -> Optional[SalaryReport]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {REPORT_COLUMNS} FROM salary_reports WHERE report_id=%s", (int(report_id),))
            row = fetchone(cur)
            return row_to_salary_report(row) if row else None

    def get_for_month(self, employee_id: int, month: str) -> Optional[SalaryReport]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {REPORT_COLUMNS} FROM salary_reports WHERE employee_id=%s AND month=%s",
                (int(employee_id), month),
            )
            row = fetchone(cur)
            return row_to_salary_report(row) if row else None

    def list_for_employee(self, employee_id: int) -> Sequence[SalaryReport]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {REPORT_COLUMNS} FROM salary_reports WHERE employee_id=%s ORDER BY month DESC",
                (int(employee_id),),
            )
            return [row_to_salary_report(r) for r in fetchall(cur)]

    def list_for_month(self, month: str) -> Sequence[SalaryReport]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {REPORT_COLUMNS} FROM salary_reports WHERE month=%s ORDER BY employee_code",
                (month,),
            )
            return [row_to_salary_report(r) for r in fetchall(cur)]

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
        columns = "employee_id, employee_code, employee_name, month, date_generated, " + ", ".join(BREAKDOWN_COLUMNS)
        placeholders = ",".join(["%s"] * (5 + len(BREAKDOWN_COLUMNS)))
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    f"INSERT INTO salary_reports({columns}) VALUES({placeholders})",
                    (int(employee_id), employee_code, employee_name, month, date_generated) + breakdown_values(breakdown),
                )
                return int(cur.lastrowid)
        except mysql.connector.IntegrityError:
            raise DuplicateReport(f"A salary report for {employee_code} already exists for {month}")

    def delete(self, report_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM salary_reports WHERE report_id=%s", (int(report_id),))
            return cur.rowcount > 0

    def monthly_summary(self, month: str) -> MonthlySummary:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT
                    COUNT(*) AS report_count,
                    COALESCE(SUM(basic_salary), 0) AS total_basic_salary,
                    COALESCE(SUM(monthly_incentives), 0) AS total_incentives,
                    COALESCE(SUM(overtime_amount), 0) AS total_overtime,
                    COALESCE(SUM(bonus), 0) AS total_bonuses,
                    COALESCE(SUM(deductions_advances), 0) AS total_advances,
                    COALESCE(SUM(total_deductions), 0) AS total_deductions,
                    COALESCE(SUM(gross_salary), 0) AS total_gross,
                    COALESCE(SUM(net_salary), 0) AS total_net
                FROM salary_reports
                WHERE month=%s
                """,
                (month,),
            )
            row = fetchone(cur) or {}
        return MonthlySummary(
            month=month,
            report_count=int(row.get("report_count") or 0),
            total_basic_salary=as_decimal(row.get("total_basic_salary")),
            total_incentives=as_decimal(row.get("total_incentives")),
            total_overtime=as_decimal(row.get("total_overtime")),
            total_bonuses=as_decimal(row.get("total_bonuses")),
            total_advances=as_decimal(row.get("total_advances")),
            total_deductions=as_decimal(row.get("total_deductions")),
            total_gross=as_decimal(row.get("total_gross")),
            total_net=as_decimal(row.get("total_net")),
        )
