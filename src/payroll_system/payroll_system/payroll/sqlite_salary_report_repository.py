from __future__ import annotations

import sqlite3
from datetime import datetime
from decimal import Decimal
from typing import Optional, Sequence

from ..core.exceptions import DuplicateReport
from ..database.connection import SQLiteConnection
from ..database.rows import fetchall, fetchone
from ..database.sqlite_base import db_cursor, money
from .model import MonthlySummary, SalaryBreakdown, SalaryReport, summarize
from .repository import (
    BREAKDOWN_COLUMNS,
    REPORT_COLUMNS,
    SalaryReportRepository,
    breakdown_values,
    row_to_salary_report,
)


class SQLiteSalaryReportRepository(SalaryReportRepository):
    def __init__(self, conn_factory: SQLiteConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, report_id: int) -> Optional[SalaryReport]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {REPORT_COLUMNS} FROM salary_reports WHERE report_id=?", (int(report_id),))
            row = fetchone(cur)
            return row_to_salary_report(row) if row else None

    def get_for_month(self, employee_id: int, month: str) -> Optional[SalaryReport]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {REPORT_COLUMNS} FROM salary_reports WHERE employee_id=? AND month=?",
                (int(employee_id), month),
            )
            row = fetchone(cur)
            return row_to_salary_report(row) if row else None

    def list_for_employee(self, employee_id: int) -> Sequence[SalaryReport]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {REPORT_COLUMNS} FROM salary_reports WHERE employee_id=? ORDER BY month DESC",
                (int(employee_id),),
            )
            return [row_to_salary_report(r) for r in fetchall(cur)]

    def list_for_month(self, month: str) -> Sequence[SalaryReport]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {REPORT_COLUMNS} FROM salary_reports WHERE month=? ORDER BY employee_code",
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
        placeholders = ",".join(["?"] * (5 + len(BREAKDOWN_COLUMNS)))
        values = tuple(money(v) if isinstance(v, Decimal) else v for v in breakdown_values(breakdown))
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    f"INSERT INTO salary_reports({columns}) VALUES({placeholders})",
                    (int(employee_id), employee_code, employee_name, month, date_generated.isoformat(sep=" ")) + values,
                )
                return int(cur.lastrowid)
        except sqlite3.IntegrityError:
            raise DuplicateReport(f"A salary report for {employee_code} already exists for {month}")

    def delete(self, report_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM salary_reports WHERE report_id=?", (int(report_id),))
            return cur.rowcount > 0

    def monthly_summary(self, month: str) -> MonthlySummary:
        return summarize(month, self.list_for_month(month))
