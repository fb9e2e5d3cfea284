from __future__ import annotations

import sqlite3
from decimal import Decimal
from typing import Optional, Sequence

from ..core.exceptions import DuplicateEmployeeCode
from ..database.connection import SQLiteConnection
from ..database.rows import fetchall, fetchone
from ..database.sqlite_base import db_cursor, money
from .model import Employee
from .repository import EmployeeRepository, row_to_employee

_COLUMNS = """
    employee_id, code, name, job_title, basic_salary, monthly_incentives,
    work_days, daily_work_hours, created_at, updated_at
"""


class SQLiteEmployeeRepository(EmployeeRepository):
    def __init__(self, conn_factory: SQLiteConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, employee_id: int) -> Optional[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM employees WHERE employee_id=?", (int(employee_id),))
            row = fetchone(cur)
            return row_to_employee(row) if row else None

    def get_by_code(self, code: str) -> Optional[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM employees WHERE code=?", (code,))
            row = fetchone(cur)
            return row_to_employee(row) if row else None

    def list_all(self) -> Sequence[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM employees ORDER BY name")
            return [row_to_employee(r) for r in fetchall(cur)]

    def create(
        self,
        *,
        code: str,
        name: str,
        job_title: Optional[str],
        basic_salary: Decimal,
        monthly_incentives: Decimal,
        work_days: Optional[int],
        daily_work_hours: Decimal,
    ) -> int:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO employees(code, name, job_title, basic_salary, monthly_incentives, work_days, daily_work_hours)
                    VALUES(?,?,?,?,?,?,?)
                    """,
                    (code, name, job_title, money(basic_salary), money(monthly_incentives), work_days, money(daily_work_hours)),
                )
                return int(cur.lastrowid)
        except sqlite3.IntegrityError:
            raise DuplicateEmployeeCode(f"Employee code already exists: {code}")

    def update(
        self,
        *,
        employee_id: int,
        code: str,
        name: str,
        job_title: Optional[str],
        basic_salary: Decimal,
        monthly_incentives: Decimal,
        work_days: Optional[int],
        daily_work_hours: Decimal,
    ) -> bool:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    UPDATE employees
                    SET code=?, name=?, job_title=?, basic_salary=?, monthly_incentives=?,
                        work_days=?, daily_work_hours=?, updated_at=CURRENT_TIMESTAMP
                    WHERE employee_id=?
                    """,
                    (
                        code,
                        name,
                        job_title,
                        money(basic_salary),
                        money(monthly_incentives),
                        work_days,
                        money(daily_work_hours),
                        int(employee_id),
                    ),
                )
                return cur.rowcount > 0
        except sqlite3.IntegrityError:
            raise DuplicateEmployeeCode(f"Employee code already exists: {code}")
