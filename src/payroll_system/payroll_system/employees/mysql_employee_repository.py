from __future__ import annotations

from decimal import Decimal
from typing import Optional, Sequence

import mysql.connector

from ..core.exceptions import DuplicateEmployeeCode
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor
from ..database.rows import fetchall, fetchone
from .model import Employee
from .repository import EmployeeRepository, row_to_employee

_COLUMNS = """
    employee_id, code, name, job_title, basic_salary, monthly_incentives,
    work_days, daily_work_hours, created_at, updated_at
"""


class MySQLEmployeeRepository(EmployeeRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, employee_id: int) -> Optional[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM employees WHERE employee_id=%s", (int(employee_id),))
            row = fetchone(cur)
            return row_to_employee(row) if row else None

    def get_by_code(self, code: str) -> Optional[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM employees WHERE code=%s", (code,))
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
                    VALUES(%s,%s,%s,%s,%s,%s,%s)
                    """,
                    (code, name, job_title, basic_salary, monthly_incentives, work_days, daily_work_hours),
                )
                return int(cur.lastrowid)
        except mysql.connector.IntegrityError:
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
                    SET code=%s, name=%s, job_title=%s, basic_salary=%s, monthly_incentives=%s,
                        work_days=%s, daily_work_hours=%s
                    WHERE employee_id=%s
                    """,
                    (code, name, job_title, basic_salary, monthly_incentives, work_days, daily_work_hours, int(employee_id)),
                )
                # MySQL reports 0 affected rows when nothing changed, so check existence separately.
                if cur.rowcount > 0:
                    return True
                cur.execute("SELECT 1 AS found FROM employees WHERE employee_id=%s", (int(employee_id),))
                return fetchone(cur) is not None
        except mysql.connector.IntegrityError:
            raise DuplicateEmployeeCode(f"Employee code already exists: {code}")
