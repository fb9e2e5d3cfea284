from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Optional, Sequence

from ..core.enums import TimeEntryStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor
from ..database.rows import as_decimal, fetchall, fetchone
from .model import TimeEntry
from .repository import TimeEntryRepository, row_to_time_entry

_COLUMNS = "entry_id, employee_id, work_date, hours_worked, overtime_hours, status, created_at, updated_at"


class MySQLTimeEntryRepository(TimeEntryRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, entry_id: int) -> Optional[TimeEntry]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM time_entries WHERE entry_id=%s", (int(entry_id),))
            row = fetchone(cur)
            return row_to_time_entry(row) if row else None

    def list_for_employee(
        self,
        employee_id: int,
        *,
        start: Optional[date] = None,
        end: Optional[date] = None,
    ) -> Sequence[TimeEntry]:
        sql = f"SELECT {_COLUMNS} FROM time_entries WHERE employee_id=%s"
        params: list = [int(employee_id)]
        if start:
            sql += " AND work_date >= %s"
            params.append(start)
        if end:
            sql += " AND work_date <= %s"
            params.append(end)
        sql += " ORDER BY work_date DESC, entry_id DESC"

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, tuple(params))
            return [row_to_time_entry(r) for r in fetchall(cur)]

    def total_overtime_for_month(self, employee_id: int, *, start: date, end: date) -> Decimal:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT COALESCE(SUM(overtime_hours), 0) AS total FROM time_entries
                WHERE employee_id=%s AND work_date BETWEEN %s AND %s
                """,
                (int(employee_id), start, end),
            )
            row = fetchone(cur)
            return as_decimal(row["total"] if row else None)

    def create(
        self,
        *,
        employee_id: int,
        work_date: date,
        hours_worked: Decimal,
        overtime_hours: Decimal,
        status: TimeEntryStatus,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO time_entries(employee_id, work_date, hours_worked, overtime_hours, status)
                VALUES(%s,%s,%s,%s,%s)
                """,
                (int(employee_id), work_date, hours_worked, overtime_hours, status.value),
            )
            return int(cur.lastrowid)

    def update(
        self,
        *,
        entry_id: int,
        hours_worked: Decimal,
        overtime_hours: Decimal,
        status: TimeEntryStatus,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE time_entries SET hours_worked=%s, overtime_hours=%s, status=%s WHERE entry_id=%s",
                (hours_worked, overtime_hours, status.value, int(entry_id)),
            )
            if cur.rowcount > 0:
                return True
            # Unchanged rows report 0 affected rows on MySQL.
            cur.execute("SELECT 1 AS found FROM time_entries WHERE entry_id=%s", (int(entry_id),))
            return fetchone(cur) is not None

    def delete(self, entry_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM time_entries WHERE entry_id=%s", (int(entry_id),))
            return cur.rowcount > 0
