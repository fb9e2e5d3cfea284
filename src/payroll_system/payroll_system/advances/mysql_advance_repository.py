from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Optional, Sequence

import mysql.connector

from ..core.exceptions import AmortizationAlreadyApplied, ConflictError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor
from ..database.rows import as_decimal, fetchall, fetchone
from .model import Advance, Repayment
from .repository import AdvanceRepository, row_to_advance

_COLUMNS = """
    advance_id, employee_id, amount, issue_date, remaining_amount,
    is_paid, paid_date, notes, created_at
"""


class MySQLAdvanceRepository(AdvanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, advance_id: int) -> Optional[Advance]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM advances WHERE advance_id=%s", (int(advance_id),))
            row = fetchone(cur)
            return row_to_advance(row) if row else None

    def list_for_employee(self, employee_id: int) -> Sequence[Advance]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM advances WHERE employee_id=%s ORDER BY issue_date DESC, advance_id DESC",
                (int(employee_id),),
            )
            return [row_to_advance(r) for r in fetchall(cur)]

    def list_unpaid(self, employee_id: int) -> Sequence[Advance]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS} FROM advances
                WHERE employee_id=%s AND is_paid=0 AND remaining_amount > 0
                ORDER BY issue_date ASC, advance_id ASC
                """,
                (int(employee_id),),
            )
            return [row_to_advance(r) for r in fetchall(cur)]

    def list_pending(self) -> Sequence[Advance]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM advances WHERE is_paid=0 ORDER BY issue_date ASC, advance_id ASC")
            return [row_to_advance(r) for r in fetchall(cur)]

    def total_for_month(self, employee_id: int, *, start: date, end: date) -> Decimal:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT COALESCE(SUM(amount), 0) AS total FROM advances
                WHERE employee_id=%s AND issue_date BETWEEN %s AND %s
                """,
                (int(employee_id), start, end),
            )
            row = fetchone(cur)
            return as_decimal(row["total"] if row else None)

    def create(self, *, employee_id: int, amount: Decimal, issue_date: date, notes: Optional[str]) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO advances(employee_id, amount, issue_date, remaining_amount, is_paid, notes)
                VALUES(%s,%s,%s,%s,0,%s)
                """,
                (int(employee_id), amount, issue_date, amount, notes),
            )
            return int(cur.lastrowid)

    def mark_paid(self, advance_id: int, *, paid_date: date) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE advances SET is_paid=1, remaining_amount=0, paid_date=%s WHERE advance_id=%s AND is_paid=0",
                (paid_date, int(advance_id)),
            )
            return cur.rowcount > 0

    def has_repayments(self, report_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT 1 AS found FROM advance_amortizations WHERE report_id=%s LIMIT 1", (int(report_id),))
            return fetchone(cur) is not None

    def save_amortization(
        self,
        report_id: int,
        advances: Sequence[Advance],
        repayments: Sequence[Repayment],
        *,
        unapplied: Decimal = Decimal("0"),
    ) -> None:
        by_id = {a.advance_id: a for a in advances}
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    "SELECT 1 AS found FROM advance_amortizations WHERE report_id=%s LIMIT 1 FOR UPDATE",
                    (int(report_id),),
                )
                if fetchone(cur):
                    raise AmortizationAlreadyApplied(f"Advances already amortized for report {report_id}")

                for repayment in repayments:
                    advance = by_id[repayment.advance_id]
                    cur.execute(
                        """
                        UPDATE advances SET remaining_amount=%s, is_paid=%s, paid_date=%s
                        WHERE advance_id=%s AND is_paid=0 AND remaining_amount=%s
                        """,
                        (
                            advance.remaining_amount,
                            1 if advance.is_paid else 0,
                            advance.paid_date,
                            advance.advance_id,
                            repayment.remaining_before,
                        ),
                    )
                    if cur.rowcount != 1:
                        raise ConflictError(f"Advance {advance.advance_id} changed during amortization")
                    cur.execute(
                        "INSERT INTO advance_repayments(report_id, advance_id, amount) VALUES(%s,%s,%s)",
                        (int(report_id), advance.advance_id, repayment.amount),
                    )
                cur.execute(
                    "INSERT INTO advance_amortizations(report_id, applied, unapplied) VALUES(%s,%s,%s)",
                    (int(report_id), sum((r.amount for r in repayments), Decimal("0")), unapplied),
                )
        except mysql.connector.IntegrityError:
            raise AmortizationAlreadyApplied(f"Advances already amortized for report {report_id}")
