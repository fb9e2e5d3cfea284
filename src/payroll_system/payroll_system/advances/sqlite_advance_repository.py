from __future__ import annotations

import sqlite3
from datetime import date
from decimal import Decimal
from typing import Optional, Sequence

from ..core.exceptions import AmortizationAlreadyApplied, ConflictError
from ..database.connection import SQLiteConnection
from ..database.rows import as_decimal, fetchall, fetchone
from ..database.sqlite_base import db_cursor, money
from .model import Advance, Repayment
from .repository import AdvanceRepository, row_to_advance

_COLUMNS = """
    advance_id, employee_id, amount, issue_date, remaining_amount,
    is_paid, paid_date, notes, created_at
"""


def _iso(value: Optional[date]) -> Optional[str]:
    return value.isoformat() if value else None


class SQLiteAdvanceRepository(AdvanceRepository):
    """SQLite backend. Money is TEXT, so sums and sign checks happen on Decimal."""

    def __init__(self, conn_factory: SQLiteConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, advance_id: int) -> Optional[Advance]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM advances WHERE advance_id=?", (int(advance_id),))
            row = fetchone(cur)
            return row_to_advance(row) if row else None

    def list_for_employee(self, employee_id: int) -> Sequence[Advance]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM advances WHERE employee_id=? ORDER BY issue_date DESC, advance_id DESC",
                (int(employee_id),),
            )
            return [row_to_advance(r) for r in fetchall(cur)]

    def list_unpaid(self, employee_id: int) -> Sequence[Advance]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS} FROM advances
                WHERE employee_id=? AND is_paid=0
                ORDER BY issue_date ASC, advance_id ASC
                """,
                (int(employee_id),),
            )
            advances = [row_to_advance(r) for r in fetchall(cur)]
        return [a for a in advances if a.remaining_amount > 0]

    def list_pending(self) -> Sequence[Advance]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM advances WHERE is_paid=0 ORDER BY issue_date ASC, advance_id ASC")
            return [row_to_advance(r) for r in fetchall(cur)]

    def total_for_month(self, employee_id: int, *, start: date, end: date) -> Decimal:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT amount FROM advances WHERE employee_id=? AND issue_date BETWEEN ? AND ?",
                (int(employee_id), _iso(start), _iso(end)),
            )
            return sum((as_decimal(r["amount"]) for r in fetchall(cur)), Decimal("0"))

    def create(self, *, employee_id: int, amount: Decimal, issue_date: date, notes: Optional[str]) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO advances(employee_id, amount, issue_date, remaining_amount, is_paid, notes)
                VALUES(?,?,?,?,0,?)
                """,
                (int(employee_id), money(amount), _iso(issue_date), money(amount), notes),
            )
            return int(cur.lastrowid)

    def mark_paid(self, advance_id: int, *, paid_date: date) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE advances SET is_paid=1, remaining_amount=?, paid_date=? WHERE advance_id=? AND is_paid=0",
                (money(0), _iso(paid_date), int(advance_id)),
            )
            return cur.rowcount > 0

    def has_repayments(self, report_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT 1 AS found FROM advance_amortizations WHERE report_id=? LIMIT 1", (int(report_id),))
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
            with db_cursor(self._conn_factory, immediate=True) as (_, cur):
                cur.execute("SELECT 1 AS found FROM advance_amortizations WHERE report_id=? LIMIT 1", (int(report_id),))
                if fetchone(cur):
                    raise AmortizationAlreadyApplied(f"Advances already amortized for report {report_id}")

                for repayment in repayments:
                    advance = by_id[repayment.advance_id]
                    cur.execute(
                        """
                        UPDATE advances SET remaining_amount=?, is_paid=?, paid_date=?
                        WHERE advance_id=? AND is_paid=0 AND remaining_amount=?
                        """,
                        (
                            money(advance.remaining_amount),
                            1 if advance.is_paid else 0,
                            _iso(advance.paid_date),
                            advance.advance_id,
                            money(repayment.remaining_before),
                        ),
                    )
                    if cur.rowcount != 1:
                        raise ConflictError(f"Advance {advance.advance_id} changed during amortization")
                    cur.execute(
                        "INSERT INTO advance_repayments(report_id, advance_id, amount) VALUES(?,?,?)",
                        (int(report_id), advance.advance_id, money(repayment.amount)),
                    )
                cur.execute(
                    "INSERT INTO advance_amortizations(report_id, applied, unapplied) VALUES(?,?,?)",
                    (int(report_id), money(sum((r.amount for r in repayments), Decimal("0"))), money(unapplied)),
                )
        except sqlite3.IntegrityError:
            raise AmortizationAlreadyApplied(f"Advances already amortized for report {report_id}")
