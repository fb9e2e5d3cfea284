from __future__ import annotations

from contextlib import contextmanager
from decimal import Decimal
from typing import Any

from ..common.validators import cents
from .connection import SQLiteConnection


@contextmanager
def db_cursor(conn_factory: SQLiteConnection, *, immediate: bool = False):
    """Same contract as ``mysql_base.db_cursor``: commit on success, rollback on error.

    ``immediate`` takes the write lock up front so read-then-write sequences
    (amortization) cannot interleave with another writer.
    """

    conn = conn_factory.connect()
    try:
        cur = conn.cursor()
        try:
            if immediate:
                cur.execute("BEGIN IMMEDIATE")
            yield conn, cur
            conn.commit()
        finally:
            cur.close()
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()


def money(value: Any) -> str:
    """Bind a DECIMAL(12,2)-style value as TEXT, two places, half-up."""
    if value is None:
        value = Decimal("0")
    amount = value if isinstance(value, Decimal) else Decimal(str(value))
    return str(cents(amount))
