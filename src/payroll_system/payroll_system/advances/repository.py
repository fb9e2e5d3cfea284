from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Optional, Protocol, Sequence

from ..database.rows import as_date, as_datetime, as_decimal
from .model import Advance, Repayment


def row_to_advance(row: dict) -> Advance:
    return Advance(
        advance_id=int(row["advance_id"]),
        employee_id=int(row["employee_id"]),
        amount=as_decimal(row["amount"]),
        issue_date=as_date(row["issue_date"]),
        remaining_amount=as_decimal(row["remaining_amount"]),
        is_paid=bool(row["is_paid"]),
        paid_date=as_date(row.get("paid_date")),
        notes=row.get("notes"),
        created_at=as_datetime(row.get("created_at")),
    )


class AdvanceRepository(Protocol):
    def get_by_id(self, advance_id: int) -> Optional[Advance]:
        raise NotImplementedError

    def list_for_employee(self, employee_id: int) -> Sequence[Advance]:
        """Newest first."""

        raise NotImplementedError

    def list_unpaid(self, employee_id: int) -> Sequence[Advance]:
        """Unpaid advances, oldest issue date first."""

        raise NotImplementedError

    def list_pending(self) -> Sequence[Advance]:
        raise NotImplementedError

    def total_for_month(self, employee_id: int, *, start: date, end: date) -> Decimal:
        """Sum of advance amounts issued to the employee between start and end (inclusive)."""

        raise NotImplementedError

    def create(
        self,
        *,
        employee_id: int,
        amount: Decimal,
        issue_date: date,
        notes: Optional[str],
    ) -> int:
        raise NotImplementedError

    def mark_paid(self, advance_id: int, *, paid_date: date) -> bool:
        """Zero the balance of an unpaid advance. False if it was already paid."""

        raise NotImplementedError

    def has_repayments(self, report_id: int) -> bool:
        """True once advances were amortized for the report, even if nothing was repaid."""

        raise NotImplementedError

    def save_amortization(
        self,
        report_id: int,
        advances: Sequence[Advance],
        repayments: Sequence[Repayment],
        *,
        unapplied: Decimal = Decimal("0"),
    ) -> None:
        """Persist new balances, repayment rows and the report marker in one transaction.

        Raises AmortizationAlreadyApplied if the report was already amortized,
        ConflictError if a balance changed since it was read.
        """

        raise NotImplementedError
