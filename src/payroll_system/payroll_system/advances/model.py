from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import Optional


@dataclass(frozen=True)
class Advance:
    """Domain entity: a cash advance recovered from future salaries."""

    advance_id: int
    employee_id: int
    amount: Decimal
    issue_date: date
    remaining_amount: Decimal
    is_paid: bool = False
    paid_date: Optional[date] = None
    notes: Optional[str] = None
    created_at: Optional[datetime] = None

    def to_dict(self) -> dict:
        return {
            "id": self.advance_id,
            "employeeId": self.employee_id,
            "amount": float(self.amount),
            "date": self.issue_date.isoformat(),
            "remainingAmount": float(self.remaining_amount),
            "isPaid": self.is_paid,
            "paidDate": self.paid_date.isoformat() if self.paid_date else None,
            "notes": self.notes,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
        }


@dataclass(frozen=True)
class Repayment:
    """One advance's share of a salary report's advance deduction."""

    advance_id: int
    amount: Decimal
    remaining_before: Decimal
    remaining_after: Decimal

    def to_dict(self) -> dict:
        return {
            "advanceId": self.advance_id,
            "amount": float(self.amount),
            "remainingBefore": float(self.remaining_before),
            "remainingAfter": float(self.remaining_after),
        }


@dataclass(frozen=True)
class AdvanceSummary:
    employee_id: int
    month: Optional[str]
    total_count: int
    paid_count: int
    unpaid_count: int
    total_amount: Decimal
    paid_amount: Decimal
    outstanding_amount: Decimal

    def to_dict(self) -> dict:
        return {
            "employeeId": self.employee_id,
            "month": self.month,
            "totalCount": self.total_count,
            "paidCount": self.paid_count,
            "unpaidCount": self.unpaid_count,
            "totalAmount": float(self.total_amount),
            "paidAmount": float(self.paid_amount),
            "outstandingAmount": float(self.outstanding_amount),
        }
