"""Oldest-first repayment of cash advances from a salary deduction.

Pure functions only: the caller loads the unpaid advances and persists the
result (see ``AdvanceService.amortize_for_report``).
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import date
from decimal import Decimal
from typing import Iterable

from ..common.validators import cents, to_decimal
from ..core.exceptions import InvalidInput
from .model import Advance, Repayment

ZERO = Decimal("0")


@dataclass(frozen=True)
class AmortizationResult:
    advances: tuple[Advance, ...]
    repayments: tuple[Repayment, ...]
    applied: Decimal
    unapplied: Decimal

    def to_dict(self) -> dict:
        return {
            "applied": float(self.applied),
            "unapplied": float(self.unapplied),
            "repayments": [r.to_dict() for r in self.repayments],
        }


def repayment_order(advances: Iterable[Advance]) -> list[Advance]:
    """Unpaid advances with a balance, oldest issue date first (ties by id)."""

    return sorted(
        (a for a in advances if not a.is_paid and a.remaining_amount > 0),
        key=lambda a: (a.issue_date, a.advance_id),
    )


def amortize(advances: Iterable[Advance], amount, *, as_of: date) -> AmortizationResult:
    """Spread ``amount`` over the advances oldest-first.

    Returns the touched advances with their new balances. An advance whose
    balance reaches zero is marked paid on ``as_of``. Whatever is left once
    every balance is zero is reported as ``unapplied`` and otherwise dropped.
    """

    # Balances are whole cents.
    to_apply = cents(to_decimal(amount, "advancesDeduction", default=ZERO))
    if to_apply < 0:
        raise InvalidInput("advancesDeduction must not be negative")

    updated: list[Advance] = []
    repayments: list[Repayment] = []
    applied = ZERO

    for advance in repayment_order(advances):
        if to_apply <= 0:
            break

        deduct = min(advance.remaining_amount, to_apply)
        remaining = advance.remaining_amount - deduct
        to_apply -= deduct
        applied += deduct

        settled = remaining == 0
        updated.append(
            replace(
                advance,
                remaining_amount=remaining,
                is_paid=settled,
                paid_date=as_of if settled else advance.paid_date,
            )
        )
        repayments.append(
            Repayment(
                advance_id=advance.advance_id,
                amount=deduct,
                remaining_before=advance.remaining_amount,
                remaining_after=remaining,
            )
        )

    return AmortizationResult(
        advances=tuple(updated),
        repayments=tuple(repayments),
        applied=applied,
        unapplied=max(to_apply, ZERO),
    )
