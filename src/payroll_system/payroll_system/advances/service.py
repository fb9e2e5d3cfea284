from __future__ import annotations

import logging
from datetime import date
from decimal import Decimal
from typing import Any, Iterable, Optional, Sequence

from ..common.datetime_utils import month_bounds, month_of, now_local, parse_iso_date, parse_month
from ..common.validators import cents, require_positive
from ..core.constants import DEFAULT_ADVANCE_LIMIT_RATIO
from ..core.exceptions import (
    AdvanceAlreadyPaid,
    AdvanceLimitExceeded,
    AdvanceNotFound,
    AmortizationAlreadyApplied,
    DomainError,
    EmployeeNotFound,
    ValidationError,
)
from ..employees.repository import EmployeeRepository
from .amortization import AmortizationResult, amortize
from .model import Advance, AdvanceSummary
from .repository import AdvanceRepository

logger = logging.getLogger(__name__)

ZERO = Decimal("0")


class AdvanceService:
    """Use case: issue cash advances, settle them and recover them from salaries."""

    def __init__(
        self,
        advances: AdvanceRepository,
        employees: EmployeeRepository,
        *,
        limit_ratio: Decimal = DEFAULT_ADVANCE_LIMIT_RATIO,
    ):
        self._advances = advances
        self._employees = employees
        self._limit_ratio = Decimal(str(limit_ratio))

    def _require_employee(self, employee_id: int):
        employee = self._employees.get_by_id(int(employee_id))
        if not employee:
            logger.warning("Employee not found with id: %s", employee_id)
            raise EmployeeNotFound(f"Employee not found: {employee_id}")
        return employee

    def get(self, advance_id: int) -> Advance:
        advance = self._advances.get_by_id(int(advance_id))
        if not advance:
            raise AdvanceNotFound(f"Advance not found: {advance_id}")
        return advance

    def list_for_employee(self, employee_id: int) -> Sequence[Advance]:
        self._require_employee(employee_id)
        return self._advances.list_for_employee(int(employee_id))

    def list_pending(self) -> Sequence[Advance]:
        return self._advances.list_pending()

    def outstanding_total(self, employee_id: int) -> Decimal:
        return sum((a.remaining_amount for a in self._advances.list_unpaid(int(employee_id))), ZERO)

    def create_advance(
        self,
        *,
        employee_id: int,
        amount: Any,
        issue_date: Any = None,
        notes: Optional[str] = None,
    ) -> Advance:
        """Issue an advance, capped per calendar month at a share of basic salary."""

        employee = self._require_employee(employee_id)
        amount = cents(require_positive(amount, "amount"))
        if amount <= 0:
            raise ValidationError("amount must be at least 0.01")
        day = parse_iso_date(issue_date) if issue_date else now_local().date()

        start, end = month_bounds(month_of(day))
        already = self._advances.total_for_month(employee.employee_id, start=start, end=end)
        limit = employee.basic_salary * self._limit_ratio
        if already + amount > limit:
            logger.warning(
                "Advance limit exceeded for employee %s: %s + %s > %s",
                employee.code,
                already,
                amount,
                limit,
            )
            raise AdvanceLimitExceeded(
                f"Advance amount exceeds the monthly limit of {limit} (already issued this month: {already})"
            )

        advance_id = self._advances.create(
            employee_id=employee.employee_id,
            amount=amount,
            issue_date=day,
            notes=(notes or "").strip() or None,
        )
        logger.info("Created advance id=%s for employee %s amount=%s", advance_id, employee.code, amount)
        return self.get(advance_id)

    def mark_paid(self, advance_id: int, *, paid_date: Optional[date] = None) -> Advance:
        advance = self.get(advance_id)
        if advance.is_paid:
            raise AdvanceAlreadyPaid(f"Advance {advance_id} is already paid")
        if not self._advances.mark_paid(advance.advance_id, paid_date=paid_date or now_local().date()):
            # Settled by someone else between the read and the update.
            raise AdvanceAlreadyPaid(f"Advance {advance_id} is already paid")
        logger.info("Marked advance id=%s as paid", advance_id)
        return self.get(advance_id)

    def bulk_mark_paid(self, advance_ids: Iterable[Any]) -> tuple[list[Advance], list[dict]]:
        success: list[Advance] = []
        errors: list[dict] = []
        for advance_id in advance_ids:
            try:
                success.append(self.mark_paid(int(advance_id)))
            except (DomainError, TypeError, ValueError) as e:
                errors.append({"id": advance_id, "error": str(e)})
        return success, errors

    def summary(self, employee_id: int, *, month: Optional[str] = None) -> AdvanceSummary:
        self._require_employee(employee_id)
        advances = list(self._advances.list_for_employee(int(employee_id)))
        if month:
            month = parse_month(month)
            advances = [a for a in advances if month_of(a.issue_date) == month]

        paid = [a for a in advances if a.is_paid]
        unpaid = [a for a in advances if not a.is_paid]
        return AdvanceSummary(
            employee_id=int(employee_id),
            month=month,
            total_count=len(advances),
            paid_count=len(paid),
            unpaid_count=len(unpaid),
            total_amount=sum((a.amount for a in advances), ZERO),
            paid_amount=sum((a.amount - a.remaining_amount for a in advances), ZERO),
            outstanding_amount=sum((a.remaining_amount for a in unpaid), ZERO),
        )

    def amortize_for_report(
        self,
        report_id: int,
        employee_id: int,
        amount: Decimal,
        *,
        as_of: Optional[date] = None,
    ) -> AmortizationResult:
        """Apply a report's advance deduction to the employee's advances, once per report."""

        if self._advances.has_repayments(int(report_id)):
            logger.warning("Advances already amortized for report %s", report_id)
            raise AmortizationAlreadyApplied(f"Advances already amortized for report {report_id}")

        result = amortize(self._advances.list_unpaid(int(employee_id)), amount, as_of=as_of or now_local().date())
        self._advances.save_amortization(int(report_id), result.advances, result.repayments, unapplied=result.unapplied)
        if result.unapplied > 0:
            logger.warning(
                "Advance deduction for report %s exceeds outstanding balance; %s not applied",
                report_id,
                result.unapplied,
            )
        logger.info("Amortized %s of advances for report %s", result.applied, report_id)
        return result
