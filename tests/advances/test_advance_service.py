from __future__ import annotations

from datetime import date
from decimal import Decimal

import pytest

from src.payroll_system.payroll_system.advances.model import Advance
from src.payroll_system.payroll_system.advances.service import AdvanceService
from src.payroll_system.payroll_system.core.exceptions import (
    AdvanceAlreadyPaid,
    AdvanceLimitExceeded,
    AdvanceNotFound,
    AmortizationAlreadyApplied,
    EmployeeNotFound,
    ValidationError,
)
from src.payroll_system.payroll_system.employees.model import Employee
from tests.fakes import FakeAdvancesRepo, FakeEmployeesRepo

EMPLOYEE = Employee(employee_id=1, code="EMP001", name="Ahmed Hassan", job_title="Accountant", basic_salary=Decimal("6000"))


def _service(advances=()):
    repo = FakeAdvancesRepo(advances)
    return AdvanceService(repo, FakeEmployeesRepo([EMPLOYEE])), repo


def test_create_advance_within_limit():
    svc, _ = _service()

    advance = svc.create_advance(employee_id=1, amount=1000, issue_date="2025-01-10", notes=" rent ")

    assert advance.remaining_amount == Decimal("1000")
    assert advance.is_paid is False
    assert advance.issue_date == date(2025, 1, 10)
    assert advance.notes == "rent"


def test_monthly_limit_is_half_of_basic_salary():
    svc, _ = _service()
    svc.create_advance(employee_id=1, amount=2000, issue_date="2025-01-05")

    svc.create_advance(employee_id=1, amount=1000, issue_date="2025-01-20")
    with pytest.raises(AdvanceLimitExceeded):
        svc.create_advance(employee_id=1, amount="0.01", issue_date="2025-01-25")

    # A new month starts a new allowance.
    assert svc.create_advance(employee_id=1, amount=3000, issue_date="2025-02-01").amount == Decimal("3000")


def test_create_advance_validates_input():
    svc, _ = _service()

    with pytest.raises(EmployeeNotFound):
        svc.create_advance(employee_id=99, amount=100, issue_date="2025-01-01")
    with pytest.raises(ValidationError):
        svc.create_advance(employee_id=1, amount=0, issue_date="2025-01-01")
    with pytest.raises(ValidationError):
        svc.create_advance(employee_id=1, amount=100, issue_date="01/01/2025")


def test_mark_paid_once():
    svc, _ = _service()
    advance = svc.create_advance(employee_id=1, amount=500, issue_date="2025-01-10")

    paid = svc.mark_paid(advance.advance_id, paid_date=date(2025, 1, 31))

    assert paid.is_paid and paid.remaining_amount == 0 and paid.paid_date == date(2025, 1, 31)
    with pytest.raises(AdvanceAlreadyPaid):
        svc.mark_paid(advance.advance_id)
    with pytest.raises(AdvanceNotFound):
        svc.mark_paid(404)


def test_bulk_mark_paid_collects_errors():
    svc, _ = _service()
    a = svc.create_advance(employee_id=1, amount=100, issue_date="2025-01-10")
    b = svc.create_advance(employee_id=1, amount=200, issue_date="2025-01-11")
    svc.mark_paid(b.advance_id)

    success, errors = svc.bulk_mark_paid([a.advance_id, b.advance_id, 404, "x"])

    assert [s.advance_id for s in success] == [a.advance_id]
    assert [e["id"] for e in errors] == [b.advance_id, 404, "x"]


def test_summary_and_outstanding_total():
    svc, repo = _service(
        [
            Advance(1, 1, Decimal("300"), date(2025, 1, 1), Decimal("0"), True, date(2025, 1, 31)),
            Advance(2, 1, Decimal("400"), date(2025, 2, 1), Decimal("150")),
            Advance(3, 1, Decimal("100"), date(2025, 2, 15), Decimal("100")),
        ]
    )

    everything = svc.summary(1)
    february = svc.summary(1, month="2025-02")

    assert (everything.total_count, everything.paid_count, everything.unpaid_count) == (3, 1, 2)
    assert everything.total_amount == Decimal("800")
    assert everything.paid_amount == Decimal("550")
    assert everything.outstanding_amount == Decimal("250")
    assert february.total_count == 2 and february.month == "2025-02"
    assert svc.outstanding_total(1) == Decimal("250")
    assert [a.advance_id for a in svc.list_pending()] == [2, 3]


def test_amortize_for_report_applies_once():
    svc, repo = _service(
        [
            Advance(1, 1, Decimal("300"), date(2025, 1, 1), Decimal("300")),
            Advance(2, 1, Decimal("400"), date(2025, 2, 1), Decimal("400")),
        ]
    )

    result = svc.amortize_for_report(10, 1, Decimal("500"), as_of=date(2025, 2, 28))

    assert result.applied == Decimal("500")
    assert repo.get_by_id(1).is_paid is True
    assert repo.get_by_id(2).remaining_amount == Decimal("200")
    with pytest.raises(AmortizationAlreadyApplied):
        svc.amortize_for_report(10, 1, Decimal("500"))
    assert repo.get_by_id(2).remaining_amount == Decimal("200")


def test_amortize_marks_report_even_when_nothing_is_owed():
    svc, repo = _service()

    result = svc.amortize_for_report(11, 1, Decimal("250"))

    assert result.unapplied == Decimal("250")
    assert repo.has_repayments(11)
    with pytest.raises(AmortizationAlreadyApplied):
        svc.amortize_for_report(11, 1, Decimal("250"))


def test_advance_amount_is_rounded_to_cents():
    svc, _ = _service()

    assert svc.create_advance(employee_id=1, amount="120.005", issue_date="2025-01-10").amount == Decimal("120.01")
    with pytest.raises(ValidationError):
        svc.create_advance(employee_id=1, amount="0.001", issue_date="2025-01-10")
