from __future__ import annotations

from dataclasses import replace
from datetime import datetime
from decimal import Decimal

from src.payroll_system.payroll_system.advances.model import Advance
from src.payroll_system.payroll_system.core.exceptions import (
    AmortizationAlreadyApplied,
    ConflictError,
    DuplicateEmployeeCode,
    DuplicateReport,
)
from src.payroll_system.payroll_system.employees.model import Employee
from src.payroll_system.payroll_system.payroll.model import SalaryReport, summarize
from src.payroll_system.payroll_system.time_entries.model import TimeEntry


class FakeEmployeesRepo:
    def __init__(self, employees=()):
        self._by_id: dict[int, Employee] = {}
        self._next_id = 1
        for e in employees:
            self._by_id[e.employee_id] = e
            self._next_id = max(self._next_id, e.employee_id + 1)

    def get_by_id(self, employee_id):
        return self._by_id.get(int(employee_id))

    def get_by_code(self, code):
        return next((e for e in self._by_id.values() if e.code == code), None)

    def list_all(self):
        return sorted(self._by_id.values(), key=lambda e: e.name)

    def create(self, *, code, name, job_title, basic_salary, monthly_incentives, work_days, daily_work_hours):
        if self.get_by_code(code):
            raise DuplicateEmployeeCode(code)
        eid = self._next_id
        self._next_id += 1
        self._by_id[eid] = Employee(
            employee_id=eid,
            code=code,
            name=name,
            job_title=job_title,
            basic_salary=basic_salary,
            monthly_incentives=monthly_incentives,
            work_days=work_days,
            daily_work_hours=daily_work_hours,
        )
        return eid

    def update(self, *, employee_id, code, name, job_title, basic_salary, monthly_incentives, work_days, daily_work_hours):
        current = self._by_id.get(int(employee_id))
        if not current:
            return False
        other = self.get_by_code(code)
        if other and other.employee_id != current.employee_id:
            raise DuplicateEmployeeCode(code)
        self._by_id[current.employee_id] = replace(
            current,
            code=code,
            name=name,
            job_title=job_title,
            basic_salary=basic_salary,
            monthly_incentives=monthly_incentives,
            work_days=work_days,
            daily_work_hours=daily_work_hours,
        )
        return True


class FakeAdvancesRepo:
    def __init__(self, advances=()):
        self._by_id: dict[int, Advance] = {a.advance_id: a for a in advances}
        self._next_id = max(self._by_id, default=0) + 1
        self.amortized: dict[int, list] = {}

    def get_by_id(self, advance_id):
        return self._by_id.get(int(advance_id))

    def list_for_employee(self, employee_id):
        items = [a for a in self._by_id.values() if a.employee_id == employee_id]
        return sorted(items, key=lambda a: (a.issue_date, a.advance_id), reverse=True)

    def list_unpaid(self, employee_id):
        items = [a for a in self._by_id.values() if a.employee_id == employee_id and not a.is_paid and a.remaining_amount > 0]
        return sorted(items, key=lambda a: (a.issue_date, a.advance_id))

    def list_pending(self):
        return sorted((a for a in self._by_id.values() if not a.is_paid), key=lambda a: (a.issue_date, a.advance_id))

    def total_for_month(self, employee_id, *, start, end):
        return sum(
            (a.amount for a in self._by_id.values() if a.employee_id == employee_id and start <= a.issue_date <= end),
            Decimal("0"),
        )

    def create(self, *, employee_id, amount, issue_date, notes):
        aid = self._next_id
        self._next_id += 1
        self._by_id[aid] = Advance(
            advance_id=aid,
            employee_id=employee_id,
            amount=amount,
            issue_date=issue_date,
            remaining_amount=amount,
            notes=notes,
        )
        return aid

    def mark_paid(self, advance_id, *, paid_date):
        current = self._by_id.get(int(advance_id))
        if not current or current.is_paid:
            return False
        self._by_id[current.advance_id] = replace(current, is_paid=True, remaining_amount=Decimal("0"), paid_date=paid_date)
        return True

    def has_repayments(self, report_id):
        return int(report_id) in self.amortized

    def save_amortization(self, report_id, advances, repayments, *, unapplied=Decimal("0")):
        if int(report_id) in self.amortized:
            raise AmortizationAlreadyApplied(str(report_id))
        for repayment in repayments:
            current = self._by_id[repayment.advance_id]
            if current.is_paid or current.remaining_amount != repayment.remaining_before:
                raise ConflictError(str(repayment.advance_id))
        for advance in advances:
            self._by_id[advance.advance_id] = advance
        self.amortized[int(report_id)] = list(repayments)


class FakeTimeEntriesRepo:
    def __init__(self, entries=()):
        self._by_id: dict[int, TimeEntry] = {e.entry_id: e for e in entries}
        self._next_id = max(self._by_id, default=0) + 1

    def get_by_id(self, entry_id):
        return self._by_id.get(int(entry_id))

    def list_for_employee(self, employee_id, *, start=None, end=None):
        items = [
            e
            for e in self._by_id.values()
            if e.employee_id == employee_id
            and (start is None or e.work_date >= start)
            and (end is None or e.work_date <= end)
        ]
        return sorted(items, key=lambda e: (e.work_date, e.entry_id), reverse=True)

    def total_overtime_for_month(self, employee_id, *, start, end):
        return sum((e.overtime_hours for e in self.list_for_employee(employee_id, start=start, end=end)), Decimal("0"))

    def create(self, *, employee_id, work_date, hours_worked, overtime_hours, status):
        eid = self._next_id
        self._next_id += 1
        self._by_id[eid] = TimeEntry(
            entry_id=eid,
            employee_id=employee_id,
            work_date=work_date,
            hours_worked=hours_worked,
            overtime_hours=overtime_hours,
            status=status,
        )
        return eid

    def update(self, *, entry_id, hours_worked, overtime_hours, status):
        current = self._by_id.get(int(entry_id))
        if not current:
            return False
        self._by_id[current.entry_id] = replace(
            current, hours_worked=hours_worked, overtime_hours=overtime_hours, status=status
        )
        return True

    def delete(self, entry_id):
        return self._by_id.pop(int(entry_id), None) is not None


class FakeReportsRepo:
    def __init__(self):
        self._by_id: dict[int, SalaryReport] = {}
        self._next_id = 1

    def get_by_id(self, report_id):
        return self._by_id.get(int(report_id))

    def get_for_month(self, employee_id, month):
        return next((r for r in self._by_id.values() if r.employee_id == employee_id and r.month == month), None)

    def list_for_employee(self, employee_id):
        return sorted((r for r in self._by_id.values() if r.employee_id == employee_id), key=lambda r: r.month, reverse=True)

    def list_for_month(self, month):
        return sorted((r for r in self._by_id.values() if r.month == month), key=lambda r: r.employee_code)

    def create(self, *, employee_id, employee_code, employee_name, month, date_generated: datetime, breakdown):
        if self.get_for_month(employee_id, month):
            raise DuplicateReport(f"{employee_code} {month}")
        rid = self._next_id
        self._next_id += 1
        self._by_id[rid] = SalaryReport(
            report_id=rid,
            employee_id=employee_id,
            employee_code=employee_code,
            employee_name=employee_name,
            month=month,
            date_generated=date_generated,
            breakdown=breakdown,
        )
        return rid

    def delete(self, report_id):
        return self._by_id.pop(int(report_id), None) is not None

    def monthly_summary(self, month):
        return summarize(month, self.list_for_month(month))
