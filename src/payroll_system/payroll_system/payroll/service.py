from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Iterable, Optional, Sequence

from ..advances.amortization import AmortizationResult
from ..advances.service import AdvanceService
from ..common.datetime_utils import month_bounds, now_local, parse_month
from ..common.locks import KeyedLocks
from ..core.exceptions import DomainError, DuplicateReport, SalaryReportNotFound
from ..employees.model import Employee
from ..employees.service import EmployeeService
from ..time_entries.repository import TimeEntryRepository
from .calculator.base import SalaryCalculator
from .calculator.standard_calculator import StandardSalaryCalculator
from .model import MonthlySummary, SalaryBreakdown, SalaryInputs, SalaryReport
from .repository import SalaryReportRepository

logger = logging.getLogger(__name__)

EXPORT_FIELDS = [
    "employee_code",
    "employee_name",
    "month",
    "work_days",
    "basic_salary",
    "monthly_incentives",
    "daily_rate",
    "overtime_hours",
    "overtime_amount",
    "bonus",
    "deductions_purchases",
    "deductions_advances",
    "deductions_absence",
    "deductions_hourly",
    "deductions_penalties",
    "total_deductions",
    "gross_salary",
    "net_salary",
]


def _given(data: dict, *keys: str) -> Any:
    """First key present with a non-empty value, else None."""

    for key in keys:
        value = data.get(key)
        if value is not None and value != "":
            return value
    return None


@dataclass(frozen=True)
class GeneratedReport:
    report: SalaryReport
    amortization: AmortizationResult

    def to_dict(self) -> dict:
        data = self.report.to_dict()
        data["amortization"] = self.amortization.to_dict()
        return data


class SalaryReportService:
    """Use case: calculate, persist and settle monthly salary reports.

    Generation for one employee runs under a per-employee lock:
    check duplicate -> calculate -> persist report -> amortize advances.
    A report whose amortization fails is removed again.
    """

    def __init__(
        self,
        reports: SalaryReportRepository,
        employees: EmployeeService,
        time_entries: TimeEntryRepository,
        advances: AdvanceService,
        *,
        calculator: Optional[SalaryCalculator] = None,
    ):
        self._reports = reports
        self._employees = employees
        self._time_entries = time_entries
        self._advances = advances
        self._calculator = calculator or StandardSalaryCalculator()
        self._locks = KeyedLocks()

    def _employee(self, data: dict) -> Employee:
        return self._employees.resolve(
            employee_id=_given(data, "employeeId"),
            employee_code=_given(data, "employeeCode"),
        )

    def _inputs_for(self, employee: Employee, month: str, data: dict) -> SalaryInputs:
        """Merge request values over employee data; fill overtime and advances from the books."""

        overtime = _given(data, "overtimeHours")
        if overtime is None:
            start, end = month_bounds(month)
            overtime = self._time_entries.total_overtime_for_month(employee.employee_id, start=start, end=end)

        advances = _given(data, "advancesDeduction")
        if advances is None:
            advances = self._advances.outstanding_total(employee.employee_id)

        work_days = _given(data, "workDays")
        hours = _given(data, "dailyWorkHours")
        return SalaryInputs(
            basic_salary=employee.basic_salary,
            monthly_incentives=employee.monthly_incentives,
            work_days=work_days if work_days is not None else employee.work_days,
            daily_work_hours=hours if hours is not None else employee.daily_work_hours,
            overtime_hours=overtime,
            bonus=_given(data, "bonuses", "bonus"),
            absence_days=_given(data, "absenceDays"),
            penalty_days=_given(data, "penaltyDays"),
            penalties_amount=_given(data, "penaltiesAmount"),
            purchases_deduction=_given(data, "deductionsPurchases"),
            advances_deduction=advances,
            hourly_deduction=_given(data, "hourlyDeduction"),
        )

    def preview(self, data: dict) -> SalaryBreakdown:
        """Calculate without persisting anything.

        With ``employeeCode`` and ``month`` the same defaults as generation are
        applied; otherwise ``basicSalary`` and friends come from the body.
        """

        if _given(data, "employeeCode", "employeeId") is not None:
            employee = self._employee(data)
            month = parse_month(_given(data, "month") or now_local().strftime("%Y-%m"))
            return self._calculator.calculate(self._inputs_for(employee, month, data))

        return self._calculator.calculate(
            SalaryInputs(
                basic_salary=data.get("basicSalary"),
                monthly_incentives=_given(data, "monthlyIncentives"),
                work_days=_given(data, "workDays"),
                daily_work_hours=_given(data, "dailyWorkHours"),
                overtime_hours=_given(data, "overtimeHours"),
                bonus=_given(data, "bonuses", "bonus"),
                absence_days=_given(data, "absenceDays"),
                penalty_days=_given(data, "penaltyDays"),
                penalties_amount=_given(data, "penaltiesAmount"),
                purchases_deduction=_given(data, "deductionsPurchases"),
                advances_deduction=_given(data, "advancesDeduction"),
                hourly_deduction=_given(data, "hourlyDeduction"),
            )
        )

    def generate(self, data: dict) -> GeneratedReport:
        employee = self._employee(data)
        month = parse_month(data.get("month"))

        with self._locks.hold(employee.employee_id):
            if self._reports.get_for_month(employee.employee_id, month):
                logger.warning("Salary report already exists for %s in %s", employee.code, month)
                raise DuplicateReport(f"A salary report for {employee.code} already exists for {month}")

            breakdown = self._calculator.calculate(self._inputs_for(employee, month, data))
            generated_at = now_local().replace(microsecond=0)
            report_id = self._reports.create(
                employee_id=employee.employee_id,
                employee_code=employee.code,
                employee_name=employee.name,
                month=month,
                date_generated=generated_at,
                breakdown=breakdown,
            )
            try:
                amortization = self._advances.amortize_for_report(
                    report_id,
                    employee.employee_id,
                    breakdown.advances_deduction,
                    as_of=generated_at.date(),
                )
            except Exception:
                logger.warning("Amortization failed for report id=%s, removing it", report_id)
                self._reports.delete(report_id)
                raise

        logger.info(
            "Generated salary report id=%s for %s %s net=%s",
            report_id,
            employee.code,
            month,
            breakdown.net_salary,
        )
        return GeneratedReport(report=self.get_by_id(report_id), amortization=amortization)

    def apply_advance_deductions(self, report_id: int) -> AmortizationResult:
        """Amortize a stored report's advance deduction; rejected if already done."""

        report = self.get_by_id(report_id)
        with self._locks.hold(report.employee_id):
            return self._advances.amortize_for_report(
                report.report_id,
                report.employee_id,
                report.breakdown.advances_deduction,
                as_of=now_local().date(),
            )

    def bulk_generate(
        self,
        month: Any,
        employee_codes: Optional[Iterable[Any]] = None,
        defaults: Optional[dict] = None,
    ) -> tuple[list[GeneratedReport], list[dict]]:
        """Generate a month's reports for many employees (all when no codes are given)."""

        month = parse_month(month)
        if employee_codes is None:
            employee_codes = [e.code for e in self._employees.list_employees()]

        success: list[GeneratedReport] = []
        errors: list[dict] = []
        for code in employee_codes:
            try:
                payload = dict(defaults or {})
                payload.update({"employeeCode": code, "month": month})
                success.append(self.generate(payload))
            except DomainError as e:
                errors.append({"employeeCode": code, "error": str(e)})
        logger.info("Bulk generation for %s: %d generated, %d failed", month, len(success), len(errors))
        return success, errors

    def get_by_id(self, report_id: int) -> SalaryReport:
        report = self._reports.get_by_id(int(report_id))
        if not report:
            logger.warning("Salary report not found with id: %s", report_id)
            raise SalaryReportNotFound(f"Salary report not found: {report_id}")
        return report

    def list_for_employee(self, employee_id: int) -> Sequence[SalaryReport]:
        return self._reports.list_for_employee(int(employee_id))

    def monthly_summary(self, month: Any) -> MonthlySummary:
        return self._reports.monthly_summary(parse_month(month))

    def export_rows(self, month: Any) -> list[dict]:
        """Flat rows for the month's CSV export, in ``EXPORT_FIELDS`` order."""

        rows = []
        for report in self._reports.list_for_month(parse_month(month)):
            b = report.breakdown
            rows.append(
                {
                    "employee_code": report.employee_code,
                    "employee_name": report.employee_name,
                    "month": report.month,
                    "work_days": b.work_days,
                    "basic_salary": b.basic_salary,
                    "monthly_incentives": b.monthly_incentives,
                    "daily_rate": b.daily_rate,
                    "overtime_hours": b.overtime_hours,
                    "overtime_amount": b.overtime_amount,
                    "bonus": b.bonus,
                    "deductions_purchases": b.purchases_deduction,
                    "deductions_advances": b.advances_deduction,
                    "deductions_absence": b.absence_deduction,
                    "deductions_hourly": b.hourly_deduction,
                    "deductions_penalties": b.penalty_amount,
                    "total_deductions": b.total_deductions,
                    "gross_salary": b.gross_salary,
                    "net_salary": b.net_salary,
                }
            )
        return rows
