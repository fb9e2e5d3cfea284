from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Any, Iterable, Optional

from ..common.validators import cents
from ..core.constants import (
    DEFAULT_ADVANCE_LIMIT_RATIO,
    DEFAULT_DAILY_WORK_HOURS,
    DEFAULT_OVERTIME_MULTIPLIER,
    DEFAULT_WORK_DAYS,
)

ZERO = Decimal("0")


def _amount(value: Decimal) -> float:
    return float(cents(value))


@dataclass(frozen=True)
class PayrollPolicy:
    """Company-wide payroll settings (see ``config`` PAYROLL_* variables)."""

    default_work_days: int = DEFAULT_WORK_DAYS
    default_daily_work_hours: Decimal = Decimal(DEFAULT_DAILY_WORK_HOURS)
    overtime_multiplier: Decimal = DEFAULT_OVERTIME_MULTIPLIER
    advance_limit_ratio: Decimal = DEFAULT_ADVANCE_LIMIT_RATIO


@dataclass(frozen=True)
class SalaryInputs:
    """Raw calculator inputs. ``None`` work days/hours fall back to the policy."""

    basic_salary: Any
    monthly_incentives: Any = ZERO
    work_days: Any = None
    daily_work_hours: Any = None
    overtime_hours: Any = ZERO
    bonus: Any = ZERO
    absence_days: Any = ZERO
    penalty_days: Any = ZERO
    penalties_amount: Any = ZERO
    purchases_deduction: Any = ZERO
    advances_deduction: Any = ZERO
    hourly_deduction: Any = ZERO


@dataclass(frozen=True)
class SalaryBreakdown:
    work_days: int
    daily_work_hours: Decimal
    basic_salary: Decimal
    monthly_incentives: Decimal
    daily_rate: Decimal
    daily_rate_with_incentives: Decimal
    overtime_unit_value: Decimal
    overtime_hours: Decimal
    overtime_amount: Decimal
    bonus: Decimal
    absence_days: Decimal
    absence_deduction: Decimal
    penalty_days: Decimal
    penalties_amount: Decimal
    penalty_amount: Decimal
    purchases_deduction: Decimal
    advances_deduction: Decimal
    hourly_deduction: Decimal
    total_deductions: Decimal
    total_salary_with_incentives: Decimal
    gross_salary: Decimal
    net_salary: Decimal

    @property
    def deductions(self) -> dict[str, Decimal]:
        return {
            "purchases": self.purchases_deduction,
            "advances": self.advances_deduction,
            "absence_deductions": self.absence_deduction,
            "hourly_deductions": self.hourly_deduction,
            "penalties": self.penalty_amount,
        }

    def to_dict(self) -> dict:
        return {
            "workDays": self.work_days,
            "dailyWorkHours": float(self.daily_work_hours),
            "basicSalary": _amount(self.basic_salary),
            "monthlyIncentives": _amount(self.monthly_incentives),
            "dailyRate": _amount(self.daily_rate),
            "dailyRateWithIncentives": _amount(self.daily_rate_with_incentives),
            "overtimeUnitValue": _amount(self.overtime_unit_value),
            "overtimeHours": float(self.overtime_hours),
            "overtimeAmount": _amount(self.overtime_amount),
            "bonuses": _amount(self.bonus),
            "absenceDays": float(self.absence_days),
            "penaltyDays": float(self.penalty_days),
            "penaltiesAmount": _amount(self.penalties_amount),
            "deductions": {
                "purchases": _amount(self.purchases_deduction),
                "advances": _amount(self.advances_deduction),
                "absenceDeductions": _amount(self.absence_deduction),
                "hourlyDeductions": _amount(self.hourly_deduction),
                "penalties": _amount(self.penalty_amount),
            },
            "totalDeductions": _amount(self.total_deductions),
            "totalSalaryWithIncentives": _amount(self.total_salary_with_incentives),
            "grossSalary": _amount(self.gross_salary),
            "netSalary": _amount(self.net_salary),
        }


@dataclass(frozen=True)
class SalaryReport:
    """Persisted snapshot of one employee's pay for one month."""

    report_id: int
    employee_id: int
    employee_code: str
    employee_name: str
    month: str
    date_generated: datetime
    breakdown: SalaryBreakdown
    created_at: Optional[datetime] = None

    def to_dict(self) -> dict:
        data = {
            "id": self.report_id,
            "employeeId": self.employee_id,
            "employeeCode": self.employee_code,
            "employeeName": self.employee_name,
            "month": self.month,
            "dateGenerated": self.date_generated.isoformat(),
        }
        data.update(self.breakdown.to_dict())
        return data


@dataclass(frozen=True)
class MonthlySummary:
    month: str
    report_count: int = 0
    total_basic_salary: Decimal = ZERO
    total_incentives: Decimal = ZERO
    total_overtime: Decimal = ZERO
    total_bonuses: Decimal = ZERO
    total_advances: Decimal = ZERO
    total_deductions: Decimal = ZERO
    total_gross: Decimal = ZERO
    total_net: Decimal = ZERO

    def to_dict(self) -> dict:
        return {
            "month": self.month,
            "reportCount": self.report_count,
            "totalBasicSalary": _amount(self.total_basic_salary),
            "totalIncentives": _amount(self.total_incentives),
            "totalOvertime": _amount(self.total_overtime),
            "totalBonuses": _amount(self.total_bonuses),
            "totalAdvances": _amount(self.total_advances),
            "totalDeductions": _amount(self.total_deductions),
            "totalGross": _amount(self.total_gross),
            "totalNet": _amount(self.total_net),
        }


def summarize(month: str, reports: Iterable[SalaryReport]) -> MonthlySummary:
    reports = list(reports)
    breakdowns = [r.breakdown for r in reports]
    return MonthlySummary(
        month=month,
        report_count=len(reports),
        total_basic_salary=sum((b.basic_salary for b in breakdowns), ZERO),
        total_incentives=sum((b.monthly_incentives for b in breakdowns), ZERO),
        total_overtime=sum((b.overtime_amount for b in breakdowns), ZERO),
        total_bonuses=sum((b.bonus for b in breakdowns), ZERO),
        total_advances=sum((b.advances_deduction for b in breakdowns), ZERO),
        total_deductions=sum((b.total_deductions for b in breakdowns), ZERO),
        total_gross=sum((b.gross_salary for b in breakdowns), ZERO),
        total_net=sum((b.net_salary for b in breakdowns), ZERO),
    )
