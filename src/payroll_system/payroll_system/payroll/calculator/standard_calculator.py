from __future__ import annotations

from decimal import Decimal
from typing import Any, Optional

from ...common.validators import cents, optional_int, to_decimal
from ...core.exceptions import InvalidInput, ValidationError
from ..model import PayrollPolicy, SalaryBreakdown, SalaryInputs
from .base import SalaryCalculator

ZERO = Decimal("0")


def _non_negative(value: Any, field_name: str) -> Decimal:
    try:
        result = to_decimal(value, field_name, default=ZERO)
    except ValidationError as e:
        raise InvalidInput(str(e)) from e
    if result < 0:
        raise InvalidInput(f"{field_name} must not be negative")
    return result


def _money(value: Any, field_name: str) -> Decimal:
    return cents(_non_negative(value, field_name))


def _positive(value: Any, field_name: str) -> Decimal:
    try:
        result = to_decimal(value, field_name)
    except ValidationError as e:
        raise InvalidInput(str(e)) from e
    if result <= 0:
        raise InvalidInput(f"{field_name} must be greater than 0")
    return result


class StandardSalaryCalculator(SalaryCalculator):
    """Standard rule set.

    net = basic + bonus + overtime - deductions (incentives only raise the
    absence rate); gross = basic + incentives + bonus + overtime.
    Amounts are rounded to cents from unrounded rates, totals are exact sums.
    """

    def __init__(self, policy: Optional[PayrollPolicy] = None):
        self._policy = policy or PayrollPolicy()

    @property
    def policy(self) -> PayrollPolicy:
        return self._policy

    def _work_days(self, value: Any) -> int:
        if value is None or value == "":
            value = self._policy.default_work_days
        try:
            days = optional_int(value, "workDays")
        except ValidationError as e:
            raise InvalidInput(str(e)) from e
        if days is None or days <= 0:
            raise InvalidInput("workDays must be a positive integer")
        return days

    def calculate(self, inputs: SalaryInputs) -> SalaryBreakdown:
        basic = cents(_positive(inputs.basic_salary, "basicSalary"))
        if basic <= 0:
            raise InvalidInput("basicSalary must be greater than 0")
        incentives = _money(inputs.monthly_incentives, "monthlyIncentives")
        work_days = self._work_days(inputs.work_days)
        hours = inputs.daily_work_hours
        daily_hours = _positive(self._policy.default_daily_work_hours if hours in (None, "") else hours, "dailyWorkHours")

        overtime_hours = _non_negative(inputs.overtime_hours, "overtimeHours")
        bonus = _money(inputs.bonus, "bonuses")
        absence_days = _non_negative(inputs.absence_days, "absenceDays")
        penalty_days = _non_negative(inputs.penalty_days, "penaltyDays")
        penalties_amount = _money(inputs.penalties_amount, "penaltiesAmount")
        purchases = _money(inputs.purchases_deduction, "deductionsPurchases")
        advances = _money(inputs.advances_deduction, "advancesDeduction")
        hourly = _money(inputs.hourly_deduction, "hourlyDeduction")

        daily_rate = basic / work_days
        daily_rate_with_incentives = (basic + incentives) / work_days
        unit_value = daily_rate / daily_hours

        overtime_amount = cents(overtime_hours * unit_value * self._policy.overtime_multiplier)
        absence_rate = daily_rate_with_incentives if incentives > 0 else daily_rate
        absence_deduction = cents(absence_days * absence_rate)
        penalty_amount = cents(penalty_days * daily_rate + penalties_amount)

        total_deductions = purchases + advances + absence_deduction + hourly + penalty_amount

        return SalaryBreakdown(
            work_days=work_days,
            daily_work_hours=daily_hours,
            basic_salary=basic,
            monthly_incentives=incentives,
            daily_rate=cents(daily_rate),
            daily_rate_with_incentives=cents(daily_rate_with_incentives),
            overtime_unit_value=cents(unit_value),
            overtime_hours=overtime_hours,
            overtime_amount=overtime_amount,
            bonus=bonus,
            absence_days=absence_days,
            absence_deduction=absence_deduction,
            penalty_days=penalty_days,
            penalties_amount=penalties_amount,
            penalty_amount=penalty_amount,
            purchases_deduction=purchases,
            advances_deduction=advances,
            hourly_deduction=hourly,
            total_deductions=total_deductions,
            total_salary_with_incentives=basic + incentives,
            gross_salary=basic + incentives + bonus + overtime_amount,
            net_salary=basic + bonus + overtime_amount - total_deductions,
        )
