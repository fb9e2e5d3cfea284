from __future__ import annotations

import logging
from decimal import Decimal
from typing import Any, Optional, Sequence

from ..common.validators import (
    optional_int,
    require_in_range,
    require_non_empty,
    require_non_negative,
    require_positive,
)
from ..core.constants import DEFAULT_DAILY_WORK_HOURS, MAX_HOURS_PER_DAY, MAX_WORK_DAYS
from ..core.exceptions import EmployeeNotFound, ValidationError
from .model import Employee
from .repository import EmployeeRepository

logger = logging.getLogger(__name__)


def _work_days(value: Any) -> Optional[int]:
    days = optional_int(value, "workDays")
    if days is not None and not 1 <= days <= MAX_WORK_DAYS:
        raise ValidationError(f"workDays must be between 1 and {MAX_WORK_DAYS}")
    return days


def _daily_work_hours(value: Any) -> Decimal:
    hours = require_positive(value if value not in (None, "") else DEFAULT_DAILY_WORK_HOURS, "dailyWorkHours")
    return require_in_range(hours, "dailyWorkHours", low=Decimal("0"), high=Decimal(MAX_HOURS_PER_DAY))


class EmployeeService:
    """Use case: manage employee records and their compensation parameters."""

    def __init__(self, employees: EmployeeRepository):
        self._employees = employees

    def list_employees(self) -> Sequence[Employee]:
        return self._employees.list_all()

    def get_by_code(self, code: str) -> Employee:
        employee = self._employees.get_by_code(str(code).strip())
        if not employee:
            logger.warning("Employee not found with code: %s", code)
            raise EmployeeNotFound(f"Employee not found: {code}")
        return employee

    def get_by_id(self, employee_id: int) -> Employee:
        employee = self._employees.get_by_id(int(employee_id))
        if not employee:
            logger.warning("Employee not found with id: %s", employee_id)
            raise EmployeeNotFound(f"Employee not found: {employee_id}")
        return employee

    def create_employee(
        self,
        *,
        code: str,
        name: str,
        job_title: Optional[str],
        basic_salary: Any,
        monthly_incentives: Any = None,
        work_days: Any = None,
        daily_work_hours: Any = None,
    ) -> Employee:
        code = require_non_empty(code, "code")
        name = require_non_empty(name, "name")
        title = (job_title or "").strip() or None

        employee_id = self._employees.create(
            code=code,
            name=name,
            job_title=title,
            basic_salary=require_positive(basic_salary, "basicSalary"),
            monthly_incentives=require_non_negative(monthly_incentives, "monthlyIncentives"),
            work_days=_work_days(work_days),
            daily_work_hours=_daily_work_hours(daily_work_hours),
        )
        logger.info("Created employee %s (%s) id=%s", code, name, employee_id)
        return self.get_by_id(employee_id)

    def update_employee(self, employee_id: int, changes: dict) -> Employee:
        """Apply a partial update; keys absent from ``changes`` keep their value."""

        current = self.get_by_id(employee_id)

        code = require_non_empty(changes["code"], "code") if "code" in changes else current.code
        name = require_non_empty(changes["name"], "name") if "name" in changes else current.name
        title = ((changes.get("jobTitle") or "").strip() or None) if "jobTitle" in changes else current.job_title
        basic_salary = (
            require_positive(changes["basicSalary"], "basicSalary") if "basicSalary" in changes else current.basic_salary
        )
        incentives = (
            require_non_negative(changes["monthlyIncentives"], "monthlyIncentives")
            if "monthlyIncentives" in changes
            else current.monthly_incentives
        )
        work_days = _work_days(changes["workDays"]) if "workDays" in changes else current.work_days
        hours = _daily_work_hours(changes["dailyWorkHours"]) if "dailyWorkHours" in changes else current.daily_work_hours

        ok = self._employees.update(
            employee_id=current.employee_id,
            code=code,
            name=name,
            job_title=title,
            basic_salary=basic_salary,
            monthly_incentives=incentives,
            work_days=work_days,
            daily_work_hours=hours,
        )
        if not ok:
            raise EmployeeNotFound(f"Employee not found: {employee_id}")
        logger.info("Updated employee id=%s", employee_id)
        return self.get_by_id(employee_id)

    def resolve(self, *, employee_id: Any = None, employee_code: Any = None) -> Employee:
        """Find an employee from a request body's ``employeeId`` / ``employeeCode``.

        Older clients sent the employee code in ``employeeId``; a non-numeric
        value there is treated as a code.
        """

        if employee_code is not None and str(employee_code).strip():
            return self.get_by_code(employee_code)
        if employee_id is None or isinstance(employee_id, bool) or not str(employee_id).strip():
            raise ValidationError("employeeId is required")
        if str(employee_id).strip().isdigit():
            return self.get_by_id(int(str(employee_id).strip()))
        return self.get_by_code(employee_id)
