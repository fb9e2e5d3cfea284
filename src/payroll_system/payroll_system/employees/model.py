from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Optional


@dataclass(frozen=True)
class Employee:
    """Domain entity: an employee and their compensation parameters.

    Note: Plain data object (no DB access code here).
    """

    employee_id: int
    code: str
    name: str
    job_title: Optional[str]
    basic_salary: Decimal
    monthly_incentives: Decimal = Decimal("0")
    work_days: Optional[int] = None
    daily_work_hours: Decimal = Decimal("8")
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def to_dict(self) -> dict:
        return {
            "id": self.employee_id,
            "code": self.code,
            "name": self.name,
            "jobTitle": self.job_title,
            "basicSalary": float(self.basic_salary),
            "monthlyIncentives": float(self.monthly_incentives),
            "workDays": self.work_days,
            "dailyWorkHours": float(self.daily_work_hours),
            "createdAt": self.created_at.isoformat() if self.created_at else None,
            "updatedAt": self.updated_at.isoformat() if self.updated_at else None,
        }
