from __future__ import annotations

from decimal import Decimal
from typing import Optional, Protocol, Sequence

from ..database.rows import as_datetime, as_decimal
from .model import Employee


def row_to_employee(row: dict) -> Employee:
    """Map an ``employees`` row (either backend) to the domain entity."""

    return Employee(
        employee_id=int(row["employee_id"]),
        code=row["code"],
        name=row["name"],
        job_title=row.get("job_title"),
        basic_salary=as_decimal(row["basic_salary"]),
        monthly_incentives=as_decimal(row.get("monthly_incentives")),
        work_days=int(row["work_days"]) if row.get("work_days") is not None else None,
        daily_work_hours=as_decimal(row.get("daily_work_hours") or 8),
        created_at=as_datetime(row.get("created_at")),
        updated_at=as_datetime(row.get("updated_at")),
    )


class EmployeeRepository(Protocol):
    """Repository interface for employees.

    Note (DIP): the service layer depends on this interface, never on a concrete DB.
    """

    def get_by_id(self, employee_id: int) -> Optional[Employee]:
        raise NotImplementedError

    def get_by_code(self, code: str) -> Optional[Employee]:
        raise NotImplementedError

    def list_all(self) -> Sequence[Employee]:
        raise NotImplementedError

    def create(
        self,
        *,
        code: str,
        name: str,
        job_title: Optional[str],
        basic_salary: Decimal,
        monthly_incentives: Decimal,
        work_days: Optional[int],
        daily_work_hours: Decimal,
    ) -> int:
        """Insert an employee. Raises DuplicateEmployeeCode if the code is taken."""

        raise NotImplementedError

    def update(
        self,
        *,
        employee_id: int,
        code: str,
        name: str,
        job_title: Optional[str],
        basic_salary: Decimal,
        monthly_incentives: Decimal,
        work_days: Optional[int],
        daily_work_hours: Decimal,
    ) -> bool:
        raise NotImplementedError
