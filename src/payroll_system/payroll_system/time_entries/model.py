from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from ..core.enums import TimeEntryStatus


@dataclass(frozen=True)
class TimeEntry:
    entry_id: int
    employee_id: int
    work_date: date
    hours_worked: Decimal
    overtime_hours: Decimal
    status: TimeEntryStatus
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def to_dict(self) -> dict:
        return {
            "id": self.entry_id,
            "employeeId": self.employee_id,
            "date": self.work_date.isoformat(),
            "hoursWorked": float(self.hours_worked),
            "overtimeHours": float(self.overtime_hours),
            "status": self.status.value,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
            "updatedAt": self.updated_at.isoformat() if self.updated_at else None,
        }
