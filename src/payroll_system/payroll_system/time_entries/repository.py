from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Optional, Protocol, Sequence

from ..core.enums import TimeEntryStatus
from ..database.rows import as_date, as_datetime, as_decimal
from .model import TimeEntry


def row_to_time_entry(row: dict) -> TimeEntry:
    return TimeEntry(
        entry_id=int(row["entry_id"]),
        employee_id=int(row["employee_id"]),
        work_date=as_date(row["work_date"]),
        hours_worked=as_decimal(row["hours_worked"]),
        overtime_hours=as_decimal(row["overtime_hours"]),
        status=TimeEntryStatus(row["status"]),
        created_at=as_datetime(row.get("created_at")),
        updated_at=as_datetime(row.get("updated_at")),
    )


class TimeEntryRepository(Protocol):
    def get_by_id(self, entry_id: int) -> Optional[TimeEntry]:
        raise NotImplementedError

    def list_for_employee(
        self,
        employee_id: int,
        *,
        start: Optional[date] = None,
        end: Optional[date] = None,
    ) -> Sequence[TimeEntry]:
        """Entries ordered by work date, newest first; bounds are inclusive."""

        raise NotImplementedError

    def total_overtime_for_month(self, employee_id: int, *, start: date, end: date) -> Decimal:
        raise NotImplementedError

    def create(
        self,
        *,
        employee_id: int,
        work_date: date,
        hours_worked: Decimal,
        overtime_hours: Decimal,
        status: TimeEntryStatus,
    ) -> int:
        raise NotImplementedError

    def update(
        self,
        *,
        entry_id: int,
        hours_worked: Decimal,
        overtime_hours: Decimal,
        status: TimeEntryStatus,
    ) -> bool:
        raise NotImplementedError

    def delete(self, entry_id: int) -> bool:
        raise NotImplementedError
