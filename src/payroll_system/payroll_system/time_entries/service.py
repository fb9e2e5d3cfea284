from __future__ import annotations

import logging
from datetime import date
from decimal import Decimal
from typing import Any, Iterable, Optional, Sequence

from ..common.datetime_utils import month_bounds, now_local, parse_iso_date
from ..common.validators import require_in_range, require_non_negative
from ..core.constants import DEFAULT_HOURS_WORKED, MAX_HOURS_PER_DAY
from ..core.enums import TimeEntryStatus
from ..core.exceptions import DomainError, EmployeeNotFound, TimeEntryNotFound, ValidationError
from ..employees.repository import EmployeeRepository
from .model import TimeEntry
from .repository import TimeEntryRepository

logger = logging.getLogger(__name__)


def _hours(value: Any, field_name: str, *, default: Decimal) -> Decimal:
    hours = require_non_negative(value, field_name, default=default)
    return require_in_range(hours, field_name, low=Decimal("0"), high=Decimal(MAX_HOURS_PER_DAY))


def _status(value: Any, *, default: Optional[TimeEntryStatus] = None) -> TimeEntryStatus:
    if value is None or value == "":
        if default is None:
            raise ValidationError("status is required")
        return default
    try:
        return TimeEntryStatus(str(value).strip())
    except ValueError:
        allowed = ", ".join(s.value for s in TimeEntryStatus)
        raise ValidationError(f"status must be one of: {allowed}")


class TimeEntryService:
    """Use case: record daily hours and overtime per employee."""

    def __init__(self, entries: TimeEntryRepository, employees: EmployeeRepository):
        self._entries = entries
        self._employees = employees

    def _require_employee(self, employee_id: int) -> None:
        if not self._employees.get_by_id(int(employee_id)):
            logger.warning("Employee not found with id: %s", employee_id)
            raise EmployeeNotFound(f"Employee not found: {employee_id}")

    def get(self, entry_id: int) -> TimeEntry:
        entry = self._entries.get_by_id(int(entry_id))
        if not entry:
            logger.warning("Time entry not found with id: %s", entry_id)
            raise TimeEntryNotFound(f"Time entry not found: {entry_id}")
        return entry

    def list_for_employee(
        self,
        employee_id: int,
        *,
        start: Optional[date] = None,
        end: Optional[date] = None,
    ) -> Sequence[TimeEntry]:
        if start and end and start > end:
            raise ValidationError("startDate must not be after endDate")
        return self._entries.list_for_employee(int(employee_id), start=start, end=end)

    def total_overtime_for_month(self, employee_id: int, month: str) -> Decimal:
        start, end = month_bounds(month)
        return self._entries.total_overtime_for_month(int(employee_id), start=start, end=end)

    def create_entry(
        self,
        *,
        employee_id: Any,
        work_date: Any = None,
        hours_worked: Any = None,
        overtime_hours: Any = None,
        status: Any = None,
    ) -> TimeEntry:
        if employee_id is None or isinstance(employee_id, bool) or not str(employee_id).strip().isdigit():
            raise ValidationError("employeeId must be an integer")
        employee_id = int(str(employee_id).strip())
        self._require_employee(employee_id)

        entry_id = self._entries.create(
            employee_id=employee_id,
            work_date=parse_iso_date(work_date) if work_date else now_local().date(),
            hours_worked=_hours(hours_worked, "hoursWorked", default=Decimal(DEFAULT_HOURS_WORKED)),
            overtime_hours=_hours(overtime_hours, "overtimeHours", default=Decimal("0")),
            status=_status(status, default=TimeEntryStatus.IN_PROGRESS),
        )
        logger.info("Created time entry id=%s for employee id=%s", entry_id, employee_id)
        return self.get(entry_id)

    def update_entry(self, entry_id: int, changes: dict) -> TimeEntry:
        current = self.get(entry_id)

        hours = (
            _hours(changes["hoursWorked"], "hoursWorked", default=current.hours_worked)
            if "hoursWorked" in changes
            else current.hours_worked
        )
        overtime = (
            _hours(changes["overtimeHours"], "overtimeHours", default=Decimal("0"))
            if "overtimeHours" in changes
            else current.overtime_hours
        )
        status = _status(changes["status"], default=current.status) if "status" in changes else current.status

        if not self._entries.update(entry_id=current.entry_id, hours_worked=hours, overtime_hours=overtime, status=status):
            raise TimeEntryNotFound(f"Time entry not found: {entry_id}")
        logger.info("Updated time entry id=%s", entry_id)
        return self.get(entry_id)

    def delete_entry(self, entry_id: int) -> None:
        entry = self.get(entry_id)
        if not self._entries.delete(entry.entry_id):
            raise TimeEntryNotFound(f"Time entry not found: {entry_id}")
        logger.info("Deleted time entry id=%s", entry_id)

    def bulk_create(self, items: Iterable[Any]) -> tuple[list[TimeEntry], list[dict]]:
        """Create each entry independently; failures are collected, not raised."""

        success: list[TimeEntry] = []
        errors: list[dict] = []
        for item in items:
            try:
                if not isinstance(item, dict):
                    raise ValidationError("Each entry must be an object")
                success.append(
                    self.create_entry(
                        employee_id=item.get("employeeId"),
                        work_date=item.get("date"),
                        hours_worked=item.get("hoursWorked"),
                        overtime_hours=item.get("overtimeHours"),
                        status=item.get("status"),
                    )
                )
            except DomainError as e:
                errors.append({"entry": item, "error": str(e)})
        return success, errors
