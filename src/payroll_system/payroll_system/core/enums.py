from __future__ import annotations

from enum import Enum


class TimeEntryStatus(str, Enum):
    """Lifecycle of a time entry recorded for a work day."""

    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"
