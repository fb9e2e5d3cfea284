from __future__ import annotations

import calendar
import re
from datetime import date, datetime
from typing import Optional

from ..core.exceptions import ValidationError

_MONTH_RE = re.compile(r"^(\d{4})-(\d{2})$")


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date.

    Longer ISO timestamps (as sent by browsers) are cut to their date part.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return datetime.strptime(str(value).strip()[:10], "%Y-%m-%d").date()
    except ValueError:
        raise ValidationError(f"Invalid date (YYYY-MM-DD): {value!r}")


def parse_optional_date(value: Optional[str]) -> Optional[date]:
    if value is None or not str(value).strip():
        return None
    return parse_iso_date(value)


def parse_month(value: str) -> str:
    """Validate a YYYY-MM month key and return it normalized."""
    m = _MONTH_RE.match(str(value or "").strip())
    if not m or not 1 <= int(m.group(2)) <= 12:
        raise ValidationError(f"Invalid month (YYYY-MM): {value!r}")
    return f"{m.group(1)}-{m.group(2)}"


def month_bounds(month: str) -> tuple[date, date]:
    """First and last calendar day of a YYYY-MM month."""
    month = parse_month(month)
    year, mon = int(month[:4]), int(month[5:])
    return date(year, mon, 1), date(year, mon, calendar.monthrange(year, mon)[1])


def month_of(day: date) -> str:
    return day.strftime("%Y-%m")


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()
