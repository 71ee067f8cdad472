from __future__ import annotations

import calendar
import re
from dataclasses import dataclass
from datetime import date, datetime

from ..core.constants import DATE_FORMAT
from ..core.exceptions import ValidationError

_MONTH_RE = re.compile(r"^\d{4}-\d{2}$")


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, DATE_FORMAT).date()


@dataclass(frozen=True)
class MonthRange:
    month: str
    start_date: str
    end_date: str


def month_range(month: str | None) -> MonthRange:
    """Resolve ``YYYY-MM`` into the inclusive first/last day of that month.

    Raises ValidationError("month required") for a missing value and
    ValidationError("invalid date format") when ``month + "-01"`` is not a date.
    """
    if month is None or not str(month).strip():
        raise ValidationError("month required")
    month = str(month).strip()
    if not _MONTH_RE.match(month):
        raise ValidationError("invalid date format")
    try:
        first = datetime.strptime(f"{month}-01", DATE_FORMAT).date()
    except ValueError:
        raise ValidationError("invalid date format")

    last_day = calendar.monthrange(first.year, first.month)[1]
    last = first.replace(day=last_day)
    return MonthRange(month=month, start_date=first.isoformat(), end_date=last.isoformat())
