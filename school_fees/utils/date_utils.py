"""
Date helpers for billing periods.

Notes:
- A billing period is a calendar month identified by (month, year).
- "Today" is taken in UTC so that every worker agrees on the period.
"""

import logging
from calendar import monthrange as _monthrange
from datetime import date, datetime, timezone
from typing import Tuple

logger = logging.getLogger(__name__)

UTC = timezone.utc


class DateUtilsError(ValueError):
    """Raised for impossible dates or billing periods."""
    pass


def now_utc() -> datetime:
    """Return current UTC datetime (timezone-aware)."""
    return datetime.now(UTC)


def today_utc() -> date:
    """Return today's date in UTC."""
    return now_utc().date()


def month_range(year: int, month: int) -> Tuple[date, date]:
    """Return (first_day, last_day) of a given month."""
    if not (1 <= month <= 12):
        raise DateUtilsError("Month must be between 1 and 12")

    if not (1 <= year <= 9999):
        raise DateUtilsError("Year must be between 1 and 9999")

    first = date(year, month, 1)
    last = date(year, month, _monthrange(year, month)[1])
    return first, last


def due_date_for(year: int, month: int, due_day: int) -> date:
    """Due date of a billing period: ``due_day`` of the month, clamped to its last day."""
    _, last = month_range(year, month)
    return last.replace(day=min(due_day, last.day))
