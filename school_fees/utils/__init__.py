"""
Utility package initialization and exports
"""

from .date_utils import (
    DateUtilsError,
    due_date_for,
    month_range,
    now_utc,
    today_utc,
)
from .money import (
    zero,
    floor_zero,
    line_amount,
    monthly_equivalent,
    to_money,
    total,
)

__all__ = [
    # Dates
    "DateUtilsError",
    "due_date_for",
    "month_range",
    "now_utc",
    "today_utc",
    # Money
    "zero",
    "floor_zero",
    "line_amount",
    "monthly_equivalent",
    "to_money",
    "total",
]
