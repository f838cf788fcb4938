from __future__ import annotations

from datetime import date, datetime
from typing import Any

import pandas as pd
from dateutil.relativedelta import relativedelta

"""Calendar-date arithmetic used by the normalizer and the metrics helpers.

All values are plain calendar dates; times of day are dropped before any
computation so that ``days_between`` always counts whole days.
"""

__all__ = [
    "add_months",
    "days_between",
    "format_date",
    "months_between",
    "to_calendar_date",
]


def to_calendar_date(value: Any) -> date | None:
    """Reduce a date, datetime or pandas Timestamp to a ``date``."""
    if value is None or value is pd.NaT:
        return None
    if isinstance(value, pd.Timestamp):
        return value.date()
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return None


def add_months(start: date, months: int) -> date:
    """Add calendar months; overflowing days clamp to the month's last day.

    >>> add_months(date(2024, 1, 31), 1)
    datetime.date(2024, 2, 29)
    """
    return start + relativedelta(months=months)


def days_between(later: date, earlier: date) -> int:
    """Whole days from ``earlier`` to ``later`` (negative when later < earlier)."""
    return (later - earlier).days


def months_between(later: date, earlier: date) -> int:
    """Whole calendar months from ``earlier`` to ``later``, signed."""
    delta = relativedelta(later, earlier)
    return delta.years * 12 + delta.months


def format_date(value: date | None, fmt: str = "%d.%m.%Y") -> str:
    if value is None:
        return "-"
    return value.strftime(fmt)
