from .arithmetic import add_months, days_between, format_date, months_between, to_calendar_date
from .parser import DATE_PATTERNS, is_valid_date, parse_date, parse_iso

__all__ = [
    "DATE_PATTERNS",
    "add_months",
    "days_between",
    "format_date",
    "is_valid_date",
    "months_between",
    "parse_date",
    "parse_iso",
    "to_calendar_date",
]
