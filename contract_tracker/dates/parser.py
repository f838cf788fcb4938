from __future__ import annotations

import logging
import math
import re
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Any

import pandas as pd
from dateutil import parser as dateparser

from ..models.cell_value import Boolean, CellValue, DateValue, Missing, Number, Text
from .arithmetic import to_calendar_date

"""Date parsing for spreadsheet cells.

Resolution order (first hit wins):

1. native date / datetime value (must be a real instant, not NaT)
2. numeric spreadsheet serial (days since 1899-12-30)
3. ISO-8601 text, only when the text contains ``T`` or ``Z``
4. fixed layout list (``DATE_PATTERNS``), tried in order
5. free-form dateutil parse, only when a four-digit year is present

Anything else, including empty/whitespace-only text, yields ``None``. The
parser never raises.

Known ambiguity: ``MM/dd/yyyy`` is listed before ``dd/MM/yyyy``, so
``03/04/2024`` is March 4th. Day-first only wins when month-first cannot
produce a valid date (``13/04/2024``).
"""

__all__ = [
    "DATE_PATTERNS",
    "SERIAL_EPOCH",
    "DatePattern",
    "is_valid_date",
    "parse_date",
    "parse_iso",
    "parse_serial",
]

logger = logging.getLogger(__name__)

# Spreadsheet serial 0 = 1899-12-30 (includes the 1900 leap-year quirk offset)
SERIAL_EPOCH = date(1899, 12, 30)
_MAX_SERIAL = (date.max - SERIAL_EPOCH).days

# Missing components in the free-form fallback are filled from this constant,
# never from the wall clock.
_FALLBACK_DEFAULT = datetime(1900, 1, 1)
_FOUR_DIGIT_YEAR = re.compile(r"(?<!\d)\d{4}(?!\d)")


@dataclass(frozen=True)
class DatePattern:
    label: str  # 表示用 (yyyy-MM-dd 形式)
    shape: re.Pattern[str]
    layout: str  # strptime 形式

    def parse(self, text: str) -> date | None:
        if not self.shape.match(text):
            return None
        try:
            return datetime.strptime(text, self.layout).date()
        except ValueError:
            return None


DATE_PATTERNS: tuple[DatePattern, ...] = (
    DatePattern("yyyy-MM-dd", re.compile(r"^\d{4}-\d{1,2}-\d{1,2}$"), "%Y-%m-%d"),
    DatePattern("dd.MM.yyyy", re.compile(r"^\d{1,2}\.\d{1,2}\.\d{4}$"), "%d.%m.%Y"),
    DatePattern("MM/dd/yyyy", re.compile(r"^\d{1,2}/\d{1,2}/\d{4}$"), "%m/%d/%Y"),
    DatePattern("dd/MM/yyyy", re.compile(r"^\d{1,2}/\d{1,2}/\d{4}$"), "%d/%m/%Y"),
    DatePattern("yyyy/MM/dd", re.compile(r"^\d{4}/\d{1,2}/\d{1,2}$"), "%Y/%m/%d"),
    DatePattern(
        "yyyy-MM-dd HH:mm:ss",
        re.compile(r"^\d{4}-\d{1,2}-\d{1,2} \d{1,2}:\d{2}:\d{2}$"),
        "%Y-%m-%d %H:%M:%S",
    ),
    DatePattern(
        "dd.MM.yyyy HH:mm:ss",
        re.compile(r"^\d{1,2}\.\d{1,2}\.\d{4} \d{1,2}:\d{2}:\d{2}$"),
        "%d.%m.%Y %H:%M:%S",
    ),
)


def is_valid_date(value: Any) -> bool:
    """True iff ``value`` is a date instance naming a real calendar instant.

    ``pd.NaT`` passes an ``isinstance(..., datetime)`` check but is not a
    real instant, so it is rejected here.
    """
    if value is None or value is pd.NaT:
        return False
    if not isinstance(value, date):
        return False
    try:
        return not pd.isna(value)
    except (TypeError, ValueError):
        return False


def parse_serial(serial: float) -> date | None:
    """Convert a spreadsheet day serial into a calendar date.

    The fractional part (time of day) is dropped. Serials below 1, NaN and
    infinities are rejected.
    """
    if isinstance(serial, bool):
        return None
    if not math.isfinite(serial) or serial < 1:
        return None
    days = int(serial)
    if days > _MAX_SERIAL:
        return None
    return SERIAL_EPOCH + timedelta(days=days)


def parse_iso(text: str | None) -> date | None:
    """Strict ISO-8601 parse of ``text``; ``None`` when it is not ISO."""
    if not text:
        return None
    try:
        parsed = dateparser.isoparse(text.strip())
    except (ValueError, OverflowError, TypeError):
        return None
    return to_calendar_date(parsed)


def _parse_free_form(text: str) -> date | None:
    if not _FOUR_DIGIT_YEAR.search(text):
        return None
    try:
        parsed = dateparser.parse(text, default=_FALLBACK_DEFAULT)
    except (ValueError, OverflowError, TypeError):
        return None
    return to_calendar_date(parsed)


def _parse_text(text: str) -> date | None:
    trimmed = text.strip()
    if not trimmed:
        return None

    if "T" in trimmed or "Z" in trimmed:
        parsed = parse_iso(trimmed)
        if parsed is not None:
            return parsed

    for pattern in DATE_PATTERNS:
        parsed = pattern.parse(trimmed)
        if parsed is not None:
            return parsed

    return _parse_free_form(trimmed)


def parse_date(value: Any) -> date | None:
    """Resolve an arbitrary cell value into a calendar date, or ``None``."""
    try:
        cell = CellValue.from_raw(value)
        if isinstance(cell, Missing):
            return None
        if isinstance(cell, DateValue):
            return to_calendar_date(cell.value) if is_valid_date(cell.value) else None
        if isinstance(cell, Number):
            return parse_serial(cell.value)
        if isinstance(cell, Text):
            return _parse_text(cell.value)
        if isinstance(cell, Boolean):
            return None
        return None
    except Exception as e:  # 解析失敗は常に None (呼び出し側へ伝播させない)
        logger.debug(f"date parse failed for {value!r}: {e}")
        return None
