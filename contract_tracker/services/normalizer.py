from __future__ import annotations

import logging
import math
import re
from collections.abc import Mapping
from datetime import date, datetime
from typing import Any

from ..dates.arithmetic import add_months, days_between, months_between, to_calendar_date
from ..dates.parser import parse_date
from ..models.cell_value import Boolean, DateValue, Missing, Number, Text, classify_cell
from ..models.config_models import DEFAULT_CONFIG, TrackerConfig
from ..models.contract_record import ContractRecord, NormalizationResult
from ..models.field_warning import (
    INVALID_DURATION,
    INVALID_START_DATE,
    MISSING_DURATION,
    MISSING_NAME,
    MISSING_START_DATE,
    MISSING_STATUS,
    NEGATIVE_DURATION,
    FieldWarning,
)

"""Row normalization: one raw spreadsheet row -> one ContractRecord.

Pure function of (raw row, row index, reference date, config). No step
raises; every missing or malformed cell degrades to its default:

- start date unparseable -> no start/end date, days_remaining = 0,
  elapsed_months = 0
- duration missing / non-numeric / negative -> 0 months (negatives clamp)
- duration pushing the end date past 9999-12-31 -> 0 months (end = start)
- name / status empty -> "Unbenannt" / "online"
"""

__all__ = [
    "coerce_duration",
    "normalize",
    "normalize_with_warnings",
]

logger = logging.getLogger(__name__)

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


def _reference_date(reference_now: date | datetime) -> date:
    ref = to_calendar_date(reference_now)
    if ref is None:
        raise TypeError(f"reference_now must be a date or datetime, got {type(reference_now).__name__}")
    return ref


def coerce_duration(value: Any) -> tuple[int, str | None]:
    """Coerce a duration cell to non-negative whole months.

    Returns the months plus a warning code when the cell had to be defaulted
    or clamped (``None`` when the value was taken as is).

    >>> coerce_duration("12 Monate")
    (12, None)
    >>> coerce_duration(-5)
    (0, 'NEGATIVE_DURATION')
    """
    cell = classify_cell(value)
    if isinstance(cell, Missing):
        return 0, MISSING_DURATION
    if isinstance(cell, Number):
        if not math.isfinite(cell.value):
            return 0, INVALID_DURATION
        months = int(cell.value)  # 小数は 0 方向へ切り捨て
    elif isinstance(cell, Text):
        m = _LEADING_INT.match(cell.value)
        if not m:
            return 0, INVALID_DURATION
        months = int(m.group(1))
    else:
        # Boolean / DateValue は期間として解釈しない
        return 0, INVALID_DURATION
    if months < 0:
        return 0, NEGATIVE_DURATION
    return months, None


def _cell_text(value: Any) -> str:
    cell = classify_cell(value)
    if isinstance(cell, Missing):
        return ""
    if isinstance(cell, Number):
        v = cell.value
        if isinstance(v, float) and v.is_integer():
            return str(int(v))
        return str(v)
    if isinstance(cell, Boolean):
        return "true" if cell.value else "false"
    if isinstance(cell, DateValue):
        return cell.value.isoformat()
    if isinstance(cell, Text):
        return cell.value.strip()
    return str(value).strip()


def normalize_with_warnings(
    raw_row: Mapping[str, Any],
    row_index: int,
    reference_now: date | datetime,
    config: TrackerConfig = DEFAULT_CONFIG,
) -> NormalizationResult:
    """Normalize one raw row and report every field that was defaulted.

    Args:
        raw_row: Column header -> cell value (absent cells may be omitted)
        row_index: 0-based position of the row in the sheet's data rows
        reference_now: Date the remaining days / elapsed months are measured from
        config: Column names and defaults

    Returns:
        NormalizationResult with the record and its field warnings
    """
    cols = config.columns
    record_id = row_index + 1
    ref = _reference_date(reference_now)
    warnings: list[FieldWarning] = []

    raw_start = raw_row.get(cols.start_date)
    start_date = parse_date(raw_start)
    if start_date is None:
        code = MISSING_START_DATE if isinstance(classify_cell(raw_start), Missing) else INVALID_START_DATE
        warnings.append(FieldWarning.create(record_id, cols.start_date, code, raw_start))

    raw_duration = raw_row.get(cols.duration)
    duration_months, duration_code = coerce_duration(raw_duration)
    if duration_code is not None:
        warnings.append(FieldWarning.create(record_id, cols.duration, duration_code, raw_duration))

    end_date: date | None = None
    if start_date is not None:
        try:
            end_date = add_months(start_date, duration_months)
        except (ValueError, OverflowError):
            # 終了日が 9999-12-31 を超える: 期間 0 として start_date を終了日にする
            warnings.append(FieldWarning.create(record_id, cols.duration, INVALID_DURATION, raw_duration))
            duration_months = 0
            end_date = start_date
        days_remaining = days_between(end_date, ref)
        elapsed_months = max(0, months_between(ref, start_date))
    else:
        days_remaining = 0
        elapsed_months = 0

    name = _cell_text(raw_row.get(cols.name))
    if not name:
        name = config.default_name
        warnings.append(FieldWarning.create(record_id, cols.name, MISSING_NAME, raw_row.get(cols.name)))

    status = _cell_text(raw_row.get(cols.status))
    if not status:
        status = config.default_status
        warnings.append(FieldWarning.create(record_id, cols.status, MISSING_STATUS, raw_row.get(cols.status)))

    record = ContractRecord(
        id=record_id,
        name=name,
        status=status,
        start_date=start_date,
        end_date=end_date,
        duration_months=duration_months,
        days_remaining=days_remaining,
        elapsed_months=elapsed_months,
    )
    for w in warnings:
        logger.debug(f"row={w.row} field={w.field!r} {w.code} raw={w.raw_value!r}")
    return NormalizationResult(record=record, warnings=tuple(warnings))


def normalize(
    raw_row: Mapping[str, Any],
    row_index: int,
    reference_now: date | datetime,
    config: TrackerConfig = DEFAULT_CONFIG,
) -> ContractRecord:
    """Normalize one raw row into a ContractRecord (warnings discarded)."""
    return normalize_with_warnings(raw_row, row_index, reference_now, config).record
