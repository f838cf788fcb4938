from __future__ import annotations

import logging
from datetime import date, datetime
from pathlib import Path

from ..dates.arithmetic import to_calendar_date
from ..excel.reader import IngestionError, read_first_sheet
from ..models.config_models import DEFAULT_CONFIG, TrackerConfig
from ..models.contract_record import ContractRecord
from ..models.field_warning import FieldWarning
from ..models.ingestion_result import IngestionResult
from .normalizer import normalize_with_warnings

"""Spreadsheet ingestion: workbook bytes -> IngestionResult.

Decodes the first sheet, then feeds every RawRow with its 0-based position
and the reference date through the normalizer. A decode failure raises
IngestionError before any record is built; malformed rows never fail the
import.
"""

__all__ = [
    "IngestionError",
    "ingest",
    "ingest_file",
]

logger = logging.getLogger(__name__)


def ingest(
    file_bytes: bytes,
    reference_now: date | datetime | None = None,
    config: TrackerConfig | None = None,
) -> IngestionResult:
    """Decode a workbook and normalize all of its data rows.

    Args:
        file_bytes: Raw .xlsx / .xls payload
        reference_now: Date remaining days are measured from (None = today, read once)
        config: Column names and defaults (None = built-in defaults)

    Returns:
        IngestionResult with records (ids 1..N in row order), headers and raw rows

    Raises:
        IngestionError: The payload cannot be decoded as a workbook
    """
    cfg = config or DEFAULT_CONFIG
    ref = to_calendar_date(reference_now) if reference_now is not None else date.today()
    if ref is None:
        raise TypeError(f"reference_now must be a date or datetime, got {type(reference_now).__name__}")

    sheet = read_first_sheet(file_bytes)

    missing = [c for c in cfg.columns.as_list() if c not in sheet.headers]
    if missing and sheet.headers:
        # 列が無くても行は既定値で正規化される
        logger.debug(f"sheet '{sheet.sheet_name}' lacks columns {missing}; defaults apply")

    records: list[ContractRecord] = []
    warnings: list[FieldWarning] = []
    for index, raw_row in enumerate(sheet.rows):
        result = normalize_with_warnings(raw_row, index, ref, cfg)
        records.append(result.record)
        warnings.extend(result.warnings)

    logger.info(
        f"imported sheet '{sheet.sheet_name}': records={len(records)} "
        f"columns={len(sheet.headers)} warnings={len(warnings)} reference={ref.isoformat()}"
    )
    return IngestionResult(
        records=tuple(records),
        headers=tuple(sheet.headers),
        raw_rows=tuple(sheet.rows),
        reference_date=ref,
        sheet_name=sheet.sheet_name,
        warnings=tuple(warnings),
        raw_view_start_column=cfg.raw_view_start_column,
    )


def ingest_file(
    path: Path,
    reference_now: date | datetime | None = None,
    config: TrackerConfig | None = None,
) -> IngestionResult:
    """Read ``path`` and ingest its bytes; unreadable files raise IngestionError."""
    try:
        payload = Path(path).read_bytes()
    except OSError as e:
        raise IngestionError(f"decode failure: cannot read {path}: {e}") from e
    return ingest(payload, reference_now=reference_now, config=config)
