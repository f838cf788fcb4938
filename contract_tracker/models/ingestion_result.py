from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import date
from typing import Any

from .contract_record import ContractRecord
from .field_warning import FieldWarning

"""IngestionResult model.

The complete output of one import: normalized records, the header row and
the untouched raw rows (for the secondary raw-data view). An import either
produces a whole IngestionResult or raises; there is no partial result.
"""

__all__ = [
    "IngestionResult",
]


@dataclass(frozen=True)
class IngestionResult:
    records: tuple[ContractRecord, ...]
    headers: tuple[str, ...]  # 1 行目の列名 (ファイル順)
    raw_rows: tuple[Mapping[str, Any], ...]  # 読み取り専用 RawRow
    reference_date: date
    sheet_name: str = ""
    warnings: tuple[FieldWarning, ...] = field(default_factory=tuple)
    raw_view_start_column: int = 3

    @property
    def raw_view_headers(self) -> list[str]:
        """Headers from the raw-view start column onward (4th column by default)."""
        return list(self.headers[self.raw_view_start_column:])

    def raw_view_rows(self) -> list[list[Any]]:
        """One list of cell values per raw row, aligned to ``raw_view_headers``."""
        headers = self.raw_view_headers
        return [[row.get(h) for h in headers] for row in self.raw_rows]

    @property
    def undated_count(self) -> int:
        return sum(1 for r in self.records if not r.has_dates)

