from __future__ import annotations

from collections import Counter
from collections.abc import Iterable
from datetime import UTC, datetime
from pathlib import Path

from ..models.field_warning import FieldWarning

"""Per-run field warning log.

Warnings are collected per workbook, so one run over several files yields
one JSON Lines file whose entries are grouped by source file (in the order
the files were imported, rows ascending within a file). Each entry carries
row, field, code, raw_value and, when known, the source file name.
"""

__all__ = [
    "FieldWarning",
    "WarningLogBuffer",
]

TIMESTAMP_FMT = "%Y%m%d-%H%M%S"


class WarningLogBuffer:
    def __init__(self, logs_dir: Path = Path("./logs")) -> None:
        self._logs_dir = logs_dir
        self._by_source: dict[str, list[FieldWarning]] = {}
        self._file_path: Path | None = None

    @property
    def file_path(self) -> Path:
        """``<logs_dir>/warnings-YYYYMMDD-HHMMSS.log`` (UTC), fixed on first access."""
        if self._file_path is None:
            self._logs_dir.mkdir(parents=True, exist_ok=True)
            stamp = datetime.now(UTC).strftime(TIMESTAMP_FMT)
            self._file_path = self._logs_dir / f"warnings-{stamp}.log"
        return self._file_path

    @property
    def sources(self) -> list[str]:
        return [s for s, ws in self._by_source.items() if ws]

    def append(self, warning: FieldWarning, source: str = "") -> None:
        self._by_source.setdefault(source, []).append(warning)

    def extend(self, warnings: Iterable[FieldWarning], source: str = "") -> None:
        bucket = self._by_source.setdefault(source, [])
        bucket.extend(warnings)

    def code_counts(self) -> Counter[str]:
        """Buffered warnings per code, across all sources."""
        return Counter(w.code for ws in self._by_source.values() for w in ws)

    def __len__(self) -> int:
        return sum(len(ws) for ws in self._by_source.values())

    def flush(self) -> Path | None:
        """Append the buffered warnings and clear the buffer; ``None`` when empty."""
        if not len(self):
            return None
        fp = self.file_path
        with fp.open("a", encoding="utf-8") as f:
            for source, warnings in self._by_source.items():
                for w in sorted(warnings, key=lambda w: w.row):
                    f.write(w.to_json_line(source or None) + "\n")
        self._by_source.clear()
        return fp
