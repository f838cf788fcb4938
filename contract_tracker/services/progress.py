from __future__ import annotations

import sys
from pathlib import Path
from typing import Any

from tqdm import tqdm
from tqdm.std import tqdm as TqdmType

"""Import progress over the workbooks of one CLI run.

The tracker keeps the per-run counters (imported / failed workbooks, records)
that feed the ``SUMMARY files=...`` line. A tqdm bar is only drawn on a TTY;
in pipes and CI the counters still work and stdout carries no ANSI codes.
"""

__all__ = [
    "ImportProgress",
    "is_tty_enabled",
]


def is_tty_enabled() -> bool:
    return sys.stdout.isatty()


class ImportProgress:
    """Counts workbook outcomes and mirrors them on a tqdm bar."""

    def __init__(self, total_files: int, *, description: str = "Importing workbooks") -> None:
        self.total_files = total_files
        self.description = description
        self.succeeded = 0
        self.failed = 0
        self.records = 0

        self.pbar: TqdmType[Any] | None = None
        if is_tty_enabled():
            self.pbar = tqdm(
                total=total_files,
                desc=description,
                unit="file",
                disable=False,
                leave=True,
                position=0,
                ncols=80,
                ascii=True,
            )

    @property
    def enabled(self) -> bool:
        return self.pbar is not None

    def begin(self, path: Path) -> None:
        if self.pbar is not None:
            self.pbar.set_description(f"{self.description} ({path.name})")

    def imported(self, record_count: int) -> None:
        self.succeeded += 1
        self.records += record_count
        self._advance()

    def rejected(self) -> None:
        self.failed += 1
        self._advance()

    def _advance(self) -> None:
        if self.pbar is None:
            return
        self.pbar.update(1)
        self.pbar.set_postfix(ok=self.succeeded, failed=self.failed, records=self.records)
        self.pbar.set_description(self.description)

    def close(self) -> None:
        if self.pbar is not None:
            self.pbar.close()
            self.pbar = None

    def __enter__(self) -> ImportProgress:
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()
