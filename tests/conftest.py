# Shared pytest fixtures
from __future__ import annotations
import io
import struct
import tempfile
from collections.abc import Callable
from pathlib import Path

import pandas as pd
import pytest

from contract_tracker.logging.init import reset_logging


def make_workbook_bytes(sheets: dict[str, list[list[object]]]) -> bytes:
    """Build an .xlsx payload; each sheet is written cell by cell (first list = row 1)."""
    buf = io.BytesIO()
    with pd.ExcelWriter(buf, engine="openpyxl") as writer:
        for sheet, rows in sheets.items():
            df = pd.DataFrame(rows)
            df.to_excel(writer, sheet_name=sheet, header=False, index=False)
    return buf.getvalue()


def make_legacy_xls_bytes(rows: list[list[object]]) -> bytes:
    """Build a single-sheet legacy .xls payload (BIFF2 worksheet stream) cell by cell.

    Numbers become NUMBER records, everything else LABEL records (cp1252);
    ``None`` leaves the cell empty. pandas routes the payload to xlrd.
    """
    def record(opcode: int, payload: bytes = b"") -> bytes:
        return struct.pack("<HH", opcode, len(payload)) + payload

    attr = b"\x00\x00\x00"  # XF 0, General
    out = [
        record(0x0009, struct.pack("<HH", 0x0007, 0x0010)),  # BOF: worksheet
        record(0x0042, struct.pack("<H", 1252)),  # CODEPAGE
    ]
    for r, row in enumerate(rows):
        for c, value in enumerate(row):
            if value is None:
                continue
            if isinstance(value, (int, float)) and not isinstance(value, bool):
                out.append(record(0x0003, struct.pack("<HH3sd", r, c, attr, float(value))))
            else:
                text = str(value).encode("cp1252")
                out.append(record(0x0004, struct.pack("<HH3sB", r, c, attr, len(text)) + text))
    out.append(record(0x000A))  # EOF
    return b"".join(out)


HEADER = ["Name", "Status", "Startdatum", "Laufzeit in M"]


@pytest.fixture()
def temp_workdir(monkeypatch) -> Path:
    monkeypatch.delenv("CONTRACT_TRACKER_CONFIG", raising=False)
    with tempfile.TemporaryDirectory() as d:
        p = Path(d)
        (p / "config").mkdir()
        (p / "data").mkdir()
        monkeypatch.chdir(p)
        yield p


@pytest.fixture()
def make_workbook() -> Callable[..., bytes]:
    def _make(rows: list[list[object]], header: list[object] | None = None, sheet: str = "Contracts") -> bytes:
        return make_workbook_bytes({sheet: [list(header or HEADER)] + rows})
    return _make


@pytest.fixture()
def write_workbook(temp_workdir: Path, make_workbook) -> Callable[..., Path]:
    def _write(name: str, rows: list[list[object]], header: list[object] | None = None) -> Path:
        p = temp_workdir / "data" / name
        p.write_bytes(make_workbook(rows, header))
        return p
    return _write


@pytest.fixture()
def sample_config_yaml() -> str:
    return """columns:
  name: Vertrag
  start_date: Beginn
defaults:
  name: Unnamed
due_soon_days: 14
raw_view_start_column: 2
logs_directory: ./logs
"""


@pytest.fixture()
def write_config(temp_workdir: Path, sample_config_yaml: str) -> Path:
    cfg = temp_workdir / "config" / "tracker.yml"
    cfg.write_text(sample_config_yaml, encoding="utf-8")
    return cfg


@pytest.fixture()
def clean_logging():
    reset_logging()
    yield
    reset_logging()


@pytest.fixture()
def make_workbook_sheets() -> Callable[[dict[str, list[list[object]]]], bytes]:
    return make_workbook_bytes


@pytest.fixture()
def make_legacy_xls() -> Callable[..., bytes]:
    def _make(rows: list[list[object]], header: list[object] | None = None) -> bytes:
        return make_legacy_xls_bytes([list(header or HEADER)] + rows)
    return _make
