from __future__ import annotations

import io
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import datetime
from types import MappingProxyType
from typing import Any

import numpy as np
import pandas as pd

"""Workbook decoding.

The first sheet of the workbook is the only one read. Its first row is the
header row; every following non-blank row becomes one RawRow (a read-only
mapping header -> cell value that omits empty cells).

pandas picks the engine from the payload: openpyxl for .xlsx archives, xlrd
for legacy .xls files. NA-string conversion is disabled so text such as
"NA" or "n/a" reaches the normalizer unchanged.
"""

__all__ = [
    "IngestionError",
    "SheetData",
    "read_first_sheet",
    "unique_headers",
]


class IngestionError(Exception):
    """Raised when a payload cannot be decoded as a spreadsheet workbook."""


@dataclass(frozen=True)
class SheetData:
    sheet_name: str
    headers: list[str]
    rows: list[Mapping[str, Any]]  # RawRow (空セルは含まない)


def _is_empty(val: Any) -> bool:
    if val is None or val is pd.NaT:
        return True
    if isinstance(val, str):
        return val == ""
    try:
        return bool(pd.isna(val))
    except (TypeError, ValueError):
        return False


def _native(val: Any) -> Any:
    """Unwrap numpy / pandas scalars to plain Python values."""
    if isinstance(val, pd.Timestamp):
        return val.to_pydatetime()
    if isinstance(val, np.datetime64):
        return pd.Timestamp(val).to_pydatetime()
    if isinstance(val, np.generic):
        return val.item()
    return val


def unique_headers(raw_headers: list[Any]) -> list[str]:
    """Turn the header row into unique column names.

    Blank header cells become ``__EMPTY``, ``__EMPTY_1``, ...; repeated
    names get ``_1``, ``_2``, ... suffixes in column order.
    """
    headers: list[str] = []
    seen: dict[str, int] = {}
    for raw in raw_headers:
        if _is_empty(raw):
            base = "__EMPTY"
        elif isinstance(raw, datetime):
            base = raw.date().isoformat() if raw.time() == datetime.min.time() else raw.isoformat()
        else:
            value = _native(raw)
            if isinstance(value, float) and value.is_integer():
                value = int(value)
            base = str(value).strip() or "__EMPTY"
        name = base
        n = seen.get(base, 0)
        while name in seen:
            n += 1
            name = f"{base}_{n}"
        seen[base] = n
        seen.setdefault(name, 0)
        headers.append(name)
    return headers


def _open_workbook(payload: bytes) -> pd.ExcelFile:
    if not payload:
        raise IngestionError("decode failure: empty payload")
    try:
        return pd.ExcelFile(io.BytesIO(payload))
    except Exception as e:  # zip/OLE/engine 例外の種類はエンジン依存
        raise IngestionError(f"decode failure: {e}") from e


def read_first_sheet(payload: bytes) -> SheetData:
    """Decode ``payload`` and return the first sheet as header + RawRows.

    Raises:
        IngestionError: The payload is not a readable workbook.
    """
    xls = _open_workbook(payload)
    try:
        if not xls.sheet_names:
            raise IngestionError("decode failure: workbook has no sheets")
        sheet_name = str(xls.sheet_names[0])
        df = xls.parse(
            xls.sheet_names[0],
            header=None,
            dtype=object,
            keep_default_na=False,
            na_values=[],
        )
    except IngestionError:
        raise
    except Exception as e:
        raise IngestionError(f"decode failure: {e}") from e
    finally:
        xls.close()

    if df.shape[0] == 0:
        return SheetData(sheet_name=sheet_name, headers=[], rows=[])

    headers = unique_headers(df.iloc[0].tolist())
    rows: list[Mapping[str, Any]] = []
    for raw in df.iloc[1:].itertuples(index=False, name=None):
        row_dict: dict[str, Any] = {}
        for col, val in zip(headers, raw, strict=False):
            if _is_empty(val):
                continue
            row_dict[col] = _native(val)
        # 全セル空の行はスキップ
        if not row_dict:
            continue
        rows.append(MappingProxyType(row_dict))
    return SheetData(sheet_name=sheet_name, headers=headers, rows=rows)
