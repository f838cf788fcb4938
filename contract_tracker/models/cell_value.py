from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any

import numpy as np
import pandas as pd

"""Closed variant type for a single spreadsheet cell.

Spreadsheet readers hand back whatever the engine produced for a cell: Python
str/int/float/bool, datetime, pandas Timestamp/NaT, numpy scalars or NaN.
``classify_cell`` folds all of them into exactly one of five variants so the
date parser and the duration coercion can dispatch on the variant instead of
probing types ad hoc.
"""

__all__ = [
    "CellValue",
    "Missing",
    "Text",
    "Number",
    "Boolean",
    "DateValue",
    "classify_cell",
]


class CellValue:
    """Base class of the cell variants. Use ``classify_cell`` to build one."""

    @staticmethod
    def from_raw(raw: Any) -> CellValue:
        return classify_cell(raw)


@dataclass(frozen=True)
class Missing(CellValue):
    pass


@dataclass(frozen=True)
class Text(CellValue):
    value: str


@dataclass(frozen=True)
class Number(CellValue):
    value: int | float


@dataclass(frozen=True)
class Boolean(CellValue):
    value: bool


@dataclass(frozen=True)
class DateValue(CellValue):
    value: date  # datetime / pd.Timestamp も date のサブクラス


MISSING = Missing()


def _is_missing_scalar(raw: Any) -> bool:
    if raw is None or raw is pd.NaT or raw is pd.NA:
        return True
    if isinstance(raw, float) and math.isnan(raw):
        return True
    if isinstance(raw, np.floating) and np.isnan(raw):
        return True
    if isinstance(raw, np.datetime64) and np.isnat(raw):
        return True
    return False


def classify_cell(raw: Any) -> CellValue:
    """Map an untyped cell value onto its variant.

    Order matters: booleans are checked before numbers because ``bool`` is an
    ``int`` subclass, and datetimes before anything else because pandas
    Timestamps also behave like numbers in some comparisons.
    """
    if isinstance(raw, CellValue):
        return raw
    if _is_missing_scalar(raw):
        return MISSING
    if isinstance(raw, (bool, np.bool_)):
        return Boolean(bool(raw))
    if isinstance(raw, np.datetime64):
        return DateValue(pd.Timestamp(raw).to_pydatetime())
    if isinstance(raw, pd.Timestamp):
        return DateValue(raw.to_pydatetime())
    if isinstance(raw, (datetime, date)):
        return DateValue(raw)
    if isinstance(raw, np.integer):
        return Number(int(raw))
    if isinstance(raw, np.floating):
        return Number(float(raw))
    if isinstance(raw, (int, float)):
        return Number(raw)
    if isinstance(raw, str):
        if raw.strip() == "":
            return MISSING
        return Text(raw)
    # time / Decimal / その他は文字列表現で扱う
    return Text(str(raw))
