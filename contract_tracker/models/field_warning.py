from __future__ import annotations

import json
from dataclasses import asdict, dataclass
from typing import Any

"""FieldWarning model.

Records a cell that could not be interpreted and was replaced by its
documented default. Warnings never stop a row from being normalized; they
only make the silent defaulting observable (debug log / JSON Lines file).
"""

__all__ = [
    "FieldWarning",
    "MISSING_NAME",
    "MISSING_STATUS",
    "MISSING_START_DATE",
    "INVALID_START_DATE",
    "MISSING_DURATION",
    "INVALID_DURATION",
    "NEGATIVE_DURATION",
]

MISSING_NAME = "MISSING_NAME"
MISSING_STATUS = "MISSING_STATUS"
MISSING_START_DATE = "MISSING_START_DATE"
INVALID_START_DATE = "INVALID_START_DATE"
MISSING_DURATION = "MISSING_DURATION"
INVALID_DURATION = "INVALID_DURATION"
NEGATIVE_DURATION = "NEGATIVE_DURATION"

_RAW_VALUE_LIMIT = 200


@dataclass(frozen=True)
class FieldWarning:
    """Structured warning for one defaulted field.

    Attributes:
        row: Record id (1-based position of the data row)
        field: Source column header
        code: Warning classification in UPPER_SNAKE_CASE format
        raw_value: Text rendering of the offending cell ("" when absent)
    """
    row: int
    field: str
    code: str
    raw_value: str

    @staticmethod
    def create(row: int, field: str, code: str, raw: Any = None) -> FieldWarning:
        text = "" if raw is None else str(raw)
        if len(text) > _RAW_VALUE_LIMIT:
            text = text[:_RAW_VALUE_LIMIT] + "..."
        return FieldWarning(row=row, field=field, code=code, raw_value=text)

    def to_json_line(self, source: str | None = None) -> str:
        """Serialize to a JSON Lines entry.

        Keys are always row, field, code, raw_value; ``source`` (the file the
        row came from) is appended only when given.
        """
        data = asdict(self)
        if source:
            data["source"] = source
        return json.dumps(data, ensure_ascii=False)
