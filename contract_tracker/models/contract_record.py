from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Any

from .field_warning import FieldWarning

"""ContractRecord model.

One normalized contract, produced from one spreadsheet data row. Dates are
plain calendar dates; ``end_date`` is present exactly when ``start_date`` is.
"""

__all__ = [
    "ContractRecord",
    "NormalizationResult",
]


@dataclass(frozen=True)
class ContractRecord:
    """Normalized contract with computed lifecycle fields."""
    id: int  # 1-based row position within one import
    name: str
    status: str
    start_date: date | None
    end_date: date | None  # start_date + duration_months
    duration_months: int  # >= 0
    days_remaining: int  # end_date - reference date; negative = expired
    elapsed_months: int  # >= 0

    @property
    def has_dates(self) -> bool:
        return self.start_date is not None

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "status": self.status,
            "start_date": self.start_date.isoformat() if self.start_date else None,
            "end_date": self.end_date.isoformat() if self.end_date else None,
            "duration_months": self.duration_months,
            "days_remaining": self.days_remaining,
            "elapsed_months": self.elapsed_months,
        }


@dataclass(frozen=True)
class NormalizationResult:
    """A record together with the warnings for every defaulted field."""
    record: ContractRecord
    warnings: tuple[FieldWarning, ...] = field(default_factory=tuple)

    @property
    def clean(self) -> bool:
        return not self.warnings
