"""Domain models for the contract spreadsheet importer.

This package contains the value types passed between the date parser, the
row normalizer and the spreadsheet ingestor.
"""

from .cell_value import Boolean, CellValue, DateValue, Missing, Number, Text, classify_cell
from .config_models import ColumnNames, TrackerConfig
from .contract_record import ContractRecord, NormalizationResult
from .field_warning import FieldWarning
from .ingestion_result import IngestionResult

__all__ = [
    # Cell variants
    "CellValue",
    "Missing",
    "Text",
    "Number",
    "Boolean",
    "DateValue",
    "classify_cell",
    # Configuration models
    "ColumnNames",
    "TrackerConfig",
    # Processing models
    "ContractRecord",
    "NormalizationResult",
    "FieldWarning",
    "IngestionResult",
]
