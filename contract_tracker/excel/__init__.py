from .reader import IngestionError, SheetData, read_first_sheet

__all__ = ["IngestionError", "SheetData", "read_first_sheet"]
