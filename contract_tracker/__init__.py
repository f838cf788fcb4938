"""Contract spreadsheet ingestion and lifecycle normalization."""

__version__ = "0.1.0"
