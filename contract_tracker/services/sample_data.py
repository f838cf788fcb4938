from __future__ import annotations

import io
from pathlib import Path
from typing import Any

import pandas as pd

"""Sample workbook generator.

Produces the fixed 10-contract dataset with the column names the importer
expects. Used as a fixture producer by tests and by ``contract-tracker sample``.
"""

__all__ = [
    "SAMPLE_CONTRACTS",
    "SAMPLE_SHEET_NAME",
    "build_sample_frame",
    "sample_workbook_bytes",
    "write_sample_workbook",
]

SAMPLE_SHEET_NAME = "Contracts"

SAMPLE_CONTRACTS: list[dict[str, Any]] = [
    {"Name": "Microsoft Office 365", "Status": "online", "Startdatum": "2024-01-01", "Laufzeit in M": 12},
    {"Name": "Adobe Creative Cloud", "Status": "online", "Startdatum": "2024-02-15", "Laufzeit in M": 6},
    {"Name": "Slack Enterprise", "Status": "online", "Startdatum": "2023-12-01", "Laufzeit in M": 24},
    {"Name": "Zoom Pro", "Status": "online", "Startdatum": "2024-03-01", "Laufzeit in M": 12},
    {"Name": "Salesforce CRM", "Status": "online", "Startdatum": "2023-11-15", "Laufzeit in M": 36},
    {"Name": "AWS Services", "Status": "online", "Startdatum": "2024-01-20", "Laufzeit in M": 12},
    {"Name": "Google Workspace", "Status": "online", "Startdatum": "2023-10-01", "Laufzeit in M": 12},
    {"Name": "DocuSign", "Status": "online", "Startdatum": "2024-02-01", "Laufzeit in M": 6},
    {"Name": "Webex", "Status": "online", "Startdatum": "2023-09-15", "Laufzeit in M": 12},
    {"Name": "Dropbox Business", "Status": "online", "Startdatum": "2024-01-10", "Laufzeit in M": 24},
]


def build_sample_frame() -> pd.DataFrame:
    return pd.DataFrame(SAMPLE_CONTRACTS, columns=["Name", "Status", "Startdatum", "Laufzeit in M"])


def _write(target: Any) -> None:
    with pd.ExcelWriter(target, engine="openpyxl") as writer:
        build_sample_frame().to_excel(writer, sheet_name=SAMPLE_SHEET_NAME, index=False)


def write_sample_workbook(path: Path) -> Path:
    """Write the sample workbook to ``path`` (parent directories are created)."""
    path.parent.mkdir(parents=True, exist_ok=True)
    _write(path)
    return path


def sample_workbook_bytes() -> bytes:
    buf = io.BytesIO()
    _write(buf)
    return buf.getvalue()
