from __future__ import annotations

from ..models.ingestion_result import IngestionResult
from .metrics import ContractStats

"""SUMMARY line rendering.

Format:
SUMMARY records={n} undated={u} warnings={w} online={o} due={d} expired={e}
"""


def render_summary_line(result: IngestionResult, stats: ContractStats) -> str:
    """Render the SUMMARY line for one import.

    Examples:
        >>> from datetime import date
        >>> result = IngestionResult(records=(), headers=(), raw_rows=(), reference_date=date(2024, 6, 1))
        >>> render_summary_line(result, ContractStats(total=0, online=0, due=0, expired=0))
        'SUMMARY records=0 undated=0 warnings=0 online=0 due=0 expired=0'
    """
    return (
        f"SUMMARY records={len(result.records)} "
        f"undated={result.undated_count} "
        f"warnings={len(result.warnings)} "
        f"online={stats.online} "
        f"due={stats.due} "
        f"expired={stats.expired}"
    )


def render_files_line(total_files: int, success_files: int, failed_files: int, total_records: int) -> str:
    """Aggregate line for a multi-file run."""
    return (
        f"SUMMARY files={success_files}/{total_files} "
        f"failed={failed_files} "
        f"records={total_records}"
    )
