from __future__ import annotations

from dataclasses import dataclass, field

"""Config dataclasses for the contract spreadsheet importer.

These are the typed counterparts of ``config/tracker.yml``. The loader in
``contract_tracker.config.loader`` fills them from YAML; every field has a
default so the pipeline also runs without any config file.
"""

__all__ = [
    "ColumnNames",
    "TrackerConfig",
    "DEFAULT_CONFIG",
]


@dataclass(frozen=True)
class ColumnNames:
    """Header names of the source columns the normalizer reads."""
    name: str = "Name"
    status: str = "Status"
    start_date: str = "Startdatum"
    duration: str = "Laufzeit in M"

    def as_list(self) -> list[str]:
        return [self.name, self.status, self.start_date, self.duration]


@dataclass(frozen=True)
class TrackerConfig:
    """Root configuration object for import and classification."""
    columns: ColumnNames = field(default_factory=ColumnNames)
    default_name: str = "Unbenannt"  # Name 欠落時
    default_status: str = "online"  # Status 欠落時
    online_status: str = "online"  # activeOnline 判定に使う status タグ
    due_soon_days: int = 30  # dueSoon の上限 (日数, 含む)
    raw_view_start_column: int = 3  # raw view は 4 列目以降
    date_display_format: str = "%d.%m.%Y"
    logs_directory: str = "./logs"


DEFAULT_CONFIG = TrackerConfig()
