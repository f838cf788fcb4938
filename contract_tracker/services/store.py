from __future__ import annotations

import logging
from datetime import date, datetime

from ..models.config_models import TrackerConfig
from ..models.contract_record import ContractRecord
from ..models.ingestion_result import IngestionResult
from .ingestor import IngestionError, ingest

"""Current-collection holder with snapshot-replace semantics.

The UI side keeps exactly one IngestionResult. A successful import swaps it
in as a whole; a failed import leaves the previous snapshot untouched. While
an import is pending the store refuses another one.
"""

__all__ = [
    "ContractStore",
    "ImportInProgressError",
]

logger = logging.getLogger(__name__)


class ImportInProgressError(Exception):
    """Raised when ``load`` is called while another import is still running."""


class ContractStore:
    def __init__(self, config: TrackerConfig | None = None) -> None:
        self._config = config
        self._snapshot: IngestionResult | None = None
        self._loading = False

    @property
    def snapshot(self) -> IngestionResult | None:
        return self._snapshot

    @property
    def loading(self) -> bool:
        return self._loading

    @property
    def records(self) -> tuple[ContractRecord, ...]:
        return self._snapshot.records if self._snapshot is not None else ()

    def load(self, file_bytes: bytes, reference_now: date | datetime | None = None) -> IngestionResult:
        """Import ``file_bytes`` and replace the current collection on success.

        Raises:
            ImportInProgressError: Another import is pending
            IngestionError: Decode failure (the previous snapshot is kept)
        """
        if self._loading:
            raise ImportInProgressError("an import is already in progress")
        self._loading = True
        try:
            result = ingest(file_bytes, reference_now=reference_now, config=self._config)
        except IngestionError:
            logger.error("import failed; keeping previous collection")
            raise
        finally:
            self._loading = False
        self._snapshot = result
        return result

    def clear(self) -> None:
        self._snapshot = None
