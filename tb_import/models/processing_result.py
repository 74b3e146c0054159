from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from enum import Enum

"""Batch processing result models for the trial-balance import tool.

These models aggregate per-file outcomes when several exports are ingested in
one run (CLI / orchestrator). The pipeline itself only produces IngestResult.
"""

__all__ = [
    "FileStatus",
    "FileStat",
    "BatchResult",
]


class FileStatus(Enum):
    """Outcome of ingesting a single file.

    - BALANCED: entries produced and debits equal credits within tolerance
    - UNBALANCED: entries produced but the ledger is out of balance
    - FAILED: no entries, the file was rejected (unsupported format etc.)
    """
    BALANCED = "balanced"
    UNBALANCED = "unbalanced"
    FAILED = "failed"


@dataclass(frozen=True)
class FileStat:
    """Per-file processing statistics."""
    file_name: str
    status: FileStatus
    entry_count: int  # Retained entries
    elapsed_seconds: float
    source_format: str | None = None  # None when sniffing failed
    total_debits: Decimal = Decimal("0")
    total_credits: Decimal = Decimal("0")
    skipped_rows: int = 0
    error: str | None = None  # Failure reason summary

    @property
    def discrepancy(self) -> Decimal:
        return self.total_debits - self.total_credits


@dataclass(frozen=True)
class BatchResult:
    """Aggregated results for the SUMMARY output line."""
    balanced_files: int
    unbalanced_files: int
    failed_files: int
    total_entries: int
    start_time: datetime
    end_time: datetime
    elapsed_seconds: float
    file_stats: list[FileStat] | None = None

    @property
    def total_files(self) -> int:
        return self.balanced_files + self.unbalanced_files + self.failed_files
