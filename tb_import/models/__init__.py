"""Domain models for the trial-balance import tool.

This package contains the value types that flow through the ingestion
pipeline: the raw upload, the classified entries, the validation verdict and
the diagnostics, plus the batch-level result models used by the CLI.
"""

from .entry import AccountType, TrialBalanceEntry
from .ingest_result import IngestResult
from .processing_result import BatchResult, FileStat, FileStatus
from .row_issue import RowIssue
from .upload import RawUpload
from .validation_result import DEFAULT_TOLERANCE, ValidationResult

__all__ = [
    # Pipeline models
    "RawUpload",
    "AccountType",
    "TrialBalanceEntry",
    "ValidationResult",
    "DEFAULT_TOLERANCE",
    "RowIssue",
    "IngestResult",
    # Batch models
    "FileStatus",
    "FileStat",
    "BatchResult",
]
