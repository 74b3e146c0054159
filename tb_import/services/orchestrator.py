from __future__ import annotations

import logging
from collections.abc import Iterable
from datetime import UTC, datetime
from pathlib import Path

from ..config.loader import IngestSettings
from ..ingest.errors import AmountCoercionError, IngestError, UnsupportedFormatError
from ..logging.issue_log import FILE_LEVEL_ROW, IssueLogBuffer, IssueRecord
from ..models.ingest_result import IngestResult
from ..models.processing_result import BatchResult, FileStat, FileStatus
from ..models.upload import RawUpload
from .pipeline import ingest
from .progress import ProgressTracker

"""Batch orchestration for the trial-balance import tool.

Expands the given paths into export files, runs the ingestion pipeline on
each one, records row issues in the issue log and aggregates a BatchResult
for the SUMMARY line. Files are processed serially and independently: one
rejected or unbalanced file never stops the others.
"""

__all__ = [
    "SUPPORTED_SUFFIXES",
    "ProcessingError",
    "collect_input_files",
    "process_file",
    "process_paths",
]

logger = logging.getLogger(__name__)

SUPPORTED_SUFFIXES = (".csv", ".xlsx", ".xls")


class ProcessingError(Exception):
    """Fatal batch-level error (nothing was processed)."""


def collect_input_files(paths: Iterable[Path]) -> list[Path]:
    """Expand directories (non-recursive) into supported export files.

    Explicitly named files are kept whatever their suffix; the sniffer decides
    whether they can be read.

    Raises:
        ProcessingError: If a path does not exist or a directory can't be read
    """
    files: list[Path] = []
    for path in paths:
        if not path.exists():
            raise ProcessingError(f"path not found: {path}")
        if path.is_dir():
            try:
                found = sorted(
                    p for p in path.iterdir() if p.is_file() and p.suffix.lower() in SUPPORTED_SUFFIXES
                )
            except OSError as e:
                raise ProcessingError(f"error reading directory {path}: {e}") from e
            files.extend(found)
        else:
            files.append(path)
    return files


def _failed_stat(file_path: Path, error: str, elapsed: float) -> FileStat:
    return FileStat(
        file_name=file_path.name,
        status=FileStatus.FAILED,
        entry_count=0,
        elapsed_seconds=elapsed,
        error=error,
    )


def process_file(
    file_path: Path, settings: IngestSettings, issue_log: IssueLogBuffer | None = None
) -> tuple[FileStat, IngestResult | None]:
    """Ingest one file from disk, converting pipeline failures into a FAILED stat."""
    start = datetime.now(UTC)

    def elapsed() -> float:
        return (datetime.now(UTC) - start).total_seconds()

    try:
        content = file_path.read_bytes()
    except OSError as e:
        logger.error(f"{file_path.name}: cannot read file: {e}")
        if issue_log is not None:
            issue_log.append(IssueRecord.create(file_path.name, FILE_LEVEL_ROW, "FILE_READ_ERROR", str(e)))
        return _failed_stat(file_path, f"cannot read file: {e}", elapsed()), None

    try:
        result = ingest(RawUpload(content=content, filename=file_path.name), settings)
    except IngestError as e:
        if isinstance(e, UnsupportedFormatError):
            issue_type = "UNSUPPORTED_FORMAT"
        elif isinstance(e, AmountCoercionError):
            issue_type = "AMOUNT_COERCION_ERROR"
        else:
            issue_type = "INGEST_ERROR"
        logger.error(f"{file_path.name}: {e}")
        if issue_log is not None:
            issue_log.append(IssueRecord.create(file_path.name, FILE_LEVEL_ROW, issue_type, str(e)))
        return _failed_stat(file_path, str(e), elapsed()), None

    if issue_log is not None:
        issue_log.extend(file_path.name, result.issues)

    validation = result.validation
    if validation.balanced:
        status = FileStatus.BALANCED
        logger.info(
            f"{file_path.name}: {len(result.entries)} entries ({result.source_format}) "
            f"debits={validation.total_debits} credits={validation.total_credits} balanced"
        )
    else:
        status = FileStatus.UNBALANCED
        logger.warning(
            f"{file_path.name}: out of balance debits={validation.total_debits} "
            f"credits={validation.total_credits} discrepancy={validation.discrepancy}"
        )

    skipped = sum(1 for issue in result.issues if issue.kind.endswith("_SKIPPED"))
    stat = FileStat(
        file_name=file_path.name,
        status=status,
        entry_count=len(result.entries),
        elapsed_seconds=elapsed(),
        source_format=result.source_format,
        total_debits=validation.total_debits,
        total_credits=validation.total_credits,
        skipped_rows=skipped,
    )
    return stat, result


def process_paths(
    paths: Iterable[Path], settings: IngestSettings | None = None, issue_log: IssueLogBuffer | None = None
) -> BatchResult:
    """Process every export under ``paths`` and aggregate the outcome.

    Raises:
        ProcessingError: If an input path is missing (fatal, nothing processed)
    """
    settings = settings or IngestSettings()
    start_time = datetime.now(UTC)
    file_paths = collect_input_files(paths)

    file_stats: list[FileStat] = []
    counts = {status: 0 for status in FileStatus}
    total_entries = 0

    with ProgressTracker(len(file_paths)) as progress:
        for file_path in file_paths:
            progress.start_file(file_path)
            stat, _ = process_file(file_path, settings, issue_log)
            counts[stat.status] += 1
            total_entries += stat.entry_count
            file_stats.append(stat)
            progress.set_postfix(
                balanced=counts[FileStatus.BALANCED],
                unbalanced=counts[FileStatus.UNBALANCED],
                failed=counts[FileStatus.FAILED],
            )
            progress.finish_file()

            if issue_log is not None:
                try:
                    issue_log.flush()
                except OSError as e:
                    # Losing the issue log must not fail the import itself
                    logger.warning(f"issue log flush failed: {e}")

    end_time = datetime.now(UTC)
    return BatchResult(
        balanced_files=counts[FileStatus.BALANCED],
        unbalanced_files=counts[FileStatus.UNBALANCED],
        failed_files=counts[FileStatus.FAILED],
        total_entries=total_entries,
        start_time=start_time,
        end_time=end_time,
        elapsed_seconds=(end_time - start_time).total_seconds(),
        file_stats=file_stats,
    )
