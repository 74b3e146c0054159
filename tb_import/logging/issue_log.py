from __future__ import annotations

import json
from dataclasses import asdict, dataclass
from datetime import UTC, datetime
from pathlib import Path

from ..models.row_issue import RowIssue

"""Row issue log generation & buffering.

- JSON Lines with a fixed schema (no extra keys)
- One ``issues-YYYYMMDD-HHMMSS.log`` (UTC) per run, created on first flush
- Records are buffered and written when the caller flushes (per file)

The ingestion pipeline never writes here itself; the orchestrator turns the
RowIssue values it returns into IssueRecords.
"""

__all__ = [
    "FILE_LEVEL_ROW",
    "IssueRecord",
    "IssueLogBuffer",
]

TIMESTAMP_FMT = "%Y%m%d-%H%M%S"
FILE_LEVEL_ROW = -1  # Row number for failures that concern the whole file


@dataclass(frozen=True)
class IssueRecord:
    """Structured issue record for JSON Lines logging.

    Attributes:
        timestamp: ISO8601 UTC timestamp with 'Z' suffix
        file: Export filename being processed
        row: 1-based data row. -1 for file-level failures
        issue_type: Issue classification in UPPER_SNAKE_CASE format
        message: Description of the issue
    """
    timestamp: str
    file: str
    row: int
    issue_type: str
    message: str

    @staticmethod
    def create(file: str, row: int, issue_type: str, message: str) -> IssueRecord:
        ts = datetime.now(UTC).isoformat().replace("+00:00", "Z")
        return IssueRecord(timestamp=ts, file=file, row=row, issue_type=issue_type, message=message)

    @staticmethod
    def from_row_issue(file: str, issue: RowIssue) -> IssueRecord:
        return IssueRecord.create(file, issue.row_number, issue.kind, issue.message)

    def to_json_line(self) -> str:
        return json.dumps(asdict(self), ensure_ascii=False)


class IssueLogBuffer:
    """In-memory buffer for issue records. Flush appends JSON Lines.

    The file path is decided on first access; serial use only.
    """
    def __init__(self, log_dir: Path | str = "logs") -> None:
        self.log_dir = Path(log_dir)
        self._records: list[IssueRecord] = []
        self._file_path: Path | None = None

    @property
    def file_path(self) -> Path:
        if self._file_path is None:
            stamp = datetime.now(UTC).strftime(TIMESTAMP_FMT)
            self._file_path = self.log_dir / f"issues-{stamp}.log"
        return self._file_path

    def append(self, record: IssueRecord) -> None:
        self._records.append(record)

    def extend(self, file: str, issues: list[RowIssue]) -> None:
        for issue in issues:
            self._records.append(IssueRecord.from_row_issue(file, issue))

    def __len__(self) -> int:  # pragma: no cover (trivial)
        return len(self._records)

    def flush(self) -> Path | None:
        """Write buffered records; returns the log path, or None if nothing was ever written."""
        if not self._records:
            return self._file_path
        fp = self.file_path
        fp.parent.mkdir(parents=True, exist_ok=True)
        with fp.open("a", encoding="utf-8") as f:
            for r in self._records:
                f.write(r.to_json_line() + "\n")
        self._records.clear()
        return fp
