from __future__ import annotations

from dataclasses import dataclass

"""RowIssue model for non-fatal ingestion diagnostics.

The pipeline never writes logs to disk itself; it returns RowIssue values and
lets the caller decide whether to persist them (see tb_import.logging.issue_log).
"""

__all__ = [
    "SUMMARY_LINE_SKIPPED",
    "EMPTY_ROW_SKIPPED",
    "NAMELESS_ROW_SKIPPED",
    "ZERO_AMOUNT_SKIPPED",
    "AMOUNT_COERCED",
    "RowIssue",
]

SUMMARY_LINE_SKIPPED = "SUMMARY_LINE_SKIPPED"
EMPTY_ROW_SKIPPED = "EMPTY_ROW_SKIPPED"
NAMELESS_ROW_SKIPPED = "NAMELESS_ROW_SKIPPED"
ZERO_AMOUNT_SKIPPED = "ZERO_AMOUNT_SKIPPED"
AMOUNT_COERCED = "AMOUNT_COERCED"


@dataclass(frozen=True)
class RowIssue:
    """A row that was skipped, or a cell that was leniently coerced.

    Attributes:
        row_number: 1-based data row in the normalized table
        kind: Issue classification in UPPER_SNAKE_CASE format
        message: Human readable detail
    """
    row_number: int
    kind: str
    message: str
