from __future__ import annotations

from dataclasses import dataclass, field

from .entry import TrialBalanceEntry
from .row_issue import RowIssue
from .validation_result import ValidationResult

"""IngestResult model: everything one pipeline invocation produces."""

__all__ = [
    "IngestResult",
]


@dataclass(frozen=True)
class IngestResult:
    entries: list[TrialBalanceEntry]
    validation: ValidationResult
    source_format: str  # delimited / markup / workbook
    issues: list[RowIssue] = field(default_factory=list)

    @property
    def balanced(self) -> bool:
        return self.validation.balanced
