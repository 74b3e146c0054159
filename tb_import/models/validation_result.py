from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

"""ValidationResult model: the double-entry verdict for one pipeline run."""

__all__ = [
    "DEFAULT_TOLERANCE",
    "ValidationResult",
]

# Absorbs rounding noise from exporters, not genuine accounting error
DEFAULT_TOLERANCE = Decimal("0.01")


@dataclass(frozen=True)
class ValidationResult:
    """Totals of the retained entries and whether they balance.

    An unbalanced result is a normal, reportable outcome. Callers persist it
    alongside the entries and flag the upload for manual correction.
    """
    total_debits: Decimal
    total_credits: Decimal
    tolerance: Decimal = DEFAULT_TOLERANCE

    @property
    def discrepancy(self) -> Decimal:
        return self.total_debits - self.total_credits

    @property
    def balanced(self) -> bool:
        return abs(self.discrepancy) <= self.tolerance
