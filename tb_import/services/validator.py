from __future__ import annotations

from collections.abc import Iterable
from decimal import Decimal

from ..models.entry import TrialBalanceEntry
from ..models.validation_result import DEFAULT_TOLERANCE, ValidationResult

"""Balance aggregation and double-entry validation."""

__all__ = [
    "validate_entries",
]


def validate_entries(
    entries: Iterable[TrialBalanceEntry], tolerance: Decimal = DEFAULT_TOLERANCE
) -> ValidationResult:
    """Sum debits and credits of the retained entries.

    An imbalance is reported through ``ValidationResult.balanced``; it is never
    raised and the entries are never adjusted to force a balance.
    """
    total_debits = Decimal("0")
    total_credits = Decimal("0")
    for entry in entries:
        total_debits += entry.debit_amount
        total_credits += entry.credit_amount
    return ValidationResult(total_debits=total_debits, total_credits=total_credits, tolerance=tolerance)
