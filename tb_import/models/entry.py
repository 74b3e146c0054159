from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Any

"""TrialBalanceEntry domain model and AccountType enum.

TrialBalanceEntry is the canonical output unit of the ingestion pipeline.
Entries are immutable once emitted; correcting one means re-running the
pipeline on a corrected export.
"""

__all__ = [
    "AccountType",
    "TrialBalanceEntry",
]


class AccountType(Enum):
    """Accounting category assigned to every retained entry.

    - ASSET / LIABILITY / EQUITY: Statement of Financial Position sections
    - REVENUE / EXPENSE: Statement of Comprehensive Income sections
    """
    ASSET = "ASSET"
    LIABILITY = "LIABILITY"
    EQUITY = "EQUITY"
    REVENUE = "REVENUE"
    EXPENSE = "EXPENSE"


@dataclass(frozen=True)
class TrialBalanceEntry:
    """One classified ledger line of a trial balance.

    ``balance`` is a derived property and can never be passed in or set, so
    it always equals ``debit_amount - credit_amount``.
    """
    account_number: str  # Account code, or the account name when no code column exists
    account_name: str  # Never empty for a retained entry
    account_type: AccountType
    line_item_bucket: str  # Statement presentation bucket (current_assets, revenue, ...)
    debit_amount: Decimal = Decimal("0")
    credit_amount: Decimal = Decimal("0")
    row_number: int = 0  # 1-based data row in the source table (0 = unknown)

    @property
    def balance(self) -> Decimal:
        return self.debit_amount - self.credit_amount

    def to_record(self) -> dict[str, Any]:
        """Flatten to a plain dict for the persistence layer.

        Amounts stay ``Decimal`` so no precision is lost on the way to storage.
        """
        return {
            "account_number": self.account_number,
            "account_name": self.account_name,
            "debit_amount": self.debit_amount,
            "credit_amount": self.credit_amount,
            "balance": self.balance,
            "account_type": self.account_type.value,
            "line_item_bucket": self.line_item_bucket,
        }
