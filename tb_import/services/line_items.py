from __future__ import annotations

import re
from collections.abc import Iterable
from dataclasses import dataclass
from decimal import Decimal

from ..models.entry import AccountType, TrialBalanceEntry

"""Statement line-item mapping.

Each classified entry is assigned a presentation bucket (current_assets,
cost_of_sales, ...) that the statement assembler uses to populate the
Statement of Financial Position and Statement of Comprehensive Income.
"""

__all__ = [
    "LINE_ITEM_RULES",
    "LINE_ITEM_FALLBACKS",
    "BucketTotal",
    "map_line_item",
    "group_by_bucket",
]

LINE_ITEM_RULES: dict[AccountType, tuple[tuple[re.Pattern[str], str], ...]] = {
    AccountType.ASSET: (
        (re.compile(r"current|bank|cash|receivable"), "current_assets"),
        (re.compile(r"fixed|property|equipment|vehicle"), "non_current_assets"),
    ),
    AccountType.LIABILITY: (
        (re.compile(r"current|payable|accrual"), "current_liabilities"),
    ),
    AccountType.EQUITY: (
        (re.compile(r"capital|share"), "share_capital"),
        (re.compile(r"retained|earning"), "retained_earnings"),
    ),
    AccountType.REVENUE: (
        (re.compile(r"sales|income|revenue"), "revenue"),
    ),
    AccountType.EXPENSE: (
        (re.compile(r"cost|cogs"), "cost_of_sales"),
        (re.compile(r"admin|office"), "administrative_expenses"),
        (re.compile(r"sales|marketing"), "selling_expenses"),
    ),
}

LINE_ITEM_FALLBACKS: dict[AccountType, str] = {
    AccountType.ASSET: "other_assets",
    AccountType.LIABILITY: "non_current_liabilities",
    AccountType.EQUITY: "other_equity",
    AccountType.REVENUE: "other_income",
    AccountType.EXPENSE: "operating_expenses",
}


def map_line_item(account_type: AccountType, account_name: str) -> str:
    """Return the statement bucket for an account, first matching rule wins."""
    name = (account_name or "").lower()
    for pattern, bucket in LINE_ITEM_RULES[account_type]:
        if pattern.search(name):
            return bucket
    return LINE_ITEM_FALLBACKS[account_type]


@dataclass
class BucketTotal:
    """Running totals of the entries that fall into one statement bucket."""
    account_type: AccountType
    bucket: str
    debit: Decimal = Decimal("0")
    credit: Decimal = Decimal("0")
    entry_count: int = 0

    @property
    def balance(self) -> Decimal:
        return self.debit - self.credit

    def add(self, entry: TrialBalanceEntry) -> None:
        self.debit += entry.debit_amount
        self.credit += entry.credit_amount
        self.entry_count += 1


def group_by_bucket(entries: Iterable[TrialBalanceEntry]) -> dict[tuple[AccountType, str], BucketTotal]:
    """Group entries by (account_type, line_item_bucket) in first-seen order."""
    groups: dict[tuple[AccountType, str], BucketTotal] = {}
    for entry in entries:
        key = (entry.account_type, entry.line_item_bucket)
        if key not in groups:
            groups[key] = BucketTotal(account_type=entry.account_type, bucket=entry.line_item_bucket)
        groups[key].add(entry)
    return groups
