from __future__ import annotations

import re

from ..models.entry import AccountType

"""Account-type classifier.

Exports from the common small-business bookkeeping packages rarely carry a
machine-readable account type, so the type is recovered from lexical cues in
the category column and the account name. Rules are evaluated in order and
the first match wins; anything unmatched is an expense.
"""

__all__ = [
    "ACCOUNT_TYPE_RULES",
    "DEFAULT_ACCOUNT_TYPE",
    "classify_account",
]

ACCOUNT_TYPE_RULES: tuple[tuple[re.Pattern[str], AccountType], ...] = (
    (re.compile(r"asset|receivable|inventory|bank|cash|prepay|debtor"), AccountType.ASSET),
    (re.compile(r"liabil|payable|creditor|vat|paye|uif|sdl|loan"), AccountType.LIABILITY),
    (re.compile(r"equity|capital|retained|share"), AccountType.EQUITY),
    (re.compile(r"sales|revenue|income"), AccountType.REVENUE),
)
DEFAULT_ACCOUNT_TYPE = AccountType.EXPENSE


def classify_account(category_hint: str | None, account_name: str | None) -> AccountType:
    """Return the account type for a category hint and account name.

    Examples:
        >>> classify_account("", "Trade Receivables")
        <AccountType.ASSET: 'ASSET'>
        >>> classify_account("Expenses", "Accounting Fees")
        <AccountType.EXPENSE: 'EXPENSE'>
    """
    text = f"{category_hint or ''} {account_name or ''}".strip().lower()
    if not text:
        return DEFAULT_ACCOUNT_TYPE
    for pattern, account_type in ACCOUNT_TYPE_RULES:
        if pattern.search(text):
            return account_type
    return DEFAULT_ACCOUNT_TYPE
