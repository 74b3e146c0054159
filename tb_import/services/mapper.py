from __future__ import annotations

import logging
import math
import re
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any

from ..ingest.errors import AmountCoercionError
from ..ingest.reader import cell_text, is_blank
from ..models.entry import TrialBalanceEntry
from ..models.row_issue import (
    AMOUNT_COERCED,
    EMPTY_ROW_SKIPPED,
    NAMELESS_ROW_SKIPPED,
    SUMMARY_LINE_SKIPPED,
    ZERO_AMOUNT_SKIPPED,
    RowIssue,
)
from .classifier import classify_account
from .line_items import map_line_item

"""Row-to-entry mapper.

Resolves the exporter's column names to canonical fields through an alias
table, coerces the amount cells, applies the row-skip policy and emits at
most one TrialBalanceEntry per row.

Both leniencies of the import are explicit policies:

- CoercionPolicy: what happens to an amount cell that is not a number
- RowSkipPolicy: which rows are treated as non-ledger lines
"""

__all__ = [
    "FIELD_ALIASES",
    "CoercionPolicy",
    "RowSkipPolicy",
    "RowFields",
    "RowMapper",
    "coerce_amount",
    "resolve_field",
]

logger = logging.getLogger(__name__)

# Canonical field -> accepted header labels; the first alias holding a value wins
FIELD_ALIASES: dict[str, tuple[str, ...]] = {
    "category": ("Category", "Account Type", "Type"),
    "source": ("Source",),
    "account_code": ("Account Code", "Account", "Code", "Account Number", "Account No", "Number"),
    "account_name": (
        "Account Name",
        "Account Description",
        "Description",
        "Name",
        "Account",
        "Ledger",
        "GL Account",
    ),
    "debit": ("Debit", "Debit Amount", "DR", "Debits"),
    "credit": ("Credit", "Credit Amount", "CR", "Credits"),
}

ZERO = Decimal("0")
# Thousands separators seen in exports: comma and (no-break) spaces
_THOUSANDS = re.compile(r"[,\s]")


class CoercionPolicy(Enum):
    """How unparsable amount cells are treated.

    - LENIENT: empty, missing or unparsable amounts become 0
    - STRICT: unparsable non-empty amounts raise AmountCoercionError

    Commas are always thousands separators, under either policy. A
    decimal-comma amount from a semicolon export such as "1 234,56" reads
    as 123456.
    """
    LENIENT = "lenient"
    STRICT = "strict"


@dataclass(frozen=True)
class RowSkipPolicy:
    """Rules for rows that must not become ledger entries.

    Rows without an account name are never emitted. On top of that:

    - skip_summary_lines: drop trailing "Net Profit..." summary lines that
      have no category, source or account code
    - skip_zero_amount_rows: drop named rows whose debit and credit are both 0
    """
    skip_summary_lines: bool = True
    summary_pattern: str = r"^net\s+profit"
    skip_zero_amount_rows: bool = True
    _summary_re: re.Pattern[str] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "_summary_re", re.compile(self.summary_pattern, re.IGNORECASE))

    def is_summary_line(self, fields: RowFields) -> bool:
        return (
            self.skip_summary_lines
            and self._summary_re.search(fields.account_name) is not None
            and not fields.category
            and not fields.source
            and not fields.account_code
        )

    def skip_reason(self, fields: RowFields) -> str | None:
        """Return the issue kind a row is skipped for, or None to keep it."""
        amounts_zero = fields.debit == ZERO and fields.credit == ZERO
        if self.is_summary_line(fields):
            return SUMMARY_LINE_SKIPPED
        if not fields.account_name:
            return EMPTY_ROW_SKIPPED if amounts_zero else NAMELESS_ROW_SKIPPED
        if amounts_zero and self.skip_zero_amount_rows:
            return ZERO_AMOUNT_SKIPPED
        return None


@dataclass(frozen=True)
class RowFields:
    """Canonical fields resolved from one table row."""
    category: str
    source: str
    account_code: str
    account_name: str
    debit: Decimal
    credit: Decimal


def resolve_field(row: Mapping[str, Any], aliases: Iterable[str]) -> Any:
    """Return the value under the first alias whose cell is present and non-blank."""
    for label in aliases:
        value = row.get(label)
        if not is_blank(value):
            return value
    return None


def coerce_amount(value: Any, policy: CoercionPolicy = CoercionPolicy.LENIENT) -> tuple[Decimal, bool]:
    """Parse an amount cell.

    Returns:
        tuple: (amount, coerced) where coerced is True when a non-empty cell
        could not be parsed and was replaced by 0

    Raises:
        AmountCoercionError: Only under CoercionPolicy.STRICT
    """
    if is_blank(value):
        return ZERO, False
    if isinstance(value, bool):
        amount = None
    elif isinstance(value, int):
        amount = Decimal(value)
    elif isinstance(value, float):
        amount = Decimal(str(value)) if math.isfinite(value) else None
    else:
        text = _THOUSANDS.sub("", str(value))
        try:
            amount = Decimal(text)
        except InvalidOperation:
            amount = None
        if amount is not None and not amount.is_finite():
            amount = None
    if amount is not None:
        return amount, False
    if policy is CoercionPolicy.STRICT:
        raise AmountCoercionError(f"amount {value!r} is not a number")
    return ZERO, True


class RowMapper:
    """Maps NormalizedTable rows to classified TrialBalanceEntry values."""

    def __init__(
        self,
        coercion: CoercionPolicy = CoercionPolicy.LENIENT,
        skip_policy: RowSkipPolicy | None = None,
    ) -> None:
        self.coercion = coercion
        self.skip_policy = skip_policy or RowSkipPolicy()

    def resolve(self, row: Mapping[str, Any], row_number: int, issues: list[RowIssue]) -> RowFields:
        amounts: dict[str, Decimal] = {}
        for name in ("debit", "credit"):
            raw = resolve_field(row, FIELD_ALIASES[name])
            try:
                amount, coerced = coerce_amount(raw, self.coercion)
            except AmountCoercionError as e:
                raise AmountCoercionError(f"row {row_number}: {name} {e}") from e
            if coerced:
                issues.append(
                    RowIssue(row_number, AMOUNT_COERCED, f"{name} value {raw!r} is not a number, treated as 0")
                )
            amounts[name] = amount
        return RowFields(
            category=cell_text(resolve_field(row, FIELD_ALIASES["category"])),
            source=cell_text(resolve_field(row, FIELD_ALIASES["source"])),
            account_code=cell_text(resolve_field(row, FIELD_ALIASES["account_code"])),
            account_name=cell_text(resolve_field(row, FIELD_ALIASES["account_name"])),
            debit=amounts["debit"],
            credit=amounts["credit"],
        )

    def map_row(self, row: Mapping[str, Any], row_number: int, issues: list[RowIssue]) -> TrialBalanceEntry | None:
        """Return the entry for one row, or None when the row is skipped.

        Skips and coercions are appended to ``issues``.
        """
        fields = self.resolve(row, row_number, issues)
        reason = self.skip_policy.skip_reason(fields)
        if reason is not None:
            label = fields.account_name or "<no account name>"
            issues.append(RowIssue(row_number, reason, f"row skipped: {label}"))
            return None

        account_type = classify_account(fields.category, fields.account_name)
        return TrialBalanceEntry(
            account_number=fields.account_code or fields.account_name,
            account_name=fields.account_name,
            account_type=account_type,
            line_item_bucket=map_line_item(account_type, fields.account_name),
            debit_amount=fields.debit,
            credit_amount=fields.credit,
            row_number=row_number,
        )

    def map_rows(self, rows: Iterable[Mapping[str, Any]]) -> tuple[list[TrialBalanceEntry], list[RowIssue]]:
        entries: list[TrialBalanceEntry] = []
        issues: list[RowIssue] = []
        for row_number, row in enumerate(rows, start=1):
            entry = self.map_row(row, row_number, issues)
            if entry is not None:
                entries.append(entry)
        logger.debug(f"mapped {len(entries)} entries, {len(issues)} issues")
        return entries, issues
