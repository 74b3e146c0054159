#!/usr/bin/env python3
"""Generate synthetic trial-balance exports for manual and performance testing.

The generated files mimic common bookkeeping exports:
- A report title line above the header (and a ``sep=,`` line for CSV)
- Header: Name, Category, Source, Debit, Credit
- One line per account, followed by a column-totals line

The ledger balances unless ``--imbalance`` is given, in which case the first
debit is increased by that amount.
"""
from __future__ import annotations

import argparse
import sys
from pathlib import Path

import numpy as np
import pandas as pd

ACCOUNT_TEMPLATES: list[tuple[str, str, str]] = [
    # (name, category, normal side)
    ("Sales", "Sales", "credit"),
    ("Interest Received", "Other Income", "credit"),
    ("Purchases", "Cost of Sales", "debit"),
    ("Office Expenses", "Expenses", "debit"),
    ("Marketing", "Expenses", "debit"),
    ("Salaries & Wages", "Expenses", "debit"),
    ("Rent Paid", "Expenses", "debit"),
    ("Petty Cash", "Current Assets", "debit"),
    ("Trade Receivables", "Current Assets", "debit"),
    ("Motor Vehicles", "Fixed Assets", "debit"),
    ("Trade Payables", "Current Liabilities", "credit"),
    ("VAT Payable", "Current Liabilities", "credit"),
    ("Long Term Loan", "Non-Current Liabilities", "credit"),
    ("Share Capital", "Equity", "credit"),
]
HEADER = ["Name", "Category", "Source", "Debit", "Credit"]


def generate_trial_balance(accounts: int, seed: int = 42, imbalance: float = 0.0) -> pd.DataFrame:
    """Build a trial balance DataFrame with ``accounts`` lines plus a balancing line."""
    rng = np.random.default_rng(seed)
    rows: list[list[object]] = []
    for i in range(accounts):
        name, category, side = ACCOUNT_TEMPLATES[i % len(ACCOUNT_TEMPLATES)]
        if i >= len(ACCOUNT_TEMPLATES):
            name = f"{name} {i // len(ACCOUNT_TEMPLATES) + 1}"
        amount = round(float(rng.uniform(100, 250_000)), 2)
        debit, credit = (amount, None) if side == "debit" else (None, amount)
        rows.append([name, category, "Account Balance", debit, credit])

    df = pd.DataFrame(rows, columns=HEADER)
    difference = round(df["Debit"].sum() - df["Credit"].sum(), 2)
    balancing = [-difference, None] if difference < 0 else [None, difference]
    df.loc[len(df)] = ["Retained Earnings", "Equity", "System Account", *balancing]
    if imbalance:
        first = df["Debit"].first_valid_index()
        df.loc[first, "Debit"] = round(df.loc[first, "Debit"] + imbalance, 2)
    return df


def _export_lines(df: pd.DataFrame, title: str) -> list[list[object]]:
    totals = ["", "", "", round(df["Debit"].sum(), 2), round(df["Credit"].sum(), 2)]
    body = df.astype(object).where(df.notna(), "").values.tolist()
    return [[title, "", "", "", ""], HEADER, *body, totals]


def write_export(df: pd.DataFrame, output: Path, title: str) -> None:
    output.parent.mkdir(parents=True, exist_ok=True)
    lines = _export_lines(df, title)
    if output.suffix.lower() == ".xlsx":
        pd.DataFrame(lines).to_excel(output, header=False, index=False, engine="openpyxl")
        return
    with output.open("w", encoding="utf-8", newline="") as f:
        f.write("sep=,\n")
        pd.DataFrame(lines).to_csv(f, header=False, index=False)


def main() -> int:
    parser = argparse.ArgumentParser(description="Generate a synthetic trial-balance export (.csv or .xlsx)")
    parser.add_argument("output", type=Path, help="Output file (.csv or .xlsx)")
    parser.add_argument("--accounts", type=int, default=30, help="Number of account lines (default: 30)")
    parser.add_argument("--seed", type=int, default=42, help="Random seed (default: 42)")
    parser.add_argument("--imbalance", type=float, default=0.0, help="Amount added to the first debit")
    parser.add_argument("--title", default="Trial Balance Report", help="Title line above the header")
    args = parser.parse_args()

    if args.accounts <= 0:
        print("Error: --accounts must be positive", file=sys.stderr)
        return 1
    if args.output.suffix.lower() not in (".csv", ".xlsx"):
        print("Error: output must end in .csv or .xlsx", file=sys.stderr)
        return 1

    df = generate_trial_balance(args.accounts, args.seed, args.imbalance)
    write_export(df, args.output, args.title)
    print(f"Created {args.output}: {len(df)} accounts, imbalance={args.imbalance}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
