# Shared pytest fixtures
from __future__ import annotations

import io
import tempfile
from decimal import Decimal
from pathlib import Path

import pandas as pd
import pytest

from tb_import.logging.init import reset_logging

# Sage-style export: sep directive, title line, header, 29 accounts, totals line, net profit line
TB_EXPORT_LINES = [
    'sep=,',
    '"Trial Balance Report"',
    '"Name","Category","Source","Debit","Credit"',
    '"Sales","Sales","System Account",,"892772.65"',
    '"Purchases","Cost of Sales","System Account","229464.56",',
    '"Accounting Fees","Expenses","Account Balance","10912.15",',
    '"Bank Charges","Expenses","Account Balance","4076.2",',
    '"Casual Labour","Expenses","Account Balance","1200",',
    '"Electricity & Water","Expenses","Account Balance","1434.78",',
    '"Entertainment","Expenses","Account Balance","3423.52",',
    '"General Expenses","Expenses","Account Balance","699.45",',
    '"Internet Expenses","Expenses","Account Balance","1616.76",',
    '"Mobile Phone Expenses","Expenses","Account Balance","7100.77",',
    '"Motor Vehicle Expenses","Expenses","Account Balance","7755.13",',
    '"Overtime","Expenses","Account Balance","609.38",',
    '"Refreshments","Expenses","Account Balance","15943",',
    '"Rental for Workshop","Expenses","Account Balance","212248.4",',
    '"Salaries & Wages","Expenses","Account Balance","108040.82",',
    '"Service Levies (Workshop)","Expenses","Account Balance","3940",',
    '"Small Tools","Expenses","Account Balance","8097.98",',
    '"Travel & Accommodation","Expenses","Account Balance","2128.87",',
    '"Petty Cash","Current Assets","Bank Account Balance",,"23540.25"',
    '"Steelcraft FNB","Current Assets","Bank Account Balance",,"72577.3"',
    '"Trade Receivables","Current Assets","System Account","387313.25",',
    '"Members Loan","Current Assets","Account Balance",,"54528.75"',
    '"Staff Loans","Current Assets","Account Balance","6210",',
    '"Trade Payables","Current Liabilities","System Account",,"27003.07"',
    '"VAT Payable","Current Liabilities","System Account",,"3444.32"',
    '"PAYE Payable","Current Liabilities","Account Balance","3095.04",',
    '"SDL Payable","Current Liabilities","Account Balance",,"954.64"',
    '"UIF Payable","Current Liabilities","Account Balance","818.92",',
    '"Weekly wages","Current Liabilities","Account Balance","58692",',
    ',,,"1074820.98","1074820.98"',
    '"Net Profit/Loss After Tax",,,,"274080.88"',
]

TB_TOTAL = "1074820.98"

UNBALANCED_CSV = "\n".join([
    "Account Code,Account Name,Debit,Credit",
    "1000,Bank,1500.00,",
    "4000,Sales,,1200.00",
    "5000,Office Expenses,200.50,",
])


@pytest.fixture()
def temp_workdir(monkeypatch) -> Path:
    with tempfile.TemporaryDirectory() as d:
        p = Path(d)
        (p / "config").mkdir()
        (p / "data").mkdir()
        monkeypatch.chdir(p)
        monkeypatch.delenv("TB_IMPORT_CONFIG", raising=False)
        yield p


@pytest.fixture()
def tb_csv_text() -> str:
    return "\n".join(TB_EXPORT_LINES)


@pytest.fixture()
def tb_csv_bytes(tb_csv_text: str) -> bytes:
    return tb_csv_text.encode("utf-8")


@pytest.fixture()
def tb_grid() -> list[list[object]]:
    """The same export as rows of cells (title, header, accounts, totals, net profit)."""
    import csv

    lines = [line for line in TB_EXPORT_LINES if not line.startswith("sep=")]
    grid: list[list[object]] = []
    for cells in csv.reader(lines):
        row: list[object] = []
        for cell in cells:
            try:
                row.append(float(cell))
            except ValueError:
                row.append(cell if cell else None)
        grid.append(row)
    return grid


@pytest.fixture()
def xlsx_bytes_from():
    """Build an xlsx file from a grid of cells, one sheet, no header row added."""
    def _build(grid: list[list[object]]) -> bytes:
        buf = io.BytesIO()
        with pd.ExcelWriter(buf, engine="openpyxl") as writer:
            pd.DataFrame(grid).to_excel(writer, sheet_name="Trial Balance", header=False, index=False)
        return buf.getvalue()
    return _build


@pytest.fixture()
def tb_xlsx_bytes(tb_grid: list[list[object]], xlsx_bytes_from) -> bytes:
    return xlsx_bytes_from(tb_grid)


@pytest.fixture()
def sample_config_yaml() -> str:
    return """tolerance: 0.05
sample_size: 4096
coercion: lenient
skip_summary_lines: true
skip_zero_amount_rows: true
issue_log_dir: ./logs
"""


@pytest.fixture()
def write_config(temp_workdir: Path, sample_config_yaml: str) -> Path:
    cfg = temp_workdir / "config" / "ingest.yml"
    cfg.write_text(sample_config_yaml, encoding="utf-8")
    return cfg


@pytest.fixture(autouse=True)
def _clean_logging():
    reset_logging()
    yield
    reset_logging()


@pytest.fixture()
def tb_total() -> Decimal:
    return Decimal(TB_TOTAL)


@pytest.fixture()
def unbalanced_csv_bytes() -> bytes:
    return UNBALANCED_CSV.encode("utf-8")
