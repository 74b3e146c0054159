from __future__ import annotations

from decimal import Decimal
from html import escape

import pytest

from tb_import.models.upload import RawUpload
from tb_import.services.pipeline import ingest

"""End-to-end ingestion of the same trial balance in every supported shape.

Bookkeeping packages hand out the same report as CSV (with or without a
``sep=`` directive), a real workbook, an HTML table saved as ``.xls`` or an
Excel 2003 XML document. All of them must yield identical entries.
"""

pytestmark = pytest.mark.integration


def _html_export(grid: list[list[object]]) -> str:
    rows = []
    for cells in grid:
        padded = list(cells) + [None] * (5 - len(cells))
        tds = "".join(f"<td>{'' if c is None else escape(str(c))}</td>" for c in padded)
        rows.append(f"<tr>{tds}</tr>")
    return "<html><body><table border=\"1\">" + "".join(rows) + "</table></body></html>"


def _xml_export(grid: list[list[object]]) -> str:
    rows = []
    for cells in grid:
        xml_cells = []
        for position, c in enumerate(cells, start=1):
            if c is None:
                continue
            kind = "Number" if isinstance(c, float) else "String"
            xml_cells.append(f'<Cell ss:Index="{position}"><Data ss:Type="{kind}">{escape(str(c))}</Data></Cell>')
        rows.append(f"<Row>{''.join(xml_cells)}</Row>")
    return (
        '<?xml version="1.0" encoding="UTF-8"?>\n'
        '<?mso-application progid="Excel.Sheet"?>\n'
        '<Workbook xmlns="urn:schemas-microsoft-com:office:spreadsheet" '
        'xmlns:ss="urn:schemas-microsoft-com:office:spreadsheet">'
        '<Worksheet ss:Name="Trial Balance"><Table>' + "".join(rows) + "</Table></Worksheet></Workbook>"
    )


def _snapshot(result) -> list[tuple]:
    return [
        (e.account_name, e.account_type, e.line_item_bucket, e.debit_amount, e.credit_amount)
        for e in result.entries
    ]


@pytest.fixture()
def csv_result(tb_csv_bytes: bytes):
    return ingest(RawUpload(tb_csv_bytes, "Trial Balance.csv"))


def test_workbook_matches_csv(csv_result, tb_xlsx_bytes: bytes):
    result = ingest(RawUpload(tb_xlsx_bytes, "Trial Balance.xlsx"))
    assert result.source_format == "workbook"
    assert _snapshot(result) == _snapshot(csv_result)
    assert result.validation == csv_result.validation


def test_html_saved_as_xls_matches_csv(csv_result, tb_grid):
    upload = RawUpload(_html_export(tb_grid).encode("utf-8"), "Trial Balance.xls")
    result = ingest(upload)
    assert result.source_format == "markup"
    assert _snapshot(result) == _snapshot(csv_result)
    assert result.balanced


def test_spreadsheet_xml_matches_csv(csv_result, tb_grid):
    upload = RawUpload(_xml_export(tb_grid).encode("utf-8"), "Trial Balance.xls")
    result = ingest(upload)
    assert result.source_format == "markup"
    assert _snapshot(result) == _snapshot(csv_result)


def test_csv_named_xls_matches_csv(csv_result, tb_csv_bytes: bytes):
    result = ingest(RawUpload(tb_csv_bytes, "Trial Balance.XLS"))
    assert result.source_format == "delimited"
    assert _snapshot(result) == _snapshot(csv_result)


@pytest.mark.parametrize("delimiter", [";", "\t"])
def test_other_delimiters_match_csv(csv_result, tb_csv_text: str, delimiter: str):
    lines = [line for line in tb_csv_text.splitlines() if not line.startswith("sep=")]
    text = "\n".join(line.replace('","', f'"{delimiter}"').replace(",", delimiter) for line in lines)
    result = ingest(RawUpload(text.encode("cp1252"), "tb.csv"))
    assert _snapshot(result) == _snapshot(csv_result)


def test_totals_are_exact_decimals(csv_result, tb_total: Decimal):
    assert csv_result.validation.total_debits == tb_total
    assert sum((e.balance for e in csv_result.entries), Decimal("0")) == Decimal("0")


CODED_GRID: list[list[object]] = [
    ["Trial Balance as at 31/03/2024", None, None, None, None],
    ["Account Code", "Account Name", "Category", "Debit", "Credit"],
    ["0100", "NULL", "Current Assets", 250.0, None],
    ["0200", "NA", "Current Liabilities", None, 100.0],
    ["N/A", "None", "Sales", None, 150.0],
]


def _coded_csv() -> bytes:
    lines = []
    for cells in CODED_GRID:
        lines.append(",".join("" if c is None else f"{c:.2f}" if isinstance(c, float) else str(c) for c in cells))
    lines.append("Printed by Sage, page 1, of 1, on, 2024-04-01, at, 09:15")
    return ("\n".join(lines) + "\n").encode("utf-8")


@pytest.mark.parametrize("shape", ["csv", "xlsx", "html", "xml"])
def test_codes_and_na_like_names_survive_every_shape(shape: str, xlsx_bytes_from):
    if shape == "csv":
        upload = RawUpload(_coded_csv(), "tb.csv")
    elif shape == "xlsx":
        upload = RawUpload(xlsx_bytes_from(CODED_GRID), "tb.xlsx")
    elif shape == "html":
        upload = RawUpload(_html_export(CODED_GRID).encode("utf-8"), "tb.xls")
    else:
        upload = RawUpload(_xml_export(CODED_GRID).encode("utf-8"), "tb.xls")

    result = ingest(upload)

    assert [(e.account_number, e.account_name) for e in result.entries] == [
        ("0100", "NULL"),
        ("0200", "NA"),
        ("N/A", "None"),
    ]
    assert result.validation.total_debits == Decimal("250")
    assert result.balanced
