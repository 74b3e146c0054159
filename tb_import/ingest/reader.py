from __future__ import annotations

import io
import logging
import math
import re
from dataclasses import dataclass
from typing import Any

import numpy as np
import pandas as pd
from lxml import etree

from .errors import UnsupportedFormatError
from .sniffer import DelimitedText, MarkupTable, SniffedInput, Workbook

"""Tabular parser: turns a sniffed input into a NormalizedTable.

Each row is an ordered mapping of header label -> raw cell value. No type
coercion happens here; cells stay as str, int or float for the mapper.
Fully blank rows are omitted.

Grid sources (workbooks, HTML and SpreadsheetML tables) carry the exporter's
title block above the real header, so the header row is located the same way
as for text: the first row with a "debit" cell and a "credit" cell, falling
back to the first non-blank row.
"""

__all__ = [
    "NormalizedTable",
    "cell_text",
    "read_table",
]

logger = logging.getLogger(__name__)

_XML_DECLARATION = re.compile(r"^\s*<\?xml[^>]*\?>")


@dataclass
class NormalizedTable:
    columns: list[str]
    rows: list[dict[str, Any]]  # label -> raw value, blank cells as None
    source_format: str


def is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, float) and math.isnan(value):
        return True
    return isinstance(value, str) and value.strip() == ""


def cell_text(value: Any) -> str:
    """Render a raw cell as stripped text ("" for blanks, 1000.0 -> "1000")."""
    if is_blank(value):
        return ""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value).strip()


def _python_value(value: Any) -> Any:
    # numpy scalars -> builtins so downstream code only sees str/int/float
    if isinstance(value, np.generic):
        value = value.item()
    return None if is_blank(value) else value


def _unique_labels(raw_labels: list[Any]) -> list[str]:
    labels: list[str] = []
    seen: dict[str, int] = {}
    for raw in raw_labels:
        label = cell_text(_python_value(raw))
        if label in seen:
            seen[label] += 1
            label = f"{label}.{seen[label]}"
        else:
            seen[label] = 0
        labels.append(label)
    return labels


def _locate_header_row(grid: list[list[Any]]) -> int:
    first_non_blank: int | None = None
    for index, cells in enumerate(grid):
        texts = [cell_text(c).lower() for c in cells]
        if first_non_blank is None and any(texts):
            first_non_blank = index
        if any("debit" in t for t in texts) and any("credit" in t for t in texts):
            return index
    if first_non_blank is None:
        raise UnsupportedFormatError("table contains no rows")
    return first_non_blank


def _has_debit_credit_row(grid: list[list[Any]]) -> bool:
    for cells in grid:
        texts = [cell_text(c).lower() for c in cells]
        if any("debit" in t for t in texts) and any("credit" in t for t in texts):
            return True
    return False


def _grid_to_table(grid: list[list[Any]], source_format: str) -> NormalizedTable:
    header_index = _locate_header_row(grid)
    columns = _unique_labels(grid[header_index])
    rows: list[dict[str, Any]] = []
    for cells in grid[header_index + 1:]:
        values = [_python_value(c) for c in cells]
        if all(v is None for v in values):
            continue
        values.extend([None] * (len(columns) - len(values)))
        row: dict[str, Any] = {}
        for label, value in zip(columns, values, strict=False):
            if label:  # unlabeled columns cannot be mapped
                row[label] = value
        rows.append(row)
    return NormalizedTable(columns=[c for c in columns if c], rows=rows, source_format=source_format)


def _frame_to_grid(frame: pd.DataFrame) -> list[list[Any]]:
    grid = [list(r) for r in frame.itertuples(index=False, name=None)]
    if not all(isinstance(c, (int, np.integer)) for c in frame.columns):
        # read_html promotes <thead> rows to column labels; put them back in the grid
        grid.insert(0, list(frame.columns.get_level_values(-1)))
    return grid


def _read_delimited(source: DelimitedText) -> NormalizedTable:
    options: dict[str, Any] = {
        "sep": source.delimiter,
        "dtype": str,
        "keep_default_na": False,
        "skip_blank_lines": True,
        "index_col": False,
        "quotechar": '"',
    }
    try:
        width = len(pd.read_csv(io.StringIO(source.text), nrows=0, **options).columns)
        # exporter footers ("Printed by Sage, page 1, of 1, ...") run past the header
        frame = pd.read_csv(
            io.StringIO(source.text),
            engine="python",
            on_bad_lines=lambda fields: fields[:width],
            **options,
        )
    except (pd.errors.ParserError, pd.errors.EmptyDataError) as e:
        raise UnsupportedFormatError(f"delimited text could not be parsed: {e}") from e
    columns = [str(c).strip() for c in frame.columns]
    rows: list[dict[str, Any]] = []
    for record in frame.itertuples(index=False, name=None):
        values = [_python_value(v) for v in record]
        if all(v is None for v in values):
            continue
        rows.append(dict(zip(columns, values, strict=False)))
    return NormalizedTable(columns=columns, rows=rows, source_format=source.tag)


def _read_html(text: str) -> list[list[Any]]:
    try:
        # only empty cells are missing; "NA" or "NULL" are account text
        frames = pd.read_html(io.StringIO(text), header=None, keep_default_na=False, na_values=[""])
    except (ValueError, pd.errors.ParserError) as e:  # "No tables found", ragged rows
        raise UnsupportedFormatError(f"markup table could not be parsed: {e}") from e
    grids = [_frame_to_grid(f) for f in frames]
    for grid in grids:
        if _has_debit_credit_row(grid):
            return grid
    return grids[0]


def _local_attr(element: Any, name: str) -> str | None:
    for key, value in element.attrib.items():
        if etree.QName(key).localname == name:
            return value
    return None


def _read_spreadsheet_xml(text: str) -> list[list[Any]]:
    """Read the first worksheet of an Excel 2003 SpreadsheetML document."""
    try:
        root = etree.fromstring(_XML_DECLARATION.sub("", text, count=1))
    except etree.XMLSyntaxError as e:
        raise UnsupportedFormatError(f"markup table could not be parsed: {e}") from e
    worksheet = next(root.iter("{*}Worksheet"), None)
    if worksheet is None:
        raise UnsupportedFormatError("XML document has no worksheet")

    grid: list[list[Any]] = []
    for row in worksheet.iter("{*}Row"):
        cells: list[Any] = []
        for cell in row.iterchildren("{*}Cell"):
            index = _local_attr(cell, "Index")  # 1-based, skips empty cells
            if index is not None and index.isdigit():
                cells.extend([None] * (int(index) - 1 - len(cells)))
            data = next(cell.iterchildren("{*}Data"), None)
            value: Any = None
            if data is not None and data.text is not None:
                value = data.text
                if _local_attr(data, "Type") == "Number":
                    try:
                        value = float(data.text)
                    except ValueError:
                        pass
            cells.append(value)
        grid.append(cells)
    return grid


def _read_markup(source: MarkupTable) -> NormalizedTable:
    grid = _read_html(source.text) if source.is_html else _read_spreadsheet_xml(source.text)
    return _grid_to_table(grid, source.tag)


def _read_workbook(source: Workbook) -> NormalizedTable:
    return _grid_to_table(_frame_to_grid(source.frame), source.tag)


def read_table(source: SniffedInput) -> NormalizedTable:
    """Parse a sniffed input into a NormalizedTable.

    Raises:
        UnsupportedFormatError: If the table cannot be parsed
    """
    if isinstance(source, DelimitedText):
        table = _read_delimited(source)
    elif isinstance(source, MarkupTable):
        table = _read_markup(source)
    elif isinstance(source, Workbook):
        table = _read_workbook(source)
    else:
        raise TypeError(f"unknown input variant: {type(source).__name__}")
    logger.debug(f"parsed {len(table.rows)} rows from {table.source_format} input columns={table.columns}")
    return table
