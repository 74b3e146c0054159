from __future__ import annotations

import io
import logging
import re
from dataclasses import dataclass, field
from typing import ClassVar

import pandas as pd

from ..models.upload import RawUpload
from .errors import UnsupportedFormatError

"""Format sniffing and text normalization for trial-balance exports.

Exports arrive as one of three shapes, modeled as a tagged variant:

- DelimitedText: CSV / semicolon / tab exports, already stripped of the
  exporter's title lines and ``sep=`` directive
- MarkupTable: HTML ``<table>`` or SpreadsheetML XML saved under an Excel name
- Workbook: a real xlsx/xls file, opened natively

Binary workbooks are tried first when the filename says xlsx/xls; if the
native read fails the bytes are inspected as text, because several
bookkeeping packages save CSV or HTML under an ``.xls`` name.
"""

__all__ = [
    "DEFAULT_SAMPLE_SIZE",
    "DelimitedText",
    "MarkupTable",
    "Workbook",
    "SniffedInput",
    "decode_text",
    "normalize_text",
    "classify_text",
    "sniff",
]

logger = logging.getLogger(__name__)

DEFAULT_SAMPLE_SIZE = 8000
DELIMITERS = (",", ";", "\t")

UTF8_BOM = b"\xef\xbb\xbf"
UTF16_BOMS = (b"\xff\xfe", b"\xfe\xff")

# Excel writes "sep=," (or ; / TAB) as the first line of some CSV exports
_SEP_LINE = re.compile(r"^\s*sep\s*=(?P<value>.+)$", re.IGNORECASE)
_SEP_IN_SAMPLE = re.compile(r"(^|\r?\n)\s*sep\s*=\s*[,;\t]", re.IGNORECASE)
_LINE_BREAK = re.compile(r"\r?\n")
_HTML_TABLE = re.compile(r"<\s*table[\s>]", re.IGNORECASE)
_XML_WORKBOOK = re.compile(r"<\?xml|<\s*(?:ss:)?workbook[\s>]|<\s*(?:ss:)?worksheet[\s>]", re.IGNORECASE)
_SPREADSHEET_ML = re.compile(r"<\s*(?:ss:)?workbook[\s>]", re.IGNORECASE)


@dataclass(frozen=True)
class DelimitedText:
    text: str  # Normalized: header line first, no sep= directive
    delimiter: str
    tag: ClassVar[str] = "delimited"


@dataclass(frozen=True)
class MarkupTable:
    text: str
    tag: ClassVar[str] = "markup"

    @property
    def is_html(self) -> bool:
        # SpreadsheetML has <Table> elements too
        return _SPREADSHEET_ML.search(self.text) is None


@dataclass(frozen=True, eq=False)
class Workbook:
    frame: pd.DataFrame = field(repr=False)  # First sheet, read without a header row
    tag: ClassVar[str] = "workbook"


SniffedInput = DelimitedText | MarkupTable | Workbook


def decode_text(content: bytes) -> str:
    """Decode export bytes, dropping any byte-order mark.

    UTF-16 is only assumed when a UTF-16 BOM is present. Legacy exports that
    are not valid UTF-8 are read as cp1252.
    """
    if content.startswith(UTF8_BOM):
        content = content[len(UTF8_BOM):]
    elif content[:2] in UTF16_BOMS:
        return content.decode("utf-16")
    try:
        text = content.decode("utf-8")
    except UnicodeDecodeError:
        text = content.decode("cp1252", errors="replace")
    return text[1:] if text.startswith("\ufeff") else text


def _has_delimiter(line: str) -> bool:
    return any(d in line for d in DELIMITERS)


def _is_header_line(line: str) -> bool:
    lowered = line.lower()
    return "debit" in lowered and "credit" in lowered and _has_delimiter(line)


def normalize_text(text: str) -> str:
    """Drop ``sep=`` directives and everything above the debit/credit header.

    The header is the first line mentioning both "debit" and "credit" next to
    a delimiter. Applying this twice gives the same text as applying it once.

    Raises:
        UnsupportedFormatError: If no such header line exists
    """
    if text.startswith("\ufeff"):
        text = text[1:]
    lines = [line for line in _LINE_BREAK.split(text) if not _SEP_LINE.match(line)]
    for index, line in enumerate(lines):
        if _is_header_line(line):
            return "\n".join(lines[index:])
    raise UnsupportedFormatError("no header row with debit and credit columns found")


def _directive_delimiter(text: str) -> str | None:
    for line in _LINE_BREAK.split(text):
        match = _SEP_LINE.match(line)
        if match:
            value = match.group("value").strip(" \r")
            if value[:1] in DELIMITERS:
                return value[:1]
    return None


def _header_delimiter(header_line: str) -> str:
    # max() keeps the first of equal counts, so ties favor "," then ";"
    return max(DELIMITERS, key=header_line.count)


def _looks_delimited(sample: str) -> bool:
    if _SEP_IN_SAMPLE.search(sample):
        return True
    lowered = sample.lower()
    return "debit" in lowered and "credit" in lowered and _has_delimiter(sample)


def _looks_markup(sample: str) -> bool:
    return _HTML_TABLE.search(sample) is not None or _XML_WORKBOOK.search(sample) is not None


def classify_text(text: str, sample_size: int = DEFAULT_SAMPLE_SIZE) -> MarkupTable | DelimitedText:
    """Classify decoded text by inspecting its leading sample.

    Raises:
        UnsupportedFormatError: If the text is neither markup nor a
            delimited export with a debit/credit header
    """
    sample = text[:sample_size]
    if _looks_markup(sample):
        return MarkupTable(text=text)
    if _looks_delimited(sample):
        normalized = normalize_text(text)
        delimiter = _directive_delimiter(text) or _header_delimiter(normalized.split("\n", 1)[0])
        return DelimitedText(text=normalized, delimiter=delimiter)
    raise UnsupportedFormatError("input is not a delimited, markup or workbook trial balance")


def _read_workbook(content: bytes) -> pd.DataFrame:
    # engine=None lets pandas pick openpyxl (zip) or xlrd (OLE2) from the content
    return pd.read_excel(
        io.BytesIO(content), sheet_name=0, header=None, keep_default_na=False, na_values=[""]
    )


def sniff(upload: RawUpload, sample_size: int = DEFAULT_SAMPLE_SIZE) -> SniffedInput:
    """Decide how an upload should be parsed.

    Raises:
        UnsupportedFormatError: If the upload cannot be read by any path
    """
    if upload.is_workbook_hint:
        try:
            frame = _read_workbook(upload.content)
        except Exception as e:  # any reader failure means "not a real workbook"
            logger.debug(f"workbook read failed for {upload.filename!r}, inspecting as text: {e}")
        else:
            return Workbook(frame=frame)
    return classify_text(decode_text(upload.content), sample_size)
