from __future__ import annotations

import json
import pathlib

import jsonschema
import pytest
from jsonschema.exceptions import ValidationError

from tb_import.logging.issue_log import FILE_LEVEL_ROW, IssueLogBuffer, IssueRecord
from tb_import.models.row_issue import SUMMARY_LINE_SKIPPED, RowIssue

"""Issue log JSON Lines schema contract test."""

SCHEMA_PATH = pathlib.Path(__file__).with_name("issue_log_schema.json")


@pytest.fixture(scope="module")
def schema() -> dict:
    return json.loads(SCHEMA_PATH.read_text(encoding="utf-8"))


def test_issue_log_schema_valid_example(schema: dict):
    record = {
        "timestamp": "2024-03-01T10:12:33.123456Z",
        "file": "Trial Balance.csv",
        "row": 31,
        "issue_type": "SUMMARY_LINE_SKIPPED",
        "message": "row skipped: Net Profit/Loss After Tax",
    }
    jsonschema.validate(record, schema)


def test_issue_log_schema_rejects_extra_key(schema: dict):
    record = {
        "timestamp": "2024-03-01T10:12:33Z",
        "file": "tb.csv",
        "row": 1,
        "issue_type": "AMOUNT_COERCED",
        "message": "debit value 'x' is not a number, treated as 0",
        "sheet": "Sheet1",
    }
    with pytest.raises(ValidationError):
        jsonschema.validate(record, schema)


def test_written_records_match_schema(schema: dict, temp_workdir: pathlib.Path):
    buf = IssueLogBuffer()
    buf.extend("tb.csv", [RowIssue(31, SUMMARY_LINE_SKIPPED, "row skipped: Net Profit")])
    buf.append(IssueRecord.create("notes.csv", FILE_LEVEL_ROW, "UNSUPPORTED_FORMAT", "no header"))
    path = buf.flush()

    for raw in path.read_text(encoding="utf-8").splitlines():
        jsonschema.validate(json.loads(raw), schema)
