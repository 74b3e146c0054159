from __future__ import annotations

import re
from datetime import datetime, timezone

import pytest

from tb_import.models.processing_result import BatchResult
from tb_import.services.summary import render_summary_line

"""Unit tests for the SUMMARY line rendering."""

SUMMARY_PATTERN = re.compile(
    r"^SUMMARY\s+files=([0-9]+)\s+balanced=([0-9]+)\s+unbalanced=([0-9]+)\s+failed=([0-9]+)\s+"
    r"entries=([0-9]+)\s+elapsed_sec=([0-9]+\.?[0-9]*)$"
)


def _result(balanced: int, unbalanced: int, failed: int, entries: int, elapsed: float) -> BatchResult:
    start = datetime(2024, 3, 1, 10, 0, 0, tzinfo=timezone.utc)
    return BatchResult(
        balanced_files=balanced,
        unbalanced_files=unbalanced,
        failed_files=failed,
        total_entries=entries,
        start_time=start,
        end_time=start,
        elapsed_seconds=elapsed,
    )


def test_render_summary_line_all_balanced():
    line = render_summary_line(_result(2, 0, 0, 58, 2.0))
    match = SUMMARY_PATTERN.match(line)
    assert match, line
    assert match.groups() == ("2", "2", "0", "0", "58", "2")


def test_render_summary_line_mixed_outcomes():
    line = render_summary_line(_result(1, 1, 1, 32, 1.25))
    assert line == "SUMMARY files=3 balanced=1 unbalanced=1 failed=1 entries=32 elapsed_sec=1.25"


@pytest.mark.parametrize(
    ("elapsed", "rendered"),
    [
        (0.0, "0"),
        (3.0, "3"),
        (0.1234, "0.123"),
        (0.0042, "0.0042"),
    ],
)
def test_render_summary_line_elapsed_formatting(elapsed: float, rendered: str):
    line = render_summary_line(_result(0, 0, 0, 0, elapsed))
    assert line.endswith(f"elapsed_sec={rendered}")
    assert SUMMARY_PATTERN.match(line)
