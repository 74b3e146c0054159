from __future__ import annotations

from datetime import UTC, datetime
from decimal import Decimal

import pytest

from tb_import.models.processing_result import BatchResult, FileStat, FileStatus

"""Unit tests for the batch result models."""


class TestFileStat:
    """Test FileStat dataclass."""

    def test_file_stat_creation(self):
        stat = FileStat(
            file_name="tb.csv",
            status=FileStatus.BALANCED,
            entry_count=29,
            elapsed_seconds=0.5,
        )

        assert stat.file_name == "tb.csv"
        assert stat.status is FileStatus.BALANCED
        assert stat.entry_count == 29
        assert stat.source_format is None
        assert stat.total_debits == Decimal("0")
        assert stat.skipped_rows == 0
        assert stat.error is None

    def test_file_stat_immutable(self):
        stat = FileStat("tb.csv", FileStatus.FAILED, 0, 0.1)

        with pytest.raises(AttributeError):
            stat.file_name = "other.csv"

    def test_file_stat_discrepancy(self):
        stat = FileStat(
            "tb.csv",
            FileStatus.UNBALANCED,
            3,
            0.1,
            total_debits=Decimal("1700.50"),
            total_credits=Decimal("1200.00"),
        )
        assert stat.discrepancy == Decimal("500.50")


class TestBatchResult:
    """Test BatchResult dataclass."""

    def test_total_files(self):
        now = datetime.now(UTC)
        result = BatchResult(
            balanced_files=2,
            unbalanced_files=1,
            failed_files=1,
            total_entries=60,
            start_time=now,
            end_time=now,
            elapsed_seconds=0.0,
        )
        assert result.total_files == 4
        assert result.file_stats is None

    def test_status_values(self):
        assert [s.value for s in FileStatus] == ["balanced", "unbalanced", "failed"]
