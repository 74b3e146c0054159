from __future__ import annotations

from ..models.processing_result import BatchResult

"""SUMMARY line rendering for the trial-balance import tool."""


def _format_seconds(seconds: float) -> str:
    if seconds == 0:
        return "0"
    if seconds == int(seconds):
        return str(int(seconds))
    if seconds < 0.01:
        # Avoid scientific notation for very small numbers
        return f"{seconds:.6f}".rstrip("0").rstrip(".")
    return f"{seconds:.3f}".rstrip("0").rstrip(".")


def render_summary_line(result: BatchResult) -> str:
    """Render the SUMMARY line for a batch.

    Format:
    SUMMARY files={total} balanced={b} unbalanced={u} failed={f} entries={e} elapsed_sec={s}

    Examples:
        >>> from datetime import datetime, timezone
        >>> start = datetime(2024, 3, 1, 10, 0, 0, tzinfo=timezone.utc)
        >>> end = datetime(2024, 3, 1, 10, 0, 2, tzinfo=timezone.utc)
        >>> result = BatchResult(
        ...     balanced_files=1, unbalanced_files=1, failed_files=0, total_entries=58,
        ...     start_time=start, end_time=end, elapsed_seconds=2.0,
        ... )
        >>> render_summary_line(result)
        'SUMMARY files=2 balanced=1 unbalanced=1 failed=0 entries=58 elapsed_sec=2'
    """
    return (
        f"SUMMARY files={result.total_files} "
        f"balanced={result.balanced_files} "
        f"unbalanced={result.unbalanced_files} "
        f"failed={result.failed_files} "
        f"entries={result.total_entries} "
        f"elapsed_sec={_format_seconds(result.elapsed_seconds)}"
    )
