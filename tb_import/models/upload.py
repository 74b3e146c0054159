from __future__ import annotations

from dataclasses import dataclass
from pathlib import PurePath

"""RawUpload model for the trial-balance import tool.

A RawUpload is the unit handed to the ingestion pipeline: the untouched bytes
of one exported file plus the filename it was submitted under. The filename
only serves as an extension hint; the content is sniffed regardless.
"""

__all__ = [
    "RawUpload",
]

KNOWN_EXTENSIONS = frozenset({"csv", "xlsx", "xls"})


@dataclass(frozen=True)
class RawUpload:
    """Immutable bytes of a submitted bookkeeping export."""
    content: bytes
    filename: str | None = None  # Declared name, e.g. "TB 2024.xls"

    @property
    def extension(self) -> str | None:
        """Lower-cased extension hint (csv/xlsx/xls) or None when unknown."""
        if not self.filename:
            return None
        suffix = PurePath(self.filename).suffix.lower().lstrip(".")
        return suffix if suffix in KNOWN_EXTENSIONS else None

    @property
    def is_workbook_hint(self) -> bool:
        return self.extension in ("xlsx", "xls")
