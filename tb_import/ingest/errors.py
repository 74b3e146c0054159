from __future__ import annotations

"""Exception hierarchy for the ingestion pipeline."""

__all__ = [
    "IngestError",
    "UnsupportedFormatError",
    "AmountCoercionError",
]


class IngestError(Exception):
    """Base exception for failures while turning an upload into entries."""


class UnsupportedFormatError(IngestError):
    """Raised when no parseable trial-balance table can be found in an upload.

    Fatal for the invocation: no partial entries are returned.
    """


class AmountCoercionError(IngestError):
    """Raised for an unparsable amount cell under the strict coercion policy."""
