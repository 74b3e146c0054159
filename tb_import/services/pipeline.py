from __future__ import annotations

import logging

from ..config.loader import IngestSettings
from ..ingest.reader import read_table
from ..ingest.sniffer import sniff
from ..models.ingest_result import IngestResult
from ..models.upload import RawUpload
from .mapper import RowMapper
from .validator import validate_entries

"""Trial-balance ingestion pipeline.

bytes -> sniff/normalize -> parse -> map/classify -> validate -> IngestResult

The pipeline is a pure function of the upload and the settings: it touches no
files, holds no state between calls and can run in parallel workers.
"""

__all__ = [
    "ingest",
]

logger = logging.getLogger(__name__)


def ingest(upload: RawUpload, settings: IngestSettings | None = None) -> IngestResult:
    """Turn one bookkeeping export into classified entries and a balance verdict.

    Raises:
        UnsupportedFormatError: If no trial-balance table can be found
        AmountCoercionError: Only with the strict coercion policy
    """
    settings = settings or IngestSettings()
    source = sniff(upload, settings.sample_size)
    table = read_table(source)
    mapper = RowMapper(coercion=settings.coercion, skip_policy=settings.skip_policy)
    entries, issues = mapper.map_rows(table.rows)
    validation = validate_entries(entries, settings.tolerance)
    logger.debug(
        f"{upload.filename or '<upload>'}: format={source.tag} entries={len(entries)} "
        f"debits={validation.total_debits} credits={validation.total_credits} balanced={validation.balanced}"
    )
    return IngestResult(entries=entries, validation=validation, source_format=source.tag, issues=issues)
