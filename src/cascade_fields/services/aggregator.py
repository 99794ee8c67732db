from __future__ import annotations

import logging
from collections.abc import Sequence

from ..models.processing_result import ProcessingMetadata, SheetResult
from .processor import process_rows

"""Multi-sheet aggregation service.

Runs the batch processor once per sheet, in the order the caller asked for,
and merges the per-sheet statistics by summation.
"""

__all__ = [
    "aggregate_sheets",
]

logger = logging.getLogger(__name__)


def aggregate_sheets(
    sheets: Sequence[tuple[str, Sequence[Sequence[str | None]]]],
) -> tuple[list[SheetResult], ProcessingMetadata]:
    """Process each (sheet_name, rows) pair and merge the results.

    Returns:
        tuple: (one SheetResult per input sheet in input order, merged metadata)
    """
    results: list[SheetResult] = []
    parts: list[ProcessingMetadata] = []
    for sheet_name, rows in sheets:
        logger.info(f"Processing sheet: {sheet_name}")
        records, metadata = process_rows(rows)
        results.append(SheetResult(sheet=sheet_name, records=records))
        parts.append(metadata)
    return results, ProcessingMetadata.merge(parts)
