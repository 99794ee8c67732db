from __future__ import annotations

import logging
import time
from collections.abc import Iterable, Sequence

from ..models.cascade_field import FIELD_NAMES, CascadeField
from ..models.processing_result import ProcessingMetadata

"""Row batch processing service.

Drives the mapper, cleaner and validator over all data rows of one sheet.
Every row is classified independently; a bad row never aborts the batch.
Warnings are returned in the metadata, in row order.
"""

__all__ = [
    "HEADER_ROWS",
    "clean_record",
    "is_valid",
    "has_complete_keys",
    "process_rows",
    "filter_complete_records",
    "group_by_main_value",
]

logger = logging.getLogger(__name__)

# Rows are reported 1-based with the header row counted, so data index 0 is row 2
HEADER_ROWS = 1


def clean_record(record: CascadeField) -> None:
    """Trim every field in place; whitespace-only or empty text becomes None."""
    for name in FIELD_NAMES:
        value = getattr(record, name)
        if value is None:
            continue
        stripped = value.strip()
        setattr(record, name, stripped if stripped else None)


def is_valid(record: CascadeField) -> bool:
    return record.is_valid()


def has_complete_keys(record: CascadeField) -> bool:
    return record.has_complete_keys()


def _row_number(index: int) -> int:
    return index + HEADER_ROWS + 1


def process_rows(
    rows: Sequence[Sequence[str | None]],
) -> tuple[list[CascadeField], ProcessingMetadata]:
    """Map, clean and validate a sheet's normalized rows.

    Args:
        rows: Normalized data rows (header already removed)

    Returns:
        tuple: (valid records in row order, ProcessingMetadata)
    """
    start = time.perf_counter()
    logger.info(f"Processing {len(rows)} rows")

    records: list[CascadeField] = []
    warnings: list[str] = []
    invalid = 0

    for index, row in enumerate(rows):
        n = _row_number(index)
        record = CascadeField.from_row(row)
        if record is None:
            logger.debug(f"row {n}: {len(row)} columns, cannot map")
            invalid += 1
            warnings.append(f"Row {n}: Insufficient columns")
            continue

        clean_record(record)
        complete = has_complete_keys(record)
        if not is_valid(record):
            logger.debug(f"row {n}: invalid record, main_value missing")
            invalid += 1
            if not complete:
                warnings.append(f"Row {n}: Incomplete composite keys")
            continue

        # Kept records are flagged too, not only rejected ones
        if not complete:
            warnings.append(f"Row {n}: Incomplete composite keys")
        records.append(record)

    elapsed_ms = int((time.perf_counter() - start) * 1000)
    logger.info(
        f"Processing complete: {len(records)} valid records, {invalid} invalid records in {elapsed_ms}ms"
    )
    if warnings:
        logger.warning(f"{len(warnings)} processing warnings")

    metadata = ProcessingMetadata(
        total_rows_processed=len(rows),
        valid_records=len(records),
        invalid_records=invalid,
        processing_time_ms=elapsed_ms,
        warnings=warnings,
    )
    return records, metadata


def filter_complete_records(records: Iterable[CascadeField]) -> list[CascadeField]:
    """Keep only records whose four tier values are all present."""
    return [r for r in records if r.has_complete_keys()]


def group_by_main_value(records: Iterable[CascadeField]) -> dict[str, list[CascadeField]]:
    """Group records by main_value, first-seen order; records without one are skipped."""
    grouped: dict[str, list[CascadeField]] = {}
    for record in records:
        if record.main_value is not None:
            grouped.setdefault(record.main_value, []).append(record)
    return grouped
