from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field

from .cascade_field import CascadeField

"""Processing result models for the Cascade Fields importer.

This module defines the statistics collected while processing rows, the
per-sheet result unit, and the top-level result handed to the output
formatter (success flag + records or sheets + metadata, or an error with
details).
"""

__all__ = [
    "ProcessingMetadata",
    "SheetResult",
    "ErrorDetails",
    "ProcessingResult",
]


@dataclass(frozen=True)
class ProcessingMetadata:
    """Statistics for one processing run.

    Invariant: total_rows_processed == valid_records + invalid_records.
    Warnings are kept in row order (and sheet order once merged).
    """
    total_rows_processed: int = 0
    valid_records: int = 0
    invalid_records: int = 0
    processing_time_ms: int = 0
    warnings: list[str] = field(default_factory=list)

    @classmethod
    def merge(cls, parts: Iterable[ProcessingMetadata]) -> ProcessingMetadata:
        """Sum counts and elapsed time; concatenate warnings in the given order."""
        total = valid = invalid = elapsed = 0
        warnings: list[str] = []
        for part in parts:
            total += part.total_rows_processed
            valid += part.valid_records
            invalid += part.invalid_records
            elapsed += part.processing_time_ms
            warnings.extend(part.warnings)
        return cls(
            total_rows_processed=total,
            valid_records=valid,
            invalid_records=invalid,
            processing_time_ms=elapsed,
            warnings=warnings,
        )


@dataclass(frozen=True)
class SheetResult:
    """Valid records of one sheet, in row order."""
    sheet: str
    records: list[CascadeField]


@dataclass(frozen=True)
class ErrorDetails:
    """Context attached to a failed result."""
    file: str
    available_sheets: list[str] | None = None
    row_number: int | None = None
    column: str | None = None


@dataclass(frozen=True)
class ProcessingResult:
    """Outcome of processing one workbook.

    Exactly one of ``records`` (single-sheet mode) or ``sheets`` (multi-sheet
    mode) is set on success; ``error`` and ``details`` are set on failure.
    """
    success: bool
    metadata: ProcessingMetadata
    records: list[CascadeField] | None = None
    sheets: list[SheetResult] | None = None
    error: str | None = None
    details: ErrorDetails | None = None

    @property
    def multi_sheet(self) -> bool:
        return self.sheets is not None

    @staticmethod
    def from_records(records: list[CascadeField], metadata: ProcessingMetadata) -> ProcessingResult:
        return ProcessingResult(success=True, metadata=metadata, records=records)

    @staticmethod
    def from_sheets(sheets: list[SheetResult], metadata: ProcessingMetadata) -> ProcessingResult:
        return ProcessingResult(success=True, metadata=metadata, sheets=sheets)

    @staticmethod
    def failure(
        error: str, details: ErrorDetails | None = None, processing_time_ms: int = 0
    ) -> ProcessingResult:
        return ProcessingResult(
            success=False,
            metadata=ProcessingMetadata(processing_time_ms=processing_time_ms),
            error=error,
            details=details,
        )
