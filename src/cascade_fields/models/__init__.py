"""Domain models for the Cascade Fields importer.

This package contains the cell, record and result types shared by the
reader, the processing services and the output formatter.
"""

from .cascade_field import FIELD_NAMES, MIN_COLUMNS, TIERS, CascadeField
from .cell import Cell, CellKind
from .processing_result import ErrorDetails, ProcessingMetadata, ProcessingResult, SheetResult

__all__ = [
    # Input cells
    "Cell",
    "CellKind",
    # Records
    "CascadeField",
    "TIERS",
    "FIELD_NAMES",
    "MIN_COLUMNS",
    # Results
    "ProcessingMetadata",
    "SheetResult",
    "ErrorDetails",
    "ProcessingResult",
]
