from __future__ import annotations

import logging
import time
from collections.abc import Sequence
from pathlib import Path

from ..excel.reader import ExcelSheetSource, SheetNotFoundError, WorkbookReadError
from ..models.cell import CellKind
from ..models.processing_result import ErrorDetails, ProcessingResult
from .aggregator import aggregate_sheets
from .normalizer import normalize_row
from .progress import SheetProgressTracker

"""Workbook processing orchestration.

Ties the sheet source to the processing pipeline:
1. Resolve the requested sheets (one sheet, a list, or every sheet)
2. Read and normalize each sheet's data rows
3. Aggregate per-sheet results and statistics
4. Package everything into a ProcessingResult for the output formatter

Per-row problems never fail a run. A missing file, an unreadable workbook or
an unknown sheet fails the whole run with error details.
"""

__all__ = [
    "DEFAULT_SHEET",
    "load_sheet_rows",
    "process_file",
]

logger = logging.getLogger(__name__)

DEFAULT_SHEET = "Cascade Fields"


def _elapsed_ms(start: float) -> int:
    return int((time.perf_counter() - start) * 1000)


def load_sheet_rows(
    source: ExcelSheetSource, sheet_name: str, *, skip_empty_rows: bool = True
) -> list[list[str | None]]:
    """Read one sheet and normalize its data rows.

    Formula overrides are only looked up when the sheet contains error cells.
    Fully blank rows are dropped when skip_empty_rows is set.
    """
    cell_rows = source.read_rows(sheet_name)
    overrides = None
    if any(cell.kind is CellKind.ERROR for row in cell_rows for cell in row):
        overrides = source.formula_overrides(sheet_name)

    rows: list[list[str | None]] = []
    for index, cells in enumerate(cell_rows):
        # +1: cell_rows starts after the header row
        row = normalize_row(cells, index + 1, overrides)
        if skip_empty_rows and all(v is None for v in row):
            continue
        rows.append(row)
    logger.info(f"Read {len(rows)} data rows from sheet '{sheet_name}'")
    return rows


def process_file(
    path: Path,
    sheets: Sequence[str] | None = None,
    *,
    all_sheets: bool = False,
    skip_empty_rows: bool = True,
    default_sheet: str = DEFAULT_SHEET,
) -> ProcessingResult:
    """Process the requested sheets of one workbook.

    Single-sheet mode (one sheet requested) yields ``records``; multi-sheet
    mode (several sheets, or ``all_sheets``) yields ``sheets`` in request order.

    Args:
        path: Workbook path
        sheets: Sheet names to process; defaults to ``[default_sheet]``
        all_sheets: Process every sheet in workbook order (overrides ``sheets``)
        skip_empty_rows: Drop fully blank data rows before processing
        default_sheet: Sheet used when none is requested

    Returns:
        ProcessingResult (success or failure, never raises for sheet/file errors)
    """
    start = time.perf_counter()
    path = Path(path)
    file_name = str(path)

    if not path.exists():
        logger.error(f"file not found: {path}")
        return ProcessingResult.failure(
            f"File not found: {file_name}",
            ErrorDetails(file=file_name),
            _elapsed_ms(start),
        )

    try:
        with ExcelSheetSource(path) as source:
            if all_sheets:
                names = source.sheet_names()
            else:
                names = list(sheets) if sheets else [default_sheet]
            multi = all_sheets or len(names) > 1

            loaded: list[tuple[str, list[list[str | None]]]] = []
            with SheetProgressTracker(len(names)) as progress:
                for name in names:
                    progress.start_sheet(name)
                    rows = load_sheet_rows(source, name, skip_empty_rows=skip_empty_rows)
                    loaded.append((name, rows))
                    progress.finish_sheet(rows_processed=len(rows))
    except SheetNotFoundError as e:
        logger.error(str(e))
        return ProcessingResult.failure(
            str(e),
            ErrorDetails(file=file_name, available_sheets=e.available_sheets),
            _elapsed_ms(start),
        )
    except WorkbookReadError as e:
        logger.error(str(e))
        return ProcessingResult.failure(str(e), ErrorDetails(file=file_name), _elapsed_ms(start))

    sheet_results, metadata = aggregate_sheets(loaded)
    if multi:
        return ProcessingResult.from_sheets(sheet_results, metadata)
    return ProcessingResult.from_records(sheet_results[0].records, metadata)
