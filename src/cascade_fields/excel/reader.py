from __future__ import annotations

import logging
from datetime import date, datetime, time, timedelta
from pathlib import Path
from typing import Any

from openpyxl import load_workbook
from openpyxl.workbook.workbook import Workbook
from openpyxl.worksheet.worksheet import Worksheet

from ..models.cell import Cell, CellKind

"""Workbook sheet source backed by openpyxl.

The first worksheet row is the header and is never returned. Cells are
classified into the closed CellKind set; formula text for error cells is
available separately through formula_overrides().

openpyxl is used directly (instead of pandas.read_excel) because the cell
data type is needed to tell error values apart from text.
"""

__all__ = [
    "WorkbookReadError",
    "SheetNotFoundError",
    "ExcelSheetSource",
    "classify_cell",
]

logger = logging.getLogger(__name__)

DATETIME_FMT = "%Y-%m-%d %H:%M:%S"


class WorkbookReadError(Exception):
    """Raised when a workbook cannot be opened or a sheet cannot be read."""


class SheetNotFoundError(Exception):
    """Raised when the requested sheet does not exist in the workbook."""

    def __init__(self, sheet_name: str, available_sheets: list[str]) -> None:
        self.sheet_name = sheet_name
        self.available_sheets = available_sheets
        super().__init__(f"Sheet '{sheet_name}' not found. Available sheets: {available_sheets}")


def _iso_duration(delta: timedelta) -> str:
    total = delta.total_seconds()
    sign = "-" if total < 0 else ""
    days, rem = divmod(abs(total), 86400)
    hours, rem = divmod(rem, 3600)
    minutes, seconds = divmod(rem, 60)
    secs = str(int(seconds)) if float(seconds).is_integer() else f"{seconds:.6f}".rstrip("0")
    day_part = f"{int(days)}D" if days else ""
    return f"{sign}P{day_part}T{int(hours)}H{int(minutes)}M{secs}S"


def classify_cell(value: Any, data_type: str | None = None) -> Cell:
    """Build a Cell from an openpyxl cell value and data type."""
    if data_type == "e":
        return Cell.error(str(value))
    if value is None:
        return Cell.empty()
    # bool before int: bool is an int subclass
    if isinstance(value, bool):
        return Cell.boolean(value)
    if isinstance(value, int):
        return Cell.integer(value)
    if isinstance(value, float):
        return Cell.float_(value)
    if isinstance(value, datetime):
        return Cell(CellKind.DATETIME, value.strftime(DATETIME_FMT))
    if isinstance(value, date):
        return Cell(CellKind.DATETIME, value.isoformat())
    if isinstance(value, time):
        return Cell(CellKind.DATETIME_ISO, value.isoformat())
    if isinstance(value, timedelta):
        return Cell(CellKind.DURATION_ISO, _iso_duration(value))
    if isinstance(value, str):
        return Cell.text(value)
    # Rich text and other wrappers expose a string form
    return Cell.text(str(value))


class ExcelSheetSource:
    """Sheet source over one .xlsx workbook.

    Usage:
        with ExcelSheetSource(path) as source:
            rows = source.read_rows("Cascade Fields")
            overrides = source.formula_overrides("Cascade Fields")
    """

    def __init__(self, path: Path) -> None:
        self.path = Path(path)
        self._values = self._open(data_only=True)
        self._formulas: Workbook | None = None
        logger.info(f"Opened workbook: {self.path}")

    def _open(self, *, data_only: bool) -> Workbook:
        try:
            return load_workbook(self.path, data_only=data_only)
        except Exception as e:
            # openpyxl surfaces corrupt parts as zip, XML or attribute errors
            raise WorkbookReadError(f"Failed to open Excel file: {self.path}: {e}") from e

    def sheet_names(self) -> list[str]:
        return list(self._values.sheetnames)

    def _worksheet(self, workbook: Workbook, sheet_name: str) -> Worksheet:
        if sheet_name not in workbook.sheetnames:
            raise SheetNotFoundError(sheet_name, self.sheet_names())
        ws = workbook[sheet_name]
        if not isinstance(ws, Worksheet):
            # Chartsheets carry no cells
            raise WorkbookReadError(f"Error reading sheet '{sheet_name}': not a worksheet")
        return ws

    def read_rows(self, sheet_name: str) -> list[list[Cell]]:
        """Return every data row of the sheet as Cells (header row excluded)."""
        ws = self._worksheet(self._values, sheet_name)
        logger.debug(f"Reading sheet: {sheet_name} ({ws.max_row} rows x {ws.max_column} cols)")
        rows: list[list[Cell]] = []
        for row in ws.iter_rows(min_row=2):
            rows.append([classify_cell(c.value, c.data_type) for c in row])
        return rows

    def formula_overrides(self, sheet_name: str) -> dict[tuple[int, int], str]:
        """Formula text keyed by 0-based (row, col) over the whole worksheet."""
        if self._formulas is None:
            self._formulas = self._open(data_only=False)
        ws = self._worksheet(self._formulas, sheet_name)
        overrides: dict[tuple[int, int], str] = {}
        for row_idx, row in enumerate(ws.iter_rows()):
            for col_idx, c in enumerate(row):
                if c.data_type != "f":
                    continue
                # ArrayFormula objects keep the formula in .text
                overrides[(row_idx, col_idx)] = str(getattr(c.value, "text", c.value))
        return overrides

    def close(self) -> None:
        self._values.close()
        if self._formulas is not None:
            self._formulas.close()
            self._formulas = None

    def __enter__(self) -> ExcelSheetSource:
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()
