from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from decimal import Decimal
from typing import assert_never

from ..models.cell import Cell, CellKind

"""Cell normalization service.

Converts tagged spreadsheet cells into the optional strings the row mapper
consumes. Error cells degrade to None unless a formula override exists for
the exact (row, column) position.
"""

__all__ = [
    "FormulaOverrides",
    "normalize_cell",
    "normalize_row",
]

logger = logging.getLogger(__name__)

# (row_index, col_index) -> formula text, positions over the whole worksheet
FormulaOverrides = Mapping[tuple[int, int], str]


def _format_float(value: float) -> str:
    if value.is_integer():
        return f"{value:.0f}"
    text = repr(value)
    # repr switches to exponent notation for very small/large magnitudes
    if "e" in text or "E" in text:
        text = format(Decimal(text), "f")
    return text


def normalize_cell(
    cell: Cell,
    row_index: int,
    col_index: int,
    overrides: FormulaOverrides | None = None,
) -> str | None:
    """Return the canonical string for a cell, or None when it carries no value.

    Args:
        cell: Cell reported by the sheet source
        row_index: 0-based worksheet row of the cell (header row included)
        col_index: 0-based column of the cell
        overrides: Optional formula text keyed by (row_index, col_index),
            substituted for error cells

    Examples:
        >>> normalize_cell(Cell.float_(5.0), 1, 0)
        '5'
        >>> normalize_cell(Cell.float_(5.25), 1, 0)
        '5.25'
    """
    kind = cell.kind
    if kind is CellKind.TEXT:
        return cell.value
    if kind is CellKind.INTEGER:
        return str(cell.value)
    if kind is CellKind.FLOAT:
        return _format_float(cell.value)
    if kind is CellKind.BOOLEAN:
        return "true" if cell.value else "false"
    if kind is CellKind.DATETIME or kind is CellKind.DATETIME_ISO or kind is CellKind.DURATION_ISO:
        return str(cell.value)
    if kind is CellKind.ERROR:
        if overrides is not None:
            formula = overrides.get((row_index, col_index))
            if formula is not None:
                return formula
        logger.debug(f"error cell at row {row_index + 1}, col {col_index + 1}: {cell.value}")
        return None
    if kind is CellKind.EMPTY:
        return None
    assert_never(kind)


def normalize_row(
    cells: Sequence[Cell], row_index: int, overrides: FormulaOverrides | None = None
) -> list[str | None]:
    """Normalize every cell of a row, preserving column order."""
    return [normalize_cell(cell, row_index, col, overrides) for col, cell in enumerate(cells)]
