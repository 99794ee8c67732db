from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any

"""Cell domain model for the Cascade Fields importer.

A Cell is a single spreadsheet value as reported by the sheet source, tagged
with its kind. The importer never mutates cells; the normalizer only reads
them and converts them into optional strings.
"""

__all__ = [
    "CellKind",
    "Cell",
]


class CellKind(Enum):
    """Closed set of cell kinds a sheet source may report.

    - TEXT: plain string (formula-looking text included)
    - INTEGER / FLOAT / BOOLEAN: numeric and logical values
    - DATETIME: date/time already formatted to display text
    - DATETIME_ISO / DURATION_ISO: raw ISO 8601 text
    - ERROR: spreadsheet error value (#N/A, #REF!, ...)
    - EMPTY: no value
    """
    TEXT = "text"
    INTEGER = "integer"
    FLOAT = "float"
    BOOLEAN = "boolean"
    DATETIME = "datetime"
    DATETIME_ISO = "datetime_iso"
    DURATION_ISO = "duration_iso"
    ERROR = "error"
    EMPTY = "empty"


@dataclass(frozen=True)
class Cell:
    """Tagged spreadsheet value.

    ``value`` holds the Python payload for the kind: ``str`` for TEXT,
    DATETIME, DATETIME_ISO, DURATION_ISO and ERROR (the error code),
    ``int`` / ``float`` / ``bool`` for the numeric kinds and ``None`` for EMPTY.
    """
    kind: CellKind
    value: Any = None

    @staticmethod
    def text(value: str) -> Cell:
        return Cell(CellKind.TEXT, value)

    @staticmethod
    def integer(value: int) -> Cell:
        return Cell(CellKind.INTEGER, value)

    @staticmethod
    def float_(value: float) -> Cell:
        return Cell(CellKind.FLOAT, value)

    @staticmethod
    def boolean(value: bool) -> Cell:
        return Cell(CellKind.BOOLEAN, value)

    @staticmethod
    def error(code: str) -> Cell:
        return Cell(CellKind.ERROR, code)

    @staticmethod
    def empty() -> Cell:
        return Cell(CellKind.EMPTY)
