from __future__ import annotations

from collections.abc import Sequence
from dataclasses import asdict, dataclass

"""CascadeField record model.

A CascadeField is the hierarchical record produced for each data row: four
tiers (main, sub, major, minor), each with a label, a value and a description.
Mapping from a row is strictly positional over the first 12 columns.
"""

__all__ = [
    "TIERS",
    "FIELD_NAMES",
    "MIN_COLUMNS",
    "CascadeField",
]

TIERS = ("main", "sub", "major", "minor")
ATTRIBUTES = ("label", "value", "description")

# Column order of the source sheet: main_label, main_value, main_description, sub_label, ...
FIELD_NAMES: tuple[str, ...] = tuple(f"{tier}_{attr}" for tier in TIERS for attr in ATTRIBUTES)
MIN_COLUMNS = len(FIELD_NAMES)


@dataclass
class CascadeField:
    """One cascade field record (12 optional string fields).

    Mutable so the cleaner can normalize it in place right after mapping;
    read-only by convention afterwards.
    """
    main_label: str | None = None
    main_value: str | None = None
    main_description: str | None = None
    sub_label: str | None = None
    sub_value: str | None = None
    sub_description: str | None = None
    major_label: str | None = None
    major_value: str | None = None
    major_description: str | None = None
    minor_label: str | None = None
    minor_value: str | None = None
    minor_description: str | None = None

    @classmethod
    def from_row(cls, row: Sequence[str | None]) -> CascadeField | None:
        """Map a normalized row onto a record.

        Returns None when the row has fewer than 12 columns. Columns past the
        12th are ignored.
        """
        if len(row) < MIN_COLUMNS:
            return None
        return cls(**dict(zip(FIELD_NAMES, row[:MIN_COLUMNS])))

    def values(self) -> list[str | None]:
        """Field values in column order."""
        return [getattr(self, name) for name in FIELD_NAMES]

    def is_valid(self) -> bool:
        """A record is accepted downstream only when main_value is present."""
        return self.main_value is not None

    def has_complete_keys(self) -> bool:
        """True when all four tier values (the composite key) are present."""
        return all(getattr(self, f"{tier}_value") is not None for tier in TIERS)

    def to_dict(self) -> dict[str, str | None]:
        return asdict(self)

    def to_php_array(self) -> dict[str, str]:
        """Flat dict with absent fields rendered as empty strings."""
        return {name: value if value is not None else "" for name, value in self.to_dict().items()}
