from __future__ import annotations

from pathlib import Path
from unittest.mock import patch

from cascade_fields.excel.reader import ExcelSheetSource
from cascade_fields.models.cell import Cell
from cascade_fields.services.orchestrator import load_sheet_rows, process_file


def test_single_sheet_mode_returns_records(cascade_workbook: Path):
    result = process_file(cascade_workbook)

    assert result.success
    assert result.sheets is None
    assert [r.main_value for r in result.records] == ["M1", "M2", "M4"]
    meta = result.metadata
    assert (meta.total_rows_processed, meta.valid_records, meta.invalid_records) == (4, 3, 1)
    assert meta.warnings == [
        "Row 3: Incomplete composite keys",
        "Row 4: Incomplete composite keys",
    ]


def test_multi_sheet_mode_keeps_request_order(cascade_workbook: Path):
    result = process_file(cascade_workbook, ["Lookup", "Cascade Fields"])

    assert result.success
    assert result.records is None
    assert [s.sheet for s in result.sheets] == ["Lookup", "Cascade Fields"]
    assert result.sheets[0].records == []
    assert result.metadata.total_rows_processed == 5
    assert result.metadata.warnings[0] == "Row 2: Insufficient columns"


def test_all_sheets_uses_workbook_order(cascade_workbook: Path):
    result = process_file(cascade_workbook, ["ignored"], all_sheets=True)

    assert [s.sheet for s in result.sheets] == ["Cascade Fields", "Lookup"]


def test_default_sheet_can_be_changed(cascade_workbook: Path):
    result = process_file(cascade_workbook, default_sheet="Lookup")

    assert result.success
    assert result.records == []
    assert result.metadata.invalid_records == 1


def test_missing_file(temp_workdir: Path):
    result = process_file(temp_workdir / "nope.xlsx")

    assert not result.success
    assert result.error == f"File not found: {temp_workdir / 'nope.xlsx'}"
    assert result.details.file == str(temp_workdir / "nope.xlsx")


def test_unknown_sheet_fails_whole_run(cascade_workbook: Path):
    result = process_file(cascade_workbook, ["Cascade Fields", "Nope"])

    assert not result.success
    assert result.records is None and result.sheets is None
    assert "Sheet 'Nope' not found" in result.error
    assert result.details.available_sheets == ["Cascade Fields", "Lookup"]
    assert result.metadata.total_rows_processed == 0


def test_unreadable_workbook(temp_workdir: Path):
    bad = temp_workdir / "data" / "bad.xlsx"
    bad.write_bytes(b"garbage")

    result = process_file(bad)

    assert not result.success
    assert result.details.available_sheets is None


def test_blank_rows_are_dropped_unless_disabled(make_workbook, row_factory):
    path = make_workbook(
        "blank.xlsx",
        {"Cascade Fields": [["h"] * 12, row_factory(1), [None] * 12, ["note"] + [None] * 11, row_factory(2)]},
    )

    skipped = process_file(path)
    kept = process_file(path, skip_empty_rows=False)

    # a row with any value is kept, even when it maps to an invalid record
    assert skipped.metadata.total_rows_processed == 3
    assert kept.metadata.total_rows_processed == 4


def test_overrides_only_requested_when_sheet_has_errors(cascade_workbook: Path):
    with ExcelSheetSource(cascade_workbook) as source:
        with patch.object(source, "formula_overrides") as mock_overrides:
            load_sheet_rows(source, "Cascade Fields")
            mock_overrides.assert_not_called()


def test_error_cells_use_formula_overrides():
    class FakeSource:
        def read_rows(self, sheet_name):
            return [[Cell.text("a"), Cell.error("#N/A")], [Cell.empty(), Cell.error("#REF!")]]

        def formula_overrides(self, sheet_name):
            return {(1, 1): "=VLOOKUP(A2,Lookup!A:B,2,FALSE)"}

    rows = load_sheet_rows(FakeSource(), "Data")

    # second row: empty + unresolved error -> blank row, dropped
    assert rows == [["a", "=VLOOKUP(A2,Lookup!A:B,2,FALSE)"]]


def test_corrupt_sheet_part_fails_run(corrupt_sheet_workbook: Path):
    result = process_file(corrupt_sheet_workbook)

    assert not result.success
    assert result.error.startswith(f"Failed to open Excel file: {corrupt_sheet_workbook}")
    assert result.details.file == str(corrupt_sheet_workbook)
    assert result.records is None


def test_cached_error_takes_formula_text(cached_error_workbook: Path):
    result = process_file(cached_error_workbook)

    assert result.success
    first, second = result.records
    assert first.sub_value == "=VLOOKUP(A2,Lookup!A:B,2,FALSE)"
    assert first.main_value == "M1"
    # error without a formula degrades to an absent value
    assert second.sub_value is None
    assert result.metadata.warnings == ["Row 3: Incomplete composite keys"]
