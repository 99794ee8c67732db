# Shared pytest fixtures
from __future__ import annotations

import tempfile
import zipfile
from collections.abc import Callable
from pathlib import Path

import pytest
from openpyxl import Workbook

HEADER = [
    "Main Label", "Main Value", "Main Description",
    "Sub Label", "Sub Value", "Sub Description",
    "Major Label", "Major Value", "Major Description",
    "Minor Label", "Minor Value", "Minor Description",
]


def cascade_row(n: int, **overrides: object) -> list[object]:
    """A complete 12-column data row; keyword overrides replace single fields."""
    row: dict[str, object] = {
        "main_label": "Main", "main_value": f"M{n}", "main_description": f"Main {n}",
        "sub_label": "Sub", "sub_value": f"S{n}", "sub_description": f"Sub {n}",
        "major_label": "Major", "major_value": f"MAJ{n}", "major_description": f"Major {n}",
        "minor_label": "Minor", "minor_value": f"MIN{n}", "minor_description": f"Minor {n}",
    }
    row.update(overrides)
    return list(row.values())


@pytest.fixture()
def temp_workdir(monkeypatch) -> Path:
    with tempfile.TemporaryDirectory() as d:
        p = Path(d)
        (p / "config").mkdir()
        (p / "data").mkdir()
        monkeypatch.chdir(p)
        monkeypatch.delenv("CASCADE_FIELDS_CONFIG", raising=False)
        yield p


@pytest.fixture()
def make_workbook(temp_workdir: Path) -> Callable[..., Path]:
    """Factory writing an .xlsx with the given sheets (rows include the header)."""
    def _make(name: str, sheets: dict[str, list[list[object]]]) -> Path:
        wb = Workbook()
        wb.remove(wb.active)
        for sheet_name, rows in sheets.items():
            ws = wb.create_sheet(sheet_name)
            for row in rows:
                ws.append(row)
        path = temp_workdir / "data" / name
        wb.save(path)
        return path
    return _make


@pytest.fixture()
def cascade_workbook(make_workbook) -> Path:
    """Workbook with a 'Cascade Fields' sheet: 3 valid rows (one with incomplete keys), 1 invalid."""
    return make_workbook(
        "cascade.xlsx",
        {
            "Cascade Fields": [
                HEADER,
                cascade_row(1),
                cascade_row(2, sub_value=None),
                cascade_row(3, main_value="   "),
                cascade_row(4),
            ],
            "Lookup": [
                ["Key", "Value"],
                ["A", 1],
            ],
        },
    )


@pytest.fixture()
def sample_config_yaml() -> str:
    return """sheet: Cascade Fields
output_format: json
summary_warning_limit: 3
skip_empty_rows: true
"""


@pytest.fixture()
def write_config(temp_workdir: Path, sample_config_yaml: str) -> Path:
    cfg = temp_workdir / "config" / "import.yml"
    cfg.write_text(sample_config_yaml, encoding="utf-8")
    return cfg


@pytest.fixture(autouse=True)
def _reset_logging():
    from cascade_fields.logging.init import reset_logging
    reset_logging()
    yield
    reset_logging()


@pytest.fixture()
def row_factory() -> Callable[..., list[object]]:
    return cascade_row


@pytest.fixture()
def cascade_header() -> list[str]:
    return list(HEADER)


@pytest.fixture()
def rewrite_workbook_part() -> Callable[[Path, str, str], Path]:
    """Replace one part (e.g. xl/worksheets/sheet1.xml) inside a saved .xlsx."""
    def _rewrite(path: Path, member: str, content: str) -> Path:
        with zipfile.ZipFile(path) as src:
            parts = {name: src.read(name) for name in src.namelist()}
        parts[member] = content.encode("utf-8")
        with zipfile.ZipFile(path, "w", zipfile.ZIP_DEFLATED) as dst:
            for name, data in parts.items():
                dst.writestr(name, data)
        return path
    return _rewrite


LOOKUP_FORMULA = "VLOOKUP(A2,Lookup!A:B,2,FALSE)"


def _sheet_xml(rows: list[list[str]]) -> str:
    body = "".join(f'<row r="{n}">{"".join(cells)}</row>' for n, cells in enumerate(rows, start=1))
    return (
        '<?xml version="1.0" encoding="UTF-8" standalone="yes"?>'
        '<worksheet xmlns="http://schemas.openxmlformats.org/spreadsheetml/2006/main">'
        f"<sheetData>{body}</sheetData></worksheet>"
    )


def _text_cells(row_number: int, values: list[object]) -> list[str]:
    return [
        f'<c r="{col}{row_number}" t="inlineStr"><is><t>{value}</t></is></c>'
        for col, value in zip("ABCDEFGHIJKL", values)
    ]


@pytest.fixture()
def cached_error_workbook(make_workbook, rewrite_workbook_part) -> Path:
    """'Cascade Fields' sheet as Excel saves it after a failed lookup.

    Row 2: sub_value (E2) is a formula whose cached value is #N/A.
    Row 3: sub_value (E3) is a plain #REF! error without a formula.
    """
    path = make_workbook("cached.xlsx", {"Cascade Fields": [HEADER]})
    row2 = _text_cells(2, cascade_row(1))
    row2[4] = f'<c r="E2" t="e"><f>{LOOKUP_FORMULA}</f><v>#N/A</v></c>'
    row3 = _text_cells(3, cascade_row(2))
    row3[4] = '<c r="E3" t="e"><v>#REF!</v></c>'
    return rewrite_workbook_part(
        path, "xl/worksheets/sheet1.xml", _sheet_xml([_text_cells(1, HEADER), row2, row3])
    )


@pytest.fixture()
def corrupt_sheet_workbook(cascade_workbook: Path, rewrite_workbook_part) -> Path:
    """Valid zip container whose first worksheet part is truncated XML."""
    return rewrite_workbook_part(cascade_workbook, "xl/worksheets/sheet1.xml", "<worksheet><sheetData><row")
