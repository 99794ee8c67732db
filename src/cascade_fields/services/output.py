from __future__ import annotations

import json
import logging
import sys
from dataclasses import asdict
from enum import Enum
from pathlib import Path
from typing import Any

import pandas as pd

from ..models.cascade_field import FIELD_NAMES
from ..models.processing_result import ProcessingMetadata, ProcessingResult

"""Output formatting service.

Serializes a ProcessingResult for the calling process:
- json: full result structure (records or sheets, error details, metadata)
- csv: one line per record, absent fields empty
- php: array-of-arrays JSON shape with "" for absent fields
"""

__all__ = [
    "OutputFormat",
    "result_to_dict",
    "format_output",
    "write_output",
]

logger = logging.getLogger(__name__)


class OutputFormat(Enum):
    JSON = "json"
    CSV = "csv"
    PHP = "php"

    @classmethod
    def parse(cls, text: str) -> OutputFormat:
        """Parse a format name case-insensitively (php also accepts phparray / php-array)."""
        key = text.strip().lower()
        if key in ("php", "phparray", "php-array"):
            return cls.PHP
        for fmt in cls:
            if fmt.value == key:
                return fmt
        raise ValueError(f"Unknown output format: {text}")


def _metadata_dict(metadata: ProcessingMetadata, *, keep_empty_warnings: bool) -> dict[str, Any]:
    data: dict[str, Any] = {
        "total_rows_processed": metadata.total_rows_processed,
        "valid_records": metadata.valid_records,
        "invalid_records": metadata.invalid_records,
        "processing_time_ms": metadata.processing_time_ms,
    }
    if metadata.warnings:
        data["warnings"] = list(metadata.warnings)
    elif keep_empty_warnings:
        data["warnings"] = None
    return data


def result_to_dict(result: ProcessingResult) -> dict[str, Any]:
    """Logical JSON structure of a result; keys for absent parts are omitted."""
    data: dict[str, Any] = {"success": result.success}
    if result.records is not None:
        data["records"] = [r.to_dict() for r in result.records]
    if result.sheets is not None:
        data["sheets"] = [
            {"sheet": s.sheet, "records": [r.to_dict() for r in s.records]} for s in result.sheets or []
        ]
    if result.error is not None:
        data["error"] = result.error
    if result.details is not None:
        data["details"] = {k: v for k, v in asdict(result.details).items() if v is not None}
    data["metadata"] = _metadata_dict(result.metadata, keep_empty_warnings=False)
    return data


def _format_json(result: ProcessingResult) -> str:
    return json.dumps(result_to_dict(result), ensure_ascii=False, indent=2)


def _format_csv(result: ProcessingResult) -> str:
    if not result.success:
        frame = pd.DataFrame([{"status": "failed", "error": result.error or "Unknown error"}])
        return frame.to_csv(index=False, lineterminator="\n")

    if result.multi_sheet:
        columns = ["sheet", *FIELD_NAMES]
        rows = [[s.sheet, *r.values()] for s in result.sheets or [] for r in s.records]
    else:
        columns = list(FIELD_NAMES)
        rows = [r.values() for r in result.records or []]
    frame = pd.DataFrame(rows, columns=columns, dtype=object)
    return frame.to_csv(index=False, na_rep="", lineterminator="\n")


def _format_php(result: ProcessingResult) -> str:
    if not result.success:
        response: dict[str, Any] = {
            "success": False,
            "error": result.error or "Unknown error",
            "data": [],
        }
        return json.dumps(response, ensure_ascii=False, indent=2)

    if result.multi_sheet:
        data: list[Any] = [
            {"sheet": s.sheet, "rows": [r.to_php_array() for r in s.records]} for s in result.sheets or []
        ]
    else:
        data = [r.to_php_array() for r in result.records or []]
    response = {
        "success": True,
        "data": data,
        "metadata": _metadata_dict(result.metadata, keep_empty_warnings=True),
    }
    return json.dumps(response, ensure_ascii=False, indent=2)


def format_output(result: ProcessingResult, fmt: OutputFormat) -> str:
    if fmt is OutputFormat.JSON:
        text = _format_json(result)
    elif fmt is OutputFormat.CSV:
        text = _format_csv(result)
    else:
        text = _format_php(result)
    logger.info(f"Formatted output as {fmt.value.upper()} ({len(text.encode('utf-8'))} bytes)")
    return text


def write_output(text: str, file_path: Path | None = None) -> None:
    """Write formatted output to a file, or to stdout when no file is given."""
    if file_path is None:
        sys.stdout.write(text)
        sys.stdout.flush()
        return
    file_path.write_text(text, encoding="utf-8")
    logger.info(f"Output written to {file_path}")
