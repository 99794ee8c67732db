from __future__ import annotations

from ..models.processing_result import ProcessingResult

"""Summary rendering service.

Two renderings of a ProcessingResult:
- render_summary: human-readable block printed with --summary
- render_summary_line: single SUMMARY log line emitted after every run
"""

DEFAULT_WARNING_LIMIT = 5


def render_summary(result: ProcessingResult, warning_limit: int = DEFAULT_WARNING_LIMIT) -> str:
    """Render a short human-readable report.

    At most ``warning_limit`` warnings are listed; the rest are counted.

    Examples:
        >>> from cascade_fields.models import ProcessingMetadata
        >>> meta = ProcessingMetadata(total_rows_processed=3, valid_records=3, processing_time_ms=12)
        >>> print(render_summary(ProcessingResult.from_records([], meta)), end="")
        ✓ Successfully processed 3 records
        ⏱ Processing time: 12ms
    """
    lines: list[str] = []
    meta = result.metadata
    if result.success:
        lines.append(f"✓ Successfully processed {meta.valid_records} records")
        if meta.invalid_records > 0:
            lines.append(f"⚠ {meta.invalid_records} invalid records were skipped")
        if result.multi_sheet:
            for sheet in result.sheets or []:
                lines.append(f"  {sheet.sheet}: {len(sheet.records)} records")
        lines.append(f"⏱ Processing time: {meta.processing_time_ms}ms")
        if meta.warnings:
            lines.append("")
            lines.append("Warnings:")
            for warning in meta.warnings[:warning_limit]:
                lines.append(f"  - {warning}")
            hidden = len(meta.warnings) - warning_limit
            if hidden > 0:
                lines.append(f"  ... and {hidden} more warnings")
    else:
        lines.append(f"✗ Processing failed: {result.error or 'Unknown error'}")
        if result.details is not None:
            lines.append(f"  File: {result.details.file}")
            if result.details.available_sheets is not None:
                lines.append(f"  Available sheets: {', '.join(result.details.available_sheets)}")
    return "\n".join(lines) + "\n"


def render_summary_line(result: ProcessingResult) -> str:
    """Render the one-line SUMMARY record.

    Format:
    SUMMARY status={ok|failed} sheets={n} rows={total} valid={valid}
    invalid={invalid} warnings={count} elapsed_ms={ms}
    """
    meta = result.metadata
    if result.multi_sheet:
        sheet_count = len(result.sheets or [])
    elif result.records is not None:
        sheet_count = 1
    else:
        sheet_count = 0
    return (
        f"SUMMARY status={'ok' if result.success else 'failed'} "
        f"sheets={sheet_count} "
        f"rows={meta.total_rows_processed} "
        f"valid={meta.valid_records} "
        f"invalid={meta.invalid_records} "
        f"warnings={len(meta.warnings)} "
        f"elapsed_ms={meta.processing_time_ms}"
    )
