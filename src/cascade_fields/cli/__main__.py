from __future__ import annotations

import argparse
import os
import sys
from pathlib import Path

from dotenv import load_dotenv

from cascade_fields.config.loader import CONFIG_ENV_VAR, ConfigError, load_config
from cascade_fields.logging.init import log_summary, setup_logging
from cascade_fields.services.orchestrator import process_file
from cascade_fields.services.output import OutputFormat, format_output, write_output
from cascade_fields.services.summary import render_summary, render_summary_line

"""CLI entrypoint.

Flow:
- Load .env and the optional config file
- Process the requested sheet(s) of the input workbook
- Write the formatted result (or a human summary) to stdout or a file
- Log a SUMMARY line to stderr

The web backend runs this as a subprocess and parses stdout, so a failed
import still produces a well-formed result document.
"""

EXIT_SUCCESS = 0
EXIT_FATAL = 1
EXIT_PROCESSING_FAILED = 2


def _load_env_file(path: Path) -> None:
    """Load .env without overriding variables already set in the environment."""
    if path.exists():
        load_dotenv(dotenv_path=path, override=False)


def _parse_args(argv: list[str]) -> argparse.Namespace:
    p = argparse.ArgumentParser(
        prog="cascade-fields",
        description="Import Cascade Fields data from an Excel workbook",
    )
    p.add_argument("input_file", help="Path to the .xlsx workbook")
    p.add_argument(
        "-s", "--sheet", action="append", dest="sheets", metavar="SHEET",
        help="Sheet to process (repeat for several sheets; default from config)",
    )
    p.add_argument("--all-sheets", action="store_true", help="Process every sheet in the workbook")
    p.add_argument(
        "-o", "--output", default=None,
        help="Output format: json, csv, or php (array of arrays for PHP consumption)",
    )
    p.add_argument("-f", "--file", default=None, help="Write output to this file instead of stdout")
    p.add_argument("--summary", action="store_true", help="Print a human-readable summary instead")
    p.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    p.add_argument("--config", default=None, help=f"YAML config file (default: ${CONFIG_ENV_VAR})")
    return p.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    # Only read sys.argv when argv is None; an empty list is a valid argv
    if argv is None:
        argv = sys.argv[1:]
    args = _parse_args(argv)
    logger = setup_logging(verbose=args.verbose)

    _load_env_file(Path(".env"))
    config_value = args.config or os.getenv(CONFIG_ENV_VAR)
    try:
        cfg = load_config(Path(config_value) if config_value else None)
    except ConfigError as e:
        logger.error(f"config: {e}")
        return EXIT_FATAL

    try:
        output_format = OutputFormat.parse(args.output or cfg.output_format)
    except ValueError as e:
        logger.error(str(e))
        return EXIT_FATAL

    logger.info(f"Input file: {args.input_file}")
    if args.all_sheets:
        logger.info("Sheets: all")
    else:
        logger.info(f"Sheets: {', '.join(args.sheets or [cfg.sheet])}")

    result = process_file(
        Path(args.input_file),
        args.sheets,
        all_sheets=args.all_sheets,
        skip_empty_rows=cfg.skip_empty_rows,
        default_sheet=cfg.sheet,
    )

    if args.summary:
        text = render_summary(result, cfg.summary_warning_limit)
        out_path = None
    else:
        text = format_output(result, output_format)
        out_path = Path(args.file) if args.file else None
    try:
        write_output(text, out_path)
    except OSError as e:
        logger.error(f"output: {e}")
        return EXIT_FATAL

    summary_line = render_summary_line(result)
    # log_summary adds the "SUMMARY " label itself
    log_summary(summary_line[len("SUMMARY "):])

    return EXIT_SUCCESS if result.success else EXIT_PROCESSING_FAILED


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
