"""CLI entry point for bitlink-clicks."""

import argparse
import asyncio
import json
import logging
import os
import sys
from typing import Optional

from pydantic import ValidationError

from .errors import InputFileNotFoundError, RecordSourceError
from .models import ClickReport, ProcessOptions
from .processor import process_clicks

logger = logging.getLogger(__name__)

DEFAULT_ENCODES_PATH = "data/encodes.csv"
DEFAULT_DECODES_PATH = "data/decodes.json"
DEFAULT_YEAR = "2021"

EXIT_SUCCESS = 0
EXIT_INPUT_ERROR = 1
EXIT_RUNTIME_ERROR = 2


def _ensure_utf8() -> None:
    """Ensure stdout/stderr use UTF-8 on Windows to avoid charmap errors."""
    if sys.platform == "win32":
        os.environ.setdefault("PYTHONUTF8", "1")
        if hasattr(sys.stdout, "reconfigure"):
            sys.stdout.reconfigure(encoding="utf-8", errors="replace")
        if hasattr(sys.stderr, "reconfigure"):
            sys.stderr.reconfigure(encoding="utf-8", errors="replace")


def _print_table(report: ClickReport) -> None:
    print(f"\n{'='*60}")
    print(f"  Year: {report.year}")
    print(f"  Bitlinks loaded: {report.links_loaded}")
    print(f"  Clicks counted: {report.records_counted} of {report.records_processed}")
    print(f"{'='*60}")
    for entry in report.clicks:
        print(f"  {entry.clicks:>8}  {entry.long_url}")

    if not report.clicks:
        print("\nNo long URLs found in the registry.")


def main(argv: Optional[list[str]] = None) -> None:
    _ensure_utf8()
    parser = argparse.ArgumentParser(
        prog="bitlink-clicks",
        description="Count bitlink clicks per long URL for a given year",
    )
    parser.add_argument(
        "--encodes",
        default=os.getenv("BITLINK_ENCODES", DEFAULT_ENCODES_PATH),
        help=f"Registry file, .csv or .json (or set BITLINK_ENCODES; default: {DEFAULT_ENCODES_PATH})",
    )
    parser.add_argument(
        "--decodes",
        default=os.getenv("BITLINK_DECODES", DEFAULT_DECODES_PATH),
        help=f"Click-log file, .csv or .json (or set BITLINK_DECODES; default: {DEFAULT_DECODES_PATH})",
    )
    parser.add_argument(
        "--year",
        default=os.getenv("BITLINK_YEAR", DEFAULT_YEAR),
        help=f"Four-digit year to count clicks for (or set BITLINK_YEAR; default: {DEFAULT_YEAR})",
    )
    parser.add_argument(
        "--output",
        choices=["json", "table"],
        default="json",
        help="Output format (default: json)",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable verbose logging",
    )

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        stream=sys.stderr,
    )

    try:
        options = ProcessOptions(
            encodes_path=args.encodes,
            decodes_path=args.decodes,
            year=args.year,
        )
    except ValidationError as e:
        logger.error(f"Invalid options: {e}")
        sys.exit(EXIT_INPUT_ERROR)

    try:
        report = asyncio.run(process_clicks(options))
    except InputFileNotFoundError as e:
        logger.error(f"Input file not found: {e}")
        sys.exit(EXIT_INPUT_ERROR)
    except RecordSourceError as e:
        logger.error(f"Processing failed: {e}")
        sys.exit(EXIT_RUNTIME_ERROR)
    except Exception as e:
        logger.exception(f"Unexpected error: {e}")
        sys.exit(EXIT_RUNTIME_ERROR)

    if args.output == "json":
        print(json.dumps(report.as_mappings(), indent=2))
    else:
        _print_table(report)


if __name__ == "__main__":
    main()
