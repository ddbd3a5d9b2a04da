from __future__ import annotations

import _bootstrap  # noqa: F401

import argparse
import asyncio
import logging
import sys
import time
from pathlib import Path

from faadof.ingestion.errors import classify_load_error
from faadof.ingestion.faa_client import FaaDofClient
from faadof.ingestion.loaders import make_loader
from faadof.logging_config import configure_logging
from faadof.output.formatters import FORMATTERS, make_formatter
from faadof.parsing.errors import DofError
from faadof.settings import get_config

logger = logging.getLogger("parse_dof")


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description=(
            "Parse and validate FAA Digital Obstacle File data. "
            "Per-line parse errors are written to stderr."
        )
    )
    parser.add_argument(
        "-i",
        "--input",
        default=None,
        help="Path or URL to a DOF file (.dat or .zip). Default: the current cycle's FAA archive.",
    )
    parser.add_argument(
        "-f",
        "--format",
        choices=sorted(FORMATTERS),
        default="summary",
        help="Output format (default: summary).",
    )
    parser.add_argument(
        "-o",
        "--output",
        default=None,
        help="Write output to this file instead of stdout.",
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default="WARNING",
        help="Logging level (default: WARNING).",
    )
    return parser.parse_args()


def _report_line_error(error: DofError, line_number: int) -> None:
    message = f"Error at line {line_number}: {error}"
    if error.failure_reason and error.failure_reason != str(error):
        message += f"\n - {error.failure_reason}"
    print(message, file=sys.stderr)


def main() -> int:
    args = parse_args()
    configure_logging(level=args.log_level)
    config = get_config()

    target = args.input
    if target is None:
        with FaaDofClient(config=config) as client:
            target = client.cycle_archive_url()
        logger.info("No input given; using current cycle archive %s", target)

    errors = {"count": 0}

    def on_error(error: DofError, line_number: int) -> None:
        errors["count"] += 1
        _report_line_error(error, line_number)

    started = time.perf_counter()
    try:
        container = asyncio.run(make_loader(target, config).load(on_error))
    except Exception as exc:  # noqa: BLE001 - report a stable code, then exit non-zero
        info = classify_load_error(exc)
        print(f"Failed to load DOF data [{info.code}]: {info.message}", file=sys.stderr)
        return 1
    elapsed = time.perf_counter() - started

    formatter = make_formatter(args.format)
    if args.output:
        path = Path(args.output)
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("w", encoding="utf-8", newline="") as handle:
            formatter.format(container, errors["count"], elapsed, handle)
        print(f"Saved {args.format}: {path}", file=sys.stderr)
    else:
        formatter.format(container, errors["count"], elapsed, sys.stdout)
    return 0


if __name__ == "__main__":
    sys.exit(main())
