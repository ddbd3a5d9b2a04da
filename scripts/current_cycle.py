from __future__ import annotations

import _bootstrap  # noqa: F401

import argparse

from faadof.cycle import Cycle
from faadof.ingestion.faa_client import FaaDofClient
from faadof.settings import get_config
from faadof.utils.time import parse_date, utc_today


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Show the DOF publication cycle covering a date.")
    parser.add_argument("--date", default=None, help="Date (ISO 8601). Default: today (UTC).")
    parser.add_argument(
        "--cycle",
        default=None,
        help="Inspect a cycle identifier (YYYYMMDD) instead of resolving a date.",
    )
    return parser.parse_args()


def main() -> None:
    args = parse_args()

    if args.cycle:
        cycle = Cycle.parse(args.cycle)
        if cycle is None:
            raise SystemExit(f"Invalid cycle identifier: {args.cycle!r} (expected YYYYMMDD)")
    else:
        day = parse_date(args.date) if args.date else utc_today()
        cycle = Cycle.covering(day)

    print(f"Cycle: {cycle}")
    print(f"Boundary: {'yes' if cycle.is_valid else 'no'}")
    if cycle.first_date is None:
        print("Effective: not a calendar date")
        return

    with FaaDofClient(config=get_config()) as client:
        url = client.cycle_archive_url(cycle)

    print(f"Effective: {cycle.first_date.isoformat()}")
    if cycle.expiration_date is not None:
        print(f"Expires: {cycle.expiration_date.isoformat()}")
    print(f"Last data date: {cycle.last_date.isoformat()}")
    print(f"Previous: {cycle.previous}  Next: {cycle.next}")
    print(f"Archive: {url}")


if __name__ == "__main__":
    main()
