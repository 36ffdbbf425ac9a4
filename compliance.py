#!/usr/bin/env python3
"""
Check mileage compliance for every trip log in a directory.

Audits each vehicle for odometer gaps, rollbacks, missing trips and distance
mismatches, and lists the vehicles whose registrations need attention.
"""

import argparse
import logging
import sys
from pathlib import Path
from tabulate import tabulate
from typing import List

from mileage import (
    ComplianceReport,
    TripLog,
    check_fleet,
    load_trip_log,
    notification_priority,
    summarize,
)
from mileage.report import NOTIFY_ABOVE_UNACCOUNTED_KM, NOTIFY_BELOW_SCORE

logger = logging.getLogger("compliance")


def find_trip_logs(directory: Path) -> List[Path]:
    """Get all trip log YAML files in a directory."""
    return sorted(list(directory.glob("*.yaml")) + list(directory.glob("*.yml")))


def load_all(paths: List[Path], errors: dict) -> List[TripLog]:
    """Load trip logs, recording files that cannot be read."""
    trip_logs = []
    for path in paths:
        try:
            trip_logs.append(load_trip_log(path))
        except (OSError, ValueError) as e:
            logger.warning("Skipping %s: %s", path.name, e)
            errors[path.stem] = str(e)
    return trip_logs


def make_report_table(reports: List[ComplianceReport]) -> List[List[str]]:
    """Convert compliance reports to table rows."""
    return [
        [
            r.vehicle_id,
            str(r.compliance_score),
            f"{r.total_unaccounted_km:,}",
            str(len(r.deviations)),
            notification_priority(r),
        ]
        for r in reports
    ]


def main(argv=None):
    parser = argparse.ArgumentParser(description="Fleet mileage compliance check")
    parser.add_argument(
        "directory",
        type=Path,
        nargs="?",
        default=Path(__file__).parent / "vehicles",
        help="Directory of trip log YAML files (default: vehicles/)",
    )
    parser.add_argument(
        "--min-score",
        type=float,
        default=NOTIFY_BELOW_SCORE,
        help=f"Flag vehicles scoring below this (default: {NOTIFY_BELOW_SCORE})",
    )
    parser.add_argument(
        "--max-unaccounted",
        type=float,
        default=NOTIFY_ABOVE_UNACCOUNTED_KM,
        help=(
            "Flag vehicles with more unaccounted km than this "
            f"(default: {NOTIFY_ABOVE_UNACCOUNTED_KM})"
        ),
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Verbose logging")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if not args.directory.exists():
        print(f"Error: directory not found: {args.directory}")
        return 1

    paths = find_trip_logs(args.directory)
    if not paths:
        print(f"Warning: No YAML files found in {args.directory}")
        return 0

    load_errors: dict = {}
    trip_logs = load_all(paths, load_errors)
    result = check_fleet(trip_logs, args.min_score, args.max_unaccounted)

    print(f"Vehicles checked: {len(result.reports)}")
    print(f"With deviations: {len(result.with_deviations)}")
    print()

    if result.flagged:
        headers = ["Vehicle", "Score", "Unaccounted (km)", "Deviations", "Priority"]
        print("NEEDS ATTENTION:")
        print(tabulate(make_report_table(result.flagged), headers=headers, tablefmt="simple"))
        print()
        for report in result.flagged:
            print(f"  {report.vehicle_id}: {summarize(report)}")
        print()

    failed = {**load_errors, **result.errors}
    if failed:
        print("FAILED:")
        for vehicle_id, error in sorted(failed.items()):
            print(f"  {vehicle_id}: {error}")
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
