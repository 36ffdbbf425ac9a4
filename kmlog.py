#!/usr/bin/env python3
"""
Unified CLI for mileage registration.

Commands:
  readings     - List standalone odometer readings
  trips        - View trip history
  estimate     - Estimate the odometer at a moment
  audit        - Check trips for compliance deviations
  incomplete   - List trips still missing an end odometer
  log-trip     - Add a new trip
  log-reading  - Add a new odometer reading
  delete       - Remove a record by id
  init         - Create an empty trip log for a vehicle
"""

import argparse
import logging
import sys
import uuid
from datetime import datetime
from pathlib import Path
from tabulate import tabulate
from typing import List, Optional

from dateutil import tz

from mileage import (
    ComplianceReport,
    ErrorCode,
    RecordKind,
    TripRecord,
    VehicleInfo,
    check_chronology,
    fill_trip_odometer,
    format_timestamp,
    is_calculation_error,
    load_trip_log,
    notification_priority,
    parse_timestamp,
    save_record,
    summarize,
)
from mileage.interpolation import EstimateOutcome
from mileage.loader import create_trip_log, delete_record
from mileage.odometer_reading import OdometerReading

logger = logging.getLogger("kmlog")

# =============================================================================
# Formatting helpers
# =============================================================================


def format_km(km: Optional[float]) -> str:
    """Format kilometres for display."""
    return f"{km:,.0f}" if km is not None else "-"


def format_when(ms: Optional[int]) -> str:
    """Format an epoch-millisecond timestamp for display (UTC)."""
    return format_timestamp(ms, "%Y-%m-%d %H:%M") if ms is not None else "-"


def truncate(text: Optional[str], max_len: int = 30) -> str:
    """Truncate text with ellipsis if too long."""
    if text is None:
        return "-"
    if len(text) <= max_len:
        return text
    return text[: max_len - 3] + "..."


def now_ms() -> int:
    return int(datetime.now(tz=tz.UTC).timestamp() * 1000)


def describe_estimate(result: EstimateOutcome) -> str:
    """Human-readable outcome of an odometer estimate."""
    if is_calculation_error(result):
        if result.code is ErrorCode.NO_PREVIOUS_READING:
            return "Cannot estimate, no baseline reading yet."
        return f"Cannot estimate: {result.message}"

    text = f"{format_km(result.start_odometer_km)} km"
    if result.end_odometer_km is not None:
        text += f" -> {format_km(result.end_odometer_km)} km"
    prev = result.previous_reading
    text += f" ({result.method}, from {prev.id} @ {format_km(prev.odometer_km)} km"
    if result.next_reading is not None:
        nxt = result.next_reading
        text += f" and {nxt.id} @ {format_km(nxt.odometer_km)} km"
    return text + ")"


def describe_provenance(based_on: dict) -> str:
    """Which readings an auto-calculated odometer came from."""
    ids = based_on["previousReadingId"]
    if based_on["nextReadingId"] is not None:
        ids += f" and {based_on['nextReadingId']}"
    return f"{ids} ({based_on['interpolationMethod']})"


# =============================================================================
# Readings command
# =============================================================================


def make_readings_table(readings: List[OdometerReading]) -> List[List[str]]:
    """Convert odometer readings to table rows."""
    return [
        [format_when(r.timestamp), format_km(r.odometer_km), r.id] for r in readings
    ]


def cmd_readings(args):
    """List standalone odometer readings."""
    trip_log = load_trip_log(args.trip_log)
    readings = trip_log.readings

    print(f"Vehicle: {trip_log.vehicle.name}")
    print(f"Readings: {len(readings)}")
    print()

    if not readings:
        print("No odometer readings found.")
        return 0

    headers = ["Date", "Odometer (km)", "Id"]
    print(tabulate(make_readings_table(readings), headers=headers, tablefmt="simple"))
    return 0


# =============================================================================
# Trips command
# =============================================================================


def make_trips_table(trips: List[TripRecord]) -> List[List[str]]:
    """Convert trip records to table rows."""
    rows = []
    for trip in trips:
        route = "-"
        if trip.departure or trip.destination:
            route = f"{trip.departure or '?'} -> {trip.destination or '?'}"
        rows.append(
            [
                format_when(trip.timestamp),
                format_km(trip.start_odometer_km),
                format_km(trip.end_odometer_km),
                format_km(trip.distance_km),
                truncate(route),
                "auto" if trip.odometer_calculated else "",
            ]
        )
    return rows


def cmd_trips(args):
    """View trip history."""
    trip_log = load_trip_log(args.trip_log)

    records = trip_log.get_records_sorted(sort_by=args.sort, reverse=not args.asc)
    trips = [r for r in records if not r.is_pure_reading]

    if args.since:
        since = parse_timestamp(args.since)
        trips = [t for t in trips if t.timestamp >= since]

    total_km = sum(t.distance_km for t in trips if t.distance_km is not None)

    print(f"Vehicle: {trip_log.vehicle.name}")
    print(f"Latest odometer: {format_km(trip_log.latest_odometer_km)} km")
    print(f"Total trips: {len(trip_log.trips)}")
    if args.since:
        print(f"Showing: {len(trips)} (filtered)")
    if total_km > 0:
        print(f"Total distance: {format_km(total_km)} km")
    print()

    if not trips:
        print("No trips found.")
        return 0

    headers = ["Date", "Start (km)", "End (km)", "Distance (km)", "Route", "Odometer"]
    print(tabulate(make_trips_table(trips), headers=headers, tablefmt="simple"))
    return 0


# =============================================================================
# Estimate command
# =============================================================================


def cmd_estimate(args):
    """Estimate the odometer at a moment."""
    trip_log = load_trip_log(args.trip_log)
    when = parse_timestamp(args.when)
    result = trip_log.estimate_odometer(when, args.distance)

    print(f"Vehicle: {trip_log.vehicle.name}")
    print(f"At {format_when(when)}: {describe_estimate(result)}")
    return 1 if is_calculation_error(result) else 0


# =============================================================================
# Audit command
# =============================================================================


def make_deviation_table(report: ComplianceReport) -> List[List[str]]:
    """Convert a report's deviations to table rows."""
    rows = []
    for deviation in report.deviations:
        details = deviation.details
        when = details.get("timestamp", details.get("fromTimestamp"))
        rows.append(
            [
                deviation.severity.name,
                deviation.type.value,
                format_when(when),
                details.get("tripId", "-"),
                deviation.description,
            ]
        )
    return rows


def cmd_audit(args):
    """Check trips for compliance deviations."""
    trip_log = load_trip_log(args.trip_log)
    report = trip_log.compliance_report()

    print(f"Vehicle: {trip_log.vehicle.name}")
    print(f"Trips: {len(trip_log.trips)}")
    print(f"Compliance score: {report.compliance_score}/100")
    print(f"Unaccounted: {format_km(report.total_unaccounted_km)} km")
    print()

    if not report.deviations:
        print("No deviations found.")
        return 0

    headers = ["Severity", "Type", "Date", "Trip", "Description"]
    print(tabulate(make_deviation_table(report), headers=headers, tablefmt="simple"))
    print()
    print(f"{summarize(report)} (priority: {notification_priority(report)})")
    return 0


# =============================================================================
# Incomplete command
# =============================================================================


def cmd_incomplete(args):
    """List trips still missing an end odometer."""
    trip_log = load_trip_log(args.trip_log)
    trips = trip_log.incomplete_trips(now_ms())

    print(f"Vehicle: {trip_log.vehicle.name}")
    print(f"Incomplete trips: {len(trips)}")
    print()

    if trips:
        headers = ["Date", "Start (km)", "End (km)", "Distance (km)", "Route", "Odometer"]
        print(tabulate(make_trips_table(trips), headers=headers, tablefmt="simple"))
    return 0


# =============================================================================
# Log commands
# =============================================================================


def new_record_id() -> str:
    return uuid.uuid4().hex[:12]


def cmd_log_trip(args):
    """Add a new trip."""
    trip_log = load_trip_log(args.trip_log)
    when = parse_timestamp(args.date) if args.date else now_ms()

    try:
        trip = TripRecord(
            id=new_record_id(),
            timestamp=when,
            kind=RecordKind.TRIP,
            start_odometer_km=args.start,
            end_odometer_km=args.end,
            distance_km=args.distance,
            departure=args.departure,
            destination=args.destination,
        )
    except ValueError as e:
        print(f"Error: {e}")
        return 1

    provenance = None
    if args.auto:
        filled = fill_trip_odometer(trip_log.records, trip)
        if is_calculation_error(filled):
            print(f"Error: {describe_estimate(filled)}")
            return 1
        if filled is not trip:
            provenance = trip_log.estimate_odometer(trip.timestamp).based_on()
        trip = filled
    else:
        errors = check_chronology(trip_log.records, trip)
        if errors:
            for error in errors:
                print(f"Error: {error}")
            return 1

    print(f"Adding trip to {args.trip_log}:")
    print(f"  Date:     {format_when(trip.timestamp)}")
    print(f"  Start:    {format_km(trip.start_odometer_km)} km")
    print(f"  End:      {format_km(trip.end_odometer_km)} km")
    if trip.distance_km is not None:
        print(f"  Distance: {format_km(trip.distance_km)} km")
    if provenance is not None:
        print(f"  (odometer calculated from {describe_provenance(provenance)})")
    print()

    if args.dry_run:
        print("(dry run - no changes made)")
        return 0

    save_record(args.trip_log, trip)
    print("Trip saved.")
    return 0


def cmd_log_reading(args):
    """Add a new odometer reading."""
    trip_log = load_trip_log(args.trip_log)
    when = parse_timestamp(args.date) if args.date else now_ms()

    try:
        reading = TripRecord(
            id=new_record_id(),
            timestamp=when,
            kind=RecordKind.READING,
            start_odometer_km=args.odometer,
        )
    except ValueError as e:
        print(f"Error: {e}")
        return 1

    if any(r.timestamp == when for r in trip_log.readings):
        print(f"Error: A reading already exists at {format_when(when)}")
        return 1

    expected = trip_log.estimate_odometer(when)
    print(f"Vehicle: {trip_log.vehicle.name}")
    print(f"Expected: {describe_estimate(expected)}")
    print(f"New reading: {format_km(args.odometer)} km at {format_when(when)}")
    print()

    if args.dry_run:
        print("(dry run - no changes made)")
        return 0

    save_record(args.trip_log, reading)
    print("Reading saved.")
    return 0


def cmd_delete(args):
    """Remove a record by id."""
    trip_log = load_trip_log(args.trip_log)
    record = trip_log.get_record(args.record_id)
    if record is None:
        print(f"Error: No record with id {args.record_id}")
        return 1

    print(f"Removing {record.kind.value} {record.id} from {args.trip_log}:")
    print(f"  Date:     {format_when(record.timestamp)}")
    print(f"  Odometer: {format_km(record.start_odometer_km)} km")
    print()

    if args.dry_run:
        print("(dry run - no changes made)")
        return 0

    delete_record(args.trip_log, record.id)
    print("Record deleted.")
    return 0


def cmd_init(args):
    """Create an empty trip log for a vehicle."""
    if args.trip_log.exists():
        print(f"Error: File already exists: {args.trip_log}")
        return 1

    vehicle = VehicleInfo(
        args.id or args.trip_log.stem, args.plate, args.make, args.model
    )
    create_trip_log(args.trip_log, vehicle)
    print(f"Created trip log for {vehicle.name}: {args.trip_log}")
    return 0


# =============================================================================
# Main
# =============================================================================


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Mileage registration",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s vehicles/golf.yaml readings
  %(prog)s vehicles/golf.yaml trips --since 2025-01-01
  %(prog)s vehicles/golf.yaml estimate 2025-03-14T09:30 --distance 42
  %(prog)s vehicles/golf.yaml audit
  %(prog)s vehicles/golf.yaml log-trip --start 48210 --end 48252 \\
      --distance 42 --departure Utrecht --destination Amersfoort
  %(prog)s vehicles/golf.yaml log-trip --auto --distance 42
  %(prog)s vehicles/golf.yaml log-reading 48300
  %(prog)s vehicles/golf.yaml delete 3f9c2a1b7d04
  %(prog)s vehicles/polo.yaml init --plate AB-123-C --make Volkswagen --model Polo
""",
    )
    parser.add_argument(
        "trip_log",
        type=Path,
        help="Path to vehicle trip log YAML file",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log calculation details",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("readings", help="List standalone odometer readings")

    trips_parser = subparsers.add_parser("trips", help="View trip history")
    trips_parser.add_argument(
        "--since",
        type=str,
        help="Show only trips since date (YYYY-MM-DD)",
    )
    trips_parser.add_argument(
        "--sort",
        choices=["date", "odometer", "distance"],
        default="date",
        help="Sort order (default: date)",
    )
    trips_parser.add_argument(
        "--asc",
        action="store_true",
        help="Sort ascending instead of descending",
    )

    estimate_parser = subparsers.add_parser(
        "estimate", help="Estimate the odometer at a moment"
    )
    estimate_parser.add_argument(
        "when",
        type=str,
        help="Moment in ISO-8601 format (e.g., 2025-03-14T09:30)",
    )
    estimate_parser.add_argument(
        "--distance",
        type=float,
        help="Trip distance in km, to also estimate the end odometer",
    )

    subparsers.add_parser("audit", help="Check trips for compliance deviations")
    subparsers.add_parser(
        "incomplete", help="List trips still missing an end odometer"
    )

    trip_parser = subparsers.add_parser("log-trip", help="Add a new trip")
    trip_parser.add_argument("--date", type=str, help="Trip start (default: now)")
    trip_parser.add_argument("--start", type=float, help="Start odometer (km)")
    trip_parser.add_argument("--end", type=float, help="End odometer (km)")
    trip_parser.add_argument("--distance", type=float, help="Trip distance (km)")
    trip_parser.add_argument("--departure", type=str, help="Departure address")
    trip_parser.add_argument("--destination", type=str, help="Destination address")
    trip_parser.add_argument(
        "--auto",
        action="store_true",
        help="Calculate the odometer from readings instead of checking it",
    )
    trip_parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Show what would be added without saving",
    )

    reading_parser = subparsers.add_parser(
        "log-reading", help="Add a new odometer reading"
    )
    reading_parser.add_argument("odometer", type=float, help="Odometer value (km)")
    reading_parser.add_argument("--date", type=str, help="Reading date (default: now)")
    reading_parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Show what would be added without saving",
    )

    delete_parser = subparsers.add_parser("delete", help="Remove a record by id")
    delete_parser.add_argument("record_id", type=str, help="Id of the record")
    delete_parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Show what would be removed without saving",
    )

    init_parser = subparsers.add_parser(
        "init", help="Create an empty trip log for a vehicle"
    )
    init_parser.add_argument("--id", type=str, help="Vehicle id (default: file name)")
    init_parser.add_argument("--plate", type=str, help="License plate")
    init_parser.add_argument("--make", type=str, help="Vehicle make")
    init_parser.add_argument("--model", type=str, help="Vehicle model")

    return parser


COMMANDS = {
    "readings": cmd_readings,
    "trips": cmd_trips,
    "estimate": cmd_estimate,
    "audit": cmd_audit,
    "incomplete": cmd_incomplete,
    "log-trip": cmd_log_trip,
    "log-reading": cmd_log_reading,
    "delete": cmd_delete,
    "init": cmd_init,
}


def main(argv=None):
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if args.command != "init" and not args.trip_log.exists():
        print(f"Error: File not found: {args.trip_log}")
        return 1

    try:
        return COMMANDS[args.command](args)
    except (OSError, ValueError) as e:
        logger.debug("Command %s failed", args.command, exc_info=True)
        print(f"Error: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main() or 0)
