"""Chronological validation of a new manually entered trip."""

from typing import Iterable, List

from .analysis import actual_trips
from .trip_record import TripRecord


def check_chronology(records: Iterable[TripRecord], candidate: TripRecord) -> List[str]:
    """
    Check a new trip's odometer values against the trips around it.

    The neighbours are the closest trips before and after the candidate's
    timestamp; readings are not considered. Returns error messages, empty
    when the candidate fits.
    """
    errors = []
    start = candidate.start_odometer_km
    end = candidate.end_odometer_km

    if start is not None and end is not None and end <= start:
        errors.append("End odometer must be higher than start odometer")

    trips = [t for t in actual_trips(records) if t.id != candidate.id]
    before = [t for t in trips if t.timestamp < candidate.timestamp]
    after = [t for t in trips if t.timestamp > candidate.timestamp]

    if start is None:
        return errors

    if before:
        previous_km = before[-1].effective_end_odometer_km
        if previous_km and start < previous_km:
            errors.append(
                f"Odometer must be higher than the previous registration "
                f"({previous_km:,.0f} km)"
            )

    if after:
        next_km = after[0].start_odometer_km
        if next_km and start > next_km:
            errors.append(
                f"Odometer must be lower than the next registration ({next_km:,.0f} km)"
            )
        if next_km and end is not None and end > next_km:
            errors.append(
                f"End odometer must be lower than the next registration "
                f"({next_km:,.0f} km)"
            )

    return errors
