"""Extract standalone odometer readings from a vehicle's registrations."""

from typing import Iterable, List

from .calculations import sort_chronologically
from .odometer_reading import OdometerReading
from .trip_record import TripRecord


def extract_readings(records: Iterable[TripRecord]) -> List[OdometerReading]:
    """Return the pure readings as OdometerReadings, oldest first."""
    readings = [
        OdometerReading(
            id=record.id,
            timestamp=record.timestamp,
            odometer_km=record.start_odometer_km,
        )
        for record in records
        if record.is_pure_reading
    ]
    return sort_chronologically(readings)
