"""TripLog class - the aggregate of a vehicle and its registrations."""

from typing import List, Optional

from .analysis import actual_trips, find_incomplete_trips
from .calculations import sort_chronologically
from .interpolation import EstimateOutcome, estimate_odometer
from .odometer_reading import OdometerReading
from .readings import extract_readings
from .report import ComplianceReport, build_compliance_report
from .trip_record import TripRecord
from .vehicle_info import VehicleInfo


class TripLog:
    """Complete trip log: vehicle identification plus all registrations."""

    def __init__(self, vehicle: VehicleInfo, records: Optional[List[TripRecord]] = None):
        self.vehicle = vehicle
        self.records = records or []

    @property
    def readings(self) -> List[OdometerReading]:
        return extract_readings(self.records)

    @property
    def trips(self) -> List[TripRecord]:
        return actual_trips(self.records)

    @property
    def latest_odometer_km(self) -> Optional[float]:
        """Highest odometer value on record, from readings and trips alike."""
        values = [
            v
            for r in self.records
            for v in (r.start_odometer_km, r.end_odometer_km)
            if v is not None
        ]
        return max(values) if values else None

    def get_record(self, record_id: str) -> Optional[TripRecord]:
        """Find a record by its id."""
        for record in self.records:
            if record.id == record_id:
                return record
        return None

    def get_records_sorted(
        self, sort_by: str = "date", reverse: bool = True
    ) -> List[TripRecord]:
        """
        Get records sorted by specified field.

        Args:
            sort_by: "date", "odometer", or "distance"
            reverse: If True, newest/highest first (default)
        """
        if sort_by == "date":
            ordered = sort_chronologically(self.records)
            return ordered[::-1] if reverse else ordered
        elif sort_by == "odometer":
            return sorted(
                self.records, key=lambda r: r.start_odometer_km or 0, reverse=reverse
            )
        elif sort_by == "distance":
            return sorted(self.records, key=lambda r: r.distance_km or 0, reverse=reverse)
        return self.records

    def estimate_odometer(
        self, timestamp: int, trip_distance_km: Optional[float] = None
    ) -> EstimateOutcome:
        return estimate_odometer(self.readings, timestamp, trip_distance_km)

    def compliance_report(self) -> ComplianceReport:
        return build_compliance_report(self.vehicle.id, self.records)

    def incomplete_trips(self, now_ms: int) -> List[TripRecord]:
        return find_incomplete_trips(self.records, now_ms)
