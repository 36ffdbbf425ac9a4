"""TripRecord dataclass for trip and odometer registrations."""

import math
from dataclasses import dataclass
from typing import Optional

from .record_kind import RecordKind

# Address text older registrations use to mark a standalone odometer reading
READING_PLACEHOLDER = "Kilometerstand registratie"


def infer_kind(departure: Optional[str], destination: Optional[str]) -> RecordKind:
    """Classify an untagged registration by its placeholder addresses."""
    if departure == READING_PLACEHOLDER and destination == READING_PLACEHOLDER:
        return RecordKind.READING
    return RecordKind.TRIP


def _check_km(name: str, value: Optional[float]) -> None:
    if value is None:
        return
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"{name} must be a number, got {value!r}")
    if not math.isfinite(value) or value < 0:
        raise ValueError(f"{name} must be a non-negative number, got {value!r}")


@dataclass(frozen=True)
class TripRecord:
    """
    One registration for a vehicle: either a trip or an odometer reading.

    Values are validated once, here. A reading carries its odometer value in
    start_odometer_km.
    """

    id: str
    timestamp: int
    kind: RecordKind = RecordKind.TRIP
    start_odometer_km: Optional[float] = None
    end_odometer_km: Optional[float] = None
    distance_km: Optional[float] = None
    departure: Optional[str] = None
    destination: Optional[str] = None
    odometer_calculated: bool = False

    def __post_init__(self):
        _check_km("start_odometer_km", self.start_odometer_km)
        _check_km("end_odometer_km", self.end_odometer_km)
        _check_km("distance_km", self.distance_km)
        if (
            self.start_odometer_km is not None
            and self.end_odometer_km is not None
            and self.end_odometer_km < self.start_odometer_km
        ):
            raise ValueError(
                f"Record {self.id}: end odometer {self.end_odometer_km} "
                f"is below start odometer {self.start_odometer_km}"
            )
        if self.kind is RecordKind.READING and self.start_odometer_km is None:
            raise ValueError(f"Reading {self.id} has no odometer value")

    @property
    def is_pure_reading(self) -> bool:
        return self.kind is RecordKind.READING

    @property
    def effective_end_odometer_km(self) -> Optional[float]:
        """End odometer, falling back to the start odometer."""
        if self.end_odometer_km is not None:
            return self.end_odometer_km
        return self.start_odometer_km
