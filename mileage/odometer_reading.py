"""OdometerReading dataclass, the projection of a pure reading record."""

from dataclasses import dataclass


@dataclass(frozen=True)
class OdometerReading:
    """A confirmed odometer value at a point in time."""

    id: str
    timestamp: int
    odometer_km: float
