"""RecordKind enum distinguishing odometer readings from trips."""

from enum import Enum


class RecordKind(Enum):
    """What a registration represents."""

    READING = "reading"  # Odometer snapshot, no route
    TRIP = "trip"
