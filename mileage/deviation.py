"""Deviation types found when auditing a vehicle's trip history."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict


class DeviationType(Enum):
    ODOMETER_ROLLBACK = "odometer_rollback"
    ODOMETER_GAP = "odometer_gap"
    MISSING_TRIPS = "missing_trips"
    DISTANCE_MISMATCH = "distance_mismatch"


class Severity(Enum):
    """Deviation severity. Higher value = more serious."""

    LOW = 1
    MEDIUM = 2
    HIGH = 3


@dataclass(frozen=True)
class Deviation:
    """A single finding for a pair of consecutive trips."""

    type: DeviationType
    severity: Severity
    description: str
    details: Dict[str, Any] = field(default_factory=dict)
