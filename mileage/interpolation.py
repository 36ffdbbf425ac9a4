"""
Odometer estimation by linear interpolation between readings.

Given a vehicle's confirmed odometer readings, estimate the odometer value at
any moment after the first reading:

- Bracketed by two readings: interpolate linearly in time
- After the last reading: hold the last value (no rate is known)
- Before the first reading: refuse (NO_PREVIOUS_READING)

Failures are returned as OdometerCalculationError values so a batch over many
vehicles can carry on past one that cannot be estimated.
"""

import logging
import math
from dataclasses import dataclass, replace
from enum import Enum
from typing import Iterable, List, Optional, Tuple, Union

from .calculations import round_half_up, sort_chronologically
from .odometer_reading import OdometerReading
from .readings import extract_readings
from .trip_record import TripRecord

logger = logging.getLogger(__name__)


class ErrorCode(Enum):
    NO_PREVIOUS_READING = "no_previous_reading"
    INVALID_TIMESTAMP = "invalid_timestamp"
    CALCULATION_ERROR = "calculation_error"


@dataclass(frozen=True)
class OdometerCalculationError:
    """Why an estimate could not be made."""

    code: ErrorCode
    message: str


@dataclass(frozen=True)
class InterpolationResult:
    """Estimated odometer values plus the readings they were derived from."""

    start_odometer_km: int
    previous_reading: OdometerReading
    end_odometer_km: Optional[int] = None
    next_reading: Optional[OdometerReading] = None

    @property
    def method(self) -> str:
        return "linear" if self.next_reading is not None else "flat"

    def based_on(self) -> dict:
        """Provenance for storing alongside an auto-calculated trip."""
        return {
            "previousReadingId": self.previous_reading.id,
            "nextReadingId": self.next_reading.id if self.next_reading else None,
            "interpolationMethod": self.method,
        }


EstimateOutcome = Union[InterpolationResult, OdometerCalculationError]


def is_calculation_error(result: EstimateOutcome) -> bool:
    return isinstance(result, OdometerCalculationError)


def find_bracketing_readings(
    readings: List[OdometerReading], timestamp: int
) -> Tuple[Optional[OdometerReading], Optional[OdometerReading]]:
    """
    Find the readings immediately around a timestamp.

    Expects readings sorted oldest first. A reading exactly at the timestamp
    counts as the previous one.
    """
    previous = None
    following = None
    for reading in readings:
        if reading.timestamp <= timestamp:
            previous = reading
        elif following is None:
            following = reading
    return previous, following


def _has_non_finite(
    readings: List[OdometerReading],
    target_timestamp: float,
    trip_distance_km: Optional[float],
) -> bool:
    values = [target_timestamp]
    values.extend(r.odometer_km for r in readings)
    values.extend(r.timestamp for r in readings)
    if trip_distance_km is not None:
        values.append(trip_distance_km)
    try:
        return not all(math.isfinite(v) for v in values)
    except TypeError:
        return True


def estimate_odometer(
    readings: Iterable[OdometerReading],
    target_timestamp: int,
    trip_distance_km: Optional[float] = None,
) -> EstimateOutcome:
    """
    Estimate the odometer at target_timestamp.

    If trip_distance_km is positive the end odometer is estimated as well.
    Both values are rounded to whole kilometres, like a real odometer.
    """
    readings = sort_chronologically(readings)

    if _has_non_finite(readings, target_timestamp, trip_distance_km):
        return OdometerCalculationError(
            ErrorCode.CALCULATION_ERROR,
            "Odometer estimate needs finite timestamps, readings and distance.",
        )

    previous, following = find_bracketing_readings(readings, target_timestamp)

    if previous is None:
        return OdometerCalculationError(
            ErrorCode.NO_PREVIOUS_READING,
            "No odometer reading at or before this moment. "
            "Add an odometer reading first.",
        )

    if following is not None:
        total_time = following.timestamp - previous.timestamp
        if total_time <= 0:
            return OdometerCalculationError(
                ErrorCode.INVALID_TIMESTAMP,
                f"Readings {previous.id} and {following.id} share a timestamp.",
            )
        total_km = following.odometer_km - previous.odometer_km
        elapsed = target_timestamp - previous.timestamp
        start_km = previous.odometer_km + total_km * (elapsed / total_time)
    else:
        start_km = previous.odometer_km

    end_km = None
    if trip_distance_km is not None and trip_distance_km > 0:
        end_km = start_km + trip_distance_km

    if not math.isfinite(start_km) or (end_km is not None and not math.isfinite(end_km)):
        return OdometerCalculationError(
            ErrorCode.CALCULATION_ERROR, "Odometer estimate is not a finite number."
        )

    result = InterpolationResult(
        start_odometer_km=round_half_up(start_km),
        previous_reading=previous,
        end_odometer_km=round_half_up(end_km) if end_km is not None else None,
        next_reading=following,
    )
    logger.debug(
        "Estimated %s km at %s (%s, from %s)",
        result.start_odometer_km,
        target_timestamp,
        result.method,
        previous.id,
    )
    return result


def expected_odometer(
    readings: Iterable[OdometerReading], timestamp: int
) -> Optional[int]:
    """Expected odometer at a moment, or None when it cannot be estimated."""
    result = estimate_odometer(readings, timestamp)
    if is_calculation_error(result):
        return None
    return result.start_odometer_km


def fill_trip_odometer(
    records: Iterable[TripRecord], trip: TripRecord
) -> Union[TripRecord, OdometerCalculationError]:
    """
    Auto-calculate mode: fill a trip's odometer values from the readings.

    Trips that already have a non-zero start odometer are returned unchanged.
    A distance overrides any entered end odometer; an entered end odometer
    below the calculated start is a CALCULATION_ERROR.
    """
    if trip.start_odometer_km:
        return trip
    result = estimate_odometer(
        extract_readings(records), trip.timestamp, trip.distance_km
    )
    if is_calculation_error(result):
        return result
    end_km = result.end_odometer_km
    if end_km is None:
        end_km = trip.end_odometer_km
    if end_km is not None and end_km < result.start_odometer_km:
        return OdometerCalculationError(
            ErrorCode.CALCULATION_ERROR,
            f"End odometer {end_km:g} km is below the calculated start "
            f"{result.start_odometer_km} km.",
        )
    return replace(
        trip,
        start_odometer_km=result.start_odometer_km,
        end_odometer_km=end_km,
        odometer_calculated=True,
    )
