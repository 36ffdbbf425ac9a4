"""
Retrospective audit of a vehicle's trip history.

Consecutive trips are compared pairwise (oldest first, readings excluded):

1. Missing odometer data - nothing to compare, the pair is skipped
2. Rollback - next start below current end; gap/missing-trip checks skipped
3. Gap - odometer movement not covered by the recorded trip distance
4. Missing trips - a long silent period with a large odometer change
5. Incomplete trip - current trip has no end odometer
"""

import logging
from dataclasses import dataclass, field
from typing import Iterable, List, Optional

from .calculations import MS_PER_DAY, days_between, round_half_up, sort_chronologically
from .deviation import Deviation, DeviationType, Severity
from .trip_record import TripRecord

logger = logging.getLogger(__name__)

TOLERANCE_KM = 1  # absorbs rounding of odometer values
GAP_HIGH_KM = 50
GAP_MEDIUM_KM = 20
MISSING_TRIPS_MIN_DAYS = 7
MISSING_TRIPS_MIN_KM = 100
MISSING_TRIPS_HIGH_DAYS = 30
INCOMPLETE_MIN_AGE_MS = MS_PER_DAY


@dataclass(frozen=True)
class AnalysisResult:
    deviations: List[Deviation] = field(default_factory=list)
    total_unaccounted_km: float = 0


def gap_severity(gap_km: float) -> Severity:
    if gap_km > GAP_HIGH_KM:
        return Severity.HIGH
    if gap_km > GAP_MEDIUM_KM:
        return Severity.MEDIUM
    return Severity.LOW


def actual_trips(records: Iterable[TripRecord]) -> List[TripRecord]:
    """Trips only (no pure readings), oldest first."""
    return sort_chronologically(r for r in records if not r.is_pure_reading)


def _check_pair(current: TripRecord, following: TripRecord) -> tuple:
    """Return (deviations, unaccounted km) for one consecutive pair."""
    deviations = []
    unaccounted = 0.0

    current_km = current.effective_end_odometer_km
    next_km = following.start_odometer_km

    if current_km is None or next_km is None:
        missing = current if current_km is None else following
        deviations.append(
            Deviation(
                DeviationType.DISTANCE_MISMATCH,
                Severity.MEDIUM,
                "Trip without odometer reading",
                {"tripId": missing.id, "timestamp": missing.timestamp},
            )
        )
        return deviations, unaccounted

    if next_km < current_km:
        deviations.append(
            Deviation(
                DeviationType.ODOMETER_ROLLBACK,
                Severity.HIGH,
                "Odometer is lower than the previous registration",
                {
                    "tripId": following.id,
                    "timestamp": following.timestamp,
                    "odometerBefore": current_km,
                    "odometerAfter": next_km,
                    "difference": current_km - next_km,
                },
            )
        )
    else:
        odometer_delta = next_km - current_km
        recorded = current.distance_km or 0
        gap = odometer_delta - recorded

        if gap > TOLERANCE_KM:
            deviations.append(
                Deviation(
                    DeviationType.ODOMETER_GAP,
                    gap_severity(gap),
                    f"{round_half_up(gap)} km difference between odometer "
                    f"and recorded distance",
                    {
                        "tripId": current.id,
                        "timestamp": current.timestamp,
                        "odometerBefore": current_km,
                        "odometerAfter": next_km,
                        "recordedDistance": recorded,
                        "gap": round_half_up(gap),
                    },
                )
            )
            unaccounted += gap

        days = days_between(current.timestamp, following.timestamp)
        if days > MISSING_TRIPS_MIN_DAYS and odometer_delta > MISSING_TRIPS_MIN_KM:
            severity = Severity.HIGH if days > MISSING_TRIPS_HIGH_DAYS else Severity.MEDIUM
            deviations.append(
                Deviation(
                    DeviationType.MISSING_TRIPS,
                    severity,
                    f"{int(days)} days without registrations, "
                    f"but {odometer_delta:g} km driven",
                    {
                        "fromTimestamp": current.timestamp,
                        "toTimestamp": following.timestamp,
                        "days": int(days),
                        "kmDriven": odometer_delta,
                    },
                )
            )

    if current.end_odometer_km is None:
        deviations.append(
            Deviation(
                DeviationType.DISTANCE_MISMATCH,
                Severity.MEDIUM,
                "Trip without end reading",
                {
                    "tripId": current.id,
                    "timestamp": current.timestamp,
                    "hasStartOdometer": current.start_odometer_km is not None,
                    "hasEndOdometer": False,
                },
            )
        )

    return deviations, unaccounted


def analyze_vehicle(records: Iterable[TripRecord]) -> AnalysisResult:
    """
    Audit all registrations of one vehicle.

    Records may arrive in any order; pure readings are ignored. With fewer
    than two trips there is nothing to compare and the result is empty.
    """
    trips = actual_trips(records)
    if len(trips) < 2:
        return AnalysisResult()

    deviations: List[Deviation] = []
    total_unaccounted = 0.0
    for current, following in zip(trips, trips[1:]):
        pair_deviations, unaccounted = _check_pair(current, following)
        deviations.extend(pair_deviations)
        total_unaccounted += unaccounted

    logger.debug(
        "Analyzed %d trips: %d deviations, %.1f km unaccounted",
        len(trips),
        len(deviations),
        total_unaccounted,
    )
    return AnalysisResult(deviations, total_unaccounted)


def find_incomplete_trips(
    records: Iterable[TripRecord],
    now_ms: int,
    min_age_ms: Optional[int] = INCOMPLETE_MIN_AGE_MS,
) -> List[TripRecord]:
    """
    Trips still waiting for an end odometer.

    Trips younger than min_age_ms are left alone (the driver may still be on
    the road), as are trips whose odometer was auto-calculated.
    """
    incomplete = []
    for trip in actual_trips(records):
        if trip.odometer_calculated or trip.end_odometer_km is not None:
            continue
        if min_age_ms is not None and trip.timestamp > now_ms - min_age_ms:
            continue
        incomplete.append(trip)
    return incomplete
