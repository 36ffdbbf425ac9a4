"""
Batch compliance check across many vehicles.

Each vehicle is audited on its own; one vehicle failing (bad data, an
unexpected error) is logged and recorded without stopping the others.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, List

from .report import (
    NOTIFY_ABOVE_UNACCOUNTED_KM,
    NOTIFY_BELOW_SCORE,
    ComplianceReport,
    needs_notification,
)
from .trip_log import TripLog

logger = logging.getLogger(__name__)


@dataclass
class FleetCheckResult:
    """Reports per vehicle plus the vehicles that could not be checked."""

    reports: List[ComplianceReport] = field(default_factory=list)
    flagged: List[ComplianceReport] = field(default_factory=list)
    errors: Dict[str, str] = field(default_factory=dict)

    @property
    def with_deviations(self) -> List[ComplianceReport]:
        return [r for r in self.reports if r.deviations]


def check_fleet(
    trip_logs: Iterable[TripLog],
    min_score: float = NOTIFY_BELOW_SCORE,
    max_unaccounted_km: float = NOTIFY_ABOVE_UNACCOUNTED_KM,
) -> FleetCheckResult:
    """Audit every trip log and flag those that warrant a notification."""
    result = FleetCheckResult()
    for trip_log in trip_logs:
        vehicle_id = trip_log.vehicle.id
        try:
            report = trip_log.compliance_report()
        except Exception as e:
            logger.exception("Error analyzing vehicle %s", vehicle_id)
            result.errors[vehicle_id] = str(e)
            continue
        result.reports.append(report)
        if needs_notification(report, min_score, max_unaccounted_km):
            result.flagged.append(report)

    logger.info(
        "Compliance check complete: %d vehicle(s) with deviations, %d flagged, %d failed",
        len(result.with_deviations),
        len(result.flagged),
        len(result.errors),
    )
    return result
