"""ComplianceReport and the notification policy applied to it."""

from dataclasses import dataclass, field
from typing import Iterable, List

from .analysis import analyze_vehicle
from .calculations import round_half_up
from .deviation import Deviation, Severity
from .scoring import compliance_score
from .trip_record import TripRecord

NOTIFY_BELOW_SCORE = 80
NOTIFY_ABOVE_UNACCOUNTED_KM = 100
URGENT_BELOW_SCORE = 60


@dataclass(frozen=True)
class ComplianceReport:
    """Audit outcome for one vehicle."""

    vehicle_id: str
    deviations: List[Deviation] = field(default_factory=list)
    total_unaccounted_km: int = 0
    compliance_score: int = 100

    def count(self, severity: Severity) -> int:
        return sum(1 for d in self.deviations if d.severity is severity)


def build_compliance_report(
    vehicle_id: str, records: Iterable[TripRecord]
) -> ComplianceReport:
    """Analyze a vehicle's registrations and score the result."""
    result = analyze_vehicle(records)
    return ComplianceReport(
        vehicle_id=vehicle_id,
        deviations=result.deviations,
        total_unaccounted_km=round_half_up(result.total_unaccounted_km),
        compliance_score=compliance_score(
            result.deviations, result.total_unaccounted_km
        ),
    )


def needs_notification(
    report: ComplianceReport,
    min_score: float = NOTIFY_BELOW_SCORE,
    max_unaccounted_km: float = NOTIFY_ABOVE_UNACCOUNTED_KM,
) -> bool:
    """Whether the deviations are significant enough to tell the driver."""
    return (
        report.compliance_score < min_score
        or report.total_unaccounted_km > max_unaccounted_km
    )


def notification_priority(report: ComplianceReport) -> str:
    return "urgent" if report.compliance_score < URGENT_BELOW_SCORE else "high"


def summarize(report: ComplianceReport) -> str:
    """One-line description of what is wrong with the registrations."""
    parts = []
    if report.total_unaccounted_km > 0:
        parts.append(f"{report.total_unaccounted_km} km unaccounted for.")
    high = report.count(Severity.HIGH)
    if high:
        parts.append(f"{high} serious deviation(s) found.")
    medium = report.count(Severity.MEDIUM)
    if medium:
        parts.append(f"{medium} deviation(s) found.")
    if not parts:
        return "No deviations found."
    parts.append("Check your mileage registration for tax compliance.")
    return " ".join(parts)
