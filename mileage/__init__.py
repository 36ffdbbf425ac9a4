"""
Mileage registration models and odometer reconciliation.

This package provides data models and calculations for a vehicle trip log:
- TripRecord: A trip or a standalone odometer reading
- OdometerReading: Confirmed odometer value at a point in time
- estimate_odometer: Odometer estimate by interpolation between readings
- analyze_vehicle: Audit of consecutive trips for deviations
- compliance_score: 0-100 summary of the audit
- TripLog: Main aggregate combining a vehicle and its records
"""

from .record_kind import RecordKind
from .trip_record import TripRecord, READING_PLACEHOLDER, infer_kind
from .odometer_reading import OdometerReading
from .vehicle_info import VehicleInfo
from .calculations import round_half_up, days_between, sort_chronologically
from .readings import extract_readings
from .interpolation import (
    ErrorCode,
    InterpolationResult,
    OdometerCalculationError,
    estimate_odometer,
    expected_odometer,
    fill_trip_odometer,
    is_calculation_error,
)
from .deviation import Deviation, DeviationType, Severity
from .analysis import AnalysisResult, analyze_vehicle, find_incomplete_trips
from .scoring import compliance_score
from .report import (
    ComplianceReport,
    build_compliance_report,
    needs_notification,
    notification_priority,
    summarize,
)
from .chronology import check_chronology
from .trip_log import TripLog
from .fleet import FleetCheckResult, check_fleet
from .loader import load_trip_log, save_record, parse_timestamp, format_timestamp

__all__ = [
    "RecordKind",
    "TripRecord",
    "READING_PLACEHOLDER",
    "infer_kind",
    "OdometerReading",
    "VehicleInfo",
    "round_half_up",
    "days_between",
    "sort_chronologically",
    "extract_readings",
    "ErrorCode",
    "InterpolationResult",
    "OdometerCalculationError",
    "estimate_odometer",
    "expected_odometer",
    "fill_trip_odometer",
    "is_calculation_error",
    "Deviation",
    "DeviationType",
    "Severity",
    "AnalysisResult",
    "analyze_vehicle",
    "find_incomplete_trips",
    "compliance_score",
    "ComplianceReport",
    "build_compliance_report",
    "needs_notification",
    "notification_priority",
    "summarize",
    "check_chronology",
    "TripLog",
    "FleetCheckResult",
    "check_fleet",
    "load_trip_log",
    "save_record",
    "parse_timestamp",
    "format_timestamp",
]
