#!/usr/bin/env python3
"""Tests for the TripLog aggregate and VehicleInfo."""
import pytest

from mileage import ErrorCode, RecordKind, TripLog, TripRecord, VehicleInfo
from mileage.calculations import MS_PER_DAY


class TestVehicleInfo:
    """Tests for VehicleInfo.name."""

    def test_make_and_model(self):
        assert VehicleInfo("golf", "GX-482-K", "Volkswagen", "Golf").name == "Volkswagen Golf"

    def test_falls_back_to_plate(self):
        assert VehicleInfo("golf", "GX-482-K").name == "GX-482-K"

    def test_falls_back_to_id(self):
        assert VehicleInfo("golf").name == "golf"


@pytest.fixture
def trip_log():
    records = [
        TripRecord("t2", 3 * MS_PER_DAY, start_odometer_km=1080, end_odometer_km=1100,
                   distance_km=20),
        TripRecord("r1", 0, kind=RecordKind.READING, start_odometer_km=900),
        TripRecord("t1", 2 * MS_PER_DAY, start_odometer_km=925, end_odometer_km=1000,
                   distance_km=75),
        TripRecord("r2", 4 * MS_PER_DAY, kind=RecordKind.READING, start_odometer_km=1120),
    ]
    return TripLog(VehicleInfo("golf", make="Volkswagen", model="Golf"), records)


class TestTripLog:
    """Tests for TripLog views and calculations."""

    def test_empty_records_default(self):
        assert TripLog(VehicleInfo("golf")).records == []

    def test_readings(self, trip_log):
        assert [r.id for r in trip_log.readings] == ["r1", "r2"]

    def test_trips_sorted(self, trip_log):
        assert [t.id for t in trip_log.trips] == ["t1", "t2"]

    def test_latest_odometer(self, trip_log):
        assert trip_log.latest_odometer_km == 1120

    def test_latest_odometer_empty(self):
        assert TripLog(VehicleInfo("golf")).latest_odometer_km is None

    def test_get_record(self, trip_log):
        assert trip_log.get_record("t1").distance_km == 75
        assert trip_log.get_record("missing") is None

    def test_sorted_by_date_newest_first(self, trip_log):
        ids = [r.id for r in trip_log.get_records_sorted()]
        assert ids == ["r2", "t2", "t1", "r1"]

    def test_sorted_by_date_ascending(self, trip_log):
        ids = [r.id for r in trip_log.get_records_sorted(reverse=False)]
        assert ids == ["r1", "t1", "t2", "r2"]

    def test_sorted_by_distance(self, trip_log):
        ids = [r.id for r in trip_log.get_records_sorted("distance")]
        assert ids[:2] == ["t1", "t2"]

    def test_estimate_odometer(self, trip_log):
        result = trip_log.estimate_odometer(2 * MS_PER_DAY, 10)
        assert result.start_odometer_km == 1010
        assert result.end_odometer_km == 1020

    def test_estimate_before_first_reading(self, trip_log):
        assert trip_log.estimate_odometer(-1).code is ErrorCode.NO_PREVIOUS_READING

    def test_compliance_report(self, trip_log):
        report = trip_log.compliance_report()
        assert report.vehicle_id == "golf"
        assert report.total_unaccounted_km == 5
        assert report.compliance_score == 95

    def test_incomplete_trips(self):
        records = [TripRecord("t1", 0, start_odometer_km=1000)]
        trip_log = TripLog(VehicleInfo("golf"), records)
        assert [t.id for t in trip_log.incomplete_trips(now_ms=2 * MS_PER_DAY)] == ["t1"]
