#!/usr/bin/env python3
"""Tests for check_chronology."""
import pytest

from mileage import RecordKind, TripRecord, check_chronology


@pytest.fixture
def records():
    return [
        TripRecord("t1", 100, start_odometer_km=1000, end_odometer_km=1050),
        TripRecord("r1", 150, kind=RecordKind.READING, start_odometer_km=5000),
        TripRecord("t2", 300, start_odometer_km=1200, end_odometer_km=1250),
    ]


class TestCheckChronology:
    """Tests for validating a new trip against its neighbours."""

    def test_fits_between_trips(self, records):
        candidate = TripRecord("new", 200, start_odometer_km=1060, end_odometer_km=1100)
        assert check_chronology(records, candidate) == []

    def test_start_below_previous_end(self, records):
        candidate = TripRecord("new", 200, start_odometer_km=1040)
        errors = check_chronology(records, candidate)
        assert errors == ["Odometer must be higher than the previous registration (1,050 km)"]

    def test_start_above_next_start(self, records):
        candidate = TripRecord("new", 200, start_odometer_km=1300)
        errors = check_chronology(records, candidate)
        assert "Odometer must be lower than the next registration (1,200 km)" in errors

    def test_end_above_next_start(self, records):
        candidate = TripRecord("new", 200, start_odometer_km=1100, end_odometer_km=1210)
        errors = check_chronology(records, candidate)
        assert errors == ["End odometer must be lower than the next registration (1,200 km)"]

    def test_end_not_above_start(self, records):
        candidate = TripRecord("new", 200, start_odometer_km=1100, end_odometer_km=1100)
        assert "End odometer must be higher than start odometer" in check_chronology(
            records, candidate
        )

    def test_readings_are_not_neighbours(self, records):
        """The 5000 km reading does not make 1060 km look like a rollback."""
        candidate = TripRecord("new", 160, start_odometer_km=1060)
        assert check_chronology(records, candidate) == []

    def test_no_start_odometer(self, records):
        assert check_chronology(records, TripRecord("new", 200)) == []

    def test_empty_history(self):
        candidate = TripRecord("new", 200, start_odometer_km=10)
        assert check_chronology([], candidate) == []
