#!/usr/bin/env python3
"""Tests for validate_yaml schema validation."""

from validate_yaml import collect_files, load_schema, main, validate_trip_log_file

VALID = """
vehicle:
  id: golf
records:
  - id: r1
    kind: reading
    timestamp: 0
    odometerKm: 48000
"""


class TestLoadSchema:
    """Tests for load_schema function."""

    def test_returns_dict(self):
        schema = load_schema()
        assert isinstance(schema, dict)

    def test_has_expected_structure(self):
        schema = load_schema()
        assert "vehicle" in schema["properties"]
        assert "records" in schema["properties"]


class TestValidateTripLogFile:
    """Tests for validate_trip_log_file function."""

    def test_valid_minimal_returns_no_errors(self, tmp_path):
        """Valid minimal trip log returns empty error list."""
        path = tmp_path / "valid.yaml"
        path.write_text("""
vehicle:
  id: golf
  licensePlate: GX-482-K

records:
  - id: r1
    kind: reading
    timestamp: '2025-01-01T08:00:00Z'
    odometerKm: 48000
  - id: t1
    timestamp: 1735722000000
    startOdometerKm: 48000
    endOdometerKm: 48042
    distanceKm: 42
""")
        schema = load_schema()
        errors = validate_trip_log_file(path, schema)
        assert errors == []

    def test_unquoted_timestamp_is_valid(self, tmp_path):
        path = tmp_path / "valid.yaml"
        path.write_text("""
vehicle:
  id: golf
records:
  - id: r1
    kind: reading
    timestamp: 2025-01-01 08:00:00
    odometerKm: 48000
""")
        assert validate_trip_log_file(path, load_schema()) == []

    def test_negative_odometer_returns_errors(self, tmp_path):
        """Negative odometer value returns schema validation errors."""
        path = tmp_path / "invalid.yaml"
        path.write_text("""
vehicle:
  id: golf
records:
  - id: t1
    timestamp: 0
    startOdometerKm: -5
""")
        errors = validate_trip_log_file(path, load_schema())
        assert any("Schema validation" in e for e in errors)
        assert any("records.0.startOdometerKm" in e for e in errors)

    def test_unknown_kind_returns_errors(self, tmp_path):
        path = tmp_path / "invalid.yaml"
        path.write_text("""
vehicle:
  id: golf
records:
  - id: t1
    kind: refuel
    timestamp: 0
""")
        assert validate_trip_log_file(path, load_schema()) != []

    def test_invalid_yaml_returns_parse_error(self, tmp_path):
        """Invalid YAML syntax returns YAML parse error."""
        path = tmp_path / "bad.yaml"
        path.write_text("""
vehicle:
  id: golf
  invalid: [unclosed
""")
        errors = validate_trip_log_file(path, load_schema())
        assert len(errors) >= 1
        assert any("YAML" in e for e in errors)

    def test_nonexistent_file_returns_errors(self, tmp_path):
        """Nonexistent file returns error (caught by validate_trip_log_file)."""
        path = tmp_path / "does_not_exist.yaml"
        errors = validate_trip_log_file(path, load_schema())
        assert len(errors) >= 1
        assert any("Error" in e for e in errors)


class TestMain:
    """Tests for the validate_yaml command line."""

    def test_collect_files_expands_directories(self, tmp_path):
        (tmp_path / "a.yaml").write_text(VALID)
        (tmp_path / "b.yml").write_text(VALID)
        (tmp_path / "notes.txt").write_text("ignored")
        single = tmp_path / "c.yaml"
        assert [p.name for p in collect_files([tmp_path, single])] == [
            "a.yaml", "b.yml", "c.yaml"
        ]

    def test_directory_all_valid(self, tmp_path, capsys):
        (tmp_path / "golf.yaml").write_text(VALID)
        assert main([str(tmp_path)]) == 0
        assert "1/1 valid" in capsys.readouterr().out

    def test_single_invalid_file(self, tmp_path, capsys):
        path = tmp_path / "bad.yaml"
        path.write_text("vehicle: [unclosed\n")
        assert main([str(path)]) == 1
        out = capsys.readouterr().out
        assert f"FAIL: {path}" in out
        assert "0/1 valid" in out

    def test_missing_path(self, tmp_path, capsys):
        assert main([str(tmp_path / "nope")]) == 1
        assert "not found" in capsys.readouterr().out

    def test_bundled_sample_is_valid(self, capsys):
        assert main([]) == 0
