#!/usr/bin/env python3
"""Validate trip log YAML files against the schema."""
import argparse
import sys
from pathlib import Path
from typing import List

import yaml
from jsonschema import validate, ValidationError


def load_schema() -> dict:
    """Load the JSON schema from schema.yaml."""
    schema_path = Path(__file__).parent / "schema.yaml"
    with open(schema_path) as f:
        return yaml.safe_load(f)


def validate_trip_log_file(filepath: Path, schema: dict) -> list[str]:
    """Validate a single trip log YAML file. Returns list of errors."""
    errors = []
    try:
        with open(filepath) as f:
            data = yaml.safe_load(f)
        validate(instance=_stringify_dates(data), schema=schema)
    except yaml.YAMLError as e:
        errors.append(f"YAML parse error: {e}")
    except ValidationError as e:
        errors.append(f"Schema validation error: {e.message}")
        if e.path:
            errors.append(f"  at path: {'.'.join(str(p) for p in e.path)}")
    except OSError as e:
        errors.append(f"Error: {e}")
    return errors


def _stringify_dates(data):
    """PyYAML turns unquoted timestamps into datetimes; the schema expects text."""
    if isinstance(data, dict):
        return {k: _stringify_dates(v) for k, v in data.items()}
    if isinstance(data, list):
        return [_stringify_dates(v) for v in data]
    if hasattr(data, "isoformat"):
        return data.isoformat()
    return data


def collect_files(paths: List[Path]) -> List[Path]:
    """Expand directories into their YAML files; keep files as given."""
    files = []
    for path in paths:
        if path.is_dir():
            files.extend(sorted(list(path.glob("*.yaml")) + list(path.glob("*.yml"))))
        else:
            files.append(path)
    return files


def main(argv=None):
    """Validate trip log YAML files, by default everything in vehicles/."""
    parser = argparse.ArgumentParser(description="Validate trip log YAML files")
    parser.add_argument(
        "paths",
        type=Path,
        nargs="*",
        default=[Path(__file__).parent / "vehicles"],
        help="Trip log files or directories (default: vehicles/)",
    )
    args = parser.parse_args(argv)

    missing = [p for p in args.paths if not p.exists()]
    if missing:
        for path in missing:
            print(f"Error: not found: {path}")
        return 1

    yaml_files = collect_files(args.paths)
    if not yaml_files:
        print("Warning: No YAML files found")
        return 0

    schema = load_schema()
    failed = 0
    for filepath in yaml_files:
        errors = validate_trip_log_file(filepath, schema)
        if errors:
            print(f"FAIL: {filepath}")
            for error in errors:
                print(f"  {error}")
            failed += 1
        else:
            print(f"OK: {filepath}")

    print()
    print(f"{len(yaml_files) - failed}/{len(yaml_files)} valid")
    return 1 if failed else 0


if __name__ == "__main__":
    sys.exit(main())
