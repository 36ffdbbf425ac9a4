"""YAML loading and saving utilities for vehicle trip logs."""

import math
from datetime import date, datetime
from pathlib import Path
from typing import Any, Dict, List, Union

import yaml
from dateutil import parser as date_parser
from dateutil import tz

from .record_kind import RecordKind
from .trip_log import TripLog
from .trip_record import TripRecord, infer_kind
from .vehicle_info import VehicleInfo


def parse_timestamp(value: Union[int, float, str, date, datetime]) -> int:
    """
    Convert a YAML timestamp to epoch milliseconds.

    Accepts epoch milliseconds, ISO-8601 strings and the date/datetime objects
    PyYAML produces for unquoted timestamps. Naive values are taken as UTC.
    """
    if isinstance(value, bool):
        raise ValueError(f"Invalid timestamp: {value!r}")
    if isinstance(value, (int, float)):
        if not math.isfinite(value):
            raise ValueError(f"Invalid timestamp: {value!r}")
        return int(value)
    if isinstance(value, str):
        try:
            value = date_parser.isoparse(value)
        except ValueError:
            raise ValueError(f"Invalid timestamp: {value!r}") from None
    if not isinstance(value, date):
        raise ValueError(f"Invalid timestamp: {value!r}")
    if not isinstance(value, datetime):
        value = datetime(value.year, value.month, value.day)
    if value.tzinfo is None:
        value = value.replace(tzinfo=tz.UTC)
    return int(round(value.timestamp() * 1000))


def format_timestamp(ms: int, fmt: str = "%Y-%m-%dT%H:%M:%SZ") -> str:
    """Format epoch milliseconds as UTC text."""
    return datetime.fromtimestamp(ms / 1000, tz=tz.UTC).strftime(fmt)


def _parse_kind(dct: Dict[str, Any]) -> RecordKind:
    kind = dct.get("kind")
    if kind is None:
        return infer_kind(dct.get("departure"), dct.get("destination"))
    try:
        return RecordKind(kind)
    except ValueError:
        raise ValueError(f"Record {dct.get('id')}: unknown kind {kind!r}") from None


def _parse_record(dct: Dict[str, Any]) -> TripRecord:
    """Parse a record dictionary into a TripRecord."""
    if "id" not in dct or "timestamp" not in dct:
        raise ValueError(f"Record is missing id or timestamp: {dct!r}")
    kind = _parse_kind(dct)
    start = dct.get("startOdometerKm")
    # Readings may use the odometerKm shorthand
    if start is None and kind is RecordKind.READING:
        start = dct.get("odometerKm")
    return TripRecord(
        id=str(dct["id"]),
        timestamp=parse_timestamp(dct["timestamp"]),
        kind=kind,
        start_odometer_km=start,
        end_odometer_km=dct.get("endOdometerKm"),
        distance_km=dct.get("distanceKm"),
        departure=dct.get("departure"),
        destination=dct.get("destination"),
        odometer_calculated=bool(dct.get("odometerCalculated", False)),
    )


def _parse_vehicle(dct: Dict[str, Any]) -> VehicleInfo:
    if "id" not in dct:
        raise ValueError(f"Vehicle is missing id: {dct!r}")
    return VehicleInfo(
        str(dct["id"]),
        dct.get("licensePlate"),
        dct.get("make"),
        dct.get("model"),
    )


def load_trip_log(filename: Union[str, Path]) -> TripLog:
    """
    Load a vehicle trip log from a YAML file.

    Raises ValueError for unparseable YAML and malformed content, OSError
    when the file cannot be read.
    """
    with open(filename, "rb") as fp:
        try:
            data = yaml.load(fp, Loader=yaml.SafeLoader) or {}
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid YAML in {filename}: {e}") from e
    if not isinstance(data, dict):
        raise ValueError(f"{filename}: expected a mapping with vehicle and records")

    vehicle_data = data.get("vehicle") or {"id": Path(filename).stem}
    raw_records = data.get("records") or []
    if not isinstance(vehicle_data, dict) or not isinstance(raw_records, list):
        raise ValueError(f"{filename}: vehicle must be a mapping, records a list")
    if not all(isinstance(r, dict) for r in raw_records):
        raise ValueError(f"{filename}: every record must be a mapping")

    records = [_parse_record(r) for r in raw_records]
    return TripLog(_parse_vehicle(vehicle_data), records)


def _record_to_dict(record: TripRecord) -> Dict[str, Any]:
    """Serialize a TripRecord to the YAML dict format (camelCase keys)."""
    d: Dict[str, Any] = {
        "id": record.id,
        "kind": record.kind.value,
        "timestamp": format_timestamp(record.timestamp),
    }
    if record.is_pure_reading:
        d["odometerKm"] = record.start_odometer_km
    elif record.start_odometer_km is not None:
        d["startOdometerKm"] = record.start_odometer_km
    if record.end_odometer_km is not None:
        d["endOdometerKm"] = record.end_odometer_km
    if record.distance_km is not None:
        d["distanceKm"] = record.distance_km
    if record.departure is not None:
        d["departure"] = record.departure
    if record.destination is not None:
        d["destination"] = record.destination
    if record.odometer_calculated:
        d["odometerCalculated"] = True
    return d


def _vehicle_to_dict(vehicle: VehicleInfo) -> Dict[str, Any]:
    d: Dict[str, Any] = {"id": vehicle.id}
    if vehicle.license_plate is not None:
        d["licensePlate"] = vehicle.license_plate
    if vehicle.make is not None:
        d["make"] = vehicle.make
    if vehicle.model is not None:
        d["model"] = vehicle.model
    return d


def _read_raw(filename: Union[str, Path]) -> Dict[str, Any]:
    with open(filename, "r") as fp:
        return yaml.load(fp, Loader=yaml.SafeLoader) or {}


def _write_raw(filename: Union[str, Path], data: Dict[str, Any]) -> None:
    with open(filename, "w") as fp:
        yaml.dump(
            data,
            fp,
            default_flow_style=False,
            allow_unicode=True,
            sort_keys=False,
            width=120,
        )


def save_record(filename: Union[str, Path], record: TripRecord) -> None:
    """
    Append a record to a trip log YAML file.

    Loads the raw YAML, appends the record to the records list,
    and writes back to the file.
    """
    data = _read_raw(filename)
    if data.get("records") is None:
        data["records"] = []

    ids = {str(r.get("id")) for r in data["records"]}
    if record.id in ids:
        raise ValueError(f"Record id {record.id} already exists")

    data["records"].append(_record_to_dict(record))
    _write_raw(filename, data)


def delete_record(filename: Union[str, Path], record_id: str) -> None:
    """Remove the record with the given id from a trip log YAML file."""
    data = _read_raw(filename)
    records: List[Dict[str, Any]] = data.get("records") or []
    remaining = [r for r in records if str(r.get("id")) != record_id]
    if len(remaining) == len(records):
        raise KeyError(f"No record with id {record_id}")
    data["records"] = remaining
    _write_raw(filename, data)


def create_trip_log(filename: Union[str, Path], vehicle: VehicleInfo) -> None:
    """Create a new, empty trip log YAML file for a vehicle."""
    _write_raw(filename, {"vehicle": _vehicle_to_dict(vehicle), "records": []})
