"""Loading of driver and ride records from JSON or CSV files."""

import json
from pathlib import Path
from typing import Any, Iterable, Mapping

import pandas as pd

from rideassign.core_types import Driver, InvalidRecordError, Ride
from rideassign.utils.logging import RideassignLogger

logger = RideassignLogger.get_logger(__name__)

# CSV files flatten each location into two columns
_DRIVER_LOCATION_COLUMNS = {"homeLocation": ("home_lat", "home_lon")}
_RIDE_LOCATION_COLUMNS = {
    "startLocation": ("start_lat", "start_lon"),
    "endLocation": ("end_lat", "end_lon"),
}


def _read_records(path: str | Path, location_columns: dict[str, tuple[str, str]]) -> list[dict]:
    file_path = Path(path)
    if not file_path.exists():
        raise FileNotFoundError(f"Input file not found: {file_path}")

    suffix = file_path.suffix.lower()
    if suffix == ".json":
        with file_path.open(encoding="utf-8") as f:
            try:
                data = json.load(f)
            except json.JSONDecodeError as exc:
                raise ValueError(f"Error parsing JSON file {file_path}: {exc}") from exc
        if not isinstance(data, list):
            raise ValueError(f"{file_path} must contain a JSON array of records")
        return data

    if suffix == ".csv":
        # Keep ids and HH:mm strings as text; pandas would otherwise coerce them
        df = pd.read_csv(file_path, dtype=str, keep_default_na=False)
        return records_from_dataframe(df, location_columns)

    raise ValueError(f"Unsupported input format '{suffix}' for {file_path}; use .json or .csv")


def records_from_dataframe(
    df: pd.DataFrame, location_columns: dict[str, tuple[str, str]]
) -> list[dict[str, Any]]:
    """Turn a flat frame into records, folding ``*_lat``/``*_lon`` columns into pairs."""
    records = []
    for row in df.to_dict(orient="records"):
        for field_name, (lat_col, lon_col) in location_columns.items():
            if lat_col in row and lon_col in row:
                row[field_name] = (row.pop(lat_col), row.pop(lon_col))
        records.append(row)
    return records


def drivers_from_records(records: Iterable[Mapping[str, Any]]) -> list[Driver]:
    return [Driver.from_record(record) for record in records]


def rides_from_records(records: Iterable[Mapping[str, Any]]) -> list[Ride]:
    return [Ride.from_record(record) for record in records]


def drivers_from_dataframe(df: pd.DataFrame) -> list[Driver]:
    return drivers_from_records(records_from_dataframe(df, _DRIVER_LOCATION_COLUMNS))


def rides_from_dataframe(df: pd.DataFrame) -> list[Ride]:
    return rides_from_records(records_from_dataframe(df, _RIDE_LOCATION_COLUMNS))


def load_drivers(path: str | Path) -> list[Driver]:
    """Load drivers from a JSON array or a CSV file.

    CSV columns: ``id, status, seatCapacity, fuelCostPerKm, home_lat, home_lon``.

    Raises:
        FileNotFoundError: If ``path`` does not exist.
        InvalidRecordError: If any record is structurally invalid.
    """
    drivers = drivers_from_records(_read_records(path, _DRIVER_LOCATION_COLUMNS))
    logger.info(f"Loaded {len(drivers)} drivers from {path}")
    return drivers


def load_rides(path: str | Path) -> list[Ride]:
    """Load rides from a JSON array or a CSV file.

    CSV columns: ``id, startTime, endTime, start_lat, start_lon, end_lat,
    end_lon, seatsRequired``.

    Raises:
        FileNotFoundError: If ``path`` does not exist.
        MalformedTimeError: If a ride has an invalid ``HH:mm`` time.
        InvalidRecordError: If any other field is invalid.
    """
    rides = rides_from_records(_read_records(path, _RIDE_LOCATION_COLUMNS))
    logger.info(f"Loaded {len(rides)} rides from {path}")
    return rides


def write_records(path: str | Path, items: Iterable[Driver | Ride]) -> Path:
    """Write drivers or rides back to a JSON array."""
    file_path = Path(path)
    file_path.parent.mkdir(parents=True, exist_ok=True)
    records = [item.to_record() for item in items]
    with file_path.open("w", encoding="utf-8") as f:
        json.dump(records, f, indent=2)
    return file_path


__all__ = [
    "load_drivers",
    "load_rides",
    "drivers_from_records",
    "rides_from_records",
    "drivers_from_dataframe",
    "rides_from_dataframe",
    "records_from_dataframe",
    "write_records",
    "InvalidRecordError",
]
