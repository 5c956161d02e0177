from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum
from numbers import Integral
from typing import Any, Mapping, Optional, Tuple

import pandas as pd

from rideassign.utils.time_codec import (
    MINUTES_PER_DAY,
    MalformedTimeError,
    format_time_of_day,
    parse_time_of_day,
)
from rideassign.utils.time_measurement import TimeMeasurement

LatLon = Tuple[float, float]


class InvalidRecordError(ValueError):
    """A driver or ride record that is structurally invalid."""

    def __init__(self, record_type: str, record_id: Any, field_name: str, reason: str):
        self.record_type = record_type
        self.record_id = record_id
        self.field_name = field_name
        super().__init__(
            f"Invalid {record_type} record '{record_id}': field '{field_name}' {reason}"
        )


class DriverStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"


def _pick(record: Mapping[str, Any], *keys: str, default: Any = None) -> Any:
    """Return the first present key; records come with camelCase or legacy names."""
    for key in keys:
        if key in record and record[key] is not None:
            return record[key]
    return default


def _parse_location(
    record_type: str, record_id: Any, field_name: str, raw: Any
) -> LatLon:
    if isinstance(raw, Mapping):
        raw = (_pick(raw, "lat", "latitude"), _pick(raw, "lon", "lng", "longitude"))
    try:
        lat, lon = (float(value) for value in raw)
    except (TypeError, ValueError) as exc:
        raise InvalidRecordError(
            record_type, record_id, field_name, f"must be a (lat, lon) pair, got {raw!r}"
        ) from exc
    _check_location(record_type, record_id, field_name, (lat, lon))
    return (lat, lon)


def _check_location(record_type: str, record_id: Any, field_name: str, location: LatLon) -> None:
    lat, lon = location
    if not (-90.0 <= lat <= 90.0 and -180.0 <= lon <= 180.0):
        raise InvalidRecordError(
            record_type, record_id, field_name, f"is out of range: ({lat}, {lon})"
        )


def _parse_positive_int(record_type: str, record_id: Any, field_name: str, raw: Any) -> int:
    if isinstance(raw, bool):
        raise InvalidRecordError(record_type, record_id, field_name, "must be an integer")
    try:
        value = int(raw)
    except (TypeError, ValueError) as exc:
        raise InvalidRecordError(
            record_type, record_id, field_name, f"must be an integer, got {raw!r}"
        ) from exc
    if value != raw and not (isinstance(raw, str) and raw.strip().isdigit()):
        raise InvalidRecordError(
            record_type, record_id, field_name, f"must be an integer, got {raw!r}"
        )
    if value < 1:
        raise InvalidRecordError(record_type, record_id, field_name, "must be >= 1")
    return value


@dataclass(frozen=True)
class Driver:
    """A driver as seen by one assignment run."""

    driver_id: str
    status: DriverStatus
    seat_capacity: int
    fuel_cost_per_km: float
    home_location: LatLon

    def __post_init__(self):
        if isinstance(self.seat_capacity, bool) or not isinstance(self.seat_capacity, Integral):
            raise InvalidRecordError(
                "driver", self.driver_id, "seatCapacity", "must be an integer"
            )
        if self.seat_capacity < 1:
            raise InvalidRecordError("driver", self.driver_id, "seatCapacity", "must be >= 1")
        if not math.isfinite(self.fuel_cost_per_km) or self.fuel_cost_per_km < 0:
            raise InvalidRecordError("driver", self.driver_id, "fuelCostPerKm", "must be >= 0")
        _check_location("driver", self.driver_id, "homeLocation", self.home_location)

    @property
    def is_active(self) -> bool:
        return self.status == DriverStatus.ACTIVE

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> Driver:
        """Build a driver from a consumed record.

        Accepts ``{id, status, seatCapacity, fuelCostPerKm, homeLocation}`` as well
        as the legacy ``driverId/numberOfSeats/fuelCost/city_coords`` names.
        """
        driver_id = _pick(record, "id", "driverId", "driver_id")
        if driver_id is None or str(driver_id) == "":
            raise InvalidRecordError("driver", "<missing>", "id", "is required")
        driver_id = str(driver_id)

        raw_status = _pick(record, "status")
        try:
            status = DriverStatus(str(raw_status).lower())
        except ValueError as exc:
            raise InvalidRecordError(
                "driver", driver_id, "status", f"must be 'active' or 'inactive', got {raw_status!r}"
            ) from exc

        seats = _parse_positive_int(
            "driver",
            driver_id,
            "seatCapacity",
            _pick(record, "seatCapacity", "numberOfSeats", "seat_capacity"),
        )

        raw_fuel = _pick(record, "fuelCostPerKm", "fuelCost", "fuel_cost_per_km")
        try:
            fuel_cost = float(raw_fuel)
        except (TypeError, ValueError) as exc:
            raise InvalidRecordError(
                "driver", driver_id, "fuelCostPerKm", f"must be a number, got {raw_fuel!r}"
            ) from exc
        if math.isnan(fuel_cost) or fuel_cost < 0:
            raise InvalidRecordError("driver", driver_id, "fuelCostPerKm", "must be >= 0")

        home = _parse_location(
            "driver",
            driver_id,
            "homeLocation",
            _pick(record, "homeLocation", "city_coords", "home_location"),
        )

        return cls(
            driver_id=driver_id,
            status=status,
            seat_capacity=seats,
            fuel_cost_per_km=fuel_cost,
            home_location=home,
        )

    def to_record(self) -> dict[str, Any]:
        return {
            "id": self.driver_id,
            "status": self.status.value,
            "seatCapacity": self.seat_capacity,
            "fuelCostPerKm": self.fuel_cost_per_km,
            "homeLocation": list(self.home_location),
        }


@dataclass(frozen=True)
class Ride:
    """A transport request; times are minutes since midnight of the same day."""

    ride_id: str
    start_minute: int
    end_minute: int
    start_location: LatLon
    end_location: LatLon
    seats_required: int

    def __post_init__(self):
        for field_name, minute in (("startTime", self.start_minute), ("endTime", self.end_minute)):
            if isinstance(minute, bool) or not isinstance(minute, Integral):
                raise InvalidRecordError("ride", self.ride_id, field_name, "must be an integer")
            if not 0 <= minute < MINUTES_PER_DAY:
                raise InvalidRecordError(
                    "ride", self.ride_id, field_name, f"is outside a single day: {minute}"
                )
        if isinstance(self.seats_required, bool) or not isinstance(self.seats_required, Integral):
            raise InvalidRecordError("ride", self.ride_id, "seatsRequired", "must be an integer")
        if self.seats_required < 1:
            raise InvalidRecordError("ride", self.ride_id, "seatsRequired", "must be >= 1")
        _check_location("ride", self.ride_id, "startLocation", self.start_location)
        _check_location("ride", self.ride_id, "endLocation", self.end_location)
        if self.end_minute < self.start_minute:
            raise InvalidRecordError(
                "ride",
                self.ride_id,
                "endTime",
                "must not be earlier than startTime (rides cannot cross midnight)",
            )

    @property
    def start_time(self) -> str:
        return format_time_of_day(self.start_minute)

    @property
    def end_time(self) -> str:
        return format_time_of_day(self.end_minute)

    @property
    def service_minutes(self) -> int:
        return self.end_minute - self.start_minute

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> Ride:
        """Build a ride from a consumed record.

        Accepts ``{id, startTime, endTime, startLocation, endLocation,
        seatsRequired}`` as well as the legacy ``_id/numberOfSeats/
        startPoint_coords/endPoint_coords`` names.

        Raises:
            MalformedTimeError: If a time field is not a valid ``HH:mm`` string.
            InvalidRecordError: For any other structural problem.
        """
        ride_id = _pick(record, "id", "_id", "rideId", "ride_id")
        if ride_id is None or str(ride_id) == "":
            raise InvalidRecordError("ride", "<missing>", "id", "is required")
        ride_id = str(ride_id)

        minutes = {}
        for field_name, aliases in (
            ("startTime", ("startTime", "start_time")),
            ("endTime", ("endTime", "end_time")),
        ):
            raw = _pick(record, *aliases)
            try:
                minutes[field_name] = parse_time_of_day(raw)
            except MalformedTimeError as exc:
                raise MalformedTimeError(
                    f"Ride '{ride_id}', field '{field_name}': {exc}"
                ) from exc

        return cls(
            ride_id=ride_id,
            start_minute=minutes["startTime"],
            end_minute=minutes["endTime"],
            start_location=_parse_location(
                "ride",
                ride_id,
                "startLocation",
                _pick(record, "startLocation", "startPoint_coords", "start_location"),
            ),
            end_location=_parse_location(
                "ride",
                ride_id,
                "endLocation",
                _pick(record, "endLocation", "endPoint_coords", "end_location"),
            ),
            seats_required=_parse_positive_int(
                "ride",
                ride_id,
                "seatsRequired",
                _pick(record, "seatsRequired", "numberOfSeats", "seats_required"),
            ),
        )

    def to_record(self) -> dict[str, Any]:
        return {
            "id": self.ride_id,
            "startTime": self.start_time,
            "endTime": self.end_time,
            "startLocation": list(self.start_location),
            "endLocation": list(self.end_location),
            "seatsRequired": self.seats_required,
        }


@dataclass
class Schedule:
    """Per-driver assignment state; append-only during a run."""

    rides: list[Ride] = field(default_factory=list)
    base_cost: float = 0.0
    penalty_cost: float = 0.0
    last_ride: Optional[Ride] = None

    @property
    def ride_count(self) -> int:
        return len(self.rides)


@dataclass(frozen=True)
class DriverAssignment:
    driver_id: str
    ride_ids: list[str]

    def to_dict(self) -> dict[str, Any]:
        return {"driverId": self.driver_id, "rideIds": list(self.ride_ids)}


@dataclass(frozen=True)
class FairnessStats:
    """Distribution of ride counts over all drivers."""

    min: int
    max: int
    avg: float
    std_dev: float
    counts_per_driver: dict[str, int]

    def to_dict(self) -> dict[str, Any]:
        return {
            "min": self.min,
            "max": self.max,
            "avg": self.avg,
            "stdDev": self.std_dev,
            "countsPerDriver": [
                {"driverId": driver_id, "count": count}
                for driver_id, count in self.counts_per_driver.items()
            ],
        }


@dataclass
class AssignmentResult:
    """Outcome of one greedy assignment run."""

    assignments: list[DriverAssignment] = field(default_factory=list)
    real_base_cost: float = 0.0
    total_penalty: float = 0.0
    total_cost: int = 0
    fairness: Optional[FairnessStats] = None
    unassigned_ride_ids: list[str] = field(default_factory=list)
    time_measurements: Optional[list[TimeMeasurement]] = None

    @property
    def assigned_count(self) -> int:
        return sum(len(a.ride_ids) for a in self.assignments)

    def rides_for(self, driver_id: str) -> list[str]:
        for assignment in self.assignments:
            if assignment.driver_id == driver_id:
                return list(assignment.ride_ids)
        return []

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "assignments": [a.to_dict() for a in self.assignments],
            "realBaseCost": self.real_base_cost,
            "totalPenalty": self.total_penalty,
            "totalCost": self.total_cost,
            "unassignedRideIds": list(self.unassigned_ride_ids),
        }
        if self.fairness is not None:
            data["fairness"] = self.fairness.to_dict()
        return data

    def to_dataframe(self) -> pd.DataFrame:
        """One row per (driver, ride) in commit order."""
        rows = [
            {"Driver_ID": a.driver_id, "Sequence": position, "Ride_ID": ride_id}
            for a in self.assignments
            for position, ride_id in enumerate(a.ride_ids, start=1)
        ]
        if not rows:
            return pd.DataFrame(columns=["Driver_ID", "Sequence", "Ride_ID"])
        return pd.DataFrame(rows)


class RouteStatus(str, Enum):
    OK = "ok"
    TIMEOUT = "timeout"
    BACKEND_ERROR = "backend_error"
    FILTERED = "filtered"


@dataclass(frozen=True)
class RouteLookup:
    """Outcome of one point-to-point routing query (seconds and metres)."""

    status: RouteStatus
    duration_seconds: float = math.inf
    distance_meters: float = math.inf
    message: str = ""

    def __post_init__(self):
        if self.status == RouteStatus.OK:
            for name in ("duration_seconds", "distance_meters"):
                value = getattr(self, name)
                if not math.isfinite(value) or value < 0:
                    raise ValueError(
                        f"RouteLookup.{name} must be finite and >= 0, got {value!r}"
                    )

    @property
    def ok(self) -> bool:
        return self.status == RouteStatus.OK

    @classmethod
    def success(cls, duration_seconds: float, distance_meters: float) -> RouteLookup:
        return cls(RouteStatus.OK, float(duration_seconds), float(distance_meters))

    @classmethod
    def failure(cls, status: RouteStatus, message: str = "") -> RouteLookup:
        return cls(status, message=message)
