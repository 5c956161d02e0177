"""Tests for driver and ride records."""

import math

import pytest

from rideassign.core_types import (
    Driver,
    DriverStatus,
    InvalidRecordError,
    Ride,
    RouteLookup,
    RouteStatus,
)
from rideassign.utils.time_codec import MalformedTimeError


def _driver_record(**overrides):
    record = {
        "id": "driver1",
        "status": "active",
        "seatCapacity": 4,
        "fuelCostPerKm": 2.1,
        "homeLocation": [32.41, 34.88],
    }
    record.update(overrides)
    return record


def _ride_record(**overrides):
    record = {
        "id": "ride1",
        "startTime": "08:00",
        "endTime": "08:35",
        "startLocation": [32.42, 34.90],
        "endLocation": [32.47, 34.93],
        "seatsRequired": 14,
    }
    record.update(overrides)
    return record


class TestDriver:
    def test_from_record(self):
        driver = Driver.from_record(_driver_record())

        assert driver.driver_id == "driver1"
        assert driver.status == DriverStatus.ACTIVE
        assert driver.is_active
        assert driver.seat_capacity == 4
        assert driver.fuel_cost_per_km == 2.1
        assert driver.home_location == (32.41, 34.88)

    def test_legacy_field_names(self):
        record = {
            "driverId": "legacy",
            "status": "Inactive",
            "numberOfSeats": 19,
            "fuelCost": "1.75",
            "city_coords": {"lat": 32.3, "lng": 34.86},
        }
        driver = Driver.from_record(record)

        assert driver.driver_id == "legacy"
        assert not driver.is_active
        assert driver.seat_capacity == 19
        assert driver.fuel_cost_per_km == 1.75
        assert driver.home_location == (32.3, 34.86)

    def test_record_round_trip(self):
        driver = Driver.from_record(_driver_record())
        assert Driver.from_record(driver.to_record()) == driver

    @pytest.mark.parametrize(
        "overrides, field_name",
        [
            ({"id": ""}, "id"),
            ({"status": "on_break"}, "status"),
            ({"seatCapacity": 0}, "seatCapacity"),
            ({"seatCapacity": 2.5}, "seatCapacity"),
            ({"seatCapacity": True}, "seatCapacity"),
            ({"seatCapacity": "four"}, "seatCapacity"),
            ({"fuelCostPerKm": -0.1}, "fuelCostPerKm"),
            ({"fuelCostPerKm": "nan"}, "fuelCostPerKm"),
            ({"fuelCostPerKm": None}, "fuelCostPerKm"),
            ({"homeLocation": [32.4]}, "homeLocation"),
            ({"homeLocation": [95.0, 34.9]}, "homeLocation"),
            ({"homeLocation": None}, "homeLocation"),
        ],
    )
    def test_invalid_records_name_the_field(self, overrides, field_name):
        with pytest.raises(InvalidRecordError) as excinfo:
            Driver.from_record(_driver_record(**overrides))
        assert excinfo.value.field_name == field_name
        assert excinfo.value.record_type == "driver"

    def test_error_message_names_record(self):
        with pytest.raises(InvalidRecordError, match="driver record 'driver1'"):
            Driver.from_record(_driver_record(seatCapacity=-3))

    def test_string_seat_count_accepted(self):
        assert Driver.from_record(_driver_record(seatCapacity="50")).seat_capacity == 50

    @pytest.mark.parametrize(
        "overrides, field_name",
        [
            ({"seat_capacity": 0}, "seatCapacity"),
            ({"seat_capacity": 2.5}, "seatCapacity"),
            ({"fuel_cost_per_km": -5.0}, "fuelCostPerKm"),
            ({"fuel_cost_per_km": math.nan}, "fuelCostPerKm"),
            ({"home_location": (95.0, 34.9)}, "homeLocation"),
        ],
    )
    def test_direct_construction_is_validated(self, overrides, field_name):
        kwargs = {
            "driver_id": "d1",
            "status": DriverStatus.ACTIVE,
            "seat_capacity": 4,
            "fuel_cost_per_km": 2.0,
            "home_location": (32.4, 34.9),
        }
        kwargs.update(overrides)
        with pytest.raises(InvalidRecordError) as excinfo:
            Driver(**kwargs)
        assert excinfo.value.field_name == field_name


class TestRide:
    def test_from_record(self):
        ride = Ride.from_record(_ride_record())

        assert ride.ride_id == "ride1"
        assert ride.start_minute == 480
        assert ride.end_minute == 515
        assert ride.service_minutes == 35
        assert ride.start_time == "08:00"
        assert ride.end_time == "08:35"
        assert ride.start_location == (32.42, 34.90)
        assert ride.seats_required == 14

    def test_legacy_field_names(self):
        record = {
            "_id": 17,
            "startTime": "09:00",
            "endTime": "09:20",
            "startPoint_coords": [32.4, 34.9],
            "endPoint_coords": [32.45, 34.92],
            "numberOfSeats": 4,
        }
        ride = Ride.from_record(record)
        assert ride.ride_id == "17"
        assert ride.seats_required == 4

    def test_record_round_trip(self):
        ride = Ride.from_record(_ride_record())
        assert Ride.from_record(ride.to_record()) == ride

    def test_zero_length_ride_allowed(self):
        ride = Ride.from_record(_ride_record(startTime="10:00", endTime="10:00"))
        assert ride.service_minutes == 0

    def test_end_before_start_rejected(self):
        with pytest.raises(InvalidRecordError) as excinfo:
            Ride.from_record(_ride_record(startTime="23:30", endTime="00:15"))
        assert excinfo.value.field_name == "endTime"

    @pytest.mark.parametrize("field_name", ["startTime", "endTime"])
    def test_malformed_time_names_ride_and_field(self, field_name):
        with pytest.raises(MalformedTimeError, match=f"Ride 'ride1', field '{field_name}'"):
            Ride.from_record(_ride_record(**{field_name: "8h00"}))

    def test_missing_time_is_malformed(self):
        record = _ride_record()
        del record["endTime"]
        with pytest.raises(MalformedTimeError):
            Ride.from_record(record)

    def test_invalid_seats(self):
        with pytest.raises(InvalidRecordError) as excinfo:
            Ride.from_record(_ride_record(seatsRequired=0))
        assert excinfo.value.field_name == "seatsRequired"

    def test_missing_id(self):
        record = _ride_record()
        del record["id"]
        with pytest.raises(InvalidRecordError, match="'id' is required"):
            Ride.from_record(record)

    @pytest.mark.parametrize(
        "overrides, field_name",
        [
            ({"start_minute": 1440, "end_minute": 1450}, "startTime"),
            ({"start_minute": -10}, "startTime"),
            ({"end_minute": 1440}, "endTime"),
            ({"start_minute": 480.5}, "startTime"),
            ({"seats_required": 0}, "seatsRequired"),
            ({"end_location": (32.4, 200.0)}, "endLocation"),
        ],
    )
    def test_direct_construction_is_validated(self, overrides, field_name):
        kwargs = {
            "ride_id": "r1",
            "start_minute": 480,
            "end_minute": 500,
            "start_location": (32.41, 34.91),
            "end_location": (32.42, 34.92),
            "seats_required": 4,
        }
        kwargs.update(overrides)
        with pytest.raises(InvalidRecordError) as excinfo:
            Ride(**kwargs)
        assert excinfo.value.field_name == field_name

    def test_last_minute_of_day_allowed(self):
        ride = Ride("r1", 1439, 1439, (32.41, 34.91), (32.42, 34.92), 4)
        assert ride.end_time == "23:59"


class TestRouteLookup:
    def test_success(self):
        lookup = RouteLookup.success(120, 1500)
        assert lookup.ok
        assert lookup.duration_seconds == 120.0

    @pytest.mark.parametrize("status", [RouteStatus.TIMEOUT, RouteStatus.FILTERED])
    def test_failure_is_infinite(self, status):
        lookup = RouteLookup.failure(status, "why")
        assert not lookup.ok
        assert math.isinf(lookup.duration_seconds)
        assert math.isinf(lookup.distance_meters)
        assert lookup.message == "why"

    @pytest.mark.parametrize(
        "duration, distance",
        [(float("nan"), 10.0), (float("inf"), 10.0), (10.0, float("inf")), (-1.0, 10.0)],
    )
    def test_success_rejects_non_finite_or_negative(self, duration, distance):
        with pytest.raises(ValueError, match="must be finite"):
            RouteLookup.success(duration, distance)

    def test_success_allows_zero(self):
        assert RouteLookup.success(0, 0).ok
