"""Shared fixtures: deterministic routing backends and small fleets."""

import pytest

from rideassign.core_types import Driver, DriverStatus, Ride, RouteLookup, RouteStatus
from rideassign.routing import DistanceProvider


class TableBackend:
    """Routing backend answering from a fixed table and recording every call.

    Pairs missing from ``table`` get ``default`` (seconds, metres) or, when no
    default is set, a backend error. Pairs in ``failures`` always fail with
    the given status.
    """

    name = "table"

    def __init__(self, table=None, default=(600.0, 5000.0), failures=None):
        self.table = {
            (tuple(o), tuple(d)): value for (o, d), value in (table or {}).items()
        }
        self.default = default
        self.failures = {
            (tuple(o), tuple(d)): status for (o, d), status in (failures or {}).items()
        }
        self.calls = []

    def route(self, origin, destination):
        key = (tuple(origin), tuple(destination))
        self.calls.append(key)
        if key in self.failures:
            return RouteLookup.failure(self.failures[key], "simulated failure")
        if key in self.table:
            return RouteLookup.success(*self.table[key])
        if self.default is None:
            return RouteLookup.failure(RouteStatus.BACKEND_ERROR, "no route")
        return RouteLookup.success(*self.default)


def make_driver(
    driver_id="d1",
    seats=4,
    fuel=2.0,
    home=(32.40, 34.90),
    status=DriverStatus.ACTIVE,
):
    return Driver(
        driver_id=driver_id,
        status=status,
        seat_capacity=seats,
        fuel_cost_per_km=fuel,
        home_location=home,
    )


def make_ride(
    ride_id="r1",
    start=480,
    end=500,
    start_location=(32.41, 34.91),
    end_location=(32.42, 34.92),
    seats=4,
):
    return Ride(
        ride_id=ride_id,
        start_minute=start,
        end_minute=end,
        start_location=start_location,
        end_location=end_location,
        seats_required=seats,
    )


@pytest.fixture
def table_backend():
    """10 minutes / 5 km for every pair unless overridden."""
    return TableBackend()


@pytest.fixture
def provider(table_backend):
    return DistanceProvider(table_backend)


@pytest.fixture
def driver_factory():
    return make_driver


@pytest.fixture
def ride_factory():
    return make_ride


@pytest.fixture
def backend_factory():
    return TableBackend
