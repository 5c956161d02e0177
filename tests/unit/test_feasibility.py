"""Tests for the hard eligibility rules."""

import pytest

from rideassign.assignment.feasibility import available_from, can_serve
from rideassign.core_types import DriverStatus, RouteStatus
from rideassign.routing import DistanceProvider

HOME = (32.40, 34.90)
PICKUP = (32.41, 34.91)
DROPOFF = (32.45, 34.93)


def test_available_from_home_at_midnight(driver_factory):
    driver = driver_factory(home=HOME)
    assert available_from(driver, None) == (HOME, 0)


def test_available_from_previous_ride_end(driver_factory, ride_factory):
    previous = ride_factory(start=480, end=510, end_location=DROPOFF)
    assert available_from(driver_factory(), previous) == (DROPOFF, 510)


def test_inactive_driver_rejected(driver_factory, ride_factory, provider, table_backend):
    driver = driver_factory(status=DriverStatus.INACTIVE)
    assert not can_serve(driver, ride_factory(), None, provider)
    # Status is checked before any lookup
    assert table_backend.calls == []


def test_insufficient_seats_rejected(driver_factory, ride_factory, provider, table_backend):
    assert not can_serve(driver_factory(seats=4), ride_factory(seats=14), None, provider)
    assert table_backend.calls == []


def test_exact_seat_match_accepted(driver_factory, ride_factory, provider):
    assert can_serve(driver_factory(seats=14), ride_factory(seats=14), None, provider)


def test_first_ride_reachable_from_home(driver_factory, ride_factory, provider):
    # 10 minutes of travel, ride starts at 00:10
    ride = ride_factory(start=10, end=30)
    assert can_serve(driver_factory(), ride, None, provider)


def test_zero_slack_is_feasible(driver_factory, ride_factory, provider):
    previous = ride_factory("r0", start=480, end=500)
    # Available at 500, travel 10 minutes, next ride starts at 510
    ride = ride_factory("r1", start=510, end=530)
    assert can_serve(driver_factory(), ride, previous, provider)


def test_one_minute_late_is_infeasible(driver_factory, ride_factory, provider):
    previous = ride_factory("r0", start=480, end=500)
    ride = ride_factory("r1", start=509, end=530)
    assert not can_serve(driver_factory(), ride, previous, provider)


def test_travel_is_from_previous_ride_end(driver_factory, ride_factory, backend_factory):
    backend = backend_factory(
        table={
            (DROPOFF, PICKUP): (300.0, 2000.0),
            (HOME, PICKUP): (3600.0, 50000.0),
        }
    )
    provider = DistanceProvider(backend)
    previous = ride_factory("r0", start=480, end=500, end_location=DROPOFF)
    ride = ride_factory("r1", start=505, end=520, start_location=PICKUP)

    assert can_serve(driver_factory(home=HOME), ride, previous, provider)
    assert backend.calls == [(DROPOFF, PICKUP)]


@pytest.mark.parametrize("status", [RouteStatus.TIMEOUT, RouteStatus.BACKEND_ERROR])
def test_unreachable_route_always_rejects(driver_factory, ride_factory, backend_factory, status):
    backend = backend_factory(failures={(HOME, PICKUP): status})
    provider = DistanceProvider(backend)
    # Even with the whole day to get there
    ride = ride_factory(start=1400, end=1430, start_location=PICKUP)
    assert not can_serve(driver_factory(home=HOME), ride, None, provider)


def test_air_filter_rejects_far_driver(driver_factory, ride_factory, backend_factory):
    # Road route is one minute, but home and pickup are ~11 km apart by air
    far_pickup = (32.50, 34.90)
    backend = backend_factory(table={(HOME, far_pickup): (60.0, 1000.0)})
    provider = DistanceProvider(backend, use_air_distance_filter=True, max_air_distance_km=5.0)

    ride = ride_factory(start=1000, end=1020, start_location=far_pickup)

    assert not can_serve(driver_factory(home=HOME), ride, None, provider)
    assert backend.calls == []
