"""Hard eligibility rules deciding whether a driver may take a ride next."""

from typing import Optional

from rideassign.core_types import Driver, LatLon, Ride
from rideassign.routing.distance_provider import DistanceProvider


def available_from(driver: Driver, previous_ride: Optional[Ride]) -> tuple[LatLon, int]:
    """Where and when the driver is next free.

    After a ride: its end location at its end minute. Otherwise: home, from
    minute 0 (available all day).
    """
    if previous_ride is not None:
        return previous_ride.end_location, previous_ride.end_minute
    return driver.home_location, 0


def can_serve(
    driver: Driver,
    ride: Ride,
    previous_ride: Optional[Ride],
    distance_provider: DistanceProvider,
) -> bool:
    """Return True if ``driver`` can legally serve ``ride`` after ``previous_ride``.

    Checks, in order:
        1. the driver is active;
        2. the driver has at least ``ride.seats_required`` seats;
        3. the driver reaches the ride start in time. Arriving exactly at the
           start minute is feasible; an unreachable route never is.
    """
    if not driver.is_active:
        return False
    if driver.seat_capacity < ride.seats_required:
        return False

    location, available_minute = available_from(driver, previous_ride)
    travel_minutes = distance_provider.road_travel_minutes(location, ride.start_location)
    # inf + n > start is always True, so unreachable routes reject here
    return available_minute + travel_minutes <= ride.start_minute
