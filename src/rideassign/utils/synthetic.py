"""Synthetic drivers and rides for demos and load tests.

Points are drawn uniformly inside a lat/lon box and can optionally be snapped
to the road network through OSRM's ``nearest`` service.
"""

from dataclasses import dataclass
from typing import Optional

import numpy as np

from rideassign.core_types import Driver, DriverStatus, LatLon, Ride
from rideassign.routing.osrm_client import OSRMClient
from rideassign.utils.logging import RideassignLogger

logger = RideassignLogger.get_logger(__name__)

DRIVER_SEAT_OPTIONS = (4, 19, 50)
RIDE_SEAT_OPTIONS = (4, 14, 19, 50)


@dataclass(frozen=True)
class Bounds:
    lat_min: float = 32.30
    lat_max: float = 32.50
    lon_min: float = 34.85
    lon_max: float = 34.95

    def __post_init__(self):
        if self.lat_min > self.lat_max or self.lon_min > self.lon_max:
            raise ValueError("Bounds minimum must not exceed maximum.")


def _random_point(
    rng: np.random.Generator, bounds: Bounds, snapper: Optional[OSRMClient]
) -> LatLon:
    point = (
        float(rng.uniform(bounds.lat_min, bounds.lat_max)),
        float(rng.uniform(bounds.lon_min, bounds.lon_max)),
    )
    if snapper is None:
        return point
    snapped = snapper.nearest(point)
    if snapped is None:
        logger.warning(f"Snapping {point} to the road network failed, using raw point")
        return point
    return snapped


def generate_drivers(
    count: int,
    bounds: Bounds = Bounds(),
    rng: Optional[np.random.Generator] = None,
    snapper: Optional[OSRMClient] = None,
) -> list[Driver]:
    """Active drivers with 4/19/50 seats and a fuel cost of 1.50-3.00 per km."""
    rng = rng or np.random.default_rng()
    return [
        Driver(
            driver_id=f"driver{i}",
            status=DriverStatus.ACTIVE,
            seat_capacity=int(rng.choice(DRIVER_SEAT_OPTIONS)),
            fuel_cost_per_km=round(float(rng.uniform(1.5, 3.0)), 2),
            home_location=_random_point(rng, bounds, snapper),
        )
        for i in range(1, count + 1)
    ]


def generate_rides(
    count: int,
    bounds: Bounds = Bounds(),
    rng: Optional[np.random.Generator] = None,
    snapper: Optional[OSRMClient] = None,
) -> list[Ride]:
    """Rides starting 06:00-17:59 and lasting 10-59 minutes."""
    rng = rng or np.random.default_rng()
    rides = []
    for i in range(1, count + 1):
        start = int(rng.integers(6 * 60, 18 * 60))
        duration = int(rng.integers(10, 60))
        rides.append(
            Ride(
                ride_id=f"ride{i}",
                start_minute=start,
                end_minute=start + duration,
                start_location=_random_point(rng, bounds, snapper),
                end_location=_random_point(rng, bounds, snapper),
                seats_required=int(rng.choice(RIDE_SEAT_OPTIONS)),
            )
        )
    return rides
