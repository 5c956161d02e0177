"""
cost.py

Incremental cost of appending a ride to a driver's schedule, and the optional
fairness penalty strategies.

Base cost
---------
    empty_loc      = previous ride end location, or the driver's home
    time_cost      = (empty_minutes + service_minutes) / 60 * hourly_rate
    fuel_cost      = fuel_cost_per_km * (empty_km + service_km)
    base_cost      = time_cost + fuel_cost

``empty_*`` is the road leg from ``empty_loc`` to the ride start; ``service_*``
is the ride itself (minutes from its time window, kilometres from the road
network). Any unreachable leg makes the cost infinite.

Fairness penalty
----------------
A :class:`~rideassign.interfaces.CostModifier` maps a driver's committed ride
count to a penalty added only when *choosing* a driver. Under the greedy
policy this does not balance workload, because base-cost differences between
drivers usually exceed any practical penalty. The strategies stay pluggable
so a global reassignment pass could reuse them.
"""

from dataclasses import dataclass
from typing import Optional

from rideassign.config.params import FairnessParams
from rideassign.core_types import Driver, Ride
from rideassign.interfaces import CostModifier
from rideassign.registry import COST_MODIFIER_REGISTRY, register_cost_modifier
from rideassign.routing.distance_provider import DistanceProvider
from rideassign.utils.logging import RideassignLogger

from .feasibility import available_from

logger = RideassignLogger.get_logger(__name__)


@dataclass(frozen=True)
class CostBreakdown:
    empty_minutes: float
    empty_km: float
    service_minutes: int
    service_km: float
    time_cost: float
    fuel_cost: float

    @property
    def base_cost(self) -> float:
        return self.time_cost + self.fuel_cost


def cost_breakdown(
    driver: Driver,
    ride: Ride,
    previous_ride: Optional[Ride],
    distance_provider: DistanceProvider,
    hourly_rate: float,
) -> CostBreakdown:
    """Compute every component of the incremental cost."""
    empty_location, _ = available_from(driver, previous_ride)

    empty_minutes = distance_provider.road_travel_minutes(empty_location, ride.start_location)
    empty_km = distance_provider.road_distance_km(empty_location, ride.start_location)
    service_minutes = ride.service_minutes
    service_km = distance_provider.road_distance_km(ride.start_location, ride.end_location)

    time_cost = (empty_minutes + service_minutes) / 60 * hourly_rate
    fuel_cost = driver.fuel_cost_per_km * (empty_km + service_km)

    return CostBreakdown(
        empty_minutes=empty_minutes,
        empty_km=empty_km,
        service_minutes=service_minutes,
        service_km=service_km,
        time_cost=time_cost,
        fuel_cost=fuel_cost,
    )


def incremental_cost(
    driver: Driver,
    ride: Ride,
    previous_ride: Optional[Ride],
    distance_provider: DistanceProvider,
    hourly_rate: float,
) -> float:
    """Base cost (time + fuel, no penalty) of giving ``ride`` to ``driver`` next."""
    return cost_breakdown(
        driver, ride, previous_ride, distance_provider, hourly_rate
    ).base_cost


# ---------------------------------------------------------------------------
# Fairness penalty strategies
# ---------------------------------------------------------------------------


class NoPenalty:
    """Default modifier: fairness disabled."""

    def penalty(self, current_count: int) -> float:
        return 0.0


@register_cost_modifier("quadratic")
class QuadraticPenalty:
    """``weight * count**2``."""

    def __init__(self, weight: float = 1.0, **_: object):
        self.weight = weight

    def penalty(self, current_count: int) -> float:
        return self.weight * current_count**2


@register_cost_modifier("linear")
class LinearPenalty:
    """``weight * count``."""

    def __init__(self, weight: float = 1.0, **_: object):
        self.weight = weight

    def penalty(self, current_count: int) -> float:
        return self.weight * current_count


@register_cost_modifier("piecewise_linear")
class PiecewiseLinearPenalty:
    """Free up to ``free_rides`` rides, then ``weight`` per extra ride."""

    def __init__(self, weight: float = 1.0, free_rides: int = 0, **_: object):
        self.weight = weight
        self.free_rides = free_rides

    def penalty(self, current_count: int) -> float:
        return self.weight * max(0, current_count - self.free_rides)


def build_cost_modifier(params: FairnessParams) -> CostModifier:
    """Instantiate the configured penalty, or :class:`NoPenalty` when disabled."""
    if not params.enabled:
        return NoPenalty()

    try:
        modifier_cls = COST_MODIFIER_REGISTRY[params.penalty]
    except KeyError as exc:
        available = ", ".join(sorted(COST_MODIFIER_REGISTRY))
        raise ValueError(
            f"Unknown fairness penalty '{params.penalty}'. Available: {available}"
        ) from exc

    logger.debug(f"Fairness penalty '{params.penalty}' with weight {params.weight}")
    return modifier_cls(weight=params.weight, free_rides=params.free_rides)
