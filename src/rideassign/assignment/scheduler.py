"""
scheduler.py

Single-pass greedy assignment of rides to drivers.

Algorithm
---------
1. Every driver starts with an empty :class:`~rideassign.core_types.Schedule`.
2. Rides are stably sorted by start minute; ties keep their input order.
3. For each ride every driver is evaluated: feasibility first, then
   ``adjusted = base_cost + penalty(current_count)`` (penalty is zero when
   fairness is disabled). The strictly lowest adjusted cost wins, so on ties
   the first driver in input order keeps the ride.
4. The ride is committed to the winner: appended to its schedule, base cost
   and the penalty in effect *before* the ride are added to its totals, and
   it becomes the driver's ``last_ride``.
5. A ride without a feasible driver stays unassigned. No error, no retry.

Rides are processed strictly one after another because each evaluation
depends on ``last_ride``, which only changes at commit time. Within one ride
the per-driver evaluations are read-only and may run in a bounded thread
pool (``RuntimeParams.max_workers``); the selection and commit remain a
single-threaded reduction over results kept in driver input order.

Complexity is O(R * D) evaluations with up to three distance lookups each.
"""

import math
from dataclasses import dataclass
from typing import Iterable, Optional, Sequence

from joblib import Parallel, delayed

from rideassign.config.params import RideassignParams
from rideassign.core_types import (
    AssignmentResult,
    Driver,
    InvalidRecordError,
    Ride,
    Schedule,
)
from rideassign.interfaces import CostModifier
from rideassign.routing.backends import build_routing_backend
from rideassign.routing.distance_provider import DistanceProvider
from rideassign.utils.logging import RideassignLogger

from .aggregator import build_assignment_result
from .cost import NoPenalty, build_cost_modifier, incremental_cost
from .feasibility import can_serve

logger = RideassignLogger.get_logger(__name__)


@dataclass(frozen=True)
class DriverEvaluation:
    """Read-only verdict for one (driver, ride) pair at one point in the run."""

    driver_id: str
    feasible: bool
    base_cost: float = math.inf
    penalty: float = 0.0

    @property
    def adjusted_cost(self) -> float:
        return self.base_cost + self.penalty


class ScheduleBook:
    """All per-driver schedules of a run, keyed by driver id in input order."""

    def __init__(self, drivers: Sequence[Driver]):
        self.drivers: list[Driver] = list(drivers)
        self._schedules: dict[str, Schedule] = {}
        for driver in self.drivers:
            if driver.driver_id in self._schedules:
                raise InvalidRecordError(
                    "driver", driver.driver_id, "id", "is duplicated in the driver list"
                )
            self._schedules[driver.driver_id] = Schedule()

    def __getitem__(self, driver_id: str) -> Schedule:
        return self._schedules[driver_id]

    def items(self):
        return self._schedules.items()

    def commit(self, driver_id: str, ride: Ride, base_cost: float, penalty: float) -> None:
        """Append ``ride`` to ``driver_id``'s schedule. Irreversible."""
        schedule = self._schedules[driver_id]
        schedule.rides.append(ride)
        schedule.base_cost += base_cost
        schedule.penalty_cost += penalty
        schedule.last_ride = ride


def sort_rides_by_start(rides: Iterable[Ride]) -> list[Ride]:
    """Stable ascending sort on start minute."""
    return sorted(rides, key=lambda ride: ride.start_minute)


def evaluate_driver(
    driver: Driver,
    ride: Ride,
    previous_ride: Optional[Ride],
    current_count: int,
    distance_provider: DistanceProvider,
    hourly_rate: float,
    cost_modifier: CostModifier,
) -> DriverEvaluation:
    if not can_serve(driver, ride, previous_ride, distance_provider):
        return DriverEvaluation(driver_id=driver.driver_id, feasible=False)

    base_cost = incremental_cost(driver, ride, previous_ride, distance_provider, hourly_rate)
    return DriverEvaluation(
        driver_id=driver.driver_id,
        feasible=True,
        base_cost=base_cost,
        penalty=cost_modifier.penalty(current_count),
    )


def select_best(evaluations: Sequence[DriverEvaluation]) -> Optional[DriverEvaluation]:
    """Strict minimum over feasible evaluations; earliest wins ties.

    An infinite (or NaN) adjusted cost is never selected.
    """
    best: Optional[DriverEvaluation] = None
    best_cost = math.inf
    for evaluation in evaluations:
        if not evaluation.feasible:
            continue
        if evaluation.adjusted_cost < best_cost:
            best_cost = evaluation.adjusted_cost
            best = evaluation
    return best


class GreedyScheduler:
    """Owns the schedule state of one run and commits rides one by one."""

    def __init__(
        self,
        drivers: Sequence[Driver],
        distance_provider: DistanceProvider,
        params: RideassignParams,
        cost_modifier: Optional[CostModifier] = None,
    ):
        self.drivers = list(drivers)
        self.distance_provider = distance_provider
        self.params = params
        if cost_modifier is None:
            cost_modifier = build_cost_modifier(params.fairness)
        elif not params.fairness.enabled:
            cost_modifier = NoPenalty()
        self.cost_modifier = cost_modifier
        self.book = ScheduleBook(self.drivers)

    def _evaluation_calls(self, ride: Ride):
        hourly_rate = self.params.cost.hourly_rate
        for driver in self.drivers:
            schedule = self.book[driver.driver_id]
            yield (
                driver,
                ride,
                schedule.last_ride,
                schedule.ride_count,
                self.distance_provider,
                hourly_rate,
                self.cost_modifier,
            )

    def evaluate(self, ride: Ride, parallel: Optional[Parallel] = None) -> list[DriverEvaluation]:
        """Evaluate every driver for ``ride``; results follow driver input order."""
        if parallel is None:
            return [evaluate_driver(*args) for args in self._evaluation_calls(ride)]
        # joblib returns results in submission order regardless of completion order
        return parallel(delayed(evaluate_driver)(*args) for args in self._evaluation_calls(ride))

    def assign(self, ride: Ride, parallel: Optional[Parallel] = None) -> Optional[str]:
        """Resolve one ride; return the chosen driver id or ``None``."""
        evaluations = self.evaluate(ride, parallel)
        best = select_best(evaluations)
        if best is None:
            logger.debug(f"Ride {ride.ride_id} ({ride.start_time}): no feasible driver")
            return None

        self.book.commit(best.driver_id, ride, best.base_cost, best.penalty)
        logger.debug(
            f"Ride {ride.ride_id} ({ride.start_time}) -> {best.driver_id} "
            f"(base {best.base_cost:.2f}, penalty {best.penalty:.2f})"
        )
        return best.driver_id

    def run(self, rides: Sequence[Ride]) -> AssignmentResult:
        seen: set[str] = set()
        for ride in rides:
            if ride.ride_id in seen:
                raise InvalidRecordError("ride", ride.ride_id, "id", "is duplicated in the ride list")
            seen.add(ride.ride_id)

        ordered = sort_rides_by_start(rides)
        max_workers = self.params.runtime.max_workers
        logger.info(
            f"Assigning {len(ordered)} rides to {len(self.drivers)} drivers "
            f"(workers: {max_workers}, fairness: {self.params.fairness.enabled})"
        )

        if max_workers > 1 and len(self.drivers) > 1:
            # One pool for the whole run
            with Parallel(n_jobs=max_workers, backend="threading") as parallel:
                for ride in ordered:
                    self.assign(ride, parallel)
        else:
            for ride in ordered:
                self.assign(ride)

        result = build_assignment_result(
            self.book, rides, fairness_enabled=self.params.fairness.enabled
        )
        logger.info(
            f"Assigned {result.assigned_count} of {len(ordered)} rides, "
            f"total cost {result.total_cost}"
        )
        return result


def assign_rides(
    drivers: Sequence[Driver],
    rides: Sequence[Ride],
    params: Optional[RideassignParams] = None,
    distance_provider: Optional[DistanceProvider] = None,
    cost_modifier: Optional[CostModifier] = None,
) -> AssignmentResult:
    """Run the greedy assignment and return the aggregated result.

    Args:
        drivers: Fleet, in the order used to break cost ties.
        rides: Rides in input order; sorted by start time internally.
        params: Resolved configuration. Defaults to ``RideassignParams()``.
        distance_provider: Lookup provider. Built from ``params.routing`` via
            the backend registry when omitted.
        cost_modifier: Fairness penalty. Built from ``params.fairness`` when
            omitted; ignored (no penalty) while fairness is disabled.

    Returns:
        AssignmentResult with per-driver ride ids and cost totals.

    Example:
        >>> from rideassign.routing import DistanceProvider, StraightLineBackend
        >>> provider = DistanceProvider(StraightLineBackend())
        >>> result = assign_rides(drivers, rides, distance_provider=provider)
        >>> print(result.total_cost)
    """
    params = params or RideassignParams()
    if distance_provider is None:
        distance_provider = DistanceProvider.from_params(
            build_routing_backend(params.routing), params.routing
        )

    scheduler = GreedyScheduler(drivers, distance_provider, params, cost_modifier)
    return scheduler.run(rides)
