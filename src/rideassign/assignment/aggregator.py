"""Fold final schedules into an :class:`AssignmentResult`."""

import math
from typing import TYPE_CHECKING, Sequence

import numpy as np

from rideassign.core_types import AssignmentResult, DriverAssignment, FairnessStats, Ride

if TYPE_CHECKING:
    from .scheduler import ScheduleBook


def round_half_up(value: float) -> int:
    """Round to the nearest whole unit, halves away from zero."""
    return int(math.copysign(math.floor(abs(value) + 0.5), value))


def fairness_stats(counts_per_driver: dict[str, int]) -> FairnessStats:
    """Min, max, mean and population standard deviation of ride counts."""
    if not counts_per_driver:
        return FairnessStats(min=0, max=0, avg=0.0, std_dev=0.0, counts_per_driver={})

    counts = np.fromiter(counts_per_driver.values(), dtype=float)
    return FairnessStats(
        min=int(counts.min()),
        max=int(counts.max()),
        avg=float(counts.mean()),
        std_dev=float(counts.std(ddof=0)),
        counts_per_driver=dict(counts_per_driver),
    )


def build_assignment_result(
    book: "ScheduleBook",
    rides: Sequence[Ride],
    fairness_enabled: bool = False,
) -> AssignmentResult:
    """Build the run summary.

    Drivers without rides are omitted from ``assignments`` but counted (as
    zero) in the fairness statistics. Unassigned rides are derived by set
    difference against ``rides`` and reported in input order.
    """
    assignments: list[DriverAssignment] = []
    real_base_cost = 0.0
    total_penalty = 0.0
    counts: dict[str, int] = {}

    for driver_id, schedule in book.items():
        counts[driver_id] = schedule.ride_count
        if schedule.ride_count == 0:
            continue
        assignments.append(
            DriverAssignment(driver_id=driver_id, ride_ids=[r.ride_id for r in schedule.rides])
        )
        real_base_cost += schedule.base_cost
        total_penalty += schedule.penalty_cost

    assigned_ids = {ride_id for a in assignments for ride_id in a.ride_ids}
    unassigned = [ride.ride_id for ride in rides if ride.ride_id not in assigned_ids]

    return AssignmentResult(
        assignments=assignments,
        real_base_cost=real_base_cost,
        total_penalty=total_penalty,
        total_cost=round_half_up(real_base_cost + total_penalty),
        fairness=fairness_stats(counts) if fairness_enabled else None,
        unassigned_ride_ids=unassigned,
    )
