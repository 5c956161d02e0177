from .aggregator import build_assignment_result, fairness_stats
from .cost import (
    LinearPenalty,
    NoPenalty,
    PiecewiseLinearPenalty,
    QuadraticPenalty,
    build_cost_modifier,
    incremental_cost,
)
from .feasibility import can_serve
from .scheduler import GreedyScheduler, ScheduleBook, assign_rides

__all__ = [
    "assign_rides",
    "GreedyScheduler",
    "ScheduleBook",
    "can_serve",
    "incremental_cost",
    "build_cost_modifier",
    "NoPenalty",
    "QuadraticPenalty",
    "LinearPenalty",
    "PiecewiseLinearPenalty",
    "build_assignment_result",
    "fairness_stats",
]
