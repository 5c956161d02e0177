"""Rideassign: greedy ride-to-driver assignment."""

__version__ = "0.1.0"

# Main API
from .api import assign

# Stage functions
from .assignment import (
    GreedyScheduler,
    assign_rides,
    build_assignment_result,
    can_serve,
    incremental_cost,
)

# Core types
from .config.params import RideassignParams
from .core_types import (
    AssignmentResult,
    Driver,
    DriverAssignment,
    DriverStatus,
    FairnessStats,
    InvalidRecordError,
    Ride,
    RouteLookup,
    RouteStatus,
)
from .interfaces import CostModifier, RoutingBackend

# Extension system
from .registry import register_cost_modifier, register_routing_backend
from .routing import UNREACHABLE, DistanceProvider, OSRMClient, StraightLineBackend
from .utils.data_processing import load_drivers, load_rides
from .utils.time_codec import MalformedTimeError, format_time_of_day, parse_time_of_day

__all__ = [
    # Version
    "__version__",
    # Main API
    "assign",
    # Stage functions
    "assign_rides",
    "can_serve",
    "incremental_cost",
    "build_assignment_result",
    "GreedyScheduler",
    "load_drivers",
    "load_rides",
    "parse_time_of_day",
    "format_time_of_day",
    # Types
    "RideassignParams",
    "AssignmentResult",
    "Driver",
    "DriverAssignment",
    "DriverStatus",
    "FairnessStats",
    "Ride",
    "RouteLookup",
    "RouteStatus",
    "DistanceProvider",
    "UNREACHABLE",
    "OSRMClient",
    "StraightLineBackend",
    # Errors
    "InvalidRecordError",
    "MalformedTimeError",
    # Extensions
    "register_routing_backend",
    "register_cost_modifier",
    "RoutingBackend",
    "CostModifier",
]
