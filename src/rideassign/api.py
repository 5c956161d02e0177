"""
API facade for rideassign - provides a single entry point for programmatic usage.
"""

from pathlib import Path
from typing import Any, Optional, Sequence

import pandas as pd

from rideassign.assignment import assign_rides
from rideassign.config import RideassignParams, resolve_params
from rideassign.core_types import AssignmentResult, Driver, Ride
from rideassign.interfaces import CostModifier, RoutingBackend
from rideassign.routing import DistanceProvider, build_routing_backend
from rideassign.utils.data_processing import (
    drivers_from_dataframe,
    drivers_from_records,
    load_drivers,
    load_rides,
    rides_from_dataframe,
    rides_from_records,
)
from rideassign.utils.logging import RideassignLogger, log_warning
from rideassign.utils.save_results import save_assignment_results
from rideassign.utils.time_measurement import TimeRecorder

logger = RideassignLogger.get_logger("rideassign.api")

DriversInput = str | Path | pd.DataFrame | Sequence[Driver] | Sequence[dict]
RidesInput = str | Path | pd.DataFrame | Sequence[Ride] | Sequence[dict]


def _coerce_drivers(drivers: DriversInput) -> list[Driver]:
    if isinstance(drivers, (str, Path)):
        return load_drivers(drivers)
    if isinstance(drivers, pd.DataFrame):
        return drivers_from_dataframe(drivers)
    items = list(drivers)
    if all(isinstance(item, Driver) for item in items):
        return items
    return drivers_from_records(items)


def _coerce_rides(rides: RidesInput) -> list[Ride]:
    if isinstance(rides, (str, Path)):
        return load_rides(rides)
    if isinstance(rides, pd.DataFrame):
        return rides_from_dataframe(rides)
    items = list(rides)
    if all(isinstance(item, Ride) for item in items):
        return items
    return rides_from_records(items)


def assign(
    drivers: DriversInput,
    rides: RidesInput,
    config: str | Path | RideassignParams | None = None,
    output_dir: Optional[str | Path] = None,
    format: Optional[str] = None,
    verbose: bool = False,
    routing_backend: RoutingBackend | str | None = None,
    cost_modifier: Optional[CostModifier] = None,
    **overrides: Any,
) -> AssignmentResult:
    """
    Assign rides to drivers with the greedy minimum-cost policy.

    Args:
        drivers: Driver data - a JSON/CSV path, a DataFrame, driver records
            (dicts) or :class:`Driver` objects.
        rides: Ride data in the same forms as ``drivers``.
        config: YAML path, a :class:`RideassignParams` object, or None for
            defaults. Environment variables are applied on top.
        output_dir: Directory to save results; nothing is saved when None.
        format: Output format - "json" or "csv" (default from config).
        verbose: Enable verbose logging.
        routing_backend: A backend object, or the registered name of one
            (e.g. "straight_line"); otherwise built from configuration.
        cost_modifier: Explicit fairness penalty; otherwise built from
            configuration.
        **overrides: Flat configuration overrides, e.g.
            ``use_air_distance_filter=True, max_air_distance_km=3``. They take
            precedence over the config file and the environment.

    Returns:
        AssignmentResult: per-driver ride ids, cost totals and, with fairness
        enabled, ride-count statistics.

    Raises:
        FileNotFoundError: If an input or config file doesn't exist.
        MalformedTimeError: If a ride time is not a valid ``HH:mm`` string.
        InvalidRecordError: If a driver or ride record is invalid.
        ValueError: If the configuration is invalid.

    Example:
        >>> result = assign("drivers.json", "rides.json", use_air_distance_filter=True)
        >>> print(f"Total cost: {result.total_cost}")
        >>> print(f"Unassigned: {result.unassigned_ride_ids}")
    """
    time_recorder = TimeRecorder()

    with time_recorder.measure("global"):
        if isinstance(routing_backend, str):
            overrides["routing_backend"] = routing_backend
            routing_backend = None
        if output_dir is not None:
            overrides["results_dir"] = Path(output_dir)
        if format is not None:
            overrides["format"] = format
        if verbose:
            overrides["verbose"] = True
        params = resolve_params(config, overrides)

        with time_recorder.measure("load_input"):
            driver_list = _coerce_drivers(drivers)
            ride_list = _coerce_rides(rides)

        if not driver_list:
            log_warning("No drivers provided; every ride will be unassigned")

        if routing_backend is None:
            routing_backend = build_routing_backend(params.routing)
        distance_provider = DistanceProvider.from_params(routing_backend, params.routing)

        with time_recorder.measure("assignment"):
            result = assign_rides(
                driver_list,
                ride_list,
                params=params,
                distance_provider=distance_provider,
                cost_modifier=cost_modifier,
            )
        logger.debug(f"Routing backend calls: {distance_provider.backend_calls}")

    result.time_measurements = time_recorder.measurements

    if output_dir is not None:
        save_assignment_results(result, params)

    return result
