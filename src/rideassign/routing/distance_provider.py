"""
distance_provider.py

Two-tier travel lookup used by feasibility and cost evaluation.

1. ``air_distance_km`` - cheap haversine distance, always available.
2. ``road_travel_minutes`` / ``road_distance_km`` - routed through a
   :class:`~rideassign.interfaces.RoutingBackend`.

When the air-distance filter is on, a pair farther apart than
``max_air_distance_km`` is reported as unreachable without a backend call.
This trades precision for fewer external calls: a long but fast road route
can be excluded even though it would be serviceable.

Every failed, timed-out or filtered lookup collapses to :data:`UNREACHABLE`
(``math.inf``). Feasibility relies on that: an infinite travel time always
rejects, and an infinite cost is never selected.
"""

import math
import threading

from rideassign.config.params import RoutingParams
from rideassign.core_types import LatLon, RouteLookup, RouteStatus
from rideassign.interfaces import RoutingBackend
from rideassign.utils.logging import RideassignLogger

from .geo import air_distance_km

logger = RideassignLogger.get_logger(__name__)

UNREACHABLE = math.inf


class DistanceProvider:
    """Air distance plus filtered, optionally memoised road lookups."""

    def __init__(
        self,
        backend: RoutingBackend,
        use_air_distance_filter: bool = False,
        max_air_distance_km: float = 5.0,
        cache_routes: bool = True,
    ):
        self.backend = backend
        self.use_air_distance_filter = use_air_distance_filter
        self.max_air_distance_km = max_air_distance_km
        self.cache_routes = cache_routes
        self._cache: dict[tuple[LatLon, LatLon], RouteLookup] = {}
        self._lock = threading.Lock()
        self.backend_calls = 0

    @classmethod
    def from_params(cls, backend: RoutingBackend, params: RoutingParams) -> "DistanceProvider":
        return cls(
            backend=backend,
            use_air_distance_filter=params.use_air_distance_filter,
            max_air_distance_km=params.max_air_distance_km,
            cache_routes=params.cache_routes,
        )

    @staticmethod
    def air_distance_km(a: LatLon, b: LatLon) -> float:
        return air_distance_km(a, b)

    def lookup(self, origin: LatLon, destination: LatLon) -> RouteLookup:
        """Backend lookup with memoisation; never raises for backend problems."""
        key = (tuple(origin), tuple(destination))
        if self.cache_routes:
            with self._lock:
                cached = self._cache.get(key)
            if cached is not None:
                return cached

        with self._lock:
            self.backend_calls += 1
        result = self.backend.route(origin, destination)

        # Only successes are memoised so a transient outage can recover
        if self.cache_routes and result.ok:
            with self._lock:
                self._cache[key] = result
        return result

    def travel_lookup(self, origin: LatLon, destination: LatLon) -> RouteLookup:
        """Like :meth:`lookup` but subject to the air-distance filter."""
        if self.use_air_distance_filter:
            air_km = air_distance_km(origin, destination)
            if air_km > self.max_air_distance_km:
                return RouteLookup.failure(
                    RouteStatus.FILTERED,
                    f"air distance {air_km:.2f} km > {self.max_air_distance_km} km",
                )
        return self.lookup(origin, destination)

    def road_travel_minutes(self, origin: LatLon, destination: LatLon) -> float:
        """Whole minutes (rounded up, at least 1) or ``UNREACHABLE``."""
        result = self.travel_lookup(origin, destination)
        if not result.ok:
            return UNREACHABLE
        return max(1, math.ceil(result.duration_seconds / 60.0))

    def road_distance_km(self, origin: LatLon, destination: LatLon) -> float:
        """Road distance in kilometres or ``UNREACHABLE``."""
        result = self.lookup(origin, destination)
        if not result.ok:
            return UNREACHABLE
        return result.distance_meters / 1000.0
