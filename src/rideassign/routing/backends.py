"""Offline routing backends and backend construction from configuration."""

from rideassign.config.params import RoutingParams
from rideassign.core_types import LatLon, RouteLookup
from rideassign.interfaces import RoutingBackend
from rideassign.registry import ROUTING_BACKEND_REGISTRY, register_routing_backend
from rideassign.utils.logging import RideassignLogger

from .geo import air_distance_km
from .osrm_client import OSRMClient

logger = RideassignLogger.get_logger(__name__)


@register_routing_backend("straight_line")
class StraightLineBackend:
    """Estimate road travel from air distance, a detour factor and an average speed.

    Useful without a routing server (tests, quick what-if runs). It never fails.
    """

    def __init__(self, average_speed_kmh: float = 40.0, detour_factor: float = 1.3):
        if average_speed_kmh <= 0:
            raise ValueError("average_speed_kmh must be positive.")
        if detour_factor < 1.0:
            raise ValueError("detour_factor must be >= 1.0.")
        self.average_speed_kmh = average_speed_kmh
        self.detour_factor = detour_factor

    @property
    def name(self) -> str:
        return "straight_line"

    def route(self, origin: LatLon, destination: LatLon) -> RouteLookup:
        road_km = air_distance_km(origin, destination) * self.detour_factor
        duration_seconds = road_km / self.average_speed_kmh * 3600.0
        return RouteLookup.success(duration_seconds, road_km * 1000.0)


def build_routing_backend(params: RoutingParams) -> RoutingBackend:
    """Instantiate the backend named by ``params.backend``."""
    try:
        backend_cls = ROUTING_BACKEND_REGISTRY[params.backend]
    except KeyError as exc:
        available = ", ".join(sorted(ROUTING_BACKEND_REGISTRY))
        raise ValueError(
            f"Unknown routing backend '{params.backend}'. Available: {available}"
        ) from exc

    if backend_cls is OSRMClient:
        backend = OSRMClient(
            base_url=params.base_url,
            profile=params.profile,
            timeout=params.timeout_seconds,
        )
    elif backend_cls is StraightLineBackend:
        backend = StraightLineBackend(
            average_speed_kmh=params.average_speed_kmh,
            detour_factor=params.detour_factor,
        )
    else:
        # Third-party backends registered by users take no arguments
        backend = backend_cls()

    logger.debug(f"Using routing backend '{params.backend}'")
    return backend
