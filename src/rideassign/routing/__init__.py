"""Routing: air distance, routing backends and the two-tier distance provider."""

from .backends import StraightLineBackend, build_routing_backend
from .distance_provider import UNREACHABLE, DistanceProvider
from .geo import air_distance_km
from .osrm_client import OSRMClient

__all__ = [
    "air_distance_km",
    "DistanceProvider",
    "UNREACHABLE",
    "OSRMClient",
    "StraightLineBackend",
    "build_routing_backend",
]
