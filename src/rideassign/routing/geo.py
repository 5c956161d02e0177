"""Straight-line geometry between (lat, lon) coordinates."""

from haversine import Unit, haversine

from rideassign.core_types import LatLon


def air_distance_km(a: LatLon, b: LatLon) -> float:
    """Great-circle distance in kilometres (haversine formula)."""
    return haversine(a, b, unit=Unit.KILOMETERS)
