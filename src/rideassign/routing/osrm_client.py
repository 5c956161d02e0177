"""
osrm_client.py

Adapter for an OSRM HTTP server. Its only job is to talk to OSRM and return
normalised results:

* converts internal ``(lat, lon)`` coordinates to OSRM's ``lon,lat`` order,
* builds ``/route`` and ``/nearest`` URLs for the configured profile,
* bounds every request by a timeout (requests semantics: the limit applies
  to connecting and to each read, so a server that keeps trickling bytes can
  take longer than ``timeout`` in total),
* turns transport problems, non-``Ok`` codes and malformed JSON (including
  non-finite or negative durations and distances) into a typed
  :class:`RouteLookup` instead of raising.

No feasibility or cost rules live here.
"""

import requests

from rideassign.core_types import LatLon, RouteLookup, RouteStatus
from rideassign.registry import register_routing_backend
from rideassign.utils.logging import RideassignLogger

logger = RideassignLogger.get_logger(__name__)

DEFAULT_OSRM_URL = "http://router.project-osrm.org"


@register_routing_backend("osrm")
class OSRMClient:
    """Routing backend backed by the OSRM ``/route`` service."""

    def __init__(
        self,
        base_url: str = DEFAULT_OSRM_URL,
        profile: str = "driving",
        timeout: float = 5.0,
        session: requests.Session | None = None,
    ):
        if not base_url:
            raise ValueError("OSRM base URL must not be empty.")
        self.base_url = base_url.rstrip("/")
        self.profile = profile
        self.timeout = timeout
        self.session = session or requests.Session()

    @property
    def name(self) -> str:
        return "osrm"

    @staticmethod
    def format_coordinates(coords: list[LatLon]) -> str:
        """Convert ``[(lat, lon), ...]`` to OSRM's ``lon,lat;lon,lat``."""
        return ";".join(f"{lon},{lat}" for lat, lon in coords)

    def _get_json(self, url: str, params: dict) -> tuple[dict | None, RouteLookup | None]:
        try:
            response = self.session.get(url, params=params, timeout=self.timeout)
            data = response.json()
        except requests.Timeout as exc:
            logger.warning(f"OSRM request timed out after {self.timeout}s: {exc}")
            return None, RouteLookup.failure(RouteStatus.TIMEOUT, str(exc))
        except requests.RequestException as exc:
            logger.warning(f"OSRM error: {exc}")
            return None, RouteLookup.failure(RouteStatus.BACKEND_ERROR, str(exc))
        except ValueError as exc:
            # response.json() on a non-JSON body
            logger.warning(f"OSRM returned a non-JSON response: {exc}")
            return None, RouteLookup.failure(RouteStatus.BACKEND_ERROR, str(exc))

        if not isinstance(data, dict) or data.get("code") != "Ok":
            message = data.get("message", "Unknown error") if isinstance(data, dict) else repr(data)
            logger.warning(f"OSRM error: {message}")
            return None, RouteLookup.failure(RouteStatus.BACKEND_ERROR, message)
        return data, None

    def route(self, origin: LatLon, destination: LatLon) -> RouteLookup:
        """Query ``/route`` for a single origin-destination pair."""
        coordinates = self.format_coordinates([origin, destination])
        url = f"{self.base_url}/route/v1/{self.profile}/{coordinates}"

        data, failure = self._get_json(url, {"overview": "false"})
        if failure is not None:
            return failure

        try:
            # OSRM may return alternatives; the first route is the fastest
            route = data["routes"][0]
            return RouteLookup.success(route["duration"], route["distance"])
        except (KeyError, IndexError, TypeError, ValueError) as exc:
            logger.warning(f"Malformed OSRM route response: {exc!r}")
            return RouteLookup.failure(RouteStatus.BACKEND_ERROR, f"malformed response: {exc!r}")

    def nearest(self, point: LatLon) -> LatLon | None:
        """Snap ``point`` to the closest road; ``None`` when OSRM cannot answer."""
        url = f"{self.base_url}/nearest/v1/{self.profile}/{self.format_coordinates([point])}"
        data, failure = self._get_json(url, {"number": 1})
        if failure is not None:
            return None
        try:
            lon, lat = data["waypoints"][0]["location"]
        except (KeyError, IndexError, TypeError, ValueError) as exc:
            logger.warning(f"Malformed OSRM nearest response: {exc!r}")
            return None
        return (float(lat), float(lon))
