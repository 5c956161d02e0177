"""Protocol definitions for pluggable components in rideassign."""

from typing import Protocol

from rideassign.core_types import LatLon, RouteLookup


class RoutingBackend(Protocol):
    """Answers road travel duration and distance between two coordinates.

    Implementations must never raise for transport or backend problems; they
    report them through :class:`RouteLookup.status` instead.
    """

    def route(self, origin: LatLon, destination: LatLon) -> RouteLookup:
        """Return duration (seconds) and distance (metres) by the driving profile."""
        ...

    @property
    def name(self) -> str:
        """Backend name for logging."""
        ...


class CostModifier(Protocol):
    """Extra cost added on top of the base cost when choosing a driver.

    Note: under the greedy policy a per-step penalty does not balance load,
    since base-cost gaps between drivers usually dwarf any practical penalty.
    Strategies are kept so a global reassignment pass could reuse them.
    """

    def penalty(self, current_count: int) -> float:
        """Penalty for giving one more ride to a driver that already has ``current_count``."""
        ...
