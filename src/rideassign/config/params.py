from __future__ import annotations

"""Parameter container dataclasses for the rideassign configuration system.

Routing, cost, fairness and I/O options live in separate immutable dataclasses
so a run's configuration is resolved once and never mutated mid-run. A small
mutable `RuntimeParams` bucket captures flags that are never serialised to
YAML but can be toggled programmatically.
"""

import dataclasses
import math
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

__all__ = [
    "RoutingParams",
    "CostParams",
    "FairnessParams",
    "IOParams",
    "RuntimeParams",
    "RideassignParams",
]


# ---------------------------------------------------------------------------
# Routing parameters
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class RoutingParams:
    """Where travel times come from and how aggressively they are filtered."""

    backend: str = "osrm"
    base_url: str = "http://router.project-osrm.org"
    profile: str = "driving"
    timeout_seconds: float = 5.0
    use_air_distance_filter: bool = False
    max_air_distance_km: float = 5.0
    cache_routes: bool = True
    # Only used by the straight_line backend
    average_speed_kmh: float = 40.0
    detour_factor: float = 1.3

    def __post_init__(self):  # type: ignore[override]
        if self.timeout_seconds <= 0:
            raise ValueError("RoutingParams.timeout_seconds must be positive.")
        if not math.isfinite(self.max_air_distance_km) or self.max_air_distance_km < 0:
            raise ValueError("RoutingParams.max_air_distance_km must be a non-negative number.")
        if self.average_speed_kmh <= 0:
            raise ValueError("RoutingParams.average_speed_kmh must be positive.")
        if self.detour_factor < 1.0:
            raise ValueError("RoutingParams.detour_factor must be >= 1.0.")


# ---------------------------------------------------------------------------
# Cost model parameters
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class CostParams:
    """Monetary rates shared by all drivers."""

    hourly_rate: float = 30.0

    def __post_init__(self):  # type: ignore[override]
        if self.hourly_rate < 0:
            raise ValueError("CostParams.hourly_rate must be non-negative.")


# ---------------------------------------------------------------------------
# Fairness parameters
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class FairnessParams:
    """Load penalty blended into the driver choice.

    Disabled by default: with a greedy policy the penalty does not even out
    ride counts (see :class:`rideassign.interfaces.CostModifier`).
    """

    enabled: bool = False
    weight: float = 0.0
    penalty: str = "quadratic"
    free_rides: int = 0

    def __post_init__(self):  # type: ignore[override]
        if self.weight < 0:
            raise ValueError("FairnessParams.weight must be non-negative.")
        if self.free_rides < 0:
            raise ValueError("FairnessParams.free_rides must be non-negative.")


# ---------------------------------------------------------------------------
# IO parameters
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class IOParams:
    """Settings for result output."""

    results_dir: Path = Path("results")
    format: str = "json"  # One of: json, csv

    def __post_init__(self):  # type: ignore[override]
        if self.format not in {"json", "csv"}:
            raise ValueError("IOParams.format must be 'json' or 'csv'.")

        if not isinstance(self.results_dir, Path):
            object.__setattr__(self, "results_dir", Path(self.results_dir))


# ---------------------------------------------------------------------------
# Runtime parameters - toggles usually set from the CLI or environment
# ---------------------------------------------------------------------------


@dataclass(slots=True)
class RuntimeParams:
    verbose: bool = False
    debug: bool = False
    max_workers: int = 1

    def __post_init__(self):
        if self.max_workers < 1:
            raise ValueError("RuntimeParams.max_workers must be at least 1.")


# ---------------------------------------------------------------------------
# Aggregate container
# ---------------------------------------------------------------------------

_SECTIONS = ("routing", "cost", "fairness", "io", "runtime")


@dataclass(slots=True)
class RideassignParams:
    """Aggregate parameter object passed throughout the codebase."""

    routing: RoutingParams = field(default_factory=RoutingParams)
    cost: CostParams = field(default_factory=CostParams)
    fairness: FairnessParams = field(default_factory=FairnessParams)
    io: IOParams = field(default_factory=IOParams)
    runtime: RuntimeParams = field(default_factory=RuntimeParams)

    def apply_overrides(self, **overrides: Any) -> RideassignParams:
        """Return a copy with flat ``field=value`` overrides applied.

        Keys may be plain field names (``hourly_rate``) or the short
        aliases (``fairness_mode``, ``fairness_weight``, ``routing_backend``).
        ``None`` values are ignored.
        """
        aliases = {
            "fairness_mode": ("fairness", "enabled"),
            "fairness_weight": ("fairness", "weight"),
            "fairness_penalty": ("fairness", "penalty"),
            "routing_backend": ("routing", "backend"),
            "osrm_base_url": ("routing", "base_url"),
        }
        changes: dict[str, dict[str, Any]] = {name: {} for name in _SECTIONS}

        for key, value in overrides.items():
            if value is None:
                continue
            if key in aliases:
                section, attr = aliases[key]
                changes[section][attr] = value
                continue
            for section in _SECTIONS:
                section_obj = getattr(self, section)
                if key in {f.name for f in dataclasses.fields(section_obj)}:
                    changes[section][key] = value
                    break
            else:
                raise ValueError(f"Unknown configuration override: {key}")

        return RideassignParams(
            **{
                section: dataclasses.replace(getattr(self, section), **changes[section])
                if changes[section]
                else getattr(self, section)
                for section in _SECTIONS
            }
        )

    def to_dict(self) -> dict[str, Any]:
        data = {section: dataclasses.asdict(getattr(self, section)) for section in _SECTIONS}
        data["io"]["results_dir"] = str(self.io.results_dir)
        return data
