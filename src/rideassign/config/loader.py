"""Utilities for building `RideassignParams` from YAML files, environment
variables and caller overrides.

Precedence, lowest to highest: the packaged ``default_config.yaml`` (or a
caller-supplied YAML file in its place), environment, explicit overrides.
The result is resolved once per run.
"""

from __future__ import annotations

import dataclasses
import os
from pathlib import Path
from typing import Any, Dict, Mapping

import yaml
from dotenv import load_dotenv

from rideassign.utils.logging import RideassignLogger

from .params import (
    CostParams,
    FairnessParams,
    IOParams,
    RideassignParams,
    RoutingParams,
    RuntimeParams,
)

logger = RideassignLogger.get_logger(__name__)

DEFAULT_CONFIG_PATH = Path(__file__).parent / "default_config.yaml"

_TRUTHY = {"1", "true", "yes", "on"}
_FALSY = {"0", "false", "no", "off"}


def _parse_bool(raw: str) -> bool:
    value = raw.strip().lower()
    if value in _TRUTHY:
        return True
    if value in _FALSY:
        return False
    raise ValueError(f"Expected a boolean value, got {raw!r}")


# environment variable -> (section, field, converter)
ENV_VARIABLES: dict[str, tuple[str, str, Any]] = {
    "USE_AIR_FILTER": ("routing", "use_air_distance_filter", _parse_bool),
    "MAX_AIR_DISTANCE_KM": ("routing", "max_air_distance_km", float),
    "ROUTING_BACKEND": ("routing", "backend", str),
    "OSRM_BASE_URL": ("routing", "base_url", str),
    "ROUTING_TIMEOUT_SECONDS": ("routing", "timeout_seconds", float),
    "HOURLY_RATE": ("cost", "hourly_rate", float),
    "FAIRNESS_MODE": ("fairness", "enabled", _parse_bool),
    "FAIRNESS_WEIGHT": ("fairness", "weight", float),
    "FAIRNESS_PENALTY": ("fairness", "penalty", str),
    "RIDEASSIGN_MAX_WORKERS": ("runtime", "max_workers", int),
}

_SECTION_TYPES = {
    "routing": RoutingParams,
    "cost": CostParams,
    "fairness": FairnessParams,
    "io": IOParams,
}


# ---------------------------------------------------------------------------
# Helper parsing routines
# ---------------------------------------------------------------------------


def _parse_section(name: str, raw: Any) -> Any:
    """Convert one YAML mapping into its dataclass, rejecting unknown keys."""
    section_cls = _SECTION_TYPES[name]
    if raw is None:
        return section_cls()
    if not isinstance(raw, dict):
        raise ValueError(f"Configuration section '{name}' must be a mapping.")

    known = set(section_cls.__dataclass_fields__)
    unknown = set(raw) - known
    if unknown:
        raise ValueError(
            f"Unknown keys in configuration section '{name}': {', '.join(sorted(unknown))}"
        )
    kwargs = dict(raw)
    if name == "io" and "results_dir" in kwargs:
        kwargs["results_dir"] = Path(kwargs["results_dir"])
    return section_cls(**kwargs)


def env_overrides(environ: Mapping[str, str] | None = None) -> Dict[str, Dict[str, Any]]:
    """Collect per-section overrides from environment variables."""
    environ = os.environ if environ is None else environ
    overrides: Dict[str, Dict[str, Any]] = {}
    for var, (section, attr, convert) in ENV_VARIABLES.items():
        raw = environ.get(var)
        # An empty assignment in .env counts as unset
        if raw is None or not raw.strip():
            continue
        try:
            value = convert(raw)
        except ValueError as exc:
            raise ValueError(f"Invalid value for environment variable {var}: {exc}") from exc
        overrides.setdefault(section, {})[attr] = value
    return overrides


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def load_yaml(path: str | Path) -> RideassignParams:
    """Load a YAML configuration file into `RideassignParams`.

    Expected layout::

        routing:
          backend: osrm
          use_air_distance_filter: true
          max_air_distance_km: 5
        cost:
          hourly_rate: 30
        fairness:
          enabled: false
          weight: 0.0
        io:
          results_dir: results
          format: json
    """

    cfg_path = Path(path)
    if not cfg_path.exists():
        raise FileNotFoundError(cfg_path)

    try:
        with cfg_path.open() as f:
            data: Dict[str, Any] = yaml.safe_load(f) or {}
    except yaml.YAMLError as exc:
        raise ValueError(f"Error parsing YAML configuration {cfg_path}: {exc}") from exc

    if not isinstance(data, dict):
        raise ValueError(f"YAML configuration {cfg_path} must contain a mapping.")

    # Any remaining unknown keys will raise an error to avoid silent mistakes.
    unknown_keys = set(data) - set(_SECTION_TYPES)
    if unknown_keys:
        raise ValueError(
            f"Unknown top-level configuration keys in YAML: {', '.join(sorted(unknown_keys))}"
        )

    sections = {name: _parse_section(name, data.get(name)) for name in _SECTION_TYPES}
    params = RideassignParams(runtime=RuntimeParams(), **sections)

    logger.debug(
        "Loaded configuration - routing: %s cost: %s fairness: %s io: %s",
        params.routing,
        params.cost,
        params.fairness,
        params.io,
    )
    return params


def resolve_params(
    config: str | Path | RideassignParams | None = None,
    overrides: Mapping[str, Any] | None = None,
    environ: Mapping[str, str] | None = None,
    use_dotenv: bool = True,
) -> RideassignParams:
    """Resolve the run configuration: YAML < environment < overrides.

    Without ``config`` the packaged ``default_config.yaml`` is the baseline,
    falling back to the dataclass defaults if it is missing.
    """
    if use_dotenv and environ is None:
        load_dotenv()

    if isinstance(config, RideassignParams):
        params = config
    elif config is not None:
        params = load_yaml(config)
    elif DEFAULT_CONFIG_PATH.exists():
        params = load_yaml(DEFAULT_CONFIG_PATH)
    else:
        params = RideassignParams()

    for section, values in env_overrides(environ).items():
        logger.debug(f"Applying environment overrides to {section}: {values}")
        params = dataclasses.replace(
            params, **{section: dataclasses.replace(getattr(params, section), **values)}
        )

    if overrides:
        params = params.apply_overrides(**overrides)
    return params
