"""Configuration module for rideassign parameters."""

# Structured parameter system
from .params import (
    RoutingParams,
    CostParams,
    FairnessParams,
    IOParams,
    RuntimeParams,
    RideassignParams,
)
from .loader import load_yaml as load_rideassign_params
from .loader import resolve_params

__all__ = [
    "RoutingParams",
    "CostParams",
    "FairnessParams",
    "IOParams",
    "RuntimeParams",
    "RideassignParams",
    "load_rideassign_params",
    "resolve_params",
]
