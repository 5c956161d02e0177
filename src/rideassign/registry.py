"""Registry for pluggable components in rideassign."""

from rideassign.utils.logging import RideassignLogger

from .interfaces import CostModifier, RoutingBackend

logger = RideassignLogger.get_logger(__name__)

# Registries for each component type
ROUTING_BACKEND_REGISTRY: dict[str, type[RoutingBackend]] = {}
COST_MODIFIER_REGISTRY: dict[str, type[CostModifier]] = {}

__all__ = [
    "register_routing_backend",
    "register_cost_modifier",
    # Expose registries for advanced users who need direct access
    "ROUTING_BACKEND_REGISTRY",
    "COST_MODIFIER_REGISTRY",
]


def register_routing_backend(name: str):
    """Decorator to register a routing backend implementation."""

    def decorator(cls: type[RoutingBackend]):
        if name in ROUTING_BACKEND_REGISTRY:
            raise ValueError(f"Routing backend '{name}' is already registered")
        ROUTING_BACKEND_REGISTRY[name] = cls
        logger.debug(f"Registered routing backend '{name}'")
        return cls

    return decorator


def register_cost_modifier(name: str):
    """Decorator to register a cost modifier (fairness penalty) implementation."""

    def decorator(cls: type[CostModifier]):
        if name in COST_MODIFIER_REGISTRY:
            raise ValueError(f"Cost modifier '{name}' is already registered")
        COST_MODIFIER_REGISTRY[name] = cls
        logger.debug(f"Registered cost modifier '{name}'")
        return cls

    return decorator
