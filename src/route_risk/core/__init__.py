"""Core utilities for the route risk engine."""

from .utils import (
    haversine_distance_km,
    line_of_sight_clearance,
    line_of_sight_between,
    stopping_sight_distance_m,
    to_local_cartesian_m,
    load_gpx_route,
    nearest_route_point,
)
from .errors import RouteRiskError, ConfigurationError, InvariantViolation
from .models import RoutePoint, RouteMetadata, HazardRecord

__all__ = [
    "haversine_distance_km",
    "line_of_sight_clearance",
    "line_of_sight_between",
    "stopping_sight_distance_m",
    "to_local_cartesian_m",
    "load_gpx_route",
    "nearest_route_point",
    "RouteRiskError",
    "ConfigurationError",
    "InvariantViolation",
    "RoutePoint",
    "RouteMetadata",
    "HazardRecord",
]
