"""Exceptions raised by the route risk engine."""


class RouteRiskError(Exception):
    """Base class for route risk errors."""


class ConfigurationError(RouteRiskError, ValueError):
    """Missing or inconsistent configuration (route metadata, criteria file)."""


class InvariantViolation(RouteRiskError, AssertionError):
    """Internal consistency check failed; indicates a defect in the engine."""
