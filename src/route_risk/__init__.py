"""Route Risk - Grade routes and analyze hazard zones from collected hazard data."""

__version__ = "0.1.0"

# Expose main classes for programmatic use
from .core import ConfigurationError, HazardRecord, RouteMetadata, RouteRiskError
from .scoring import RiskCriteria, grade_route
from .zones import ZoneAnalyzer
from .engine import RouteAssessment, RouteRiskEngine

__all__ = [
    "__version__",
    "ConfigurationError",
    "HazardRecord",
    "RouteMetadata",
    "RouteRiskError",
    "RiskCriteria",
    "grade_route",
    "ZoneAnalyzer",
    "RouteAssessment",
    "RouteRiskEngine",
]
