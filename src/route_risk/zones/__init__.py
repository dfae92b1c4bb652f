"""Hazard zone analysis along a route."""

from .models import (
    Cluster,
    NormalizedHazardPoint,
    Segment,
    VerdictLevel,
    ZoneAnalysisReport,
)
from .normalizer import collect_zone_records, normalize_hazards
from .clustering import build_segments, cluster_hazards, find_concentration_areas
from .recommender import determine_verdict
from .analyzer import ZoneAnalyzer

__all__ = [
    "Cluster",
    "NormalizedHazardPoint",
    "Segment",
    "VerdictLevel",
    "ZoneAnalysisReport",
    "collect_zone_records",
    "normalize_hazards",
    "build_segments",
    "cluster_hazards",
    "find_concentration_areas",
    "determine_verdict",
    "ZoneAnalyzer",
]
