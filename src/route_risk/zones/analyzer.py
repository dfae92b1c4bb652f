"""Hazard zone analysis pipeline: normalize, cluster, rank and recommend."""

from typing import Iterable, Optional

from ..core.models import HazardRecord, RouteMetadata
from ..scoring.criteria import RiskCriteria
from .clustering import analyze_spatial
from .models import ZoneAnalysisReport
from .normalizer import normalize_hazards
from .recommender import (
    build_summary,
    calculate_route_score,
    determine_verdict,
    distance_annotations,
    driver_action,
    emergency_protocols,
    route_impact,
)


class ZoneAnalyzer:
    """Turn a route's hazard records into a ranked zone report."""

    def __init__(self, criteria: Optional[RiskCriteria] = None):
        """
        Initialize analyzer.

        Args:
            criteria: RiskCriteria configuration object (defaults if None)
        """
        self.criteria = criteria or RiskCriteria()

    def analyze(
        self,
        records: Iterable[HazardRecord],
        route: RouteMetadata,
        min_risk_score: Optional[float] = None,
        segment_count: Optional[int] = None
    ) -> ZoneAnalysisReport:
        """
        Analyze hazard zones along a route.

        Args:
            records: Hazard records from every location-bound category
            route: Route metadata
            min_risk_score: Only include hazards at or above this score
            segment_count: Number of summary segments (criteria default if None)

        Returns:
            ZoneAnalysisReport with hazards ranked Critical-first, then by distance
        """
        # 1. Normalize and rank
        hazards = normalize_hazards(
            records, route, self.criteria, min_risk_score=min_risk_score
        )
        for hazard in hazards:
            hazard.driver_action = driver_action(hazard, route)
            hazard.route_impact = route_impact(hazard)

        # 2. Segments, clusters and progression
        spatial = analyze_spatial(
            hazards, route, self.criteria, segment_count=segment_count
        )

        # 3. Verdict and annotations
        verdict = determine_verdict(hazards, self.criteria)
        duration = self.criteria.estimated_duration_minutes(route)

        return ZoneAnalysisReport(
            hazards=hazards,
            segments=spatial.segments,
            clusters=spatial.clusters,
            verdict=verdict.level,
            actions=verdict.actions,
            recommendation=verdict.recommendation,
            safest_segment=spatial.safest_segment,
            riskiest_segment=spatial.riskiest_segment,
            progression=spatial.progression,
            annotations=distance_annotations(hazards, duration),
            summary={
                **build_summary(hazards, route),
                'cluster_threshold_km': spatial.cluster_threshold_km,
            },
            route_score=calculate_route_score(hazards, route),
            emergency_protocols=emergency_protocols(hazards),
        )
