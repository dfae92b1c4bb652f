"""Top-level entry point combining route grading and zone analysis."""

from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Dict, Optional, Sequence

from .core.models import HazardRecord, RouteMetadata
from .scoring.aggregator import grade_route
from .scoring.criteria import RiskCriteria
from .scoring.models import RiskGradeReport
from .zones.analyzer import ZoneAnalyzer
from .zones.models import ZoneAnalysisReport
from .zones.normalizer import collect_zone_records


@dataclass
class RouteAssessment:
    grade: RiskGradeReport
    zones: ZoneAnalysisReport

    def to_dict(self) -> Dict:
        return {
            "grade": self.grade.to_dict(),
            "zones": self.zones.to_dict(),
        }


class RouteRiskEngine:
    """
    Assess a route from already-fetched hazard records.

    The engine holds only its (read-only) criteria; every call works on the
    inputs it is given and returns fresh report objects.
    """

    def __init__(self, criteria: Optional[RiskCriteria] = None):
        self.criteria = criteria or RiskCriteria()
        self.zone_analyzer = ZoneAnalyzer(self.criteria)

    def grade(
        self,
        hazards_by_category: Dict[str, Sequence[HazardRecord]],
        route: RouteMetadata,
        max_workers: Optional[int] = None
    ) -> RiskGradeReport:
        """Weighted A-D grade for the whole route."""
        return grade_route(
            hazards_by_category, route, self.criteria, max_workers=max_workers
        )

    def analyze_zones(
        self,
        hazards_by_category: Dict[str, Sequence[HazardRecord]],
        route: RouteMetadata,
        min_risk_score: Optional[float] = None,
        segment_count: Optional[int] = None
    ) -> ZoneAnalysisReport:
        """Ranked, clustered hazard zones with a route verdict."""
        records = collect_zone_records(hazards_by_category)
        return self.zone_analyzer.analyze(
            records, route,
            min_risk_score=min_risk_score,
            segment_count=segment_count,
        )

    def assess(
        self,
        hazards_by_category: Dict[str, Sequence[HazardRecord]],
        route: RouteMetadata,
        min_risk_score: Optional[float] = None,
        segment_count: Optional[int] = None
    ) -> RouteAssessment:
        """Run grading and zone analysis side by side over the same inputs."""
        with ThreadPoolExecutor(max_workers=2) as executor:
            grade_future = executor.submit(self.grade, hazards_by_category, route)
            zones_future = executor.submit(
                self.analyze_zones, hazards_by_category, route,
                min_risk_score, segment_count,
            )
            return RouteAssessment(
                grade=grade_future.result(),
                zones=zones_future.result(),
            )
