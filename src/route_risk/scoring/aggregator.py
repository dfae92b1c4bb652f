"""Weighted combination of category scores into one route grade."""

from typing import Dict, Optional, Sequence

from ..core.models import HazardRecord, RouteMetadata
from .categories import score_categories
from .criteria import RiskCriteria
from .models import CategoryScore, RiskGradeReport


def calculate_overall_score(
    scores: Sequence[CategoryScore],
    criteria: RiskCriteria
) -> float:
    """
    Weighted mean of category scores.

    Dividing by the summed weight keeps the result on the 1-5 scale when a
    category is left out.
    """
    weighted_sum = 0.0
    total_weight = 0.0

    for score in scores:
        weight = criteria.get_weight(score.category)
        weighted_sum += score.score * weight
        total_weight += weight

    if total_weight <= 0:
        return 0.0

    return weighted_sum / total_weight


def aggregate_scores(
    scores: Sequence[CategoryScore],
    criteria: Optional[RiskCriteria] = None
) -> RiskGradeReport:
    """Build the route grade report from already computed category scores."""
    criteria = criteria or RiskCriteria()
    scores = list(scores)

    overall = round(calculate_overall_score(scores, criteria), 2)
    grade, risk_level = criteria.get_grade(overall)

    average = sum(s.score for s in scores) / len(scores) if scores else 0.0

    summary = {
        'critical_factors': sum(1 for s in scores if s.score >= 4.0),
        'high_risk_factors': sum(1 for s in scores if 3.0 <= s.score < 4.0),
        'average_category_score': round(average, 2),
    }

    return RiskGradeReport(
        overall_score=overall,
        grade=grade,
        risk_level=risk_level,
        categories=scores,
        summary=summary,
    )


def grade_route(
    hazards_by_category: Dict[str, Sequence[HazardRecord]],
    route: RouteMetadata,
    criteria: Optional[RiskCriteria] = None,
    max_workers: Optional[int] = None
) -> RiskGradeReport:
    """Score every category for the route and combine them into a grade."""
    criteria = criteria or RiskCriteria()
    scores = score_categories(
        hazards_by_category, route, criteria, max_workers=max_workers
    )
    return aggregate_scores(scores, criteria)
