"""Category scoring and weighted route grading."""

from .models import CategoryScore, RiskGradeReport
from .criteria import RiskCriteria, CATEGORY_NAMES
from .categories import score_category, score_categories
from .aggregator import aggregate_scores, calculate_overall_score, grade_route

__all__ = [
    "CategoryScore",
    "RiskGradeReport",
    "RiskCriteria",
    "CATEGORY_NAMES",
    "score_category",
    "score_categories",
    "aggregate_scores",
    "calculate_overall_score",
    "grade_route",
]
