"""Data models for route-level risk grading."""

from dataclasses import dataclass, field, asdict
from typing import Dict, List


@dataclass
class CategoryScore:
    """Normalized 1-5 score for one risk category."""

    category: str
    criterion: str
    score: float
    details: str
    risk_category: str = ""
    data_quality: str = "Available"  # Available | Default | Degraded
    record_count: int = 0

    def __repr__(self) -> str:
        return (
            f"CategoryScore({self.criterion}: {self.score:.2f}, "
            f"{self.data_quality})"
        )

    def to_dict(self) -> Dict:
        return asdict(self)


@dataclass
class RiskGradeReport:
    """Weighted route grade built from the ten category scores."""

    overall_score: float
    grade: str
    risk_level: str
    categories: List[CategoryScore] = field(default_factory=list)
    summary: Dict[str, float] = field(default_factory=dict)

    def __repr__(self) -> str:
        return (
            f"RiskGradeReport(grade={self.grade}, "
            f"score={self.overall_score:.2f}, level='{self.risk_level}')"
        )

    @property
    def category_breakdown(self) -> Dict[str, float]:
        """Criterion name -> score."""
        return {c.criterion: c.score for c in self.categories}

    def to_dict(self) -> Dict:
        return asdict(self)
