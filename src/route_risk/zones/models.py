"""Data models for hazard zone analysis."""

from dataclasses import dataclass, field, asdict
from enum import Enum
from typing import Any, Dict, List, Optional

TIER_LABELS = {
    'critical': 'Critical',
    'high': 'High',
    'medium': 'Medium',
    'low': 'Low',
    'minimal': 'Minimal',
}

TIER_RANK = {
    'Critical': 4,
    'High': 3,
    'Medium': 2,
    'Low': 1,
    'Minimal': 0,
}

# Per-hazard deduction weight used by the 0-100 route score
TIER_VALUE = {
    'Critical': 4.0,
    'High': 3.0,
    'Medium': 2.0,
    'Low': 1.0,
    'Minimal': 0.5,
}

KIND_LABELS = {
    'sharp_turn': 'Sharp Turn',
    'blind_spot': 'Blind Spot',
    'accident_area': 'Accident-Prone Area',
    'weather_zone': 'Weather Risk Zone',
    'dead_zone': 'Communication Dead Zone',
    'road_condition': 'Road Condition',
}


class VerdictLevel(str, Enum):
    URGENT = "URGENT"
    CRITICAL_CAUTION = "CRITICAL CAUTION"
    HIGH_CAUTION = "HIGH CAUTION"
    STANDARD_ENHANCED = "STANDARD ENHANCED PRECAUTIONS"
    NORMAL = "NORMAL"


@dataclass
class RouteImpact:
    """Expected slowdown at one hazard."""

    time_delay_minutes: float = 0.0
    speed_reduction_percent: float = 0.0
    alternative_required: bool = False


@dataclass
class NormalizedHazardPoint:
    """A hazard placed on the route's distance axis with a severity tier."""

    kind: str
    label: str
    lat: float
    lon: float
    risk_score: float
    tier: str
    distance_from_start_km: float
    distance_from_end_km: float
    route_fraction: float
    eta_minutes: float = 0.0
    driver_action: str = ""
    route_impact: RouteImpact = field(default_factory=RouteImpact)
    route_offset_km: Optional[float] = None
    record_id: Optional[str] = None
    attributes: Dict[str, Any] = field(default_factory=dict)

    def __repr__(self) -> str:
        return (
            f"NormalizedHazardPoint({self.label} @ "
            f"{self.distance_from_start_km:.1f}km, {self.tier}, "
            f"risk={self.risk_score:.1f})"
        )

    @property
    def tier_rank(self) -> int:
        return TIER_RANK.get(self.tier, 0)

    @property
    def is_critical(self) -> bool:
        return self.tier == 'Critical'


@dataclass
class Segment:
    """A fixed-width slice of the route."""

    index: int
    start_km: float
    end_km: float
    hazard_count: int = 0
    density: float = 0.0
    risk_sum: float = 0.0
    risk_level: str = "Low"
    recommendation: str = ""

    @property
    def width_km(self) -> float:
        return self.end_km - self.start_km


@dataclass
class Cluster:
    """A run of nearby hazards treated as one concentration area."""

    center_km: float
    members: List[NormalizedHazardPoint] = field(default_factory=list)
    average_risk_score: float = 0.0
    max_risk_score: float = 0.0

    def __repr__(self) -> str:
        return (
            f"Cluster(center={self.center_km:.1f}km, "
            f"size={len(self.members)}, avg={self.average_risk_score:.1f})"
        )

    @property
    def start_km(self) -> float:
        return min(m.distance_from_start_km for m in self.members)

    @property
    def end_km(self) -> float:
        return max(m.distance_from_start_km for m in self.members)

    @property
    def size(self) -> int:
        return len(self.members)


@dataclass
class RiskProgression:
    """Risk-weighted hazard load across equal route buckets."""

    bucket_risk: List[float] = field(default_factory=list)
    bucket_width_km: float = 0.0
    peak_index: int = 0
    peak_risk: float = 0.0
    mean_risk: float = 0.0
    std_dev: float = 0.0


@dataclass
class SpatialAnalysis:
    segments: List[Segment]
    clusters: List[Cluster]
    cluster_threshold_km: float
    safest_segment: Optional[Segment]
    riskiest_segment: Optional[Segment]
    progression: RiskProgression


@dataclass
class RouteVerdict:
    level: VerdictLevel
    recommendation: str
    actions: List[str]
    critical_count: int = 0
    max_risk_score: float = 0.0
    average_risk_score: float = 0.0


@dataclass
class DistanceAnnotations:
    critical_in_first_quarter: bool = False
    critical_in_last_quarter: bool = False
    max_critical_gap_km: float = 0.0
    estimated_duration_minutes: float = 0.0


@dataclass
class ZoneAnalysisReport:
    """Ranked hazard zones, their spatial layout and the route verdict."""

    hazards: List[NormalizedHazardPoint]
    segments: List[Segment]
    clusters: List[Cluster]
    verdict: VerdictLevel
    actions: List[str]
    recommendation: str = ""
    safest_segment: Optional[Segment] = None
    riskiest_segment: Optional[Segment] = None
    progression: Optional[RiskProgression] = None
    annotations: Optional[DistanceAnnotations] = None
    summary: Dict[str, Any] = field(default_factory=dict)
    route_score: int = 100
    emergency_protocols: Dict[str, List[str]] = field(default_factory=dict)

    def __repr__(self) -> str:
        return (
            f"ZoneAnalysisReport(verdict={self.verdict.value}, "
            f"hazards={len(self.hazards)}, clusters={len(self.clusters)})"
        )

    @property
    def critical_points(self) -> List[NormalizedHazardPoint]:
        return [h for h in self.hazards if h.is_critical]

    def to_dict(self) -> Dict:
        data = asdict(self)
        data['verdict'] = self.verdict.value
        return data
