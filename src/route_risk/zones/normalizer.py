"""Merge category hazard lists into one tiered, distance-ordered list."""

import math
from typing import Dict, Iterable, List, Optional, Sequence

from ..core.models import HazardRecord, RouteMetadata
from ..core.utils import nearest_route_point
from ..scoring.categories import blind_spot_risk_score, raw_score
from ..scoring.criteria import RiskCriteria
from .models import KIND_LABELS, TIER_LABELS, NormalizedHazardPoint

# Scoring category -> hazard kind shown in zone analysis
ZONE_KINDS = {
    'sharp_turns': 'sharp_turn',
    'blind_spots': 'blind_spot',
    'accident_prone': 'accident_area',
    'weather': 'weather_zone',
    'network_coverage': 'dead_zone',
    'road_conditions': 'road_condition',
}


def kind_label(kind: str) -> str:
    return KIND_LABELS.get(kind, kind.replace('_', ' ').title())


def collect_zone_records(
    hazards_by_category: Dict[str, Sequence[HazardRecord]]
) -> List[HazardRecord]:
    """
    Flatten the location-bound categories into one list.

    Network coverage only contributes its dead zones; categories without a
    position on the route (emergency services, amenities, ...) are skipped.
    """
    records = []
    for category in ZONE_KINDS:
        for record in hazards_by_category.get(category) or []:
            if category == 'network_coverage' and not record.get('is_dead_zone'):
                continue
            records.append(record)
    return records


def clamp_distance(distance: Optional[float], total_distance_km: float) -> float:
    """Missing, NaN or negative distances become 0; overshoots stop at the end."""
    if distance is None or math.isnan(distance) or distance < 0:
        return 0.0
    return min(float(distance), total_distance_km)


def hazard_risk_score(record: HazardRecord) -> float:
    if record.kind == 'blind_spot':
        score = blind_spot_risk_score(record)
    else:
        score = raw_score(record)
    return max(1.0, min(10.0, score))


def normalize_hazard(
    record: HazardRecord,
    route: RouteMetadata,
    criteria: Optional[RiskCriteria] = None,
    duration_minutes: Optional[float] = None
) -> NormalizedHazardPoint:
    """Place one hazard record on the route's distance axis."""
    criteria = criteria or RiskCriteria()
    total = route.total_distance_km

    from_start = clamp_distance(record.distance_from_start_km, total)
    from_end = max(0.0, total - from_start)
    fraction = from_start / total if total > 0 else 0.0

    if duration_minutes is None:
        duration_minutes = criteria.estimated_duration_minutes(route)

    risk_score = hazard_risk_score(record)

    offset = None
    if route.route_points:
        _, offset = nearest_route_point(route.route_points, record.lat, record.lon)

    return NormalizedHazardPoint(
        kind=record.kind,
        label=kind_label(record.kind),
        lat=record.lat,
        lon=record.lon,
        risk_score=risk_score,
        tier=TIER_LABELS[criteria.get_tier(risk_score)],
        distance_from_start_km=from_start,
        distance_from_end_km=from_end,
        route_fraction=fraction,
        eta_minutes=round(fraction * duration_minutes, 1),
        route_offset_km=offset,
        record_id=record.record_id,
        attributes=dict(record.attributes),
    )


def rank_key(point: NormalizedHazardPoint):
    """Severity first, then travel order within a severity band."""
    return -point.tier_rank, point.distance_from_start_km


def normalize_hazards(
    records: Iterable[HazardRecord],
    route: RouteMetadata,
    criteria: Optional[RiskCriteria] = None,
    min_risk_score: Optional[float] = None
) -> List[NormalizedHazardPoint]:
    """
    Normalize and rank hazard records.

    Args:
        records: Hazard records of any kind
        route: Route the hazards lie on
        criteria: Tier thresholds (defaults if None)
        min_risk_score: Drop hazards scoring below this value

    Returns:
        Hazard points sorted by tier (Critical first), then distance
    """
    criteria = criteria or RiskCriteria()
    duration = criteria.estimated_duration_minutes(route)

    points = [normalize_hazard(r, route, criteria, duration) for r in records]

    if min_risk_score is not None:
        points = [p for p in points if p.risk_score >= min_risk_score]

    # sorted() is stable, so equal keys keep input order
    return sorted(points, key=rank_key)
