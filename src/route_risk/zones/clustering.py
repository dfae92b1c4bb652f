"""Segment and cluster hazards along the route's distance axis."""

import math
import statistics
from typing import List, Optional, Sequence

from ..core.errors import InvariantViolation
from ..core.models import RouteMetadata
from ..scoring.criteria import RiskCriteria
from .models import (
    Cluster,
    NormalizedHazardPoint,
    RiskProgression,
    Segment,
    SpatialAnalysis,
)


def segment_index(distance_km: float, width_km: float, count: int) -> int:
    """Bucket index for a distance; the route end belongs to the last bucket."""
    if width_km <= 0:
        return 0
    return min(count - 1, max(0, int(math.floor(distance_km / width_km))))


def _segment_risk_level(density: float):
    if density > 0.5:
        return 'High', 'Consider alternative route for this segment'
    elif density > 0.2:
        return 'Medium', 'Enhanced caution required'
    return 'Low', 'Standard precautions sufficient'


def build_segments(
    points: Sequence[NormalizedHazardPoint],
    total_distance_km: float,
    count: int = 4
) -> List[Segment]:
    """
    Split [0, total] into `count` equal segments and count hazards in each.

    Args:
        points: Normalized hazard points
        total_distance_km: Route length
        count: Number of segments (>= 1)

    Returns:
        Contiguous segments covering the whole route
    """
    if count < 1:
        raise ValueError(f"Segment count must be at least 1 (got {count})")

    width = total_distance_km / count
    segments = []
    for i in range(count):
        # Last segment ends exactly at the route end
        end = total_distance_km if i == count - 1 else (i + 1) * width
        segments.append(Segment(index=i, start_km=i * width, end_km=end))

    for point in points:
        segment = segments[segment_index(point.distance_from_start_km, width, count)]
        segment.hazard_count += 1
        segment.risk_sum += point.risk_score

    for segment in segments:
        segment_width = segment.width_km
        segment.density = (
            segment.hazard_count / segment_width if segment_width > 0 else 0.0
        )
        segment.risk_sum = round(segment.risk_sum, 2)
        segment.risk_level, segment.recommendation = _segment_risk_level(
            segment.density
        )

    check_segment_coverage(segments, total_distance_km, len(points))
    return segments


def check_segment_coverage(
    segments: Sequence[Segment],
    total_distance_km: float,
    hazard_count: int
):
    """Raise InvariantViolation unless segments tile the route and hold every hazard."""
    if not segments:
        raise InvariantViolation("No segments produced")

    if segments[0].start_km != 0 or not math.isclose(
        segments[-1].end_km, total_distance_km, abs_tol=1e-9
    ):
        raise InvariantViolation("Segments do not span the full route")

    for previous, current in zip(segments, segments[1:]):
        if not math.isclose(previous.end_km, current.start_km, abs_tol=1e-9):
            raise InvariantViolation(
                f"Gap between segments {previous.index} and {current.index}"
            )

    counted = sum(s.hazard_count for s in segments)
    if counted != hazard_count:
        raise InvariantViolation(
            f"Segments hold {counted} hazards, expected {hazard_count}"
        )


def cluster_hazards(
    points: Sequence[NormalizedHazardPoint],
    threshold_km: float
) -> List[Cluster]:
    """
    Greedy single-pass clustering along the route.

    A point joins the open cluster when it lies within `threshold_km` of the
    cluster's current mean distance; the mean is updated after it joins.
    Otherwise the cluster is closed and the point opens a new one.

    Returns:
        All clusters in travel order, singletons included
    """
    ordered = sorted(points, key=lambda p: p.distance_from_start_km)

    clusters = []
    current: Optional[Cluster] = None
    distance_sum = 0.0

    for point in ordered:
        distance = point.distance_from_start_km
        if current is not None and distance - current.center_km <= threshold_km:
            current.members.append(point)
            distance_sum += distance
            current.center_km = distance_sum / len(current.members)
        else:
            current = Cluster(center_km=distance, members=[point])
            distance_sum = distance
            clusters.append(current)

    for cluster in clusters:
        scores = [m.risk_score for m in cluster.members]
        cluster.average_risk_score = round(sum(scores) / len(scores), 2)
        cluster.max_risk_score = max(scores)

    return clusters


def find_concentration_areas(
    points: Sequence[NormalizedHazardPoint],
    threshold_km: float
) -> List[Cluster]:
    """Clusters with at least two hazards."""
    return [c for c in cluster_hazards(points, threshold_km) if c.size >= 2]


def risk_progression(
    points: Sequence[NormalizedHazardPoint],
    total_distance_km: float,
    buckets: int = 10
) -> RiskProgression:
    """Sum of hazard risk scores per equal route bucket, with peak and spread."""
    if buckets < 1:
        raise ValueError(f"Bucket count must be at least 1 (got {buckets})")

    width = total_distance_km / buckets
    bucket_risk = [0.0] * buckets
    for point in points:
        bucket_risk[segment_index(point.distance_from_start_km, width, buckets)] += (
            point.risk_score
        )

    peak_risk = max(bucket_risk)
    return RiskProgression(
        bucket_risk=[round(r, 2) for r in bucket_risk],
        bucket_width_km=width,
        peak_index=bucket_risk.index(peak_risk),
        peak_risk=round(peak_risk, 2),
        mean_risk=round(statistics.mean(bucket_risk), 2),
        std_dev=round(statistics.pstdev(bucket_risk), 2),
    )


def analyze_spatial(
    points: Sequence[NormalizedHazardPoint],
    route: RouteMetadata,
    criteria: Optional[RiskCriteria] = None,
    segment_count: Optional[int] = None,
    progression_buckets: Optional[int] = None
) -> SpatialAnalysis:
    """Segments, concentration areas and risk progression for one route."""
    criteria = criteria or RiskCriteria()
    total = route.total_distance_km

    if segment_count is None:
        segment_count = criteria.segments['summary']
    if progression_buckets is None:
        progression_buckets = criteria.segments['progression']

    segments = build_segments(points, total, segment_count)
    threshold = criteria.cluster_threshold_km(total)

    return SpatialAnalysis(
        segments=segments,
        clusters=find_concentration_areas(points, threshold),
        cluster_threshold_km=threshold,
        # min()/max() keep the first segment on ties
        safest_segment=min(segments, key=lambda s: s.hazard_count),
        riskiest_segment=max(segments, key=lambda s: s.hazard_count),
        progression=risk_progression(points, total, progression_buckets),
    )
