"""Per-category hazard scoring.

Each scorer turns one category's hazard records into a 1-5 score plus a
short details string. Empty categories get a fixed, category-specific
default instead of an error, and any failure inside a scorer degrades to
that same default so one bad category never aborts the whole grade.
"""

import math
from concurrent.futures import ThreadPoolExecutor
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from ..core.errors import ConfigurationError
from ..core.models import HazardRecord, RouteMetadata
from ..core.utils import stopping_sight_distance_m
from .criteria import CATEGORY_NAMES, RiskCriteria
from .models import CategoryScore

MIN_SCORE = 1.0
MAX_SCORE = 5.0

EMERGENCY_SERVICE_TYPES = ('hospital', 'police', 'fire_station')
AMENITY_SERVICE_TYPES = ('amenity', 'fuel', 'rest_area', 'restaurant', 'hotel')

ScoreResult = Tuple[float, str]


def clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def average_contribution(
    records: Sequence[HazardRecord],
    divisor: float,
    score_of: Callable[[HazardRecord], float]
) -> float:
    """Unweighted mean of score_of / divisor, clamped to the 1-5 scale."""
    total = sum(clamp(score_of(r), 1.0, 10.0) / divisor for r in records)
    return clamp(total / len(records), MIN_SCORE, MAX_SCORE)


def has_raw_score(record: HazardRecord) -> bool:
    """True when the record carries a usable (non-missing, non-NaN) raw score."""
    return record.risk_score is not None and not math.isnan(record.risk_score)


def raw_score(record: HazardRecord) -> float:
    """Collected 1-10 score; records without one count as the scale minimum."""
    if not has_raw_score(record):
        return 1.0
    return float(record.risk_score)


def blind_spot_risk_score(record: HazardRecord) -> float:
    """
    Raw 1-10 score for a blind spot.

    Records without a collected score are rated from their visibility
    distance against the stopping sight distance at the local speed limit.
    """
    if has_raw_score(record):
        return float(record.risk_score)

    visibility = record.get('visibility_distance_m')
    if visibility is None:
        return 5.0

    visibility = float(visibility)
    speed = float(record.get('speed_limit_kmh', 60))
    required = stopping_sight_distance_m(speed)
    ratio = visibility / required if required > 0 else 1.0

    risk_score = 1.0

    if visibility < 50:
        risk_score += 4
    elif visibility < 100:
        risk_score += 3
    elif visibility < 150:
        risk_score += 2
    elif visibility < 200:
        risk_score += 1

    if ratio < 0.6:
        risk_score += 3
    elif ratio < 0.8:
        risk_score += 2
    elif ratio < 1.0:
        risk_score += 1

    return min(10.0, risk_score)


def has_inadequate_sight_distance(record: HazardRecord) -> bool:
    visibility = record.get('visibility_distance_m')
    if visibility is None:
        return False
    speed = float(record.get('speed_limit_kmh', 60))
    return float(visibility) < stopping_sight_distance_m(speed)


# ----------------------------------------------------------------------
# Defaults for categories without data
# ----------------------------------------------------------------------

def default_road_conditions(route: RouteMetadata) -> ScoreResult:
    scores = {'hilly': 3.5, 'urban': 2.0, 'rural': 3.0}
    score = scores.get(route.terrain, 2.5)
    return score, f"No road condition data - estimated from {route.terrain} terrain"


def default_accident_prone(route: RouteMetadata) -> ScoreResult:
    return 1.0, "No accident-prone areas identified"


def default_sharp_turns(route: RouteMetadata) -> ScoreResult:
    scores = {'hilly': 3.5, 'rural': 2.0, 'urban': 1.5}
    score = scores.get(route.terrain, 1.0)
    # Longer routes tend to have more turns
    if route.total_distance_km > 100:
        score += 0.5
    return (
        clamp(score, MIN_SCORE, MAX_SCORE),
        f"No sharp turn data - estimated from {route.terrain} terrain and route length",
    )


def default_blind_spots(route: RouteMetadata) -> ScoreResult:
    scores = {'hilly': 3.0, 'rural': 2.5, 'urban': 1.5}
    score = scores.get(route.terrain, 1.0)
    return score, f"No blind spot data - estimated from {route.terrain} terrain"


def default_traffic_density(route: RouteMetadata) -> ScoreResult:
    scores = {'urban': 3.0, 'rural': 1.5}
    score = scores.get(route.terrain, 2.0)
    return score, f"No traffic data - estimated from {route.terrain} terrain"


def default_weather(route: RouteMetadata) -> ScoreResult:
    return 3.0, "No weather data available - moderate seasonal risk assumed"


def default_emergency_services(route: RouteMetadata) -> ScoreResult:
    return 4.0, "No emergency services found within range"


def default_network_coverage(route: RouteMetadata) -> ScoreResult:
    scores = {'rural': 4.0, 'hilly': 4.5}
    score = scores.get(route.terrain, 3.0)
    return score, f"No network coverage data - estimated from {route.terrain} terrain"


def default_amenities(route: RouteMetadata) -> ScoreResult:
    return 3.0, "No roadside amenity data available"


def default_security(route: RouteMetadata) -> ScoreResult:
    score = 2.0 if route.terrain == 'rural' else 1.0
    # Long routes increase exposure
    if route.total_distance_km > 200:
        score += 0.5
    return score, "General security assessment based on route characteristics"


# ----------------------------------------------------------------------
# Scorers for categories with data
# ----------------------------------------------------------------------

def score_road_conditions(records, route, criteria) -> ScoreResult:
    score = average_contribution(
        records, criteria.get_divisor('road_conditions'), raw_score
    )
    poor = sum(
        1 for r in records
        if r.get('surface_quality') in ('poor', 'critical')
    )
    return score, (
        f"{len(records)} road segments analyzed, "
        f"{poor} with poor or critical surface"
    )


def score_accident_prone(records, route, criteria) -> ScoreResult:
    score = average_contribution(
        records, criteria.get_divisor('accident_prone'), raw_score
    )
    fatal = sum(1 for r in records if r.get('accident_severity') == 'fatal')
    return score, (
        f"{len(records)} accident-prone areas identified, "
        f"{fatal} with fatal accident history"
    )


def score_sharp_turns(records, route, criteria) -> ScoreResult:
    score = average_contribution(
        records, criteria.get_divisor('sharp_turns'), raw_score
    )
    hairpins = sum(1 for r in records if float(r.get('turn_angle', 0)) > 120)
    return score, f"{len(records)} sharp turns analyzed, {hairpins} hairpin"


def score_blind_spots(records, route, criteria) -> ScoreResult:
    score = average_contribution(
        records, criteria.get_divisor('blind_spots'), blind_spot_risk_score
    )
    inadequate = sum(1 for r in records if has_inadequate_sight_distance(r))
    return score, (
        f"{len(records)} blind spots analyzed, "
        f"{inadequate} below stopping sight distance"
    )


def score_traffic_density(records, route, criteria) -> ScoreResult:
    score = average_contribution(
        records, criteria.get_divisor('traffic_density'), raw_score
    )
    heavy = sum(
        1 for r in records
        if r.get('congestion_level') in ('heavy', 'severe')
    )
    return score, (
        f"{len(records)} traffic data points analyzed, "
        f"{heavy} with heavy congestion"
    )


def score_weather(records, route, criteria) -> ScoreResult:
    score = average_contribution(
        records, criteria.get_divisor('weather'), raw_score
    )
    severe = sum(
        1 for r in records
        if r.get('driving_condition_impact') == 'severe'
    )
    return score, (
        f"{len(records)} weather conditions analyzed, "
        f"{severe} with severe driving impact"
    )


def score_emergency_services(records, route, criteria) -> ScoreResult:
    counts = {service: 0 for service in EMERGENCY_SERVICE_TYPES}
    for record in records:
        service_type = record.get('service_type')
        if service_type in counts:
            counts[service_type] += 1

    # Start at high risk and reduce for available services
    score = 5.0

    if counts['hospital'] >= 3:
        score -= 1.5
    elif counts['hospital'] >= 1:
        score -= 1.0

    if counts['police'] >= 2:
        score -= 1.0
    elif counts['police'] >= 1:
        score -= 0.5

    if counts['fire_station'] >= 2:
        score -= 1.0
    elif counts['fire_station'] >= 1:
        score -= 0.5

    return clamp(score, MIN_SCORE, MAX_SCORE), (
        f"{len(records)} emergency facilities within range "
        f"({counts['hospital']} hospitals, {counts['police']} police, "
        f"{counts['fire_station']} fire stations)"
    )


def score_network_coverage(records, route, criteria) -> ScoreResult:
    score = average_contribution(
        records, criteria.get_divisor('network_coverage'), raw_score
    )
    dead_zones = sum(1 for r in records if r.get('is_dead_zone'))
    return score, (
        f"{len(records)} network coverage points analyzed, "
        f"{dead_zones} dead zones"
    )


def score_amenities(records, route, criteria) -> ScoreResult:
    amenities = [
        r for r in records
        if r.get('service_type', 'amenity') in AMENITY_SERVICE_TYPES
    ]

    if len(amenities) >= 10:
        score = 1.0
    elif len(amenities) >= 5:
        score = 1.5
    elif len(amenities) >= 2:
        score = 2.0
    else:
        score = 3.0

    return score, f"{len(amenities)} fuel stations and rest areas available"


def score_security(records, route, criteria) -> ScoreResult:
    score = average_contribution(
        records, criteria.get_divisor('security'), raw_score
    )
    return score, f"{len(records)} security reports analyzed"


SCORERS = {
    'road_conditions': (score_road_conditions, default_road_conditions),
    'accident_prone': (score_accident_prone, default_accident_prone),
    'sharp_turns': (score_sharp_turns, default_sharp_turns),
    'blind_spots': (score_blind_spots, default_blind_spots),
    'traffic_density': (score_traffic_density, default_traffic_density),
    'weather': (score_weather, default_weather),
    'emergency_services': (score_emergency_services, default_emergency_services),
    'network_coverage': (score_network_coverage, default_network_coverage),
    'amenities': (score_amenities, default_amenities),
    'security': (score_security, default_security),
}


def score_category(
    category: str,
    records: Optional[Sequence[HazardRecord]],
    route: RouteMetadata,
    criteria: Optional[RiskCriteria] = None
) -> CategoryScore:
    """
    Score one category.

    Never raises for bad records: a failing scorer falls back to the
    category default and marks the result as degraded.
    """
    if category not in SCORERS:
        raise ConfigurationError(f"Unknown risk category: {category}")

    criteria = criteria or RiskCriteria()
    scorer, default = SCORERS[category]
    records = list(records or [])

    if not records:
        score, details = default(route)
        quality = "Default"
    else:
        try:
            score, details = scorer(records, route, criteria)
            quality = "Available"
        except Exception as e:
            score, details = default(route)
            details = f"{details} (degraded: {e})"
            quality = "Degraded"
            print(f"⚠️  {CATEGORY_NAMES[category]} scoring failed, using default: {e}")

    score = round(clamp(score, MIN_SCORE, MAX_SCORE), 2)

    return CategoryScore(
        category=category,
        criterion=CATEGORY_NAMES[category],
        score=score,
        details=details,
        risk_category=criteria.get_risk_category(score),
        data_quality=quality,
        record_count=len(records),
    )


def score_categories(
    hazards_by_category: Dict[str, Sequence[HazardRecord]],
    route: RouteMetadata,
    criteria: Optional[RiskCriteria] = None,
    max_workers: Optional[int] = None
) -> List[CategoryScore]:
    """
    Score all ten categories, in reporting order.

    Categories are independent, so they are scored on a thread pool and
    joined before returning. Pass max_workers=1 to score sequentially.
    """
    criteria = criteria or RiskCriteria()

    unknown = set(hazards_by_category) - set(CATEGORY_NAMES)
    if unknown:
        raise ConfigurationError(f"Unknown risk categories: {sorted(unknown)}")

    categories = list(CATEGORY_NAMES)

    def run(category: str) -> CategoryScore:
        return score_category(
            category, hazards_by_category.get(category), route, criteria
        )

    if max_workers == 1:
        return [run(category) for category in categories]

    with ThreadPoolExecutor(max_workers=max_workers) as executor:
        # map() preserves input order regardless of completion order
        return list(executor.map(run, categories))
