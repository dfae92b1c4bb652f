"""Route verdicts, driver actions and distance-aware annotations."""

from typing import Dict, List, Optional, Sequence

from ..core.models import RouteMetadata
from ..scoring.criteria import RiskCriteria
from .models import (
    TIER_VALUE,
    DistanceAnnotations,
    NormalizedHazardPoint,
    RouteImpact,
    RouteVerdict,
    VerdictLevel,
)

VERDICT_TEMPLATES = {
    VerdictLevel.URGENT: (
        "Route not recommended - seek an alternative route, multiple critical "
        "hazards present extreme danger",
        [
            "STOP: Do not proceed on this route",
            "Identify and evaluate alternative routes immediately",
            "If no alternative exists, implement maximum safety protocols",
            "Consider convoy travel with emergency support",
            "Use satellite communication throughout the journey",
            "Notify all stakeholders of extreme risk conditions",
            "Have emergency response team on standby",
        ],
    ),
    VerdictLevel.CRITICAL_CAUTION: (
        "Proceed only with maximum safety measures - multiple critical points "
        "require extreme care",
        [
            "Implement all enhanced safety protocols",
            "Mandatory convoy travel with constant communication",
            "Deploy emergency response team along route",
            "Brief all drivers extensively on critical points",
            "Ensure satellite communication availability",
            "Plan emergency evacuation procedures",
        ],
    ),
    VerdictLevel.HIGH_CAUTION: (
        "Enhanced safety measures mandatory - critical points identified",
        [
            "Brief all drivers on critical point locations and procedures",
            "Implement enhanced communication protocols",
            "Ensure emergency equipment readiness",
            "Consider convoy travel for critical sections",
            "Monitor conditions continuously",
        ],
    ),
    VerdictLevel.STANDARD_ENHANCED: (
        "Standard enhanced precautions required",
        [
            "Follow enhanced safety guidelines",
            "Maintain heightened alertness levels",
            "Regular safety and communication checks",
        ],
    ),
    VerdictLevel.NORMAL: (
        "Standard safety protocols sufficient",
        [
            "Follow standard safety guidelines",
        ],
    ),
}


def determine_verdict(
    points: Sequence[NormalizedHazardPoint],
    criteria: Optional[RiskCriteria] = None
) -> RouteVerdict:
    """
    Pick the route verdict from critical count and max/average risk.

    Levels are checked from most to least severe; the first match wins.
    """
    criteria = criteria or RiskCriteria()
    thresholds = criteria.verdict

    critical_count = sum(1 for p in points if p.is_critical)
    scores = [p.risk_score for p in points]
    max_risk = max(scores) if scores else 0.0
    avg_risk = sum(scores) / len(scores) if scores else 0.0

    def matches(level: str) -> bool:
        rule = thresholds[level]
        return (
            critical_count >= rule['critical_count']
            or max_risk >= rule['max_risk']
        )

    if matches('urgent'):
        level = VerdictLevel.URGENT
    elif matches('critical_caution'):
        level = VerdictLevel.CRITICAL_CAUTION
    elif matches('high_caution'):
        level = VerdictLevel.HIGH_CAUTION
    elif avg_risk >= thresholds['enhanced']['avg_risk']:
        level = VerdictLevel.STANDARD_ENHANCED
    else:
        level = VerdictLevel.NORMAL

    recommendation, actions = VERDICT_TEMPLATES[level]

    return RouteVerdict(
        level=level,
        recommendation=recommendation,
        actions=list(actions),
        critical_count=critical_count,
        max_risk_score=max_risk,
        average_risk_score=round(avg_risk, 1),
    )


def _tiered(point: NormalizedHazardPoint, texts: Sequence[str]) -> str:
    """Pick the text for score >= 9 / >= 7 / >= 5 / below."""
    if point.risk_score >= 9:
        return texts[0]
    elif point.risk_score >= 7:
        return texts[1]
    elif point.risk_score >= 5:
        return texts[2]
    return texts[3]


def driver_action(point: NormalizedHazardPoint, route: RouteMetadata) -> str:
    """Instruction for the driver approaching one hazard."""
    attrs = point.attributes
    kind = point.kind

    if kind == 'sharp_turn':
        action = _tiered(point, [
            "STOP: Complete stop required. Check all directions. Proceed at walking speed.",
            "CRITICAL: Reduce to 15-20 km/h. Use horn continuously. Deploy spotter if available.",
            "CAUTION: Reduce speed significantly. Use horn when approaching. Check mirrors.",
            "ALERT: Reduce speed moderately. Maintain lane discipline. Use indicators.",
        ])
        if route.terrain == 'hilly':
            action += " Extra caution for hill climbing/descending."
        if attrs.get('visibility') == 'poor':
            action += " Enhanced visibility checks required."
        if attrs.get('guardrails') is False:
            action += " No guardrails - extreme edge caution."

    elif kind == 'blind_spot':
        action = _tiered(point, [
            "STOP: Full stop mandatory. Deploy spotter. Inch forward with continuous horn.",
            "CRITICAL: Stop and check. Use horn continuously. Proceed extremely slowly.",
            "CAUTION: Reduce speed to 20 km/h. Use horn. Check all blind spots.",
            "ALERT: Use horn when approaching. Maintain alertness. Check mirrors.",
        ])
        visibility = attrs.get('visibility_distance_m')
        if visibility is not None and visibility < 30:
            action += " Very limited visibility - maximum caution."
        if attrs.get('spot_type') == 'intersection':
            action += " Check for cross-traffic."
        if attrs.get('mirror_installed') is False:
            action += " No safety mirror - rely on direct vision only."

    elif kind == 'accident_area':
        if attrs.get('accident_severity') == 'fatal':
            action = (
                "EXTREME CAUTION: Fatal accidents recorded. Consider alternative route. "
                "If you must proceed: convoy travel, emergency communication ready."
            )
        else:
            action = _tiered(point, [
                "EXTREME CAUTION: Severe accident history. Consider alternative route.",
                "HIGH ALERT: Major accidents reported. Reduce speed to 30 km/h.",
                "CAUTION: Accident-prone area. Maintain heightened awareness.",
                "ALERT: Minor incidents reported. Standard safety measures apply.",
            ])
        accident_types = attrs.get('common_accident_types') or ''
        if 'head-on' in accident_types:
            action += " Head-on collision risk - maintain lane discipline."
        if 'overtaking' in accident_types:
            action += " No overtaking in this zone."

    elif kind == 'weather_zone':
        if point.risk_score >= 8:
            action = "WEATHER CRITICAL: Extreme conditions. Consider postponing travel."
        elif point.risk_score >= 6:
            action = "WEATHER HIGH RISK: Adjust speed for conditions. Use appropriate lighting."
        else:
            action = "WEATHER CAUTION: Monitor conditions. Adjust driving for weather."
        condition = attrs.get('weather_condition')
        if condition == 'foggy':
            action += " Use fog lights. Reduce speed to 25 km/h."
        elif condition == 'rainy':
            action += " Reduce speed by 50%. Increase following distance."
        visibility_km = attrs.get('visibility_km')
        if visibility_km is not None and visibility_km < 1:
            action += " Very low visibility - consider stopping safely."

    elif kind == 'dead_zone':
        if point.risk_score >= 8 or attrs.get('dead_zone_severity') == 'critical':
            action = (
                "COMMUNICATION CRITICAL: No cellular coverage. Use satellite "
                "communication. Inform control before entry."
            )
        elif point.risk_score >= 6:
            action = "COMMUNICATION HIGH RISK: Weak signal. Use backup communication."
        else:
            action = "COMMUNICATION CAUTION: Limited coverage. Keep devices charged."
        duration = attrs.get('dead_zone_duration_min')
        if duration is not None and duration > 30:
            action += " Extended dead zone - mandatory convoy travel."

    else:
        action = _tiered(point, [
            "STOP: Severe road hazard. Proceed at walking speed.",
            "CRITICAL: Poor road condition. Reduce to 20-30 km/h.",
            "CAUTION: Degraded road surface. Reduce speed.",
            "ALERT: Minor road issues. Maintain alertness.",
        ])

    return action


def distance_annotations(
    points: Sequence[NormalizedHazardPoint],
    duration_minutes: float
) -> DistanceAnnotations:
    """Quartile flags and spacing of critical points along the route."""
    critical = sorted(
        (p for p in points if p.is_critical),
        key=lambda p: p.distance_from_start_km,
    )

    gaps = [
        b.distance_from_start_km - a.distance_from_start_km
        for a, b in zip(critical, critical[1:])
    ]

    return DistanceAnnotations(
        critical_in_first_quarter=any(p.route_fraction <= 0.25 for p in critical),
        # Late in the journey: driver fatigue compounds the hazard
        critical_in_last_quarter=any(p.route_fraction >= 0.75 for p in critical),
        max_critical_gap_km=round(max(gaps), 2) if gaps else 0.0,
        estimated_duration_minutes=round(duration_minutes, 1),
    )


def build_summary(
    points: Sequence[NormalizedHazardPoint],
    route: RouteMetadata
) -> Dict:
    total = route.total_distance_km
    tiers = {tier: 0 for tier in TIER_VALUE}
    kinds: Dict[str, int] = {}
    for point in points:
        tiers[point.tier] += 1
        kinds[point.kind] = kinds.get(point.kind, 0) + 1

    scores = [p.risk_score for p in points]

    return {
        'total_hazards': len(points),
        'tier_counts': tiers,
        'kind_counts': dict(sorted(kinds.items())),
        'risk_density': round(len(points) / total, 2) if total > 0 else 0.0,
        'critical_density': round(tiers['Critical'] / total, 2) if total > 0 else 0.0,
        'max_risk_score': max(scores) if scores else 0.0,
        'average_risk_score': round(sum(scores) / len(scores), 1) if scores else 0.0,
        'safety_margin': safety_margin(points),
        'total_time_delay_minutes': sum(
            p.route_impact.time_delay_minutes for p in points
        ),
    }


def route_impact(point: NormalizedHazardPoint) -> RouteImpact:
    """Delay and speed reduction a driver should plan for at one hazard."""
    if point.risk_score >= 9:
        return RouteImpact(15.0, 70.0, alternative_required=True)
    elif point.risk_score >= 7:
        return RouteImpact(10.0, 50.0)
    elif point.risk_score >= 5:
        return RouteImpact(5.0, 30.0)
    return RouteImpact()


def safety_margin(points: Sequence[NormalizedHazardPoint]) -> float:
    """Percentage of hazards that are not critical (100 with no hazards)."""
    if not points:
        return 100.0
    critical = sum(1 for p in points if p.is_critical)
    return round(max(0.0, 100.0 - critical / len(points) * 100), 1)


def calculate_route_score(
    points: Sequence[NormalizedHazardPoint],
    route: RouteMetadata
) -> int:
    """0-100 safety score: 100 minus hazard and route-shape deductions."""
    score = 100.0
    for point in points:
        score -= TIER_VALUE.get(point.tier, 1.0) * 2

    if route.terrain == 'hilly':
        score -= 5
    if route.total_distance_km > 200:
        score -= 5

    return int(max(0, min(100, round(score))))


def emergency_protocols(points: Sequence[NormalizedHazardPoint]) -> Dict[str, List[str]]:
    critical = [p for p in points if p.is_critical]

    protocols = {
        'communication': [
            'Establish primary and backup communication channels',
            'Test all communication equipment before departure',
            'Maintain regular check-in schedule every 30 minutes',
        ],
        'medical': [
            'Ensure first aid kits are available and current',
            'Brief personnel on emergency medical procedures',
        ],
        'evacuation': [
            'Identify safe stopping and turnaround points',
            'Plan emergency evacuation routes',
        ],
        'coordination': [
            'Notify relevant authorities of travel plans',
            'Establish command and control structure',
        ],
    }

    if any(p.kind == 'dead_zone' for p in points):
        protocols['communication'].append('Deploy satellite communication for dead zones')
        protocols['communication'].append('Establish emergency rendezvous points')

    if len(critical) > 3:
        protocols['medical'].append('Consider medical personnel accompaniment')
        protocols['medical'].append('Pre-coordinate with emergency medical services')

    if critical:
        protocols['evacuation'].append('Establish emergency helicopter landing zones')
        protocols['evacuation'].append('Pre-position emergency response equipment')

    return protocols
