import pytest

from route_risk.core.models import HazardRecord, RouteMetadata
from route_risk.zones.analyzer import ZoneAnalyzer
from route_risk.zones.models import VerdictLevel
from route_risk.zones.recommender import (
    calculate_route_score,
    determine_verdict,
    distance_annotations,
    driver_action,
    emergency_protocols,
    route_impact,
    safety_margin,
)


def test_many_critical_points_are_urgent(make_points, route):
    pairs = [(km, 9.0) for km in (10, 20, 30, 40, 50)] + [(60, 2.0), (70, 2.0)] + [
        (km, 2.0) for km in (75, 80, 85)
    ]
    verdict = determine_verdict(make_points(pairs, route))

    assert verdict.level == VerdictLevel.URGENT
    assert verdict.critical_count == 5
    assert "STOP: Do not proceed on this route" in verdict.actions


@pytest.mark.parametrize("scores, level", [
    ([9.6], VerdictLevel.URGENT),
    ([9.0, 9.0, 9.0], VerdictLevel.CRITICAL_CAUTION),
    ([9.0], VerdictLevel.CRITICAL_CAUTION),
    ([8.5, 3.0], VerdictLevel.HIGH_CAUTION),
    ([6.5, 7.0], VerdictLevel.STANDARD_ENHANCED),
    ([3.0, 4.0], VerdictLevel.NORMAL),
    ([], VerdictLevel.NORMAL),
])
def test_verdict_levels(make_points, route, scores, level):
    points = make_points([(10 * (i + 1), s) for i, s in enumerate(scores)], route)
    assert determine_verdict(points).level == level


def test_distance_annotations(make_points, route):
    points = make_points([(10, 9.5), (25, 3.0), (50, 9.2), (90, 9.1)], route)
    annotations = distance_annotations(points, 150.0)

    assert annotations.critical_in_first_quarter
    assert annotations.critical_in_last_quarter
    assert annotations.max_critical_gap_km == 40.0
    assert annotations.estimated_duration_minutes == 150.0


def test_distance_annotations_quarter_boundary(make_points, route):
    annotations = distance_annotations(make_points([(25, 9.5)], route), 150.0)
    assert annotations.critical_in_first_quarter
    assert not annotations.critical_in_last_quarter
    assert annotations.max_critical_gap_km == 0.0


def test_driver_actions():
    hilly = RouteMetadata(total_distance_km=50, terrain="hilly")
    analyzer = ZoneAnalyzer()

    report = analyzer.analyze([
        HazardRecord("sharp_turn", 30.0, 78.0, 5, 9.5, {"guardrails": False}),
        HazardRecord("accident_area", 30.1, 78.1, 20, 6.0, {"accident_severity": "fatal"}),
    ], hilly)

    turn, accident = report.hazards
    assert turn.driver_action.startswith("STOP")
    assert "hill" in turn.driver_action
    assert "No guardrails" in turn.driver_action
    assert accident.driver_action.startswith("EXTREME CAUTION: Fatal")


def test_dead_zone_action(make_points, route):
    point = make_points([(40, 8.5)], route, kind="dead_zone")[0]
    assert driver_action(point, route).startswith("COMMUNICATION CRITICAL")


def test_route_score(make_points):
    flat = RouteMetadata(total_distance_km=100)
    assert calculate_route_score([], flat) == 100
    assert calculate_route_score(make_points([(10, 9.5)], flat), flat) == 92

    long_hilly = RouteMetadata(total_distance_km=250, terrain="hilly")
    assert calculate_route_score([], long_hilly) == 90

    many = make_points([(km, 10.0) for km in range(0, 100, 2)], flat)
    assert calculate_route_score(many, flat) == 0


def test_emergency_protocols(make_points, route):
    protocols = emergency_protocols(make_points([(40, 9.5)], route, kind="dead_zone"))
    assert "Deploy satellite communication for dead zones" in protocols["communication"]
    assert "Establish emergency helicopter landing zones" in protocols["evacuation"]

    calm = emergency_protocols(make_points([(40, 3.0)], route))
    assert "Deploy satellite communication for dead zones" not in calm["communication"]


@pytest.mark.parametrize("score, delay, reduction, alternative", [
    (9.5, 15.0, 70.0, True),
    (7.5, 10.0, 50.0, False),
    (5.0, 5.0, 30.0, False),
    (3.0, 0.0, 0.0, False),
])
def test_route_impact(make_points, route, score, delay, reduction, alternative):
    impact = route_impact(make_points([(30, score)], route)[0])
    assert impact.time_delay_minutes == delay
    assert impact.speed_reduction_percent == reduction
    assert impact.alternative_required is alternative


def test_safety_margin(make_points, route):
    assert safety_margin([]) == 100.0
    points = make_points([(10, 9.5), (20, 6.0), (30, 4.0), (40, 2.0)], route)
    assert safety_margin(points) == 75.0
    assert safety_margin(make_points([(10, 9.5)], route)) == 0.0


def test_report_carries_impact_and_margin(route):
    report = ZoneAnalyzer().analyze([
        HazardRecord("sharp_turn", 30.0, 78.0, 5, 9.5),
        HazardRecord("blind_spot", 30.1, 78.1, 20, 7.0),
    ], route)

    assert report.hazards[0].route_impact.alternative_required
    assert report.summary["safety_margin"] == 50.0
    assert report.summary["total_time_delay_minutes"] == 25.0
