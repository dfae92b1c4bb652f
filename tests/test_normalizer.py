import math

import pytest

from route_risk.core.models import RouteMetadata, RoutePoint
from route_risk.zones.normalizer import (
    clamp_distance,
    collect_zone_records,
    normalize_hazard,
    normalize_hazards,
)


def test_distances_add_up_to_route_length(route, make_record):
    records = [make_record(km, 5.0) for km in (0, 12.5, 50, 99.9, 100, 150)]
    for point in normalize_hazards(records, route):
        assert point.distance_from_start_km + point.distance_from_end_km == pytest.approx(100)
        assert point.distance_from_end_km >= 0
        assert 0 <= point.route_fraction <= 1


@pytest.mark.parametrize("distance, expected", [
    (None, 0.0),
    (float("nan"), 0.0),
    (-5, 0.0),
    (42.5, 42.5),
    (150, 100.0),
])
def test_clamp_distance(distance, expected):
    assert clamp_distance(distance, 100.0) == expected


def test_zero_length_route(make_record):
    route = RouteMetadata(total_distance_km=0)
    point = normalize_hazard(make_record(10, 9.5), route)
    assert point.distance_from_start_km == 0
    assert point.distance_from_end_km == 0
    assert point.route_fraction == 0
    assert not math.isnan(point.eta_minutes)


@pytest.mark.parametrize("score, tier", [
    (9.5, "Critical"),
    (7.0, "High"),
    (5.0, "Medium"),
    (3.0, "Low"),
    (1.0, "Minimal"),
    (None, "Minimal"),
    (14.0, "Critical"),
])
def test_tiers(route, make_record, score, tier):
    point = normalize_hazard(make_record(10, score), route)
    assert point.tier == tier
    assert 1.0 <= point.risk_score <= 10.0


def test_ranked_by_tier_then_distance(route, make_record):
    records = [
        make_record(80, 4.0, record_id="low-80"),
        make_record(60, 9.5, record_id="crit-60"),
        make_record(10, 7.5, record_id="high-10"),
        make_record(20, 9.1, record_id="crit-20"),
        make_record(5, 3.5, record_id="low-5"),
    ]
    points = normalize_hazards(records, route)
    assert [p.record_id for p in points] == ["crit-20", "crit-60", "high-10", "low-5", "low-80"]


def test_equal_keys_keep_input_order(route, make_record):
    records = [make_record(30, 9.0 + i / 10, record_id=str(i)) for i in range(5)]
    points = normalize_hazards(records, route)
    assert [p.record_id for p in points] == ["0", "1", "2", "3", "4"]


def test_min_risk_score_filter(route, make_record):
    records = [make_record(10, 2.0), make_record(20, 5.0), make_record(30, 8.0)]
    points = normalize_hazards(records, route, min_risk_score=5.0)
    assert [p.risk_score for p in points] == [8.0, 5.0]


def test_eta_from_route_duration(make_record):
    route = RouteMetadata(total_distance_km=100)
    assert normalize_hazard(make_record(50, 5.0), route).eta_minutes == 75.0

    route = RouteMetadata(total_distance_km=100, estimated_duration_minutes=60)
    assert normalize_hazard(make_record(50, 5.0), route).eta_minutes == 30.0


def test_route_offset_uses_route_points(make_record):
    route = RouteMetadata(
        total_distance_km=111.2,
        route_points=(RoutePoint(30.0, 78.0, 0), RoutePoint(30.0, 79.0, 96.3)),
    )
    point = normalize_hazard(make_record(10, 5.0), route)
    assert point.route_offset_km == pytest.approx(0)

    no_geometry = normalize_hazard(make_record(10, 5.0), RouteMetadata(total_distance_km=10))
    assert no_geometry.route_offset_km is None


def test_collect_zone_records(make_record):
    hazards = {
        "sharp_turns": [make_record(5, 8.0)],
        "network_coverage": [
            make_record(10, 7.0, kind="dead_zone", is_dead_zone=True),
            make_record(20, 4.0, kind="dead_zone", is_dead_zone=False),
        ],
        "emergency_services": [make_record(30, None, kind="hospital")],
        "amenities": [make_record(40, None, kind="fuel")],
    }
    records = collect_zone_records(hazards)
    assert [r.distance_from_start_km for r in records] == [5, 10]
