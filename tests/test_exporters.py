import gpxpy

from route_risk.core.models import RouteMetadata, RoutePoint
from route_risk.exporters import export_zones_to_gpx
from route_risk.zones.analyzer import ZoneAnalyzer


def test_export_zones_to_gpx(tmp_path, make_record):
    route = RouteMetadata(
        total_distance_km=100,
        route_points=(RoutePoint(30.0, 78.0, 0), RoutePoint(30.5, 78.5, 100)),
    )
    report = ZoneAnalyzer().analyze([
        make_record(5, 9.5),
        make_record(40, 6.0, kind="blind_spot"),
    ], route)

    output = tmp_path / "out" / "hazards.gpx"
    export_zones_to_gpx(report, str(output), route=route)

    with open(output) as f:
        gpx = gpxpy.parse(f)

    assert len(gpx.tracks) == 1
    assert len(gpx.tracks[0].segments[0].points) == 2
    assert len(gpx.waypoints) == 2

    critical = gpx.waypoints[0]
    assert critical.symbol == "Skull and Crossbones"
    assert critical.type == "sharp_turn"
    assert "Risk: Critical" in critical.description
    assert gpx.waypoints[1].type == "blind_spot"


def test_export_without_route(tmp_path, make_record):
    route = RouteMetadata(total_distance_km=50)
    report = ZoneAnalyzer().analyze([make_record(5, 4.0)], route)

    output = tmp_path / "hazards.gpx"
    export_zones_to_gpx(report, str(output))

    with open(output) as f:
        gpx = gpxpy.parse(f)

    assert gpx.tracks == []
    assert gpx.waypoints[0].symbol == "Flag, Blue"
