import gpxpy.gpx
import pytest

from route_risk.core.errors import ConfigurationError
from route_risk.core.models import RouteMetadata, RoutePoint
from route_risk.core.utils import (
    haversine_distance_km,
    line_of_sight_between,
    line_of_sight_clearance,
    load_gpx_route,
    nearest_route_point,
    stopping_sight_distance_m,
    to_local_cartesian_m,
)


def _write_gpx(path, track=(), waypoints=()):
    gpx = gpxpy.gpx.GPX()
    if track:
        gpx_track = gpxpy.gpx.GPXTrack()
        segment = gpxpy.gpx.GPXTrackSegment()
        for lat, lon in track:
            segment.points.append(gpxpy.gpx.GPXTrackPoint(lat, lon))
        gpx_track.segments.append(segment)
        gpx.tracks.append(gpx_track)
    for lat, lon in waypoints:
        gpx.waypoints.append(gpxpy.gpx.GPXWaypoint(lat, lon))
    path.write_text(gpx.to_xml())
    return path


def test_haversine_one_degree_of_longitude_at_equator():
    assert haversine_distance_km((0, 0), (0, 1)) == pytest.approx(111.195, abs=0.01)


def test_haversine_is_zero_for_same_point_and_symmetric():
    a, b = (30.1, 78.2), (30.5, 78.9)
    assert haversine_distance_km(a, a) == 0
    assert haversine_distance_km(a, b) == pytest.approx(haversine_distance_km(b, a))


def test_stopping_sight_distance_at_60_kmh():
    # 0.278 * 60 * 2.5 + 60^2 / (254 * 0.35)
    assert stopping_sight_distance_m(60) == pytest.approx(82.2, abs=0.1)


def test_stopping_sight_distance_grows_with_speed():
    speeds = [0, 20, 40, 60, 80, 100, 120]
    distances = [stopping_sight_distance_m(s) for s in speeds]
    for slower, faster in zip(distances, distances[1:]):
        assert slower < faster
    assert distances[0] == 0


def test_stopping_sight_distance_negative_speed_is_zero():
    assert stopping_sight_distance_m(-30) == 0


def test_line_of_sight_clearance_includes_curvature_drop():
    assert line_of_sight_clearance(100, 0, 0) == 100
    # 10 km: drop = 10000^2 / (2 * 6371000) ~ 7.85 m
    assert line_of_sight_clearance(100, 0, 10000) == pytest.approx(92.15, abs=0.01)
    assert line_of_sight_clearance(0, 10, 1000) < 0


def test_line_of_sight_between_points():
    clearance = line_of_sight_between((30.0, 78.0, 500), (30.0, 78.0, 450))
    assert clearance == pytest.approx(50)


def test_local_cartesian_projection():
    assert to_local_cartesian_m((30.0, 78.0), (30.0, 78.0)) == (0, 0)
    x, y = to_local_cartesian_m((30.01, 78.0), (30.0, 78.0))
    assert x == pytest.approx(0)
    assert y == pytest.approx(1111.95, abs=0.1)
    x, _ = to_local_cartesian_m((0.0, 0.01), (0.0, 0.0))
    assert x == pytest.approx(1111.95, abs=0.1)


def test_load_gpx_route_reads_track(tmp_path):
    gpx_file = _write_gpx(tmp_path / "route.gpx", track=[(30.0, 78.0), (30.1, 78.1)])
    assert load_gpx_route(gpx_file) == [(30.0, 78.0), (30.1, 78.1)]


def test_load_gpx_route_falls_back_to_waypoints(tmp_path):
    gpx_file = _write_gpx(tmp_path / "route.gpx", waypoints=[(30.0, 78.0)])
    assert load_gpx_route(gpx_file) == [(30.0, 78.0)]


def test_load_gpx_route_without_points(tmp_path):
    gpx_file = _write_gpx(tmp_path / "empty.gpx")
    with pytest.raises(ValueError):
        load_gpx_route(gpx_file)


def test_route_metadata_from_gpx(tmp_path):
    gpx_file = _write_gpx(tmp_path / "route.gpx", track=[(0, 0), (0, 1), (0, 2)])
    route = RouteMetadata.from_gpx(gpx_file, terrain="Hilly")

    assert route.terrain == "hilly"
    assert route.total_distance_km == pytest.approx(222.39, abs=0.02)
    assert route.route_points[0].distance_from_start_km == 0
    assert route.route_points[-1].distance_from_start_km == pytest.approx(
        route.total_distance_km
    )


def test_route_metadata_requires_distance():
    with pytest.raises(ConfigurationError):
        RouteMetadata(total_distance_km=None)


def test_route_metadata_clamps_negative_distance():
    assert RouteMetadata(total_distance_km=-5).total_distance_km == 0


def test_nearest_route_point():
    points = (RoutePoint(0, 0, 0), RoutePoint(0, 1, 111.2), RoutePoint(0, 2, 222.4))
    nearest, distance = nearest_route_point(points, 0.01, 1.0)
    assert nearest == points[1]
    assert distance == pytest.approx(1.11, abs=0.01)
    assert nearest_route_point((), 0, 0) == (None, None)
