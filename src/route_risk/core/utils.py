"""Geographic and sight-geometry helpers shared by the scoring and zone code."""

import gpxpy
from math import radians, sin, cos, sqrt, atan2
from pathlib import Path
from typing import List, Optional, Sequence, Tuple

EARTH_RADIUS_KM = 6371.0
EARTH_RADIUS_M = 6371000.0


def haversine_distance_km(p1: Sequence[float], p2: Sequence[float]) -> float:
    """
    Calculate great-circle distance between two points using Haversine formula.

    Args:
        p1: (lat, lon) of first point in degrees
        p2: (lat, lon) of second point in degrees

    Returns:
        Distance in kilometers
    """
    lat1, lon1, lat2, lon2 = map(radians, [p1[0], p1[1], p2[0], p2[1]])
    dlat = lat2 - lat1
    dlon = lon2 - lon1

    a = sin(dlat/2)**2 + cos(lat1) * cos(lat2) * sin(dlon/2)**2
    c = 2 * atan2(sqrt(a), sqrt(1-a))

    return EARTH_RADIUS_KM * c


def line_of_sight_clearance(
    observer_elevation_m: float,
    target_elevation_m: float,
    distance_m: float,
    earth_radius_m: float = EARTH_RADIUS_M
) -> float:
    """
    Height of the sight line above the target after earth-curvature drop.

    Zero or negative means the target is below the geometric horizon.
    """
    curvature_drop = (distance_m * distance_m) / (2 * earth_radius_m)
    return observer_elevation_m - target_elevation_m - curvature_drop


def line_of_sight_between(observer, target) -> float:
    """
    Sight-line clearance between two elevated points.

    Args:
        observer: (lat, lon, elevation_m)
        target: (lat, lon, elevation_m)
    """
    distance_m = haversine_distance_km(observer, target) * 1000
    return line_of_sight_clearance(observer[2], target[2], distance_m)


def stopping_sight_distance_m(
    speed_kmh: float,
    reaction_time_s: float = 2.5,
    friction_coeff: float = 0.35
) -> float:
    """
    AASHTO stopping sight distance in meters.

    Reaction distance (0.278 * v * t) plus braking distance (v² / 254f).
    """
    speed_kmh = max(0.0, speed_kmh)
    reaction_distance = 0.278 * speed_kmh * reaction_time_s
    braking_distance = (speed_kmh * speed_kmh) / (254 * friction_coeff)
    return reaction_distance + braking_distance


def to_local_cartesian_m(
    point: Sequence[float],
    origin: Sequence[float]
) -> Tuple[float, float]:
    """
    Equirectangular projection of `point` around `origin`, in meters.

    Only meaningful within a few tens of kilometers of the origin.
    """
    dlat = radians(point[0] - origin[0])
    dlon = radians(point[1] - origin[1])
    x = EARTH_RADIUS_M * dlon * cos(radians(origin[0]))
    y = EARTH_RADIUS_M * dlat
    return x, y


def load_gpx_route(gpx_file) -> List[Tuple[float, float]]:
    """
    Load and parse GPX route file.

    Args:
        gpx_file: Path to GPX file

    Returns:
        List of (latitude, longitude) tuples

    Raises:
        ValueError: If no points found in GPX file
    """
    gpx_file = Path(gpx_file)

    with open(gpx_file) as f:
        gpx = gpxpy.parse(f)

    points = []

    # Tracks first, then routes, then bare waypoints
    for track in gpx.tracks:
        for segment in track.segments:
            for point in segment.points:
                points.append((point.latitude, point.longitude))

    if not points:
        for route in gpx.routes:
            for point in route.points:
                points.append((point.latitude, point.longitude))

    if not points:
        for waypoint in gpx.waypoints:
            points.append((waypoint.latitude, waypoint.longitude))

    if not points:
        raise ValueError(f"No points found in GPX file: {gpx_file}")

    return points


def nearest_route_point(route_points, lat: float, lon: float):
    """
    Find the route point closest to (lat, lon).

    Args:
        route_points: Sequence of RoutePoint

    Returns:
        Tuple of (route_point, distance_km), or (None, None) for an empty route
    """
    nearest = None
    min_distance: Optional[float] = None

    for route_point in route_points:
        distance = haversine_distance_km(
            (route_point.lat, route_point.lon), (lat, lon)
        )
        if min_distance is None or distance < min_distance:
            nearest = route_point
            min_distance = distance

    return nearest, min_distance
