"""GPX export of ranked hazard zones."""

import gpxpy.gpx
from datetime import datetime
from pathlib import Path
from typing import Optional

from ..core.models import RouteMetadata
from ..zones.models import ZoneAnalysisReport

# Garmin waypoint symbols by tier
TIER_SYMBOLS = {
    'Critical': 'Skull and Crossbones',
    'High': 'Danger Area',
    'Medium': 'Flag, Red',
    'Low': 'Flag, Blue',
    'Minimal': 'Flag, Green',
}


def export_zones_to_gpx(
    report: ZoneAnalysisReport,
    output_file: str,
    route: Optional[RouteMetadata] = None
) -> str:
    """
    Export hazard points as GPX waypoints, optionally with the route track.

    Args:
        report: Zone analysis report
        output_file: Output GPX file path
        route: Route whose points are written as the first track (if any)

    Returns:
        Path to output file
    """
    gpx = gpxpy.gpx.GPX()
    gpx.name = "Route Hazard Zones"
    gpx.description = (
        f"{len(report.hazards)} hazards, verdict {report.verdict.value} - "
        f"Generated {datetime.now().strftime('%Y-%m-%d')}"
    )

    if route is not None and route.route_points:
        route_track = gpxpy.gpx.GPXTrack()
        route_track.name = route.name or "Route"
        route_segment = gpxpy.gpx.GPXTrackSegment()
        for point in route.route_points:
            route_segment.points.append(
                gpxpy.gpx.GPXTrackPoint(point.lat, point.lon)
            )
        route_track.segments.append(route_segment)
        gpx.tracks.append(route_track)

    for hazard in report.hazards:
        # Truncate long names for Garmin
        wpt = gpxpy.gpx.GPXWaypoint(
            latitude=hazard.lat,
            longitude=hazard.lon,
            name=f"{hazard.tier[:4].upper()} {hazard.label[:20]}"
        )
        wpt.symbol = TIER_SYMBOLS.get(hazard.tier, "Flag, Blue")
        wpt.type = hazard.kind
        wpt.description = " | ".join([
            f"{hazard.label}",
            f"Risk: {hazard.tier} ({hazard.risk_score:.1f}/10)",
            f"km {hazard.distance_from_start_km:.1f} "
            f"({hazard.distance_from_end_km:.1f} km to go)",
            hazard.driver_action,
        ])
        gpx.waypoints.append(wpt)

    # Ensure output directory exists
    output_path = Path(output_file)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    with open(output_path, "w", encoding="utf-8") as f:
        f.write(gpx.to_xml())

    print(f"✓ Exported {len(gpx.waypoints)} hazard waypoints to {output_file}")
    return str(output_file)
