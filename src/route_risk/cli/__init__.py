"""Command-line interface for the route risk engine."""

import sys
import argparse


def _add_common_arguments(parser):
    parser.add_argument(
        "--records",
        required=True,
        help="CSV file with hazard records (columns: category, lat, lon, "
             "distance_from_start_km, risk_score, ...)"
    )
    route_group = parser.add_mutually_exclusive_group(required=True)
    route_group.add_argument(
        "--gpx",
        dest="gpx_file",
        help="GPX route file (total distance is computed from the track)"
    )
    route_group.add_argument(
        "--distance-km",
        type=float,
        help="Total route distance in kilometers"
    )
    parser.add_argument(
        "--terrain",
        default="mixed",
        help="Route terrain: urban, rural, hilly, mixed (default: mixed)"
    )
    parser.add_argument(
        "--duration-min",
        type=float,
        help="Estimated travel time in minutes (default: 1.5 min/km)"
    )
    parser.add_argument(
        "--criteria-config",
        default="config/risk_criteria.yaml",
        help="Path to risk criteria config (default: config/risk_criteria.yaml)"
    )
    parser.add_argument(
        "--output-json",
        help="Write the full report as JSON to this file"
    )


def _add_zone_arguments(parser):
    parser.add_argument(
        "--min-risk-score",
        type=float,
        help="Minimum hazard risk score to include (1-10, default: all)"
    )
    parser.add_argument(
        "--segments",
        type=int,
        help="Number of route segments for density analysis (default: 4)"
    )
    parser.add_argument(
        "--output-gpx",
        help="Export hazard waypoints to this GPX file"
    )


def main(argv=None):
    """Main CLI entry point with subcommands."""
    parser = argparse.ArgumentParser(
        prog="route-risk",
        description="Grade route risk and analyze hazard zones along a route"
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    grade_parser = subparsers.add_parser(
        "grade",
        help="Weighted A-D risk grade for the whole route"
    )
    _add_common_arguments(grade_parser)

    zones_parser = subparsers.add_parser(
        "zones",
        help="Ranked hazard zones, clusters and route verdict"
    )
    _add_common_arguments(zones_parser)
    _add_zone_arguments(zones_parser)

    assess_parser = subparsers.add_parser(
        "assess",
        help="Risk grade and hazard zone analysis together"
    )
    _add_common_arguments(assess_parser)
    _add_zone_arguments(assess_parser)

    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    from .assess import run_grade, run_zones, run_assess

    if args.command == "grade":
        return run_grade(args)
    elif args.command == "zones":
        return run_zones(args)
    elif args.command == "assess":
        return run_assess(args)
    return 1


if __name__ == "__main__":
    sys.exit(main())
