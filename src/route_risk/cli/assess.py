"""CLI commands for route grading and hazard zone analysis."""

import json
import sys
from pathlib import Path

from ..core.errors import ConfigurationError
from ..core.models import RouteMetadata
from ..engine import RouteRiskEngine
from ..exporters.gpx import export_zones_to_gpx
from ..loaders.csv_records import load_hazard_records
from ..scoring.criteria import RiskCriteria

TIER_ICONS = {
    'Critical': '🔴',
    'High': '🟠',
    'Medium': '🟡',
    'Low': '🟢',
    'Minimal': '⚪',
}


def _load_route(args) -> RouteMetadata:
    if args.gpx_file:
        return RouteMetadata.from_gpx(
            args.gpx_file,
            terrain=args.terrain,
            estimated_duration_minutes=args.duration_min,
        )
    return RouteMetadata(
        total_distance_km=args.distance_km,
        terrain=args.terrain,
        estimated_duration_minutes=args.duration_min,
    )


def _load_inputs(args):
    criteria = RiskCriteria.from_yaml(args.criteria_config)
    route = _load_route(args)
    records = load_hazard_records(args.records)
    return RouteRiskEngine(criteria), route, records


def _write_json(data, output_file: str):
    output_path = Path(output_file)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    with open(output_path, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=2, default=str)
    print(f"✓ Report saved to {output_file}")


def _print_header(title: str, route: RouteMetadata):
    print("=" * 70)
    print(title)
    print("=" * 70)
    print(f"Route: {route.total_distance_km:.1f} km, {route.terrain} terrain")


def _print_grade(report):
    print("\n" + "=" * 70)
    print("📊 ROUTE RISK GRADE")
    print("=" * 70)
    print(f"Overall score: {report.overall_score:.2f}/5")
    print(f"Grade: {report.grade} ({report.risk_level})")
    print(f"\nCategory breakdown:")
    for category in report.categories:
        marker = "" if category.data_quality == "Available" else f" [{category.data_quality}]"
        print(f"  {category.criterion:<22} {category.score:.2f}{marker}")


def _print_zones(report):
    print("\n" + "=" * 70)
    print("🚧 HAZARD ZONES")
    print("=" * 70)

    if not report.hazards:
        print("✓ No hazards found along this route.")
    else:
        print(f"Hazards found: {len(report.hazards)}")
        for tier, count in report.summary['tier_counts'].items():
            if count:
                print(f"  {TIER_ICONS[tier]} {tier}: {count}")

        print(f"\nMost severe hazards:")
        for hazard in report.hazards[:5]:
            print(
                f"  {TIER_ICONS[hazard.tier]} km {hazard.distance_from_start_km:6.1f}  "
                f"{hazard.label} (risk {hazard.risk_score:.1f})"
            )

    if report.clusters:
        print(f"\nConcentration areas:")
        for cluster in report.clusters:
            print(
                f"  km {cluster.start_km:.1f}-{cluster.end_km:.1f}: "
                f"{cluster.size} hazards, avg risk {cluster.average_risk_score:.1f}"
            )

    print(f"\nRoute safety score: {report.route_score}/100")
    print(f"Safety margin: {report.summary['safety_margin']:.0f}% of hazards non-critical")
    print(f"Expected hazard delay: {report.summary['total_time_delay_minutes']:.0f} min")
    print(f"Verdict: {report.verdict.value}")
    print(f"  {report.recommendation}")
    for action in report.actions:
        print(f"  - {action}")


def _export_zones(report, route, args):
    if args.output_gpx:
        export_zones_to_gpx(report, args.output_gpx, route=route)


def run_grade(args):
    """Execute route grading command."""
    try:
        engine, route, records = _load_inputs(args)
        _print_header("📋 ROUTE RISK GRADING", route)

        report = engine.grade(records, route)
        _print_grade(report)

        if args.output_json:
            _write_json(report.to_dict(), args.output_json)

        return 0

    except FileNotFoundError as e:
        print(f"\n❌ Error: File not found: {e}", file=sys.stderr)
        return 1
    except (ConfigurationError, ValueError) as e:
        print(f"\n❌ Error: {e}", file=sys.stderr)
        return 1


def run_zones(args):
    """Execute hazard zone analysis command."""
    try:
        engine, route, records = _load_inputs(args)
        _print_header("🚧 HAZARD ZONE ANALYSIS", route)
        if args.min_risk_score is not None:
            print(f"Minimum risk score: {args.min_risk_score}/10")

        report = engine.analyze_zones(
            records, route,
            min_risk_score=args.min_risk_score,
            segment_count=args.segments,
        )
        _print_zones(report)

        if args.output_json:
            _write_json(report.to_dict(), args.output_json)
        _export_zones(report, route, args)

        return 0

    except FileNotFoundError as e:
        print(f"\n❌ Error: File not found: {e}", file=sys.stderr)
        return 1
    except (ConfigurationError, ValueError) as e:
        print(f"\n❌ Error: {e}", file=sys.stderr)
        return 1


def run_assess(args):
    """Execute combined grading and zone analysis command."""
    try:
        engine, route, records = _load_inputs(args)
        _print_header("🧭 ROUTE RISK ASSESSMENT", route)

        assessment = engine.assess(
            records, route,
            min_risk_score=args.min_risk_score,
            segment_count=args.segments,
        )
        _print_grade(assessment.grade)
        _print_zones(assessment.zones)

        if args.output_json:
            _write_json(assessment.to_dict(), args.output_json)
        _export_zones(assessment.zones, route, args)

        return 0

    except FileNotFoundError as e:
        print(f"\n❌ Error: File not found: {e}", file=sys.stderr)
        return 1
    except (ConfigurationError, ValueError) as e:
        print(f"\n❌ Error: {e}", file=sys.stderr)
        return 1
