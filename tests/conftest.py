import pytest

from route_risk.core.models import HazardRecord, RouteMetadata
from route_risk.scoring.criteria import RiskCriteria
from route_risk.zones.normalizer import normalize_hazards


@pytest.fixture
def criteria():
    return RiskCriteria()


@pytest.fixture
def route():
    return RouteMetadata(total_distance_km=100.0, terrain="mixed")


@pytest.fixture
def make_record():
    def factory(km, score, kind="sharp_turn", record_id=None, **attributes):
        return HazardRecord(
            kind=kind,
            lat=30.0,
            lon=78.0,
            distance_from_start_km=km,
            risk_score=score,
            attributes=attributes,
            record_id=record_id,
        )
    return factory


@pytest.fixture
def make_points(make_record, criteria):
    """Normalized hazard points from (km, score) pairs."""
    def factory(pairs, route, kind="sharp_turn"):
        records = [make_record(km, score, kind=kind) for km, score in pairs]
        return normalize_hazards(records, route, criteria)
    return factory


@pytest.fixture
def hazards_csv(tmp_path):
    csv_file = tmp_path / "hazards.csv"
    csv_file.write_text(
        "category,lat,lon,distance_from_start_km,risk_score,turn_angle,is_dead_zone\n"
        "sharp_turns,30.10,78.20,5,9.2,135,\n"
        "sharp_turns,30.12,78.21,8,7.5,95,\n"
        "network_coverage,30.20,78.30,40,6,,true\n"
        "network_coverage,30.25,78.35,60,4,,false\n"
        "blind_spots,30.30,78.40,,,,\n"
        "emergency_services,30.40,78.50,50,,,\n"
    )
    return csv_file
