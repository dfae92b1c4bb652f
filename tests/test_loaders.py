import pytest

from route_risk.loaders import load_hazard_records


def test_load_hazard_records(hazards_csv):
    records = load_hazard_records(hazards_csv)

    assert set(records) == {
        "sharp_turns", "network_coverage", "blind_spots", "emergency_services"
    }
    assert len(records["sharp_turns"]) == 2

    turn = records["sharp_turns"][0]
    assert turn.kind == "sharp_turn"
    assert turn.distance_from_start_km == 5
    assert turn.risk_score == pytest.approx(9.2)
    assert turn.get("turn_angle") == 135

    dead_zone, covered = records["network_coverage"]
    assert dead_zone.kind == "dead_zone"
    assert dead_zone.get("is_dead_zone") is True
    assert not covered.get("is_dead_zone")


def test_missing_values_become_none(hazards_csv):
    blind_spot = load_hazard_records(hazards_csv)["blind_spots"][0]

    assert blind_spot.distance_from_start_km is None
    assert blind_spot.risk_score is None
    assert "turn_angle" not in blind_spot.attributes


def test_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_hazard_records(tmp_path / "missing.csv")


def test_missing_required_columns(tmp_path):
    csv_file = tmp_path / "hazards.csv"
    csv_file.write_text("category,lat\nweather,30.0\n")
    with pytest.raises(ValueError, match="Missing required columns"):
        load_hazard_records(csv_file)


def test_unknown_category(tmp_path):
    csv_file = tmp_path / "hazards.csv"
    csv_file.write_text("category,lat,lon\npotholes,30.0,78.0\n")
    with pytest.raises(ValueError, match="Unknown categories"):
        load_hazard_records(csv_file)
