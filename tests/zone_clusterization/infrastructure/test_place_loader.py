# tests/zone_clusterization/infrastructure/test_place_loader.py

import json

import pytest

from zone_clusterization.infrastructure.place_loader import load_places


def test_load_json_list_and_wrapped(tmp_path):
    records = [
        {"placeId": "a", "name": "A", "location": {"lat": 3.1, "lng": 101.6}, "rating": 4.2},
        {"placeId": "b", "name": "B", "lat": 3.2, "lon": 101.7},
    ]
    plain = tmp_path / "places.json"
    plain.write_text(json.dumps(records), encoding="utf-8")
    wrapped = tmp_path / "wrapped.json"
    wrapped.write_text(json.dumps({"places": records}), encoding="utf-8")

    for path in (plain, wrapped):
        places = load_places(path)
        assert [p.place_id for p in places] == ["a", "b"]
        assert places[1].location.lng == 101.7


def test_load_csv_with_blanks(tmp_path):
    path = tmp_path / "places.csv"
    path.write_text(
        "place_id,name,address,lat,lng,rating,review_count\n"
        "p1,Kedai Satu,\"1 Jalan A, Cheras, Malaysia\",3.10,101.72,4.0,12\n"
        "p2,Kedai Dua,,3.11,101.73,,\n",
        encoding="utf-8",
    )
    places = load_places(path)

    assert len(places) == 2
    assert places[0].review_count == 12
    assert places[1].rating is None
    assert places[1].review_count is None


def test_csv_without_coordinates_rejected(tmp_path):
    path = tmp_path / "bad.csv"
    path.write_text("name,address\nX,Y\n", encoding="utf-8")
    with pytest.raises(ValueError):
        load_places(path)


def test_bad_record_reports_index(tmp_path):
    path = tmp_path / "bad.json"
    path.write_text(json.dumps([{"name": "no coords"}]), encoding="utf-8")
    with pytest.raises(ValueError, match="#0"):
        load_places(path)


def test_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_places(tmp_path / "nope.json")
