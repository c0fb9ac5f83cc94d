# tests/zone_clusterization/api/test_routes.py

import pytest
from fastapi.testclient import TestClient

from zone_clusterization.api import routes
from zone_clusterization.api.zone_api import app

from place_factory import KL, offset

client = TestClient(app)


def _place(name, coords, **extra):
    lat, lng = coords
    data = {
        "place_id": name.lower(),
        "name": name,
        "address": f"2 Jalan {name}, Chow Kit, 50350 Kuala Lumpur, Malaysia",
        "location": {"lat": lat, "lng": lng},
    }
    data.update(extra)
    return data


def _bounds(half_m=3000):
    sw = offset(KL, -half_m, -half_m)
    ne = offset(KL, half_m, half_m)
    return {"southwest": {"lat": sw[0], "lng": sw[1]}, "northeast": {"lat": ne[0], "lng": ne[1]}}


@pytest.fixture
def places():
    return [
        _place("Alpha", KL, rating=4.5, review_count=900),
        _place("Beta", offset(KL, 100, 50), rating=4.1, review_count=120),
        _place("Gamma", offset(KL, -2000, 2000), rating=3.9, review_count=30),
    ]


def test_root_and_health():
    assert client.get("/").status_code == 200
    r = client.get("/zones/health")
    assert r.status_code == 200
    assert r.json()["status"] == "ok"


def test_clusters_endpoint(places):
    r = client.post("/zones/clusters", json={"places": places, "threshold_m": 1000})
    assert r.status_code == 200

    body = r.json()
    assert body["total"] == 2
    first = body["clusters"][0]
    assert first["id"] == "zone-0"
    assert first["place_count"] == 2
    assert first["intensity"] == "moderate"
    assert first["area_name"] == "Chow Kit"
    assert "places" not in first


def test_clusters_can_include_places(places):
    r = client.post("/zones/clusters", json={"places": places, "include_places": True})
    assert [p["name"] for p in r.json()["clusters"][0]["places"]] == ["Alpha", "Beta"]


def test_analyze_endpoint(places):
    payload = {"places": places, "bounds": _bounds(), "top_n": 2, "grid": {"cells_per_side": 5}}
    r = client.post("/zones/analyze", json=payload)
    assert r.status_code == 200

    body = r.json()
    assert body["summary"]["total_clusters"] == 2
    assert len(body["heatmap"]) == 25
    assert 0 < len(body["gap_zones"]) <= 2
    assert body["gap_zones"][0]["area_name"] == "Opportunity Zone 1"


def test_analyze_uses_geocoder_when_asked(places, monkeypatch):
    monkeypatch.setattr(routes, "get_reverse_geocoder", lambda: (lambda lat, lng: "9 Jalan Raja Laut, Chow Kit, Malaysia"))
    payload = {"places": places, "bounds": _bounds(), "top_n": 1, "reverse_geocode": True}
    body = client.post("/zones/analyze", json=payload).json()
    assert body["gap_zones"][0]["area_name"] == "Chow Kit"


def test_inverted_bounds_are_400(places):
    bounds = _bounds()
    bounds["southwest"], bounds["northeast"] = bounds["northeast"], bounds["southwest"]
    r = client.post("/zones/analyze", json={"places": places, "bounds": bounds})
    assert r.status_code == 400


def test_schema_validation_is_422(places):
    places[0]["rating"] = 7
    r = client.post("/zones/clusters", json={"places": places})
    assert r.status_code == 422


def test_heatmap_endpoint(places):
    r = client.post("/zones/heatmap", json={"places": places, "bounds": _bounds(), "mode": "opportunity",
                                            "grid": {"cells_per_side": 6}})
    body = r.json()
    assert body["mode"] == "opportunity"
    assert len(body["points"]) == 36
    weights = [p["weight"] for p in body["points"]]
    assert min(weights) == 0 and max(weights) == 100


def test_inspect_endpoint(places):
    r = client.post("/zones/inspect", json={"point": {"lat": KL[0], "lng": KL[1]}, "places": places})
    body = r.json()
    assert body["competition_level"] == "low"
    assert body["competition_score"] == 20
    assert body["nearest_competitors"][0]["name"] == "Alpha"


def test_grid_endpoint(places):
    r = client.post("/zones/grid", json={"places": places, "bounds": _bounds(), "divisions": 2})
    zones = r.json()["zones"]
    assert len(zones) == 4
    assert sum(z["count"] for z in zones) >= 3
