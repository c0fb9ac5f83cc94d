# tests/zone_clusterization/domain/test_gap_finder.py

import asyncio

import pytest

from zone_clusterization.domain.entities import GapSearchParams, LatLng, ViewportBounds
from zone_clusterization.domain.gap_finder import find_top_gaps
from zone_clusterization.domain.haversine_utils import haversine_m
from zone_clusterization.domain.zone_clusterer import cluster_places

from place_factory import KL, make_place, offset


def _run(coro):
    return asyncio.run(coro)


@pytest.fixture
def corner_clusters(tight_group):
    # competitors packed in the centre plus one in the NE corner
    places = tight_group + [make_place("Corner", offset(KL, 2500, 2500), rating=4.0, review_count=80)]
    return cluster_places(places, 1000)


def test_gaps_are_separated_and_away_from_competitors(corner_clusters, kl_bounds):
    gaps = _run(find_top_gaps(corner_clusters, kl_bounds, top_n=5))
    places = [p for c in corner_clusters for p in c.places]

    assert 0 < len(gaps) <= 5
    for i, g in enumerate(gaps):
        assert all(haversine_m(g.location, p.location) >= 300 for p in places)
        for h in gaps[i + 1:]:
            assert haversine_m(g.location, h.location) >= 500


def test_gaps_sorted_farthest_first_and_scored(corner_clusters, kl_bounds):
    gaps = _run(find_top_gaps(corner_clusters, kl_bounds, top_n=3))

    distances = [g.nearest_distance_m for g in gaps]
    assert distances == sorted(distances, reverse=True)
    for g in gaps:
        assert 0 <= g.opportunity_score <= 100
        assert abs(g.opportunity_score - min(100, g.nearest_distance_m / 1000 * 20)) <= 0.51
        assert g.radius_m == pytest.approx(min(500, 0.4 * g.nearest_distance_m), abs=0.5)
        assert g.nearest_competitor_name is not None
        assert kl_bounds.contains(g.location)


def test_without_geocoder_uses_synthetic_names(corner_clusters, kl_bounds):
    gaps = _run(find_top_gaps(corner_clusters, kl_bounds, top_n=2))
    assert [g.area_name for g in gaps] == ["Opportunity Zone 1", "Opportunity Zone 2"]
    assert [g.id for g in gaps] == ["gap-zone-0", "gap-zone-1"]


def test_geocoder_failure_only_affects_that_candidate(corner_clusters, kl_bounds):
    calls = []

    def flaky(lat, lng):
        calls.append((lat, lng))
        if len(calls) == 1:
            raise TimeoutError("geocoder timeout")
        return "8 Jalan Ampang, Kampung Baru, 50300 Kuala Lumpur, Malaysia"

    gaps = _run(find_top_gaps(corner_clusters, kl_bounds, top_n=3, reverse_geocode=flaky))

    assert len(calls) == len(gaps)
    assert gaps[0].area_name == "Opportunity Zone 1"
    assert all(g.area_name == "Kampung Baru" for g in gaps[1:])


def test_async_geocoder_is_awaited(corner_clusters, kl_bounds):
    async def geocode(lat, lng):
        return "Jalan 1, Sentul, 51000 Kuala Lumpur, Malaysia"

    gaps = _run(find_top_gaps(corner_clusters, kl_bounds, top_n=2, reverse_geocode=geocode))
    assert [g.area_name for g in gaps] == ["Sentul", "Sentul"]


def test_empty_geocoder_result_falls_back(corner_clusters, kl_bounds):
    gaps = _run(find_top_gaps(corner_clusters, kl_bounds, top_n=1, reverse_geocode=lambda lat, lng: ""))
    assert gaps[0].area_name == "Opportunity Zone 1"


def test_no_clusters_no_gaps(kl_bounds):
    assert _run(find_top_gaps([], kl_bounds)) == []


def test_viewport_fully_covered_yields_nothing():
    # competitor at the centre of a 400 m box: every interior point is < 300 m away
    sw, ne = offset(KL, -200, -200), offset(KL, 200, 200)
    bounds = ViewportBounds(northeast=LatLng(*ne), southwest=LatLng(*sw))
    clusters = cluster_places([make_place("Only", KL)], 1000)

    assert _run(find_top_gaps(clusters, bounds, top_n=3)) == []


def test_custom_grid_params(corner_clusters, kl_bounds):
    params = GapSearchParams(grid_size=10, min_separation_m=1500)
    gaps = _run(find_top_gaps(corner_clusters, kl_bounds, top_n=4, params=params))
    for i, g in enumerate(gaps):
        for h in gaps[i + 1:]:
            assert haversine_m(g.location, h.location) >= 1500


def test_malformed_bounds_rejected(corner_clusters):
    bad = ViewportBounds(northeast=LatLng(3.0, 101.0), southwest=LatLng(3.2, 101.2))
    with pytest.raises(ValueError):
        _run(find_top_gaps(corner_clusters, bad))
