# tests/zone_clusterization/domain/test_grid_zones.py

import pytest

from zone_clusterization.domain.entities import Intensity, LatLng, ViewportBounds
from zone_clusterization.domain.grid_zones import calculate_grid_zones

from place_factory import make_place


@pytest.fixture
def unit_bounds():
    return ViewportBounds(northeast=LatLng(4.0, 102.0), southwest=LatLng(0.0, 98.0))


def test_sixteen_cells_row_major(unit_bounds):
    zones = calculate_grid_zones(unit_bounds, [])
    assert len(zones) == 16
    assert zones[0].southwest == LatLng(0.0, 98.0)
    assert zones[1].southwest == LatLng(0.0, 99.0)
    assert zones[-1].northeast == LatLng(4.0, 102.0)
    assert all(z.intensity == Intensity.LOW for z in zones)


def test_counts_and_intensity(unit_bounds):
    places = [make_place(f"H{i}", (0.5, 98.5)) for i in range(5)]
    places += [make_place(f"M{i}", (3.5, 101.5)) for i in range(2)]
    zones = calculate_grid_zones(unit_bounds, places)

    assert zones[0].count == 5
    assert zones[0].intensity == Intensity.HIGH
    assert zones[15].count == 2
    assert zones[15].intensity == Intensity.MODERATE
    assert sum(z.count for z in zones) == 7


def test_shared_edge_place_counts_in_both_cells(unit_bounds):
    zones = calculate_grid_zones(unit_bounds, [make_place("Edge", (0.5, 99.0))])
    assert zones[0].count == 1
    assert zones[1].count == 1


def test_custom_divisions(unit_bounds):
    zones = calculate_grid_zones(unit_bounds, [], divisions=2)
    assert len(zones) == 4
    assert zones[0].center == LatLng(1.0, 99.0)
    with pytest.raises(ValueError):
        calculate_grid_zones(unit_bounds, [], divisions=0)


def test_to_dict_lists_place_names(unit_bounds):
    zones = calculate_grid_zones(unit_bounds, [make_place("Kedai", (0.5, 98.5))])
    data = zones[0].to_dict()
    assert data["places"] == ["Kedai"]
    assert data["intensity"] == "low"
