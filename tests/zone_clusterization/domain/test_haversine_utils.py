# tests/zone_clusterization/domain/test_haversine_utils.py

import math

import numpy as np
import pytest

from zone_clusterization.domain.entities import LatLng, ViewportBounds
from zone_clusterization.domain.haversine_utils import (
    bounds_for_points,
    centroid,
    haversine_m,
    haversine_matrix_m,
    validate_bounds,
)


def test_haversine_zero_for_same_point():
    assert haversine_m((3.139, 101.6869), LatLng(3.139, 101.6869)) == 0.0


def test_haversine_one_degree_latitude():
    # 1° of latitude on a 6 371 km sphere
    d = haversine_m((0.0, 0.0), (1.0, 0.0))
    assert d == pytest.approx(2 * math.pi * 6371000 / 360, rel=1e-9)


def test_haversine_is_symmetric():
    a, b = (3.139, 101.6869), (3.05, 101.5)
    assert haversine_m(a, b) == pytest.approx(haversine_m(b, a))


def test_matrix_matches_scalar():
    origins = np.array([[3.139, 101.6869], [3.2, 101.7]])
    targets = np.array([[3.05, 101.5], [3.139, 101.6869], [2.9, 101.65]])
    m = haversine_matrix_m(origins, targets)

    assert m.shape == (2, 3)
    for i in range(2):
        for j in range(3):
            assert m[i, j] == pytest.approx(haversine_m(origins[i], targets[j]), abs=1e-6)


def test_centroid_is_arithmetic_mean():
    c = centroid([LatLng(0, 0), LatLng(2, 4), (4, 2)])
    assert c.lat == pytest.approx(2.0)
    assert c.lng == pytest.approx(2.0)


def test_centroid_empty_fails_fast():
    with pytest.raises(ValueError):
        centroid([])


def test_validate_bounds_rejects_inverted_and_nan():
    with pytest.raises(ValueError):
        validate_bounds(ViewportBounds(northeast=LatLng(1, 1), southwest=LatLng(2, 0)))
    with pytest.raises(ValueError):
        validate_bounds(ViewportBounds(northeast=LatLng(float("nan"), 1), southwest=LatLng(0, 0)))


def test_validate_bounds_accepts_zero_area():
    validate_bounds(ViewportBounds(northeast=LatLng(1, 1), southwest=LatLng(1, 1)))


def test_bounds_for_points_pads_every_side():
    pts = [LatLng(3.1, 101.6), LatLng(3.2, 101.7)]
    b = bounds_for_points(pts, padding_m=500)

    assert b.southwest.lat < 3.1 and b.northeast.lat > 3.2
    assert b.southwest.lng < 101.6 and b.northeast.lng > 101.7
    assert haversine_m((b.southwest.lat, 101.6), (3.1, 101.6)) == pytest.approx(500, rel=0.01)


def test_validate_bounds_rejects_antimeridian_crossing():
    crossing = ViewportBounds(northeast=LatLng(1, -179.9), southwest=LatLng(0, 179.9))
    with pytest.raises(ValueError, match="northeast.lng"):
        validate_bounds(crossing)
