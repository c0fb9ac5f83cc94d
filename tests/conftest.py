# tests/conftest.py

import pytest

from zone_clusterization.domain.entities import LatLng, ViewportBounds

from place_factory import KL, make_place, offset


@pytest.fixture
def kl_bounds():
    sw = offset(KL, north_m=-3000, east_m=-3000)
    ne = offset(KL, north_m=3000, east_m=3000)
    return ViewportBounds(northeast=LatLng(*ne), southwest=LatLng(*sw))


@pytest.fixture
def tight_group():
    """5 cafés within ~200 m of each other."""
    return [
        make_place("Cafe A", offset(KL, 0, 0), rating=4.5, review_count=1200, delivery=True),
        make_place("Cafe B", offset(KL, 80, 0), rating=4.0, review_count=300, takeout=True),
        make_place("Cafe C", offset(KL, 0, 90), rating=3.5, review_count=50, dine_in=True),
        make_place("Cafe D", offset(KL, -70, -60), rating=None, review_count=None),
        make_place("Cafe E", offset(KL, 60, 60), rating=4.8, review_count=5000, wheelchair_accessible=True),
    ]
