# ============================================================
# 📦 src/zone_clusterization/domain/haversine_utils.py
# ============================================================

import math
from typing import Iterable, Sequence

import numpy as np

from .entities import LatLng, ViewportBounds

EARTH_RADIUS_M = 6371000.0  # mean Earth radius in meters


def _coords(p):
    if isinstance(p, LatLng):
        return p.lat, p.lng
    return p[0], p[1]


def haversine_m(coord1, coord2) -> float:
    """
    Great-circle distance in meters between two (lat, lng) points.
    Accepts LatLng or (lat, lng) tuples.
    """
    lat1, lon1 = _coords(coord1)
    lat2, lon2 = _coords(coord2)

    phi1, phi2 = math.radians(lat1), math.radians(lat2)
    dphi = math.radians(lat2 - lat1)
    dlambda = math.radians(lon2 - lon1)

    a = math.sin(dphi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(dlambda / 2) ** 2
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))

    return EARTH_RADIUS_M * c


def haversine_matrix_m(origins: np.ndarray, targets: np.ndarray) -> np.ndarray:
    """
    Pairwise distances (meters) between two arrays of [lat, lng] rows.
    Returns an (len(origins), len(targets)) matrix.
    """
    o = np.radians(np.asarray(origins, dtype=np.float64).reshape(-1, 2))
    t = np.radians(np.asarray(targets, dtype=np.float64).reshape(-1, 2))

    dlat = t[None, :, 0] - o[:, None, 0]
    dlon = t[None, :, 1] - o[:, None, 1]
    a = np.sin(dlat / 2) ** 2 + np.cos(o[:, None, 0]) * np.cos(t[None, :, 0]) * np.sin(dlon / 2) ** 2
    return 2 * EARTH_RADIUS_M * np.arcsin(np.sqrt(np.clip(a, 0.0, 1.0)))


def centroid(points: Sequence) -> LatLng:
    """Arithmetic mean of lat/lng. Fails fast on empty input."""
    if not points:
        raise ValueError("centroid() requires at least one point.")
    coords = [_coords(p) for p in points]
    lat = sum(c[0] for c in coords) / len(coords)
    lng = sum(c[1] for c in coords) / len(coords)
    return LatLng(lat, lng)


def validate_coordinates(points: Iterable[LatLng], label: str = "place") -> None:
    for i, p in enumerate(points):
        if not (math.isfinite(p.lat) and math.isfinite(p.lng)):
            raise ValueError(f"Invalid coordinates for {label} #{i}: ({p.lat}, {p.lng}).")
        if not (-90 <= p.lat <= 90 and -180 <= p.lng <= 180):
            raise ValueError(f"Coordinates out of range for {label} #{i}: ({p.lat}, {p.lng}).")


def validate_bounds(bounds: ViewportBounds) -> None:
    """
    Rejects malformed viewports instead of letting NaNs propagate.
    Zero-area bounds are accepted (the grid simply collapses onto one point).

    Precondition: southwest.lng <= northeast.lng. Viewports crossing the
    antimeridian (Google LatLngBounds with ne.lng < sw.lng) are rejected;
    callers must split them into two bounds first.
    """
    if bounds is None:
        raise ValueError("Viewport bounds are required.")
    validate_coordinates([bounds.northeast, bounds.southwest], label="bounds corner")
    if bounds.northeast.lat < bounds.southwest.lat:
        raise ValueError(
            f"Malformed bounds: northeast.lat ({bounds.northeast.lat}) < southwest.lat ({bounds.southwest.lat})."
        )
    if bounds.northeast.lng < bounds.southwest.lng:
        raise ValueError(
            f"Malformed bounds: northeast.lng ({bounds.northeast.lng}) < southwest.lng ({bounds.southwest.lng})."
        )


def bounds_for_points(points: Sequence[LatLng], padding_m: float = 1000.0) -> ViewportBounds:
    """Viewport enclosing every point plus `padding_m` on each side."""
    if not points:
        raise ValueError("bounds_for_points() requires at least one point.")
    lats = [p.lat for p in points]
    lngs = [p.lng for p in points]
    mid_lat = (min(lats) + max(lats)) / 2

    dlat = padding_m / 111320.0
    dlng = padding_m / (111320.0 * max(math.cos(math.radians(mid_lat)), 1e-6))

    return ViewportBounds(
        northeast=LatLng(min(90.0, max(lats) + dlat), min(180.0, max(lngs) + dlng)),
        southwest=LatLng(max(-90.0, min(lats) - dlat), max(-180.0, min(lngs) - dlng)),
    )
