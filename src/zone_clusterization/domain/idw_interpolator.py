# ============================================================
# 📦 src/zone_clusterization/domain/idw_interpolator.py
# ============================================================

import time
from typing import List, Optional, Sequence

import numpy as np
from loguru import logger

from .entities import GridConfig, HeatmapMode, LatLng, Place, ViewportBounds, WeightedPoint
from .haversine_utils import haversine_m, haversine_matrix_m, validate_bounds
from .heatmap_calculator import place_scores

FLAT_TOLERANCE = 1e-9


# ============================================================
# 🔹 Cell geometry
# ============================================================
def cell_centers(bounds: ViewportBounds, cells_per_side: int) -> np.ndarray:
    """Row-major [lat, lng] centres of a cells_per_side² grid over the bounds."""
    lat_step = bounds.lat_span / cells_per_side
    lng_step = bounds.lng_span / cells_per_side
    offsets = np.arange(cells_per_side) + 0.5

    lats = bounds.southwest.lat + offsets * lat_step
    lngs = bounds.southwest.lng + offsets * lng_step
    grid_lat, grid_lng = np.meshgrid(lats, lngs, indexing="ij")
    return np.column_stack([grid_lat.ravel(), grid_lng.ravel()])


def cell_size_m(bounds: ViewportBounds, config: Optional[GridConfig] = None) -> float:
    """Edge of one cell in meters, clamped to [min_cell_size_m, max_cell_size_m]."""
    config = config or GridConfig()
    mid = bounds.center
    height = haversine_m((bounds.southwest.lat, mid.lng), (bounds.northeast.lat, mid.lng))
    width = haversine_m((mid.lat, bounds.southwest.lng), (mid.lat, bounds.northeast.lng))
    edge = max(height, width) / config.cells_per_side
    return float(min(config.max_cell_size_m, max(config.min_cell_size_m, edge)))


# ============================================================
# 🌡️ IDW surface
# ============================================================
def idw_values(cells: np.ndarray, coords: np.ndarray, scores: np.ndarray, power: float, smoothing_m: float) -> np.ndarray:
    """Σ(score_i / d_i^p) / Σ(1 / d_i^p) per cell, with d floored at smoothing_m."""
    dists = np.maximum(haversine_matrix_m(cells, coords), smoothing_m)
    weights = 1.0 / dists ** power
    return (weights @ scores) / weights.sum(axis=1)


def normalize_surface(raw: np.ndarray) -> np.ndarray:
    lo, hi = float(raw.min()), float(raw.max())
    rng = hi - lo
    # float noise on a constant surface must not be stretched to 0..100
    if not rng > FLAT_TOLERANCE * max(abs(hi), abs(lo)):
        return np.zeros_like(raw)
    return (raw - lo) / rng * 100.0


def build_grid(
    bounds: ViewportBounds,
    places: Sequence[Place],
    mode: HeatmapMode = HeatmapMode.COMPETITION,
    config: Optional[GridConfig] = None,
) -> List[WeightedPoint]:
    """
    Dense weighted grid for heatmap rendering.
    - one point per cell centre (cells_per_side² points)
    - weights min-max normalised to [0, 100] over the whole grid
    - no places → []
    """
    validate_bounds(bounds)
    config = config or GridConfig()
    if not places:
        return []

    start = time.time()
    n = config.cells_per_side
    cells = cell_centers(bounds, n)
    coords = np.array([p.location.as_tuple() for p in places], dtype=np.float64)
    scores = np.array(place_scores(places, mode), dtype=np.float64)

    raw = idw_values(cells, coords, scores, config.idw_power, config.idw_smoothing_m)
    if not np.all(np.isfinite(raw)):
        raise ValueError("IDW produced non-finite weights; check place ratings/reviews.")
    weights = normalize_surface(raw)

    grid = [
        WeightedPoint(location=LatLng(float(c[0]), float(c[1])), weight=float(w))
        for c, w in zip(cells, weights)
    ]

    elapsed = round(time.time() - start, 3)
    logger.info(
        f"🌡️ IDW grid {n}x{n} ({HeatmapMode(mode).value}) over {len(places)} places "
        f"| cell≈{cell_size_m(bounds, config):.0f} m | {elapsed}s"
    )
    return grid
