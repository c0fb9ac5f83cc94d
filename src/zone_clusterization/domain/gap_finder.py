# ============================================================
# 📦 src/zone_clusterization/domain/gap_finder.py
# ============================================================

import inspect
import time
from dataclasses import dataclass
from typing import Awaitable, Callable, List, Optional, Sequence, Union

import numpy as np
from loguru import logger

from .area_name import AreaNameResolver, DEFAULT_AREA_RESOLVER
from .cluster_metrics import clamp_score, round_half_up
from .entities import GapSearchParams, GapZone, LatLng, Place, ViewportBounds, ZoneCluster
from .haversine_utils import haversine_m, haversine_matrix_m, validate_bounds

ReverseGeocodeFn = Callable[[float, float], Union[str, Awaitable[str]]]


@dataclass
class _Candidate:
    point: LatLng
    min_dist: float
    nearest: Optional[Place]


# ============================================================
# 🔹 Grid sampling
# ============================================================
def _interior_grid(bounds: ViewportBounds, grid_size: int) -> np.ndarray:
    """(grid_size-1)² interior points, boundary rows/columns excluded, row-major."""
    lat_step = bounds.lat_span / grid_size
    lng_step = bounds.lng_span / grid_size
    steps = np.arange(1, grid_size)

    lats = bounds.southwest.lat + steps * lat_step
    lngs = bounds.southwest.lng + steps * lng_step
    grid_lat, grid_lng = np.meshgrid(lats, lngs, indexing="ij")
    return np.column_stack([grid_lat.ravel(), grid_lng.ravel()])


def _sample_candidates(
    bounds: ViewportBounds,
    places: Sequence[Place],
    params: GapSearchParams,
) -> List[_Candidate]:
    grid = _interior_grid(bounds, params.grid_size)
    coords = np.array([p.location.as_tuple() for p in places], dtype=np.float64)

    dists = haversine_matrix_m(grid, coords)
    nearest_idx = np.argmin(dists, axis=1)
    min_dists = dists[np.arange(len(grid)), nearest_idx]

    candidates = []
    for k in range(len(grid)):
        d = float(min_dists[k])
        if d < params.min_gap_distance_m:
            continue
        candidates.append(
            _Candidate(
                point=LatLng(float(grid[k, 0]), float(grid[k, 1])),
                min_dist=d,
                nearest=places[int(nearest_idx[k])],
            )
        )
    return candidates


def _select_separated(candidates: List[_Candidate], top_n: int, min_separation_m: float) -> List[_Candidate]:
    """Greedy pick, farthest first, skipping anything within min_separation_m of a pick."""
    ordered = sorted(candidates, key=lambda c: c.min_dist, reverse=True)
    selected: List[_Candidate] = []
    for c in ordered:
        if len(selected) >= top_n:
            break
        if any(haversine_m(c.point, s.point) < min_separation_m for s in selected):
            continue
        selected.append(c)
    return selected


# ============================================================
# 🏷️ Naming via external reverse geocoder
# ============================================================
async def _resolve_area_name(
    index: int,
    point: LatLng,
    reverse_geocode: Optional[ReverseGeocodeFn],
    area_resolver: AreaNameResolver,
) -> str:
    fallback = f"Opportunity Zone {index + 1}"
    if reverse_geocode is None:
        return fallback

    try:
        address = reverse_geocode(point.lat, point.lng)
        if inspect.isawaitable(address):
            address = await address
    except Exception as e:
        logger.warning(f"⚠️ Reverse geocoding failed for ({point.lat:.6f}, {point.lng:.6f}): {e} → '{fallback}'")
        return fallback

    if not address:
        logger.warning(f"⚠️ Empty reverse geocoding result for ({point.lat:.6f}, {point.lng:.6f}) → '{fallback}'")
        return fallback

    return area_resolver.extract(address)


# ============================================================
# 🟢 Top gap zones
# ============================================================
async def find_top_gaps(
    clusters: Sequence[ZoneCluster],
    bounds: ViewportBounds,
    top_n: int = 3,
    reverse_geocode: Optional[ReverseGeocodeFn] = None,
    params: Optional[GapSearchParams] = None,
    area_resolver: Optional[AreaNameResolver] = None,
) -> List[GapZone]:
    """
    Finds up to `top_n` points of the viewport farthest from every known place.

    - samples an interior grid (29×29 by default)
    - drops candidates closer than 300 m to a competitor
    - keeps picks at least 500 m apart
    - names each pick sequentially; a failed lookup falls back to "Opportunity Zone {n}"
    """
    validate_bounds(bounds)
    if top_n < 0:
        raise ValueError(f"top_n must be >= 0 (got {top_n}).")

    params = params or GapSearchParams()
    area_resolver = area_resolver or DEFAULT_AREA_RESOLVER

    all_places = [p for c in clusters for p in c.places]
    if not all_places or top_n == 0:
        return []

    start = time.time()
    logger.info(
        f"🔎 Searching gaps: {len(all_places)} places | grid {params.grid_size}x{params.grid_size} | top_n={top_n}"
    )

    candidates = _sample_candidates(bounds, all_places, params)
    selected = _select_separated(candidates, top_n, params.min_separation_m)
    logger.info(f"📊 {len(candidates)} candidates >= {params.min_gap_distance_m:.0f} m | {len(selected)} selected")

    gap_zones: List[GapZone] = []
    for i, c in enumerate(selected):
        area_name = await _resolve_area_name(i, c.point, reverse_geocode, area_resolver)
        gap_zones.append(
            GapZone(
                id=f"gap-zone-{i}",
                location=c.point,
                area_name=area_name,
                nearest_distance_m=round_half_up(c.min_dist),
                radius_m=min(params.max_radius_m, c.min_dist * params.radius_factor),
                opportunity_score=clamp_score((c.min_dist / 1000.0) * params.score_per_km),
                nearest_competitor_name=c.nearest.name if c.nearest else None,
            )
        )

    elapsed = round(time.time() - start, 3)
    logger.success(f"✅ {len(gap_zones)} gap zones found in {elapsed}s.")
    return gap_zones
