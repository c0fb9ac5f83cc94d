# ============================================================
# 📦 src/zone_clusterization/application/zone_analysis_use_case.py
# ============================================================

import asyncio
import time
from typing import Any, Dict, Optional, Sequence

from loguru import logger

from zone_clusterization.config import settings
from zone_clusterization.domain.area_name import AreaNameResolver
from zone_clusterization.domain.entities import (
    ClusteringParams,
    GapSearchParams,
    GridConfig,
    HeatmapMode,
    Intensity,
    Place,
    ViewportBounds,
)
from zone_clusterization.domain.gap_finder import ReverseGeocodeFn, find_top_gaps
from zone_clusterization.domain.haversine_utils import validate_bounds
from zone_clusterization.domain.idw_interpolator import build_grid, cell_size_m
from zone_clusterization.domain.zone_clusterer import cluster_places


# ============================================================
# 🚀 Full analysis: clusters → gaps → heatmap
# ============================================================
async def run_zone_analysis(
    places: Sequence[Place],
    bounds: ViewportBounds,
    threshold_m: float = settings.ZONE_THRESHOLD_M,
    top_n: int = settings.ZONE_TOP_GAPS,
    mode: HeatmapMode = HeatmapMode.COMPETITION,
    grid_config: Optional[GridConfig] = None,
    reverse_geocode: Optional[ReverseGeocodeFn] = None,
    clustering_params: Optional[ClusteringParams] = None,
    gap_params: Optional[GapSearchParams] = None,
    area_resolver: Optional[AreaNameResolver] = None,
    neighbor_index: str = settings.ZONE_NEIGHBOR_INDEX,
    include_heatmap: bool = True,
) -> Dict[str, Any]:
    """
    Runs the whole competitive-zoning pipeline for one viewport.
    No places means zero zones, never an error.
    """
    validate_bounds(bounds)
    grid_config = grid_config or GridConfig()
    start = time.time()

    logger.info(f"🏁 Zone analysis | places={len(places)} | threshold={threshold_m:.0f} m | mode={HeatmapMode(mode).value}")

    # ============================================================
    # 1) Clusters
    # ============================================================
    clusters = cluster_places(
        places,
        threshold_m=threshold_m,
        params=clustering_params,
        area_resolver=area_resolver,
        neighbor_index=neighbor_index,
    )

    # ============================================================
    # 2) Gap zones
    # ============================================================
    gap_zones = await find_top_gaps(
        clusters,
        bounds,
        top_n=top_n,
        reverse_geocode=reverse_geocode,
        params=gap_params,
        area_resolver=area_resolver,
    )

    # ============================================================
    # 3) Density surface
    # ============================================================
    heatmap = build_grid(bounds, places, mode, grid_config) if include_heatmap else []

    by_intensity = {level.value: 0 for level in Intensity}
    for c in clusters:
        by_intensity[c.intensity.value] += 1

    elapsed = round(time.time() - start, 3)
    summary = {
        "total_places": len(places),
        "total_clusters": len(clusters),
        "clusters_by_intensity": by_intensity,
        "total_gap_zones": len(gap_zones),
        "heatmap_mode": HeatmapMode(mode).value,
        "heatmap_cells": len(heatmap),
        "cell_size_m": cell_size_m(bounds, grid_config),
        "elapsed_s": elapsed,
    }

    if not clusters:
        logger.warning("⚠️ No competitors supplied, no zones found.")
    logger.success(
        f"✅ Zone analysis done: {len(clusters)} clusters | {len(gap_zones)} gaps | "
        f"{len(heatmap)} heatmap cells | {elapsed}s"
    )

    return {
        "clusters": clusters,
        "gap_zones": gap_zones,
        "heatmap": heatmap,
        "summary": summary,
    }


def run_zone_analysis_sync(*args, **kwargs) -> Dict[str, Any]:
    """Blocking wrapper for CLI / scripts."""
    return asyncio.run(run_zone_analysis(*args, **kwargs))


def serialize_analysis(result: Dict[str, Any], include_places: bool = False) -> Dict[str, Any]:
    return {
        "clusters": [c.to_dict(include_places=include_places) for c in result["clusters"]],
        "gap_zones": [g.to_dict() for g in result["gap_zones"]],
        "heatmap": [w.to_dict() for w in result["heatmap"]],
        "summary": result["summary"],
    }
