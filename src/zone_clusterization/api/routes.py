# ============================================================
# 📦 src/zone_clusterization/api/routes.py
# ============================================================

from fastapi import APIRouter, HTTPException
from loguru import logger

from zone_clusterization.application.zone_analysis_use_case import run_zone_analysis, serialize_analysis
from zone_clusterization.domain.entities import HeatmapMode
from zone_clusterization.domain.grid_zones import calculate_grid_zones
from zone_clusterization.domain.heatmap_calculator import analyze_heatmap_zone
from zone_clusterization.domain.idw_interpolator import build_grid, cell_size_m
from zone_clusterization.domain.zone_clusterer import cluster_places
from zone_clusterization.infrastructure.reverse_geocoder import build_reverse_geocoder
from .schemas import AnalyzeRequest, ClustersRequest, GridZonesRequest, HeatmapRequest, InspectRequest

router = APIRouter()

_geocoder = None


def get_reverse_geocoder():
    global _geocoder
    if _geocoder is None:
        _geocoder = build_reverse_geocoder()
    return _geocoder


# ============================================================
# 🧠 Health
# ============================================================
@router.get("/health", tags=["Status"])
def health():
    return {"status": "ok", "message": "Zone clusterization API healthy 🧩"}


# ============================================================
# 🚀 Full analysis
# ============================================================
@router.post("/analyze")
async def analyze(req: AnalyzeRequest):
    try:
        result = await run_zone_analysis(
            places=[p.to_entity() for p in req.places],
            bounds=req.bounds.to_entity(),
            threshold_m=req.threshold_m,
            top_n=req.top_n,
            mode=HeatmapMode(req.mode),
            grid_config=req.grid.to_entity() if req.grid else None,
            reverse_geocode=get_reverse_geocoder() if req.reverse_geocode else None,
        )
    except ValueError as e:
        logger.warning(f"⚠️ /analyze rejected: {e}")
        raise HTTPException(status_code=400, detail=str(e))

    return serialize_analysis(result, include_places=req.include_places)


# ============================================================
# 🗺️ Clusters only
# ============================================================
@router.post("/clusters")
def clusters(req: ClustersRequest):
    try:
        result = cluster_places([p.to_entity() for p in req.places], threshold_m=req.threshold_m)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return {
        "total": len(result),
        "clusters": [c.to_dict(include_places=req.include_places) for c in result],
    }


# ============================================================
# 🔥 IDW heatmap grid
# ============================================================
@router.post("/heatmap")
def heatmap(req: HeatmapRequest):
    try:
        bounds = req.bounds.to_entity()
        config = req.grid.to_entity() if req.grid else None
        grid = build_grid(bounds, [p.to_entity() for p in req.places], HeatmapMode(req.mode), config)
        size = cell_size_m(bounds, config)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return {
        "mode": req.mode,
        "cell_size_m": size,
        "points": [w.to_dict() for w in grid],
    }


# ============================================================
# 🖱️ Inspect a point
# ============================================================
@router.post("/inspect")
def inspect(req: InspectRequest):
    inspection = analyze_heatmap_zone(
        req.point.to_entity(),
        [p.to_entity() for p in req.places],
        HeatmapMode(req.mode),
    )
    return inspection.to_dict()


# ============================================================
# 🧱 Coarse grid zones
# ============================================================
@router.post("/grid")
def grid_zones(req: GridZonesRequest):
    try:
        zones = calculate_grid_zones(
            req.bounds.to_entity(),
            [p.to_entity() for p in req.places],
            divisions=req.divisions,
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return {"zones": [z.to_dict() for z in zones]}
