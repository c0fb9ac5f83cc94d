# ============================================================
# 📦 src/zone_clusterization/domain/grid_zones.py
# ============================================================

from typing import List, Sequence

from loguru import logger

from .entities import GridZone, Intensity, LatLng, Place, ViewportBounds
from .haversine_utils import validate_bounds

GRID_HIGH_MIN_COUNT = 5
GRID_MODERATE_MIN_COUNT = 2


def _classify(count: int) -> Intensity:
    if count >= GRID_HIGH_MIN_COUNT:
        return Intensity.HIGH
    if count >= GRID_MODERATE_MIN_COUNT:
        return Intensity.MODERATE
    return Intensity.LOW


def calculate_grid_zones(bounds: ViewportBounds, places: Sequence[Place], divisions: int = 4) -> List[GridZone]:
    """
    Splits the viewport into divisions×divisions cells and counts the places
    inside each one (edges inclusive, so a place on a shared edge counts twice).
    """
    validate_bounds(bounds)
    if divisions < 1:
        raise ValueError(f"divisions must be >= 1 (got {divisions}).")

    lat_step = bounds.lat_span / divisions
    lng_step = bounds.lng_span / divisions
    sw = bounds.southwest

    zones: List[GridZone] = []
    for row in range(divisions):
        for col in range(divisions):
            cell = ViewportBounds(
                northeast=LatLng(sw.lat + (row + 1) * lat_step, sw.lng + (col + 1) * lng_step),
                southwest=LatLng(sw.lat + row * lat_step, sw.lng + col * lng_step),
            )
            inside = [p for p in places if cell.contains(p.location)]
            zones.append(
                GridZone(
                    southwest=cell.southwest,
                    northeast=cell.northeast,
                    center=cell.center,
                    count=len(inside),
                    intensity=_classify(len(inside)),
                    places=inside,
                )
            )

    busy = sum(1 for z in zones if z.intensity == Intensity.HIGH)
    logger.debug(f"🧱 Grid {divisions}x{divisions}: {busy} saturated cells over {len(places)} places")
    return zones
