# ============================================================
# 📦 src/zone_clusterization/reporting/export_zone_summary.py
# ============================================================

import os
from typing import Dict, Sequence

import pandas as pd
from loguru import logger

from zone_clusterization.domain.entities import GapZone, ZoneCluster


def clusters_dataframe(clusters: Sequence[ZoneCluster]) -> pd.DataFrame:
    rows = []
    for c in clusters:
        rows.append(
            {
                "zone_id": c.id,
                "area_name": c.area_name,
                "intensity": c.intensity.value,
                "place_count": c.place_count,
                "centroid_lat": c.centroid.lat,
                "centroid_lng": c.centroid.lng,
                "radius_m": round(c.radius_m, 1),
                "average_rating": round(c.average_rating, 2),
                "total_reviews": c.total_reviews,
                "density_score": c.density_score,
                "strength_score": c.strength_score,
                "delivery_count": c.service_gaps.delivery_count,
                "takeout_count": c.service_gaps.takeout_count,
                "dine_in_count": c.service_gaps.dine_in_count,
                "wheelchair_count": c.service_gaps.wheelchair_count,
                "top_competitors": " | ".join(p.name for p in c.top_competitors),
            }
        )
    columns = [
        "zone_id", "area_name", "intensity", "place_count", "centroid_lat", "centroid_lng",
        "radius_m", "average_rating", "total_reviews", "density_score", "strength_score",
        "delivery_count", "takeout_count", "dine_in_count", "wheelchair_count", "top_competitors",
    ]
    return pd.DataFrame(rows, columns=columns)


def gap_zones_dataframe(gap_zones: Sequence[GapZone]) -> pd.DataFrame:
    columns = [
        "gap_id", "area_name", "lat", "lng", "nearest_distance_m",
        "radius_m", "opportunity_score", "nearest_competitor",
    ]
    rows = [
        {
            "gap_id": g.id,
            "area_name": g.area_name,
            "lat": g.location.lat,
            "lng": g.location.lng,
            "nearest_distance_m": g.nearest_distance_m,
            "radius_m": round(g.radius_m, 1),
            "opportunity_score": g.opportunity_score,
            "nearest_competitor": g.nearest_competitor_name,
        }
        for g in gap_zones
    ]
    return pd.DataFrame(rows, columns=columns)


def export_zone_summary(
    clusters: Sequence[ZoneCluster],
    gap_zones: Sequence[GapZone],
    output_dir: str,
    prefix: str = "zones",
) -> Dict[str, str]:
    """Writes {prefix}_clusters.csv and {prefix}_gaps.csv; returns their paths."""
    logger.info(f"📊 Exporting zone summary | clusters={len(clusters)} | gaps={len(gap_zones)}")
    os.makedirs(output_dir, exist_ok=True)

    paths = {
        "clusters": os.path.join(output_dir, f"{prefix}_clusters.csv"),
        "gaps": os.path.join(output_dir, f"{prefix}_gaps.csv"),
    }
    clusters_dataframe(clusters).sort_values("place_count", ascending=False).to_csv(paths["clusters"], index=False)
    gap_zones_dataframe(gap_zones).to_csv(paths["gaps"], index=False)

    logger.success(f"✅ Summary saved to {output_dir}")
    return paths
