# =========================================================
# 📦 src/zone_clusterization/visualization/zone_plotting.py
# =========================================================

from pathlib import Path
from typing import Optional, Sequence

import folium
from folium.plugins import HeatMap
from loguru import logger

from zone_clusterization.domain.entities import GapZone, Intensity, WeightedPoint, ZoneCluster

GAP_COLOR = "#2563eb"


def build_zone_map(
    clusters: Sequence[ZoneCluster],
    gap_zones: Sequence[GapZone] = (),
    heatmap: Sequence[WeightedPoint] = (),
    output_path: Optional[Path] = None,
    zoom_start: int = 14,
) -> Optional[folium.Map]:
    """
    HTML map: one circle per cluster coloured by intensity, its places as dots,
    gap zones as blue circles and the IDW grid as a HeatMap layer.
    """
    points = [p.location for c in clusters for p in c.places] + [g.location for g in gap_zones]
    if not points:
        logger.warning("❌ Nothing to plot (no clusters and no gap zones).")
        return None

    lat_center = sum(p.lat for p in points) / len(points)
    lng_center = sum(p.lng for p in points) / len(points)
    m = folium.Map(location=[lat_center, lng_center], zoom_start=zoom_start, tiles="CartoDB positron")

    if heatmap:
        HeatMap(
            [[w.location.lat, w.location.lng, w.weight / 100.0] for w in heatmap if w.weight > 0],
            name="Density",
            radius=25,
            blur=20,
            min_opacity=0.3,
        ).add_to(m)

    for c in clusters:
        color = c.intensity.color
        popup_html = f"""
        <b>{c.area_name}</b> ({c.id})<br>
        <b>Intensity:</b> {c.intensity.value} ({c.place_count} places)<br>
        <b>Avg rating:</b> {c.average_rating:.1f} | <b>Reviews:</b> {c.total_reviews}<br>
        <b>Density:</b> {c.density_score} | <b>Strength:</b> {c.strength_score}<br>
        <b>Top:</b> {", ".join(p.name for p in c.top_competitors)}
        """
        folium.Circle(
            location=(c.centroid.lat, c.centroid.lng),
            radius=c.radius_m,
            color=color,
            fill=True,
            fill_opacity=0.2,
            popup=folium.Popup(popup_html, max_width=320),
            tooltip=f"{c.area_name} ({c.place_count})",
        ).add_to(m)

        for p in c.places:
            folium.CircleMarker(
                location=(p.location.lat, p.location.lng),
                radius=3,
                color=color,
                fill=True,
                fill_opacity=0.85,
                tooltip=folium.Tooltip(p.name or p.address, sticky=True),
            ).add_to(m)

    for g in gap_zones:
        folium.Circle(
            location=(g.location.lat, g.location.lng),
            radius=g.radius_m,
            color=GAP_COLOR,
            fill=True,
            fill_opacity=0.25,
            dash_array="6",
            popup=folium.Popup(
                f"<b>{g.area_name}</b><br>Opportunity: {g.opportunity_score}<br>"
                f"Nearest competitor: {g.nearest_competitor_name or '-'} ({g.nearest_distance_m} m)",
                max_width=280,
            ),
            tooltip=g.area_name,
        ).add_to(m)

    legend_html = """
    <div style="
        position: fixed; bottom: 50px; left: 50px; width: 180px;
        z-index:9999; font-size:14px; background-color:white;
        border:2px solid grey; border-radius:8px; padding:10px;">
        <b>Zones</b><br>{}
    </div>
    """.format("<br>".join(
        [f"<span style='color:{level.color}'>●</span> {level.value}" for level in Intensity]
        + [f"<span style='color:{GAP_COLOR}'>●</span> gap"]
    ))
    m.get_root().html.add_child(folium.Element(legend_html))

    if output_path is not None:
        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        m.save(str(output_path))
        logger.success(f"✅ Zone map saved to {output_path}")

    return m
