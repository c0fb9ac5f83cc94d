# ============================================================
# 📦 src/zone_clusterization/cli/run_zone_analysis.py
# ============================================================

import argparse
import json
import sys
from pathlib import Path

from loguru import logger

from zone_clusterization.application.zone_analysis_use_case import run_zone_analysis_sync, serialize_analysis
from zone_clusterization.config import settings
from zone_clusterization.domain.entities import GridConfig, HeatmapMode, LatLng, ViewportBounds
from zone_clusterization.domain.haversine_utils import bounds_for_points
from zone_clusterization.infrastructure.place_loader import load_places
from zone_clusterization.infrastructure.reverse_geocoder import build_reverse_geocoder
from zone_clusterization.reporting.export_zone_summary import export_zone_summary
from zone_clusterization.visualization.zone_plotting import build_zone_map


def parse_bounds(value: str) -> ViewportBounds:
    """'sw_lat,sw_lng,ne_lat,ne_lng' → ViewportBounds."""
    try:
        sw_lat, sw_lng, ne_lat, ne_lng = (float(v) for v in value.split(","))
    except ValueError:
        raise argparse.ArgumentTypeError(f"Invalid bounds '{value}', expected sw_lat,sw_lng,ne_lat,ne_lng")
    return ViewportBounds(northeast=LatLng(ne_lat, ne_lng), southwest=LatLng(sw_lat, sw_lng))


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Competitor zoning (GapMap): clusters, gap zones and density heatmap"
    )

    parser.add_argument("--places", required=True, help="JSON or CSV file with competitor places")
    parser.add_argument("--bounds", type=parse_bounds, help="sw_lat,sw_lng,ne_lat,ne_lng (default: places + padding)")
    parser.add_argument("--padding_m", type=float, default=1000.0)

    parser.add_argument("--threshold", type=float, default=settings.ZONE_THRESHOLD_M, help="Clustering distance (m)")
    parser.add_argument("--top", type=int, default=settings.ZONE_TOP_GAPS, help="Number of gap zones")
    parser.add_argument("--mode", choices=[m.value for m in HeatmapMode], default=HeatmapMode.COMPETITION.value)
    parser.add_argument("--cells", type=int, default=25, help="Heatmap cells per side")
    parser.add_argument("--index", choices=["brute", "balltree"], default=settings.ZONE_NEIGHBOR_INDEX)
    parser.add_argument("--geocode", action="store_true", help="Name gap zones via reverse geocoding")

    parser.add_argument("--output_json")
    parser.add_argument("--output_dir", help="Write CSV summaries here")
    parser.add_argument("--map", help="Write an HTML map here")
    parser.add_argument("--log_level", default=settings.LOG_LEVEL)
    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)

    logger.remove()
    logger.add(
        sys.stdout,
        colorize=True,
        level=args.log_level.upper(),
        format="<green>{time:HH:mm:ss}</green> | <level>{message}</level>",
    )

    places = load_places(args.places)
    if not places and args.bounds is None:
        logger.error("❌ No places in input and no --bounds given.")
        return 1

    bounds = args.bounds or bounds_for_points([p.location for p in places], padding_m=args.padding_m)

    logger.info("==============================================")
    logger.info("🚀 Zone analysis via CLI")
    logger.info("==============================================")
    logger.info(f"📦 places      = {len(places)} ({args.places})")
    logger.info(f"🗺️ bounds      = SW({bounds.southwest.lat:.5f}, {bounds.southwest.lng:.5f}) "
                f"NE({bounds.northeast.lat:.5f}, {bounds.northeast.lng:.5f})")
    logger.info(f"📏 threshold   = {args.threshold} m")
    logger.info(f"🟢 top gaps    = {args.top}")
    logger.info(f"🔥 mode        = {args.mode} ({args.cells}x{args.cells})")

    result = run_zone_analysis_sync(
        places,
        bounds,
        threshold_m=args.threshold,
        top_n=args.top,
        mode=HeatmapMode(args.mode),
        grid_config=GridConfig(cells_per_side=args.cells),
        reverse_geocode=build_reverse_geocoder() if args.geocode else None,
        neighbor_index=args.index,
    )

    if args.output_json:
        with open(args.output_json, "w", encoding="utf-8") as f:
            json.dump(serialize_analysis(result, include_places=True), f, ensure_ascii=False, indent=2)
        logger.success(f"💾 JSON saved to {args.output_json}")

    if args.output_dir:
        export_zone_summary(result["clusters"], result["gap_zones"], args.output_dir)

    if args.map:
        build_zone_map(result["clusters"], result["gap_zones"], result["heatmap"], output_path=Path(args.map))

    print("\n=== ZONES ===")
    for c in result["clusters"]:
        print(f"{c.id:<10} {c.intensity.value:<9} {c.place_count:>3} places  {c.area_name}")
    print("\n=== GAPS ===")
    for g in result["gap_zones"]:
        print(f"{g.id:<12} score={g.opportunity_score:>3}  {g.nearest_distance_m:>6} m  {g.area_name}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
