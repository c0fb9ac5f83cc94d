# ============================================================
# 📦 src/zone_clusterization/domain/heatmap_calculator.py
# ============================================================

from typing import List, Sequence

from .cluster_metrics import round_half_up
from .entities import HeatmapMode, LatLng, Place, WeightedPoint, ZoneInspection
from .haversine_utils import haversine_m

DEFAULT_RATING = 3.0
DEFAULT_REVIEWS = 1

FLOOD_ELEVATION_M = 10.0
UNHEALTHY_AQI = 100.0

INSPECTION_RADIUS_M = 500.0
INSPECTION_SATURATION = 10
NEAREST_COMPETITORS = 5


# ============================================================
# 🔢 Raw score per place
# ============================================================
def competition_strength(place: Place) -> float:
    # unrated places count as an average competitor
    rating = place.rating or DEFAULT_RATING
    reviews = place.review_count or DEFAULT_REVIEWS
    return rating * reviews


def environment_risk(place: Place) -> float:
    risk = 0.0
    if place.elevation is not None and place.elevation < FLOOD_ELEVATION_M:
        risk += 50
    if place.air_quality_index is not None and place.air_quality_index > UNHEALTHY_AQI:
        risk += 50
    return risk


def place_scores(places: Sequence[Place], mode: HeatmapMode) -> List[float]:
    mode = HeatmapMode(mode)
    if mode == HeatmapMode.COMPETITION:
        return [competition_strength(p) for p in places]
    if mode == HeatmapMode.OPPORTUNITY:
        return [1.0 / (competition_strength(p) + 1) for p in places]
    return [environment_risk(p) for p in places]


# ============================================================
# 🔥 Point weights (one per place)
# ============================================================
def normalize_weights(places: Sequence[Place], raw_weights: Sequence[float]) -> List[WeightedPoint]:
    if not places:
        return []
    max_w = max(raw_weights)
    min_w = min(raw_weights)
    rng = (max_w - min_w) or 1

    return [
        WeightedPoint(location=p.location, weight=((w - min_w) / rng) * 100)
        for p, w in zip(places, raw_weights)
    ]


def competition_weights(places: Sequence[Place]) -> List[WeightedPoint]:
    return normalize_weights(places, place_scores(places, HeatmapMode.COMPETITION))


def opportunity_weights(places: Sequence[Place]) -> List[WeightedPoint]:
    return normalize_weights(places, place_scores(places, HeatmapMode.OPPORTUNITY))


def environment_weights(places: Sequence[Place]) -> List[WeightedPoint]:
    return normalize_weights(places, place_scores(places, HeatmapMode.ENVIRONMENT))


def point_weights(places: Sequence[Place], mode: HeatmapMode) -> List[WeightedPoint]:
    return normalize_weights(places, place_scores(places, mode))


def zoom_based_radius(zoom: float) -> int:
    """Heatmap point radius (pixels) for a map zoom level."""
    if zoom >= 15:
        return 20
    if zoom >= 12:
        return 30
    return 40


# ============================================================
# 🖱️ Inspect a clicked point
# ============================================================
_RECOMMENDATIONS = {
    HeatmapMode.OPPORTUNITY: {
        "low": "High opportunity zone! Limited competition nearby. Strong potential for market entry.",
        "medium": "Moderate opportunity. Focus on differentiation and unique value proposition.",
        "high": "Saturated area. Requires strong competitive advantage to succeed.",
    },
    HeatmapMode.COMPETITION: {
        "low": "Low competition density. Fewer competitors in the area.",
        "medium": "Moderate competition. Room for differentiation.",
        "high": "High competition density. Multiple established competitors in close proximity.",
    },
}


def analyze_heatmap_zone(point: LatLng, places: Sequence[Place], mode: HeatmapMode) -> ZoneInspection:
    """
    Summarises the competition around a clicked point: nearest 5 places,
    a 0-100 score from the count within 500 m, and a canned recommendation.
    """
    mode = HeatmapMode(mode)
    distances = sorted(
        ((p, haversine_m(point, p.location)) for p in places),
        key=lambda t: t[1],
    )
    nearest = distances[:NEAREST_COMPETITORS]

    nearby = sum(1 for _, d in distances if d < INSPECTION_RADIUS_M)
    score = min(nearby / INSPECTION_SATURATION * 100, 100.0)

    if score < 30:
        level = "low"
    elif score < 70:
        level = "medium"
    else:
        level = "high"

    environment = None
    if nearest and nearest[0][0].elevation is not None:
        closest = nearest[0][0]
        environment = {
            "elevation": closest.elevation,
            "aqi": closest.air_quality_index,
            "flood_risk": "high" if closest.elevation < FLOOD_ELEVATION_M else "low",
        }

    return ZoneInspection(
        location=point,
        competition_level=level,
        competition_score=score,
        nearest_competitors=[
            {
                "name": p.name,
                "distance_m": round_half_up(d),
                "rating": p.rating,
                "reviews": p.review_count,
            }
            for p, d in nearest
        ],
        recommendation=_RECOMMENDATIONS.get(mode, {}).get(level, ""),
        environment_data=environment,
    )
