# ============================================================
# 📦 src/zone_clusterization/domain/cluster_metrics.py
# ============================================================

import math
from typing import List, Sequence

from .entities import Place, ServiceGaps


# ============================================================
# 🔢 Score helpers
# ============================================================
def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def clamp_score(value: float) -> int:
    """Rounds and clamps a score into [0, 100]."""
    return max(0, min(100, round_half_up(value)))


# ============================================================
# ⭐ Ratings / reviews
# ============================================================
def average_rating(places: Sequence[Place]) -> float:
    rated = [p.rating for p in places if p.rating is not None and p.rating > 0]
    if not rated:
        return 0.0
    return sum(rated) / len(rated)


def total_reviews(places: Sequence[Place]) -> int:
    return sum(p.review_count or 0 for p in places)


def service_gaps(places: Sequence[Place]) -> ServiceGaps:
    return ServiceGaps(
        delivery_count=sum(1 for p in places if p.delivery),
        takeout_count=sum(1 for p in places if p.takeout),
        dine_in_count=sum(1 for p in places if p.dine_in),
        wheelchair_count=sum(1 for p in places if p.wheelchair_accessible),
    )


# ============================================================
# 📊 Density: places per km² × scale
# ============================================================
def density_score(count: int, radius_m: float, scale: float = 20.0) -> int:
    area_km2 = math.pi * (radius_m / 1000.0) ** 2
    if area_km2 == 0:
        return 100
    return clamp_score((count / area_km2) * scale)


# ============================================================
# 💪 Strength: rating × log10(reviews), normalised by a reference ceiling
# ============================================================
def strength_score(
    places: Sequence[Place],
    ceiling_rating: float = 5.0,
    ceiling_reviews: int = 10000,
) -> int:
    """
    Average of rating × log10(max(reviews, 1) + 1) over the members, as a
    percentage of the same expression for the ceiling place (5★ / 10k reviews).
    High score = entrenched incumbents.
    """
    if not places:
        return 0

    scores = [
        (p.rating or 0) * math.log10(max(p.review_count or 0, 1) + 1)
        for p in places
    ]
    max_possible = ceiling_rating * math.log10(max(ceiling_reviews, 1) + 1)
    if max_possible <= 0:
        return 0

    avg_score = sum(scores) / len(scores)
    return clamp_score((avg_score / max_possible) * 100)


def top_competitors(places: Sequence[Place], n: int = 3) -> List[Place]:
    return sorted(places, key=lambda p: p.review_count or 0, reverse=True)[:n]
