# ==========================================================
# 📦 src/zone_clusterization/domain/zone_clusterer.py
# ==========================================================

import time
from collections import deque
from typing import Callable, Iterable, List, Optional, Sequence

import numpy as np
from loguru import logger
from sklearn.neighbors import BallTree

from .area_name import AreaNameResolver, DEFAULT_AREA_RESOLVER
from .cluster_metrics import (
    average_rating,
    density_score,
    service_gaps,
    strength_score,
    top_competitors,
    total_reviews,
)
from .entities import ClusteringParams, Place, ZoneCluster
from .haversine_utils import EARTH_RADIUS_M, centroid, haversine_m, validate_coordinates

NEIGHBOR_INDEXES = ("brute", "balltree")


# ==========================================================
# 🔹 Neighbour lookup
# ==========================================================
def _brute_neighbors(places: Sequence[Place], threshold_m: float, visited: set) -> Callable[[int], Iterable[int]]:
    # O(n²) over the whole run; fine for Places-API result sets (<= 60)
    def neighbors(i: int):
        for j in range(len(places)):
            if j in visited:
                continue
            if haversine_m(places[i].location, places[j].location) <= threshold_m:
                yield j
    return neighbors


def _balltree_neighbors(places: Sequence[Place], threshold_m: float) -> Callable[[int], Iterable[int]]:
    coords = np.radians(np.array([p.location.as_tuple() for p in places], dtype=np.float64))
    tree = BallTree(coords, metric="haversine")
    adjacency = tree.query_radius(coords, r=threshold_m / EARTH_RADIUS_M)

    def neighbors(i: int):
        # ascending index order, same as the brute scan
        return sorted(int(j) for j in adjacency[i])
    return neighbors


# ==========================================================
# 📏 Radius from real spread
# ==========================================================
def _cluster_radius(members: Sequence[Place], center, params: ClusteringParams) -> float:
    if len(members) > 1:
        spread = max(haversine_m(center, p.location) for p in members)
    else:
        spread = params.single_place_spread_m
    return max(params.min_radius_m, spread * params.spread_factor)


# ==========================================================
# 🧠 Flood-fill clustering (single linkage)
# ==========================================================
def cluster_places(
    places: Sequence[Place],
    threshold_m: float = 1000.0,
    params: Optional[ClusteringParams] = None,
    area_resolver: Optional[AreaNameResolver] = None,
    neighbor_index: str = "brute",
) -> List[ZoneCluster]:
    """
    Groups places into connected components of the proximity graph
    (edge when haversine distance <= threshold_m) and enriches each one.

    - every place lands in exactly one cluster
    - single linkage: a chain of close places can join distant areas
    - neighbor_index="balltree" swaps the O(n²) scan for a BallTree lookup
    """
    if not (threshold_m >= 0) or threshold_m == float("inf"):
        raise ValueError(f"threshold_m must be a finite value >= 0 (got {threshold_m}).")
    if neighbor_index not in NEIGHBOR_INDEXES:
        raise ValueError(f"neighbor_index must be one of {NEIGHBOR_INDEXES} (got {neighbor_index!r}).")

    if not places:
        return []

    params = params or ClusteringParams()
    area_resolver = area_resolver or DEFAULT_AREA_RESOLVER
    validate_coordinates([p.location for p in places])

    start = time.time()
    n = len(places)
    logger.info(f"🧮 Clustering {n} places (threshold={threshold_m:.0f} m, index={neighbor_index})...")

    visited = set()
    if neighbor_index == "balltree":
        neighbors = _balltree_neighbors(places, threshold_m)
    else:
        neighbors = _brute_neighbors(places, threshold_m, visited)

    clusters: List[ZoneCluster] = []
    for i in range(n):
        if i in visited:
            continue

        queue = deque([i])
        visited.add(i)
        indices = []

        while queue:
            current = queue.popleft()
            indices.append(current)
            for j in neighbors(current):
                if j in visited:
                    continue
                visited.add(j)
                queue.append(j)

        clusters.append(_build_cluster(i, [places[k] for k in indices], params, area_resolver))

    elapsed = round(time.time() - start, 3)
    logger.success(f"✅ Clustering done: {len(clusters)} zones from {n} places in {elapsed}s.")
    return clusters


def _build_cluster(
    seed: int,
    members: List[Place],
    params: ClusteringParams,
    area_resolver: AreaNameResolver,
) -> ZoneCluster:
    center = centroid([p.location for p in members])
    count = len(members)
    radius = _cluster_radius(members, center, params)
    intensity = params.classify(count)

    cluster = ZoneCluster(
        id=f"zone-{seed}",
        places=members,
        centroid=center,
        area_name=area_resolver.majority(members),
        place_count=count,
        intensity=intensity,
        radius_m=radius,
        average_rating=average_rating(members),
        total_reviews=total_reviews(members),
        service_gaps=service_gaps(members),
        density_score=density_score(count, radius, params.density_scale),
        strength_score=strength_score(
            members,
            ceiling_rating=params.strength_ceiling_rating,
            ceiling_reviews=params.strength_ceiling_reviews,
        ),
        top_competitors=top_competitors(members, params.top_competitors),
    )

    logger.debug(
        f"📍 {cluster.id}: {count} places | {intensity.value} | "
        f"center ({center.lat:.6f}, {center.lng:.6f}) | radius={radius:.0f} m | "
        f"area='{cluster.area_name}'"
    )
    return cluster
