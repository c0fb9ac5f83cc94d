from .entities import (
    ClusteringParams,
    GapSearchParams,
    GapZone,
    GridConfig,
    GridZone,
    HeatmapMode,
    Intensity,
    LatLng,
    Place,
    ServiceGaps,
    ViewportBounds,
    WeightedPoint,
    ZoneCluster,
    ZoneInspection,
)
from .haversine_utils import haversine_m, centroid
from .zone_clusterer import cluster_places
from .gap_finder import find_top_gaps
from .idw_interpolator import build_grid
