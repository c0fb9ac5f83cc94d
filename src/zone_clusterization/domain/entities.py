# ==========================================================
# 📦 src/zone_clusterization/domain/entities.py
# ==========================================================

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Dict, List, Tuple, Any
import math


# ==========================================================
# 🌍 Coordinates
# ==========================================================
@dataclass(frozen=True)
class LatLng:
    lat: float
    lng: float

    def as_tuple(self) -> Tuple[float, float]:
        return (self.lat, self.lng)

    def to_dict(self) -> Dict[str, float]:
        return {"lat": self.lat, "lng": self.lng}

    @classmethod
    def from_any(cls, value) -> "LatLng":
        """Accepts a LatLng, a (lat, lng) pair or a {"lat", "lng"/"lon"} dict."""
        if isinstance(value, LatLng):
            return value
        if isinstance(value, dict):
            lng = value.get("lng", value.get("lon"))
            return cls(float(value["lat"]), float(lng))
        lat, lng = value
        return cls(float(lat), float(lng))


@dataclass(frozen=True)
class ViewportBounds:
    northeast: LatLng
    southwest: LatLng

    @property
    def lat_span(self) -> float:
        return self.northeast.lat - self.southwest.lat

    @property
    def lng_span(self) -> float:
        return self.northeast.lng - self.southwest.lng

    @property
    def center(self) -> LatLng:
        return LatLng(
            self.southwest.lat + self.lat_span / 2,
            self.southwest.lng + self.lng_span / 2,
        )

    def contains(self, point: LatLng) -> bool:
        return (
            self.southwest.lat <= point.lat <= self.northeast.lat
            and self.southwest.lng <= point.lng <= self.northeast.lng
        )

    def to_dict(self) -> Dict[str, Dict[str, float]]:
        return {"northeast": self.northeast.to_dict(), "southwest": self.southwest.to_dict()}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ViewportBounds":
        return cls(
            northeast=LatLng.from_any(data["northeast"]),
            southwest=LatLng.from_any(data["southwest"]),
        )


# ==========================================================
# 🏪 Place (competitor fetched by the host application)
# ==========================================================
def _first(data: Dict[str, Any], *keys, default=None):
    for k in keys:
        v = data.get(k)
        if v is None:
            continue
        if isinstance(v, float) and math.isnan(v):
            continue
        return v
    return default


@dataclass(frozen=True)
class Place:
    """Competitor location. Never mutated by the clustering code."""
    place_id: str
    name: str
    address: str
    location: LatLng
    rating: Optional[float] = None
    review_count: Optional[int] = None
    types: Tuple[str, ...] = ()
    delivery: Optional[bool] = None
    takeout: Optional[bool] = None
    dine_in: Optional[bool] = None
    wheelchair_accessible: Optional[bool] = None
    elevation: Optional[float] = None
    air_quality_index: Optional[float] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Place":
        """
        Builds a Place from a Places-API-like record.
        - snake_case and the web app's camelCase keys are both accepted
        - location may be nested ({"location": {"lat", "lng"}}) or flat (lat/lng/lon columns)
        """
        if data.get("location") is not None:
            location = LatLng.from_any(data["location"])
        else:
            location = LatLng(
                float(data["lat"]),
                float(_first(data, "lng", "lon")),
            )

        rating = _first(data, "rating")
        reviews = _first(data, "review_count", "reviewCount", "userRatingsTotal", "user_ratings_total")
        types = _first(data, "types", default=())
        if isinstance(types, str):
            types = tuple(t.strip() for t in types.split("|") if t.strip())

        def _flag(*keys) -> Optional[bool]:
            v = _first(data, *keys)
            return None if v is None else bool(v)

        def _num(*keys) -> Optional[float]:
            v = _first(data, *keys)
            return None if v is None else float(v)

        return cls(
            place_id=str(_first(data, "place_id", "placeId", "id", default="")),
            name=str(_first(data, "name", default="")),
            address=str(_first(data, "address", "formatted_address", default="")),
            location=location,
            rating=None if rating is None else float(rating),
            review_count=None if reviews is None else int(reviews),
            types=tuple(types),
            delivery=_flag("delivery"),
            takeout=_flag("takeout"),
            dine_in=_flag("dine_in", "dineIn"),
            wheelchair_accessible=_flag("wheelchair_accessible", "wheelchairAccessible"),
            elevation=_num("elevation"),
            air_quality_index=_num("air_quality_index", "airQualityIndex"),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "place_id": self.place_id,
            "name": self.name,
            "address": self.address,
            "location": self.location.to_dict(),
            "rating": self.rating,
            "review_count": self.review_count,
            "types": list(self.types),
            "delivery": self.delivery,
            "takeout": self.takeout,
            "dine_in": self.dine_in,
            "wheelchair_accessible": self.wheelchair_accessible,
            "elevation": self.elevation,
            "air_quality_index": self.air_quality_index,
        }


# ==========================================================
# 🚦 Competitive intensity
# ==========================================================
class Intensity(str, Enum):
    HIGH = "high"
    MODERATE = "moderate"
    LOW = "low"

    @property
    def color(self) -> str:
        return _INTENSITY_COLORS[self]


_INTENSITY_COLORS = {
    Intensity.HIGH: "#ef4444",
    Intensity.MODERATE: "#f59e0b",
    Intensity.LOW: "#22c55e",
}


class HeatmapMode(str, Enum):
    COMPETITION = "competition"
    OPPORTUNITY = "opportunity"
    ENVIRONMENT = "environment"


# ==========================================================
# ⚙️ Product-tuned parameters
# ==========================================================
@dataclass(frozen=True)
class ClusteringParams:
    high_min_count: int = 4
    moderate_min_count: int = 2
    min_radius_m: float = 400.0
    single_place_spread_m: float = 300.0
    spread_factor: float = 1.3
    density_scale: float = 20.0
    strength_ceiling_rating: float = 5.0
    strength_ceiling_reviews: int = 10000
    top_competitors: int = 3

    def classify(self, count: int) -> Intensity:
        if count >= self.high_min_count:
            return Intensity.HIGH
        if count >= self.moderate_min_count:
            return Intensity.MODERATE
        return Intensity.LOW


@dataclass(frozen=True)
class GapSearchParams:
    grid_size: int = 30
    min_gap_distance_m: float = 300.0
    min_separation_m: float = 500.0
    max_radius_m: float = 500.0
    radius_factor: float = 0.4
    score_per_km: float = 20.0


@dataclass(frozen=True)
class GridConfig:
    cells_per_side: int = 25
    min_cell_size_m: float = 150.0
    max_cell_size_m: float = 800.0
    idw_power: float = 2.0
    idw_smoothing_m: float = 100.0

    def __post_init__(self):
        if self.cells_per_side < 1:
            raise ValueError(f"cells_per_side must be >= 1 (got {self.cells_per_side}).")
        if self.idw_power <= 0:
            raise ValueError(f"idw_power must be > 0 (got {self.idw_power}).")
        if self.idw_smoothing_m <= 0:
            raise ValueError(f"idw_smoothing_m must be > 0 (got {self.idw_smoothing_m}).")
        if self.min_cell_size_m > self.max_cell_size_m:
            raise ValueError("min_cell_size_m cannot exceed max_cell_size_m.")


# ==========================================================
# 🗺️ Cluster (competitive zone)
# ==========================================================
@dataclass
class ServiceGaps:
    delivery_count: int = 0
    takeout_count: int = 0
    dine_in_count: int = 0
    wheelchair_count: int = 0

    def to_dict(self) -> Dict[str, int]:
        return {
            "delivery_count": self.delivery_count,
            "takeout_count": self.takeout_count,
            "dine_in_count": self.dine_in_count,
            "wheelchair_count": self.wheelchair_count,
        }


@dataclass
class ZoneCluster:
    """
    Group of competitors linked by proximity.
    - recomputed on every clustering call, id is "zone-{seed index}"
    - radius_m >= 400 and scores within [0, 100]
    """
    id: str
    places: List[Place]
    centroid: LatLng
    area_name: str
    place_count: int
    intensity: Intensity
    radius_m: float
    average_rating: float = 0.0
    total_reviews: int = 0
    service_gaps: ServiceGaps = field(default_factory=ServiceGaps)
    density_score: int = 0
    strength_score: int = 0
    top_competitors: List[Place] = field(default_factory=list)

    def to_dict(self, include_places: bool = True) -> Dict[str, Any]:
        data = {
            "id": self.id,
            "centroid": self.centroid.to_dict(),
            "area_name": self.area_name,
            "place_count": self.place_count,
            "intensity": self.intensity.value,
            "color": self.intensity.color,
            "radius_m": self.radius_m,
            "average_rating": self.average_rating,
            "total_reviews": self.total_reviews,
            "service_gaps": self.service_gaps.to_dict(),
            "density_score": self.density_score,
            "strength_score": self.strength_score,
            "top_competitors": [p.name for p in self.top_competitors],
        }
        if include_places:
            data["places"] = [p.to_dict() for p in self.places]
        return data


# ==========================================================
# 🟢 Gap zone (market opportunity)
# ==========================================================
@dataclass
class GapZone:
    id: str
    location: LatLng
    area_name: str
    nearest_distance_m: int
    radius_m: float
    opportunity_score: int
    nearest_competitor_name: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "location": self.location.to_dict(),
            "area_name": self.area_name,
            "nearest_distance_m": self.nearest_distance_m,
            "radius_m": self.radius_m,
            "opportunity_score": self.opportunity_score,
            "nearest_competitor_name": self.nearest_competitor_name,
        }


# ==========================================================
# 🔥 Heatmap output
# ==========================================================
@dataclass
class WeightedPoint:
    location: LatLng
    weight: float  # 0-100

    def to_dict(self) -> Dict[str, Any]:
        return {"location": self.location.to_dict(), "weight": self.weight}


@dataclass
class GridZone:
    southwest: LatLng
    northeast: LatLng
    center: LatLng
    count: int
    intensity: Intensity
    places: List[Place] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "southwest": self.southwest.to_dict(),
            "northeast": self.northeast.to_dict(),
            "center": self.center.to_dict(),
            "count": self.count,
            "intensity": self.intensity.value,
            "color": self.intensity.color,
            "places": [p.name for p in self.places],
        }


@dataclass
class ZoneInspection:
    location: LatLng
    competition_level: str
    competition_score: float
    nearest_competitors: List[Dict[str, Any]]
    recommendation: str
    environment_data: Optional[Dict[str, Any]] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "location": self.location.to_dict(),
            "competition_level": self.competition_level,
            "competition_score": self.competition_score,
            "nearest_competitors": self.nearest_competitors,
            "environment_data": self.environment_data,
            "recommendation": self.recommendation,
        }
