# ============================================================
# 📦 src/zone_clusterization/api/schemas.py
# ============================================================

from typing import List, Literal, Optional

from pydantic import BaseModel, Field

from zone_clusterization.config import settings
from zone_clusterization.domain.entities import GridConfig, LatLng, Place, ViewportBounds

HeatmapModeLiteral = Literal["competition", "opportunity", "environment"]


class LatLngSchema(BaseModel):
    lat: float = Field(ge=-90, le=90)
    lng: float = Field(ge=-180, le=180)

    def to_entity(self) -> LatLng:
        return LatLng(self.lat, self.lng)


class BoundsSchema(BaseModel):
    northeast: LatLngSchema
    southwest: LatLngSchema

    def to_entity(self) -> ViewportBounds:
        return ViewportBounds(northeast=self.northeast.to_entity(), southwest=self.southwest.to_entity())


class PlaceSchema(BaseModel):
    place_id: str = ""
    name: str
    address: str = ""
    location: LatLngSchema
    rating: Optional[float] = Field(default=None, ge=0, le=5)
    review_count: Optional[int] = Field(default=None, ge=0)
    types: List[str] = []
    delivery: Optional[bool] = None
    takeout: Optional[bool] = None
    dine_in: Optional[bool] = None
    wheelchair_accessible: Optional[bool] = None
    elevation: Optional[float] = None
    air_quality_index: Optional[float] = None

    def to_entity(self) -> Place:
        return Place.from_dict(self.model_dump())


class GridConfigSchema(BaseModel):
    cells_per_side: int = Field(default=25, ge=1, le=200)
    min_cell_size_m: float = Field(default=150, gt=0)
    max_cell_size_m: float = Field(default=800, gt=0)
    idw_power: float = Field(default=2, gt=0)
    idw_smoothing_m: float = Field(default=100, gt=0)

    def to_entity(self) -> GridConfig:
        return GridConfig(**self.model_dump())


class ClustersRequest(BaseModel):
    places: List[PlaceSchema]
    threshold_m: float = Field(default=settings.ZONE_THRESHOLD_M, ge=0)
    include_places: bool = False


class AnalyzeRequest(BaseModel):
    places: List[PlaceSchema]
    bounds: BoundsSchema
    threshold_m: float = Field(default=settings.ZONE_THRESHOLD_M, ge=0)
    top_n: int = Field(default=settings.ZONE_TOP_GAPS, ge=0, le=20)
    mode: HeatmapModeLiteral = "competition"
    grid: Optional[GridConfigSchema] = None
    reverse_geocode: bool = False
    include_places: bool = False


class HeatmapRequest(BaseModel):
    places: List[PlaceSchema]
    bounds: BoundsSchema
    mode: HeatmapModeLiteral = "competition"
    grid: Optional[GridConfigSchema] = None


class InspectRequest(BaseModel):
    point: LatLngSchema
    places: List[PlaceSchema]
    mode: HeatmapModeLiteral = "opportunity"


class GridZonesRequest(BaseModel):
    places: List[PlaceSchema]
    bounds: BoundsSchema
    divisions: int = Field(default=4, ge=1, le=20)
