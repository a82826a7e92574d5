"""Geographic helpers: midpoints, clamping, and view bounds."""

import math

from pydantic import BaseModel, Field, model_validator

from hazard_route_finder.models import Coordinate


class Bounds(BaseModel):
    north: float = Field(ge=-90, le=90)
    south: float = Field(ge=-90, le=90)
    east: float = Field(ge=-180, le=180)
    west: float = Field(ge=-180, le=180)

    @model_validator(mode="after")
    def check_ordering(self) -> "Bounds":
        if self.north < self.south:
            raise ValueError(f"north ({self.north}) must not be less than south ({self.south})")
        if self.east < self.west:
            raise ValueError(f"east ({self.east}) must not be less than west ({self.west})")
        return self

    @property
    def center_lat(self) -> float:
        return (self.north + self.south) / 2

    @property
    def center_lon(self) -> float:
        return (self.east + self.west) / 2


def clamp_lat(lat: float) -> float:
    return max(-90.0, min(90.0, lat))


def clamp_lon(lon: float) -> float:
    return max(-180.0, min(180.0, lon))


def midpoint(a: Coordinate, b: Coordinate) -> Coordinate:
    """Arithmetic midpoint in degrees (not the great-circle midpoint)."""
    return Coordinate(lat=(a.lat + b.lat) / 2, lon=(a.lon + b.lon) / 2)


def bounds_of(points: list[Coordinate]) -> Bounds:
    """Smallest lat/lon box containing all points."""
    if not points:
        raise ValueError("Cannot compute bounds of an empty point list")
    lats = [p.lat for p in points]
    lons = [p.lon for p in points]
    return Bounds(north=max(lats), south=min(lats), east=max(lons), west=min(lons))


def add_padding_to_bounds(bounds: Bounds, padding_m: float) -> Bounds:
    """Add padding in meters around a bounding box, clamped to valid ranges."""
    # 1 degree latitude ~ 111,000 meters
    lat_padding = padding_m / 111_000.0
    # 1 degree longitude varies with latitude; avoid blowing up at the poles
    cos_lat = max(math.cos(math.radians(bounds.center_lat)), 1e-6)
    lon_padding = padding_m / (111_000.0 * cos_lat)

    return Bounds(
        north=clamp_lat(bounds.north + lat_padding),
        south=clamp_lat(bounds.south - lat_padding),
        east=clamp_lon(bounds.east + lon_padding),
        west=clamp_lon(bounds.west - lon_padding),
    )
