"""
Coordinate and bounding box value types.

Coordinates are restricted to the extent covered by the mesh code
standard around the Japanese archipelago.
"""

import math
from collections.abc import Mapping
from dataclasses import dataclass
from numbers import Real
from typing import Any

from pydantic_core import core_schema

from .errors import OutOfRangeError

# Covered extent (degrees)
MIN_LAT = 20.0
MAX_LAT = 46.0
MIN_LON = 122.0
MAX_LON = 154.0


def _check_component(name: str, value: Any, low: float, high: float) -> float:
    if isinstance(value, bool) or not isinstance(value, Real):
        raise TypeError(f"{name} must be a real number, got {type(value).__name__}")
    value = float(value)
    if not math.isfinite(value):
        raise OutOfRangeError(f"{name} must be finite, got {value}")
    if not low <= value <= high:
        raise OutOfRangeError(f"{name} {value} is outside [{low}, {high}]")
    return value


@dataclass(frozen=True)
class Coordinate:
    """Validated (latitude, longitude) pair in degrees."""
    lat: float
    lon: float

    def __post_init__(self):
        object.__setattr__(self, "lat", _check_component("latitude", self.lat, MIN_LAT, MAX_LAT))
        object.__setattr__(self, "lon", _check_component("longitude", self.lon, MIN_LON, MAX_LON))

    @classmethod
    def _unchecked(cls, lat: float, lon: float) -> "Coordinate":
        # Cell corners on the north/east edge of the extent reach past it.
        coord = object.__new__(cls)
        object.__setattr__(coord, "lat", float(lat))
        object.__setattr__(coord, "lon", float(lon))
        return coord

    def as_tuple(self) -> tuple[float, float]:
        """Return as (lat, lon) tuple."""
        return (self.lat, self.lon)

    def to_dict(self) -> dict[str, float]:
        return {"lat": self.lat, "lon": self.lon}

    @classmethod
    def _validate(cls, value: Any) -> "Coordinate":
        if isinstance(value, cls):
            return value
        if isinstance(value, Mapping):
            if "lat" not in value or "lon" not in value:
                raise ValueError("coordinate mapping requires 'lat' and 'lon'")
            lat, lon = value["lat"], value["lon"]
        elif isinstance(value, (tuple, list)) and len(value) == 2:
            lat, lon = value
        else:
            raise ValueError(f"cannot build a Coordinate from {type(value).__name__}")
        try:
            return cls(lat, lon)
        except TypeError as e:
            raise ValueError(str(e)) from e

    @classmethod
    def __get_pydantic_core_schema__(cls, source_type: Any, handler: Any) -> core_schema.CoreSchema:
        return core_schema.no_info_plain_validator_function(
            cls._validate,
            serialization=core_schema.plain_serializer_function_ser_schema(cls.to_dict),
        )

    def __str__(self) -> str:
        return f"({self.lat}, {self.lon})"


@dataclass(frozen=True)
class BoundingBox:
    """
    Axis-aligned lat/lon rectangle.

    The corners are normalized on construction, so any two opposite
    corners may be passed in either order.
    """
    south_west: Coordinate
    north_east: Coordinate

    def __post_init__(self):
        a, b = self.south_west, self.north_east
        if a.lat <= b.lat and a.lon <= b.lon:
            return
        object.__setattr__(
            self, "south_west", Coordinate._unchecked(min(a.lat, b.lat), min(a.lon, b.lon))
        )
        object.__setattr__(
            self, "north_east", Coordinate._unchecked(max(a.lat, b.lat), max(a.lon, b.lon))
        )

    @classmethod
    def from_bounds(
        cls, min_lon: float, min_lat: float, max_lon: float, max_lat: float
    ) -> "BoundingBox":
        """Build from (min_lon, min_lat, max_lon, max_lat), validating both corners."""
        return cls(Coordinate(min_lat, min_lon), Coordinate(max_lat, max_lon))

    @property
    def min_lat(self) -> float:
        return self.south_west.lat

    @property
    def max_lat(self) -> float:
        return self.north_east.lat

    @property
    def min_lon(self) -> float:
        return self.south_west.lon

    @property
    def max_lon(self) -> float:
        return self.north_east.lon

    def contains(self, coord: Coordinate) -> bool:
        """Closed containment test: points on an edge are inside."""
        return (
            self.min_lat <= coord.lat <= self.max_lat
            and self.min_lon <= coord.lon <= self.max_lon
        )

    def intersects(self, other: "BoundingBox") -> bool:
        """True when the two closed rectangles share at least one point."""
        return (
            self.min_lat <= other.max_lat
            and other.min_lat <= self.max_lat
            and self.min_lon <= other.max_lon
            and other.min_lon <= self.max_lon
        )

    def center(self) -> Coordinate:
        return Coordinate._unchecked(
            (self.min_lat + self.max_lat) / 2, (self.min_lon + self.max_lon) / 2
        )

    def as_tuple(self) -> tuple[float, float, float, float]:
        """Return as (min_lon, min_lat, max_lon, max_lat)."""
        return (self.min_lon, self.min_lat, self.max_lon, self.max_lat)
