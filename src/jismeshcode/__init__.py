"""
Japanese standard grid square code (JIS X 0410 regional mesh code).

Encode coordinates to mesh codes, decode codes back to cell bounds,
walk the level hierarchy, find neighbors and enumerate the cells that
cover a bounding box.
"""

from .coordinate import MAX_LAT, MAX_LON, MIN_LAT, MIN_LON, BoundingBox, Coordinate
from .errors import (
    CannotRefineError,
    InvalidDigitError,
    InvalidLengthError,
    LevelError,
    MeshCodeError,
    OutOfRangeError,
    UnrelatedLevelError,
)
from .hierarchy import ancestors, children, parent, to_level
from .levels import MeshLevel
from .meshcode import MeshCode, MeshCodeLevel, grid_limits
from .neighbors import Direction, neighbor, neighbors
from .range import MeshCodeRange, count_mesh_codes_in_bbox, mesh_codes_in_bbox

__all__ = [
    "MIN_LAT",
    "MAX_LAT",
    "MIN_LON",
    "MAX_LON",
    "BoundingBox",
    "Coordinate",
    "MeshCodeError",
    "OutOfRangeError",
    "InvalidLengthError",
    "InvalidDigitError",
    "LevelError",
    "CannotRefineError",
    "UnrelatedLevelError",
    "MeshLevel",
    "MeshCode",
    "MeshCodeLevel",
    "grid_limits",
    "parent",
    "ancestors",
    "children",
    "to_level",
    "Direction",
    "neighbor",
    "neighbors",
    "MeshCodeRange",
    "mesh_codes_in_bbox",
    "count_mesh_codes_in_bbox",
]
