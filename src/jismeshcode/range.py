"""
Mesh code enumeration over bounding boxes.

Calculate the cells at a given level that cover a geographic bounding box.
"""

import logging
from typing import Iterator

from .coordinate import BoundingBox
from .levels import MeshLevel
from .meshcode import LAT_ORIGIN, LON_ORIGIN, MeshCode, cell_index, grid_limits

logger = logging.getLogger(__name__)


class MeshCodeRange:
    """
    Lazy, restartable sequence of the codes covering a bounding box.

    Codes come out row by row from the south-west corner. Each call to
    iter() starts a fresh cursor, so one range can be iterated many times
    (or by several consumers at once) with identical results.
    """

    def __init__(self, bbox: BoundingBox, level: MeshLevel):
        self.bbox = bbox
        self.level = level
        lat_pd = level.lat_cells_per_degree()
        lon_pd = level.lon_cells_per_degree()
        min_row, max_row, min_col, max_col = grid_limits(level)
        # The north-east corner is inclusive even when it sits on a cell edge.
        # Corners past the extent (e.g. the bounds of an edge cell) are clamped.
        self.min_row = max(min_row, cell_index(bbox.min_lat, LAT_ORIGIN, lat_pd))
        self.max_row = min(max_row, cell_index(bbox.max_lat, LAT_ORIGIN, lat_pd))
        self.min_column = max(min_col, cell_index(bbox.min_lon, LON_ORIGIN, lon_pd))
        self.max_column = min(max_col, cell_index(bbox.max_lon, LON_ORIGIN, lon_pd))

    @property
    def rows(self) -> int:
        return max(0, self.max_row - self.min_row + 1)

    @property
    def columns(self) -> int:
        return max(0, self.max_column - self.min_column + 1)

    def __len__(self) -> int:
        return self.rows * self.columns

    def __iter__(self) -> Iterator[MeshCode]:
        logger.debug(
            "enumerating %d %s cells for bbox %s", len(self), self.level.label, self.bbox.as_tuple()
        )
        for row in range(self.min_row, self.max_row + 1):
            for column in range(self.min_column, self.max_column + 1):
                yield MeshCode.from_parts(self.level, row, column)

    def __contains__(self, code: object) -> bool:
        return (
            isinstance(code, MeshCode)
            and code.level is self.level
            and self.min_row <= code.row <= self.max_row
            and self.min_column <= code.column <= self.max_column
        )

    def __repr__(self) -> str:
        return (
            f"MeshCodeRange(level={self.level.name}, rows={self.min_row}..{self.max_row}, "
            f"columns={self.min_column}..{self.max_column})"
        )


def mesh_codes_in_bbox(bbox: BoundingBox, level: MeshLevel) -> MeshCodeRange:
    """
    Get all cells at `level` that cover a bounding box.

    Args:
        bbox: Area to cover
        level: Mesh level of the produced codes

    Returns:
        Lazy MeshCodeRange; wrap in list() to materialize
    """
    return MeshCodeRange(bbox, level)


def count_mesh_codes_in_bbox(bbox: BoundingBox, level: MeshLevel) -> int:
    """
    Count cells needed for a bounding box without generating them.

    Useful for progress estimation.
    """
    return len(MeshCodeRange(bbox, level))
