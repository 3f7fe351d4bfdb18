"""
Adjacent cell lookup.

Neighbors are found with row/column arithmetic at the code's own level,
so they cross parent cell boundaries without any digit carrying.
"""

from enum import Enum
from typing import Optional

from .meshcode import MeshCode, in_grid


class Direction(Enum):
    """Compass direction carrying its (row_delta, column_delta)."""
    NORTH = (1, 0)
    NORTH_EAST = (1, 1)
    EAST = (0, 1)
    SOUTH_EAST = (-1, 1)
    SOUTH = (-1, 0)
    SOUTH_WEST = (-1, -1)
    WEST = (0, -1)
    NORTH_WEST = (1, -1)

    @property
    def row_delta(self) -> int:
        return self.value[0]

    @property
    def column_delta(self) -> int:
        return self.value[1]

    def opposite(self) -> "Direction":
        return Direction((-self.row_delta, -self.column_delta))


def neighbor(code: MeshCode, direction: Direction) -> Optional[MeshCode]:
    """
    Get the adjacent cell at the same level.

    Returns None when the neighbor would fall outside the covered extent.
    """
    row = code.row + direction.row_delta
    column = code.column + direction.column_delta
    if not in_grid(code.level, row, column):
        return None
    return MeshCode.from_parts(code.level, row, column)


def neighbors(code: MeshCode) -> list[MeshCode]:
    """All existing neighbors, clockwise from north."""
    result = []
    for direction in Direction:
        adjacent = neighbor(code, direction)
        if adjacent is not None:
            result.append(adjacent)
    return result
