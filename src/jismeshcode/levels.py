"""
Mesh levels of the standard grid square code.

Level   Cell (lat x lon)   Digits  Approx. size
first   40' x 1 deg        4       80km
second  5' x 7'30"         6       10km
third   30" x 45"          8       1km
half    15" x 22.5"        9       500m
quarter 7.5" x 11.25"      10      250m
eighth  3.75" x 5.625"     11      125m
fifth   3" x 4.5"          10      100m

The half/quarter/eighth levels successively split a third-level cell
2x2. The fifth level splits a third-level cell 10x10 instead, so it sits
on its own branch below the third level.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


@dataclass(frozen=True)
class _LevelSpec:
    name: str
    digits: int
    lat_cells_per_degree: float
    lon_cells_per_degree: float
    meters: float
    parent: Optional[int]
    factor: Optional[int]


_SPECS = {
    1: _LevelSpec("first", 4, 1.5, 1.0, 80000.0, None, None),
    2: _LevelSpec("second", 6, 12.0, 8.0, 10000.0, 1, 8),
    3: _LevelSpec("third", 8, 120.0, 80.0, 1000.0, 2, 10),
    4: _LevelSpec("half", 9, 240.0, 160.0, 500.0, 3, 2),
    5: _LevelSpec("quarter", 10, 480.0, 320.0, 250.0, 4, 2),
    6: _LevelSpec("eighth", 11, 960.0, 640.0, 125.0, 5, 2),
    7: _LevelSpec("fifth", 10, 1200.0, 800.0, 100.0, 3, 10),
}

# Default refinement chain; the fifth level is only reached explicitly.
_CHILD = {1: 2, 2: 3, 3: 4, 4: 5, 5: 6}


class MeshLevel(Enum):
    FIRST = 1
    SECOND = 2
    THIRD = 3
    FOURTH_HALF = 4
    FOURTH_QUARTER = 5
    FOURTH_EIGHTH = 6
    FIFTH = 7

    @property
    def _spec(self) -> _LevelSpec:
        return _SPECS[self.value]

    @property
    def label(self) -> str:
        """Short lowercase name used on the command line."""
        return self._spec.name

    def lat_size_degrees(self) -> float:
        return 1.0 / self._spec.lat_cells_per_degree

    def lon_size_degrees(self) -> float:
        return 1.0 / self._spec.lon_cells_per_degree

    def lat_cells_per_degree(self) -> float:
        return self._spec.lat_cells_per_degree

    def lon_cells_per_degree(self) -> float:
        return self._spec.lon_cells_per_degree

    def approximate_size_meters(self) -> float:
        """Rough edge length of a cell at mid-latitudes. Informational only."""
        return self._spec.meters

    def digit_count(self) -> int:
        return self._spec.digits

    def parent_level(self) -> Optional["MeshLevel"]:
        parent = self._spec.parent
        return None if parent is None else MeshLevel(parent)

    def subdivision_factor(self) -> Optional[int]:
        """Cells per side of this level inside one parent cell."""
        return self._spec.factor

    def child_level(self) -> Optional["MeshLevel"]:
        child = _CHILD.get(self.value)
        return None if child is None else MeshLevel(child)

    def is_coarsest(self) -> bool:
        return self.parent_level() is None

    def is_finest(self) -> bool:
        return self.child_level() is None

    def ancestors(self) -> list["MeshLevel"]:
        """Parent chain from the immediate parent up to the first level."""
        chain = []
        level = self.parent_level()
        while level is not None:
            chain.append(level)
            level = level.parent_level()
        return chain

    def is_finer_than(self, other: "MeshLevel") -> bool:
        """Compare by cell size; a smaller cell is finer."""
        return self.lat_cells_per_degree() > other.lat_cells_per_degree()

    @classmethod
    def levels_for_digit_count(cls, count: int) -> list["MeshLevel"]:
        """All levels whose canonical string has `count` digits, coarsest first."""
        return [level for level in cls if level.digit_count() == count]

    @classmethod
    def from_name(cls, name: str) -> "MeshLevel":
        """
        Look up a level by label ("third", "half") or member name
        ("THIRD", "FOURTH_HALF"), case-insensitive.
        """
        key = name.strip().lower()
        for level in cls:
            if key in (level.label, level.name.lower()):
                return level
        raise ValueError(f"Unknown mesh level: {name}")

    def __str__(self) -> str:
        return self.label
