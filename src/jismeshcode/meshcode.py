"""
Mesh code codec.

A mesh code is a (level, row, column) triple. Rows and columns count
cells of the level's size from the standard origin at latitude 0 and
longitude 100 degrees, so a third-level row is simply
floor(lat / 30 arc-seconds). The canonical digit string is derived from
those indices by splitting them back into the per-level digit groups:

    first      pp qq      row / column of the 40' x 1 deg cell
    second     + r s      0-7 within the first-level cell
    third      + t u      0-9 within the second-level cell
    half       + a        quadrant 1-4 (SW, SE, NW, NE) of the third-level cell
    quarter    + a b      quadrant of the half cell
    eighth     + a b c    quadrant of the quarter cell
    fifth      + v w      0-9 within the third-level cell
"""

import logging
import math
from dataclasses import dataclass
from typing import Any, Optional

from pydantic_core import core_schema

from .coordinate import MAX_LAT, MAX_LON, MIN_LAT, MIN_LON, BoundingBox, Coordinate
from .errors import InvalidDigitError, InvalidLengthError, OutOfRangeError
from .levels import MeshLevel

logger = logging.getLogger(__name__)

LAT_ORIGIN = 0.0
LON_ORIGIN = 100.0

_QUADRANT_LEVELS = (
    MeshLevel.FOURTH_HALF,
    MeshLevel.FOURTH_QUARTER,
    MeshLevel.FOURTH_EIGHTH,
)
_QUADRANT_DIGITS = "1234"
_DIGITS = "0123456789"

# Packed layout: level | row (20 bits) | column (20 bits)
_FIELD_BITS = 20
_FIELD_MASK = (1 << _FIELD_BITS) - 1


def cell_index(value: float, origin: float, cells_per_degree: float) -> int:
    """
    Index of the cell containing `value`, truncated toward the origin.

    The result satisfies index / cells_per_degree <= value - origin <
    (index + 1) / cells_per_degree in floating point, which is the same
    arithmetic MeshCode.bounds() uses.
    """
    offset = value - origin
    index = math.floor(offset * cells_per_degree)
    if index / cells_per_degree > offset:
        index -= 1
    elif (index + 1) / cells_per_degree <= offset:
        index += 1
    return index


def _compute_limits(level: MeshLevel) -> tuple[int, int, int, int]:
    lat_pd = level.lat_cells_per_degree()
    lon_pd = level.lon_cells_per_degree()
    return (
        cell_index(MIN_LAT, LAT_ORIGIN, lat_pd),
        cell_index(MAX_LAT, LAT_ORIGIN, lat_pd),
        cell_index(MIN_LON, LON_ORIGIN, lon_pd),
        cell_index(MAX_LON, LON_ORIGIN, lon_pd),
    )


_LIMITS = {level: _compute_limits(level) for level in MeshLevel}


def grid_limits(level: MeshLevel) -> tuple[int, int, int, int]:
    """
    Inclusive (min_row, max_row, min_column, max_column) of the cells
    covering the supported extent at `level`.
    """
    return _LIMITS[level]


def in_grid(level: MeshLevel, row: int, column: int) -> bool:
    min_row, max_row, min_col, max_col = _LIMITS[level]
    return min_row <= row <= max_row and min_col <= column <= max_col


def _format_digits(level: MeshLevel, row: int, column: int) -> str:
    if level is MeshLevel.FIRST:
        return f"{row:02d}{column:02d}"
    parent = level.parent_level()
    factor = level.subdivision_factor()
    parent_row, sub_row = divmod(row, factor)
    parent_col, sub_col = divmod(column, factor)
    prefix = _format_digits(parent, parent_row, parent_col)
    if level in _QUADRANT_LEVELS:
        return f"{prefix}{sub_row * 2 + sub_col + 1}"
    return f"{prefix}{sub_row}{sub_col}"


def _parse_digits(code: str, level: MeshLevel) -> tuple[int, int]:
    """Split a digit string of `level` back into (row, column)."""
    if level is MeshLevel.FIRST:
        return int(code[0:2]), int(code[2:4])
    parent = level.parent_level()
    factor = level.subdivision_factor()
    parent_row, parent_col = _parse_digits(code, parent)
    end = level.digit_count()
    if level in _QUADRANT_LEVELS:
        position = end - 1
        digit = code[position]
        if digit not in _QUADRANT_DIGITS:
            raise InvalidDigitError(position, digit)
        sub_row, sub_col = divmod(int(digit) - 1, 2)
    else:
        for position in (end - 2, end - 1):
            if int(code[position]) >= factor:
                raise InvalidDigitError(position, code[position])
        sub_row, sub_col = int(code[end - 2]), int(code[end - 1])
    return parent_row * factor + sub_row, parent_col * factor + sub_col


def _infer_level(code: str) -> MeshLevel:
    candidates = MeshLevel.levels_for_digit_count(len(code))
    if not candidates:
        raise InvalidLengthError(len(code))
    if len(candidates) == 1:
        return candidates[0]
    # Ten digits: quarter when both trailing digits read as quadrants.
    if code[8] in _QUADRANT_DIGITS and code[9] in _QUADRANT_DIGITS:
        level = MeshLevel.FOURTH_QUARTER
    else:
        level = MeshLevel.FIFTH
    logger.debug("ambiguous %d-digit code %s read as %s", len(code), code, level.name)
    return level


@dataclass(frozen=True, order=True, repr=False)
class MeshCode:
    """
    A cell of the standard grid square code.

    Stored as one packed integer, so codes are cheap to hash, compare and
    copy. Build codes with from_coordinate(), from_string() or
    from_parts(); the constructor only accepts an already packed value.
    Ordering groups codes by level, then row, then column.
    """
    value: int

    def __post_init__(self):
        if isinstance(self.value, bool) or not isinstance(self.value, int) or self.value < 0:
            raise TypeError(f"packed mesh code must be a non-negative int, got {self.value!r}")
        try:
            level = MeshLevel(self.value >> (2 * _FIELD_BITS))
        except ValueError:
            raise OutOfRangeError(f"packed value {self.value} has no valid level") from None
        if not in_grid(level, self.row, self.column):
            raise OutOfRangeError(
                f"cell row={self.row} column={self.column} is outside the {level.label} grid"
            )

    # --- Construction ---

    @classmethod
    def from_parts(cls, level: MeshLevel, row: int, column: int) -> "MeshCode":
        """Build a code from level-relative row and column indices."""
        if not in_grid(level, row, column):
            raise OutOfRangeError(
                f"cell row={row} column={column} is outside the {level.label} grid"
            )
        return cls((level.value << (2 * _FIELD_BITS)) | (row << _FIELD_BITS) | column)

    @classmethod
    def from_coordinate(cls, coord: Coordinate, level: MeshLevel) -> "MeshCode":
        """
        Encode the cell at `level` that contains `coord`.

        Coordinates are truncated toward the south-west corner of their
        cell, so every point of a cell maps to the same code.
        """
        row = cell_index(coord.lat, LAT_ORIGIN, level.lat_cells_per_degree())
        column = cell_index(coord.lon, LON_ORIGIN, level.lon_cells_per_degree())
        return cls.from_parts(level, row, column)

    @classmethod
    def from_string(cls, code: str, level: Optional[MeshLevel] = None) -> "MeshCode":
        """
        Parse a canonical digit string.

        Ten-digit strings are either quarter or fifth level codes. Pass
        `level` to choose; without it the string is read as a quarter
        code when both trailing digits are 1-4, otherwise as fifth level.

        Raises:
            InvalidDigitError: a character is not a digit, or a digit is
                not valid for its group
            InvalidLengthError: the length matches no level (or `level`)
            OutOfRangeError: the cell lies outside the covered extent
        """
        if not isinstance(code, str):
            raise TypeError(f"mesh code must be a str, got {type(code).__name__}")
        for position, ch in enumerate(code):
            if ch not in _DIGITS:
                raise InvalidDigitError(position, ch)
        if level is None:
            level = _infer_level(code)
        elif len(code) != level.digit_count():
            raise InvalidLengthError(len(code), level.digit_count())
        row, column = _parse_digits(code, level)
        return cls.from_parts(level, row, column)

    # --- Accessors ---

    @property
    def level(self) -> MeshLevel:
        return MeshLevel(self.value >> (2 * _FIELD_BITS))

    @property
    def row(self) -> int:
        return (self.value >> _FIELD_BITS) & _FIELD_MASK

    @property
    def column(self) -> int:
        return self.value & _FIELD_MASK

    def as_string(self) -> str:
        """Canonical fixed-length digit string."""
        return _format_digits(self.level, self.row, self.column)

    # --- Geometry ---

    def bounds(self) -> BoundingBox:
        level = self.level
        lat_pd = level.lat_cells_per_degree()
        lon_pd = level.lon_cells_per_degree()
        row, column = self.row, self.column
        south_west = Coordinate._unchecked(
            LAT_ORIGIN + row / lat_pd, LON_ORIGIN + column / lon_pd
        )
        north_east = Coordinate._unchecked(
            LAT_ORIGIN + (row + 1) / lat_pd, LON_ORIGIN + (column + 1) / lon_pd
        )
        return BoundingBox(south_west, north_east)

    def center(self) -> Coordinate:
        """
        Midpoint of the cell. Cells on the north/east edge of the extent
        have their center past it, so the result is not range-checked.
        """
        return self.bounds().center()

    def contains(self, coord: Coordinate) -> bool:
        return self.bounds().contains(coord)

    # --- Serialization ---

    @classmethod
    def _validate(cls, value: Any, level: Optional[MeshLevel] = None) -> "MeshCode":
        if isinstance(value, cls):
            if level is not None and value.level is not level:
                raise ValueError(f"expected a {level.label} code, got {value.level.label}")
            return value
        if not isinstance(value, str):
            raise ValueError(f"mesh code must be a string, got {type(value).__name__}")
        return cls.from_string(value, level=level)

    @classmethod
    def __get_pydantic_core_schema__(cls, source_type: Any, handler: Any) -> core_schema.CoreSchema:
        return core_schema.no_info_plain_validator_function(
            cls._validate,
            serialization=core_schema.plain_serializer_function_ser_schema(cls.as_string),
        )

    def __int__(self) -> int:
        """Decimal value of the canonical digits (not the packed value)."""
        return int(self.as_string())

    def __str__(self) -> str:
        return self.as_string()

    def __repr__(self) -> str:
        return f"MeshCode({self.as_string()!r}, level={self.level.name})"


@dataclass(frozen=True)
class MeshCodeLevel:
    """
    Pin the level of a MeshCode field in a pydantic model.

    The digit string alone cannot tell a fifth-level code from a quarter
    code when both trailing digits are 1-4, so a plain MeshCode field
    reads such strings as quarter codes. Annotate fields that hold
    10-digit codes with their level to parse them unambiguously:

        code: Annotated[MeshCode, MeshCodeLevel(MeshLevel.FIFTH)]

    Values of any other level are rejected.
    """
    level: MeshLevel

    def __get_pydantic_core_schema__(self, source_type: Any, handler: Any) -> core_schema.CoreSchema:
        level = self.level
        return core_schema.no_info_plain_validator_function(
            lambda value: MeshCode._validate(value, level),
            serialization=core_schema.plain_serializer_function_ser_schema(MeshCode.as_string),
        )
