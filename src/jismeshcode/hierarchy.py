"""
Parent/child navigation between mesh levels.

Levels form a tree rooted at the first level:

    first -> second -> third -> half -> quarter -> eighth
                              `-> fifth
"""

import logging
from typing import Optional

from .errors import CannotRefineError, UnrelatedLevelError
from .levels import MeshLevel
from .meshcode import MeshCode, in_grid

logger = logging.getLogger(__name__)


def parent(code: MeshCode) -> Optional[MeshCode]:
    """
    Get the enclosing cell one level up.

    Returns None for first-level codes.
    """
    level = code.level
    parent_level = level.parent_level()
    if parent_level is None:
        return None
    factor = level.subdivision_factor()
    return MeshCode.from_parts(parent_level, code.row // factor, code.column // factor)


def ancestors(code: MeshCode) -> list[MeshCode]:
    """All enclosing cells, from the parent up to the first level."""
    result = []
    current = parent(code)
    while current is not None:
        result.append(current)
        current = parent(current)
    return result


def children(code: MeshCode, level: Optional[MeshLevel] = None) -> list[MeshCode]:
    """
    Get all cells one level down, row by row from the south-west corner.

    Args:
        code: Cell to subdivide
        level: Child level. Defaults to the next level on the main chain;
            pass MeshLevel.FIFTH to split a third-level cell 10x10. The
            default children of a third-level cell are its 4 half cells,
            so children(parent(c)) does not contain a fifth-level c.

    Returns:
        factor**2 codes, or an empty list when `code` is at a finest level
        and no `level` is given. Cells on the north/east edge of the
        extent only keep the children that are still inside it.

    Raises:
        UnrelatedLevelError: `level` is not a direct child of code.level
    """
    if level is None:
        level = code.level.child_level()
        if level is None:
            return []
    elif level.parent_level() is not code.level:
        raise UnrelatedLevelError(
            f"{level.name} is not a direct subdivision of {code.level.name}"
        )

    factor = level.subdivision_factor()
    base_row = code.row * factor
    base_col = code.column * factor
    return [
        MeshCode.from_parts(level, base_row + dr, base_col + dc)
        for dr in range(factor)
        for dc in range(factor)
        if in_grid(level, base_row + dr, base_col + dc)
    ]


def to_level(code: MeshCode, target: MeshLevel) -> MeshCode:
    """
    Convert a code to an enclosing cell at a coarser level.

    Raises:
        CannotRefineError: `target` is finer than the code's level; a
            coarse cell holds many fine cells so there is no single answer
        UnrelatedLevelError: the levels are on different branches, e.g.
            fifth and half
    """
    source = code.level
    if target is source:
        return code

    if target in source.ancestors():
        current = code
        while current.level is not target:
            current = parent(current)
        return current

    if source in target.ancestors() or target.is_finer_than(source):
        raise CannotRefineError(f"cannot refine {source.name} code {code} to {target.name}")

    logger.debug("no common chain between %s and %s", source.name, target.name)
    raise UnrelatedLevelError(f"{source.name} and {target.name} are on different branches")
