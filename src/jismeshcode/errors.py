"""
Exception hierarchy for mesh code operations.

Every error subclasses MeshCodeError, which is a ValueError so that
validation layers (argparse, pydantic) treat them as bad input.
"""

from typing import Optional


class MeshCodeError(ValueError):
    """Base exception for mesh code operations."""


class OutOfRangeError(MeshCodeError):
    """Raised when a coordinate or cell falls outside the covered extent."""


class InvalidLengthError(MeshCodeError):
    """Raised when a code string matches no known level's digit count."""

    def __init__(self, length: int, expected: Optional[int] = None):
        self.length = length
        self.expected = expected
        if expected is None:
            message = f"Invalid mesh code length: {length}"
        else:
            message = f"Invalid mesh code length: {length} (expected {expected})"
        super().__init__(message)


class InvalidDigitError(MeshCodeError):
    """Raised when a code string has a character that is not valid at its position."""

    def __init__(self, position: int, digit: str):
        self.position = position
        self.digit = digit
        super().__init__(f"Invalid digit {digit!r} at position {position}")


class LevelError(MeshCodeError):
    """Base for level conversion failures."""


class CannotRefineError(LevelError):
    """Raised when converting a code toward a finer level."""


class UnrelatedLevelError(LevelError):
    """Raised when two levels do not share a hierarchy chain."""
