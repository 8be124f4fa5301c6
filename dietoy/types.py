"""Shared value types and the error taxonomy of the grid engine."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal, Tuple

Point2D = Tuple[float, float]
BoundaryQuad = Tuple[Point2D, Point2D, Point2D, Point2D]
Color = Tuple[int, int, int]

AxisKind = Literal["horizontal", "vertical"]
AXIS_KINDS: Tuple[AxisKind, AxisKind] = ("horizontal", "vertical")

# Tagged "current tool" value switched by the UI layer.
Tool = Literal["navigation", "bounds", "slice-horizontal", "slice-vertical", "bit-display"]
TOOLS: Tuple[str, ...] = ("navigation", "bounds", "slice-horizontal", "slice-vertical", "bit-display")


@dataclass(frozen=True)
class Segment:
    """Image-space line segment; ``p1`` lies at die coordinate 0 of the spanned axis."""

    p1: Point2D
    p2: Point2D


def as_point(value: object) -> Point2D:
    """Coerce a 2-sequence into a ``(float, float)`` tuple."""

    try:
        x, y = value  # type: ignore[misc]
    except (TypeError, ValueError) as exc:
        raise ValueError(f"expected a 2D point, got {value!r}") from exc
    return (float(x), float(y))


def check_axis(axis: str) -> AxisKind:
    if axis not in AXIS_KINDS:
        raise ValueError(f"unknown slice axis {axis!r}; expected one of {AXIS_KINDS}")
    return axis  # type: ignore[return-value]


class DieToyError(Exception):
    """Base class for every recoverable engine error."""


class DegenerateQuadError(DieToyError, ValueError):
    """Raised when the boundary points do not describe a usable quadrilateral."""


class QuadOrderingError(DegenerateQuadError):
    """Raised when two boundary points fall into the same angular slot."""


class ProjectionError(DieToyError, ArithmeticError):
    """Raised when a perspective divide would hit a zero homogeneous weight."""


class InvalidSelectionError(DieToyError):
    """Raised when a selected slice has no predecessor to measure an offset from."""


class IndexOutOfRangeError(DieToyError, IndexError):
    """Raised when a selection refers to a slice index that does not exist."""


class EmptyIndexError(DieToyError):
    """Raised when a nearest-point query runs before any point set was indexed."""


class StaleDerivedStateError(DieToyError):
    """Raised when derived geometry is read after its inputs changed."""


class DescriptionFormatError(DieToyError, ValueError):
    """Raised when a die description document cannot be interpreted."""


__all__ = [
    "Point2D",
    "BoundaryQuad",
    "Color",
    "AxisKind",
    "AXIS_KINDS",
    "Tool",
    "TOOLS",
    "Segment",
    "as_point",
    "check_axis",
    "DieToyError",
    "DegenerateQuadError",
    "QuadOrderingError",
    "ProjectionError",
    "InvalidSelectionError",
    "IndexOutOfRangeError",
    "EmptyIndexError",
    "StaleDerivedStateError",
    "DescriptionFormatError",
]
