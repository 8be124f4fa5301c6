"""Canonical ordering of the four boundary points of the die region."""

from __future__ import annotations

import logging
import math
from typing import List, Optional, Sequence

from .types import BoundaryQuad, DegenerateQuadError, Point2D, QuadOrderingError, as_point

logger = logging.getLogger(__name__)

_SLOT_NAMES = ("top-left", "top-right", "bottom-right", "bottom-left")


def centroid(points: Sequence[Point2D]) -> Point2D:
    count = len(points)
    if count == 0:
        raise ValueError("centroid of an empty point set is undefined")
    return (sum(p[0] for p in points) / count, sum(p[1] for p in points) / count)


def angular_slot(angle: float) -> int:
    """Map an ``atan2`` angle to a quadrant slot 0..3 (clockwise from upper-left)."""

    half_pi = math.pi / 2.0
    if angle < 0.0:
        return 0 if angle < -half_pi else 1
    return 2 if angle < half_pi else 3


def order_quad_points(points: Sequence[Sequence[float]]) -> BoundaryQuad:
    """Return ``points`` in canonical top-left, top-right, bottom-right, bottom-left order.

    Each point is bucketed by the angle of its direction from the centroid, so
    the result does not depend on the order the points were clicked in. Two
    points sharing a bucket (non-convex or degenerate input) raise
    :class:`QuadOrderingError` rather than silently dropping one of them.
    """

    pts = [as_point(p) for p in points]
    if len(pts) != 4:
        raise DegenerateQuadError(f"a die region needs exactly 4 boundary points, got {len(pts)}")

    cx, cy = centroid(pts)
    slots: List[Optional[Point2D]] = [None, None, None, None]
    for point in pts:
        dx = point[0] - cx
        dy = point[1] - cy
        length = math.hypot(dx, dy)
        if length > 0.0:
            dx, dy = dx / length, dy / length
        slot = angular_slot(math.atan2(dy, dx))
        if slots[slot] is not None:
            logger.warning(
                "Boundary points %s and %s both fall in the %s slot",
                slots[slot],
                point,
                _SLOT_NAMES[slot],
            )
            raise QuadOrderingError(
                f"boundary points {slots[slot]} and {point} both fall in the {_SLOT_NAMES[slot]} slot"
            )
        slots[slot] = point

    ordered = tuple(p for p in slots if p is not None)
    return ordered  # type: ignore[return-value]
