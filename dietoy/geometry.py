"""Plane geometry helpers used for hit-testing and grid construction."""

from __future__ import annotations

import math
from typing import Optional, Sequence

from .types import Point2D, Segment


def _vec2(a: Point2D, b: Point2D) -> Point2D:
    return b[0] - a[0], b[1] - a[1]


def _cross2(a: Point2D, b: Point2D) -> float:
    return a[0] * b[1] - a[1] * b[0]


def manhattan_distance(a: Point2D, b: Point2D) -> float:
    return abs(a[0] - b[0]) + abs(a[1] - b[1])


def segment_point_distance(segment: Segment, point: Point2D) -> float:
    """Distance from ``point`` to the closest point of ``segment``.

    The point is projected onto the infinite line through the segment and the
    projection parameter is clamped to ``[0, 1]`` so the foot stays on the
    segment. A zero-length segment degrades to the distance to ``p1``.
    """

    p1 = segment.p1
    dx, dy = _vec2(p1, segment.p2)
    len_sq = dx * dx + dy * dy
    if len_sq <= 0.0:
        return math.hypot(point[0] - p1[0], point[1] - p1[1])

    t = ((point[0] - p1[0]) * dx + (point[1] - p1[1]) * dy) / len_sq
    t = min(max(t, 0.0), 1.0)
    foot = (p1[0] + t * dx, p1[1] + t * dy)
    return math.hypot(point[0] - foot[0], point[1] - foot[1])


def segment_intersect(a: Segment, b: Segment, *, bounded: bool = False) -> Optional[Point2D]:
    """Intersection of the lines through ``a`` and ``b``.

    Returns ``None`` for parallel (or coincident) lines. With ``bounded`` the
    hit must also lie on both segments.
    """

    r = _vec2(a.p1, a.p2)
    s = _vec2(b.p1, b.p2)
    denom = _cross2(r, s)
    scale = math.hypot(*r) * math.hypot(*s)
    if scale <= 0.0 or abs(denom) <= 1e-12 * scale:
        return None

    qp = _vec2(a.p1, b.p1)
    t = _cross2(qp, s) / denom
    if bounded:
        u = _cross2(qp, r) / denom
        tol = 1e-12
        if t < -tol or t > 1.0 + tol or u < -tol or u > 1.0 + tol:
            return None
    return (a.p1[0] + t * r[0], a.p1[1] + t * r[1])


def polygon_area(polygon: Sequence[Point2D]) -> float:
    """Signed shoelace area; positive for counter-clockwise vertex order."""

    total = 0.0
    count = len(polygon)
    for idx in range(count):
        x1, y1 = polygon[idx]
        x2, y2 = polygon[(idx + 1) % count]
        total += x1 * y2 - x2 * y1
    return 0.5 * total


def point_in_polygon(polygon: Sequence[Point2D], point: Point2D) -> bool:
    """Even-odd containment test."""

    x, y = point
    inside = False
    count = len(polygon)
    if count < 3:
        return False
    j = count - 1
    for i in range(count):
        xi, yi = polygon[i]
        xj, yj = polygon[j]
        if (yi > y) != (yj > y):
            x_cross = xi + (y - yi) * (xj - xi) / (yj - yi)
            if x < x_cross:
                inside = not inside
        j = i
    return inside


def triangle_doubled_area(a: Point2D, b: Point2D, c: Point2D) -> float:
    return _cross2(_vec2(a, b), _vec2(a, c))


__all__ = [
    "manhattan_distance",
    "segment_point_distance",
    "segment_intersect",
    "polygon_area",
    "point_in_polygon",
    "triangle_doubled_area",
]
