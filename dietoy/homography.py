"""Projective transform between image space and the normalized die square."""

from __future__ import annotations

import itertools
import logging
import math
from typing import Optional, Sequence, Tuple

import numpy as np

from .config import get_engine_config
from .geometry import polygon_area, triangle_doubled_area
from .logging_utils import apply_debug_logging
from .types import BoundaryQuad, DegenerateQuadError, Point2D, ProjectionError, as_point

logger = logging.getLogger(__name__)

# Fixed correspondence: quad[i] maps onto UNIT_SQUARE[i].
UNIT_SQUARE: Tuple[Point2D, Point2D, Point2D, Point2D] = ((0.0, 0.0), (1.0, 0.0), (1.0, 1.0), (0.0, 1.0))


class Homography:
    """A 3x3 image-to-die transform together with its cached inverse."""

    def __init__(
        self,
        matrix: np.ndarray,
        *,
        source_quad: Optional[BoundaryQuad] = None,
        w_epsilon: Optional[float] = None,
    ) -> None:
        matrix = np.array(matrix, dtype=np.float64)
        if matrix.shape != (3, 3):
            raise ValueError(f"homography must be a 3x3 matrix, got shape {matrix.shape}")
        if not np.all(np.isfinite(matrix)):
            raise DegenerateQuadError("homography matrix contains non-finite entries")
        try:
            inverse = np.linalg.inv(matrix)
        except np.linalg.LinAlgError as exc:
            raise DegenerateQuadError("homography matrix is singular") from exc

        self._matrix = matrix
        self._inverse = inverse
        self._matrix.setflags(write=False)
        self._inverse.setflags(write=False)
        self.source_quad = source_quad
        self.w_epsilon = get_engine_config().w_epsilon if w_epsilon is None else float(w_epsilon)

    @property
    def matrix(self) -> np.ndarray:
        return self._matrix

    @property
    def inverse(self) -> np.ndarray:
        return self._inverse

    def to_die_space(self, point: Sequence[float]) -> Point2D:
        """Map an image-space point into normalized die space."""

        return _project(self._matrix, as_point(point), self.w_epsilon)

    def to_image_space(self, point: Sequence[float]) -> Point2D:
        """Map a die-space point back into the image."""

        return _project(self._inverse, as_point(point), self.w_epsilon)

    def to_image_space_many(self, points: np.ndarray) -> np.ndarray:
        """Vectorized :meth:`to_image_space` over an ``(N, 2)`` array."""

        pts = np.asarray(points, dtype=np.float64).reshape(-1, 2)
        homogeneous = np.hstack([pts, np.ones((len(pts), 1), dtype=np.float64)]) @ self._inverse.T
        w = homogeneous[:, 2:3]
        if np.any(np.abs(w) <= self.w_epsilon):
            raise ProjectionError("die-space point maps to the line at infinity")
        return homogeneous[:, :2] / w

    def __repr__(self) -> str:
        rows = "; ".join(" ".join(f"{v:.6g}" for v in row) for row in self._matrix)
        return f"Homography([{rows}])"


def _project(matrix: np.ndarray, point: Point2D, w_epsilon: float) -> Point2D:
    x, y, w = matrix @ np.array([point[0], point[1], 1.0], dtype=np.float64)
    if abs(w) <= w_epsilon or not math.isfinite(w):
        raise ProjectionError(f"homogeneous weight {w!r} too small to project {point}")
    return (float(x / w), float(y / w))


def _check_quad(pts: Sequence[Point2D], epsilon: float) -> None:
    xs = [p[0] for p in pts]
    ys = [p[1] for p in pts]
    scale = math.hypot(max(xs) - min(xs), max(ys) - min(ys))
    if scale <= 0.0:
        raise DegenerateQuadError("all boundary points coincide")

    tolerance = epsilon * scale * scale
    for a, b, c in itertools.combinations(pts, 3):
        if abs(triangle_doubled_area(a, b, c)) <= tolerance:
            raise DegenerateQuadError(f"boundary points {a}, {b}, {c} are collinear")
    if abs(polygon_area(pts)) <= tolerance:
        raise DegenerateQuadError("boundary quadrilateral has zero area")


def build_homography(
    quad: Sequence[Sequence[float]],
    *,
    epsilon: Optional[float] = None,
    w_epsilon: Optional[float] = None,
) -> Homography:
    """Solve for ``H`` with ``H * quad[i] ~ UNIT_SQUARE[i]``.

    Raises :class:`DegenerateQuadError` when the points are collinear or the
    resulting linear system is singular.
    """

    pts = [as_point(p) for p in quad]
    if len(pts) != 4:
        raise DegenerateQuadError(f"homography needs exactly 4 boundary points, got {len(pts)}")
    config = get_engine_config()
    _check_quad(pts, config.collinear_epsilon if epsilon is None else epsilon)

    rows = []
    rhs = []
    for (x, y), (u, v) in zip(pts, UNIT_SQUARE):
        rows.append([x, y, 1.0, 0.0, 0.0, 0.0, -u * x, -u * y])
        rows.append([0.0, 0.0, 0.0, x, y, 1.0, -v * x, -v * y])
        rhs.append(u)
        rhs.append(v)

    try:
        solution = np.linalg.solve(np.asarray(rows, dtype=np.float64), np.asarray(rhs, dtype=np.float64))
    except np.linalg.LinAlgError as exc:
        raise DegenerateQuadError("boundary points produce a singular homography system") from exc

    matrix = np.append(solution, 1.0).reshape(3, 3)
    homography = Homography(
        matrix,
        source_quad=tuple(pts),  # type: ignore[arg-type]
        w_epsilon=config.w_epsilon if w_epsilon is None else w_epsilon,
    )
    logger.info("Built homography for region %s", tuple(pts))
    return homography


apply_debug_logging(globals(), logger=logger)
