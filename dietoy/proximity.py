"""Static nearest-neighbour index over bit locations."""

from __future__ import annotations

import logging
from typing import Optional, Sequence, Tuple

import numpy as np
from scipy.spatial import cKDTree

from .types import EmptyIndexError, Point2D, as_point

logger = logging.getLogger(__name__)


class ProximityIndex:
    """k-d tree over a fixed point snapshot; rebuild it whenever the points change."""

    def __init__(self, points: Optional[Sequence[Sequence[float]]] = None) -> None:
        self._tree: Optional[cKDTree] = None
        self._size = 0
        if points is not None:
            self.build(points)

    def __len__(self) -> int:
        return self._size

    @property
    def is_built(self) -> bool:
        return self._tree is not None

    def build(self, points: Sequence[Sequence[float]]) -> None:
        data = np.asarray([as_point(p) for p in points], dtype=np.float64).reshape(-1, 2)
        if len(data) == 0:
            self._tree = None
            self._size = 0
            logger.info("Proximity index cleared (no points)")
            return
        self._tree = cKDTree(data)
        self._size = len(data)
        logger.info("Built proximity index over %d point(s)", self._size)

    def clear(self) -> None:
        self._tree = None
        self._size = 0

    def nearest(self, query: Sequence[float]) -> Tuple[int, float]:
        """Return ``(index, euclidean_distance)`` of the point closest to ``query``."""

        if self._tree is None:
            raise EmptyIndexError("nearest-point query before any bit locations were indexed")
        point: Point2D = as_point(query)
        distance, index = self._tree.query(point, k=1)
        return int(index), float(distance)
