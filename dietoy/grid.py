"""Slice lines and bit locations derived from a homography and two slice axes."""

from __future__ import annotations

import logging
from typing import List, Sequence, Tuple

import numpy as np

from .geometry import segment_intersect
from .homography import Homography
from .logging_utils import apply_debug_logging
from .slices import SliceAxis
from .types import AxisKind, BoundaryQuad, Point2D, Segment, check_axis

logger = logging.getLogger(__name__)


def _die_endpoints(offsets: Sequence[float], axis: AxisKind) -> np.ndarray:
    """Die-space endpoints, two rows per offset (die coordinate 0 first)."""

    offsets_arr = np.asarray(offsets, dtype=np.float64)
    ends = np.empty((len(offsets_arr) * 2, 2), dtype=np.float64)
    if axis == "horizontal":
        ends[0::2, 0] = offsets_arr
        ends[0::2, 1] = 0.0
        ends[1::2, 0] = offsets_arr
        ends[1::2, 1] = 1.0
    else:
        ends[0::2, 0] = 0.0
        ends[0::2, 1] = offsets_arr
        ends[1::2, 0] = 1.0
        ends[1::2, 1] = offsets_arr
    return ends


def slice_segment(homography: Homography, offset: float, axis: AxisKind) -> Segment:
    """Image-space segment of a single slice spanning the full opposite die axis."""

    check_axis(axis)
    if axis == "horizontal":
        start, end = (offset, 0.0), (offset, 1.0)
    else:
        start, end = (0.0, offset), (1.0, offset)
    return Segment(homography.to_image_space(start), homography.to_image_space(end))


def build_slice_lines(axis: SliceAxis, homography: Homography, axis_kind: AxisKind) -> List[Segment]:
    """One image-space segment per offset of ``axis``, in stored order."""

    check_axis(axis_kind)
    if not len(axis):
        return []
    image_pts = homography.to_image_space_many(_die_endpoints(axis.values, axis_kind))
    return [
        Segment((float(a[0]), float(a[1])), (float(b[0]), float(b[1])))
        for a, b in zip(image_pts[0::2], image_pts[1::2])
    ]


def grid_shape(horizontal: SliceAxis, vertical: SliceAxis) -> Tuple[int, int]:
    """``(rows, columns)`` of the bit grid; columns come from the horizontal axis."""

    return len(vertical) + 2, len(horizontal) + 2


def bit_coordinates(index: int, shape: Tuple[int, int]) -> Tuple[int, int]:
    """Translate a flat bit-location index into ``(row, column)``."""

    rows, columns = shape
    if not 0 <= index < rows * columns:
        raise IndexError(f"bit index {index} outside a {rows}x{columns} grid")
    return divmod(index, columns)


def build_bit_locations(
    quad: BoundaryQuad,
    horizontal: SliceAxis,
    vertical: SliceAxis,
    homography: Homography,
) -> List[Point2D]:
    """Every grid corner in image space, in scanline order.

    Both axes are sorted ascending first, which reorders their stored values.
    The top row runs from ``quad[0]`` to ``quad[1]`` through the start of each
    horizontal slice, every vertical slice contributes one row through its
    crossings with the horizontal slices, and the bottom row runs from
    ``quad[3]`` to ``quad[2]``.
    """

    horizontal.sort_ascending()
    vertical.sort_ascending()

    h_lines = build_slice_lines(horizontal, homography, "horizontal")
    v_lines = build_slice_lines(vertical, homography, "vertical")

    points: List[Point2D] = [quad[0]]
    points.extend(line.p1 for line in h_lines)
    points.append(quad[1])

    for v_offset, v_line in zip(vertical.values, v_lines):
        points.append(v_line.p1)
        for h_offset, h_line in zip(horizontal.values, h_lines):
            crossing = segment_intersect(v_line, h_line)
            if crossing is None:
                crossing = homography.to_image_space((h_offset, v_offset))
            points.append(crossing)
        points.append(v_line.p2)

    points.append(quad[3])
    points.extend(line.p2 for line in h_lines)
    points.append(quad[2])

    logger.info(
        "Built %d bit location(s) from %d horizontal and %d vertical slice(s)",
        len(points),
        len(horizontal),
        len(vertical),
    )
    return points


apply_debug_logging(globals(), logger=logger)
