"""Overlay rendering of a session's region, slices and bit locations."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional, Union

import numpy as np

from .session import DieSession
from .types import Color, Tool

logger = logging.getLogger(__name__)


def _pyplot():
    import matplotlib

    matplotlib.use("Agg")
    import matplotlib.pyplot as plt

    return plt


def _rgb(color: Color) -> tuple:
    return tuple(channel / 255.0 for channel in color)


def load_image(path: Union[str, Path]) -> np.ndarray:
    import matplotlib.image as mpimg

    return mpimg.imread(str(path))


def render_overlay(
    session: DieSession,
    path: Union[str, Path],
    *,
    tool: Tool = "navigation",
    image: Optional[np.ndarray] = None,
    marker_size: float = 10.0,
) -> Path:
    """Draw the session over ``image`` (image-space axes, y down) and save a PNG.

    In ``bit-display`` mode the bit locations replace the bounds corners and
    the slice lines are hidden; otherwise the bounds polygon, its corners and
    the slices visible for ``tool`` are drawn.
    """

    path = Path(path)
    config = session.config
    plt = _pyplot()
    fig, ax = plt.subplots(figsize=(6, 6))
    try:
        if image is not None:
            ax.imshow(image)

        polygon = session.boundary_polygon()
        if tool != "bit-display" and len(polygon) >= 2:
            xs = [p[0] for p in polygon] + [polygon[0][0]]
            ys = [p[1] for p in polygon] + [polygon[0][1]]
            ax.plot(xs, ys, color=_rgb(config.bounds_color), linewidth=1.0)

        for line in session.slice_lines(tool):
            ax.plot(
                [line.segment.p1[0], line.segment.p2[0]],
                [line.segment.p1[1], line.segment.p2[1]],
                color=_rgb(line.color),
                linewidth=1.0,
            )

        markers = session.bit_locations() if tool == "bit-display" else polygon
        if markers:
            ax.scatter(
                [p[0] for p in markers],
                [p[1] for p in markers],
                s=marker_size,
                facecolors="none",
                edgecolors=[_rgb(config.marker_color)],
            )

        if image is None:
            ax.invert_yaxis()
        ax.set_aspect("equal")
        ax.set_axis_off()
        path.parent.mkdir(parents=True, exist_ok=True)
        fig.savefig(path, dpi=100, bbox_inches="tight")
    finally:
        plt.close(fig)

    logger.info("Wrote %s overlay to %s", tool, path)
    return path
