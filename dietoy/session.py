"""Single owner of the die region, its slice axes and the derived bit grid."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from .config import EngineConfig, get_engine_config
from .description import DieDescription
from .geometry import manhattan_distance, point_in_polygon, segment_point_distance
from .grid import bit_coordinates, build_bit_locations, build_slice_lines
from .homography import Homography, build_homography
from .ordering import order_quad_points
from .proximity import ProximityIndex
from .slices import SliceAxis
from .types import (
    TOOLS,
    AxisKind,
    BoundaryQuad,
    Color,
    DegenerateQuadError,
    EmptyIndexError,
    Point2D,
    Segment,
    StaleDerivedStateError,
    Tool,
    as_point,
    check_axis,
)

logger = logging.getLogger(__name__)

_TOOL_AXES = {
    "navigation": ("horizontal", "vertical"),
    "bounds": ("horizontal", "vertical"),
    "slice-horizontal": ("horizontal",),
    "slice-vertical": ("vertical",),
    "bit-display": (),
}


@dataclass(frozen=True)
class SliceLine:
    """Render snapshot of one slice."""

    segment: Segment
    color: Color
    axis: AxisKind
    index: int
    selected: bool


class DieSession:
    """Owns the boundary quad, homography, both slice axes and the bit grid.

    Mutating methods never recompute derived state. Call :meth:`rebuild_region`
    after the bounds change and :meth:`rebuild_grid` after the bounds or the
    slices change (or :meth:`refresh` for both); reading derived state that is
    older than its inputs raises :class:`StaleDerivedStateError`.
    """

    def __init__(self, config: Optional[EngineConfig] = None) -> None:
        self.config = config if config is not None else get_engine_config()
        self.horizontal = SliceAxis("horizontal")
        self.vertical = SliceAxis("vertical")
        self.clipboard: List[float] = []

        self._bounds: List[Point2D] = []
        self._active_bounds_point: Optional[int] = None
        self._bounds_version = 0

        self._homography: Optional[Homography] = None
        self._homography_stamp: Optional[int] = None
        self._region_generation = 0

        self._bit_locations: Tuple[Point2D, ...] = ()
        self._grid_shape: Tuple[int, int] = (0, 0)
        self._grid_stamp: Optional[Tuple[int, int, int]] = None
        self._index = ProximityIndex()

    def axis(self, kind: str) -> SliceAxis:
        return self.horizontal if check_axis(kind) == "horizontal" else self.vertical

    # -- boundary editing --------------------------------------------------------

    @property
    def bounds_points(self) -> Tuple[Point2D, ...]:
        return tuple(self._bounds)

    @property
    def active_bounds_point(self) -> Optional[int]:
        return self._active_bounds_point

    def _bounds_changed(self) -> None:
        self._bounds_version += 1

    def add_or_pick_bounds_point(self, position: Sequence[float]) -> Optional[int]:
        """Pick the bounds point under ``position`` or append a new one.

        Returns the index of the picked or appended point, or ``None`` when
        the region already has 4 points and none was close enough.
        """

        pos = as_point(position)
        for idx, point in enumerate(self._bounds):
            if manhattan_distance(point, pos) < self.config.bounds_pick_radius:
                self._active_bounds_point = idx
                return idx
        if len(self._bounds) >= 4:
            return None
        self._bounds.append(pos)
        self._bounds_changed()
        return len(self._bounds) - 1

    def drag_bounds_point(self, position: Sequence[float]) -> bool:
        if self._active_bounds_point is None:
            return False
        self._bounds[self._active_bounds_point] = as_point(position)
        self._bounds_changed()
        return True

    def release_bounds_point(self) -> None:
        self._active_bounds_point = None

    def set_bounds(self, points: Sequence[Sequence[float]]) -> None:
        pts = [as_point(p) for p in points]
        if len(pts) > 4:
            raise DegenerateQuadError(f"a die region has at most 4 boundary points, got {len(pts)}")
        self._bounds = pts
        self._active_bounds_point = None
        self._bounds_changed()

    def clear_bounds(self) -> None:
        """Forget the region entirely, including both slice axes."""

        self._bounds = []
        self._active_bounds_point = None
        self._bounds_changed()
        self._drop_region()
        self.horizontal.clear()
        self.vertical.clear()

    # -- derived state -----------------------------------------------------------

    def _drop_region(self) -> None:
        self._homography = None
        self._homography_stamp = None
        self._drop_grid()

    def _drop_grid(self) -> None:
        self._bit_locations = ()
        self._grid_shape = (0, 0)
        self._grid_stamp = None
        self._index.clear()

    def _current_grid_stamp(self) -> Tuple[int, int, int]:
        return (self._region_generation, self.horizontal.version, self.vertical.version)

    @property
    def has_region(self) -> bool:
        return self._homography is not None and self._homography_stamp == self._bounds_version

    def rebuild_region(self) -> Homography:
        """Canonicalize the 4 bounds points and rebuild the homography.

        On failure the session has no valid region until the bounds are fixed
        and this is called again. Both slice axes are kept across a failed
        rebuild; only ``clear_bounds`` empties them.
        """

        self._drop_region()
        if len(self._bounds) != 4:
            raise DegenerateQuadError(f"no valid region: {len(self._bounds)} of 4 boundary points placed")
        try:
            ordered = order_quad_points(self._bounds)
            homography = build_homography(
                ordered,
                epsilon=self.config.collinear_epsilon,
                w_epsilon=self.config.w_epsilon,
            )
        except DegenerateQuadError as exc:
            logger.warning("No valid region: %s", exc)
            raise

        if self._active_bounds_point is not None:
            self._active_bounds_point = ordered.index(self._bounds[self._active_bounds_point])
        self._bounds = list(ordered)
        self._homography = homography
        self._homography_stamp = self._bounds_version
        self._region_generation += 1
        return homography

    @property
    def homography(self) -> Homography:
        return self._require_homography()

    def _require_homography(self) -> Homography:
        if self._homography is None:
            raise DegenerateQuadError("no valid region: the homography has not been built")
        if self._homography_stamp != self._bounds_version:
            raise StaleDerivedStateError("boundary points changed since the homography was built")
        return self._homography

    def rebuild_grid(self) -> Tuple[Point2D, ...]:
        """Sort both axes, rebuild the bit locations and their proximity index."""

        homography = self._require_homography()
        quad: BoundaryQuad = tuple(self._bounds)  # type: ignore[assignment]
        points = build_bit_locations(quad, self.horizontal, self.vertical, homography)
        self._bit_locations = tuple(points)
        self._grid_shape = (len(self.vertical) + 2, len(self.horizontal) + 2)
        self._index.build(points)
        self._grid_stamp = self._current_grid_stamp()
        return self._bit_locations

    def refresh(self) -> None:
        """Rebuild region and grid, or drop both while fewer than 4 points exist."""

        if len(self._bounds) < 4:
            self._drop_region()
            return
        self.rebuild_region()
        self.rebuild_grid()

    def _require_grid(self, missing: type) -> None:
        self._require_homography()
        if self._grid_stamp is None:
            raise missing("bit locations have not been built for this region")
        if self._grid_stamp != self._current_grid_stamp():
            raise StaleDerivedStateError("region or slices changed since the bit locations were built")

    # -- slice editing -----------------------------------------------------------

    def die_offset(self, position: Sequence[float], axis: AxisKind) -> float:
        """Die coordinate of an image-space position along ``axis``."""

        x, y = self._require_homography().to_die_space(position)
        return x if check_axis(axis) == "horizontal" else y

    def region_contains(self, position: Sequence[float]) -> bool:
        self._require_homography()
        return point_in_polygon(self._bounds, as_point(position))

    def add_slice(self, position: Sequence[float], axis: AxisKind) -> Optional[float]:
        """Add a slice through ``position``; clicks outside the region are ignored."""

        if not self.region_contains(position):
            logger.debug("Ignoring %s slice outside the region at %s", axis, position)
            return None
        offset = self.die_offset(position, axis)
        self.axis(axis).add(offset)
        return offset

    def slice_segments(self, axis: AxisKind) -> List[Segment]:
        return build_slice_lines(self.axis(axis), self._require_homography(), axis)

    def hit_slice(self, position: Sequence[float], axis: AxisKind) -> Optional[int]:
        pos = as_point(position)
        for idx, segment in enumerate(self.slice_segments(axis)):
            if segment_point_distance(segment, pos) < self.config.slice_pick_distance:
                return idx
        return None

    def select_slice(self, position: Sequence[float], axis: AxisKind) -> Optional[int]:
        """Toggle the selection of the slice under ``position``."""

        if not self.region_contains(position):
            return None
        idx = self.hit_slice(position, axis)
        if idx is not None:
            self.axis(axis).toggle_select(idx)
        return idx

    def select_more_slices(self, position: Sequence[float], axis: AxisKind) -> Optional[int]:
        """Add the slice under ``position`` to the selection."""

        if not self.region_contains(position):
            return None
        idx = self.hit_slice(position, axis)
        if idx is not None:
            self.axis(axis).extend_select(idx)
        return idx

    def deselect_slices(self, axis: Optional[AxisKind] = None) -> None:
        for slice_axis in (self.horizontal, self.vertical) if axis is None else (self.axis(axis),):
            slice_axis.deselect_all()

    def delete_slices(self, axis: AxisKind) -> int:
        return self.axis(axis).delete_selected()

    def copy_slices(self, axis: AxisKind) -> List[float]:
        self.clipboard = self.axis(axis).copy_selected_as_offsets()
        return list(self.clipboard)

    def paste_slices(self, position: Sequence[float], axis: AxisKind) -> List[float]:
        """Paste the clipboard so its first slice lands under ``position``."""

        origin = self.die_offset(position, axis)
        return self.axis(axis).paste_offsets_at(origin, self.clipboard, limit=self.config.paste_limit)

    # -- snapshots ---------------------------------------------------------------

    def boundary_polygon(self) -> Tuple[Point2D, ...]:
        return tuple(self._bounds)

    def slice_lines(self, tool: Tool = "navigation") -> List[SliceLine]:
        """Slices visible for ``tool``, colored by selection state."""

        if tool not in TOOLS:
            raise ValueError(f"unknown tool {tool!r}; expected one of {TOOLS}")
        if self._homography is None:
            return []
        lines: List[SliceLine] = []
        for kind in _TOOL_AXES[tool]:
            slice_axis = self.axis(kind)
            for idx, segment in enumerate(self.slice_segments(kind)):
                selected = slice_axis.is_selected(idx)
                color = self.config.selected_color if selected else self.config.unselected_color
                lines.append(SliceLine(segment, color, kind, idx, selected))
        return lines

    def bit_locations(self) -> Tuple[Point2D, ...]:
        self._require_grid(StaleDerivedStateError)
        return self._bit_locations

    def grid_shape(self) -> Tuple[int, int]:
        self._require_grid(StaleDerivedStateError)
        return self._grid_shape

    def nearest_bit(self, position: Sequence[float]) -> Tuple[int, float]:
        """``(index, distance)`` of the bit location closest to ``position``."""

        self._require_grid(EmptyIndexError)
        return self._index.nearest(position)

    def bit_cell(self, index: int) -> Tuple[int, int]:
        return bit_coordinates(index, self.grid_shape())

    # -- description documents ---------------------------------------------------

    def to_description(self) -> DieDescription:
        return DieDescription(
            rom_bounds=list(self._bounds),
            horizontal_slices=list(self.horizontal.values),
            vertical_slices=list(self.vertical.values),
        )

    def load_description(self, description: DieDescription) -> None:
        """Replace the session state with ``description``.

        Bounds and both slice axes are stored before any geometry is derived.
        Bounds that do not form a valid region load like partial bounds: the
        slices are kept and the session has no region.
        """

        self.set_bounds(description.rom_bounds)
        self.clipboard = []
        self.horizontal.replace(description.horizontal_slices)
        self.vertical.replace(description.vertical_slices)
        self._drop_region()
        if len(self._bounds) != 4:
            return
        try:
            self.rebuild_region()
        except DegenerateQuadError:
            return
        self.rebuild_grid()

    @classmethod
    def from_description(cls, description: DieDescription, config: Optional[EngineConfig] = None) -> "DieSession":
        session = cls(config)
        session.load_description(description)
        return session
