"""Editable slice offsets along one die axis."""

from __future__ import annotations

import logging
from typing import Iterable, Iterator, List, Sequence, Set, Tuple

from .types import AxisKind, IndexOutOfRangeError, InvalidSelectionError, check_axis

logger = logging.getLogger(__name__)


class SliceAxis:
    """Insertion-ordered normalized offsets plus the set of selected indices.

    Offsets are kept in the order they were added until :meth:`sort_ascending`
    is called. ``version`` is bumped on every change to the stored values, so
    derived geometry can tell whether it was built from the current offsets.
    Selection changes leave ``version`` alone.
    """

    def __init__(self, kind: AxisKind, values: Iterable[float] = ()) -> None:
        self.kind: AxisKind = check_axis(kind)
        self._values: List[float] = [float(v) for v in values]
        self._selected: Set[int] = set()
        self.version = 0

    def __len__(self) -> int:
        return len(self._values)

    def __iter__(self) -> Iterator[float]:
        return iter(list(self._values))

    def __getitem__(self, index: int) -> float:
        return self._values[index]

    def __repr__(self) -> str:
        return f"SliceAxis({self.kind!r}, values={self._values!r}, selected={sorted(self._selected)!r})"

    @property
    def values(self) -> Tuple[float, ...]:
        return tuple(self._values)

    @property
    def selected_indices(self) -> Tuple[int, ...]:
        return tuple(sorted(self._selected))

    def is_selected(self, index: int) -> bool:
        return index in self._selected

    def _touch(self) -> None:
        self.version += 1

    def _check_index(self, index: int) -> int:
        if not 0 <= index < len(self._values):
            raise IndexOutOfRangeError(
                f"{self.kind} slice index {index} out of range for {len(self._values)} slice(s)"
            )
        return index

    # -- editing -----------------------------------------------------------------

    def add(self, offset: float) -> int:
        """Append ``offset`` and return its index."""

        self._values.append(float(offset))
        self._touch()
        return len(self._values) - 1

    def replace(self, values: Iterable[float]) -> None:
        self._values = [float(v) for v in values]
        self._selected.clear()
        self._touch()

    def clear(self) -> None:
        self.replace(())

    def sort_ascending(self) -> None:
        """Stable in-place sort; selected entries keep their selection."""

        order = sorted(range(len(self._values)), key=self._values.__getitem__)
        if order == list(range(len(self._values))):
            return
        new_position = {old: new for new, old in enumerate(order)}
        self._values = [self._values[old] for old in order]
        self._selected = {new_position[idx] for idx in self._selected}
        self._touch()

    # -- selection ---------------------------------------------------------------

    def toggle_select(self, index: int) -> bool:
        """Flip the selection of ``index``; returns the new state."""

        self._check_index(index)
        if index in self._selected:
            self._selected.remove(index)
            return False
        self._selected.add(index)
        return True

    def extend_select(self, index: int) -> bool:
        """Add ``index`` to the selection; returns ``False`` if it already was."""

        self._check_index(index)
        if index in self._selected:
            return False
        self._selected.add(index)
        return True

    def deselect_all(self) -> None:
        self._selected.clear()

    def delete_selected(self) -> int:
        """Remove every selected offset and return how many were removed."""

        for index in self._selected:
            self._check_index(index)
        removed = len(self._selected)
        if not removed:
            return 0
        self._values = [v for i, v in enumerate(self._values) if i not in self._selected]
        self._selected.clear()
        self._touch()
        logger.info("Deleted %d %s slice(s)", removed, self.kind)
        return removed

    # -- clipboard ---------------------------------------------------------------

    def copy_selected_as_offsets(self) -> List[float]:
        """Offsets of the selected slices relative to their predecessor in the axis.

        Each selected index ``i`` contributes ``value[i] - value[i - 1]``;
        the predecessor is the neighbour in the full list, not the previous
        selected entry. Index 0 has no predecessor.
        """

        offsets: List[float] = []
        for index in self.selected_indices:
            self._check_index(index)
            if index == 0:
                raise InvalidSelectionError(
                    f"{self.kind} slice 0 has no predecessor to copy an offset from"
                )
            offsets.append(self._values[index] - self._values[index - 1])
        return offsets

    def paste_offsets_at(self, origin: float, offsets: Sequence[float], limit: float = 1.0) -> List[float]:
        """Place copied offsets starting at ``origin``; returns the values added.

        The first offset is treated as zero so the first slice lands exactly on
        ``origin``. Candidates at or beyond ``limit`` are skipped, but the
        running position still advances past them so later slices keep their
        relative spacing.
        """

        placed: List[float] = []
        position = float(origin)
        for idx, offset in enumerate(offsets):
            if idx > 0:
                position += float(offset)
            if position >= limit:
                continue
            self._values.append(position)
            placed.append(position)
        if placed:
            self._touch()
        if len(placed) != len(offsets):
            logger.info(
                "Pasted %d of %d %s slice(s); %d fell outside the region",
                len(placed),
                len(offsets),
                self.kind,
                len(offsets) - len(placed),
            )
        return placed
