"""Virtualized row list - decides which rows must exist at any instant.

Headless model: given the loaded row count, the scroll offset and the
viewport height, it computes the contiguous index range to materialize, each
row's vertical offset and the total track height.  The actual rendering is
delegated to whatever view consumes the returned :class:`VirtualRange`,
which keeps this class testable without Qt.

When more data exists, one extra *sentinel* row is appended after the loaded
rows; it renders the "loading more" / "end of list" indicator.  Once the
materialized range reaches the sentinel, :attr:`VirtualRowList.end_reached`
fires so the owner can request the next page.
"""

from __future__ import annotations

import asyncio
import logging
import math
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional, Sequence, Tuple

import numpy as np

from project_browser.config import ESTIMATED_ROW_HEIGHT, OVERSCAN_ROWS
from project_browser.gui.viewmodels.signal import Signal

_logger = logging.getLogger(__name__)


class RowKind(Enum):
    DATA = "data"
    SENTINEL = "sentinel"


@dataclass(frozen=True)
class VirtualRow:
    index: int
    kind: RowKind
    start: float
    size: float

    @property
    def end(self) -> float:
        return self.start + self.size

    @property
    def key(self) -> str:
        return "sentinel" if self.kind is RowKind.SENTINEL else f"row-{self.index}"


@dataclass(frozen=True)
class VirtualRange:
    first_index: int
    last_index: int  # inclusive; -1 when empty
    rows: Tuple[VirtualRow, ...]
    total_size: float

    @property
    def is_empty(self) -> bool:
        return not self.rows

    @property
    def includes_sentinel(self) -> bool:
        return bool(self.rows) and self.rows[-1].kind is RowKind.SENTINEL

    def __len__(self) -> int:
        return len(self.rows)


EMPTY_RANGE = VirtualRange(first_index=0, last_index=-1, rows=(), total_size=0)


class VirtualRowList:
    """Single-column virtual list with estimated and measured row heights.

    Without measurements every row has the estimated height and a range
    lookup is constant-time arithmetic.  Measured heights switch to a prefix
    sum array which is rebuilt only when the row count changes; a new
    measurement shifts the following offsets in place, so a scroll event
    costs one binary search.
    """

    def __init__(
        self,
        estimated_row_height: float = ESTIMATED_ROW_HEIGHT,
        overscan: int = OVERSCAN_ROWS,
    ) -> None:
        if estimated_row_height <= 0:
            raise ValueError("estimated_row_height must be positive")
        if overscan < 0:
            raise ValueError("overscan must not be negative")
        self._row_height = estimated_row_height
        self._overscan = overscan
        self._item_count = 0
        self._has_more = False
        self._measured: Dict[int, float] = {}
        self._offsets: Optional[np.ndarray] = None
        self._viewport: Tuple[float, float] = (0, 0)
        self._last_range: VirtualRange = EMPTY_RANGE
        self._signalled_count: Optional[int] = None
        self._bound_items: Sequence = ()

        self.range_changed = Signal()  # emits (VirtualRange)
        self.end_reached = Signal()  # emits (loaded item count)

    # ------------------------------------------------------------------
    # Row bookkeeping
    # ------------------------------------------------------------------

    @property
    def item_count(self) -> int:
        return self._item_count

    @property
    def has_more(self) -> bool:
        return self._has_more

    @property
    def row_count(self) -> int:
        """Loaded rows plus the sentinel row when more data exists."""
        return self._item_count + 1 if self._has_more else self._item_count

    @property
    def overscan(self) -> int:
        return self._overscan

    @property
    def estimated_row_height(self) -> float:
        return self._row_height

    @property
    def last_range(self) -> VirtualRange:
        return self._last_range

    def set_row_count(self, item_count: int, has_more: bool) -> None:
        item_count = max(0, item_count)
        if item_count == self._item_count and has_more == self._has_more:
            return
        if item_count != self._item_count:
            self._signalled_count = None
        if item_count < self._item_count:
            # Rows past the new end belong to a different result set
            self._measured = {i: h for i, h in self._measured.items() if i < item_count}
        self._item_count = item_count
        self._has_more = bool(has_more)
        self._offsets = None

    def row_kind(self, index: int) -> RowKind:
        if not 0 <= index < self.row_count:
            raise IndexError(f"row {index} outside [0, {self.row_count})")
        return RowKind.SENTINEL if index >= self._item_count else RowKind.DATA

    def set_measured_height(self, index: int, height: float) -> None:
        """Refine the estimate for *index* with a measured height."""
        if height <= 0:
            raise ValueError("measured height must be positive")
        previous = self._measured.get(index, self._row_height)
        if index in self._measured and previous == height:
            return
        self._measured[index] = height
        if self._offsets is not None and index < self.row_count:
            # Shift every following offset instead of rebuilding
            self._offsets[index + 1:] += height - previous

    def clear_measurements(self) -> None:
        if self._measured:
            self._measured.clear()
            self._offsets = None

    def row_size(self, index: int) -> float:
        return self._measured.get(index, self._row_height)

    def row_start(self, index: int) -> float:
        if not self._measured:
            return index * self._row_height
        return float(self._prefix_sums()[index])

    def total_size(self) -> float:
        count = self.row_count
        if not self._measured:
            return count * self._row_height
        return float(self._prefix_sums()[count])

    # ------------------------------------------------------------------
    # Range computation
    # ------------------------------------------------------------------

    def calculate_range(self, scroll_offset: float, viewport_height: float) -> VirtualRange:
        """Return the inclusive range of rows to materialize.

        The naive visible range ``[floor(S / R), ceil((S + H) / R)]`` is
        widened by ``overscan`` rows on both sides and clamped to
        ``[0, row_count - 1]``.
        """
        count = self.row_count
        if count == 0:
            return VirtualRange(first_index=0, last_index=-1, rows=(), total_size=0)

        top = max(0.0, scroll_offset)
        bottom = top + max(0.0, viewport_height)
        if self._measured:
            offsets = self._prefix_sums()
            first_visible = int(np.searchsorted(offsets, top, side="right")) - 1
            last_visible = int(np.searchsorted(offsets, bottom, side="left"))
        else:
            first_visible = math.floor(top / self._row_height)
            last_visible = math.ceil(bottom / self._row_height)

        last = min(count - 1, last_visible + self._overscan)
        first = min(max(0, first_visible - self._overscan), last)
        rows = tuple(
            VirtualRow(
                index=index,
                kind=RowKind.SENTINEL if index >= self._item_count else RowKind.DATA,
                start=self.row_start(index),
                size=self.row_size(index),
            )
            for index in range(first, last + 1)
        )
        return VirtualRange(
            first_index=first,
            last_index=last,
            rows=rows,
            total_size=self.total_size(),
        )

    def reached_end(self, virtual_range: VirtualRange, is_loading: bool) -> bool:
        """True when *virtual_range* touches the sentinel and a load may start."""
        return (
            self._has_more
            and not is_loading
            and not virtual_range.is_empty
            and virtual_range.last_index >= self._item_count
        )

    def update_viewport(
        self,
        scroll_offset: float,
        viewport_height: float,
        is_loading: bool = False,
    ) -> VirtualRange:
        """Recompute the range for a scroll/resize event and emit signals.

        ``end_reached`` fires at most once per loaded item count; a new
        count (or :meth:`set_row_count` with fewer rows) re-arms it.
        """
        self._viewport = (scroll_offset, viewport_height)
        current = self.calculate_range(scroll_offset, viewport_height)
        if current != self._last_range:
            self._last_range = current
            self.range_changed.emit(current)
        if self.reached_end(current, is_loading) and self._signalled_count != self._item_count:
            self._signalled_count = self._item_count
            _logger.debug("End of loaded rows reached at %d items", self._item_count)
            self.end_reached.emit(self._item_count)
        return current

    def refresh(self, is_loading: bool = False) -> VirtualRange:
        """Re-run :meth:`update_viewport` with the last known viewport."""
        scroll_offset, viewport_height = self._viewport
        return self.update_viewport(scroll_offset, viewport_height, is_loading)

    # ------------------------------------------------------------------
    # View-model wiring
    # ------------------------------------------------------------------

    def bind_viewmodel(self, viewmodel) -> None:
        """Track *viewmodel*'s rows and request pages when the end is reached.

        ``load_more`` is deferred to the next loop iteration when a loop is
        running so it never re-enters the view-model's own notification.
        """

        def _on_state(snapshot) -> None:
            if not _extends(self._bound_items, snapshot.items):
                # Replaced rows keep their count but not their heights
                self.clear_measurements()
            if snapshot.is_initial_loading:
                self._signalled_count = None
            self._bound_items = snapshot.items
            self.set_row_count(len(snapshot.items), snapshot.has_more)
            self.refresh(snapshot.is_loading)

        def _on_end(_count: int) -> None:
            try:
                loop = asyncio.get_running_loop()
            except RuntimeError:
                viewmodel.load_more()
            else:
                loop.call_soon(viewmodel.load_more)

        viewmodel.state_changed.connect(_on_state)
        self.end_reached.connect(_on_end)

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _prefix_sums(self) -> np.ndarray:
        if self._offsets is None:
            count = self.row_count
            sizes = np.full(count, self._row_height, dtype=np.float64)
            if self._measured:
                indices = np.fromiter(self._measured.keys(), dtype=np.int64, count=len(self._measured))
                heights = np.fromiter(self._measured.values(), dtype=np.float64, count=len(self._measured))
                keep = indices < count
                sizes[indices[keep]] = heights[keep]
            offsets = np.zeros(count + 1, dtype=np.float64)
            np.cumsum(sizes, out=offsets[1:])
            self._offsets = offsets
        return self._offsets


def _extends(old: Sequence, new: Sequence) -> bool:
    """True when *new* starts with the very same objects as *old*."""
    return len(new) >= len(old) and all(a is b for a, b in zip(old, new))
