"""Windowed-rendering model for the hex grid.

``compute_window`` is a pure function of ``(scroll, total_rows, capacity)``.
It picks the contiguous slice of rows to materialize and the filler heights
that keep the scrollable area at ``total_rows * ROW_HEIGHT_PX``.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

from .buffer import ByteBuffer
from .rows import ROW_HEIGHT_PX, HexRow, hex_row, row_of_scroll

MAX_WINDOW_ROWS = 100


@dataclass(frozen=True)
class ViewportWindow:
    visible_start: int = 0
    visible_end: int = 0
    leading_filler_px: int = 0
    trailing_filler_px: int = 0

    @property
    def row_count(self) -> int:
        return self.visible_end - self.visible_start

    def rows(self) -> range:
        return range(self.visible_start, self.visible_end)


@dataclass(frozen=True)
class ViewportState:
    """Scroll position together with the window derived from it."""

    scroll_position_px: float
    window: ViewportWindow

    @property
    def visible_start(self) -> int:
        return self.window.visible_start

    @property
    def visible_end(self) -> int:
        return self.window.visible_end

    @property
    def leading_filler_px(self) -> int:
        return self.window.leading_filler_px

    @property
    def trailing_filler_px(self) -> int:
        return self.window.trailing_filler_px


def clamp_window_capacity(window_capacity_rows: int) -> int:
    return max(0, min(int(window_capacity_rows), MAX_WINDOW_ROWS))


def _finite_scroll(scroll_position_px: float) -> float:
    if math.isnan(scroll_position_px) or scroll_position_px < 0:
        return 0.0
    return scroll_position_px


def compute_window(
    scroll_position_px: float,
    total_rows: int,
    window_capacity_rows: int = MAX_WINDOW_ROWS,
) -> ViewportWindow:
    """Return the rows to render for a scroll position.

    ``visible_start`` never exceeds ``total_rows``, so a stale scroll position
    left over from a larger file collapses to an empty window at the end
    instead of producing negative fillers.
    """
    total_rows = max(0, int(total_rows))
    if total_rows == 0:
        return ViewportWindow()
    capacity = clamp_window_capacity(window_capacity_rows)
    scroll = _finite_scroll(scroll_position_px)
    if math.isinf(scroll):
        visible_start = total_rows
    else:
        visible_start = min(max(0, row_of_scroll(scroll)), total_rows)
    visible_end = min(visible_start + capacity, total_rows)
    return ViewportWindow(
        visible_start=visible_start,
        visible_end=visible_end,
        leading_filler_px=visible_start * ROW_HEIGHT_PX,
        trailing_filler_px=max(0, (total_rows - visible_end) * ROW_HEIGHT_PX),
    )


def compute_viewport(
    scroll_position_px: float,
    total_rows: int,
    window_capacity_rows: int = MAX_WINDOW_ROWS,
) -> ViewportState:
    return ViewportState(
        scroll_position_px=_finite_scroll(scroll_position_px),
        window=compute_window(scroll_position_px, total_rows, window_capacity_rows),
    )


def visible_rows(window: ViewportWindow, buffer: ByteBuffer | None) -> list[HexRow]:
    """Materialize the rows of ``window``; rows past the buffer are skipped."""
    if buffer is None:
        return []
    out: list[HexRow] = []
    for row_index in window.rows():
        row = hex_row(row_index, buffer)
        if not row.data:
            break
        out.append(row)
    return out


def max_scroll_px(total_rows: int, viewport_rows: int) -> int:
    """Largest scroll position that still fills ``viewport_rows`` lines."""
    return max(0, total_rows - max(1, viewport_rows)) * ROW_HEIGHT_PX


def clamp_scroll(scroll_position_px: float, total_rows: int, viewport_rows: int) -> float:
    return max(0.0, min(float(scroll_position_px), float(max_scroll_px(total_rows, viewport_rows))))


__all__ = [
    "MAX_WINDOW_ROWS",
    "ViewportState",
    "ViewportWindow",
    "clamp_scroll",
    "clamp_window_capacity",
    "compute_viewport",
    "compute_window",
    "max_scroll_px",
    "visible_rows",
]
