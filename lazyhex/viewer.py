"""Host-side controller that owns the current file session and scroll state.

``HexViewer`` is the only place where load, viewport, and navigation state
meet. The runtime loop calls ``poll`` once per iteration and the key handlers
call the scroll/prompt/jump methods; everything else is derived on demand.
"""

from __future__ import annotations

import logging
from pathlib import Path

from .buffer import ByteBuffer, LoadState
from .loader import ChunkedFileLoader
from .navigation import JUMP_MESSAGE_SECONDS, Jumped, NavigationResult, resolve
from .rows import ROW_HEIGHT_PX, HexRow, row_of_scroll
from .session import FileSession, apply_load_update
from .viewport import (
    MAX_WINDOW_ROWS,
    ViewportState,
    clamp_scroll,
    clamp_window_capacity,
    compute_viewport,
    visible_rows,
)

logger = logging.getLogger(__name__)


class HexViewer:
    """Owned state for one viewer: at most one file session at a time."""

    def __init__(
        self,
        loader: ChunkedFileLoader,
        *,
        window_rows: int = MAX_WINDOW_ROWS,
        viewport_rows: int = 24,
    ) -> None:
        self.loader = loader
        self.window_rows = clamp_window_capacity(window_rows)
        self.viewport_rows = max(1, viewport_rows)
        self.session: FileSession | None = None
        self.scroll_position_px: float = 0.0
        self.offset_prompt_active = False
        self.offset_input = ""
        self.offset_error: str | None = None
        self.status_message = ""
        self.status_message_until = 0.0
        self.pending_jump: str | None = None
        self.dirty = True

    @property
    def load_state(self) -> LoadState:
        if self.session is None:
            return LoadState.empty()
        return self.session.load_state

    @property
    def buffer(self) -> ByteBuffer | None:
        return self.load_state.buffer

    @property
    def total_rows(self) -> int:
        return self.load_state.total_rows

    @property
    def viewport(self) -> ViewportState:
        return compute_viewport(self.scroll_position_px, self.total_rows, self.window_rows)

    def visible_rows(self) -> list[HexRow]:
        return visible_rows(self.viewport.window, self.buffer)

    def select_file(self, path: Path | None) -> FileSession | None:
        """Start a new session for ``path``; ``None`` clears the selection.

        Any in-flight load keeps running but its updates no longer match the
        current request id and are dropped in ``poll``.
        """
        self.offset_error = None
        self.pending_jump = None
        self.dirty = True
        if path is None:
            if self.session is not None:
                logger.info("Selection cleared (was %s)", self.session.path)
            self.session = None
            self._apply_scroll(self.scroll_position_px)
            return None
        try:
            total_size: int | None = path.stat().st_size
        except OSError as exc:
            logger.warning("Cannot stat %s: %s", path, exc)
            total_size = None
        request_id = self.loader.load_path(path, total_size)
        self.session = FileSession(request_id=request_id, path=path)
        self._apply_scroll(self.scroll_position_px)
        return self.session

    def poll(self, now: float) -> bool:
        """Apply pending loader updates and expire the jump confirmation."""
        changed = False
        for update in self.loader.drain_updates():
            session = self.session
            if session is None or update.request_id != session.request_id:
                logger.debug("Discarding stale %s update for load %d", update.kind, update.request_id)
                continue
            prev_rows = session.total_rows
            self.session = apply_load_update(session, update)
            if self.session is session:
                continue
            changed = True
            if self.session.total_rows != prev_rows:
                self._apply_scroll(self.scroll_position_px)
            if self.pending_jump is not None and self.session.finished:
                pending, self.pending_jump = self.pending_jump, None
                if self.session.buffer is not None:
                    self.jump(pending, now)
        if self.status_message and now >= self.status_message_until:
            self.status_message = ""
            self.status_message_until = 0.0
            changed = True
        if changed:
            self.dirty = True
        return changed

    def set_viewport_rows(self, rows: int) -> None:
        rows = max(1, rows)
        if rows == self.viewport_rows:
            return
        self.viewport_rows = rows
        self._apply_scroll(self.scroll_position_px)
        self.dirty = True

    def _apply_scroll(self, scroll_position_px: float) -> bool:
        clamped = clamp_scroll(scroll_position_px, self.total_rows, self.viewport_rows)
        if clamped == self.scroll_position_px:
            return False
        self.scroll_position_px = clamped
        self.dirty = True
        return True

    @property
    def top_row(self) -> int:
        return row_of_scroll(self.scroll_position_px)

    def scroll_by_rows(self, delta: int) -> bool:
        return self._apply_scroll(self.scroll_position_px + delta * ROW_HEIGHT_PX)

    def scroll_by_pages(self, delta: int) -> bool:
        return self.scroll_by_rows(delta * self.viewport_rows)

    def scroll_to_row(self, row_index: int) -> bool:
        return self._apply_scroll(row_index * ROW_HEIGHT_PX)

    def scroll_home(self) -> bool:
        return self.scroll_to_row(0)

    def scroll_end(self) -> bool:
        return self.scroll_to_row(self.total_rows)

    def open_offset_prompt(self) -> None:
        self.offset_prompt_active = True
        self.offset_input = ""
        self.offset_error = None
        self.dirty = True

    def close_offset_prompt(self) -> None:
        self.offset_prompt_active = False
        self.offset_input = ""
        self.dirty = True

    def edit_offset_input(self, key: str) -> bool:
        """Apply one key to the prompt text; returns whether it was consumed."""
        if key == "BACKSPACE":
            self.offset_input = self.offset_input[:-1]
        elif len(key) == 1 and key.isprintable():
            self.offset_input += key
        else:
            return False
        self.dirty = True
        return True

    def jump_when_loaded(self, text: str, now: float = 0.0) -> None:
        """Defer a jump until the current session finishes loading."""
        if self.session is not None and self.session.finished:
            self.jump(text, now)
            return
        self.pending_jump = text

    def jump(self, text: str | None = None, now: float = 0.0) -> NavigationResult:
        """Resolve offset text (the prompt text by default) and scroll to it.

        The scroll target is applied as computed, without clamping, so the
        addressed row becomes the first visible row.
        """
        input_text = self.offset_input if text is None else text
        result = resolve(input_text, self.buffer)
        self.dirty = True
        if isinstance(result, Jumped):
            self.scroll_position_px = float(result.scroll_target_px)
            self.offset_input = ""
            self.offset_prompt_active = False
            self.offset_error = None
            self.status_message = result.message
            self.status_message_until = now + JUMP_MESSAGE_SECONDS
            return result
        self.offset_error = result.reason
        return result


__all__ = ["HexViewer"]
