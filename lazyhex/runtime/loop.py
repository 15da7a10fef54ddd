"""Main interactive event loop for the terminal UI.

Each iteration polls the viewer for loader updates, renders when dirty, and
reads one key with a short timeout so progress keeps refreshing while a large
file loads in the background.
"""

from __future__ import annotations

import shutil
import time
from dataclasses import dataclass

from ..render import RenderContext, render_frame
from ..viewer import HexViewer
from .input import read_key
from .keys import handle_key
from .terminal import TerminalController

# Header line plus status line.
CHROME_ROWS = 2


@dataclass(frozen=True)
class RuntimeLoopTiming:
    """Timing constants controlling interactive loop behavior."""

    key_timeout_ms: int = 50


@dataclass(frozen=True)
class RenderOptions:
    style: str
    no_color: bool


def build_render_context(viewer: HexViewer, columns: int, lines: int, options: RenderOptions) -> RenderContext:
    state = viewer.load_state
    session = viewer.session
    buffer = state.buffer
    return RenderContext(
        rows=viewer.visible_rows(),
        width=columns,
        height=lines,
        path=session.path if session is not None else None,
        total_rows=state.total_rows,
        byte_length=buffer.length if buffer is not None else 0,
        is_loading=state.is_loading,
        progress=state.progress,
        error=state.error,
        prompt_active=viewer.offset_prompt_active,
        prompt_text=viewer.offset_input,
        prompt_error=viewer.offset_error,
        status_message=viewer.status_message,
        style=options.style,
        no_color=options.no_color,
    )


def run_main_loop(
    viewer: HexViewer,
    terminal: TerminalController,
    stdin_fd: int,
    timing: RuntimeLoopTiming,
    options: RenderOptions,
) -> None:
    """Run the interactive loop until a quit key is pressed."""
    last_size: tuple[int, int] | None = None
    with terminal.raw_mode():
        while True:
            term = shutil.get_terminal_size((80, 24))
            if (term.columns, term.lines) != last_size:
                last_size = (term.columns, term.lines)
                viewer.dirty = True
            now = time.monotonic()
            viewer.set_viewport_rows(max(1, term.lines - CHROME_ROWS))
            viewer.poll(now)
            # Mouse capture stays off while the offset prompt is open.
            terminal.set_mouse_reporting(not viewer.offset_prompt_active)
            if viewer.dirty:
                render_frame(build_render_context(viewer, term.columns, term.lines, options))
                viewer.dirty = False

            key = read_key(stdin_fd, timeout_ms=timing.key_timeout_ms)
            if handle_key(viewer, key, time.monotonic()):
                return
