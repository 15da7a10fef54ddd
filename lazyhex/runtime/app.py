"""Runtime composition layer for lazyhex.

Builds the loader and viewer, selects the initial file, and starts the loop.
"""

from __future__ import annotations

import os
import shutil
import sys
from pathlib import Path

from ..loader import ChunkedFileLoader
from ..viewer import HexViewer
from .loop import CHROME_ROWS, RenderOptions, RuntimeLoopTiming, run_main_loop
from .terminal import TerminalController


def run_viewer(
    path: Path | None,
    style: str,
    no_color: bool,
    window_rows: int,
    initial_offset: str | None = None,
) -> None:
    """Open ``path`` in the interactive viewer and block until the user quits.

    ``initial_offset`` is applied once the first load finishes; an invalid
    offset shows up as the prompt error instead of aborting.
    """
    stdin_fd = sys.stdin.fileno()
    stdout_fd = sys.stdout.fileno()
    term = shutil.get_terminal_size((80, 24))
    viewer = HexViewer(
        ChunkedFileLoader(),
        window_rows=window_rows,
        viewport_rows=max(1, term.lines - CHROME_ROWS),
    )
    viewer.select_file(path)
    if initial_offset is not None:
        viewer.jump_when_loaded(initial_offset)
    terminal = TerminalController(stdin_fd, stdout_fd)
    run_main_loop(
        viewer,
        terminal,
        stdin_fd,
        RuntimeLoopTiming(),
        RenderOptions(style=style, no_color=no_color or not os.isatty(stdout_fd)),
    )
