"""Terminal control helpers for the TUI session.

Owns raw-mode lifecycle, alternate-screen switching, and mouse-wheel toggles.
"""

from __future__ import annotations

import contextlib
import os
import termios
import tty


class TerminalController:
    """Manage terminal mode transitions."""

    def __init__(self, stdin_fd: int, stdout_fd: int) -> None:
        """Capture tty state and bind stdin/stdout file descriptors."""
        self.stdin_fd = stdin_fd
        self.stdout_fd = stdout_fd
        self._saved_tty_state = termios.tcgetattr(stdin_fd)
        self._mouse_reporting_enabled = False

    def enable_tui_mode(self) -> None:
        """Enter raw alternate-screen mode with mouse reporting enabled."""
        tty.setraw(self.stdin_fd, termios.TCSAFLUSH)
        # Enter alternate screen, hide cursor, enable SGR mouse reporting.
        os.write(self.stdout_fd, b"\x1b[?1049h\x1b[?25l\x1b[?1000h\x1b[?1006h")
        self._mouse_reporting_enabled = True

    def disable_tui_mode(self) -> None:
        """Restore normal terminal state and disable mouse reporting."""
        os.write(self.stdout_fd, b"\x1b[?1000l\x1b[?1006l\x1b[?25h\x1b[?1049l")
        self._mouse_reporting_enabled = False
        termios.tcsetattr(self.stdin_fd, termios.TCSAFLUSH, self._saved_tty_state)

    def set_mouse_reporting(self, enabled: bool) -> None:
        """Toggle SGR mouse reporting; repeated calls with the same value write nothing."""
        desired = bool(enabled)
        if desired == self._mouse_reporting_enabled:
            return
        if desired:
            os.write(self.stdout_fd, b"\x1b[?1000h\x1b[?1006h")
        else:
            os.write(self.stdout_fd, b"\x1b[?1000l\x1b[?1006l")
        self._mouse_reporting_enabled = desired

    @contextlib.contextmanager
    def raw_mode(self):
        """Context manager that brackets code with TUI enter/exit calls."""
        try:
            self.enable_tui_mode()
            yield
        finally:
            self.disable_tui_mode()
