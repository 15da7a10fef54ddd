"""Terminal controller escape-sequence tests."""

from __future__ import annotations

import os
import unittest
from unittest import mock

from lazyhex.runtime.terminal import TerminalController


class TerminalControllerTests(unittest.TestCase):
    def setUp(self) -> None:
        self.read_fd, self.write_fd = os.pipe()
        self.addCleanup(os.close, self.read_fd)
        self.addCleanup(os.close, self.write_fd)
        with mock.patch("lazyhex.runtime.terminal.termios.tcgetattr", return_value=[]):
            self.terminal = TerminalController(0, self.write_fd)

    def _written(self) -> bytes:
        os.write(self.write_fd, b"|")
        return os.read(self.read_fd, 1024)[:-1]

    def test_mouse_reporting_toggle_writes_only_on_change(self) -> None:
        self.terminal.set_mouse_reporting(False)
        self.assertEqual(self._written(), b"")

        self.terminal.set_mouse_reporting(True)
        self.assertEqual(self._written(), b"\x1b[?1000h\x1b[?1006h")

        self.terminal.set_mouse_reporting(True)
        self.assertEqual(self._written(), b"")

        self.terminal.set_mouse_reporting(False)
        self.assertEqual(self._written(), b"\x1b[?1000l\x1b[?1006l")


if __name__ == "__main__":
    unittest.main()
