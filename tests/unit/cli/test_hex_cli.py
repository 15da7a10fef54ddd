"""CLI argument, non-interactive dump, and viewer dispatch tests."""

from __future__ import annotations

import io
import sys
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from lazyhex import cli
from lazyhex.render import format_row
from lazyhex.rows import HexRow


class CliTests(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self._tmp.cleanup)
        self.root = Path(self._tmp.name)
        patcher = mock.patch("lazyhex.config.CONFIG_PATH", self.root / "config.json")
        patcher.start()
        self.addCleanup(patcher.stop)

    def _run(self, argv: list[str]) -> str:
        stdout = io.StringIO()
        with mock.patch.object(sys, "argv", ["lazyhex", *argv]), mock.patch("sys.stdout", stdout):
            cli.main()
        return stdout.getvalue()

    def test_nopager_prints_whole_file(self) -> None:
        target = self.root / "blob.bin"
        target.write_bytes(bytes(range(20)))

        output = self._run([str(target), "--nopager", "--no-color"])

        lines = output.splitlines()
        self.assertEqual(len(lines), 2)
        self.assertEqual(lines[0], format_row(HexRow(0, 0, bytes(range(16)))))
        self.assertTrue(lines[1].startswith("00000010  10 11 12 13"))

    def test_nopager_offset_prints_one_window(self) -> None:
        target = self.root / "blob.bin"
        target.write_bytes(bytes(16 * 50))

        output = self._run([str(target), "--nopager", "--no-color", "--offset", "0x40", "--rows", "3"])

        lines = output.splitlines()
        self.assertEqual([line[:8] for line in lines], ["00000040", "00000050", "00000060"])

    def test_invalid_offset_exits_with_reason(self) -> None:
        target = self.root / "blob.bin"
        target.write_bytes(bytes(10))
        with self.assertRaises(SystemExit) as ctx:
            self._run([str(target), "--nopager", "--offset", "10"])
        self.assertIn("between 0 and 9", str(ctx.exception.code))

    def test_missing_path_exits(self) -> None:
        with self.assertRaises(SystemExit) as ctx:
            self._run([str(self.root / "missing.bin"), "--nopager"])
        self.assertIn("Path not found", str(ctx.exception.code))

    def test_directory_path_exits(self) -> None:
        with self.assertRaises(SystemExit) as ctx:
            self._run([str(self.root), "--nopager"])
        self.assertIn("Not a file", str(ctx.exception.code))

    def test_style_and_rows_are_persisted(self) -> None:
        target = self.root / "blob.bin"
        target.write_bytes(b"abc")
        self._run([str(target), "--nopager", "--style", "native", "--rows", "500"])

        from lazyhex import config

        self.assertEqual(config.load_style_name(), "native")
        self.assertEqual(config.load_window_rows(), 100)

    def test_tty_stdout_launches_viewer(self) -> None:
        target = self.root / "blob.bin"
        target.write_bytes(b"abc")
        fake_stdout = mock.Mock()
        fake_stdout.isatty.return_value = True

        with mock.patch.object(sys, "argv", ["lazyhex", str(target), "--offset", "0x1"]), mock.patch(
            "lazyhex.cli.sys.stdout", fake_stdout
        ), mock.patch("lazyhex.cli.run_viewer") as run_viewer:
            cli.main()

        run_viewer.assert_called_once()
        path, style, no_color, window_rows, offset = run_viewer.call_args.args
        self.assertEqual(path, target)
        self.assertEqual(style, "monokai")
        self.assertFalse(no_color)
        self.assertEqual(window_rows, 100)
        self.assertEqual(offset, "0x1")

    def test_log_file_receives_load_records(self) -> None:
        target = self.root / "blob.bin"
        target.write_bytes(b"abc")
        log_path = self.root / "lazyhex.log"
        with mock.patch("lazyhex.cli.logging.basicConfig") as basic_config:
            self._run([str(target), "--nopager", "--log-file", str(log_path), "--log-level", "DEBUG"])
        basic_config.assert_called_once()
        self.assertEqual(basic_config.call_args.kwargs["filename"], str(log_path))


if __name__ == "__main__":
    unittest.main()
