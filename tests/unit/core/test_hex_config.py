from __future__ import annotations

import tempfile
import unittest
from pathlib import Path
from unittest import mock

from lazyhex import config


class ConfigBehaviorTests(unittest.TestCase):
    def test_style_round_trip_and_default(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            config_path = Path(tmp) / "nested" / "config.json"
            with mock.patch("lazyhex.config.CONFIG_PATH", config_path):
                self.assertEqual(config.load_style_name(), config.DEFAULT_STYLE)
                config.save_style_name("  native ")
                self.assertEqual(config.load_style_name(), "native")
                config.save_style_name("   ")
                self.assertEqual(config.load_style_name(), "native")

    def test_window_rows_are_clamped_and_validated(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            config_path = Path(tmp) / "config.json"
            with mock.patch("lazyhex.config.CONFIG_PATH", config_path):
                config.save_window_rows(40)
                self.assertEqual(config.load_window_rows(), 40)
                config.save_window_rows(1000)
                self.assertEqual(config.load_window_rows(), 100)
                config.save_config({"window_rows": True})
                self.assertEqual(config.load_window_rows(), 100)

    def test_malformed_config_reads_as_empty(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            config_path = Path(tmp) / "config.json"
            config_path.write_text("[not an object", encoding="utf-8")
            with mock.patch("lazyhex.config.CONFIG_PATH", config_path):
                self.assertEqual(config.load_config(), {})
                config_path.write_text("[1, 2]", encoding="utf-8")
                self.assertEqual(config.load_config(), {})


if __name__ == "__main__":
    unittest.main()
