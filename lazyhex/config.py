"""Persistent JSON config helpers.

Stores the Pygments style name and the window row capacity.
All access is defensive: malformed or missing config falls back safely.
"""

from __future__ import annotations

import json
from pathlib import Path

from platformdirs import user_config_dir

from .viewport import MAX_WINDOW_ROWS

APP_NAME = "lazyhex"
CONFIG_FILENAME = "config.json"
CONFIG_PATH = Path(user_config_dir(APP_NAME, appauthor=False)) / CONFIG_FILENAME
DEFAULT_STYLE = "monokai"


def load_config() -> dict[str, object]:
    """Load the persisted JSON config object.

    Returns an empty dict when the file is missing, unreadable, malformed, or
    does not decode to a top-level JSON object.
    """
    try:
        data = json.loads(CONFIG_PATH.read_text(encoding="utf-8"))
    except (OSError, ValueError):
        return {}
    return data if isinstance(data, dict) else {}


def save_config(data: dict[str, object]) -> None:
    """Persist config data as pretty-printed JSON; write errors are ignored."""
    try:
        CONFIG_PATH.parent.mkdir(parents=True, exist_ok=True)
        CONFIG_PATH.write_text(json.dumps(data, indent=2) + "\n", encoding="utf-8")
    except OSError:
        pass


def load_style_name() -> str:
    """Load persisted Pygments style name, defaulting to ``monokai``."""
    value = load_config().get("style")
    if not isinstance(value, str):
        return DEFAULT_STYLE
    stripped = value.strip()
    return stripped if stripped else DEFAULT_STYLE


def save_style_name(style: str) -> None:
    stripped = str(style).strip()
    if not stripped:
        return
    config = load_config()
    config["style"] = stripped
    save_config(config)


def load_window_rows() -> int:
    """Load window capacity, clamped to ``[1, MAX_WINDOW_ROWS]``.

    Booleans and non-integers are treated as unset.
    """
    value = load_config().get("window_rows")
    if isinstance(value, bool) or not isinstance(value, int):
        return MAX_WINDOW_ROWS
    return max(1, min(value, MAX_WINDOW_ROWS))


def save_window_rows(rows: int) -> None:
    config = load_config()
    config["window_rows"] = max(1, min(int(rows), MAX_WINDOW_ROWS))
    save_config(config)
