"""Command-line front door for lazyhex.

Parses CLI options, merges them with persisted preferences, and either prints
a hexdump (``--nopager``) or launches the interactive viewer.
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from . import config
from .errors import HexViewError
from .loader import read_path
from .navigation import Invalid, resolve
from .rows import hex_row, total_rows_for
from .render import render_dump, resolve_style_name
from .runtime import run_viewer
from .viewport import MAX_WINDOW_ROWS, compute_window

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def _positive_int(value: str) -> int:
    """argparse type for positive integer values."""
    try:
        parsed = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid integer value: {value!r}") from exc
    if parsed <= 0:
        raise argparse.ArgumentTypeError("value must be >= 1")
    return parsed


def configure_logging(log_file: str | None, level: str) -> None:
    """Send log records to ``log_file``; without one they are dropped."""
    if log_file is None:
        return
    logging.basicConfig(filename=log_file, level=getattr(logging, level), format=LOG_FORMAT)


def dump_path(path: Path, offset_text: str | None, window_rows: int, style: str, no_color: bool) -> str:
    """Load ``path`` synchronously and render it (or one window of it) as text."""
    try:
        buffer = read_path(path)
    except HexViewError as exc:
        raise SystemExit(str(exc)) from exc
    total_rows = total_rows_for(buffer.length)
    if offset_text is None:
        row_indexes = range(total_rows)
    else:
        result = resolve(offset_text, buffer)
        if isinstance(result, Invalid):
            raise SystemExit(result.reason)
        row_indexes = compute_window(result.scroll_target_px, total_rows, window_rows).rows()
    rows = [hex_row(row_index, buffer) for row_index in row_indexes]
    return render_dump(rows, style, no_color)


def main() -> None:
    """Parse CLI arguments and view a file as an offset/hex/ASCII grid.

    Non-interactive output is used with ``--nopager`` or when stdout is not a
    terminal; it prints the whole file, or one window when ``--offset`` is set.
    """
    parser = argparse.ArgumentParser(description="Browse a binary file as an offset/hex/ASCII grid.")
    parser.add_argument("path", nargs="?", default=None, help="File to open.")
    parser.add_argument("--offset", default=None, help="Initial offset, decimal or 0x-prefixed hex.")
    parser.add_argument("--style", default=None, help="Pygments style name (persisted).")
    parser.add_argument("--no-color", action="store_true", help="Disable color output even on TTY.")
    parser.add_argument("--nopager", action="store_true", help="Print a hexdump instead of paging.")
    parser.add_argument(
        "--rows",
        type=_positive_int,
        default=None,
        help="Rows materialized per window, at most 100 (persisted).",
    )
    parser.add_argument("--log-file", default=None, help="Write log records to this file.")
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Log level used with --log-file.",
    )
    args = parser.parse_args()
    configure_logging(args.log_file, args.log_level)

    if args.style is not None:
        config.save_style_name(args.style)
    style = resolve_style_name(args.style or config.load_style_name())
    if args.rows is not None:
        config.save_window_rows(args.rows)
    window_rows = config.load_window_rows() if args.rows is None else min(args.rows, MAX_WINDOW_ROWS)

    path = Path(args.path) if args.path is not None else None
    if path is not None:
        if not path.exists():
            raise SystemExit(f"Path not found: {path}")
        if path.is_dir():
            raise SystemExit(f"Not a file: {path}")

    if args.nopager or not sys.stdout.isatty():
        if path is None:
            raise SystemExit("A file path is required for non-interactive output.")
        no_color = args.no_color or not sys.stdout.isatty()
        sys.stdout.write(dump_path(path, args.offset, window_rows, style, no_color))
        return

    run_viewer(path, style, args.no_color, window_rows, args.offset)


if __name__ == "__main__":
    main()
