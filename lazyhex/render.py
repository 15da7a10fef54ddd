"""Rendering of the hex grid as ANSI terminal frames.

Rows use the ``hexdump -C`` layout so Pygments' hexdump lexer can colorize
them. Rendering reads viewer state and never mutates it.
"""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path

from pygments import highlight
from pygments.formatters import Terminal256Formatter
from pygments.lexers.hexdump import HexdumpLexer
from pygments.styles import get_all_styles

from .rows import BYTES_PER_ROW, HexRow, ascii_char, format_hex_byte, format_offset

FALLBACK_STYLE = "default"
_HALF_ROW = BYTES_PER_ROW // 2


@dataclass
class RenderContext:
    rows: list[HexRow]
    width: int
    height: int
    path: Path | None
    total_rows: int
    byte_length: int
    is_loading: bool = False
    progress: float = 0.0
    error: str | None = None
    prompt_active: bool = False
    prompt_text: str = ""
    prompt_error: str | None = None
    status_message: str = ""
    style: str = FALLBACK_STYLE
    no_color: bool = False


def format_row(row: HexRow) -> str:
    """Format one row as ``OOOOOOOO  hh .. hh  hh .. hh  |ascii|``.

    A short final row is padded so the ASCII column stays aligned.
    """
    cells = [format_hex_byte(value) for value in row.data]
    cells.extend("  " for _ in range(BYTES_PER_ROW - len(cells)))
    left = " ".join(cells[:_HALF_ROW])
    right = " ".join(cells[_HALF_ROW:])
    text = "".join(ascii_char(value) for value in row.data)
    return f"{format_offset(row.start_offset)}  {left}  {right}  |{text}|"


def header_line() -> str:
    labels = [format_hex_byte(col) for col in range(BYTES_PER_ROW)]
    left = " ".join(labels[:_HALF_ROW])
    right = " ".join(labels[_HALF_ROW:])
    return f"{'Offset':<8}  {left}  {right}  ASCII"


@lru_cache(maxsize=None)
def available_style_names() -> frozenset[str]:
    return frozenset(get_all_styles())


def resolve_style_name(style: str) -> str:
    """Return ``style`` if Pygments knows it, else the fallback style."""
    return style if style in available_style_names() else FALLBACK_STYLE


@lru_cache(maxsize=16)
def _formatter(style: str) -> Terminal256Formatter:
    return Terminal256Formatter(style=resolve_style_name(style))


def colorize_rows(lines: list[str], style: str) -> list[str]:
    """Highlight formatted rows with the Pygments hexdump lexer."""
    if not lines:
        return []
    rendered = highlight("\n".join(lines) + "\n", HexdumpLexer(), _formatter(style))
    out = rendered.rstrip("\n").split("\n")
    if len(out) != len(lines):
        return list(lines)
    return out


def render_lines(rows: list[HexRow], style: str, no_color: bool) -> list[str]:
    lines = [format_row(row) for row in rows]
    if no_color:
        return lines
    return colorize_rows(lines, style)


def build_status_line(left_text: str, width: int, right_text: str = "") -> str:
    usable = max(1, width - 1)
    if usable <= len(right_text):
        return right_text[-usable:]
    left_limit = max(0, usable - len(right_text) - 1)
    left = left_text[:left_limit]
    gap = " " * (usable - len(left) - len(right_text))
    return f"{left}{gap}{right_text}"


def status_texts(context: RenderContext) -> tuple[str, str]:
    """Return left/right status segments for the current state."""
    name = str(context.path) if context.path is not None else "No file selected"
    if context.error:
        left = f"{name}: {context.error}"
    elif context.is_loading:
        left = f"{name}: Loading file... {round(context.progress * 100)}%"
    elif context.rows:
        first = context.rows[0]
        last = context.rows[-1]
        left = (
            f"{name} ({first.row_index + 1}-{last.row_index + 1}/{context.total_rows} rows,"
            f" {context.byte_length} bytes) @ 0x{format_offset(first.start_offset)}"
        )
    else:
        left = f"{name} ({context.byte_length} bytes)"

    if context.prompt_active:
        right = f"Jump to offset: {context.prompt_text}_"
        if context.prompt_error:
            right = f"{context.prompt_error} │ {right}"
    elif context.prompt_error:
        right = context.prompt_error
    elif context.status_message:
        right = context.status_message
    else:
        right = "│ : jump  q quit"
    return left, right


def build_frame(context: RenderContext) -> str:
    """Compose a full-screen frame: header, visible rows, filler, status."""
    width = max(1, context.width)
    body_rows = max(0, context.height - 2)
    out: list[str] = ["\033[H\033[J"]
    out.append("\033[2m")
    out.append(header_line()[:width])
    out.append("\033[0m\r\n")

    shown = context.rows[:body_rows]
    if shown and len(format_row(shown[0])) > width:
        # Rows would wrap; fall back to clipped plain text.
        lines = [format_row(row)[:width] for row in shown]
    else:
        lines = render_lines(shown, context.style, context.no_color)
    for line in lines:
        out.append(line)
        if "\033" in line:
            out.append("\033[0m")
        out.append("\r\n")
    for _ in range(body_rows - len(shown)):
        out.append("\r\n")

    left, right = status_texts(context)
    out.append("\033[7m")
    out.append(build_status_line(left, width, right))
    out.append("\033[0m")
    return "".join(out)


def render_frame(context: RenderContext) -> None:
    os.write(sys.stdout.fileno(), build_frame(context).encode("utf-8", errors="replace"))


def render_dump(rows: list[HexRow], style: str, no_color: bool) -> str:
    """Non-interactive hexdump text for ``--nopager`` output."""
    out: list[str] = []
    for line in render_lines(rows, style, no_color):
        out.append(line)
        if "\033" in line:
            out.append("\033[0m")
        out.append("\n")
    return "".join(out)


__all__ = [
    "FALLBACK_STYLE",
    "RenderContext",
    "available_style_names",
    "build_frame",
    "build_status_line",
    "colorize_rows",
    "format_row",
    "header_line",
    "render_dump",
    "render_frame",
    "render_lines",
    "resolve_style_name",
    "status_texts",
]
