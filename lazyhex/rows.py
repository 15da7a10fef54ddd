"""Row/offset/scroll coordinate math for the hex grid.

All functions are pure and use exact integer floor/ceil semantics.
Pixel units are kept even in the terminal host: one terminal line stands for
``ROW_HEIGHT_PX`` pixels, so scroll math is shared with any other host.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .buffer import ByteBuffer

BYTES_PER_ROW = 16
ROW_HEIGHT_PX = 20
OFFSET_DIGITS = 8


@dataclass(frozen=True)
class HexRow:
    """One materialized row: its index, first byte offset, and bytes."""

    row_index: int
    start_offset: int
    data: bytes


def total_rows_for(length: int) -> int:
    """Return ``ceil(length / BYTES_PER_ROW)`` for a non-negative length."""
    if length <= 0:
        return 0
    return -(-length // BYTES_PER_ROW)


def row_of(byte_offset: int) -> int:
    return byte_offset // BYTES_PER_ROW


def scroll_target_of(byte_offset: int) -> int:
    """Scroll position (px) that puts the row holding ``byte_offset`` on top."""
    return row_of(byte_offset) * ROW_HEIGHT_PX


def row_of_scroll(scroll_px: float) -> int:
    return int(scroll_px // ROW_HEIGHT_PX)


def row_start_offset(row_index: int) -> int:
    return row_index * BYTES_PER_ROW


def row_bytes(row_index: int, buffer: ByteBuffer) -> bytes:
    """Return the bytes of one row; only the final row may be short."""
    if row_index < 0:
        return b""
    start = row_start_offset(row_index)
    return buffer.slice(start, start + BYTES_PER_ROW)


def hex_row(row_index: int, buffer: ByteBuffer) -> HexRow:
    return HexRow(
        row_index=row_index,
        start_offset=row_start_offset(row_index),
        data=row_bytes(row_index, buffer),
    )


def format_offset(offset: int) -> str:
    """Format an offset as 8 upper-case, zero-padded hex digits."""
    return f"{offset:0{OFFSET_DIGITS}X}"


def format_hex_byte(value: int) -> str:
    return f"{value:02X}"


def ascii_char(value: int) -> str:
    """Printable ASCII passes through; everything else renders as ``.``."""
    if 0x20 <= value <= 0x7E:
        return chr(value)
    return "."


__all__ = [
    "BYTES_PER_ROW",
    "HexRow",
    "OFFSET_DIGITS",
    "ROW_HEIGHT_PX",
    "ascii_char",
    "format_hex_byte",
    "format_offset",
    "hex_row",
    "row_bytes",
    "row_of",
    "row_of_scroll",
    "row_start_offset",
    "scroll_target_of",
    "total_rows_for",
]
