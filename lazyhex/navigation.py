"""Jump-to-offset parsing, validation, and resolution.

This module has no UI concerns. ``resolve`` never raises for bad input; it
returns ``Invalid`` with a message meant for the inline prompt error.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Union

from .buffer import ByteBuffer
from .errors import HexViewError, OutOfRange, ParseError
from .rows import scroll_target_of

JUMP_MESSAGE_SECONDS = 3.0

_HEX_RE = re.compile(r"0[xX]([0-9a-fA-F]+)")
_DEC_RE = re.compile(r"[+-]?[0-9]+")


@dataclass(frozen=True)
class Jumped:
    offset: int

    @property
    def scroll_target_px(self) -> int:
        return scroll_target_of(self.offset)

    @property
    def message(self) -> str:
        return f"Jumped to offset 0x{self.offset:X}"


@dataclass(frozen=True)
class Invalid:
    reason: str
    error: type[HexViewError] = ParseError


NavigationResult = Union[Jumped, Invalid]


def parse_offset(text: str) -> int:
    """Parse ``0x``-prefixed hex or plain decimal offset text.

    Surrounding whitespace is ignored. A leading sign is accepted for decimal
    input so negative values surface as range errors rather than parse errors.
    """
    stripped = text.strip()
    hex_match = _HEX_RE.fullmatch(stripped)
    if hex_match is not None:
        return int(hex_match.group(1), 16)
    if stripped[:2].lower() == "0x":
        raise ParseError(f"Invalid hex offset: {text.strip()!r}")
    if _DEC_RE.fullmatch(stripped) is None:
        raise ParseError(f"Invalid offset: {text.strip()!r}. Use decimal or 0x-prefixed hex")
    try:
        return int(stripped, 10)
    except ValueError as exc:
        # Digit count past the interpreter's int conversion limit.
        raise OutOfRange("Invalid offset. Value is too large") from exc


def validate_offset(offset: int, buffer: ByteBuffer | None) -> int:
    """Return ``offset`` when it addresses a byte in ``buffer``."""
    if buffer is None:
        raise OutOfRange("Invalid offset. No file loaded")
    if buffer.length == 0:
        raise OutOfRange("Invalid offset. File is empty")
    if offset < 0 or offset >= buffer.length:
        raise OutOfRange(f"Invalid offset. Must be between 0 and {buffer.length - 1}")
    return offset


def resolve(input_text: str, buffer: ByteBuffer | None) -> NavigationResult:
    try:
        offset = validate_offset(parse_offset(input_text), buffer)
    except HexViewError as exc:
        return Invalid(reason=str(exc), error=type(exc))
    return Jumped(offset=offset)


__all__ = [
    "Invalid",
    "JUMP_MESSAGE_SECONDS",
    "Jumped",
    "NavigationResult",
    "parse_offset",
    "resolve",
    "validate_offset",
]
