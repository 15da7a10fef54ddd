"""Exception hierarchy shared by loading and navigation.

Loader errors are fatal for one load request; navigation errors are local to
one offset prompt submission. Neither kind is retried automatically.
"""

from __future__ import annotations


class HexViewError(Exception):
    """Base class for user-facing lazyhex errors."""


class SizeUnavailable(HexViewError):
    """Raised when a source has no known non-negative size."""


class ReadFailure(HexViewError):
    """Raised when a whole-file or chunk read fails or comes up short."""


class ParseError(HexViewError):
    """Raised for offset text that is not a decimal or ``0x`` hex integer."""


class OutOfRange(HexViewError):
    """Raised for offsets outside ``[0, length - 1]`` or with no file loaded."""


__all__ = [
    "HexViewError",
    "OutOfRange",
    "ParseError",
    "ReadFailure",
    "SizeUnavailable",
]
