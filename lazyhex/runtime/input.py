"""Low-level terminal input decoding.

Reads raw bytes from stdin and translates them into normalized key tokens.
Handles ESC-sequence timing, navigation keys, and SGR mouse-wheel events.
"""

from __future__ import annotations

import os
import select

ESC_SEQUENCE_TIMEOUT_MS = 25
_PENDING_BYTES: list[bytes] = []

_TILDE_KEYS = {
    b"1": "HOME",
    b"4": "END",
    b"5": "PAGE_UP",
    b"6": "PAGE_DOWN",
    b"7": "HOME",
    b"8": "END",
}
_CSI_FINAL_KEYS = {
    b"A": "UP",
    b"B": "DOWN",
    b"H": "HOME",
    b"F": "END",
}
# Horizontal arrows decode to the empty (no-op) token.
_IGNORED_FINALS = frozenset({b"C", b"D"})


def _read_ready_byte(fd: int, timeout_ms: int) -> bytes | None:
    ready, _, _ = select.select([fd], [], [], max(0.0, timeout_ms / 1000.0))
    if not ready:
        return None
    ch = os.read(fd, 1)
    if not ch:
        return None
    return ch


def _decode_sgr_mouse(fd: int) -> str:
    # SGR mouse: ESC [ < btn ; col ; row (M/m)
    payload = []
    while True:
        part = _read_ready_byte(fd, ESC_SEQUENCE_TIMEOUT_MS)
        if part is None:
            return "ESC"
        if part in {b"M", b"m"}:
            break
        payload.append(part)
        if len(payload) > 64:
            return "ESC"
    try:
        btn_s, col_s, row_s = b"".join(payload).decode("ascii").split(";")
        btn = int(btn_s)
        col = int(col_s)
        row = int(row_s)
    except ValueError:
        return "ESC"
    if (btn & 0b0100_0000) == 0:
        return "MOUSE"
    button = btn & 0b11
    if button == 0:
        return f"MOUSE_WHEEL_UP:{col}:{row}"
    if button == 1:
        return f"MOUSE_WHEEL_DOWN:{col}:{row}"
    return "MOUSE"


def read_key(fd: int, timeout_ms: int | None = None) -> str:
    """Read one key token; returns ``""`` on timeout or for an ignored sequence."""
    if _PENDING_BYTES:
        ch = _PENDING_BYTES.pop(0)
    else:
        if timeout_ms is not None:
            ready, _, _ = select.select([fd], [], [], max(0.0, timeout_ms / 1000.0))
            if not ready:
                return ""
        ch = os.read(fd, 1)
        if not ch:
            return ""

    if ch in {b"\r", b"\n"}:
        return "ENTER"
    if ch in {b"\x08", b"\x7f"}:
        return "BACKSPACE"
    if ch == b"\x03":
        return "CTRL_C"
    if ch == b"\x02":
        return "PAGE_UP"
    if ch == b"\x06":
        return "PAGE_DOWN"
    if ch != b"\x1b":
        return ch.decode("utf-8", errors="replace")

    seq = _read_ready_byte(fd, ESC_SEQUENCE_TIMEOUT_MS)
    if seq is None:
        return "ESC"
    if seq == b"O":
        final = _read_ready_byte(fd, ESC_SEQUENCE_TIMEOUT_MS)
        if final in _IGNORED_FINALS:
            return ""
        return _CSI_FINAL_KEYS.get(final or b"", "ESC")
    if seq != b"[":
        _PENDING_BYTES.append(seq)
        return "ESC"
    seq = _read_ready_byte(fd, ESC_SEQUENCE_TIMEOUT_MS)
    if seq is None:
        return "ESC"
    if seq in _IGNORED_FINALS:
        return ""
    if seq in _CSI_FINAL_KEYS:
        return _CSI_FINAL_KEYS[seq]
    if seq == b"<":
        return _decode_sgr_mouse(fd)
    if seq in _TILDE_KEYS:
        tail = _read_ready_byte(fd, ESC_SEQUENCE_TIMEOUT_MS)
        if tail == b"~":
            return _TILDE_KEYS[seq]
    return "ESC"
