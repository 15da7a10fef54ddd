"""Key dispatch for the hex viewer.

Maps normalized key tokens to ``HexViewer`` operations. The offset prompt
captures keys while it is open; otherwise keys scroll or quit.
"""

from __future__ import annotations

from ..viewer import HexViewer

QUIT_KEYS = frozenset({"q", "Q", "CTRL_C"})
PROMPT_KEYS = frozenset({":", "o"})


def handle_prompt_key(viewer: HexViewer, key: str, now: float) -> None:
    if key == "ESC":
        viewer.close_offset_prompt()
    elif key == "ENTER":
        if viewer.offset_input.strip():
            viewer.jump(now=now)
        else:
            viewer.close_offset_prompt()
    else:
        viewer.edit_offset_input(key)


def handle_key(viewer: HexViewer, key: str, now: float) -> bool:
    """Apply one key; returns ``True`` when the viewer should quit."""
    if not key:
        return False
    if viewer.offset_prompt_active:
        if key == "CTRL_C":
            return True
        handle_prompt_key(viewer, key, now)
        return False

    if key in QUIT_KEYS:
        return True
    if key in PROMPT_KEYS:
        viewer.open_offset_prompt()
    elif key in {"j", "DOWN"}:
        viewer.scroll_by_rows(1)
    elif key in {"k", "UP"}:
        viewer.scroll_by_rows(-1)
    elif key in {"PAGE_DOWN", " ", "f"}:
        viewer.scroll_by_pages(1)
    elif key in {"PAGE_UP", "b"}:
        viewer.scroll_by_pages(-1)
    elif key in {"g", "HOME"}:
        viewer.scroll_home()
    elif key in {"G", "END"}:
        viewer.scroll_end()
    elif key.startswith("MOUSE_WHEEL_UP:"):
        viewer.scroll_by_rows(-3)
    elif key.startswith("MOUSE_WHEEL_DOWN:"):
        viewer.scroll_by_rows(3)
    elif key == "ESC" and viewer.offset_error:
        viewer.offset_error = None
        viewer.dirty = True
    return False
