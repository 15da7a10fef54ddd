"""Per-file load session values.

A ``FileSession`` is created for each file selection and replaced wholesale on
the next one. Applying loader updates is pure: it returns a new session, or
the same one when the update belongs to another request.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from pathlib import Path

from .buffer import ByteBuffer, LoadState
from .loader import UPDATE_DONE, UPDATE_ERROR, UPDATE_PROGRESS, LoadUpdate


@dataclass(frozen=True)
class FileSession:
    request_id: int
    path: Path
    load_state: LoadState = field(default_factory=LoadState.loading)

    @property
    def buffer(self) -> ByteBuffer | None:
        return self.load_state.buffer

    @property
    def total_rows(self) -> int:
        return self.load_state.total_rows

    @property
    def finished(self) -> bool:
        return not self.load_state.is_loading


def apply_load_update(session: FileSession, update: LoadUpdate) -> FileSession:
    """Fold one loader update into ``session``.

    Updates for other request ids and updates arriving after a terminal
    success/error are ignored, so a load's state never regresses.
    """
    if update.request_id != session.request_id or session.finished:
        return session
    state = session.load_state
    if update.kind == UPDATE_PROGRESS:
        next_state = state.with_progress(update.progress)
    elif update.kind == UPDATE_DONE and update.buffer is not None:
        next_state = state.completed(update.buffer)
    elif update.kind == UPDATE_ERROR:
        next_state = state.failed(update.error or "Failed to load file")
    else:
        return session
    if next_state is state:
        return session
    return replace(session, load_state=next_state)


__all__ = ["FileSession", "apply_load_update"]
