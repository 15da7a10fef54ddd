"""Loaded-file data entities.

``ByteBuffer`` wraps the immutable file content; ``LoadState`` is the value
the loading pipeline publishes to the UI (progress, error, row count).
"""

from __future__ import annotations

from dataclasses import dataclass, replace

from .rows import total_rows_for


@dataclass(frozen=True)
class ByteBuffer:
    """Fully-loaded file content."""

    data: bytes = b""

    @property
    def length(self) -> int:
        return len(self.data)

    def __len__(self) -> int:
        return len(self.data)

    def slice(self, start: int, end: int) -> bytes:
        """Return bytes in ``[start, end)`` clipped to the buffer bounds."""
        start = max(0, start)
        end = min(end, len(self.data))
        if end <= start:
            return b""
        return self.data[start:end]


@dataclass(frozen=True)
class LoadState:
    """Snapshot of one load request as seen by the presentation layer.

    ``total_rows`` is derived from the buffer, so the row-count invariant holds
    for every instance built through the helpers below.
    """

    buffer: ByteBuffer | None = None
    is_loading: bool = False
    progress: float = 0.0
    error: str | None = None
    total_rows: int = 0

    @classmethod
    def empty(cls) -> LoadState:
        return cls()

    @classmethod
    def loading(cls) -> LoadState:
        return cls(is_loading=True)

    def with_progress(self, progress: float) -> LoadState:
        """Advance progress; values below the current one are ignored."""
        bounded = max(0.0, min(1.0, float(progress)))
        if bounded <= self.progress:
            return self
        return replace(self, progress=bounded)

    def completed(self, buffer: ByteBuffer) -> LoadState:
        return LoadState(
            buffer=buffer,
            is_loading=False,
            progress=1.0,
            error=None,
            total_rows=total_rows_for(buffer.length),
        )

    def failed(self, message: str) -> LoadState:
        return LoadState(
            buffer=None,
            is_loading=False,
            progress=self.progress,
            error=message,
            total_rows=0,
        )
