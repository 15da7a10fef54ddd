"""Chunked file loading and its background scheduler.

``read_source`` is the synchronous reader: one pass for small files, 1 MiB
chunks with progress callbacks and short pauses for large ones.
``ChunkedFileLoader`` runs it on a single daemon worker and posts
``LoadUpdate`` messages tagged with the request id; consumers drop updates
whose id is no longer current.
"""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path
from queue import Empty, Queue
from typing import BinaryIO

from .buffer import ByteBuffer
from .errors import HexViewError, ReadFailure, SizeUnavailable

logger = logging.getLogger(__name__)

CHUNK_SIZE = 1024 * 1024
SMALL_FILE_THRESHOLD = 10 * 1024 * 1024
CHUNK_PAUSE_SECONDS = 0.01

UPDATE_PROGRESS = "progress"
UPDATE_DONE = "done"
UPDATE_ERROR = "error"


def chunk_spans(total_size: int, chunk_size: int = CHUNK_SIZE) -> list[tuple[int, int]]:
    """Partition ``[0, total_size)`` into ``[start, end)`` spans of ``chunk_size``."""
    if chunk_size <= 0:
        raise ValueError("chunk_size must be >= 1")
    return [(start, min(start + chunk_size, total_size)) for start in range(0, total_size, chunk_size)]


def _checked_size(total_size: int | None) -> int:
    if total_size is None or isinstance(total_size, bool) or not isinstance(total_size, int):
        raise SizeUnavailable("File size is unavailable")
    if total_size < 0:
        raise SizeUnavailable(f"File size is unavailable (got {total_size})")
    return total_size


def _read_exact(source: BinaryIO, size: int, start: int) -> bytes:
    try:
        data = source.read(size)
    except OSError as exc:
        raise ReadFailure(f"Failed to read bytes {start}-{start + size}: {exc}") from exc
    if data is None or len(data) != size:
        got = 0 if data is None else len(data)
        raise ReadFailure(f"Failed to read bytes {start}-{start + size}: got {got} of {size} bytes")
    return bytes(data)


def read_source(
    source: BinaryIO,
    total_size: int | None,
    *,
    chunk_size: int = CHUNK_SIZE,
    small_file_threshold: int = SMALL_FILE_THRESHOLD,
    on_progress: Callable[[float], None] | None = None,
    pause: Callable[[], None] | None = None,
) -> ByteBuffer:
    """Read ``total_size`` bytes from ``source`` into a ``ByteBuffer``.

    Reads are strictly sequential. In chunked mode ``on_progress`` receives
    ``completed_chunks / total_chunks`` after every chunk and ``pause`` runs
    between chunks; the last reported value is exactly ``1.0``.
    """
    size = _checked_size(total_size)
    if size < small_file_threshold:
        data = _read_exact(source, size, 0)
        if on_progress is not None:
            on_progress(1.0)
        return ByteBuffer(data)

    spans = chunk_spans(size, chunk_size)
    total_chunks = len(spans)
    chunks: list[bytes] = []
    for completed, (start, end) in enumerate(spans, start=1):
        chunks.append(_read_exact(source, end - start, start))
        if on_progress is not None:
            on_progress(completed / total_chunks)
        if pause is not None and completed < total_chunks:
            pause()
    return ByteBuffer(b"".join(chunks))


def read_path(path: Path, **kwargs) -> ByteBuffer:
    """Open ``path`` and read it fully, mapping filesystem errors to loader errors."""
    try:
        total_size = path.stat().st_size
    except OSError as exc:
        raise SizeUnavailable(f"Cannot determine size of {path}: {exc.strerror or exc}") from exc
    try:
        with path.open("rb") as source:
            return read_source(source, total_size, **kwargs)
    except OSError as exc:
        raise ReadFailure(f"Failed to open {path}: {exc.strerror or exc}") from exc


@dataclass(frozen=True)
class LoadRequest:
    """One file-load job."""

    request_id: int
    open_source: Callable[[], BinaryIO]
    total_size: int | None
    label: str = ""


@dataclass(frozen=True)
class LoadUpdate:
    """Progress or terminal result posted by the loader worker."""

    request_id: int
    kind: str
    progress: float = 0.0
    buffer: ByteBuffer | None = None
    error: str | None = None


class ChunkedFileLoader:
    """Single-worker, latest-request-wins file loader.

    Requests queued while a load runs collapse to the newest one. The running
    load is not interrupted; its updates still arrive and carry its own id so
    the consumer can discard them.
    """

    def __init__(
        self,
        *,
        chunk_size: int = CHUNK_SIZE,
        small_file_threshold: int = SMALL_FILE_THRESHOLD,
        pause_seconds: float = CHUNK_PAUSE_SECONDS,
    ) -> None:
        self.chunk_size = chunk_size
        self.small_file_threshold = small_file_threshold
        self.pause_seconds = pause_seconds
        self._lock = threading.Lock()
        self._pending: LoadRequest | None = None
        self._running = False
        self._next_request_id = 1
        self._updates: Queue[LoadUpdate] = Queue()

    def _pause(self) -> None:
        if self.pause_seconds > 0:
            time.sleep(self.pause_seconds)

    def _run_request(self, request: LoadRequest) -> None:
        def post_progress(progress: float) -> None:
            self._updates.put(LoadUpdate(request.request_id, UPDATE_PROGRESS, progress=progress))

        started = time.monotonic()
        try:
            size = _checked_size(request.total_size)
            try:
                with request.open_source() as source:
                    buffer = read_source(
                        source,
                        size,
                        chunk_size=self.chunk_size,
                        small_file_threshold=self.small_file_threshold,
                        on_progress=post_progress,
                        pause=self._pause,
                    )
            except OSError as exc:
                raise ReadFailure(f"Failed to open {request.label or 'file'}: {exc.strerror or exc}") from exc
        except HexViewError as exc:
            logger.error("Load %d (%s) failed: %s", request.request_id, request.label, exc)
            self._updates.put(LoadUpdate(request.request_id, UPDATE_ERROR, error=str(exc)))
            return
        except Exception as exc:
            logger.exception("Load %d (%s) crashed", request.request_id, request.label)
            message = f"Failed to load {request.label or 'file'}: {exc}"
            self._updates.put(LoadUpdate(request.request_id, UPDATE_ERROR, error=message))
            return
        logger.info(
            "Load %d (%s) finished: %d bytes in %.3fs",
            request.request_id,
            request.label,
            buffer.length,
            time.monotonic() - started,
        )
        self._updates.put(LoadUpdate(request.request_id, UPDATE_DONE, progress=1.0, buffer=buffer))

    def _worker(self) -> None:
        while True:
            with self._lock:
                request = self._pending
                self._pending = None
                if request is None:
                    self._running = False
                    return
            self._run_request(request)

    def load(
        self,
        open_source: Callable[[], BinaryIO],
        total_size: int | None,
        label: str = "",
    ) -> int:
        """Queue a load (replacing any pending one) and return its request id."""
        with self._lock:
            request_id = self._next_request_id
            self._next_request_id += 1
            self._pending = LoadRequest(
                request_id=request_id,
                open_source=open_source,
                total_size=total_size,
                label=label,
            )
            logger.info("Load %d scheduled for %s (%s bytes)", request_id, label or "<source>", total_size)
            if self._running:
                return request_id
            self._running = True

        worker = threading.Thread(
            target=self._worker,
            name="lazyhex-loader",
            daemon=True,
        )
        worker.start()
        return request_id

    def load_path(self, path: Path, total_size: int | None) -> int:
        """Queue a load of ``path``, opened lazily on the worker."""
        return self.load(lambda: path.open("rb"), total_size, label=str(path))

    def drain_updates(self) -> list[LoadUpdate]:
        """Drain all posted updates in arrival order."""
        out: list[LoadUpdate] = []
        while True:
            try:
                out.append(self._updates.get_nowait())
            except Empty:
                break
        return out


__all__ = [
    "CHUNK_PAUSE_SECONDS",
    "CHUNK_SIZE",
    "ChunkedFileLoader",
    "LoadRequest",
    "LoadUpdate",
    "SMALL_FILE_THRESHOLD",
    "UPDATE_DONE",
    "UPDATE_ERROR",
    "UPDATE_PROGRESS",
    "chunk_spans",
    "read_path",
    "read_source",
]
