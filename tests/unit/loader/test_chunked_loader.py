"""Tests for the background chunked file loader."""

from __future__ import annotations

import io
import tempfile
import threading
import time
import unittest
from pathlib import Path

from lazyhex.loader import UPDATE_DONE, UPDATE_ERROR, UPDATE_PROGRESS, ChunkedFileLoader, LoadUpdate


def _wait_for_terminal_updates(
    loader: ChunkedFileLoader,
    *,
    expected_count: int,
    timeout_seconds: float = 2.0,
) -> list[LoadUpdate]:
    deadline = time.monotonic() + timeout_seconds
    out: list[LoadUpdate] = []
    while time.monotonic() < deadline:
        out.extend(loader.drain_updates())
        if sum(1 for update in out if update.kind in {UPDATE_DONE, UPDATE_ERROR}) >= expected_count:
            break
        time.sleep(0.01)
    return out


class ChunkedFileLoaderTests(unittest.TestCase):
    def test_load_path_posts_progress_then_buffer(self) -> None:
        data = bytes(range(256)) * 10
        with tempfile.TemporaryDirectory() as tmp:
            target = Path(tmp) / "blob.bin"
            target.write_bytes(data)
            loader = ChunkedFileLoader(chunk_size=512, small_file_threshold=0, pause_seconds=0)

            request_id = loader.load_path(target, len(data))
            updates = _wait_for_terminal_updates(loader, expected_count=1)

        self.assertTrue(all(update.request_id == request_id for update in updates))
        progress = [update.progress for update in updates if update.kind == UPDATE_PROGRESS]
        self.assertEqual(len(progress), 5)
        self.assertEqual(progress, sorted(progress))
        self.assertEqual(progress[-1], 1.0)
        self.assertEqual(updates[-1].kind, UPDATE_DONE)
        assert updates[-1].buffer is not None
        self.assertEqual(updates[-1].buffer.data, data)

    def test_open_failure_posts_error(self) -> None:
        def open_source():
            raise PermissionError(13, "Permission denied")

        loader = ChunkedFileLoader(pause_seconds=0)
        request_id = loader.load(open_source, 10, label="secret.bin")
        updates = _wait_for_terminal_updates(loader, expected_count=1)

        self.assertEqual(len(updates), 1)
        self.assertEqual(updates[0].request_id, request_id)
        self.assertEqual(updates[0].kind, UPDATE_ERROR)
        self.assertIn("Permission denied", updates[0].error or "")
        self.assertIsNone(updates[0].buffer)

    def test_unknown_size_posts_error_without_opening(self) -> None:
        opened: list[bool] = []

        def open_source():
            opened.append(True)
            return io.BytesIO(b"abc")

        loader = ChunkedFileLoader(pause_seconds=0)
        loader.load(open_source, None)
        updates = _wait_for_terminal_updates(loader, expected_count=1)

        self.assertEqual([update.kind for update in updates], [UPDATE_ERROR])
        self.assertEqual(opened, [])

    def test_unexpected_exception_posts_error_and_worker_keeps_serving(self) -> None:
        def broken_source():
            raise ValueError("boom")

        loader = ChunkedFileLoader(pause_seconds=0)
        failed = loader.load(broken_source, 3, label="broken.bin")
        first_updates = _wait_for_terminal_updates(loader, expected_count=1)

        self.assertEqual([update.kind for update in first_updates], [UPDATE_ERROR])
        self.assertEqual(first_updates[0].request_id, failed)
        self.assertIn("boom", first_updates[0].error or "")

        second = loader.load(lambda: io.BytesIO(b"abc"), 3)
        second_updates = _wait_for_terminal_updates(loader, expected_count=1)

        self.assertEqual(second_updates[-1].request_id, second)
        self.assertEqual(second_updates[-1].kind, UPDATE_DONE)
        assert second_updates[-1].buffer is not None
        self.assertEqual(second_updates[-1].buffer.data, b"abc")

    def test_request_ids_increase(self) -> None:
        loader = ChunkedFileLoader(pause_seconds=0)
        first = loader.load(lambda: io.BytesIO(b"a"), 1)
        second = loader.load(lambda: io.BytesIO(b"b"), 1)
        self.assertLess(first, second)
        _wait_for_terminal_updates(loader, expected_count=2)

    def test_pending_requests_collapse_to_latest(self) -> None:
        first_started = threading.Event()
        allow_first_finish = threading.Event()
        opened: list[str] = []

        def opener(label: str, data: bytes, block: bool = False):
            def open_source():
                opened.append(label)
                if block:
                    first_started.set()
                    allow_first_finish.wait(timeout=1.0)
                return io.BytesIO(data)

            return open_source

        loader = ChunkedFileLoader(pause_seconds=0)
        first = loader.load(opener("first", b"1111", block=True), 4)
        self.assertTrue(first_started.wait(timeout=1.0))
        loader.load(opener("second", b"22", block=False), 2)
        third = loader.load(opener("third", b"333", block=False), 3)
        allow_first_finish.set()

        updates = _wait_for_terminal_updates(loader, expected_count=2)
        done = {update.request_id: update for update in updates if update.kind == UPDATE_DONE}
        self.assertSetEqual(set(done), {first, third})
        assert done[third].buffer is not None
        self.assertEqual(done[third].buffer.data, b"333")
        self.assertListEqual(opened, ["first", "third"])


if __name__ == "__main__":
    unittest.main()
