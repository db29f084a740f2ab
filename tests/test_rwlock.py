"""Tests for switchyard.routing.rwlock: the reader/writer lock."""

import threading
import time

import pytest

from switchyard.routing.rwlock import RWLock


class TestRWLock:
    def test_readers_share(self) -> None:
        lock = RWLock()
        inside = threading.Barrier(3, timeout=5)

        def reader() -> None:
            with lock.read():
                inside.wait()

        threads = [threading.Thread(target=reader) for _ in range(2)]
        for t in threads:
            t.start()
        # All three parties meet only if both readers hold the lock at once.
        inside.wait()
        for t in threads:
            t.join(timeout=5)
        assert not any(t.is_alive() for t in threads)

    def test_writer_excludes_readers(self) -> None:
        lock = RWLock()
        events: list[str] = []
        writer_in = threading.Event()

        def writer() -> None:
            with lock.write():
                writer_in.set()
                time.sleep(0.05)
                events.append("writer-done")

        def reader() -> None:
            writer_in.wait(timeout=5)
            with lock.read():
                events.append("reader")

        tw = threading.Thread(target=writer)
        tr = threading.Thread(target=reader)
        tw.start()
        tr.start()
        tw.join(timeout=5)
        tr.join(timeout=5)
        assert events == ["writer-done", "reader"]

    def test_waiting_writer_blocks_new_readers(self) -> None:
        lock = RWLock()
        order: list[str] = []
        lock.acquire_read()

        def writer() -> None:
            with lock.write():
                order.append("writer")

        def late_reader() -> None:
            with lock.read():
                order.append("reader")

        tw = threading.Thread(target=writer)
        tw.start()
        # Wait until the writer is queued.
        deadline = time.monotonic() + 5
        while lock._writers_waiting == 0 and time.monotonic() < deadline:
            time.sleep(0.001)
        tr = threading.Thread(target=late_reader)
        tr.start()
        time.sleep(0.02)
        assert order == []
        lock.release_read()
        tw.join(timeout=5)
        tr.join(timeout=5)
        assert order == ["writer", "reader"]

    def test_unbalanced_release_raises(self) -> None:
        lock = RWLock()
        with pytest.raises(RuntimeError):
            lock.release_read()
        with pytest.raises(RuntimeError):
            lock.release_write()

    def test_released_after_exception(self) -> None:
        lock = RWLock()
        with pytest.raises(ValueError), lock.write():
            raise ValueError("boom")
        with lock.write():
            pass
