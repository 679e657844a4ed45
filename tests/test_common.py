"""Tests for common utilities."""

import threading
import time

import pytest

from shortener.common.batching import chunks
from shortener.common.locks import ReadWriteLock
from shortener.common.url_builder import build_short_url, short_id_from_url


class TestURLBuilder:
    """Test URL building."""

    def test_build_short_url(self):
        assert build_short_url("1", "http://localhost:8080") == "http://localhost:8080/1"
        assert build_short_url("1", "http://localhost:8080/") == "http://localhost:8080/1"

    @pytest.mark.parametrize("value,expected", [
        ("http://localhost:8080/17", "17"),
        ("http://localhost:8080/17/", "17"),
        ("https://short.example/s/3", "3"),
        ("17", "17"),
    ])
    def test_short_id_from_url(self, value, expected):
        assert short_id_from_url(value) == expected


class TestChunks:
    """Test batching."""

    def test_chunks(self):
        assert chunks(list(range(7)), 3) == [[0, 1, 2], [3, 4, 5], [6]]

    def test_exact_multiple(self):
        assert chunks(["a", "b", "c", "d"], 2) == [["a", "b"], ["c", "d"]]

    def test_empty(self):
        assert chunks([], 15) == []

    def test_invalid_size(self):
        with pytest.raises(ValueError):
            chunks([1, 2], 0)


class TestReadWriteLock:
    """Test the read-write lock."""

    def test_readers_share(self):
        """Several readers hold the lock at the same time."""
        lock = ReadWriteLock()
        readers = 4
        barrier = threading.Barrier(readers, timeout=5)

        def reader():
            with lock.read_locked():
                # Only passes if all readers are inside together
                barrier.wait()

        threads = [threading.Thread(target=reader) for _ in range(readers)]
        for t in threads:
            t.start()
        for t in threads:
            t.join(timeout=10)

        assert not barrier.broken
        assert not any(t.is_alive() for t in threads)

    def test_writers_exclusive(self):
        """Writers never overlap with each other or with readers."""
        lock = ReadWriteLock()
        state = {"readers": 0, "writers": 0, "violations": 0}
        guard = threading.Lock()

        def writer():
            for _ in range(50):
                with lock.write_locked():
                    with guard:
                        state["writers"] += 1
                        if state["writers"] > 1 or state["readers"]:
                            state["violations"] += 1
                    time.sleep(0.0001)
                    with guard:
                        state["writers"] -= 1

        def reader():
            for _ in range(50):
                with lock.read_locked():
                    with guard:
                        state["readers"] += 1
                        if state["writers"]:
                            state["violations"] += 1
                    time.sleep(0.0001)
                    with guard:
                        state["readers"] -= 1

        threads = [threading.Thread(target=writer) for _ in range(3)]
        threads += [threading.Thread(target=reader) for _ in range(3)]
        for t in threads:
            t.start()
        for t in threads:
            t.join(timeout=30)

        assert state["violations"] == 0

    def test_waiting_writer_blocks_new_readers(self):
        """A queued writer gets in before readers arriving after it."""
        lock = ReadWriteLock()
        order = []
        lock.acquire_read()

        def writer():
            with lock.write_locked():
                order.append("writer")

        def late_reader():
            with lock.read_locked():
                order.append("reader")

        w = threading.Thread(target=writer)
        w.start()
        while not lock._writers_waiting:
            time.sleep(0.001)

        r = threading.Thread(target=late_reader)
        r.start()
        time.sleep(0.05)
        assert order == []

        lock.release_read()
        w.join(timeout=5)
        r.join(timeout=5)

        assert order == ["writer", "reader"]
