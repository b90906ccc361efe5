"""Tests for the coalescing level cache."""

import threading
import time

import pytest
from py_wicw.core.level_cache import LevelCache


class TestLevelCache:
    """Test memoization and request coalescing."""

    def test_factory_runs_once(self):
        cache = LevelCache()
        calls = []

        def factory():
            calls.append(1)
            return "level"

        assert cache.get_or_create(1, factory) == "level"
        assert cache.get_or_create(1, factory) == "level"
        assert len(calls) == 1
        assert 1 in cache
        assert cache.get(1) == "level"
        assert cache.get(2) is None

    def test_concurrent_misses_coalesce(self):
        """Concurrent requests for one key share a single computation."""
        cache = LevelCache()
        calls = []
        release = threading.Event()

        def factory():
            calls.append(1)
            release.wait(5)
            return object()

        results = []
        threads = [
            threading.Thread(target=lambda: results.append(cache.get_or_create(7, factory)))
            for _ in range(8)
        ]
        for thread in threads:
            thread.start()
        time.sleep(0.1)
        release.set()
        for thread in threads:
            thread.join()

        assert len(calls) == 1
        assert len(results) == 8
        assert all(result is results[0] for result in results)

    def test_failure_not_cached(self):
        cache = LevelCache()

        def failing():
            raise RuntimeError("boom")

        with pytest.raises(RuntimeError):
            cache.get_or_create(3, failing)

        assert 3 not in cache
        assert cache.get_or_create(3, lambda: "ok") == "ok"

    def test_waiters_receive_failure(self):
        cache = LevelCache()
        calls = []
        release = threading.Event()

        def failing():
            calls.append(1)
            release.wait(5)
            raise RuntimeError("boom")

        errors = []

        def request():
            try:
                cache.get_or_create(4, failing)
            except RuntimeError as error:
                errors.append(error)

        threads = [threading.Thread(target=request) for _ in range(4)]
        for thread in threads:
            thread.start()
        time.sleep(0.1)
        release.set()
        for thread in threads:
            thread.join()

        assert len(calls) == 1
        assert len(errors) == 4
        assert len(cache) == 0

    def test_clear(self):
        cache = LevelCache()
        for key in range(5):
            cache.get_or_create(key, lambda: key)

        assert len(cache) == 5
        assert cache.clear() == 5
        assert len(cache) == 0
        assert cache.clear() == 0
