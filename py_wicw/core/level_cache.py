"""
Append-only level cache with per-key request coalescing.

Concurrent misses on the same level index share one computation: the
first caller runs the factory, later callers block on the same future and
receive its result (or its exception). Failed computations are not cached.
"""

import threading
from concurrent.futures import Future
from typing import Callable, Dict, Generic, Optional, TypeVar

V = TypeVar("V")


class LevelCache(Generic[V]):
    """Mapping of level index to descriptor, filled at most once per key."""

    def __init__(self):
        self._lock = threading.Lock()
        self._entries: Dict[int, V] = {}
        self._pending: Dict[int, "Future[V]"] = {}

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, key: int) -> bool:
        with self._lock:
            return key in self._entries

    def get(self, key: int) -> Optional[V]:
        with self._lock:
            return self._entries.get(key)

    def get_or_create(self, key: int, factory: Callable[[], V]) -> V:
        """Return the cached value, computing it with ``factory`` at most once."""
        with self._lock:
            if key in self._entries:
                return self._entries[key]
            pending = self._pending.get(key)
            if pending is None:
                future: "Future[V]" = Future()
                self._pending[key] = future
                owner = True
            else:
                future = pending
                owner = False

        if not owner:
            return future.result()

        try:
            value = factory()
        except BaseException as error:
            with self._lock:
                del self._pending[key]
            future.set_exception(error)
            raise

        with self._lock:
            self._entries[key] = value
            del self._pending[key]
        future.set_result(value)
        return value

    def clear(self) -> int:
        """Drop every completed entry; in-flight computations still finish."""
        with self._lock:
            count = len(self._entries)
            self._entries.clear()
        return count
