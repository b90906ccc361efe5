"""
Parallel-for over a thread pool.

Grid stages that are cell-parallel (noise evaluation, regrowth steps) split
their rows into contiguous chunks and hand them to ``WorkerPool.parallel_for``.
The call returns only once every chunk has finished, so no partially written
grid is ever observable by the caller.
"""

from concurrent.futures import ThreadPoolExecutor, wait
from typing import Callable, List, Optional, Tuple

import structlog

logger = structlog.get_logger()


class WorkerPool:
    """Owned worker pool with an explicit join barrier."""

    def __init__(self, max_workers: int = 1):
        if max_workers < 1:
            raise ValueError("max_workers must be >= 1")
        self.max_workers = max_workers
        self._executor: Optional[ThreadPoolExecutor] = None
        if max_workers > 1:
            self._executor = ThreadPoolExecutor(
                max_workers=max_workers, thread_name_prefix="wicw-worker"
            )

    def chunks(self, total: int, chunk_size: Optional[int] = None) -> List[Tuple[int, int]]:
        """Split [0, total) into contiguous (start, stop) ranges."""
        if total <= 0:
            return []
        if chunk_size is None:
            chunk_size = max(1, -(-total // self.max_workers))
        return [(start, min(start + chunk_size, total)) for start in range(0, total, chunk_size)]

    def parallel_for(
        self,
        total: int,
        fn: Callable[[int, int], None],
        chunk_size: Optional[int] = None,
    ) -> None:
        """
        Run ``fn(start, stop)`` over every chunk of [0, total) and wait for all.

        Args:
            total: Number of items (usually grid rows)
            fn: Worker writing results for its own range only
            chunk_size: Items per chunk, defaults to one chunk per worker

        Raises:
            The first exception raised by any worker, after all chunks finished.
        """
        ranges = self.chunks(total, chunk_size)
        if self._executor is None or len(ranges) <= 1:
            for start, stop in ranges:
                fn(start, stop)
            return

        futures = [self._executor.submit(fn, start, stop) for start, stop in ranges]
        wait(futures)
        for future in futures:
            error = future.exception()
            if error is not None:
                logger.error("Parallel chunk failed", error=str(error))
                raise error

    def close(self) -> None:
        """Shut the executor down, waiting for running chunks."""
        if self._executor is not None:
            self._executor.shutdown(wait=True)
            self._executor = None

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
