"""
Cellular automaton for regenerating hazards (frost, algae, sap, ...).

Rule: a cell whose count of dirty neighbours (value > 0.5 among its 8
neighbours) exceeds the neighbour threshold grows by ``rate * dt``, clamped
to 1.0. The rule only runs while the window as a whole is below the
"clean enough" threshold. Every step reads the previous snapshot and writes
a separate buffer, so row chunks can be evaluated in any order.
"""

from typing import Optional

import numpy as np

from ..utils.parallel import WorkerPool

DIRTY_NEIGHBOR_VALUE = 0.5
CLEAN_CELL_VALUE = 0.1


def clean_percentage(grid: np.ndarray) -> float:
    """Percentage of cells below the clean threshold."""
    if grid.size == 0:
        return 100.0
    return float(np.count_nonzero(grid < CLEAN_CELL_VALUE)) * 100.0 / grid.size


def _padded_dirty(grid: np.ndarray) -> np.ndarray:
    return np.pad((grid > DIRTY_NEIGHBOR_VALUE).astype(np.int32), 1)


def _count_rows(padded: np.ndarray, start: int, stop: int) -> np.ndarray:
    width = padded.shape[1] - 2
    counts = np.zeros((stop - start, width), dtype=np.int32)
    for dy in (-1, 0, 1):
        for dx in (-1, 0, 1):
            if dx == 0 and dy == 0:
                continue
            counts += padded[start + 1 + dy:stop + 1 + dy, 1 + dx:width + 1 + dx]
    return counts


def dirty_neighbor_counts(grid: np.ndarray) -> np.ndarray:
    """Count neighbours above 0.5 for every cell; cells off the grid do not count."""
    return _count_rows(_padded_dirty(grid), 0, grid.shape[0])


def _step_into(
    source: np.ndarray,
    target: np.ndarray,
    regen_amount: float,
    neighbor_threshold: int,
    pool: WorkerPool,
) -> None:
    padded = _padded_dirty(source)

    def update_rows(start: int, stop: int) -> None:
        counts = _count_rows(padded, start, stop)
        rows = source[start:stop]
        grown = np.minimum(1.0, rows + regen_amount)
        target[start:stop] = np.where(counts > neighbor_threshold, grown, rows)

    pool.parallel_for(source.shape[0], update_rows)


def regrowth_step(
    grid: np.ndarray,
    delta_time: float,
    global_clean_percentage: float,
    regen_rate_per_second: float,
    neighbor_threshold: int = 4,
    stop_threshold: float = 80.0,
    pool: Optional[WorkerPool] = None,
) -> np.ndarray:
    """
    Apply one automaton step and return the new grid.

    The input grid is never modified. When ``global_clean_percentage`` is at
    or above ``stop_threshold`` the returned grid is an unchanged copy.
    """
    if global_clean_percentage >= stop_threshold:
        return grid.copy()

    result = np.empty_like(grid)
    _step_into(grid, result, regen_rate_per_second * delta_time, neighbor_threshold, pool or WorkerPool(1))
    return result


class RegrowthAutomaton:
    """Double-buffered automaton state for one window."""

    def __init__(
        self,
        grid_size: int,
        pool: Optional[WorkerPool] = None,
        regen_rate: float = 0.025,
        neighbor_threshold: int = 4,
        stop_threshold: float = 80.0,
    ):
        self.grid_size = grid_size
        self.pool = pool or WorkerPool(1)
        self.regen_rate = regen_rate
        self.neighbor_threshold = neighbor_threshold
        self.stop_threshold = stop_threshold

        self._current = np.zeros((grid_size, grid_size), dtype=np.float64)
        self._next = np.zeros_like(self._current)

    def initialize(self, initial_state: np.ndarray) -> None:
        """Load the initial hazard grid."""
        if initial_state.shape != (self.grid_size, self.grid_size):
            raise ValueError(
                f"Expected grid of shape {(self.grid_size, self.grid_size)}, got {initial_state.shape}"
            )
        self._current = np.clip(initial_state.astype(np.float64), 0.0, 1.0)
        self._next = np.empty_like(self._current)

    def update_step(self, delta_time: float, global_clean_percentage: Optional[float] = None) -> bool:
        """
        Advance the automaton by ``delta_time`` seconds.

        Args:
            delta_time: Elapsed seconds
            global_clean_percentage: Clean % of the window, computed from
                the current grid when omitted

        Returns:
            True if the rule ran, False if the global gate kept it idle
        """
        if global_clean_percentage is None:
            global_clean_percentage = clean_percentage(self._current)
        if global_clean_percentage >= self.stop_threshold:
            return False

        _step_into(
            self._current,
            self._next,
            self.regen_rate * delta_time,
            self.neighbor_threshold,
            self.pool,
        )
        self._current, self._next = self._next, self._current
        return True

    def set_cell(self, x: int, y: int, value: float) -> None:
        """Direct write, e.g. from a clearing action. Out-of-range cells are ignored."""
        if x < 0 or x >= self.grid_size or y < 0 or y >= self.grid_size:
            return
        self._current[y, x] = min(1.0, max(0.0, value))

    def current_grid(self) -> np.ndarray:
        return self._current.copy()

    def clean_percentage(self) -> float:
        return clean_percentage(self._current)
