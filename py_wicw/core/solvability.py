"""
Post-generation solvability check.

A greedy bot repeatedly wipes the dirtiest cluster it can find until the
window reaches the target clean percentage, the iteration cap is hit or
the compute budget runs out. The cluster search only looks at every
``grid_size // 32``-th cell, so it can miss a dirtier region between
samples; pass/fail tuning of the level curve relies on exactly this bias.

A failed validation does not prove a level unsolvable. It only says the
greedy strategy did not get there in time; callers should treat it as a
flag for review.
"""

import math
import time
from dataclasses import dataclass
from typing import Optional, Tuple

import numpy as np
import structlog

from .regrowth import clean_percentage

logger = structlog.get_logger()

LOCAL_SAMPLE_RADIUS = 5
SAMPLE_DIVISIONS = 32
_DIRT_EPSILON = 1e-12


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of a solvability check."""

    solvable: bool
    achieved_clean_percentage: float
    iterations: int
    budget_exceeded: bool = False


def local_dirtiness_map(grid: np.ndarray, step: int, radius: int = LOCAL_SAMPLE_RADIUS) -> np.ndarray:
    """
    Mean intensity of the (2r+1)^2 window around every sampled cell.

    Windows are truncated at the grid edge and averaged over the cells that
    fall inside. Row ``i`` / column ``j`` of the result corresponds to cell
    ``(i * step, j * step)``.
    """
    size_y, size_x = grid.shape
    integral = np.zeros((size_y + 1, size_x + 1), dtype=np.float64)
    integral[1:, 1:] = grid.cumsum(axis=0).cumsum(axis=1)

    ys = np.arange(0, size_y, step)
    xs = np.arange(0, size_x, step)
    y0 = np.maximum(ys - radius, 0)[:, None]
    y1 = np.minimum(ys + radius + 1, size_y)[:, None]
    x0 = np.maximum(xs - radius, 0)[None, :]
    x1 = np.minimum(xs + radius + 1, size_x)[None, :]

    totals = integral[y1, x1] - integral[y0, x1] - integral[y1, x0] + integral[y0, x0]
    counts = (y1 - y0) * (x1 - x0)
    return totals / counts


class SolvabilityValidator:
    """Greedy clearing simulation with a wall-clock budget."""

    def __init__(self, sample_radius: int = LOCAL_SAMPLE_RADIUS):
        self.sample_radius = sample_radius

    def find_dirtiest_cluster(self, grid: np.ndarray) -> Optional[Tuple[int, int]]:
        """
        Return (x, y) of the sampled cell with the dirtiest neighbourhood.

        Samples are scanned row by row and the first strict maximum wins.
        Returns None when no sampled neighbourhood holds any dirt.
        """
        step = max(1, grid.shape[0] // SAMPLE_DIVISIONS)
        dirtiness = local_dirtiness_map(grid, step, self.sample_radius)
        flat_index = int(np.argmax(dirtiness))
        row, col = divmod(flat_index, dirtiness.shape[1])
        if dirtiness[row, col] <= _DIRT_EPSILON:
            return None
        return col * step, row * step

    @staticmethod
    def clear_area(grid: np.ndarray, center_x: int, center_y: int, radius: float) -> None:
        """Wipe around a cell in place, with linear falloff from the centre."""
        size_y, size_x = grid.shape
        reach = int(math.ceil(radius))
        y0, y1 = max(0, center_y - reach), min(size_y, center_y + reach + 1)
        x0, x1 = max(0, center_x - reach), min(size_x, center_x + reach + 1)

        dy = np.arange(y0, y1)[:, None] - center_y
        dx = np.arange(x0, x1)[None, :] - center_x
        distance = np.sqrt(dx * dx + dy * dy)
        amount = np.where(distance <= radius, 1.0 - distance / radius, 0.0)

        window = grid[y0:y1, x0:x1]
        np.maximum(window - amount, 0.0, out=window)

    def validate(
        self,
        grid: np.ndarray,
        target_clean_percentage: float = 95.0,
        clear_radius: float = 6.0,
        max_iterations: int = 500,
        compute_budget: float = 0.25,
    ) -> ValidationResult:
        """
        Check whether the greedy bot reaches the target clean percentage.

        Args:
            grid: Hazard grid, left untouched
            target_clean_percentage: Required clean % (0-100)
            clear_radius: Radius in cells of one simulated wipe
            max_iterations: Cap on simulated wipes
            compute_budget: Wall-clock budget in seconds

        Returns:
            ValidationResult with the percentage actually reached
        """
        if clear_radius <= 0:
            raise ValueError("clear_radius must be > 0")

        start = time.perf_counter()
        working = np.array(grid, dtype=np.float64, copy=True)

        iterations = 0
        budget_exceeded = False
        achieved = clean_percentage(working)

        while achieved < target_clean_percentage and iterations < max_iterations:
            target_cell = self.find_dirtiest_cluster(working)
            if target_cell is None:
                break

            self.clear_area(working, target_cell[0], target_cell[1], clear_radius)
            achieved = clean_percentage(working)
            iterations += 1

            elapsed = time.perf_counter() - start
            if elapsed > compute_budget:
                budget_exceeded = True
                logger.warning(
                    "Solvability check exceeded compute budget",
                    elapsed_ms=round(elapsed * 1000, 2),
                    budget_ms=round(compute_budget * 1000, 2),
                    iterations=iterations,
                    achieved=round(achieved, 2),
                )
                break

        solvable = achieved >= target_clean_percentage
        if not solvable:
            logger.warning(
                "Level failed solvability check",
                achieved=round(achieved, 2),
                target=target_clean_percentage,
                iterations=iterations,
            )

        return ValidationResult(
            solvable=solvable,
            achieved_clean_percentage=achieved,
            iterations=iterations,
            budget_exceeded=budget_exceeded,
        )
