"""
Blue-noise sampling of hazard anchor candidates.

Implements Bridson's fast Poisson disk sampling (2007). A background grid
with cell size ``r / sqrt(2)`` holds at most one point per cell, so the
distance check against existing points only has to look at a fixed 5x5
block of cells around a candidate.

The algorithm is inherently sequential: every accept/reject depends on the
points accepted before it, and the seeded PRNG is consumed in that order.
"""

import math
from typing import List, Sequence, Tuple, Union

import structlog

from .alea_prng import AleaPRNG

logger = structlog.get_logger()

SamplePoint = Tuple[float, float]


def _region_dimensions(region_size: Union[float, Sequence[float]]) -> Tuple[float, float]:
    if isinstance(region_size, (int, float)):
        return float(region_size), float(region_size)
    width, height = region_size
    return float(width), float(height)


class BlueNoiseSampler:
    """Poisson disk sampler over a rectangular region."""

    def sample(
        self,
        seed: int,
        min_distance: float,
        region_size: Union[float, Sequence[float]],
        rejection_attempts: int = 20,
    ) -> List[SamplePoint]:
        """
        Place points with a guaranteed minimum pairwise distance.

        Args:
            seed: Sampling seed
            min_distance: Minimum distance between any two points
            region_size: (width, height) of the region, or a single side
            rejection_attempts: Candidates tried per active point

        Returns:
            Accepted points in acceptance order
        """
        width, height = _region_dimensions(region_size)
        if min_distance <= 0:
            raise ValueError("min_distance must be > 0")
        if width <= 0 or height <= 0:
            raise ValueError("region_size must be positive")
        if rejection_attempts < 1:
            raise ValueError("rejection_attempts must be >= 1")

        prng = AleaPRNG(seed)
        cell_size = min_distance / math.sqrt(2)
        grid_width = int(math.ceil(width / cell_size))
        grid_height = int(math.ceil(height / cell_size))
        grid = [[-1] * grid_height for _ in range(grid_width)]
        min_distance_sq = min_distance * min_distance

        def cell_of(x: float, y: float) -> Tuple[int, int]:
            return (
                min(int(x / cell_size), grid_width - 1),
                min(int(y / cell_size), grid_height - 1),
            )

        def is_valid(x: float, y: float) -> bool:
            if x < 0 or x >= width or y < 0 or y >= height:
                return False

            cell_x, cell_y = cell_of(x, y)
            for gx in range(max(0, cell_x - 2), min(cell_x + 2, grid_width - 1) + 1):
                column = grid[gx]
                for gy in range(max(0, cell_y - 2), min(cell_y + 2, grid_height - 1) + 1):
                    index = column[gy]
                    if index != -1:
                        px, py = points[index]
                        if (x - px) ** 2 + (y - py) ** 2 < min_distance_sq:
                            return False
            return True

        def accept(x: float, y: float) -> None:
            points.append((x, y))
            active.append((x, y))
            gx, gy = cell_of(x, y)
            grid[gx][gy] = len(points) - 1

        points: List[SamplePoint] = []
        active: List[SamplePoint] = []
        accept(prng.uniform(0.0, width), prng.uniform(0.0, height))

        while active:
            spawn_index = int(prng.random() * len(active))
            cx, cy = active[spawn_index]

            for _ in range(rejection_attempts):
                angle = prng.uniform(0.0, 2.0 * math.pi)
                radius = prng.uniform(min_distance, 2.0 * min_distance)
                x = cx + math.cos(angle) * radius
                y = cy + math.sin(angle) * radius
                if is_valid(x, y):
                    accept(x, y)
                    break
            else:
                active.pop(spawn_index)

        logger.debug(
            "Blue noise sampled",
            seed=seed,
            points=len(points),
            min_distance=min_distance,
            region=(width, height),
        )
        return points
