"""
Fractal gradient noise for the base suds/moisture pattern of a window.

Each cell is the sum of several octaves of 2-D gradient noise. The lattice
hash works purely on ``uint32`` integers derived from the lattice
coordinates, the seed and the octave index, so the same seed yields the
same grid on every platform and regardless of how rows are split across
workers.
"""

from typing import Optional

import numpy as np
import structlog

from ..utils.parallel import WorkerPool

logger = structlog.get_logger()

_MASK = 0xFFFFFFFF
_PRIME_X = np.uint32(374761393)
_PRIME_Y = np.uint32(668265263)
_AVALANCHE = np.uint32(1274126177)
_OCTAVE_STEP = 1013904223

# Unnormalized gradients keep each octave inside [-1, 1]
_GRADIENTS = np.array(
    [[1, 1], [-1, 1], [1, -1], [-1, -1], [1, 0], [-1, 0], [0, 1], [0, -1]],
    dtype=np.float64,
)

NOISE_MIN = 0.0
NOISE_MAX = 1.0


def hash_lattice(xi: np.ndarray, yi: np.ndarray, seed: int) -> np.ndarray:
    """Hash integer lattice coordinates to uint32 values."""
    hx = (xi & _MASK).astype(np.uint32) * _PRIME_X
    hy = (yi & _MASK).astype(np.uint32) * _PRIME_Y
    h = hx ^ hy ^ np.uint32(seed & _MASK)
    h = (h ^ (h >> np.uint32(13))) * _AVALANCHE
    return h ^ (h >> np.uint32(16))


def _fade(t: np.ndarray) -> np.ndarray:
    return t * t * t * (t * (t * 6.0 - 15.0) + 10.0)


def _corner(xi, yi, dx, dy, seed):
    gradient = _GRADIENTS[hash_lattice(xi, yi, seed) & np.uint32(7)]
    return gradient[..., 0] * dx + gradient[..., 1] * dy


def gradient_noise(x: np.ndarray, y: np.ndarray, seed: int) -> np.ndarray:
    """
    Classic Perlin-style gradient noise in 2D.

    Args:
        x: Sample x coordinates
        y: Sample y coordinates (same shape as x)
        seed: Integer seed mixed into the lattice hash

    Returns:
        Noise values in [-1, 1]
    """
    x0 = np.floor(x)
    y0 = np.floor(y)
    fx = x - x0
    fy = y - y0
    xi = x0.astype(np.int64)
    yi = y0.astype(np.int64)

    n00 = _corner(xi, yi, fx, fy, seed)
    n10 = _corner(xi + 1, yi, fx - 1.0, fy, seed)
    n01 = _corner(xi, yi + 1, fx, fy - 1.0, seed)
    n11 = _corner(xi + 1, yi + 1, fx - 1.0, fy - 1.0, seed)

    u = _fade(fx)
    v = _fade(fy)
    nx0 = n00 + (n10 - n00) * u
    nx1 = n01 + (n11 - n01) * u
    return nx0 + (nx1 - nx0) * v


class NoiseField:
    """Generates fractal noise grids, evaluating row chunks in parallel."""

    def __init__(self, pool: Optional[WorkerPool] = None):
        self.pool = pool or WorkerPool(1)

    def generate(
        self,
        seed: int,
        grid_size: int,
        octaves: int = 7,
        scale: float = 10.0,
        persistence: float = 0.5,
        lacunarity: float = 2.0,
    ) -> np.ndarray:
        """
        Generate a ``grid_size`` x ``grid_size`` fractal noise grid.

        The octave sum is divided by the sum of amplitudes and remapped
        from [-1, 1] to [NOISE_MIN, NOISE_MAX].

        Args:
            seed: Noise seed
            grid_size: Cells per side
            octaves: Number of noise layers
            scale: Cells per lattice unit at the first octave
            persistence: Amplitude multiplier per octave
            lacunarity: Frequency multiplier per octave

        Returns:
            float64 array of shape (grid_size, grid_size)
        """
        if grid_size < 1:
            raise ValueError("grid_size must be >= 1")
        if octaves < 1:
            raise ValueError("octaves must be >= 1")
        if scale <= 0:
            raise ValueError("scale must be > 0")

        field = np.empty((grid_size, grid_size), dtype=np.float64)
        columns = np.arange(grid_size, dtype=np.float64) / scale

        amplitudes = persistence ** np.arange(octaves, dtype=np.float64)
        frequencies = lacunarity ** np.arange(octaves, dtype=np.float64)
        max_value = float(np.sum(np.abs(amplitudes))) or 1.0
        octave_seeds = [(seed + octave * _OCTAVE_STEP) & _MASK for octave in range(octaves)]

        def fill_rows(start: int, stop: int) -> None:
            rows = np.arange(start, stop, dtype=np.float64) / scale
            sx, sy = np.meshgrid(columns, rows)
            total = np.zeros_like(sx)
            for amplitude, frequency, octave_seed in zip(amplitudes, frequencies, octave_seeds):
                total += gradient_noise(sx * frequency, sy * frequency, octave_seed) * amplitude
            field[start:stop, :] = (total / max_value + 1.0) * 0.5

        self.pool.parallel_for(grid_size, fill_rows)

        np.clip(field, NOISE_MIN, NOISE_MAX, out=field)
        logger.debug("Noise field generated", seed=seed, grid_size=grid_size, octaves=octaves)
        return field
