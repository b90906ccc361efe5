"""Tests for Bridson blue-noise sampling."""

import math

import pytest
from py_wicw.core.blue_noise import BlueNoiseSampler


def _min_pairwise_distance(points):
    best = math.inf
    for i in range(len(points)):
        for j in range(i + 1, len(points)):
            best = min(best, math.dist(points[i], points[j]))
    return best


class TestBlueNoiseSampler:
    """Test Poisson disk sampling."""

    @pytest.fixture
    def sampler(self):
        return BlueNoiseSampler()

    def test_minimum_distance_respected(self, sampler):
        """Test that no two points are closer than min_distance."""
        points = sampler.sample(6421, 1.0, (10.0, 8.0), 20)
        assert len(points) > 1
        assert _min_pairwise_distance(points) >= 1.0 - 1e-9

    def test_points_inside_region(self, sampler):
        points = sampler.sample(99, 0.75, (10.0, 8.0), 30)
        for x, y in points:
            assert 0.0 <= x < 10.0
            assert 0.0 <= y < 8.0

    def test_region_is_well_covered(self, sampler):
        """Bridson should fill a window rather than stop early."""
        points = sampler.sample(12, 1.0, (10.0, 8.0), 20)
        assert len(points) > 30

    def test_deterministic(self, sampler):
        a = sampler.sample(555, 1.0, (10.0, 8.0))
        b = sampler.sample(555, 1.0, (10.0, 8.0))
        assert a == b

    def test_different_seeds(self, sampler):
        a = sampler.sample(1, 1.0, (10.0, 8.0))
        b = sampler.sample(2, 1.0, (10.0, 8.0))
        assert a != b

    def test_scalar_region(self, sampler):
        points = sampler.sample(3, 2.0, 20.0)
        assert all(0.0 <= x < 20.0 and 0.0 <= y < 20.0 for x, y in points)
        assert _min_pairwise_distance(points) >= 2.0 - 1e-9

    def test_tiny_region_gives_single_point(self, sampler):
        points = sampler.sample(8, 5.0, (1.0, 1.0))
        assert len(points) == 1

    @pytest.mark.parametrize("args", [
        (0.0, (10.0, 8.0), 20),
        (-1.0, (10.0, 8.0), 20),
        (1.0, (0.0, 8.0), 20),
        (1.0, (10.0, 8.0), 0),
    ])
    def test_invalid_arguments(self, sampler, args):
        with pytest.raises(ValueError):
            sampler.sample(1, *args)
