"""Tests for the fractal noise field."""

import numpy as np
import pytest
from py_wicw.core.noise_field import NOISE_MAX, NOISE_MIN, NoiseField, gradient_noise, hash_lattice
from py_wicw.utils.parallel import WorkerPool


class TestGradientNoise:
    """Test the single-octave noise primitive."""

    def test_hash_is_uint32(self):
        xi = np.arange(-5, 5, dtype=np.int64)
        h = hash_lattice(xi, xi, 1234)
        assert h.dtype == np.uint32

    def test_hash_depends_on_seed(self):
        xi = np.arange(10, dtype=np.int64)
        assert not np.array_equal(hash_lattice(xi, xi, 1), hash_lattice(xi, xi, 2))

    def test_zero_at_lattice_points(self):
        """Gradient noise vanishes on integer coordinates."""
        x = np.array([0.0, 1.0, 5.0, -3.0])
        y = np.array([0.0, 2.0, 7.0, 4.0])
        np.testing.assert_allclose(gradient_noise(x, y, 99), 0.0, atol=1e-12)

    def test_single_octave_range(self):
        prng = np.random.default_rng(0)
        x = prng.uniform(-50, 50, 5000)
        y = prng.uniform(-50, 50, 5000)
        values = gradient_noise(x, y, 7)
        assert values.min() >= -1.0
        assert values.max() <= 1.0


class TestNoiseField:
    """Test full noise grid generation."""

    def test_shape_and_dtype(self):
        grid = NoiseField().generate(7919, 32)
        assert grid.shape == (32, 32)
        assert grid.dtype == np.float64

    def test_values_in_documented_range(self):
        grid = NoiseField().generate(12345, 64, octaves=7, scale=10.0)
        assert grid.min() >= NOISE_MIN
        assert grid.max() <= NOISE_MAX

    def test_deterministic(self):
        """Test that the same seed gives an identical grid."""
        a = NoiseField().generate(42, 48)
        b = NoiseField().generate(42, 48)
        np.testing.assert_array_equal(a, b)

    def test_different_seeds(self):
        a = NoiseField().generate(1, 32)
        b = NoiseField().generate(2, 32)
        assert not np.array_equal(a, b)

    def test_parallel_matches_serial(self):
        """Row chunking must not change any cell."""
        serial = NoiseField(WorkerPool(1)).generate(2024, 50)
        with WorkerPool(4) as pool:
            parallel = NoiseField(pool).generate(2024, 50)
        np.testing.assert_array_equal(serial, parallel)

    def test_field_is_not_flat(self):
        grid = NoiseField().generate(5, 64)
        assert grid.std() > 0.01

    @pytest.mark.parametrize("kwargs", [
        {"grid_size": 0},
        {"grid_size": 8, "octaves": 0},
        {"grid_size": 8, "scale": 0.0},
    ])
    def test_invalid_arguments(self, kwargs):
        with pytest.raises(ValueError):
            NoiseField().generate(1, **kwargs)
