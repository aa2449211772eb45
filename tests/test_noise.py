"""Tests for 3D value noise."""

import numpy as np
import pytest

from blocksmith.primitives.noise import noise3d, smoothstep


class TestSmoothstep:
    """Tests for smoothstep."""

    def test_endpoints(self):
        """Test smoothstep at 0, 0.5 and 1."""
        assert smoothstep(0.0) == 0.0
        assert smoothstep(0.5) == pytest.approx(0.5)
        assert smoothstep(1.0) == 1.0


class TestNoise3D:
    """Tests for noise3d."""

    def test_range(self):
        """Test that noise values stay within [0, 1]."""
        rng = np.random.default_rng(0)
        pts = rng.uniform(-1000, 1000, size=(3, 20000))
        values = noise3d(pts[0], pts[1], pts[2], scale=0.37)
        assert values.shape == (20000,)
        assert values.min() >= 0.0
        assert values.max() <= 1.0

    def test_deterministic(self):
        """Test that identical inputs give identical outputs."""
        assert noise3d(1.3, -2.7, 5.1) == noise3d(1.3, -2.7, 5.1)

    def test_scalar_returns_float(self):
        """Test that scalar input returns a Python float."""
        assert isinstance(noise3d(0.1, 0.2, 0.3), float)

    def test_matches_vectorized(self):
        """Test that scalar and vectorized evaluation agree."""
        xs = np.array([0.25, 7.5, -3.2])
        ys = np.array([1.0, -8.1, 4.4])
        zs = np.array([-0.5, 2.2, 9.9])
        values = noise3d(xs, ys, zs, scale=0.8)
        for n in range(3):
            assert values[n] == pytest.approx(noise3d(xs[n], ys[n], zs[n], scale=0.8))

    def test_scale_multiplies_coordinates(self):
        """Test that scale is applied to the coordinates."""
        assert noise3d(2.0, 4.0, 6.0, scale=0.5) == pytest.approx(noise3d(1.0, 2.0, 3.0))

    def test_lattice_corner_value(self):
        """Test that integer points take the hashed corner value exactly."""
        a = noise3d(3.0, 4.0, 5.0)
        b = noise3d(3.0 + 1e-9, 4.0, 5.0)
        assert a == pytest.approx(b, abs=1e-6)

    def test_continuous_across_cell_boundaries(self):
        """Test continuity across integer lattice planes."""
        eps = 1e-7
        for boundary in (-2.0, 0.0, 1.0, 17.0):
            left = noise3d(boundary - eps, 0.3, 0.6)
            right = noise3d(boundary + eps, 0.3, 0.6)
            assert abs(left - right) < 1e-4

    def test_small_steps_small_changes(self):
        """Test that the field changes smoothly along a line."""
        x = np.linspace(-5, 5, 10001)
        values = noise3d(x, 0.4, 0.9)
        assert np.max(np.abs(np.diff(values))) < 0.01

    def test_not_constant(self):
        """Test that the field varies."""
        x = np.linspace(0, 50, 500)
        values = noise3d(x, x * 0.5, x * 0.25)
        assert values.std() > 0.01

    def test_broadcasting(self):
        """Test broadcasting of array and scalar inputs."""
        values = noise3d(np.arange(5.0), 1.5, 2.5)
        assert values.shape == (5,)
