"""Tests for random generator resolution."""

import numpy as np
import pandas as pd
import pytest

from blocksmith.objects import GridParams
from blocksmith.primitives.grid import generate_regular_grid
from blocksmith.primitives.orebody import generate_porphyry_ore_body
from blocksmith.primitives.seeding import resolve_rng
from blocksmith.utils.errors import ParameterError


@pytest.fixture(scope="module")
def grid():
    """20 x 20 x 10 grid of 10 m blocks."""
    return generate_regular_grid(
        GridParams(x_increment=10, y_increment=10, z_increment=10, nx=20, ny=20, nz=10)
    )


class TestResolveRng:
    """Tests for resolve_rng."""

    def test_unseeded_runs_differ(self, grid):
        """Test that two unseeded runs on the same grid give different bodies."""
        first = generate_porphyry_ore_body(grid).data["grade_cu"].to_numpy()
        second = generate_porphyry_ore_body(grid).data["grade_cu"].to_numpy()
        assert not np.array_equal(first, second)

    def test_unseeded_streams_differ(self, grid):
        """Test that resolve_rng(None) draws fresh entropy on every call."""
        bounds = grid.bounds()
        a = resolve_rng(None, bounds).uniform(size=8)
        b = resolve_rng(None, bounds).uniform(size=8)
        assert not np.array_equal(a, b)

    def test_same_seed_reproducible(self, grid):
        """Test that an integer seed on the same bounds reproduces the output."""
        first = generate_porphyry_ore_body(grid, seed=42).data
        second = generate_porphyry_ore_body(grid, seed=42).data
        pd.testing.assert_frame_equal(first, second)

        bounds = grid.bounds()
        np.testing.assert_array_equal(
            resolve_rng(42, bounds).uniform(size=8), resolve_rng(42, bounds).uniform(size=8)
        )

    def test_generator_used_as_is(self):
        """Test that an existing Generator is returned unchanged."""
        rng = np.random.default_rng(3)
        assert resolve_rng(rng) is rng

    def test_negative_seed(self, grid):
        """Test that a negative seed raises ParameterError."""
        with pytest.raises(ParameterError):
            resolve_rng(-1, grid.bounds())

    @pytest.mark.parametrize("seed", [1.5, "42", True])
    def test_unsupported_seed_type(self, seed):
        """Test that non-integer seeds are rejected."""
        with pytest.raises(ParameterError):
            resolve_rng(seed)
