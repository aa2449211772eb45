"""Tests for block model statistics."""

import pytest

from blocksmith.objects import GridParams
from blocksmith.primitives.grid import generate_regular_grid
from blocksmith.primitives.patterns import apply_checkerboard_pattern, apply_uniform_pattern
from blocksmith.primitives.reservoir import generate_salt_dome_reservoir
from blocksmith.primitives.statistics import calculate_model_statistics


@pytest.fixture
def grid():
    """30 m grid, 20 x 20 x 10 cells."""
    return generate_regular_grid(
        GridParams(x_increment=30, y_increment=30, z_increment=30, nx=20, ny=20, nz=10)
    )


class TestModelStatistics:
    """Tests for calculate_model_statistics."""

    def test_waste_grid(self, grid):
        """Test statistics of a fresh grid."""
        stats = calculate_model_statistics(grid, cell_size=(30, 30, 30))
        assert stats.n_blocks == 4000
        assert stats.rock_type_counts == {"Waste": 4000}
        assert stats.ore_blocks == 0
        assert stats.waste_percentage == 100.0
        assert stats.zone_count == 0
        assert not stats.grade_cu.has_data
        assert stats.density.mean == pytest.approx(2.5)
        assert stats.dimensions == (600.0, 600.0, 300.0)
        assert stats.total_volume == pytest.approx(30 ** 3 * 4000)

    def test_checkerboard(self, grid):
        """Test ore percentage and field summaries."""
        stats = calculate_model_statistics(apply_checkerboard_pattern(grid))
        assert stats.rock_type_counts == {"Ore_Med": 2000, "Waste": 2000}
        assert stats.ore_percentage == pytest.approx(50.0)
        assert stats.econ_value.min == -15.0
        assert stats.econ_value.max == 25.0
        assert stats.econ_value.total == pytest.approx(2000 * 25.0 - 2000 * 15.0)
        assert stats.total_volume == 0.0

    def test_grade_based_ore(self, grid):
        """Test that blocks with ore grades count as ore regardless of name."""
        frame = apply_uniform_pattern(grid, rock_type="Magnetite").to_dataframe()
        stats = calculate_model_statistics(type(grid)(frame))
        assert stats.ore_blocks == 4000
        assert stats.zone_counts == {"Zone1": 4000}

    def test_empty_model(self):
        """Test statistics of an empty model."""
        from blocksmith.objects import BlockModel

        stats = calculate_model_statistics(BlockModel.empty())
        assert stats.n_blocks == 0
        assert stats.ore_percentage == 0.0
        assert stats.waste_percentage == 0.0

    def test_porosity_summary(self):
        """Test that the reservoir porosity column is summarized."""
        grid = generate_regular_grid(
            GridParams(x_increment=50, y_increment=50, z_increment=25, nx=10, ny=10, nz=10)
        )
        stats = calculate_model_statistics(generate_salt_dome_reservoir(grid, seed=1))
        assert stats.extra["porosity"].has_data
        assert 0.01 <= stats.extra["porosity"].min <= stats.extra["porosity"].max <= 0.35
