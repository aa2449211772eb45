"""Tests for categorical material patterns."""

import numpy as np
import pandas as pd
import pytest

from blocksmith.objects import (
    DEFAULT_MATERIALS,
    GRADE_TIERS,
    BlockModel,
    GridParams,
    MaterialDefinition,
)
from blocksmith.primitives.grid import generate_regular_grid
from blocksmith.primitives.patterns import (
    apply_checkerboard_pattern,
    apply_gradient_pattern,
    apply_inclined_vein_pattern,
    apply_layered_pattern,
    apply_material_properties,
    apply_ore_horizon_pattern,
    apply_random_clusters_pattern,
    apply_random_pattern,
    apply_uniform_pattern,
)
from blocksmith.utils.errors import ParameterError


@pytest.fixture
def grid():
    """30 m grid, 20 x 20 x 10 cells."""
    return generate_regular_grid(
        GridParams(x_increment=30, y_increment=30, z_increment=30, nx=20, ny=20, nz=10)
    )


@pytest.fixture
def small_grid():
    """10 m grid, 8 x 6 x 5 cells."""
    return generate_regular_grid(
        GridParams(x_increment=10, y_increment=10, z_increment=10, nx=8, ny=6, nz=5)
    )


class TestUniformPattern:
    """Tests for apply_uniform_pattern."""

    def test_all_ore_med(self, grid):
        """Test that every block becomes Ore_Med with its material properties."""
        data = apply_uniform_pattern(grid).data
        definition = DEFAULT_MATERIALS["Ore_Med"]
        assert len(data) == 4000
        assert (data["rock_type"] == "Ore_Med").all()
        assert (data["density"] == definition.density).all()
        assert (data["grade_cu"] == definition.grade_cu).all()
        assert (data["grade_au"] == definition.grade_au).all()
        assert (data["econ_value"] == definition.econ_value).all()

    def test_input_unchanged(self, grid):
        """Test that the input model is not modified."""
        apply_uniform_pattern(grid)
        assert (grid.data["rock_type"] == "Waste").all()

    def test_custom_rock_type(self, small_grid):
        """Test assigning another rock type."""
        data = apply_uniform_pattern(small_grid, rock_type="Magnetite").data
        assert (data["rock_type"] == "Magnetite").all()
        assert (data["zone"] == "Zone1").all()

    def test_unknown_rock_type(self, small_grid):
        """Test that an undefined rock type raises ParameterError."""
        with pytest.raises(ParameterError):
            apply_uniform_pattern(small_grid, rock_type="Kimberlite")

    def test_custom_material_table(self, small_grid):
        """Test that a replacement material table is used."""
        materials = DEFAULT_MATERIALS.with_material(
            "Ore_Med", MaterialDefinition(4.0, 2.0, 3.0, 99.0)
        )
        data = apply_uniform_pattern(small_grid, materials=materials).data
        assert (data["density"] == 4.0).all()
        assert (data["econ_value"] == 99.0).all()


class TestLayeredPattern:
    """Tests for apply_layered_pattern."""

    def test_rock_types_are_grade_tiers(self, grid):
        """Test that layered output only uses the grade tiers."""
        data = apply_layered_pattern(grid, seed=1).data
        assert set(data["rock_type"]) <= set(GRADE_TIERS)

    def test_top_waste_bottom_high(self, grid):
        """Test that shallow blocks are Waste and deep blocks Ore_High."""
        data = apply_layered_pattern(grid, seed=7).data
        top = data[data["k"] == 0]
        bottom = data[data["k"] == 9]
        assert (top["rock_type"] == "Waste").mean() > 0.9
        assert (bottom["rock_type"] == "Ore_High").mean() > 0.9

    def test_seed_reproducible(self, grid):
        """Test that the same seed gives the same layering."""
        a = apply_layered_pattern(grid, seed=3).data["rock_type"]
        b = apply_layered_pattern(grid, seed=3).data["rock_type"]
        pd.testing.assert_series_equal(a, b)

    def test_single_layer_grid(self):
        """Test a grid with one layer."""
        model = generate_regular_grid(GridParams(nx=3, ny=3, nz=1))
        data = apply_layered_pattern(model, seed=0).data
        assert len(data) == 9


class TestGradientPattern:
    """Tests for apply_gradient_pattern."""

    def test_rock_types(self, grid):
        """Test that gradient output uses the grade tiers."""
        data = apply_gradient_pattern(grid, seed=11).data
        assert set(data["rock_type"]) <= set(GRADE_TIERS)
        assert "Waste" in set(data["rock_type"])

    def test_seed_reproducible(self, grid):
        """Test reproducibility with a seed."""
        a = apply_gradient_pattern(grid, seed=5).data
        b = apply_gradient_pattern(grid, seed=5).data
        pd.testing.assert_frame_equal(a, b)

    def test_flat_model(self):
        """Test that a single-block model does not divide by zero."""
        data = apply_gradient_pattern(generate_regular_grid(GridParams()), seed=2).data
        assert data["rock_type"].iloc[0] == "Ore_High"


class TestCheckerboardPattern:
    """Tests for apply_checkerboard_pattern."""

    def test_parity(self, small_grid):
        """Test alternation by i + j + k parity."""
        data = apply_checkerboard_pattern(small_grid).data
        even = (data["i"] + data["j"] + data["k"]) % 2 == 0
        assert (data.loc[even, "rock_type"] == "Ore_Med").all()
        assert (data.loc[~even, "rock_type"] == "Waste").all()

    def test_custom_types(self, small_grid):
        """Test alternate rock types."""
        data = apply_checkerboard_pattern(small_grid, even_type="Ore_High", odd_type="Ore_Low").data
        assert set(data["rock_type"]) == {"Ore_High", "Ore_Low"}


class TestRandomPattern:
    """Tests for apply_random_pattern."""

    def test_jitter_bounds(self, grid):
        """Test that jittered properties stay near the material values."""
        data = apply_random_pattern(grid, seed=123).data
        assert set(data["rock_type"]) == set(GRADE_TIERS)
        for rock_type, rows in data.groupby("rock_type"):
            definition = DEFAULT_MATERIALS[rock_type]
            assert (np.abs(rows["density"] - definition.density) <= 0.1 + 1e-12).all()
            ratio = rows["grade_cu"] / definition.grade_cu
            assert ratio.between(0.8, 1.2).all()

    def test_seed_reproducible(self, small_grid):
        """Test reproducibility with a seed."""
        a = apply_random_pattern(small_grid, seed=9).data
        b = apply_random_pattern(small_grid, seed=9).data
        pd.testing.assert_frame_equal(a, b)

    def test_different_seeds_differ(self, grid):
        """Test that different seeds give different models."""
        a = apply_random_pattern(grid, seed=1).data["rock_type"]
        b = apply_random_pattern(grid, seed=2).data["rock_type"]
        assert not a.equals(b)


class TestOreHorizonPattern:
    """Tests for apply_ore_horizon_pattern."""

    def test_band(self, grid):
        """Test that ore blocks lie within the band and everything else is Waste."""
        data = apply_ore_horizon_pattern(grid).data
        z = data["z"]
        center = z.min() + (z.max() - z.min()) * 0.5
        half = (z.max() - z.min()) * 0.1
        in_band = (z >= center - half) & (z <= center + half)
        assert (data.loc[in_band, "rock_type"] == "Ore").all()
        assert (data.loc[~in_band, "rock_type"] == "Waste").all()
        assert in_band.any()

    def test_ore_zone(self, grid):
        """Test that Ore blocks carry the Ore material zone."""
        data = apply_ore_horizon_pattern(grid).data
        assert (data.loc[data["rock_type"] == "Ore", "zone"] == "Zone2").all()
        assert data.loc[data["rock_type"] == "Waste", "zone"].isna().all()

    def test_inclusive_edges(self):
        """Test that blocks exactly on the band edge are Ore."""
        model = generate_regular_grid(GridParams(nz=5))
        # z = -0.5 ... -4.5, band centre -2.5, half thickness 1.0
        data = apply_ore_horizon_pattern(model, thickness_fraction=0.5).data
        assert list(data["rock_type"]) == ["Waste", "Ore", "Ore", "Ore", "Waste"]

    def test_invalid_fraction(self, grid):
        """Test that fractions outside [0, 1] are rejected."""
        with pytest.raises(ParameterError):
            apply_ore_horizon_pattern(grid, center_fraction=1.5)


class TestInclinedVeinPattern:
    """Tests for apply_inclined_vein_pattern."""

    def test_vein_grades(self, grid):
        """Test vein blocks are Ore with grades between 50 % and 100 % of nominal."""
        data = apply_inclined_vein_pattern(grid, seed=4).data
        ore = data[data["rock_type"] == "Ore"]
        assert len(ore) > 0
        nominal = DEFAULT_MATERIALS["Ore"].grade_cu
        assert (ore["grade_cu"] <= nominal + 1e-12).all()
        assert (ore["grade_cu"] > nominal * 0.5 - 1e-12).all()
        assert set(data["rock_type"]) == {"Ore", "Waste"}

    def test_horizontal_plane(self, small_grid):
        """Test a zero-dip vein through a fixed layer."""
        data = apply_inclined_vein_pattern(small_grid, seed=0, strike=0, dip=0, thickness=5.0).data
        per_layer = data.groupby("k")["rock_type"].apply(lambda s: set(s))
        assert all(len(types) == 1 for types in per_layer)

    def test_invalid_thickness(self, small_grid):
        """Test that a non-positive thickness raises ParameterError."""
        with pytest.raises(ParameterError):
            apply_inclined_vein_pattern(small_grid, seed=0, thickness=0.0)


class TestRandomClustersPattern:
    """Tests for apply_random_clusters_pattern."""

    def test_rock_types_and_variation(self, grid):
        """Test that grades are scaled by 0.8-1.2 of the material value."""
        data = apply_random_clusters_pattern(grid, seed=42).data
        assert set(data["rock_type"]) <= set(GRADE_TIERS)
        assert len(set(data["rock_type"])) > 1
        for rock_type, rows in data.groupby("rock_type"):
            ratio = rows["grade_au"] / DEFAULT_MATERIALS[rock_type].grade_au
            assert ratio.between(0.8 - 1e-12, 1.2 + 1e-12).all()

    def test_seed_reproducible(self, grid):
        """Test reproducibility with a seed."""
        a = apply_random_clusters_pattern(grid, seed=42).data
        b = apply_random_clusters_pattern(grid, seed=42).data
        pd.testing.assert_frame_equal(a, b)

    def test_spatially_coherent(self, grid):
        """Test that neighbouring blocks share a rock type more often than not."""
        data = apply_random_clusters_pattern(grid, seed=8).data
        types = data["rock_type"].to_numpy().reshape(20, 20, 10)
        same = (types[1:, :, :] == types[:-1, :, :]).mean()
        assert same > 0.5


class TestApplyMaterialProperties:
    """Tests for apply_material_properties."""

    def test_reapply(self, small_grid):
        """Test that properties follow the current rock type."""
        frame = small_grid.to_dataframe()
        frame.loc[:9, "rock_type"] = "Ore_High"
        data = apply_material_properties(BlockModel(frame)).data
        assert (data.loc[:9, "density"] == 3.5).all()
        assert (data.loc[10:, "density"] == 2.5).all()
        assert (data.loc[10:, "econ_value"] == -15.0).all()

    def test_unknown_rock_type_kept(self, small_grid):
        """Test that undefined rock types keep their values."""
        frame = small_grid.to_dataframe()
        frame.loc[0, "rock_type"] = "Unobtainium"
        frame.loc[0, "density"] = 9.9
        data = apply_material_properties(BlockModel(frame)).data
        assert data.loc[0, "density"] == 9.9

    def test_zone_kept_without_material_zone(self, small_grid):
        """Test that a material without a zone keeps the block zone."""
        frame = small_grid.to_dataframe()
        frame["zone"] = "Core"
        data = apply_material_properties(BlockModel(frame)).data
        assert (data["zone"] == "Core").all()
