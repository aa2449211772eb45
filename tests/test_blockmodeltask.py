"""Tests for pattern dispatch and the block model task."""

import pandas as pd
import pytest

from blocksmith.objects import DEFAULT_MATERIALS, GridParams, MaterialDefinition
from blocksmith.primitives.grid import generate_regular_grid
from blocksmith.tasks import (
    PATTERN_REGISTRY,
    BlockModelTask,
    PatternKind,
    apply_pattern,
    register_pattern,
    validate_grid_limits,
)
from blocksmith.utils.errors import ParameterError


@pytest.fixture
def params():
    """30 m grid, 20 x 20 x 10 cells."""
    return GridParams(x_increment=30, y_increment=30, z_increment=30, nx=20, ny=20, nz=10)


@pytest.fixture
def custom_pattern():
    """Register a throwaway pattern and remove it afterwards."""
    register_pattern(
        "all_hematite",
        lambda model, seed, materials, params: model.assign(rock_type="Hematite"),
    )
    yield "all_hematite"
    PATTERN_REGISTRY.pop("all_hematite", None)


class TestApplyPattern:
    """Tests for apply_pattern."""

    def test_all_kinds_registered(self):
        """Test that every PatternKind has an implementation."""
        assert len(PatternKind) == 12
        for kind in PatternKind:
            assert kind.value in PATTERN_REGISTRY

    @pytest.mark.parametrize("kind", list(PatternKind))
    def test_every_kind_runs(self, kind):
        """Test that every pattern returns a model of the same size."""
        grid = generate_regular_grid(
            GridParams(x_increment=10, y_increment=10, z_increment=10, nx=8, ny=8, nz=6)
        )
        result = apply_pattern(grid, kind, seed=1)
        assert len(result) == len(grid)
        assert result.data["rock_type"].notna().all()

    def test_string_and_enum(self, params):
        """Test that names and enum members dispatch identically."""
        grid = generate_regular_grid(params)
        a = apply_pattern(grid, "uniform").data
        b = apply_pattern(grid, PatternKind.UNIFORM).data
        pd.testing.assert_frame_equal(a, b)

    def test_pattern_params(self, params):
        """Test that keyword parameters reach the pattern."""
        grid = generate_regular_grid(params)
        data = apply_pattern(grid, "uniform", rock_type="Ore_Low").data
        assert (data["rock_type"] == "Ore_Low").all()

    def test_ore_body_params(self, params):
        """Test that ore-body parameters build the parameter object."""
        grid = generate_regular_grid(params)
        data = apply_pattern(grid, "vein_ore", strike=90, dip=0, dip_direction=0, width=20).data
        assert (data["rock_type"] != "Waste").any()

    def test_unknown_kind(self, params):
        """Test that an unknown pattern raises ParameterError."""
        grid = generate_regular_grid(GridParams(nx=2))
        with pytest.raises(ParameterError, match="pattern"):
            apply_pattern(grid, "marble_cake")

    def test_unknown_parameter(self):
        """Test that an unexpected parameter raises TypeError."""
        grid = generate_regular_grid(GridParams(nx=2))
        with pytest.raises(TypeError):
            apply_pattern(grid, "uniform", colour="red")

    def test_custom_pattern(self, custom_pattern):
        """Test registering a custom pattern."""
        grid = generate_regular_grid(GridParams(nx=3))
        data = apply_pattern(grid, custom_pattern).data
        assert (data["rock_type"] == "Hematite").all()


class TestValidateGridLimits:
    """Tests for validate_grid_limits."""

    def test_valid(self, params):
        """Test that a normal grid passes."""
        validate_grid_limits(params)

    def test_increment_too_large(self):
        """Test the increment limit."""
        with pytest.raises(ParameterError):
            validate_grid_limits(GridParams(x_increment=20_000))

    def test_too_many_cells(self):
        """Test the per-axis cell limit."""
        with pytest.raises(ParameterError):
            validate_grid_limits(GridParams(nx=1001))

    def test_too_many_blocks(self, params):
        """Test the total block limit."""
        with pytest.raises(ParameterError):
            validate_grid_limits(params, max_blocks=1000)


class TestBlockModelTask:
    """Tests for BlockModelTask."""

    def test_generate_uniform(self, params):
        """Test generating the uniform pattern on the 4000-block grid."""
        model = BlockModelTask().generate(params, pattern="uniform")
        assert len(model) == 4000
        assert (model.data["rock_type"] == "Ore_Med").all()
        assert (model.data["density"] == DEFAULT_MATERIALS["Ore_Med"].density).all()

    def test_default_pattern_is_random_clusters(self, params):
        """Test that the default pattern classifies into grade tiers."""
        model = BlockModelTask().generate(params, seed=42)
        assert set(model.data["rock_type"]) <= {"Waste", "Ore_Low", "Ore_Med", "Ore_High"}

    def test_chunked_path(self, params):
        """Test that large grids are built in chunks with progress."""
        calls = []
        task = BlockModelTask(chunk_size=1000, large_model_threshold=2000)
        model = task.create_grid(params, progress_callback=lambda f, p, t: calls.append(p))
        assert calls == [1000, 2000, 3000, 4000]
        pd.testing.assert_frame_equal(model.data, generate_regular_grid(params).data)

    def test_small_grid_not_chunked(self, params):
        """Test that small grids do not report progress."""
        calls = []
        BlockModelTask().create_grid(params, progress_callback=lambda f, p, t: calls.append(p))
        assert calls == []

    def test_custom_materials(self, params):
        """Test that the task's material table is used."""
        materials = DEFAULT_MATERIALS.with_material("Ore_Med", MaterialDefinition(3.9, 1, 2, 40))
        model = BlockModelTask(materials=materials).generate(params, pattern="uniform")
        assert (model.data["density"] == 3.9).all()

    def test_mapping_params(self):
        """Test that legacy grid keys are accepted."""
        model = BlockModelTask().create_grid({"xInc": 5, "yInc": 5, "zInc": 5, "nx": 2, "ny": 2, "nz": 2})
        assert len(model) == 8

    def test_limit_enforced(self, params):
        """Test that the task rejects models above max_blocks."""
        with pytest.raises(ParameterError):
            BlockModelTask(max_blocks=100).create_grid(params)
