"""Tests for the material table and block model value objects."""

import dataclasses

import numpy as np
import pandas as pd
import pytest

from blocksmith.objects import DEFAULT_MATERIALS, BlockModel, MaterialDefinition
from blocksmith.objects.materials import DEFAULT_COLOR
from blocksmith.utils.errors import ParameterError


class TestMaterialTable:
    """Tests for MaterialTable."""

    def test_known_color(self):
        """Test that a known rock type returns its colour."""
        assert DEFAULT_MATERIALS.color("Ore_High") == 0xFF0000
        assert DEFAULT_MATERIALS.color("WaterSand") == 0x0066CC

    def test_unknown_color(self):
        """Test that an unknown rock type falls back to the default grey."""
        assert DEFAULT_MATERIALS.color("Kimberlite") == DEFAULT_COLOR

    def test_with_material_returns_new_table(self):
        """Test that with_material leaves the source table unchanged."""
        table = DEFAULT_MATERIALS.with_material(
            "Kimberlite", MaterialDefinition(3.3, 0.0, 0.0, 80.0, color=0x123456)
        )
        assert "Kimberlite" in table
        assert "Kimberlite" not in DEFAULT_MATERIALS
        assert table.color("Kimberlite") == 0x123456
        assert len(table) == len(DEFAULT_MATERIALS) + 1

    def test_rejects_negative_density(self):
        """Test that a negative density is rejected."""
        with pytest.raises(ParameterError):
            DEFAULT_MATERIALS.with_material("Bad", MaterialDefinition(-1.0, 0, 0, 0))


class TestBlockModel:
    """Tests for BlockModel immutability."""

    @pytest.fixture
    def model(self):
        """Two-block model."""
        return BlockModel(pd.DataFrame({"x": [5.0, 15.0], "y": [5.0, 5.0], "z": [-5.0, -5.0]}))

    def test_attribute_is_frozen(self, model):
        """Test that the data attribute cannot be rebound."""
        with pytest.raises(dataclasses.FrozenInstanceError):
            model.data = pd.DataFrame()

    def test_to_dataframe_is_copy(self, model):
        """Test that editing the exported frame does not change the model."""
        frame = model.to_dataframe()
        frame.loc[0, "x"] = 999.0
        assert model.data.loc[0, "x"] == 5.0

    def test_assign_returns_new_model(self, model):
        """Test that assign leaves the source model unchanged."""
        updated = model.assign(density=[2.7, 3.1])
        np.testing.assert_allclose(updated.data["density"], [2.7, 3.1])
        assert model.data["density"].isna().all()
