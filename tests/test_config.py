"""Tests for generation configuration loading."""

import json

import pytest
import yaml

from blocksmith.config import GenerationConfig, config_from_dict, load_config
from blocksmith.objects import DEFAULT_MATERIALS, ExportOptions, GridParams
from blocksmith.utils.errors import ParameterError

CONFIG = {
    "grid": {"x_increment": 30, "y_increment": 30, "z_increment": 30, "nx": 20, "ny": 20, "nz": 10},
    "pattern": "porphyry_ore",
    "seed": 42,
    "pattern_params": {"core_grade_cu": 1.5},
    "export": {"include_indices": True},
}


class TestConfigFromDict:
    """Tests for config_from_dict."""

    def test_full_config(self):
        """Test that every section is parsed."""
        config = config_from_dict(CONFIG)
        assert isinstance(config, GenerationConfig)
        assert config.grid.shape == (20, 20, 10)
        assert config.pattern == "porphyry_ore"
        assert config.seed == 42
        assert config.pattern_params == {"core_grade_cu": 1.5}
        assert config.export == ExportOptions(include_indices=True)

    def test_defaults(self):
        """Test defaults for optional sections."""
        config = config_from_dict({"grid": {"nx": 2}})
        assert config.grid == GridParams(nx=2)
        assert config.pattern == "random_clusters"
        assert config.seed is None
        assert config.export == ExportOptions()
        assert config.materials is DEFAULT_MATERIALS

    def test_legacy_grid_keys(self):
        """Test legacy grid key names."""
        config = config_from_dict({"grid": {"xmOrig": 500, "xInc": 25, "nx": 4}})
        assert config.grid.x_origin == 500
        assert config.grid.x_increment == 25

    def test_material_overrides(self):
        """Test that material overrides merge with the defaults."""
        config = config_from_dict(
            {"grid": {"nx": 2}, "materials": {"Ore_Med": {"density": 3.9}, "Skarn": {
                "density": 3.3, "grade_cu": 0.7, "grade_au": 0.4, "econ_value": 30}}}
        )
        assert config.materials["Ore_Med"].density == 3.9
        assert config.materials["Ore_Med"].grade_cu == DEFAULT_MATERIALS["Ore_Med"].grade_cu
        assert config.materials["Skarn"].econ_value == 30

    def test_incomplete_new_material(self):
        """Test that a new material without all fields is rejected."""
        with pytest.raises(ParameterError):
            config_from_dict({"grid": {"nx": 2}, "materials": {"Skarn": {"density": 3.3}}})

    def test_missing_grid(self):
        """Test that the grid section is required."""
        with pytest.raises(ParameterError):
            config_from_dict({"pattern": "uniform"})

    def test_unknown_key(self):
        """Test that unknown top-level keys are rejected."""
        with pytest.raises(ParameterError):
            config_from_dict({"grid": {"nx": 2}, "colour": "red"})

    def test_unknown_export_option(self):
        """Test that unknown export options are rejected."""
        with pytest.raises(ParameterError):
            config_from_dict({"grid": {"nx": 2}, "export": {"delimiter": ";"}})


class TestLoadConfig:
    """Tests for load_config."""

    def test_yaml(self, tmp_path):
        """Test loading YAML."""
        path = tmp_path / "run.yaml"
        path.write_text(yaml.safe_dump(CONFIG))
        assert load_config(path) == config_from_dict(CONFIG)

    def test_yml_suffix(self, tmp_path):
        """Test the .yml suffix."""
        path = tmp_path / "run.yml"
        path.write_text(yaml.safe_dump(CONFIG))
        assert load_config(str(path)).pattern == "porphyry_ore"

    def test_json(self, tmp_path):
        """Test loading JSON."""
        path = tmp_path / "run.json"
        path.write_text(json.dumps(CONFIG))
        assert load_config(path).seed == 42

    def test_missing_file(self, tmp_path):
        """Test that a missing file raises FileNotFoundError."""
        with pytest.raises(FileNotFoundError):
            load_config(tmp_path / "absent.yaml")

    def test_unsupported_format(self, tmp_path):
        """Test that other suffixes raise ValueError."""
        path = tmp_path / "run.toml"
        path.write_text("grid = {}")
        with pytest.raises(ValueError, match="Unsupported"):
            load_config(path)
