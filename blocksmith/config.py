"""Generation configuration files.

A configuration describes one generation run: the grid, the pattern with its
parameters, an optional seed, optional material overrides and the CSV export
options. Configurations are read from YAML or JSON.

Example YAML::

    grid:
      x_increment: 30
      y_increment: 30
      z_increment: 30
      nx: 20
      ny: 20
      nz: 10
    pattern: porphyry_ore
    seed: 42
    pattern_params:
      core_grade_cu: 1.5
    export:
      include_indices: true
"""

import json
import logging
from dataclasses import asdict, dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Union

import yaml

from blocksmith.objects.exportoptions import ExportOptions
from blocksmith.objects.gridparams import GridParams
from blocksmith.objects.materials import DEFAULT_MATERIALS, MaterialDefinition, MaterialTable
from blocksmith.primitives.grid import DEFAULT_CHUNK_SIZE
from blocksmith.tasks.blockmodeltask import LARGE_MODEL_THRESHOLD, PatternKind
from blocksmith.utils.errors import raise_parameter_error

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GenerationConfig:
    """Settings of one generation run.

    Attributes:
        grid: Grid parameters.
        pattern: Pattern or ore-body name, default 'random_clusters'.
        seed: Optional seed for randomized patterns.
        pattern_params: Keyword arguments passed to the pattern.
        export: CSV export options.
        materials: Material table used by the patterns.
        chunk_size: Blocks per batch for chunked grid generation.
        large_model_threshold: Block count above which grids are chunked.
    """

    grid: GridParams
    pattern: str = PatternKind.RANDOM_CLUSTERS.value
    seed: Optional[int] = None
    pattern_params: Dict[str, Any] = field(default_factory=dict)
    export: ExportOptions = field(default_factory=ExportOptions)
    materials: MaterialTable = field(default_factory=lambda: DEFAULT_MATERIALS)
    chunk_size: int = DEFAULT_CHUNK_SIZE
    large_model_threshold: int = LARGE_MODEL_THRESHOLD


def _material_overrides(data: Mapping[str, Any]) -> MaterialTable:
    table = DEFAULT_MATERIALS
    for name, values in data.items():
        if isinstance(values, MaterialDefinition):
            definition = values
        else:
            base = table.get(name)
            merged = asdict(base) if base is not None else {}
            merged.update(values)
            try:
                definition = MaterialDefinition(**merged)
            except TypeError as e:
                raise_parameter_error(
                    f"materials.{name}",
                    values,
                    valid_values=[f.name for f in fields(MaterialDefinition)],
                    constraint=str(e),
                )
        table = table.with_material(name, definition)
    return table


def config_from_dict(data: Mapping[str, Any]) -> GenerationConfig:
    """Build a GenerationConfig from a mapping.

    Args:
        data: Mapping with a ``grid`` entry and optional ``pattern``,
            ``seed``, ``pattern_params``, ``export``, ``materials``,
            ``chunk_size`` and ``large_model_threshold`` entries. Grid keys
            may use the legacy ``xmOrig``/``xInc`` names.

    Returns:
        GenerationConfig.

    Raises:
        ParameterError: On unknown keys or invalid values.
    """
    known = {f.name for f in fields(GenerationConfig)}
    unknown = sorted(set(data) - known)
    if unknown:
        raise_parameter_error(
            "config", unknown, valid_values=sorted(known), constraint="Unknown configuration keys"
        )
    if "grid" not in data:
        raise_parameter_error("grid", None, constraint="A grid section is required")

    grid = data["grid"]
    if not isinstance(grid, GridParams):
        grid = GridParams.from_dict(grid or {})

    export = data.get("export") or {}
    if not isinstance(export, ExportOptions):
        valid = {f.name for f in fields(ExportOptions)}
        bad = sorted(set(export) - valid)
        if bad:
            raise_parameter_error(
                "export", bad, valid_values=sorted(valid), constraint="Unknown export options"
            )
        export = ExportOptions(**export)

    materials = data.get("materials") or {}
    if not isinstance(materials, MaterialTable):
        materials = _material_overrides(materials)

    pattern = data.get("pattern", PatternKind.RANDOM_CLUSTERS)
    if isinstance(pattern, PatternKind):
        pattern = pattern.value

    return GenerationConfig(
        grid=grid,
        pattern=str(pattern),
        seed=data.get("seed"),
        pattern_params=dict(data.get("pattern_params") or {}),
        export=export,
        materials=materials,
        chunk_size=int(data.get("chunk_size", DEFAULT_CHUNK_SIZE)),
        large_model_threshold=int(data.get("large_model_threshold", LARGE_MODEL_THRESHOLD)),
    )


def load_config(file_path: Union[str, Path]) -> GenerationConfig:
    """Load a generation configuration from a YAML or JSON file.

    Args:
        file_path: Path to a .yaml, .yml or .json file.

    Returns:
        GenerationConfig.

    Raises:
        FileNotFoundError: If the file doesn't exist.
        ValueError: If the file format is unsupported.
    """
    file_path = Path(file_path)

    if not file_path.exists():
        raise FileNotFoundError(f"Configuration file not found: {file_path}")

    suffix = file_path.suffix.lower()

    with open(file_path) as f:
        if suffix in (".yaml", ".yml"):
            data = yaml.safe_load(f)
        elif suffix == ".json":
            data = json.load(f)
        else:
            raise ValueError(
                f"Unsupported configuration file format: {suffix}. "
                "Use .yaml, .yml, or .json"
            )

    logger.info(f"Loaded configuration from {file_path}")
    return config_from_dict(data or {})
