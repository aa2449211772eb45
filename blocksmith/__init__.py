"""BlockSmith: synthetic 3D geological block models.

Layers:
    objects: Immutable grid, block and material values.
    primitives: Grid generation, noise, patterns and ore-body synthesis.
    tasks: Pattern dispatch and model size handling.
    workflows: CSV export, legacy adapter and configuration-driven runs.
"""

from blocksmith.objects import (
    DEFAULT_MATERIALS,
    Block,
    BlockModel,
    GridParams,
    MaterialDefinition,
    MaterialTable,
)
from blocksmith.primitives import (
    calculate_model_statistics,
    generate_regular_grid,
    noise3d,
)
from blocksmith.tasks import BlockModelTask, PatternKind, apply_pattern
from blocksmith.utils.errors import BlockSmithError, DataValidationError, ParameterError
from blocksmith.workflows import (
    ExportOptions,
    blocks_to_csv,
    convert_legacy_blocks,
    run_generation,
)

__version__ = "0.1.0"

__all__ = [
    "Block",
    "BlockModel",
    "BlockModelTask",
    "BlockSmithError",
    "DEFAULT_MATERIALS",
    "DataValidationError",
    "ExportOptions",
    "GridParams",
    "MaterialDefinition",
    "MaterialTable",
    "ParameterError",
    "PatternKind",
    "apply_pattern",
    "blocks_to_csv",
    "calculate_model_statistics",
    "convert_legacy_blocks",
    "generate_regular_grid",
    "noise3d",
    "run_generation",
]
