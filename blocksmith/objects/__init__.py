"""Layer 1: Objects - Immutable data representations.

This layer contains only data structures. Only standard library + numpy +
pandas.
"""

from blocksmith.objects.blockmodel import (
    BLOCK_COLUMNS,
    DEFAULT_DENSITY,
    DEFAULT_ROCK_TYPE,
    Block,
    BlockModel,
    ModelBounds,
)
from blocksmith.objects.exportoptions import ExportOptions
from blocksmith.objects.gridparams import GridParams
from blocksmith.objects.materials import (
    DEFAULT_MATERIALS,
    GRADE_TIERS,
    MaterialDefinition,
    MaterialTable,
)

__all__ = [
    "BLOCK_COLUMNS",
    "Block",
    "BlockModel",
    "DEFAULT_DENSITY",
    "DEFAULT_MATERIALS",
    "DEFAULT_ROCK_TYPE",
    "ExportOptions",
    "GRADE_TIERS",
    "GridParams",
    "MaterialDefinition",
    "MaterialTable",
    "ModelBounds",
]
