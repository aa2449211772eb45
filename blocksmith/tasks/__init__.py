"""Layer 3: Tasks - User intent translation.

This layer translates user intent into primitive operations.
"""

from blocksmith.tasks.blockmodeltask import (
    LARGE_MODEL_THRESHOLD,
    MAX_BLOCKS,
    MAX_CELLS_PER_AXIS,
    MAX_INCREMENT,
    PATTERN_REGISTRY,
    BlockModelTask,
    PatternKind,
    apply_pattern,
    register_pattern,
    validate_grid_limits,
)

__all__ = [
    "BlockModelTask",
    "LARGE_MODEL_THRESHOLD",
    "MAX_BLOCKS",
    "MAX_CELLS_PER_AXIS",
    "MAX_INCREMENT",
    "PATTERN_REGISTRY",
    "PatternKind",
    "apply_pattern",
    "register_pattern",
    "validate_grid_limits",
]
