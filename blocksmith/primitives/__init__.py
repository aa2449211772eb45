"""Layer 2: Primitives - Pure operations.

This layer contains grid generation, noise, geometry, material patterns,
ore-body synthesis and model statistics. No I/O.
"""

from blocksmith.primitives.grid import (
    GridChunk,
    generate_regular_grid,
    generate_regular_grid_chunked,
    iter_grid_chunks,
)
from blocksmith.primitives.noise import noise3d, smoothstep
from blocksmith.primitives.orebody import (
    DEFAULT_THRESHOLDS,
    EllipsoidParams,
    GradeThresholds,
    PorphyryParams,
    VeinParams,
    classify_grades,
    ellipsoid_grade_factor,
    finalize_grades,
    generate_ellipsoid_ore_body,
    generate_porphyry_ore_body,
    generate_vein_ore_body,
)
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
from blocksmith.primitives.reservoir import SaltDomeParams, generate_salt_dome_reservoir
from blocksmith.primitives.seeding import SeedLike, resolve_rng
from blocksmith.primitives.statistics import (
    FieldSummary,
    ModelStatistics,
    calculate_model_statistics,
)

__all__ = [
    "DEFAULT_THRESHOLDS",
    "EllipsoidParams",
    "FieldSummary",
    "GradeThresholds",
    "GridChunk",
    "ModelStatistics",
    "PorphyryParams",
    "SaltDomeParams",
    "SeedLike",
    "VeinParams",
    "apply_checkerboard_pattern",
    "apply_gradient_pattern",
    "apply_inclined_vein_pattern",
    "apply_layered_pattern",
    "apply_material_properties",
    "apply_ore_horizon_pattern",
    "apply_random_clusters_pattern",
    "apply_random_pattern",
    "apply_uniform_pattern",
    "calculate_model_statistics",
    "classify_grades",
    "ellipsoid_grade_factor",
    "finalize_grades",
    "generate_ellipsoid_ore_body",
    "generate_porphyry_ore_body",
    "generate_regular_grid",
    "generate_regular_grid_chunked",
    "generate_salt_dome_reservoir",
    "generate_vein_ore_body",
    "iter_grid_chunks",
    "noise3d",
    "resolve_rng",
    "smoothstep",
]
