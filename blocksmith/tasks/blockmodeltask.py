"""Block model generation task.

Layer 3: Tasks - User intent translation.

Maps pattern names to pattern and ore-body primitives, enforces model size
limits and switches to chunked grid generation for large models.
"""

import logging
from collections.abc import Callable
from enum import Enum
from typing import Any, Dict, Mapping, Optional, Union

from blocksmith.objects.blockmodel import BlockModel
from blocksmith.objects.gridparams import GridParams
from blocksmith.objects.materials import DEFAULT_MATERIALS, MaterialTable
from blocksmith.primitives.grid import (
    DEFAULT_CHUNK_SIZE,
    ProgressCallback,
    generate_regular_grid,
    generate_regular_grid_chunked,
)
from blocksmith.primitives.orebody import (
    EllipsoidParams,
    PorphyryParams,
    VeinParams,
    generate_ellipsoid_ore_body,
    generate_porphyry_ore_body,
    generate_vein_ore_body,
)
from blocksmith.primitives.patterns import (
    apply_checkerboard_pattern,
    apply_gradient_pattern,
    apply_inclined_vein_pattern,
    apply_layered_pattern,
    apply_ore_horizon_pattern,
    apply_random_clusters_pattern,
    apply_random_pattern,
    apply_uniform_pattern,
)
from blocksmith.primitives.reservoir import SaltDomeParams, generate_salt_dome_reservoir
from blocksmith.primitives.seeding import SeedLike
from blocksmith.utils.errors import raise_parameter_error

logger = logging.getLogger(__name__)

MAX_INCREMENT = 10_000
MAX_CELLS_PER_AXIS = 1_000
MAX_BLOCKS = 100_000_000
LARGE_MODEL_THRESHOLD = 500_000


class PatternKind(str, Enum):
    """Named material patterns and ore-body generators."""

    UNIFORM = "uniform"
    LAYERED = "layered"
    GRADIENT = "gradient"
    CHECKERBOARD = "checkerboard"
    RANDOM = "random"
    ORE_HORIZON = "ore_horizon"
    INCLINED_VEIN = "inclined_vein"
    RANDOM_CLUSTERS = "random_clusters"
    ELLIPSOID_ORE = "ellipsoid_ore"
    VEIN_ORE = "vein_ore"
    PORPHYRY_ORE = "porphyry_ore"
    SALT_DOME = "salt_dome"


# Signature: (model, seed, materials, params) -> BlockModel
PatternFunc = Callable[[BlockModel, SeedLike, MaterialTable, Dict[str, Any]], BlockModel]

# Registry of available patterns, keyed by pattern name
PATTERN_REGISTRY: Dict[str, PatternFunc] = {}


def register_pattern(name: Union[str, PatternKind], func: PatternFunc) -> None:
    """Register a function as a named pattern."""
    key = name.value if isinstance(name, PatternKind) else str(name)
    PATTERN_REGISTRY[key] = func
    logger.debug(f"Registered pattern: {key}")


def _register_default_patterns() -> None:
    """Register the built-in patterns and ore-body generators."""
    register_pattern(
        PatternKind.UNIFORM,
        lambda model, seed, materials, params: apply_uniform_pattern(
            model, materials=materials, **params
        ),
    )
    register_pattern(
        PatternKind.LAYERED,
        lambda model, seed, materials, params: apply_layered_pattern(
            model, seed=seed, materials=materials, **params
        ),
    )
    register_pattern(
        PatternKind.GRADIENT,
        lambda model, seed, materials, params: apply_gradient_pattern(
            model, seed=seed, materials=materials, **params
        ),
    )
    register_pattern(
        PatternKind.CHECKERBOARD,
        lambda model, seed, materials, params: apply_checkerboard_pattern(
            model, materials=materials, **params
        ),
    )
    register_pattern(
        PatternKind.RANDOM,
        lambda model, seed, materials, params: apply_random_pattern(
            model, seed=seed, materials=materials, **params
        ),
    )
    register_pattern(
        PatternKind.ORE_HORIZON,
        lambda model, seed, materials, params: apply_ore_horizon_pattern(
            model, materials=materials, **params
        ),
    )
    register_pattern(
        PatternKind.INCLINED_VEIN,
        lambda model, seed, materials, params: apply_inclined_vein_pattern(
            model, seed=seed, materials=materials, **params
        ),
    )
    register_pattern(
        PatternKind.RANDOM_CLUSTERS,
        lambda model, seed, materials, params: apply_random_clusters_pattern(
            model, seed=seed, materials=materials, **params
        ),
    )
    register_pattern(
        PatternKind.ELLIPSOID_ORE,
        lambda model, seed, materials, params: generate_ellipsoid_ore_body(
            model, EllipsoidParams(**params), seed=seed
        ),
    )
    register_pattern(
        PatternKind.VEIN_ORE,
        lambda model, seed, materials, params: generate_vein_ore_body(
            model, VeinParams(**params)
        ),
    )
    register_pattern(
        PatternKind.PORPHYRY_ORE,
        lambda model, seed, materials, params: generate_porphyry_ore_body(
            model, PorphyryParams(**params), seed=seed
        ),
    )
    register_pattern(
        PatternKind.SALT_DOME,
        lambda model, seed, materials, params: generate_salt_dome_reservoir(
            model, SaltDomeParams(**params), seed=seed, materials=materials
        ),
    )


_register_default_patterns()


def apply_pattern(
    model: BlockModel,
    kind: Union[str, PatternKind],
    seed: SeedLike = None,
    materials: MaterialTable = DEFAULT_MATERIALS,
    **params: Any,
) -> BlockModel:
    """Apply a named pattern or ore-body generator to a model.

    Args:
        model: Input block model.
        kind: Pattern name or PatternKind.
        seed: Optional seed or generator for randomized patterns.
        materials: Material table.
        **params: Pattern-specific parameters.

    Returns:
        New BlockModel.

    Raises:
        ParameterError: If ``kind`` is not registered.
        TypeError: If ``params`` contains names the pattern does not accept.

    Example:
        >>> from blocksmith.objects import GridParams
        >>> from blocksmith.primitives import generate_regular_grid
        >>> from blocksmith.tasks import apply_pattern
        >>>
        >>> grid = generate_regular_grid(GridParams(nx=10, ny=10, nz=5))
        >>> model = apply_pattern(grid, "porphyry_ore", seed=42)
    """
    key = kind.value if isinstance(kind, PatternKind) else str(kind)
    func = PATTERN_REGISTRY.get(key)
    if func is None:
        raise_parameter_error(
            "pattern",
            key,
            valid_values=sorted(PATTERN_REGISTRY),
            suggestion="Register custom patterns with register_pattern()",
        )
    return func(model, seed, materials, dict(params))


def validate_grid_limits(params: GridParams, max_blocks: int = MAX_BLOCKS) -> None:
    """Check a grid against the supported size limits.

    Raises:
        ParameterError: If an increment exceeds 10,000, an axis has more than
            1,000 cells or the model exceeds ``max_blocks``.
    """
    for name, value in zip(("x_increment", "y_increment", "z_increment"), params.increments):
        if value > MAX_INCREMENT:
            raise_parameter_error(
                name, value, constraint=f"Cell increments must not exceed {MAX_INCREMENT:,}"
            )
    for name, value in zip(("nx", "ny", "nz"), params.shape):
        if value > MAX_CELLS_PER_AXIS:
            raise_parameter_error(
                name,
                value,
                constraint=f"At most {MAX_CELLS_PER_AXIS:,} cells per axis are supported",
            )
    if params.n_blocks > max_blocks:
        raise_parameter_error(
            "n_blocks",
            params.n_blocks,
            constraint=f"Models are limited to {max_blocks:,} blocks",
            suggestion="Increase the cell size or reduce the cell counts",
        )


class BlockModelTask:
    """Task for block model generation.

    Translates user intent for block model generation into primitive calls.
    """

    def __init__(
        self,
        materials: MaterialTable = DEFAULT_MATERIALS,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
        large_model_threshold: int = LARGE_MODEL_THRESHOLD,
        max_blocks: int = MAX_BLOCKS,
    ):
        """Initialize BlockModelTask.

        Args:
            materials: Material table used by the patterns.
            chunk_size: Blocks per batch when generating large grids,
                default 10,000.
            large_model_threshold: Block count above which the grid is built
                in chunks, default 500,000.
            max_blocks: Largest model accepted, default 100,000,000.
        """
        self.materials = materials
        self.chunk_size = chunk_size
        self.large_model_threshold = large_model_threshold
        self.max_blocks = max_blocks

    def create_grid(
        self,
        params: Union[GridParams, Mapping],
        progress_callback: Optional[ProgressCallback] = None,
    ) -> BlockModel:
        """Create the regular grid for ``params``.

        Args:
            params: GridParams or a mapping accepted by GridParams.from_dict.
            progress_callback: Optional ``(fraction, processed, total)``
                callable, only called on the chunked path.

        Returns:
            BlockModel of Waste blocks.
        """
        if not isinstance(params, GridParams):
            params = GridParams.from_dict(params)
        validate_grid_limits(params, self.max_blocks)

        if params.n_blocks > self.large_model_threshold:
            logger.info(
                f"Large model ({params.n_blocks:,} blocks), generating in chunks of "
                f"{self.chunk_size:,}"
            )
            return generate_regular_grid_chunked(params, self.chunk_size, progress_callback)
        return generate_regular_grid(params)

    def generate(
        self,
        params: Union[GridParams, Mapping],
        pattern: Union[str, PatternKind] = PatternKind.RANDOM_CLUSTERS,
        seed: SeedLike = None,
        progress_callback: Optional[ProgressCallback] = None,
        **pattern_params: Any,
    ) -> BlockModel:
        """Create a grid and apply one pattern to it.

        Args:
            params: Grid parameters.
            pattern: Pattern name or PatternKind.
            seed: Optional seed for randomized patterns.
            progress_callback: Optional grid progress callable.
            **pattern_params: Pattern-specific parameters.

        Returns:
            Generated BlockModel.
        """
        grid = self.create_grid(params, progress_callback)
        return apply_pattern(grid, pattern, seed=seed, materials=self.materials, **pattern_params)
