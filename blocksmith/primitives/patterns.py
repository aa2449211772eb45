"""Categorical material patterns.

Layer 2: Primitives - Pure operations.

Each pattern takes a :class:`BlockModel` and returns a new model whose rock
type, density, grades, economic value and zone come from a
:class:`MaterialTable`. Randomized patterns draw their shape parameters once
per call from the generator returned by :func:`resolve_rng`.
"""

import logging
from typing import Dict, Iterable, Optional, Sequence, Tuple

import numpy as np
import pandas as pd

from blocksmith.objects.blockmodel import BlockModel
from blocksmith.objects.materials import DEFAULT_MATERIALS, GRADE_TIERS, MaterialTable
from blocksmith.primitives.geometry import (
    average_cell_size,
    plane_distance,
    strike_dip_normal,
)
from blocksmith.primitives.noise import noise3d
from blocksmith.primitives.seeding import SeedLike, resolve_rng
from blocksmith.utils.errors import raise_parameter_error

logger = logging.getLogger(__name__)

LAYER_THRESHOLDS = (0.2, 0.4, 0.7)
CLUSTER_THRESHOLDS = (0.45, 0.55, 0.7)


def _material_columns(
    rock_types: Iterable[str], materials: MaterialTable
) -> Dict[str, np.ndarray]:
    """Look up material properties for each rock type.

    Raises:
        ParameterError: If a rock type is missing from ``materials``.
    """
    types = pd.Series(np.asarray(rock_types, dtype=object), dtype=object)
    for name in types.unique():
        if name not in materials:
            raise_parameter_error(
                "rock_type",
                name,
                valid_values=list(materials),
                constraint="Rock type is not defined in the material table",
            )

    def lookup(field: str) -> np.ndarray:
        table = {name: getattr(materials[name], field) for name in types.unique()}
        return types.map(table).to_numpy(dtype=np.float64)

    zones = {name: materials[name].zone for name in types.unique()}
    return {
        "rock_type": types.to_numpy(dtype=object),
        "density": lookup("density"),
        "grade_cu": lookup("grade_cu"),
        "grade_au": lookup("grade_au"),
        "econ_value": lookup("econ_value"),
        "zone": np.array([zones[name] for name in types], dtype=object),
    }


def _classify(values: np.ndarray, thresholds: Sequence[float], labels: Sequence[str]) -> np.ndarray:
    """Map values to labels: ``labels[n]`` where ``thresholds[n-1] <= v < thresholds[n]``."""
    index = np.searchsorted(np.asarray(thresholds, dtype=np.float64), values, side="right")
    return np.asarray(labels, dtype=object)[index]


def _axes(model: BlockModel) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
    data = model.data
    return (
        data["x"].to_numpy(dtype=np.float64),
        data["y"].to_numpy(dtype=np.float64),
        data["z"].to_numpy(dtype=np.float64),
    )


def apply_material_properties(
    model: BlockModel, materials: MaterialTable = DEFAULT_MATERIALS
) -> BlockModel:
    """Re-apply material properties from each block's current rock type.

    Blocks whose rock type is not in ``materials`` keep their values. A
    material without a zone leaves the block's zone unchanged.

    Args:
        model: Input block model.
        materials: Material table to read properties from.

    Returns:
        New BlockModel.
    """
    frame = model.to_dataframe()
    known = frame["rock_type"].isin(list(materials))
    if known.any():
        columns = _material_columns(frame.loc[known, "rock_type"], materials)
        for name in ("density", "grade_cu", "grade_au", "econ_value"):
            frame.loc[known, name] = columns[name]
        zones = pd.Series(columns["zone"], index=frame.index[known], dtype=object)
        has_zone = zones.notna()
        frame.loc[zones.index[has_zone], "zone"] = zones[has_zone]
    return BlockModel(frame)


def apply_uniform_pattern(
    model: BlockModel,
    rock_type: str = "Ore_Med",
    materials: MaterialTable = DEFAULT_MATERIALS,
) -> BlockModel:
    """Assign one rock type to every block.

    Args:
        model: Input block model.
        rock_type: Rock type to assign. Defaults to 'Ore_Med'.
        materials: Material table.

    Returns:
        New BlockModel.

    Example:
        >>> from blocksmith.objects import GridParams
        >>> from blocksmith.primitives import generate_regular_grid
        >>> from blocksmith.primitives.patterns import apply_uniform_pattern
        >>>
        >>> grid = generate_regular_grid(GridParams(nx=2, ny=2, nz=2))
        >>> set(apply_uniform_pattern(grid).data["rock_type"])
        {'Ore_Med'}
    """
    columns = _material_columns([rock_type] * len(model), materials)
    logger.info(f"Applied uniform pattern ({rock_type}) to {len(model):,} blocks")
    return model.assign(**columns)


def apply_layered_pattern(
    model: BlockModel,
    seed: SeedLike = None,
    materials: MaterialTable = DEFAULT_MATERIALS,
    thresholds: Sequence[float] = LAYER_THRESHOLDS,
) -> BlockModel:
    """Classify blocks by tilted normalized depth.

    Normalized depth runs from 0 at the shallowest centroid to 1 at the
    deepest. A planar tilt of up to ±0.15 rad about each horizontal axis is
    drawn once per call.

    Args:
        model: Input block model.
        seed: Optional seed or generator.
        materials: Material table.
        thresholds: Depth boundaries between Waste, Ore_Low, Ore_Med and
            Ore_High.

    Returns:
        New BlockModel.
    """
    bounds = model.bounds()
    rng = resolve_rng(seed, bounds)
    tilt_x, tilt_y = rng.uniform(-0.15, 0.15, size=2)
    logger.debug(f"Layer tilt: x={tilt_x:.4f} rad, y={tilt_y:.4f} rad")

    x, y, z = _axes(model)
    cx, cy, _ = bounds.center
    if bounds.size_z > 0:
        depth = (z - bounds.max_z) / (bounds.min_z - bounds.max_z)
    else:
        depth = np.zeros_like(z)
    offset_x = (x - cx) / (bounds.size_x or 1.0)
    offset_y = (y - cy) / (bounds.size_y or 1.0)
    tilted = np.clip(depth + offset_x * np.tan(tilt_x) + offset_y * np.tan(tilt_y), 0.0, 1.0)

    rock_types = _classify(tilted, thresholds, GRADE_TIERS)
    logger.info(f"Applied layered pattern to {len(model):,} blocks")
    return model.assign(**_material_columns(rock_types, materials))


def apply_gradient_pattern(
    model: BlockModel,
    seed: SeedLike = None,
    materials: MaterialTable = DEFAULT_MATERIALS,
) -> BlockModel:
    """Classify blocks by weighted radial distance from a randomized centre.

    The centre is offset from the model centroid by up to 20 % of the model
    size per axis. Per-axis weights are drawn from 0.5-1.5 and the thresholds
    from 0.25-0.35, 0.55-0.65 and 0.75-0.85. The closest blocks are Ore_High.

    Args:
        model: Input block model.
        seed: Optional seed or generator.
        materials: Material table.

    Returns:
        New BlockModel.
    """
    bounds = model.bounds()
    rng = resolve_rng(seed, bounds)
    sizes = np.array([bounds.size_x, bounds.size_y, bounds.size_z])
    center = np.array(bounds.center) + rng.uniform(-0.2, 0.2, size=3) * sizes
    weights = rng.uniform(0.5, 1.5, size=3)
    thresholds = (
        rng.uniform(0.25, 0.35),
        rng.uniform(0.55, 0.65),
        rng.uniform(0.75, 0.85),
    )
    logger.debug(
        f"Gradient centre={center.round(3).tolist()}, weights={weights.round(3).tolist()}"
    )

    distance_sq = np.zeros(len(model))
    for values, c, size, weight in zip(_axes(model), center, sizes, weights):
        # Flat axes carry no gradient
        if size > 0:
            distance_sq += (np.abs(values - c) / (size / 2) * weight) ** 2
    distance = np.minimum(np.sqrt(distance_sq), 1.0)

    rock_types = _classify(distance, thresholds, GRADE_TIERS[::-1])
    logger.info(f"Applied gradient pattern to {len(model):,} blocks")
    return model.assign(**_material_columns(rock_types, materials))


def apply_checkerboard_pattern(
    model: BlockModel,
    materials: MaterialTable = DEFAULT_MATERIALS,
    even_type: str = "Ore_Med",
    odd_type: str = "Waste",
) -> BlockModel:
    """Alternate two rock types by the parity of ``i + j + k``."""
    data = model.data
    parity = (
        data["i"].fillna(0).to_numpy(dtype=np.int64)
        + data["j"].fillna(0).to_numpy(dtype=np.int64)
        + data["k"].fillna(0).to_numpy(dtype=np.int64)
    ) % 2
    rock_types = np.where(parity == 0, even_type, odd_type).astype(object)
    logger.info(f"Applied checkerboard pattern to {len(model):,} blocks")
    return model.assign(**_material_columns(rock_types, materials))


def apply_random_pattern(
    model: BlockModel,
    seed: SeedLike = None,
    materials: MaterialTable = DEFAULT_MATERIALS,
) -> BlockModel:
    """Draw a grade tier per block with jittered properties.

    Density is jittered by ±0.1 and grades and economic value are scaled by
    independent factors in 0.8-1.2.

    Args:
        model: Input block model.
        seed: Optional seed or generator.
        materials: Material table.

    Returns:
        New BlockModel.
    """
    rng = resolve_rng(seed, model.bounds())
    n = len(model)
    rock_types = np.asarray(GRADE_TIERS, dtype=object)[rng.integers(0, len(GRADE_TIERS), size=n)]
    columns = _material_columns(rock_types, materials)
    columns["density"] = columns["density"] + (rng.random(n) - 0.5) * 0.2
    columns["grade_cu"] = columns["grade_cu"] * rng.uniform(0.8, 1.2, size=n)
    columns["grade_au"] = columns["grade_au"] * rng.uniform(0.8, 1.2, size=n)
    columns["econ_value"] = columns["econ_value"] * rng.uniform(0.8, 1.2, size=n)
    logger.info(f"Applied random pattern to {n:,} blocks")
    return model.assign(**columns)


def apply_ore_horizon_pattern(
    model: BlockModel,
    materials: MaterialTable = DEFAULT_MATERIALS,
    center_fraction: float = 0.5,
    thickness_fraction: float = 0.2,
) -> BlockModel:
    """Mark a horizontal depth band as 'Ore', everything else as 'Waste'.

    Args:
        model: Input block model.
        materials: Material table.
        center_fraction: Band centre as a fraction of the vertical extent,
            measured up from the deepest centroid.
        thickness_fraction: Band thickness as a fraction of the vertical
            extent. The band edges are inclusive.

    Returns:
        New BlockModel.
    """
    if not 0 <= center_fraction <= 1:
        raise_parameter_error(
            "center_fraction", center_fraction, constraint="Must be between 0 and 1"
        )
    if not 0 <= thickness_fraction <= 1:
        raise_parameter_error(
            "thickness_fraction", thickness_fraction, constraint="Must be between 0 and 1"
        )

    bounds = model.bounds()
    center = bounds.min_z + bounds.size_z * center_fraction
    half = bounds.size_z * thickness_fraction / 2
    z = model.data["z"].to_numpy(dtype=np.float64)
    in_band = (z >= center - half) & (z <= center + half)

    rock_types = np.where(in_band, "Ore", "Waste").astype(object)
    logger.info(
        f"Applied ore horizon pattern: {int(in_band.sum()):,} of {len(model):,} blocks in band"
    )
    return model.assign(**_material_columns(rock_types, materials))


def apply_inclined_vein_pattern(
    model: BlockModel,
    seed: SeedLike = None,
    materials: MaterialTable = DEFAULT_MATERIALS,
    strike: Optional[float] = None,
    dip: Optional[float] = None,
    thickness: Optional[float] = None,
) -> BlockModel:
    """Mark blocks near a randomly oriented plane as 'Ore'.

    Strike is drawn from 0-360°, dip from 30-75°, the plane centre is offset
    by up to 30 % of the model size per axis, and the thickness is 1.5-3.5
    average cell widths. Ore grades decay linearly to 50 % at the vein edge.

    Args:
        model: Input block model.
        seed: Optional seed or generator.
        materials: Material table.
        strike: Optional strike in degrees, overrides the random draw.
        dip: Optional dip in degrees, overrides the random draw.
        thickness: Optional vein half-thickness in model units.

    Returns:
        New BlockModel.
    """
    bounds = model.bounds()
    rng = resolve_rng(seed, bounds)
    sizes = np.array([bounds.size_x, bounds.size_y, bounds.size_z])
    center = np.array(bounds.center) + rng.uniform(-0.3, 0.3, size=3) * sizes
    drawn_strike = rng.uniform(0, 360)
    drawn_dip = rng.uniform(30, 75)
    thickness_factor = rng.uniform(1.5, 3.5)

    strike = drawn_strike if strike is None else strike
    dip = drawn_dip if dip is None else dip
    x, y, z = _axes(model)
    if thickness is None:
        thickness = average_cell_size(x, y, z, tuple(sizes)) * thickness_factor
    if not thickness > 0:
        raise_parameter_error("thickness", thickness, constraint="Must be greater than 0")
    logger.debug(f"Inclined vein strike={strike:.1f}, dip={dip:.1f}, thickness={thickness:.3f}")

    distance = plane_distance(x, y, z, strike_dip_normal(strike, dip), tuple(center))
    in_vein = distance < thickness

    rock_types = np.where(in_vein, "Ore", "Waste").astype(object)
    columns = _material_columns(rock_types, materials)
    factor = np.where(in_vein, 1.0 - distance / thickness * 0.5, 1.0)
    columns["grade_cu"] = columns["grade_cu"] * factor
    columns["grade_au"] = columns["grade_au"] * factor
    logger.info(
        f"Applied inclined vein pattern: {int(in_vein.sum()):,} of {len(model):,} blocks in vein"
    )
    return model.assign(**columns)


def apply_random_clusters_pattern(
    model: BlockModel,
    seed: SeedLike = None,
    materials: MaterialTable = DEFAULT_MATERIALS,
    thresholds: Sequence[float] = CLUSTER_THRESHOLDS,
) -> BlockModel:
    """Classify blocks from two octaves of value noise.

    Args:
        model: Input block model.
        seed: Optional seed or generator.
        materials: Material table.
        thresholds: Noise boundaries between Waste, Ore_Low, Ore_Med and
            Ore_High (exclusive lower bounds).

    Returns:
        New BlockModel.
    """
    bounds = model.bounds()
    rng = resolve_rng(seed, bounds)
    offsets = rng.uniform(0, 10000, size=3)

    x, y, z = _axes(model)
    nx = (x - bounds.min_x) / (bounds.size_x or 1.0) + offsets[0]
    ny = (y - bounds.min_y) / (bounds.size_y or 1.0) + offsets[1]
    nz = (z - bounds.min_z) / (bounds.size_z or 1.0) + offsets[2]

    base = noise3d(nx, ny, nz, 2.0)
    detail = noise3d(nx * 2.3, ny * 2.3, nz * 2.3, 6.0) * 0.25
    value = np.clip(base * 0.75 + detail, 0.0, 1.0)

    # Lower bounds are exclusive: a value equal to a threshold stays in the lower tier
    index = np.searchsorted(np.asarray(thresholds, dtype=np.float64), value, side="left")
    rock_types = np.asarray(GRADE_TIERS, dtype=object)[index]

    columns = _material_columns(rock_types, materials)
    variation = 0.8 + value * 0.4
    for name in ("grade_cu", "grade_au", "econ_value"):
        columns[name] = columns[name] * variation
    logger.info(f"Applied random clusters pattern to {len(model):,} blocks")
    return model.assign(**columns)
