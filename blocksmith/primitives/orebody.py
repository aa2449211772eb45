"""Ore-body synthesis algorithms.

Layer 2: Primitives - Pure operations.

Each generator computes continuous Cu and Au grades from a geometric model,
then :func:`finalize_grades` attenuates sub-cutoff grades, derives the rock
type from grade thresholds and recomputes the economic value.

Grades:
    grade_cu is in percent, grade_au in g/t.
"""

import logging
from dataclasses import dataclass, fields
from typing import Any, Dict, Optional, Tuple

import numpy as np

from blocksmith.objects.blockmodel import DEFAULT_DENSITY, BlockModel
from blocksmith.primitives.geometry import (
    average_cell_size,
    ellipsoid_distance,
    estimate_cell_size,
    plane_axes,
    rotate_azimuth_plunge,
)
from blocksmith.primitives.noise import noise3d, smoothstep
from blocksmith.primitives.seeding import SeedLike, resolve_rng
from blocksmith.utils.errors import check_non_negative, check_positive, raise_parameter_error

logger = logging.getLogger(__name__)

BACKGROUND_FACTOR = 0.1
WASTE_VALUE = -15.0
PROCESSING_COST = 10.0
CU_VALUE_FACTOR = 20.0
AU_VALUE_FACTOR = 50.0


@dataclass(frozen=True)
class GradeThresholds:
    """Cu/Au cutoffs for each ore tier (a tier applies if either grade passes).

    The low tier doubles as the economic cutoff: blocks below both low
    cutoffs are attenuated to background grades.
    """

    high_cu: float = 1.0
    high_au: float = 2.5
    med_cu: float = 0.5
    med_au: float = 1.0
    low_cu: float = 0.3
    low_au: float = 0.5


DEFAULT_THRESHOLDS = GradeThresholds()


def _validate_optional(params: Any, positive: Tuple[str, ...], non_negative: Tuple[str, ...] = ()) -> None:
    for name in positive:
        check_positive(name, getattr(params, name))
    for name in non_negative:
        check_non_negative(name, getattr(params, name))


def _pick(value: Optional[float], default: float) -> float:
    return float(default) if value is None else float(value)


def _model_noise(model: BlockModel, frequency: float) -> np.ndarray:
    """Noise sampled at block centroids scaled by ``frequency / max_size``."""
    scale = frequency / model.bounds().max_size
    data = model.data
    return noise3d(
        data["x"].to_numpy(dtype=np.float64) * scale,
        data["y"].to_numpy(dtype=np.float64) * scale,
        data["z"].to_numpy(dtype=np.float64) * scale,
        1.0,
    )


def classify_grades(
    grade_cu: np.ndarray,
    grade_au: np.ndarray,
    thresholds: GradeThresholds = DEFAULT_THRESHOLDS,
) -> np.ndarray:
    """Rock type from grades: Ore_High, Ore_Med, Ore_Low or Waste."""
    grade_cu = np.asarray(grade_cu, dtype=np.float64)
    grade_au = np.asarray(grade_au, dtype=np.float64)
    return np.select(
        [
            (grade_cu >= thresholds.high_cu) | (grade_au >= thresholds.high_au),
            (grade_cu >= thresholds.med_cu) | (grade_au >= thresholds.med_au),
            (grade_cu >= thresholds.low_cu) | (grade_au >= thresholds.low_au),
        ],
        ["Ore_High", "Ore_Med", "Ore_Low"],
        default="Waste",
    ).astype(object)


def _finalize_columns(
    model: BlockModel,
    grade_cu: np.ndarray,
    grade_au: np.ndarray,
    thresholds: GradeThresholds,
    processing_cost: float,
) -> Tuple[Dict[str, np.ndarray], np.ndarray]:
    grade_cu = np.asarray(grade_cu, dtype=np.float64)
    grade_au = np.asarray(grade_au, dtype=np.float64)

    background = (grade_cu < thresholds.low_cu) & (grade_au < thresholds.low_au)
    grade_cu = np.maximum(np.where(background, grade_cu * BACKGROUND_FACTOR, grade_cu), 0.0)
    grade_au = np.maximum(np.where(background, grade_au * BACKGROUND_FACTOR, grade_au), 0.0)

    rock_types = classify_grades(grade_cu, grade_au, thresholds)
    econ = np.where(
        rock_types == "Waste",
        WASTE_VALUE,
        grade_cu * CU_VALUE_FACTOR + grade_au * AU_VALUE_FACTOR - processing_cost,
    )

    density = model.data["density"].to_numpy(dtype=np.float64)
    density = np.where(np.isfinite(density) & (density > 0), density, DEFAULT_DENSITY)

    columns = {
        "rock_type": rock_types,
        "grade_cu": grade_cu,
        "grade_au": grade_au,
        "density": density,
        "econ_value": econ,
    }
    return columns, background


def finalize_grades(
    model: BlockModel,
    grade_cu: np.ndarray,
    grade_au: np.ndarray,
    thresholds: GradeThresholds = DEFAULT_THRESHOLDS,
    processing_cost: float = PROCESSING_COST,
) -> BlockModel:
    """Apply the cutoff, classification and economic value to raw grades.

    - Blocks with Cu below ``low_cu`` and Au below ``low_au`` have both
      grades multiplied by 0.1.
    - Rock type is derived from ``thresholds``.
    - Ore econ value is ``Cu*20 + Au*50 - processing_cost``, waste is -15.
    - Grades are clipped at 0 and non-positive densities become 2.5.

    Args:
        model: Block model the grades belong to.
        grade_cu: Raw Cu grades, one per block.
        grade_au: Raw Au grades, one per block.
        thresholds: Classification cutoffs.
        processing_cost: Cost subtracted from ore revenue.

    Returns:
        New BlockModel.
    """
    columns, _ = _finalize_columns(model, grade_cu, grade_au, thresholds, processing_cost)
    return model.assign(**columns)


def ellipsoid_grade_factor(distance: np.ndarray, decay: float) -> np.ndarray:
    """Gaussian-like decay ``exp(-decay * d²)`` inside the unit ellipsoid, 0 outside."""
    distance = np.asarray(distance, dtype=np.float64)
    return np.where(distance < 1.0, np.exp(-decay * distance * distance), 0.0)


def _log_summary(name: str, model: BlockModel) -> None:
    ore = int((model.data["rock_type"] != "Waste").sum())
    logger.info(f"Generated {name}: {ore:,} of {len(model):,} blocks above cutoff")


@dataclass(frozen=True)
class EllipsoidParams:
    """Parameters for :func:`generate_ellipsoid_ore_body`.

    Any field left as None is drawn from its default range when the body is
    generated.

    Attributes:
        center_x, center_y, center_z: Body centre (default 40-60 % of the
            range on each axis).
        radius_x, radius_y, radius_z: Semi-axes (default 15-25 % of the
            model size, never below one cell).
        plunge_angle: Plunge in degrees (default 0-60).
        plunge_azimuth: Azimuth in degrees (default 0-360).
        max_grade_cu: Peak Cu grade (default 0.8-1.8 %).
        max_grade_au: Peak Au grade (default 1.5-4.0 g/t). Ignored when
            ``cu_au_ratio`` is positive.
        grade_decay: Decay rate k in ``exp(-k d²)`` (default 0.2-0.5).
        cu_au_ratio: Au is derived as Cu / ratio (default 30-80).
        grade_variation: Noise jitter amplitude (default 0.05-0.15).
    """

    center_x: Optional[float] = None
    center_y: Optional[float] = None
    center_z: Optional[float] = None
    radius_x: Optional[float] = None
    radius_y: Optional[float] = None
    radius_z: Optional[float] = None
    plunge_angle: Optional[float] = None
    plunge_azimuth: Optional[float] = None
    max_grade_cu: Optional[float] = None
    max_grade_au: Optional[float] = None
    grade_decay: Optional[float] = None
    cu_au_ratio: Optional[float] = None
    grade_variation: Optional[float] = None

    def __post_init__(self) -> None:
        """Validate EllipsoidParams."""
        _validate_optional(
            self,
            positive=("radius_x", "radius_y", "radius_z"),
            non_negative=("max_grade_cu", "max_grade_au", "grade_decay", "cu_au_ratio", "grade_variation"),
        )


def _resolve_ellipsoid(params: EllipsoidParams, model: BlockModel, rng: np.random.Generator) -> Dict[str, float]:
    bounds = model.bounds()
    data = model.data
    # Every value is drawn so the stream does not depend on which fields are set
    center = rng.uniform(0.4, 0.6, size=3)
    radius = rng.uniform(0.15, 0.25, size=3)
    drawn = {
        "plunge_angle": rng.uniform(0, 60),
        "plunge_azimuth": rng.uniform(0, 360),
        "max_grade_cu": rng.uniform(0.8, 1.8),
        "max_grade_au": rng.uniform(1.5, 4.0),
        "grade_decay": rng.uniform(0.2, 0.5),
        "cu_au_ratio": rng.uniform(30, 80),
        "grade_variation": rng.uniform(0.05, 0.15),
    }
    mins = (bounds.min_x, bounds.min_y, bounds.min_z)
    sizes = (bounds.size_x, bounds.size_y, bounds.size_z)
    for n, axis in enumerate("xyz"):
        cell = estimate_cell_size(data[axis].to_numpy(dtype=np.float64), 1.0)
        drawn[f"center_{axis}"] = mins[n] + sizes[n] * center[n]
        drawn[f"radius_{axis}"] = max(sizes[n] * radius[n], cell)
    return {f.name: _pick(getattr(params, f.name), drawn[f.name]) for f in fields(params)}


def generate_ellipsoid_ore_body(
    model: BlockModel,
    params: Optional[EllipsoidParams] = None,
    seed: SeedLike = None,
    thresholds: GradeThresholds = DEFAULT_THRESHOLDS,
) -> BlockModel:
    """Generate a plunging ellipsoidal ore body.

    Block offsets from the centre are rotated by azimuth about the vertical
    axis, then by plunge about the rotated horizontal axis. Cu decays as
    ``exp(-k d²)`` with the ellipsoid distance ``d`` and is zero outside the
    unit ellipsoid. Au is Cu / ratio when the ratio is positive. Grades are
    jittered by ``1 + (noise - 0.5) * grade_variation``.

    Args:
        model: Input block model.
        params: Optional EllipsoidParams. Unset fields are randomized.
        seed: Optional seed or generator.
        thresholds: Classification cutoffs.

    Returns:
        New BlockModel with grades, rock types and econ values.

    Example:
        >>> from blocksmith.objects import GridParams
        >>> from blocksmith.primitives import generate_regular_grid
        >>> from blocksmith.primitives.orebody import generate_ellipsoid_ore_body
        >>>
        >>> grid = generate_regular_grid(GridParams(x_increment=10, y_increment=10,
        ...                                         z_increment=10, nx=20, ny=20, nz=10))
        >>> body = generate_ellipsoid_ore_body(grid, seed=42)
        >>> len(body) == len(grid)
        True
    """
    params = params or EllipsoidParams()
    rng = resolve_rng(seed, model.bounds())
    p = _resolve_ellipsoid(params, model, rng)
    logger.debug(f"Ellipsoid parameters: {p}")

    data = model.data
    dx = data["x"].to_numpy(dtype=np.float64) - p["center_x"]
    dy = data["y"].to_numpy(dtype=np.float64) - p["center_y"]
    dz = data["z"].to_numpy(dtype=np.float64) - p["center_z"]
    rx, ry, rz = rotate_azimuth_plunge(dx, dy, dz, p["plunge_azimuth"], p["plunge_angle"])
    distance = ellipsoid_distance(rx, ry, rz, p["radius_x"], p["radius_y"], p["radius_z"])

    factor = ellipsoid_grade_factor(distance, p["grade_decay"])
    variation = 1.0 + (_model_noise(model, 1.0) - 0.5) * p["grade_variation"]

    grade_cu = p["max_grade_cu"] * factor * variation
    if p["cu_au_ratio"] > 0:
        grade_au = grade_cu / p["cu_au_ratio"]
    else:
        grade_au = p["max_grade_au"] * factor * variation

    result = finalize_grades(model, grade_cu, grade_au, thresholds)
    _log_summary("ellipsoid ore body", result)
    return result


@dataclass(frozen=True)
class VeinParams:
    """Parameters for :func:`generate_vein_ore_body`.

    Attributes:
        strike: Strike in degrees from +X toward +Y.
        dip: Dip in degrees below horizontal.
        dip_direction: Azimuth of the dip vector in degrees.
        vein_x, vein_y, vein_z: Point on the central vein (default model
            centre).
        strike_length: Extent along strike (default 80 % of X size).
        dip_length: Extent down dip (default 80 % of Z size).
        width: Half-width of the mineralized zone (default 5 % of the
            smaller horizontal size, or one cell).
        max_grade_cu: Peak Cu grade.
        max_grade_au: Peak Au grade.
        num_veins: Number of parallel veins.
        vein_spacing: Distance between veins (default three widths).
    """

    strike: float = 45.0
    dip: float = 45.0
    dip_direction: float = 90.0
    vein_x: Optional[float] = None
    vein_y: Optional[float] = None
    vein_z: Optional[float] = None
    strike_length: Optional[float] = None
    dip_length: Optional[float] = None
    width: Optional[float] = None
    max_grade_cu: float = 1.2
    max_grade_au: float = 2.5
    num_veins: int = 1
    vein_spacing: Optional[float] = None

    def __post_init__(self) -> None:
        """Validate VeinParams."""
        _validate_optional(
            self,
            positive=("width",),
            non_negative=("strike_length", "dip_length", "max_grade_cu", "max_grade_au", "vein_spacing"),
        )
        if isinstance(self.num_veins, bool) or not isinstance(self.num_veins, int) or self.num_veins < 1:
            raise_parameter_error(
                "num_veins", self.num_veins, constraint="Must be a positive integer"
            )


def generate_vein_ore_body(
    model: BlockModel,
    params: Optional[VeinParams] = None,
    thresholds: GradeThresholds = DEFAULT_THRESHOLDS,
) -> BlockModel:
    """Generate one or more parallel planar veins.

    Veins are offset from each other along the horizontal direction
    perpendicular to strike. A block is mineralized by a vein only when its
    distance to the vein plane is below the width and its along-strike and
    down-dip coordinates fall within half the strike and dip lengths.
    Grades decay as ``exp(-2 (d / width)²)``; the strongest vein wins and a
    ±10 % noise jitter is applied.

    Args:
        model: Input block model.
        params: Optional VeinParams. Defaults are deterministic.
        thresholds: Classification cutoffs.

    Returns:
        New BlockModel.

    Raises:
        ParameterError: If strike, dip and dip direction do not define a
            plane.
    """
    params = params or VeinParams()
    bounds = model.bounds()
    cx, cy, cz = bounds.center
    data = model.data
    x = data["x"].to_numpy(dtype=np.float64)
    y = data["y"].to_numpy(dtype=np.float64)
    z = data["z"].to_numpy(dtype=np.float64)

    vein_x = _pick(params.vein_x, cx)
    vein_y = _pick(params.vein_y, cy)
    vein_z = _pick(params.vein_z, cz)
    strike_length = _pick(params.strike_length, bounds.size_x * 0.8)
    dip_length = _pick(params.dip_length, bounds.size_z * 0.8)
    width = params.width
    if width is None:
        width = min(bounds.size_x, bounds.size_y) * 0.05
        if width <= 0:
            width = average_cell_size(x, y, z, (bounds.size_x, bounds.size_y, bounds.size_z))
    spacing = _pick(params.vein_spacing, width * 3)

    strike_vec, dip_vec, normal = plane_axes(params.strike, params.dip, params.dip_direction)
    offset_angle = np.radians(params.strike) + np.pi / 2

    best = np.zeros(len(model))
    for v in range(params.num_veins):
        offset = (v - (params.num_veins - 1) / 2) * spacing
        px = vein_x + offset * np.cos(offset_angle)
        py = vein_y + offset * np.sin(offset_angle)

        to_x, to_y, to_z = x - px, y - py, z - vein_z
        distance = np.abs(to_x * normal[0] + to_y * normal[1] + to_z * normal[2])
        along_strike = to_x * strike_vec[0] + to_y * strike_vec[1]
        down_dip = to_x * dip_vec[0] + to_y * dip_vec[1] + to_z * dip_vec[2]

        inside = (
            (np.abs(along_strike) < strike_length / 2)
            & (np.abs(down_dip) < dip_length / 2)
            & (distance < width)
        )
        factor = np.where(inside, np.exp(-2.0 * (distance / width) ** 2), 0.0)
        best = np.maximum(best, factor)

    variation = 1.0 + (_model_noise(model, 2.0) - 0.5) * 0.2
    grade_cu = params.max_grade_cu * best * variation
    grade_au = params.max_grade_au * best * variation

    result = finalize_grades(model, grade_cu, grade_au, thresholds)
    _log_summary(f"vein ore body ({params.num_veins} veins)", result)
    return result


@dataclass(frozen=True)
class PorphyryParams:
    """Parameters for :func:`generate_porphyry_ore_body`.

    Unset fields are drawn from the default ranges below when the body is
    generated. Radii are never smaller than the minimum zone sizes (5, 10
    and 15 cell widths, or 5, 10 and 15 % of the smallest model extent).

    Attributes:
        center_x, center_y, center_z: Intrusion centre (40-60 % of the X and
            Y ranges, 35-65 % of the Z range).
        core_radius_x/y/z: Core semi-axes (8-16 % horizontally, 15-25 %
            vertically).
        shell_radius_x/y/z: Shell semi-axes (20-30 %, 25-35 %).
        halo_radius_x/y/z: Halo semi-axes (30-40 %, 25-35 %).
        core_grade_cu, core_grade_au: Core grades (0.8-1.6 %, 2.0-4.0 g/t).
        shell_grade_cu, shell_grade_au: Shell grades (0.4-0.8 %, 1.0-2.0 g/t).
        halo_grade_cu, halo_grade_au: Halo grades (0.2-0.4 %, 0.4-0.8 g/t).
        vertical_gradient: Grade increase per 1000 units of depth (0.05-0.15).
        horizontal_gradient: Grade loss toward the halo rim (0.3-0.7).
        enrichment_depth: Depth of the supergene blanket (50-150).
        enrichment_factor: Multiplier at the surface (1.5-2.5).
        boundary_irregularity: Noise amplitude on zone distances (0.10-0.25).
        local_variation: Fine-scale noise amplitude (0.10-0.20).
        structural_influence: Strength of the fault boost (0.05-0.20).
        fault_strike: Strike of the vertical fault trace in degrees (0-360).
        fault_offset: Distance from the centre to the fault trace (30 % of
            the larger horizontal size).
        fault_radius: Distance over which the boost fades out (same default).
    """

    center_x: Optional[float] = None
    center_y: Optional[float] = None
    center_z: Optional[float] = None
    core_radius_x: Optional[float] = None
    core_radius_y: Optional[float] = None
    core_radius_z: Optional[float] = None
    shell_radius_x: Optional[float] = None
    shell_radius_y: Optional[float] = None
    shell_radius_z: Optional[float] = None
    halo_radius_x: Optional[float] = None
    halo_radius_y: Optional[float] = None
    halo_radius_z: Optional[float] = None
    core_grade_cu: Optional[float] = None
    core_grade_au: Optional[float] = None
    shell_grade_cu: Optional[float] = None
    shell_grade_au: Optional[float] = None
    halo_grade_cu: Optional[float] = None
    halo_grade_au: Optional[float] = None
    vertical_gradient: Optional[float] = None
    horizontal_gradient: Optional[float] = None
    enrichment_depth: Optional[float] = None
    enrichment_factor: Optional[float] = None
    boundary_irregularity: Optional[float] = None
    local_variation: Optional[float] = None
    structural_influence: Optional[float] = None
    fault_strike: Optional[float] = None
    fault_offset: Optional[float] = None
    fault_radius: Optional[float] = None

    def __post_init__(self) -> None:
        """Validate PorphyryParams."""
        radii = tuple(
            f"{zone}_radius_{axis}" for zone in ("core", "shell", "halo") for axis in "xyz"
        )
        grades = tuple(
            f"{zone}_grade_{metal}" for zone in ("core", "shell", "halo") for metal in ("cu", "au")
        )
        _validate_optional(
            self,
            positive=radii + ("enrichment_depth", "fault_radius"),
            non_negative=grades
            + (
                "horizontal_gradient",
                "enrichment_factor",
                "boundary_irregularity",
                "local_variation",
                "structural_influence",
                "fault_offset",
            ),
        )


def _resolve_porphyry(params: PorphyryParams, model: BlockModel, rng: np.random.Generator) -> Dict[str, float]:
    bounds = model.bounds()
    data = model.data
    sizes = (bounds.size_x, bounds.size_y, bounds.size_z)
    cell = average_cell_size(
        data["x"].to_numpy(dtype=np.float64),
        data["y"].to_numpy(dtype=np.float64),
        data["z"].to_numpy(dtype=np.float64),
        sizes,
    )
    smallest = min(sizes)
    min_core = max(cell * 5, smallest * 0.05)
    min_shell = max(cell * 10, smallest * 0.10)
    min_halo = max(cell * 15, smallest * 0.15)

    center = (
        bounds.min_x + bounds.size_x * rng.uniform(0.4, 0.6),
        bounds.min_y + bounds.size_y * rng.uniform(0.4, 0.6),
        bounds.min_z + bounds.size_z * rng.uniform(0.35, 0.65),
    )
    core_base = (rng.uniform(0.08, 0.16), rng.uniform(0.08, 0.16), rng.uniform(0.15, 0.25))
    shell_base = (rng.uniform(0.20, 0.30), rng.uniform(0.20, 0.30), rng.uniform(0.25, 0.35))
    halo_base = (rng.uniform(0.30, 0.40), rng.uniform(0.30, 0.40), rng.uniform(0.25, 0.35))
    drawn = {
        "core_grade_cu": rng.uniform(0.8, 1.6),
        "core_grade_au": rng.uniform(2.0, 4.0),
        "shell_grade_cu": rng.uniform(0.4, 0.8),
        "shell_grade_au": rng.uniform(1.0, 2.0),
        "halo_grade_cu": rng.uniform(0.2, 0.4),
        "halo_grade_au": rng.uniform(0.4, 0.8),
        "vertical_gradient": rng.uniform(0.05, 0.15),
        "horizontal_gradient": rng.uniform(0.3, 0.7),
        "enrichment_depth": rng.uniform(50, 150),
        "enrichment_factor": rng.uniform(1.5, 2.5),
        "boundary_irregularity": rng.uniform(0.10, 0.25),
        "local_variation": rng.uniform(0.10, 0.20),
        "structural_influence": rng.uniform(0.05, 0.20),
        "fault_strike": rng.uniform(0, 360),
        "fault_offset": max(bounds.size_x, bounds.size_y) * 0.3,
        "fault_radius": max(bounds.size_x, bounds.size_y) * 0.3 or 1.0,
    }

    resolved: Dict[str, float] = {}
    for n, axis in enumerate("xyz"):
        resolved[f"center_{axis}"] = _pick(getattr(params, f"center_{axis}"), center[n])

    # Core is taller than wide; each zone encloses the previous one
    growth = {"shell": (1.5, 1.5, 1.3), "halo": (1.3, 1.3, 1.1)}
    for n, axis in enumerate("xyz"):
        core_min = min_core * 1.5 if axis == "z" else min_core
        core = _pick(getattr(params, f"core_radius_{axis}"), max(core_min, sizes[n] * core_base[n]))
        shell = _pick(
            getattr(params, f"shell_radius_{axis}"),
            max(min_shell, core * growth["shell"][n], sizes[n] * shell_base[n]),
        )
        halo = _pick(
            getattr(params, f"halo_radius_{axis}"),
            max(min_halo, shell * growth["halo"][n], sizes[n] * halo_base[n]),
        )
        resolved[f"core_radius_{axis}"] = core
        resolved[f"shell_radius_{axis}"] = shell
        resolved[f"halo_radius_{axis}"] = halo

    for name, value in drawn.items():
        resolved[name] = _pick(getattr(params, name), value)
    return resolved


def _zone_blend(inner: np.ndarray, outer: np.ndarray) -> np.ndarray:
    """Smoothstep weight from the inner boundary (0) to the outer boundary (1).

    ``inner`` and ``outer`` are the block's ellipsoid distances to the inner
    and outer zone. Along a ray their ratio is constant, so the position
    between the two boundaries is ``outer * (inner - 1) / (inner - outer)``.
    """
    denom = inner - outer
    with np.errstate(divide="ignore", invalid="ignore"):
        t = np.where(denom > 0, outer * (inner - 1.0) / denom, 1.0)
    return smoothstep(np.clip(t, 0.0, 1.0))


def fault_boost(
    x: np.ndarray,
    y: np.ndarray,
    center: Tuple[float, float],
    strike: float,
    offset: float,
    radius: float,
    influence: float,
) -> np.ndarray:
    """Grade multiplier near a vertical fault.

    The fault trace runs along ``strike`` through a point ``offset`` away
    from ``center``, perpendicular to the strike. The boost is
    ``1 + influence * 0.3`` on the trace and fades linearly to 1 at
    ``radius``.
    """
    angle = np.radians(strike)
    normal = (-np.sin(angle), np.cos(angle))
    px = center[0] + offset * normal[0]
    py = center[1] + offset * normal[1]
    distance = np.abs((x - px) * normal[0] + (y - py) * normal[1])
    proximity = 1.0 - np.minimum(1.0, distance / radius)
    return 1.0 + influence * proximity * 0.3


def generate_porphyry_ore_body(
    model: BlockModel,
    params: Optional[PorphyryParams] = None,
    seed: SeedLike = None,
    thresholds: GradeThresholds = DEFAULT_THRESHOLDS,
) -> BlockModel:
    """Generate a zoned porphyry Cu-Au body.

    Three nested ellipsoids (core, shell, halo) carry base grades. Zone
    distances are divided by a boundary-irregularity noise factor and grades
    blend across zone boundaries with smoothstep. The base grade is then
    multiplied by a horizontal falloff, a depth gradient, a supergene
    enrichment factor near the surface, a fault proximity boost and a
    fine-scale noise jitter.

    Blocks above cutoff get zone 'Core', 'Shell' or 'Halo'. Other blocks
    keep their existing zone.

    Args:
        model: Input block model.
        params: Optional PorphyryParams. Unset fields are randomized.
        seed: Optional seed or generator.
        thresholds: Classification cutoffs.

    Returns:
        New BlockModel.
    """
    params = params or PorphyryParams()
    bounds = model.bounds()
    rng = resolve_rng(seed, bounds)
    p = _resolve_porphyry(params, model, rng)
    logger.debug(f"Porphyry parameters: {p}")

    data = model.data
    x = data["x"].to_numpy(dtype=np.float64)
    y = data["y"].to_numpy(dtype=np.float64)
    z = data["z"].to_numpy(dtype=np.float64)
    dx, dy, dz = x - p["center_x"], y - p["center_y"], z - p["center_z"]

    irregularity = 1.0 + (_model_noise(model, 2.0) - 0.5) * p["boundary_irregularity"]
    dist = {
        zone: ellipsoid_distance(
            dx, dy, dz, p[f"{zone}_radius_x"], p[f"{zone}_radius_y"], p[f"{zone}_radius_z"]
        )
        / irregularity
        for zone in ("core", "shell", "halo")
    }

    structural = fault_boost(
        x,
        y,
        (p["center_x"], p["center_y"]),
        p["fault_strike"],
        p["fault_offset"],
        p["fault_radius"],
        p["structural_influence"],
    )

    in_core = dist["core"] < 1.0
    in_shell = ~in_core & (dist["shell"] < 1.0)
    in_halo = ~in_core & ~in_shell & (dist["halo"] < 1.0)
    t_shell = _zone_blend(dist["core"], dist["shell"])
    t_halo = _zone_blend(dist["shell"], dist["halo"])

    base = {}
    for metal in ("cu", "au"):
        core = p[f"core_grade_{metal}"]
        shell = p[f"shell_grade_{metal}"]
        halo = p[f"halo_grade_{metal}"]
        base[metal] = np.select(
            [in_core, in_shell, in_halo],
            [
                np.full(len(model), core),
                core * (1 - t_shell) + shell * t_shell,
                shell * (1 - t_halo) + halo * t_halo,
            ],
            default=0.0,
        ) * structural

    horizontal = np.minimum(
        1.0, np.sqrt((dx / p["halo_radius_x"]) ** 2 + (dy / p["halo_radius_y"]) ** 2)
    )
    horizontal_factor = 1.0 - horizontal * p["horizontal_gradient"]

    depth = bounds.max_z - z
    vertical_factor = 1.0 + depth / 1000.0 * p["vertical_gradient"]
    enriched = (depth > 0) & (depth < p["enrichment_depth"])
    enrichment = np.where(
        enriched,
        1.0 + (p["enrichment_factor"] - 1.0) * (1.0 - depth / p["enrichment_depth"]),
        1.0,
    )
    variation = 1.0 + (_model_noise(model, 1.5) - 0.5) * p["local_variation"]

    multiplier = horizontal_factor * vertical_factor * enrichment * variation
    columns, background = _finalize_columns(
        model, base["cu"] * multiplier, base["au"] * multiplier, thresholds, PROCESSING_COST
    )

    zone_labels = np.select(
        [in_core, in_shell, in_halo], ["Core", "Shell", "Halo"], default=""
    ).astype(object)
    labelled = (zone_labels != "") & ~background
    existing = data["zone"].to_numpy(dtype=object)
    columns["zone"] = np.where(labelled, zone_labels, existing)

    result = model.assign(**columns)
    _log_summary("porphyry ore body", result)
    return result
