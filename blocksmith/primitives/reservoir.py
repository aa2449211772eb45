"""Salt-dome reservoir analogue.

Layer 2: Primitives - Pure operations.

Reuses the block-model machinery for a petroleum setting:

- ``grade_cu`` holds oil saturation (%)
- ``grade_au`` holds gas saturation (%)
- ``density`` holds bulk density and porosity goes in an extra ``porosity``
  column (fraction)

A parabolic salt diapir rises from a base elevation to a top elevation with a
cap rock above it. Sands on the dome flank between the oil-water contact and
the dome top form the trap: gas above the gas-oil contact, oil below it.
"""

import logging
from dataclasses import dataclass
from typing import Optional

import numpy as np

from blocksmith.objects.blockmodel import BlockModel
from blocksmith.objects.materials import DEFAULT_MATERIALS, MaterialTable
from blocksmith.primitives.geometry import estimate_cell_size
from blocksmith.primitives.noise import noise3d
from blocksmith.primitives.seeding import SeedLike, resolve_rng
from blocksmith.utils.errors import check_fraction, check_non_negative, check_positive

logger = logging.getLogger(__name__)

BARRELS_PER_TONNE = 6.29
MCF_PER_TONNE = 35.0
OIL_PRICE = 50.0
GAS_PRICE = 3.0
OIL_EXTRACTION_COST = 20.0
GAS_EXTRACTION_COST = 15.0
MIN_SATURATION = 10.0


@dataclass(frozen=True)
class SaltDomeParams:
    """Parameters for :func:`generate_salt_dome_reservoir`.

    Fractions are relative to the model extent unless noted. Unset fields are
    drawn from the ranges shown.

    Attributes:
        center_x, center_y: Dome axis (40-60 % of the X and Y ranges).
        top_fraction: Depth of the dome top below the shallowest centroid
            (0.05-0.15).
        base_fraction: Height of the dome base above the deepest centroid
            (0.25-0.40).
        radius_x, radius_y: Dome radii at the base (12-22 % of the size).
        cap_rock_thickness: Cap rock thickness (3-8 % of the Z size).
        trap_width: Lateral extent of the flank trap (20-35 % of the X size).
        owc_fraction: Oil-water contact height above the dome base, as a
            fraction of the dome height (0.15-0.30).
        goc_fraction: Gas-oil contact depth below the dome top, as a
            fraction of the dome height (0.10-0.25).
    """

    center_x: Optional[float] = None
    center_y: Optional[float] = None
    top_fraction: Optional[float] = None
    base_fraction: Optional[float] = None
    radius_x: Optional[float] = None
    radius_y: Optional[float] = None
    cap_rock_thickness: Optional[float] = None
    trap_width: Optional[float] = None
    owc_fraction: Optional[float] = None
    goc_fraction: Optional[float] = None

    def __post_init__(self) -> None:
        """Validate SaltDomeParams."""
        for name in ("radius_x", "radius_y", "trap_width"):
            check_positive(name, getattr(self, name))
        check_non_negative("cap_rock_thickness", self.cap_rock_thickness)
        for name in ("top_fraction", "base_fraction", "owc_fraction", "goc_fraction"):
            check_fraction(name, getattr(self, name))


def _pick(value: Optional[float], default: float) -> float:
    return float(default) if value is None else float(value)


def generate_salt_dome_reservoir(
    model: BlockModel,
    params: Optional[SaltDomeParams] = None,
    seed: SeedLike = None,
    materials: MaterialTable = DEFAULT_MATERIALS,
) -> BlockModel:
    """Generate a salt dome with a flank oil and gas trap.

    Rock types are Salt, CapRock, GasSand, OilSand, WaterSand and Shale and
    the zone repeats the rock type. Economic value:

    - OilSand with oil saturation > 10 %: ``porosity * So * 6.29 * 50 - 20``
    - GasSand with gas saturation > 10 %: ``porosity * Sg * 35 * 3 - 15``
    - Salt, CapRock, Shale: -10; anything else: -5

    Args:
        model: Input block model.
        params: Optional SaltDomeParams. Unset fields are randomized.
        seed: Optional seed or generator.
        materials: Material table supplying the sand densities.

    Returns:
        New BlockModel with an extra ``porosity`` column.

    Example:
        >>> from blocksmith.objects import GridParams
        >>> from blocksmith.primitives import generate_regular_grid
        >>> from blocksmith.primitives.reservoir import generate_salt_dome_reservoir
        >>>
        >>> grid = generate_regular_grid(GridParams(x_increment=50, y_increment=50,
        ...                                         z_increment=25, nx=20, ny=20, nz=20))
        >>> dome = generate_salt_dome_reservoir(grid, seed=7)
        >>> "Salt" in set(dome.data["rock_type"])
        True
    """
    params = params or SaltDomeParams()
    bounds = model.bounds()
    rng = resolve_rng(seed, bounds)
    data = model.data
    n = len(model)
    x = data["x"].to_numpy(dtype=np.float64)
    y = data["y"].to_numpy(dtype=np.float64)
    z = data["z"].to_numpy(dtype=np.float64)

    center_x = _pick(params.center_x, bounds.min_x + bounds.size_x * rng.uniform(0.4, 0.6))
    center_y = _pick(params.center_y, bounds.min_y + bounds.size_y * rng.uniform(0.4, 0.6))
    top = bounds.max_z - bounds.size_z * _pick(params.top_fraction, rng.uniform(0.05, 0.15))
    base = bounds.min_z + bounds.size_z * _pick(params.base_fraction, rng.uniform(0.25, 0.40))
    height = top - base
    radius_x = _pick(
        params.radius_x,
        max(bounds.size_x * rng.uniform(0.12, 0.22), estimate_cell_size(x, 1.0)),
    )
    radius_y = _pick(
        params.radius_y,
        max(bounds.size_y * rng.uniform(0.12, 0.22), estimate_cell_size(y, 1.0)),
    )
    cap_thickness = _pick(params.cap_rock_thickness, bounds.size_z * rng.uniform(0.03, 0.08))
    trap_width = _pick(params.trap_width, max(bounds.size_x * rng.uniform(0.20, 0.35), 1e-9))
    owc = base + height * _pick(params.owc_fraction, rng.uniform(0.15, 0.30))
    goc = top - height * _pick(params.goc_fraction, rng.uniform(0.10, 0.25))
    logger.debug(
        f"Salt dome: centre=({center_x:.1f}, {center_y:.1f}), top={top:.1f}, base={base:.1f}, "
        f"OWC={owc:.1f}, GOC={goc:.1f}"
    )

    # Per-call rock property draws
    salt_porosity, salt_density = rng.uniform(0.005, 0.015), rng.uniform(2.15, 2.25)
    cap_porosity, cap_density = rng.uniform(0.03, 0.07), rng.uniform(2.5, 2.7)
    gas_porosity, gas_sat = rng.uniform(0.18, 0.25), rng.uniform(55, 70)
    gas_porosity_gain, gas_sat_gain = rng.uniform(0.08, 0.12), rng.uniform(25, 35)
    oil_porosity, oil_sat = rng.uniform(0.16, 0.22), rng.uniform(45, 60)
    oil_porosity_gain, oil_sat_gain = rng.uniform(0.10, 0.14), rng.uniform(35, 45)
    solution_gas, solution_gas_gain = rng.uniform(3, 8), rng.uniform(3, 7)
    # Per-block draws for the background sands and shales
    water_porosity = rng.uniform(0.15, 0.25, size=n)
    shale_porosity = rng.uniform(0.10, 0.15, size=n)
    shale_density = rng.uniform(2.4, 2.6, size=n)

    dist = np.sqrt(((x - center_x) / radius_x) ** 2 + ((y - center_y) / radius_y) ** 2)
    relative_z = (z - base) / height if height > 0 else np.zeros(n)
    # Parabolic profile: full radius at the base, 70 % at the top
    radius_at_z = 1.0 - relative_z * 0.3
    trap_extent = trap_width / max(radius_x, radius_y)

    salt = (dist < radius_at_z) & (z >= base) & (z <= top)
    cap = ~salt & (dist < radius_at_z) & (z > top) & (z <= top + cap_thickness)
    trap = ~salt & ~cap & (dist < radius_at_z + trap_extent) & (z >= owc) & (z <= top)
    gas = trap & (z > goc)
    oil = trap & ~gas
    water = ~salt & ~cap & ~trap & (z > base) & (z < owc)

    trap_factor = np.maximum(0.0, 1.0 - np.maximum(0.0, (dist - radius_at_z) / trap_extent))

    rock_type = np.select(
        [salt, cap, gas, oil, water],
        ["Salt", "CapRock", "GasSand", "OilSand", "WaterSand"],
        default="Shale",
    ).astype(object)
    porosity = np.select(
        [salt, cap, gas, oil, water],
        [
            np.full(n, salt_porosity),
            np.full(n, cap_porosity),
            gas_porosity + trap_factor * gas_porosity_gain,
            oil_porosity + trap_factor * oil_porosity_gain,
            water_porosity,
        ],
        default=shale_porosity,
    )
    density = np.select(
        [salt, cap, gas, oil, water],
        [
            np.full(n, salt_density),
            np.full(n, cap_density),
            np.full(n, materials["GasSand"].density),
            np.full(n, materials["OilSand"].density),
            np.full(n, materials["WaterSand"].density),
        ],
        default=shale_density,
    )
    oil_saturation = np.where(oil, oil_sat + trap_factor * oil_sat_gain, 0.0)
    gas_saturation = np.select(
        [gas, oil],
        [gas_sat + trap_factor * gas_sat_gain, solution_gas + trap_factor * solution_gas_gain],
        default=0.0,
    )

    noise = noise3d(
        x / bounds.max_size, y / bounds.max_size, z / bounds.max_size, 1.0
    )
    variation = 1.0 + (noise - 0.5) * 0.2
    oil_saturation = np.clip(oil_saturation * variation, 0.0, 100.0)
    gas_saturation = np.clip(gas_saturation * variation, 0.0, 100.0)
    porosity = np.clip(porosity * variation, 0.01, 0.35)

    econ = np.select(
        [
            oil & (oil_saturation > MIN_SATURATION),
            gas & (gas_saturation > MIN_SATURATION),
            salt | cap | (rock_type == "Shale"),
        ],
        [
            porosity * oil_saturation / 100.0 * BARRELS_PER_TONNE * OIL_PRICE - OIL_EXTRACTION_COST,
            porosity * gas_saturation / 100.0 * MCF_PER_TONNE * GAS_PRICE - GAS_EXTRACTION_COST,
            np.full(n, -10.0),
        ],
        default=-5.0,
    )

    result = model.assign(
        rock_type=rock_type,
        density=density,
        grade_cu=oil_saturation,
        grade_au=gas_saturation,
        econ_value=econ,
        zone=rock_type.copy(),
        porosity=porosity,
    )
    counts = {name: int((rock_type == name).sum()) for name in ("Salt", "OilSand", "GasSand")}
    logger.info(
        f"Generated salt dome reservoir on {n:,} blocks: {counts['Salt']:,} salt, "
        f"{counts['OilSand']:,} oil sand, {counts['GasSand']:,} gas sand"
    )
    return result
