"""Summary statistics for generated block models.

Layer 2: Primitives - Pure operations.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, Optional, Tuple

import pandas as pd

from blocksmith.objects.blockmodel import BlockModel

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FieldSummary:
    """Min/max/mean of one numeric block field.

    ``count`` is the number of blocks with a value; the other fields are None
    when it is zero.
    """

    count: int
    min: Optional[float] = None
    max: Optional[float] = None
    mean: Optional[float] = None
    total: Optional[float] = None

    @property
    def has_data(self) -> bool:
        return self.count > 0


@dataclass(frozen=True)
class ModelStatistics:
    """Statistics of a block model.

    Attributes:
        n_blocks: Number of blocks.
        rock_type_counts: Blocks per rock type.
        ore_blocks: Blocks counted as ore (rock type containing 'ore', Cu above
            0.3 % or Au above 0.5 g/t).
        ore_percentage: Ore blocks as a percentage of all blocks.
        zone_counts: Blocks per zone label.
        density, grade_cu, grade_au, econ_value: Field summaries.
        dimensions: Model extent (width, length, depth): centroid span plus
            one cell.
        total_volume: Block volume times block count. Zero without a cell size.
    """

    n_blocks: int
    rock_type_counts: Dict[str, int]
    ore_blocks: int
    ore_percentage: float
    zone_counts: Dict[str, int]
    density: FieldSummary
    grade_cu: FieldSummary
    grade_au: FieldSummary
    econ_value: FieldSummary
    dimensions: Tuple[float, float, float] = (0.0, 0.0, 0.0)
    total_volume: float = 0.0
    extra: Dict[str, FieldSummary] = field(default_factory=dict)

    @property
    def waste_percentage(self) -> float:
        return 100.0 - self.ore_percentage if self.n_blocks else 0.0

    @property
    def zone_count(self) -> int:
        return len(self.zone_counts)


def _summarize(values: pd.Series) -> FieldSummary:
    numeric = pd.to_numeric(values, errors="coerce").dropna()
    if numeric.empty:
        return FieldSummary(count=0)
    return FieldSummary(
        count=int(len(numeric)),
        min=float(numeric.min()),
        max=float(numeric.max()),
        mean=float(numeric.mean()),
        total=float(numeric.sum()),
    )


def calculate_model_statistics(
    model: BlockModel,
    cell_size: Optional[Tuple[float, float, float]] = None,
) -> ModelStatistics:
    """Summarize rock types, zones and numeric fields of a model.

    Args:
        model: Block model to summarize.
        cell_size: Optional (dx, dy, dz) used for dimensions and volume.

    Returns:
        ModelStatistics.

    Example:
        >>> from blocksmith.objects import GridParams
        >>> from blocksmith.primitives import generate_regular_grid
        >>> from blocksmith.primitives.statistics import calculate_model_statistics
        >>>
        >>> grid = generate_regular_grid(GridParams(nx=4, ny=4, nz=2))
        >>> calculate_model_statistics(grid, cell_size=(1, 1, 1)).total_volume
        32.0
    """
    data = model.data
    n = len(data)

    rock_types = data["rock_type"].fillna("Unknown").astype(str)
    rock_type_counts = {str(k): int(v) for k, v in rock_types.value_counts().items()}

    grade_cu = pd.to_numeric(data["grade_cu"], errors="coerce")
    grade_au = pd.to_numeric(data["grade_au"], errors="coerce")
    is_ore = (
        rock_types.str.lower().str.contains("ore", regex=False)
        | (grade_cu > 0.3)
        | (grade_au > 0.5)
    )
    ore_blocks = int(is_ore.sum())

    zones = data["zone"].dropna().astype(str)
    zone_counts = {str(k): int(v) for k, v in zones.value_counts().items()}

    bounds = model.bounds()
    dx, dy, dz = cell_size if cell_size is not None else (0.0, 0.0, 0.0)
    dimensions = (bounds.size_x + dx, bounds.size_y + dy, bounds.size_z + dz)
    total_volume = float(dx * dy * dz * n)

    extra = {}
    if "porosity" in data.columns:
        extra["porosity"] = _summarize(data["porosity"])

    stats = ModelStatistics(
        n_blocks=n,
        rock_type_counts=rock_type_counts,
        ore_blocks=ore_blocks,
        ore_percentage=ore_blocks / n * 100.0 if n else 0.0,
        zone_counts=zone_counts,
        density=_summarize(data["density"]),
        grade_cu=_summarize(grade_cu),
        grade_au=_summarize(grade_au),
        econ_value=_summarize(data["econ_value"]),
        dimensions=tuple(float(v) for v in dimensions),
        total_volume=total_volume,
        extra=extra,
    )
    logger.info(
        f"Model statistics: {n:,} blocks, {len(rock_type_counts)} rock types, "
        f"{stats.ore_percentage:.1f}% ore"
    )
    return stats
