"""Block and block model objects.

A :class:`Block` is one lattice cell. A :class:`BlockModel` holds a whole
lattice as a pandas DataFrame, one row per block, so that patterns and
ore-body generators can operate on columns with numpy instead of looping
over Python objects. Block models are never edited in place: every operation
returns a new model.
"""

import math
from dataclasses import asdict, dataclass
from typing import Any, Iterable, List, Optional

import numpy as np
import pandas as pd

from blocksmith.utils.errors import raise_validation_error

DEFAULT_ROCK_TYPE = "Waste"
DEFAULT_DENSITY = 2.5

COORDINATE_COLUMNS = ["x", "y", "z"]
INDEX_COLUMNS = ["i", "j", "k"]
NUMERIC_FIELD_COLUMNS = ["density", "grade_au", "grade_cu", "econ_value"]
BLOCK_COLUMNS = (
    COORDINATE_COLUMNS
    + INDEX_COLUMNS
    + ["rock_type", "density", "zone", "grade_au", "grade_cu", "econ_value"]
)


@dataclass(frozen=True)
class Block:
    """A single block of the lattice.

    Attributes:
        x: Centroid easting.
        y: Centroid northing.
        z: Centroid elevation (decreases with k).
        i: Lattice index along X.
        j: Lattice index along Y.
        k: Lattice index along Z (0 is shallowest).
        rock_type: Categorical rock label. Defaults to 'Waste'.
        density: Bulk density in tonnes per cubic metre. Defaults to 2.5.
        zone: Optional zone label.
        grade_au: Optional gold grade (g/t) or gas saturation (%).
        grade_cu: Optional copper grade (%) or oil saturation (%).
        econ_value: Optional economic value per block.
    """

    x: float
    y: float
    z: float
    i: int
    j: int
    k: int
    rock_type: str = DEFAULT_ROCK_TYPE
    density: float = DEFAULT_DENSITY
    zone: Optional[str] = None
    grade_au: Optional[float] = None
    grade_cu: Optional[float] = None
    econ_value: Optional[float] = None

    def to_dict(self) -> dict:
        """Return the block as a plain dictionary."""
        return asdict(self)


@dataclass(frozen=True)
class ModelBounds:
    """Axis-aligned bounding box of block centroids.

    Attributes:
        min_x, max_x: Centroid range along X.
        min_y, max_y: Centroid range along Y.
        min_z, max_z: Centroid range along Z.
    """

    min_x: float
    max_x: float
    min_y: float
    max_y: float
    min_z: float
    max_z: float

    @property
    def size_x(self) -> float:
        return self.max_x - self.min_x

    @property
    def size_y(self) -> float:
        return self.max_y - self.min_y

    @property
    def size_z(self) -> float:
        return self.max_z - self.min_z

    @property
    def center(self) -> tuple:
        """Centre of the bounding box as (x, y, z)."""
        return (
            (self.min_x + self.max_x) / 2,
            (self.min_y + self.max_y) / 2,
            (self.min_z + self.max_z) / 2,
        )

    @property
    def max_size(self) -> float:
        """Largest extent, never below 1.0 (used to scale noise frequencies)."""
        return max(self.size_x, self.size_y, self.size_z, 1.0)


@dataclass(frozen=True)
class BlockModel:
    """Immutable block lattice backed by a pandas DataFrame.

    The frame carries the columns listed in ``BLOCK_COLUMNS``. Unset numeric
    fields are NaN and an unset zone is None. Additional attribute columns
    (for example ``porosity``) are preserved.

    Freezing covers the attribute, not the frame contents: treat ``data`` as
    read-only. Derive new models with :meth:`assign` and take an editable
    copy with :meth:`to_dataframe`. Neither touches this model's frame.

    Attributes:
        data: DataFrame with one row per block. Read-only by convention.
    """

    data: pd.DataFrame

    def __post_init__(self) -> None:
        """Validate BlockModel parameters."""
        if not isinstance(self.data, pd.DataFrame):
            raise_validation_error(
                "BlockModel data must be a pandas DataFrame",
                expected="pandas.DataFrame",
                received=str(type(self.data)),
            )

        missing = [col for col in COORDINATE_COLUMNS if col not in self.data.columns]
        if missing:
            raise_validation_error(
                f"Block table is missing coordinate columns: {missing}",
                expected=str(COORDINATE_COLUMNS),
                received=str(list(self.data.columns)),
            )

        frame = self.data.reset_index(drop=True)
        for col in BLOCK_COLUMNS:
            if col not in frame.columns:
                if col == "rock_type":
                    frame[col] = DEFAULT_ROCK_TYPE
                elif col == "zone":
                    frame[col] = pd.Series([None] * len(frame), dtype=object)
                else:
                    frame[col] = np.nan
        extra = [col for col in frame.columns if col not in BLOCK_COLUMNS]
        object.__setattr__(self, "data", frame[BLOCK_COLUMNS + extra])

    def __len__(self) -> int:
        return len(self.data)

    def __iter__(self):
        return iter(self.to_blocks())

    @property
    def n_blocks(self) -> int:
        """Number of blocks in the model."""
        return len(self.data)

    @property
    def coordinates(self) -> np.ndarray:
        """Centroid coordinates (n_blocks, 3)."""
        return self.data[COORDINATE_COLUMNS].to_numpy(dtype=np.float64)

    def bounds(self) -> ModelBounds:
        """Compute the centroid bounding box.

        Returns:
            ModelBounds of the block centroids. An empty model yields zeros.
        """
        if len(self.data) == 0:
            return ModelBounds(0.0, 0.0, 0.0, 0.0, 0.0, 0.0)
        x = self.data["x"].to_numpy(dtype=np.float64)
        y = self.data["y"].to_numpy(dtype=np.float64)
        z = self.data["z"].to_numpy(dtype=np.float64)
        return ModelBounds(
            float(x.min()),
            float(x.max()),
            float(y.min()),
            float(y.max()),
            float(z.min()),
            float(z.max()),
        )

    def assign(self, **columns: Any) -> "BlockModel":
        """Return a new model with the given columns replaced or added."""
        frame = self.data.copy()
        for name, values in columns.items():
            frame[name] = values
        return BlockModel(frame)

    def to_dataframe(self) -> pd.DataFrame:
        """Return a copy of the underlying DataFrame."""
        return self.data.copy()

    def block(self, index: int) -> Block:
        """Return the block at row ``index`` as a :class:`Block`."""
        row = self.data.iloc[index]
        return _row_to_block(row)

    def to_blocks(self) -> List[Block]:
        """Materialize every row as a :class:`Block`."""
        return [_row_to_block(row) for _, row in self.data.iterrows()]

    @classmethod
    def from_blocks(cls, blocks: Iterable[Block]) -> "BlockModel":
        """Build a model from an iterable of :class:`Block` objects."""
        records = [block.to_dict() for block in blocks]
        if not records:
            return cls(pd.DataFrame(columns=BLOCK_COLUMNS))
        return cls(pd.DataFrame.from_records(records, columns=BLOCK_COLUMNS))

    @classmethod
    def empty(cls) -> "BlockModel":
        """Return a model without blocks."""
        return cls(pd.DataFrame(columns=BLOCK_COLUMNS))

    def __repr__(self) -> str:
        """String representation."""
        return f"BlockModel(n_blocks={len(self.data)})"


def _optional_float(value: Any) -> Optional[float]:
    if value is None:
        return None
    try:
        value = float(value)
    except (TypeError, ValueError):
        return None
    return None if math.isnan(value) else value


def _row_to_block(row: pd.Series) -> Block:
    zone = row.get("zone")
    if zone is not None and not isinstance(zone, str) and pd.isna(zone):
        zone = None
    rock_type = row.get("rock_type")
    if not isinstance(rock_type, str):
        rock_type = DEFAULT_ROCK_TYPE
    density = _optional_float(row.get("density"))
    values = {
        "x": float(row["x"]),
        "y": float(row["y"]),
        "z": float(row["z"]),
        "i": int(row["i"]) if pd.notna(row.get("i")) else -1,
        "j": int(row["j"]) if pd.notna(row.get("j")) else -1,
        "k": int(row["k"]) if pd.notna(row.get("k")) else -1,
        "rock_type": rock_type,
        "density": density if density is not None else 0.0,
        "zone": zone,
        "grade_au": _optional_float(row.get("grade_au")),
        "grade_cu": _optional_float(row.get("grade_cu")),
        "econ_value": _optional_float(row.get("econ_value")),
    }
    return Block(**values)
