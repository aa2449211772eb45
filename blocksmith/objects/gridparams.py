"""Regular grid parameters.

A grid is described by a model origin, one cell increment per axis and one
cell count per axis. Z follows the mining convention: blocks extend downward
from ``z_origin`` (the ground surface) as the K index grows.
"""

import math
import numbers
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Tuple

from blocksmith.utils.errors import raise_parameter_error

# Legacy grid form key names, mapped to field names.
_LEGACY_KEYS = {
    "xmOrig": "x_origin",
    "ymOrig": "y_origin",
    "zmOrig": "z_origin",
    "xInc": "x_increment",
    "yInc": "y_increment",
    "zInc": "z_increment",
    "originX": "x_origin",
    "originY": "y_origin",
    "originZ": "z_origin",
    "cellSizeX": "x_increment",
    "cellSizeY": "y_increment",
    "cellSizeZ": "z_increment",
    "cellsX": "nx",
    "cellsY": "ny",
    "cellsZ": "nz",
}


@dataclass(frozen=True)
class GridParams:
    """Immutable description of a regular block lattice.

    Attributes:
        x_origin: X model origin (western edge of the first block).
        y_origin: Y model origin (southern edge of the first block).
        z_origin: Z model origin (top of the shallowest block).
        x_increment: Cell size along X, must be > 0.
        y_increment: Cell size along Y, must be > 0.
        z_increment: Cell size along Z, must be > 0.
        nx: Number of cells along X, positive integer.
        ny: Number of cells along Y, positive integer.
        nz: Number of cells along Z, positive integer.
    """

    x_origin: float = 0.0
    y_origin: float = 0.0
    z_origin: float = 0.0
    x_increment: float = 1.0
    y_increment: float = 1.0
    z_increment: float = 1.0
    nx: int = 1
    ny: int = 1
    nz: int = 1

    def __post_init__(self) -> None:
        """Validate GridParams before any block can be produced."""
        for name in ("x_origin", "y_origin", "z_origin"):
            value = getattr(self, name)
            if not _is_real(value) or not math.isfinite(value):
                raise_parameter_error(
                    name, value, constraint="Origin must be a finite number"
                )

        for name in ("x_increment", "y_increment", "z_increment"):
            value = getattr(self, name)
            if not _is_real(value) or not math.isfinite(value) or value <= 0:
                raise_parameter_error(
                    name,
                    value,
                    constraint="Cell increments must be greater than 0",
                    suggestion="Use a positive block size such as 10.0",
                )

        for name in ("nx", "ny", "nz"):
            value = getattr(self, name)
            if not _is_integral(value) or value <= 0:
                raise_parameter_error(
                    name,
                    value,
                    constraint="Cell counts must be integers greater than 0",
                )
            object.__setattr__(self, name, int(value))

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "GridParams":
        """Create GridParams from a mapping.

        Accepts the field names of this class as well as the legacy
        ``xmOrig``/``xInc``/``cellsX`` style keys.

        Args:
            data: Mapping of parameter names to values.

        Returns:
            Validated GridParams.
        """
        kwargs: Dict[str, Any] = {}
        for key, value in data.items():
            name = _LEGACY_KEYS.get(key, key)
            if name not in cls.__dataclass_fields__:
                raise_parameter_error(
                    key,
                    value,
                    valid_values=sorted(cls.__dataclass_fields__),
                    constraint="Unknown grid parameter",
                )
            kwargs[name] = value
        return cls(**kwargs)

    @property
    def origin(self) -> Tuple[float, float, float]:
        """Model origin as (x, y, z)."""
        return (self.x_origin, self.y_origin, self.z_origin)

    @property
    def increments(self) -> Tuple[float, float, float]:
        """Cell increments as (dx, dy, dz)."""
        return (self.x_increment, self.y_increment, self.z_increment)

    @property
    def shape(self) -> Tuple[int, int, int]:
        """Cell counts as (nx, ny, nz)."""
        return (self.nx, self.ny, self.nz)

    @property
    def n_blocks(self) -> int:
        """Total number of blocks in the lattice."""
        return self.nx * self.ny * self.nz

    def to_dict(self) -> Dict[str, Any]:
        """Return the parameters as a plain dictionary."""
        return {name: getattr(self, name) for name in self.__dataclass_fields__}

    def __repr__(self) -> str:
        """String representation."""
        return (
            f"GridParams(origin={self.origin}, increments={self.increments}, "
            f"shape={self.shape})"
        )


def _is_real(value: Any) -> bool:
    return isinstance(value, numbers.Real) and not isinstance(value, bool)


def _is_integral(value: Any) -> bool:
    if isinstance(value, bool):
        return False
    if isinstance(value, numbers.Integral):
        return True
    return isinstance(value, numbers.Real) and math.isfinite(value) and float(value).is_integer()
