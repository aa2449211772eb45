"""Deterministic 3D value noise.

Layer 2: Primitives - Pure operations.

Lattice corners are hashed with integer bit mixing to values in [-1, 1] and
blended with smoothstep-eased trilinear interpolation, so the field is
continuous across cell boundaries. All arithmetic is vectorized with numpy;
intermediate products are computed in int64 and masked to 32 bits.
"""

from typing import Union

import numpy as np

ArrayLike = Union[float, np.ndarray]

_MASK32 = 0xFFFFFFFF
_PRIME_X = 73856093
_PRIME_Y = 19349663
_PRIME_Z = 83492791
_MODULUS = 2147483647


def smoothstep(t: ArrayLike) -> ArrayLike:
    """Cubic easing ``t²(3 - 2t)`` used for noise interpolation."""
    return t * t * (3.0 - 2.0 * t)


def _hash_corner(ix: np.ndarray, iy: np.ndarray, iz: np.ndarray) -> np.ndarray:
    """Hash integer lattice coordinates to values in [-1, 1]."""
    h = ((ix * _PRIME_X) & _MASK32) ^ ((iy * _PRIME_Y) & _MASK32) ^ ((iz * _PRIME_Z) & _MASK32)
    # 13-bit rotate, then xor-shifts
    h = (((h << 13) | (h >> 19)) & _MASK32) ^ h
    h = h ^ (h >> 7)
    h = (h ^ (h << 17)) & _MASK32
    h = (h & 0x7FFFFFFF) % _MODULUS
    return h / _MODULUS * 2.0 - 1.0


def noise3d(x: ArrayLike, y: ArrayLike, z: ArrayLike, scale: float = 1.0) -> ArrayLike:
    """Sample smooth value noise at one or many points.

    Args:
        x: X coordinate(s).
        y: Y coordinate(s).
        z: Z coordinate(s).
        scale: Frequency multiplier applied to the coordinates.

    Returns:
        Noise value(s) in [0, 1]. A float when all inputs are scalars,
        otherwise an array broadcast from the inputs.

    Example:
        >>> from blocksmith.primitives.noise import noise3d
        >>> value = noise3d(1.25, 3.5, -2.0, scale=0.5)
        >>> 0.0 <= value <= 1.0
        True
    """
    scalar = np.ndim(x) == 0 and np.ndim(y) == 0 and np.ndim(z) == 0

    sx = np.asarray(x, dtype=np.float64) * scale
    sy = np.asarray(y, dtype=np.float64) * scale
    sz = np.asarray(z, dtype=np.float64) * scale
    sx, sy, sz = np.broadcast_arrays(sx, sy, sz)

    fx = np.floor(sx)
    fy = np.floor(sy)
    fz = np.floor(sz)
    tx = smoothstep(sx - fx)
    ty = smoothstep(sy - fy)
    tz = smoothstep(sz - fz)

    ix = fx.astype(np.int64)
    iy = fy.astype(np.int64)
    iz = fz.astype(np.int64)

    n000 = _hash_corner(ix, iy, iz)
    n001 = _hash_corner(ix, iy, iz + 1)
    n010 = _hash_corner(ix, iy + 1, iz)
    n011 = _hash_corner(ix, iy + 1, iz + 1)
    n100 = _hash_corner(ix + 1, iy, iz)
    n101 = _hash_corner(ix + 1, iy, iz + 1)
    n110 = _hash_corner(ix + 1, iy + 1, iz)
    n111 = _hash_corner(ix + 1, iy + 1, iz + 1)

    n00 = n000 * (1 - tx) + n100 * tx
    n01 = n001 * (1 - tx) + n101 * tx
    n10 = n010 * (1 - tx) + n110 * tx
    n11 = n011 * (1 - tx) + n111 * tx

    n0 = n00 * (1 - ty) + n10 * ty
    n1 = n01 * (1 - ty) + n11 * ty

    value = np.clip((n0 * (1 - tz) + n1 * tz + 1.0) / 2.0, 0.0, 1.0)
    if scalar:
        return float(value)
    return value
