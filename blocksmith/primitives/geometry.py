"""Geometric helpers shared by patterns and ore-body generators.

Layer 2: Primitives - Pure operations.
"""

from typing import Tuple

import numpy as np

from blocksmith.utils.errors import raise_parameter_error

_MIN_SPACING = 1e-4


def estimate_cell_size(values: np.ndarray, fallback: float) -> float:
    """Estimate the block spacing along one axis from centroid values.

    The spacing is the smallest gap between distinct centroid values. Models
    with a single layer along the axis return ``fallback``.

    Args:
        values: Centroid coordinates along one axis.
        fallback: Value returned when no spacing can be measured.

    Returns:
        Estimated cell size.
    """
    unique = np.unique(np.asarray(values, dtype=np.float64))
    if len(unique) < 2:
        return float(fallback)
    gaps = np.diff(unique)
    gaps = gaps[gaps > _MIN_SPACING]
    if len(gaps) == 0:
        return float(fallback)
    return float(gaps.min())


def average_cell_size(x: np.ndarray, y: np.ndarray, z: np.ndarray, sizes: Tuple[float, float, float]) -> float:
    """Mean of the estimated cell sizes along the three axes.

    Axes without a measurable spacing fall back to 1 % of the model extent.
    """
    estimates = [
        estimate_cell_size(values, size / 100.0 or 1.0)
        for values, size in zip((x, y, z), sizes)
    ]
    return float(np.mean(estimates))


def rotate_azimuth_plunge(
    dx: np.ndarray,
    dy: np.ndarray,
    dz: np.ndarray,
    azimuth_deg: float,
    plunge_deg: float,
) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
    """Rotate offsets about the vertical axis, then about the rotated Y axis.

    Args:
        dx, dy, dz: Offsets from the body centre.
        azimuth_deg: Rotation about Z in degrees.
        plunge_deg: Rotation about the rotated horizontal axis in degrees.

    Returns:
        Rotated offsets (x', y', z').
    """
    azimuth = np.radians(azimuth_deg)
    plunge = np.radians(plunge_deg)
    cos_a, sin_a = np.cos(azimuth), np.sin(azimuth)
    cos_p, sin_p = np.cos(plunge), np.sin(plunge)

    x_rot = dx * cos_a - dy * sin_a
    y_rot = dx * sin_a + dy * cos_a
    x_final = x_rot * cos_p - dz * sin_p
    z_final = x_rot * sin_p + dz * cos_p
    return x_final, y_rot, z_final


def ellipsoid_distance(
    dx: np.ndarray,
    dy: np.ndarray,
    dz: np.ndarray,
    rx: float,
    ry: float,
    rz: float,
) -> np.ndarray:
    """Anisotropic normalized distance ``sqrt((dx/rx)² + (dy/ry)² + (dz/rz)²)``.

    Values below 1 lie inside the ellipsoid.
    """
    for name, radius in (("rx", rx), ("ry", ry), ("rz", rz)):
        if not radius > 0:
            raise_parameter_error(
                name, radius, constraint="Ellipsoid radii must be greater than 0"
            )
    return np.sqrt((dx / rx) ** 2 + (dy / ry) ** 2 + (dz / rz) ** 2)


def strike_dip_normal(strike_deg: float, dip_deg: float) -> np.ndarray:
    """Unit normal of a plane given by strike (0-360) and dip (degrees).

    Used by the inclined vein pattern, where the plane dips perpendicular to
    its strike.
    """
    strike = np.radians(strike_deg)
    dip = np.radians(dip_deg)
    normal = np.array(
        [
            np.sin(strike) * np.sin(dip),
            -np.cos(strike) * np.sin(dip),
            np.cos(dip),
        ]
    )
    return normal / np.linalg.norm(normal)


def plane_axes(
    strike_deg: float, dip_deg: float, dip_direction_deg: float
) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
    """Strike vector, down-dip vector and unit normal of a structural plane.

    Args:
        strike_deg: Strike angle, measured from +X toward +Y.
        dip_deg: Dip angle below horizontal.
        dip_direction_deg: Azimuth of the dip vector, measured like strike.

    Returns:
        Tuple of (strike, dip, normal) vectors. The normal is the
        normalized cross product of strike and dip.

    Raises:
        ParameterError: If strike and dip vectors are parallel, so no plane
            is defined.
    """
    strike = np.radians(strike_deg)
    dip = np.radians(dip_deg)
    dip_direction = np.radians(dip_direction_deg)

    strike_vec = np.array([np.cos(strike), np.sin(strike), 0.0])
    dip_vec = np.array(
        [
            np.cos(dip_direction) * np.sin(dip),
            np.sin(dip_direction) * np.sin(dip),
            np.cos(dip),
        ]
    )
    normal = np.cross(strike_vec, dip_vec)
    norm = np.linalg.norm(normal)
    if norm < 1e-9:
        raise_parameter_error(
            "dip_direction",
            dip_direction_deg,
            constraint="Strike and dip directions define a degenerate plane",
            suggestion="Use a dip direction that is not parallel to the strike",
        )
    return strike_vec, dip_vec, normal / norm


def plane_distance(
    x: np.ndarray,
    y: np.ndarray,
    z: np.ndarray,
    normal: np.ndarray,
    point: Tuple[float, float, float],
) -> np.ndarray:
    """Absolute perpendicular distance from points to a plane."""
    d = -float(np.dot(normal, point))
    return np.abs(normal[0] * x + normal[1] * y + normal[2] * z + d)
