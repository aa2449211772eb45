"""Random generator resolution for randomized patterns and ore bodies.

Layer 2: Primitives - Pure operations.

Every randomized generator accepts an optional ``seed``. An integer seed is
mixed with the model bounds so that the same seed on a different grid gives a
different (but reproducible) layout. Without a seed the generator draws fresh
entropy from the wall clock and the operating system.
"""

import time
from typing import Optional, Union

import numpy as np

from blocksmith.objects.blockmodel import ModelBounds
from blocksmith.utils.errors import raise_parameter_error

SeedLike = Optional[Union[int, np.random.Generator]]


def _bounds_entropy(bounds: ModelBounds) -> list:
    # Centimetre resolution, like the rest of the coordinate handling
    values = (bounds.min_x, bounds.min_y, bounds.min_z, bounds.max_x, bounds.max_y, bounds.max_z)
    return [int(round(abs(v) * 100)) & 0xFFFFFFFF for v in values]


def resolve_rng(seed: SeedLike = None, bounds: Optional[ModelBounds] = None) -> np.random.Generator:
    """Return the random generator for one pattern or ore-body call.

    Args:
        seed: None for fresh entropy, a non-negative integer for a
            reproducible stream, or an existing ``numpy.random.Generator``
            which is used as-is.
        bounds: Optional model bounds mixed into the seed.

    Returns:
        numpy Generator.

    Raises:
        ParameterError: If ``seed`` is negative or of an unsupported type.

    Example:
        >>> from blocksmith.primitives.seeding import resolve_rng
        >>> a = resolve_rng(42).uniform()
        >>> b = resolve_rng(42).uniform()
        >>> a == b
        True
    """
    if isinstance(seed, np.random.Generator):
        return seed

    if seed is None:
        entropy = [time.time_ns() & 0xFFFFFFFFFFFF, np.random.SeedSequence().entropy]
    elif isinstance(seed, (int, np.integer)) and not isinstance(seed, bool):
        if seed < 0:
            raise_parameter_error(
                "seed", seed, constraint="Seed must be a non-negative integer"
            )
        entropy = [int(seed)]
    else:
        raise_parameter_error(
            "seed",
            seed,
            constraint="Seed must be None, a non-negative integer or a numpy Generator",
        )

    if bounds is not None:
        entropy.extend(_bounds_entropy(bounds))
    return np.random.default_rng(np.random.SeedSequence(entropy))
