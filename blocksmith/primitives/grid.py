"""Regular grid generation.

Layer 2: Primitives - Pure operations.

Blocks are enumerated with I as the outer loop, then J, then K. The flat block
number ``n`` therefore decomposes as ``i = n // (ny * nz)``,
``j = (n // nz) % ny`` and ``k = n % nz``, which lets the chunked path
produce any slice of the lattice independently.
"""

import logging
from dataclasses import dataclass
from typing import Callable, Iterator, Mapping, Optional, Union

import numpy as np
import pandas as pd

from blocksmith.objects.blockmodel import (
    BLOCK_COLUMNS,
    DEFAULT_DENSITY,
    DEFAULT_ROCK_TYPE,
    BlockModel,
)
from blocksmith.objects.gridparams import GridParams
from blocksmith.utils.errors import raise_parameter_error

logger = logging.getLogger(__name__)

DEFAULT_CHUNK_SIZE = 10_000

ProgressCallback = Callable[[float, int, int], None]


@dataclass(frozen=True)
class GridChunk:
    """One bounded batch of blocks from the chunked grid builder.

    Attributes:
        frame: Block rows for this batch.
        processed: Number of blocks produced so far, including this batch.
        total: Total number of blocks in the lattice.
    """

    frame: pd.DataFrame
    processed: int
    total: int

    @property
    def progress(self) -> float:
        """Fraction of the lattice produced so far (0-1)."""
        return self.processed / self.total if self.total else 1.0


def _as_grid_params(params: Union[GridParams, Mapping]) -> GridParams:
    if isinstance(params, GridParams):
        return params
    return GridParams.from_dict(params)


def _blocks_for_range(params: GridParams, start: int, stop: int) -> pd.DataFrame:
    """Build block rows for flat block numbers in [start, stop)."""
    n = np.arange(start, stop, dtype=np.int64)
    ny_nz = params.ny * params.nz
    i = n // ny_nz
    j = (n // params.nz) % params.ny
    k = n % params.nz

    count = len(n)
    return pd.DataFrame(
        {
            "x": params.x_origin + (i + 0.5) * params.x_increment,
            "y": params.y_origin + (j + 0.5) * params.y_increment,
            # Mining convention: z decreases downward from the model origin
            "z": params.z_origin - (k + 0.5) * params.z_increment,
            "i": i,
            "j": j,
            "k": k,
            "rock_type": np.full(count, DEFAULT_ROCK_TYPE, dtype=object),
            "density": np.full(count, DEFAULT_DENSITY),
            "zone": np.full(count, None, dtype=object),
            "grade_au": np.full(count, np.nan),
            "grade_cu": np.full(count, np.nan),
            "econ_value": np.full(count, np.nan),
        },
        columns=BLOCK_COLUMNS,
    )


def generate_regular_grid(params: Union[GridParams, Mapping]) -> BlockModel:
    """Generate a regular grid of blocks.

    Every block starts as 'Waste' with density 2.5 and no grades, zone or
    economic value.

    Args:
        params: GridParams, or a mapping accepted by ``GridParams.from_dict``.

    Returns:
        BlockModel with exactly ``nx * ny * nz`` blocks.

    Raises:
        ParameterError: If any increment or count is not strictly positive.

    Example:
        >>> from blocksmith.objects import GridParams
        >>> from blocksmith.primitives.grid import generate_regular_grid
        >>>
        >>> params = GridParams(x_increment=30, y_increment=30, z_increment=30,
        ...                     nx=20, ny=20, nz=10)
        >>> model = generate_regular_grid(params)
        >>> len(model)
        4000
    """
    params = _as_grid_params(params)
    model = BlockModel(_blocks_for_range(params, 0, params.n_blocks))
    logger.info(
        f"Created regular grid: {params.nx} × {params.ny} × {params.nz} = "
        f"{params.n_blocks:,} blocks"
    )
    return model


def iter_grid_chunks(
    params: Union[GridParams, Mapping],
    chunk_size: int = DEFAULT_CHUNK_SIZE,
) -> Iterator[GridChunk]:
    """Yield the lattice in bounded batches.

    Concatenating the frames of every chunk gives exactly the frame produced
    by :func:`generate_regular_grid`. The caller may stop iterating at any
    point.

    Args:
        params: Grid parameters.
        chunk_size: Maximum number of blocks per batch, default 10,000.

    Yields:
        GridChunk objects in lattice order.
    """
    params = _as_grid_params(params)
    if isinstance(chunk_size, bool) or not isinstance(chunk_size, int) or chunk_size <= 0:
        raise_parameter_error(
            "chunk_size", chunk_size, constraint="Must be a positive integer"
        )

    total = params.n_blocks
    for start in range(0, total, chunk_size):
        stop = min(start + chunk_size, total)
        yield GridChunk(_blocks_for_range(params, start, stop), stop, total)


def generate_regular_grid_chunked(
    params: Union[GridParams, Mapping],
    chunk_size: int = DEFAULT_CHUNK_SIZE,
    progress_callback: Optional[ProgressCallback] = None,
) -> BlockModel:
    """Generate a large grid batch by batch, reporting progress.

    Args:
        params: Grid parameters.
        chunk_size: Maximum number of blocks per batch.
        progress_callback: Optional callable receiving
            ``(fraction, processed, total)`` after each batch.

    Returns:
        BlockModel identical to ``generate_regular_grid(params)``.
    """
    params = _as_grid_params(params)
    frames = []
    for chunk in iter_grid_chunks(params, chunk_size):
        frames.append(chunk.frame)
        if progress_callback is not None:
            progress_callback(chunk.progress, chunk.processed, chunk.total)
        logger.debug(
            f"Grid progress: {chunk.progress:.0%} "
            f"({chunk.processed:,}/{chunk.total:,})"
        )

    frame = pd.concat(frames, ignore_index=True)
    logger.info(
        f"Created regular grid in {len(frames)} chunks: {params.nx} × "
        f"{params.ny} × {params.nz} = {params.n_blocks:,} blocks"
    )
    return BlockModel(frame)
