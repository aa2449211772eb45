"""Block model CSV export.

Layer 4: Workflows - Public entry points.

The export format is comma-delimited text with a header row and one row per
block. Columns, in order::

    X,Y,Z,[I,J,K],[dX,dY,dZ],ROCKTYPE,DENSITY,[ZONE],[GRADE_CU],[GRADE_AU],[ECON_VALUE]

Numbers use exactly four decimals. Missing or non-numeric values are written
as ``0.0000``, a missing zone as an empty field and a missing rock type as
``Waste``. Rows are separated by ``\\n`` without a trailing newline.
"""

import io
import logging
from pathlib import Path
from typing import Iterable, Iterator, List, Optional, Union

import numpy as np
import pandas as pd

from blocksmith.objects.blockmodel import BLOCK_COLUMNS, DEFAULT_ROCK_TYPE, Block, BlockModel
from blocksmith.objects.exportoptions import ExportOptions
from blocksmith.utils.errors import raise_parameter_error

logger = logging.getLogger(__name__)

CSV_CHUNK_SIZE = 100_000

BlockInput = Union[BlockModel, pd.DataFrame, Iterable[Block], Iterable[dict]]

# Export header -> block column
HEADER_COLUMNS = {
    "X": "x",
    "Y": "y",
    "Z": "z",
    "I": "i",
    "J": "j",
    "K": "k",
    "dX": "dx",
    "dY": "dy",
    "dZ": "dz",
    "ROCKTYPE": "rock_type",
    "DENSITY": "density",
    "ZONE": "zone",
    "GRADE_CU": "grade_cu",
    "GRADE_AU": "grade_au",
    "ECON_VALUE": "econ_value",
}


def _as_frame(blocks: BlockInput) -> pd.DataFrame:
    if isinstance(blocks, BlockModel):
        return blocks.data
    if isinstance(blocks, pd.DataFrame):
        return blocks
    records = [b.to_dict() if isinstance(b, Block) else dict(b) for b in blocks]
    if not records:
        return pd.DataFrame(columns=BLOCK_COLUMNS)
    return pd.DataFrame.from_records(records)


def _column(frame: pd.DataFrame, name: str) -> pd.Series:
    if name in frame.columns:
        return frame[name]
    return pd.Series([None] * len(frame), index=frame.index, dtype=object)


def _format_numbers(values: pd.Series) -> np.ndarray:
    numeric = pd.to_numeric(values, errors="coerce").to_numpy(dtype=np.float64)
    numeric = np.where(np.isfinite(numeric), numeric, 0.0)
    return np.char.mod("%.4f", numeric)


def _format_indices(values: pd.Series) -> List[str]:
    numeric = pd.to_numeric(values, errors="coerce")
    return ["" if pd.isna(v) else str(int(v)) for v in numeric]


def _format_labels(values: pd.Series, default: str) -> List[str]:
    return [default if v is None or (not isinstance(v, str) and pd.isna(v)) else str(v) for v in values]


def _has_values(values: pd.Series) -> bool:
    return bool(values.notna().any())


def iter_csv_chunks(
    blocks: BlockInput,
    options: Optional[ExportOptions] = None,
    chunk_size: int = CSV_CHUNK_SIZE,
) -> Iterator[str]:
    """Yield the CSV text in bounded pieces.

    The first piece is the header row and each further piece holds at most
    ``chunk_size`` rows. Joining the pieces with ``"\\n"`` gives the output of
    :func:`blocks_to_csv`. Nothing is yielded for empty input.

    Args:
        blocks: BlockModel, DataFrame or iterable of Block objects or dicts.
        options: Export options, defaults to ``ExportOptions()``.
        chunk_size: Maximum rows per piece.

    Yields:
        CSV text pieces.
    """
    options = options or ExportOptions()
    if chunk_size <= 0:
        raise_parameter_error("chunk_size", chunk_size, constraint="Must be greater than 0")

    frame = _as_frame(blocks)
    if options.filter_air_blocks and len(frame):
        density = pd.to_numeric(_column(frame, "density"), errors="coerce")
        frame = frame[density > 0]
    if len(frame) == 0:
        return

    headers = ["X", "Y", "Z"]
    if options.include_indices:
        headers += ["I", "J", "K"]
    if options.include_dimensions:
        headers += ["dX", "dY", "dZ"]
    headers += ["ROCKTYPE", "DENSITY"]
    if options.include_zone and _has_values(_column(frame, "zone")):
        headers.append("ZONE")
    if options.include_grades and _has_values(_column(frame, "grade_cu")):
        headers.append("GRADE_CU")
    if options.include_grades and _has_values(_column(frame, "grade_au")):
        headers.append("GRADE_AU")
    if options.include_econ_value and _has_values(_column(frame, "econ_value")):
        headers.append("ECON_VALUE")

    yield ",".join(headers)

    dimensions = {
        "dX": options.cell_size_x,
        "dY": options.cell_size_y,
        "dZ": options.cell_size_z,
    }
    for start in range(0, len(frame), chunk_size):
        chunk = frame.iloc[start : start + chunk_size]
        fields = []
        for header in headers:
            if header in dimensions:
                fields.append([f"{dimensions[header]:.4f}"] * len(chunk))
            elif header in ("I", "J", "K"):
                fields.append(_format_indices(_column(chunk, HEADER_COLUMNS[header])))
            elif header == "ROCKTYPE":
                fields.append(_format_labels(_column(chunk, "rock_type"), DEFAULT_ROCK_TYPE))
            elif header == "ZONE":
                fields.append(_format_labels(_column(chunk, "zone"), ""))
            else:
                fields.append(_format_numbers(_column(chunk, HEADER_COLUMNS[header])))
        yield "\n".join(",".join(row) for row in zip(*fields))


def blocks_to_csv(blocks: BlockInput, options: Optional[ExportOptions] = None) -> str:
    """Serialize blocks to CSV text.

    Args:
        blocks: BlockModel, DataFrame or iterable of Block objects or dicts.
        options: Export options, defaults to ``ExportOptions()``.

    Returns:
        CSV text, or an empty string when no block survives filtering.

    Example:
        >>> from blocksmith.objects import Block
        >>> from blocksmith.workflows.export import blocks_to_csv
        >>>
        >>> blocks = [Block(15, 15, -15, 0, 0, 0, density=0.0),
        ...           Block(45, 15, -15, 1, 0, 0, density=3.0)]
        >>> print(blocks_to_csv(blocks))
        X,Y,Z,ROCKTYPE,DENSITY
        45.0000,15.0000,-15.0000,Waste,3.0000
    """
    text = "\n".join(iter_csv_chunks(blocks, options))
    rows = text.count("\n") if text else 0
    logger.info(f"Exported {rows:,} blocks to CSV")
    return text


def write_blocks_csv(
    blocks: BlockInput,
    filename: Union[str, Path],
    options: Optional[ExportOptions] = None,
) -> int:
    """Write blocks to a CSV file piece by piece.

    Args:
        blocks: Blocks to export.
        filename: Output path.
        options: Export options.

    Returns:
        Number of data rows written.
    """
    filename = Path(filename)
    rows = 0
    with open(filename, "w", newline="") as f:
        for n, piece in enumerate(iter_csv_chunks(blocks, options)):
            if n:
                f.write("\n")
                rows += piece.count("\n") + 1
            f.write(piece)
    logger.info(f"Wrote {rows:,} blocks to {filename}")
    return rows


def read_blocks_csv(source: Union[str, Path, io.TextIOBase]) -> pd.DataFrame:
    """Parse exported CSV text back into block columns.

    Args:
        source: CSV text, a path to a CSV file or an open text stream.

    Returns:
        DataFrame with block column names (``x``, ``rock_type``,
        ``grade_cu``...). Empty zones become None.
    """
    if isinstance(source, Path):
        text = source.read_text()
    elif isinstance(source, str):
        text = source
    else:
        text = source.read()

    if not text.strip():
        return pd.DataFrame(columns=BLOCK_COLUMNS)

    frame = pd.read_csv(
        io.StringIO(text),
        dtype={"ROCKTYPE": str, "ZONE": str},
        keep_default_na=False,
    )
    unknown = [col for col in frame.columns if col not in HEADER_COLUMNS]
    if unknown:
        raise_parameter_error(
            "header",
            unknown,
            valid_values=list(HEADER_COLUMNS),
            constraint="Unrecognized export columns",
        )
    frame = frame.rename(columns=HEADER_COLUMNS)
    if "zone" in frame.columns:
        frame["zone"] = [zone if zone else None for zone in frame["zone"]]
    return frame
