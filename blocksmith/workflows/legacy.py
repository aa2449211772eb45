"""Compatibility adapter for blocks using legacy field names.

Layer 4: Workflows - Public entry points.

Older block records name the rock type ``material``, the copper grade
``grade`` and the economic value ``value``, and may use camelCase keys
(``rockType``, ``gradeCu``...). These helpers map such records onto the
standard block columns.
"""

import logging
import math
from typing import Any, Dict, Iterable, Mapping, Optional

import pandas as pd

from blocksmith.objects.blockmodel import BLOCK_COLUMNS, DEFAULT_ROCK_TYPE, Block, BlockModel
from blocksmith.workflows.export import ExportOptions, blocks_to_csv

logger = logging.getLogger(__name__)

# Standard column -> accepted keys, first present wins
_FIELD_ALIASES = {
    "x": ("x",),
    "y": ("y",),
    "z": ("z",),
    "i": ("i",),
    "j": ("j",),
    "k": ("k",),
    "rock_type": ("material", "rock_type", "rockType"),
    "density": ("density",),
    "zone": ("zone",),
    "grade_au": ("grade_au", "gradeAu"),
    "grade_cu": ("grade_cu", "gradeCu", "grade"),
    "econ_value": ("econ_value", "econValue", "value"),
}

LEGACY_KEYS = ("material", "grade", "value", "rockType", "gradeAu", "gradeCu", "econValue")


def _is_missing(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return value == ""
    return isinstance(value, float) and math.isnan(value)


def _first_present(record: Mapping[str, Any], keys) -> Optional[Any]:
    for key in keys:
        value = record.get(key)
        if not _is_missing(value):
            return value
    return None


def is_legacy_block(record: Mapping[str, Any]) -> bool:
    """Return True if the record uses any legacy field name."""
    return any(key in record for key in LEGACY_KEYS)


def convert_legacy_block(record: Mapping[str, Any]) -> Dict[str, Any]:
    """Map a legacy block record onto the standard block columns.

    ``material`` takes precedence over ``rock_type``. ``grade`` is used only
    when no copper grade is present and ``value`` only when no economic value
    is present. A missing rock type becomes 'Waste' and a missing density
    becomes 0.0, which marks the block as air for export filtering.

    Args:
        record: Mapping with legacy or standard keys.

    Returns:
        Dictionary keyed by the standard block columns.

    Example:
        >>> convert_legacy_block({"x": 5, "y": 5, "z": -5, "material": "Ore_High",
        ...                       "density": 2.8, "grade": 1.4, "value": 120})["grade_cu"]
        1.4
    """
    block = {column: _first_present(record, keys) for column, keys in _FIELD_ALIASES.items()}
    if block["rock_type"] is None:
        block["rock_type"] = DEFAULT_ROCK_TYPE
    if block["density"] is None:
        block["density"] = 0.0
    return block


def convert_legacy_blocks(records: Iterable[Mapping[str, Any]]) -> BlockModel:
    """Convert legacy block records into a BlockModel.

    Records that are already :class:`Block` objects are taken as they are.
    """
    rows = [
        record.to_dict() if isinstance(record, Block) else convert_legacy_block(record)
        for record in records
    ]
    if not rows:
        return BlockModel.empty()
    model = BlockModel(pd.DataFrame.from_records(rows, columns=BLOCK_COLUMNS))
    logger.info(f"Converted {len(rows):,} legacy blocks")
    return model


def export_legacy_blocks_csv(
    records: Iterable[Mapping[str, Any]],
    options: Optional[ExportOptions] = None,
) -> str:
    """Convert legacy block records and export them as CSV.

    Args:
        records: Legacy or standard block records.
        options: Export options, defaults to ``ExportOptions()``.

    Returns:
        CSV text.
    """
    return blocks_to_csv(convert_legacy_blocks(records), options)
