"""Layer 4: Workflows - Public entry points.

Workflows provide the public entry points users call. Workflows can do I/O.
Put CSV export, configuration-driven runs and the legacy block adapter here.
"""

from blocksmith.workflows.export import (
    CSV_CHUNK_SIZE,
    ExportOptions,
    blocks_to_csv,
    iter_csv_chunks,
    read_blocks_csv,
    write_blocks_csv,
)
from blocksmith.workflows.legacy import (
    convert_legacy_block,
    convert_legacy_blocks,
    export_legacy_blocks_csv,
    is_legacy_block,
)
from blocksmith.workflows.generation import (
    GenerationResult,
    run_generation,
    run_generation_file,
)

__all__ = [
    "CSV_CHUNK_SIZE",
    "ExportOptions",
    "GenerationResult",
    "blocks_to_csv",
    "convert_legacy_block",
    "convert_legacy_blocks",
    "export_legacy_blocks_csv",
    "is_legacy_block",
    "iter_csv_chunks",
    "read_blocks_csv",
    "run_generation",
    "run_generation_file",
    "write_blocks_csv",
]
