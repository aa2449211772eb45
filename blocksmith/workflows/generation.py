"""Configuration-driven block model generation.

Layer 4: Workflows - Public entry points.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping, Optional, Union

from blocksmith.config import GenerationConfig, config_from_dict, load_config
from blocksmith.objects.blockmodel import BlockModel
from blocksmith.primitives.grid import ProgressCallback
from blocksmith.primitives.statistics import ModelStatistics, calculate_model_statistics
from blocksmith.tasks.blockmodeltask import BlockModelTask
from blocksmith.workflows.export import blocks_to_csv

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GenerationResult:
    """Output of one generation run.

    Attributes:
        model: Generated block model.
        csv: Exported CSV text.
        config: Configuration the model was generated from.
    """

    model: BlockModel
    csv: str
    config: GenerationConfig

    def statistics(self) -> ModelStatistics:
        """Summary statistics of the generated model."""
        return calculate_model_statistics(self.model, cell_size=self.config.grid.increments)


def run_generation(
    config: Union[GenerationConfig, Mapping[str, Any]],
    progress_callback: Optional[ProgressCallback] = None,
) -> GenerationResult:
    """Generate a block model and export it as CSV.

    Args:
        config: GenerationConfig or a mapping accepted by config_from_dict.
        progress_callback: Optional ``(fraction, processed, total)`` callable
            for large grids.

    Returns:
        GenerationResult.

    Example:
        >>> from blocksmith.workflows import run_generation
        >>>
        >>> result = run_generation({
        ...     "grid": {"nx": 10, "ny": 10, "nz": 5, "x_increment": 10,
        ...              "y_increment": 10, "z_increment": 10},
        ...     "pattern": "uniform",
        ... })
        >>> len(result.model)
        500
    """
    if not isinstance(config, GenerationConfig):
        config = config_from_dict(config)

    task = BlockModelTask(
        materials=config.materials,
        chunk_size=config.chunk_size,
        large_model_threshold=config.large_model_threshold,
    )
    logger.info(f"Generating {config.grid.n_blocks:,} blocks with pattern '{config.pattern}'")
    model = task.generate(
        config.grid,
        pattern=config.pattern,
        seed=config.seed,
        progress_callback=progress_callback,
        **config.pattern_params,
    )
    csv = blocks_to_csv(model, config.export)
    return GenerationResult(model=model, csv=csv, config=config)


def run_generation_file(
    file_path: Union[str, Path],
    output_path: Optional[Union[str, Path]] = None,
) -> GenerationResult:
    """Run a generation described by a YAML or JSON file.

    Args:
        file_path: Configuration file.
        output_path: Optional path the CSV is written to.

    Returns:
        GenerationResult.
    """
    result = run_generation(load_config(file_path))
    if output_path is not None:
        output_path = Path(output_path)
        output_path.write_text(result.csv)
        logger.info(f"Saved block model CSV to {output_path}")
    return result
