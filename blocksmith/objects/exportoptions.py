"""CSV export options."""

from dataclasses import dataclass
from typing import Optional

from blocksmith.utils.errors import check_positive


@dataclass(frozen=True)
class ExportOptions:
    """Options for block CSV export.

    Attributes:
        include_indices: Emit I, J, K columns.
        include_zone: Emit ZONE when at least one block has a zone.
        include_grades: Emit GRADE_CU / GRADE_AU when at least one block has
            that grade.
        include_econ_value: Emit ECON_VALUE when at least one block has it.
        filter_air_blocks: Drop blocks whose density is not positive.
        cell_size_x, cell_size_y, cell_size_z: Constant block dimensions.
            dX, dY, dZ are emitted only when all three are set.
    """

    include_indices: bool = False
    include_zone: bool = True
    include_grades: bool = True
    include_econ_value: bool = True
    filter_air_blocks: bool = True
    cell_size_x: Optional[float] = None
    cell_size_y: Optional[float] = None
    cell_size_z: Optional[float] = None

    def __post_init__(self) -> None:
        """Validate ExportOptions."""
        for name in ("cell_size_x", "cell_size_y", "cell_size_z"):
            check_positive(name, getattr(self, name))

    @property
    def include_dimensions(self) -> bool:
        return (
            self.cell_size_x is not None
            and self.cell_size_y is not None
            and self.cell_size_z is not None
        )
