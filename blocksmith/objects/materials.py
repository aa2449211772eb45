"""Material definitions.

Material properties are a fixed configuration value: pattern functions take a
:class:`MaterialTable` argument (defaulting to ``DEFAULT_MATERIALS``) instead
of reading a module-level dictionary, so alternate tables can be substituted.
"""

from collections.abc import Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import Dict, Iterator, Optional

from blocksmith.utils.errors import raise_parameter_error

DEFAULT_COLOR = 0x808080


@dataclass(frozen=True)
class MaterialDefinition:
    """Nominal properties of one rock type.

    Attributes:
        density: Bulk density (tonnes per cubic metre).
        grade_cu: Nominal Cu grade (%), or oil saturation (%) for reservoir rocks.
        grade_au: Nominal Au grade (g/t), or gas saturation (%) for reservoir rocks.
        econ_value: Nominal economic value per block.
        zone: Optional zone label attached to blocks of this type.
        color: Display colour as a 0xRRGGBB integer.
    """

    density: float
    grade_cu: float
    grade_au: float
    econ_value: float
    zone: Optional[str] = None
    color: int = DEFAULT_COLOR


class MaterialTable(Mapping):
    """Read-only mapping of rock type to :class:`MaterialDefinition`."""

    def __init__(self, definitions: Mapping[str, MaterialDefinition]):
        for name, definition in definitions.items():
            if not isinstance(definition, MaterialDefinition):
                raise_parameter_error(
                    f"materials[{name!r}]",
                    definition,
                    constraint="Values must be MaterialDefinition instances",
                )
            if definition.density < 0:
                raise_parameter_error(
                    f"materials[{name!r}].density",
                    definition.density,
                    constraint="Density must be non-negative",
                )
        self._definitions = MappingProxyType(dict(definitions))

    def __getitem__(self, rock_type: str) -> MaterialDefinition:
        return self._definitions[rock_type]

    def __iter__(self) -> Iterator[str]:
        return iter(self._definitions)

    def __len__(self) -> int:
        return len(self._definitions)

    def __repr__(self) -> str:
        return f"MaterialTable({list(self._definitions)})"

    def color(self, rock_type: str) -> int:
        """Display colour of ``rock_type``, grey for unknown types."""
        definition = self._definitions.get(rock_type)
        return definition.color if definition is not None else DEFAULT_COLOR

    def with_material(
        self, rock_type: str, definition: MaterialDefinition
    ) -> "MaterialTable":
        """Return a new table with ``rock_type`` added or replaced."""
        definitions: Dict[str, MaterialDefinition] = dict(self._definitions)
        definitions[rock_type] = definition
        return MaterialTable(definitions)


# Grades follow typical porphyry Cu-Au ranges: low-grade ore sits just above a
# 0.3 % Cu / 0.5 g/t Au cutoff. Negative econ values are mining and haulage
# costs per block.
DEFAULT_MATERIALS = MaterialTable(
    {
        "Waste": MaterialDefinition(2.5, 0.05, 0.05, -15.0, color=0x808080),
        "Ore_Low": MaterialDefinition(3.0, 0.4, 0.7, 10.0, color=0xFFA500),
        "Ore_Med": MaterialDefinition(3.2, 0.8, 1.5, 25.0, color=0xFF6600),
        "Ore_High": MaterialDefinition(3.5, 1.5, 3.5, 50.0, color=0xFF0000),
        "Magnetite": MaterialDefinition(3.2, 0.55, 0.8, 300.0, "Zone1", 0x4A90E2),
        "Hematite": MaterialDefinition(3.0, 0.60, 0.9, 280.0, "Zone1", 0xE24A4A),
        "Ore": MaterialDefinition(3.5, 0.9, 1.8, 350.0, "Zone2", 0xFF0000),
        # Reservoir analogue: grade_cu is oil saturation, grade_au gas saturation
        "Salt": MaterialDefinition(2.2, 0.0, 0.0, -10.0, color=0xFFFFFF),
        "CapRock": MaterialDefinition(2.6, 0.0, 0.0, -10.0, color=0x8B7355),
        "OilSand": MaterialDefinition(2.2, 70.0, 5.0, 50.0, color=0x000000),
        "GasSand": MaterialDefinition(2.1, 0.0, 75.0, 30.0, color=0x00FFFF),
        "WaterSand": MaterialDefinition(2.3, 0.0, 0.0, -5.0, color=0x0066CC),
        "Shale": MaterialDefinition(2.4, 0.0, 0.0, -10.0, color=0x4A4A4A),
    }
)

GRADE_TIERS = ("Waste", "Ore_Low", "Ore_Med", "Ore_High")
