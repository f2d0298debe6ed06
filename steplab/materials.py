"""
Rod Materials
=============
Thermal properties used by the heat conduction solver:
  - density ρ            (kg/m³)
  - specific heat c      (J/(kg·K))
  - thermal conductivity λ (W/(m·K))

Aluminium is the reference material of the lab. Values are room-temperature
handbook figures; they are held constant over the whole solve.
"""

import math
from dataclasses import dataclass

from .errors import InvalidParameterError


@dataclass(frozen=True)
class Material:
    """Constant thermal properties of a rod material."""
    name: str
    density: float          # kg/m³
    specific_heat: float    # J/(kg·K)
    conductivity: float     # W/(m·K)

    def validate(self):
        for field_name in ('density', 'specific_heat', 'conductivity'):
            value = getattr(self, field_name)
            if not math.isfinite(value) or value <= 0:
                raise InvalidParameterError(
                    f"Material.{field_name} must be a positive finite number, "
                    f"got {value!r}"
                )

    @property
    def heat_capacity(self) -> float:
        """Volumetric heat capacity ρc (J/(m³·K))."""
        return self.density * self.specific_heat

    @property
    def diffusivity(self) -> float:
        """Thermal diffusivity a = λ / (ρc) (m²/s)."""
        return self.conductivity / self.heat_capacity


# ══════════════════════════════════════════════════════════════════════════
#  Preset materials
# ══════════════════════════════════════════════════════════════════════════

ALUMINIUM = Material('Aluminium', density=2700.0, specific_heat=900.0, conductivity=230.0)
COPPER = Material('Copper', density=8960.0, specific_heat=385.0, conductivity=401.0)
CARBON_STEEL = Material('Carbon Steel', density=7850.0, specific_heat=460.0, conductivity=45.0)
GLASS = Material('Glass', density=2500.0, specific_heat=840.0, conductivity=1.0)

ALL_MATERIALS = {
    'aluminium': ALUMINIUM,
    'copper': COPPER,
    'carbon_steel': CARBON_STEEL,
    'glass': GLASS,
}


def get_material(key: str) -> Material:
    """Look up a preset material by key."""
    if key not in ALL_MATERIALS:
        raise InvalidParameterError(
            f"Unknown material '{key}'. "
            f"Available: {list(ALL_MATERIALS.keys())}"
        )
    return ALL_MATERIALS[key]
