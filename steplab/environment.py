"""
Flight Environment
==================
Physical constants seen by the trajectory solver:
  - gravitational acceleration
  - drag coefficient of the body
  - air density

The reference scenario uses g = 9.81 m/s², Cd = 0.15 and ρ = 1.29 kg/m³
(cold sea-level air). Other presets let the same launch be replayed in a
vacuum or under different gravity without touching solver code.
"""

import math
from dataclasses import dataclass

from .errors import InvalidParameterError


# ── Reference constants ───────────────────────────────────────────────────
GRAVITY          = 9.81     # m/s²
DRAG_COEFFICIENT = 0.15     # dimensionless
AIR_DENSITY      = 1.29     # kg/m³


@dataclass(frozen=True)
class Environment:
    """Gravity and air properties for one simulated environment."""
    name: str = "Earth, sea level"
    gravity: float = GRAVITY
    drag_coefficient: float = DRAG_COEFFICIENT
    air_density: float = AIR_DENSITY

    def validate(self):
        for field_name in ('gravity', 'drag_coefficient', 'air_density'):
            value = getattr(self, field_name)
            if not math.isfinite(value):
                raise InvalidParameterError(
                    f"Environment.{field_name} must be finite, got {value!r}"
                )
            if value < 0:
                raise InvalidParameterError(
                    f"Environment.{field_name} must be non-negative, got {value!r}"
                )

    def drag_factor(self, area: float, mass: float) -> float:
        """
        Quadratic drag factor k = ½ Cd ρ A / m (1/m).

        Drag acceleration is then -k |v| v.
        """
        return 0.5 * self.drag_coefficient * self.air_density * area / mass


EARTH = Environment()
VACUUM = Environment(name="Vacuum", air_density=0.0)
MARS = Environment(name="Mars, surface", gravity=3.72, air_density=0.020)
MOON = Environment(name="Moon", gravity=1.62, air_density=0.0)

ALL_ENVIRONMENTS = {
    'earth': EARTH,
    'vacuum': VACUUM,
    'mars': MARS,
    'moon': MOON,
}


def get_environment(key: str) -> Environment:
    """Look up a preset environment by key."""
    if key not in ALL_ENVIRONMENTS:
        raise InvalidParameterError(
            f"Unknown environment '{key}'. "
            f"Available: {list(ALL_ENVIRONMENTS.keys())}"
        )
    return ALL_ENVIRONMENTS[key]
