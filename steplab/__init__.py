"""
Step-Size Laboratory
====================
Two small physical simulations for studying how numerical methods react
to the size of their discretization steps:

  - Flight of a body under gravity and quadratic air drag, integrated
    with the explicit Euler method
  - Transient heat conduction in a rod with fixed end temperatures,
    advanced with an implicit finite-difference scheme and the Thomas
    (tridiagonal) algorithm

Both solvers are deterministic and keep no state between calls. Physical
constants are passed in as Environment / Material objects.
"""

from .errors import (
    SteplabError, InvalidParameterError,
    ExcessiveWorkloadError, ComputationCancelledError,
)
from .cancel import CancellationToken
from .environment import Environment, ALL_ENVIRONMENTS, EARTH, VACUUM, get_environment
from .materials import Material, ALL_MATERIALS, ALUMINIUM, get_material
from .trajectory import (
    TrajectoryParameters, TrajectoryPoint, TrajectoryResult,
    TrajectorySolver, simulate_trajectory,
)
from .heat import (
    HeatGridParameters, TemperatureProfile, HeatDiffusionSolver,
    solve_heat, iter_heat,
)
from .sweep import trajectory_step_table, heat_grid_table
from .validation import validate_drag_free, validate_heat

__version__ = "1.0.0"
__all__ = [
    'SteplabError', 'InvalidParameterError',
    'ExcessiveWorkloadError', 'ComputationCancelledError',
    'CancellationToken',
    'Environment', 'ALL_ENVIRONMENTS', 'EARTH', 'VACUUM', 'get_environment',
    'Material', 'ALL_MATERIALS', 'ALUMINIUM', 'get_material',
    'TrajectoryParameters', 'TrajectoryPoint', 'TrajectoryResult',
    'TrajectorySolver', 'simulate_trajectory',
    'HeatGridParameters', 'TemperatureProfile', 'HeatDiffusionSolver',
    'solve_heat', 'iter_heat',
    'trajectory_step_table', 'heat_grid_table',
    'validate_drag_free', 'validate_heat',
]
