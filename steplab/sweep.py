"""
Step-Size Sweeps
================
Batch runs that put the solvers side by side at several resolutions:

  - trajectory_step_table: one trajectory per time step, reporting range,
    peak height and end speed (the classic dt = 1 … 0.0001 table).
  - heat_grid_table: one heat solve per (dt, dx) pair, reporting the
    mid-rod temperature. Pairs the solver rejects as invalid are left
    as NaN.
"""

from dataclasses import dataclass, replace
from typing import List, Optional, Sequence

import numpy as np

from .environment import EARTH, Environment
from .errors import InvalidParameterError
from .heat import MAX_WORK, HeatGridParameters, solve_heat
from .materials import ALUMINIUM, Material
from .trajectory import TrajectoryParameters, TrajectoryResult, simulate_trajectory


TRAJECTORY_STEPS = (1.0, 0.1, 0.01, 0.001, 0.0001)
HEAT_TIME_STEPS = (0.1, 0.01, 0.001, 0.0001)
HEAT_SPACE_STEPS = (0.1, 0.01, 0.001, 0.0001)


@dataclass
class StepComparison:
    """One row of the trajectory step-size table."""
    dt: float
    distance: float
    max_height: float
    end_speed: float
    result: TrajectoryResult


def trajectory_step_table(base: TrajectoryParameters,
                          steps: Sequence[float] = TRAJECTORY_STEPS,
                          environment: Environment = EARTH,
                          verbose: bool = False) -> List[StepComparison]:
    """Run the same launch once per time step."""
    rows = []
    for dt in steps:
        result = simulate_trajectory(replace(base, dt=dt), environment)
        rows.append(StepComparison(
            dt=dt,
            distance=result.distance,
            max_height=result.max_height,
            end_speed=result.end_speed,
            result=result,
        ))

    if verbose:
        print(format_step_table(rows))
    return rows


def format_step_table(rows: List[StepComparison]) -> str:
    lines = [
        f"{'dt (s)':<11} | {'Range (m)':<12} | {'Max height (m)':<15} | End speed (m/s)",
        "-" * 71,
    ]
    for row in rows:
        flag = "" if row.result.impacted else "  (cutoff)"
        lines.append(f"{row.dt:<11g} | {row.distance:<12.4f} | "
                     f"{row.max_height:<15.4f} | {row.end_speed:.4f}{flag}")
    return '\n'.join(lines)


@dataclass
class GridConvergenceTable:
    """Mid-rod temperatures, rows indexed by dt and columns by dx."""
    time_steps: Sequence[float]
    space_steps: Sequence[float]
    midpoints: np.ndarray

    def value(self, dt: float, dx: float) -> float:
        i = list(self.time_steps).index(dt)
        j = list(self.space_steps).index(dx)
        return float(self.midpoints[i, j])

    def format(self) -> str:
        corner = "dt \\ dx"
        header = f"{corner:>10}" + ''.join(f"{dx:>12g}" for dx in self.space_steps)
        lines = [header, "-" * len(header)]
        for dt, row in zip(self.time_steps, self.midpoints):
            cells = ''.join(f"{'—':>12}" if np.isnan(v) else f"{v:>12.2f}" for v in row)
            lines.append(f"{dt:>10g}{cells}")
        return '\n'.join(lines)


def heat_grid_table(base: HeatGridParameters,
                    time_steps: Sequence[float] = HEAT_TIME_STEPS,
                    space_steps: Sequence[float] = HEAT_SPACE_STEPS,
                    material: Material = ALUMINIUM,
                    max_work: Optional[int] = MAX_WORK,
                    verbose: bool = False) -> GridConvergenceTable:
    """
    Solve once per (dt, dx) pair and collect the mid-rod temperature.

    InvalidParameterError for a single pair (e.g. dx not smaller than the
    rod) leaves that cell as NaN; any other error stops the sweep.
    """
    midpoints = np.full((len(time_steps), len(space_steps)), np.nan)

    for i, dt in enumerate(time_steps):
        for j, dx in enumerate(space_steps):
            try:
                profile = solve_heat(replace(base, dt=dt, dx=dx), material,
                                     max_work=max_work)
            except InvalidParameterError as exc:
                if verbose:
                    print(f"  dt={dt:g} dx={dx:g}: skipped ({exc})")
                continue
            midpoints[i, j] = profile.midpoint
            if verbose:
                print(f"  dt={dt:g} dx={dx:g}: T_mid = {profile.midpoint:.2f} °C")

    return GridConvergenceTable(tuple(time_steps), tuple(space_steps), midpoints)
