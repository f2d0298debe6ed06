"""
Validation Against Reference Solutions
======================================
Checks both solvers against independent answers:

  - Drag-free flight: closed-form range and apex of a vacuum trajectory.
    With the cross-section set to zero the Euler path must approach them
    as dt shrinks.
  - Implicit heat step: the same linear system assembled as a sparse
    matrix and solved directly with scipy, step by step. The Thomas
    sweep must reproduce it to round-off.
  - Rod heating: the Fourier-series solution of the continuous problem.
    The implicit solution must track it on a reasonable grid.
"""

from dataclasses import dataclass, replace
from typing import List, Sequence

import numpy as np
from scipy.sparse import diags
from scipy.sparse.linalg import spsolve

from .environment import EARTH, Environment
from .heat import HeatGridParameters, solve_heat
from .materials import ALUMINIUM, Material
from .trajectory import TrajectoryParameters, simulate_trajectory


# ══════════════════════════════════════════════════════════════════════════
#  Closed-form vacuum trajectory
# ══════════════════════════════════════════════════════════════════════════

def vacuum_range(speed: float, angle_deg: float, gravity: float,
                 height: float = 0.0) -> float:
    """
    Horizontal distance to ground impact without drag (m).

    Reduces to v² sin(2θ) / g for a launch from ground level.
    """
    theta = np.radians(angle_deg)
    vx = speed * np.cos(theta)
    vy = speed * np.sin(theta)
    return float(vx * (vy + np.sqrt(vy ** 2 + 2 * gravity * height)) / gravity)


def vacuum_apex(speed: float, angle_deg: float, gravity: float,
                height: float = 0.0) -> float:
    """Maximum altitude without drag (m): h + (v sin θ)² / 2g."""
    vy = speed * np.sin(np.radians(angle_deg))
    return float(height + max(vy, 0.0) ** 2 / (2 * gravity))


@dataclass
class DragFreeCheck:
    """One row of the drag-free convergence check."""
    dt: float
    sim_range: float
    ref_range: float
    range_error: float      # m, absolute
    sim_apex: float
    ref_apex: float
    apex_error: float       # m, absolute


def validate_drag_free(params: TrajectoryParameters,
                       steps: Sequence[float] = (0.1, 0.01, 0.001, 0.0001),
                       environment: Environment = EARTH,
                       verbose: bool = True) -> List[DragFreeCheck]:
    """
    Run the trajectory solver with zero cross-section at each time step
    and compare range and apex with the vacuum formulas.
    """
    ref_range = vacuum_range(params.speed, params.angle_deg,
                             environment.gravity, params.height)
    ref_apex = vacuum_apex(params.speed, params.angle_deg,
                           environment.gravity, params.height)

    if verbose:
        print(f"\n{'='*66}")
        print(f"  DRAG-FREE CHECK: v={params.speed} m/s  θ={params.angle_deg}°  "
              f"h={params.height} m")
        print(f"  Analytic range: {ref_range:.4f} m | apex: {ref_apex:.4f} m")
        print(f"{'='*66}")
        print(f"{'dt (s)':>10} {'Range':>12} {'Err (m)':>10} {'Apex':>12} {'Err (m)':>10}")
        print("-" * 66)

    results = []
    for dt in steps:
        traj = simulate_trajectory(replace(params, area=0.0, dt=dt), environment)
        check = DragFreeCheck(
            dt=dt,
            sim_range=traj.distance,
            ref_range=ref_range,
            range_error=abs(traj.distance - ref_range),
            sim_apex=traj.max_height,
            ref_apex=ref_apex,
            apex_error=abs(traj.max_height - ref_apex),
        )
        results.append(check)

        if verbose:
            print(f"{dt:>10g} {check.sim_range:>12.4f} {check.range_error:>10.4f} "
                  f"{check.sim_apex:>12.4f} {check.apex_error:>10.4f}")

    if verbose:
        print(f"{'='*66}\n")

    return results


# ══════════════════════════════════════════════════════════════════════════
#  Heat conduction references
# ══════════════════════════════════════════════════════════════════════════

def direct_implicit_solution(params: HeatGridParameters,
                             material: Material = ALUMINIUM) -> np.ndarray:
    """
    Same implicit scheme, solved with a sparse direct solver every step.

    Slow; intended for small grids.
    """
    params.validate()
    nx = params.segments
    n = nx - 1
    k = material.conductivity / params.dx ** 2
    rc_dt = material.heat_capacity / params.dt

    # −k T[i−1] + (2k + ρc/dt) T[i] − k T[i+1] = (ρc/dt) T_prev[i]
    matrix = diags([-k * np.ones(n - 1), (2 * k + rc_dt) * np.ones(n), -k * np.ones(n - 1)],
                   [-1, 0, 1], shape=(n, n), format='csr')

    temps = np.full(nx + 1, float(params.initial_temp))
    temps[0] = params.left_temp
    temps[nx] = params.right_temp

    for _ in range(params.time_steps):
        rhs = rc_dt * temps[1:nx]
        rhs[0] += k * params.left_temp
        rhs[-1] += k * params.right_temp
        interior = np.atleast_1d(spsolve(matrix, rhs))
        temps = np.concatenate(([params.left_temp], interior, [params.right_temp]))

    return temps


def analytic_rod_temperature(params: HeatGridParameters, positions: np.ndarray,
                             time: float, material: Material = ALUMINIUM,
                             terms: int = 400) -> np.ndarray:
    """
    Fourier-series temperature of a rod with fixed end temperatures and
    uniform initial temperature, at ``time`` > 0.

    The rod length is taken as Nx·dx so the series matches the grid.
    """
    length = params.segments * params.dx
    t_left, t_right, t_init = params.left_temp, params.right_temp, params.initial_temp
    x = np.asarray(positions, dtype=float)

    steady = t_left + (t_right - t_left) * x / length

    n = np.arange(1, terms + 1)[:, None]
    sign = (-1.0) ** n
    coeff = 2.0 / (n * np.pi) * ((t_init - t_left) * (1 - sign) + (t_right - t_left) * sign)
    decay = np.exp(-material.diffusivity * (n * np.pi / length) ** 2 * time)
    series = np.sum(coeff * decay * np.sin(n * np.pi * x[None, :] / length), axis=0)

    return steady + series


@dataclass
class HeatCheck:
    """Comparison of one implicit solve against the analytic series."""
    dt: float
    dx: float
    max_error: float        # °C over all nodes
    mid_error: float        # °C at the middle node


def validate_heat(params: HeatGridParameters, material: Material = ALUMINIUM,
                  verbose: bool = True) -> HeatCheck:
    """Solve once and measure the deviation from the analytic series."""
    profile = solve_heat(params, material)
    exact = analytic_rod_temperature(params, profile.positions, profile.time, material)
    error = np.abs(profile.temperatures - exact)
    mid = len(profile) // 2

    check = HeatCheck(
        dt=params.dt,
        dx=params.dx,
        max_error=float(np.max(error)),
        mid_error=float(error[mid]),
    )

    if verbose:
        print(f"  {material.name}: dt={params.dt:g} s  dx={params.dx:g} m  "
              f"t={profile.time:g} s  →  max |ΔT| = {check.max_error:.4f} °C  "
              f"mid |ΔT| = {check.mid_error:.4f} °C")

    return check
