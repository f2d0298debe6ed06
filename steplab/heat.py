"""
Transient Heat Conduction in a Rod
==================================
Solves the 1-D heat equation

    ρc ∂T/∂t = λ ∂²T/∂x²

on a uniform grid with fixed end temperatures (Dirichlet boundaries),
using the fully implicit finite-difference scheme. For each interior
node i the new temperatures satisfy

    A T[i-1] − B T[i] + C T[i+1] = −(ρc/dt) T_prev[i]

    A = C = λ/dx²
    B     = 2λ/dx² + ρc/dt

The tridiagonal system is solved every step with the Thomas algorithm:

1. **Forward elimination** — alpha[i] = A / (B − C·alpha[i−1]).
   A, B and C do not change during a solve, so alpha is computed once.
2. **Load sweep** — beta[i] = (C·beta[i−1] + (ρc/dt)·T[i]) / (B − C·alpha[i−1]),
   seeded with beta[0] = left temperature.
3. **Back-substitution** — T_new[i] = alpha[i]·T_new[i+1] + beta[i].

The scheme is unconditionally stable; each step costs O(Nx).
"""

import math
from dataclasses import dataclass
from typing import Callable, Iterator, List, Optional

import numpy as np

from .cancel import CancellationToken
from .errors import ExcessiveWorkloadError, InvalidParameterError
from .materials import ALUMINIUM, Material


MAX_WORK = 50_000_000    # interior node updates allowed per solve


@dataclass(frozen=True)
class HeatGridParameters:
    """
    Rod geometry, temperatures and discretization steps.
    """
    length: float = 0.1           # m
    left_temp: float = 100.0      # °C
    right_temp: float = 100.0     # °C
    initial_temp: float = 20.0    # °C
    total_time: float = 2.0       # s
    dx: float = 0.001             # m
    dt: float = 0.01              # s

    def validate(self):
        for field_name in ('length', 'left_temp', 'right_temp', 'initial_temp',
                           'total_time', 'dx', 'dt'):
            value = getattr(self, field_name)
            if not math.isfinite(value):
                raise InvalidParameterError(
                    f"{field_name} must be finite, got {value!r}"
                )
        if self.dx <= 0:
            raise InvalidParameterError(f"dx must be positive, got {self.dx!r}")
        if self.dt <= 0:
            raise InvalidParameterError(f"dt must be positive, got {self.dt!r}")
        if self.length <= self.dx:
            raise InvalidParameterError(
                f"length ({self.length!r}) must exceed dx ({self.dx!r})"
            )
        if self.total_time < 0:
            raise InvalidParameterError(
                f"total_time must not be negative, got {self.total_time!r}"
            )

    @property
    def segments(self) -> int:
        """Nx — number of grid segments, never fewer than two."""
        return max(int(self.length / self.dx), 2)

    @property
    def time_steps(self) -> int:
        """Nt — number of implicit steps."""
        return int(self.total_time / self.dt)

    @property
    def workload(self) -> int:
        """Interior node updates for the whole solve."""
        return (self.segments - 1) * self.time_steps


@dataclass
class TemperatureProfile:
    """Nodal temperatures at one instant, indexed 0..Nx."""
    temperatures: np.ndarray
    step: int
    dt: float
    dx: float

    @property
    def time(self) -> float:
        return self.step * self.dt

    @property
    def positions(self) -> np.ndarray:
        """Node coordinates (m)."""
        return np.arange(len(self.temperatures)) * self.dx

    @property
    def midpoint(self) -> float:
        """Temperature at the middle node."""
        return float(self.temperatures[len(self.temperatures) // 2])

    def __len__(self):
        return len(self.temperatures)


def elimination_coefficients(a: float, b: float, c: float, segments: int) -> List[float]:
    """
    Forward-elimination coefficients of the Thomas algorithm.

    alpha[0] = 0 and alpha[Nx] is unused (boundary node).
    """
    alpha = [0.0] * (segments + 1)
    for i in range(1, segments):
        alpha[i] = a / (b - c * alpha[i - 1])
    return alpha


def _initial_temps(params: HeatGridParameters) -> List[float]:
    nx = params.segments
    temps = [params.initial_temp] * (nx + 1)
    temps[0] = params.left_temp
    temps[nx] = params.right_temp
    return temps


def _march(params: HeatGridParameters, material: Material,
           cancel: Optional[CancellationToken]) -> Iterator[List[float]]:
    """
    Advance the rod in time, yielding the temperature list after every step.

    The yielded list is replaced, never mutated, on the following step.
    """
    nx = params.segments
    nt = params.time_steps
    dx, dt = params.dx, params.dt
    t_left, t_right = params.left_temp, params.right_temp

    a = material.conductivity / (dx * dx)
    c = a
    rc_dt = material.heat_capacity / dt
    b = 2 * material.conductivity / (dx * dx) + rc_dt

    alpha = elimination_coefficients(a, b, c, nx)
    denom = [0.0] * (nx + 1)
    for i in range(1, nx):
        denom[i] = b - c * alpha[i - 1]

    temps = _initial_temps(params)
    beta = [0.0] * (nx + 1)

    for step in range(nt):
        if cancel is not None:
            cancel.raise_if_cancelled(step)

        beta[0] = t_left
        for i in range(1, nx):
            beta[i] = (c * beta[i - 1] + rc_dt * temps[i]) / denom[i]

        new = [0.0] * (nx + 1)
        new[0] = t_left
        new[nx] = t_right
        for i in range(nx - 1, 0, -1):
            new[i] = alpha[i] * new[i + 1] + beta[i]

        temps = new
        yield temps


def _check(params: HeatGridParameters, material: Material, max_work: Optional[int],
           snapshot_every: Optional[int]):
    params.validate()
    material.validate()
    if snapshot_every is not None and snapshot_every < 1:
        raise InvalidParameterError(
            f"snapshot_every must be a positive step count, got {snapshot_every!r}"
        )
    # Nx and Nt overflow to inf for extreme but finite step sizes
    ratios = (params.length / params.dx, params.total_time / params.dt)
    if not all(math.isfinite(r) for r in ratios):
        if max_work is None:
            raise InvalidParameterError(
                f"Grid of length/dx = {ratios[0]:g} by total_time/dt = {ratios[1]:g} "
                f"cannot be built"
            )
        raise ExcessiveWorkloadError(math.inf, max_work)
    if max_work is not None and params.workload > max_work:
        raise ExcessiveWorkloadError(params.workload, max_work)


def _profile(temps: List[float], step: int, params: HeatGridParameters) -> TemperatureProfile:
    return TemperatureProfile(np.array(temps, dtype=float), step, params.dt, params.dx)


def solve_heat(params: HeatGridParameters,
               material: Material = ALUMINIUM,
               snapshot_every: Optional[int] = None,
               on_snapshot: Optional[Callable[[TemperatureProfile], None]] = None,
               max_work: Optional[int] = MAX_WORK,
               cancel: Optional[CancellationToken] = None) -> TemperatureProfile:
    """
    Run the implicit solve to total_time and return the final profile.

    Parameters
    ----------
    params : HeatGridParameters
    material : Material supplying ρ, c and λ
    snapshot_every : call on_snapshot after every N-th step (default 1
        when a callback is given)
    on_snapshot : receives a copy of the profile; it cannot affect the solve
    max_work : node-update budget, None for unlimited
    cancel : optional CancellationToken, polled once per step
    """
    _check(params, material, max_work, snapshot_every)
    if on_snapshot is not None and snapshot_every is None:
        snapshot_every = 1

    temps = _initial_temps(params)
    step = 0
    for step, temps in enumerate(_march(params, material, cancel), start=1):
        if on_snapshot is not None and step % snapshot_every == 0:
            on_snapshot(_profile(temps, step, params))

    return _profile(temps, step, params)


def iter_heat(params: HeatGridParameters,
              material: Material = ALUMINIUM,
              snapshot_every: Optional[int] = 1,
              max_work: Optional[int] = MAX_WORK,
              cancel: Optional[CancellationToken] = None) -> Iterator[TemperatureProfile]:
    """
    Generator form of solve_heat for progressive rendering.

    Yields the initial profile, then one profile every ``snapshot_every``
    steps, and always ends with the final profile. The solve is suspended
    between yields and resumes where it left off. Parameters are checked
    before the generator is returned.
    """
    _check(params, material, max_work, snapshot_every)
    if snapshot_every is None:
        snapshot_every = 1
    return _iter_profiles(params, material, snapshot_every, cancel)


def _iter_profiles(params, material, snapshot_every, cancel):
    yield _profile(_initial_temps(params), 0, params)

    last_yielded = 0
    step = 0
    temps = None
    for step, temps in enumerate(_march(params, material, cancel), start=1):
        if step % snapshot_every == 0:
            yield _profile(temps, step, params)
            last_yielded = step

    if step != last_yielded:
        yield _profile(temps, step, params)


class HeatDiffusionSolver:
    """
    Heat conduction solver bound to one rod material.

    Holds configuration only; each solve() call owns its working arrays.
    """

    def __init__(self, material: Material = ALUMINIUM,
                 max_work: Optional[int] = MAX_WORK):
        material.validate()
        self.material = material
        self.max_work = max_work

    def solve(self, params: HeatGridParameters,
              snapshot_every: Optional[int] = None,
              on_snapshot: Optional[Callable[[TemperatureProfile], None]] = None,
              cancel: Optional[CancellationToken] = None) -> TemperatureProfile:
        return solve_heat(params, self.material,
                          snapshot_every=snapshot_every,
                          on_snapshot=on_snapshot,
                          max_work=self.max_work,
                          cancel=cancel)

    def iter_solve(self, params: HeatGridParameters, snapshot_every: int = 1,
                   cancel: Optional[CancellationToken] = None) -> Iterator[TemperatureProfile]:
        return iter_heat(params, self.material, snapshot_every=snapshot_every,
                         max_work=self.max_work, cancel=cancel)
