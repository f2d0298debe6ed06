"""
Ballistic Trajectory with Quadratic Drag
========================================
Integrates 2-D projectile motion under gravity and quadratic air drag
with the explicit (forward) Euler method:

    k  = ½ Cd ρ A / m
    v  = |(vx, vy)|
    vx ← vx − k vx v dt
    vy ← vy − (g + k vy v) dt
    x  ← x + vx dt
    y  ← y + vy dt

Velocity is updated first and the updated velocity moves the position.
The run ends at ground impact (y < 0) or once x passes the distance cutoff.
Only points at or above ground are recorded in the path.

Coordinate system:
  x = distance downrange
  y = altitude (up positive)

Output: TrajectoryResult with the recorded path and summary scalars.
"""

import math
from dataclasses import dataclass
from typing import List, NamedTuple, Optional

import numpy as np

from .cancel import CancellationToken
from .environment import EARTH, Environment
from .errors import InvalidParameterError


DISTANCE_CUTOFF = 10000.0    # m   runaway guard, not a physical boundary
MAX_STEPS = 10_000_000       # runaway guard for flights that never come down


@dataclass(frozen=True)
class TrajectoryParameters:
    """
    Launch conditions and integration step for one trajectory.
    """
    height: float = 0.0       # m    initial altitude
    angle_deg: float = 45.0   # deg  above horizontal
    speed: float = 15.0       # m/s  launch speed
    area: float = 0.10        # m²   cross-section
    mass: float = 1.0         # kg
    dt: float = 0.05          # s    time step

    def validate(self):
        for field_name in ('height', 'angle_deg', 'speed', 'area', 'mass', 'dt'):
            value = getattr(self, field_name)
            if not math.isfinite(value):
                raise InvalidParameterError(
                    f"{field_name} must be finite, got {value!r}"
                )
        if self.mass <= 0:
            raise InvalidParameterError(f"mass must be positive, got {self.mass!r}")
        if self.dt <= 0:
            raise InvalidParameterError(f"dt must be positive, got {self.dt!r}")
        if self.height < 0:
            raise InvalidParameterError(
                f"height must be at or above ground level, got {self.height!r}"
            )

    def initial_velocity(self):
        """Launch speed + angle converted to (vx, vy)."""
        theta = np.radians(self.angle_deg)
        return (float(self.speed * np.cos(theta)),
                float(self.speed * np.sin(theta)))


class TrajectoryPoint(NamedTuple):
    distance: float
    altitude: float


@dataclass
class TrajectoryResult:
    """Complete trajectory output."""
    distance: float                 # x after the last step
    max_height: float
    end_speed: float                # |v| after the last step
    path: List[TrajectoryPoint]     # time order, starts at launch point
    dt: float
    steps: int
    impacted: bool                  # False if a runaway guard ended the run

    @property
    def flight_time(self) -> float:
        return self.steps * self.dt

    @property
    def x(self) -> np.ndarray:
        return np.array([p.distance for p in self.path])

    @property
    def y(self) -> np.ndarray:
        return np.array([p.altitude for p in self.path])

    def summary(self) -> str:
        """Human-readable summary string."""
        status = "ground impact" if self.impacted else "stopped by cutoff"
        lines = [
            f"╔══════════════════════════════════════════════════════╗",
            f"║  TRAJECTORY SUMMARY — dt = {self.dt:<26g}║",
            f"╠══════════════════════════════════════════════════════╣",
            f"║  Distance     : {self.distance:>10.4f} m{'':<25s} ║",
            f"║  Max height   : {self.max_height:>10.4f} m{'':<25s} ║",
            f"║  End speed    : {self.end_speed:>10.4f} m/s{'':<23s} ║",
            f"║  Flight time  : {self.flight_time:>10.4f} s{'':<25s} ║",
            f"║  Steps        : {self.steps:>10d}{'':<27s} ║",
            f"║  Termination  : {status:<36s} ║",
            f"╚══════════════════════════════════════════════════════╝",
        ]
        return '\n'.join(lines)


def simulate_trajectory(params: TrajectoryParameters,
                        environment: Environment = EARTH,
                        distance_cutoff: float = DISTANCE_CUTOFF,
                        max_steps: int = MAX_STEPS,
                        cancel: Optional[CancellationToken] = None) -> TrajectoryResult:
    """
    Forward Euler integration of a drag-affected trajectory.

    Parameters
    ----------
    params : TrajectoryParameters
    environment : Environment supplying g, Cd and air density
    distance_cutoff : stop once x exceeds this distance (m)
    max_steps : stop after this many steps
    cancel : optional CancellationToken, polled once per step

    Returns
    -------
    TrajectoryResult
    """
    params.validate()
    environment.validate()

    dt = params.dt
    g = environment.gravity
    k = environment.drag_factor(params.area, params.mass)

    x, y = 0.0, float(params.height)
    vx, vy = params.initial_velocity()
    max_height = y
    path = [TrajectoryPoint(x, y)]
    steps = 0

    while y >= 0:
        if cancel is not None:
            cancel.raise_if_cancelled(steps)

        v = math.sqrt(vx * vx + vy * vy)
        if not math.isfinite(v):
            raise InvalidParameterError(
                f"speed overflowed to {v!r} after {steps} steps; "
                f"launch speed {params.speed!r} is out of range"
            )
        vx = vx - k * vx * v * dt
        vy = vy - (g + k * vy * v) * dt
        x = x + vx * dt
        y = y + vy * dt
        steps += 1

        if y >= 0:
            path.append(TrajectoryPoint(x, y))
            if y > max_height:
                max_height = y

        if x > distance_cutoff or steps >= max_steps:
            break

    return TrajectoryResult(
        distance=x,
        max_height=max_height,
        end_speed=math.sqrt(vx * vx + vy * vy),
        path=path,
        dt=dt,
        steps=steps,
        impacted=y < 0,
    )


class TrajectorySolver:
    """
    Trajectory solver bound to one environment.

    Holds configuration only; each solve() call is independent.
    """

    def __init__(self, environment: Environment = EARTH,
                 distance_cutoff: float = DISTANCE_CUTOFF,
                 max_steps: int = MAX_STEPS):
        environment.validate()
        if not distance_cutoff > 0:
            raise InvalidParameterError(
                f"distance_cutoff must be positive, got {distance_cutoff!r}"
            )
        if max_steps <= 0:
            raise InvalidParameterError(f"max_steps must be positive, got {max_steps!r}")
        self.environment = environment
        self.distance_cutoff = distance_cutoff
        self.max_steps = max_steps

    def solve(self, params: TrajectoryParameters,
              cancel: Optional[CancellationToken] = None) -> TrajectoryResult:
        return simulate_trajectory(params, self.environment,
                                   distance_cutoff=self.distance_cutoff,
                                   max_steps=self.max_steps,
                                   cancel=cancel)
