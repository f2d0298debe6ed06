#!/usr/bin/env python3
"""
═══════════════════════════════════════════════════════════════════════════════
  STEP-SIZE LABORATORY — Main Runner
═══════════════════════════════════════════════════════════════════════════════

  Executes both step-size studies:
    1. Flight with drag: Euler trajectories for dt = 1 … 0.0001 s
    2. Drag-free check against the vacuum formulas
    3. Trajectory animation
    4. Heat conduction: mid-rod temperature over a (dt, dx) grid
    5. Heat solver vs analytic series
    6. Rod heating animation from solver snapshots

  All outputs saved to outputs/ directory.

  Usage:
    python main.py               # Run everything
    python main.py --quick       # Coarse heat grid, skip animations
    python main.py --out DIR     # Write figures to DIR
═══════════════════════════════════════════════════════════════════════════════
"""

import os
import sys
import time
from dataclasses import replace

import matplotlib
matplotlib.use('Agg')
import matplotlib.pyplot as plt

from steplab.environment import EARTH
from steplab.errors import SteplabError
from steplab.heat import HeatGridParameters, solve_heat
from steplab.materials import ALUMINIUM
from steplab.sweep import (
    HEAT_SPACE_STEPS, HEAT_TIME_STEPS, format_step_table,
    heat_grid_table, trajectory_step_table,
)
from steplab.trajectory import TrajectoryParameters
from steplab.validation import validate_drag_free, validate_heat
from steplab.visualization import (
    create_heat_animation, create_trajectory_animation, ensure_output_dir,
    plot_grid_convergence, plot_step_comparison, plot_temperature_profiles,
)


def section(title):
    print(f"\n{'─'*60}")
    print(f"  {title}")
    print(f"{'─'*60}")


def _option(name, default):
    if name in sys.argv:
        idx = sys.argv.index(name)
        if idx + 1 < len(sys.argv):
            return sys.argv[idx + 1]
    return default


def main():
    start_time = time.time()
    quick = '--quick' in sys.argv
    out = ensure_output_dir(_option('--out', 'outputs'))

    # ══════════════════════════════════════════════════════════════════════
    #  PHASE 1: Flight with drag, time-step comparison
    # ══════════════════════════════════════════════════════════════════════
    section("PHASE 1: Euler Time-Step Comparison (flight with drag)")
    launch = TrajectoryParameters(height=0.0, angle_deg=45.0, speed=15.0,
                                  area=0.10, mass=1.0, dt=0.05)
    print(f"  {EARTH.name}: g={EARTH.gravity} m/s², Cd={EARTH.drag_coefficient}, "
          f"ρ={EARTH.air_density} kg/m³\n")

    rows = trajectory_step_table(launch, environment=EARTH)
    print(format_step_table(rows))

    fig = plot_step_comparison(rows, save_path=f'{out}/01_trajectory_steps.png')
    plt.close(fig)
    print(f"\n  ✓ Saved: {out}/01_trajectory_steps.png")

    # ══════════════════════════════════════════════════════════════════════
    #  PHASE 2: Drag-free check
    # ══════════════════════════════════════════════════════════════════════
    section("PHASE 2: Drag-Free Convergence")
    validate_drag_free(launch, environment=EARTH)

    # ══════════════════════════════════════════════════════════════════════
    #  PHASE 3: Trajectory animation
    # ══════════════════════════════════════════════════════════════════════
    if not quick:
        section("PHASE 3: Trajectory Animation (GIF)")
        create_trajectory_animation(rows[2].result,
                                    save_path=f'{out}/02_trajectory_animation.gif')
        print(f"  ✓ Saved: {out}/02_trajectory_animation.gif")
    else:
        section("PHASE 3: Animation SKIPPED (--quick mode)")

    # ══════════════════════════════════════════════════════════════════════
    #  PHASE 4: Heat conduction grid convergence
    # ══════════════════════════════════════════════════════════════════════
    section("PHASE 4: Heat Conduction Grid Convergence (aluminium rod)")
    rod = HeatGridParameters(length=0.1, left_temp=100.0, right_temp=100.0,
                             initial_temp=20.0, total_time=2.0, dx=0.001, dt=0.01)
    if quick:
        time_steps, space_steps = HEAT_TIME_STEPS[:3], HEAT_SPACE_STEPS[:3]
    else:
        time_steps, space_steps = HEAT_TIME_STEPS, HEAT_SPACE_STEPS

    try:
        table = heat_grid_table(rod, time_steps, space_steps, material=ALUMINIUM)
    except SteplabError as exc:
        print(f"  ✗ Grid sweep aborted: {exc}")
        return 1
    print(table.format())

    fig = plot_grid_convergence(table, save_path=f'{out}/03_grid_convergence.png')
    plt.close(fig)
    print(f"\n  ✓ Saved: {out}/03_grid_convergence.png")

    profiles = [solve_heat(replace(rod, total_time=t)) for t in (0.5, 2.0, 10.0, 60.0)]
    fig = plot_temperature_profiles(profiles, save_path=f'{out}/04_rod_profiles.png')
    plt.close(fig)
    print(f"  ✓ Saved: {out}/04_rod_profiles.png")

    # ══════════════════════════════════════════════════════════════════════
    #  PHASE 5: Analytic comparison
    # ══════════════════════════════════════════════════════════════════════
    section("PHASE 5: Implicit Solver vs Fourier Series")
    validate_heat(rod)

    # ══════════════════════════════════════════════════════════════════════
    #  PHASE 6: Rod heating animation
    # ══════════════════════════════════════════════════════════════════════
    if not quick:
        section("PHASE 6: Rod Heating Animation (GIF)")
        create_heat_animation(rod, ALUMINIUM, save_path=f'{out}/05_heat_animation.gif')
        print(f"  ✓ Saved: {out}/05_heat_animation.gif")
    else:
        section("PHASE 6: Animation SKIPPED (--quick mode)")

    elapsed = time.time() - start_time
    section("COMPLETE")
    print(f"\n  All outputs saved to: {os.path.abspath(out)}/")
    print(f"  Total runtime: {elapsed:.1f} seconds\n")
    return 0


if __name__ == "__main__":
    sys.exit(main())
