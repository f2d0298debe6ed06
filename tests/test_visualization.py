"""
Smoke tests for the plotting helpers (Agg backend, nothing shown).
Run: python -m pytest tests/ -v
"""

import sys
import os
import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

import matplotlib
matplotlib.use('Agg')
import matplotlib.pyplot as plt

from steplab.heat import HeatGridParameters, solve_heat
from steplab.sweep import heat_grid_table, trajectory_step_table
from steplab.trajectory import TrajectoryParameters, simulate_trajectory
from steplab.visualization import (
    create_heat_animation, create_trajectory_animation, ensure_output_dir,
    plot_grid_convergence, plot_step_comparison, plot_temperature_profiles,
)


ROD = HeatGridParameters(total_time=1.0, dt=0.1, dx=0.01)


class TestFigures:

    def test_step_comparison(self, tmp_path):
        rows = trajectory_step_table(TrajectoryParameters(), steps=(1.0, 0.1, 0.01))
        path = tmp_path / 'steps.png'
        fig = plot_step_comparison(rows, save_path=str(path))
        assert len(fig.axes[0].lines) == 3
        assert path.exists()
        plt.close(fig)

    def test_temperature_profiles(self):
        profiles = [solve_heat(ROD), solve_heat(HeatGridParameters(dx=0.01, dt=0.1))]
        fig = plot_temperature_profiles(profiles)
        assert len(fig.axes[0].lines) == 2
        plt.close(fig)

    def test_grid_convergence_with_gaps(self, tmp_path):
        table = heat_grid_table(ROD, time_steps=(0.1, 0.05), space_steps=(0.1, 0.01))
        path = tmp_path / 'grid.png'
        fig = plot_grid_convergence(table, save_path=str(path))
        assert path.exists()
        plt.close(fig)

    def test_ensure_output_dir(self, tmp_path):
        target = tmp_path / 'nested' / 'out'
        assert ensure_output_dir(str(target)) == str(target)
        assert target.is_dir()


class TestAnimations:

    def test_trajectory_gif(self, tmp_path):
        result = simulate_trajectory(TrajectoryParameters(dt=0.05))
        path = tmp_path / 'traj.gif'
        assert create_trajectory_animation(result, save_path=str(path), frames=10) == str(path)
        assert path.stat().st_size > 0

    def test_heat_gif(self, tmp_path):
        path = tmp_path / 'heat.gif'
        create_heat_animation(ROD, save_path=str(path), snapshot_every=2, max_frames=4)
        assert path.stat().st_size > 0


if __name__ == "__main__":
    pytest.main([__file__, '-v'])
