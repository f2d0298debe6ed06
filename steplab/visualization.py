"""
Visualization Engine
====================
Plots for step-size studies:
  1. Trajectories for several time steps (altitude vs distance)
  2. Temperature profiles along the rod
  3. Grid-convergence heat map of mid-rod temperature
  4. Animated trajectory (GIF)
  5. Animated heating of the rod from solver snapshots (GIF)
"""

import os
from typing import List, Optional, Sequence

import numpy as np
import matplotlib
matplotlib.use('Agg')
import matplotlib.pyplot as plt

from .heat import HeatGridParameters, TemperatureProfile, iter_heat
from .materials import ALUMINIUM, Material
from .sweep import GridConvergenceTable, StepComparison
from .trajectory import TrajectoryResult


# ── Style Configuration ───────────────────────────────────────────────────
STYLE = {
    'bg_color': '#0a0a0a',
    'text_color': '#e0e0e0',
    'grid_color': '#333333',
    'accent_colors': ['#00d4ff', '#ff6b35', '#00e676', '#ffeb3b',
                      '#e040fb', '#ff5252'],
}


def _apply_dark_style(fig, axes):
    """Apply consistent dark theme to figure and axes."""
    fig.patch.set_facecolor(STYLE['bg_color'])
    if not isinstance(axes, np.ndarray):
        axes = [axes]
    else:
        axes = axes.flatten()

    for ax in axes:
        ax.set_facecolor(STYLE['bg_color'])
        ax.tick_params(colors=STYLE['text_color'])
        ax.xaxis.label.set_color(STYLE['text_color'])
        ax.yaxis.label.set_color(STYLE['text_color'])
        ax.title.set_color(STYLE['text_color'])
        ax.grid(True, color=STYLE['grid_color'], alpha=0.4, linewidth=0.5)
        for spine in ax.spines.values():
            spine.set_color(STYLE['grid_color'])


def _legend(ax):
    ax.legend(fontsize=10, facecolor='#1a1a1a', edgecolor='#444',
              labelcolor=STYLE['text_color'])


def ensure_output_dir(path: str = 'outputs'):
    os.makedirs(path, exist_ok=True)
    return path


# ══════════════════════════════════════════════════════════════════════════
#  1. Trajectory step comparison
# ══════════════════════════════════════════════════════════════════════════

def plot_step_comparison(rows: List[StepComparison],
                         save_path: str = None) -> plt.Figure:
    """Overlay the trajectories computed with different time steps."""
    fig, ax = plt.subplots(figsize=(12, 6))
    _apply_dark_style(fig, ax)

    colors = STYLE['accent_colors']
    for idx, row in enumerate(rows):
        ax.plot(row.result.x, row.result.y, color=colors[idx % len(colors)],
                linewidth=2, label=f'dt={row.dt:g}')

    max_x = max(row.distance for row in rows)
    max_y = max(row.max_height for row in rows)
    ax.set_xlim(0, max(max_x, 1e-9) * 1.15)
    ax.set_ylim(0, max(max_y, 1e-9) * 1.25)
    ax.set_xlabel('Distance (m)', fontsize=12)
    ax.set_ylabel('Altitude (m)', fontsize=12)
    ax.set_title('Flight with Quadratic Drag — Euler Time-Step Comparison',
                 fontsize=13, fontweight='bold')
    _legend(ax)

    plt.tight_layout()
    if save_path:
        fig.savefig(save_path, dpi=150, bbox_inches='tight',
                    facecolor=STYLE['bg_color'])
    return fig


# ══════════════════════════════════════════════════════════════════════════
#  2. Temperature profiles
# ══════════════════════════════════════════════════════════════════════════

def plot_temperature_profiles(profiles: Sequence[TemperatureProfile],
                              save_path: str = None) -> plt.Figure:
    """Temperature along the rod, one curve per profile."""
    fig, ax = plt.subplots(figsize=(12, 5))
    _apply_dark_style(fig, ax)

    colors = STYLE['accent_colors']
    for idx, profile in enumerate(profiles):
        ax.plot(profile.positions, profile.temperatures,
                color=colors[idx % len(colors)], linewidth=2,
                label=f't={profile.time:g} s (dx={profile.dx:g})')

    ax.set_xlabel('Position along rod (m)', fontsize=12)
    ax.set_ylabel('Temperature (°C)', fontsize=12)
    ax.set_title('Rod Temperature Profiles', fontsize=13, fontweight='bold')
    _legend(ax)

    plt.tight_layout()
    if save_path:
        fig.savefig(save_path, dpi=150, bbox_inches='tight',
                    facecolor=STYLE['bg_color'])
    return fig


# ══════════════════════════════════════════════════════════════════════════
#  3. Grid convergence map
# ══════════════════════════════════════════════════════════════════════════

def plot_grid_convergence(table: GridConvergenceTable,
                          save_path: str = None) -> plt.Figure:
    """Heat map of mid-rod temperature over (dt, dx)."""
    fig, ax = plt.subplots(figsize=(9, 6))
    _apply_dark_style(fig, ax)
    ax.grid(False)

    data = np.ma.masked_invalid(table.midpoints)
    image = ax.imshow(data, cmap='inferno', aspect='auto')
    cbar = fig.colorbar(image, ax=ax)
    cbar.set_label('Mid-rod temperature (°C)', color=STYLE['text_color'])
    cbar.ax.tick_params(colors=STYLE['text_color'])

    ax.set_xticks(range(len(table.space_steps)))
    ax.set_xticklabels([f'{dx:g}' for dx in table.space_steps])
    ax.set_yticks(range(len(table.time_steps)))
    ax.set_yticklabels([f'{dt:g}' for dt in table.time_steps])
    ax.set_xlabel('dx (m)')
    ax.set_ylabel('dt (s)')
    ax.set_title('Grid Convergence — Mid-Rod Temperature', fontweight='bold')

    for i in range(table.midpoints.shape[0]):
        for j in range(table.midpoints.shape[1]):
            value = table.midpoints[i, j]
            text = '—' if np.isnan(value) else f'{value:.2f}'
            ax.text(j, i, text, ha='center', va='center',
                    color='#ffffff', fontsize=10, fontfamily='monospace')

    plt.tight_layout()
    if save_path:
        fig.savefig(save_path, dpi=150, bbox_inches='tight',
                    facecolor=STYLE['bg_color'])
    return fig


# ══════════════════════════════════════════════════════════════════════════
#  4. Animated trajectory (GIF)
# ══════════════════════════════════════════════════════════════════════════

def create_trajectory_animation(result: TrajectoryResult,
                                save_path: str = 'outputs/trajectory_anim.gif',
                                frames: int = 100) -> str:
    """Create animated GIF of the path with a trail and a moving ball."""
    from matplotlib.animation import FuncAnimation, PillowWriter

    fig, ax = plt.subplots(figsize=(12, 6))
    _apply_dark_style(fig, ax)

    x, y = result.x, result.y
    ax.set_xlim(0, max(float(np.max(x)), 1e-9) * 1.15)
    ax.set_ylim(0, max(result.max_height, 1e-9) * 1.25)
    ax.set_xlabel('Distance (m)', fontsize=12)
    ax.set_ylabel('Altitude (m)', fontsize=12)
    ax.set_title(f'Trajectory Animation — dt={result.dt:g} s',
                 fontsize=14, fontweight='bold')

    trail_line, = ax.plot([], [], color='#00d4ff', linewidth=2)
    ball, = ax.plot([], [], 'o', color='#ff5252', markersize=10)

    total_pts = len(x)
    step = max(1, total_pts // frames)
    indices = list(range(0, total_pts, step))
    if indices[-1] != total_pts - 1:
        indices.append(total_pts - 1)

    def animate(frame_idx):
        idx = indices[frame_idx]
        trail_line.set_data(x[:idx + 1], y[:idx + 1])
        ball.set_data([x[idx]], [y[idx]])
        return trail_line, ball

    anim = FuncAnimation(fig, animate, frames=len(indices), interval=20, blit=True)
    anim.save(save_path, writer=PillowWriter(fps=25),
              savefig_kwargs={'facecolor': STYLE['bg_color']})
    plt.close(fig)
    return save_path


# ══════════════════════════════════════════════════════════════════════════
#  5. Animated rod heating (GIF)
# ══════════════════════════════════════════════════════════════════════════

def create_heat_animation(params: HeatGridParameters,
                          material: Material = ALUMINIUM,
                          save_path: str = 'outputs/heat_anim.gif',
                          snapshot_every: int = 2,
                          max_frames: Optional[int] = 150) -> str:
    """
    Animate the rod heating up, one frame per solver snapshot.

    Long runs are thinned to ``max_frames`` evenly spaced snapshots.
    """
    from matplotlib.animation import FuncAnimation, PillowWriter

    snapshots = []
    for profile in iter_heat(params, material, snapshot_every=snapshot_every):
        snapshots.append(profile)
    if max_frames is not None and len(snapshots) > max_frames:
        picks = np.linspace(0, len(snapshots) - 1, max_frames).round().astype(int)
        snapshots = [snapshots[i] for i in picks]

    fig, ax = plt.subplots(figsize=(12, 5))
    _apply_dark_style(fig, ax)

    temps_all = np.concatenate([p.temperatures for p in snapshots])
    low, high = float(np.min(temps_all)), float(np.max(temps_all))
    pad = max(high - low, 1.0) * 0.05
    ax.set_xlim(0, snapshots[0].positions[-1])
    ax.set_ylim(low - pad, high + pad)
    ax.set_xlabel('Position along rod (m)', fontsize=12)
    ax.set_ylabel('Temperature (°C)', fontsize=12)
    ax.set_title(f'Heat Conduction — {material.name}', fontsize=14, fontweight='bold')

    line, = ax.plot([], [], color='#ff5252', linewidth=3)
    time_text = ax.text(0.02, 0.92, '', transform=ax.transAxes,
                        color=STYLE['text_color'], fontsize=11, fontfamily='monospace')

    def animate(frame_idx):
        profile = snapshots[frame_idx]
        line.set_data(profile.positions, profile.temperatures)
        time_text.set_text(f't={profile.time:.2f}s | T_mid={profile.midpoint:.2f} °C')
        return line, time_text

    anim = FuncAnimation(fig, animate, frames=len(snapshots), interval=40, blit=True)
    anim.save(save_path, writer=PillowWriter(fps=25),
              savefig_kwargs={'facecolor': STYLE['bg_color']})
    plt.close(fig)
    return save_path
