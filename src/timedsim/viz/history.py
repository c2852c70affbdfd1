"""
Plots of recorded simulation frames.

Shows how the interpolated car and the camera move through simulation
time, and how many fixed physics steps each frame needed.
"""

from __future__ import annotations
from pathlib import Path
from typing import TYPE_CHECKING

import numpy as np
import matplotlib.pyplot as plt
from matplotlib.figure import Figure
from matplotlib.axes import Axes

if TYPE_CHECKING:
    from timedsim.sim.history import FrameHistory


def plot_frame_history(
    history: "FrameHistory",
    title: str = "Car and Camera",
    figsize: tuple[float, float] = (10, 7),
    car_color: str = "tab:blue",
    camera_color: str = "tab:orange",
) -> tuple[Figure, np.ndarray]:
    """
    Plot positions against time, and sub-steps per frame.

    Args:
        history: Recorded frames
        title: Figure title
        figsize: Figure size
        car_color: Line color for the car
        camera_color: Line color for the camera

    Returns:
        (fig, axes) tuple, axes has two rows
    """
    data = history.as_arrays()

    fig, axes = plt.subplots(2, 1, figsize=figsize, sharex=True)

    ax: Axes = axes[0]
    ax.plot(data["car_time"], data["car_pos"], "o-", color=car_color,
            markersize=3, label="Car (interpolated)")
    # Camera position is valid one frame step after the car time
    camera_time = data["car_time"] + data["frame_step"]
    ax.plot(camera_time, data["camera_pos"], "s--", color=camera_color,
            markersize=3, label="Camera")
    ax.set_ylabel("Position")
    ax.set_title(title, fontsize=12)
    ax.legend(loc="upper left")
    ax.grid(True, alpha=0.3)

    ax = axes[1]
    ax.bar(data["frame_time"], data["substeps"], width=data["frame_step"] * 0.8,
           align="edge", color="gray", alpha=0.7, label="Physics steps")
    ax.set_xlabel("Simulation time (s)")
    ax.set_ylabel("Steps per frame")
    ax.grid(True, alpha=0.3)

    ax_alpha = ax.twinx()
    ax_alpha.plot(data["frame_time"] + data["frame_step"], data["alpha"], "k.",
                  label="Interpolation alpha")
    ax_alpha.set_ylim(0.0, 1.05)
    ax_alpha.set_ylabel("alpha")

    fig.tight_layout()
    return fig, axes


def save_figure(fig: Figure, path: str | Path, dpi: int = 150, **kwargs) -> None:
    """Save figure to file."""
    fig.savefig(path, dpi=dpi, bbox_inches="tight", **kwargs)
