"""
Visualization utilities.

- Car and camera positions against simulation time
- Physics steps and interpolation factor per frame
"""

from timedsim.viz.history import plot_frame_history, save_figure

__all__ = [
    "plot_frame_history",
    "save_figure",
]
