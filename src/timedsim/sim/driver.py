"""
A minimal outer frame loop.

Real applications measure each frame's duration and hand it to the
simulation. This driver stands in for that loop: it feeds a frame clock
whose step may grow by a fixed amount each frame, mimicking a frame rate
that drifts.
"""

from __future__ import annotations
from typing import TYPE_CHECKING

from timedsim.core.clock import advance
from timedsim.core.timed import Timed

if TYPE_CHECKING:
    from timedsim.sim.car import CarSimulation


def run_frames(
    simulation: "CarSimulation",
    frame_step: Timed,
    n_frames: int,
    step_growth: float = 0.0,
) -> Timed:
    """
    Initialise the simulation and run it for n frames.

    Args:
        simulation: Simulation to drive
        frame_step: First frame's clock (value = step, time = start)
        n_frames: Number of frames to run
        step_growth: Added to the frame step after every frame

    Returns:
        The frame clock after the last frame (tagged at the next frame's start)
    """
    clock = frame_step.copy()
    simulation.init(clock)

    for _ in range(n_frames):
        simulation.update(clock)
        simulation.render()
        advance(clock, clock + step_growth)

    return clock
