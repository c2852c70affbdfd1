"""
Simulation layer: a mock game frame that uses the time algebra.

- CarSimulation: inputs, animation, sub-stepped physics and a camera
- run_frames: reference outer loop feeding one frame step per update
- FrameHistory: per-frame records for analysis and plotting
"""

from timedsim.sim.car import CarSimulation, CarSimulationConfig, CarState
from timedsim.sim.driver import run_frames
from timedsim.sim.history import FrameHistory, FrameRecord

__all__ = [
    "CarSimulation",
    "CarSimulationConfig",
    "CarState",
    "run_frames",
    "FrameHistory",
    "FrameRecord",
]
