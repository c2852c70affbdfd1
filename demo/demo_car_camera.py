#!/usr/bin/env python3
"""
Demo: Car and Camera Across Three Clocks

Runs the mock game frame with a drifting frame rate:

1. Frame clock starts at 30 fps and slows down every frame
2. Physics runs at a fixed 64 Hz and is interpolated to each frame end
3. The camera follows the car from the frame end
4. Every value is checked against the clock it claims to be on

Output: output/demo_car_camera/history.png
"""

import logging
import os

import matplotlib.pyplot as plt
import numpy as np

from timedsim.core import make_clock
from timedsim.sim import CarSimulation, CarSimulationConfig, run_frames
from timedsim.viz import plot_frame_history, save_figure


def main():
    logging.basicConfig(level=logging.INFO, format="%(name)s: %(message)s")

    print("=" * 60)
    print("  CAR AND CAMERA ACROSS THREE CLOCKS")
    print("=" * 60)

    n_frames = 20
    first_step = 1.0 / 30.0
    step_growth = 0.001

    print("\n1. Setting up simulation...")
    config = CarSimulationConfig(physics_step=1.0 / 64.0, animation_mode="start_frame")
    sim = CarSimulation(config)
    print(f"   Physics step: {config.physics_step:.6f}s")
    print(f"   Frame step: {first_step:.6f}s, growing {step_growth}s per frame")

    print(f"\n2. Running {n_frames} frames...")
    clock = run_frames(sim, make_clock(first_step), n_frames, step_growth=step_growth)

    data = sim.history.as_arrays()
    print(f"   Simulated time: {clock.time:.4f}s")
    print(f"   Physics steps: {sim.total_substeps} "
          f"(min {data['substeps'].min()}, max {data['substeps'].max()} per frame)")
    print(f"   Interpolation alpha: {np.nanmin(data['alpha']):.3f} - {np.nanmax(data['alpha']):.3f}")
    print(f"   Car: pos={sim.car_state.pos.value:.4f}, t={sim.car_state.pos.time:.4f}")
    print(f"   Camera: pos={sim.camera_pos.value:.4f}, t={sim.camera_pos.time:.4f}")

    print("\n3. Creating visualization...")
    fig, _ = plot_frame_history(sim.history, title="Car and Camera (drifting frame rate)")
    os.makedirs("output/demo_car_camera", exist_ok=True)
    save_figure(fig, "output/demo_car_camera/history.png")
    plt.close(fig)
    print("   Saved: output/demo_car_camera/history.png")

    print("\n" + "=" * 60)
    print("  Done: no consistency faults in any frame.")
    print("=" * 60)


if __name__ == "__main__":
    main()
