#!/usr/bin/env python3
"""
Demo: Mistakes Caught by Time Tags

Integrates a spring pulling a position toward a target, first correctly,
then with three classic ordering mistakes. Each mistake raises
ConsistencyError at the line where it happens instead of silently
producing a slightly wrong trajectory.

1. Integrating velocity before position
2. Computing acceleration from the already-updated position
3. Sampling the target at the end of the step instead of the start
"""

from timedsim.core import ConsistencyError, Timed, advance


def run_spring(mistake: str | None = None, n_steps: int = 20) -> Timed:
    dt = Timed.sim_start(1.0 / 32.0)
    pos = Timed.sim_start(1.0)
    vel = Timed.sim_start(2.0)

    for _ in range(n_steps):
        if mistake == "end_of_step_target":
            target = Timed(10.0, dt.time + dt.value)
        else:
            target = Timed.like(10.0, dt)

        if mistake == "velocity_first":
            accel = (target - pos) * 4.0
            vel.integrate(accel, dt)
            pos.integrate(vel, dt)
        elif mistake == "accel_after_position":
            pos.integrate(vel, dt)
            accel = (target - pos) * 4.0
            vel.integrate(accel, dt)
        else:
            accel = (target - pos) * 4.0
            pos.integrate(vel, dt)
            vel.integrate(accel, dt)

        advance(dt)

    return pos


def main():
    print("=" * 60)
    print("  MISTAKES CAUGHT BY TIME TAGS")
    print("=" * 60)

    pos = run_spring()
    print(f"\nCorrect ordering: pos={pos.value:.4f} at t={pos.time:.4f}")

    for mistake in ("velocity_first", "accel_after_position", "end_of_step_target"):
        try:
            run_spring(mistake)
            print(f"\n{mistake}: not detected")
        except ConsistencyError as e:
            print(f"\n{mistake}: caught")
            print(f"   {e}")


if __name__ == "__main__":
    main()
