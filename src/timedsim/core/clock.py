"""
Clocks: step sizes that know when their step started.

A clock is an ordinary Timed value read with a particular meaning:
- value: the size of the current step (dt)
- time:  the simulation time at which the current step starts

Each subsystem (frame, physics, camera) owns its own clock and passes it
explicitly to the code that uses it. There is no global "now".
"""

from __future__ import annotations

from timedsim.core.consistency import consistent_time, require_time
from timedsim.core.timed import Timed


def make_clock(step: float, start: float = 0.0) -> Timed:
    """Create a clock with the given step size, starting at `start`."""
    return Timed(step, start)


def end_time(clock: Timed) -> float:
    """Time at which the clock's current step ends."""
    return require_time(clock, "read the end time of") + clock.value


def advance(clock: Timed, new_step: Timed | None = None) -> None:
    """
    Move a clock past the step it just took, in place.

    The clock's time moves forward by its current value, then its value
    becomes the size of the next step.

    Args:
        clock: Tagged clock to advance
        new_step: Size of the next step. May be a constant, or a tagged
            value computed from live quantities, in which case it must be
            valid at the clock's current (pre-advance) time. Defaults to the
            clock's current value, i.e. a constant-rate clock.

    Raises:
        ConsistencyError: If the clock is a constant or new_step is from
            a different time
    """
    require_time(clock, "advance")
    if new_step is None:
        new_step = clock
    consistent_time(clock, new_step, operation="advance clock with step")

    next_value = new_step.value
    clock.time += clock.value
    clock.value = next_value
