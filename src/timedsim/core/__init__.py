"""
Core time algebra.

This layer knows NOTHING about cars, cameras or frames. It only knows:
- Timed values: a float plus the simulation time it is valid at
- Consistency: tagged values may only be combined at the same time
- Clocks: a step size tagged with the time its step starts
- Sub-stepping: running a fixed step to keep up with a variable one
- Interpolation: reconciling fixed-step state with a demanded time

Every violation of the time contract raises ConsistencyError.
"""

from timedsim.core.consistency import (
    TIME_EPSILON,
    ConsistencyError,
    check_consistency,
    consistent_time,
    times_match,
)
from timedsim.core.timed import Timed, lerp, lerp_across_time
from timedsim.core.clock import advance, end_time, make_clock
from timedsim.core.velocity import velocity
from timedsim.core.interpolate import interpolate_state, snapshot_state, state_time
from timedsim.core.substepper import FixedStepper, SubStepperConfig, SubStepResult

__all__ = [
    "TIME_EPSILON",
    "ConsistencyError",
    "check_consistency",
    "consistent_time",
    "times_match",
    "Timed",
    "lerp",
    "lerp_across_time",
    "advance",
    "end_time",
    "make_clock",
    "velocity",
    "interpolate_state",
    "snapshot_state",
    "state_time",
    "FixedStepper",
    "SubStepperConfig",
    "SubStepResult",
]
