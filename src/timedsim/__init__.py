"""
timedsim: time-consistent arithmetic for real-time simulation loops

Simulation code routinely combines values sampled at different times by
accident: a stale input with a fresh position, a velocity integrated twice,
a step size from the wrong clock. timedsim tags every value with the
simulation time it is valid at and refuses to combine mismatched values.

Core concepts:
- Timed: a float plus its as-of time (or no time, for constants)
- Clocks: step sizes tagged with the start of their step
- FixedStepper: fixed-rate physics under a variable frame rate
- lerp_across_time: the one sanctioned way to blend two different times

Layers:
- timedsim.core: the time algebra
- timedsim.sim:  a mock car/camera frame built on it
- timedsim.viz:  plots of recorded frames
"""

__version__ = "0.1.0"
