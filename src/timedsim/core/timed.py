"""
Timed: a float that knows the simulation time at which it is valid.

Arithmetic between two tagged values requires both tags to agree. This
catches a class of simulation bugs at the point they happen:
- mixing a stale sample with a fresh one
- integrating the same quantity twice in one step
- integrating with a step size from a different clock

Constants (time=None) are time-polymorphic and combine with anything.
The result of an operation takes the tag of whichever operand has one.

Only three operations move a value through time, and all of them mutate
in place: integrate(), finished_update() and clock.advance().
"""

from __future__ import annotations
from numbers import Real

from timedsim.core.consistency import consistent_time, require_time


class Timed:
    """
    A scalar value paired with its simulation time.

    time is None for time-invariant constants. This is not the same as
    time 0.0, which is the start of the simulation.
    """

    __slots__ = ("value", "time")

    def __init__(self, value: float, time: float | None = None):
        self.value = float(value)
        self.time = None if time is None else float(time)

    # ═══════════════════════════════════════════════════════════════
    # CONSTRUCTION
    # ═══════════════════════════════════════════════════════════════

    @classmethod
    def constant(cls, value: float) -> Timed:
        """A value that is valid at every time."""
        return cls(value, None)

    @classmethod
    def sim_start(cls, value: float) -> Timed:
        """A value valid at the start of the simulation (t=0)."""
        return cls(value, 0.0)

    @classmethod
    def like(cls, value: float, time_giver: Timed) -> Timed:
        """
        A value sampled at the current time of another value.

        Typically the time giver is a clock: Timed.like(30.0, frame_step)
        is "30, as read at the start of this frame".
        """
        return cls(value, time_giver.time)

    @property
    def has_time(self) -> bool:
        """False for constants."""
        return self.time is not None

    def strip_time(self) -> Timed:
        """
        Return a constant with the same value.

        This is the explicit way to reuse a sample at a time other than the
        one it was taken at, e.g. a frame-start input inside a sub-stepped loop.
        """
        return Timed(self.value, None)

    def copy(self) -> Timed:
        return Timed(self.value, self.time)

    # ═══════════════════════════════════════════════════════════════
    # CHECKED ARITHMETIC
    # ═══════════════════════════════════════════════════════════════

    def _combine(self, other, op, name: str, reflected: bool = False):
        other = _as_timed(other)
        if other is None:
            return NotImplemented
        time = consistent_time(self, other, operation=name)
        if reflected:
            return Timed(op(other.value, self.value), time)
        return Timed(op(self.value, other.value), time)

    def __add__(self, other):
        return self._combine(other, lambda a, b: a + b, "add")

    def __radd__(self, other):
        return self._combine(other, lambda a, b: a + b, "add", reflected=True)

    def __sub__(self, other):
        return self._combine(other, lambda a, b: a - b, "subtract")

    def __rsub__(self, other):
        return self._combine(other, lambda a, b: a - b, "subtract", reflected=True)

    def __mul__(self, other):
        return self._combine(other, lambda a, b: a * b, "multiply")

    def __rmul__(self, other):
        return self._combine(other, lambda a, b: a * b, "multiply", reflected=True)

    def __truediv__(self, other):
        return self._combine(other, lambda a, b: a / b, "divide")

    def __rtruediv__(self, other):
        return self._combine(other, lambda a, b: a / b, "divide", reflected=True)

    def __neg__(self) -> Timed:
        return Timed(-self.value, self.time)

    def __eq__(self, other) -> bool:
        other = _as_timed(other)
        if other is None:
            return NotImplemented
        consistent_time(self, other, operation="compare")
        return self.value == other.value

    __hash__ = None  # Mutable, and equality depends on time

    # ═══════════════════════════════════════════════════════════════
    # TIME-ADVANCING OPERATIONS (in place)
    # ═══════════════════════════════════════════════════════════════

    def integrate(self, rate: Timed, dt: Timed) -> None:
        """
        Explicit Euler step: value += rate * dt, then move forward by dt.

        self, rate and dt must all be valid at the same time (constants
        are allowed for rate and dt). Afterwards self is tagged at the end
        of the step, so integrating it again with the same dt will fail.
        """
        require_time(self, "integrate")
        consistent_time(self, rate, dt, operation="integrate")
        self.value += rate.value * dt.value
        self.time += dt.value

    def finished_update(self, dt: Timed) -> None:
        """
        Mark this value as valid at the end of the step dt, unchanged.

        For quantities that are set directly rather than integrated but
        must still move through time with everything else.
        """
        require_time(self, "advance")
        consistent_time(self, dt, operation="finish update of")
        self.time += dt.value

    def __repr__(self) -> str:
        if self.time is None:
            return f"Timed({self.value!r}, const)"
        return f"Timed({self.value!r}, t={self.time!r})"


def _as_timed(other) -> Timed | None:
    if isinstance(other, Timed):
        return other
    if isinstance(other, Real):
        return Timed.constant(other)
    return None


def lerp(a: Timed, b: Timed, s: Timed | float) -> Timed:
    """
    Blend two values at the same time: (1 - s) * a + s * b.

    s is itself a Timed blend factor. Pass a constant to blend without
    affecting the tag; a tagged s must agree with a and b.
    """
    s = _as_timed(s)
    return (Timed.constant(1.0) - s) * a + s * b


def lerp_across_time(a: Timed, b: Timed, alpha: float) -> Timed:
    """
    Interpolate between two values sampled at DIFFERENT times.

    This deliberately bypasses the consistency check and should only be
    used by low-level time management code, i.e. to reconcile the last two
    fixed-step samples with an externally demanded time.

    alpha is a plain ratio, not a time. The value is blended linearly, and
    so is the tag when both values carry one. If only one carries a tag the
    result takes it; if neither does the result is a constant.
    """
    value = (1.0 - alpha) * a.value + alpha * b.value

    if a.time is None:
        time = b.time
    elif b.time is None:
        time = a.time
    else:
        time = (1.0 - alpha) * a.time + alpha * b.time

    return Timed(value, time)
