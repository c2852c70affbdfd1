"""
Finite-difference velocity from two time-tagged samples.

Because each sample carries its own time, the divisor is the real time
between the samples. This removes the usual bug of differencing two
samples and dividing by whatever dt happens to be in scope.
"""

from __future__ import annotations

from timedsim.core.consistency import ConsistencyError, require_time
from timedsim.core.timed import Timed


def velocity(sample0: Timed, sample1: Timed) -> Timed:
    """
    Rate of change between an older and a newer sample.

    Args:
        sample0: Earlier sample
        sample1: Later sample

    Returns:
        (v1 - v0) / (t1 - t0), tagged at the later sample's time

    Raises:
        ConsistencyError: If either sample is a constant, or the samples
            are passed newest first
        ZeroDivisionError: If both samples have the same time
    """
    t0 = require_time(sample0, "difference")
    t1 = require_time(sample1, "difference")

    if t1 < t0:
        raise ConsistencyError(
            f"velocity samples out of order: t1={t1!r} is before t0={t0!r}",
            times=(t0, t1),
        )

    elapsed = t1 - t0
    if elapsed == 0.0:
        raise ZeroDivisionError(
            f"velocity samples have identical times (t={t1!r})"
        )

    return Timed((sample1.value - sample0.value) / elapsed, t1)
