"""
Time-tag consistency checks.

Every time-tagged value either carries the simulation time at which it is
valid, or no time at all (a time-invariant constant). Two tagged values may
only be combined when they were sampled at the same instant.

A violation is a programming error in the simulation code, not a runtime
condition to recover from. It is raised as ConsistencyError so that a host
application can decide whether to log-and-abort or let it crash the process.
"""

from __future__ import annotations
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from timedsim.core.timed import Timed


TIME_EPSILON = 1e-4  # Tags closer than this are the same instant


class ConsistencyError(ValueError):
    """
    Raised when time-tagged values disagree about the time they represent.

    Also raised when a time-advancing operation is applied to a constant,
    and when finite-difference samples arrive out of chronological order.
    """

    def __init__(self, message: str, times: tuple[float | None, ...] = ()):
        super().__init__(message)
        self.times = times


def times_match(a: float, b: float, eps: float = TIME_EPSILON) -> bool:
    """True if two tags refer to the same instant."""
    return abs(a - b) < eps


def consistent_time(
    *operands: "Timed",
    eps: float = TIME_EPSILON,
    operation: str = "combine",
) -> float | None:
    """
    Check that all tagged operands agree and return the agreed tag.

    Untagged operands (constants) are compatible with any time. If no
    operand carries a tag the check passes vacuously and None is returned.

    Args:
        operands: Values taking part in one operation
        eps: Tolerance for tag equality
        operation: Name used in the error message

    Returns:
        The tag of the first tagged operand, or None

    Raises:
        ConsistencyError: If any two tags differ by eps or more
    """
    tags = [op.time for op in operands if op.time is not None]
    for i, a in enumerate(tags):
        for b in tags[i + 1:]:
            if not times_match(a, b, eps):
                raise ConsistencyError(
                    f"cannot {operation} values from different times: "
                    f"t={a!r} vs t={b!r}",
                    times=tuple(tags),
                )
    return tags[0] if tags else None


def check_consistency(*operands: "Timed", eps: float = TIME_EPSILON) -> None:
    """Assert that the given values are tagged at the same instant."""
    consistent_time(*operands, eps=eps, operation="use together")


def require_time(value: "Timed", operation: str) -> float:
    """Return the tag of a value, raising if it is a constant."""
    if value.time is None:
        raise ConsistencyError(
            f"cannot {operation} a time-invariant constant (value={value.value!r})"
        )
    return value.time
