"""
Interpolation of composite simulation state.

A composite state is a dataclass whose fields are Timed values (e.g. a
car's position and velocity). A bare Timed is also treated as a state
with a single field.
"""

from __future__ import annotations
import dataclasses
from typing import TypeVar

from timedsim.core.consistency import consistent_time
from timedsim.core.timed import Timed, lerp_across_time

S = TypeVar("S")


def _timed_fields(state) -> list[str]:
    names = []
    for f in dataclasses.fields(state):
        if isinstance(getattr(state, f.name), Timed):
            names.append(f.name)
    return names


def snapshot_state(state: S) -> S:
    """
    Copy a state so that later in-place integration can't alter it.

    Non-Timed fields are shared, not copied.
    """
    if isinstance(state, Timed):
        return state.copy()
    changes = {name: getattr(state, name).copy() for name in _timed_fields(state)}
    return dataclasses.replace(state, **changes)


def interpolate_state(previous: S, latest: S, alpha: float) -> S:
    """
    Blend two fixed-step states with lerp_across_time, field by field.

    Args:
        previous: State before the last fixed step
        latest: State after the last fixed step
        alpha: 0 gives previous, 1 gives latest

    Returns:
        A new state of the same type as latest
    """
    if isinstance(latest, Timed):
        return lerp_across_time(previous, latest, alpha)
    changes = {
        name: lerp_across_time(getattr(previous, name), getattr(latest, name), alpha)
        for name in _timed_fields(latest)
    }
    return dataclasses.replace(latest, **changes)


def state_time(state) -> float | None:
    """The time all fields of a state agree on (None if all are constants)."""
    if isinstance(state, Timed):
        return state.time
    fields = [getattr(state, name) for name in _timed_fields(state)]
    return consistent_time(*fields, operation="read state time of")
