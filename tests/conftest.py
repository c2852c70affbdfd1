"""
Pytest configuration and shared fixtures.
"""

import pytest


@pytest.fixture
def physics_clock():
    """A 1/64 s clock at the start of the simulation."""
    from timedsim.core import make_clock
    return make_clock(1.0 / 64.0)


@pytest.fixture
def frame_clock():
    """A 1/30 s frame clock at the start of the simulation."""
    from timedsim.core import make_clock
    return make_clock(1.0 / 30.0)


@pytest.fixture
def car_config():
    """Default car simulation without history recording."""
    from timedsim.sim import CarSimulationConfig
    return CarSimulationConfig(record_history=False)
