"""Unit tests for the fixed-step sub-stepper."""

import logging
import math
from dataclasses import dataclass

import numpy as np
import pytest

from timedsim.core.consistency import ConsistencyError
from timedsim.core.clock import advance, make_clock
from timedsim.core.interpolate import interpolate_state, snapshot_state, state_time
from timedsim.core.substepper import FixedStepper, SubStepperConfig, SubStepResult
from timedsim.core.timed import Timed

H = 1.0 / 64.0


def unit_speed(state: Timed, dt: Timed) -> None:
    """Position moving at 1 unit/s: value tracks time."""
    state.integrate(Timed.constant(1.0), dt)


@dataclass
class Body:
    pos: Timed
    vel: Timed


def falling(state: Body, dt: Timed) -> None:
    gravity = Timed.constant(-9.81)
    state.pos.integrate(state.vel, dt)
    state.vel.integrate(gravity, dt)


class TestSubStepperConfig:
    """Tests for SubStepperConfig."""

    def test_defaults(self):
        cfg = SubStepperConfig()
        assert cfg.step_size == H
        assert cfg.start_time == 0.0
        assert cfg.max_substeps is None

    def test_invalid_step_size(self):
        with pytest.raises(ValueError):
            SubStepperConfig(step_size=0.0)

    def test_invalid_cap(self):
        with pytest.raises(ValueError):
            SubStepperConfig(max_substeps=0)


class TestFixedStepper:
    """Tests for FixedStepper.update."""

    def test_creation(self):
        stepper = FixedStepper(Timed.sim_start(0.0))
        assert stepper.clock.value == H
        assert stepper.clock.time == 0.0
        assert stepper.balance.value == 0.0
        assert stepper.total_steps == 0

    def test_initial_state_not_mutated(self):
        initial = Timed.sim_start(0.0)
        stepper = FixedStepper(initial)
        stepper.update(make_clock(4 * H), unit_speed)
        assert initial.value == 0.0
        assert initial.time == 0.0

    @pytest.mark.parametrize("k", [1, 2, 3, 7])
    def test_exact_multiple(self, k):
        """F = k*H runs exactly k steps with alpha == 1."""
        stepper = FixedStepper(Timed.sim_start(0.0))
        result = stepper.update(make_clock(k * H), unit_speed)

        assert result.steps == k
        assert result.alpha == 1.0
        assert stepper.balance.value == 0.0
        assert stepper.current.time == k * H
        assert stepper.current.value == stepper.latest.value

    def test_overshoot_interpolates(self):
        frame_step = make_clock(1.0 / 30.0)
        stepper = FixedStepper(Timed.sim_start(0.0))
        result = stepper.update(frame_step, unit_speed)

        assert result.steps == 3
        assert 0.0 < result.alpha < 1.0
        assert stepper.balance.value <= 0.0
        assert stepper.latest.time == 3 * H
        # Interpolated back to the end of the frame
        assert np.isclose(stepper.current.time, 1.0 / 30.0)
        assert np.isclose(stepper.current.value, 1.0 / 30.0)

    def test_overshoot_alpha_endpoints(self):
        seen = []

        def recording_step(state, dt):
            seen.append(snapshot_state(state))
            unit_speed(state, dt)

        stepper = FixedStepper(Timed.sim_start(0.0))
        result = stepper.update(make_clock(1.0 / 30.0), recording_step)
        prev, latest = seen[-1], stepper.latest

        assert (prev.time, latest.time) == (2 * H, 3 * H)
        r0 = interpolate_state(prev, latest, 0.0)
        r1 = interpolate_state(prev, latest, 1.0)
        assert (r0.value, r0.time) == (prev.value, prev.time)
        assert (r1.value, r1.time) == (latest.value, latest.time)

        blended = interpolate_state(prev, latest, result.alpha)
        assert np.isclose(blended.value, stepper.current.value)
        assert np.isclose(blended.time, stepper.current.time)

    def test_zero_step_does_nothing(self):
        stepper = FixedStepper(Timed.sim_start(0.0))
        result = stepper.update(make_clock(0.0), unit_speed)

        assert result == SubStepResult(steps=0, alpha=None)
        assert stepper.latest.time == 0.0
        assert stepper.clock.time == 0.0

    def test_negative_step_does_nothing(self):
        stepper = FixedStepper(Timed.sim_start(0.0))
        result = stepper.update(make_clock(-H), unit_speed)
        assert result.steps == 0
        assert stepper.balance.value == -H

    def test_no_step_keeps_previous_interpolation(self):
        stepper = FixedStepper(Timed.sim_start(0.0))
        stepper.update(make_clock(H / 2), unit_speed)
        before = stepper.current
        # Physics is H/2 ahead; a frame of H/4 needs no step
        result = stepper.update(make_clock(H / 4, start=H / 2), unit_speed)

        assert result.steps == 0
        assert stepper.current is before

    def test_large_step_catches_up(self):
        stepper = FixedStepper(Timed.sim_start(0.0))
        result = stepper.update(make_clock(1.0), unit_speed)
        assert result.steps == 64
        assert result.alpha == 1.0

    def test_untagged_frame_step_faults(self):
        stepper = FixedStepper(Timed.sim_start(0.0))
        with pytest.raises(ConsistencyError):
            stepper.update(Timed.constant(H), unit_speed)

    def test_composite_state(self):
        stepper = FixedStepper(Body(Timed.sim_start(10.0), Timed.sim_start(0.0)))
        stepper.update(make_clock(1.0 / 30.0), falling)

        assert np.isclose(state_time(stepper.current), 1.0 / 30.0)
        assert stepper.current.pos.value < 10.0
        assert stepper.current.vel.value < 0.0

    def test_step_fn_from_wrong_clock_faults(self):
        frame_step = make_clock(1.0 / 30.0)

        def uses_frame_clock(state, dt):
            state.integrate(Timed.constant(1.0), frame_step)

        stepper = FixedStepper(Timed.sim_start(0.0))
        with pytest.raises(ConsistencyError):
            stepper.update(frame_step, uses_frame_clock)

    def test_balance_carries_across_frames(self):
        """Outer 1/30 s for 10 frames against inner 1/64 s."""
        frame_step = make_clock(1.0 / 30.0)
        stepper = FixedStepper(Timed.sim_start(0.0))
        counts = []

        for _ in range(10):
            counts.append(stepper.update(frame_step, unit_speed).steps)
            advance(frame_step)

        expected = math.floor(10 * (1.0 / 30.0) / H)
        assert abs(stepper.total_steps - expected) <= 1
        assert sum(counts) == stepper.total_steps
        assert set(counts) <= {2, 3}
        assert np.isclose(stepper.current.time, 10.0 / 30.0, atol=1e-4)
        assert np.isclose(stepper.current.time, frame_step.time, atol=1e-4)


class TestCatchUpCap:
    """Tests for the max_substeps policy."""

    def test_cap_limits_steps(self):
        stepper = FixedStepper(
            Timed.sim_start(0.0), SubStepperConfig(max_substeps=4)
        )
        result = stepper.update(make_clock(10 * H), unit_speed)

        assert result.steps == 4
        assert result.alpha == 1.0
        assert np.isclose(result.dropped, 6 * H)
        assert stepper.balance.value == 0.0
        assert stepper.current.time == 4 * H

    def test_cap_not_reached(self):
        stepper = FixedStepper(
            Timed.sim_start(0.0), SubStepperConfig(max_substeps=4)
        )
        result = stepper.update(make_clock(3 * H), unit_speed)
        assert result.steps == 3
        assert result.dropped == 0.0

    def test_cap_logs_warning(self, caplog):
        stepper = FixedStepper(
            Timed.sim_start(0.0), SubStepperConfig(max_substeps=2)
        )
        with caplog.at_level(logging.WARNING, logger="timedsim.core.substepper"):
            stepper.update(make_clock(1.0), unit_speed)
        assert "Sub-step cap of 2" in caplog.text
