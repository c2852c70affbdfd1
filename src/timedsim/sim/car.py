"""
CarSimulation: a mock game frame built on the time algebra.

A car is pulled toward an animated target by a spring, with a constant
input force, and a camera follows it. The point is not the physics but the
frame structure, which mixes several independent clocks:

- frame clock:   supplied by the driver, one variable step per frame
- physics clock: fixed step, owned by the sub-stepper
- camera clock:  the frame step, but starting at the END of the frame

Per frame:
1. Inputs are sampled at the frame start
2. The animation target is sampled (start-frame or end-frame semantics)
3. Physics sub-steps up to the frame end and interpolates to it
4. Main game logic (no time-critical work)
5. The camera moves from the frame end toward the interpolated car

Every value that crosses between these stages is either checked against
the clock it is supposed to be on, or explicitly stripped of its time.
"""

from __future__ import annotations
import logging
from dataclasses import dataclass, field
from typing import Literal

from timedsim.core.clock import advance, end_time
from timedsim.core.consistency import ConsistencyError, check_consistency, require_time
from timedsim.core.interpolate import snapshot_state, state_time
from timedsim.core.substepper import FixedStepper, SubStepperConfig, SubStepResult
from timedsim.core.timed import Timed, lerp
from timedsim.core.velocity import velocity
from timedsim.sim.history import FrameHistory, FrameRecord

logger = logging.getLogger(__name__)


@dataclass
class CarState:
    """Physical state of the car. Both fields must share a time."""

    pos: Timed = field(default_factory=lambda: Timed.sim_start(0.0))
    vel: Timed = field(default_factory=lambda: Timed.sim_start(0.0))


@dataclass
class CarSimulationConfig:
    """Configuration for the car/camera simulation."""

    physics_step: float = 1.0 / 64.0  # Fixed physics step (seconds)

    input_value: float = 30.0  # Mock input force, read every frame
    animation_rate: float = 5.0  # Animated target moves at this speed

    # "start_frame": animation is sampled at the frame start.
    # "end_frame": animation is sampled at the frame end (the rendered time);
    #   physics then uses the previous frame's end sample as its start value.
    animation_mode: Literal["start_frame", "end_frame"] = "start_frame"

    camera_stiffness: float = 6.0  # Camera lerp factor per second
    camera_speed_influence: float = 0.1  # Camera lags back by this * car velocity

    record_history: bool = True

    def __post_init__(self):
        if self.animation_mode not in ("start_frame", "end_frame"):
            raise ValueError(f"Unknown animation_mode: {self.animation_mode}")


class CarSimulation:
    """
    Per-frame pipeline driven by one frame step per update.

    The driver must call update() once per frame, with frame steps in
    increasing time order, and should call render() before using results.

    Frames should be at least one physics step long. A frame that needs no
    physics step leaves the car state at the previous frame's end, and the
    camera update then faults.
    """

    def __init__(self, config: CarSimulationConfig | None = None):
        self.config = config if config is not None else CarSimulationConfig()

        self._physics = FixedStepper(
            CarState(), SubStepperConfig(step_size=self.config.physics_step)
        )

        self._input = Timed.sim_start(0.0)
        self._input_last = Timed.sim_start(0.0)

        self._anim_target = Timed.sim_start(0.0)
        self._anim_target_end_frame = Timed.sim_start(0.0)

        self._camera_clock = Timed.sim_start(0.0)
        self._camera_pos = Timed.sim_start(0.0)

        self._last_frame_time: float | None = None
        self.frame_count = 0
        self.history = FrameHistory()

    # ═══════════════════════════════════════════════════════════════
    # READ-ONLY ACCESSORS (check .time before use)
    # ═══════════════════════════════════════════════════════════════

    @property
    def car_state(self) -> CarState:
        """Car state interpolated to the end of the last frame."""
        return snapshot_state(self._physics.current)

    @property
    def physics_state(self) -> CarState:
        """Latest fixed-step car state (at or just past the frame end)."""
        return snapshot_state(self._physics.latest)

    @property
    def camera_pos(self) -> Timed:
        return self._camera_pos.copy()

    @property
    def camera_clock(self) -> Timed:
        return self._camera_clock.copy()

    @property
    def physics_clock(self) -> Timed:
        return self._physics.clock.copy()

    @property
    def total_substeps(self) -> int:
        return self._physics.total_steps

    # ═══════════════════════════════════════════════════════════════
    # FRAME PIPELINE
    # ═══════════════════════════════════════════════════════════════

    def init(self, first_frame_step: Timed) -> None:
        """Prepare for the first frame."""
        self._camera_pos.finished_update(first_frame_step)

    def update(self, frame_step: Timed) -> SubStepResult:
        """
        Run one frame.

        Args:
            frame_step: Frame clock (value = frame length, time = frame start)

        Returns:
            The physics sub-stepping result for this frame

        Raises:
            ConsistencyError: If the frame step is untagged, not later than
                the previous frame, or any stage mixes times
        """
        frame_time = require_time(frame_step, "update with")
        if self._last_frame_time is not None and frame_time <= self._last_frame_time:
            raise ConsistencyError(
                f"frames must advance in time: t={frame_time!r} after "
                f"t={self._last_frame_time!r}",
                times=(self._last_frame_time, frame_time),
            )
        self._last_frame_time = frame_time

        self.inputs_update(frame_step)
        self.animation_update(frame_step)
        result = self.physics_update(frame_step)
        self.main_update(frame_step)
        self.camera_update(frame_step)

        self.frame_count += 1
        if self.config.record_history:
            self._record(frame_step, result)

        logger.debug(
            f"Frame {self.frame_count} at t={frame_time:.6f}: "
            f"{result.steps} physics step(s), car pos={self._physics.current.pos.value:.4f}"
        )
        return result

    def inputs_update(self, frame_step: Timed) -> None:
        """Sample inputs. They are read at the frame start time."""
        self._input_last = self._input
        self._input = Timed.like(self.config.input_value, frame_step)

    def sample_animation(self, time: float) -> float:
        """Evaluate the animation curve (a straight line) at a time."""
        return self.config.animation_rate * time

    def animation_update(self, frame_step: Timed) -> None:
        """Sample the animation target for this frame's physics."""
        if self.config.animation_mode == "start_frame":
            self._anim_target = Timed.like(
                self.sample_animation(frame_step.time), frame_step
            )
            return

        # The previous end-frame sample is this frame's start value
        self._anim_target = self._anim_target_end_frame
        frame_end = end_time(frame_step)
        self._anim_target_end_frame = Timed(self.sample_animation(frame_end), frame_end)

    def physics_update(self, frame_step: Timed) -> SubStepResult:
        """Sub-step the car up to the frame end."""
        result = self._physics.update(
            frame_step,
            lambda state, dt: self.physics_step(frame_step, state, dt),
        )
        if result.steps > 0:
            current = self._physics.current
            check_consistency(current.pos, current.vel)
        return result

    def physics_step(self, frame_step: Timed, state: CarState, dt: Timed) -> None:
        """
        Advance the car by one fixed step.

        Inputs and animation are only known at the frame start. Every sub-step
        knowingly reuses those stale samples, so they are checked against the
        frame clock and then stripped of time.
        """
        check_consistency(self._anim_target, frame_step)
        check_consistency(self._input, frame_step)
        anim_target = self._anim_target.strip_time()
        input_value = self._input.strip_time()

        accel = input_value + (anim_target - state.pos)

        # Position first: it must use the velocity from the start of the step
        state.pos.integrate(state.vel, dt)
        state.vel.integrate(accel, dt)

    def main_update(self, frame_step: Timed) -> None:
        """Hook for game logic that is not time critical."""

    def camera_update(self, frame_step: Timed) -> None:
        """
        Move the camera toward the car.

        The camera simulates forward from the frame end, using this frame's
        step as its guess for the next one.
        """
        camera_clock = frame_step.copy()
        advance(camera_clock)

        # The next frame's step is unknown, so last frame's camera result is
        # re-sampled at this frame's end rather than carried forward.
        camera_pos = Timed.like(self._camera_pos.value, camera_clock)

        car = self._physics.current
        camera_pos = lerp(
            camera_pos,
            car.pos,
            Timed.constant(self.config.camera_stiffness * camera_clock.value),
        )

        if self._input.time > self._input_last.time:
            input_rate = velocity(self._input_last, self._input)
            # Inputs are frame-start samples; the camera lives at the frame end.
            camera_pos = camera_pos + input_rate.strip_time()

        camera_pos = camera_pos - car.vel * Timed.constant(self.config.camera_speed_influence)

        camera_pos.finished_update(camera_clock)
        self._camera_clock = camera_clock
        self._camera_pos = camera_pos

    def render(self) -> float:
        """
        Consume the frame's result, checking its time first.

        Returns:
            The car position for this frame
        """
        car = self._physics.current
        check_consistency(car.pos, car.vel, self._camera_clock)
        logger.info(f"Car pos: {car.pos.value:f}")
        return car.pos.value

    def _record(self, frame_step: Timed, result: SubStepResult) -> None:
        car = self._physics.current
        self.history.append(
            FrameRecord(
                frame_time=frame_step.time,
                frame_step=frame_step.value,
                car_time=state_time(car),
                car_pos=car.pos.value,
                car_vel=car.vel.value,
                camera_pos=self._camera_pos.value,
                substeps=result.steps,
                alpha=result.alpha,
            )
        )
