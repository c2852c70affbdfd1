"""
Fixed-step sub-stepping of a variable-rate outer loop.

The outer loop (frames) advances by a variable step. Physics wants a fixed
step for stability and determinism. The stepper keeps a balance of outer
time not yet simulated, and runs the fixed step until the balance is used
up. Physics therefore ends at or slightly past the outer target time, and
the last two fixed-step states are blended back to the target exactly.

    frame:    |--------- F ---------|
    physics:  |--- H ---|--- H ---|--- H ---|
                                  ^prev     ^latest
                                        ^ target, alpha in (0, 1]

The inner clock and balance are owned by the stepper. The outer clock is
only read, never advanced, here.
"""

from __future__ import annotations
import logging
from dataclasses import dataclass, field
from typing import Callable, Generic, TypeVar

from timedsim.core.clock import advance, make_clock
from timedsim.core.consistency import require_time
from timedsim.core.interpolate import interpolate_state, snapshot_state
from timedsim.core.timed import Timed

logger = logging.getLogger(__name__)

S = TypeVar("S")

StepFn = Callable[[S, Timed], None]


@dataclass
class SubStepperConfig:
    """Configuration for the fixed-step sub-stepper."""

    step_size: float = 1.0 / 64.0  # Fixed inner step (seconds)
    start_time: float = 0.0  # Tag of the inner clock and balance at creation

    # Catch-up policy: maximum fixed steps per outer update.
    # None = unbounded (a stalled frame is fully simulated on the next update).
    # When the cap is hit, the remaining balance is discarded and physics
    # falls behind the outer clock by that amount.
    max_substeps: int | None = None

    def __post_init__(self):
        if self.step_size <= 0.0:
            raise ValueError(f"step_size must be positive, got {self.step_size}")
        if self.max_substeps is not None and self.max_substeps < 1:
            raise ValueError(f"max_substeps must be >= 1, got {self.max_substeps}")


@dataclass
class SubStepResult:
    """What happened during one outer update."""

    steps: int  # Fixed steps executed
    alpha: float | None  # Blend factor used, None if no step ran
    dropped: float = 0.0  # Outer time discarded by the catch-up cap


@dataclass
class FixedStepper(Generic[S]):
    """
    Runs a fixed-step integrator to keep up with a variable outer step.

    State:
    - latest:  fixed-step state, tagged on the inner clock
    - current: latest blended back to the outer target time
    - clock:   inner clock (value = fixed step, time = start of next step)
    - balance: outer time not yet simulated, tagged on the inner clock
    """

    initial_state: S
    config: SubStepperConfig = field(default_factory=SubStepperConfig)

    latest: S = field(default=None, init=False)
    current: S = field(default=None, init=False)
    clock: Timed = field(default=None, init=False)
    balance: Timed = field(default=None, init=False)
    total_steps: int = field(default=0, init=False)

    def __post_init__(self):
        self.clock = make_clock(self.config.step_size, self.config.start_time)
        self.balance = Timed(0.0, self.config.start_time)
        self.latest = snapshot_state(self.initial_state)
        self.current = snapshot_state(self.initial_state)

    def update(self, frame_step: Timed, step_fn: StepFn) -> SubStepResult:
        """
        Consume one outer step in fixed increments.

        Args:
            frame_step: Outer clock (value = step size, time = step start)
            step_fn: Advances a state by one fixed step, in place.
                Called as step_fn(latest, clock).

        Returns:
            SubStepResult with the number of steps run and the blend factor
        """
        require_time(frame_step, "sub-step with")

        # The balance straddles two clocks, so only the magnitude of the
        # outer step is accumulated.
        self.balance = self.balance + frame_step.strip_time()

        previous = None
        steps = 0
        dropped = 0.0
        max_steps = self.config.max_substeps

        while self.balance.value > 0.0:
            if max_steps is not None and steps >= max_steps:
                dropped = self.balance.value
                self.balance = Timed.like(0.0, self.balance)
                logger.warning(
                    f"Sub-step cap of {max_steps} reached at t={self.clock.time:.6f}; "
                    f"dropping {dropped:.6f}s of outer time"
                )
                break

            previous = snapshot_state(self.latest)

            step_fn(self.latest, self.clock)

            self.balance = self.balance - self.clock
            self.balance.finished_update(self.clock)

            advance(self.clock, self.clock.strip_time())
            steps += 1

        self.total_steps += steps

        if steps == 0:
            logger.debug(
                f"No fixed step needed for outer step at t={frame_step.time:.6f} "
                f"(balance={self.balance.value:.6f})"
            )
            return SubStepResult(steps=0, alpha=None)

        # Balance is <= 0 here: how far the last step overshot the target.
        alpha = 1.0 + (self.balance / self.clock).value
        self.current = interpolate_state(previous, self.latest, alpha)

        logger.debug(
            f"Ran {steps} fixed step(s) for outer step at t={frame_step.time:.6f}, "
            f"alpha={alpha:.4f}"
        )
        return SubStepResult(steps=steps, alpha=alpha, dropped=dropped)
