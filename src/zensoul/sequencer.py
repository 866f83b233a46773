"""
Phase sequencer — picks the next step on expiry and re-arms the countdown.

Automatic advance wraps modulo the step count; manual navigation clamps and
never wraps.
"""

from typing import Callable, Optional, Union

from zensoul.models.exercise import BreathingExercise, BreathingStep, GuidedExercise, GuidedStep
from zensoul.timer import SETTLE_DELAY_S, TICK_INTERVAL_S, CountdownEngine, Scheduler


class PhaseSequencer:
    def __init__(
        self,
        exercise: Union[BreathingExercise, GuidedExercise],
        should_resume: Callable[[], bool],
        on_advance: Optional[Callable[[int], None]] = None,
        on_tick: Optional[Callable[[int], None]] = None,
        loop: Optional[Scheduler] = None,
        tick_interval: float = TICK_INTERVAL_S,
        settle_delay: float = SETTLE_DELAY_S,
    ):
        self._should_resume = should_resume
        self._on_advance = on_advance
        self._engine = CountdownEngine(
            on_expire=self.on_expire,
            on_tick=on_tick,
            loop=loop,
            tick_interval=tick_interval,
            settle_delay=settle_delay,
        )
        self._exercise = exercise
        self._index = 0
        self.load(exercise)

    @property
    def engine(self) -> CountdownEngine:
        return self._engine

    @property
    def exercise(self) -> Union[BreathingExercise, GuidedExercise]:
        return self._exercise

    @property
    def index(self) -> int:
        return self._index

    @property
    def step(self) -> Union[BreathingStep, GuidedStep]:
        return self._exercise.steps[self._index]

    @property
    def step_count(self) -> int:
        return len(self._exercise.steps)

    @property
    def remaining(self) -> Optional[int]:
        if not self._exercise.timed:
            return None
        return self._engine.remaining

    def load(self, exercise: Union[BreathingExercise, GuidedExercise]) -> None:
        """Make `exercise` active from its first step with the countdown stopped."""
        self._engine.stop()
        self._exercise = exercise
        self._index = 0
        self._rearm()

    def on_expire(self) -> None:
        if not self._exercise.timed:
            return
        self._index = (self._index + 1) % self.step_count
        self._rearm()
        if self._should_resume():
            self._engine.start()
        if self._on_advance:
            self._on_advance(self._index)

    def go_to(self, index: int) -> int:
        """Jump to `index`, clamped into range. Stops the countdown; does not resume it."""
        self._engine.stop()
        self._index = min(max(index, 0), self.step_count - 1)
        self._rearm()
        return self._index

    def close(self) -> None:
        self._engine.close()

    def _rearm(self) -> None:
        if self._exercise.timed:
            self._engine.arm(self.step.duration)  # type: ignore[union-attr]
