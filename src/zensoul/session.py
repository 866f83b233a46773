"""
Session controller — start/pause/resume/navigate/switch for one exercise session.

States: idle -> running <-> paused. There is no terminal state; breathing
phases cycle until the caller switches exercise or closes the session.
Manual navigation stops the countdown and leaves a running session paused.
"""

import logging
from typing import Callable, Optional, Union

from zensoul.catalog import AnyExercise, ExerciseCatalog
from zensoul.errors import SessionError
from zensoul.models.exercise import BreathingStep, GuidedStep
from zensoul.models.session import SessionEvent, SessionState, SessionStatus
from zensoul.sequencer import PhaseSequencer
from zensoul.timer import SETTLE_DELAY_S, TICK_INTERVAL_S, Scheduler

logger = logging.getLogger(__name__)

SessionListener = Callable[[str, SessionState], None]


class SessionController:
    def __init__(
        self,
        catalog: Optional[ExerciseCatalog] = None,
        exercise: Union[str, int] = 0,
        loop: Optional[Scheduler] = None,
        tick_interval: float = TICK_INTERVAL_S,
        settle_delay: float = SETTLE_DELAY_S,
    ):
        self._catalog = catalog if catalog is not None else ExerciseCatalog()
        self._status = SessionStatus.IDLE
        self._responses: dict[int, str] = {}
        self._listeners: list[SessionListener] = []
        self._sequencer = PhaseSequencer(
            self._resolve(exercise),
            should_resume=lambda: self._status == SessionStatus.RUNNING,
            on_advance=self._handle_advance,
            on_tick=self._handle_tick,
            loop=loop,
            tick_interval=tick_interval,
            settle_delay=settle_delay,
        )

    # -- read-only views ---------------------------------------------------

    @property
    def catalog(self) -> ExerciseCatalog:
        return self._catalog

    @property
    def status(self) -> str:
        return self._status

    @property
    def exercise(self) -> AnyExercise:
        return self._sequencer.exercise

    @property
    def step_index(self) -> int:
        return self._sequencer.index

    @property
    def step(self) -> Union[BreathingStep, GuidedStep]:
        return self._sequencer.step

    @property
    def remaining(self) -> Optional[int]:
        return self._sequencer.remaining

    @property
    def responses(self) -> dict[int, str]:
        return dict(self._responses)

    def snapshot(self) -> SessionState:
        return SessionState(
            exercise_key=self.exercise.key,
            exercise_title=self.exercise.title,
            status=self._status,
            step_index=self.step_index,
            step_label=self.step.label,
            remaining=self.remaining,
            responses=dict(self._responses),
        )

    def add_listener(self, handler: SessionListener) -> Callable[[], None]:
        """Add a listener for session events. Returns a cleanup function."""
        self._listeners.append(handler)

        def remove() -> None:
            try:
                self._listeners.remove(handler)
            except ValueError:
                pass
        return remove

    # -- commands ------------------------------------------------------------

    def start(self) -> None:
        if self._status == SessionStatus.RUNNING:
            return
        if self._status == SessionStatus.PAUSED:
            self.resume()
            return
        self._set_status(SessionStatus.RUNNING)

    def pause(self) -> None:
        """Toggle between running and paused. Ignored while idle."""
        if self._status == SessionStatus.RUNNING:
            self._set_status(SessionStatus.PAUSED)
        elif self._status == SessionStatus.PAUSED:
            self._set_status(SessionStatus.RUNNING)

    def resume(self) -> None:
        if self._status == SessionStatus.PAUSED:
            self._set_status(SessionStatus.RUNNING)

    def previous(self) -> int:
        return self.go_to(self.step_index - 1)

    def next(self) -> int:
        return self.go_to(self.step_index + 1)

    def go_to(self, index: int) -> int:
        """Jump to a step (clamped). A running timed session is left paused."""
        new_index = self._sequencer.go_to(index)
        if self._status == SessionStatus.RUNNING and self.exercise.timed:
            self._status = SessionStatus.PAUSED
            self._emit(SessionEvent.STATE)
        self._emit(SessionEvent.ADVANCE)
        return new_index

    def switch_exercise(self, exercise: Union[str, int]) -> AnyExercise:
        """Activate another catalog exercise by key or index; the session returns to idle."""
        target = self._resolve(exercise)
        self._sequencer.load(target)
        self._status = SessionStatus.IDLE
        self._responses.clear()
        logger.debug("switched to exercise %s", target.key)
        self._emit(SessionEvent.EXERCISE)
        return target

    def reset(self) -> None:
        self.switch_exercise(self.exercise.key)

    def record_response(self, text: str, index: Optional[int] = None) -> None:
        """Store the user's answer for a guided step (defaults to the current one)."""
        if self.exercise.timed:
            raise SessionError("responses are only recorded for guided exercises")
        i = self.step_index if index is None else index
        if not 0 <= i < len(self.exercise.steps):
            raise SessionError(f"step index {i} out of range", details={"index": i})
        if text.strip():
            self._responses[i] = text.strip()
        else:
            self._responses.pop(i, None)

    def close(self) -> None:
        """Cancel the countdown. The controller must not be used afterwards."""
        self._sequencer.close()
        self._listeners.clear()

    # -- internals -------------------------------------------------------------

    def _resolve(self, exercise: Union[str, int]) -> AnyExercise:
        try:
            if isinstance(exercise, int):
                if exercise < 0:
                    raise IndexError(exercise)
                return self._catalog[exercise]
            return self._catalog.get(exercise)
        except (IndexError, KeyError):
            raise SessionError(f"Unknown exercise: {exercise!r}", details={"exercise": exercise})

    def _set_status(self, status: str) -> None:
        self._status = status
        engine = self._sequencer.engine
        if self.exercise.timed:
            if status == SessionStatus.RUNNING:
                engine.start()
            else:
                engine.stop()
        self._emit(SessionEvent.STATE)

    def _handle_tick(self, remaining: int) -> None:
        self._emit(SessionEvent.TICK)

    def _handle_advance(self, index: int) -> None:
        self._emit(SessionEvent.ADVANCE)

    def _emit(self, event: str) -> None:
        if not self._listeners:
            return
        state = self.snapshot()
        for handler in list(self._listeners):
            handler(event, state)
