"""
Exercise catalog — built-in exercises plus validated runtime additions.

Payloads coming from the recommendation oracle are untrusted free-form text.
`parse_exercise` turns them into an `ExerciseParseResult` instead of raising,
and `ExerciseCatalog.add` only appends on success.
"""

import json
import logging
import re
import time
from typing import Any, Iterable, Iterator, Optional, Union

from pydantic import TypeAdapter, ValidationError

from zensoul.errors import ExerciseError
from zensoul.models.exercise import (
    BreathingExercise,
    BreathingStep,
    Exercise,
    GuidedExercise,
    GuidedStep,
)

logger = logging.getLogger(__name__)

AnyExercise = Union[BreathingExercise, GuidedExercise]

DEFAULT_EXERCISES: tuple[AnyExercise, ...] = (
    BreathingExercise(
        key="breathing-478",
        title="4-7-8 Breathing",
        description="A calming breathing technique to ease anxiety.",
        steps=(
            BreathingStep(label="Inhale", duration=4, instruction="Breathe in deeply for 4 seconds", scale=1.3, color="#6ee7b7"),
            BreathingStep(label="Hold", duration=7, instruction="Hold your breath for 7 seconds", scale=1.5, color="#fcd34d"),
            BreathingStep(label="Exhale", duration=8, instruction="Exhale slowly for 8 seconds", scale=1.0, color="#f87171"),
        ),
        note="This method promotes relaxation and stress relief.",
    ),
    GuidedExercise(
        key="grounding-54321",
        type="grounding",
        title="5-4-3-2-1 Grounding",
        description="A sensory exercise to anchor you in the present.",
        steps=(
            GuidedStep(label="5 Sights", instruction="Notice five things you see.", prompt="I see..."),
            GuidedStep(label="4 Touches", instruction="Feel four things around you.", prompt="I feel..."),
            GuidedStep(label="3 Sounds", instruction="Listen for three distinct sounds.", prompt="I hear..."),
            GuidedStep(label="2 Smells", instruction="Identify two smells or recall them.", prompt="I smell..."),
            GuidedStep(label="1 Taste", instruction="Focus on one taste or memory of it.", prompt="I taste..."),
        ),
    ),
)

BUILTIN_TITLES = frozenset(e.title for e in DEFAULT_EXERCISES)

_exercise_adapter: TypeAdapter[AnyExercise] = TypeAdapter(Exercise)

_FENCED_JSON = re.compile(r"```json\s*\n([\s\S]*?)\n\s*```")
_BARE_OBJECT = re.compile(r"\{[\s\S]*\}")
_BARE_ARRAY = re.compile(r"\[[\s\S]*\]")


class ExerciseParseResult:
    """Outcome of validating an exercise payload: an exercise or a reason."""

    __slots__ = ("exercise", "reason")

    def __init__(self, exercise: Optional[AnyExercise] = None, reason: Optional[str] = None):
        self.exercise = exercise
        self.reason = reason

    @property
    def ok(self) -> bool:
        return self.exercise is not None

    @classmethod
    def success(cls, exercise: AnyExercise) -> "ExerciseParseResult":
        return cls(exercise=exercise)

    @classmethod
    def failure(cls, reason: str) -> "ExerciseParseResult":
        return cls(reason=reason)

    def __repr__(self) -> str:
        if self.ok:
            return f"ExerciseParseResult(ok, key={self.exercise.key!r})"  # type: ignore[union-attr]
        return f"ExerciseParseResult(failed, reason={self.reason!r})"


def extract_json(text: str, array: bool = False) -> str:
    """Pull the JSON object (or array) out of an LLM reply: ```json fence first, then the outermost brackets."""
    match = _FENCED_JSON.search(text)
    if match:
        return match.group(1)
    match = (_BARE_ARRAY if array else _BARE_OBJECT).search(text)
    if match:
        return match.group(0)
    return text.strip()


def _describe(err: ValidationError) -> str:
    first = err.errors()[0]
    loc = ".".join(str(part) for part in first.get("loc", ()))
    return f"{loc}: {first.get('msg', 'invalid value')}" if loc else first.get("msg", "invalid value")


def parse_exercise(
    payload: Union[str, dict[str, Any], AnyExercise],
    reserved_titles: Iterable[str] = BUILTIN_TITLES,
) -> ExerciseParseResult:
    """Validate a raw exercise payload. Never raises for malformed input."""
    if isinstance(payload, (BreathingExercise, GuidedExercise)):
        exercise: AnyExercise = payload
    else:
        if isinstance(payload, str):
            try:
                payload = json.loads(extract_json(payload))
            except json.JSONDecodeError as e:
                return ExerciseParseResult.failure(f"response is not valid JSON: {e.msg}")
            except (RecursionError, ValueError):
                return ExerciseParseResult.failure("response could not be decoded as JSON")
        if not isinstance(payload, dict):
            return ExerciseParseResult.failure("exercise payload must be a JSON object")
        try:
            exercise = _exercise_adapter.validate_python(payload)
        except ValidationError as e:
            return ExerciseParseResult.failure(_describe(e))
        except RecursionError:
            return ExerciseParseResult.failure("exercise payload is nested too deeply")

    reserved = {t.strip().casefold() for t in reserved_titles}
    if exercise.title.strip().casefold() in reserved:
        return ExerciseParseResult.failure(f"title {exercise.title!r} duplicates a built-in exercise")
    return ExerciseParseResult.success(exercise)


class ExerciseCatalog:
    """Ordered, append-only list of exercises. Entries are immutable and shared by reference."""

    def __init__(self, exercises: Optional[Iterable[AnyExercise]] = None):
        self._exercises: list[AnyExercise] = list(DEFAULT_EXERCISES if exercises is None else exercises)
        keys = [e.key for e in self._exercises]
        if len(set(keys)) != len(keys):
            raise ExerciseError("exercise keys must be unique", details={"keys": keys})
        if not self._exercises:
            raise ExerciseError("catalog needs at least one exercise")

    def __len__(self) -> int:
        return len(self._exercises)

    def __iter__(self) -> Iterator[AnyExercise]:
        return iter(list(self._exercises))

    def __getitem__(self, index: int) -> AnyExercise:
        return self._exercises[index]

    def keys(self) -> list[str]:
        return [e.key for e in self._exercises]

    def get(self, key: str) -> AnyExercise:
        """Return an exercise by key or raise KeyError if missing."""
        for exercise in self._exercises:
            if exercise.key == key:
                return exercise
        raise KeyError(f"Exercise {key} not found")

    def index_of(self, key: str) -> int:
        for i, exercise in enumerate(self._exercises):
            if exercise.key == key:
                return i
        raise KeyError(f"Exercise {key} not found")

    def add(self, payload: Union[str, dict[str, Any], AnyExercise]) -> ExerciseParseResult:
        """Validate and append a custom exercise under a fresh `custom-*` key.

        A rejected payload leaves the catalog untouched.
        """
        result = parse_exercise(payload, reserved_titles=BUILTIN_TITLES)
        if not result.ok:
            logger.info("Rejected exercise payload: %s", result.reason)
            return result
        key = f"custom-{int(time.time() * 1000)}-{len(self._exercises)}"
        exercise = result.exercise.model_copy(update={"key": key})  # type: ignore[union-attr]
        self._exercises.append(exercise)
        return ExerciseParseResult.success(exercise)
