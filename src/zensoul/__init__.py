"""
zensoul — guided breathing and grounding exercises for Python.

Countdown/step sequencing for breathing exercises plus a Gemini-backed
companion that recommends new exercises and relaxing sounds.
"""

from zensoul.client import ZenSoul, AsyncZenSoul
from zensoul.catalog import ExerciseCatalog, ExerciseParseResult, parse_exercise
from zensoul.sounds import DEFAULT_SOUNDS, SoundParseResult, parse_sounds
from zensoul.session import SessionController
from zensoul.errors import ZenSoulError, ExerciseError, SessionError, OracleError, ConfigError
from zensoul.models.exercise import ExerciseCategory
from zensoul.models.session import SessionEvent, SessionStatus

__version__ = "0.1.0"
__all__ = [
    "ZenSoul",
    "AsyncZenSoul",
    "ExerciseCatalog",
    "ExerciseParseResult",
    "parse_exercise",
    "DEFAULT_SOUNDS",
    "SoundParseResult",
    "parse_sounds",
    "SessionController",
    "ZenSoulError",
    "ExerciseError",
    "SessionError",
    "OracleError",
    "ConfigError",
    "ExerciseCategory",
    "SessionEvent",
    "SessionStatus",
]
