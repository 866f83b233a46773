"""
Relaxing sounds — default track list and validation of oracle-curated lists.

Same contract as exercise payloads: `parse_sounds` reports failure instead of
raising, and callers fall back to `DEFAULT_SOUNDS`.
"""

import json
from typing import Any, Optional, Union

from pydantic import TypeAdapter, ValidationError

from zensoul.catalog import _describe, extract_json
from zensoul.models.sound import SoundCategory, Track

DEFAULT_SOUNDS: tuple[SoundCategory, ...] = (
    SoundCategory(section="Relaxing Sounds", tracks=(
        Track(title="Calm Ocean Waves", description="Gentle ocean waves for relaxation.",
              youtube="https://www.youtube.com/watch?v=1ZYbU82GVz4"),
        Track(title="Nature Sounds", description="Rain, birds, and nature ambiance.",
              youtube="https://www.youtube.com/watch?v=OdIJ2x3nxzQ"),
    )),
    SoundCategory(section="Relaxing Piano Music", tracks=(
        Track(title="Piano Relaxation", description="Soothing piano for peace and sleep.",
              youtube="https://www.youtube.com/watch?v=4D9G9bD4zQk"),
    )),
    SoundCategory(section="Meditation Music", tracks=(
        Track(title="Calm Meditation", description="Ambient music for meditation.",
              youtube="https://www.youtube.com/watch?v=2OEL4P1Rz04"),
    )),
    SoundCategory(section="Forest Sounds", tracks=(
        Track(title="Nature Meditation", description="Forest ambience for focus and mindfulness.",
              youtube="https://www.youtube.com/watch?v=OdIJ2x3nxzQ"),
    )),
)

_sounds_adapter: TypeAdapter[list[SoundCategory]] = TypeAdapter(list[SoundCategory])


class SoundParseResult:
    """Outcome of validating a sound list: categories, or a reason plus whether JSON decoding failed."""

    __slots__ = ("categories", "reason", "decoded")

    def __init__(
        self,
        categories: Optional[tuple[SoundCategory, ...]] = None,
        reason: Optional[str] = None,
        decoded: bool = True,
    ):
        self.categories = categories
        self.reason = reason
        self.decoded = decoded

    @property
    def ok(self) -> bool:
        return self.categories is not None

    def __repr__(self) -> str:
        if self.ok:
            return f"SoundParseResult(ok, sections={len(self.categories)})"  # type: ignore[arg-type]
        return f"SoundParseResult(failed, reason={self.reason!r})"


def parse_sounds(payload: Union[str, list[Any]]) -> SoundParseResult:
    """Validate a list of sound categories. Never raises for malformed input."""
    if isinstance(payload, str):
        try:
            payload = json.loads(extract_json(payload, array=True))
        except json.JSONDecodeError as e:
            return SoundParseResult(reason=f"response is not valid JSON: {e.msg}", decoded=False)
        except (RecursionError, ValueError):
            return SoundParseResult(reason="response could not be decoded as JSON", decoded=False)
    if not isinstance(payload, list) or not payload:
        return SoundParseResult(reason="sound payload must be a non-empty JSON array")
    try:
        categories = _sounds_adapter.validate_python(payload)
    except ValidationError as e:
        return SoundParseResult(reason=_describe(e))
    except RecursionError:
        return SoundParseResult(reason="sound payload is nested too deeply")
    return SoundParseResult(categories=tuple(categories))
