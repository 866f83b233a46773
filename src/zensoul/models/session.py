"""
Session models — status constants, listener events and the state snapshot.
"""

from typing import Optional
from pydantic import BaseModel


class SessionStatus:
    IDLE = "idle"
    RUNNING = "running"
    PAUSED = "paused"


class SessionEvent:
    TICK = "session:tick"
    ADVANCE = "session:advance"
    STATE = "session:state"
    EXERCISE = "session:exercise"


class SessionState(BaseModel):
    exercise_key: str
    exercise_title: str = ""
    status: str = SessionStatus.IDLE
    step_index: int = 0
    step_label: str = ""
    remaining: Optional[int] = None  # None for untimed exercises
    responses: dict[int, str] = {}
