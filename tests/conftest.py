"""Shared fixtures: a virtual-time loop so countdown tests run instantly."""

from typing import Any, Callable

import pytest

from zensoul.catalog import ExerciseCatalog
from zensoul.session import SessionController


class ManualHandle:
    def __init__(self, when: float, seq: int, callback: Callable[..., Any], args: tuple):
        self.when = when
        self.seq = seq
        self.callback = callback
        self.args = args
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class ManualLoop:
    """Implements `call_later` against a clock that only moves on `advance()`."""

    def __init__(self) -> None:
        self.now = 0.0
        self._seq = 0
        self._handles: list[ManualHandle] = []

    def call_later(self, delay: float, callback: Callable[..., Any], *args: Any) -> ManualHandle:
        self._seq += 1
        handle = ManualHandle(self.now + delay, self._seq, callback, args)
        self._handles.append(handle)
        return handle

    @property
    def pending(self) -> list[ManualHandle]:
        return [h for h in self._handles if not h.cancelled]

    def advance(self, seconds: float) -> None:
        target = self.now + seconds
        while True:
            due = [h for h in self.pending if h.when <= target + 1e-9]
            if not due:
                break
            handle = min(due, key=lambda h: (h.when, h.seq))
            self._handles.remove(handle)
            self.now = handle.when
            handle.callback(*handle.args)
        self.now = target


@pytest.fixture
def loop() -> ManualLoop:
    return ManualLoop()


@pytest.fixture
def controller(loop: ManualLoop) -> SessionController:
    session = SessionController(ExerciseCatalog(), loop=loop)
    yield session
    session.close()


class FakeOracle:
    """TextOracle returning canned replies; an Exception reply is raised instead."""

    def __init__(self, *replies: Any):
        self.replies = list(replies)
        self.prompts: list[str] = []

    async def generate(self, prompt: str) -> str:
        self.prompts.append(prompt)
        reply = self.replies.pop(0)
        if isinstance(reply, Exception):
            raise reply
        return reply


@pytest.fixture
def make_oracle() -> Callable[..., FakeOracle]:
    return FakeOracle
