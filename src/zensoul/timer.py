"""
Countdown engine — one-tick-per-second countdown with a settle delay before expiry.

The engine owns exactly one timer handle. Every scheduling path cancels the
previous handle first, so starting twice never produces double-speed ticks.
"""

import asyncio
import logging
from typing import Any, Callable, Optional, Protocol

TICK_INTERVAL_S = 1.0
# Pause between remaining hitting 0 and the step actually advancing,
# reserved for the visual transition of the phase change.
SETTLE_DELAY_S = 0.4

logger = logging.getLogger(__name__)


class TimerHandle(Protocol):
    def cancel(self) -> None: ...


class Scheduler(Protocol):
    """Anything with asyncio's `call_later` shape."""

    def call_later(self, delay: float, callback: Callable[..., Any], *args: Any) -> TimerHandle: ...


class CountdownEngine:
    def __init__(
        self,
        on_expire: Callable[[], None],
        on_tick: Optional[Callable[[int], None]] = None,
        loop: Optional[Scheduler] = None,
        tick_interval: float = TICK_INTERVAL_S,
        settle_delay: float = SETTLE_DELAY_S,
    ):
        self._on_expire = on_expire
        self._on_tick = on_tick
        self._loop = loop
        self._tick_interval = tick_interval
        self._settle_delay = settle_delay
        self._remaining = 0
        self._handle: Optional[TimerHandle] = None
        self._closed = False

    @property
    def remaining(self) -> int:
        return self._remaining

    @property
    def running(self) -> bool:
        return self._handle is not None

    @property
    def settle_delay(self) -> float:
        return self._settle_delay

    @property
    def tick_interval(self) -> float:
        return self._tick_interval

    def arm(self, duration: int) -> None:
        """Load a fresh countdown. Any pending tick or expiry is cancelled."""
        if duration < 1:
            raise ValueError(f"duration must be >= 1, got {duration}")
        self.stop()
        self._remaining = duration
        logger.debug("countdown armed for %ss", duration)

    def start(self) -> None:
        """Begin ticking from the current remaining value. No-op if already running."""
        if self._closed:
            raise RuntimeError("CountdownEngine is closed")
        if self._handle is not None:
            return
        if self._remaining > 0:
            self._schedule(self._tick_interval, self._tick)
        else:
            # Stopped inside the settle window; finish the pending expiry.
            self._schedule(self._settle_delay, self._expire)

    def stop(self) -> None:
        """Halt ticking. Remaining is kept."""
        handle, self._handle = self._handle, None
        if handle is not None:
            handle.cancel()

    def close(self) -> None:
        self.stop()
        self._closed = True

    def _schedule(self, delay: float, callback: Callable[[], None]) -> None:
        loop = self._loop or asyncio.get_running_loop()
        self._handle = loop.call_later(delay, callback)

    def _tick(self) -> None:
        self._handle = None
        self._remaining = max(self._remaining - 1, 0)
        if self._remaining > 0:
            self._schedule(self._tick_interval, self._tick)
        else:
            self._schedule(self._settle_delay, self._expire)
        # Scheduled before notifying so a listener calling stop() cancels the follow-up.
        if self._on_tick:
            self._on_tick(self._remaining)

    def _expire(self) -> None:
        self._handle = None
        logger.debug("countdown expired")
        self._on_expire()
