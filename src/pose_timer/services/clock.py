"""Anchored countdown clock for per-pose timing.

Remaining time is always recomputed from an absolute anchor timestamp instead
of being decremented once per callback, so late, bursty or dropped tick
callbacks never make the countdown drift.
"""

import math
import time
from collections.abc import Callable
from typing import Protocol

DEFAULT_TICK_INTERVAL = 0.1


class ScheduledCall(Protocol):
    """Handle for a pending scheduled callback."""

    def cancel(self) -> None:
        """Cancel the pending callback."""


class Scheduler(Protocol):
    """Timer facility that runs a callback after a delay.

    An asyncio event loop satisfies this interface.
    """

    def call_later(self, delay: float, callback: Callable[[], None]) -> ScheduledCall:
        """Schedule ``callback`` to run after ``delay`` seconds."""


class Clock:
    """Countdown timer with pause/resume and reset."""

    def __init__(
        self,
        duration: float,
        *,
        now: Callable[[], float] = time.monotonic,
        scheduler: Scheduler | None = None,
        tick_interval: float = DEFAULT_TICK_INTERVAL,
        on_tick: Callable[[], None] | None = None,
        on_expire: Callable[[], None] | None = None,
    ) -> None:
        self._duration = float(duration)
        self._remaining = float(duration)
        self._now = now
        self._scheduler = scheduler
        self._tick_interval = tick_interval
        self.on_tick = on_tick
        self.on_expire = on_expire
        self._running = False
        self._anchor: float | None = None
        self._paused_at: float | None = None
        self._observed_at: float | None = None
        self._pending: ScheduledCall | None = None
        self._generation = 0
        self._closed = False

    @property
    def duration(self) -> float:
        return self._duration

    @property
    def is_running(self) -> bool:
        return self._running

    @property
    def remaining(self) -> float:
        """Fractional seconds left as of the last observation."""
        return self._remaining

    @property
    def remaining_seconds(self) -> int:
        """Whole seconds left, as shown on the countdown display."""
        elapsed = self._duration - self._remaining
        return max(0, int(self._duration - math.floor(elapsed + 1e-9)))

    @property
    def expired_at(self) -> float | None:
        """Instant the countdown reached zero, if it has."""
        if self._anchor is None or self._remaining > 0:
            return None
        return self._anchor + self._duration

    @property
    def progress_percent(self) -> float:
        if self._duration <= 0:
            return 0.0
        return (self._duration - self._remaining) / self._duration * 100

    def start(self, started_at: float | None = None) -> None:
        """Begin or resume counting down.

        A fresh countdown may be anchored at an earlier ``started_at`` instant;
        it is observed immediately so any overdue expiry fires right away.
        """
        if self._running or self._closed or self._remaining <= 0:
            return
        now = self._now()
        if self._anchor is not None and self._paused_at is not None:
            self._anchor += now - self._paused_at
        else:
            anchor_at = now if started_at is None else min(started_at, now)
            self._anchor = anchor_at - (self._duration - self._remaining)
        self._paused_at = None
        self._running = True
        self._schedule()
        if started_at is not None:
            self.tick()

    def pause(self) -> None:
        """Freeze the countdown at its current value."""
        if not self._running:
            return
        self.tick()
        if not self._running:
            return
        self._paused_at = self._observed_at
        self._running = False
        self._cancel_pending()

    def reset(self, new_duration: float | None = None) -> None:
        """Stop the clock and restore the full duration."""
        if new_duration is not None:
            self._duration = float(new_duration)
        self._remaining = self._duration
        self._running = False
        self._anchor = None
        self._paused_at = None
        self._cancel_pending()

    def tick(self) -> float:
        """Observe the clock, stopping it once the countdown reaches zero."""
        if not self._running:
            return self._remaining
        self._observe()
        if self._remaining <= 0:
            self._running = False
            self._paused_at = self._observed_at
            self._cancel_pending()
            if self.on_tick is not None:
                self.on_tick()
            if self.on_expire is not None:
                self.on_expire()
        elif self.on_tick is not None:
            self.on_tick()
        return self._remaining

    def close(self) -> None:
        """Stop the clock for good; pending callbacks become no-ops."""
        self._closed = True
        self._running = False
        self._cancel_pending()
        self.on_tick = None
        self.on_expire = None

    def _observe(self) -> None:
        self._observed_at = self._now()
        if self._anchor is None:
            return
        elapsed = self._observed_at - self._anchor
        self._remaining = min(self._duration, max(0.0, self._duration - elapsed))

    def _schedule(self) -> None:
        if self._scheduler is None:
            return
        generation = self._generation

        def _fire() -> None:
            if generation != self._generation or self._closed:
                return
            self._pending = None
            self.tick()
            if self._running and generation == self._generation:
                self._schedule()

        self._pending = self._scheduler.call_later(self._tick_interval, _fire)

    def _cancel_pending(self) -> None:
        self._generation += 1
        if self._pending is not None:
            self._pending.cancel()
            self._pending = None
