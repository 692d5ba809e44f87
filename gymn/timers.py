"""Per-second countdowns used for exercise and break timers.

A :class:`CountdownTimer` does not keep time itself. It asks a tick source
to call it back once per interval: :class:`KivyTickSource` uses the Kivy
clock of the running app, :class:`ManualTickSource` is advanced by hand and
is what the tests use.
"""

from __future__ import annotations

import itertools
import logging
from typing import Callable

from kivy.clock import Clock

from . import DEFAULT_TICK_INTERVAL
from .errors import ValidationError


class KivyTickSource:
    """Schedule repeating callbacks on the Kivy clock."""

    def __init__(self, interval: float = DEFAULT_TICK_INTERVAL):
        self.interval = interval

    def schedule(self, callback: Callable[[float], None]):
        return Clock.schedule_interval(callback, self.interval)

    def cancel(self, handle) -> None:
        handle.cancel()


class ManualTickSource:
    """Tick source driven explicitly through :meth:`advance`.

    Callbacks are delivered one at a time. A callback may cancel or schedule
    other callbacks while it runs; cancelled ones are not called again and
    new ones start receiving ticks on the next second.
    """

    def __init__(self, interval: float = DEFAULT_TICK_INTERVAL):
        self.interval = interval
        self._callbacks: dict[int, Callable[[float], None]] = {}
        self._ids = itertools.count(1)

    def schedule(self, callback: Callable[[float], None]) -> int:
        handle = next(self._ids)
        self._callbacks[handle] = callback
        return handle

    def cancel(self, handle) -> None:
        self._callbacks.pop(handle, None)

    @property
    def pending(self) -> int:
        """Number of callbacks currently scheduled."""

        return len(self._callbacks)

    def advance(self, seconds: int = 1) -> None:
        for _ in range(seconds):
            for handle in list(self._callbacks):
                callback = self._callbacks.get(handle)
                if callback is not None:
                    callback(self.interval)


class CountdownTimer:
    """Count down whole seconds and report each tick and the expiry.

    While active, every elapsed second either decrements ``remaining`` and
    calls ``on_tick(remaining)``, or, when one second was left, sets
    ``remaining`` to zero, stops the timer and calls ``on_expired()``.
    Cancelling stops the count without calling anything.
    """

    def __init__(
        self,
        tick_source,
        on_tick: Callable[[int], None] | None = None,
        on_expired: Callable[[], None] | None = None,
        name: str = "timer",
    ):
        self.tick_source = tick_source
        self.on_tick = on_tick
        self.on_expired = on_expired
        self.name = name
        self.remaining = 0
        self._handle = None

    @property
    def active(self) -> bool:
        return self._handle is not None

    def start(self, seconds: int) -> None:
        """Start counting down from ``seconds``, replacing any running count."""

        if isinstance(seconds, bool) or not isinstance(seconds, int) or seconds <= 0:
            raise ValidationError(f"Cannot start {self.name} with {seconds!r} seconds")
        self.cancel()
        self.remaining = seconds
        self._handle = self.tick_source.schedule(self._on_interval)

    def cancel(self) -> None:
        if self._handle is not None:
            self.tick_source.cancel(self._handle)
            self._handle = None

    def _on_interval(self, dt) -> None:
        if self._handle is None:
            return
        if self.remaining > 1:
            self.remaining -= 1
            if self.on_tick:
                self.on_tick(self.remaining)
            return
        self.remaining = 0
        self.cancel()
        logging.debug("%s expired", self.name)
        if self.on_expired:
            self.on_expired()
