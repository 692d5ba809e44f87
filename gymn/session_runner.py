"""Drive a :class:`WorkoutSession` from real (or fake) countdown timers."""

from __future__ import annotations

from typing import Callable

from .timers import CountdownTimer
from .workout_session import Phase, SessionView, WorkoutSession


class SessionRunner:
    """Own the exercise and break timers of one session.

    At most one of the two timers runs at a time. Every second reported by
    the running timer is passed to :meth:`WorkoutSession.tick`, after which
    the timers are brought in line with the session's new phase and
    ``on_update`` receives the current :class:`SessionView`.
    """

    def __init__(
        self,
        session: WorkoutSession,
        tick_source,
        on_update: Callable[[SessionView], None] | None = None,
    ):
        self.session = session
        self.on_update = on_update
        self.exercise_timer = CountdownTimer(
            tick_source,
            on_tick=self._on_tick,
            on_expired=self._on_tick,
            name="exercise timer",
        )
        self.break_timer = CountdownTimer(
            tick_source,
            on_tick=self._on_tick,
            on_expired=self._on_tick,
            name="break timer",
        )

    def start(self) -> "SessionRunner":
        self._sync(restart=True)
        self._notify()
        return self

    @property
    def finished(self) -> bool:
        return self.session.finished

    def current_view(self) -> SessionView:
        return self.session.current_view()

    # ------------------------------------------------------------------
    # User actions
    # ------------------------------------------------------------------
    def start_exercise_timer(self) -> None:
        self._apply(self.session.start_exercise_timer)

    def advance(self) -> None:
        self._apply(self.session.advance)

    def previous(self) -> None:
        self._apply(self.session.previous)

    def skip_break(self) -> None:
        self._apply(self.session.skip_break)

    def exit(self) -> None:
        self.session.exit()
        self._cancel_timers()
        self._notify()

    def _apply(self, action) -> None:
        if self.session.finished:
            return
        action()
        self._sync(restart=True)
        self._notify()

    # ------------------------------------------------------------------
    # Timer plumbing
    # ------------------------------------------------------------------
    def _on_tick(self, *_args) -> None:
        self.session.tick()
        self._sync(restart=False)
        self._notify()

    def _wanted_timer(self):
        phase = self.session.phase
        if phase is Phase.EXERCISE_TIMER_RUNNING:
            return self.exercise_timer, self.session.exercise_time_remaining
        if phase is Phase.ON_BREAK:
            return self.break_timer, self.session.break_time_remaining
        return None, None

    def _sync(self, restart: bool) -> None:
        wanted, seconds = self._wanted_timer()
        for timer in (self.exercise_timer, self.break_timer):
            if timer is not wanted:
                timer.cancel()
        if wanted is None:
            return
        if restart or not wanted.active or wanted.remaining != seconds:
            wanted.start(seconds)

    def _cancel_timers(self) -> None:
        self.exercise_timer.cancel()
        self.break_timer.cancel()

    def _notify(self) -> None:
        if self.on_update:
            self.on_update(self.session.current_view())
