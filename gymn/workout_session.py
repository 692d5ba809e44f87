"""State machine for an active workout.

:class:`WorkoutSession` walks through a workout's exercises in order. It
keeps the countdown values itself but never looks at a clock: whoever
drives it calls :meth:`WorkoutSession.tick` once per elapsed second while
a timer is running (see :class:`gymn.session_runner.SessionRunner`).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum

from .catalog import DomainCatalog
from .errors import DanglingReference, InvalidWorkout
from .models import Exercise, Workout
from .utils import format_timer, format_timer_display


class Phase(str, Enum):
    IDLE = "idle"
    EXERCISE_TIMER_RUNNING = "exercise_timer_running"
    EXERCISE_TIMER_EXPIRED = "exercise_timer_expired"
    ON_BREAK = "on_break"
    FINISHED = "finished"


@dataclass(frozen=True)
class SessionView:
    """Read-only snapshot of what the workout screen should show."""

    exercise_name: str | None
    phase: Phase
    seconds_remaining: int | None
    exercise_index: int
    total_exercises: int
    workout_name: str = ""
    exercise_id: str | None = None
    timer_duration: int | None = None
    missing_exercise: bool = False
    is_last_exercise: bool = False
    next_exercise_name: str | None = None
    completed: bool = False

    @property
    def on_break(self) -> bool:
        return self.phase is Phase.ON_BREAK

    @property
    def finished(self) -> bool:
        return self.phase is Phase.FINISHED

    @property
    def timer_label(self) -> str:
        """Countdown as ``MM:SS``, empty when nothing is counting down."""

        if self.seconds_remaining is None:
            return ""
        return format_timer_display(self.seconds_remaining)

    @property
    def duration_label(self) -> str:
        return format_timer(self.timer_duration)

    @property
    def progress(self) -> float:
        """Percentage of the workout reached, counting the current exercise."""

        if not self.total_exercises:
            return 0.0
        return (self.exercise_index + 1) / self.total_exercises * 100


class WorkoutSession:
    """In-memory run through one workout.

    The workout and the exercises it references are copied when the session
    starts; later edits in the store or the catalog do not affect it.
    """

    def __init__(self, workout: Workout, catalog: DomainCatalog):
        if not workout.exercise_ids:
            raise InvalidWorkout(f"Workout '{workout.name}' has no exercises")
        self.workout = workout
        self._exercises: dict[str, Exercise | None] = {
            ex_id: catalog.get_exercise_by_id(ex_id) for ex_id in workout.exercise_ids
        }
        self.exercise_index = 0
        self.phase = Phase.IDLE
        self.exercise_time_remaining: int | None = None
        self.break_time_remaining: int | None = None
        self.missing_exercise = False
        self.completed = False
        logging.info(
            "Starting workout %s with %d exercises",
            workout.name,
            len(workout.exercise_ids),
        )
        self._enter_exercise(0)

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------
    @property
    def total_exercises(self) -> int:
        return len(self.workout.exercise_ids)

    @property
    def finished(self) -> bool:
        return self.phase is Phase.FINISHED

    @property
    def on_break(self) -> bool:
        return self.phase is Phase.ON_BREAK

    def _has_next(self) -> bool:
        return self.exercise_index + 1 < self.total_exercises

    def exercise_at(self, index: int) -> Exercise:
        """Return the exercise at ``index`` or raise :class:`DanglingReference`."""

        ex_id = self.workout.exercise_ids[index]
        exercise = self._exercises.get(ex_id)
        if exercise is None:
            raise DanglingReference("Exercise", ex_id)
        return exercise

    @property
    def current_exercise(self) -> Exercise:
        return self.exercise_at(self.exercise_index)

    def _name_at(self, index: int) -> str | None:
        if not 0 <= index < self.total_exercises:
            return None
        exercise = self._exercises.get(self.workout.exercise_ids[index])
        return exercise.name if exercise else None

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------
    def _enter_exercise(self, index: int) -> None:
        self.exercise_index = index
        self.break_time_remaining = None
        self.exercise_time_remaining = None
        self.phase = Phase.IDLE
        try:
            exercise = self.current_exercise
        except DanglingReference as exc:
            self.missing_exercise = True
            logging.warning("Workout %s: %s", self.workout.name, exc)
            return
        self.missing_exercise = False
        if exercise.has_timer:
            self._start_timer(exercise)

    def _start_timer(self, exercise: Exercise) -> None:
        self.exercise_time_remaining = exercise.timer_duration
        self.phase = Phase.EXERCISE_TIMER_RUNNING

    def start_exercise_timer(self) -> bool:
        """Start the current exercise's timer if it has one and is idle."""

        if self.phase is not Phase.IDLE or self.missing_exercise:
            return False
        exercise = self.current_exercise
        if not exercise.has_timer:
            return False
        self._start_timer(exercise)
        return True

    def advance(self) -> None:
        """Move forward: into a break, to the next exercise, or to the end."""

        if self.finished:
            return
        if not self._has_next():
            self._finish(completed=True)
        elif self.workout.has_break and not self.on_break:
            self.exercise_time_remaining = None
            self.break_time_remaining = self.workout.break_duration
            self.phase = Phase.ON_BREAK
        else:
            self._enter_exercise(self.exercise_index + 1)

    def previous(self) -> None:
        """Go back one exercise. Breaks are never inserted going backwards."""

        if self.finished or self.exercise_index == 0:
            return
        self._enter_exercise(self.exercise_index - 1)

    def skip_break(self) -> None:
        if self.on_break:
            self._enter_exercise(self.exercise_index + 1)

    def tick(self) -> None:
        """Account for one elapsed second."""

        if self.phase is Phase.EXERCISE_TIMER_RUNNING:
            if self.exercise_time_remaining > 1:
                self.exercise_time_remaining -= 1
                return
            self.exercise_time_remaining = 0
            self.phase = Phase.EXERCISE_TIMER_EXPIRED
            self.advance()
        elif self.phase is Phase.ON_BREAK:
            if self.break_time_remaining > 1:
                self.break_time_remaining -= 1
                return
            self.break_time_remaining = 0
            self._enter_exercise(self.exercise_index + 1)

    def exit(self) -> None:
        """Abandon the session. Safe to call more than once."""

        if not self.finished:
            self._finish(completed=False)

    def _finish(self, completed: bool) -> None:
        self.phase = Phase.FINISHED
        self.exercise_time_remaining = None
        self.break_time_remaining = None
        self.completed = completed
        if completed:
            logging.info("Finished workout %s", self.workout.name)
        else:
            logging.info(
                "Exited workout %s at exercise %d of %d",
                self.workout.name,
                self.exercise_index + 1,
                self.total_exercises,
            )

    # ------------------------------------------------------------------
    # Display
    # ------------------------------------------------------------------
    @property
    def seconds_remaining(self) -> int | None:
        if self.phase is Phase.ON_BREAK:
            return self.break_time_remaining
        if self.phase in (Phase.EXERCISE_TIMER_RUNNING, Phase.EXERCISE_TIMER_EXPIRED):
            return self.exercise_time_remaining
        return None

    def current_view(self) -> SessionView:
        ex_id = self.workout.exercise_ids[self.exercise_index]
        exercise = self._exercises.get(ex_id)
        return SessionView(
            exercise_name=exercise.name if exercise else None,
            phase=self.phase,
            seconds_remaining=self.seconds_remaining,
            exercise_index=self.exercise_index,
            total_exercises=self.total_exercises,
            workout_name=self.workout.name,
            exercise_id=ex_id,
            timer_duration=exercise.timer_duration if exercise else None,
            missing_exercise=exercise is None,
            is_last_exercise=not self._has_next(),
            next_exercise_name=self._name_at(self.exercise_index + 1),
            completed=self.completed,
        )
