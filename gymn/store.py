"""SQLite persistence for exercises, workouts and day schedules.

A :class:`RecordStore` is constructed explicitly with the path of its
database and handed to whatever needs it. Each operation opens its own
connection and commits before returning.
"""

from __future__ import annotations

import json
import logging
import sqlite3
from contextlib import contextmanager
from pathlib import Path

from . import DAYS, DEFAULT_DB_PATH
from .errors import RecordNotFound, ValidationError
from .models import (
    DaySchedule,
    Exercise,
    Workout,
    new_id,
    now_ms,
    validate_day,
    validate_duration,
    validate_name,
)

SCHEMA = f"""
CREATE TABLE IF NOT EXISTS exercises (
    id TEXT PRIMARY KEY,
    name TEXT NOT NULL,
    timer_duration INTEGER CHECK(timer_duration IS NULL OR timer_duration > 0),
    created_at INTEGER NOT NULL
);
CREATE TABLE IF NOT EXISTS workouts (
    id TEXT PRIMARY KEY,
    name TEXT NOT NULL,
    exercise_ids TEXT NOT NULL DEFAULT '[]',
    break_enabled BOOLEAN NOT NULL DEFAULT 0,
    break_duration INTEGER CHECK(break_duration IS NULL OR break_duration > 0),
    created_at INTEGER NOT NULL
);
CREATE TABLE IF NOT EXISTS day_schedules (
    id TEXT PRIMARY KEY,
    day TEXT NOT NULL UNIQUE CHECK(day IN ({", ".join(f"'{d}'" for d in DAYS)})),
    workout_ids TEXT NOT NULL DEFAULT '[]',
    created_at INTEGER NOT NULL
);
"""

# Tables every valid planner database must contain.
REQUIRED_TABLES = ["exercises", "workouts", "day_schedules"]

_EXERCISE_FIELDS = {"name", "timer_duration"}
_WORKOUT_FIELDS = {"name", "exercise_ids", "break_enabled", "break_duration"}


def _row_to_exercise(row) -> Exercise:
    ex_id, name, timer_duration, created_at = row
    return Exercise(
        id=ex_id, name=name, created_at=created_at, timer_duration=timer_duration
    )


def _row_to_workout(row) -> Workout:
    w_id, name, exercise_ids, break_enabled, break_duration, created_at = row
    return Workout(
        id=w_id,
        name=name,
        created_at=created_at,
        exercise_ids=tuple(json.loads(exercise_ids or "[]")),
        break_enabled=bool(break_enabled),
        break_duration=break_duration,
    )


def _row_to_schedule(row) -> DaySchedule:
    s_id, day, workout_ids, created_at = row
    return DaySchedule(
        id=s_id,
        day=day,
        created_at=created_at,
        workout_ids=tuple(json.loads(workout_ids or "[]")),
    )


class RecordStore:
    """Create, read, update and delete planner records in SQLite."""

    def __init__(self, db_path: Path = DEFAULT_DB_PATH):
        self.db_path = Path(db_path)

    def __repr__(self) -> str:
        return f"RecordStore({str(self.db_path)!r})"

    @contextmanager
    def connect(self):
        """Yield a connection that commits on success and is always closed."""

        conn = sqlite3.connect(str(self.db_path))
        try:
            with conn:
                yield conn
        finally:
            conn.close()

    def initialize(self) -> None:
        """Create the database file and tables if they do not exist yet."""

        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        with self.connect() as conn:
            conn.executescript(SCHEMA)
        logging.info("Record store ready at %s", self.db_path)

    # ------------------------------------------------------------------
    # Exercises
    # ------------------------------------------------------------------
    def add_exercise(self, name: str, timer_duration: int | None = None) -> Exercise:
        """Store a new exercise and return it."""

        name = validate_name(name)
        if timer_duration is not None:
            timer_duration = validate_duration(timer_duration, "Timer duration")
        exercise = Exercise(
            id=new_id(),
            name=name,
            created_at=now_ms(),
            timer_duration=timer_duration,
        )
        with self.connect() as conn:
            conn.execute(
                "INSERT INTO exercises (id, name, timer_duration, created_at) VALUES (?, ?, ?, ?)",
                (exercise.id, exercise.name, exercise.timer_duration, exercise.created_at),
            )
        logging.info("Added exercise %s (%s)", exercise.name, exercise.id)
        return exercise

    def get_all_exercises(self) -> list[Exercise]:
        with self.connect() as conn:
            rows = conn.execute(
                "SELECT id, name, timer_duration, created_at FROM exercises ORDER BY created_at, rowid"
            ).fetchall()
        return [_row_to_exercise(row) for row in rows]

    def get_exercise(self, exercise_id: str) -> Exercise | None:
        with self.connect() as conn:
            row = conn.execute(
                "SELECT id, name, timer_duration, created_at FROM exercises WHERE id = ?",
                (exercise_id,),
            ).fetchone()
        return _row_to_exercise(row) if row else None

    def update_exercise(self, exercise_id: str, **updates) -> Exercise:
        """Apply ``updates`` (``name`` and/or ``timer_duration``) to an exercise.

        Passing ``timer_duration=None`` removes the timer.
        """

        unknown = set(updates) - _EXERCISE_FIELDS
        if unknown:
            raise TypeError(f"Unknown exercise fields: {sorted(unknown)}")
        if "name" in updates:
            updates["name"] = validate_name(updates["name"])
        if updates.get("timer_duration") is not None:
            updates["timer_duration"] = validate_duration(
                updates["timer_duration"], "Timer duration"
            )

        with self.connect() as conn:
            row = conn.execute(
                "SELECT id, name, timer_duration, created_at FROM exercises WHERE id = ?",
                (exercise_id,),
            ).fetchone()
            if not row:
                raise RecordNotFound("Exercise not found")
            current = _row_to_exercise(row)
            name = updates.get("name", current.name)
            timer_duration = updates.get("timer_duration", current.timer_duration)
            conn.execute(
                "UPDATE exercises SET name = ?, timer_duration = ? WHERE id = ?",
                (name, timer_duration, exercise_id),
            )
        return Exercise(
            id=current.id,
            name=name,
            created_at=current.created_at,
            timer_duration=timer_duration,
        )

    def delete_exercise(self, exercise_id: str) -> None:
        """Delete an exercise.

        Workouts keep referencing the id; lookups of it simply stop
        resolving. Raises :class:`RecordNotFound` for an unknown id.
        """

        with self.connect() as conn:
            cur = conn.execute("DELETE FROM exercises WHERE id = ?", (exercise_id,))
        if not cur.rowcount:
            raise RecordNotFound("Exercise not found")
        logging.info("Deleted exercise %s", exercise_id)

    # ------------------------------------------------------------------
    # Workouts
    # ------------------------------------------------------------------
    def add_workout(
        self,
        name: str,
        exercise_ids=(),
        break_enabled: bool = False,
        break_duration: int | None = None,
    ) -> Workout:
        """Store a new workout and return it."""

        name = validate_name(name)
        break_enabled, break_duration = self._check_break(break_enabled, break_duration)
        workout = Workout(
            id=new_id(),
            name=name,
            created_at=now_ms(),
            exercise_ids=tuple(exercise_ids),
            break_enabled=break_enabled,
            break_duration=break_duration,
        )
        with self.connect() as conn:
            conn.execute(
                """
                INSERT INTO workouts
                    (id, name, exercise_ids, break_enabled, break_duration, created_at)
                VALUES (?, ?, ?, ?, ?, ?)
                """,
                (
                    workout.id,
                    workout.name,
                    json.dumps(list(workout.exercise_ids)),
                    int(workout.break_enabled),
                    workout.break_duration,
                    workout.created_at,
                ),
            )
        logging.info("Added workout %s (%s)", workout.name, workout.id)
        return workout

    @staticmethod
    def _check_break(break_enabled, break_duration):
        if not break_enabled:
            return False, None
        return True, validate_duration(break_duration, "Break duration")

    def get_all_workouts(self) -> list[Workout]:
        with self.connect() as conn:
            rows = conn.execute(
                """
                SELECT id, name, exercise_ids, break_enabled, break_duration, created_at
                  FROM workouts ORDER BY created_at, rowid
                """
            ).fetchall()
        return [_row_to_workout(row) for row in rows]

    def get_workout(self, workout_id: str) -> Workout | None:
        with self.connect() as conn:
            row = conn.execute(
                """
                SELECT id, name, exercise_ids, break_enabled, break_duration, created_at
                  FROM workouts WHERE id = ?
                """,
                (workout_id,),
            ).fetchone()
        return _row_to_workout(row) if row else None

    def update_workout(self, workout_id: str, **updates) -> Workout:
        """Apply ``updates`` to a workout and return the stored result."""

        unknown = set(updates) - _WORKOUT_FIELDS
        if unknown:
            raise TypeError(f"Unknown workout fields: {sorted(unknown)}")
        if "name" in updates:
            updates["name"] = validate_name(updates["name"])
        if "exercise_ids" in updates:
            updates["exercise_ids"] = tuple(updates["exercise_ids"])

        current = self.get_workout(workout_id)
        if current is None:
            raise RecordNotFound("Workout not found")
        break_enabled = updates.get("break_enabled", current.break_enabled)
        break_duration = updates.get("break_duration", current.break_duration)
        if "break_enabled" in updates or "break_duration" in updates:
            break_enabled, break_duration = self._check_break(break_enabled, break_duration)

        workout = Workout(
            id=current.id,
            name=updates.get("name", current.name),
            created_at=current.created_at,
            exercise_ids=updates.get("exercise_ids", current.exercise_ids),
            break_enabled=break_enabled,
            break_duration=break_duration,
        )
        with self.connect() as conn:
            conn.execute(
                """
                UPDATE workouts
                   SET name = ?, exercise_ids = ?, break_enabled = ?, break_duration = ?
                 WHERE id = ?
                """,
                (
                    workout.name,
                    json.dumps(list(workout.exercise_ids)),
                    int(workout.break_enabled),
                    workout.break_duration,
                    workout.id,
                ),
            )
        return workout

    def add_exercise_to_workout(self, workout_id: str, exercise_id: str) -> Workout:
        """Append ``exercise_id`` to the end of the workout's exercise list."""

        workout = self.get_workout(workout_id)
        if workout is None:
            raise RecordNotFound("Workout not found")
        if exercise_id in workout.exercise_ids:
            raise ValidationError("Exercise already added to this workout")
        return self.update_workout(
            workout_id, exercise_ids=workout.exercise_ids + (exercise_id,)
        )

    def remove_exercise_from_workout(self, workout_id: str, exercise_id: str) -> Workout:
        """Drop ``exercise_id`` from the workout, keeping the others in order."""

        workout = self.get_workout(workout_id)
        if workout is None:
            raise RecordNotFound("Workout not found")
        remaining = tuple(i for i in workout.exercise_ids if i != exercise_id)
        return self.update_workout(workout_id, exercise_ids=remaining)

    def update_break_settings(
        self, workout_id: str, break_enabled: bool, break_duration: int | None = None
    ) -> Workout:
        return self.update_workout(
            workout_id, break_enabled=break_enabled, break_duration=break_duration
        )

    def delete_workout(self, workout_id: str) -> None:
        with self.connect() as conn:
            cur = conn.execute("DELETE FROM workouts WHERE id = ?", (workout_id,))
        if not cur.rowcount:
            raise RecordNotFound("Workout not found")
        logging.info("Deleted workout %s", workout_id)

    # ------------------------------------------------------------------
    # Day schedules
    # ------------------------------------------------------------------
    def get_schedule_for_day(self, day: str) -> DaySchedule | None:
        day = validate_day(day)
        with self.connect() as conn:
            row = conn.execute(
                "SELECT id, day, workout_ids, created_at FROM day_schedules WHERE day = ?",
                (day,),
            ).fetchone()
        return _row_to_schedule(row) if row else None

    def get_all_schedules(self) -> list[DaySchedule]:
        with self.connect() as conn:
            rows = conn.execute(
                "SELECT id, day, workout_ids, created_at FROM day_schedules ORDER BY created_at, rowid"
            ).fetchall()
        return [_row_to_schedule(row) for row in rows]

    def get_or_create_schedule_for_day(self, day: str) -> DaySchedule:
        """Return the schedule for ``day``, creating an empty one if needed.

        The insert and the read back happen in one transaction and ``day`` is
        unique, so concurrent callers always end up with the same record.
        """

        day = validate_day(day)
        with self.connect() as conn:
            cur = conn.execute(
                "INSERT OR IGNORE INTO day_schedules (id, day, workout_ids, created_at) VALUES (?, ?, '[]', ?)",
                (new_id(), day, now_ms()),
            )
            if cur.rowcount:
                logging.info("Created empty schedule for %s", day)
            row = conn.execute(
                "SELECT id, day, workout_ids, created_at FROM day_schedules WHERE day = ?",
                (day,),
            ).fetchone()
        return _row_to_schedule(row)

    def update_schedule_for_day(self, day: str, workout_ids) -> DaySchedule:
        schedule = self.get_or_create_schedule_for_day(day)
        workout_ids = tuple(workout_ids)
        with self.connect() as conn:
            conn.execute(
                "UPDATE day_schedules SET workout_ids = ? WHERE id = ?",
                (json.dumps(list(workout_ids)), schedule.id),
            )
        return DaySchedule(
            id=schedule.id,
            day=schedule.day,
            created_at=schedule.created_at,
            workout_ids=workout_ids,
        )

    def add_workout_to_day(self, day: str, workout_id: str) -> DaySchedule:
        schedule = self.get_or_create_schedule_for_day(day)
        if workout_id in schedule.workout_ids:
            return schedule
        return self.update_schedule_for_day(day, schedule.workout_ids + (workout_id,))

    def remove_workout_from_day(self, day: str, workout_id: str) -> DaySchedule:
        schedule = self.get_or_create_schedule_for_day(day)
        return self.update_schedule_for_day(
            day, [i for i in schedule.workout_ids if i != workout_id]
        )
