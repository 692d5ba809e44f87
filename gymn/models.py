"""Record types stored by :mod:`gymn.store`.

The in-memory types use snake_case attributes. ``to_record`` and
``from_record`` convert to the camelCase mapping used on disk and in JSON
exports; optional fields that are unset are omitted from the mapping.
"""

from __future__ import annotations

import time
import uuid
from dataclasses import dataclass, field

from . import DAYS
from .errors import ValidationError


def new_id() -> str:
    """Return a fresh opaque record identifier."""

    return str(uuid.uuid4())


def now_ms() -> int:
    """Return the current time as epoch milliseconds."""

    return int(time.time() * 1000)


def validate_name(name) -> str:
    """Return ``name`` stripped of surrounding whitespace.

    Raises :class:`ValidationError` if nothing is left.
    """

    if not isinstance(name, str) or not name.strip():
        raise ValidationError("Please enter a name")
    return name.strip()


def validate_duration(value, label: str = "Duration") -> int:
    """Return ``value`` if it is a positive whole number of seconds."""

    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError(f"{label} must be a whole number of seconds")
    if value <= 0:
        raise ValidationError(f"{label} must be greater than 0")
    return value


def validate_day(day: str) -> str:
    """Return the canonical weekday key for ``day``."""

    key = day.lower() if isinstance(day, str) else day
    if key not in DAYS:
        raise ValidationError(f"Unknown day: {day!r}")
    return key


@dataclass(frozen=True)
class Exercise:
    """A single exercise, optionally timed."""

    id: str
    name: str
    created_at: int
    timer_duration: int | None = None

    @property
    def has_timer(self) -> bool:
        return bool(self.timer_duration)

    def to_record(self) -> dict:
        record = {"id": self.id, "name": self.name}
        if self.timer_duration is not None:
            record["timerDuration"] = self.timer_duration
        record["createdAt"] = self.created_at
        return record

    @classmethod
    def from_record(cls, record: dict) -> "Exercise":
        return cls(
            id=record["id"],
            name=record["name"],
            created_at=record["createdAt"],
            timer_duration=record.get("timerDuration"),
        )


@dataclass(frozen=True)
class Workout:
    """An ordered list of exercise ids with optional breaks between them.

    ``exercise_ids`` is the execution order. ``break_duration`` only has a
    meaning when ``break_enabled`` is set.
    """

    id: str
    name: str
    created_at: int
    exercise_ids: tuple[str, ...] = field(default_factory=tuple)
    break_enabled: bool = False
    break_duration: int | None = None

    @property
    def has_break(self) -> bool:
        return bool(self.break_enabled and self.break_duration)

    def to_record(self) -> dict:
        record = {
            "id": self.id,
            "name": self.name,
            "exerciseIds": list(self.exercise_ids),
            "breakEnabled": self.break_enabled,
        }
        if self.break_duration is not None:
            record["breakDuration"] = self.break_duration
        record["createdAt"] = self.created_at
        return record

    @classmethod
    def from_record(cls, record: dict) -> "Workout":
        return cls(
            id=record["id"],
            name=record["name"],
            created_at=record["createdAt"],
            exercise_ids=tuple(record.get("exerciseIds", ())),
            break_enabled=bool(record.get("breakEnabled", False)),
            break_duration=record.get("breakDuration"),
        )


@dataclass(frozen=True)
class DaySchedule:
    """Workouts assigned to one weekday."""

    id: str
    day: str
    created_at: int
    workout_ids: tuple[str, ...] = field(default_factory=tuple)

    def to_record(self) -> dict:
        return {
            "id": self.id,
            "day": self.day,
            "workoutIds": list(self.workout_ids),
            "createdAt": self.created_at,
        }

    @classmethod
    def from_record(cls, record: dict) -> "DaySchedule":
        return cls(
            id=record["id"],
            day=record["day"],
            created_at=record["createdAt"],
            workout_ids=tuple(record.get("workoutIds", ())),
        )
