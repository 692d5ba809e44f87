"""Map weekdays to the workouts assigned to them."""

from __future__ import annotations

from datetime import date

from . import DAYS
from .catalog import DomainCatalog
from .models import Workout, validate_day
from .store import RecordStore


def day_of_week(on: date | None = None) -> str:
    """Return the weekday key for ``on`` (today by default)."""

    on = on or date.today()
    return DAYS[on.weekday()]


def day_label(day: str) -> str:
    """Return the display label for a weekday key, e.g. ``"Monday"``."""

    return validate_day(day).capitalize()


class ScheduleResolver:
    """Look up and edit the workouts assigned to each day."""

    def __init__(self, store: RecordStore):
        self.store = store

    def resolve(self, day: str) -> list[str]:
        """Return the workout ids for ``day``, creating an empty schedule if needed."""

        return list(self.store.get_or_create_schedule_for_day(day).workout_ids)

    def week(self) -> dict[str, list[str]]:
        """Return the workout ids for every day, Monday first."""

        return {day: self.resolve(day) for day in DAYS}

    def today(self) -> str:
        return day_of_week()

    def todays_workouts(
        self, catalog: DomainCatalog, day: str | None = None
    ) -> list[Workout]:
        """Return the workouts scheduled for ``day`` (today by default).

        Ids that the catalog no longer knows about are skipped.
        """

        ids = self.resolve(day or self.today())
        found = (catalog.get_workout_by_id(i) for i in ids)
        return [w for w in found if w is not None]

    def assign(self, day: str, workout_id: str) -> list[str]:
        return list(self.store.add_workout_to_day(day, workout_id).workout_ids)

    def unassign(self, day: str, workout_id: str) -> list[str]:
        return list(self.store.remove_workout_from_day(day, workout_id).workout_ids)
