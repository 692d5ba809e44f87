"""In-memory view of the exercise and workout records."""

from __future__ import annotations

import logging
from typing import Iterable

from .models import Exercise, Workout
from .store import RecordStore
from .utils import filter_by_name


class DomainCatalog:
    """Snapshot of every exercise and workout used for id lookups.

    The snapshot is taken by :meth:`refresh` and does not change until the
    next refresh, so edits made while a session runs are not seen by it.
    """

    def __init__(self, store: RecordStore):
        self.store = store
        self._exercises: list[Exercise] = []
        self._workouts: list[Workout] = []
        self._exercises_by_id: dict[str, Exercise] = {}
        self._workouts_by_id: dict[str, Workout] = {}

    def refresh(self) -> "DomainCatalog":
        """Reload all exercises and workouts from the store."""

        self._exercises = self.store.get_all_exercises()
        self._workouts = self.store.get_all_workouts()
        self._exercises_by_id = {e.id: e for e in self._exercises}
        self._workouts_by_id = {w.id: w for w in self._workouts}
        logging.info(
            "Catalog loaded %d exercises and %d workouts",
            len(self._exercises),
            len(self._workouts),
        )
        return self

    def list_exercises(self) -> list[Exercise]:
        return list(self._exercises)

    def list_workouts(self) -> list[Workout]:
        return list(self._workouts)

    def get_exercise_by_id(self, exercise_id: str) -> Exercise | None:
        return self._exercises_by_id.get(exercise_id)

    def get_workout_by_id(self, workout_id: str) -> Workout | None:
        return self._workouts_by_id.get(workout_id)

    def resolve_exercises(self, exercise_ids: Iterable[str]) -> list[Exercise]:
        """Return the exercises for ``exercise_ids`` in the same order.

        Ids that no longer resolve are left out.
        """

        found = (self._exercises_by_id.get(i) for i in exercise_ids)
        return [e for e in found if e is not None]

    def search_exercises(self, query: str) -> list[Exercise]:
        return filter_by_name(self._exercises, query)

    def search_workouts(self, query: str) -> list[Workout]:
        return filter_by_name(self._workouts, query)
