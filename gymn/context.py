"""Build the objects the app needs and start workout sessions.

Everything is constructed here and passed along explicitly; there is no
module level store or catalog.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Callable

from . import DEFAULT_DB_PATH, DEFAULT_TICK_INTERVAL, settings
from .catalog import DomainCatalog
from .errors import RecordNotFound
from .models import Workout
from .schedule import ScheduleResolver
from .session_runner import SessionRunner
from .store import RecordStore
from .timers import KivyTickSource
from .workout_session import SessionView, WorkoutSession


@dataclass
class AppContext:
    store: RecordStore
    catalog: DomainCatalog
    schedule: ScheduleResolver
    tick_source: object

    def todays_workouts(self, day: str | None = None) -> list[Workout]:
        """Reload the catalog and return the workouts planned for ``day``."""

        self.catalog.refresh()
        return self.schedule.todays_workouts(self.catalog, day)

    def start_session(
        self,
        workout_id: str,
        on_update: Callable[[SessionView], None] | None = None,
    ) -> SessionRunner:
        """Start a guided session for ``workout_id``.

        Raises :class:`RecordNotFound` for an unknown workout and
        :class:`gymn.errors.InvalidWorkout` if it has no exercises.
        """

        self.catalog.refresh()
        workout = self.catalog.get_workout_by_id(workout_id)
        if workout is None:
            raise RecordNotFound("Workout not found")
        session = WorkoutSession(workout, self.catalog)
        return SessionRunner(session, self.tick_source, on_update=on_update).start()


def build_context(
    db_path: Path | None = None,
    settings_path: Path | None = None,
    tick_source=None,
) -> AppContext:
    """Create the store, catalog, schedule resolver and tick source.

    ``db_path`` and the tick interval default to the values in the settings
    file; the settings file defaults to :data:`gymn.settings.SETTINGS_PATH`.
    """

    settings_path = settings_path or settings.SETTINGS_PATH
    if db_path is None:
        db_path = settings.get_value("db_path", settings_path) or DEFAULT_DB_PATH
    if tick_source is None:
        interval = settings.get_value("tick_interval", settings_path) or DEFAULT_TICK_INTERVAL
        tick_source = KivyTickSource(float(interval))

    store = RecordStore(Path(db_path))
    store.initialize()
    logging.info("Using database %s", store.db_path)
    return AppContext(
        store=store,
        catalog=DomainCatalog(store),
        schedule=ScheduleResolver(store),
        tick_source=tick_source,
    )
