import os
from pathlib import Path
import sys

import pytest

os.environ.setdefault("KIVY_NO_ARGS", "1")
os.environ.setdefault("KIVY_NO_CONSOLELOG", "1")
os.environ.setdefault("KIVY_UNITTEST", "1")

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from gymn.catalog import DomainCatalog
from gymn.store import RecordStore
from gymn.timers import ManualTickSource


@pytest.fixture
def store(tmp_path: Path) -> RecordStore:
    """An initialized, empty store in a temporary directory."""
    store = RecordStore(tmp_path / "gymn.db")
    store.initialize()
    return store


@pytest.fixture
def sample_data(store: RecordStore) -> dict:
    """Plank (30s timer) and Push-up (untimed) in a workout with 10s breaks."""
    plank = store.add_exercise("Plank", timer_duration=30)
    pushup = store.add_exercise("Push-up")
    workout = store.add_workout(
        "Core Day",
        exercise_ids=[plank.id, pushup.id],
        break_enabled=True,
        break_duration=10,
    )
    return {"plank": plank, "pushup": pushup, "workout": workout}


@pytest.fixture
def catalog(store: RecordStore, sample_data: dict) -> DomainCatalog:
    return DomainCatalog(store).refresh()


@pytest.fixture
def clock() -> ManualTickSource:
    return ManualTickSource()
