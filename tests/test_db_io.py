import json

import pytest

from gymn import db_io
from gymn.errors import ValidationError
from gymn.store import RecordStore


def test_export_records_shape(store, sample_data):
    store.add_workout_to_day("monday", sample_data["workout"].id)
    data = db_io.export_records(store)
    plank, pushup = data["exercises"]
    assert plank == {
        "id": sample_data["plank"].id,
        "name": "Plank",
        "timerDuration": 30,
        "createdAt": sample_data["plank"].created_at,
    }
    assert "timerDuration" not in pushup
    workout = data["workouts"][0]
    assert workout["exerciseIds"] == [sample_data["plank"].id, sample_data["pushup"].id]
    assert workout["breakEnabled"] is True
    assert workout["breakDuration"] == 10
    assert data["schedules"][0]["day"] == "monday"
    assert data["schedules"][0]["workoutIds"] == [sample_data["workout"].id]


def test_export_then_import_into_new_store(tmp_path, store, sample_data):
    store.add_workout_to_day("friday", sample_data["workout"].id)
    path = db_io.export_json(store, tmp_path)
    assert path.name.startswith("gymn_") and path.suffix == ".json"

    other = RecordStore(tmp_path / "other.db")
    other.initialize()
    other.add_exercise("Will be replaced")
    db_io.import_json(other, path)
    assert other.get_all_exercises() == store.get_all_exercises()
    assert other.get_all_workouts() == store.get_all_workouts()
    assert other.get_schedule_for_day("friday").workout_ids == (sample_data["workout"].id,)


def test_invalid_document_leaves_store_untouched(tmp_path, store, sample_data):
    bad = tmp_path / "bad.json"
    bad.write_text(json.dumps({"exercises": [{"id": "x"}], "workouts": []}))
    with pytest.raises(ValidationError) as excinfo:
        db_io.import_json(store, bad)
    assert "missing list: schedules" in str(excinfo.value)
    assert "exercises[0] missing name, createdAt" in str(excinfo.value)
    assert len(store.get_all_exercises()) == 2


def test_not_json(tmp_path, store):
    bad = tmp_path / "bad.json"
    bad.write_text("nope")
    with pytest.raises(ValidationError):
        db_io.import_json(store, bad)


def test_duplicate_days_rejected():
    doc = {
        "exercises": [],
        "workouts": [],
        "schedules": [
            {"id": "a", "day": "monday", "workoutIds": [], "createdAt": 1},
            {"id": "b", "day": "monday", "workoutIds": [], "createdAt": 2},
        ],
    }
    valid, errors = db_io.validate_document(doc)
    assert not valid
    assert errors == ["more than one schedule for the same day"]


def test_validate_and_backup_database(tmp_path, store):
    assert db_io.validate_database(store.db_path) == (True, [])
    empty = tmp_path / "empty.db"
    valid, errors = db_io.validate_database(empty)
    assert not valid
    assert "missing table: exercises" in errors

    backup = db_io.backup_database(store.db_path, tmp_path / "backups")
    assert backup.exists()
    assert db_io.validate_database(backup) == (True, [])


def test_backup_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        db_io.backup_database(tmp_path / "nope.db", tmp_path / "backups")


def _document(exercises=(), workouts=(), schedules=()):
    return {
        "exercises": list(exercises),
        "workouts": list(workouts),
        "schedules": list(schedules),
    }


def test_zero_timer_duration_rejected(tmp_path, store, sample_data):
    doc = _document(
        exercises=[{"id": "x", "name": "Plank", "timerDuration": 0, "createdAt": 1}]
    )
    path = tmp_path / "zero.json"
    path.write_text(json.dumps(doc))
    with pytest.raises(ValidationError) as excinfo:
        db_io.import_json(store, path)
    assert "exercises[0]: Timer duration must be greater than 0" in str(excinfo.value)
    assert len(store.get_all_exercises()) == 2


def test_workout_values_checked_like_store_writes(tmp_path, store, sample_data):
    doc = _document(
        workouts=[
            {
                "id": "w",
                "name": "  ",
                "exerciseIds": [],
                "breakEnabled": True,
                "createdAt": 1,
            }
        ]
    )
    path = tmp_path / "workout.json"
    path.write_text(json.dumps(doc))
    with pytest.raises(ValidationError) as excinfo:
        db_io.import_json(store, path)
    message = str(excinfo.value)
    assert "workouts[0]: Please enter a name" in message
    assert "workouts[0]: Break duration must be a whole number of seconds" in message
    assert [w.name for w in store.get_all_workouts()] == ["Core Day"]


def test_disabled_break_without_duration_accepted():
    doc = _document(
        workouts=[
            {"id": "w", "name": "Legs", "exerciseIds": [], "breakEnabled": False, "createdAt": 1}
        ]
    )
    assert db_io.validate_document(doc) == (True, [])


def test_bad_day_values_reported():
    doc = _document(
        schedules=[
            {"id": "a", "day": ["monday"], "workoutIds": [], "createdAt": 1},
            {"id": "b", "day": "Funday", "workoutIds": "w1", "createdAt": 2},
        ]
    )
    valid, errors = db_io.validate_document(doc)
    assert not valid
    assert errors == [
        "schedules[0]: unknown day ['monday']",
        "schedules[1]: workoutIds is not a list",
        "schedules[1]: unknown day 'Funday'",
    ]
