import sqlite3

import pytest

from gymn.errors import RecordNotFound, ValidationError
from gymn.store import RecordStore


def test_initialize_is_idempotent(tmp_path):
    store = RecordStore(tmp_path / "nested" / "gymn.db")
    store.initialize()
    store.add_exercise("Squat")
    store.initialize()
    assert [e.name for e in store.get_all_exercises()] == ["Squat"]


def test_add_and_list_exercises(store):
    squat = store.add_exercise("  Squat  ")
    plank = store.add_exercise("Plank", timer_duration=45)
    assert squat.name == "Squat"
    assert squat.timer_duration is None
    assert squat.id != plank.id
    assert store.get_all_exercises() == [squat, plank]
    assert store.get_exercise(plank.id) == plank
    assert store.get_exercise("missing") is None


@pytest.mark.parametrize("duration", [0, -5, 2.5, "30"])
def test_invalid_timer_rejected(store, duration):
    with pytest.raises(ValidationError):
        store.add_exercise("Plank", timer_duration=duration)
    assert store.get_all_exercises() == []


def test_blank_name_rejected(store):
    with pytest.raises(ValidationError):
        store.add_exercise("   ")
    with pytest.raises(ValidationError):
        store.add_workout("")


def test_update_exercise(store):
    plank = store.add_exercise("Plank", timer_duration=45)
    updated = store.update_exercise(plank.id, name="Side Plank")
    assert updated.timer_duration == 45
    cleared = store.update_exercise(plank.id, timer_duration=None)
    assert cleared.timer_duration is None
    assert store.get_exercise(plank.id) == cleared
    assert cleared.created_at == plank.created_at


def test_update_missing_exercise(store):
    with pytest.raises(RecordNotFound):
        store.update_exercise("nope", name="X")
    with pytest.raises(TypeError):
        store.update_exercise("nope", colour="red")


def test_delete_exercise_leaves_workout_reference(store, sample_data):
    store.delete_exercise(sample_data["plank"].id)
    with pytest.raises(RecordNotFound):
        store.delete_exercise(sample_data["plank"].id)
    workout = store.get_workout(sample_data["workout"].id)
    assert sample_data["plank"].id in workout.exercise_ids


def test_workout_break_settings(store):
    workout = store.add_workout("Legs", break_enabled=False, break_duration=30)
    assert workout.break_duration is None
    with pytest.raises(ValidationError):
        store.add_workout("Legs", break_enabled=True)
    workout = store.update_break_settings(workout.id, True, 45)
    assert workout.break_enabled and workout.break_duration == 45
    workout = store.update_break_settings(workout.id, False)
    assert not workout.break_enabled and workout.break_duration is None
    assert store.get_workout(workout.id) == workout


def test_exercise_order_preserved(store):
    a, b, c = (store.add_exercise(n).id for n in "ABC")
    workout = store.add_workout("Order")
    for ex_id in (c, a, b):
        workout = store.add_exercise_to_workout(workout.id, ex_id)
    assert workout.exercise_ids == (c, a, b)
    workout = store.remove_exercise_from_workout(workout.id, a)
    assert workout.exercise_ids == (c, b)
    assert store.get_workout(workout.id).exercise_ids == (c, b)


def test_duplicate_exercise_in_workout_rejected(store, sample_data):
    with pytest.raises(ValidationError):
        store.add_exercise_to_workout(sample_data["workout"].id, sample_data["plank"].id)


def test_missing_workout(store):
    with pytest.raises(RecordNotFound):
        store.update_workout("nope", name="X")
    with pytest.raises(RecordNotFound):
        store.add_exercise_to_workout("nope", "x")
    assert store.get_workout("nope") is None


def test_delete_workout(store, sample_data):
    store.delete_workout(sample_data["workout"].id)
    assert store.get_all_workouts() == []
    with pytest.raises(RecordNotFound):
        store.delete_workout("nope")


def test_get_or_create_schedule(store):
    assert store.get_schedule_for_day("monday") is None
    first = store.get_or_create_schedule_for_day("Monday")
    second = store.get_or_create_schedule_for_day("monday")
    assert first == second
    assert first.workout_ids == ()
    assert len(store.get_all_schedules()) == 1


def test_schedule_day_is_unique(store):
    store.get_or_create_schedule_for_day("friday")
    with store.connect() as conn:
        with pytest.raises(sqlite3.IntegrityError):
            conn.execute(
                "INSERT INTO day_schedules (id, day, workout_ids, created_at) VALUES ('x', 'friday', '[]', 0)"
            )


def test_add_and_remove_workout_from_day(store):
    store.add_workout_to_day("tuesday", "w1")
    store.add_workout_to_day("tuesday", "w2")
    schedule = store.add_workout_to_day("tuesday", "w1")
    assert schedule.workout_ids == ("w1", "w2")
    schedule = store.remove_workout_from_day("tuesday", "w1")
    assert schedule.workout_ids == ("w2",)
    assert store.get_schedule_for_day("tuesday").workout_ids == ("w2",)


def test_unknown_day_rejected(store):
    with pytest.raises(ValidationError):
        store.get_or_create_schedule_for_day("someday")
