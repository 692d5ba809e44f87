import pytest

from gymn.errors import ValidationError
from gymn.models import (
    DaySchedule,
    Exercise,
    Workout,
    validate_day,
    validate_duration,
    validate_name,
)


def test_exercise_record_omits_missing_timer():
    ex = Exercise(id="e1", name="Squat", created_at=5)
    assert ex.to_record() == {"id": "e1", "name": "Squat", "createdAt": 5}
    assert not ex.has_timer
    assert Exercise.from_record(ex.to_record()) == ex


def test_workout_from_record():
    record = {
        "id": "w1",
        "name": "Legs",
        "exerciseIds": ["b", "a"],
        "breakEnabled": True,
        "breakDuration": 20,
        "createdAt": 1,
    }
    workout = Workout.from_record(record)
    assert workout.exercise_ids == ("b", "a")
    assert workout.has_break
    assert workout.to_record() == record


def test_schedule_record():
    schedule = DaySchedule(id="s", day="monday", created_at=3, workout_ids=("w",))
    assert schedule.to_record() == {
        "id": "s",
        "day": "monday",
        "workoutIds": ["w"],
        "createdAt": 3,
    }


def test_validators():
    assert validate_name(" Row ") == "Row"
    assert validate_duration(5) == 5
    assert validate_day("SUNDAY") == "sunday"
    with pytest.raises(ValidationError):
        validate_duration(True)
    with pytest.raises(ValidationError, match="Break duration"):
        validate_duration(0, "Break duration")
    with pytest.raises(ValidationError):
        validate_name(None)
    with pytest.raises(ValidationError):
        validate_day(None)
