"""Import and export helpers for the planner database."""
from __future__ import annotations

import json
import logging
import shutil
import sqlite3
import time
from pathlib import Path
from typing import Any, Dict, List, Tuple

from . import DAYS
from .errors import ValidationError
from .models import (
    DaySchedule,
    Exercise,
    Workout,
    validate_duration,
    validate_name,
)
from .store import REQUIRED_TABLES, RecordStore

# Fields every record in an exported document must carry.
REQUIRED_FIELDS = {
    "exercises": ("id", "name", "createdAt"),
    "workouts": ("id", "name", "exerciseIds", "breakEnabled", "createdAt"),
    "schedules": ("id", "day", "workoutIds", "createdAt"),
}


def export_records(store: RecordStore) -> Dict[str, List[Dict[str, Any]]]:
    """Return every record in ``store`` in its serialised form."""

    return {
        "exercises": [e.to_record() for e in store.get_all_exercises()],
        "workouts": [w.to_record() for w in store.get_all_workouts()],
        "schedules": [s.to_record() for s in store.get_all_schedules()],
    }


def export_json(store: RecordStore, dest_dir: Path) -> Path:
    """Write all records to a timestamped JSON file in ``dest_dir``.

    File-system errors are logged and re-raised so the caller can tell the
    user what went wrong.
    """

    data = export_records(store)
    dest = (Path(dest_dir) / f"gymn_{int(time.time())}.json").resolve()
    try:
        with dest.open("w", encoding="utf-8") as fh:
            json.dump(data, fh, indent=2)
    except FileNotFoundError:
        logging.exception("Destination not found for JSON export: %s", dest)
        raise
    except PermissionError:
        logging.exception("Permission denied writing JSON export to %s", dest)
        raise
    except OSError:
        logging.exception("OS error exporting JSON to %s", dest)
        raise
    logging.info("Exported records to %s", dest)
    return dest


def _value_errors(section: str, pos: int, item: Dict[str, Any]) -> List[str]:
    """Apply the store's write rules to one record of ``section``."""

    errors: List[str] = []

    def check(func, *args):
        try:
            func(*args)
        except ValidationError as exc:
            errors.append(f"{section}[{pos}]: {exc}")

    if "name" in item:
        check(validate_name, item["name"])
    if section == "exercises" and item.get("timerDuration") is not None:
        check(validate_duration, item["timerDuration"], "Timer duration")
    if section == "workouts":
        if not isinstance(item.get("exerciseIds", []), list):
            errors.append(f"{section}[{pos}]: exerciseIds is not a list")
        if item.get("breakEnabled") or item.get("breakDuration") is not None:
            check(validate_duration, item.get("breakDuration"), "Break duration")
    if section == "schedules":
        if not isinstance(item.get("workoutIds", []), list):
            errors.append(f"{section}[{pos}]: workoutIds is not a list")
        if "day" in item and item["day"] not in DAYS:
            errors.append(f"{section}[{pos}]: unknown day {item['day']!r}")
    return errors


def validate_document(data: Any) -> Tuple[bool, List[str]]:
    """Check that ``data`` looks like the output of :func:`export_records`.

    Field values go through the same checks as :class:`RecordStore` writes.
    Returns a tuple of a success flag and the list of problems found.
    """
    errors: List[str] = []
    if not isinstance(data, dict):
        return False, ["document is not an object"]
    for section, fields in REQUIRED_FIELDS.items():
        items = data.get(section)
        if not isinstance(items, list):
            errors.append(f"missing list: {section}")
            continue
        for pos, item in enumerate(items):
            if not isinstance(item, dict):
                errors.append(f"{section}[{pos}] is not an object")
                continue
            missing = [f for f in fields if f not in item]
            if missing:
                errors.append(f"{section}[{pos}] missing {', '.join(missing)}")
            errors.extend(_value_errors(section, pos, item))
    schedules = data.get("schedules")
    days = [
        s["day"]
        for s in (schedules if isinstance(schedules, list) else [])
        if isinstance(s, dict) and isinstance(s.get("day"), str)
    ]
    if len(set(days)) != len(days):
        errors.append("more than one schedule for the same day")
    return (len(errors) == 0, errors)


def import_json(store: RecordStore, src_path: Path) -> None:
    """Replace the contents of ``store`` with the records in ``src_path``.

    The document is validated first; an invalid one raises
    :class:`ValidationError` and leaves the store untouched.
    """

    try:
        with Path(src_path).open("r", encoding="utf-8") as fh:
            data = json.load(fh)
    except FileNotFoundError:
        logging.exception("Import failed, file not found")
        raise
    except ValueError as exc:
        logging.error("Import failed, %s is not JSON", src_path)
        raise ValidationError(f"Not a JSON document: {exc}") from exc

    valid, errors = validate_document(data)
    if not valid:
        message = "; ".join(errors)
        logging.error("Import failed validation: %s", message)
        raise ValidationError(message)

    exercises = [Exercise.from_record(r) for r in data["exercises"]]
    workouts = [Workout.from_record(r) for r in data["workouts"]]
    schedules = [DaySchedule.from_record(r) for r in data["schedules"]]

    store.initialize()
    with store.connect() as conn:
        conn.execute("DELETE FROM exercises")
        conn.execute("DELETE FROM workouts")
        conn.execute("DELETE FROM day_schedules")
        conn.executemany(
            "INSERT INTO exercises (id, name, timer_duration, created_at) VALUES (?, ?, ?, ?)",
            [(e.id, e.name, e.timer_duration, e.created_at) for e in exercises],
        )
        conn.executemany(
            """
            INSERT INTO workouts
                (id, name, exercise_ids, break_enabled, break_duration, created_at)
            VALUES (?, ?, ?, ?, ?, ?)
            """,
            [
                (
                    w.id,
                    w.name,
                    json.dumps(list(w.exercise_ids)),
                    int(w.break_enabled),
                    w.break_duration,
                    w.created_at,
                )
                for w in workouts
            ],
        )
        conn.executemany(
            "INSERT INTO day_schedules (id, day, workout_ids, created_at) VALUES (?, ?, ?, ?)",
            [
                (s.id, s.day, json.dumps(list(s.workout_ids)), s.created_at)
                for s in schedules
            ],
        )
    logging.info(
        "Imported %d exercises, %d workouts and %d schedules from %s",
        len(exercises),
        len(workouts),
        len(schedules),
        src_path,
    )


def validate_database(db_path: Path) -> Tuple[bool, List[str]]:
    """Ensure all tables listed in :data:`REQUIRED_TABLES` exist in ``db_path``."""
    errors: List[str] = []
    try:
        with sqlite3.connect(str(db_path)) as conn:
            cur = conn.cursor()
            for table in REQUIRED_TABLES:
                cur.execute(
                    "SELECT name FROM sqlite_master WHERE type='table' AND name=?",
                    (table,),
                )
                if not cur.fetchone():
                    errors.append(f"missing table: {table}")
    except sqlite3.Error as exc:
        errors.append(str(exc))
    return (len(errors) == 0, errors)


def backup_database(db_path: Path, backup_dir: Path) -> Path:
    """Copy ``db_path`` into ``backup_dir`` and return the copy's path."""

    backup_dir = Path(backup_dir)
    backup_dir.mkdir(parents=True, exist_ok=True)
    dest = backup_dir / f"gymn_{int(time.time())}.db.bak"
    try:
        shutil.copy2(db_path, dest)
    except FileNotFoundError:
        logging.exception("Database file not found: %s", db_path)
        raise
    except OSError:
        logging.exception("OS error backing up database to %s", dest)
        raise
    logging.info("Backed up database to %s", dest)
    return dest
