"""One-time migration making ``day_schedules.day`` unique.

Older databases could end up with several schedules for the same weekday
when two screens created the day's schedule at the same time. This script
backs up the database, merges duplicates into the oldest schedule of each
day (appending workout ids it does not have yet, in order) and rebuilds the
table with a UNIQUE constraint on ``day``.
"""

from pathlib import Path
import json
import shutil
import sqlite3
import sys
import time

from gymn import DAYS, DEFAULT_DB_PATH


def log(message: str) -> None:
    """Print a formatted migration log message."""
    print(f"[migration] {message}")


def merge_duplicates(rows):
    """Return one ``(id, day, workout_ids, created_at)`` row per day.

    ``rows`` must be ordered oldest first.
    """
    merged = {}
    for sched_id, day, workout_ids, created_at in rows:
        ids = json.loads(workout_ids or "[]")
        if day not in merged:
            merged[day] = [sched_id, day, list(ids), created_at]
            continue
        kept = merged[day][2]
        kept.extend(i for i in ids if i not in kept)
    return [tuple(r[:2]) + (json.dumps(r[2]), r[3]) for r in merged.values()]


def migrate(db_path: Path) -> int:
    """Rebuild ``day_schedules`` in ``db_path``; return the rows removed."""
    conn = sqlite3.connect(str(db_path))
    try:
        rows = conn.execute(
            "SELECT id, day, workout_ids, created_at FROM day_schedules ORDER BY created_at, rowid"
        ).fetchall()
        merged = merge_duplicates(rows)
        day_list = ", ".join(f"'{d}'" for d in DAYS)
        conn.execute(
            f"""
            CREATE TABLE day_schedules_new (
                id TEXT PRIMARY KEY,
                day TEXT NOT NULL UNIQUE CHECK(day IN ({day_list})),
                workout_ids TEXT NOT NULL DEFAULT '[]',
                created_at INTEGER NOT NULL
            )
            """
        )
        conn.executemany(
            "INSERT INTO day_schedules_new (id, day, workout_ids, created_at) VALUES (?, ?, ?, ?)",
            merged,
        )
        conn.execute("DROP TABLE day_schedules")
        conn.execute("ALTER TABLE day_schedules_new RENAME TO day_schedules")
        conn.commit()
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()
    removed = len(rows) - len(merged)
    log(f"Merged {removed} duplicate schedule row(s)")
    return removed


def main() -> None:
    db_path = Path(sys.argv[1]) if len(sys.argv) > 1 else DEFAULT_DB_PATH
    backup_dir = Path(__file__).resolve().parent.parent / "backups"
    backup_dir.mkdir(exist_ok=True)
    backup_file = backup_dir / f"gymn_{int(time.time())}.db.bak"
    shutil.copyfile(db_path, backup_file)
    log(f"Backup created at {backup_file}")
    try:
        migrate(db_path)
    except sqlite3.Error as exc:
        log(f"Migration failed: {exc}")
        sys.exit(1)
    log("Migration complete")


if __name__ == "__main__":
    main()
