"""Shared constants for the workout planner modules."""

from __future__ import annotations

from pathlib import Path

# Seconds between two ticks of a running countdown
DEFAULT_TICK_INTERVAL = 1.0

# Path to the SQLite database used when no other location is configured
DEFAULT_DB_PATH = Path(__file__).resolve().parent.parent / "data" / "gymn.db"

# Weekday keys in the order they are presented, Monday first
DAYS = (
    "monday",
    "tuesday",
    "wednesday",
    "thursday",
    "friday",
    "saturday",
    "sunday",
)

__all__ = [
    "DEFAULT_TICK_INTERVAL",
    "DEFAULT_DB_PATH",
    "DAYS",
]
