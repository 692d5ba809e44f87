"""Exception types raised by the planner.

None of these are fatal: callers show the message to the user and return
to the workout list.
"""


class GymnError(Exception):
    """Base class for planner errors."""


class InvalidWorkout(GymnError, ValueError):
    """A workout cannot be started, usually because it has no exercises."""


class DanglingReference(GymnError, LookupError):
    """An id stored in a workout or schedule no longer resolves."""

    def __init__(self, kind: str, record_id: str):
        super().__init__(f"{kind} '{record_id}' not found")
        self.kind = kind
        self.record_id = record_id


class ValidationError(GymnError, ValueError):
    """User supplied data was rejected before it reached storage."""


class RecordNotFound(GymnError, LookupError):
    """The store has no record with the requested id."""
