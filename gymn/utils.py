"""Formatting and input helpers shared by the planner modules.

The timer labels back :class:`gymn.workout_session.SessionView`.
:func:`duration_from_parts` and :func:`split_duration` convert between
seconds and the minutes and seconds fields of the exercise and workout
edit forms in the UI layer.
"""

from __future__ import annotations

from .errors import ValidationError


def format_timer(seconds: int | None) -> str:
    """Return a short label such as ``"1m 30s"`` for a duration.

    ``None`` and ``0`` give an empty string.
    """

    if not seconds:
        return ""
    minutes, secs = divmod(seconds, 60)
    if minutes > 0:
        return f"{minutes}m {secs}s" if secs > 0 else f"{minutes}m"
    return f"{secs}s"


def format_timer_display(seconds: int) -> str:
    """Return ``seconds`` as a ``MM:SS`` countdown label."""

    minutes, secs = divmod(max(0, seconds), 60)
    return f"{minutes:02d}:{secs:02d}"


def _parse_part(value) -> int:
    if value is None:
        return 0
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    text = str(value).strip()
    if not text:
        return 0
    try:
        return int(text)
    except ValueError:
        raise ValidationError(f"Not a whole number: {value!r}") from None


def duration_from_parts(minutes=None, seconds=None, label: str = "Duration") -> int:
    """Combine minute and second form fields into a number of seconds.

    Blank fields count as zero. A total that is not positive raises
    :class:`ValidationError`.
    """

    total = _parse_part(minutes) * 60 + _parse_part(seconds)
    if total <= 0:
        raise ValidationError(f"{label} must be greater than 0")
    return total


def split_duration(seconds: int | None) -> tuple[str, str]:
    """Return ``(minutes, seconds)`` form field strings for ``seconds``.

    Zero parts are returned as empty strings.
    """

    if not seconds:
        return "", ""
    minutes, secs = divmod(seconds, 60)
    return (str(minutes) if minutes else "", str(secs) if secs else "")


def filter_by_name(records, query: str) -> list:
    """Return records whose ``name`` contains ``query``, ignoring case."""

    needle = (query or "").lower()
    return [r for r in records if needle in r.name.lower()]
