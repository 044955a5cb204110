"""Wall-clock time helpers shared by the scheduling engine.

All timestamps are naive local wall-clock datetimes. No timezone conversion
happens anywhere in the engine; aware datetimes are rejected.
"""

from __future__ import annotations

from datetime import datetime, timedelta

from coach_scheduler.calendar.errors import InvalidInputError


def ensure_wall_clock(value: datetime, field: str = "scheduled_at") -> datetime:
    """Reject timezone-aware datetimes.

    Args:
        value: Timestamp to check
        field: Field name reported in the error

    Returns:
        The same timestamp

    Raises:
        InvalidInputError: If the timestamp carries a tzinfo
    """
    if value.tzinfo is not None:
        raise InvalidInputError(field, f"expected a naive wall-clock datetime, got {value.isoformat()}")
    return value


def session_end(start: datetime, duration_minutes: int) -> datetime:
    return start + timedelta(minutes=duration_minutes)


def overlaps(
    start_a: datetime,
    duration_a: int,
    start_b: datetime,
    duration_b: int,
) -> bool:
    """Check whether two half-open intervals overlap.

    Intervals are [start, start + duration). Back-to-back intervals
    (end of one == start of the other) do not overlap.

    Args:
        start_a: Start of the first interval
        duration_a: Length of the first interval in minutes
        start_b: Start of the second interval
        duration_b: Length of the second interval in minutes

    Returns:
        True if the intervals share at least one instant
    """
    end_a = session_end(start_a, duration_a)
    end_b = session_end(start_b, duration_b)
    return start_a < end_b and end_a > start_b


def is_same_day(a: datetime, b: datetime) -> bool:
    """Compare calendar year, month and day of two wall-clock timestamps."""
    return a.year == b.year and a.month == b.month and a.day == b.day


def at_hour(day: datetime, hour: int) -> datetime:
    """Return `day` at `hour`:00. Hour 24 maps to midnight of the next day."""
    midnight = day.replace(hour=0, minute=0, second=0, microsecond=0)
    return midnight + timedelta(hours=hour)


def format_clock_time(value: datetime) -> str:
    """Format as a 12-hour clock label, e.g. "7:30 PM"."""
    hour = value.hour % 12 or 12
    meridiem = "AM" if value.hour < 12 else "PM"
    return f"{hour}:{value.minute:02d} {meridiem}"
