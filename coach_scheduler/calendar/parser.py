"""Heuristic parsing of free scheduling text.

Extracts a clock time, date keywords and a recurrence hint from input such
as "every Monday at 7:25pm". Best effort only: when nothing can be extracted
the corresponding fields stay empty and has_time / has_date are False.

Examples:
    "Schedule at 7:25pm"      -> time "19:25"
    "Schedule today at 2pm"   -> time "14:00", dates ["today"]
    "Every Monday at 9am"     -> time "09:00", dates ["monday"], weekly
    "today and monday"        -> dates ["today", "monday"], no time
"""

from __future__ import annotations

import re
from datetime import date, datetime, timedelta

from loguru import logger

from coach_scheduler.calendar.errors import ParseAmbiguityError
from coach_scheduler.calendar.types import ParsedSchedule, ProposedSession, Recurrence

TIME_PATTERN = re.compile(r"(\d{1,2}):?(\d{2})?\s*(am|pm)?", re.IGNORECASE)

DATE_KEYWORDS = ["today", "tomorrow", "monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday"]
WEEKDAYS = DATE_KEYWORDS[2:]  # Python weekday() order, Monday=0

WEEKLY_KEYWORDS = ["every", "weekly", "all"]
ONCE_KEYWORDS = ["only", "just", "one time", "single"]


def normalize_time(hours: int, minutes: int, meridiem: str | None) -> str | None:
    """Convert clock components to 24-hour HH:MM, or None if out of range."""
    if meridiem:
        meridiem = meridiem.lower()
        if meridiem == "pm" and hours != 12:
            hours += 12
        elif meridiem == "am" and hours == 12:
            hours = 0

    if hours < 0 or hours > 23 or minutes < 0 or minutes > 59:
        return None
    return f"{hours:02d}:{minutes:02d}"


def _extract_time(text: str) -> str | None:
    match = TIME_PATTERN.search(text)
    if not match:
        return None
    hours = int(match.group(1))
    minutes = int(match.group(2)) if match.group(2) else 0
    return normalize_time(hours, minutes, match.group(3))


def _extract_recurrence(text: str) -> Recurrence | None:
    if any(keyword in text for keyword in WEEKLY_KEYWORDS):
        return Recurrence.WEEKLY
    if any(keyword in text for keyword in ONCE_KEYWORDS):
        return Recurrence.ONCE
    return None


def parse_scheduling_input(text: str) -> ParsedSchedule:
    """Parse free text into time, date keywords and recurrence.

    Only the first time-like match is considered. All date keywords found
    anywhere in the text are returned, in keyword order. Weekly keywords win
    over single-occurrence keywords.
    """
    lowered = text.lower()

    parsed_time = _extract_time(lowered)
    dates = [keyword for keyword in DATE_KEYWORDS if keyword in lowered]
    recurrence = _extract_recurrence(lowered)

    result = ParsedSchedule(
        original_input=text,
        time=parsed_time,
        dates=dates or None,
        recurrence=recurrence,
        has_time=parsed_time is not None,
        has_date=bool(dates),
    )
    logger.debug(
        f"Parsed scheduling input {text!r}: time={result.time} dates={result.dates} "
        f"recurrence={result.recurrence.value if result.recurrence else None}"
    )
    return result


def resolve_date_keyword(keyword: str, reference_date: date) -> date:
    """Map a date keyword to a calendar date.

    Weekday names resolve to the next such weekday on or after the reference
    date, so "monday" on a Monday is that same day.

    Raises:
        ValueError: If the keyword is not a known date keyword
    """
    keyword = keyword.strip().lower()
    if keyword == "today":
        return reference_date
    if keyword == "tomorrow":
        return reference_date + timedelta(days=1)
    if keyword in WEEKDAYS:
        offset = (WEEKDAYS.index(keyword) - reference_date.weekday()) % 7
        return reference_date + timedelta(days=offset)
    raise ValueError(f"Unknown date keyword: {keyword}")


def build_proposed_sessions(
    parsed: ParsedSchedule,
    reference_date: date,
    duration_minutes: int,
    session_type: str = "training",
    notes: str | None = None,
) -> list[ProposedSession]:
    """Turn a complete parse into proposed sessions, one per date keyword.

    Args:
        parsed: Output of parse_scheduling_input
        reference_date: Day the text was written ("today")
        duration_minutes: Length of each session
        session_type: Category label for the sessions
        notes: Optional notes copied onto every session

    Returns:
        Proposed sessions ordered by date, duplicates removed

    Raises:
        ParseAmbiguityError: If the parse has no time or no date
    """
    missing = []
    if not parsed.has_time:
        missing.append("time")
    if not parsed.has_date:
        missing.append("date")
    if missing:
        raise ParseAmbiguityError(missing)

    hours, minutes = (int(part) for part in parsed.time.split(":"))
    days = sorted({resolve_date_keyword(keyword, reference_date) for keyword in parsed.dates})

    return [
        ProposedSession(
            scheduled_at=datetime(day.year, day.month, day.day, hours, minutes),
            duration_minutes=duration_minutes,
            session_type=session_type,
            notes=notes,
            recurrence=parsed.recurrence or Recurrence.ONCE,
        )
        for day in days
    ]
