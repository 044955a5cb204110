"""Conflict inspection for a single proposed time.

Used by callers that want to show the coach why a time does not work and
which slots on the same day would. Two kinds of conflict exist:

- limit: the client already has an active session that calendar day
- overlap: another client's active session overlaps the proposed interval
"""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime

from loguru import logger

from coach_scheduler.calendar.slots import find_available_slots
from coach_scheduler.calendar.time_utils import ensure_wall_clock, format_clock_time, is_same_day, overlaps
from coach_scheduler.calendar.types import ConflictInfo, ConflictType, Session, SessionStatus
from coach_scheduler.config.settings import SchedulerSettings


def detect_conflict(
    scheduled_at: datetime,
    duration_minutes: int,
    client_id: str,
    existing_sessions: Sequence[Session],
    *,
    ignore_session_id: str | None = None,
    now: datetime | None = None,
    config: SchedulerSettings | None = None,
) -> ConflictInfo | None:
    """Detect the first conflict for a proposed session and suggest slots.

    A limit conflict takes precedence over an overlap conflict. Its
    recommendations are times the client's existing session that day could
    move to, so that session is left out of the slot search.

    Args:
        scheduled_at: Proposed start time
        duration_minutes: Proposed length
        client_id: Client the session is for
        existing_sessions: The coach's sessions
        ignore_session_id: Session being rescheduled, ignored entirely
        now: Passed to the slot finder to skip past slots
        config: Passed to the slot finder

    Returns:
        ConflictInfo with same-day recommendations, or None if the time is free
    """
    ensure_wall_clock(scheduled_at)
    if now is not None:
        ensure_wall_clock(now, "now")

    candidates = [s for s in existing_sessions if s.is_active and s.id != ignore_session_id]

    conflict_type: ConflictType | None = None
    existing: Session | None = None

    for session in candidates:
        if session.client_id == client_id and is_same_day(session.scheduled_at, scheduled_at):
            conflict_type, existing = ConflictType.LIMIT, session
            break

    if existing is None:
        for session in candidates:
            if session.client_id != client_id and overlaps(
                scheduled_at, duration_minutes, session.scheduled_at, session.duration_minutes
            ):
                conflict_type, existing = ConflictType.OVERLAP, session
                break

    if existing is None or conflict_type is None:
        return None

    if conflict_type == ConflictType.LIMIT:
        message = f"Client already has a session on {scheduled_at.date().isoformat()} at {format_clock_time(existing.scheduled_at)}"
    else:
        message = (
            f"Overlaps with another client's session at {format_clock_time(existing.scheduled_at)} "
            f"({existing.duration_minutes} min)"
        )

    search_sessions = list(existing_sessions)
    if conflict_type == ConflictType.LIMIT:
        search_sessions = [s for s in search_sessions if s.id != existing.id]

    recommendations = find_available_slots(
        scheduled_at,
        duration_minutes,
        search_sessions,
        client_id,
        ignore_session_id=ignore_session_id,
        now=now,
        config=config,
    )
    logger.info(f"{conflict_type.value} conflict for client {client_id} with session {existing.id}: {len(recommendations)} alternative(s)")

    return ConflictInfo(
        type=conflict_type,
        message=message,
        existing_session=existing,
        proposed_client_id=client_id,
        proposed_scheduled_at=scheduled_at,
        proposed_duration_minutes=duration_minutes,
        recommendations=recommendations,
    )


def pending_resolutions(sessions: Sequence[Session]) -> list[Session]:
    """Sessions awaiting manual conflict handling, earliest first."""
    return sorted(
        (s for s in sessions if s.status == SessionStatus.PENDING_RESOLUTION),
        key=lambda s: s.scheduled_at,
    )
