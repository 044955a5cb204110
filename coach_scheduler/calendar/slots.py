"""Alternative time slot search.

Scans the proposed calendar day only (never another day) in fixed steps
across the working window and returns every open slot, chronologically,
labelled with a priority based on distance from the proposed time.
"""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime, timedelta

from loguru import logger

from coach_scheduler.calendar.errors import InvalidInputError
from coach_scheduler.calendar.time_utils import at_hour, ensure_wall_clock, format_clock_time, is_same_day, overlaps
from coach_scheduler.calendar.types import Session, SlotPriority, TimeSlotRecommendation
from coach_scheduler.config.settings import SchedulerSettings, settings

HIGH_PRIORITY_MINUTES = 60
MEDIUM_PRIORITY_MINUTES = 180


def slot_priority(diff_minutes: float) -> SlotPriority:
    if diff_minutes <= HIGH_PRIORITY_MINUTES:
        return SlotPriority.HIGH
    if diff_minutes <= MEDIUM_PRIORITY_MINUTES:
        return SlotPriority.MEDIUM
    return SlotPriority.LOW


def slot_reason(diff_minutes: float) -> str:
    if diff_minutes == 0:
        return "Same time"
    if diff_minutes <= HIGH_PRIORITY_MINUTES:
        return "Closest available time"
    return "Available slot on same day"


def candidate_times(day: datetime, config: SchedulerSettings) -> list[datetime]:
    """All candidate start times of the working window for `day`."""
    current = at_hour(day, config.working_day_start_hour)
    end_of_window = at_hour(day, config.working_day_end_hour)
    step = timedelta(minutes=config.slot_step_minutes)

    candidates: list[datetime] = []
    while current < end_of_window:
        candidates.append(current)
        current += step
    return candidates


def is_slot_available(
    slot: datetime,
    duration_minutes: int,
    existing_sessions: Sequence[Session],
    target_client_id: str | None = None,
    ignore_session_id: str | None = None,
) -> bool:
    """Check a single candidate slot.

    A slot is rejected when any active session that day overlaps it, or when
    the target client already has an active session that day (at any time).
    Pending-resolution sessions block time like scheduled ones.
    """
    day_sessions = [
        s
        for s in existing_sessions
        if s.id != ignore_session_id and s.is_active and is_same_day(s.scheduled_at, slot)
    ]

    for session in day_sessions:
        if overlaps(slot, duration_minutes, session.scheduled_at, session.duration_minutes):
            logger.debug(
                f"{format_clock_time(slot)} - overlap with session {session.id} at "
                f"{format_clock_time(session.scheduled_at)} (client {session.client_id}, status {session.status.value})"
            )
            return False

    if target_client_id and any(s.client_id == target_client_id for s in day_sessions):
        logger.debug(f"{format_clock_time(slot)} - client {target_client_id} already has a session that day")
        return False

    return True


def find_available_slots(
    proposed_time: datetime,
    duration_minutes: int,
    existing_sessions: Sequence[Session],
    target_client_id: str | None = None,
    *,
    ignore_session_id: str | None = None,
    now: datetime | None = None,
    config: SchedulerSettings | None = None,
) -> list[TimeSlotRecommendation]:
    """Recommend open slots on the proposed day.

    Args:
        proposed_time: Time the coach asked for; fixes the day searched
        duration_minutes: Length of the session to place
        existing_sessions: The coach's sessions (any day, any client)
        target_client_id: If given, a day where this client already has a
            session yields no slots at all
        ignore_session_id: Session being rescheduled, ignored entirely
        now: If given, slots before now minus the past-slot buffer are skipped
        config: Window and step policy (default: settings)

    Returns:
        All qualifying slots in chronological order, no truncation
    """
    ensure_wall_clock(proposed_time, "proposed_time")
    if now is not None:
        ensure_wall_clock(now, "now")
    if duration_minutes <= 0:
        raise InvalidInputError("duration_minutes", f"must be positive, got {duration_minutes}")

    config = config if config is not None else settings
    earliest = now - timedelta(minutes=config.past_slot_buffer_minutes) if now is not None else None

    recommendations: list[TimeSlotRecommendation] = []
    for slot in candidate_times(proposed_time, config):
        if earliest is not None and slot < earliest:
            continue
        if not is_slot_available(slot, duration_minutes, existing_sessions, target_client_id, ignore_session_id):
            continue

        diff_minutes = abs((slot - proposed_time).total_seconds()) / 60
        recommendations.append(
            TimeSlotRecommendation(
                time=slot,
                label=format_clock_time(slot),
                reason=slot_reason(diff_minutes),
                priority=slot_priority(diff_minutes),
            )
        )

    recommendations.sort(key=lambda r: r.time)
    logger.info(
        f"Found {len(recommendations)} available slot(s) on {proposed_time.date().isoformat()} "
        f"for {duration_minutes} min"
    )
    return recommendations
