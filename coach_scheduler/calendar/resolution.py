"""Session resolution engine.

Classifies every concrete instance of a proposal batch against the coach's
existing calendar:

- Same client already has a non-cancelled session that calendar day
  -> update that session (its meeting link is kept).
- Another client's non-cancelled session overlaps the instance
  -> status pending_resolution (independent of the rule above).
- Otherwise -> insert a new scheduled session with a fresh meeting link.

Every instance is checked against the same snapshot of existing sessions.
Instances of one batch are not checked against each other.
"""

from __future__ import annotations

from collections.abc import Sequence

from loguru import logger

from coach_scheduler.calendar.errors import InvalidInputError
from coach_scheduler.calendar.meeting_links import JitsiMeetingLinkFactory, MeetingLinkFactory
from coach_scheduler.calendar.time_utils import is_same_day, overlaps
from coach_scheduler.calendar.types import (
    ConcreteInstance,
    ResolutionResult,
    Session,
    SessionInsert,
    SessionPayload,
    SessionStatus,
    SessionUpdate,
)


def _require_id(value: str | None, field: str) -> str:
    if value is None or not str(value).strip():
        raise InvalidInputError(field, "is required")
    return value


def find_same_day_session(
    instance: ConcreteInstance,
    client_id: str,
    existing_sessions: Sequence[Session],
) -> Session | None:
    """Return the client's first active session on the instance's day, if any."""
    for existing in existing_sessions:
        if existing.client_id != client_id or not existing.is_active:
            continue
        if is_same_day(existing.scheduled_at, instance.scheduled_at):
            return existing
    return None


def find_overlapping_sessions(
    instance: ConcreteInstance,
    client_id: str,
    existing_sessions: Sequence[Session],
) -> list[Session]:
    """Return active sessions of other clients overlapping the instance."""
    return [
        existing
        for existing in existing_sessions
        if existing.client_id != client_id
        and existing.is_active
        and overlaps(
            instance.scheduled_at,
            instance.duration_minutes,
            existing.scheduled_at,
            existing.duration_minutes,
        )
    ]


def resolve_sessions(
    instances: Sequence[ConcreteInstance],
    target_client_id: str,
    coach_id: str,
    existing_sessions: Sequence[Session],
    link_factory: MeetingLinkFactory | None = None,
) -> ResolutionResult:
    """Classify instances into insert and update instructions.

    Args:
        instances: Expanded instances, in batch order
        target_client_id: Client the proposals are for
        coach_id: Coach owning the calendar
        existing_sessions: Snapshot of the coach's persisted sessions
        link_factory: Meeting link source for inserts (default: Jitsi)

    Returns:
        ResolutionResult with both buckets in batch order. A session id
        appears at most once in to_update; a later matching instance
        overwrites the payload of the earlier one.

    Raises:
        InvalidInputError: If coach_id or target_client_id is missing.
            Raised before any instance is classified.
    """
    _require_id(coach_id, "coach_id")
    _require_id(target_client_id, "client_id")

    factory = link_factory or JitsiMeetingLinkFactory()
    snapshot = list(existing_sessions)

    to_insert: list[SessionInsert] = []
    updates_by_id: dict[str, SessionUpdate] = {}

    for instance in instances:
        same_day = find_same_day_session(instance, target_client_id, snapshot)
        conflicting = find_overlapping_sessions(instance, target_client_id, snapshot)
        status = SessionStatus.PENDING_RESOLUTION if conflicting else SessionStatus.SCHEDULED

        payload = SessionPayload(
            coach_id=coach_id,
            client_id=target_client_id,
            scheduled_at=instance.scheduled_at,
            duration_minutes=instance.duration_minutes,
            session_type=instance.session_type,
            notes=instance.notes,
            status=status,
            is_locked=True,
            ai_generated=True,
        )

        if conflicting:
            logger.debug(
                f"Instance {instance.position} at {instance.scheduled_at.isoformat()} overlaps "
                f"{[s.id for s in conflicting]}, marking pending_resolution"
            )

        if same_day is not None:
            payload.meeting_link = same_day.meeting_link
            previous = updates_by_id.get(same_day.id)
            if previous is None:
                updates_by_id[same_day.id] = SessionUpdate(
                    id=same_day.id,
                    data=payload,
                    instance_positions=[instance.position],
                )
            else:
                previous.data = payload
                previous.instance_positions.append(instance.position)
            logger.debug(f"Instance {instance.position} updates existing session {same_day.id}")
        else:
            payload.meeting_link = factory.generate_link(coach_id, target_client_id, instance.position)
            to_insert.append(SessionInsert(position=instance.position, data=payload))
            logger.debug(f"Instance {instance.position} creates a new session")

    result = ResolutionResult(to_insert=to_insert, to_update=list(updates_by_id.values()))
    logger.info(
        f"Resolved {len(instances)} instance(s) for client {target_client_id}: "
        f"{len(result.to_update)} update(s), {len(result.to_insert)} insert(s), "
        f"{result.pending_resolution_count} pending resolution"
    )
    return result
