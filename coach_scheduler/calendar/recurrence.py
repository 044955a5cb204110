"""Recurrence expansion for proposed sessions.

A proposal is either a single session ("once") or a weekly series with a
fixed number of occurrences, each exactly seven days after the previous one.
Instances come out in generation order; downstream steps rely on it.
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import timedelta

from loguru import logger

from coach_scheduler.calendar.errors import InvalidInputError
from coach_scheduler.calendar.types import ConcreteInstance, ProposedSession, Recurrence
from coach_scheduler.config.settings import settings


def _occurrence_count(recurrence: Recurrence, weekly_occurrences: int) -> int:
    if recurrence == Recurrence.ONCE:
        return 1
    if recurrence == Recurrence.WEEKLY:
        return weekly_occurrences
    raise InvalidInputError("recurrence", f"unsupported recurrence {recurrence!r}")


def expand_recurrence(
    proposed: ProposedSession,
    *,
    weekly_occurrences: int | None = None,
    start_position: int = 0,
) -> list[ConcreteInstance]:
    """Expand one proposed session into its concrete instances.

    Args:
        proposed: Proposed session to expand
        weekly_occurrences: Number of weekly instances (default: settings)
        start_position: Batch position given to the first instance

    Returns:
        Instances at scheduled_at + 7*i days, i ascending

    Raises:
        InvalidInputError: If the duration is not positive or the
            recurrence value is unknown
    """
    if proposed.duration_minutes <= 0:
        raise InvalidInputError("duration_minutes", f"must be positive, got {proposed.duration_minutes}")

    occurrences = weekly_occurrences if weekly_occurrences is not None else settings.weekly_occurrences
    if occurrences <= 0:
        raise InvalidInputError("weekly_occurrences", f"must be positive, got {occurrences}")

    count = _occurrence_count(proposed.recurrence, occurrences)
    instances = [
        ConcreteInstance(
            position=start_position + i,
            occurrence_index=i,
            scheduled_at=proposed.scheduled_at + timedelta(days=7 * i),
            duration_minutes=proposed.duration_minutes,
            session_type=proposed.session_type,
            notes=proposed.notes,
        )
        for i in range(count)
    ]
    logger.debug(
        f"Expanded {proposed.recurrence.value} proposal at {proposed.scheduled_at.isoformat()} into {len(instances)} instance(s)"
    )
    return instances


def expand_batch(
    proposed_sessions: Iterable[ProposedSession],
    *,
    weekly_occurrences: int | None = None,
) -> list[ConcreteInstance]:
    """Expand several proposals into one ordered batch.

    Positions run continuously across proposals so that every instance in the
    batch has a distinct position.
    """
    instances: list[ConcreteInstance] = []
    for proposed in proposed_sessions:
        instances.extend(
            expand_recurrence(
                proposed,
                weekly_occurrences=weekly_occurrences,
                start_position=len(instances),
            )
        )
    return instances
