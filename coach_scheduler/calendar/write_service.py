"""Calendar write service.

Turns proposed sessions into resolution instructions and applies them to a
session store. Updates are always written before inserts. Writes are atomic
per row but not per batch; nothing is rolled back on failure.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any, Protocol

from loguru import logger

from coach_scheduler.calendar.errors import PersistenceError
from coach_scheduler.calendar.meeting_links import MeetingLinkFactory
from coach_scheduler.calendar.recurrence import expand_batch
from coach_scheduler.calendar.resolution import resolve_sessions
from coach_scheduler.calendar.types import ProposedSession, ResolutionResult, Session


class SessionStore(Protocol):
    """External session persistence. Both methods raise on failure."""

    def insert_sessions(self, rows: list[dict[str, Any]]) -> None: ...

    def update_session(self, session_id: str, patch: dict[str, Any]) -> None: ...


@dataclass
class WriteResult:
    """Result of applying a resolution to the store.

    Attributes:
        updated: Number of updates committed
        created: Number of sessions inserted
        errors: Persistence errors, in the order they happened
    """

    updated: int = 0
    created: int = 0
    errors: list[PersistenceError] = field(default_factory=list)

    @property
    def total(self) -> int:
        return self.updated + self.created

    @property
    def ok(self) -> bool:
        return not self.errors

    def summary(self) -> str:
        if self.errors:
            return f"{self.errors[0]} ({self.total} session(s) saved before the failure)"
        return f"{self.total} session(s) saved! ({self.updated} updated, {self.created} created)"


class CalendarWriteService:
    """Plans and applies session writes for one coach/client pair at a time."""

    def __init__(
        self,
        store: SessionStore,
        link_factory: MeetingLinkFactory | None = None,
        weekly_occurrences: int | None = None,
    ) -> None:
        self.store = store
        self.link_factory = link_factory
        self.weekly_occurrences = weekly_occurrences

    def plan(
        self,
        coach_id: str,
        client_id: str,
        proposed_sessions: Sequence[ProposedSession],
        existing_sessions: Sequence[Session],
    ) -> ResolutionResult:
        """Expand and classify proposals. Performs no I/O."""
        instances = expand_batch(proposed_sessions, weekly_occurrences=self.weekly_occurrences)
        return resolve_sessions(instances, client_id, coach_id, existing_sessions, self.link_factory)

    def apply(self, result: ResolutionResult, *, stop_on_error: bool = True) -> WriteResult:
        """Write a resolution to the store, updates first.

        Args:
            result: Output of plan() or resolve_sessions()
            stop_on_error: Stop at the first failure (default). When False,
                keep going and collect every failure.

        Returns:
            WriteResult with counts of committed writes and any errors
        """
        write_result = WriteResult()

        for position, update in enumerate(result.to_update):
            try:
                self.store.update_session(update.id, update.data.to_row())
            except Exception as e:
                error = PersistenceError("update", e, session_id=update.id, position=position)
                logger.error(f"Update error for session {update.id}: {e}")
                write_result.errors.append(error)
                if stop_on_error:
                    return write_result
            else:
                write_result.updated += 1

        if result.to_insert:
            rows = [insert.data.to_row() for insert in result.to_insert]
            try:
                self.store.insert_sessions(rows)
            except Exception as e:
                logger.error(f"Insert error for {len(rows)} session(s): {e}")
                write_result.errors.append(PersistenceError("insert", e, position=0))
            else:
                write_result.created = len(rows)

        logger.info(
            f"Applied resolution: {write_result.updated} updated, {write_result.created} created, "
            f"{len(write_result.errors)} error(s)"
        )
        return write_result

    def save_proposed_sessions(
        self,
        coach_id: str,
        client_id: str,
        proposed_sessions: Sequence[ProposedSession],
        existing_sessions: Sequence[Session],
        *,
        stop_on_error: bool = True,
    ) -> WriteResult:
        """Plan and apply in one call. Invalid input raises before any write."""
        result = self.plan(coach_id, client_id, proposed_sessions, existing_sessions)
        return self.apply(result, stop_on_error=stop_on_error)
