"""SQLAlchemy implementation of the session store."""

from __future__ import annotations

from typing import Any

from loguru import logger
from sqlalchemy import select
from sqlalchemy.orm import Session

from coach_scheduler.calendar.types import Session as CalendarSession
from coach_scheduler.db.models import CoachingSession

# Columns a resolution payload may overwrite; id and timestamps are never patched
WRITABLE_COLUMNS = {
    "coach_id",
    "client_id",
    "scheduled_at",
    "duration_minutes",
    "session_type",
    "notes",
    "status",
    "is_locked",
    "ai_generated",
    "meeting_link",
}


def _row_values(row: dict[str, Any]) -> dict[str, Any]:
    values = {key: value for key, value in row.items() if key in WRITABLE_COLUMNS}
    if "status" in values and values["status"] is not None:
        values["status"] = str(values["status"])
    return values


class SqlAlchemySessionStore:
    """Session store backed by a SQLAlchemy session.

    Each insert batch and each update is committed on its own, so a failure
    leaves earlier writes in place.
    """

    def __init__(self, db: Session) -> None:
        self.db = db

    def list_coach_sessions(self, coach_id: str, *, include_cancelled: bool = True) -> list[CalendarSession]:
        """Return the coach's sessions, earliest first."""
        query = select(CoachingSession).where(CoachingSession.coach_id == coach_id)
        if not include_cancelled:
            query = query.where(CoachingSession.status != "cancelled")
        rows = self.db.execute(query.order_by(CoachingSession.scheduled_at)).scalars().all()
        return [CalendarSession.model_validate(row) for row in rows]

    def insert_sessions(self, rows: list[dict[str, Any]]) -> None:
        try:
            self.db.add_all([CoachingSession(**_row_values(row)) for row in rows])
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        logger.debug(f"Inserted {len(rows)} coaching session(s)")

    def update_session(self, session_id: str, patch: dict[str, Any]) -> None:
        try:
            session = self.db.get(CoachingSession, session_id)
            if session is None:
                raise LookupError(f"Coaching session {session_id} not found")
            for key, value in _row_values(patch).items():
                setattr(session, key, value)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        logger.debug(f"Updated coaching session {session_id}")

    def cancel_session(self, session_id: str) -> None:
        """Logically delete a session."""
        self.update_session(session_id, {"status": "cancelled"})
