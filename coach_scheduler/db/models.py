from __future__ import annotations

import uuid
from datetime import datetime

from sqlalchemy import Boolean, DateTime, Index, Integer, String, Text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """Base class for all database models."""


class CoachingSession(Base):
    """A coaching session between one coach and one client.

    Times are stored as naive local wall-clock datetimes. Sessions are never
    hard-deleted; cancellation sets status to "cancelled".
    """

    __tablename__ = "coaching_sessions"

    id: Mapped[str] = mapped_column(String, primary_key=True, default=lambda: str(uuid.uuid4()), index=True)
    coach_id: Mapped[str] = mapped_column(String, nullable=False, index=True)
    client_id: Mapped[str] = mapped_column(String, nullable=False, index=True)

    scheduled_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, index=True)
    duration_minutes: Mapped[int] = mapped_column(Integer, nullable=False)
    session_type: Mapped[str] = mapped_column(String, nullable=False, default="training")
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    status: Mapped[str] = mapped_column(String, nullable=False, default="scheduled")  # scheduled, pending_resolution, cancelled
    is_locked: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    ai_generated: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    meeting_link: Mapped[str | None] = mapped_column(String, nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=datetime.now)
    updated_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=datetime.now, onupdate=datetime.now)

    __table_args__ = (
        Index("idx_coaching_sessions_coach_scheduled", "coach_id", "scheduled_at"),  # Common query: coach calendar by date
    )
