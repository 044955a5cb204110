"""Data model for coaching session scheduling.

Timestamps are naive local wall-clock datetimes (see time_utils). Models that
carry a timestamp reject timezone-aware values with InvalidInputError.
"""

from __future__ import annotations

from datetime import datetime
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, Field, field_validator

from coach_scheduler.calendar.errors import InvalidInputError
from coach_scheduler.calendar.time_utils import ensure_wall_clock


class SessionStatus(StrEnum):
    SCHEDULED = "scheduled"
    PENDING_RESOLUTION = "pending_resolution"
    CANCELLED = "cancelled"


class Recurrence(StrEnum):
    ONCE = "once"
    WEEKLY = "weekly"


class SlotPriority(StrEnum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class ConflictType(StrEnum):
    OVERLAP = "overlap"  # another client's session overlaps in time
    LIMIT = "limit"  # the client already has a session that day


def _positive_duration(value: int) -> int:
    if value is None or value <= 0:
        raise InvalidInputError("duration_minutes", f"must be a positive number of minutes, got {value}")
    return value


class Session(BaseModel):
    """A persisted coaching session, as read from the session store.

    Attributes:
        id: Store-assigned identifier, immutable after insert
        coach_id: Owning coach
        client_id: Client the session is with
        scheduled_at: Start of the session (wall clock)
        duration_minutes: Length of the session, [scheduled_at, +duration)
        session_type: Free-form category label
        notes: Optional free text
        status: scheduled, pending_resolution or cancelled
        is_locked: Preserved on write, unused by conflict logic
        ai_generated: Preserved on write, unused by conflict logic
        meeting_link: Opaque meeting URL, carried forward on update
    """

    id: str
    coach_id: str
    client_id: str
    scheduled_at: datetime
    duration_minutes: int
    session_type: str = "training"
    notes: str | None = None
    status: SessionStatus = SessionStatus.SCHEDULED
    is_locked: bool = False
    ai_generated: bool = False
    meeting_link: str | None = None

    model_config = {"from_attributes": True}

    @field_validator("scheduled_at")
    @classmethod
    def _wall_clock(cls, value: datetime) -> datetime:
        return ensure_wall_clock(value)

    @field_validator("duration_minutes")
    @classmethod
    def _duration(cls, value: int) -> int:
        return _positive_duration(value)

    @property
    def is_active(self) -> bool:
        """Cancelled sessions are ignored by every overlap and same-day check."""
        return self.status != SessionStatus.CANCELLED


class ProposedSession(BaseModel):
    """A session proposed by the coach or the assistant, not yet persisted."""

    scheduled_at: datetime
    duration_minutes: int
    session_type: str = "training"
    notes: str | None = None
    recurrence: Recurrence = Recurrence.ONCE

    @field_validator("scheduled_at")
    @classmethod
    def _wall_clock(cls, value: datetime) -> datetime:
        return ensure_wall_clock(value)

    @field_validator("duration_minutes")
    @classmethod
    def _duration(cls, value: int) -> int:
        return _positive_duration(value)

    @field_validator("recurrence", mode="before")
    @classmethod
    def _recurrence(cls, value: Any) -> Any:
        if value is None:
            return Recurrence.ONCE
        try:
            return Recurrence(value)
        except ValueError:
            raise InvalidInputError(
                "recurrence", f"expected one of {[r.value for r in Recurrence]}, got {value!r}"
            ) from None


class ConcreteInstance(BaseModel):
    """One dated occurrence of a proposed session.

    Attributes:
        position: Index of the instance within the whole batch
        occurrence_index: Index within its own recurrence expansion
    """

    position: int = Field(ge=0)
    occurrence_index: int = Field(ge=0)
    scheduled_at: datetime
    duration_minutes: int
    session_type: str
    notes: str | None = None

    @field_validator("scheduled_at")
    @classmethod
    def _wall_clock(cls, value: datetime) -> datetime:
        return ensure_wall_clock(value)

    @field_validator("duration_minutes")
    @classmethod
    def _duration(cls, value: int) -> int:
        return _positive_duration(value)


class SessionPayload(BaseModel):
    """Row data written to the session store for one instance."""

    coach_id: str
    client_id: str
    scheduled_at: datetime
    duration_minutes: int
    session_type: str
    notes: str | None = None
    status: SessionStatus
    is_locked: bool = True
    ai_generated: bool = True
    meeting_link: str | None = None

    def to_row(self) -> dict[str, Any]:
        return self.model_dump()


class SessionInsert(BaseModel):
    """Insert instruction for an instance with no same-day match."""

    position: int
    data: SessionPayload


class SessionUpdate(BaseModel):
    """Update instruction keyed by the matched session id.

    Attributes:
        id: ID of the existing session to overwrite
        data: Payload of the last instance that matched this session
        instance_positions: Batch positions of every instance folded into
            this update, in order
    """

    id: str
    data: SessionPayload
    instance_positions: list[int]


class ResolutionResult(BaseModel):
    """Outcome of classifying a batch of instances.

    Both buckets keep batch order. `to_update` holds at most one entry per
    session id.
    """

    to_insert: list[SessionInsert] = Field(default_factory=list)
    to_update: list[SessionUpdate] = Field(default_factory=list)

    @property
    def instance_count(self) -> int:
        return len(self.to_insert) + sum(len(update.instance_positions) for update in self.to_update)

    @property
    def pending_resolution_count(self) -> int:
        payloads = [i.data for i in self.to_insert] + [u.data for u in self.to_update]
        return sum(1 for p in payloads if p.status == SessionStatus.PENDING_RESOLUTION)


class TimeSlotRecommendation(BaseModel):
    """A candidate start time offered as an alternative."""

    time: datetime
    label: str = Field(description="Clock-time label, e.g. '7:30 PM'")
    reason: str
    priority: SlotPriority


class ConflictInfo(BaseModel):
    """A detected conflict for a proposed time, with alternatives."""

    type: ConflictType
    message: str
    existing_session: Session
    proposed_client_id: str
    proposed_scheduled_at: datetime
    proposed_duration_minutes: int
    recommendations: list[TimeSlotRecommendation] = Field(default_factory=list)


class ParsedSchedule(BaseModel):
    """Structured result of parsing free scheduling text.

    Absence of a time or date is normal output, signalled by has_time and
    has_date rather than by an error.
    """

    original_input: str
    time: str | None = Field(default=None, description="24-hour HH:MM")
    dates: list[str] | None = None
    recurrence: Recurrence | None = None
    has_time: bool = False
    has_date: bool = False
