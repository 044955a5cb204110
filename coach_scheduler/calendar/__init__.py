"""Coaching session conflict detection and slot recommendation."""

from coach_scheduler.calendar.conflicts import detect_conflict, pending_resolutions
from coach_scheduler.calendar.errors import InvalidInputError, ParseAmbiguityError, PersistenceError, SchedulingError
from coach_scheduler.calendar.parser import build_proposed_sessions, parse_scheduling_input, resolve_date_keyword
from coach_scheduler.calendar.recurrence import expand_batch, expand_recurrence
from coach_scheduler.calendar.resolution import resolve_sessions
from coach_scheduler.calendar.slots import find_available_slots
from coach_scheduler.calendar.time_utils import is_same_day, overlaps
from coach_scheduler.calendar.types import (
    ConcreteInstance,
    ConflictInfo,
    ConflictType,
    ParsedSchedule,
    ProposedSession,
    Recurrence,
    ResolutionResult,
    Session,
    SessionStatus,
    SlotPriority,
    TimeSlotRecommendation,
)
from coach_scheduler.calendar.write_service import CalendarWriteService, SessionStore, WriteResult

__all__ = [
    "CalendarWriteService",
    "ConcreteInstance",
    "ConflictInfo",
    "ConflictType",
    "InvalidInputError",
    "ParseAmbiguityError",
    "ParsedSchedule",
    "PersistenceError",
    "ProposedSession",
    "Recurrence",
    "ResolutionResult",
    "SchedulingError",
    "Session",
    "SessionStatus",
    "SessionStore",
    "SlotPriority",
    "TimeSlotRecommendation",
    "WriteResult",
    "build_proposed_sessions",
    "detect_conflict",
    "expand_batch",
    "expand_recurrence",
    "find_available_slots",
    "is_same_day",
    "overlaps",
    "parse_scheduling_input",
    "pending_resolutions",
    "resolve_date_keyword",
    "resolve_sessions",
]
