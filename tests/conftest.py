"""Root conftest for all tests.

Shared fixtures: an existing-session factory, a recording fake session store
and an isolated in-memory SQLite session.
"""

import uuid
from datetime import datetime
from typing import Any

import pytest
from loguru import logger
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from coach_scheduler.calendar.types import Session, SessionStatus


class FakeSessionStore:
    """In-memory session store recording every call.

    Attributes:
        fail_update_ids: Session ids whose update raises
        fail_insert: Whether insert_sessions raises
    """

    def __init__(self, fail_update_ids: set[str] | None = None, fail_insert: bool = False) -> None:
        self.fail_update_ids = fail_update_ids or set()
        self.fail_insert = fail_insert
        self.calls: list[tuple[str, Any]] = []
        self.inserted: list[dict[str, Any]] = []
        self.updated: dict[str, dict[str, Any]] = {}

    def insert_sessions(self, rows: list[dict[str, Any]]) -> None:
        self.calls.append(("insert", len(rows)))
        if self.fail_insert:
            raise RuntimeError("insert rejected")
        self.inserted.extend(rows)

    def update_session(self, session_id: str, patch: dict[str, Any]) -> None:
        self.calls.append(("update", session_id))
        if session_id in self.fail_update_ids:
            raise RuntimeError(f"update rejected for {session_id}")
        self.updated[session_id] = patch


class FixedLinkFactory:
    """Deterministic meeting links: link-{coach}-{client}-{index}."""

    def __init__(self) -> None:
        self.calls: list[int] = []

    def generate_link(self, coach_id: str, client_id: str, occurrence_index: int) -> str:
        self.calls.append(occurrence_index)
        return f"link-{coach_id}-{client_id}-{occurrence_index}"


@pytest.fixture
def make_session():
    """Factory for existing sessions with sensible defaults."""

    def _make(
        client_id: str,
        scheduled_at: datetime,
        duration_minutes: int = 60,
        status: SessionStatus = SessionStatus.SCHEDULED,
        session_id: str | None = None,
        meeting_link: str | None = None,
        coach_id: str = "coach-1",
    ) -> Session:
        return Session(
            id=session_id or str(uuid.uuid4()),
            coach_id=coach_id,
            client_id=client_id,
            scheduled_at=scheduled_at,
            duration_minutes=duration_minutes,
            status=status,
            meeting_link=meeting_link or f"https://meet.example/{client_id}",
        )

    return _make


@pytest.fixture
def fake_store() -> FakeSessionStore:
    return FakeSessionStore()


@pytest.fixture
def store_factory():
    """FakeSessionStore class, for tests that configure failures."""
    return FakeSessionStore


@pytest.fixture
def link_factory() -> FixedLinkFactory:
    return FixedLinkFactory()


@pytest.fixture(scope="function")
def db_session():
    """Provides an isolated in-memory SQLite DB session for tests."""
    from coach_scheduler.db.models import Base

    engine = create_engine(
        "sqlite:///:memory:",
        echo=False,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    session = sessionmaker(bind=engine, autocommit=False, autoflush=False)()
    logger.debug("Created in-memory test database")
    try:
        yield session
    finally:
        session.close()
        engine.dispose()
