"""Tests for recurrence expansion."""

from datetime import UTC, datetime

import pytest

from coach_scheduler.calendar.errors import InvalidInputError
from coach_scheduler.calendar.recurrence import expand_batch, expand_recurrence
from coach_scheduler.calendar.types import ProposedSession, Recurrence


def _proposal(recurrence: str = "once", **kwargs) -> ProposedSession:
    data = {
        "scheduled_at": datetime(2024, 6, 3, 14, 0),
        "duration_minutes": 60,
        "session_type": "training",
        "notes": "Upper body",
        "recurrence": recurrence,
    }
    data.update(kwargs)
    return ProposedSession(**data)


class TestExpandRecurrence:
    """Tests for expanding one proposal into instances."""

    def test_once_yields_single_instance(self):
        """A one-off proposal yields exactly itself."""
        instances = expand_recurrence(_proposal("once"))
        assert len(instances) == 1
        assert instances[0].scheduled_at == datetime(2024, 6, 3, 14, 0)
        assert instances[0].occurrence_index == 0

    def test_weekly_yields_four_instances_a_week_apart(self):
        """Weekly proposals expand to D, D+7d, D+14d, D+21d."""
        instances = expand_recurrence(_proposal("weekly"))
        assert [i.scheduled_at for i in instances] == [
            datetime(2024, 6, 3, 14, 0),
            datetime(2024, 6, 10, 14, 0),
            datetime(2024, 6, 17, 14, 0),
            datetime(2024, 6, 24, 14, 0),
        ]
        assert [i.occurrence_index for i in instances] == [0, 1, 2, 3]

    def test_weekly_preserves_session_fields(self):
        """Every weekly instance carries the proposal's fields."""
        for instance in expand_recurrence(_proposal("weekly")):
            assert instance.duration_minutes == 60
            assert instance.session_type == "training"
            assert instance.notes == "Upper body"

    def test_weekly_occurrences_override(self):
        """The weekly count can be overridden per call."""
        assert len(expand_recurrence(_proposal("weekly"), weekly_occurrences=2)) == 2

    def test_non_positive_duration_rejected(self):
        """Unvalidated proposals are still checked at expansion."""
        proposal = ProposedSession.model_construct(
            scheduled_at=datetime(2024, 6, 3, 14, 0),
            duration_minutes=0,
            session_type="training",
            notes=None,
            recurrence=Recurrence.ONCE,
        )
        with pytest.raises(InvalidInputError, match="duration_minutes"):
            expand_recurrence(proposal)


class TestProposedSessionValidation:
    """Tests for proposal validation at construction."""

    def test_missing_recurrence_defaults_to_once(self):
        """A missing recurrence means once."""
        assert _proposal(None).recurrence == Recurrence.ONCE

    def test_malformed_recurrence_rejected(self):
        """Unknown recurrence values raise InvalidInputError."""
        with pytest.raises(InvalidInputError, match="recurrence"):
            _proposal("monthly")

    def test_zero_duration_rejected(self):
        """Zero-minute proposals are rejected."""
        with pytest.raises(InvalidInputError, match="duration_minutes"):
            _proposal(duration_minutes=0)

    def test_aware_timestamp_rejected(self):
        """Aware proposal times are rejected."""
        with pytest.raises(InvalidInputError, match="scheduled_at"):
            _proposal(scheduled_at=datetime(2024, 6, 3, 14, 0, tzinfo=UTC))


class TestExpandBatch:
    """Tests for expanding a batch of proposals."""

    def test_positions_are_continuous_across_proposals(self):
        """Batch positions run on across proposals; occurrence indexes restart."""
        instances = expand_batch([_proposal("weekly"), _proposal("once", scheduled_at=datetime(2024, 6, 5, 9, 0))])
        assert [i.position for i in instances] == [0, 1, 2, 3, 4]
        assert instances[-1].occurrence_index == 0
        assert instances[-1].scheduled_at == datetime(2024, 6, 5, 9, 0)

    def test_empty_batch(self):
        """An empty batch expands to nothing."""
        assert expand_batch([]) == []
