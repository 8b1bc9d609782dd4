"""Tests for session validity rules."""

from datetime import UTC, datetime, timedelta

import pytest

from poportal.core.modules.session.models import Session, SessionPolicy, SessionState, SessionToken

CREATED = datetime(2025, 1, 6, 9, 0, tzinfo=UTC)


@pytest.fixture
def policy():
    return SessionPolicy(inactivity_timeout=timedelta(seconds=1800), max_duration=timedelta(seconds=28800))


@pytest.fixture
def session():
    return Session(token=SessionToken("tok"), principal="admin", created_at=CREATED, last_activity_at=CREATED)


def at(seconds: float) -> datetime:
    return CREATED + timedelta(seconds=seconds)


class TestStateAt:
    """Tests for Session.state_at."""

    def test_fresh_session_is_created(self, session, policy):
        assert session.state_at(at(0), policy) == SessionState.CREATED

    def test_touched_session_is_active(self, session, policy):
        assert session.touched(at(10)).state_at(at(20), policy) == SessionState.ACTIVE

    def test_inactivity_boundary_is_inclusive(self, session, policy):
        assert session.is_valid_at(at(1800), policy)
        assert session.state_at(at(1801), policy) == SessionState.EXPIRED_BY_INACTIVITY

    def test_max_duration_boundary_is_inclusive(self, session, policy):
        touched = session.touched(at(28000))
        assert touched.is_valid_at(at(28800), policy)
        assert touched.state_at(at(28801), policy) == SessionState.EXPIRED_BY_MAX_DURATION

    def test_max_duration_dominates_inactivity(self, session, policy):
        """A session past both limits reports the max-duration cause."""
        assert session.state_at(at(30000), policy) == SessionState.EXPIRED_BY_MAX_DURATION

    def test_expired_states_flagged(self):
        assert SessionState.EXPIRED_BY_INACTIVITY.is_expired
        assert SessionState.EXPIRED_BY_MAX_DURATION.is_expired
        assert not SessionState.ACTIVE.is_expired
        assert not SessionState.CREATED.is_expired


class TestExpiry:
    """Tests for expires_at and remaining."""

    def test_expires_at_follows_inactivity_early_on(self, session, policy):
        assert session.expires_at(policy) == at(1800)

    def test_expires_at_capped_by_max_duration(self, session, policy):
        touched = session.touched(at(28000))
        assert touched.expires_at(policy) == at(28800)

    def test_remaining_never_negative(self, session, policy):
        assert session.remaining(at(5000), policy) == timedelta(0)
        assert session.remaining(at(800), policy) == timedelta(seconds=1000)


class TestTouched:
    """Tests for Session.touched."""

    def test_touch_moves_activity_forward(self, session):
        touched = session.touched(at(100))
        assert touched.last_activity_at == at(100)
        assert touched.created_at == CREATED
        assert session.last_activity_at == CREATED  # original unchanged

    def test_touch_never_moves_activity_backwards(self, session):
        touched = session.touched(at(100)).touched(at(50))
        assert touched.last_activity_at == at(100)

    def test_touch_before_creation_keeps_invariant(self, session):
        touched = session.touched(at(-60))
        assert touched.last_activity_at >= touched.created_at
