"""Session management models."""

from datetime import datetime, timedelta
from enum import StrEnum
from typing import NewType

from pydantic import BaseModel, Field

SessionToken = NewType("SessionToken", str)


class SessionState(StrEnum):
    """Lifecycle position of a stored session at a given moment."""

    CREATED = "created"  # Authenticated, not touched since
    ACTIVE = "active"
    EXPIRED_BY_INACTIVITY = "expired_by_inactivity"
    EXPIRED_BY_MAX_DURATION = "expired_by_max_duration"

    @property
    def is_expired(self) -> bool:
        return self in (SessionState.EXPIRED_BY_INACTIVITY, SessionState.EXPIRED_BY_MAX_DURATION)


class SessionPolicy(BaseModel):
    """Timeout policy applied to every session."""

    inactivity_timeout: timedelta
    max_duration: timedelta


class Session(BaseModel):
    """Authenticated session bound to the shared principal."""

    token: SessionToken
    principal: str
    created_at: datetime
    last_activity_at: datetime

    def state_at(self, at: datetime, policy: SessionPolicy) -> SessionState:
        """Classify the session at `at`. Max duration dominates inactivity."""
        if at - self.created_at > policy.max_duration:
            return SessionState.EXPIRED_BY_MAX_DURATION
        if at - self.last_activity_at > policy.inactivity_timeout:
            return SessionState.EXPIRED_BY_INACTIVITY
        if self.last_activity_at == self.created_at:
            return SessionState.CREATED
        return SessionState.ACTIVE

    def is_valid_at(self, at: datetime, policy: SessionPolicy) -> bool:
        return not self.state_at(at, policy).is_expired

    def expires_at(self, policy: SessionPolicy) -> datetime:
        """Earliest moment after which the session stops being valid."""
        return min(self.last_activity_at + policy.inactivity_timeout, self.created_at + policy.max_duration)

    def remaining(self, at: datetime, policy: SessionPolicy) -> timedelta:
        return max(self.expires_at(policy) - at, timedelta(0))

    def touched(self, at: datetime) -> "Session":
        """Copy with refreshed activity. Activity never moves backwards."""
        return self.model_copy(update={"last_activity_at": max(at, self.last_activity_at)})


class SessionView(BaseModel):
    """Session information (API representation). Never exposes the token."""

    principal: str = Field(..., description="Authenticated username")
    created_at: datetime = Field(..., description="When the session was created")
    last_activity_at: datetime = Field(..., description="Last request that touched the session")
    expires_at: datetime = Field(..., description="When the session expires without further activity")

    @classmethod
    def from_domain(cls, session: Session, policy: SessionPolicy) -> "SessionView":
        """Create view model from domain model."""
        return cls(
            principal=session.principal,
            created_at=session.created_at,
            last_activity_at=session.last_activity_at,
            expires_at=session.expires_at(policy),
        )
