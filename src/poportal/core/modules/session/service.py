import math
import secrets
from datetime import timedelta

import structlog

from poportal.core.core import Service
from poportal.core.modules.session.models import Session, SessionPolicy, SessionToken
from poportal.errors import SessionExpiredError, SessionNotFoundError
from poportal.utils import token_fingerprint

logger = structlog.get_logger(__name__)

TOKEN_BYTES = 32


class SessionService(Service):
    """Sole writer of session records: issues, validates, touches and evicts them."""

    @property
    def policy(self) -> SessionPolicy:
        config = self.core.config
        return SessionPolicy(
            inactivity_timeout=timedelta(seconds=config.inactivity_timeout),
            max_duration=timedelta(seconds=config.max_session_duration),
        )

    async def authenticate(self, authorization_header: str | None) -> Session:
        """Check Basic credentials and open a new session for the principal."""
        principal = self.core.services.credential.authenticate_header(authorization_header)
        return await self.create_session(principal)

    async def create_session(self, principal: str) -> Session:
        created_at = self.core.clock()
        session = Session(
            token=SessionToken(secrets.token_urlsafe(TOKEN_BYTES)),
            principal=principal,
            created_at=created_at,
            last_activity_at=created_at,
        )
        await self.store.insert(session)
        logger.info("session_created", session=token_fingerprint(session.token), principal=principal)
        return session

    async def check(self, token: SessionToken) -> Session:
        """Return the live session without touching it. Expired records are evicted."""
        session = await self.store.get(token)
        if session is None:
            raise SessionNotFoundError
        state = session.state_at(self.core.clock(), self.policy)
        if state.is_expired:
            await self.store.delete(token)
            logger.info("session_expired", session=token_fingerprint(token), state=state.value)
            raise SessionExpiredError
        return session

    async def validate(self, token: SessionToken) -> Session:
        """Return the live session and refresh its activity timestamp."""
        return await self._touch(token)

    async def extend(self, token: SessionToken) -> Session:
        """Explicitly refresh a session without any other request."""
        session = await self._touch(token)
        logger.debug("session_extended", session=token_fingerprint(token))
        return session

    async def invalidate(self, token: SessionToken) -> bool:
        """Remove a session on logout. Returns False if it did not exist."""
        removed = await self.store.delete(token)
        if removed:
            logger.info("session_invalidated", session=token_fingerprint(token))
        return removed

    async def sweep_expired(self) -> int:
        """Evict every stored session that is no longer valid."""
        at = self.core.clock()
        policy = self.policy
        evicted = 0
        async for session in self.store.scan():
            if not session.is_valid_at(at, policy) and await self.store.delete(session.token):
                evicted += 1
                logger.debug("session_swept", session=token_fingerprint(session.token))
        if evicted:
            logger.info("expired_sessions_swept", count=evicted)
        return evicted

    def cookie_max_age(self, session: Session) -> int:
        """Cookie lifetime in seconds: whatever is left of the session's validity window."""
        return math.ceil(session.remaining(self.core.clock(), self.policy).total_seconds())

    async def _touch(self, token: SessionToken) -> Session:
        await self.check(token)
        touched = await self.store.touch(token, self.core.clock())
        if touched is None:
            # Logged out or swept while the check was in flight
            logger.info("session_gone_before_touch", session=token_fingerprint(token))
            raise SessionNotFoundError
        return touched
