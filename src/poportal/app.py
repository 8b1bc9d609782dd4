from collections.abc import AsyncGenerator, Callable
from contextlib import asynccontextmanager
from datetime import datetime

from poportal.config import Config
from poportal.core.core import Core
from poportal.core.modules.session.models import Session, SessionPolicy, SessionToken, SessionView
from poportal.core.modules.session.store import SessionStore
from poportal.utils import now


class App:
    """Facade for all session operations used by the web layer."""

    def __init__(self, config: Config, store: SessionStore | None = None, clock: Callable[[], datetime] = now) -> None:
        self._core = Core(config, store=store, clock=clock)

    @asynccontextmanager
    async def lifespan(self) -> AsyncGenerator[None]:
        """Application lifespan management - delegates to Core."""
        async with self._core.lifespan():
            yield

    @property
    def config(self) -> Config:
        return self._core.config

    @property
    def policy(self) -> SessionPolicy:
        return self._core.services.session.policy

    def now(self) -> datetime:
        return self._core.clock()

    async def login(self, authorization_header: str | None) -> Session:
        """Authenticate Basic credentials and create a session."""
        return await self._core.services.session.authenticate(authorization_header)

    async def validate_session(self, token: SessionToken) -> Session:
        """Validate a session token and record activity on it."""
        return await self._core.services.session.validate(token)

    async def check_session(self, token: SessionToken) -> Session:
        """Validate a session token without recording activity."""
        return await self._core.services.session.check(token)

    async def extend_session(self, token: SessionToken) -> Session:
        """Push the inactivity deadline of a live session forward."""
        return await self._core.services.session.extend(token)

    async def logout(self, token: SessionToken) -> None:
        """Invalidate the session, if it still exists."""
        await self._core.services.session.invalidate(token)

    async def sweep_expired_sessions(self) -> int:
        """Evict all expired sessions, returning how many were removed."""
        return await self._core.services.session.sweep_expired()

    def get_session_view(self, session: Session) -> SessionView:
        return SessionView.from_domain(session, self.policy)

    def cookie_max_age(self, session: Session) -> int:
        return self._core.services.session.cookie_max_age(session)
