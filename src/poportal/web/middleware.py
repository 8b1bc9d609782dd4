"""Request gate: every protected request passes through the session authority first."""

from collections.abc import Awaitable, Callable

import structlog
from fastapi import Request, Response

from poportal.app import App
from poportal.core.modules.session.models import Session, SessionToken
from poportal.errors import SessionError, UnauthorizedError
from poportal.utils import token_fingerprint
from poportal.web.cookies import set_session_cookie
from poportal.web.error_handlers import ROBOTS_HEADER, create_challenge_response

logger = structlog.get_logger(__name__)

# Endpoints that run their own session checks (or none) and must not create sessions
PUBLIC_PATHS = frozenset(
    {
        "/health",
        "/api/session-check",
        "/api/extend-session",
        "/api/session-config",
        "/api/auth/logout",
    }
)


class SessionAuthorityMiddleware:
    """
    Per-request session gate (order matters):
    1) sweep expired sessions
    2) public paths pass straight through
    3) a valid session cookie is touched and re-issued
    4) otherwise Basic credentials open a new session
    5) otherwise 401 with a Basic challenge and the stale cookie cleared
    """

    def __init__(self, app: App) -> None:
        self.app = app

    async def __call__(self, request: Request, call_next: Callable[[Request], Awaitable[Response]]) -> Response:
        path = request.url.path
        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(method=request.method, path=path)

        await self.app.sweep_expired_sessions()

        if path in PUBLIC_PATHS:
            response = await call_next(request)
            response.headers["X-Robots-Tag"] = ROBOTS_HEADER
            return response

        config = self.app.config
        cookie_token = request.cookies.get(config.session_cookie_name)
        session: Session | None = None

        if cookie_token:
            try:
                session = await self.app.validate_session(SessionToken(cookie_token))
            except SessionError:
                logger.info("session_rejected")

        if session is None:
            try:
                session = await self.app.login(request.headers.get("authorization"))
            except UnauthorizedError as exc:
                response = create_challenge_response(config, str(exc), clear_cookie=bool(cookie_token))
                response.headers["X-Robots-Tag"] = ROBOTS_HEADER
                return response

        structlog.contextvars.bind_contextvars(session=token_fingerprint(session.token))
        request.state.session = session
        response = await call_next(request)
        set_session_cookie(response, config, session.token, self.app.cookie_max_age(session))
        response.headers["X-Robots-Tag"] = ROBOTS_HEADER
        return response
