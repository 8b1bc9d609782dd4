from typing import Annotated, cast

from fastapi import Depends, Request

from poportal.app import App
from poportal.core.modules.session.models import Session, SessionToken
from poportal.errors import SessionNotFoundError, UnauthorizedError


async def get_app(request: Request) -> App:
    return cast(App, request.app.state.app)


async def get_session_token(request: Request, app: Annotated[App, Depends(get_app)]) -> SessionToken:
    """Read the session token from the session cookie."""
    token = request.cookies.get(app.config.session_cookie_name)
    if not token:
        raise SessionNotFoundError
    return SessionToken(token)


async def get_current_session(request: Request) -> Session:
    """Session resolved by the request gate for protected endpoints."""
    session = getattr(request.state, "session", None)
    if session is None:
        raise UnauthorizedError
    return cast(Session, session)


# Type aliases for dependencies
AppDep = Annotated[App, Depends(get_app)]
SessionTokenDep = Annotated[SessionToken, Depends(get_session_token)]
CurrentSessionDep = Annotated[Session, Depends(get_current_session)]
