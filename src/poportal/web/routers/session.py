from datetime import datetime
from typing import Literal

from fastapi import APIRouter, Response
from pydantic import BaseModel, Field

from poportal.core.modules.session.models import SessionView
from poportal.web.cookies import set_session_cookie
from poportal.web.deps import AppDep, CurrentSessionDep, SessionTokenDep
from poportal.web.openapi import ErrorResponse

router = APIRouter(tags=["session"])


class SessionStatusResponse(BaseModel):
    """Liveness check result."""

    status: Literal["valid"] = "valid"
    timestamp: datetime = Field(..., description="Server time of the check")
    expires_at: datetime = Field(..., description="When the session expires without further activity")


class SessionExtendedResponse(BaseModel):
    """Session extension result."""

    status: Literal["extended"] = "extended"
    message: str = "Session extended successfully"
    timestamp: datetime = Field(..., description="Server time of the extension")
    expires_at: datetime = Field(..., description="New expiry of the session")


class SessionSettingsResponse(BaseModel):
    """Timings a client-side session monitor needs, in seconds."""

    inactivity_timeout: int = Field(..., description="Allowed gap between requests")
    max_session_duration: int = Field(..., description="Absolute session lifetime")
    warning_time: int = Field(..., description="Lead time for the expiry warning")
    check_interval: int = Field(..., description="Liveness polling interval")


@router.get(
    "/session-check",
    summary="Check session liveness",
    description="Report whether the caller's session is valid. Does not count as activity, safe to poll.",
    operation_id="checkSession",
    responses={
        200: {"description": "Session is valid"},
        401: {"model": ErrorResponse, "description": "Session expired or invalid"},
    },
)
async def check_session(app: AppDep, token: SessionTokenDep) -> SessionStatusResponse:
    session = await app.check_session(token)
    return SessionStatusResponse(timestamp=app.now(), expires_at=session.expires_at(app.policy))


@router.post(
    "/extend-session",
    summary="Extend session",
    description="Record activity on the caller's session and refresh the session cookie.",
    operation_id="extendSession",
    responses={
        200: {"description": "Session extended"},
        401: {"model": ErrorResponse, "description": "Session expired or invalid"},
    },
)
async def extend_session(app: AppDep, token: SessionTokenDep, response: Response) -> SessionExtendedResponse:
    session = await app.extend_session(token)
    set_session_cookie(response, app.config, session.token, app.cookie_max_age(session))
    return SessionExtendedResponse(timestamp=app.now(), expires_at=session.expires_at(app.policy))


@router.get(
    "/session-config",
    summary="Get session timings",
    description="Timings used by clients to schedule liveness checks and expiry warnings.",
    operation_id="getSessionConfig",
    responses={200: {"description": "Session timings"}},
)
async def get_session_config(app: AppDep) -> SessionSettingsResponse:
    config = app.config
    return SessionSettingsResponse(
        inactivity_timeout=config.inactivity_timeout,
        max_session_duration=config.max_session_duration,
        warning_time=config.warning_time,
        check_interval=config.check_interval,
    )


@router.get(
    "/session",
    summary="Get current session",
    description="Describe the session attached to this request.",
    operation_id="getCurrentSession",
    responses={
        200: {"description": "Current session"},
        401: {"model": ErrorResponse, "description": "Not authenticated"},
    },
)
async def get_current_session(app: AppDep, session: CurrentSessionDep) -> SessionView:
    return app.get_session_view(session)
