import logging

from fastapi import Request
from fastapi.responses import JSONResponse, Response

from poportal.config import Config
from poportal.errors import NotFoundError, SessionError, UnauthorizedError, ValidationError
from poportal.web.cookies import clear_session_cookie

logger = logging.getLogger(__name__)

ROBOTS_HEADER = "noindex, nofollow, nosnippet, noarchive"


def create_json_error_response(status_code: int, message: str, error_type: str | None = None) -> JSONResponse:
    """Create JSON error response with optional type for machine parsing."""
    content = {"message": message}
    if error_type:
        content["type"] = error_type
    return JSONResponse(status_code=status_code, content=content)


def create_challenge_response(config: Config, message: str, clear_cookie: bool = False) -> JSONResponse:
    """401 carrying a Basic challenge so generic clients prompt for credentials."""
    response = create_json_error_response(status_code=401, message=message, error_type="authentication_error")
    response.headers["WWW-Authenticate"] = f'Basic realm="{config.auth_realm}"'
    if clear_cookie:
        clear_session_cookie(response, config)
    return response


def create_session_expired_response(config: Config, message: str) -> JSONResponse:
    """401 for a dead session; the stale cookie is always cleared."""
    response = create_json_error_response(status_code=401, message=message, error_type="session_expired")
    clear_session_cookie(response, config)
    return response


async def user_error_handler(request: Request, exc: Exception) -> Response:
    """Handle all UserError subclasses with appropriate status codes."""
    config: Config = request.app.state.config
    if isinstance(exc, UnauthorizedError):
        return create_challenge_response(config, str(exc))
    if isinstance(exc, SessionError):
        return create_session_expired_response(config, str(exc))

    if isinstance(exc, NotFoundError):
        status_code = 404
        error_type = "not_found"
    elif isinstance(exc, ValidationError):
        status_code = 400
        error_type = "validation_error"
    else:
        # Default for any other UserError subclass
        status_code = 400
        error_type = "bad_request"

    return create_json_error_response(status_code=status_code, message=str(exc), error_type=error_type)


async def general_exception_handler(_: Request, exc: Exception) -> Response:
    """Handle unexpected errors (500)."""
    logger.exception("Unexpected error: %s", exc)
    response = create_json_error_response(
        status_code=500, message="An unexpected error occurred.", error_type="internal_server_error"
    )
    response.headers["X-Robots-Tag"] = ROBOTS_HEADER
    return response
