"""Session cookie issuance and removal."""

from fastapi import Response

from poportal.config import Config
from poportal.core.modules.session.models import SessionToken


def set_session_cookie(response: Response, config: Config, token: SessionToken, max_age: int) -> None:
    """Attach the session token as a script-inaccessible, same-site-only cookie."""
    response.set_cookie(
        key=config.session_cookie_name,
        value=token,
        max_age=max_age,
        path="/",
        httponly=True,
        samesite="strict",
        secure=config.secure_cookies,
    )


def clear_session_cookie(response: Response, config: Config) -> None:
    response.delete_cookie(
        key=config.session_cookie_name,
        path="/",
        httponly=True,
        samesite="strict",
        secure=config.secure_cookies,
    )
