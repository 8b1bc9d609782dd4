from fastapi import APIRouter, Response

from poportal.web.cookies import clear_session_cookie
from poportal.web.deps import AppDep, SessionTokenDep
from poportal.web.openapi import ErrorResponse

router = APIRouter(tags=["auth"])


@router.post(
    "/auth/logout",
    summary="End session",
    description="Invalidate the current session and clear the session cookie.",
    operation_id="logout",
    status_code=204,
    responses={
        204: {"description": "Successfully logged out"},
        401: {"model": ErrorResponse, "description": "No session cookie"},
    },
)
async def logout(app: AppDep, token: SessionTokenDep, response: Response) -> None:
    await app.logout(token)
    clear_session_cookie(response, app.config)
