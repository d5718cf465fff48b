from fastapi import APIRouter
from pydantic import BaseModel, Field

from hangar.core.modules.session.models import SessionSummaryView
from hangar.core.modules.user.models import ProfileView
from hangar.web.deps import AppDep, AuthTokenDep
from hangar.web.openapi import ErrorResponse

router = APIRouter(prefix="/profile", tags=["profile"])

NOT_A_LOGIN = {"model": ErrorResponse, "description": "Key or public session"}


class ChangePasswordRequest(BaseModel):
    old_password: str = Field(..., min_length=1, description="Current password")
    new_password: str = Field(..., min_length=8, description="New password, at least 8 characters")


class EndedSessionsResponse(BaseModel):
    ended: int = Field(..., description="Number of sessions that were ended")


@router.get(
    "",
    summary="Get current account",
    description="Account the session acts for. Key sessions resolve to the key's owner.",
    operation_id="getProfile",
    responses={
        200: {"description": "Account profile"},
        401: {"model": ErrorResponse, "description": "Missing, expired or public session"},
    },
)
async def get_profile(app: AppDep, auth_token: AuthTokenDep) -> ProfileView:
    return await app.get_current_user(auth_token)


@router.post(
    "/change-password",
    summary="Change password",
    description="Change the password of the logged-in account. Every other session of the account is ended.",
    operation_id="changePassword",
    status_code=204,
    responses={
        204: {"description": "Password changed, other sessions ended"},
        400: {"model": ErrorResponse, "description": "Wrong current password or weak new password"},
        401: {"model": ErrorResponse, "description": "Missing or expired session"},
        403: NOT_A_LOGIN,
    },
)
async def change_password(request: ChangePasswordRequest, app: AppDep, auth_token: AuthTokenDep) -> None:
    await app.change_password(auth_token, request.old_password, request.new_password)


@router.get(
    "/sessions",
    summary="List active sessions",
    description="Login and API key sessions of the account that have not expired. Tokens are never listed.",
    operation_id="listSessions",
    responses={
        200: {"description": "Active sessions, newest first"},
        401: {"model": ErrorResponse, "description": "Missing or expired session"},
        403: NOT_A_LOGIN,
    },
)
async def list_sessions(app: AppDep, auth_token: AuthTokenDep) -> list[SessionSummaryView]:
    return await app.list_sessions(auth_token)


@router.delete(
    "/sessions",
    summary="End other sessions",
    description="End every session of the account except the one making this request, key sessions included.",
    operation_id="endOtherSessions",
    responses={
        200: {"description": "Sessions ended"},
        401: {"model": ErrorResponse, "description": "Missing or expired session"},
        403: NOT_A_LOGIN,
    },
)
async def end_other_sessions(app: AppDep, auth_token: AuthTokenDep) -> EndedSessionsResponse:
    return EndedSessionsResponse(ended=await app.end_other_sessions(auth_token))
