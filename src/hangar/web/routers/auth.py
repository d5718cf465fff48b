from fastapi import APIRouter, Response
from pydantic import BaseModel, Field

from hangar.core.modules.session.models import ApiSessionView
from hangar.utils import now
from hangar.web.deps import TOKEN_COOKIE, AppDep, AuthTokenDep
from hangar.web.openapi import ErrorResponse

router = APIRouter(tags=["auth"])


class AuthenticateRequest(BaseModel):
    """API session request."""

    api_key: str | None = Field(None, description="API key; omit to receive an anonymous public session")


class LoginRequest(BaseModel):
    """Authentication request."""

    username: str = Field(..., description="Username for authentication")
    password: str = Field(..., description="Password for authentication")


@router.post(
    "/authenticate",
    summary="Open API session",
    description=(
        "Exchange an API key for a session token. Without a key an anonymous public session is returned, "
        "which can only reach public endpoints."
    ),
    operation_id="authenticate",
    responses={
        200: {"description": "Session created"},
        401: {"model": ErrorResponse, "description": "Invalid API key"},
    },
)
async def authenticate(request: AuthenticateRequest, app: AppDep) -> ApiSessionView:
    return await app.authenticate(request.api_key)


@router.post(
    "/auth/login",
    summary="Authenticate user",
    description="Authenticate with username and password to receive a user session token.",
    operation_id="login",
    responses={
        200: {"description": "Successfully authenticated"},
        401: {"model": ErrorResponse, "description": "Invalid credentials"},
    },
)
async def login(login_data: LoginRequest, app: AppDep, response: Response) -> ApiSessionView:
    """Authenticate user and create session."""

    session = await app.login(login_data.username, login_data.password)

    # Set cookie for browser-based clients
    response.set_cookie(
        key=TOKEN_COOKIE,
        value=session.token,
        httponly=True,
        samesite="lax",
        secure=False,  # Set to True in production with HTTPS
        max_age=int((session.expires_at - now()).total_seconds()),
    )

    return session


@router.post(
    "/auth/logout",
    summary="End session",
    description="Invalidate the current session.",
    operation_id="logout",
    status_code=204,
    responses={
        204: {"description": "Successfully logged out"},
        401: {"model": ErrorResponse, "description": "Not authenticated"},
    },
)
async def logout(app: AppDep, auth_token: AuthTokenDep, response: Response) -> None:
    await app.logout(auth_token)
    response.delete_cookie(TOKEN_COOKIE)


@router.get(
    "/auth/session",
    summary="Describe current session",
    description="Get type, attribution and expiry of the session behind the presented token.",
    operation_id="getCurrentSession",
    responses={
        200: {"description": "Current session"},
        401: {"model": ErrorResponse, "description": "Not authenticated"},
    },
)
async def get_session(app: AppDep, auth_token: AuthTokenDep) -> ApiSessionView:
    return await app.get_current_session(auth_token)
