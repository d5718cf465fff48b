from fastapi import APIRouter
from pydantic import BaseModel, Field

from hangar.core.modules.api_key.models import ApiKeyView, CreatedApiKeyView
from hangar.web.deps import AppDep, AuthTokenDep
from hangar.web.openapi import ErrorResponse

router = APIRouter(tags=["keys"])


class CreateApiKeyRequest(BaseModel):
    """Request to create an API key."""

    name: str = Field(..., min_length=1, description="Key name, unique per user")


@router.get(
    "/keys",
    summary="List API keys",
    description="List API keys of the current user. Secrets are never returned.",
    operation_id="listApiKeys",
    responses={
        200: {"description": "API keys of the current user"},
        401: {"model": ErrorResponse, "description": "Not authenticated"},
    },
)
async def list_api_keys(app: AppDep, auth_token: AuthTokenDep) -> list[ApiKeyView]:
    return await app.list_api_keys(auth_token)


@router.post(
    "/keys",
    summary="Create API key",
    description="Create an API key. The full key is only included in this response.",
    operation_id="createApiKey",
    status_code=201,
    responses={
        201: {"description": "API key created"},
        400: {"model": ErrorResponse, "description": "Invalid or duplicate name"},
        401: {"model": ErrorResponse, "description": "Not authenticated"},
        403: {"model": ErrorResponse, "description": "Not a login session"},
    },
)
async def create_api_key(request: CreateApiKeyRequest, app: AppDep, auth_token: AuthTokenDep) -> CreatedApiKeyView:
    return await app.create_api_key(auth_token, request.name)


@router.delete(
    "/keys/{name}",
    summary="Delete API key",
    description="Delete an API key and end every session opened with it.",
    operation_id="deleteApiKey",
    status_code=204,
    responses={
        204: {"description": "API key deleted"},
        401: {"model": ErrorResponse, "description": "Not authenticated"},
        403: {"model": ErrorResponse, "description": "Not a login session"},
        404: {"model": ErrorResponse, "description": "API key not found"},
    },
)
async def delete_api_key(name: str, app: AppDep, auth_token: AuthTokenDep) -> None:
    await app.delete_api_key(auth_token, name)
