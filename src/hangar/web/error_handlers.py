import structlog
from fastapi import Request
from fastapi.responses import JSONResponse, Response

from hangar.errors import AccessDeniedError, AuthenticationError, NotFoundError, UserError

logger = structlog.get_logger(__name__)

# Checked in order, so subclasses of AuthenticationError share its status
STATUS_CODES: list[tuple[type[UserError], int]] = [
    (AuthenticationError, 401),
    (AccessDeniedError, 403),
    (NotFoundError, 404),
]

# Tells clients which token scheme to retry with
WWW_AUTHENTICATE = 'Bearer realm="hangar", HangarAuth realm="hangar"'


def create_json_error_response(
    status_code: int, message: str, error_type: str | None = None, headers: dict[str, str] | None = None
) -> JSONResponse:
    """Create JSON error response with optional type for machine parsing."""
    content = {"message": message}
    if error_type:
        content["type"] = error_type
    return JSONResponse(status_code=status_code, content=content, headers=headers)


async def user_error_handler(_: Request, exc: Exception) -> Response:
    """Map UserError subclasses to a status code; the type comes from the error class."""
    status_code = next((code for error, code in STATUS_CODES if isinstance(exc, error)), 400)
    error_type = exc.error_type if isinstance(exc, UserError) else "bad_request"
    headers = {"WWW-Authenticate": WWW_AUTHENTICATE} if status_code == 401 else None
    if status_code in (401, 403):
        logger.info("session_rejected", error_type=error_type)
    return create_json_error_response(status_code, str(exc), error_type, headers)


async def general_exception_handler(_: Request, exc: Exception) -> Response:
    """Handle unexpected errors (500)."""
    logger.exception("unexpected_error", error=str(exc))
    return create_json_error_response(
        status_code=500, message="An unexpected error occurred.", error_type="internal_server_error"
    )
