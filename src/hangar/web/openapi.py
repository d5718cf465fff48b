from typing import Any

from fastapi import FastAPI
from fastapi.openapi.utils import get_openapi
from pydantic import BaseModel, Field

# Endpoints that hand out tokens and therefore cannot require one
PUBLIC_ENDPOINTS = {
    ("POST", "/api/v1/authenticate"),
    ("POST", "/api/v1/auth/login"),
    ("GET", "/health"),
}


def set_custom_openapi(app: FastAPI) -> None:
    def custom_openapi() -> dict[str, Any]:
        if app.openapi_schema:
            return app.openapi_schema

        openapi_schema = get_openapi(
            title="Hangar API",
            version="0.1.0",
            summary="Plugin hosting platform API: sessions, API keys and accounts",
            routes=app.routes,
        )

        openapi_schema.setdefault("components", {})["securitySchemes"] = {
            "SessionToken": {
                "type": "apiKey",
                "in": "header",
                "name": "Authorization",
                "description": "Session token as `Bearer <token>` or `HangarAuth <token>`",
            },
            "TokenCookie": {
                "type": "apiKey",
                "in": "cookie",
                "name": "token",
                "description": "Session token stored in cookie",
            },
        }

        # Apply security globally (will be overridden for public endpoints)
        openapi_schema["security"] = [
            {"SessionToken": []},
            {"TokenCookie": []},
        ]

        for path, path_item in openapi_schema["paths"].items():
            for method, operation in path_item.items():
                if (method.upper(), path) in PUBLIC_ENDPOINTS:
                    operation["security"] = []

        app.openapi_schema = openapi_schema
        return app.openapi_schema

    app.openapi = custom_openapi  # type: ignore[method-assign]


class ErrorResponse(BaseModel):
    """Standard error response format."""

    message: str = Field(..., description="Human-readable error message")
    type: str = Field(..., description="Machine-readable error type")

    model_config = {
        "json_schema_extra": {
            "examples": [
                {"message": "Invalid API key", "type": "authentication_error"},
                {"message": "API key 'ci' not found", "type": "not_found"},
                {"message": "This action requires a login session", "type": "access_denied"},
            ]
        }
    }
