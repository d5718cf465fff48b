from collections.abc import AsyncGenerator, Awaitable, Callable
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware

from hangar.app import App
from hangar.config import Config
from hangar.errors import UserError
from hangar.logging import clear_request_context
from hangar.web.error_handlers import general_exception_handler, user_error_handler
from hangar.web.openapi import set_custom_openapi
from hangar.web.routers import auth_router, keys_router, profile_router

API_PREFIX = "/api/v1"


def create_fastapi_app(app_instance: App, config: Config) -> FastAPI:
    """Build the HTTP API around an App facade."""

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
        app.state.app = app_instance
        app.state.config = config
        async with app_instance.lifespan():
            yield

    app = FastAPI(title="Hangar API", lifespan=lifespan)

    @app.middleware("http")
    async def reset_session_context(request: Request, call_next: Callable[[Request], Awaitable[Response]]) -> Response:
        # Session context is bound per request once the token resolves; never leak it to the next one
        clear_request_context()
        try:
            return await call_next(request)
        finally:
            clear_request_context()

    if config.cors_origins:
        # Credentials are allowed because browser clients authenticate with the token cookie
        app.add_middleware(
            CORSMiddleware,
            allow_origins=config.cors_origins,
            allow_credentials=True,
            allow_methods=["GET", "POST", "DELETE"],
            allow_headers=["Authorization", "Content-Type"],
        )

    @app.get("/health")
    async def health_check() -> dict[str, str]:
        return {"status": "healthy"}

    for router in (auth_router, profile_router, keys_router):
        app.include_router(router, prefix=API_PREFIX)

    app.add_exception_handler(UserError, user_error_handler)
    app.add_exception_handler(Exception, general_exception_handler)

    set_custom_openapi(app)

    return app
