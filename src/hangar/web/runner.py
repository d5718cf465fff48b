"""Uvicorn runner that routes server logs through the structlog setup."""

import uvicorn

from hangar.app import App
from hangar.config import Config
from hangar.web.server import create_fastapi_app


def run_server(app: App, config: Config) -> None:
    """Serve the API; logging is already configured by ``setup_logging``."""
    uvicorn.run(
        create_fastapi_app(app, config),
        host=config.host,
        port=config.port,
        log_config=None,  # keep the stdlib root handler installed by setup_logging
        access_log=config.debug,
        proxy_headers=config.proxy_headers,
        forwarded_allow_ips="*" if config.proxy_headers else None,
    )
