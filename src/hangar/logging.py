"""Structured logging setup.

Every log line emitted while a request is being served carries the request's
session context (session id, kind and attribution) once the token has been
resolved; see ``bind_session_context``.
"""

import logging
from typing import TYPE_CHECKING

import structlog

if TYPE_CHECKING:
    from hangar.core.modules.session.models import SessionRecord

NOISY_LOGGERS = ("pymongo", "pymongo.topology", "pymongo.connection", "pymongo.command", "uvicorn.access")


def setup_logging(debug: bool) -> None:
    logging.basicConfig(level=logging.DEBUG if debug else logging.INFO, format="%(message)s")
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    renderer: structlog.types.Processor = (
        structlog.dev.ConsoleRenderer() if debug else structlog.processors.JSONRenderer()
    )
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.format_exc_info,
            renderer,
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def bind_session_context(record: "SessionRecord") -> None:
    """Attach the resolved session to all following log lines of this request.

    The token itself is never bound.
    """
    structlog.contextvars.bind_contextvars(
        session_id=record.id,
        session_kind=str(record.kind),
        user_id=record.user_id,
        key_id=record.key_id,
    )


def clear_request_context() -> None:
    structlog.contextvars.clear_contextvars()
