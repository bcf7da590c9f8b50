# barbershop/log.py

"""
Structured logging setup shared by the service layer and the scheduling core.
"""
import logging
import uuid

import structlog
from fastapi import Request


def setup_logging(level: str = "INFO", json_logs: bool = False):
    """Configure structlog on top of the standard library handlers."""

    processors = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    if json_logs:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer())

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(message)s",
    )


def get_logger(name: str = __name__):
    return structlog.get_logger(name)


async def request_context_middleware(request: Request, call_next):
    """Bind a short request id to every log line emitted while serving a request."""
    structlog.contextvars.clear_contextvars()
    structlog.contextvars.bind_contextvars(
        request_id=str(uuid.uuid4())[:8],
        method=request.method,
        path=request.url.path,
    )
    try:
        response = await call_next(request)
        if response.status_code >= 400:
            get_logger("barbershop.http").info(
                "request_complete", status_code=response.status_code
            )
        return response
    finally:
        structlog.contextvars.clear_contextvars()
