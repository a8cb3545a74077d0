"""
Non-blocking request logging middleware.

Each request gets an id, is timed, and produces one REQUEST-level Loguru
record plus a fire-and-forget event for the remote log collector.
"""

import time
import uuid
from contextvars import ContextVar

from fastapi import Request, Response
from loguru import logger
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

from shortlinks.api.dependencies import client_identifier
from shortlinks.core.config import settings
from shortlinks.core.remote_log import LogEmitter, LogLevel, get_log_emitter

# Context variable to store request ID across async context
request_id_var: ContextVar[str] = ContextVar("request_id", default="")


class LoggingMiddleware(BaseHTTPMiddleware):
    """Request logging that never delays the response."""

    def __init__(self, app: ASGIApp, log_emitter: LogEmitter = None):
        super().__init__(app)
        self.log_emitter = log_emitter or get_log_emitter()

    async def dispatch(self, request: Request, call_next) -> Response:
        request_id = str(uuid.uuid4())
        request_id_var.set(request_id)

        start_time = time.perf_counter()
        response = await call_next(request)
        process_time_ms = round((time.perf_counter() - start_time) * 1000, 2)

        response.headers["X-Request-ID"] = request_id

        logger.log(
            "REQUEST",
            "{method} {path} {status_code} {process_time_ms}ms {client_ip} {request_id}",
            method=request.method,
            path=request.url.path,
            status_code=response.status_code,
            process_time_ms=process_time_ms,
            client_ip=client_identifier(request) or "unknown",
            request_id=request_id,
        )

        try:
            self.log_emitter.emit(
                settings.REMOTE_LOG_STACK,
                LogLevel.INFO,
                "middleware",
                f"{request.method} {request.url.path} {response.status_code}",
            )
        except Exception as e:
            logger.warning(f"Request log emit failed: {e!r}")

        return response


def add_logging_middleware(app) -> None:
    """Add the request logging middleware when enabled in settings."""
    if settings.REQUEST_LOGGING_ENABLED:
        app.add_middleware(LoggingMiddleware)
