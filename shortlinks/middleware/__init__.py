"""HTTP middleware for request logging and tracing."""

from shortlinks.middleware.logging import LoggingMiddleware, add_logging_middleware
from shortlinks.middleware.tracing import TracingMiddleware

__all__ = ["LoggingMiddleware", "TracingMiddleware", "add_logging_middleware"]
