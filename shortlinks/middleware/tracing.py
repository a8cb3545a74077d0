"""Custom tracing middleware for the short link service."""

import time

from fastapi import Request
from opentelemetry.trace import SpanKind
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response
from starlette.types import ASGIApp

from shortlinks.core.telemetry import get_meter, get_tracer

tracer = get_tracer("shortlinks.middleware")
meter = get_meter("shortlinks.middleware")

request_counter = meter.create_counter(
    name="shortlinks.http.requests",
    description="Number of HTTP requests",
    unit="1",
)

request_duration = meter.create_histogram(
    name="shortlinks.http.duration",
    description="Duration of HTTP requests",
    unit="ms",
)


class TracingMiddleware(BaseHTTPMiddleware):
    """Middleware that adds a span and request metrics for each request."""

    def __init__(self, app: ASGIApp) -> None:
        super().__init__(app)

    async def dispatch(self, request: Request, call_next) -> Response:
        start_time = time.perf_counter()
        path = request.url.path
        method = request.method

        attributes = {
            "http.method": method,
            "http.path": path,
            "http.user_agent": request.headers.get("user-agent", ""),
        }
        with tracer.start_as_current_span(
            f"{method} {path}",
            attributes=attributes,
            kind=SpanKind.SERVER,
        ):
            response = await call_next(request)

            # Keep metric cardinality bounded: the path is per short code
            metric_attributes = {
                "http.method": method,
                "http.status_code": response.status_code,
            }
            request_counter.add(1, metric_attributes)
            request_duration.record((time.perf_counter() - start_time) * 1000, metric_attributes)

            return response
