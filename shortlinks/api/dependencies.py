"""API dependencies for FastAPI.

This module provides dependency injection functions for FastAPI endpoints
to reach the process-wide registry and request metadata.
"""

from fastapi import Request

from shortlinks.core.config import settings
from shortlinks.services.registry import Registry


def get_registry(request: Request) -> Registry:
    """Get the registry created at application start."""
    return request.app.state.registry


def get_base_url() -> str:
    """Get the base URL for short links."""
    return settings.BASE_URL


def client_identifier(request: Request) -> str:
    """First X-Forwarded-For hop, else the socket peer address."""
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        first = forwarded.split(",")[0].strip()
        if first:
            return first
    return request.client.host if request.client else ""
