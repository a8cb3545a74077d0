"""Routes package initialization.

This module exports the route collection for the application.
"""

from fastapi import APIRouter

from shortlinks.api.routes import health, redirect, shortener

api_router = APIRouter()

api_router.include_router(shortener.router)
api_router.include_router(health.router)

# Redirect routes go last: /{short_code} would otherwise shadow /health
api_router.include_router(redirect.router)

__all__ = ["api_router"]
