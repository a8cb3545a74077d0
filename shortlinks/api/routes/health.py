"""Health check endpoint for monitoring application status."""

import time
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, status

from shortlinks.api.schemas import HealthResponse
from shortlinks.api.dependencies import get_registry
from shortlinks.core.config import settings
from shortlinks.services.registry import Registry

router = APIRouter(tags=["health"])

_started = time.monotonic()


@router.get(
    "/health",
    response_model=HealthResponse,
    status_code=status.HTTP_200_OK,
    summary="Get service health status"
)
async def health_check(registry: Registry = Depends(get_registry)):
    return HealthResponse(
        status="OK",
        timestamp=datetime.now(timezone.utc),
        uptime=round(time.monotonic() - _started, 3),
        version=settings.APP_VERSION,
        environment=settings.ENVIRONMENT.value,
        entries=len(registry),
    )
