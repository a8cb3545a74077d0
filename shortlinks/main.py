"""Main application module.

This module initializes the FastAPI application, creates the process-wide
registry, includes routes, and configures middleware and exception handlers.
"""

import time

from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from shortlinks.api import api_router
from shortlinks.core.access_logger import setup_url_logging, shutdown_url_logging
from shortlinks.core.config import settings
from shortlinks.core.logging import setup_logging
from shortlinks.core.remote_log import LogLevel, get_log_emitter
from shortlinks.core.telemetry import setup_telemetry
from shortlinks.middleware import TracingMiddleware, add_logging_middleware
from shortlinks.services.codes import CodeGenerator
from shortlinks.services.registry import Registry

logger = setup_logging()
setup_telemetry()


def build_registry() -> Registry:
    """Create the registry from settings."""
    return Registry(
        log_emitter=get_log_emitter(),
        code_generator=CodeGenerator(num_bytes=settings.URL_CODE_BYTES),
        default_validity_minutes=settings.DEFAULT_VALIDITY_MINUTES,
        max_generation_attempts=settings.CODE_GENERATION_MAX_ATTEMPTS,
        stack=settings.REMOTE_LOG_STACK,
    )


app = FastAPI(
    title=settings.APP_NAME,
    description=settings.APP_DESCRIPTION,
    version=settings.APP_VERSION,
    docs_url="/docs" if settings.DEBUG else None,
    redoc_url="/redoc" if settings.DEBUG else None,
)

app.state.registry = build_registry()

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_methods=["*"],
    allow_headers=["*"],
)
add_logging_middleware(app)
app.add_middleware(TracingMiddleware)

app.include_router(api_router)


@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.detail}
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Handle validation errors with detailed information."""
    logger.warning(f"Request validation error: {exc}")
    return JSONResponse(
        status_code=422,
        content={"detail": "Validation error", "errors": jsonable_errors(exc)}
    )


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Global exception handler to log and report all unhandled exceptions."""
    error_id = f"error-{time.time()}"
    logger.opt(exception=exc).error(
        f"Unhandled exception in {request.method} {request.url.path} ({error_id})"
    )
    get_log_emitter().emit(
        settings.REMOTE_LOG_STACK,
        LogLevel.ERROR,
        "handler",
        f"Unhandled error {error_id}: {exc}",
    )
    return JSONResponse(
        status_code=500,
        content={
            "detail": "Internal server error",
            "error_id": error_id,
            "message": str(exc) if settings.DEBUG else "Internal server error"
        }
    )


def jsonable_errors(exc: RequestValidationError):
    # ctx may hold the raw exception object, which is not JSON serializable
    return [
        {key: value for key, value in error.items() if key != "ctx"}
        for error in exc.errors()
    ]


@app.on_event("startup")
async def startup_event():
    """Run startup tasks."""
    logger.info(f"Starting {settings.APP_NAME} v{settings.APP_VERSION}")
    logger.info(f"Environment: {settings.ENVIRONMENT.value}")
    setup_url_logging()
    get_log_emitter().emit(
        settings.REMOTE_LOG_STACK,
        LogLevel.INFO,
        "service",
        f"URL Shortener Backend started on port {settings.PORT}",
    )


@app.on_event("shutdown")
async def shutdown_event():
    """Run cleanup tasks."""
    logger.info(f"Shutting down {settings.APP_NAME}")
    await get_log_emitter().drain()
    shutdown_url_logging()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("shortlinks.main:app", host="0.0.0.0", port=settings.PORT)
