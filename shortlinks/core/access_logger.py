"""Redirect access logging using Loguru's built-in async features."""

import os

from loguru import logger

from shortlinks.core.config import settings

url_access_logger = None
_sink_ids = []


def _is_access_record(record) -> bool:
    return record["extra"].get("event_type") == "url_access"


def setup_url_logging():
    """Configure the URL access logger with enqueued (non-blocking) sinks."""
    global url_access_logger

    url_access_logger = logger.bind(event_type="url_access")

    if settings.LOG_TO_FILE and not _sink_ids:
        os.makedirs(settings.LOG_DIR, exist_ok=True)
        _sink_ids.append(logger.add(
            os.path.join(settings.LOG_DIR, "url_access.log"),
            format=(
                "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level} | Client:{extra[client]} "
                "| Code:{extra[short_code]} | {message}"
            ),
            rotation=settings.LOG_ROTATION,
            retention=settings.LOG_RETENTION,
            enqueue=True,
            level="INFO",
            backtrace=False,
            diagnose=False,
            filter=_is_access_record,
        ))
        _sink_ids.append(logger.add(
            os.path.join(settings.LOG_DIR, "url_access.json"),
            serialize=True,
            enqueue=True,
            level="INFO",
            filter=_is_access_record,
        ))

    return url_access_logger


def shutdown_url_logging() -> None:
    """Remove the access sinks, flushing anything still enqueued."""
    while _sink_ids:
        logger.remove(_sink_ids.pop())


def log_url_access(short_code: str, client: str, user_agent: str, referer: str) -> None:
    """
    Log a successful redirect using Loguru's non-blocking logging.

    Args:
        short_code: The short code that was resolved
        client: The client identifier (usually the remote address)
        user_agent: User agent string as recorded in the access event
        referer: Referer as recorded in the access event
    """
    if url_access_logger is None:
        setup_url_logging()

    url_access_logger.bind(
        client=client,
        short_code=short_code,
        user_agent=user_agent,
        referer=referer,
    ).info(f"URL accessed: {short_code}")
