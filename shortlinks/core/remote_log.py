"""
Fire-and-forget client for the remote log collector.

Every event is mirrored to the local Loguru logger. When a collector token is
configured the event is also POSTed to the collector from a background task.
Callers never wait on the network and never see a collector failure.
"""

import asyncio
from enum import Enum
from functools import lru_cache
from typing import Optional, Set

import aiohttp
from loguru import logger

from shortlinks.core.config import settings


class LogLevel(str, Enum):
    """Severity levels accepted by the collector."""
    INFO = "info"
    WARN = "warn"
    ERROR = "error"


_LOCAL_LEVELS = {
    LogLevel.INFO: "INFO",
    LogLevel.WARN: "WARNING",
    LogLevel.ERROR: "ERROR",
}


class LogEmitter:
    """
    Asynchronous, best-effort log emitter.

    Sends are scheduled on the running event loop and tracked until they
    finish so they are not garbage collected mid-flight. Outside an event
    loop only the local record is written.
    """

    def __init__(
        self,
        url: str,
        token: Optional[str] = None,
        timeout: float = 3.0,
        enabled: bool = True,
    ):
        self.url = url
        self.token = token
        self.timeout = timeout
        self.enabled = enabled and token is not None
        self._pending: Set[asyncio.Task] = set()
        self._session: Optional[aiohttp.ClientSession] = None

    def emit(self, stack: str, level: LogLevel, package: str, message: str) -> None:
        """Record an event locally and schedule the remote send."""
        level = LogLevel(level)
        logger.bind(stack=stack, package=package).log(
            _LOCAL_LEVELS[level], f"[{stack}/{package}] {message}"
        )

        if not self.enabled:
            return

        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.debug("No running event loop, remote log skipped")
            return

        task = loop.create_task(self.send(stack, level, package, message))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def send(self, stack: str, level: LogLevel, package: str, message: str) -> bool:
        """
        POST a single event to the collector.

        Returns:
            bool: True if the collector accepted the event, False otherwise
        """
        payload = {
            "stack": stack,
            "level": LogLevel(level).value,
            "package": package,
            "message": message,
        }
        try:
            await self._post(payload)
            return True
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            logger.warning(f"Remote log failed: {e!r}")
        except Exception as e:
            logger.opt(exception=e).warning(f"Unexpected remote log failure: {e!r}")
        return False

    async def _post(self, payload: dict) -> None:
        headers = {
            "Authorization": f"Bearer {self.token}",
            "Content-Type": "application/json",
        }
        session = self._get_session()
        async with session.post(self.url, json=payload, headers=headers) as response:
            response.raise_for_status()

    def _get_session(self) -> aiohttp.ClientSession:
        """Return the shared session, opening a new one after close."""
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(
                timeout=aiohttp.ClientTimeout(total=self.timeout)
            )
        return self._session

    @property
    def pending(self) -> int:
        return len(self._pending)

    async def drain(self) -> None:
        """Wait for every scheduled send to finish, then close the session."""
        if self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)
        await self.close()

    async def close(self) -> None:
        if self._session is not None and not self._session.closed:
            await self._session.close()
        self._session = None


@lru_cache
def get_log_emitter() -> LogEmitter:
    """Return the process-wide emitter built from settings."""
    return LogEmitter(
        url=settings.REMOTE_LOG_URL,
        token=settings.REMOTE_LOG_TOKEN,
        timeout=settings.REMOTE_LOG_TIMEOUT,
        enabled=settings.REMOTE_LOG_ENABLED,
    )
