"""Tests for the remote log emitter."""

import asyncio
from unittest.mock import AsyncMock, MagicMock, patch

import aiohttp
import pytest

from shortlinks.core.config import settings
from shortlinks.core.remote_log import LogEmitter, LogLevel, get_log_emitter


@pytest.fixture
def emitter():
    return LogEmitter(url="http://collector.invalid/logs", token="secret", timeout=0.5)


class TestLogEmitter:

    def test_disabled_without_token(self):
        emitter = LogEmitter(url="http://collector.invalid/logs", token=None)

        assert emitter.enabled is False

    def test_disabled_by_flag(self):
        emitter = LogEmitter(url="http://collector.invalid/logs", token="secret", enabled=False)

        assert emitter.enabled is False

    def test_rejects_unknown_level(self, emitter):
        with pytest.raises(ValueError):
            emitter.emit("backend", "debug", "service", "nope")

    def test_outside_event_loop_skips_remote(self, emitter):
        with patch.object(emitter, "_post", new_callable=AsyncMock) as post:
            emitter.emit("backend", LogLevel.INFO, "service", "no loop here")

        post.assert_not_called()
        assert emitter.pending == 0

    @pytest.mark.asyncio
    async def test_emit_schedules_send(self, emitter):
        with patch.object(emitter, "_post", new_callable=AsyncMock) as post:
            emitter.emit("backend", LogLevel.WARN, "service", "hello")
            assert emitter.pending == 1

            await emitter.drain()

        post.assert_awaited_once_with({
            "stack": "backend",
            "level": "warn",
            "package": "service",
            "message": "hello",
        })
        assert emitter.pending == 0

    @pytest.mark.asyncio
    async def test_emit_does_not_wait_for_send(self, emitter):
        release = asyncio.Event()

        async def slow_post(payload):
            await release.wait()

        with patch.object(emitter, "_post", side_effect=slow_post):
            emitter.emit("backend", LogLevel.INFO, "service", "slow")
            assert emitter.pending == 1
            release.set()
            await emitter.drain()

    @pytest.mark.asyncio
    @pytest.mark.parametrize("error", [
        aiohttp.ClientConnectionError("refused"),
        asyncio.TimeoutError(),
        RuntimeError("boom"),
    ])
    async def test_send_failures_are_swallowed(self, emitter, error):
        with patch.object(emitter, "_post", new_callable=AsyncMock, side_effect=error):
            assert await emitter.send("backend", LogLevel.ERROR, "service", "x") is False

            emitter.emit("backend", LogLevel.ERROR, "service", "x")
            await emitter.drain()

    @pytest.mark.asyncio
    async def test_send_success(self, emitter):
        with patch.object(emitter, "_post", new_callable=AsyncMock):
            assert await emitter.send("backend", "info", "service", "ok") is True

    @pytest.mark.asyncio
    async def test_posts_share_one_session(self, emitter):
        session = MagicMock(closed=False)
        session.post.return_value.__aenter__.return_value = MagicMock()
        session.close = AsyncMock()
        emitter._session = session

        assert await emitter.send("backend", LogLevel.INFO, "controller", "one") is True
        assert await emitter.send("backend", LogLevel.INFO, "controller", "two") is True

        assert session.post.call_count == 2
        _, kwargs = session.post.call_args
        assert kwargs["headers"]["Authorization"] == "Bearer secret"

        await emitter.drain()

        session.close.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_session_reopened_after_drain(self, emitter):
        first = emitter._get_session()
        assert emitter._get_session() is first

        await emitter.drain()

        assert first.closed
        second = emitter._get_session()
        assert second is not first
        await emitter.close()


def test_emitter_from_settings_needs_token():
    with patch.object(settings, "REMOTE_LOG_ENABLED", True), \
            patch.object(settings, "REMOTE_LOG_TOKEN", None):
        assert get_log_emitter.__wrapped__().enabled is False

    with patch.object(settings, "REMOTE_LOG_ENABLED", True), \
            patch.object(settings, "REMOTE_LOG_TOKEN", "secret"):
        assert get_log_emitter.__wrapped__().enabled is True
