"""Test fixtures for the short link registry."""

import os

# Settings are read at import time, so the environment must be set first
os.environ.setdefault("ENVIRONMENT", "testing")
os.environ.setdefault("LOG_TO_FILE", "false")
os.environ.setdefault("REMOTE_LOG_ENABLED", "false")
os.environ.setdefault("REQUEST_LOGGING_ENABLED", "true")

from datetime import datetime, timedelta, timezone
from typing import Generator, List, Tuple

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from shortlinks.api.dependencies import get_registry
from shortlinks.main import app as main_app
from shortlinks.services.registry import Registry


class FakeClock:
    """Manually advanced clock returning aware UTC datetimes."""

    def __init__(self, start: datetime = None):
        self.now = start or datetime(2026, 1, 1, 12, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> datetime:
        self.now += timedelta(**kwargs)
        return self.now


class RecordingEmitter:
    """Log emitter double that keeps every emitted event."""

    def __init__(self):
        self.events: List[Tuple[str, str, str, str]] = []

    def emit(self, stack, level, package, message) -> None:
        self.events.append((stack, getattr(level, "value", level), package, message))

    def messages(self, level: str = None) -> List[str]:
        return [event[3] for event in self.events if level is None or event[1] == level]


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def emitter() -> RecordingEmitter:
    return RecordingEmitter()


@pytest.fixture
def registry(emitter, clock) -> Registry:
    """Fresh registry with a controllable clock."""
    return Registry(log_emitter=emitter, clock=clock)


@pytest.fixture
def test_app(registry) -> Generator[FastAPI, None, None]:
    """FastAPI app with the registry dependency overridden."""
    main_app.dependency_overrides[get_registry] = lambda: registry
    yield main_app
    main_app.dependency_overrides.clear()


@pytest.fixture
def client(test_app) -> Generator[TestClient, None, None]:
    """Return FastAPI TestClient instance."""
    with TestClient(test_app) as test_client:
        yield test_client
