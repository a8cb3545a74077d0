"""Per-code access event log."""

import threading
from typing import Dict, List

from shortlinks.models.entry import AccessEvent
from shortlinks.repositories.base import normalize_code


class AccessLog:
    """
    Append-only, per-code sequences of AccessEvent.

    Reads return copies, so a snapshot handed to a caller is never changed by
    later appends. Sequences are not capped.
    """

    def __init__(self):
        self._events: Dict[str, List[AccessEvent]] = {}
        self._lock = threading.Lock()

    def open(self, code: str) -> None:
        """Start an empty sequence for `code` unless one already exists."""
        with self._lock:
            self._events.setdefault(normalize_code(code), [])

    def append(self, code: str, event: AccessEvent) -> None:
        with self._lock:
            self._events.setdefault(normalize_code(code), []).append(event)

    def count(self, code: str) -> int:
        with self._lock:
            return len(self._events.get(normalize_code(code), ()))

    def events(self, code: str) -> List[AccessEvent]:
        """Chronological snapshot of the events recorded for `code`."""
        with self._lock:
            return list(self._events.get(normalize_code(code), ()))
