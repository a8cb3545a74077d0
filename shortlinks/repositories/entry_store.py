"""Entry store for the short link registry.

This module provides the EntryStore class, the authoritative in-memory
mapping from short code to Entry.
"""

import threading
from typing import Dict, List

from shortlinks.models.entry import Entry
from shortlinks.repositories.base import DuplicateEntityError, EntityNotFoundError, normalize_code


class EntryStore:
    """
    Thread-safe mapping of normalized short code to Entry.

    All reads and writes go through a single lock, so `insert` is atomic with
    respect to `exists`, `get` and other inserts. Iteration order is insertion
    order. Entries are never evicted: expired entries are kept for reporting
    and the store grows for the lifetime of the process.
    """

    def __init__(self):
        self._entries: Dict[str, Entry] = {}
        self._lock = threading.Lock()

    def insert(self, entry: Entry) -> Entry:
        """
        Insert a new entry under its code.

        Raises:
            DuplicateEntityError: If the code is already present
        """
        code = normalize_code(entry.code)
        with self._lock:
            if code in self._entries:
                raise DuplicateEntityError("Entry", "code", code)
            self._entries[code] = entry
        return entry

    def get(self, code: str) -> Entry:
        """
        Look up an entry by code, ignoring case.

        Raises:
            EntityNotFoundError: If no entry has this code
        """
        code = normalize_code(code)
        with self._lock:
            entry = self._entries.get(code)
        if entry is None:
            raise EntityNotFoundError("Entry", code)
        return entry

    def exists(self, code: str) -> bool:
        code = normalize_code(code)
        with self._lock:
            return code in self._entries

    def all_entries(self) -> List[Entry]:
        """Snapshot of every entry in creation order."""
        with self._lock:
            return list(self._entries.values())

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
