"""Repository layer for the short link registry.

This module provides the in-memory stores behind the registry together
with the errors they raise.
"""

from shortlinks.repositories.access_log import AccessLog
from shortlinks.repositories.base import (
    DuplicateEntityError,
    EntityNotFoundError,
    RepositoryError,
    normalize_code,
)
from shortlinks.repositories.entry_store import EntryStore

__all__ = [
    # Errors and helpers
    "RepositoryError",
    "EntityNotFoundError",
    "DuplicateEntityError",
    "normalize_code",

    # Stores
    "AccessLog",
    "EntryStore",
]
