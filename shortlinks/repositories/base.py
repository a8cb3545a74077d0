"""Repository errors shared by the in-memory stores."""

from typing import Any


class RepositoryError(Exception):
    """Base exception for repository errors."""
    pass


class EntityNotFoundError(RepositoryError):
    """Exception raised when an entity cannot be found."""

    def __init__(self, entity_name: str, key: Any):
        self.entity_name = entity_name
        self.key = key
        super().__init__(f"{entity_name} with key {key} not found")


class DuplicateEntityError(RepositoryError):
    """Exception raised when a unique key is already taken."""

    def __init__(self, entity_name: str, field_name: str, value: Any):
        self.entity_name = entity_name
        self.field_name = field_name
        self.value = value
        super().__init__(f"{entity_name} with {field_name}={value} already exists")


def normalize_code(code: str) -> str:
    """Short codes are compared case-insensitively."""
    return code.strip().lower()
