"""Short code generation."""

import secrets
from typing import Optional

from shortlinks.repositories.base import normalize_code


class CodeGenerator:
    """
    Produces short codes.

    A custom token is normalized and returned as is; checking its format is
    up to the caller. Otherwise a random hex token of `2 * num_bytes`
    characters is drawn from `secrets`. Uniqueness is the registry's job.
    """

    def __init__(self, num_bytes: int = 3):
        if num_bytes <= 0:
            raise ValueError("num_bytes must be positive")
        self.num_bytes = num_bytes

    def generate(self, custom: Optional[str] = None) -> str:
        if custom:
            return normalize_code(custom)
        return secrets.token_hex(self.num_bytes)
