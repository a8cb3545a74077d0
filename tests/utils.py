"""Test utilities for short link tests."""

import random
import string
from datetime import datetime, timezone

from shortlinks.models import Entry


def random_string(length: int = 10) -> str:
    """Generate a random alphanumeric string."""
    return ''.join(random.choice(string.ascii_letters + string.digits) for _ in range(length))


def random_url() -> str:
    """Generate a random URL for testing."""
    return f"https://{random_string(8).lower()}.com/{random_string(12)}"


def make_entry(code: str = None, target_url: str = None, validity_minutes: int = 30,
               now: datetime = None) -> Entry:
    """Build an Entry without going through the registry."""
    return Entry.build(
        code=code or random_string(6).lower(),
        target_url=target_url or random_url(),
        validity_minutes=validity_minutes,
        now=now or datetime.now(timezone.utc),
    )
