"""Short link entry models.

This module defines the Entry record stored for every short code and the
AccessEvent recorded each time a code is resolved.
"""

from datetime import datetime, timedelta

from pydantic import BaseModel, ConfigDict, Field, model_validator

UNKNOWN = "Unknown"
DIRECT = "Direct"


class Entry(BaseModel):
    """
    A write-once mapping from a short code to its target URL.

    Expiry is logical: an expired entry stays in the store and keeps
    reporting its statistics, it only stops resolving.
    """

    model_config = ConfigDict(frozen=True)

    code: str = Field(description="Normalized (lowercase) short code")
    target_url: str = Field(description="Absolute URL to redirect to")
    created_at: datetime
    expires_at: datetime
    validity_minutes: int = Field(gt=0)

    @model_validator(mode="after")
    def check_expiry_after_creation(self):
        if self.expires_at <= self.created_at:
            raise ValueError("expires_at must be later than created_at")
        return self

    @classmethod
    def build(cls, code: str, target_url: str, validity_minutes: int, now: datetime) -> "Entry":
        """Create an entry that expires `validity_minutes` after `now`."""
        return cls(
            code=code,
            target_url=target_url,
            created_at=now,
            expires_at=now + timedelta(minutes=validity_minutes),
            validity_minutes=validity_minutes,
        )

    def is_expired(self, now: datetime) -> bool:
        return now > self.expires_at


class AccessEvent(BaseModel):
    """One resolution of a short code, with the request context it came from."""

    model_config = ConfigDict(frozen=True)

    timestamp: datetime
    user_agent: str = UNKNOWN
    referer: str = DIRECT
    client_identifier: str = UNKNOWN
