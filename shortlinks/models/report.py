"""Reporting views assembled from an Entry and its access events."""

from datetime import datetime
from typing import List, Sequence

from pydantic import BaseModel, ConfigDict

from shortlinks.models.entry import UNKNOWN, AccessEvent, Entry


class ClickDetail(BaseModel):
    """Projection of an AccessEvent for reports."""

    model_config = ConfigDict(frozen=True)

    timestamp: datetime
    referer: str
    user_agent: str
    # Geo resolution is not performed, the field is always a placeholder
    location: str = UNKNOWN

    @classmethod
    def from_event(cls, event: AccessEvent) -> "ClickDetail":
        return cls(
            timestamp=event.timestamp,
            referer=event.referer,
            user_agent=event.user_agent,
        )


class Report(BaseModel):
    """Aggregated view of one entry and all of its recorded clicks."""

    model_config = ConfigDict(frozen=True)

    code: str
    target_url: str
    created_at: datetime
    expires_at: datetime
    validity_minutes: int
    total_clicks: int
    click_details: List[ClickDetail]

    @classmethod
    def from_entry(cls, entry: Entry, events: Sequence[AccessEvent]) -> "Report":
        """
        Build a report from one AccessLog snapshot.

        `total_clicks` is taken from the same snapshot as `click_details`, so
        the two always agree even while clicks are being appended. It equals
        `AccessLog.count` at the moment the snapshot was read.
        """
        return cls(
            code=entry.code,
            target_url=entry.target_url,
            created_at=entry.created_at,
            expires_at=entry.expires_at,
            validity_minutes=entry.validity_minutes,
            total_clicks=len(events),
            click_details=[ClickDetail.from_event(event) for event in events],
        )
