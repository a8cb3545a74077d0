"""API request and response schemas.

This module contains Pydantic models for API request validation
and response serialization. JSON keys are camelCase on the wire.
"""

import re
from datetime import datetime
from typing import List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, StrictFloat, StrictInt, field_validator
from pydantic.alias_generators import to_camel

from shortlinks.core.config import settings
from shortlinks.models import Entry, Report

_CUSTOM_CODE_PATTERN = re.compile(r"^[A-Za-z0-9]+$")


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ShortURLCreateRequest(BaseModel):
    """Request schema for creating a short link.

    URL and validity are checked by the registry so that bad values map to
    400 rather than a schema error.
    """
    url: Optional[str] = None
    validity: Optional[Union[StrictInt, StrictFloat]] = Field(
        None, description="Minutes until the link expires"
    )
    shortcode: Optional[str] = Field(None, description="Optional alphanumeric custom code")

    @field_validator("validity")
    def integral_float_to_int(cls, v):
        """JSON numbers such as 30.0 are whole minutes."""
        if isinstance(v, float) and v.is_integer():
            return int(v)
        return v

    @field_validator("shortcode", mode="before")
    def blank_code_is_none(cls, v):
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @field_validator("shortcode")
    def check_shortcode(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        if len(v) > settings.CUSTOM_CODE_MAX_LENGTH:
            raise ValueError(
                f"shortcode must be {settings.CUSTOM_CODE_MAX_LENGTH} characters or less"
            )
        if not _CUSTOM_CODE_PATTERN.match(v):
            raise ValueError("shortcode must contain only letters and digits")
        return v


class ShortURLCreateResponse(CamelModel):
    """Response schema for a newly created short link."""
    code: str
    short_link: str
    expires_at: datetime

    @classmethod
    def from_entry(cls, entry: Entry, base_url: str) -> "ShortURLCreateResponse":
        return cls(
            code=entry.code,
            short_link=f"{base_url.rstrip('/')}/{entry.code}",
            expires_at=entry.expires_at,
        )


class ClickDetailResponse(CamelModel):
    """Schema for one recorded click."""
    timestamp: datetime
    referer: str
    user_agent: str
    location: str


class URLStatsResponse(CamelModel):
    """Response schema for short link statistics."""
    short_code: str
    original_url: str
    created_at: datetime
    expiry_date: datetime
    validity: int
    total_clicks: int
    click_details: List[ClickDetailResponse]

    @classmethod
    def from_report(cls, report: Report) -> "URLStatsResponse":
        return cls(
            short_code=report.code,
            original_url=report.target_url,
            created_at=report.created_at,
            expiry_date=report.expires_at,
            validity=report.validity_minutes,
            total_clicks=report.total_clicks,
            click_details=[
                ClickDetailResponse(
                    timestamp=click.timestamp,
                    referer=click.referer,
                    user_agent=click.user_agent,
                    location=click.location,
                )
                for click in report.click_details
            ],
        )


class HealthResponse(BaseModel):
    status: str
    timestamp: datetime
    uptime: float
    version: str
    environment: str
    entries: int


class ErrorResponse(BaseModel):
    """Response schema for errors."""
    detail: str
