"""Pydantic schemas for API requests and responses.

JSON field names are camelCase; Python attributes are snake_case.
"""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
from typing import Any, Dict, Optional


class CamelModel(BaseModel):
    """Base model serializing to camelCase keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ShortenRequest(CamelModel):
    """Request to shorten a URL.

    ``long_url`` and ``custom_slug`` accept any JSON value. The service
    validates them, so a malformed or non-string value is reported as 400
    rather than a schema error.
    """

    long_url: Optional[Any] = Field(None, description="The URL to shorten")
    ttl: Optional[int] = Field(None, ge=0, description="Milliseconds to live; 0 or absent never expires")
    custom_slug: Optional[Any] = Field(None, description="Optional custom short id")

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        json_schema_extra={
            "examples": [
                {
                    "longUrl": "https://example.com/very/long/path/to/resource",
                },
                {
                    "longUrl": "https://github.com/user/repo",
                    "ttl": 86400000,
                    "customSlug": "myrepo",
                },
            ]
        },
    )


class URLStatsResponse(CamelModel):
    """Entry with its access statistics."""

    short_id: str
    long_url: str
    access_count: int
    last_accessed: Optional[int] = Field(None, description="Epoch ms of the last redirect")
    created_at: int = Field(..., description="Epoch ms of creation")
    ttl: Optional[int] = None
    is_expired: bool
    referrers: Dict[str, int]
    browser_stats: Dict[str, int]
    qr_code: Optional[str] = Field(None, description="PNG data URL of the short link")


class HealthResponse(CamelModel):
    """Health check response."""

    status: str = Field(..., description="Overall status")
    total_urls: int
    active_urls: int
    expired_urls: int


class ErrorResponse(BaseModel):
    """Error response."""

    error: str = Field(..., description="Error message")
