"""API routes implementation."""

from fastapi import APIRouter, Request

from .schemas import (
    ShortenRequest,
    URLStatsResponse,
    HealthResponse,
    ErrorResponse,
)
from snaplink.common.headers import build_base_url

router = APIRouter()


@router.post(
    "/shorten",
    response_model=URLStatsResponse,
    responses={
        400: {"model": ErrorResponse, "description": "Invalid URL or slug"},
        409: {"model": ErrorResponse, "description": "Custom slug already in use"},
        500: {"model": ErrorResponse, "description": "Internal server error"},
    },
    summary="Create short URL",
    description="Shorten a URL. Shortening a URL that already has a live entry returns that entry.",
)
async def shorten_url(request: Request, body: ShortenRequest):
    """Create a shortened URL."""
    service = request.app.state.service
    config = request.app.state.config

    base_url = build_base_url(
        headers=dict(request.headers),
        fallback_base_url=config.base_url,
        request_scheme=request.url.scheme,
        request_host=request.headers.get("host"),
    )

    entry = await service.create_short_url(
        long_url=body.long_url,
        base_url=base_url,
        ttl=body.ttl,
        custom_slug=body.custom_slug,
    )
    return URLStatsResponse(**entry.get_stats())


@router.get(
    "/stats/{short_id}",
    response_model=URLStatsResponse,
    responses={
        404: {"model": ErrorResponse, "description": "Short id not found"},
    },
    summary="Get URL statistics",
    description="Access statistics of a short URL, including expired entries not yet swept.",
)
async def get_url_stats(request: Request, short_id: str):
    """Get statistics of a shortened URL."""
    service = request.app.state.service

    entry = service.get_stats(short_id)
    return URLStatsResponse(**entry.get_stats())


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Health check",
    description="Report table counts.",
)
async def health_check(request: Request):
    """Health check endpoint for load balancers and monitoring."""
    service = request.app.state.service

    return HealthResponse(**service.health_summary())
