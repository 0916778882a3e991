"""Redirect route implementation."""

from fastapi import APIRouter, Request, status
from fastapi.responses import PlainTextResponse, RedirectResponse

from snaplink.common.headers import get_referrer
from snaplink.exceptions import ExpiredError, NotFoundError

router = APIRouter()


@router.get("/{short_id}", include_in_schema=False)
async def redirect_to_url(request: Request, short_id: str):
    """Redirect to the original URL, counting the access."""
    service = request.app.state.service

    try:
        long_url = await service.resolve(
            short_id,
            referrer=get_referrer(dict(request.headers)),
            user_agent=request.headers.get("user-agent"),
        )
    except (NotFoundError, ExpiredError) as e:
        return PlainTextResponse(e.message, status_code=e.status_code)

    return RedirectResponse(url=long_url, status_code=status.HTTP_302_FOUND)
