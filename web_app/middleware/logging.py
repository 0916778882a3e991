"""Request logging middleware."""

import time
import logging
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from typing import Callable

from snaplink.common.headers import get_referrer
from snaplink.common.logging_config import get_logger
from snaplink.common.user_agent import classify_browser


class LoggingMiddleware(BaseHTTPMiddleware):
    """Log every request with its duration.

    Redirect responses also log their target, and requests carry the same
    referrer and browser labels the access analytics record.
    """

    def __init__(self, app, logger: logging.Logger = None):
        super().__init__(app)
        self.logger = logger or get_logger("snaplink.web")

    async def dispatch(self, request: Request, call_next: Callable):
        start_time = time.perf_counter()

        client_ip = request.client.host if request.client else "unknown"
        referrer = get_referrer(dict(request.headers)) or "Direct"
        browser = classify_browser(request.headers.get("user-agent"))
        self.logger.info(
            f"Request: {request.method} {request.url.path} from {client_ip} "
            f"(referrer={referrer}, browser={browser})"
        )

        response = await call_next(request)

        duration_ms = (time.perf_counter() - start_time) * 1000
        message = (
            f"Response: {request.method} {request.url.path} - "
            f"Status: {response.status_code} - Duration: {duration_ms:.2f}ms"
        )
        location = response.headers.get("location")
        if location:
            message += f" - Location: {location}"
        self.logger.info(message)

        return response
