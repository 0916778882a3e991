"""Common utilities for snaplink."""

from .validators import is_valid_url, is_valid_slug
from .headers import extract_forwarded_headers, build_base_url, get_referrer
from .url_builder import build_short_url
from .user_agent import classify_browser
from .logging_config import setup_logging, get_logger

__all__ = [
    "is_valid_url",
    "is_valid_slug",
    "extract_forwarded_headers",
    "build_base_url",
    "get_referrer",
    "build_short_url",
    "classify_browser",
    "setup_logging",
    "get_logger",
]
