"""Core business logic for snaplink."""

from .models import URLEntry
from .shortcode import ShortIdGenerator
from .registry import URLRegistry
from .service import URLShortenerService
from .sweeper import ExpirySweeper

__all__ = [
    "URLEntry",
    "ShortIdGenerator",
    "URLRegistry",
    "URLShortenerService",
    "ExpirySweeper",
]
