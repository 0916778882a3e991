"""Validation utilities for URL shortener."""

import re
from urllib.parse import urlparse
from typing import Tuple

import validators

SLUG_PATTERN = re.compile(r'^[a-zA-Z0-9_-]+$')


def is_valid_url(url: str) -> Tuple[bool, str]:
    """Validate a long URL.

    Only absolute web URLs (http or https with a host) are accepted. The
    syntax check itself is delegated to the ``validators`` package.

    Args:
        url: The URL to validate

    Returns:
        Tuple of (is_valid, error_message)
    """
    if not url or not isinstance(url, str):
        return False, "URL is required"

    try:
        result = urlparse(url)
    except ValueError as e:
        return False, f"Invalid URL format: {str(e)}"

    if result.scheme not in ["http", "https"]:
        return False, "URL must use http or https protocol"

    if not result.netloc:
        return False, "URL must have a valid domain"

    if not validators.url(url, simple_host=True, strict_query=False):
        return False, "Invalid URL format"

    return True, ""


def is_valid_slug(slug: str) -> Tuple[bool, str]:
    """Validate a custom slug.

    Args:
        slug: The slug to validate

    Returns:
        Tuple of (is_valid, error_message)
    """
    if not slug or not isinstance(slug, str):
        return False, "Slug is required"

    if not SLUG_PATTERN.match(slug):
        return False, "Slug can only contain letters, numbers, hyphens, and underscores"

    return True, ""
