"""Coarse browser classification from User-Agent strings."""

from typing import Optional

# Checked in order; the first substring hit wins, so Edge UAs (which also
# contain "Chrome") are counted as Chrome.
BROWSER_MARKERS = ("Firefox", "Chrome", "Safari", "Edge")

UNKNOWN_USER_AGENT = "Unknown"
OTHER_BROWSER = "Other"


def classify_browser(user_agent: Optional[str]) -> str:
    """Map a User-Agent header to a browser label.

    Args:
        user_agent: Raw User-Agent header, or None if the request had none

    Returns:
        One of Firefox, Chrome, Safari, Edge or Other
    """
    user_agent = user_agent or UNKNOWN_USER_AGENT
    for marker in BROWSER_MARKERS:
        if marker in user_agent:
            return marker
    return OTHER_BROWSER
