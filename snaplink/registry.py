"""In-memory table of shortened URLs."""

import logging
from typing import Callable, Dict, Iterable, List, Optional, Tuple

from .common.url_builder import build_short_url
from .common.user_agent import classify_browser
from .common.validators import is_valid_url, is_valid_slug
from .exceptions import (
    ExpiredError,
    InvalidSlugError,
    InvalidUrlError,
    NotFoundError,
    SlugTakenError,
)
from .models import URLEntry, now_ms
from .qr import QRCodeEncoder
from .shortcode import ShortIdGenerator

DIRECT_REFERRER = "Direct"


class URLRegistry:
    """Mapping from short id to URLEntry.

    Generated ids and custom slugs share one namespace. The registry never
    touches storage; callers persist after mutating.
    """

    def __init__(
        self,
        id_generator: Optional[ShortIdGenerator] = None,
        qr_encoder: Optional[QRCodeEncoder] = None,
        clock: Optional[Callable[[], int]] = None,
        logger: Optional[logging.Logger] = None,
    ):
        """Initialize registry.

        Args:
            id_generator: Optional short id generator
            qr_encoder: Optional QR encoder; without one entries get no QR code
            clock: Callable returning epoch milliseconds (defaults to wall clock)
            logger: Optional logger
        """
        self.generator = id_generator or ShortIdGenerator()
        self.qr_encoder = qr_encoder
        self.clock = clock or now_ms
        self.logger = logger or logging.getLogger(__name__)
        self._entries: Dict[str, URLEntry] = {}

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, short_id: str) -> bool:
        return short_id in self._entries

    def create(
        self,
        long_url: str,
        base_url: str,
        ttl: Optional[int] = None,
        custom_slug: Optional[str] = None,
        path_prefix: str = "",
    ) -> URLEntry:
        """Create a short URL, or return the live entry for the same URL.

        Args:
            long_url: Target URL
            base_url: Externally visible base URL, used for the QR code
            ttl: Optional time to live in milliseconds
            custom_slug: Optional caller-chosen short id
            path_prefix: Optional path prefix of short links

        Returns:
            The new entry, or the existing live entry for ``long_url``

        Raises:
            InvalidUrlError: ``long_url`` is not an absolute http(s) URL
            InvalidSlugError: ``custom_slug`` has invalid characters
            SlugTakenError: ``custom_slug`` is held by any entry, expired or not
        """
        existing, short_id = self.prepare(long_url, custom_slug)
        if existing is not None:
            return existing

        qr_code = self.render_qr(short_id, base_url, path_prefix)
        return self.add(long_url, short_id, ttl=ttl, qr_code=qr_code)

    def prepare(
        self,
        long_url: str,
        custom_slug: Optional[str] = None,
    ) -> Tuple[Optional[URLEntry], Optional[str]]:
        """Validate a create request and pick its short id.

        Returns:
            ``(existing, None)`` when a live entry already targets
            ``long_url``, otherwise ``(None, short_id)`` with a free id

        Raises:
            InvalidUrlError, InvalidSlugError, SlugTakenError
        """
        is_valid, _ = is_valid_url(long_url)
        if not is_valid:
            raise InvalidUrlError()

        if custom_slug:
            is_valid, _ = is_valid_slug(custom_slug)
            if not is_valid:
                raise InvalidSlugError()
            if custom_slug in self._entries:
                raise SlugTakenError()

        existing = self.find_live_by_url(long_url)
        if existing is not None:
            self.logger.debug(f"Reusing {existing.short_id} for {long_url}")
            return existing, None

        if custom_slug:
            return None, custom_slug

        short_id = self.generator.generate_random()
        while short_id in self._entries:
            short_id = self.generator.generate_random()
        return None, short_id

    def render_qr(self, short_id: str, base_url: str, path_prefix: str = "") -> Optional[str]:
        """QR data URL of the short link; reads no registry state."""
        if self.qr_encoder is None:
            return None
        return self.qr_encoder.encode(build_short_url(short_id, base_url, path_prefix))

    def add(
        self,
        long_url: str,
        short_id: str,
        ttl: Optional[int] = None,
        qr_code: Optional[str] = None,
    ) -> URLEntry:
        """Insert a new entry under an id returned by ``prepare``."""
        entry = URLEntry(
            long_url=long_url,
            short_id=short_id,
            created_at=self.clock(),
            ttl=ttl or None,
            qr_code=qr_code,
        )
        self._entries[short_id] = entry
        self.logger.info(f"Created short URL: {short_id} -> {long_url}")
        return entry

    def get(self, short_id: str) -> URLEntry:
        """Look up an entry without checking expiry.

        Raises:
            NotFoundError: No entry holds ``short_id``
        """
        entry = self._entries.get(short_id)
        if entry is None:
            raise NotFoundError()
        return entry

    def find_live_by_url(self, long_url: str) -> Optional[URLEntry]:
        """Return the first unexpired entry whose target is ``long_url``."""
        now = self.clock()
        for entry in self._entries.values():
            if entry.long_url == long_url and not entry.is_expired(now):
                return entry
        return None

    def record_access(
        self,
        short_id: str,
        referrer: Optional[str] = None,
        user_agent: Optional[str] = None,
    ) -> URLEntry:
        """Count one redirect through ``short_id``.

        An expired entry is deleted before ExpiredError is raised.

        Raises:
            NotFoundError: No entry holds ``short_id``
            ExpiredError: The entry had expired
        """
        entry = self.get(short_id)
        now = self.clock()

        if entry.is_expired(now):
            del self._entries[short_id]
            self.logger.info(f"Removed expired URL on access: {short_id}")
            raise ExpiredError()

        entry.update_stats(
            referrer or DIRECT_REFERRER,
            classify_browser(user_agent),
            now=now,
        )
        return entry

    def delete(self, short_id: str) -> bool:
        """Remove an entry; returns False if it did not exist."""
        return self._entries.pop(short_id, None) is not None

    def sweep_expired(self) -> int:
        """Remove every expired entry.

        Returns:
            Number of entries removed
        """
        now = self.clock()
        expired = [
            short_id for short_id, entry in self._entries.items()
            if entry.is_expired(now)
        ]
        for short_id in expired:
            del self._entries[short_id]
            self.logger.info(f"Cleaned up expired URL: {short_id}")
        return len(expired)

    def counts(self) -> Tuple[int, int, int]:
        """Return (total, active, expired) computed at the current time."""
        now = self.clock()
        expired = sum(1 for entry in self._entries.values() if entry.is_expired(now))
        total = len(self._entries)
        return total, total - expired, expired

    def snapshot(self) -> List[Tuple[str, URLEntry]]:
        """All (short_id, entry) pairs in insertion order."""
        return list(self._entries.items())

    def restore(self, items: Iterable[Tuple[str, URLEntry]]) -> None:
        """Replace the whole table."""
        self._entries = dict(items)
