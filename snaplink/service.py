"""Business logic service for snaplink."""

import asyncio
import logging
from typing import Any, Dict, List, Optional

from .exceptions import ExpiredError, InvalidSlugError
from .models import URLEntry
from .registry import URLRegistry
from .store.base import URLStoreBase


class URLShortenerService:
    """Service layer composing the registry and its persistent store.

    Mutations (create, access, sweep) run under a single write lock and are
    persisted before the lock is released, so concurrent requests cannot
    overwrite each other's changes on disk.
    """

    def __init__(
        self,
        store: URLStoreBase,
        registry: Optional[URLRegistry] = None,
        logger: Optional[logging.Logger] = None,
        enable_custom_slugs: bool = True,
        path_prefix: str = "",
    ):
        """Initialize URL shortener service.

        Args:
            store: Persistent store for the whole table
            registry: Optional in-memory registry
            logger: Optional logger
            enable_custom_slugs: Whether to allow caller-chosen short ids
            path_prefix: Path prefix of short links
        """
        self.store = store
        self.registry = registry or URLRegistry()
        self.logger = logger or logging.getLogger(__name__)
        self.enable_custom_slugs = enable_custom_slugs
        self.path_prefix = path_prefix
        self._write_lock = asyncio.Lock()

    async def load(self) -> None:
        """Replace the in-memory table with the persisted one.

        Raises:
            StorageError: If the store cannot be initialized or read
        """
        items = await self.store.load()
        self.registry.restore(items)
        self.logger.info(f"Loaded {len(items)} short URLs")

    async def create_short_url(
        self,
        long_url: str,
        base_url: str,
        ttl: Optional[int] = None,
        custom_slug: Optional[str] = None,
    ) -> URLEntry:
        """Create a short URL, or return the live one for the same target.

        Args:
            long_url: The original long URL
            base_url: Externally visible base URL of the service
            ttl: Optional time to live in milliseconds
            custom_slug: Optional custom short id

        Returns:
            The created or reused entry

        Raises:
            InvalidUrlError, InvalidSlugError, SlugTakenError
        """
        if custom_slug and not self.enable_custom_slugs:
            raise InvalidSlugError("Custom slugs are not enabled")

        async with self._write_lock:
            existing, short_id = self.registry.prepare(long_url, custom_slug)
            if existing is not None:
                return existing

            # Only the QR render leaves the loop; the table is touched on the loop thread.
            qr_code = await asyncio.to_thread(
                self.registry.render_qr, short_id, base_url, self.path_prefix
            )
            entry = self.registry.add(long_url, short_id, ttl=ttl, qr_code=qr_code)
            await self._save()
        return entry

    async def resolve(
        self,
        short_id: str,
        referrer: Optional[str] = None,
        user_agent: Optional[str] = None,
    ) -> str:
        """Record one access and return the redirect target.

        Raises:
            NotFoundError: Unknown short id
            ExpiredError: The entry had expired and has been deleted
        """
        async with self._write_lock:
            try:
                entry = self.registry.record_access(short_id, referrer, user_agent)
            except ExpiredError:
                await self._save()
                raise
            await self._save()
        return entry.long_url

    def get_stats(self, short_id: str) -> URLEntry:
        """Get an entry regardless of expiry.

        Raises:
            NotFoundError: Unknown short id
        """
        return self.registry.get(short_id)

    def health_summary(self) -> Dict[str, Any]:
        """Table counts computed on demand."""
        total, active, expired = self.registry.counts()
        return {
            "status": "healthy",
            "totalUrls": total,
            "activeUrls": active,
            "expiredUrls": expired,
        }

    async def sweep_expired(self) -> int:
        """Remove expired entries and persist if any were removed.

        Returns:
            Number of entries removed
        """
        async with self._write_lock:
            removed = self.registry.sweep_expired()
            if removed:
                await self._save()
        if removed:
            self.logger.info(f"Sweep removed {removed} expired URLs")
        return removed

    def list_urls(self, limit: int = 100) -> List[URLEntry]:
        """Most recently created entries first."""
        entries = [entry for _, entry in self.registry.snapshot()]
        entries.sort(key=lambda entry: entry.created_at, reverse=True)
        return entries[:limit]

    async def close(self) -> None:
        """Flush the table and close the store."""
        async with self._write_lock:
            await self._save()
        await self.store.close()

    async def _save(self) -> bool:
        saved = await self.store.save(self.registry.snapshot())
        if not saved:
            self.logger.warning("Table not persisted; memory is ahead of disk")
        return saved
