"""Tests for the URL shortener service."""

import asyncio
import json
import threading

import pytest

from snaplink.exceptions import (
    ExpiredError,
    InvalidSlugError,
    InvalidUrlError,
    NotFoundError,
    SlugTakenError,
)
from snaplink.models import URLEntry
from snaplink.registry import URLRegistry
from snaplink.service import URLShortenerService
from snaplink.store.json_store import JSONFileStore

BASE_URL = "http://sho.rt"


def read_document(store: JSONFileStore) -> dict:
    with open(store.path, "r", encoding="utf-8") as f:
        return json.load(f)


@pytest.mark.asyncio
class TestURLShortenerService:
    """Test URL shortener service."""

    async def test_create_persists(self, service, store, sample_urls):
        """Test creating short URL."""
        entry = await service.create_short_url(sample_urls[0], BASE_URL)

        document = read_document(store)
        assert document[entry.short_id]["longUrl"] == sample_urls[0]
        assert document[entry.short_id]["qrCode"].startswith("data:image/png;base64,")

    async def test_create_with_custom_slug(self, service, sample_urls):
        """Test creating short URL with custom slug."""
        entry = await service.create_short_url(sample_urls[0], BASE_URL, custom_slug="promo")

        assert entry.short_id == "promo"

    async def test_create_duplicate_slug(self, service, sample_urls):
        await service.create_short_url(sample_urls[0], BASE_URL, custom_slug="promo")

        with pytest.raises(SlugTakenError):
            await service.create_short_url(sample_urls[1], BASE_URL, custom_slug="promo")

    async def test_create_invalid_url(self, service, store):
        """Test creating short URL with invalid URL."""
        with pytest.raises(InvalidUrlError):
            await service.create_short_url("not-a-valid-url", BASE_URL)

        assert read_document(store) == {}

    async def test_custom_slugs_disabled(self, store, registry, logger, sample_urls):
        service = URLShortenerService(
            store=store, registry=registry, logger=logger, enable_custom_slugs=False
        )
        await service.load()

        with pytest.raises(InvalidSlugError):
            await service.create_short_url(sample_urls[0], BASE_URL, custom_slug="promo")

        entry = await service.create_short_url(sample_urls[0], BASE_URL)
        assert len(entry.short_id) == 8

    async def test_path_prefix_reaches_qr_code(self, store, clock, logger, sample_urls):
        class RecordingEncoder:
            def __init__(self):
                self.urls = []

            def encode(self, url):
                self.urls.append(url)
                return None

        encoder = RecordingEncoder()
        service = URLShortenerService(
            store=store,
            registry=URLRegistry(qr_encoder=encoder, clock=clock),
            logger=logger,
            path_prefix="/s",
        )
        await service.load()

        await service.create_short_url(sample_urls[0], BASE_URL, custom_slug="promo")
        assert encoder.urls == ["http://sho.rt/s/promo"]

    async def test_resolve_counts_and_persists(self, service, store, clock, sample_urls):
        entry = await service.create_short_url(sample_urls[0], BASE_URL)
        clock.advance(50)

        long_url = await service.resolve(entry.short_id, "https://news.example", "Firefox/120.0")
        assert long_url == sample_urls[0]

        stored = read_document(store)[entry.short_id]
        assert stored["accessCount"] == 1
        assert stored["lastAccessed"] == clock.now
        assert stored["referrers"] == {"https://news.example": 1}
        assert stored["browserStats"] == {"Firefox": 1}

    async def test_resolve_unknown(self, service):
        with pytest.raises(NotFoundError):
            await service.resolve("missing")

    async def test_resolve_expired_removes_from_disk(self, service, store, clock, sample_urls):
        entry = await service.create_short_url(sample_urls[0], BASE_URL, ttl=1000)
        clock.advance(1100)

        with pytest.raises(ExpiredError):
            await service.resolve(entry.short_id)

        assert entry.short_id not in read_document(store)
        with pytest.raises(NotFoundError):
            await service.resolve(entry.short_id)

    async def test_get_stats_includes_expired(self, service, clock, sample_urls):
        entry = await service.create_short_url(sample_urls[0], BASE_URL, ttl=1000)
        clock.advance(1100)

        stats = service.get_stats(entry.short_id).get_stats(now=clock.now)
        assert stats["isExpired"] is True

    async def test_health_summary(self, service, clock, sample_urls):
        assert service.health_summary() == {
            "status": "healthy", "totalUrls": 0, "activeUrls": 0, "expiredUrls": 0,
        }

        await service.create_short_url(sample_urls[0], BASE_URL, ttl=1000)
        await service.create_short_url(sample_urls[1], BASE_URL)
        clock.advance(1100)

        assert service.health_summary() == {
            "status": "healthy", "totalUrls": 2, "activeUrls": 1, "expiredUrls": 1,
        }

    async def test_sweep_persists(self, service, store, clock, sample_urls):
        expiring = await service.create_short_url(sample_urls[0], BASE_URL, ttl=1000)
        kept = await service.create_short_url(sample_urls[1], BASE_URL)
        clock.advance(1100)

        assert await service.sweep_expired() == 1
        assert set(read_document(store)) == {kept.short_id}
        assert expiring.short_id not in service.registry

    async def test_sweep_without_expired_skips_save(self, service, store, sample_urls, monkeypatch):
        await service.create_short_url(sample_urls[0], BASE_URL)

        saves = []

        async def record_save(items):
            saves.append(items)
            return True

        monkeypatch.setattr(store, "save", record_save)

        assert await service.sweep_expired() == 0
        assert saves == []

    async def test_save_failure_keeps_memory(self, service, store, sample_urls, monkeypatch):
        async def fail_save(items):
            return False

        monkeypatch.setattr(store, "save", fail_save)

        entry = await service.create_short_url(sample_urls[0], BASE_URL)
        assert await service.resolve(entry.short_id) == sample_urls[0]
        assert service.get_stats(entry.short_id).access_count == 1

    async def test_list_urls_newest_first(self, service, clock, sample_urls):
        for url in sample_urls:
            await service.create_short_url(url, BASE_URL)
            clock.advance(10)

        listed = service.list_urls()
        assert [entry.long_url for entry in listed] == list(reversed(sample_urls))
        assert len(service.list_urls(limit=2)) == 2

    async def test_load_restores_table(self, service, store, clock, logger, sample_urls):
        entry = await service.create_short_url(sample_urls[0], BASE_URL, custom_slug="promo")
        await service.resolve("promo")

        reloaded = URLShortenerService(store=store, registry=URLRegistry(clock=clock), logger=logger)
        await reloaded.load()

        restored = reloaded.get_stats("promo")
        assert restored.long_url == entry.long_url
        assert restored.access_count == 1
        assert restored.referrers == {"Direct": 1}

    async def test_close_flushes(self, service, store, sample_urls):
        entry = await service.create_short_url(sample_urls[0], BASE_URL)
        # Mutate memory only; close must write it out.
        service.registry.record_access(entry.short_id)

        await service.close()
        assert read_document(store)[entry.short_id]["accessCount"] == 1


@pytest.mark.asyncio
class TestTableConsistency:
    """Readers on the event loop never see the table change under them."""

    async def test_health_during_creates_on_large_table(self, service, store, clock, monkeypatch):
        service.registry.restore(
            (f"seed{i}", URLEntry(f"https://example.com/seed/{i}", f"seed{i}", clock.now))
            for i in range(50_000)
        )

        async def skip_save(items):
            return True

        monkeypatch.setattr(store, "save", skip_save)

        errors = []
        done = asyncio.Event()

        async def poll_health():
            while not done.is_set():
                try:
                    service.health_summary()
                    service.list_urls(limit=1)
                except RuntimeError as e:
                    errors.append(str(e))
                await asyncio.sleep(0)

        async def create_many():
            try:
                for i in range(20):
                    await service.create_short_url(f"https://example.org/new/{i}", BASE_URL)
            finally:
                done.set()

        await asyncio.gather(poll_health(), create_many())

        assert errors == []
        assert service.health_summary()["totalUrls"] == 50_020

    async def test_qr_rendered_before_insert_and_off_loop(self, store, clock, logger, sample_urls):
        loop_thread = threading.current_thread()

        class InspectingEncoder:
            def __init__(self):
                self.seen = []

            def encode(self, url):
                self.seen.append((threading.current_thread() is loop_thread, len(registry)))
                return "qr"

        encoder = InspectingEncoder()
        registry = URLRegistry(qr_encoder=encoder, clock=clock)
        service = URLShortenerService(store=store, registry=registry, logger=logger)
        await service.load()

        entry = await service.create_short_url(sample_urls[0], BASE_URL)

        assert encoder.seen == [(False, 0)]
        assert entry.qr_code == "qr"
        assert len(registry) == 1

    async def test_dedup_hit_skips_qr_render(self, service, sample_urls, monkeypatch):
        first = await service.create_short_url(sample_urls[0], BASE_URL)

        def fail_render(*args):
            raise AssertionError("render_qr called for a reused entry")

        monkeypatch.setattr(service.registry, "render_qr", fail_render)

        second = await service.create_short_url(sample_urls[0], BASE_URL)
        assert second is first
