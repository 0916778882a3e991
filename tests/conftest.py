"""Pytest configuration and fixtures."""

import pytest
from typing import AsyncGenerator
from httpx import ASGITransport, AsyncClient

from config import Config
from snaplink.common.logging_config import setup_logging
from snaplink.qr import QRCodeEncoder
from snaplink.registry import URLRegistry
from snaplink.service import URLShortenerService
from snaplink.shortcode import ShortIdGenerator
from snaplink.store.json_store import JSONFileStore
from web_app import create_app

START_MS = 1_700_000_000_000


class FakeClock:
    """Controllable epoch-millisecond clock."""

    def __init__(self, start: int = START_MS):
        self.now = start

    def __call__(self) -> int:
        return self.now

    def advance(self, ms: int) -> None:
        self.now += ms


@pytest.fixture
def logger():
    """Create test logger."""
    return setup_logging(level="DEBUG")


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def data_dir(tmp_path):
    return str(tmp_path / "data")


@pytest.fixture
def store(data_dir, logger):
    return JSONFileStore(data_dir=data_dir, logger=logger)


@pytest.fixture
def qr_encoder(logger):
    return QRCodeEncoder(box_size=2, border=1, logger=logger)


@pytest.fixture
def registry(clock, qr_encoder, logger):
    return URLRegistry(
        id_generator=ShortIdGenerator(),
        qr_encoder=qr_encoder,
        clock=clock,
        logger=logger,
    )


@pytest.fixture
async def service(store, registry, logger) -> URLShortenerService:
    """Create a loaded service instance."""
    service = URLShortenerService(store=store, registry=registry, logger=logger)
    await service.load()
    return service


@pytest.fixture
def config(data_dir):
    return Config(data_dir=data_dir, base_url="http://testserver")


@pytest.fixture
def app(service, config):
    """Create test FastAPI app."""
    return create_app(service_instance=service, config=config)


@pytest.fixture
async def client(app) -> AsyncGenerator[AsyncClient, None]:
    """Create test client."""
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://testserver") as ac:
        yield ac


@pytest.fixture
def sample_urls():
    """Sample URLs for testing."""
    return [
        "https://example.com/test",
        "https://github.com/user/repo",
        "https://stackoverflow.com/questions/123456",
    ]
