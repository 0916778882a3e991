#!/usr/bin/env python3
"""
Main entry point for the snaplink service.

Concurrency: a single uvicorn worker serves all requests on one event loop.
The URL table lives in this process's memory, so running more workers
would give each its own diverging copy.

Usage:
    python app.py

Environment variables:
    PORT - Port to listen on (default 3001)
    HOST - Host to bind to
    BASE_URL - Base URL for short links when the request has no Host
    DATA_DIR / DATA_FILE - Location of the URL document
    SWEEP_INTERVAL_SECONDS - Seconds between expiry sweeps
    LOG_LEVEL - Logging level
"""

import signal
import sys
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI

from config import Config, load_config
from snaplink.common.logging_config import setup_logging
from snaplink.exceptions import StorageError
from snaplink.qr import QRCodeEncoder
from snaplink.registry import URLRegistry
from snaplink.service import URLShortenerService
from snaplink.shortcode import ShortIdGenerator
from snaplink.store.json_store import JSONFileStore
from snaplink.sweeper import ExpirySweeper
from web_app import create_app


def build_service(config: Config, logger) -> URLShortenerService:
    """Wire the store, registry and service from configuration."""
    store = JSONFileStore(
        data_dir=config.data_dir,
        filename=config.data_file,
        logger=logger.getChild("store"),
    )
    registry = URLRegistry(
        id_generator=ShortIdGenerator(num_bytes=config.short_id_bytes),
        qr_encoder=QRCodeEncoder(
            box_size=config.qr_box_size,
            border=config.qr_border,
            logger=logger.getChild("qr"),
        ),
        logger=logger.getChild("registry"),
    )
    return URLShortenerService(
        store=store,
        registry=registry,
        logger=logger.getChild("service"),
        enable_custom_slugs=config.enable_custom_slugs,
        path_prefix=config.path_prefix,
    )


def build_lifespan(service: URLShortenerService, sweeper: ExpirySweeper, logger):
    """Lifespan that loads the table, runs the sweeper and flushes on exit."""

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("Starting snaplink service...")

        try:
            await service.load()
        except StorageError as e:
            logger.error(f"Error initializing storage: {e}")
            raise

        sweeper.start()
        logger.info("Service started successfully")

        yield

        logger.info("Shutting down snaplink service...")
        await sweeper.stop()
        await service.close()
        logger.info("Service stopped")

    return lifespan


def main():
    """Main entry point."""
    config = load_config()

    logger = setup_logging(
        level=config.log_level,
        log_file=config.log_file,
        json_format=config.log_json,
    )

    logger.info("snaplink URL shortener")
    logger.info(f"Configuration: {config.model_dump()}")

    service = build_service(config, logger)
    sweeper = ExpirySweeper(
        service,
        interval_seconds=config.sweep_interval_seconds,
        logger=logger.getChild("sweeper"),
    )

    app = create_app(
        service_instance=service,
        config=config,
        lifespan=build_lifespan(service, sweeper, logger),
    )

    uvicorn_config = uvicorn.Config(
        app,
        host=config.host,
        port=config.port,
        log_level=config.log_level.lower(),
        access_log=True,
    )

    server = uvicorn.Server(uvicorn_config)

    def handle_signal(signum, frame):
        logger.info(f"Received signal {signum}, initiating graceful shutdown...")
        server.should_exit = True

    signal.signal(signal.SIGINT, handle_signal)
    signal.signal(signal.SIGTERM, handle_signal)

    try:
        logger.info(f"Starting server on {config.host}:{config.port}")
        server.run()
    except Exception as e:
        logger.error(f"Server error: {e}")
        sys.exit(1)

    if not server.started:
        # Startup failed, e.g. the data file could not be read
        sys.exit(1)


if __name__ == "__main__":
    main()
