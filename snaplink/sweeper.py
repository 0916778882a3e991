"""Periodic removal of expired short URLs."""

import asyncio
import logging
from typing import Optional

from .service import URLShortenerService


class ExpirySweeper:
    """Run ``service.sweep_expired`` on a fixed interval.

    Missed intervals are not caught up; redirects still expire entries
    lazily in between.
    """

    def __init__(
        self,
        service: URLShortenerService,
        interval_seconds: float = 3600,
        logger: Optional[logging.Logger] = None,
    ):
        self.service = service
        self.interval_seconds = interval_seconds
        self.logger = logger or logging.getLogger(__name__)
        self._task: Optional[asyncio.Task] = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def run_once(self) -> int:
        self.logger.info("Running cleanup job...")
        return await self.service.sweep_expired()

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self.interval_seconds)
            try:
                await self.run_once()
            except Exception as e:
                self.logger.error(f"Error in cleanup job: {e}", exc_info=True)

    def start(self) -> None:
        if self.running:
            return
        self._task = asyncio.create_task(self._run())
        self.logger.info(f"Expiry sweeper started (every {self.interval_seconds}s)")

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None
        self.logger.info("Expiry sweeper stopped")
