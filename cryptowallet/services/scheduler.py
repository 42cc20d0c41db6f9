"""Periodic trigger for the bulk price update."""
import asyncio
import logging

from .token_service import TokenService

logger = logging.getLogger(__name__)

# Pause after an unexpected failure before the next round.
ERROR_BACKOFF_SECONDS = 60


class PriceUpdateScheduler:
    """Call :meth:`TokenService.update_all_token_prices` every interval."""

    def __init__(self, token_service: TokenService, interval_seconds: float) -> None:
        self._token_service = token_service
        self.interval_seconds = interval_seconds

    async def run_once(self) -> None:
        logger.info("Triggering scheduled token price update.")
        await self._token_service.update_all_token_prices()

    async def run_forever(self, interval_seconds: float | None = None) -> None:
        """Run until cancelled."""
        interval = self.interval_seconds if interval_seconds is None else interval_seconds
        if interval <= 0:
            raise ValueError("Update interval must be positive")
        logger.info("Starting price updates (every %s seconds)", interval)

        while True:
            try:
                await self.run_once()
                await asyncio.sleep(interval)
            except asyncio.CancelledError:
                logger.info("Price update loop stopped")
                raise
            except Exception as e:
                logger.error("Error in price update loop: %s", e)
                await asyncio.sleep(min(ERROR_BACKOFF_SECONDS, interval))
