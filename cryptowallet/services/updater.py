"""Bulk price refresh over a bounded worker pool."""
import asyncio
import dataclasses
import logging

from ..errors import PriceFetchFailed
from ..interfaces.stores import TokenStore
from ..models import TrackedToken
from .fetcher import RetryingFetcher
from .pool import WorkerPool

logger = logging.getLogger(__name__)


class BulkPriceUpdater:
    """Refresh and persist the price of every given token.

    One job per token runs on ``pool``; a token whose fetch fails keeps its
    last known price and never affects the others. :meth:`update_all`
    returns only once every job has finished.
    """

    def __init__(
        self, fetcher: RetryingFetcher, store: TokenStore, pool: WorkerPool
    ) -> None:
        self._fetcher = fetcher
        self._store = store
        self._pool = pool

    async def update_all(self, tokens: list[TrackedToken]) -> None:
        if not tokens:
            return

        futures = [self._pool.submit(self._fetch_and_update, token) for token in tokens]
        results = await asyncio.gather(*futures, return_exceptions=True)

        for token, result in zip(tokens, results):
            if isinstance(result, BaseException):
                logger.error("Price update for %s failed: %s", token.symbol, result)

    async def _fetch_and_update(self, token: TrackedToken) -> TrackedToken | None:
        try:
            price = await self._fetcher.fetch_price(token)
        except PriceFetchFailed:
            logger.warning("Failed to update price for %s after all retries.", token.symbol)
            return None

        updated = dataclasses.replace(token, price=price)
        await self._store.save(updated)
        logger.info("Updated %s's price to %s", updated.symbol, updated.price)
        return updated
