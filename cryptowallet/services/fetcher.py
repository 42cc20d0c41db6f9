"""Single-token price fetch with bounded retry and linear backoff."""
import asyncio
import logging

from ..errors import PriceFetchFailed, ProviderError
from ..interfaces.price_provider import PriceProvider
from ..models import TrackedToken

logger = logging.getLogger(__name__)


class RetryingFetcher:
    """Fetch a token's current price, retrying up to ``max_retries`` times.

    Before retry ``n`` the fetcher sleeps ``n * base_delay`` seconds. A
    :class:`ProviderError` counts as "no price" for that attempt. Cancelling
    the caller during a backoff sleep aborts the remaining attempts.
    """

    def __init__(
        self, provider: PriceProvider, max_retries: int, base_delay: float
    ) -> None:
        if max_retries < 0:
            raise ValueError("max_retries cannot be negative")
        self._provider = provider
        self.max_retries = max_retries
        self.base_delay = base_delay

    async def fetch_price(self, token: TrackedToken) -> float:
        """Return the token's current price or raise :class:`PriceFetchFailed`."""
        for attempt in range(self.max_retries + 1):
            try:
                price = await self._provider.get_current_price(token.provider_id)
            except ProviderError as e:
                logger.warning(
                    "Attempt %d/%d failed for %s: %s",
                    attempt, self.max_retries, token.symbol, e,
                )
            else:
                if price is not None:
                    return price
                logger.warning(
                    "Attempt %d/%d: Price not found for %s.",
                    attempt, self.max_retries, token.symbol,
                )

            if attempt < self.max_retries:
                await asyncio.sleep(self.base_delay * (attempt + 1))

        raise PriceFetchFailed(token.symbol)
