"""CoinCap price provider: current, search and historical prices over REST."""
import asyncio
import logging
import ssl
from typing import Any

import aiohttp
import certifi

from ..config import ProviderConfig
from ..errors import ProviderError
from ..models import HistoricalPricePoint, TrackedToken, parse_price

logger = logging.getLogger(__name__)

# Smallest interval the history endpoint accepts.
HISTORY_INTERVAL = "m1"


class CoinCapProvider:
    """Fetch token prices from a CoinCap-compatible ``/assets`` API."""

    def __init__(self, config: ProviderConfig) -> None:
        self.assets_url = config.base_url.rstrip("/")
        self.timeout = config.timeout_seconds
        self.api_key = config.api_key

    def _headers(self) -> dict[str, str]:
        headers = {"Accept": "application/json"}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"
        return headers

    async def _get_json(self, url: str, params: dict[str, str] | None = None) -> Any:
        """GET ``url`` and return the decoded body; raise ProviderError otherwise."""
        ssl_context = ssl.create_default_context(cafile=certifi.where())
        connector = aiohttp.TCPConnector(ssl=ssl_context)

        try:
            async with aiohttp.ClientSession(connector=connector) as session:
                async with session.get(
                    url,
                    params=params,
                    headers=self._headers(),
                    timeout=aiohttp.ClientTimeout(total=self.timeout),
                ) as response:
                    if response.status != 200:
                        raise ProviderError(f"HTTP {response.status} from {url}")
                    return await response.json()
        except ProviderError:
            raise
        except (aiohttp.ClientError, asyncio.TimeoutError, OSError, ValueError) as e:
            raise ProviderError(f"Request to {url} failed: {e}") from e

    async def get_current_price(self, provider_id: str) -> float | None:
        """Latest USD price for ``provider_id``; None when the provider has none."""
        url = f"{self.assets_url}/{provider_id.lower()}"
        try:
            body = await self._get_json(url)
        except ProviderError as e:
            logger.error("HTTP error fetching price for %s: %s", provider_id, e)
            raise

        data = body.get("data") if isinstance(body, dict) else None
        if not isinstance(data, dict):
            return None

        price = parse_price(data.get("priceUsd"))
        if price is None:
            logger.error(
                "Failed to parse price for %s: %r", provider_id, data.get("priceUsd")
            )
        return price

    async def search_by_symbol(self, symbol: str) -> TrackedToken | None:
        """Exact-symbol lookup. Errors are logged and reported as no match."""
        params = {"search": symbol.upper(), "limit": "1"}
        try:
            body = await self._get_json(self.assets_url, params=params)
        except ProviderError as e:
            logger.error("HTTP error fetching details for %s: %s", symbol, e)
            return None

        entries = body.get("data") if isinstance(body, dict) else None
        if not entries:
            logger.warning("No token found for symbol %s", symbol)
            return None

        entry = entries[0]
        if not isinstance(entry, dict) or not entry.get("id"):
            logger.error("Malformed search result for %s: %r", symbol, entry)
            return None
        if str(entry.get("symbol", "")).upper() != symbol.upper():
            logger.warning(
                "Search for %s returned %s, not an exact match", symbol, entry.get("symbol")
            )
            return None

        price = parse_price(entry.get("priceUsd"))
        if price is None:
            logger.error("Invalid price format for %s: %r", symbol, entry.get("priceUsd"))
            return None

        return TrackedToken(provider_id=entry["id"], symbol=symbol.upper(), price=price)

    async def get_historical_price(
        self, provider_id: str, start_millis: int, end_millis: int
    ) -> HistoricalPricePoint | None:
        """First price point in ``[start_millis, end_millis)``, or None."""
        url = f"{self.assets_url}/{provider_id.lower()}/history"
        params = {
            "interval": HISTORY_INTERVAL,
            "start": str(start_millis),
            "end": str(end_millis),
        }
        body = await self._get_json(url, params=params)

        points = body.get("data") if isinstance(body, dict) else None
        if not points:
            return None

        first = points[0]
        return HistoricalPricePoint(
            price_usd=first.get("priceUsd"), timestamp_millis=first.get("time")
        )
