"""Token lookup, symbol resolution and the bulk price update entry point."""
import dataclasses
import logging

from ..errors import TokenNotFound
from ..interfaces.price_provider import PriceProvider
from ..interfaces.stores import TokenStore
from ..models import TrackedToken
from .fetcher import RetryingFetcher
from .updater import BulkPriceUpdater

logger = logging.getLogger(__name__)


class TokenService:
    """Keep tracked tokens and their prices current."""

    def __init__(
        self,
        store: TokenStore,
        provider: PriceProvider,
        fetcher: RetryingFetcher,
        updater: BulkPriceUpdater,
    ) -> None:
        self._store = store
        self._provider = provider
        self._fetcher = fetcher
        self._updater = updater

    async def update_all_token_prices(self) -> None:
        """Refresh the price of every stored token."""
        logger.info("Starting token price update...")
        tokens = await self._store.list_all()
        if not tokens:
            logger.warning("No tokens found. Skipping update.")
            return

        await self._updater.update_all(tokens)
        logger.info("Completed scheduled token price update!")

    async def get_token(self, symbol: str) -> TrackedToken:
        """Return the token for ``symbol`` with an up-to-date price.

        A stored token has its price refreshed (raising
        :class:`~cryptowallet.errors.PriceFetchFailed` if that fails); an
        unknown symbol is looked up at the provider and stored, or
        :class:`TokenNotFound` is raised.
        """
        symbol = symbol.upper()
        token = await self._store.get_by_symbol(symbol)
        if token is None:
            return await self._fetch_and_save(symbol)

        price = await self._fetcher.fetch_price(token)
        token = dataclasses.replace(token, price=price)
        await self._store.save(token)
        return token

    async def _fetch_and_save(self, symbol: str) -> TrackedToken:
        token = await self._provider.search_by_symbol(symbol)
        if token is None:
            raise TokenNotFound(symbol)
        await self._store.save(token)
        logger.info("Tracking new token %s (%s)", token.symbol, token.provider_id)
        return token

    async def resolve_symbols(self, symbols: list[str]) -> dict[str, str]:
        """Map each symbol to its provider id, fetching unknown ones first.

        Symbols the provider does not know are logged and left out.
        """
        wanted = list(dict.fromkeys(s.upper() for s in symbols))
        stored = await self._store.get_many_by_symbol(wanted)
        symbol_ids = {token.symbol: token.provider_id for token in stored}

        missing = [s for s in wanted if s not in symbol_ids]
        fetched: list[TrackedToken] = []
        for symbol in missing:
            token = await self._provider.search_by_symbol(symbol)
            if token is None:
                logger.warning("Could not resolve symbol %s", symbol)
                continue
            fetched.append(token)
            symbol_ids[token.symbol] = token.provider_id

        if fetched:
            await self._store.save_all(fetched)
        return symbol_ids
