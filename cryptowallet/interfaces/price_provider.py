"""Price provider protocol: remote price data abstraction."""
from typing import Protocol

from ..models import HistoricalPricePoint, TrackedToken


class PriceProvider(Protocol):
    """Abstract interface for current and historical token prices.

    ``get_current_price`` and ``get_historical_price`` raise
    :class:`~cryptowallet.errors.ProviderError` on transient failures;
    ``search_by_symbol`` never raises.
    """

    async def get_current_price(self, provider_id: str) -> float | None: ...

    async def search_by_symbol(self, symbol: str) -> TrackedToken | None: ...

    async def get_historical_price(
        self, provider_id: str, start_millis: int, end_millis: int
    ) -> HistoricalPricePoint | None: ...
