"""Application wiring: builds every service from an AppConfig."""
from __future__ import annotations

import logging

from .config import AppConfig
from .errors import PriceFetchFailed, TokenNotFound, WalletAlreadyExists
from .interfaces.price_provider import PriceProvider
from .providers import CoinCapProvider
from .services import (
    BulkPriceUpdater,
    HistoricalEvaluator,
    PriceUpdateScheduler,
    RetryingFetcher,
    TokenService,
    WalletService,
    WorkerPool,
)
from .stores import InMemoryTokenStore, InMemoryWalletStore

logger = logging.getLogger(__name__)


class CryptoWalletApp:
    """Owns the provider, stores, worker pools and services.

    The two pools are independent; call :meth:`shutdown` (or use
    ``async with``) to release them.
    """

    def __init__(self, config: AppConfig, provider: PriceProvider | None = None) -> None:
        self._config = config
        sync = config.price_sync

        self.provider: PriceProvider = provider or CoinCapProvider(config.provider)
        self.token_store = InMemoryTokenStore()
        self.wallet_store = InMemoryWalletStore()

        self.update_pool = WorkerPool(sync.update_workers, name="price-update")
        self.evaluation_pool = WorkerPool(config.evaluation.workers, name="evaluation")

        self.fetcher = RetryingFetcher(
            self.provider, sync.max_retries, sync.retry_delay_seconds
        )
        self.updater = BulkPriceUpdater(self.fetcher, self.token_store, self.update_pool)
        self.evaluator = HistoricalEvaluator(self.provider, self.evaluation_pool)

        self.tokens = TokenService(
            self.token_store, self.provider, self.fetcher, self.updater
        )
        self.wallets = WalletService(
            self.wallet_store, self.token_store, self.tokens, self.evaluator
        )
        self.scheduler = PriceUpdateScheduler(self.tokens, sync.update_interval_seconds)

    async def seed_wallets(self) -> None:
        """Create the configured wallets and their holdings."""
        for wallet_cfg in self._config.wallets:
            try:
                await self.wallets.create_wallet(wallet_cfg.email)
            except WalletAlreadyExists:
                logger.debug("Wallet %s already exists", wallet_cfg.email)
                continue

            for asset in wallet_cfg.assets:
                try:
                    await self.wallets.add_asset_by_email(
                        wallet_cfg.email, asset.symbol, asset.quantity
                    )
                except (TokenNotFound, PriceFetchFailed) as e:
                    logger.error(
                        "Skipping %s for wallet %s: %s", asset.symbol, wallet_cfg.email, e
                    )

    async def shutdown(self) -> None:
        await self.update_pool.shutdown()
        await self.evaluation_pool.shutdown()
        logger.info("Worker pools shut down")

    async def __aenter__(self) -> CryptoWalletApp:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.shutdown()
