"""Shared test fixtures and sample data."""
from __future__ import annotations

import asyncio
import textwrap
from datetime import datetime, timezone
from pathlib import Path

import pytest

from cryptowallet.config import (
    AppConfig,
    AssetSeedConfig,
    EvaluationConfig,
    PriceSyncConfig,
    ProviderConfig,
    WalletSeedConfig,
)
from cryptowallet.models import HistoricalPricePoint, PricedAsset, TrackedToken


# ---------------------------------------------------------------------------
# Fake provider
# ---------------------------------------------------------------------------


class FakePriceProvider:
    """In-process PriceProvider with scriptable responses.

    ``current`` maps provider id to a list of outcomes consumed one per call:
    a float, None (no price) or an exception instance to raise. The last
    outcome repeats once the list is exhausted.
    """

    def __init__(
        self,
        current: dict[str, list] | None = None,
        tokens: dict[str, TrackedToken] | None = None,
        history: dict[str, object] | None = None,
        delay: float = 0.0,
    ) -> None:
        self.current = current or {}
        self.tokens = tokens or {}
        self.history = history or {}
        self.delay = delay
        self.current_calls: list[str] = []
        self.search_calls: list[str] = []
        self.history_calls: list[tuple[str, int, int]] = []
        self.in_flight = 0
        self.max_in_flight = 0
        self.cancelled = 0

    async def _enter(self) -> None:
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        if self.delay:
            try:
                await asyncio.sleep(self.delay)
            except asyncio.CancelledError:
                self.in_flight -= 1
                self.cancelled += 1
                raise

    async def get_current_price(self, provider_id: str) -> float | None:
        self.current_calls.append(provider_id)
        await self._enter()
        try:
            outcomes = self.current.get(provider_id, [None])
            index = min(self.current_calls.count(provider_id) - 1, len(outcomes) - 1)
            outcome = outcomes[index]
            if isinstance(outcome, Exception):
                raise outcome
            return outcome
        finally:
            self.in_flight -= 1

    async def search_by_symbol(self, symbol: str) -> TrackedToken | None:
        self.search_calls.append(symbol)
        return self.tokens.get(symbol.upper())

    async def get_historical_price(
        self, provider_id: str, start_millis: int, end_millis: int
    ) -> HistoricalPricePoint | None:
        self.history_calls.append((provider_id, start_millis, end_millis))
        await self._enter()
        try:
            outcome = self.history.get(provider_id)
            if isinstance(outcome, Exception):
                raise outcome
            if outcome is None:
                return None
            return HistoricalPricePoint(price_usd=str(outcome), timestamp_millis=start_millis)
        finally:
            self.in_flight -= 1


@pytest.fixture()
def fake_provider() -> FakePriceProvider:
    return FakePriceProvider()


@pytest.fixture()
def fixed_clock():
    return lambda: datetime(2026, 10, 16, 14, 37, 52, tzinfo=timezone.utc)


# ---------------------------------------------------------------------------
# Config fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def sample_provider_config() -> ProviderConfig:
    return ProviderConfig(
        base_url="https://api.example.com/v2/assets",
        timeout_seconds=5,
        api_key="",
    )


@pytest.fixture()
def sample_app_config(sample_provider_config: ProviderConfig) -> AppConfig:
    return AppConfig(
        provider=sample_provider_config,
        price_sync=PriceSyncConfig(
            update_interval_seconds=60,
            update_workers=3,
            max_retries=2,
            retry_delay_seconds=0.01,
        ),
        evaluation=EvaluationConfig(workers=4),
        wallets=(
            WalletSeedConfig(
                email="alice@example.com",
                assets=(
                    AssetSeedConfig(symbol="BTC", quantity=1.0),
                    AssetSeedConfig(symbol="ETH", quantity=10.0),
                ),
            ),
        ),
    )


# ---------------------------------------------------------------------------
# Model fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def btc() -> TrackedToken:
    return TrackedToken(provider_id="bitcoin", symbol="BTC", price=50000.0)


@pytest.fixture()
def eth() -> TrackedToken:
    return TrackedToken(provider_id="ethereum", symbol="ETH", price=3000.0)


@pytest.fixture()
def sample_assets() -> list[PricedAsset]:
    return [
        PricedAsset(symbol="BTC", provider_id="bitcoin", quantity=1.0, current_unit_price=50000.0),
        PricedAsset(symbol="ETH", provider_id="ethereum", quantity=10.0, current_unit_price=3000.0),
    ]


# ---------------------------------------------------------------------------
# Config YAML fixture
# ---------------------------------------------------------------------------

SAMPLE_YAML = textwrap.dedent("""\
    provider:
      base_url: "https://api.example.com/v2/assets/"
      timeout_seconds: 5
      api_key: "key-123"
    price_sync:
      update_interval_seconds: 30
      update_workers: 2
      max_retries: 4
      retry_delay_seconds: 0.5
    evaluation:
      workers: 6
    wallets:
      - email: alice@example.com
        assets:
          - {symbol: btc, quantity: 1.5}
          - {symbol: ETH, quantity: 10}
""")


@pytest.fixture()
def sample_yaml_path(tmp_path: Path) -> Path:
    cfg_file = tmp_path / "config.yaml"
    cfg_file.write_text(SAMPLE_YAML)
    return cfg_file


@pytest.fixture()
def provider_factory():
    """Build FakePriceProvider instances with custom scripts."""
    return FakePriceProvider
