"""Unit tests for the retrying single-token price fetch."""
from __future__ import annotations

import asyncio
from unittest.mock import AsyncMock, patch

import pytest

from cryptowallet.errors import PriceFetchFailed, ProviderError
from cryptowallet.models import TrackedToken
from cryptowallet.services.fetcher import RetryingFetcher

TOKEN = TrackedToken(provider_id="bitcoin", symbol="BTC", price=1.0)


class TestRetryingFetcher:
    def test_negative_retries_rejected(self, fake_provider) -> None:
        with pytest.raises(ValueError):
            RetryingFetcher(fake_provider, max_retries=-1, base_delay=0.01)

    @pytest.mark.asyncio
    async def test_first_attempt_success(self, provider_factory) -> None:
        provider = provider_factory(current={"bitcoin": [50000.0]})
        fetcher = RetryingFetcher(provider, max_retries=2, base_delay=0.01)

        assert await fetcher.fetch_price(TOKEN) == 50000.0
        assert provider.current_calls == ["bitcoin"]

    @pytest.mark.asyncio
    async def test_fails_twice_then_succeeds(self, provider_factory) -> None:
        provider = provider_factory(
            current={"bitcoin": [ProviderError("503"), None, 51000.0]}
        )
        fetcher = RetryingFetcher(provider, max_retries=2, base_delay=0.01)

        assert await fetcher.fetch_price(TOKEN) == 51000.0
        assert len(provider.current_calls) == 3

    @pytest.mark.asyncio
    async def test_always_failing_raises_after_all_attempts(self, provider_factory) -> None:
        provider = provider_factory(current={"bitcoin": [ProviderError("down")]})
        fetcher = RetryingFetcher(provider, max_retries=2, base_delay=0.01)

        with pytest.raises(PriceFetchFailed) as exc_info:
            await fetcher.fetch_price(TOKEN)

        assert exc_info.value.symbol == "BTC"
        assert len(provider.current_calls) == 3

    @pytest.mark.asyncio
    async def test_no_retries_means_single_attempt(self, provider_factory) -> None:
        provider = provider_factory(current={"bitcoin": [None]})
        fetcher = RetryingFetcher(provider, max_retries=0, base_delay=0.01)

        with pytest.raises(PriceFetchFailed):
            await fetcher.fetch_price(TOKEN)
        assert len(provider.current_calls) == 1

    @pytest.mark.asyncio
    async def test_linear_backoff(self, provider_factory) -> None:
        provider = provider_factory(current={"bitcoin": [None]})
        fetcher = RetryingFetcher(provider, max_retries=3, base_delay=0.5)

        with patch("cryptowallet.services.fetcher.asyncio.sleep", new=AsyncMock()) as sleep:
            with pytest.raises(PriceFetchFailed):
                await fetcher.fetch_price(TOKEN)

        assert [c.args[0] for c in sleep.await_args_list] == [0.5, 1.0, 1.5]

    @pytest.mark.asyncio
    async def test_unexpected_errors_propagate(self, provider_factory) -> None:
        provider = provider_factory(current={"bitcoin": [KeyError("bug")]})
        fetcher = RetryingFetcher(provider, max_retries=2, base_delay=0.01)

        with pytest.raises(KeyError):
            await fetcher.fetch_price(TOKEN)
        assert len(provider.current_calls) == 1

    @pytest.mark.asyncio
    async def test_cancel_during_backoff(self, provider_factory) -> None:
        provider = provider_factory(current={"bitcoin": [None]})
        fetcher = RetryingFetcher(provider, max_retries=5, base_delay=10.0)

        task = asyncio.create_task(fetcher.fetch_price(TOKEN))
        await asyncio.sleep(0.05)
        task.cancel()

        with pytest.raises(asyncio.CancelledError):
            await task
        assert len(provider.current_calls) == 1
