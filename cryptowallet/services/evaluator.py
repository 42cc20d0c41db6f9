"""Concurrent historical evaluation of an asset list."""
from __future__ import annotations

import asyncio
import logging
from datetime import date, datetime, time, timedelta, timezone
from typing import Callable

from ..errors import ProviderError
from ..interfaces.price_provider import PriceProvider
from ..models import EvaluationResult, PricedAsset
from .aggregate import EvaluationAggregate
from .pool import WorkerPool

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def evaluation_window(on_date: date, now: datetime) -> tuple[int, int]:
    """Return ``(start, end)`` epoch millis for a one-minute window on ``on_date``.

    The window starts at ``now``'s UTC hour and minute (seconds zeroed) on
    the requested calendar day, so every evaluation compares against the
    same time of day.
    """
    now_utc = now.astimezone(timezone.utc)
    start = datetime.combine(
        on_date, time(now_utc.hour, now_utc.minute), tzinfo=timezone.utc
    )
    end = start + timedelta(minutes=1)
    return int(start.timestamp() * 1000), int(end.timestamp() * 1000)


class HistoricalEvaluator:
    """Value an asset list as of a past date and rank its performers.

    One job per asset fetches the historical price on ``pool``; results are
    folded into a fresh :class:`EvaluationAggregate` per call. Assets
    without a usable historical price are skipped.
    """

    def __init__(
        self,
        provider: PriceProvider,
        pool: WorkerPool,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._provider = provider
        self._pool = pool
        self._clock = clock

    async def evaluate(
        self, assets: list[PricedAsset], on_date: date
    ) -> EvaluationResult | None:
        aggregate = EvaluationAggregate()
        if not assets:
            return aggregate.finalize()

        start, end = evaluation_window(on_date, self._clock())
        logger.debug(
            "Evaluating %d assets for %s (window %d-%d)", len(assets), on_date, start, end
        )

        futures: list[asyncio.Future] = []
        try:
            for asset in assets:
                futures.append(
                    self._pool.submit(self._evaluate_asset, asset, start, end, aggregate)
                )
        except Exception as e:
            logger.error(
                "Unexpected error occurred while submitting historical price tasks: %s", e
            )

        # Every submitted job has settled before the aggregate is read.
        results = await asyncio.gather(*futures, return_exceptions=True)
        for asset, result in zip(assets, results):
            if isinstance(result, BaseException):
                logger.error(
                    "Historical price task for %s did not finish: %r", asset.symbol, result
                )

        return aggregate.finalize()

    async def _evaluate_asset(
        self, asset: PricedAsset, start: int, end: int, aggregate: EvaluationAggregate
    ) -> None:
        try:
            point = await self._provider.get_historical_price(asset.provider_id, start, end)
        except ProviderError as e:
            logger.error("HTTP error fetching historical price for %s: %s", asset.symbol, e)
            return
        except Exception as e:
            logger.error(
                "Unexpected error fetching historical price for %s: %s", asset.symbol, e
            )
            return

        if point is None:
            logger.debug("No historical price for %s", asset.symbol)
            return

        past_price = point.price
        if past_price is None:
            logger.warning(
                "Unparseable historical price for %s: %r", asset.symbol, point.price_usd
            )
            return

        await aggregate.record(
            asset.symbol, asset.quantity, asset.current_unit_price, past_price
        )
