"""Shared running state of one historical evaluation."""
from __future__ import annotations

import asyncio
import math

from ..models import EvaluationResult, round_half_up


class EvaluationAggregate:
    """Total value and best/worst performer, folded in under a single lock.

    Ties never replace the incumbent: among assets with equal performance
    the one recorded first wins, which under concurrency means whichever
    task reached the lock first.
    """

    def __init__(self) -> None:
        self._lock = asyncio.Lock()
        self.total_value = 0.0
        self.best_symbol: str | None = None
        self.best_performance = -math.inf
        self.worst_symbol: str | None = None
        self.worst_performance = math.inf

    async def record(
        self, symbol: str, quantity: float, current_unit_price: float, past_price: float
    ) -> None:
        """Fold one asset's past price into the aggregate."""
        async with self._lock:
            self.total_value += quantity * past_price

            # A non-positive past price has no meaningful percentage change.
            if past_price <= 0:
                return

            performance = (current_unit_price - past_price) / past_price * 100.0
            if performance > self.best_performance:
                self.best_performance = performance
                self.best_symbol = symbol
            if performance < self.worst_performance:
                self.worst_performance = performance
                self.worst_symbol = symbol

    @property
    def empty(self) -> bool:
        return self.best_performance == -math.inf

    def finalize(self) -> EvaluationResult | None:
        """Return the rounded result, or None when no asset had usable data."""
        if self.empty:
            return None
        return EvaluationResult(
            total=self.total_value,
            best_symbol=self.best_symbol or "",
            best_performance=round_half_up(self.best_performance, 2),
            worst_symbol=self.worst_symbol or "",
            worst_performance=round_half_up(self.worst_performance, 2),
        )
