"""Data models: all frozen (immutable)."""
from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation


def parse_price(raw: str | float | None) -> float | None:
    """Parse a provider price string; missing or malformed values become None."""
    if raw is None:
        return None
    try:
        value = float(raw)
    except (TypeError, ValueError):
        return None
    if value != value:  # NaN
        return None
    return value


def round_half_up(value: float, places: int = 2) -> float:
    """Round to ``places`` decimals, halves away from zero (10.005 -> 10.01).

    Works on the shortest repr of the float so that values such as 10.005,
    stored as 10.00499..., still round the way they read.
    Negative halves also go away from zero (-0.125 -> -0.13) rather than
    toward positive infinity.
    """
    try:
        quantum = Decimal(1).scaleb(-places)
        return float(Decimal(repr(value)).quantize(quantum, rounding=ROUND_HALF_UP))
    except InvalidOperation:
        return value


@dataclass(frozen=True)
class TrackedToken:
    """A token known to the system, identified by its provider id."""

    provider_id: str
    symbol: str
    price: float | None = None


@dataclass(frozen=True)
class Holding:
    """Quantity of a token held inside a wallet."""

    symbol: str
    quantity: float


@dataclass(frozen=True)
class Wallet:
    email: str
    holdings: tuple[Holding, ...] = ()
    id: uuid.UUID = field(default_factory=uuid.uuid4)


@dataclass(frozen=True)
class AssetValuation:
    """Single asset with its unit price and total value."""

    symbol: str
    quantity: float
    price: float
    value: float


@dataclass(frozen=True)
class WalletSummary:
    id: uuid.UUID
    email: str
    total: float
    assets: tuple[AssetValuation, ...] = ()


@dataclass(frozen=True)
class HistoricalPricePoint:
    price_usd: str | None
    timestamp_millis: int | None = None

    @property
    def price(self) -> float | None:
        return parse_price(self.price_usd)


@dataclass(frozen=True)
class PricedAsset:
    """Evaluation input: an asset with the unit price it is worth today."""

    symbol: str
    provider_id: str
    quantity: float
    current_unit_price: float

    @classmethod
    def from_holding(cls, holding: Holding, token: TrackedToken) -> PricedAsset:
        if token.price is None:
            raise ValueError(f"Token {token.symbol} has no price yet")
        return cls(
            symbol=holding.symbol,
            provider_id=token.provider_id,
            quantity=holding.quantity,
            current_unit_price=token.price,
        )

    @classmethod
    def from_valuation(
        cls, symbol: str, quantity: float, value: float, provider_id: str
    ) -> PricedAsset:
        if quantity == 0:
            raise ValueError(f"Asset {symbol} has zero quantity")
        return cls(
            symbol=symbol,
            provider_id=provider_id,
            quantity=quantity,
            current_unit_price=value / quantity,
        )


@dataclass(frozen=True)
class EvaluationResult:
    """Wallet value as of a past date plus best and worst performers."""

    total: float
    best_symbol: str
    best_performance: float
    worst_symbol: str
    worst_performance: float
