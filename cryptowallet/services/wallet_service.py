"""Wallet operations: creation, lookup, holdings and evaluation."""
import dataclasses
import logging
import uuid
from datetime import date

from ..errors import NoEvaluationData, WalletAlreadyExists, WalletEmpty, WalletNotFound
from ..interfaces.stores import TokenStore, WalletStore
from ..models import (
    AssetValuation,
    EvaluationResult,
    Holding,
    PricedAsset,
    Wallet,
    WalletSummary,
)
from .evaluator import HistoricalEvaluator
from .token_service import TokenService

logger = logging.getLogger(__name__)


class WalletService:
    def __init__(
        self,
        wallets: WalletStore,
        tokens: TokenStore,
        token_service: TokenService,
        evaluator: HistoricalEvaluator,
    ) -> None:
        self._wallets = wallets
        self._tokens = tokens
        self._token_service = token_service
        self._evaluator = evaluator

    # ------------------------------------------------------------------
    # Wallets
    # ------------------------------------------------------------------

    async def create_wallet(self, email: str) -> WalletSummary:
        """Create an empty wallet; one wallet per email."""
        if await self._wallets.exists_by_email(email):
            raise WalletAlreadyExists(email)

        wallet = Wallet(email=email)
        await self._wallets.save(wallet)
        logger.info("Created wallet %s for %s", wallet.id, email)
        return await self._summarize(wallet)

    async def get_wallet(self, wallet_id: uuid.UUID) -> WalletSummary:
        return await self._summarize(await self._require(wallet_id))

    async def get_wallet_by_email(self, email: str) -> WalletSummary:
        wallet = await self._wallets.get_by_email(email)
        if wallet is None:
            raise WalletNotFound(email)
        return await self._summarize(wallet)

    async def _require(self, wallet_id: uuid.UUID) -> Wallet:
        wallet = await self._wallets.get(wallet_id)
        if wallet is None:
            raise WalletNotFound()
        return wallet

    async def _summarize(self, wallet: Wallet) -> WalletSummary:
        assets: list[AssetValuation] = []
        for holding in wallet.holdings:
            token = await self._tokens.get_by_symbol(holding.symbol)
            price = token.price if token is not None and token.price is not None else 0.0
            assets.append(
                AssetValuation(
                    symbol=holding.symbol,
                    quantity=holding.quantity,
                    price=price,
                    value=holding.quantity * price,
                )
            )
        return WalletSummary(
            id=wallet.id,
            email=wallet.email,
            total=sum(a.value for a in assets),
            assets=tuple(assets),
        )

    # ------------------------------------------------------------------
    # Holdings
    # ------------------------------------------------------------------

    async def add_asset(
        self, wallet_id: uuid.UUID, symbol: str, quantity: float
    ) -> AssetValuation:
        return await self._add_holding(await self._require(wallet_id), symbol, quantity)

    async def add_asset_by_email(
        self, email: str, symbol: str, quantity: float
    ) -> AssetValuation:
        wallet = await self._wallets.get_by_email(email)
        if wallet is None:
            raise WalletNotFound(email)
        return await self._add_holding(wallet, symbol, quantity)

    async def _add_holding(
        self, wallet: Wallet, symbol: str, quantity: float
    ) -> AssetValuation:
        """Add ``quantity`` of ``symbol``; an existing holding is topped up."""
        if quantity <= 0:
            raise ValueError("Quantity must be positive")

        token = await self._token_service.get_token(symbol)

        holdings = list(wallet.holdings)
        for i, holding in enumerate(holdings):
            if holding.symbol == token.symbol:
                holdings[i] = Holding(token.symbol, holding.quantity + quantity)
                break
        else:
            holdings.append(Holding(token.symbol, quantity))

        await self._wallets.save(dataclasses.replace(wallet, holdings=tuple(holdings)))

        price = token.price or 0.0
        return AssetValuation(
            symbol=token.symbol, quantity=quantity, price=price, value=quantity * price
        )

    # ------------------------------------------------------------------
    # Evaluation
    # ------------------------------------------------------------------

    async def evaluate_wallet(self, wallet_id: uuid.UUID, on_date: date) -> EvaluationResult:
        """Value a stored wallet as of ``on_date`` against its tokens' live prices."""
        wallet = await self._require(wallet_id)
        if not wallet.holdings:
            raise WalletEmpty()

        tokens = await self._tokens.get_many_by_symbol([h.symbol for h in wallet.holdings])
        by_symbol = {token.symbol: token for token in tokens}

        assets: list[PricedAsset] = []
        for holding in wallet.holdings:
            token = by_symbol.get(holding.symbol)
            if token is None or token.price is None:
                logger.warning("No current price for %s, leaving it out", holding.symbol)
                continue
            assets.append(PricedAsset.from_holding(holding, token))

        return await self._evaluate(assets, on_date)

    async def evaluate_assets(
        self, valuations: list[AssetValuation], on_date: date
    ) -> EvaluationResult:
        """Value an ad-hoc asset list; unit prices are derived as value/quantity."""
        if not valuations:
            raise WalletEmpty()

        symbol_ids = await self._token_service.resolve_symbols(
            [v.symbol for v in valuations]
        )

        assets: list[PricedAsset] = []
        for valuation in valuations:
            symbol = valuation.symbol.upper()
            provider_id = symbol_ids.get(symbol)
            if provider_id is None:
                logger.warning("Unknown symbol %s, leaving it out", symbol)
                continue
            assets.append(
                PricedAsset.from_valuation(
                    symbol, valuation.quantity, valuation.value, provider_id
                )
            )

        return await self._evaluate(assets, on_date)

    async def _evaluate(self, assets: list[PricedAsset], on_date: date) -> EvaluationResult:
        result = await self._evaluator.evaluate(assets, on_date)
        if result is None:
            raise NoEvaluationData()
        return result
