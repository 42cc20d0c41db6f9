"""In-process token and wallet stores."""
from __future__ import annotations

import logging
import uuid

from ..models import TrackedToken, Wallet

logger = logging.getLogger(__name__)


class InMemoryTokenStore:
    """Tokens keyed by their (unique) symbol."""

    def __init__(self, tokens: list[TrackedToken] | None = None) -> None:
        self._tokens: dict[str, TrackedToken] = {}
        for token in tokens or []:
            self._tokens[token.symbol] = token

    async def get_by_symbol(self, symbol: str) -> TrackedToken | None:
        return self._tokens.get(symbol)

    async def get_many_by_symbol(self, symbols: list[str]) -> list[TrackedToken]:
        return [self._tokens[s] for s in dict.fromkeys(symbols) if s in self._tokens]

    async def list_all(self) -> list[TrackedToken]:
        return list(self._tokens.values())

    async def save(self, token: TrackedToken) -> None:
        existing = self._tokens.get(token.symbol)
        if existing is not None and existing.provider_id != token.provider_id:
            raise ValueError(
                f"Symbol {token.symbol} already belongs to {existing.provider_id}"
            )
        self._tokens[token.symbol] = token

    async def save_all(self, tokens: list[TrackedToken]) -> None:
        for token in tokens:
            await self.save(token)


class InMemoryWalletStore:
    """Wallets keyed by id, with a unique email index."""

    def __init__(self) -> None:
        self._wallets: dict[uuid.UUID, Wallet] = {}
        self._by_email: dict[str, uuid.UUID] = {}

    async def get(self, wallet_id: uuid.UUID) -> Wallet | None:
        return self._wallets.get(wallet_id)

    async def get_by_email(self, email: str) -> Wallet | None:
        wallet_id = self._by_email.get(email)
        if wallet_id is None:
            return None
        return self._wallets.get(wallet_id)

    async def exists_by_email(self, email: str) -> bool:
        return email in self._by_email

    async def save(self, wallet: Wallet) -> None:
        owner = self._by_email.get(wallet.email)
        if owner is not None and owner != wallet.id:
            raise ValueError(f"Email {wallet.email} already has a wallet")
        self._wallets[wallet.id] = wallet
        self._by_email[wallet.email] = wallet.id
        logger.debug("Saved wallet %s (%d holdings)", wallet.email, len(wallet.holdings))
