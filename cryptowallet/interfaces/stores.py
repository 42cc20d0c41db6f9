"""Store protocols: token and wallet persistence abstraction."""
import uuid
from typing import Protocol

from ..models import TrackedToken, Wallet


class TokenStore(Protocol):
    async def get_by_symbol(self, symbol: str) -> TrackedToken | None: ...

    async def get_many_by_symbol(self, symbols: list[str]) -> list[TrackedToken]: ...

    async def list_all(self) -> list[TrackedToken]: ...

    async def save(self, token: TrackedToken) -> None: ...

    async def save_all(self, tokens: list[TrackedToken]) -> None: ...


class WalletStore(Protocol):
    async def get(self, wallet_id: uuid.UUID) -> Wallet | None: ...

    async def get_by_email(self, email: str) -> Wallet | None: ...

    async def exists_by_email(self, email: str) -> bool: ...

    async def save(self, wallet: Wallet) -> None: ...
