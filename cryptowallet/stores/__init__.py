"""Store implementations."""
from .memory import InMemoryTokenStore, InMemoryWalletStore

__all__ = ["InMemoryTokenStore", "InMemoryWalletStore"]
