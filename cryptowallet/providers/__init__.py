"""Price provider implementations."""
from .coincap import CoinCapProvider

__all__ = ["CoinCapProvider"]
