"""Protocol interfaces for the wallet tracker."""
from .price_provider import PriceProvider
from .stores import TokenStore, WalletStore

__all__ = ["PriceProvider", "TokenStore", "WalletStore"]
