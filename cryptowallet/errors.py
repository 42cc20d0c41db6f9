"""Exception types raised by the wallet and price services."""


class CryptoWalletError(Exception):
    """Base class for every error this package raises on purpose."""


class ProviderError(CryptoWalletError):
    """Transient failure talking to the price provider."""


class PriceFetchFailed(CryptoWalletError):
    """No price could be obtained for a token after all retries."""

    def __init__(self, symbol: str) -> None:
        super().__init__(f"Failed to fetch price for {symbol}.")
        self.symbol = symbol


class TokenNotFound(CryptoWalletError):
    def __init__(self, symbol: str) -> None:
        super().__init__(f"Could not fetch token details for {symbol}!")
        self.symbol = symbol


class WalletNotFound(CryptoWalletError):
    def __init__(self, key: str = "") -> None:
        message = f"Wallet not found for {key}!" if key else "Wallet not found!"
        super().__init__(message)


class WalletAlreadyExists(CryptoWalletError):
    def __init__(self, email: str) -> None:
        super().__init__(f"A wallet already exists for the email: {email}!")
        self.email = email


class WalletEmpty(CryptoWalletError):
    def __init__(self) -> None:
        super().__init__("Wallet is empty!")


class NoEvaluationData(CryptoWalletError):
    def __init__(self) -> None:
        super().__init__("No results to show!")
