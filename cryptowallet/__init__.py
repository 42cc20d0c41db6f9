"""Crypto wallet tracker: token price synchronisation and historical evaluation."""
from .app import CryptoWalletApp
from .config import AppConfig, load_config

__all__ = ["AppConfig", "CryptoWalletApp", "load_config"]
