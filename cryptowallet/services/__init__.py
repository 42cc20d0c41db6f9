"""Service modules"""
from .aggregate import EvaluationAggregate
from .evaluator import HistoricalEvaluator, evaluation_window
from .fetcher import RetryingFetcher
from .pool import WorkerPool
from .scheduler import PriceUpdateScheduler
from .token_service import TokenService
from .updater import BulkPriceUpdater
from .wallet_service import WalletService

__all__ = [
    "BulkPriceUpdater",
    "EvaluationAggregate",
    "HistoricalEvaluator",
    "PriceUpdateScheduler",
    "RetryingFetcher",
    "TokenService",
    "WalletService",
    "WorkerPool",
    "evaluation_window",
]
