"""Configuration loader: reads config.yaml and validates it."""
from __future__ import annotations

import logging
import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Frozen config dataclasses
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ProviderConfig:
    base_url: str = "https://api.coincap.io/v2/assets"
    timeout_seconds: int = 30
    api_key: str = ""


@dataclass(frozen=True)
class PriceSyncConfig:
    update_interval_seconds: int = 60
    update_workers: int = 3
    max_retries: int = 3
    retry_delay_seconds: float = 1.0


@dataclass(frozen=True)
class EvaluationConfig:
    workers: int = 10


@dataclass(frozen=True)
class AssetSeedConfig:
    symbol: str = ""
    quantity: float = 0.0


@dataclass(frozen=True)
class WalletSeedConfig:
    email: str = ""
    assets: tuple[AssetSeedConfig, ...] = ()


@dataclass(frozen=True)
class AppConfig:
    provider: ProviderConfig = field(default_factory=ProviderConfig)
    price_sync: PriceSyncConfig = field(default_factory=PriceSyncConfig)
    evaluation: EvaluationConfig = field(default_factory=EvaluationConfig)
    wallets: tuple[WalletSeedConfig, ...] = ()


# ---------------------------------------------------------------------------
# Env interpolation
# ---------------------------------------------------------------------------

_ENV_VAR_RE = re.compile(r"\$\{([^}]+)}")


def _interpolate_env(value: Any) -> Any:
    """Recursively replace ${VAR} references with environment variable values."""
    if isinstance(value, str):
        return _ENV_VAR_RE.sub(lambda m: os.environ.get(m.group(1), ""), value)
    if isinstance(value, dict):
        return {k: _interpolate_env(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_interpolate_env(item) for item in value]
    return value


# ---------------------------------------------------------------------------
# YAML → dataclass builders
# ---------------------------------------------------------------------------


def _build_provider(raw: dict[str, Any]) -> ProviderConfig:
    return ProviderConfig(
        base_url=str(raw.get("base_url", ProviderConfig.base_url)).rstrip("/"),
        timeout_seconds=int(raw.get("timeout_seconds", 30)),
        api_key=raw.get("api_key", "") or "",
    )


def _build_price_sync(raw: dict[str, Any]) -> PriceSyncConfig:
    return PriceSyncConfig(
        update_interval_seconds=int(raw.get("update_interval_seconds", 60)),
        update_workers=int(raw.get("update_workers", 3)),
        max_retries=int(raw.get("max_retries", 3)),
        retry_delay_seconds=float(raw.get("retry_delay_seconds", 1.0)),
    )


def _build_evaluation(raw: dict[str, Any]) -> EvaluationConfig:
    return EvaluationConfig(workers=int(raw.get("workers", 10)))


def _build_wallets(raw: list[dict[str, Any]]) -> tuple[WalletSeedConfig, ...]:
    wallets: list[WalletSeedConfig] = []
    for w in raw:
        assets = tuple(
            AssetSeedConfig(
                symbol=str(a.get("symbol", "")).upper(),
                quantity=float(a.get("quantity", 0.0)),
            )
            for a in w.get("assets", [])
        )
        wallets.append(WalletSeedConfig(email=w.get("email", ""), assets=assets))
    return tuple(wallets)


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def load_config(config_path: str | Path | None = None) -> AppConfig:
    """Load and validate application configuration from YAML + .env.

    Args:
        config_path: Path to config.yaml. Defaults to ``config.yaml`` in the
            project root (two levels up from this file).
    """
    load_dotenv()

    if config_path is None:
        config_path = Path(__file__).resolve().parent.parent / "config.yaml"
    config_path = Path(config_path)

    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path) as f:
        raw = yaml.safe_load(f) or {}

    raw = _interpolate_env(raw)

    cfg = AppConfig(
        provider=_build_provider(raw.get("provider", {})),
        price_sync=_build_price_sync(raw.get("price_sync", {})),
        evaluation=_build_evaluation(raw.get("evaluation", {})),
        wallets=_build_wallets(raw.get("wallets", [])),
    )

    _validate(cfg)
    logger.info("Configuration loaded from %s", config_path)
    return cfg


def _validate(cfg: AppConfig) -> None:
    """Raise on invalid configuration."""
    if not cfg.provider.base_url:
        raise ValueError("Provider base_url must be set")

    sync = cfg.price_sync
    if sync.update_workers < 1:
        raise ValueError("price_sync.update_workers must be at least 1")
    if sync.max_retries < 0:
        raise ValueError("price_sync.max_retries cannot be negative")
    if sync.retry_delay_seconds < 0:
        raise ValueError("price_sync.retry_delay_seconds cannot be negative")
    if sync.update_interval_seconds <= 0:
        raise ValueError("price_sync.update_interval_seconds must be positive")

    if cfg.evaluation.workers < 1:
        raise ValueError("evaluation.workers must be at least 1")

    seen: set[str] = set()
    for wallet in cfg.wallets:
        if not wallet.email:
            raise ValueError("Wallet has no email")
        if wallet.email in seen:
            raise ValueError(f"Wallet '{wallet.email}' is configured twice")
        seen.add(wallet.email)
        for asset in wallet.assets:
            if not asset.symbol:
                raise ValueError(f"Wallet '{wallet.email}' has an asset with no symbol")
            if asset.quantity <= 0:
                raise ValueError(
                    f"Wallet '{wallet.email}' asset '{asset.symbol}' has non-positive quantity"
                )
