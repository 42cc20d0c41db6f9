"""Command-line interface for the crypto wallet tracker."""
from __future__ import annotations

import argparse
import asyncio
import sys
from datetime import date

from .app import CryptoWalletApp
from .config import load_config
from .errors import CryptoWalletError
from .logging_setup import configure_logging
from .models import AssetValuation, EvaluationResult


def _parse_date(value: str) -> date:
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"Invalid date '{value}', expected YYYY-MM-DD")


def _parse_asset(value: str) -> AssetValuation:
    """Parse ``SYMBOL:QUANTITY:VALUE``."""
    parts = value.split(":")
    if len(parts) != 3:
        raise argparse.ArgumentTypeError(
            f"Invalid asset '{value}', expected SYMBOL:QUANTITY:VALUE"
        )
    symbol, quantity_raw, value_raw = parts
    try:
        quantity = float(quantity_raw)
        total = float(value_raw)
    except ValueError:
        raise argparse.ArgumentTypeError(f"Invalid numbers in asset '{value}'")
    if not symbol or quantity <= 0:
        raise argparse.ArgumentTypeError(
            f"Asset '{value}' needs a symbol and a positive quantity"
        )
    price = total / quantity
    return AssetValuation(symbol=symbol.upper(), quantity=quantity, price=price, value=total)


def _parse_interval(value: str) -> int:
    try:
        seconds = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"Invalid interval '{value}'")
    if seconds <= 0:
        raise argparse.ArgumentTypeError("Interval must be a positive number of seconds")
    return seconds


def build_parser() -> argparse.ArgumentParser:
    """Build the argparse CLI parser."""
    parser = argparse.ArgumentParser(
        prog="cryptowallet",
        description="Crypto wallet price tracker and evaluator",
    )
    parser.add_argument(
        "--config",
        default=None,
        help="Path to config.yaml (default: config.yaml in project root)",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: INFO)",
    )

    sub = parser.add_subparsers(dest="command")

    sub.add_parser("update", help="Refresh all token prices once")

    evaluate_parser = sub.add_parser("evaluate", help="Evaluate a configured wallet")
    evaluate_parser.add_argument("email", help="Email of a wallet from the config")
    evaluate_parser.add_argument("--date", required=True, type=_parse_date)

    assets_parser = sub.add_parser("evaluate-assets", help="Evaluate an ad-hoc asset list")
    assets_parser.add_argument("--date", required=True, type=_parse_date)
    assets_parser.add_argument(
        "assets", nargs="+", type=_parse_asset, metavar="SYMBOL:QUANTITY:VALUE"
    )

    run_parser = sub.add_parser("run", help="Refresh token prices continuously")
    run_parser.add_argument(
        "interval",
        nargs="?",
        type=_parse_interval,
        default=None,
        help="Update interval in seconds (overrides config)",
    )

    return parser


def format_result(result: EvaluationResult) -> str:
    return (
        f"Total: ${result.total:,.2f}\n"
        f"Best:  {result.best_symbol} ({result.best_performance:+.2f}%)\n"
        f"Worst: {result.worst_symbol} ({result.worst_performance:+.2f}%)"
    )


async def _run(args: argparse.Namespace) -> None:
    """Execute the selected command."""
    configure_logging(args.log_level)
    config = load_config(args.config)

    async with CryptoWalletApp(config) as app:
        if args.command == "update":
            await app.seed_wallets()
            await app.tokens.update_all_token_prices()
            for token in await app.token_store.list_all():
                print(f"{token.symbol}: {token.price}")
        elif args.command == "evaluate":
            await app.seed_wallets()
            wallet = await app.wallets.get_wallet_by_email(args.email)
            result = await app.wallets.evaluate_wallet(wallet.id, args.date)
            print(format_result(result))
        elif args.command == "evaluate-assets":
            result = await app.wallets.evaluate_assets(args.assets, args.date)
            print(format_result(result))
        elif args.command == "run":
            await app.seed_wallets()
            await app.scheduler.run_forever(args.interval)
        else:
            build_parser().print_help()
            sys.exit(1)


def main() -> None:
    """Entry point."""
    parser = build_parser()
    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        sys.exit(1)

    try:
        asyncio.run(_run(args))
    except (CryptoWalletError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    except KeyboardInterrupt:
        pass
