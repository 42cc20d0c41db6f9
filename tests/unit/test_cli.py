"""Unit tests for CLI argument parsing."""
from __future__ import annotations

from datetime import date

import pytest

from cryptowallet.cli import build_parser, format_result
from cryptowallet.models import EvaluationResult


class TestBuildParser:
    def test_update_command(self) -> None:
        parser = build_parser()
        args = parser.parse_args(["update"])
        assert args.command == "update"

    def test_evaluate_command(self) -> None:
        parser = build_parser()
        args = parser.parse_args(["evaluate", "alice@example.com", "--date", "2024-03-01"])
        assert args.command == "evaluate"
        assert args.email == "alice@example.com"
        assert args.date == date(2024, 3, 1)

    def test_evaluate_requires_date(self) -> None:
        parser = build_parser()
        with pytest.raises(SystemExit):
            parser.parse_args(["evaluate", "alice@example.com"])

    def test_invalid_date_rejected(self) -> None:
        parser = build_parser()
        with pytest.raises(SystemExit):
            parser.parse_args(["evaluate", "a@b.c", "--date", "01/03/2024"])

    def test_evaluate_assets_command(self) -> None:
        parser = build_parser()
        args = parser.parse_args(
            ["evaluate-assets", "--date", "2024-03-01", "btc:0.5:25000", "ETH:10:30000"]
        )
        assert args.command == "evaluate-assets"
        assert [a.symbol for a in args.assets] == ["BTC", "ETH"]
        assert args.assets[0].quantity == 0.5
        assert args.assets[0].value == 25000.0
        assert args.assets[1].price == pytest.approx(3000.0)

    @pytest.mark.parametrize("raw", ["BTC", "BTC:1", "BTC:x:1", "BTC:0:100", ":1:100"])
    def test_malformed_asset_rejected(self, raw: str) -> None:
        parser = build_parser()
        with pytest.raises(SystemExit):
            parser.parse_args(["evaluate-assets", "--date", "2024-03-01", raw])

    def test_run_command_default_interval(self) -> None:
        parser = build_parser()
        args = parser.parse_args(["run"])
        assert args.command == "run"
        assert args.interval is None

    def test_run_command_custom_interval(self) -> None:
        parser = build_parser()
        args = parser.parse_args(["run", "30"])
        assert args.interval == 30

    @pytest.mark.parametrize("raw", ["0", "-5", "soon"])
    def test_run_interval_must_be_positive(self, raw: str) -> None:
        parser = build_parser()
        with pytest.raises(SystemExit):
            parser.parse_args(["run", raw])

    def test_config_flag(self) -> None:
        parser = build_parser()
        args = parser.parse_args(["--config", "/tmp/c.yaml", "update"])
        assert args.config == "/tmp/c.yaml"

    def test_log_level_flag(self) -> None:
        parser = build_parser()
        args = parser.parse_args(["--log-level", "DEBUG", "update"])
        assert args.log_level == "DEBUG"

    def test_no_command(self) -> None:
        parser = build_parser()
        args = parser.parse_args([])
        assert args.command is None


class TestFormatResult:
    def test_formats_signed_percentages(self) -> None:
        text = format_result(
            EvaluationResult(
                total=78000.0,
                best_symbol="BTC",
                best_performance=11.11,
                worst_symbol="ETH",
                worst_performance=-9.09,
            )
        )
        assert "Total: $78,000.00" in text
        assert "BTC (+11.11%)" in text
        assert "ETH (-9.09%)" in text
