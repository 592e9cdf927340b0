"""Unit tests for CLI argument parsing and command dispatch."""
from __future__ import annotations

import json
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from defi_dashboard.cli import build_parser, main
from defi_dashboard.models import Portfolio

IL_ARGS = ["il", "10", "30000", "--initial", "3000", "1", "--current", "3600", "1"]


class TestBuildParser:
    def test_il_command(self) -> None:
        args = build_parser().parse_args(IL_ARGS + ["--symbols", "ETH", "USDC"])
        assert args.command == "il"
        assert args.amount_a == 10.0
        assert args.initial == [3000.0, 1.0]
        assert args.current == [3600.0, 1.0]
        assert args.symbols == ["ETH", "USDC"]

    def test_il_default_symbols(self) -> None:
        args = build_parser().parse_args(IL_ARGS)
        assert args.symbols == ["A", "B"]

    def test_il_requires_prices(self) -> None:
        with pytest.raises(SystemExit):
            build_parser().parse_args(["il", "10", "30000"])

    def test_gas_command(self) -> None:
        args = build_parser().parse_args(["gas", "solana"])
        assert args.chain == "solana"

    def test_gas_rejects_unknown_chain(self) -> None:
        with pytest.raises(SystemExit):
            build_parser().parse_args(["gas", "bitcoin"])

    def test_yields_filters(self) -> None:
        args = build_parser().parse_args(
            ["yields", "--chain", "ethereum", "--risk", "low", "--type", "Lending", "--featured"]
        )
        assert args.chain == "ethereum"
        assert args.risk == "low"
        assert args.type == "Lending"
        assert args.featured is True

    def test_global_flags(self) -> None:
        args = build_parser().parse_args(
            ["--config", "/tmp/c.yaml", "--log-level", "DEBUG", "--json", "portfolio", "0xabc"]
        )
        assert args.config == "/tmp/c.yaml"
        assert args.log_level == "DEBUG"
        assert args.json is True
        assert args.address == "0xabc"

    def test_no_command(self) -> None:
        args = build_parser().parse_args([])
        assert args.command is None


class TestMain:
    def test_no_command_exits_1(self) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main([])
        assert exc_info.value.code == 1

    def test_il_text(self, capsys: pytest.CaptureFixture[str]) -> None:
        main(IL_ARGS + ["--symbols", "ETH", "USDC"])
        out = capsys.readouterr().out
        assert "ETH/USDC" in out
        assert "$66,000.00" in out
        assert "-0.41%" in out
        assert "Fees needed to break even" in out

    def test_il_json(self, capsys: pytest.CaptureFixture[str]) -> None:
        main(["--json"] + IL_ARGS)
        payload = json.loads(capsys.readouterr().out)
        assert payload["hodl_value"] == pytest.approx(66000.0)
        assert payload["impermanent_loss"] < 0

    def test_il_invalid_input_exits_2(self, capsys: pytest.CaptureFixture[str]) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main(["il", "0", "30000", "--initial", "3000", "1", "--current", "3600", "1"])
        assert exc_info.value.code == 2
        assert "amount_a" in capsys.readouterr().err

    def test_il_table(self, capsys: pytest.CaptureFixture[str]) -> None:
        main(["il-table"])
        out = capsys.readouterr().out
        assert "+100%" in out
        assert "-5.72%" in out

    def test_portfolio_dispatch(
        self, sample_portfolio: Portfolio, capsys: pytest.CaptureFixture[str]
    ) -> None:
        dashboard = MagicMock()
        dashboard.portfolio = AsyncMock(return_value=sample_portfolio)

        with (
            patch("defi_dashboard.cli.load_config", return_value=MagicMock()),
            patch("defi_dashboard.cli.Dashboard", return_value=dashboard),
        ):
            main(["portfolio", sample_portfolio.address])

        dashboard.portfolio.assert_awaited_once_with(sample_portfolio.address)
        assert "$7,000.00" in capsys.readouterr().out

    def test_provider_failure_exits_1(self, capsys: pytest.CaptureFixture[str]) -> None:
        dashboard = MagicMock()
        dashboard.gas = AsyncMock(side_effect=RuntimeError("All RPC endpoints failed"))

        with (
            patch("defi_dashboard.cli.load_config", return_value=MagicMock()),
            patch("defi_dashboard.cli.Dashboard", return_value=dashboard),
        ):
            with pytest.raises(SystemExit) as exc_info:
                main(["gas", "solana"])

        assert exc_info.value.code == 1
        assert "All RPC endpoints failed" in capsys.readouterr().err

    def test_missing_config_exits_1(self, tmp_path) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main(["--config", str(tmp_path / "missing.yaml"), "gas", "ethereum"])
        assert exc_info.value.code == 1
