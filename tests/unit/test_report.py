"""Unit tests for text and JSON rendering."""
from __future__ import annotations

import json

from defi_dashboard.impermanent_loss import compute, impermanent_loss_table
from defi_dashboard.models import (
    AISummary,
    GasQuote,
    GasTier,
    LPPosition,
    PoolPosition,
    Portfolio,
    YieldOpportunity,
)
from defi_dashboard.report import (
    render_gas,
    render_il,
    render_il_table,
    render_lp_positions,
    render_portfolio,
    render_summary,
    render_yields,
    to_json,
)


class TestToJson:
    def test_dataclass(self, eth_usdc_position: PoolPosition) -> None:
        payload = json.loads(to_json(eth_usdc_position))
        assert payload["symbol_a"] == "ETH"

    def test_list(self, sample_portfolio: Portfolio) -> None:
        payload = json.loads(to_json(list(sample_portfolio.tokens)))
        assert [t["symbol"] for t in payload] == ["ETH", "USDC"]

    def test_plain(self) -> None:
        assert json.loads(to_json({"a": 1})) == {"a": 1}


class TestRenderIl:
    def test_loss(self, eth_usdc_position: PoolPosition) -> None:
        text = render_il(eth_usdc_position, compute(eth_usdc_position))
        assert "ETH/USDC" in text
        assert "Initial Value: $60,000.00" in text
        assert "HODL Value:    $66,000.00" in text
        assert "Loss vs holding: -$273.29 (-0.41%)" in text

    def test_table(self) -> None:
        text = render_il_table(impermanent_loss_table([0.5, 1.0, 2.0]))
        lines = text.splitlines()
        assert len(lines) == 5
        assert lines[2].startswith("-50%")
        assert "+0%" in lines[3]


class TestRenderPortfolio:
    def test_tokens(self, sample_portfolio: Portfolio) -> None:
        text = render_portfolio(sample_portfolio)
        assert "Total Value: $7,000.00" in text
        assert "ETHEREUM" in text
        assert "+2.50%" in text

    def test_empty(self) -> None:
        text = render_portfolio(Portfolio(address="x", chain="solana", total_value=0.0))
        assert "No tokens found." in text


class TestRenderGas:
    def test_tiers(self) -> None:
        def tier(label: str, amount: float) -> GasTier:
            return GasTier(label=label, amount=amount, unit="gwei", usd=1.0, eta="~2 min")

        text = render_gas(
            GasQuote(chain="ethereum", slow=tier("slow", 10), standard=tier("standard", 12),
                     fast=tier("fast", 15))
        )
        assert "slow" in text
        assert "15.00 gwei" in text


class TestRenderYields:
    def test_empty(self) -> None:
        assert render_yields([]) == "No yield opportunities match the filters."

    def test_average(self) -> None:
        items = [
            YieldOpportunity(id=str(apy), protocol="aave", chain="ethereum", asset="USDC",
                             type="Lending", apy=apy, tvl=1e9, risk="low")
            for apy in (4.0, 6.0)
        ]
        assert "Average APY: 5.00%" in render_yields(items)


class TestRenderLpPositions:
    def test_empty(self) -> None:
        assert render_lp_positions([]) == "No active LP positions found."

    def test_position(self) -> None:
        p = LPPosition(id="x", protocol="Uniswap V2", pair="WETH/USDC", liquidity=60000.0,
                       share=0.01, apy=1.0, chain="ethereum")
        assert "WETH/USDC" in render_lp_positions([p])


class TestRenderSummary:
    def test_summary(self) -> None:
        s = AISummary(health_score=80, sentiment="neutral", key_insights=("a", "b"),
                      top_recommendation="hold", generated_at="now")
        text = render_summary(s)
        assert "Health Score: 80/100" in text
        assert "Recommendation: hold" in text
