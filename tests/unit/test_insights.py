"""Unit tests for LLM reply parsing and prompt building."""
from __future__ import annotations

import json
from unittest.mock import AsyncMock

import pytest

from defi_dashboard.models import Portfolio
from defi_dashboard.services.insights import (
    SYSTEM_PROMPT,
    InsightsService,
    format_holdings,
    parse_summary,
)

GENERATED_AT = "2026-01-01T00:00:00+00:00"


def _reply(**overrides) -> str:
    body = {
        "healthScore": 72,
        "sentiment": "Bullish",
        "keyInsights": ["Concentrated in ETH", "Stablecoin buffer", "Single chain"],
        "topRecommendation": "Diversify across chains",
    }
    body.update(overrides)
    return json.dumps(body)


class TestParseSummary:
    def test_valid(self) -> None:
        summary = parse_summary(_reply(), GENERATED_AT)
        assert summary.health_score == 72
        assert summary.sentiment == "bullish"
        assert len(summary.key_insights) == 3
        assert summary.top_recommendation == "Diversify across chains"
        assert summary.generated_at == GENERATED_AT

    def test_strips_code_fence(self) -> None:
        summary = parse_summary(f"```json\n{_reply()}\n```", GENERATED_AT)
        assert summary.health_score == 72

    def test_not_json(self) -> None:
        with pytest.raises(ValueError, match="not valid JSON"):
            parse_summary("The portfolio looks healthy.", GENERATED_AT)

    def test_not_object(self) -> None:
        with pytest.raises(ValueError, match="JSON object"):
            parse_summary("[1, 2, 3]", GENERATED_AT)

    def test_missing_keys(self) -> None:
        with pytest.raises(ValueError, match="topRecommendation"):
            parse_summary(json.dumps({"healthScore": 50, "sentiment": "neutral",
                                      "keyInsights": []}), GENERATED_AT)

    @pytest.mark.parametrize("score", [-1, 101, "high"])
    def test_bad_score(self, score) -> None:
        with pytest.raises(ValueError, match="healthScore"):
            parse_summary(_reply(healthScore=score), GENERATED_AT)

    def test_unknown_sentiment(self) -> None:
        with pytest.raises(ValueError, match="sentiment"):
            parse_summary(_reply(sentiment="euphoric"), GENERATED_AT)

    def test_insights_must_be_list(self) -> None:
        with pytest.raises(ValueError, match="keyInsights"):
            parse_summary(_reply(keyInsights="one insight"), GENERATED_AT)


class TestFormatHoldings:
    def test_tokens(self, sample_portfolio: Portfolio) -> None:
        text = format_holdings(sample_portfolio)
        assert "- ETH: 1.5 ($5000.00)" in text
        assert "- USDC: 2000.0 ($2000.00)" in text

    def test_empty(self) -> None:
        assert format_holdings(None) == "No tokens"


class TestInsightsService:
    @pytest.mark.asyncio
    async def test_summary(self, eth_address: str) -> None:
        llm = AsyncMock()
        llm.generate = AsyncMock(return_value=_reply())

        summary = await InsightsService(llm).summary(eth_address, 7000.0)

        assert summary.health_score == 72
        prompt = llm.generate.await_args.args[0]
        assert eth_address in prompt
        assert "$7,000.00" in prompt
        assert llm.generate.await_args.kwargs["system"] == SYSTEM_PROMPT

    @pytest.mark.asyncio
    async def test_insights_include_holdings(
        self, eth_address: str, sample_portfolio: Portfolio
    ) -> None:
        llm = AsyncMock()
        llm.generate = AsyncMock(return_value="## Risk\n- Concentrated")

        insights = await InsightsService(llm).insights(eth_address, sample_portfolio)

        assert insights.text == "## Risk\n- Concentrated"
        prompt = llm.generate.await_args.args[0]
        assert "Number of Tokens: 2" in prompt
        assert "- ETH: 1.5" in prompt

    @pytest.mark.asyncio
    async def test_empty_address_raises(self) -> None:
        llm = AsyncMock()
        with pytest.raises(ValueError, match="Wallet address is required"):
            await InsightsService(llm).summary("", 0.0)
        llm.generate.assert_not_called()
