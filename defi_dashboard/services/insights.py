"""LLM-generated portfolio summaries and insights."""
from __future__ import annotations

import json
import logging
import re
from datetime import datetime, timezone
from typing import Any

from ..interfaces.llm import LLMClient
from ..models import AIInsights, AISummary, Portfolio

logger = logging.getLogger(__name__)

SENTIMENTS = ("bullish", "neutral", "bearish")

SYSTEM_PROMPT = "You are a DeFi portfolio analyst."

SUMMARY_PROMPT = """\
Analyze this wallet and provide a concise summary:

Wallet: {address}
Portfolio Value: ${value:,.2f}

Provide a JSON response with:
1. healthScore (0-100): Overall portfolio health based on value, diversification, and risk
2. sentiment ("bullish", "neutral", or "bearish"): Market sentiment
3. keyInsights (array of 3 strings): Top 3 insights about the portfolio
4. topRecommendation (string): Single most important recommendation

Format your response as valid JSON only, no markdown or extra text."""

INSIGHTS_PROMPT = """\
Analyze the following wallet and provide insights:

Wallet Address: {address}
Total Portfolio Value: ${value:,.2f}
Number of Tokens: {token_count}
Chains: {chains}

Token Holdings:
{holdings}

Provide a comprehensive analysis including:
1. Portfolio Health Score (0-100) - Based on diversification, value distribution, and risk factors
2. Risk Assessment - Evaluate concentration risk and volatility exposure
3. Diversification Analysis - Assess token and chain distribution
4. Opportunities for Improvement - Identify gaps and optimization areas
5. Specific Actionable Recommendations - Provide 3-5 concrete next steps

Format your response in a clear, structured way with sections and bullet points."""

_CODE_FENCE_RE = re.compile(r"^```(?:json)?\s*|\s*```$")


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def parse_summary(text: str, generated_at: str) -> AISummary:
    """Parse the model's JSON reply into an AISummary.

    Raises:
        ValueError: the reply is not JSON or does not match the expected shape.
    """
    cleaned = _CODE_FENCE_RE.sub("", text.strip())
    try:
        raw: Any = json.loads(cleaned)
    except json.JSONDecodeError as e:
        raise ValueError(f"AI summary is not valid JSON: {e}") from e

    if not isinstance(raw, dict):
        raise ValueError("AI summary must be a JSON object")

    missing = [
        key for key in ("healthScore", "sentiment", "keyInsights", "topRecommendation")
        if key not in raw
    ]
    if missing:
        raise ValueError(f"AI summary is missing keys: {', '.join(missing)}")

    try:
        health_score = int(raw["healthScore"])
    except (TypeError, ValueError) as e:
        raise ValueError(f"healthScore must be a number: {raw['healthScore']!r}") from e
    if not 0 <= health_score <= 100:
        raise ValueError(f"healthScore out of range: {health_score}")

    sentiment = str(raw["sentiment"]).lower()
    if sentiment not in SENTIMENTS:
        raise ValueError(f"Unknown sentiment: {raw['sentiment']!r}")

    insights = raw["keyInsights"]
    if not isinstance(insights, list):
        raise ValueError("keyInsights must be a list")

    return AISummary(
        health_score=health_score,
        sentiment=sentiment,
        key_insights=tuple(str(i) for i in insights),
        top_recommendation=str(raw["topRecommendation"]),
        generated_at=generated_at,
    )


def format_holdings(portfolio: Portfolio | None) -> str:
    if portfolio is None or not portfolio.tokens:
        return "No tokens"
    return "\n".join(
        f"- {t.symbol}: {t.balance} (${t.value:.2f})" for t in portfolio.tokens
    )


class InsightsService:
    """Prompt an LLM about a wallet and shape the reply."""

    def __init__(self, llm: LLMClient) -> None:
        self._llm = llm

    async def summary(self, address: str, portfolio_value: float) -> AISummary:
        if not address:
            raise ValueError("Wallet address is required")

        logger.info("AI summary request for wallet: %s", address)
        prompt = SUMMARY_PROMPT.format(address=address, value=portfolio_value)
        text = await self._llm.generate(prompt, system=SYSTEM_PROMPT)

        summary = parse_summary(text, _now_iso())
        logger.info(
            "AI summary generated: health %d, %s", summary.health_score, summary.sentiment
        )
        return summary

    async def insights(self, address: str, portfolio: Portfolio | None = None) -> AIInsights:
        if not address:
            raise ValueError("Wallet address is required")

        logger.info("AI insights request for wallet: %s", address)
        prompt = INSIGHTS_PROMPT.format(
            address=address,
            value=portfolio.total_value if portfolio else 0.0,
            token_count=len(portfolio.tokens) if portfolio else 0,
            chains=portfolio.chain if portfolio else "Unknown",
            holdings=format_holdings(portfolio),
        )
        text = await self._llm.generate(prompt, system=SYSTEM_PROMPT)
        logger.info("AI insights generated successfully")
        return AIInsights(text=text, generated_at=_now_iso())
