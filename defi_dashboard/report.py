"""Plain-text and JSON rendering of dashboard records."""
from __future__ import annotations

import json
from dataclasses import asdict, is_dataclass
from typing import Any

from .addresses import shorten
from .models import (
    AIInsights,
    AISummary,
    GasQuote,
    ILResult,
    LPPosition,
    PoolPosition,
    Portfolio,
    YieldOpportunity,
)


def to_json(obj: Any) -> str:
    """Serialise a record (or list of records) to indented JSON."""
    if isinstance(obj, list):
        payload: Any = [asdict(o) if is_dataclass(o) else o for o in obj]
    elif is_dataclass(obj):
        payload = asdict(obj)
    else:
        payload = obj
    return json.dumps(payload, indent=2)


def _usd(value: float) -> str:
    return f"${value:,.2f}"


def render_il(position: PoolPosition, result: ILResult) -> str:
    sign = "-" if result.impermanent_loss < 0 else "+"
    outcome = "Loss" if result.impermanent_loss < 0 else "Gain"
    return (
        f"📉 Impermanent Loss · {position.symbol_a}/{position.symbol_b}\n"
        f"\n"
        f"Initial Value: {_usd(result.initial_value)}\n"
        f"HODL Value:    {_usd(result.hodl_value)}\n"
        f"LP Value:      {_usd(result.lp_value)}\n"
        f"\n"
        f"{outcome} vs holding: {sign}{_usd(abs(result.impermanent_loss))} "
        f"({result.impermanent_loss_percent:.2f}%)\n"
        f"Fees needed to break even: {_usd(result.fees_needed)}\n"
        f"\n"
        f"Pool now holds {result.new_amount_a:,.6f} {position.symbol_a} "
        f"+ {result.new_amount_b:,.6f} {position.symbol_b}"
    )


def render_il_table(rows: list[tuple[float, float]]) -> str:
    lines = [f"{'Price Change':<16} {'IL %':>8}   {'Value vs HODL':>13}", "-" * 42]
    for ratio, il_percent in rows:
        change = f"{(ratio - 1) * 100:+.0f}%"
        lines.append(
            f"{change:<16} {il_percent:>+7.2f}%   {1 + il_percent / 100:>12.4f}x"
        )
    return "\n".join(lines)


def render_portfolio(portfolio: Portfolio) -> str:
    lines = [
        f"💼 {shorten(portfolio.address)} · {portfolio.chain.upper()}",
        "",
        f"Total Value: {_usd(portfolio.total_value)}",
        "",
    ]
    for t in portfolio.tokens:
        lines.append(
            f"  {t.symbol:<10} {t.balance:>18,.6f}  {_usd(t.value):>14}  {t.change_24h:+.2f}%"
        )
    if not portfolio.tokens:
        lines.append("  No tokens found.")
    return "\n".join(lines)


def render_gas(quote: GasQuote) -> str:
    lines = [f"⛽ Gas · {quote.chain.upper()}", ""]
    for tier in (quote.slow, quote.standard, quote.fast):
        lines.append(
            f"  {tier.label:<9} {tier.amount:>12,.2f} {tier.unit:<8} "
            f"${tier.usd:,.4f}  {tier.eta}"
        )
    return "\n".join(lines)


def render_yields(opportunities: list[YieldOpportunity]) -> str:
    if not opportunities:
        return "No yield opportunities match the filters."
    lines = [f"🌾 {len(opportunities)} opportunities", ""]
    for o in opportunities:
        flag = "★ " if o.featured else "  "
        lines.append(
            f"{flag}{o.protocol:<18} {o.asset:<18} {o.chain:<9} {o.type:<8} "
            f"{o.apy:>7.2f}%  TVL {_usd(o.tvl):>16}  {o.risk}"
        )
    avg = sum(o.apy for o in opportunities) / len(opportunities)
    lines += ["", f"Average APY: {avg:.2f}%"]
    return "\n".join(lines)


def render_lp_positions(positions: list[LPPosition]) -> str:
    if not positions:
        return "No active LP positions found."
    lines = []
    for p in positions:
        lines.append(
            f"  {p.protocol} · {p.pair:<14} {_usd(p.liquidity):>14}  "
            f"share {p.share:.6%}  APY {p.apy:.2f}%  {p.price_range}"
        )
    return "\n".join(lines)


def render_summary(summary: AISummary) -> str:
    lines = [
        f"🤖 Health Score: {summary.health_score}/100 · {summary.sentiment}",
        "",
    ]
    lines += [f"  • {insight}" for insight in summary.key_insights]
    lines += ["", f"Recommendation: {summary.top_recommendation}", "", summary.generated_at]
    return "\n".join(lines)


def render_insights(insights: AIInsights) -> str:
    return f"{insights.text}\n\n{insights.generated_at}"
