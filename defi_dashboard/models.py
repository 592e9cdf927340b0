"""Data models — all frozen (immutable)."""
from __future__ import annotations

from dataclasses import dataclass

# ---------------------------------------------------------------------------
# Impermanent loss
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class PoolPosition:
    """Two-asset deposit into a constant-product pool, with prices then and now."""

    amount_a: float
    amount_b: float
    initial_price_a: float
    initial_price_b: float
    current_price_a: float
    current_price_b: float
    symbol_a: str = "A"
    symbol_b: str = "B"

    def swapped(self) -> PoolPosition:
        """Return the same position with asset A and asset B relabeled."""
        return PoolPosition(
            amount_a=self.amount_b,
            amount_b=self.amount_a,
            initial_price_a=self.initial_price_b,
            initial_price_b=self.initial_price_a,
            current_price_a=self.current_price_b,
            current_price_b=self.current_price_a,
            symbol_a=self.symbol_b,
            symbol_b=self.symbol_a,
        )


@dataclass(frozen=True)
class ILResult:
    """Hold-vs-pool comparison for a PoolPosition (USD figures)."""

    initial_value: float
    hodl_value: float
    lp_value: float
    impermanent_loss: float
    impermanent_loss_percent: float
    fees_needed: float
    price_ratio_change: float = 1.0
    new_amount_a: float = 0.0
    new_amount_b: float = 0.0


# ---------------------------------------------------------------------------
# Wallet data
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class TokenBalance:
    """Single token holding within a wallet."""

    symbol: str
    name: str
    balance: float
    value: float
    change_24h: float
    chain: str
    logo: str = ""
    contract: str = ""


@dataclass(frozen=True)
class Portfolio:
    """All token holdings of one wallet on one chain."""

    address: str
    chain: str
    total_value: float
    tokens: tuple[TokenBalance, ...] = ()
    native_balance: float = 0.0
    network: str = ""


@dataclass(frozen=True)
class GasTier:
    """One speed tier of a gas quote. ``amount`` is in ``unit`` (gwei or lamports)."""

    label: str
    amount: float
    unit: str
    usd: float
    eta: str


@dataclass(frozen=True)
class GasQuote:
    chain: str
    slow: GasTier
    standard: GasTier
    fast: GasTier
    trend: str = "stable"
    change_24h: float = 0.0


@dataclass(frozen=True)
class YieldOpportunity:
    """A pool listed by the yield aggregator, classified for display."""

    id: str
    protocol: str
    chain: str
    asset: str
    type: str
    apy: float
    tvl: float
    risk: str
    trending: bool = False
    featured: bool = False


@dataclass(frozen=True)
class LPPosition:
    """Liquidity-pool share held by a wallet."""

    id: str
    protocol: str
    pair: str
    liquidity: float
    share: float
    apy: float
    chain: str
    token0: str = ""
    token1: str = ""
    price_range: str = "Full Range"
    in_range: bool = True


# ---------------------------------------------------------------------------
# LLM output
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class AISummary:
    health_score: int
    sentiment: str
    key_insights: tuple[str, ...]
    top_recommendation: str
    generated_at: str


@dataclass(frozen=True)
class AIInsights:
    text: str
    generated_at: str
