"""Pure parsing functions for Uniswap V2 subgraph data — no I/O."""
from __future__ import annotations

from typing import Any

LIQUIDITY_POSITIONS_QUERY = """
query GetLPPositions($address: String!) {
  user(id: $address) {
    liquidityPositions {
      id
      liquidityTokenBalance
      pair {
        id
        token0 { symbol name }
        token1 { symbol name }
        reserve0
        reserve1
        reserveUSD
        totalSupply
        volumeUSD
      }
    }
  }
}
"""

# Displayed APY never exceeds this (percent).
MAX_DISPLAY_APY = 100.0


def to_float(value: Any) -> float:
    """Subgraph BigDecimals arrive as strings; missing or blank becomes 0.0."""
    if value in (None, ""):
        return 0.0
    return float(value)


def pair_label(pair: dict[str, Any]) -> str:
    """``TOKEN0/TOKEN1`` label for a pair, e.g. ``"WETH/USDC"``."""
    token0 = (pair.get("token0") or {}).get("symbol", "?")
    token1 = (pair.get("token1") or {}).get("symbol", "?")
    return f"{token0}/{token1}"


def pool_share(liquidity_token_balance: float, total_supply: float) -> float:
    """Fraction of the pool owned by the holder of ``liquidity_token_balance`` LP tokens."""
    if total_supply <= 0:
        return 0.0
    return liquidity_token_balance / total_supply


def estimate_fee_apy(volume_usd: float, reserve_usd: float, fee_rate: float) -> float:
    """Rough fee APY from cumulative pair volume.

    daily_fees = volume_usd / 365 * fee_rate
    apy        = daily_fees * 365 * 100 / reserve_usd, capped at MAX_DISPLAY_APY
    """
    if reserve_usd <= 0:
        return 0.0
    daily_fees = volume_usd / 365 * fee_rate
    apy = daily_fees * 365 * 100 / reserve_usd
    return min(apy, MAX_DISPLAY_APY)


def extract_positions(response: dict[str, Any]) -> list[dict[str, Any]]:
    """Pull ``liquidityPositions`` out of a GraphQL response body.

    A wallet unknown to the subgraph (``user: null``) has no positions.
    """
    data = response.get("data") or {}
    user = data.get("user") or {}
    return list(user.get("liquidityPositions") or [])


def parse_position(
    position: dict[str, Any], fee_rate: float, chain: str
) -> dict[str, Any]:
    """Parse a single ``liquidityPosition`` entry into structured data."""
    pair = position.get("pair") or {}
    reserve_usd = to_float(pair.get("reserveUSD"))
    volume_usd = to_float(pair.get("volumeUSD"))
    balance = to_float(position.get("liquidityTokenBalance"))
    total_supply = to_float(pair.get("totalSupply"))

    share = pool_share(balance, total_supply)

    return {
        "id": position.get("id", ""),
        "pair": pair_label(pair),
        "token0": (pair.get("token0") or {}).get("symbol", ""),
        "token1": (pair.get("token1") or {}).get("symbol", ""),
        "liquidity": share * reserve_usd,
        "share": share,
        "apy": estimate_fee_apy(volume_usd, reserve_usd, fee_rate),
        "chain": chain,
    }
