"""Yield opportunities from the DefiLlama pools API."""
from __future__ import annotations

import logging
import ssl
from typing import Any

import aiohttp
import certifi

from ..config import YieldsConfig
from ..models import YieldOpportunity

logger = logging.getLogger(__name__)

LOW_RISK_MIN_TVL = 100_000_000
HIGH_RISK_MAX_TVL = 10_000_000
FEATURED_MIN_APY = 5.0


def classify_risk(tvl: float, project: str, blue_chips: tuple[str, ...]) -> str:
    if tvl > LOW_RISK_MIN_TVL and project in blue_chips:
        return "low"
    if tvl < HIGH_RISK_MAX_TVL:
        return "high"
    return "medium"


def classify_type(project: str) -> str:
    name = project.lower()
    if "aave" in name or "compound" in name:
        return "Lending"
    if "lido" in name or "stake" in name:
        return "Staking"
    if "yearn" in name or "vault" in name:
        return "Vault"
    return "LP"


def parse_pools(pools: list[dict[str, Any]], config: YieldsConfig) -> list[YieldOpportunity]:
    """Filter raw DefiLlama pools to quality opportunities and classify them."""
    opportunities: list[YieldOpportunity] = []

    for pool in pools:
        tvl = float(pool.get("tvlUsd") or 0.0)
        apy = float(pool.get("apy") or 0.0)
        if tvl <= config.min_tvl or not 0 < apy < config.max_apy:
            continue
        if pool.get("chain") not in config.chains:
            continue

        project = pool.get("project", "")
        opportunities.append(
            YieldOpportunity(
                id=pool.get("pool", ""),
                protocol=project,
                chain=pool["chain"].lower(),
                asset=pool.get("symbol", ""),
                type=classify_type(project),
                apy=round(apy, 2),
                tvl=tvl,
                risk=classify_risk(tvl, project, config.blue_chips),
                trending=float(pool.get("apyPct30D") or 0.0) > 0,
                featured=tvl > LOW_RISK_MIN_TVL and apy > FEATURED_MIN_APY,
            )
        )
        if len(opportunities) >= config.limit:
            break

    return opportunities


def filter_opportunities(
    opportunities: list[YieldOpportunity],
    chain: str | None = None,
    risk: str | None = None,
    type: str | None = None,
    featured_only: bool = False,
) -> list[YieldOpportunity]:
    """Apply the dashboard filters and sort by APY, highest first."""
    matches = [
        o for o in opportunities
        if (chain is None or o.chain == chain)
        and (risk is None or o.risk == risk)
        and (type is None or o.type == type)
        and (not featured_only or o.featured)
    ]
    return sorted(matches, key=lambda o: o.apy, reverse=True)


class YieldService:
    """Fetch yield opportunities from DefiLlama."""

    def __init__(self, config: YieldsConfig) -> None:
        self._config = config

    async def fetch(self) -> list[YieldOpportunity]:
        ssl_context = ssl.create_default_context(cafile=certifi.where())
        connector = aiohttp.TCPConnector(ssl=ssl_context)

        async with aiohttp.ClientSession(connector=connector) as session:
            async with session.get(
                self._config.url,
                timeout=aiohttp.ClientTimeout(total=self._config.timeout),
            ) as response:
                if response.status != 200:
                    raise RuntimeError(
                        f"Failed to fetch yield data from DeFi Llama: HTTP {response.status}"
                    )
                data = await response.json()

        opportunities = parse_pools(data.get("data") or [], self._config)
        logger.info("Found %d yield opportunities", len(opportunities))
        return opportunities
