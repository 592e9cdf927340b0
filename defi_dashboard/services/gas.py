"""Gas / priority-fee quotes for Ethereum and Solana."""
from __future__ import annotations

import asyncio
import logging
import math
from typing import Any

from ..chains.ethereum import EthereumClient
from ..chains.ethereum.client import WEI_PER_GWEI, hex_to_int
from ..chains.solana import SolanaClient
from ..interfaces.price_oracle import PriceOracle
from ..models import GasQuote, GasTier

logger = logging.getLogger(__name__)

# Gas units of a plain ETH transfer.
TRANSFER_GAS = 21000
DEFAULT_SOLANA_FEE = 5000


def eth_tiers_from_history(
    gas_price_gwei: float, fee_history: dict[str, Any]
) -> tuple[float, float, float]:
    """Slow/standard/fast gwei from ``eth_feeHistory``.

    Each tier is the latest base fee plus the mean priority reward at the
    25th/50th/75th percentile. Without reward data the current gas price is
    scaled by 0.8/1.0/1.2.
    """
    rewards = fee_history.get("reward") or []
    base_fees = fee_history.get("baseFeePerGas") or []
    if not rewards or not base_fees:
        return gas_price_gwei * 0.8, gas_price_gwei, gas_price_gwei * 1.2

    base_fee = hex_to_int(base_fees[-1]) / WEI_PER_GWEI

    def column_mean(i: int) -> float:
        return sum(hex_to_int(r[i]) for r in rewards) / len(rewards) / WEI_PER_GWEI

    return base_fee + column_mean(0), base_fee + column_mean(1), base_fee + column_mean(2)


def eth_fee_usd(gwei: float, eth_price: float) -> float:
    """USD cost of a plain transfer at ``gwei`` per gas."""
    return gwei * TRANSFER_GAS / WEI_PER_GWEI * eth_price


def solana_tiers(fees: list[int]) -> tuple[int, int, int]:
    """Slow/standard/fast lamports from recent prioritization fees."""
    avg_fee = sum(fees) / len(fees) if fees else DEFAULT_SOLANA_FEE
    return math.floor(avg_fee * 0.8), math.floor(avg_fee), math.floor(avg_fee * 1.5)


class GasService:
    """Build GasQuote records from chain RPC data and native coin prices."""

    def __init__(
        self, ethereum: EthereumClient, solana: SolanaClient, oracle: PriceOracle
    ) -> None:
        self._ethereum = ethereum
        self._solana = solana
        self._oracle = oracle

    async def fetch(self, chain: str) -> GasQuote:
        logger.info("Fetching gas prices for chain: %s", chain)
        if chain == "ethereum":
            return await self._fetch_ethereum()
        if chain == "solana":
            return await self._fetch_solana()
        raise ValueError(f"Unsupported chain '{chain}'")

    async def _fee_history(self) -> dict[str, Any]:
        try:
            return await self._ethereum.get_fee_history()
        except Exception as e:
            logger.warning("Fee history unavailable, using gas price only: %s", e)
            return {}

    async def _fetch_ethereum(self) -> GasQuote:
        gas_price, history, prices = await asyncio.gather(
            self._ethereum.get_gas_price(),
            self._fee_history(),
            self._oracle.fetch_prices(["ETH"]),
        )

        slow, standard, fast = eth_tiers_from_history(gas_price, history)
        eth_price = prices.get("ETH", 0.0)
        logger.info(
            "Ethereum gas prices fetched: %.2f / %.2f / %.2f gwei", slow, standard, fast
        )

        def tier(label: str, gwei: float, eta: str) -> GasTier:
            return GasTier(
                label=label,
                amount=round(gwei, 2),
                unit="gwei",
                usd=eth_fee_usd(gwei, eth_price),
                eta=eta,
            )

        return GasQuote(
            chain="ethereum",
            slow=tier("slow", slow, "~5 min"),
            standard=tier("standard", standard, "~2 min"),
            fast=tier("fast", fast, "~30 sec"),
        )

    async def _fetch_solana(self) -> GasQuote:
        fees = await self._solana.get_prioritization_fees()
        slow, standard, fast = solana_tiers(fees)
        prices = await self._oracle.fetch_prices(["SOL"])
        sol_price = prices.get("SOL", 0.0)
        logger.info(
            "Solana fees from %d samples: %d / %d / %d lamports",
            len(fees), slow, standard, fast,
        )

        def tier(label: str, lamports: int, eta: str) -> GasTier:
            return GasTier(
                label=label,
                amount=lamports,
                unit="lamports",
                usd=lamports / 10**9 * sol_price,
                eta=eta,
            )

        return GasQuote(
            chain="solana",
            slow=tier("slow", slow, "~1 sec"),
            standard=tier("standard", standard, "~1 sec"),
            fast=tier("fast", fast, "~400ms"),
        )
