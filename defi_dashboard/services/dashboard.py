"""Dashboard orchestration — wires clients and services from config."""
from __future__ import annotations

import logging

from ..addresses import detect_chain, validate_address
from ..chains.ethereum import EthereumClient
from ..chains.solana import SolanaClient
from ..config import AppConfig
from ..impermanent_loss import compute
from ..interfaces.lp_adapter import LPAdapter
from ..interfaces.price_oracle import PriceOracle
from ..llm import OpenAIChatClient
from ..models import (
    AIInsights,
    AISummary,
    GasQuote,
    ILResult,
    LPPosition,
    PoolPosition,
    Portfolio,
    YieldOpportunity,
)
from ..oracles import CoinGeckoOracle
from ..protocols.uniswap_v2 import UniswapV2Adapter
from .gas import GasService
from .insights import InsightsService
from .portfolio import PortfolioService
from .yields import YieldService, filter_opportunities

logger = logging.getLogger(__name__)


class Dashboard:
    """Single entry point for every dashboard view."""

    def __init__(self, config: AppConfig) -> None:
        self._config = config

        self._ethereum = EthereumClient(config.ethereum)
        self._solana = SolanaClient(config.solana)
        self._oracle: PriceOracle = CoinGeckoOracle(
            config.price_oracle.coingecko, timeout=config.price_oracle.timeout
        )

        # LP adapters keyed by chain
        self._lp_adapters: dict[str, list[LPAdapter]] = {
            "ethereum": [UniswapV2Adapter(config.subgraph)],
        }

        self.portfolio_service = PortfolioService(
            self._ethereum,
            self._solana,
            self._oracle,
            min_token_balance=config.ethereum.min_token_balance,
        )
        self.gas_service = GasService(self._ethereum, self._solana, self._oracle)
        self.yield_service = YieldService(config.yields)
        self.insights_service = InsightsService(OpenAIChatClient(config.llm))

    async def portfolio(self, address: str) -> Portfolio:
        return await self.portfolio_service.fetch(address)

    async def gas(self, chain: str) -> GasQuote:
        return await self.gas_service.fetch(chain)

    async def yields(
        self,
        chain: str | None = None,
        risk: str | None = None,
        type: str | None = None,
        featured_only: bool = False,
    ) -> list[YieldOpportunity]:
        opportunities = await self.yield_service.fetch()
        return filter_opportunities(
            opportunities, chain=chain, risk=risk, type=type, featured_only=featured_only
        )

    async def lp_positions(self, address: str) -> list[LPPosition]:
        """LP positions across every adapter registered for the wallet's chain."""
        address = validate_address(address)
        chain = detect_chain(address)

        adapters = self._lp_adapters.get(chain or "", [])
        if not adapters:
            logger.info("No LP adapters for chain '%s'", chain)
            return []

        positions: list[LPPosition] = []
        for adapter in adapters:
            positions.extend(await adapter.fetch_positions(address))
        return positions

    async def summary(self, address: str) -> AISummary:
        """AI summary seeded with the wallet's current portfolio value."""
        portfolio = await self.portfolio(address)
        return await self.insights_service.summary(portfolio.address, portfolio.total_value)

    async def insights(self, address: str) -> AIInsights:
        portfolio = await self.portfolio(address)
        return await self.insights_service.insights(portfolio.address, portfolio)

    @staticmethod
    def impermanent_loss(position: PoolPosition) -> ILResult:
        result = compute(position)
        logger.info(
            "IL %s/%s: HODL $%.2f  LP $%.2f  IL $%.2f (%.2f%%)",
            position.symbol_a,
            position.symbol_b,
            result.hodl_value,
            result.lp_value,
            result.impermanent_loss,
            result.impermanent_loss_percent,
        )
        return result
