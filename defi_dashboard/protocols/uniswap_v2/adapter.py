"""Uniswap V2 adapter — fetches LP positions from the subgraph."""
from __future__ import annotations

import logging
import ssl
from typing import Any

import aiohttp
import certifi

from ...config import SubgraphConfig
from ...models import LPPosition
from . import parser

logger = logging.getLogger(__name__)


class UniswapV2Adapter:
    """Fetch and parse Uniswap V2 liquidity positions on Ethereum."""

    chain = "ethereum"

    def __init__(self, config: SubgraphConfig) -> None:
        self._config = config
        self._url = config.uniswap_v2_url

    @property
    def protocol_name(self) -> str:
        return "Uniswap V2"

    async def _query(self, query: str, variables: dict[str, Any]) -> dict[str, Any]:
        """POST a GraphQL query to the subgraph."""
        if not self._url:
            raise RuntimeError("subgraph.uniswap_v2_url is not configured")

        ssl_context = ssl.create_default_context(cafile=certifi.where())
        connector = aiohttp.TCPConnector(ssl=ssl_context)

        async with aiohttp.ClientSession(connector=connector) as session:
            async with session.post(
                self._url,
                json={"query": query, "variables": variables},
                timeout=aiohttp.ClientTimeout(total=self._config.timeout),
            ) as response:
                if response.status != 200:
                    raise RuntimeError(
                        f"Failed to fetch LP positions from The Graph: HTTP {response.status}"
                    )
                result = await response.json()

        if result.get("errors"):
            raise RuntimeError(f"Subgraph error: {result['errors']}")
        return result

    async def fetch_positions(self, wallet_address: str) -> list[LPPosition]:
        """Fetch all liquidity positions for a wallet."""
        logger.info("Checking Uniswap V2 positions for wallet: %s", wallet_address)

        response = await self._query(
            parser.LIQUIDITY_POSITIONS_QUERY,
            {"address": wallet_address.lower()},
        )
        raw_positions = parser.extract_positions(response)
        logger.info("Found %d liquidity positions", len(raw_positions))

        positions: list[LPPosition] = []
        for raw in raw_positions:
            d = parser.parse_position(raw, self._config.fee_rate, self.chain)
            logger.debug(
                "  %s: $%.2f (share %.6f, APY %.2f%%)",
                d["pair"], d["liquidity"], d["share"], d["apy"],
            )
            positions.append(
                LPPosition(
                    id=d["id"],
                    protocol=self.protocol_name,
                    pair=d["pair"],
                    liquidity=d["liquidity"],
                    share=d["share"],
                    apy=d["apy"],
                    chain=d["chain"],
                    token0=d["token0"],
                    token1=d["token1"],
                )
            )

        return positions
