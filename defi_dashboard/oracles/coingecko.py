"""CoinGecko price oracle service."""
from __future__ import annotations

import logging
import ssl
from typing import Any

import aiohttp
import certifi

from ..config import CoinGeckoConfig

logger = logging.getLogger(__name__)


class CoinGeckoOracle:
    """Fetch USD prices from the CoinGecko simple-price API."""

    def __init__(self, config: CoinGeckoConfig, timeout: int = 15) -> None:
        self.base_url = config.base_url.rstrip("/")
        self.api_key = config.api_key
        self.coin_ids = dict(config.coin_ids)
        self.fallback_prices = dict(config.fallback_prices)
        self.timeout = timeout

    def _headers(self) -> dict[str, str]:
        headers = {"accept": "application/json"}
        if self.api_key:
            headers["x-cg-demo-api-key"] = self.api_key
        return headers

    async def _get(self, path: str, params: dict[str, str]) -> dict[str, Any]:
        """GET a CoinGecko endpoint; errors are logged and yield ``{}``."""
        url = f"{self.base_url}{path}"

        ssl_context = ssl.create_default_context(cafile=certifi.where())
        connector = aiohttp.TCPConnector(ssl=ssl_context)

        try:
            async with aiohttp.ClientSession(connector=connector) as session:
                async with session.get(
                    url,
                    params=params,
                    headers=self._headers(),
                    timeout=aiohttp.ClientTimeout(total=self.timeout),
                ) as response:
                    if response.status != 200:
                        logger.error(
                            "Error fetching prices from CoinGecko: HTTP %s",
                            response.status,
                        )
                        return {}
                    return await response.json()
        except Exception as e:
            logger.error("Error fetching prices from CoinGecko: %s", e)
            return {}

    async def fetch_quotes(
        self, symbols: list[str] | None = None
    ) -> dict[str, tuple[float, float]]:
        """Fetch ``symbol -> (usd_price, change_24h_percent)``.

        Args:
            symbols: Optional list of symbols to fetch. If None, fetches all
                     configured coins.
        """
        quotes: dict[str, tuple[float, float]] = {}

        coins = self.coin_ids
        if symbols is not None:
            coins = {k: v for k, v in self.coin_ids.items() if k in symbols}

        coin_ids = sorted(set(coins.values()))
        if coin_ids:
            data = await self._get(
                "/simple/price",
                {
                    "ids": ",".join(coin_ids),
                    "vs_currencies": "usd",
                    "include_24hr_change": "true",
                },
            )

            for symbol, coin_id in coins.items():
                entry = data.get(coin_id) or {}
                if "usd" in entry:
                    quotes[symbol] = (
                        float(entry["usd"]),
                        float(entry.get("usd_24h_change") or 0.0),
                    )

        wanted = symbols if symbols is not None else list(self.coin_ids)
        for symbol in wanted:
            if symbol not in quotes and symbol in self.fallback_prices:
                logger.warning(
                    "No live price for %s, using fallback $%.2f",
                    symbol, self.fallback_prices[symbol],
                )
                quotes[symbol] = (self.fallback_prices[symbol], 0.0)

        if quotes:
            logger.info("Fetched prices from CoinGecko:")
            for symbol, (price, change) in sorted(quotes.items()):
                logger.info("  %s: $%.4f (%+.2f%%)", symbol, price, change)

        return quotes

    async def fetch_prices(self, symbols: list[str] | None = None) -> dict[str, float]:
        """Fetch ``symbol -> usd_price``."""
        quotes = await self.fetch_quotes(symbols)
        return {symbol: price for symbol, (price, _) in quotes.items()}

    async def fetch_token_prices(
        self, contracts: list[str], platform: str = "ethereum"
    ) -> dict[str, float]:
        """Fetch USD prices keyed by lowercase contract address."""
        if not contracts:
            return {}

        data = await self._get(
            f"/simple/token_price/{platform}",
            {
                "contract_addresses": ",".join(c.lower() for c in contracts),
                "vs_currencies": "usd",
            },
        )

        return {
            contract.lower(): float(entry["usd"])
            for contract, entry in data.items()
            if isinstance(entry, dict) and "usd" in entry
        }
