"""Ethereum client over Alchemy JSON-RPC with network fallback."""
from __future__ import annotations

import logging
import ssl
from typing import Any

import aiohttp
import certifi

from ...config import EthereumConfig

logger = logging.getLogger(__name__)

WEI_PER_ETH = 10**18
WEI_PER_GWEI = 10**9


class NetworkNotEnabledError(RuntimeError):
    """The Alchemy app has not enabled the requested network."""

    def __init__(self, network: str, message: str) -> None:
        super().__init__(message)
        self.network = network


def hex_to_int(value: str | int | None) -> int:
    """Parse a JSON-RPC quantity ("0x1a") into an int; None and "0x" are 0."""
    if value is None:
        return 0
    if isinstance(value, int):
        return value
    if value in ("0x", ""):
        return 0
    return int(value, 16)


class EthereumClient:
    """Alchemy JSON-RPC client.

    Networks are tried in configured order; the next one is only tried when
    the provider reports the current one "is not enabled" for the API key.
    Any other error propagates immediately.
    """

    def __init__(self, config: EthereumConfig) -> None:
        self.api_key = config.alchemy_api_key
        self.networks = list(config.networks)
        self.timeout = config.rpc_timeout
        self.active_network = self.networks[0] if self.networks else ""

    def _url(self, network: str) -> str:
        return f"https://{network}.g.alchemy.com/v2/{self.api_key}"

    async def _request(self, network: str, method: str, params: list[Any]) -> Any:
        payload = {"jsonrpc": "2.0", "id": 1, "method": method, "params": params}

        ssl_context = ssl.create_default_context(cafile=certifi.where())
        connector = aiohttp.TCPConnector(ssl=ssl_context)

        async with aiohttp.ClientSession(connector=connector) as session:
            async with session.post(
                self._url(network),
                json=payload,
                timeout=aiohttp.ClientTimeout(total=self.timeout),
            ) as response:
                if response.status != 200:
                    error_text = await response.text()
                    if "is not enabled" in error_text:
                        raise NetworkNotEnabledError(network, error_text)
                    raise RuntimeError(f"Alchemy API error: {error_text}")

                data = await response.json()

        error = data.get("error")
        if error:
            message = error.get("message", "") if isinstance(error, dict) else str(error)
            if "is not enabled" in message:
                raise NetworkNotEnabledError(network, message)
            raise RuntimeError(f"Alchemy API error: {message}")

        return data.get("result")

    async def rpc_call(self, method: str, params: list[Any]) -> Any:
        """Make RPC call, falling back across networks that are not enabled."""
        if not self.api_key:
            raise RuntimeError(
                "ALCHEMY_API_KEY environment variable is not configured"
            )

        for network in self.networks:
            try:
                logger.debug("Trying Alchemy network: %s", network)
                result = await self._request(network, method, params)
            except NetworkNotEnabledError as e:
                logger.warning("Network %s not enabled: %s", network, e)
                continue

            if network != self.active_network:
                logger.info("Switched to Alchemy network: %s", network)
                self.active_network = network
            return result

        raise RuntimeError(
            "Unable to connect to Alchemy. Enable one of "
            f"{', '.join(n.upper().replace('-', '_') for n in self.networks)} "
            "in your Alchemy dashboard"
        )

    async def get_native_balance(self, wallet_address: str) -> float:
        """ETH balance of the wallet."""
        result = await self.rpc_call("eth_getBalance", [wallet_address, "latest"])
        return hex_to_int(result) / WEI_PER_ETH

    async def get_token_balances(self, wallet_address: str) -> list[dict[str, Any]]:
        """Non-zero ERC-20 balances as ``{"contractAddress", "tokenBalance"}`` dicts."""
        result = await self.rpc_call(
            "alchemy_getTokenBalances", [wallet_address, "erc20"]
        )
        balances = (result or {}).get("tokenBalances", [])
        return [b for b in balances if hex_to_int(b.get("tokenBalance")) != 0]

    async def get_token_metadata(self, contract_address: str) -> dict[str, Any]:
        """Symbol, name, decimals and logo of an ERC-20 contract."""
        return await self.rpc_call("alchemy_getTokenMetadata", [contract_address]) or {}

    async def get_gas_price(self) -> float:
        """Current gas price in gwei."""
        result = await self.rpc_call("eth_gasPrice", [])
        return hex_to_int(result) / WEI_PER_GWEI

    async def get_fee_history(
        self, blocks: int = 5, percentiles: tuple[int, ...] = (25, 50, 75)
    ) -> dict[str, Any]:
        """Raw ``eth_feeHistory`` result for the latest ``blocks`` blocks."""
        result = await self.rpc_call(
            "eth_feeHistory", [hex(blocks), "latest", list(percentiles)]
        )
        return result or {}
