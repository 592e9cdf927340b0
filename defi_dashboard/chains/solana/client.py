"""Solana RPC client with fallback support, plus Helius balance lookups."""
from __future__ import annotations

import logging
import re
import ssl
from typing import Any

import aiohttp
import certifi

from ...config import SolanaConfig

logger = logging.getLogger(__name__)

_API_KEY_IN_URL_RE = re.compile(r"api-key=([^&\s]+)")


def extract_api_key(value: str) -> str:
    """Return the bare key when ``value`` is a full URL containing ``api-key=``."""
    if "api-key=" in value:
        match = _API_KEY_IN_URL_RE.search(value)
        return match.group(1) if match else value
    return value


class SolanaClient:
    """Solana JSON-RPC client with automatic endpoint fallback."""

    def __init__(self, config: SolanaConfig) -> None:
        self.endpoints = list(config.rpc_endpoints)
        self.timeout = config.rpc_timeout
        self.current_rpc_index = 0
        self.helius_url = config.helius_url.rstrip("/")
        self._helius_key = extract_api_key(config.helius_api_key)

    async def rpc_call(self, method: str, params: list[Any]) -> Any:
        """Make RPC call with fallback to alternative endpoints."""
        payload = {"jsonrpc": "2.0", "id": 1, "method": method, "params": params}

        ssl_context = ssl.create_default_context(cafile=certifi.where())

        last_error: Exception | None = None
        for attempt in range(len(self.endpoints)):
            rpc_index = (self.current_rpc_index + attempt) % len(self.endpoints)
            rpc_url = self.endpoints[rpc_index]

            try:
                connector = aiohttp.TCPConnector(ssl=ssl_context)
                async with aiohttp.ClientSession(connector=connector) as session:
                    async with session.post(
                        rpc_url,
                        json=payload,
                        timeout=aiohttp.ClientTimeout(total=self.timeout),
                    ) as response:
                        result = await response.json()
                        if "error" in result:
                            raise RuntimeError(f"RPC Error: {result['error']}")

                        if rpc_index != self.current_rpc_index:
                            logger.info("Switched to RPC endpoint: %s", rpc_url)
                            self.current_rpc_index = rpc_index

                        return result.get("result")
            except Exception as e:
                last_error = e
                logger.warning("RPC endpoint %s failed: %s", rpc_url, e)
                if attempt < len(self.endpoints) - 1:
                    logger.info("Trying next endpoint...")
                continue

        raise RuntimeError(f"All RPC endpoints failed. Last error: {last_error}")

    async def get_prioritization_fees(self) -> list[int]:
        """Recent per-slot prioritization fees (may be empty)."""
        result = await self.rpc_call("getRecentPrioritizationFees", [])
        return [int(entry.get("prioritizationFee", 0)) for entry in result or []]

    async def get_balances(self, wallet_address: str) -> dict[str, Any]:
        """Fetch native and SPL token balances from the Helius balances API."""
        if not self._helius_key:
            raise RuntimeError(
                "HELIUS_API_KEY environment variable is not configured"
            )

        url = f"{self.helius_url}/v0/addresses/{wallet_address}/balances"
        logger.debug("Using Helius API key: %s...", self._helius_key[:8])

        ssl_context = ssl.create_default_context(cafile=certifi.where())
        connector = aiohttp.TCPConnector(ssl=ssl_context)

        async with aiohttp.ClientSession(connector=connector) as session:
            async with session.get(
                url,
                params={"api-key": self._helius_key},
                timeout=aiohttp.ClientTimeout(total=self.timeout),
            ) as response:
                if response.status != 200:
                    error_text = await response.text()
                    raise RuntimeError(
                        f"Failed to fetch Solana portfolio: {error_text}"
                    )
                return await response.json()
