"""Wallet balance aggregation across Ethereum and Solana."""
from __future__ import annotations

import logging
from typing import Any

from ..addresses import detect_chain, validate_address
from ..chains.ethereum import EthereumClient
from ..chains.ethereum.client import hex_to_int
from ..chains.solana import SolanaClient
from ..interfaces.price_oracle import PriceOracle
from ..models import Portfolio, TokenBalance

logger = logging.getLogger(__name__)

LAMPORTS_PER_SOL = 10**9


def _chain_label(network: str) -> str:
    return "sepolia" if network == "eth-sepolia" else "ethereum"


class PortfolioService:
    """Fetch token balances for a wallet and value them in USD."""

    def __init__(
        self,
        ethereum: EthereumClient,
        solana: SolanaClient,
        oracle: PriceOracle,
        min_token_balance: float = 0.000001,
    ) -> None:
        self._ethereum = ethereum
        self._solana = solana
        self._oracle = oracle
        self._min_token_balance = min_token_balance

    async def fetch(self, address: str) -> Portfolio:
        """Fetch the portfolio of ``address`` on whichever chain it belongs to."""
        address = validate_address(address)
        chain = detect_chain(address)
        logger.info("Fetching portfolio for address: %s chain: %s", address, chain)

        if chain == "solana":
            return await self._fetch_solana(address)
        return await self._fetch_ethereum(address)

    # ------------------------------------------------------------------
    # Ethereum
    # ------------------------------------------------------------------

    async def _fetch_ethereum(self, address: str) -> Portfolio:
        eth_balance = await self._ethereum.get_native_balance(address)
        network = self._ethereum.active_network
        chain = _chain_label(network)
        logger.info("ETH balance: %.6f on network: %s", eth_balance, network)

        quotes = await self._oracle.fetch_quotes(["ETH"])
        eth_price, eth_change = quotes.get("ETH", (0.0, 0.0))

        tokens: list[TokenBalance] = [
            TokenBalance(
                symbol="ETH",
                name="Ethereum",
                balance=eth_balance,
                value=eth_balance * eth_price,
                change_24h=eth_change,
                chain=chain,
            )
        ]

        raw_balances = await self._ethereum.get_token_balances(address)
        logger.info("Found %d ERC20 tokens", len(raw_balances))

        erc20: list[dict[str, Any]] = []
        for entry in raw_balances:
            contract = entry.get("contractAddress", "")
            try:
                metadata = await self._ethereum.get_token_metadata(contract)
            except Exception as e:
                logger.error("Error fetching token metadata for %s: %s", contract, e)
                continue

            decimals = metadata.get("decimals")
            if decimals is None:
                decimals = 18
            raw_amount = hex_to_int(entry.get("tokenBalance"))
            balance = raw_amount / (10 ** int(decimals))
            if balance < self._min_token_balance:
                continue

            erc20.append({"contract": contract, "balance": balance, "metadata": metadata})

        token_prices = await self._oracle.fetch_token_prices(
            [t["contract"] for t in erc20]
        )

        for t in erc20:
            metadata = t["metadata"]
            price = token_prices.get(t["contract"].lower(), 0.0)
            tokens.append(
                TokenBalance(
                    symbol=metadata.get("symbol") or "UNKNOWN",
                    name=metadata.get("name") or "Unknown Token",
                    balance=t["balance"],
                    value=t["balance"] * price,
                    change_24h=0.0,
                    chain=chain,
                    logo=metadata.get("logo") or "",
                    contract=t["contract"],
                )
            )

        total_value = sum(t.value for t in tokens)
        logger.info("Portfolio total value: $%.2f", total_value)

        return Portfolio(
            address=address,
            chain=chain,
            total_value=total_value,
            tokens=tuple(tokens),
            native_balance=eth_balance,
            network=network,
        )

    # ------------------------------------------------------------------
    # Solana
    # ------------------------------------------------------------------

    async def _fetch_solana(self, address: str) -> Portfolio:
        data = await self._solana.get_balances(address)
        logger.info("Solana portfolio fetched successfully")

        sol_balance = int(data.get("nativeBalance") or 0) / LAMPORTS_PER_SOL
        quotes = await self._oracle.fetch_quotes(["SOL"])
        sol_price, sol_change = quotes.get("SOL", (0.0, 0.0))

        tokens: list[TokenBalance] = [
            TokenBalance(
                symbol="SOL",
                name="Solana",
                balance=sol_balance,
                value=sol_balance * sol_price,
                change_24h=sol_change,
                chain="solana",
            )
        ]

        for token in data.get("tokens") or []:
            decimals = token.get("decimals")
            if decimals is None:
                decimals = 9
            balance = float(token.get("amount") or 0) / (10 ** int(decimals))
            price = float(token.get("price") or 0.0)
            tokens.append(
                TokenBalance(
                    symbol=token.get("symbol") or token.get("mint", ""),
                    name=token.get("name") or "Unknown",
                    balance=balance,
                    value=balance * price,
                    change_24h=float(token.get("priceChange24h") or 0.0),
                    chain="solana",
                    logo=token.get("logoURI") or "",
                    contract=token.get("mint", ""),
                )
            )

        total_value = sum(t.value for t in tokens)
        logger.info("Portfolio total value: $%.2f", total_value)

        return Portfolio(
            address=address,
            chain="solana",
            total_value=total_value,
            tokens=tuple(tokens),
            native_balance=sol_balance,
            network="mainnet-beta",
        )
