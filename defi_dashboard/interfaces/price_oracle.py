"""Price oracle protocol — price feed abstraction."""
from typing import Protocol


class PriceOracle(Protocol):
    """Abstract interface for fetching USD asset prices."""

    async def fetch_prices(self, symbols: list[str] | None = None) -> dict[str, float]: ...

    async def fetch_quotes(
        self, symbols: list[str] | None = None
    ) -> dict[str, tuple[float, float]]: ...

    async def fetch_token_prices(
        self, contracts: list[str], platform: str = "ethereum"
    ) -> dict[str, float]: ...
