"""LP adapter — per-protocol liquidity position fetching."""
from typing import Protocol

from ..models import LPPosition


class LPAdapter(Protocol):
    """Abstract interface for fetching a wallet's liquidity positions."""

    @property
    def protocol_name(self) -> str: ...

    async def fetch_positions(self, wallet_address: str) -> list[LPPosition]: ...
