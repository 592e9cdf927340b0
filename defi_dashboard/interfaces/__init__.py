"""Protocol interfaces for the DeFi dashboard."""
from .llm import LLMClient
from .lp_adapter import LPAdapter
from .price_oracle import PriceOracle

__all__ = ["LLMClient", "LPAdapter", "PriceOracle"]
