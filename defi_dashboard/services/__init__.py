"""Service modules"""
from .gas import GasService
from .insights import InsightsService
from .portfolio import PortfolioService
from .yields import YieldService
from .dashboard import Dashboard

__all__ = ["GasService", "InsightsService", "PortfolioService", "YieldService", "Dashboard"]
