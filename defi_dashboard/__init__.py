"""Read-only DeFi wallet dashboard with an impermanent loss calculator."""
from .impermanent_loss import InvalidInputError, compute
from .models import ILResult, PoolPosition

__version__ = "0.1.0"

__all__ = ["ILResult", "InvalidInputError", "PoolPosition", "compute"]
