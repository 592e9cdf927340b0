from .client import EthereumClient, NetworkNotEnabledError

__all__ = ["EthereumClient", "NetworkNotEnabledError"]
