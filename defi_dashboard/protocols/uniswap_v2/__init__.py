from .adapter import UniswapV2Adapter

__all__ = ["UniswapV2Adapter"]
